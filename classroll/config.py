import logging
import os
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from dotenv import load_dotenv

load_dotenv()

# ─────────────────────────────────────────────
# Environment
# ─────────────────────────────────────────────

DATABASE_URL_VAR = "DATABASE_URL"
RESET_URL_VAR = "RESET_URL"

SQL_ECHO = bool(os.getenv("SQL_ECHO", ""))
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


class ConfigError(RuntimeError):
    """Raised when required configuration or arguments are missing."""


def require_env(*names: str) -> list[str]:
    """Return the values of ``names`` in order.

    Raises ``ConfigError`` listing every variable that is unset or blank.
    """
    values: list[str] = []
    missing: list[str] = []
    for name in names:
        value = (os.getenv(name) or "").strip()
        if not value:
            missing.append(name)
        values.append(value)

    if missing:
        if len(missing) == 1:
            raise ConfigError(f"{missing[0]} not found in environment.")
        raise ConfigError(
            f"{' and '.join(missing)} must be defined in the environment or .env"
        )
    return values


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


# ─────────────────────────────────────────────
# Connection strings
# ─────────────────────────────────────────────


def clean_database_url(url: str) -> str:
    """Make a connection string acceptable to SQLAlchemy + psycopg2.

    Rewrites the ``postgres://`` shorthand and strips query params that
    libpq doesn't understand (e.g. pgbouncer).
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]

    parsed = urlparse(url)
    if not parsed.query:
        return url
    params = parse_qs(parsed.query)
    for bad_key in ("pgbouncer",):
        params.pop(bad_key, None)
    cleaned_query = urlencode(params, doseq=True)
    return urlunparse(parsed._replace(query=cleaned_query))
