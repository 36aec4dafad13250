"""Enroll GitHub usernames from a text file into the classRoll table.

Usage:
    python scripts/enroll_class_roll.py names.txt
    classroll-enroll names.txt --dry-run

One username per line. Blank lines and lines starting with ``#`` are ignored,
invalid names are skipped with a warning, and valid names are lowercased and
inserted unless already present. Any other database error aborts the run.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from sqlalchemy import Connection, Engine
from sqlalchemy.exc import ArgumentError, IntegrityError, SQLAlchemyError

from classroll.config import (
    DATABASE_URL_VAR,
    SQL_ECHO,
    ConfigError,
    configure_logging,
    require_env,
)
from classroll.db import build_engine, insert_github_name, is_unique_violation

logger = logging.getLogger(__name__)

# GitHub usernames: letters, digits and dashes, at most 39 characters.
GITHUB_NAME_RE = re.compile(r"^[A-Za-z0-9-]{1,39}$")
COMMENT_PREFIX = "#"


class EnrollmentError(RuntimeError):
    """A database error other than "already enrolled" stopped the run."""

    def __init__(self, github_name: str, cause: BaseException) -> None:
        super().__init__(f"{cause} (while inserting {github_name!r})")
        self.github_name = github_name
        self.cause = cause


@dataclass
class EnrollmentResult:
    added: int = 0
    existing: int = 0
    invalid: int = 0


def parse_line(raw: str) -> str | None:
    """Strip ``raw``; return None for blank and comment lines."""
    line = raw.strip()
    if not line or line.startswith(COMMENT_PREFIX):
        return None
    return line


def normalize_name(line: str) -> str | None:
    if not GITHUB_NAME_RE.fullmatch(line):
        return None
    return line.lower()


def _warn_invalid(line: str) -> None:
    print(f'⚠️ Skipping invalid GitHub username: "{line}"', file=sys.stderr)


def enroll_names(conn: Connection, lines: Iterable[str]) -> EnrollmentResult:
    """Insert every valid name from ``lines``, in order.

    Raises ``EnrollmentError`` on the first non-conflict database error;
    later lines are not attempted.
    """
    result = EnrollmentResult()
    for raw in lines:
        line = parse_line(raw)
        if line is None:
            continue

        github_name = normalize_name(line)
        if github_name is None:
            _warn_invalid(line)
            result.invalid += 1
            continue

        try:
            added = insert_github_name(conn, github_name)
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise EnrollmentError(github_name, exc) from exc
            added = False
        except SQLAlchemyError as exc:
            raise EnrollmentError(github_name, exc) from exc

        if added:
            result.added += 1
        else:
            result.existing += 1

    logger.info(
        "Enrollment finished added=%d existing=%d invalid=%d",
        result.added,
        result.existing,
        result.invalid,
    )
    return result


def enroll_lines(engine: Engine, lines: Iterable[str]) -> EnrollmentResult:
    """Enroll ``lines`` over a single connection, closed on every path.

    Each insert commits on its own, so names enrolled before a fatal error stay.
    """
    with engine.connect() as conn:
        conn = conn.execution_options(isolation_level="AUTOCOMMIT")
        return enroll_names(conn, lines)


def dry_run(lines: Iterable[str]) -> list[str]:
    """Return the distinct normalized names ``lines`` would enroll, in file order."""
    names: list[str] = []
    seen: set[str] = set()
    for raw in lines:
        line = parse_line(raw)
        if line is None:
            continue
        github_name = normalize_name(line)
        if github_name is None:
            _warn_invalid(line)
            continue
        if github_name not in seen:
            seen.add(github_name)
            names.append(github_name)
    return names


def read_lines(path: Path) -> list[str]:
    # Only "\n" ends a line; "\r" is dropped by strip() later.
    return path.read_bytes().decode("utf-8").split("\n")


def single_file_arg(file_args: Sequence[str]) -> str:
    if len(file_args) != 1:
        raise ConfigError(
            "You must provide exactly one argument — the path to the input file."
        )
    return file_args[0]


def resolve_input_path(file_arg: str) -> Path:
    abs_path = Path(file_arg).expanduser().resolve()
    if not abs_path.is_file():
        raise ConfigError(f"File not found at {abs_path}")
    return abs_path


# ─────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Load GitHub usernames from a file into the classRoll table"
    )
    p.add_argument("file", nargs="*", help="Text file with one GitHub username per line.")
    p.add_argument(
        "--database-url",
        "-d",
        help=f"Database URL (overrides the {DATABASE_URL_VAR} env var).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the file and list the names without touching the database.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(verbose=args.verbose)

    database_url = args.database_url
    try:
        file_arg = single_file_arg(args.file)
        if not args.dry_run and not database_url:
            database_url = require_env(DATABASE_URL_VAR)[0]
        lines = read_lines(resolve_input_path(file_arg))
    except ConfigError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"❌ Error: Could not read input file: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        names = dry_run(lines)
        for name in names:
            print(f"  {name}")
        print(f"✅ Dry run. {len(names)} valid GitHub names found; nothing was written.")
        return 0

    try:
        engine = build_engine(database_url, echo=SQL_ECHO)
    except ArgumentError as exc:
        print(f"❌ Error: {exc}", file=sys.stderr)
        return 1

    try:
        result = enroll_lines(engine, lines)
    except EnrollmentError as exc:
        print(f"❌ Database error: {exc.cause}", file=sys.stderr)
        return 1
    except SQLAlchemyError as exc:
        print(f"❌ Fatal error: {exc}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()

    print(f"✅ Done. {result.added} new GitHub names added.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
