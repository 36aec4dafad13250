"""Tell the front end that the Origin table has been reset."""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class NotificationError(RuntimeError):
    """The reset notification could not be delivered."""


def notify_reset(
    reset_url: str,
    database_url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.Response:
    """POST ``{"dbUrl": database_url}`` to ``reset_url`` once.

    Raises ``NotificationError`` on a malformed URL, a transport failure or a
    non-2xx status.
    A caller-supplied ``client`` is used as-is and left open.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    logger.info("POST %s", reset_url)
    try:
        resp = client.post(
            reset_url,
            json={"dbUrl": database_url},
            headers={"Content-Type": "application/json"},
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Reset notification failed url=%s: %s", reset_url, exc)
        raise NotificationError(str(exc) or exc.__class__.__name__) from exc
    finally:
        if owns_client:
            client.close()

    logger.info("Reset notification url=%s status=%d", reset_url, resp.status_code)
    if not resp.is_success:
        raise NotificationError(f"Server responded with {resp.status_code}")
    return resp
