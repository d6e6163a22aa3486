"""
HTTP helpers.

Minimal HTTP client logic for the forecast collaborator:
- `get_json`: one GET with a deterministic timeout + User-Agent, raising on non-2xx.
- `get_json_with_retry`: the same with exponential backoff on 429/5xx and transport errors
  (honouring `Retry-After`).

Callers decide how to fail; the optimizer fails open when weather is unavailable.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "tripwise/0.1.0 (+https://local)"
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    with httpx.Client(timeout=timeout_seconds) as client:
        resp = client.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()


def _retry_after_seconds(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def get_json_with_retry(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    timeout_seconds: float = 15,
    max_attempts: int = 2,
    base_delay_seconds: float = 0.5,
    max_delay_seconds: float = 8.0,
) -> Any:
    """`get_json` plus up to `max_attempts` retries on retryable failures."""
    for attempt in range(max_attempts + 1):
        try:
            return get_json(url, params=params, timeout_seconds=timeout_seconds)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status not in RETRYABLE_STATUS or attempt >= max_attempts:
                raise
            delay = min(max_delay_seconds, base_delay_seconds * (2**attempt))
            retry_after = _retry_after_seconds(exc.response.headers.get("Retry-After"))
            if retry_after is not None:
                delay = max(delay, retry_after)
            logger.warning(
                "GET %s failed with status=%s; retrying in %.2fs (attempt %s/%s)",
                url,
                status,
                delay,
                attempt + 1,
                max_attempts,
            )
            time.sleep(delay)
        except httpx.TransportError:
            if attempt >= max_attempts:
                raise
            delay = min(max_delay_seconds, base_delay_seconds * (2**attempt))
            logger.warning(
                "GET %s transport error; retrying in %.2fs (attempt %s/%s)", url, delay, attempt + 1, max_attempts
            )
            time.sleep(delay)
    raise RuntimeError("unreachable")  # pragma: no cover
