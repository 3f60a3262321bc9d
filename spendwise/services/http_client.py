from __future__ import annotations

"""Lightweight HTTP GET-JSON helper with timeout and limited retries.

Any transport error, timeout, non-2xx status or undecodable body is reported
as `HttpError` so callers have a single failure type to recover from.
"""
import json
import logging
import time
import urllib.error
import urllib.request
from typing import Any, Dict, Optional

logger = logging.getLogger("spendwise.http")


class HttpError(Exception):
    pass


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 1, backoff: float = 0.5
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                if not 200 <= resp.status < 300:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                data = json.loads(resp.read().decode("utf-8"))
                if not isinstance(data, dict):
                    raise HttpError(f"expected JSON object from {url}")
                return data
        except (
            urllib.error.URLError,
            TimeoutError,
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON / unicode decode
            last_err = e
            logger.debug(
                "GET failed", extra={"url": url, "attempt": attempt + 1, "error": str(e)}
            )
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
