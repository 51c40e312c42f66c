from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the only payload we need is the raw XML body of the rate
document, so this returns bytes and leaves decoding to the parser.
"""
import logging
import time
import urllib.request
import urllib.error
from typing import Optional

logger = logging.getLogger("fxref.http")

USER_AGENT = "fxref/0.1 (+https://www.ecb.europa.eu/stats/eurofxref/)"


class HttpError(Exception):
    pass


def get_bytes(
    url: str, *, timeout: float = 5.0, retries: int = 2, backoff: float = 0.5
) -> bytes:
    last_err: Optional[Exception] = None
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                return resp.read()
        except (
            urllib.error.URLError,
            TimeoutError,
            HttpError,
            OSError,
        ) as e:
            last_err = e
            logger.debug("fetch attempt %d for %s failed: %s", attempt + 1, url, e)
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch {url}: {last_err}")
