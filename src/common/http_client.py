"""Shared HTTP helpers used by the Maven repository resolver.

Encapsulates request/timeout error handling so resolvers avoid duplicating
try/except blocks. Network failures never raise out of this module: callers
receive a status code of 0 and treat the artifact as not found.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Dict, Optional, Tuple

import requests

try:
    from ..constants import Constants
    from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer
except Exception:  # ImportError or relative depth issues when imported as "common..."
    from constants import Constants
    from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Text responses (metadata and POM files) keyed by URL. Responses below 500,
# 404s included, are kept for HTTP_CACHE_TTL_SEC.
_text_cache: Dict[str, Tuple[Tuple[int, str], float]] = {}


def clear_cache() -> None:
    """Drop every cached response."""
    _text_cache.clear()


def _default_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def fetch_text(url: str, *, headers: Optional[Dict[str, str]] = None) -> Tuple[int, str]:
    """GET a small text document with retries.

    Returns:
        (status_code, text); status 0 when every attempt failed at the
        network level. Responses below 500 are cached for
        ``Constants.HTTP_CACHE_TTL_SEC``.
    """
    cached = _text_cache.get(url)
    if cached is not None and time.time() - cached[1] < Constants.HTTP_CACHE_TTL_SEC:
        return cached[0]

    safe_target = safe_url(url)
    last_error = None
    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        with Timer() as t:
            try:
                response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT,
                                        headers=_default_headers(headers))
            except requests.Timeout:
                last_error = "timeout"
                continue
            except requests.RequestException as exc:
                last_error = str(exc)
                continue
        if is_debug_enabled(logger):
            logger.debug("GET %s -> %s", safe_target, response.status_code, extra=extra_context(
                event="http_response", component="http_client", action="GET",
                status_code=response.status_code, duration_ms=t.duration_ms(), attempt=attempt
            ))
        result = (response.status_code, response.text)
        if response.status_code < 500:
            _text_cache[url] = (result, time.time())
            return result
        last_error = f"HTTP {response.status_code}"

    logger.warning("GET %s failed after %s attempts: %s", safe_target, Constants.HTTP_RETRY_MAX, last_error)
    return 0, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {last_error}"


def download_file(url: str, dest_path: str, *, headers: Optional[Dict[str, str]] = None) -> bool:
    """Stream ``url`` into ``dest_path``.

    Returns:
        True when the file was written, False on a non-200 status or any
        network error. A partially written file is removed.
    """
    safe_target = safe_url(url)
    for attempt in range(Constants.HTTP_RETRY_MAX):
        with Timer() as t:
            try:
                with requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=_default_headers(headers),
                    stream=True,
                ) as response:
                    if response.status_code != 200:
                        if is_debug_enabled(logger):
                            logger.debug(
                                "Download not available",
                                extra=extra_context(
                                    event="http_response",
                                    component="http_client",
                                    action="download",
                                    outcome="not_found",
                                    status_code=response.status_code,
                                    target=safe_target
                                )
                            )
                        # Retrying only helps for server side failures.
                        if response.status_code < 500:
                            return False
                        continue
                    with open(dest_path, "wb") as fh:
                        for chunk in response.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                            if chunk:
                                fh.write(chunk)
                if is_debug_enabled(logger):
                    logger.debug(
                        "Download complete",
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            action="download",
                            outcome="success",
                            duration_ms=t.duration_ms(),
                            target=safe_target
                        )
                    )
                return True
            except (requests.RequestException, OSError) as exc:
                if os.path.exists(dest_path):
                    os.remove(dest_path)
                if is_debug_enabled(logger):
                    logger.debug(
                        "Download failed: %s",
                        exc,
                        extra=extra_context(
                            event="http_exception",
                            component="http_client",
                            action="download",
                            outcome="request_exception",
                            attempt=attempt + 1,
                            target=safe_target
                        )
                    )
                continue
    logger.warning("Download of %s failed after %s attempts", safe_target, Constants.HTTP_RETRY_MAX)
    return False
