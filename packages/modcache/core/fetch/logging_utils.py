from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from pydantic import BaseModel

logger = logging.getLogger("modcache.core.fetch.http")


def _lower_set(values: tuple[str, ...]) -> set[str]:
    """Convert tuple of strings to lowercase set."""
    return {v.lower() for v in values}


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Redact sensitive headers for logging.

    Args:
        headers: Headers to redact
        redact: Header names to redact (case-insensitive)

    Returns:
        Headers with sensitive values replaced with "***REDACTED***"
    """
    red = _lower_set(redact)
    return {k: ("***REDACTED***" if k.lower() in red else v) for k, v in headers.items()}


class RequestLogContext(BaseModel):
    """Context for structured HTTP request logging.

    Args:
        method: HTTP method
        url: Full request URL
        hop: Redirect hop number (0 for the initial request)
    """

    method: str = "GET"
    url: str
    hop: int = 0


def log_request(
    ctx: RequestLogContext, headers: Mapping[str, str], redact: tuple[str, ...]
) -> float:
    """Log HTTP request with redacted headers.

    Returns:
        Start timestamp for elapsed time calculation
    """
    start = time.perf_counter()
    logger.debug(
        "HTTP request",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "hop": ctx.hop,
            "headers": redact_headers(headers, redact),
        },
    )
    return start


def log_response(ctx: RequestLogContext, status_code: int, elapsed_s: float) -> None:
    """Log HTTP response with timing information."""
    logger.debug(
        "HTTP response",
        extra={
            "method": ctx.method,
            "url": ctx.url,
            "hop": ctx.hop,
            "status_code": status_code,
            "elapsed_ms": int(elapsed_s * 1000),
        },
    )
