"""HTTP client configuration for the module fetcher."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field

from modcache.core.version import __version__


class FetchClientConfig(BaseModel):
    """Configuration for the fetcher's httpx.AsyncClient.

    Plain numeric fields so the model loads straight from JSON/YAML.

    Args:
        timeout_s: Overall request timeout in seconds
        connect_timeout_s: Connect timeout in seconds
        max_keepalive_connections: Connection pool keep-alive limit
        max_connections: Connection pool size limit
        user_agent: User-Agent header value
        verify: TLS certificate verification (True, False, or path to CA bundle)
        redact_headers: Headers to redact in logs (case-insensitive)
        max_response_body_for_error: Max response bytes to include in error messages
    """

    model_config = {"frozen": True}

    timeout_s: float = Field(default=30.0, gt=0)
    connect_timeout_s: float = Field(default=10.0, gt=0)
    max_keepalive_connections: int = Field(default=20, ge=0)
    max_connections: int = Field(default=100, ge=1)
    user_agent: str = f"modcache/{__version__}"
    verify: bool | str = True
    redact_headers: tuple[str, ...] = (
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    )
    max_response_body_for_error: int = Field(default=4096, ge=0)

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s)

    @property
    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_keepalive_connections=self.max_keepalive_connections,
            max_connections=self.max_connections,
        )


def build_client(
    config: FetchClientConfig | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the AsyncClient used for module downloads.

    Redirects are not followed by the client; the fetcher follows them
    itself so every hop is cached and counted.

    Args:
        config: Client configuration (defaults apply when None)
        transport: Optional custom transport (useful for testing)
    """
    config = config or FetchClientConfig()
    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=config.timeout,
        limits=config.limits,
        follow_redirects=False,
        verify=config.verify,
        transport=transport,
    )
