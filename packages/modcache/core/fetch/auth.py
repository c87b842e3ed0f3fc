"""Per-host credentials parsed from a ``host@token;host@user:pass`` string."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator, Generator
from typing import Literal
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

AUTH_TOKENS_ENV_VAR = "DENO_AUTH_TOKENS"


class AuthToken(BaseModel):
    """Credential scoped to a host (and every subdomain of it).

    Args:
        host: Host the credential applies to (may carry a ``:port``)
        type: "bearer" or "basic"
        token: Bearer token value
        username: Basic auth username
        password: Basic auth password
    """

    model_config = {"frozen": True}

    host: str
    type: Literal["bearer", "basic"]
    token: str | None = Field(default=None, repr=False)  # Don't leak secrets in repr
    username: str | None = None
    password: str | None = Field(default=None, repr=False)

    def matches(self, host: str) -> bool:
        """True when ``host`` is this token's host or a subdomain of it."""
        host = host.lower()
        own = self.host.lower()
        return host == own or host.endswith(f".{own}")

    def header_value(self) -> str:
        """Render the ``Authorization`` header value.

        Basic credentials are emitted as ``user:pass`` without base64
        encoding, matching the format existing token strings were written for.
        """
        if self.type == "basic":
            return f"Basic {self.username}:{self.password}"
        return f"Bearer {self.token}"


def parse_auth_tokens(value: str | None) -> list[AuthToken]:
    """Parse a ``host@token;host@user:pass`` configuration string.

    Each entry is split on its last ``@`` into host and credential; a
    credential containing ``:`` is split on its first ``:`` into username
    and password, so passwords may themselves contain ``:``. Entries without
    ``@`` are dropped with a warning.

    Args:
        value: Raw configuration string (None or empty means no tokens)

    Returns:
        Parsed tokens in configuration order

    Example:
        >>> [t.type for t in parse_auth_tokens("a.com@tok;b.com@me:pw")]
        ['bearer', 'basic']
    """
    tokens: list[AuthToken] = []
    if not value:
        return tokens

    for entry in (s.strip() for s in value.split(";")):
        if not entry:
            continue
        host, sep, credential = entry.rpartition("@")
        if not sep or not credential or not host:
            logger.warning("Badly formed auth token discarded.")
            continue
        if ":" in credential:
            username, _, password = credential.partition(":")
            tokens.append(AuthToken(host=host, type="basic", username=username, password=password))
        else:
            tokens.append(AuthToken(host=host, type="bearer", token=credential))
    return tokens


def _url_host(url: str) -> str:
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    try:
        port = parts.port
    except ValueError:
        port = None
    return f"{host}:{port}" if port is not None else host


class AuthTokens(httpx.Auth):
    """Process-wide credential store, usable directly as an httpx auth flow.

    The flow runs once per request, so every redirect hop gets the header
    for its own host and nothing else.

    Example:
        >>> tokens = AuthTokens.from_string("example.com@abc123")
        >>> tokens.get("https://sub.example.com/mod.ts")
        'Bearer abc123'
    """

    def __init__(self, tokens: list[AuthToken] | None = None) -> None:
        self._tokens: tuple[AuthToken, ...] = tuple(tokens or ())

    @classmethod
    def from_string(cls, value: str | None) -> AuthTokens:
        return cls(parse_auth_tokens(value))

    @classmethod
    def from_env(cls, var: str = AUTH_TOKENS_ENV_VAR) -> AuthTokens:
        """Build from the auth token environment variable (empty when unset)."""
        return cls.from_string(os.getenv(var))

    @property
    def tokens(self) -> tuple[AuthToken, ...]:
        return self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def get(self, url: str) -> str | None:
        """``Authorization`` value for ``url`` from the first matching token."""
        host = _url_host(url)
        for token in self._tokens:
            if token.matches(host):
                return token.header_value()
        return None

    def _apply(self, request: httpx.Request) -> None:
        value = self.get(str(request.url))
        if value is not None:
            request.headers["Authorization"] = value

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Apply the matching credential, if any (sync)."""
        self._apply(request)
        yield request

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        """Apply the matching credential, if any (async)."""
        self._apply(request)
        yield request
