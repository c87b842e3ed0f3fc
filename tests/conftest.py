"""Shared pytest fixtures for modcache tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from modcache.core.caching import DiskCache, HttpCache
from modcache.core.fetch.auth import AUTH_TOKENS_ENV_VAR
from modcache.core.io import AbsolutePath, FakeFileSystem, absolute_path

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def cache_root() -> AbsolutePath:
    """Cache root used with the in-memory filesystem."""
    return absolute_path("/deno")


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def disk_cache(fs: FakeFileSystem, cache_root: AbsolutePath) -> DiskCache:
    """DiskCache over the fake filesystem."""
    return DiskCache(fs, fs.join(cache_root, "gen"))


@pytest.fixture
async def http_cache(fs: FakeFileSystem, cache_root: AbsolutePath) -> HttpCache:
    """Initialized, writable HttpCache over the fake filesystem."""
    cache = HttpCache(fs, fs.join(cache_root, "deps"))
    await cache.initialize()
    return cache


# ============================================================================
# HTTP Fixtures
# ============================================================================


class RecordingHandler:
    """MockTransport handler serving canned responses and recording requests."""

    def __init__(self, routes: dict[str, Callable[[httpx.Request], httpx.Response]]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)

    def calls_to(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


@pytest.fixture
def make_handler() -> Callable[..., RecordingHandler]:
    """Factory for RecordingHandler instances."""
    return RecordingHandler


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment settings out of tests."""
    monkeypatch.delenv(AUTH_TOKENS_ENV_VAR, raising=False)
    monkeypatch.delenv("DENO_DIR", raising=False)
