"""Assemble a ready-to-use module cache from configuration."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from modcache.core.caching.artifacts import ArtifactCache
from modcache.core.caching.cache_dir import CacheDir
from modcache.core.config.models import CacheConfig
from modcache.core.fetch.auth import AuthTokens
from modcache.core.fetch.fetcher import FileFetcher
from modcache.core.io import FileSystem

logger = logging.getLogger(__name__)


async def create_cache(
    config: CacheConfig | None = None,
    *,
    fs: FileSystem | None = None,
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **overrides: Any,
) -> ArtifactCache:
    """
    Build the cache directory, fetcher and artifact cache, fully initialized.

    Read-only mode is resolved before this returns, so cache_info() is
    usable immediately.

    Args:
        config: Cache configuration (defaults when None)
        fs: Filesystem implementation (RealFileSystem when None)
        client: Pre-built HTTP client (not closed by the cache)
        transport: Custom transport for the built client (testing)
        **overrides: CacheConfig fields overriding ``config``

    Returns:
        Initialized ArtifactCache; close it with ``aclose()`` or ``async with``

    Example:
        >>> cache = await create_cache(root="/tmp/deno", cache_setting="only")
        >>> response = await cache.load("https://deno.land/std/path/mod.ts")
    """
    config = config or CacheConfig()
    if overrides:
        config = CacheConfig.model_validate({**config.model_dump(), **overrides})

    cache_dir = CacheDir(config.root, fs=fs, read_only=config.read_only)
    auth_tokens = (
        AuthTokens.from_string(config.auth_tokens)
        if config.auth_tokens is not None
        else AuthTokens.from_env()
    )
    logger.debug(f"Using cache root {cache_dir.root} ({len(auth_tokens)} auth tokens)")

    fetcher = FileFetcher(
        cache_dir.deps,
        cache_setting=config.cache_setting,
        allow_remote=config.allow_remote,
        auth_tokens=auth_tokens,
        max_redirects=config.max_redirects,
        client=client,
        client_config=config.client,
        transport=transport,
        fs=cache_dir.fs,
    )
    cache = ArtifactCache(cache_dir.gen, cache_dir.deps, fetcher, read_only=config.read_only)
    await cache.initialize()
    return cache
