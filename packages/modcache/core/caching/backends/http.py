"""Redirect-aware HTTP cache over a DiskCache.

Each URL maps to a content file plus a ``*.metadata.json`` sidecar holding
``{"headers": {...}, "url": "..."}``. Content is written first and the
sidecar second, so the sidecar acts as the commit marker.
"""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from modcache.core.caching.backends.disk import DiskCache
from modcache.core.caching.models import CacheEntry, CachedMetadata
from modcache.core.caching.paths import metadata_filename, url_to_filename
from modcache.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)


class HttpCache:
    """
    Async cache of fetched bodies and their headers.

    The cache never follows ``location`` pointers itself; a caller that
    sees ``entry.location`` re-issues ``get`` against the target with its
    own hop budget.

    Read-only mode is resolved by ``initialize()``: pass ``read_only``
    explicitly, or leave it ``None`` to probe the root once.
    """

    def __init__(
        self,
        fs: FileSystem,
        location: str | Path,
        read_only: bool | None = None,
    ) -> None:
        """
        Initialize HTTP cache.

        Args:
            fs: Async filesystem implementation
            location: Absolute path to the store root
            read_only: Force read-only mode on/off; None probes on initialize()
        """
        self._cache = DiskCache(fs, location)
        self._read_only = read_only
        self._init_lock = asyncio.Lock()

    @property
    def location(self) -> AbsolutePath:
        return self._cache.location

    @property
    def read_only(self) -> bool | None:
        """Resolved read-only flag (None until initialize() has run)."""
        return self._read_only

    async def initialize(self) -> bool:
        """
        Resolve read-only mode (probe the root for write access once).

        Safe to call multiple times.

        Returns:
            The resolved read-only flag
        """
        async with self._init_lock:
            if self._read_only is None:
                writable = await self._cache.fs.probe_writable(self._cache.location)
                self._read_only = not writable
                if self._read_only:
                    logger.warning(f"Cache directory {self.location} is not writable, using read-only mode")
            return self._read_only

    def get_cache_filename(self, url: str) -> AbsolutePath:
        """Absolute content path for ``url`` (sync, no I/O)."""
        return self._cache.path_for(url_to_filename(url))

    async def get(self, url: str) -> CacheEntry | None:
        """
        Read the cached entry for ``url``.

        Returns:
            CacheEntry (possibly a redirect pointer), or None on miss
        """
        key = url_to_filename(url)
        meta_raw = await self._cache.get(metadata_filename(key))
        if meta_raw is None:
            return None

        try:
            metadata = CachedMetadata.model_validate_json(meta_raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupted cache metadata for {url}: {e}")
            return None

        content = await self._cache.get(key)
        if content is None:
            # Sidecar without content: treat as miss
            return None

        logger.debug(f"Cache hit for {url}")
        return CacheEntry(headers=metadata.headers, content=content)

    async def set(self, url: str, headers: Mapping[str, str], content: bytes) -> None:
        """
        Store ``content`` and ``headers`` for ``url``.

        Silently does nothing in read-only mode.
        """
        if self._read_only:
            logger.debug(f"Read-only cache, not storing {url}")
            return

        key = url_to_filename(url)
        metadata = CachedMetadata(headers=dict(headers), url=url)

        # Content first, sidecar second (commit marker)
        await self._cache.set(key, content)
        await self._cache.set(
            metadata_filename(key),
            metadata.model_dump_json(indent=2).encode("utf-8"),
        )
