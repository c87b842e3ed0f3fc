"""Derived-artifact cache keyed by the original specifier.

Compiler outputs live in the ``gen`` store next to each other, named after
the specifier's cache path plus a kind-specific extension. The content
version hash is kept in a ``.meta`` JSON sidecar.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from modcache.core.caching.backends.disk import DiskCache
from modcache.core.caching.backends.http import HttpCache
from modcache.core.caching.models import ArtifactKind, CacheInfo, EmitMetadata
from modcache.core.caching.paths import cache_filename_with_extension, file_url_to_path
from modcache.core.errors import CacheNotInitializedError
from modcache.core.io import RelativePath, absolute_path

if TYPE_CHECKING:
    from modcache.core.fetch.fetcher import FileFetcher
    from modcache.core.fetch.models import LoadResponse

logger = logging.getLogger(__name__)


class ArtifactCache:
    """
    Async store of declaration/emit/sourcemap/buildinfo outputs and version hashes.

    Must be initialized (``await cache.initialize()``) before cache_info()
    is used; get/set work either way.

    Updating the version hash is a read-modify-write of the ``.meta``
    sidecar without locking. Concurrent writers for the same specifier can
    lose an update; keep a single writer per specifier.
    """

    def __init__(
        self,
        gen: DiskCache,
        http_cache: HttpCache,
        fetcher: FileFetcher,
        read_only: bool | None = None,
    ) -> None:
        """
        Initialize artifact cache.

        Args:
            gen: Store for derived artifacts
            http_cache: Store holding the fetched sources
            fetcher: Fetcher backing load()
            read_only: Force read-only mode on/off; None probes on initialize()
        """
        self.gen = gen
        self.http_cache = http_cache
        self.fetcher = fetcher
        self._read_only = read_only
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def read_only(self) -> bool | None:
        return self._read_only

    async def initialize(self) -> None:
        """
        Resolve read-only mode for both stores.

        Safe to call multiple times.
        """
        async with self._init_lock:
            if self._initialized:
                return
            await self.http_cache.initialize()
            if self._read_only is None:
                writable = await self.gen.fs.probe_writable(self.gen.location)
                self._read_only = not writable
            self._initialized = True

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    async def __aenter__(self) -> ArtifactCache:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Async context manager exit."""
        await self.aclose()

    def _key(self, kind: ArtifactKind, specifier: str) -> RelativePath:
        return cache_filename_with_extension(specifier, kind.extension)

    async def _read_meta(self, specifier: str) -> EmitMetadata | None:
        raw = await self.gen.get(self._key(ArtifactKind.VERSION, specifier))
        if raw is None:
            return None
        try:
            return EmitMetadata.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupted artifact metadata for {specifier}: {e}")
            return None

    async def get(self, kind: ArtifactKind | str, specifier: str) -> bytes | str | None:
        """
        Read a derived artifact.

        Args:
            kind: Artifact kind (declaration, emit, sourcemap, buildinfo, version)
            specifier: Original source URL

        Returns:
            Artifact bytes, the version hash string for ``version``, or None
        """
        kind = ArtifactKind(kind)
        if kind is ArtifactKind.VERSION:
            meta = await self._read_meta(specifier)
            return meta.version_hash if meta is not None else None
        return await self.gen.get(self._key(kind, specifier))

    async def set(self, kind: ArtifactKind | str, specifier: str, value: bytes | str) -> None:
        """
        Store a derived artifact.

        For ``version`` the hash is merged into the existing ``.meta``
        sidecar, keeping any other fields it holds. Does nothing in
        read-only mode.
        """
        kind = ArtifactKind(kind)
        if self._read_only:
            logger.debug(f"Read-only cache, not storing {kind} for {specifier}")
            return

        if kind is ArtifactKind.VERSION:
            text = value.decode("utf-8") if isinstance(value, bytes) else value
            meta = await self._read_meta(specifier) or EmitMetadata()
            meta.version_hash = text
            await self.gen.set(
                self._key(kind, specifier),
                meta.model_dump_json(exclude_none=True).encode("utf-8"),
            )
            return

        data = value.encode("utf-8") if isinstance(value, str) else value
        await self.gen.set(self._key(kind, specifier), data)

    async def load(self, specifier: str) -> LoadResponse | None:
        """Fetch the source for ``specifier`` (loader callback for graph builders)."""
        return await self.fetcher.fetch(specifier)

    def cache_info(self, specifier: str) -> CacheInfo:
        """
        Report which cached files exist for ``specifier`` (blocking).

        Returns an empty CacheInfo in read-only mode.

        Raises:
            CacheNotInitializedError: If initialize() has not completed
        """
        if not self._initialized:
            raise CacheNotInitializedError(
                "Artifact cache must be initialized before cache info queries",
                specifier=specifier,
            )
        if self._read_only:
            return CacheInfo()

        if specifier.lower().startswith("file:"):
            # Local sources are their own cached copy
            local = absolute_path(file_url_to_path(specifier))
        else:
            local = self.http_cache.get_cache_filename(specifier)
        emit = self.gen.path_for(self._key(ArtifactKind.EMIT, specifier))
        source_map = self.gen.path_for(self._key(ArtifactKind.SOURCEMAP, specifier))

        fs = self.gen.fs
        return CacheInfo(
            local=str(local) if fs.is_file_sync(local) else None,
            emit=str(emit) if fs.is_file_sync(emit) else None,
            map=str(source_map) if fs.is_file_sync(source_map) else None,
        )
