"""Two-tier module cache for modcache.

- paths: deterministic URL → relative cache path mapping (SHA256 of path+query)
- backends: generic disk key/value store and the redirect-aware HTTP cache
- artifacts: derived compiler outputs and version hashes per specifier
- cache_dir: cache root resolution and the deps/gen layout

All I/O goes through the async core.io FileSystem.
"""

from modcache.core.caching.artifacts import ArtifactCache
from modcache.core.caching.backends.disk import DiskCache
from modcache.core.caching.backends.http import HttpCache
from modcache.core.caching.cache_dir import CacheDir, os_cache_dir, resolve_cache_root
from modcache.core.caching.models import (
    ArtifactKind,
    CacheEntry,
    CacheInfo,
    CachedMetadata,
    EmitMetadata,
)
from modcache.core.caching.paths import (
    SUPPORTED_SCHEMES,
    cache_filename,
    cache_filename_with_extension,
    file_url_to_path,
    url_to_filename,
)

__all__ = [
    # Stores
    "DiskCache",
    "HttpCache",
    "ArtifactCache",
    "CacheDir",
    # Models
    "ArtifactKind",
    "CacheEntry",
    "CacheInfo",
    "CachedMetadata",
    "EmitMetadata",
    # Paths
    "SUPPORTED_SCHEMES",
    "cache_filename",
    "cache_filename_with_extension",
    "file_url_to_path",
    "url_to_filename",
    # Root resolution
    "os_cache_dir",
    "resolve_cache_root",
]
