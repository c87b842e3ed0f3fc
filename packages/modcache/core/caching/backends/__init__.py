"""Storage backends: the generic disk store and the HTTP cache built on it."""

from modcache.core.caching.backends.disk import DiskCache
from modcache.core.caching.backends.http import HttpCache

__all__ = ["DiskCache", "HttpCache"]
