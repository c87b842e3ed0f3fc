"""Generic byte-oriented key/value store on disk.

Keys are relative paths under a fixed root; every call touches the
filesystem (no in-memory layer).
"""

import logging
from pathlib import Path

from modcache.core.io import AbsolutePath, FileSystem, RelativePath, absolute_path

logger = logging.getLogger(__name__)


class DiskCache:
    """
    Async key/value store rooted at ``location``.

    A missing key is an ordinary miss (``None``); every other I/O error
    propagates to the caller.
    """

    def __init__(self, fs: FileSystem, location: str | Path) -> None:
        """
        Initialize disk store.

        Args:
            fs: Async filesystem implementation
            location: Absolute path to the store root

        Raises:
            ValueError: If location is not absolute
        """
        if not Path(location).is_absolute():
            raise ValueError(f"Cache location must be absolute: {location}")
        self.fs = fs
        self.location: AbsolutePath = absolute_path(location)

    def path_for(self, key: RelativePath) -> AbsolutePath:
        """Absolute path of ``key`` under the store root (sync)."""
        return self.fs.join(self.location, *key.parts)

    async def get(self, key: RelativePath) -> bytes | None:
        """
        Read the bytes stored under ``key``.

        Returns:
            Stored bytes, or None when nothing is stored
        """
        try:
            return await self.fs.read_bytes(self.path_for(key))
        except FileNotFoundError:
            return None

    async def set(self, key: RelativePath, data: bytes) -> None:
        """Store ``data`` under ``key``, creating parent directories."""
        result = await self.fs.write_bytes(self.path_for(key), data)
        logger.debug(f"Stored {key} ({result.bytes_written} bytes)")

    async def exists(self, key: RelativePath) -> bool:
        return await self.fs.is_file(self.path_for(key))

    def exists_sync(self, key: RelativePath) -> bool:
        """Blocking existence probe for synchronous diagnostic callers."""
        return self.fs.is_file_sync(self.path_for(key))
