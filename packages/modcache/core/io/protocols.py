"""Protocols for filesystem operations.

Defines the async-first FileSystem protocol used by every cache store.
"""

from typing import Protocol

from .models import AbsolutePath, WriteResult


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    All implementations must provide atomic write semantics and
    handle platform-specific details transparently.
    """

    # Path operations (sync - no I/O)
    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components.

        Args:
            base: Base absolute path
            *parts: Path segments to join

        Returns:
            New absolute path

        Raises:
            ValueError: If result escapes base directory
        """
        ...

    # Existence checks (async)
    async def exists(self, path: AbsolutePath) -> bool:
        """Check if path exists (file or directory)."""
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a file."""
        ...

    def is_file_sync(self, path: AbsolutePath) -> bool:
        """
        Blocking file check for synchronous diagnostic callers.

        Must never be called from a hot path; cache info queries are the
        only intended consumer.
        """
        ...

    # Read operations (async)
    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On read failure
        """
        ...

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """
        Read text file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On read failure
        """
        ...

    # Write operations (async, atomic)
    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """
        Atomically write bytes to file, creating parent directories.

        Uses temp file + atomic replace to ensure readers never
        observe partial writes.

        Raises:
            OSError: On write failure
        """
        ...

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Atomically write text to file (see write_bytes)."""
        ...

    # Directory operations (async)
    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """
        Create directory and all parents.

        Raises:
            OSError: On creation failure
        """
        ...

    async def probe_writable(self, path: AbsolutePath) -> bool:
        """
        Ensure a directory exists and report whether it accepts writes.

        Returns:
            False when the directory cannot be created or written to
        """
        ...
