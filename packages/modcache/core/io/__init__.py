"""Filesystem abstraction layer for modcache.

Provides safe, testable, async-first filesystem operations.

Example:
    >>> from modcache.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "deps", "entry")
    >>> await fs.write_bytes(path, b"export default 1;")
    >>> content = await fs.read_bytes(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, RelativePath, WriteResult, absolute_path, relative_path
from .protocols import FileSystem

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "RelativePath",
    "absolute_path",
    "relative_path",
    # Result types
    "WriteResult",
    # Protocols
    "FileSystem",
    # Implementations
    "RealFileSystem",
    "FakeFileSystem",
]
