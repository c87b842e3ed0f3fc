"""Models for filesystem abstraction layer.

Provides type-safe path wrappers and operation result types.
"""

from pathlib import Path, PurePosixPath
from typing import NewType

from pydantic import BaseModel, Field

# Type-safe path wrappers
AbsolutePath = NewType("AbsolutePath", Path)
RelativePath = NewType("RelativePath", PurePosixPath)


def absolute_path(path: str | Path) -> AbsolutePath:
    """
    Validate and construct an absolute path.

    Args:
        path: String or Path object

    Returns:
        AbsolutePath instance

    Raises:
        ValueError: If path is not absolute

    Example:
        >>> p = absolute_path("/tmp/deno")
        >>> assert Path(p).is_absolute()
    """
    p = Path(path).resolve()
    if not p.is_absolute():
        raise ValueError(f"Path must be absolute: {path}")
    return AbsolutePath(p)


def relative_path(*parts: str) -> RelativePath:
    """
    Validate and construct a relative cache key from path segments.

    Keys always use forward slashes so they are identical on every platform;
    they are only turned into native paths when joined onto a store root.

    Args:
        *parts: Path segments (a single "a/b/c" string also works)

    Returns:
        RelativePath instance

    Raises:
        ValueError: If the key is empty or absolute

    Example:
        >>> str(relative_path("https", "deno.land", "abc123"))
        'https/deno.land/abc123'
    """
    p = PurePosixPath(*parts)
    if p.is_absolute() or not p.parts:
        raise ValueError(f"Path must be relative and non-empty: {p}")
    return RelativePath(p)


class WriteResult(BaseModel):
    """Result of a filesystem write operation.

    Attributes:
        path: Final path written
        bytes_written: Number of bytes written
        duration_ms: Operation duration in milliseconds
    """

    path: str = Field(description="Final path written")
    bytes_written: int = Field(description="Number of bytes written", ge=0)
    duration_ms: float = Field(description="Operation duration in milliseconds", ge=0.0)
