"""Small helpers shared by the fetcher."""

from __future__ import annotations

from urllib.parse import urljoin


def safe_snippet(content: bytes, limit: int) -> str:
    """Extract safe text snippet from response content for error messages.

    Truncates content and decodes as UTF-8 with replacement for invalid bytes.

    Args:
        content: Response body bytes
        limit: Maximum number of bytes to include

    Returns:
        Truncated, decoded text snippet
    """
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def strip_hashbang(content: bytes) -> bytes:
    """Drop a leading ``#!`` line, keeping its newline so line numbers hold."""
    if not content.startswith(b"#!"):
        return content
    offset = content.find(b"\n")
    return b"" if offset == -1 else content[offset:]


def resolve_location(base: str, location: str) -> str:
    """Resolve a ``location`` header value against the URL that returned it."""
    return urljoin(base, location)
