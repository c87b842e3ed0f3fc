"""URL to cache path mapping.

Maps a specifier onto a deterministic, filesystem-safe relative path:
``<scheme>/<host[_PORT<port>]>/<sha256(path[?query])>`` for remote
specifiers, and a readable directory decomposition for ``file:`` URLs.
"""

import hashlib
import os
import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from urllib.parse import SplitResult, unquote, urlsplit

from modcache.core.errors import InvalidSpecifierError, UnsupportedSchemeError
from modcache.core.io import RelativePath, relative_path

SUPPORTED_SCHEMES = frozenset({"file", "data", "blob", "http", "https"})
HASHED_SCHEMES = frozenset({"http", "https", "data", "blob"})

DEFAULT_PORTS = {"http": 80, "https": 443}

_DRIVE_RE = re.compile(r"^[A-Za-z][:|]$")


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
        # Force port validation while we can still report the specifier
        _ = parts.port
    except ValueError as e:
        raise InvalidSpecifierError(f"Invalid URL: {e}", specifier=url) from e
    if not parts.scheme:
        raise InvalidSpecifierError("Relative specifier is not a URL", specifier=url)
    return parts


def get_scheme(url: str) -> str:
    """Return the lowercased scheme of ``url``, rejecting unsupported ones.

    Raises:
        UnsupportedSchemeError: If the scheme is not file, data, blob, http or https
    """
    scheme = _split(url).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(f"Unsupported scheme \"{scheme}\"", specifier=url)
    return scheme


def hash_segment(value: str) -> str:
    """SHA256 hex digest of a path-and-query string (64 chars)."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _host_segment(parts: SplitResult) -> str:
    host = (parts.hostname or "").lower()
    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(parts.scheme.lower()):
        return f"{host}_PORT{port}"
    return host


def url_to_filename(url: str) -> RelativePath:
    """
    Map an http(s)/data/blob URL to its content-addressed cache path.

    The path and query are hashed so filenames stay short regardless of URL
    length. The fragment never contributes.

    Args:
        url: Absolute URL

    Returns:
        Relative cache key such as ``https/deno.land/<sha256>``

    Raises:
        UnsupportedSchemeError: For any scheme other than http, https, data, blob

    Example:
        >>> str(url_to_filename("https://deno.land:8080/x/mod.ts"))[:27]
        'https/deno.land_PORT8080/'
    """
    parts = _split(url)
    scheme = parts.scheme.lower()
    if scheme not in HASHED_SCHEMES:
        raise UnsupportedSchemeError(
            f"Don't know how to create cache name for scheme \"{scheme}\"", specifier=url
        )

    segments = [scheme]
    if scheme in DEFAULT_PORTS:
        segments.append(_host_segment(parts))

    rest = parts.path
    if scheme in DEFAULT_PORTS and not rest:
        rest = "/"
    if parts.query:
        rest = f"{rest}?{parts.query}"

    segments.append(hash_segment(rest))
    return relative_path(*segments)


def _file_segments(parts: SplitResult) -> list[str]:
    segments: list[str] = []
    host = parts.netloc
    if host and host.lower() != "localhost":
        segments.extend(["UNC", host.replace(":", "_")])

    components = [unquote(p) for p in parts.path.split("/") if p]
    if components and _DRIVE_RE.match(components[0]):
        segments.append(components[0][0])
        components = components[1:]
    segments.extend(components)
    return segments


def cache_filename(url: str) -> RelativePath:
    """
    Map any supported specifier to its relative cache path.

    ``file:`` URLs keep their directory structure (with an optional
    ``UNC/<host>`` prefix and the drive letter's colon removed) so local
    entries stay inspectable; everything else goes through url_to_filename.

    Raises:
        UnsupportedSchemeError: If the scheme is not supported
        InvalidSpecifierError: If a file URL has no path
    """
    scheme = get_scheme(url)
    if scheme != "file":
        return url_to_filename(url)

    segments = _file_segments(_split(url))
    if not segments:
        raise InvalidSpecifierError("File URL has no path", specifier=url)
    return relative_path("file", *segments)


def cache_filename_with_extension(url: str, extension: str) -> RelativePath:
    """Cache path for ``url`` with ``.<extension>`` appended to the last segment."""
    base = cache_filename(url)
    return RelativePath(base.with_name(f"{base.name}.{extension}"))


def metadata_filename(key: RelativePath) -> RelativePath:
    """
    Sidecar key holding the headers of a content entry.

    Replaces an existing extension with ``.metadata.json``, otherwise appends it.
    """
    path = PurePosixPath(key)
    if path.suffix:
        return RelativePath(path.with_name(f"{path.stem}.metadata.json"))
    return RelativePath(path.with_name(f"{path.name}.metadata.json"))


def file_url_to_path(url: str) -> Path:
    """
    Convert a ``file:`` URL to a local filesystem path.

    Raises:
        InvalidSpecifierError: If the URL is not a file URL
    """
    parts = _split(url)
    if parts.scheme.lower() != "file":
        raise InvalidSpecifierError("Must be a file URL", specifier=url)

    path = unquote(parts.path)
    host = parts.netloc
    if os.name == "nt":
        if host and host.lower() != "localhost":
            return Path(PureWindowsPath(f"//{host}{path}"))
        return Path(PureWindowsPath(path.lstrip("/")))
    return Path(path)
