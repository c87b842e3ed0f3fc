"""In-process resolution of ``data:`` and ``blob:`` specifiers.

``data:`` URLs carry their own payload (RFC 2397). ``blob:`` URLs refer to
objects registered in this process with register_blob().
"""

from __future__ import annotations

import base64
import binascii
from urllib.parse import unquote_to_bytes

from modcache.core.errors import InvalidSpecifierError

DEFAULT_DATA_CONTENT_TYPE = "text/plain;charset=US-ASCII"

_blobs: dict[str, tuple[bytes, str]] = {}


def decode_data_url(specifier: str) -> tuple[bytes, str]:
    """
    Decode a ``data:[<mediatype>][;base64],<data>`` URL.

    Args:
        specifier: The data URL

    Returns:
        Tuple of (payload bytes, content type)

    Raises:
        InvalidSpecifierError: If the URL is not a well-formed data URL
    """
    scheme, sep, rest = specifier.partition(":")
    if not sep or scheme.lower() != "data":
        raise InvalidSpecifierError("Not a data URL", specifier=specifier)

    # Fragments never belong to the payload
    rest = rest.split("#", 1)[0]
    header, comma, payload = rest.partition(",")
    if not comma:
        raise InvalidSpecifierError("Malformed data URL: missing ','", specifier=specifier)

    params = [p.strip() for p in header.split(";")]
    is_base64 = len(params) > 1 and params[-1].lower() == "base64"
    if is_base64:
        params = params[:-1]

    mime, parameters = params[0], params[1:]
    if "/" in mime:
        media_type = ";".join(params)
    elif parameters:
        media_type = ";".join(["text/plain", *parameters])
    else:
        media_type = DEFAULT_DATA_CONTENT_TYPE

    raw = unquote_to_bytes(payload)
    if not is_base64:
        return raw, media_type

    try:
        stripped = b"".join(raw.split())
        stripped += b"=" * (-len(stripped) % 4)
        return base64.b64decode(stripped, validate=True), media_type
    except (binascii.Error, ValueError) as e:
        raise InvalidSpecifierError(
            f"Malformed data URL: invalid base64 ({e})", specifier=specifier
        ) from e


def register_blob(
    specifier: str,
    content: bytes | str,
    content_type: str = "application/octet-stream",
) -> None:
    """Register an object under a ``blob:`` URL for later fetches."""
    if not specifier.lower().startswith("blob:"):
        raise InvalidSpecifierError("Not a blob URL", specifier=specifier)
    if isinstance(content, str):
        content = content.encode("utf-8")
    _blobs[specifier] = (content, content_type)


def revoke_blob(specifier: str) -> None:
    """Forget a registered ``blob:`` URL (no-op when unknown)."""
    _blobs.pop(specifier, None)


def resolve_blob(specifier: str) -> tuple[bytes, str] | None:
    """Registered (content, content type) for a ``blob:`` URL, or None."""
    return _blobs.get(specifier)
