"""Models for cache system.

Provides cache entry, sidecar metadata, and artifact kind models.
"""

from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Lowercase header names, keeping insertion order (last duplicate wins)."""
    if not headers:
        return {}
    return {str(k).lower(): str(v) for k, v in headers.items()}


class CachedMetadata(BaseModel):
    """
    Sidecar persisted next to a content entry as ``*.metadata.json``.

    Written after the content file, so its presence marks a complete entry.
    """

    headers: dict[str, str] = Field(default_factory=dict)
    url: str

    @field_validator("headers", mode="before")
    @classmethod
    def _lowercase_headers(cls, v: Mapping[str, str] | None) -> dict[str, str]:
        return normalize_headers(v)


class CacheEntry(BaseModel):
    """
    Cached body and headers for one URL.

    An entry whose headers carry ``location`` is a redirect pointer with
    empty content; the caller resolves it.
    """

    model_config = ConfigDict(frozen=True)

    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""

    @field_validator("headers", mode="before")
    @classmethod
    def _lowercase_headers(cls, v: Mapping[str, str] | None) -> dict[str, str]:
        return normalize_headers(v)

    @property
    def location(self) -> str | None:
        """Redirect target, if this entry is a redirect pointer."""
        return self.headers.get("location")

    @property
    def etag(self) -> str | None:
        return self.headers.get("etag")


class EmitMetadata(BaseModel):
    """
    ``*.meta`` sidecar of the derived-artifact store.

    Unknown fields are kept so a read-modify-write never drops them.
    """

    model_config = ConfigDict(extra="allow")

    version_hash: str | None = None


class ArtifactKind(StrEnum):
    """Kinds of derived artifacts stored per specifier."""

    DECLARATION = "declaration"
    EMIT = "emit"
    SOURCEMAP = "sourcemap"
    BUILDINFO = "buildinfo"
    VERSION = "version"

    @property
    def extension(self) -> str:
        return ARTIFACT_EXTENSIONS[self]


ARTIFACT_EXTENSIONS: dict[ArtifactKind, str] = {
    ArtifactKind.DECLARATION: "d.ts",
    ArtifactKind.EMIT: "js",
    ArtifactKind.SOURCEMAP: "js.map",
    ArtifactKind.BUILDINFO: "buildinfo",
    ArtifactKind.VERSION: "meta",
}


class CacheInfo(BaseModel):
    """Local paths of the cached source and its emitted outputs (diagnostics)."""

    local: str | None = None
    emit: str | None = None
    map: str | None = None
