"""Tests for URL to cache path mapping."""

import hashlib
import os
from pathlib import Path

import pytest

from modcache.core.caching.paths import (
    cache_filename,
    cache_filename_with_extension,
    file_url_to_path,
    metadata_filename,
    url_to_filename,
)
from modcache.core.errors import InvalidSpecifierError, UnsupportedSchemeError
from modcache.core.io import relative_path


def sha(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


class TestUrlToFilename:
    """Tests for hashed remote paths."""

    def test_layout(self):
        """Test scheme/host/hash layout with the path hashed."""
        result = url_to_filename("https://deno.land/x/mod.ts")
        assert str(result) == f"https/deno.land/{sha('/x/mod.ts')}"

    def test_query_is_hashed_with_path(self):
        """Test the query contributes to the hash after a single '?'."""
        result = url_to_filename("https://deno.land/x/mod.ts?v=1")
        assert result.name == sha("/x/mod.ts?v=1")

    def test_deterministic(self):
        """Test identical URLs always map to the same path."""
        url = "https://cdn.test/a/b/c.ts?x=1&y=2"
        assert url_to_filename(url) == url_to_filename(url)

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("https://cdn.test/a.ts?v=1", "https://cdn.test/a.ts?v=2"),
            ("https://cdn.test/a.ts?x=1&y=2", "https://cdn.test/a.ts?y=2&x=1"),
            ("https://cdn.test/a.ts", "https://cdn.test/a.ts/"),
            ("https://cdn.test/a.ts", "https://cdn.test/A.ts"),
            ("https://cdn.test/a.ts?b", "https://cdn.test/a.tsb"),
        ],
    )
    def test_near_collisions_differ(self, a: str, b: str):
        """Test URLs differing only slightly map to different files."""
        assert url_to_filename(a) != url_to_filename(b)

    def test_fragment_ignored(self):
        """Test fragments never affect the path."""
        assert url_to_filename("https://cdn.test/a.ts#frag") == url_to_filename(
            "https://cdn.test/a.ts"
        )

    def test_non_default_port(self):
        """Test a non-default port is encoded into the host segment."""
        result = url_to_filename("http://localhost:8000/mod.ts")
        assert result.parts[:2] == ("http", "localhost_PORT8000")

    def test_default_port_omitted(self):
        """Test explicit default ports map like the bare host."""
        assert url_to_filename("https://deno.land:443/a.ts") == url_to_filename(
            "https://deno.land/a.ts"
        )

    def test_host_lowercased_and_empty_path(self):
        """Test host case and a missing path are normalized."""
        assert url_to_filename("https://Deno.Land") == url_to_filename("https://deno.land/")

    def test_data_url_has_no_host_segment(self):
        """Test data URLs map to data/<hash>."""
        result = url_to_filename("data:text/plain,hello")
        assert result == relative_path("data", sha("text/plain,hello"))

    @pytest.mark.parametrize("url", ["ftp://host/file", "file:///tmp/a.ts", "wasm://x/y"])
    def test_unsupported_schemes(self, url: str):
        """Test schemes without a hashed layout are rejected."""
        with pytest.raises(UnsupportedSchemeError):
            url_to_filename(url)

    def test_invalid_port(self):
        """Test a malformed port raises InvalidSpecifierError."""
        with pytest.raises(InvalidSpecifierError):
            url_to_filename("https://deno.land:abc/mod.ts")


class TestCacheFilename:
    """Tests for the scheme-dispatching mapping."""

    def test_remote_delegates_to_hash(self):
        url = "https://deno.land/std/path/mod.ts"
        assert cache_filename(url) == url_to_filename(url)

    def test_file_url_keeps_directories(self):
        """Test local paths stay readable."""
        assert str(cache_filename("file:///home/user/mod.ts")) == "file/home/user/mod.ts"

    def test_file_url_decodes_segments(self):
        assert str(cache_filename("file:///home/my%20dir/a.ts")) == "file/home/my dir/a.ts"

    def test_file_url_unc_host(self):
        """Test a UNC host becomes UNC/<host> with ':' replaced."""
        result = cache_filename("file://server:8080/share/a.ts")
        assert str(result) == "file/UNC/server_8080/share/a.ts"

    def test_file_url_drive_letter(self):
        """Test drive letters lose their colon."""
        assert str(cache_filename("file:///C:/Users/a.ts")) == "file/C/Users/a.ts"

    def test_unsupported_scheme(self):
        with pytest.raises(UnsupportedSchemeError):
            cache_filename("mailto:someone@example.com")

    def test_with_extension(self):
        """Test the extension is appended to the hashed name."""
        url = "https://deno.land/x/mod.ts"
        result = cache_filename_with_extension(url, "js.map")
        assert str(result) == f"{url_to_filename(url)}.js.map"

    def test_file_with_extension(self):
        result = cache_filename_with_extension("file:///src/mod.ts", "d.ts")
        assert str(result) == "file/src/mod.ts.d.ts"


class TestMetadataFilename:
    def test_appended_without_extension(self):
        key = url_to_filename("https://deno.land/x/mod.ts")
        assert metadata_filename(key).name == f"{key.name}.metadata.json"

    def test_extension_replaced(self):
        assert str(metadata_filename(relative_path("file", "src", "mod.ts"))) == (
            "file/src/mod.metadata.json"
        )


@pytest.mark.skipif(os.name == "nt", reason="POSIX path semantics")
class TestFileUrlToPath:
    def test_decodes_path(self):
        assert file_url_to_path("file:///tmp/a%20b.ts") == Path("/tmp/a b.ts")

    def test_rejects_remote(self):
        with pytest.raises(InvalidSpecifierError):
            file_url_to_path("https://deno.land/mod.ts")
