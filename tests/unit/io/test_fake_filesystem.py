"""Tests for FakeFileSystem (async).

Tests the in-memory fake filesystem implementation.
"""

import pytest

from modcache.core.io import AbsolutePath, FakeFileSystem, absolute_path


@pytest.fixture
def test_root():
    """Provide test root path."""
    return absolute_path("/test")


class TestJoin:
    """Tests for path joining (sync operation)."""

    def test_join_multiple_parts(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test joining multiple path components."""
        result = fs.join(test_root, "a", "b", "c")
        assert str(result) == "/test/a/b/c"


class TestReadWrite:
    """Tests for byte and text I/O."""

    async def test_read_missing_raises(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test reading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await fs.read_bytes(fs.join(test_root, "missing"))

    async def test_write_bytes_creates_parents(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test write_bytes creates parent directories."""
        path = fs.join(test_root, "a", "b", "file.bin")
        result = await fs.write_bytes(path, b"\x00\x01")

        assert result.bytes_written == 2
        assert await fs.exists(fs.join(test_root, "a", "b"))
        assert await fs.read_bytes(path) == b"\x00\x01"

    async def test_text_round_trip(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test text written is read back decoded."""
        path = fs.join(test_root, "note.txt")
        await fs.write_text(path, "héllo")

        assert await fs.read_text(path) == "héllo"
        assert await fs.read_bytes(path) == "héllo".encode()

    async def test_is_file_sync_matches_async(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test the blocking probe agrees with the async one."""
        path = fs.join(test_root, "x")
        assert not fs.is_file_sync(path)

        await fs.write_bytes(path, b"")

        assert fs.is_file_sync(path)
        assert await fs.is_file(path)
        assert not await fs.is_file(test_root)


class TestReadOnly:
    """Tests for read-only mode."""

    async def test_writes_rejected(self, test_root: AbsolutePath):
        """Test writes raise PermissionError in read-only mode."""
        fs = FakeFileSystem(read_only=True)

        with pytest.raises(PermissionError):
            await fs.write_bytes(fs.join(test_root, "x"), b"data")

    async def test_probe_writable(self, test_root: AbsolutePath):
        """Test probe_writable reflects read-only mode."""
        assert await FakeFileSystem().probe_writable(test_root)
        assert not await FakeFileSystem(read_only=True).probe_writable(test_root)
