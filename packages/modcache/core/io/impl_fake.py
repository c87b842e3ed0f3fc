"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

from pathlib import Path

from .models import AbsolutePath, WriteResult


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Simulates filesystem operations without disk I/O.
    Async operations complete immediately but maintain async interface.
    Not thread-safe (use per-test instance).

    Args:
        read_only: Reject every write with PermissionError, mimicking a
            cache directory the process cannot write to
    """

    def __init__(self, read_only: bool = False) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}  # Root always exists
        self.read_only = read_only
        self.write_count = 0

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts)

        # Normalize to absolute
        if not result.is_absolute():
            result = Path("/") / result

        return AbsolutePath(result)

    async def exists(self, path: AbsolutePath) -> bool:
        """Check existence (async, immediate)."""
        path_str = str(Path(path))
        return path_str in self._files or path_str in self._dirs

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if file (async, immediate)."""
        return self.is_file_sync(path)

    def is_file_sync(self, path: AbsolutePath) -> bool:
        """Check if file (immediate)."""
        return str(Path(path)) in self._files

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read bytes (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Read text (async, immediate)."""
        return (await self.read_bytes(path)).decode(encoding)

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """Write bytes (async, immediate)."""
        if self.read_only:
            raise PermissionError(f"Read-only filesystem: {path}")

        path_obj = Path(path)
        path_str = str(path_obj)

        # Auto-create parent directories
        parent = str(path_obj.parent)
        if parent not in self._dirs:
            self._ensure_parents(path_obj.parent)

        self._files[path_str] = bytes(content)
        self.write_count += 1

        return WriteResult(
            path=path_str,
            bytes_written=len(content),
            duration_ms=0.0,
        )

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Write text (async, immediate)."""
        return await self.write_bytes(path, content.encode(encoding))

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            dir_path = str(Path(*parts[:i]))
            self._dirs.add(dir_path)

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory (async, immediate)."""
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        if self.read_only and path_str not in self._dirs:
            raise PermissionError(f"Read-only filesystem: {path}")
        self._ensure_parents(Path(path))
        self._dirs.add(path_str)

    async def probe_writable(self, path: AbsolutePath) -> bool:
        """Report writability (async, immediate)."""
        if self.read_only:
            return False
        await self.mkdirs(path, exist_ok=True)
        return True

    def files(self) -> list[str]:
        """List every stored file path (test helper)."""
        return sorted(self._files)
