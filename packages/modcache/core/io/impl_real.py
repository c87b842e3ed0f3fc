"""Real filesystem implementation using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
Async-first with high-performance non-blocking I/O.
"""

import asyncio
import os
import time
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, WriteResult

# Permission bits for committed cache files (temp files start at 0o600)
CACHE_PERM = 0o644


def _commit(tmp_path: str, target: str) -> None:
    """Publish a fully written temp file under its final name (blocking)."""
    os.chmod(tmp_path, CACHE_PERM)
    os.replace(tmp_path, target)


class RealFileSystem:
    """
    Real filesystem implementation using aiofiles for async I/O.

    Provides atomic writes via temp file + os.replace().
    Async-first with high-performance non-blocking I/O.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts).resolve()

        # Security: Ensure result is still under base
        base_resolved = Path(base).resolve()
        try:
            result.relative_to(base_resolved)
        except ValueError as e:
            raise ValueError(f"Path traversal detected: {result} escapes {base}") from e

        return AbsolutePath(result)

    async def exists(self, path: AbsolutePath) -> bool:
        """Check existence asynchronously."""
        return bool(await aiofiles.os.path.exists(path))

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if file asynchronously."""
        return bool(await aiofiles.os.path.isfile(path))

    def is_file_sync(self, path: AbsolutePath) -> bool:
        """Check if file (blocking)."""
        return os.path.isfile(path)

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read file asynchronously."""
        async with aiofiles.open(path, mode="rb") as f:
            content: bytes = await f.read()
            return content

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Read text file asynchronously."""
        async with aiofiles.open(path, encoding=encoding) as f:
            content: str = await f.read()
            return content

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """Atomically write file asynchronously."""
        start = time.perf_counter()
        path_obj = Path(path)

        # Ensure parent directory exists
        await aiofiles.os.makedirs(path_obj.parent, exist_ok=True)

        # Atomic write: temp file → replace
        # Create temp file in same directory for atomic replace
        loop = asyncio.get_event_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(
                mode="wb",
                dir=path_obj.parent,
                prefix=f".{path_obj.name}.",
                delete=False,
            )
            tmp_path = tmp.name
            tmp.close()
            return tmp_path

        tmp_path = await loop.run_in_executor(None, create_temp_file)

        try:
            async with aiofiles.open(tmp_path, mode="wb") as f:
                await f.write(content)

            await loop.run_in_executor(None, _commit, tmp_path, str(path))
        except Exception:
            # Clean up temp on failure
            try:
                await aiofiles.os.unlink(tmp_path)
            except OSError:
                pass
            raise

        duration = (time.perf_counter() - start) * 1000

        return WriteResult(
            path=str(path),
            bytes_written=len(content),
            duration_ms=duration,
        )

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Atomically write text file asynchronously."""
        return await self.write_bytes(path, content.encode(encoding))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory and parents asynchronously."""
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)

    async def probe_writable(self, path: AbsolutePath) -> bool:
        """Create the directory if needed and check write access."""
        try:
            await aiofiles.os.makedirs(path, exist_ok=True)
        except OSError:
            return False

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, os.access, str(path), os.W_OK)
