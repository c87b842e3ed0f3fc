"""Cache root resolution and the deps/gen store layout beneath it."""

import logging
import os
import sys
from pathlib import Path

from modcache.core.caching.backends.disk import DiskCache
from modcache.core.caching.backends.http import HttpCache
from modcache.core.errors import CacheRootError
from modcache.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path

logger = logging.getLogger(__name__)

CACHE_DIR_ENV_VAR = "DENO_DIR"
CACHE_DIR_NAME = "deno"


def home_dir() -> Path | None:
    """User home directory, or None when it cannot be determined."""
    home = os.getenv("USERPROFILE") if sys.platform == "win32" else os.getenv("HOME")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError:
        return None


def os_cache_dir() -> Path | None:
    """Per-user cache directory following the platform convention."""
    if sys.platform == "darwin":
        home = home_dir()
        return home / "Library" / "Caches" if home else None
    if sys.platform == "win32":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else None

    xdg = os.getenv("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg)
    home = home_dir()
    return home / ".cache" if home else None


def resolve_cache_root(explicit: str | Path | None = None) -> AbsolutePath:
    """
    Resolve the cache root directory.

    Order: explicit argument, then the DENO_DIR environment variable, then
    ``<os cache dir>/deno``, then ``~/.deno``. Relative paths resolve
    against the current working directory.

    Raises:
        CacheRootError: If no candidate can be determined
    """
    candidate: Path | None = None
    if explicit:
        candidate = Path(explicit)
    elif env := os.getenv(CACHE_DIR_ENV_VAR):
        logger.debug(f"Using {CACHE_DIR_ENV_VAR}={env}")
        candidate = Path(env)
    elif (base := os_cache_dir()) is not None:
        candidate = base / CACHE_DIR_NAME
    elif (home := home_dir()) is not None:
        candidate = home / ".deno"

    if candidate is None:
        raise CacheRootError(
            f"Could not determine the cache directory, set {CACHE_DIR_ENV_VAR} explicitly"
        )
    return absolute_path(Path.cwd() / candidate if not candidate.is_absolute() else candidate)


class CacheDir:
    """
    Cache root holding the ``deps`` (fetched sources) and ``gen`` (derived
    artifacts) stores.

    Args:
        root: Cache root (None resolves via resolve_cache_root)
        fs: Async filesystem implementation
        read_only: Force read-only mode for the deps store; None probes on initialize
    """

    def __init__(
        self,
        root: str | Path | None = None,
        fs: FileSystem | None = None,
        read_only: bool | None = None,
    ) -> None:
        self.fs = fs or RealFileSystem()
        self.root: AbsolutePath = resolve_cache_root(root)
        self.deps = HttpCache(self.fs, self.fs.join(self.root, "deps"), read_only=read_only)
        self.gen = DiskCache(self.fs, self.fs.join(self.root, "gen"))

    def __repr__(self) -> str:
        return f"CacheDir(root={str(self.root)!r})"
