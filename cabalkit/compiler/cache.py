"""
Persistent compiler cache.

Probing a compiler runs several subprocesses, so descriptors are cached in a
JSON file keyed by the resolved path of the compiler executable. An entry is
reused only while the executable's size and modification time are unchanged.

Access is serialized across processes with a file lock and the file is
always rewritten atomically.
"""

import json
import logging
import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock, Timeout

from cabalkit.compiler.descriptor import Compiler
from cabalkit.compiler.identity import Flavor
from cabalkit.compiler.probe import CompilerProber
from cabalkit.core.exceptions import CompilerCacheError
from cabalkit.core.filesystem import atomic_write, ensure_directory

logger = logging.getLogger(__name__)

CACHE_VERSION = 1
CACHE_DIR_ENV = "CABALKIT_CACHE_DIR"


def get_global_cache_dir() -> Path:
    """
    Get the global cabalkit cache directory.

    Returns:
        ``$CABALKIT_CACHE_DIR`` if set, otherwise ``~/.cabalkit``
    """
    override = os.environ.get(CACHE_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cabalkit"


class CompilerCache:
    """
    Cache of probed compiler descriptors.

    Example:
        >>> cache = CompilerCache()
        >>> ghc = cache.get_or_probe(Path("/usr/bin/ghc"))
        >>> cache.get(Path("/usr/bin/ghc")) == ghc
        True
    """

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        prober: Optional[CompilerProber] = None,
        lock_timeout: int = 30,
    ):
        """
        Initialize the compiler cache.

        Args:
            cache_dir: Directory holding compilers.json (default: global cache dir)
            prober: Prober used on cache misses
            lock_timeout: Timeout in seconds for acquiring the file lock
        """
        if cache_dir is None:
            cache_dir = get_global_cache_dir()

        self.cache_path = Path(cache_dir) / "compilers.json"
        self.lock_path = Path(cache_dir) / "compilers.json.lock"
        self.prober = prober or CompilerProber()
        self.lock_timeout = lock_timeout

    @contextmanager
    def _lock(self):
        try:
            ensure_directory(self.lock_path.parent)
        except OSError as e:
            raise CompilerCacheError(f"Cannot create compiler cache directory: {e}") from e
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)
        try:
            with lock:
                yield
        except Timeout as e:
            raise CompilerCacheError(
                f"Could not acquire compiler cache lock within "
                f"{self.lock_timeout} seconds: {self.lock_path}"
            ) from e

    def _load(self) -> dict:
        if not self.cache_path.exists():
            return {"version": CACHE_VERSION, "compilers": {}}

        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid compiler cache {self.cache_path}, resetting: {e}")
            return {"version": CACHE_VERSION, "compilers": {}}
        except OSError as e:
            raise CompilerCacheError(f"Failed to read compiler cache: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("compilers"), dict):
            logger.warning(f"Malformed compiler cache {self.cache_path}, resetting")
            return {"version": CACHE_VERSION, "compilers": {}}
        if data.get("version") != CACHE_VERSION:
            logger.warning(
                f"Compiler cache version {data.get('version')} not supported, resetting"
            )
            return {"version": CACHE_VERSION, "compilers": {}}
        return data

    def _save(self, data: dict):
        try:
            atomic_write(self.cache_path, json.dumps(data, indent=2))
        except OSError as e:
            raise CompilerCacheError(f"Failed to write compiler cache: {e}") from e

    @staticmethod
    def _key(compiler_path: Path) -> str:
        return str(compiler_path.resolve())

    @staticmethod
    def _stamp(compiler_path: Path) -> dict:
        stat = compiler_path.resolve().stat()
        return {"mtime_ns": stat.st_mtime_ns, "size": stat.st_size}

    def get(self, compiler_path: Union[str, Path]) -> Optional[Compiler]:
        """
        Return the cached descriptor for a compiler, or None.

        Entries whose executable changed since probing, or that no longer
        deserialize, are treated as missing.
        """
        compiler_path = Path(compiler_path)
        with self._lock():
            entry = self._load()["compilers"].get(self._key(compiler_path))

        if entry is None:
            return None

        try:
            if entry["stamp"] != self._stamp(compiler_path):
                logger.debug(f"Cached compiler is stale: {compiler_path}")
                return None
            return Compiler.from_dict(entry["compiler"])
        except OSError:
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Dropping corrupt compiler cache entry {compiler_path}: {e}"
            )
            return None

    def put(self, compiler_path: Union[str, Path], compiler: Compiler):
        """Store a descriptor for a compiler executable."""
        compiler_path = Path(compiler_path)
        with self._lock():
            data = self._load()
            data["compilers"][self._key(compiler_path)] = {
                "stamp": self._stamp(compiler_path),
                "probed": datetime.now().isoformat(),
                "compiler": compiler.to_dict(),
            }
            self._save(data)
        logger.debug(f"Cached compiler {compiler.show_id()} at {compiler_path}")

    def get_or_probe(
        self, compiler_path: Union[str, Path], flavor: Optional[Flavor] = None
    ) -> Compiler:
        """
        Return the cached descriptor, probing and caching on a miss.

        Raises:
            CompilerProbeError: If probing is needed and fails
        """
        compiler = self.get(compiler_path)
        if compiler is not None and (flavor is None or compiler.flavor == flavor):
            logger.debug(f"Using cached compiler {compiler.show_id()}")
            return compiler

        compiler = self.prober.probe(compiler_path, flavor)
        self.put(compiler_path, compiler)
        return compiler

    def clear(self):
        """Remove every cached descriptor."""
        with self._lock():
            self._save({"version": CACHE_VERSION, "compilers": {}})
        logger.info(f"Cleared compiler cache {self.cache_path}")
