"""
Tests for cabalkit.compiler.cache module.
"""

import json
import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
from filelock import Timeout

from cabalkit.compiler.cache import CACHE_VERSION, CompilerCache, get_global_cache_dir
from cabalkit.compiler.identity import CompilerFlavor
from cabalkit.compiler.probe import CompilerProber
from cabalkit.core.exceptions import CompilerCacheError, CompilerProbeError


@pytest.fixture
def prober(ghc_9_10_1):
    """Prober that always returns GHC 9.10.1."""
    mock = Mock(spec=CompilerProber)
    mock.probe.return_value = ghc_9_10_1
    return mock


@pytest.fixture
def cache(tmp_path, prober) -> CompilerCache:
    return CompilerCache(tmp_path / "cache", prober=prober)


class TestGlobalCacheDir:
    """Tests for get_global_cache_dir."""

    def test_env_override(self, isolated_cache):
        assert get_global_cache_dir() == isolated_cache

    def test_default(self, monkeypatch):
        monkeypatch.delenv("CABALKIT_CACHE_DIR", raising=False)
        assert get_global_cache_dir() == Path.home() / ".cabalkit"

    def test_cache_uses_global_dir(self, isolated_cache):
        assert CompilerCache().cache_path == isolated_cache / "compilers.json"


class TestCompilerCache:
    """Tests for CompilerCache."""

    def test_miss_on_empty_cache(self, cache, fake_ghc):
        assert cache.get(fake_ghc) is None

    def test_put_then_get(self, cache, fake_ghc, ghc_9_10_1):
        cache.put(fake_ghc, ghc_9_10_1)
        assert cache.get(fake_ghc) == ghc_9_10_1

    def test_persisted_between_instances(self, cache, fake_ghc, ghc_9_10_1, tmp_path):
        cache.put(fake_ghc, ghc_9_10_1)
        assert CompilerCache(tmp_path / "cache").get(fake_ghc) == ghc_9_10_1

    def test_file_format(self, cache, fake_ghc, ghc_9_10_1):
        cache.put(fake_ghc, ghc_9_10_1)
        data = json.loads(cache.cache_path.read_text())
        assert data["version"] == CACHE_VERSION
        entry = data["compilers"][str(fake_ghc.resolve())]
        assert entry["compiler"] == ghc_9_10_1.to_dict()
        assert entry["stamp"]["size"] == fake_ghc.stat().st_size

    def test_keyed_by_resolved_path(self, cache, fake_ghc, ghc_9_10_1, tmp_path):
        """Test a symlink to the same executable hits the same entry."""
        link = tmp_path / "ghc-link"
        try:
            link.symlink_to(fake_ghc)
        except OSError:
            pytest.skip("symlinks not available")
        cache.put(fake_ghc, ghc_9_10_1)
        assert cache.get(link) == ghc_9_10_1

    def test_stale_entry(self, cache, fake_ghc, ghc_9_10_1):
        """Test a changed executable is re-probed."""
        cache.put(fake_ghc, ghc_9_10_1)
        fake_ghc.write_text("#!/bin/sh\necho upgraded\nexit 0\n")
        assert cache.get(fake_ghc) is None

    def test_missing_executable(self, cache, fake_ghc, ghc_9_10_1):
        cache.put(fake_ghc, ghc_9_10_1)
        fake_ghc.unlink()
        assert cache.get(fake_ghc) is None

    def test_corrupt_file_resets(self, cache, fake_ghc, ghc_9_10_1):
        cache.cache_path.parent.mkdir(parents=True)
        cache.cache_path.write_text("{not json")
        assert cache.get(fake_ghc) is None
        cache.put(fake_ghc, ghc_9_10_1)
        assert cache.get(fake_ghc) == ghc_9_10_1

    def test_wrong_version_resets(self, cache, fake_ghc):
        cache.cache_path.parent.mkdir(parents=True)
        cache.cache_path.write_text(json.dumps({"version": 99, "compilers": {}}))
        assert cache.get(fake_ghc) is None

    @pytest.mark.parametrize(
        "content",
        ["[]", "\"x\"", "1", "null", '{"version": 1, "compilers": []}', '{"version": 1}'],
    )
    def test_non_object_document_resets(self, cache, fake_ghc, ghc_9_10_1, content, caplog):
        """Test well-formed JSON of the wrong shape is treated as an empty cache."""
        cache.cache_path.parent.mkdir(parents=True)
        cache.cache_path.write_text(content)
        assert cache.get(fake_ghc) is None
        assert "resetting" in caplog.text
        cache.put(fake_ghc, ghc_9_10_1)
        assert cache.get(fake_ghc) == ghc_9_10_1

    def test_corrupt_entry_dropped(self, cache, fake_ghc, ghc_9_10_1, caplog):
        cache.put(fake_ghc, ghc_9_10_1)
        data = json.loads(cache.cache_path.read_text())
        data["compilers"][str(fake_ghc.resolve())]["compiler"] = {"id": "bogus"}
        cache.cache_path.write_text(json.dumps(data))
        assert cache.get(fake_ghc) is None
        assert "corrupt" in caplog.text

    def test_get_or_probe_caches(self, cache, prober, fake_ghc, ghc_9_10_1):
        """Test the prober runs once for repeated lookups."""
        assert cache.get_or_probe(fake_ghc) == ghc_9_10_1
        assert cache.get_or_probe(fake_ghc) == ghc_9_10_1
        prober.probe.assert_called_once_with(fake_ghc, None)

    def test_get_or_probe_flavor_mismatch(self, cache, prober, fake_ghc, ghc_9_10_1):
        """Test a cached entry of another flavour is re-probed."""
        cache.put(fake_ghc, ghc_9_10_1)
        cache.get_or_probe(fake_ghc, CompilerFlavor.GHCJS)
        prober.probe.assert_called_once_with(fake_ghc, CompilerFlavor.GHCJS)

    def test_probe_failure_not_cached(self, cache, prober, fake_ghc):
        prober.probe.side_effect = CompilerProbeError(str(fake_ghc), "boom")
        with pytest.raises(CompilerProbeError):
            cache.get_or_probe(fake_ghc)
        assert not cache.cache_path.exists()

    def test_clear(self, cache, fake_ghc, ghc_9_10_1):
        cache.put(fake_ghc, ghc_9_10_1)
        cache.clear()
        assert cache.get(fake_ghc) is None

    def test_lock_timeout(self, cache, fake_ghc):
        """Test a held lock surfaces as CompilerCacheError."""
        with patch("cabalkit.compiler.cache.FileLock") as mock_lock:
            mock_lock.return_value.__enter__.side_effect = Timeout(
                str(cache.lock_path)
            )
            with pytest.raises(CompilerCacheError, match="lock"):
                cache.get(fake_ghc)

    def test_creates_cache_directory(self, cache, fake_ghc, ghc_9_10_1):
        assert not cache.cache_path.parent.exists()
        cache.put(fake_ghc, ghc_9_10_1)
        assert cache.cache_path.parent.is_dir()
        assert cache.cache_path.exists()

    def test_cache_directory_blocked(self, tmp_path, prober, fake_ghc):
        """Test a file where the cache directory belongs raises CompilerCacheError."""
        blocker = tmp_path / "cache"
        blocker.write_text("")
        cache = CompilerCache(blocker, prober=prober)
        with pytest.raises(CompilerCacheError, match="directory"):
            cache.get(fake_ghc)

    def test_no_temp_files_left(self, cache, fake_ghc, ghc_9_10_1):
        cache.put(fake_ghc, ghc_9_10_1)
        leftovers = [n for n in os.listdir(cache.cache_path.parent) if n.endswith(".tmp")]
        assert leftovers == []
