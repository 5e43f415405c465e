"""
Pytest configuration and shared fixtures for cabalkit tests.
"""

import stat
from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.compilers import (
    ghc_7_4_2,
    ghc_9_6_4,
    ghc_9_10_1,
    ghcjs_compiler,
    other_compiler,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need a real ghc on PATH",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def fake_ghc(tmp_path: Path) -> Path:
    """Create an executable file named ghc (never actually run)."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    ghc = bin_dir / "ghc"
    ghc.write_text("#!/bin/sh\nexit 0\n")
    ghc.chmod(ghc.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return ghc


@pytest.fixture
def isolated_cache(tmp_path: Path, monkeypatch) -> Path:
    """Point the global compiler cache at a temporary directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setenv("CABALKIT_CACHE_DIR", str(cache_dir))
    return cache_dir


@pytest.fixture
def in_tmp_dir(tmp_path: Path, monkeypatch) -> Path:
    """Run the test with the temporary directory as working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
