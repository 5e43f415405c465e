"""
Integration test environment.

A :class:`TestEnv` captures everything a test needs to build argument vectors:
its scratch directories, the programs under test, the probed compiler and
the package database stack. It is immutable; helpers that change it (such as
:func:`cabalkit.harness.commands.with_package_db`) return a new one.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple

from cabalkit.compiler.descriptor import Compiler
from cabalkit.packagedb.db import GLOBAL_PACKAGE_DB, PackageDBCWD


@dataclass(frozen=True)
class TestEnv:
    """
    Environment of one integration test.

    Attributes:
        tmp_dir: Scratch directory the test runs in
        compiler: Descriptor of the compiler under test
        relative_current_dir: Package directory, relative to ``tmp_dir``
        package_db_stack: Databases passed to Setup and ghc-pkg
        have_package_db: Whether the test's own database was initialized
        package_db_path: Extra databases passed to cabal, if any
        ghc_path: Compiler executable
        ghc_pkg_path: Package registration tool
        haddock_path: Documentation tool
        setup_path: Compiled Setup executable
        cabal_path: cabal executable
        store_dir: cabal store directory, if the test uses its own
        project_file: cabal project file, if not the default
    """

    __test__ = False  # not a pytest test class

    tmp_dir: Path
    compiler: Optional[Compiler] = None
    relative_current_dir: str = "."
    package_db_stack: Tuple[PackageDBCWD, ...] = (GLOBAL_PACKAGE_DB,)
    have_package_db: bool = False
    package_db_path: Optional[Tuple[str, ...]] = None
    ghc_path: str = "ghc"
    ghc_pkg_path: str = "ghc-pkg"
    haddock_path: str = "haddock"
    setup_path: str = "Setup"
    cabal_path: str = "cabal"
    store_dir: Optional[str] = None
    project_file: Optional[str] = None

    @property
    def current_dir(self) -> Path:
        return self.tmp_dir / self.relative_current_dir

    @property
    def dist_dir(self) -> Path:
        return self.tmp_dir / "dist"

    @property
    def prefix_dir(self) -> Path:
        return self.tmp_dir / "usr"

    @property
    def package_db_dir(self) -> str:
        return os.path.join(str(self.tmp_dir), "packagedb")

    @property
    def work_dir(self) -> Optional[str]:
        """Setup ``--working-dir``, or None when the package is at the top."""
        if self.relative_current_dir == ".":
            return None
        return self.relative_current_dir

    def evolve(self, **changes) -> "TestEnv":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)
