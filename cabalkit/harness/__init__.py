"""
Integration test harness support.

Builds the argument vectors an end-to-end test passes to the compiler,
Setup, cabal and ghc-pkg, and reads back the build plan.
"""

from .environment import TestEnv
from .runner import ProgramRunner, Result, require_success
from .plan import BinFile, DistDir, Plan, PlanUnit, parse_plan, plan_exe_path, read_plan
from .commands import (
    MARKED_VERBOSE,
    cabal,
    cabal_args,
    definitely_make_relative,
    ghc_pkg,
    ghc_pkg_args,
    setup,
    setup_args,
    setup_build,
    setup_install,
    with_package_db,
    without_cabal_package_db,
)

__all__ = [
    "TestEnv",
    "ProgramRunner",
    "Result",
    "require_success",
    "BinFile",
    "DistDir",
    "Plan",
    "PlanUnit",
    "parse_plan",
    "plan_exe_path",
    "read_plan",
    "MARKED_VERBOSE",
    "cabal",
    "cabal_args",
    "definitely_make_relative",
    "ghc_pkg",
    "ghc_pkg_args",
    "setup",
    "setup_args",
    "setup_build",
    "setup_install",
    "with_package_db",
    "without_cabal_package_db",
]
