"""
Core functionality for cabalkit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CabalKitError,
    InternalError,
    LevelParseError,
    CompilerError,
    CompilerProbeError,
    CompilerCacheError,
    UnknownCapabilityError,
    PackageDBError,
    PackageDBPathError,
    HarnessError,
    PackageDBNotInitializedError,
    PlanError,
    ProgramFailedError,
    ConfigError,
)

__all__ = [
    "CabalKitError",
    "InternalError",
    "LevelParseError",
    "CompilerError",
    "CompilerProbeError",
    "CompilerCacheError",
    "UnknownCapabilityError",
    "PackageDBError",
    "PackageDBPathError",
    "HarnessError",
    "PackageDBNotInitializedError",
    "PlanError",
    "ProgramFailedError",
    "ConfigError",
]
