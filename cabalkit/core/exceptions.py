"""
Centralized exception hierarchy for cabalkit.

This module defines all custom exceptions used across the codebase
to provide clear exception semantics for callers.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class CabalKitError(Exception):
    """Base exception for all cabalkit errors."""

    pass


class InternalError(CabalKitError):
    """Raised when an internal invariant is violated.

    These represent programmer or upstream configuration errors and are
    never recovered from by this package.
    """

    pass


class LevelParseError(CabalKitError, ValueError):
    """Raised when an optimisation or debug info level cannot be parsed."""

    pass


# ============================================================================
# Compiler Exceptions
# ============================================================================


class CompilerError(CabalKitError):
    """Base exception for compiler-related errors."""

    pass


class CompilerProbeError(CompilerError):
    """Raised when probing a compiler executable fails."""

    def __init__(self, compiler_path: str, reason: str):
        self.compiler_path = compiler_path
        self.reason = reason
        super().__init__(f"Failed to probe compiler {compiler_path}: {reason}")


class CompilerCacheError(CompilerError):
    """Raised when the compiler cache cannot be read, written or locked."""

    pass


class UnknownCapabilityError(CompilerError, KeyError):
    """Raised when a capability name is not in the capability registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown compiler capability: {name}")

    def __str__(self) -> str:
        return self.args[0]


# ============================================================================
# Package Database Exceptions
# ============================================================================


class PackageDBError(CabalKitError):
    """Base exception for package database errors."""

    pass


class PackageDBPathError(PackageDBError):
    """Raised when a specific package database path cannot be canonicalized."""

    def __init__(self, path: str, error: Optional[OSError] = None):
        self.path = path
        self.error = error
        msg = f"Cannot canonicalize package database path: {path}"
        if error is not None:
            msg += f" ({error.strerror or error})"
        super().__init__(msg)


# ============================================================================
# Harness Exceptions
# ============================================================================


class HarnessError(CabalKitError):
    """Base exception for integration harness errors."""

    pass


class PackageDBNotInitializedError(HarnessError):
    """Raised when a command needs the test package database before it exists."""

    pass


class PlanError(HarnessError):
    """Raised when a build plan cannot be read or does not contain a unit."""

    pass


class ProgramFailedError(HarnessError):
    """Raised when a program invoked by the harness exits unsuccessfully."""

    def __init__(self, result):
        self.result = result
        super().__init__(
            f"Command failed with exit code {result.exit_code}: "
            f"{' '.join(result.command)}"
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(CabalKitError):
    """Configuration parsing or validation error."""

    pass
