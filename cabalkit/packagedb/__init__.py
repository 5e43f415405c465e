"""
Package database references and stacks.

This package models the layered package databases a build reads from and
registers into, and renders them as command-line arguments.
"""

from .paths import (
    PathAnchor,
    SymbolicPath,
    make_symbolic_path,
    interpret_symbolic_path,
)

from .db import (
    PackageDBKind,
    PackageDBX,
    PackageDB,
    PackageDBCWD,
    GLOBAL_PACKAGE_DB,
    USER_PACKAGE_DB,
)

from .stack import (
    PackageDBStack,
    PackageDBStackCWD,
    registration_package_db,
    push_package_db,
    read_package_db,
    interpret_package_db_flags,
    absolute_package_db_path,
    absolute_package_db_paths,
    interpret_package_db,
    interpret_package_db_stack,
    coerce_package_db,
    coerce_package_db_stack,
    package_db_token,
    package_db_params,
    ghc_pkg_package_db_params,
)

__all__ = [
    "PathAnchor",
    "SymbolicPath",
    "make_symbolic_path",
    "interpret_symbolic_path",
    "PackageDBKind",
    "PackageDBX",
    "PackageDB",
    "PackageDBCWD",
    "GLOBAL_PACKAGE_DB",
    "USER_PACKAGE_DB",
    "PackageDBStack",
    "PackageDBStackCWD",
    "registration_package_db",
    "push_package_db",
    "read_package_db",
    "interpret_package_db_flags",
    "absolute_package_db_path",
    "absolute_package_db_paths",
    "interpret_package_db",
    "interpret_package_db_stack",
    "coerce_package_db",
    "coerce_package_db_stack",
    "package_db_token",
    "package_db_params",
    "ghc_pkg_package_db_params",
]
