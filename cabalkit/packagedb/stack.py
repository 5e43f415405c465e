"""
Package database stacks.

Packages are usually taken from several databases stacked together, e.g.::

    [GlobalPackageDB]
    [GlobalPackageDB, UserPackageDB]
    [GlobalPackageDB, SpecificPackageDB("package.conf.inplace")]

The global database is conventionally at the bottom since it holds the
compiler's own packages. Lookups read the whole stack; registration writes
into the topmost (last) database.

Stacks are plain tuples. Nothing here mutates a stack: adding a database
returns a new one, so a stack can be shared between concurrent builds.

Two ways of resolving paths are provided and must not be confused:

- :func:`interpret_package_db_stack` is pure and only joins package-relative
  paths onto the working directory, for immediate use by this process.
- :func:`absolute_package_db_paths` canonicalizes against the filesystem,
  for paths that will be stored and used from another directory later.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from cabalkit.compiler.capabilities import package_db_flag_supported
from cabalkit.compiler.descriptor import Compiler
from cabalkit.core.exceptions import InternalError, PackageDBPathError
from cabalkit.core.filesystem import canonicalize_path
from cabalkit.packagedb.db import (
    GLOBAL_PACKAGE_DB,
    USER_PACKAGE_DB,
    PackageDB,
    PackageDBCWD,
    PackageDBKind,
    PackageDBX,
)
from cabalkit.packagedb.paths import (
    PathAnchor,
    SymbolicPath,
    WorkDir,
    interpret_symbolic_path,
    make_symbolic_path,
)

logger = logging.getLogger(__name__)

PackageDBStackX = Tuple[PackageDBX, ...]
PackageDBStack = Tuple[PackageDB, ...]
PackageDBStackCWD = Tuple[PackageDBCWD, ...]

CLEAR_TOKEN = "clear"


# ============================================================================
# Stack structure
# ============================================================================


def registration_package_db(stack: Sequence[PackageDBX]) -> PackageDBX:
    """
    Return the database new packages are registered into (the top of the stack).

    Raises:
        InternalError: If the stack is empty
    """
    if not stack:
        raise InternalError("internal error: empty package db set")
    return stack[-1]


def push_package_db(stack: Sequence[PackageDBX], db: PackageDBX) -> PackageDBStackX:
    """Return a new stack with ``db`` on top."""
    return (*stack, db)


def read_package_db(token: str) -> Optional[PackageDB]:
    """
    Parse one package db stack entry.

    Returns:
        None for ``clear``, the global or user database for ``global`` and
        ``user``, otherwise a specific database at that (package-relative) path
    """
    if token == CLEAR_TOKEN:
        return None
    if token == "global":
        return GLOBAL_PACKAGE_DB
    if token == "user":
        return USER_PACKAGE_DB
    return PackageDBX.specific(make_symbolic_path(token))


def interpret_package_db_flags(
    user_install: bool, tokens: Iterable[str]
) -> PackageDBStack:
    """
    Build a stack from ``--package-db`` arguments.

    The stack starts as the global database (plus the user database for
    per-user installs). ``clear`` empties it; every other token is pushed.

    Example:
        >>> interpret_package_db_flags(False, ["clear", "global", "dist/db"])
        (GlobalPackageDB, SpecificPackageDB(SymbolicPath(path='dist/db', ...)))
    """
    stack: PackageDBStack = (
        (GLOBAL_PACKAGE_DB, USER_PACKAGE_DB) if user_install else (GLOBAL_PACKAGE_DB,)
    )
    for token in tokens:
        db = read_package_db(token)
        stack = () if db is None else push_package_db(stack, db)
    return stack


# ============================================================================
# Path resolution
# ============================================================================


def absolute_package_db_path(work_dir: WorkDir, db: PackageDB) -> PackageDB:
    """
    Make a specific database's path absolute and canonical.

    Relative paths are interpreted against ``work_dir`` first. The result is
    canonicalized on the real filesystem, so symbolic links and ``..`` are
    resolved and the database directory must already exist.

    Raises:
        PackageDBPathError: If the path cannot be canonicalized
    """
    if not db.is_specific:
        return db

    symbolic = db.path
    if symbolic.is_absolute():
        path = symbolic.path
    else:
        path = interpret_symbolic_path(work_dir, symbolic)

    try:
        canonical = canonicalize_path(path)
    except OSError as e:
        raise PackageDBPathError(path, e) from e

    logger.debug(f"Canonicalized package db {symbolic.path} -> {canonical}")
    return PackageDBX.specific(make_symbolic_path(canonical, symbolic.anchor))


def absolute_package_db_paths(
    work_dir: WorkDir, stack: Iterable[PackageDB]
) -> PackageDBStack:
    """Apply :func:`absolute_package_db_path` to every database in a stack."""
    return tuple(absolute_package_db_path(work_dir, db) for db in stack)


def interpret_package_db(work_dir: WorkDir, db: PackageDB) -> PackageDBCWD:
    """Resolve a database path against ``work_dir`` without touching the filesystem."""
    return db.map(lambda path: interpret_symbolic_path(work_dir, path))


def interpret_package_db_stack(
    work_dir: WorkDir, stack: Iterable[PackageDB]
) -> PackageDBStackCWD:
    """Apply :func:`interpret_package_db` to every database in a stack."""
    return tuple(interpret_package_db(work_dir, db) for db in stack)


def coerce_package_db(db: PackageDBCWD) -> PackageDBX[SymbolicPath]:
    """Turn a working-directory path back into a CWD-anchored symbolic path."""
    return db.map(lambda path: make_symbolic_path(path, PathAnchor.CWD))


def coerce_package_db_stack(stack: Iterable[PackageDBCWD]) -> PackageDBStack:
    """Apply :func:`coerce_package_db` to every database in a stack."""
    return tuple(coerce_package_db(db) for db in stack)


# ============================================================================
# Command-line rendering
# ============================================================================


def package_db_token(db: PackageDBCWD) -> str:
    """Render one database the way ``--package-db=`` expects it."""
    if db.kind is PackageDBKind.GLOBAL:
        return "global"
    if db.kind is PackageDBKind.USER:
        return "user"
    return str(db.path)


def package_db_params(stack: Iterable[PackageDBCWD]) -> List[str]:
    """
    Render a stack as build tool arguments.

    The leading ``--package-db=clear`` discards any implicit default stack so
    exactly the given databases are used, in order.

    Example:
        >>> package_db_params([GLOBAL_PACKAGE_DB, PackageDBX.specific("foo")])
        ['--package-db=clear', '--package-db=global', '--package-db=foo']
    """
    return [f"--package-db={CLEAR_TOKEN}"] + [
        f"--package-db={package_db_token(db)}" for db in stack
    ]


def ghc_pkg_package_db_params(
    compiler: Compiler, stack: Iterable[PackageDBCWD]
) -> List[str]:
    """
    Render a stack as ``ghc-pkg`` arguments.

    ghc-pkg cannot be pointed at the global or user database by flag, so
    those entries are left out. Compilers whose ghc-pkg predates
    ``--package-db`` get ``--package-conf`` instead.
    """
    flag = "--package-db" if package_db_flag_supported(compiler) else "--package-conf"
    return [f"{flag}={db.path}" for db in stack if db.is_specific]
