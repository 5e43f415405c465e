"""
Argument builders and runners for the programs an integration test drives.

Each ``*_args`` function is pure: it turns a :class:`TestEnv` and a command
into the exact argument vector, so the vectors can be checked without
running anything. The matching runner functions hand that vector to a
:class:`ProgramRunner`.
"""

import logging
import os
from typing import List, Optional, Sequence

from cabalkit.core.exceptions import HarnessError, PackageDBNotInitializedError
from cabalkit.core.verbosity import VerbosityFlag, VerbosityLevel, show_verbosity
from cabalkit.harness.environment import TestEnv
from cabalkit.harness.runner import ProgramRunner, Result, require_success
from cabalkit.packagedb.db import PackageDBX
from cabalkit.packagedb.stack import (
    ghc_pkg_package_db_params,
    package_db_params,
    push_package_db,
)

logger = logging.getLogger(__name__)

MARKED_VERBOSE = show_verbosity(
    VerbosityLevel.VERBOSE, [VerbosityFlag.MARK_OUTPUT, VerbosityFlag.NO_WRAP]
)

# cabal commands that take no build directory or package databases
_CABAL_PLAIN_COMMANDS = frozenset(
    {
        "v1-update",
        "outdated",
        "user-config",
        "man",
        "v1-freeze",
        "check",
        "gen-bounds",
        "get",
        "unpack",
        "info",
        "init",
        "haddock-project",
    }
)


def _split_path(path: str) -> List[str]:
    path = os.path.normpath(path)
    drive, rest = os.path.splitdrive(path)
    parts = [p for p in rest.split(os.sep) if p and p != "."]
    if rest.startswith(os.sep):
        parts.insert(0, drive + os.sep)
    elif drive:
        parts.insert(0, drive)
    return parts


def definitely_make_relative(base: str, path: str) -> str:
    """
    Express ``path`` relative to ``base``, using ``..`` where needed.

    Both paths are normalized first, so ``foo/./bar`` is treated as
    ``foo/bar``. Purely lexical: symbolic links are not followed.

    Example:
        >>> definitely_make_relative("/tmp/t/pkg", "/tmp/t/dist")
        '../dist'
    """
    base_parts = _split_path(base)
    path_parts = _split_path(path)
    common = 0
    while (
        common < len(base_parts)
        and common < len(path_parts)
        and base_parts[common] == path_parts[common]
    ):
        common += 1
    parts = [os.pardir] * (len(base_parts) - common) + path_parts[common:]
    return os.path.join(*parts) if parts else ""


# ============================================================================
# ghc-pkg
# ============================================================================


def with_package_db(env: TestEnv, runner: ProgramRunner) -> TestEnv:
    """
    Give the test its own package database.

    Pushes ``<tmp>/packagedb`` on the stack and initializes it with
    ``ghc-pkg init``. Does nothing if the test already has one.

    Returns:
        The environment to continue the test with
    """
    if env.have_package_db:
        return env

    new_env = env.evolve(
        package_db_stack=push_package_db(
            env.package_db_stack, PackageDBX.specific(env.package_db_dir)
        ),
        have_package_db=True,
    )
    ghc_pkg(new_env, runner, "init", [env.package_db_dir])
    return new_env


def without_cabal_package_db(env: TestEnv) -> TestEnv:
    """Stop passing the extra ``--package-db`` arguments to cabal."""
    return env.evolve(package_db_path=None)


def ghc_pkg_args(env: TestEnv, cmd: str, args: Sequence[str]) -> List[str]:
    """
    Arguments for ``ghc-pkg <cmd>`` against the test's database stack.

    Raises:
        PackageDBNotInitializedError: If :func:`with_package_db` was not used
        HarnessError: If the compiler under test is unknown
    """
    if not env.have_package_db:
        raise PackageDBNotInitializedError(
            "Must initialize package database using with_package_db"
        )
    if env.compiler is None:
        raise HarnessError("ghc-pkg: cannot detect version")
    return [cmd, *ghc_pkg_package_db_params(env.compiler, env.package_db_stack), *args]


def ghc_pkg(
    env: TestEnv, runner: ProgramRunner, cmd: str, args: Sequence[str] = ()
) -> Result:
    """Run ghc-pkg and require it to succeed."""
    logger.info(f"# ghc-pkg {cmd}")
    result = runner.run(env.ghc_pkg_path, ghc_pkg_args(env, cmd, args), cwd=env.tmp_dir)
    return require_success(result)


# ============================================================================
# Setup
# ============================================================================


def setup_args(env: TestEnv, cmd: str, args: Sequence[str] = ()) -> List[str]:
    """
    Arguments for ``Setup <cmd>``, run from the test's scratch directory.

    ``configure`` additionally selects the global database as the install
    target fallback, the programs under test, deterministic unit ids, the
    install prefix and the test's package database stack.

    Raises:
        PackageDBNotInitializedError: For ``register``/``copy`` without a
            package database
    """
    if cmd in ("register", "copy") and not env.have_package_db:
        raise PackageDBNotInitializedError(
            "Cannot register/copy without using with_package_db"
        )

    args = list(args)
    if cmd == "configure":
        args = [
            "--global",
            "--with-ghc",
            env.ghc_path,
            "--with-haddock",
            env.haddock_path,
            "--enable-deterministic",
            f"--prefix={env.prefix_dir}",
            *package_db_params(env.package_db_stack),
            *args,
        ]

    rel_dist_dir = definitely_make_relative(str(env.current_dir), str(env.dist_dir))
    work_dir_arg = ["--working-dir", env.work_dir] if env.work_dir else []
    return [
        *work_dir_arg,
        cmd,
        MARKED_VERBOSE,
        "--distdir",
        rel_dist_dir,
        *args,
    ]


def setup(
    env: TestEnv, runner: ProgramRunner, cmd: str, args: Sequence[str] = ()
) -> Result:
    """Run Setup and require it to succeed."""
    logger.info(f"# Setup {cmd}")
    result = runner.run(env.setup_path, setup_args(env, cmd, args), cwd=env.tmp_dir)
    return require_success(result)


def setup_build(env: TestEnv, runner: ProgramRunner, args: Sequence[str] = ()):
    """Configure then build."""
    setup(env, runner, "configure", args)
    setup(env, runner, "build")


def setup_install(env: TestEnv, runner: ProgramRunner, args: Sequence[str] = ()):
    """Configure, build, copy and register: a full install into the test db."""
    setup(env, runner, "configure", args)
    setup(env, runner, "build")
    setup(env, runner, "copy")
    setup(env, runner, "register")


# ============================================================================
# cabal
# ============================================================================


def cabal_args(
    env: TestEnv,
    cmd: str,
    args: Sequence[str] = (),
    global_args: Sequence[str] = (),
) -> List[str]:
    """Arguments for ``cabal <cmd>`` with the test's build dir and databases."""
    project_file = [f"--project-file={env.project_file}"] if env.project_file else []
    package_dbs = [f"--package-db={db}" for db in env.package_db_path or ()]
    builddir = ["--builddir", str(env.dist_dir)]
    install_args = ["-j1"] if cmd in ("v1-install", "v1-build") else []

    if cmd in _CABAL_PLAIN_COMMANDS:
        extra_args: List[str] = []
    elif cmd in ("v2-sdist", "path"):
        extra_args = project_file
    elif cmd in ("v2-clean", "clean"):
        extra_args = builddir + project_file
    elif cmd.startswith("v2-"):
        extra_args = builddir + ["-j1"] + project_file + package_dbs
    elif cmd.startswith("v1-"):
        extra_args = builddir + install_args
    else:
        extra_args = builddir + package_dbs + install_args

    store_dir = [f"--store-dir={env.store_dir}"] if env.store_dir else []
    return [*store_dir, *global_args, cmd, MARKED_VERBOSE, *extra_args, *args]


def cabal(
    env: TestEnv,
    runner: ProgramRunner,
    cmd: str,
    args: Sequence[str] = (),
    stdin: Optional[str] = None,
) -> Result:
    """Run cabal and require it to succeed."""
    logger.info(f"# cabal {cmd}")
    result = runner.run(
        env.cabal_path, cabal_args(env, cmd, args), cwd=env.current_dir, stdin=stdin
    )
    return require_success(result)
