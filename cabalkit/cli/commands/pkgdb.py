"""
Pkgdb command implementation.

Renders the configured package database stack as Setup/cabal or ghc-pkg
arguments and names the database packages would be registered into.
"""

import logging

from cabalkit.cli.utils import get_compiler, load_project_config
from cabalkit.packagedb.stack import (
    absolute_package_db_paths,
    ghc_pkg_package_db_params,
    interpret_package_db_stack,
    package_db_params,
    registration_package_db,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the pkgdb command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_project_config(args)
    stack = config.package_db_stack()
    work_dir = args.project_root

    if args.absolute:
        stack = absolute_package_db_paths(work_dir, stack)
    resolved = interpret_package_db_stack(work_dir, stack)
    logger.debug(f"Package db stack: {list(resolved)}")

    if args.ghc_pkg:
        compiler = get_compiler(
            args.ghc or config.compiler.path,
            flavor=None if args.ghc else config.compiler.flavor,
            cache_dir=config.cache_dir,
        )
        params = ghc_pkg_package_db_params(compiler, resolved)
    else:
        params = package_db_params(resolved)

    for param in params:
        print(param)

    if resolved:
        print(f"# register into: {registration_package_db(resolved)!r}")
    else:
        logger.warning("Package db stack is empty; nothing can be registered")
    return 0
