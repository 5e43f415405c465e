"""
Flags command implementation.

Prints the compiler flags selecting the configured language standard and
extensions, warning about anything the compiler does not support.
"""

import logging

from cabalkit.cli.utils import get_compiler, load_project_config, print_warning
from cabalkit.compiler.resolver import (
    extensions_to_flags,
    language_to_flags,
    unsupported_extensions,
    unsupported_languages,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the flags command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if ``--strict`` and something is unsupported)
    """
    config = load_project_config(args)
    build = config.build
    compiler = get_compiler(
        args.ghc or config.compiler.path,
        flavor=None if args.ghc else config.compiler.flavor,
        cache_dir=config.cache_dir,
    )

    unsupported = [
        *(f"language {lang}" for lang in unsupported_languages(compiler, [build.language])),
        *(f"extension {ext}" for ext in unsupported_extensions(compiler, build.extensions)),
    ]
    for item in unsupported:
        print_warning(f"{compiler.show_id()} does not support {item}")

    flags = language_to_flags(compiler, build.language)
    flags += extensions_to_flags(compiler, build.extensions)
    print(" ".join(flags))

    if unsupported and args.strict:
        logger.error(f"{len(unsupported)} unsupported language setting(s)")
        return 1
    return 0
