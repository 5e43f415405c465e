"""
Info command implementation.

Probes a compiler (through the compiler cache) and prints its identity and
the answer to every capability query.
"""

import logging

from cabalkit.cli.utils import format_answer, get_compiler, load_project_config
from cabalkit.compiler.capabilities import capability_report

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_project_config(args)
    compiler_path = args.ghc or config.compiler.path
    flavor = None if args.ghc else config.compiler.flavor
    logger.debug(f"Arguments: {args}")

    compiler = get_compiler(
        compiler_path,
        flavor=flavor,
        cache_dir=config.cache_dir,
        use_cache=not args.no_cache,
    )

    print(f"Compiler:  {compiler.show_id()}")
    print(f"ABI tag:   {compiler.abi_tag or '-'}")
    compat = ", ".join(str(cid) for cid in compiler.compat) or "-"
    print(f"Compat:    {compat}")
    print(f"Languages: {', '.join(str(lang) for lang in compiler.languages)}")
    print(f"Extensions: {len(compiler.extensions)}")
    print()
    print("Capabilities:")

    report = capability_report(compiler)
    width = max(len(name) for name in report)
    for name, answer in report.items():
        print(f"  {name:<{width}}  {format_answer(answer)}")

    return 0
