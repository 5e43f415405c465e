"""
Shared utilities for CLI commands.

Configuration lookup, compiler resolution and consistent console output.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from cabalkit.compiler.cache import CompilerCache
from cabalkit.compiler.descriptor import Compiler
from cabalkit.compiler.identity import Flavor
from cabalkit.compiler.probe import CompilerProber
from cabalkit.config.parser import CONFIG_FILENAME, CabalKitConfig, load_config
from cabalkit.core.exceptions import CompilerProbeError
from cabalkit.core.filesystem import find_executable

logger = logging.getLogger(__name__)


def resolve_config_path(args) -> Path:
    """Configuration file from ``--config``, else ``<project-root>/cabalkit.yaml``."""
    if getattr(args, "config", None):
        return Path(args.config)
    return Path(args.project_root) / CONFIG_FILENAME


def load_project_config(args) -> CabalKitConfig:
    """
    Load the project configuration for a command.

    An explicitly given ``--config`` must exist; the default location is
    optional and falls back to built-in defaults.

    Raises:
        ConfigError: If the configuration is missing (when required) or invalid
    """
    return load_config(resolve_config_path(args), required=bool(args.config))


def resolve_compiler_path(compiler: str) -> Path:
    """
    Turn a configured compiler into an executable path.

    Bare names (``ghc``) are looked up on ``PATH``; anything with a directory
    part is used as given.

    Raises:
        CompilerProbeError: If a bare name is not on ``PATH``
    """
    path = Path(compiler)
    if path.parent != Path("."):
        return path

    found = find_executable(compiler)
    if found is None:
        raise CompilerProbeError(compiler, "not found on PATH")
    return found


def get_compiler(
    compiler: str,
    flavor: Optional[Flavor] = None,
    cache_dir: Optional[Path] = None,
    use_cache: bool = True,
) -> Compiler:
    """
    Probe a compiler, through the compiler cache unless ``use_cache`` is False.

    Raises:
        CompilerProbeError: If the compiler cannot be found or probed
    """
    compiler_path = resolve_compiler_path(compiler)
    if not use_cache:
        return CompilerProber().probe(compiler_path, flavor)
    return CompilerCache(cache_dir).get_or_probe(compiler_path, flavor)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def format_answer(value: Optional[bool]) -> str:
    """Render a capability answer: yes, no, or unknown."""
    if value is None:
        return "unknown"
    return "yes" if value else "no"
