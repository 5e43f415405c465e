"""Configuration loading for cabalkit."""

from .parser import (
    CONFIG_FILENAME,
    BuildConfig,
    CabalKitConfig,
    CompilerConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "BuildConfig",
    "CabalKitConfig",
    "CompilerConfig",
    "load_config",
    "parse_config",
]
