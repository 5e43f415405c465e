"""YAML configuration parser for cabalkit.

This module provides parsing and validation for cabalkit.yaml configuration files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from cabalkit.compiler.identity import Flavor, parse_flavor
from cabalkit.compiler.language import (
    DEFAULT_LANGUAGE,
    Extension,
    LanguageLike,
    parse_extension,
    parse_language,
)
from cabalkit.compiler.levels import (
    DebugInfoLevel,
    OptimisationLevel,
    ProfDetail,
    ProfDetailLevel,
    flag_to_debug_info_level,
    flag_to_prof_detail_level,
    parse_optimisation_level,
)
from cabalkit.core.exceptions import ConfigError, LevelParseError
from cabalkit.packagedb.stack import PackageDBStack, interpret_package_db_flags

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "cabalkit.yaml"
SUPPORTED_VERSIONS = (1,)


@dataclass
class CompilerConfig:
    """Which compiler to use."""

    path: str = "ghc"  # executable name or path
    flavor: Optional[Flavor] = None  # override the detected flavour


@dataclass
class BuildConfig:
    """Language and code generation settings."""

    language: LanguageLike = DEFAULT_LANGUAGE
    extensions: List[Extension] = field(default_factory=list)
    optimization: OptimisationLevel = OptimisationLevel.NORMAL
    debug_info: DebugInfoLevel = DebugInfoLevel.NONE
    profiling_detail: ProfDetail = ProfDetailLevel.DEFAULT


@dataclass
class CabalKitConfig:
    """Complete cabalkit configuration."""

    version: int = 1
    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    package_db_flags: List[str] = field(default_factory=list)
    user_install: bool = False
    build: BuildConfig = field(default_factory=BuildConfig)
    cache_dir: Optional[Path] = None

    def package_db_stack(self) -> PackageDBStack:
        """The package database stack the ``package-dbs`` entries describe."""
        return interpret_package_db_flags(self.user_install, self.package_db_flags)


def parse_config(config_path: Path) -> CabalKitConfig:
    """
    Parse cabalkit.yaml configuration file.

    Args:
        config_path: Path to cabalkit.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If the file is missing or the configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Configuration file is empty: {config_path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping: {config_path}")

    return _parse_and_validate(data)


def load_config(config_path: Path, required: bool = False) -> CabalKitConfig:
    """
    Load configuration, falling back to defaults when the file is absent.

    Args:
        config_path: Path to cabalkit.yaml
        required: If True, a missing file is an error

    Raises:
        ConfigError: If required and missing, or if the file is invalid
    """
    if not config_path.exists() and not required:
        logger.debug(f"Config file not found (optional): {config_path}")
        return CabalKitConfig()

    logger.debug(f"Loading configuration from {config_path}")
    return parse_config(config_path)


def _parse_and_validate(data: Dict[str, Any]) -> CabalKitConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version not in SUPPORTED_VERSIONS:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    package_dbs = data.get("package-dbs", [])
    if not isinstance(package_dbs, list):
        raise ConfigError("package-dbs must be a list")

    cache_dir = data.get("cache-dir")

    return CabalKitConfig(
        version=version,
        compiler=_parse_compiler_config(data.get("compiler") or {}),
        package_db_flags=[str(token) for token in package_dbs],
        user_install=bool(data.get("user-install", False)),
        build=_parse_build_config(data.get("build") or {}),
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
    )


def _parse_compiler_config(data: Union[str, Dict[str, Any]]) -> CompilerConfig:
    """Parse compiler configuration; a bare string is the compiler path."""
    if isinstance(data, str):
        return CompilerConfig(path=data)
    if not isinstance(data, dict):
        raise ConfigError("compiler must be a path or a mapping")

    flavor = data.get("flavor")
    return CompilerConfig(
        path=str(data.get("path", "ghc")),
        flavor=parse_flavor(str(flavor)) if flavor else None,
    )


def _level_token(value: Any) -> str:
    # YAML reads `true`/`1` as bool/int
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_build_config(data: Dict[str, Any]) -> BuildConfig:
    """Parse build configuration."""
    if not isinstance(data, dict):
        raise ConfigError("build must be a mapping")

    extensions = data.get("extensions", [])
    if not isinstance(extensions, list):
        raise ConfigError("build.extensions must be a list")

    try:
        parsed_extensions = [parse_extension(str(ext)) for ext in extensions]
    except ValueError as e:
        raise ConfigError(f"Invalid extension in build.extensions: {e}") from e

    config = BuildConfig(extensions=parsed_extensions)
    if "language" in data:
        config.language = parse_language(str(data["language"]))

    try:
        if "optimization" in data:
            config.optimization = parse_optimisation_level(
                _level_token(data["optimization"])
            )
        if "debug-info" in data:
            config.debug_info = flag_to_debug_info_level(
                _level_token(data["debug-info"])
            )
    except LevelParseError as e:
        raise ConfigError(f"Invalid build level: {e}") from e

    if "profiling-detail" in data:
        config.profiling_detail = flag_to_prof_detail_level(
            str(data["profiling-detail"] or "")
        )

    return config
