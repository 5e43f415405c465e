"""
cabalkit CLI argument parser.

This module implements the command-line interface for cabalkit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cabalkit import __version__
from cabalkit.core.exceptions import CabalKitError
from cabalkit.core.verbosity import VerbosityLevel, logging_level, parse_verbosity

logger = logging.getLogger(__name__)


class CLI:
    """cabalkit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="cabalkit",
            description="cabalkit - Haskell compiler capabilities and package databases",
            epilog='Use "cabalkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"cabalkit {__version__}"
        )
        parser.add_argument(
            "--verbose", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "-v",
            "--verbosity",
            type=parse_verbosity,
            metavar="LEVEL",
            help="Verbosity: silent, normal, verbose, deafening (or 0-3)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./cabalkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_info_command(subparsers)
        self._add_flags_command(subparsers)
        self._add_pkgdb_command(subparsers)

        return parser

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show compiler identity and capabilities",
            description="Probe a compiler and report what it supports",
        )
        parser.add_argument(
            "--ghc",
            metavar="PATH",
            help="Compiler to probe (default: from configuration, else ghc)",
        )
        parser.add_argument(
            "--no-cache",
            action="store_true",
            help="Probe the compiler even if a cached descriptor exists",
        )

    def _add_flags_command(self, subparsers):
        """Add 'flags' subcommand."""
        parser = subparsers.add_parser(
            "flags",
            help="Show compiler flags for the configured language",
            description="Translate the configured language and extensions to flags",
        )
        parser.add_argument(
            "--ghc",
            metavar="PATH",
            help="Compiler to translate for (default: from configuration, else ghc)",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail if the language or any extension is unsupported",
        )

    def _add_pkgdb_command(self, subparsers):
        """Add 'pkgdb' subcommand."""
        parser = subparsers.add_parser(
            "pkgdb",
            help="Show package database arguments",
            description="Render the configured package database stack",
        )
        parser.add_argument(
            "--ghc-pkg",
            action="store_true",
            help="Render arguments for ghc-pkg instead of Setup/cabal",
        )
        parser.add_argument(
            "--absolute",
            action="store_true",
            help="Canonicalize database paths (they must exist)",
        )
        parser.add_argument(
            "--ghc",
            metavar="PATH",
            help="Compiler whose ghc-pkg is targeted (with --ghc-pkg)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except CabalKitError as e:
            logger.error(f"Error: {e}")
            return 1

    def _verbosity(self, args) -> VerbosityLevel:
        if args.verbosity is not None:
            return args.verbosity
        if args.verbose:
            return VerbosityLevel.VERBOSE
        if args.quiet:
            return VerbosityLevel.SILENT
        return VerbosityLevel.NORMAL

    def _configure_logging(self, args):
        """
        Configure logging from the verbosity options.

        ``--verbosity`` wins over ``--verbose``/``--quiet``.

        Args:
            args: Parsed arguments with verbosity options
        """
        verbosity = self._verbosity(args)
        if verbosity >= VerbosityLevel.VERBOSE:
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif verbosity == VerbosityLevel.SILENT:
            format_str = "%(levelname)s: %(message)s"
        else:
            format_str = "%(message)s"

        logging.basicConfig(
            level=logging_level(verbosity),
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "info": "cabalkit.cli.commands.info",
            "flags": "cabalkit.cli.commands.flags",
            "pkgdb": "cabalkit.cli.commands.pkgdb",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
