"""
cabalkit command-line interface.

Commands:
    info   Probe a compiler and show its capabilities
    flags  Translate the configured language and extensions to compiler flags
    pkgdb  Render the configured package database stack
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
