"""
Entry point for running the cabalkit CLI as a module.

Usage: python -m cabalkit [command] [options]
"""

from cabalkit.cli.parser import main

if __name__ == "__main__":
    main()
