"""
cabalkit - compiler capability and package database layer for Haskell builds.
"""

__version__ = "0.1.0"
