"""
Compiler identity: flavour, version and compiler id.

A compiler is identified by its flavour (which implementation it is) and its
version. Known flavours form a closed enumeration; anything else is kept as
an :class:`OtherCompiler` carrying the name it was reported with.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from packaging.version import Version

_VERSION_RE = re.compile(r"^\d+(\.\d+)*$")


class CompilerFlavor(str, Enum):
    """Known compiler implementations."""

    GHC = "ghc"
    GHCJS = "ghcjs"
    NHC = "nhc98"
    YHC = "yhc"
    HUGS = "hugs"
    HBC = "hbc"
    HELIUM = "helium"
    JHC = "jhc"
    LHC = "lhc"
    UHC = "uhc"
    ETA = "eta"
    MHS = "mhs"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class OtherCompiler:
    """A compiler flavour this package does not know about."""

    name: str

    def __str__(self) -> str:
        return self.name


Flavor = Union[CompilerFlavor, OtherCompiler]


def parse_flavor(name: str) -> Flavor:
    """
    Classify a flavour name.

    Matching against known flavours is case-insensitive; unknown names are
    preserved verbatim.

    Example:
        >>> parse_flavor("GHC")
        <CompilerFlavor.GHC: 'ghc'>
        >>> parse_flavor("mycc")
        OtherCompiler(name='mycc')
    """
    try:
        return CompilerFlavor(name.lower())
    except ValueError:
        return OtherCompiler(name)


def parse_version(text: str) -> Version:
    """
    Parse a dotted numeric compiler version such as ``9.10.1``.

    Raises:
        ValueError: If the text is not a numeric version
    """
    text = text.strip()
    if not _VERSION_RE.match(text):
        raise ValueError(
            f"Invalid compiler version: {text!r}. Expected format like '9.10.1'"
        )
    return Version(text)


def mk_version(*components: int) -> Version:
    """Build a version from its numeric components, e.g. ``mk_version(9, 10, 1)``."""
    return Version(".".join(str(c) for c in components))


@dataclass(frozen=True)
class CompilerId:
    """Compiler flavour and version."""

    flavor: Flavor
    version: Version

    def __str__(self) -> str:
        return f"{self.flavor}-{self.version}"

    @classmethod
    def parse(cls, text: str) -> "CompilerId":
        """
        Parse ``<flavor>-<version>`` (e.g. ``ghc-9.10.1``).

        The version is split off at the last dash so flavour names may
        themselves contain dashes.
        """
        flavor, sep, version = text.rpartition("-")
        if not sep or not flavor:
            raise ValueError(f"Invalid compiler id: {text!r}")
        return cls(parse_flavor(flavor), parse_version(version))

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {**flavor_to_dict(self.flavor), "version": str(self.version)}

    @classmethod
    def from_dict(cls, data: dict) -> "CompilerId":
        """Rebuild from :meth:`to_dict` output."""
        return cls(flavor_from_dict(data), parse_version(data["version"]))


def flavor_to_dict(flavor: Flavor) -> dict:
    """Serialize a flavour by stable tag."""
    if isinstance(flavor, OtherCompiler):
        return {"other": flavor.name}
    return {"flavor": flavor.value}


def flavor_from_dict(data: dict) -> Flavor:
    """Inverse of :func:`flavor_to_dict`."""
    if "other" in data:
        return OtherCompiler(data["other"])
    return CompilerFlavor(data["flavor"])
