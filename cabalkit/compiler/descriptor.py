"""
Compiler descriptor.

A :class:`Compiler` is the immutable record produced by probing a compiler
install: its identity, ABI tag, the compilers it claims compatibility with,
the language standards and extensions it accepts (with the flag that turns
each one on) and a free-form property bag used by capability queries.

The descriptor is persisted between runs (see :mod:`cabalkit.compiler.cache`),
so :meth:`Compiler.to_dict` emits fields in a fixed order and maps as ordered
lists of pairs, making the serialized form deterministic.

Example:
    >>> from cabalkit.compiler.identity import CompilerFlavor, CompilerId, mk_version
    >>> ghc = Compiler(
    ...     id=CompilerId(CompilerFlavor.GHC, mk_version(9, 10, 1)),
    ...     languages={Language.HASKELL2010: "-XHaskell2010"},
    ... )
    >>> ghc.show_id()
    'ghc-9.10.1'
"""

import collections.abc
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from packaging.version import Version

from cabalkit.compiler.identity import CompilerId, Flavor
from cabalkit.compiler.language import (
    Extension,
    LanguageLike,
    parse_extension,
    parse_language,
)

CompilerFlag = str


class FrozenMapping(collections.abc.Mapping):
    """Read-only, picklable copy of a mapping."""

    def __init__(self, data=()):
        self._data = dict(data)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"FrozenMapping({self._data!r})"


@dataclass(frozen=True)
class CompilerInfo:
    """Summary of a compiler handed to the dependency solver."""

    id: CompilerId
    abi_tag: Optional[str]
    compat: Optional[Tuple[CompilerId, ...]]
    languages: Optional[Tuple[LanguageLike, ...]]
    extensions: Optional[Tuple[Extension, ...]]


@dataclass(frozen=True)
class Compiler:
    """
    Everything known about one compiler install.

    Attributes:
        id: Compiler flavour and version
        abi_tag: Tag distinguishing incompatible ABIs of the same id, or None
        compat: Other compilers this one claims to be compatible with,
            in priority order
        languages: Supported language standards and the flag enabling each
        extensions: Supported extensions; a ``None`` flag means the
            extension is on without passing anything
        properties: Key/value capability bag reported by the compiler
    """

    id: CompilerId
    abi_tag: Optional[str] = None
    compat: Tuple[CompilerId, ...] = ()
    languages: Mapping[LanguageLike, CompilerFlag] = field(
        default_factory=dict, hash=False
    )
    extensions: Mapping[Extension, Optional[CompilerFlag]] = field(
        default_factory=dict, hash=False
    )
    properties: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Copy into read-only mappings so shared descriptors cannot be mutated
        object.__setattr__(self, "compat", tuple(self.compat))
        object.__setattr__(self, "languages", FrozenMapping(self.languages))
        object.__setattr__(self, "extensions", FrozenMapping(self.extensions))
        object.__setattr__(self, "properties", FrozenMapping(self.properties))

    @property
    def flavor(self) -> Flavor:
        return self.id.flavor

    @property
    def version(self) -> Version:
        return self.id.version

    def show_id(self) -> str:
        """Return ``<flavor>-<version>``."""
        return str(self.id)

    def show_id_with_abi(self) -> str:
        """Return the compiler id followed by ``-<abi tag>`` if there is one."""
        if self.abi_tag:
            return f"{self.id}-{self.abi_tag}"
        return str(self.id)

    def compat_flavor(self, flavor: Flavor) -> bool:
        """
        Is this compiler the given flavour, or does it claim compatibility with it?

        For example a GHCJS compiler that lists a GHC id in ``compat`` is
        compatible with GHC.
        """
        return flavor == self.flavor or any(c.flavor == flavor for c in self.compat)

    def compat_version(self, flavor: Flavor) -> Optional[Version]:
        """
        Version of the given flavour this compiler is (or claims to be).

        Returns the compiler's own version if the flavour matches, otherwise
        the version of the first ``compat`` entry with that flavour, or None.
        """
        if self.flavor == flavor:
            return self.version
        for compat_id in self.compat:
            if compat_id.flavor == flavor:
                return compat_id.version
        return None

    def info(self) -> CompilerInfo:
        """Summarize the compiler for consumers that only need names."""
        return CompilerInfo(
            id=self.id,
            abi_tag=self.abi_tag,
            compat=self.compat,
            languages=tuple(self.languages),
            extensions=tuple(self.extensions),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id.to_dict(),
            "abi_tag": self.abi_tag,
            "compat": [c.to_dict() for c in self.compat],
            "languages": [[str(lang), flag] for lang, flag in self.languages.items()],
            "extensions": [
                [str(ext), flag] for ext, flag in self.extensions.items()
            ],
            "properties": [[key, value] for key, value in self.properties.items()],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Compiler":
        """
        Rebuild a descriptor from :meth:`to_dict` output.

        Raises:
            KeyError, TypeError, ValueError: If the data is malformed
        """
        return cls(
            id=CompilerId.from_dict(data["id"]),
            abi_tag=data.get("abi_tag"),
            compat=tuple(CompilerId.from_dict(c) for c in data.get("compat", [])),
            languages={
                parse_language(name): flag for name, flag in data.get("languages", [])
            },
            extensions={
                parse_extension(name): flag
                for name, flag in data.get("extensions", [])
            },
            properties={key: value for key, value in data.get("properties", [])},
        )
