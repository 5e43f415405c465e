"""
Package database references.

Some compilers have one global collection of installed packages; GHC also
has a per-user database and lets you create arbitrary databases elsewhere on
disk, which is how isolated builds are done. :class:`PackageDBX` refers to
one of these, and is generic over how a specific database's path is
represented:

- ``PackageDBX[SymbolicPath]`` (alias :data:`PackageDB`) as read from
  configuration, possibly package-relative
- ``PackageDBX[str]`` (alias :data:`PackageDBCWD`) resolved against the
  current working directory and ready to hand to a subprocess
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Generic, Optional, TypeVar

from cabalkit.packagedb.paths import SymbolicPath

P = TypeVar("P")
Q = TypeVar("Q")


class PackageDBKind(IntEnum):
    """Which database a reference points at; declaration order is sort order."""

    GLOBAL = 0
    USER = 1
    SPECIFIC = 2


@dataclass(frozen=True, order=True)
class PackageDBX(Generic[P]):
    """
    A package database reference: global, user, or a specific path.

    Use :data:`GLOBAL_PACKAGE_DB`, :data:`USER_PACKAGE_DB` and
    :meth:`specific` rather than the constructor.

    Equality, ordering and hashing are structural; global sorts before user,
    which sorts before specific databases (ordered by path).
    """

    kind: PackageDBKind
    path: Optional[P] = None

    def __post_init__(self):
        if (self.kind is PackageDBKind.SPECIFIC) != (self.path is not None):
            raise ValueError(
                f"Only specific package databases carry a path: {self.kind.name} "
                f"with path {self.path!r}"
            )

    @classmethod
    def specific(cls, path: P) -> "PackageDBX[P]":
        return cls(PackageDBKind.SPECIFIC, path)

    @property
    def is_global(self) -> bool:
        return self.kind is PackageDBKind.GLOBAL

    @property
    def is_user(self) -> bool:
        return self.kind is PackageDBKind.USER

    @property
    def is_specific(self) -> bool:
        return self.kind is PackageDBKind.SPECIFIC

    def map(self, fn: Callable[[P], Q]) -> "PackageDBX[Q]":
        """Transform the path of a specific database; global and user pass through."""
        if self.path is None:
            return self  # type: ignore[return-value]
        return PackageDBX(self.kind, fn(self.path))

    def __repr__(self) -> str:
        if self.path is None:
            return f"{self.kind.name.capitalize()}PackageDB"
        return f"SpecificPackageDB({self.path!r})"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {"kind": self.kind.name.lower()}
        if self.path is not None:
            data["path"] = (
                self.path.to_dict() if isinstance(self.path, SymbolicPath) else self.path
            )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PackageDBX":
        """Rebuild from :meth:`to_dict` output."""
        kind = PackageDBKind[data["kind"].upper()]
        path = data.get("path")
        if isinstance(path, dict):
            path = SymbolicPath.from_dict(path)
        return cls(kind, path)


GLOBAL_PACKAGE_DB: PackageDBX = PackageDBX(PackageDBKind.GLOBAL)
USER_PACKAGE_DB: PackageDBX = PackageDBX(PackageDBKind.USER)

PackageDB = PackageDBX[SymbolicPath]
PackageDBCWD = PackageDBX[str]
