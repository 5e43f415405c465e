"""
Symbolic paths.

A symbolic path is a path that has not been resolved yet, tagged with what
it is relative to. Package-relative paths (:attr:`PathAnchor.PROJECT`) must be
interpreted against the package's working directory before the current
process can use them; :attr:`PathAnchor.CWD` paths are already usable as-is.
Absolute paths ignore their anchor.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class PathAnchor(str, Enum):
    """What a relative symbolic path is relative to."""

    PROJECT = "project"
    CWD = "cwd"


@dataclass(frozen=True, order=True)
class SymbolicPath:
    """
    An unresolved path and its anchor.

    Attributes:
        path: Path text, relative or absolute, exactly as given
        anchor: What a relative ``path`` is relative to
    """

    path: str
    anchor: PathAnchor = PathAnchor.PROJECT

    def __str__(self) -> str:
        return self.path

    def is_absolute(self) -> bool:
        return os.path.isabs(self.path)

    def relative_path(self) -> Optional[str]:
        """The path if it is relative, None if it is absolute."""
        return None if self.is_absolute() else self.path

    def to_dict(self) -> dict:
        return {"path": self.path, "anchor": self.anchor.value}

    @classmethod
    def from_dict(cls, data: dict) -> "SymbolicPath":
        return cls(data["path"], PathAnchor(data.get("anchor", PathAnchor.PROJECT)))


WorkDir = Optional[Union[str, os.PathLike]]


def make_symbolic_path(
    path: Union[str, os.PathLike], anchor: PathAnchor = PathAnchor.PROJECT
) -> SymbolicPath:
    """Wrap a path as a symbolic path without touching the filesystem."""
    return SymbolicPath(os.fspath(path), anchor)


def interpret_symbolic_path(work_dir: WorkDir, path: SymbolicPath) -> str:
    """
    Turn a symbolic path into one the current process can use.

    Package-relative paths are joined onto ``work_dir`` (when there is one);
    absolute and CWD-anchored paths are returned unchanged. Pure: the
    filesystem is not consulted and nothing is normalized.

    Example:
        >>> interpret_symbolic_path("pkg", SymbolicPath("dist/db"))
        'pkg/dist/db'
        >>> interpret_symbolic_path("pkg", SymbolicPath("/abs/db"))
        '/abs/db'
    """
    if work_dir is None or path.anchor is PathAnchor.CWD or path.is_absolute():
        return path.path
    return os.path.join(os.fspath(work_dir), path.path)
