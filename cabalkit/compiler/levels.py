"""
Optimisation, debug info and profiling detail levels.

Compilers that do not support a particular level simply cap it to the
closest level they do support; that capping happens where flags are
generated, not here.

Optimisation and debug info levels are small closed integer scales and reject
anything out of range. Profiling detail levels are matched by name, and
unknown names are kept as :class:`ProfDetailOther` so a newer compiler's
levels still pass through an older cabalkit.
"""

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Tuple, Union

from cabalkit.core.exceptions import LevelParseError


# ============================================================================
# Optimisation levels
# ============================================================================


class OptimisationLevel(IntEnum):
    """Optimisation level, encoded as its position (0..2)."""

    NONE = 0
    NORMAL = 1
    MAXIMUM = 2

    def show(self) -> str:
        return str(self.value)


def _int_to_level(value: int, enum_cls, what: str):
    low = min(enum_cls).value
    high = max(enum_cls).value
    if low <= value <= high:
        return enum_cls(value)
    raise LevelParseError(
        f"Bad {what} level: {value}. Valid values are {low}..{high}"
    )


_INT_RE = re.compile(r"-?[0-9]+")


def _parse_int(token: str, what: str) -> int:
    # ASCII digits with an optional leading "-" only
    if not _INT_RE.fullmatch(token.strip()):
        raise LevelParseError(f"Can't parse {what} level {token}")
    return int(token.strip())


def parse_optimisation_level(token: str) -> OptimisationLevel:
    """
    Parse an optimisation level token.

    Accepts ``true``/``false`` (``false`` is no optimisation, ``true`` is
    normal optimisation) or an integer in ``0..2``.

    Raises:
        LevelParseError: If the token is neither, or the integer is out of range

    Example:
        >>> parse_optimisation_level("2")
        <OptimisationLevel.MAXIMUM: 2>
        >>> parse_optimisation_level("false")
        <OptimisationLevel.NONE: 0>
    """
    lowered = token.strip().lower()
    if lowered == "true":
        return OptimisationLevel.NORMAL
    if lowered == "false":
        return OptimisationLevel.NONE
    value = _parse_int(token, "optimisation")
    return _int_to_level(value, OptimisationLevel, "optimisation")


def flag_to_optimisation_level(flag: Optional[str]) -> OptimisationLevel:
    """Parse an optional ``-O`` argument; a bare flag means normal optimisation."""
    if flag is None:
        return OptimisationLevel.NORMAL
    value = _parse_int(flag, "optimisation")
    return _int_to_level(value, OptimisationLevel, "optimisation")


# ============================================================================
# Debug info levels
# ============================================================================


class DebugInfoLevel(IntEnum):
    """Debug info level, encoded as its position (0..3)."""

    NONE = 0
    MINIMAL = 1
    NORMAL = 2
    MAXIMAL = 3

    def show(self) -> str:
        return str(self.value)


def flag_to_debug_info_level(flag: Optional[str]) -> DebugInfoLevel:
    """
    Parse an optional debug info level; a bare flag means normal debug info.

    Raises:
        LevelParseError: If the token is not an integer in ``0..3``
    """
    if flag is None:
        return DebugInfoLevel.NORMAL
    value = _parse_int(flag, "debug info")
    return _int_to_level(value, DebugInfoLevel, "debug info")


# ============================================================================
# Profiling detail levels
# ============================================================================


class ProfDetailLevel(Enum):
    """Known profiling cost-centre detail levels."""

    NONE = "none"
    DEFAULT = "default"
    EXPORTED_FUNCTIONS = "exported-functions"
    TOPLEVEL_FUNCTIONS = "toplevel-functions"
    ALL_FUNCTIONS = "all-functions"
    TOP_LATE = "late-toplevel"


@dataclass(frozen=True)
class ProfDetailOther:
    """A profiling detail level this version of cabalkit does not know."""

    name: str


ProfDetail = Union[ProfDetailLevel, ProfDetailOther]

# (primary name, aliases, level)
KNOWN_PROF_DETAIL_LEVELS: List[Tuple[str, List[str], ProfDetailLevel]] = [
    ("default", [], ProfDetailLevel.DEFAULT),
    ("none", [], ProfDetailLevel.NONE),
    ("exported-functions", ["exported"], ProfDetailLevel.EXPORTED_FUNCTIONS),
    ("toplevel-functions", ["toplevel", "top"], ProfDetailLevel.TOPLEVEL_FUNCTIONS),
    ("all-functions", ["all"], ProfDetailLevel.ALL_FUNCTIONS),
    ("late-toplevel", ["late"], ProfDetailLevel.TOP_LATE),
]

_PROF_DETAIL_NAMES = {
    name: level
    for primary, aliases, level in KNOWN_PROF_DETAIL_LEVELS
    for name in [primary, *aliases]
}


def flag_to_prof_detail_level(flag: Optional[str]) -> ProfDetail:
    """
    Parse a profiling detail level.

    Names and aliases match case-insensitively. An empty or missing token
    means the default level; any other unknown token is preserved verbatim.

    Example:
        >>> flag_to_prof_detail_level("Exported")
        <ProfDetailLevel.EXPORTED_FUNCTIONS: 'exported-functions'>
        >>> flag_to_prof_detail_level("late-ccs")
        ProfDetailOther(name='late-ccs')
    """
    if not flag:
        return ProfDetailLevel.DEFAULT
    level = _PROF_DETAIL_NAMES.get(flag.lower())
    if level is None:
        return ProfDetailOther(flag)
    return level


def show_prof_detail_level(level: ProfDetail) -> str:
    """Render a profiling detail level by its primary name."""
    if isinstance(level, ProfDetailOther):
        return level.name
    return level.value
