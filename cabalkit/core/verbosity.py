"""Verbosity levels and flags, and their mapping onto :mod:`logging`."""

import logging
from enum import Enum, IntEnum
from typing import Iterable, Optional


class VerbosityLevel(IntEnum):
    """How much output to produce, in increasing order."""

    SILENT = 0
    NORMAL = 1
    VERBOSE = 2
    DEAFENING = 3


class VerbosityFlag(Enum):
    """Modifiers that can be attached to a verbosity level."""

    CALL_STACK = "callstack"
    CALL_SITE = "callsite"
    NO_WRAP = "nowrap"
    MARK_OUTPUT = "markoutput"
    TIMESTAMP = "timestamp"
    STDERR = "stderr"
    NO_WARN = "nowarn"


_LOGGING_LEVELS = {
    VerbosityLevel.SILENT: logging.ERROR,
    VerbosityLevel.NORMAL: logging.INFO,
    VerbosityLevel.VERBOSE: logging.DEBUG,
    VerbosityLevel.DEAFENING: logging.DEBUG,
}


def parse_verbosity(token: Optional[str]) -> VerbosityLevel:
    """
    Parse a verbosity token.

    Accepts the level names (``silent``, ``normal``, ``verbose``,
    ``deafening``) or their numeric form ``0``-``3``. ``None`` means
    :attr:`VerbosityLevel.NORMAL`.

    Raises:
        ValueError: If the token is not a known level
    """
    if token is None:
        return VerbosityLevel.NORMAL
    token = token.strip().lower()
    if token.isdigit():
        value = int(token)
        if value > VerbosityLevel.DEAFENING:
            raise ValueError(f"Bad verbosity: {token}. Valid values are 0..3")
        return VerbosityLevel(value)
    try:
        return VerbosityLevel[token.upper()]
    except KeyError:
        raise ValueError(
            f"Bad verbosity: {token}. Valid values are "
            f"{', '.join(level.name.lower() for level in VerbosityLevel)}"
        ) from None


def logging_level(level: VerbosityLevel) -> int:
    """Return the :mod:`logging` level used for a verbosity level."""
    return _LOGGING_LEVELS[level]


def show_verbosity(level: VerbosityLevel, flags: Iterable[VerbosityFlag] = ()) -> str:
    """
    Render a verbosity as a single ``-v`` argument.

    Example:
        >>> show_verbosity(VerbosityLevel.VERBOSE, [VerbosityFlag.MARK_OUTPUT])
        '-vverbose +markoutput'
    """
    parts = [f"-v{level.name.lower()}"]
    parts.extend(f"+{flag.value}" for flag in flags)
    return " ".join(parts)
