"""
Language standards and language extensions.

Language standards are a small closed set plus an open ``UnknownLanguage``
case. Extensions are identified by name and may be switched on or off
(``OverloadedStrings`` vs. ``NoOverloadedStrings``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Language(str, Enum):
    """Known language standards."""

    HASKELL98 = "Haskell98"
    HASKELL2010 = "Haskell2010"
    GHC2021 = "GHC2021"
    GHC2024 = "GHC2024"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class UnknownLanguage:
    """A language standard name this package does not recognise."""

    name: str

    def __str__(self) -> str:
        return self.name


LanguageLike = Union[Language, UnknownLanguage]

#: Used when a component does not name a language standard.
DEFAULT_LANGUAGE = Language.HASKELL98


def parse_language(name: str) -> LanguageLike:
    """Classify a language standard name (case-sensitive, like the compiler)."""
    try:
        return Language(name)
    except ValueError:
        return UnknownLanguage(name)


@dataclass(frozen=True, order=True)
class Extension:
    """
    A language extension, enabled or disabled.

    Attributes:
        name: Extension name without any ``No`` prefix
        enabled: False for the ``No<name>`` form
    """

    name: str
    enabled: bool = True

    def __str__(self) -> str:
        return self.name if self.enabled else f"No{self.name}"

    def negate(self) -> "Extension":
        """Return the opposite form of this extension."""
        return Extension(self.name, not self.enabled)


def parse_extension(text: str) -> Extension:
    """
    Parse an extension name.

    A leading ``No`` followed by an upper-case letter marks the disabled
    form, so ``NoCPP`` disables ``CPP`` while ``NondecreasingIndentation``
    is an ordinary enabled extension.

    Example:
        >>> parse_extension("NoImplicitPrelude")
        Extension(name='ImplicitPrelude', enabled=False)
    """
    text = text.strip()
    if not text:
        raise ValueError("Extension name cannot be empty")
    if text.startswith("No") and len(text) > 2 and text[2].isupper():
        return Extension(text[2:], enabled=False)
    return Extension(text)
