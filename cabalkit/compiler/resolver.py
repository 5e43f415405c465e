"""
Language and extension flag resolution.

Two kinds of function live here and are deliberately kept apart:

- ``*_to_flags`` compute the flags to pass for what the compiler supports and
  silently drop anything it does not.
- ``unsupported_*`` report what the compiler does not support, for callers
  that want to warn or fail.
"""

from typing import Iterable, List, Optional

from cabalkit.compiler.descriptor import Compiler, CompilerFlag
from cabalkit.compiler.language import DEFAULT_LANGUAGE, Extension, LanguageLike


def language_to_flag(
    compiler: Compiler, language: LanguageLike
) -> Optional[CompilerFlag]:
    """Look up the flag for a language standard, or None if unsupported."""
    return compiler.languages.get(language)


def language_to_flags(
    compiler: Compiler, language: Optional[LanguageLike] = None
) -> List[CompilerFlag]:
    """
    Flags selecting a language standard.

    Args:
        compiler: Compiler descriptor
        language: Language standard (defaults to Haskell98)

    Returns:
        The flag in a one-element list, or an empty list when the compiler
        does not support the language or needs no flag for it
    """
    if language is None:
        language = DEFAULT_LANGUAGE
    flag = language_to_flag(compiler, language)
    return [flag] if flag else []


def unsupported_languages(
    compiler: Compiler, languages: Iterable[LanguageLike]
) -> List[LanguageLike]:
    """Return the languages the compiler does not support, in input order."""
    return [lang for lang in languages if lang not in compiler.languages]


def extension_to_flag(
    compiler: Compiler, extension: Extension
) -> Optional[CompilerFlag]:
    """
    Look up the flag for an extension.

    Does not distinguish an unsupported extension from one that is on
    without a flag; both give None. Use :func:`unsupported_extensions` for that.
    """
    return compiler.extensions.get(extension)


def extensions_to_flags(
    compiler: Compiler, extensions: Iterable[Extension]
) -> List[CompilerFlag]:
    """
    Flags enabling the supported extensions.

    Extensions supported without a flag contribute nothing, unsupported
    extensions are dropped. The result has no duplicates and keeps the
    order in which flags first appear.
    """
    flags: List[CompilerFlag] = []
    for extension in extensions:
        flag = extension_to_flag(compiler, extension)
        if flag and flag not in flags:
            flags.append(flag)
    return flags


def unsupported_extensions(
    compiler: Compiler, extensions: Iterable[Extension]
) -> List[Extension]:
    """Return the extensions the compiler does not support, in input order."""
    return [ext for ext in extensions if ext not in compiler.extensions]
