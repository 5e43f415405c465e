"""
Compiler descriptors and capability queries.

A :class:`Compiler` describes one compiler install. The modules in this
package answer which languages, extensions, flags and features it supports.
"""

from .identity import (
    CompilerFlavor,
    OtherCompiler,
    CompilerId,
    parse_flavor,
    parse_version,
    mk_version,
)

from .language import (
    Language,
    UnknownLanguage,
    Extension,
    parse_language,
    parse_extension,
)

from .descriptor import (
    Compiler,
    CompilerInfo,
)

from .resolver import (
    language_to_flags,
    unsupported_languages,
    extensions_to_flags,
    unsupported_extensions,
)

from .levels import (
    OptimisationLevel,
    DebugInfoLevel,
    ProfDetailLevel,
    ProfDetailOther,
    KNOWN_PROF_DETAIL_LEVELS,
    parse_optimisation_level,
    flag_to_optimisation_level,
    flag_to_debug_info_level,
    flag_to_prof_detail_level,
    show_prof_detail_level,
)

__all__ = [
    "CompilerFlavor",
    "OtherCompiler",
    "CompilerId",
    "parse_flavor",
    "parse_version",
    "mk_version",
    "Language",
    "UnknownLanguage",
    "Extension",
    "parse_language",
    "parse_extension",
    "Compiler",
    "CompilerInfo",
    "language_to_flags",
    "unsupported_languages",
    "extensions_to_flags",
    "unsupported_extensions",
    "OptimisationLevel",
    "DebugInfoLevel",
    "ProfDetailLevel",
    "ProfDetailOther",
    "KNOWN_PROF_DETAIL_LEVELS",
    "parse_optimisation_level",
    "flag_to_optimisation_level",
    "flag_to_debug_info_level",
    "flag_to_prof_detail_level",
    "show_prof_detail_level",
]
