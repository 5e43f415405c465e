"""
Tests for cabalkit.compiler.resolver module.
"""

from cabalkit.compiler.language import Extension, Language, UnknownLanguage
from cabalkit.compiler.resolver import (
    extension_to_flag,
    extensions_to_flags,
    language_to_flag,
    language_to_flags,
    unsupported_extensions,
    unsupported_languages,
)
from tests.fixtures.compilers import make_ghc


class TestLanguageFlags:
    """Tests for language standard flags."""

    def test_supported_language(self, ghc_9_10_1):
        assert language_to_flags(ghc_9_10_1, Language.HASKELL2010) == ["-XHaskell2010"]

    def test_default_language(self, ghc_9_10_1):
        """Test a missing language means Haskell98."""
        assert language_to_flags(ghc_9_10_1) == ["-XHaskell98"]

    def test_unsupported_language_dropped(self, ghc_9_10_1):
        assert language_to_flags(ghc_9_10_1, Language.GHC2024) == []
        assert language_to_flag(ghc_9_10_1, Language.GHC2024) is None

    def test_empty_flag_dropped(self, other_compiler):
        """Test a language supported without a flag yields no flag."""
        assert language_to_flags(other_compiler, Language.HASKELL2010) == []

    def test_unsupported_languages(self, ghc_9_10_1):
        languages = [Language.GHC2024, Language.HASKELL2010, UnknownLanguage("X")]
        assert unsupported_languages(ghc_9_10_1, languages) == [
            Language.GHC2024,
            UnknownLanguage("X"),
        ]


class TestExtensionFlags:
    """Tests for extension flags."""

    def test_flags_in_order(self, ghc_9_10_1):
        extensions = [Extension("OverloadedStrings"), Extension("ImplicitPrelude", False)]
        assert extensions_to_flags(ghc_9_10_1, extensions) == [
            "-XOverloadedStrings",
            "-XNoImplicitPrelude",
        ]

    def test_no_duplicates(self, ghc_9_10_1):
        extensions = [Extension("OverloadedStrings")] * 3
        assert extensions_to_flags(ghc_9_10_1, extensions) == ["-XOverloadedStrings"]

    def test_unsupported_and_flagless_dropped(self, ghc_9_10_1):
        """Test both kinds contribute nothing to the flags."""
        extensions = [Extension("ForeignFunctionInterface"), Extension("LinearTypes")]
        assert extensions_to_flags(ghc_9_10_1, extensions) == []
        assert extension_to_flag(ghc_9_10_1, Extension("ForeignFunctionInterface")) is None

    def test_unsupported_extensions(self, ghc_9_10_1):
        """Test flagless extensions are supported, unknown ones are not."""
        extensions = [Extension("ForeignFunctionInterface"), Extension("LinearTypes")]
        assert unsupported_extensions(ghc_9_10_1, extensions) == [Extension("LinearTypes")]

    def test_enabled_and_disabled_are_distinct(self):
        ghc = make_ghc(9, 8, 1, extensions={Extension("CPP"): "-XCPP"})
        assert unsupported_extensions(ghc, [Extension("CPP", False)]) == [
            Extension("CPP", False)
        ]
