"""
Tests for cabalkit.compiler.language module.
"""

import pytest

from cabalkit.compiler.language import (
    Extension,
    Language,
    UnknownLanguage,
    parse_extension,
    parse_language,
)


class TestParseLanguage:
    """Tests for language standard classification."""

    def test_known(self):
        assert parse_language("Haskell2010") is Language.HASKELL2010
        assert parse_language("GHC2024") is Language.GHC2024

    def test_case_sensitive(self):
        """Test names match exactly, like the compiler's -X flags."""
        assert parse_language("haskell2010") == UnknownLanguage("haskell2010")

    def test_unknown_preserved(self):
        assert str(parse_language("Haskell2030")) == "Haskell2030"


class TestParseExtension:
    """Tests for extension parsing."""

    def test_enabled(self):
        assert parse_extension("OverloadedStrings") == Extension("OverloadedStrings")

    def test_disabled(self):
        ext = parse_extension("NoImplicitPrelude")
        assert ext == Extension("ImplicitPrelude", enabled=False)
        assert str(ext) == "NoImplicitPrelude"

    def test_no_prefix_needs_upper_case(self):
        """Test extensions that merely start with "No" stay enabled."""
        ext = parse_extension("NondecreasingIndentation")
        assert ext.enabled
        assert ext.name == "NondecreasingIndentation"

    def test_empty(self):
        with pytest.raises(ValueError):
            parse_extension("  ")

    def test_negate(self):
        ext = Extension("CPP")
        assert ext.negate() == Extension("CPP", False)
        assert ext.negate().negate() == ext
