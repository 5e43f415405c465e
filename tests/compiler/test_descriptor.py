"""
Tests for cabalkit.compiler.descriptor module.
"""

import copy
import json
import pickle

import pytest

from cabalkit.compiler.descriptor import Compiler, CompilerInfo, FrozenMapping
from cabalkit.compiler.identity import CompilerFlavor, CompilerId, mk_version
from cabalkit.compiler.language import Extension, Language, UnknownLanguage


class TestCompiler:
    """Tests for the Compiler descriptor."""

    def test_show_id(self, ghc_9_10_1):
        """Test id rendering with and without the ABI tag."""
        assert ghc_9_10_1.show_id() == "ghc-9.10.1"
        assert ghc_9_10_1.show_id_with_abi() == "ghc-9.10.1-a1b2"

    def test_show_id_without_abi(self, ghc_9_6_4):
        """Test no trailing dash without an ABI tag."""
        assert ghc_9_6_4.show_id_with_abi() == "ghc-9.6.4"

    def test_flavor_and_version(self, ghc_9_10_1):
        assert ghc_9_10_1.flavor is CompilerFlavor.GHC
        assert ghc_9_10_1.version == mk_version(9, 10, 1)

    def test_mappings_are_read_only(self, ghc_9_10_1):
        """Test the descriptor cannot be mutated through its mappings."""
        with pytest.raises(TypeError):
            ghc_9_10_1.properties["Support Backpack"] = "NO"
        with pytest.raises(TypeError):
            del ghc_9_10_1.languages[Language.HASKELL98]
        assert ghc_9_10_1.properties["Support Backpack"] == "YES"

    def test_source_dict_is_copied(self):
        """Test later changes to the input dict do not leak in."""
        properties = {"a": "YES"}
        compiler = Compiler(
            id=CompilerId(CompilerFlavor.GHC, mk_version(9, 8)), properties=properties
        )
        properties["a"] = "NO"
        assert compiler.properties["a"] == "YES"

    def test_compat_flavor(self, ghcjs_compiler):
        """Test a GHCJS compiler is compatible with GHC through compat."""
        assert ghcjs_compiler.compat_flavor(CompilerFlavor.GHCJS)
        assert ghcjs_compiler.compat_flavor(CompilerFlavor.GHC)
        assert not ghcjs_compiler.compat_flavor(CompilerFlavor.UHC)

    def test_compat_version(self, ghcjs_compiler):
        """Test own version wins, compat version otherwise."""
        assert ghcjs_compiler.compat_version(CompilerFlavor.GHCJS) == mk_version(
            8, 6, 0, 1
        )
        assert ghcjs_compiler.compat_version(CompilerFlavor.GHC) == mk_version(8, 6, 5)
        assert ghcjs_compiler.compat_version(CompilerFlavor.UHC) is None

    def test_info(self, ghc_9_10_1):
        """Test the solver summary lists language and extension names."""
        info = ghc_9_10_1.info()
        assert info.id == ghc_9_10_1.id
        assert Language.HASKELL2010 in info.languages
        assert Extension("OverloadedStrings") in info.extensions

    def test_info_fields(self, ghc_9_10_1):
        """Test the summary carries id, ABI tag, compat and the exact key sets."""
        assert ghc_9_10_1.info() == CompilerInfo(
            id=CompilerId(CompilerFlavor.GHC, mk_version(9, 10, 1)),
            abi_tag="a1b2",
            compat=(),
            languages=(Language.HASKELL98, Language.HASKELL2010, Language.GHC2021),
            extensions=(
                Extension("OverloadedStrings"),
                Extension("OverloadedStrings", False),
                Extension("ImplicitPrelude"),
                Extension("ImplicitPrelude", False),
                Extension("ForeignFunctionInterface"),
            ),
        )

    def test_info_compat(self, ghcjs_compiler):
        info = ghcjs_compiler.info()
        assert info.id == CompilerId(CompilerFlavor.GHCJS, mk_version(8, 6, 0, 1))
        assert info.abi_tag is None
        assert info.compat == (CompilerId(CompilerFlavor.GHC, mk_version(8, 6, 5)),)
        assert info.languages == (Language.HASKELL2010,)
        assert info.extensions == ()

    def test_deepcopy(self, ghc_9_10_1):
        clone = copy.deepcopy(ghc_9_10_1)
        assert clone == ghc_9_10_1
        assert clone.properties is not ghc_9_10_1.properties

    def test_pickle(self, ghc_9_10_1):
        restored = pickle.loads(pickle.dumps(ghc_9_10_1))
        assert restored == ghc_9_10_1
        assert isinstance(restored.languages, FrozenMapping)
        with pytest.raises(TypeError):
            restored.languages[Language.HASKELL98] = "-XHaskell98"


class TestCompilerSerialization:
    """Tests for to_dict/from_dict."""

    def test_round_trip(self, ghc_9_10_1):
        """Test from_dict inverts to_dict."""
        assert Compiler.from_dict(ghc_9_10_1.to_dict()) == ghc_9_10_1

    def test_round_trip_through_json(self, ghcjs_compiler):
        """Test the serialized form survives JSON encoding."""
        data = json.loads(json.dumps(ghcjs_compiler.to_dict()))
        assert Compiler.from_dict(data) == ghcjs_compiler

    def test_key_order_is_fixed(self, ghc_9_10_1):
        """Test serialization is deterministic."""
        assert list(ghc_9_10_1.to_dict()) == [
            "id",
            "abi_tag",
            "compat",
            "languages",
            "extensions",
            "properties",
        ]
        assert json.dumps(ghc_9_10_1.to_dict()) == json.dumps(ghc_9_10_1.to_dict())

    def test_disabled_extension_and_unknown_language(self):
        """Test No-extensions and unknown languages survive a round trip."""
        compiler = Compiler(
            id=CompilerId(CompilerFlavor.GHC, mk_version(9, 14)),
            languages={UnknownLanguage("Haskell2030"): "-XHaskell2030"},
            extensions={Extension("CPP", False): "-XNoCPP"},
        )
        data = compiler.to_dict()
        assert data["extensions"] == [["NoCPP", "-XNoCPP"]]
        assert Compiler.from_dict(data) == compiler

    def test_from_dict_malformed(self):
        """Test malformed data raises rather than producing a half descriptor."""
        with pytest.raises((KeyError, TypeError, ValueError)):
            Compiler.from_dict({"abi_tag": None})
