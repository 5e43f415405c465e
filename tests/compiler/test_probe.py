"""
Tests for cabalkit.compiler.probe module.
"""

import shutil
import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from cabalkit.compiler.capabilities import backpack_supported, dynamic_supported
from cabalkit.compiler.identity import CompilerFlavor, CompilerId, OtherCompiler, mk_version
from cabalkit.compiler.language import Extension, Language
from cabalkit.compiler.probe import (
    CompilerProber,
    classify_supported_languages,
    parse_info_output,
)
from cabalkit.core.exceptions import CompilerProbeError

GHC_INFO = (
    ' [("Project name","The Glorious Glasgow Haskell Compilation System")\n'
    ' ,("Project version","9.10.1")\n'
    ' ,("Project Unit Id","ghc-9.10.1-a1b2")\n'
    ' ,("Support Backpack","YES")\n'
    ' ,("C compiler flags","-Wall \\"quoted\\"")\n'
    ' ,("RTS ways","v thr p dyn")\n'
    " ]\n"
)

SUPPORTED_LANGUAGES = "Haskell98\nHaskell2010\nGHC2021\nCPP\nNoCPP\nOverloadedStrings\n"


def completed(stdout="", returncode=0, stderr=""):
    return Mock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestParseInfoOutput:
    """Tests for --info parsing."""

    def test_parse(self):
        info = parse_info_output(GHC_INFO)
        assert info["Project version"] == "9.10.1"
        assert info["Support Backpack"] == "YES"
        assert list(info)[0] == "Project name"

    def test_escapes(self):
        """Test Haskell string escapes are decoded."""
        info = parse_info_output(GHC_INFO)
        assert info["C compiler flags"] == '-Wall "quoted"'
        info = parse_info_output('[("a","x\\ny\\\\z\\955")]')
        assert info["a"] == "x\ny\\zλ"

    def test_empty_list(self):
        assert parse_info_output("[]") == {}

    def test_not_a_list(self):
        with pytest.raises(ValueError):
            parse_info_output("ghc: unrecognised flag: --info")

    def test_list_without_pairs(self):
        with pytest.raises(ValueError):
            parse_info_output("[1, 2, 3]")


class TestClassifySupportedLanguages:
    """Tests for --supported-languages classification."""

    def test_classify(self):
        languages, extensions = classify_supported_languages(
            SUPPORTED_LANGUAGES.splitlines()
        )
        assert languages == {
            Language.HASKELL98: "-XHaskell98",
            Language.HASKELL2010: "-XHaskell2010",
            Language.GHC2021: "-XGHC2021",
        }
        assert extensions[Extension("CPP", False)] == "-XNoCPP"
        assert extensions[Extension("OverloadedStrings")] == "-XOverloadedStrings"

    def test_blank_lines_ignored(self):
        languages, extensions = classify_supported_languages(["", "  ", "CPP"])
        assert languages == {}
        assert list(extensions) == [Extension("CPP")]


class TestCompilerProber:
    """Tests for CompilerProber."""

    def test_detect_flavor(self):
        prober = CompilerProber()
        assert prober.detect_flavor(Path("/opt/ghc-9.10.1/bin/ghc")) is CompilerFlavor.GHC
        assert prober.detect_flavor(Path("ghc-9.8.2")) is CompilerFlavor.GHC
        assert prober.detect_flavor(Path("ghcjs")) is CompilerFlavor.GHCJS
        assert prober.detect_flavor(Path("mhs")) is CompilerFlavor.MHS
        assert prober.detect_flavor(Path("mycc")) == OtherCompiler("mycc")

    @patch("subprocess.run")
    def test_probe_ghc(self, mock_run):
        """Test a full GHC probe."""
        mock_run.side_effect = [
            completed("9.10.1\n"),
            completed(GHC_INFO),
            completed(SUPPORTED_LANGUAGES),
        ]

        compiler = CompilerProber().probe("/usr/bin/ghc")

        assert compiler.id == CompilerId(CompilerFlavor.GHC, mk_version(9, 10, 1))
        assert compiler.abi_tag == "a1b2"
        assert compiler.compat == ()
        assert backpack_supported(compiler)
        assert dynamic_supported(compiler) is True
        assert Language.HASKELL2010 in compiler.languages

        commands = [call.args[0] for call in mock_run.call_args_list]
        assert commands == [
            ["/usr/bin/ghc", "--numeric-version"],
            ["/usr/bin/ghc", "--info"],
            ["/usr/bin/ghc", "--supported-languages"],
        ]
        assert mock_run.call_args.kwargs["timeout"] == 30

    @patch("subprocess.run")
    def test_probe_ghcjs(self, mock_run):
        """Test GHCJS reports its own version and the GHC it is compatible with."""
        mock_run.side_effect = [
            completed("8.6.0.1\n"),
            completed("8.6.5\n"),
            completed('[("Support Backpack","YES")]'),
            completed("Haskell2010\n"),
        ]

        compiler = CompilerProber().probe(Path("/opt/bin/ghcjs"))

        assert compiler.id == CompilerId(CompilerFlavor.GHCJS, mk_version(8, 6, 0, 1))
        assert compiler.compat == (CompilerId(CompilerFlavor.GHC, mk_version(8, 6, 5)),)
        assert compiler.abi_tag is None
        assert mock_run.call_args_list[0].args[0][1] == "--numeric-ghcjs-version"

    @patch("subprocess.run")
    def test_flavor_override(self, mock_run):
        mock_run.side_effect = [
            completed("9.8.2"),
            completed("[]"),
            completed(""),
        ]
        compiler = CompilerProber().probe("/usr/bin/hc", CompilerFlavor.GHC)
        assert compiler.flavor is CompilerFlavor.GHC

    @patch("subprocess.run")
    def test_non_zero_exit(self, mock_run):
        mock_run.return_value = completed(returncode=1, stderr="boom")
        with pytest.raises(CompilerProbeError) as exc_info:
            CompilerProber().probe("/usr/bin/ghc")
        assert "/usr/bin/ghc" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    @patch("subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError("No such file")
        with pytest.raises(CompilerProbeError):
            CompilerProber().probe("/nonexistent/ghc")

    @patch("subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ghc", timeout=5)
        with pytest.raises(CompilerProbeError, match="timed out"):
            CompilerProber(timeout=5).probe("/usr/bin/ghc")

    @patch("subprocess.run")
    def test_bad_version(self, mock_run):
        mock_run.return_value = completed("The Glorious Glasgow Haskell Compiler")
        with pytest.raises(CompilerProbeError):
            CompilerProber().probe("/usr/bin/ghc")

    @patch("subprocess.run")
    def test_bad_info(self, mock_run):
        mock_run.side_effect = [completed("9.10.1"), completed("not a list")]
        with pytest.raises(CompilerProbeError):
            CompilerProber().probe("/usr/bin/ghc")


@pytest.mark.integration
class TestRealCompiler:
    """Probe the ghc on PATH."""

    def test_probe_real_ghc(self):
        ghc = shutil.which("ghc")
        if ghc is None:
            pytest.skip("ghc not on PATH")
        compiler = CompilerProber().probe(ghc)
        assert compiler.flavor is CompilerFlavor.GHC
        assert Language.HASKELL2010 in compiler.languages
