"""
Compiler probing - builds a :class:`Compiler` descriptor from a real install.

Runs the compiler with ``--numeric-version``, ``--info`` and
``--supported-languages`` and turns the output into a descriptor:

- ``--info`` prints a list of ``("key","value")`` pairs which becomes the
  property bag used by capability queries
- ``--supported-languages`` lists language standards and extensions, each
  of which is enabled with ``-X<name>``
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from cabalkit.compiler.descriptor import Compiler
from cabalkit.compiler.identity import (
    CompilerFlavor,
    CompilerId,
    Flavor,
    parse_flavor,
    parse_version,
)
from cabalkit.compiler.language import Language, parse_extension
from cabalkit.core.exceptions import CompilerProbeError

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 30

_STRING = r'"((?:[^"\\]|\\.)*)"'
_INFO_PAIR_RE = re.compile(r"\(\s*" + _STRING + r"\s*,\s*" + _STRING + r"\s*\)", re.S)
_ESCAPE_RE = re.compile(r"\\(\d+|x[0-9a-fA-F]+|o[0-7]+|&|.)", re.S)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "&": "",
}

PROJECT_UNIT_ID_PROPERTY = "Project Unit Id"


def _unescape(text: str) -> str:
    def replace(match: "re.Match") -> str:
        escape = match.group(1)
        if escape.isdigit():
            return chr(int(escape))
        if escape[0] == "x" and len(escape) > 1:
            return chr(int(escape[1:], 16))
        if escape[0] == "o" and len(escape) > 1:
            return chr(int(escape[1:], 8))
        return _SIMPLE_ESCAPES.get(escape, escape)

    return _ESCAPE_RE.sub(replace, text)


def parse_info_output(output: str) -> Dict[str, str]:
    """
    Parse the output of ``ghc --info``.

    Args:
        output: Text of the form ``[("key","value"),("key2","value2")]``

    Returns:
        Property map in output order

    Raises:
        ValueError: If the output is not a list of string pairs
    """
    stripped = output.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")):
        raise ValueError("compiler info is not a list")
    pairs = _INFO_PAIR_RE.findall(stripped)
    if not pairs and stripped[1:-1].strip():
        raise ValueError("compiler info contains no (key, value) pairs")
    return {_unescape(key): _unescape(value) for key, value in pairs}


def classify_supported_languages(names: Sequence[str]):
    """
    Split ``--supported-languages`` output into languages and extensions.

    Returns:
        Tuple of (languages map, extensions map), each name mapped to ``-X<name>``
    """
    language_names = {lang.value: lang for lang in Language}
    languages = {}
    extensions = {}
    for name in names:
        name = name.strip()
        if not name:
            continue
        if name in language_names:
            languages[language_names[name]] = f"-X{name}"
        else:
            extensions[parse_extension(name)] = f"-X{name}"
    return languages, extensions


class CompilerProber:
    """
    Probe compiler executables.

    Example:
        >>> prober = CompilerProber()
        >>> ghc = prober.probe(Path("/usr/bin/ghc"))
        >>> ghc.show_id()
        'ghc-9.10.1'
    """

    def __init__(self, timeout: int = PROBE_TIMEOUT):
        self.timeout = timeout

    def _run(self, compiler_path: Path, args: List[str]) -> str:
        command = [str(compiler_path), *args]
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise CompilerProbeError(
                str(compiler_path),
                f"'{' '.join(args)}' timed out after {self.timeout}s",
            ) from None
        except OSError as e:
            raise CompilerProbeError(str(compiler_path), str(e)) from e

        if result.returncode != 0:
            raise CompilerProbeError(
                str(compiler_path),
                f"'{' '.join(args)}' exited with {result.returncode}: "
                f"{result.stderr.strip()[:200]}",
            )
        return result.stdout

    def detect_flavor(self, compiler_path: Path) -> Flavor:
        """Guess the flavour from the executable name (``ghcjs`` or ``ghc``)."""
        name = compiler_path.name.lower()
        if name.startswith("ghcjs"):
            return CompilerFlavor.GHCJS
        if name.startswith("ghc"):
            return CompilerFlavor.GHC
        return parse_flavor(compiler_path.stem)

    def probe(
        self, compiler_path: Union[str, Path], flavor: Optional[Flavor] = None
    ) -> Compiler:
        """
        Build a descriptor for the compiler at ``compiler_path``.

        Args:
            compiler_path: Compiler executable
            flavor: Flavour override; detected from the executable name if None

        Raises:
            CompilerProbeError: If the compiler cannot be run or its output parsed
        """
        compiler_path = Path(compiler_path)
        if flavor is None:
            flavor = self.detect_flavor(compiler_path)
        logger.debug(f"Probing {flavor} compiler at {compiler_path}")

        compat = ()
        try:
            if flavor == CompilerFlavor.GHCJS:
                version = parse_version(
                    self._run(compiler_path, ["--numeric-ghcjs-version"])
                )
                ghc_version = parse_version(
                    self._run(compiler_path, ["--numeric-ghc-version"])
                )
                compat = (CompilerId(CompilerFlavor.GHC, ghc_version),)
            else:
                version = parse_version(self._run(compiler_path, ["--numeric-version"]))
            properties = parse_info_output(self._run(compiler_path, ["--info"]))
        except ValueError as e:
            raise CompilerProbeError(str(compiler_path), str(e)) from e

        languages, extensions = classify_supported_languages(
            self._run(compiler_path, ["--supported-languages"]).splitlines()
        )

        compiler_id = CompilerId(flavor, version)
        compiler = Compiler(
            id=compiler_id,
            abi_tag=self._abi_tag(compiler_id, properties),
            compat=compat,
            languages=languages,
            extensions=extensions,
            properties=properties,
        )
        logger.debug(
            f"Probed {compiler.show_id_with_abi()}: {len(languages)} languages, "
            f"{len(extensions)} extensions, {len(properties)} properties"
        )
        return compiler

    @staticmethod
    def _abi_tag(compiler_id: CompilerId, properties: Dict[str, str]) -> Optional[str]:
        # "Project Unit Id" is e.g. ghc-9.10.1-abcd; the suffix is the ABI tag
        unit_id = properties.get(PROJECT_UNIT_ID_PROPERTY)
        prefix = f"{compiler_id}-"
        if unit_id and unit_id.startswith(prefix) and len(unit_id) > len(prefix):
            return unit_id[len(prefix):]
        return None
