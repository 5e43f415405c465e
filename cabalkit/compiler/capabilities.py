"""Compiler capability tables and query functions.

This module answers "does this compiler support X" for a :class:`Compiler`
descriptor. All answers come from three data tables rather than ad hoc
branches:

Property Capabilities
=====================

``PROPERTY_CAPABILITIES`` maps a capability name to the key of the property
the compiler reports for it (``ghc --info``). A capability is supported only
when the compiler's flavour honours the property bag and the property value
is exactly ``"YES"``. Anything else, including a missing key or ``"yes"``,
is treated as unsupported.

Version Gates
=============

``VERSION_GATES`` holds features whose support is decided by comparing the
compiler version against thresholds, because the compiler does not report
them. Each entry records why the threshold is what it is.

Ways
====

Way queries (profiling, dynamic, profiling+dynamic libraries) are
three-valued: ``True``, ``False`` or ``None`` when the compiler is too old to
report which ways its libraries were built for.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from packaging.version import Version

from cabalkit.compiler.descriptor import Compiler
from cabalkit.compiler.identity import CompilerFlavor, Flavor, mk_version
from cabalkit.core.exceptions import UnknownCapabilityError

#: Flavours whose property bag is trusted by :func:`supports`.
PROPERTY_FLAVORS: FrozenSet[Flavor] = frozenset(
    {CompilerFlavor.GHC, CompilerFlavor.GHCJS}
)

#: Flavours that can build with program coverage and profiling.
INSTRUMENTING_FLAVORS: FrozenSet[Flavor] = frozenset(
    {CompilerFlavor.GHC, CompilerFlavor.GHCJS}
)

# Capability name -> property key reported by the compiler
PROPERTY_CAPABILITIES: Dict[str, str] = {
    "parmake": "Support parallel --make",
    "reexported-modules": "Support reexported-modules",
    "renaming-package-flags": "Support thinning and renaming package flags",
    "unified-ipid": "Requires unified installed package IDs",
    "package-keys": "Uses package keys",
    "unit-ids": "Uses unit IDs",
    "backpack": "Support Backpack",
    "ar-response-files": "ar supports at file",  # ar accepts @file arguments
    "ar-dash-l": "ar supports -L",  # llvm-ar -L adds members, not the archive
}

RTS_WAYS_PROPERTY = "RTS ways"


@dataclass(frozen=True)
class VersionGate:
    """
    A feature whose support depends only on the compiler version.

    A version satisfies the gate if it lies in any of ``ranges``. Each range
    is ``(minimum, maximum)`` with an inclusive minimum and an exclusive
    maximum; ``None`` as the maximum means unbounded.
    """

    feature: str
    flavor: Flavor
    ranges: Tuple[Tuple[Version, Optional[Version]], ...]
    rationale: str

    def satisfied_by(self, version: Version) -> bool:
        return any(
            version >= minimum and (maximum is None or version < maximum)
            for minimum, maximum in self.ranges
        )


# Version-gated features. Thresholds are empirical: add a row, never a branch.
VERSION_GATES: Dict[str, VersionGate] = {
    gate.feature: gate
    for gate in (
        VersionGate(
            feature="jsem",
            flavor=CompilerFlavor.GHC,
            ranges=((mk_version(9, 7), None),),
            rationale="-jsem semaphore parallelism first shipped in GHC 9.7",
        ),
        VersionGate(
            feature="reexported-as",
            flavor=CompilerFlavor.GHC,
            ranges=((mk_version(9, 12), None),),
            rationale="'reexported-modules: A as B' accepted from GHC 9.12",
        ),
        VersionGate(
            feature="library-dyn-dir",
            flavor=CompilerFlavor.GHC,
            # Not simply >= 8.0.1.20161022: many GHC 8.1 nightlies predate it
            ranges=(
                (mk_version(8, 0, 1, 20161022), mk_version(8, 1)),
                (mk_version(8, 1, 20161021), None),
            ),
            rationale="'dynamic-library-dirs' package db field",
        ),
        VersionGate(
            feature="library-visibility",
            flavor=CompilerFlavor.GHC,
            ranges=((mk_version(8, 8), None),),
            rationale="'visibility' package db field understood from GHC 8.8",
        ),
        VersionGate(
            feature="package-db-flag",
            flavor=CompilerFlavor.GHC,
            ranges=((mk_version(7, 6), None),),
            rationale="ghc-pkg before 7.6 only accepts --package-conf",
        ),
        VersionGate(
            feature="ways-reported",
            flavor=CompilerFlavor.GHC,
            ranges=((mk_version(9, 10, 1), None),),
            rationale="'RTS ways' is only accurate from 9.10.1 (GHC #24881)",
        ),
    )
}

# Certainly no prof+dyn libraries up to 9.11.0: the way was not implemented yet
PROFILING_DYNAMIC_CUTOFF = mk_version(9, 11, 0)


# ============================================================================
# Property capabilities
# ============================================================================


def supports(property_key: str, compiler: Compiler) -> bool:
    """
    Check a raw capability property.

    Args:
        property_key: Key in the compiler's property bag
        compiler: Compiler descriptor

    Returns:
        True only if the compiler flavour honours the property bag and the
        property value is exactly ``"YES"``.

    Example:
        >>> supports("Support Backpack", ghc)
        True
    """
    if compiler.flavor not in PROPERTY_FLAVORS:
        return False
    return compiler.properties.get(property_key) == "YES"


def has_capability(compiler: Compiler, name: str) -> bool:
    """
    Check a named capability from :data:`PROPERTY_CAPABILITIES`.

    Raises:
        UnknownCapabilityError: If ``name`` is not a registered capability
    """
    try:
        key = PROPERTY_CAPABILITIES[name]
    except KeyError:
        raise UnknownCapabilityError(name) from None
    return supports(key, compiler)


def _capability_query(name: str, doc: str) -> Callable[[Compiler], bool]:
    if name not in PROPERTY_CAPABILITIES:
        raise UnknownCapabilityError(name)

    def query(compiler: Compiler) -> bool:
        return has_capability(compiler, name)

    query.__name__ = f"{name.replace('-', '_')}_supported"
    query.__doc__ = doc
    return query


parmake_supported = _capability_query(
    "parmake", "Does this compiler support parallel --make mode?"
)
reexported_modules_supported = _capability_query(
    "reexported-modules", "Does this compiler support reexported-modules?"
)
renaming_package_flags_supported = _capability_query(
    "renaming-package-flags",
    "Does this compiler support thinning/renaming on package flags?",
)
unified_ipid_required = _capability_query(
    "unified-ipid", "Does this compiler have unified IPIDs (so no package keys)?"
)
package_key_supported = _capability_query(
    "package-keys", "Does this compiler support package keys?"
)
unit_id_supported = _capability_query(
    "unit-ids", "Does this compiler support unit IDs?"
)
backpack_supported = _capability_query(
    "backpack", "Does this compiler support Backpack?"
)
ar_response_files_supported = _capability_query(
    "ar-response-files",
    "Does this compiler's ar accept response file (@file) arguments?",
)
ar_dash_l_supported = _capability_query(
    "ar-dash-l", "Does this compiler's ar support llvm-ar's -L flag?"
)


# ============================================================================
# Version gates
# ============================================================================


def version_gate_satisfied(compiler: Compiler, feature: str) -> bool:
    """
    Check a version-gated feature from :data:`VERSION_GATES`.

    Compilers of a flavour other than the gate's are never supported.

    Raises:
        UnknownCapabilityError: If ``feature`` has no version gate
    """
    try:
        gate = VERSION_GATES[feature]
    except KeyError:
        raise UnknownCapabilityError(feature) from None
    if compiler.flavor != gate.flavor:
        return False
    return gate.satisfied_by(compiler.version)


def jsem_supported(compiler: Compiler) -> bool:
    """Does this compiler support the -jsem option?"""
    return version_gate_satisfied(compiler, "jsem")


def reexported_as_supported(compiler: Compiler) -> bool:
    """Does this compiler support the reexported-modules "A as B" syntax?"""
    return version_gate_satisfied(compiler, "reexported-as")


def library_dyn_dir_supported(compiler: Compiler) -> bool:
    """Does this compiler support a package db entry with dynamic-library-dirs?"""
    return version_gate_satisfied(compiler, "library-dyn-dir")


def library_visibility_supported(compiler: Compiler) -> bool:
    """Does this compiler support a package db entry with visibility?"""
    return version_gate_satisfied(compiler, "library-visibility")


def package_db_flag_supported(compiler: Compiler) -> bool:
    """Does this compiler's ghc-pkg accept --package-db (rather than --package-conf)?"""
    return version_gate_satisfied(compiler, "package-db-flag")


# ============================================================================
# Flavour-only queries
# ============================================================================


def coverage_supported(compiler: Compiler) -> bool:
    """Does this compiler support program coverage?"""
    return compiler.flavor in INSTRUMENTING_FLAVORS


def profiling_supported(compiler: Compiler) -> bool:
    """Does this compiler support profiling?"""
    return compiler.flavor in INSTRUMENTING_FLAVORS


# ============================================================================
# Ways
# ============================================================================


def way_supported(way: str, compiler: Compiler) -> Optional[bool]:
    """
    Is the compiler distributed with libraries built for ``way``?

    Returns:
        True or False when the compiler reports its ways reliably,
        None when that cannot be determined.
    """
    if not version_gate_satisfied(compiler, "ways-reported"):
        return None
    ways = compiler.properties.get(RTS_WAYS_PROPERTY)
    if ways is None:
        return False
    return way in ways.split()


def profiling_vanilla_supported(compiler: Compiler) -> Optional[bool]:
    """Is the compiler distributed with profiling libraries?"""
    return way_supported("p", compiler)


def dynamic_supported(compiler: Compiler) -> Optional[bool]:
    """Is the compiler distributed with dynamic libraries?"""
    return way_supported("dyn", compiler)


def profiling_dynamic_supported(compiler: Compiler) -> Optional[bool]:
    """Is the compiler distributed with profiling dynamic libraries?"""
    if (
        compiler.flavor == CompilerFlavor.GHC
        and compiler.version <= PROFILING_DYNAMIC_CUTOFF
    ):
        return False
    return way_supported("p_dyn", compiler)


def profiling_vanilla_supported_or_unknown(compiler: Compiler) -> bool:
    """Profiling libraries are definitely available, or we cannot tell (assume yes)."""
    return profiling_vanilla_supported(compiler) in (True, None)


def profiling_dynamic_supported_or_unknown(compiler: Compiler) -> bool:
    """Profiling dynamic libraries are definitely available, or we cannot tell."""
    return profiling_dynamic_supported(compiler) in (True, None)


def capability_report(compiler: Compiler) -> Dict[str, Optional[bool]]:
    """
    Evaluate every registered capability for a compiler.

    Returns:
        Mapping of capability/feature/way name to its answer, in table order
    """
    report: Dict[str, Optional[bool]] = {}
    for name in PROPERTY_CAPABILITIES:
        report[name] = has_capability(compiler, name)
    for feature in VERSION_GATES:
        report[feature] = version_gate_satisfied(compiler, feature)
    report["coverage"] = coverage_supported(compiler)
    report["profiling"] = profiling_supported(compiler)
    report["way:p"] = profiling_vanilla_supported(compiler)
    report["way:dyn"] = dynamic_supported(compiler)
    report["way:p_dyn"] = profiling_dynamic_supported(compiler)
    return report
