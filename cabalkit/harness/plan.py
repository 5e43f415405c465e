"""
Build plan reader.

After a project has been configured, cabal writes the resolved install plan
to ``<dist>/cache/plan.json``. The harness reads it to find where a
component was built, e.g. to run an executable the test just compiled.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from cabalkit.core.exceptions import PlanError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistDir:
    """The component's build directory."""

    path: str


@dataclass(frozen=True)
class BinFile:
    """The installed executable of the component."""

    path: str


@dataclass(frozen=True)
class PlanUnit:
    """One configured unit of the install plan."""

    id: str
    pkg_name: str
    pkg_version: str
    component_name: Optional[str]
    components: Tuple[str, ...]
    dist_dir: Optional[str]
    bin_file: Optional[str]

    def provides(self, component: str) -> bool:
        """Does this unit build ``component`` (e.g. ``exe:foo``)?"""
        if self.component_name is not None:
            return self.component_name == component
        return component in self.components


@dataclass(frozen=True)
class Plan:
    """Configured units of an install plan."""

    units: Tuple[PlanUnit, ...]

    def dist_dir(self, pkg_name: str, component: str) -> Union[DistDir, BinFile]:
        """
        Locate a component's build output.

        Raises:
            PlanError: If no unit, or more than one, builds the component
        """
        matches: List[Union[DistDir, BinFile]] = []
        for unit in self.units:
            if unit.pkg_name != pkg_name or not unit.provides(component):
                continue
            if unit.bin_file:
                matches.append(BinFile(unit.bin_file))
            elif unit.dist_dir:
                matches.append(DistDir(unit.dist_dir))

        if not matches:
            raise PlanError(f"Component not found in plan: {pkg_name}:{component}")
        if len(matches) > 1:
            raise PlanError(
                f"Found multiple copies of {pkg_name}:{component} in plan: {matches}"
            )
        return matches[0]


def parse_plan(data: dict) -> Plan:
    """
    Build a :class:`Plan` from decoded ``plan.json``.

    Only ``configured`` units are kept; pre-existing (installed) units have
    no build output.

    Raises:
        PlanError: If the document has no install plan
    """
    try:
        entries = data["install-plan"]
    except (KeyError, TypeError):
        raise PlanError("plan has no 'install-plan'") from None

    units = []
    for entry in entries:
        if entry.get("type") != "configured":
            continue
        units.append(
            PlanUnit(
                id=entry["id"],
                pkg_name=entry["pkg-name"],
                pkg_version=entry.get("pkg-version", ""),
                component_name=entry.get("component-name"),
                components=tuple(entry.get("components", {})),
                dist_dir=entry.get("dist-dir"),
                bin_file=entry.get("bin-file"),
            )
        )
    return Plan(tuple(units))


def read_plan(dist_dir: Union[str, Path]) -> Plan:
    """
    Read ``<dist_dir>/cache/plan.json``.

    Raises:
        PlanError: If the file is missing or cannot be decoded
    """
    plan_path = Path(dist_dir) / "cache" / "plan.json"
    try:
        with open(plan_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PlanError(f"cannot decode plan {plan_path}: {e}") from e

    plan = parse_plan(data)
    logger.debug(f"Read plan with {len(plan.units)} configured units from {plan_path}")
    return plan


def plan_exe_path(plan: Plan, pkg_name: str, exe_name: str) -> str:
    """Path of an executable built according to the plan."""
    location = plan.dist_dir(pkg_name, f"exe:{exe_name}")
    if isinstance(location, BinFile):
        return location.path
    return os.path.join(location.path, "build", exe_name, exe_name)
