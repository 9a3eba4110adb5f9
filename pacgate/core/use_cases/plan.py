"""
Install plan use case: names in, prebuilt/buildable split out.

Flow:
    names -> (skip installed) -> one batched lookup -> group_by_base -> partition
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pacgate.adapters.base import Repository
from pacgate.core.engine.partition import group_by_base, partition_packages
from pacgate.core.models.failure import Outcome
from pacgate.core.models.package import Buildable, PkgName, Prebuilt
from pacgate.core.models.settings import Settings
from pacgate.core.services.local_state import installed_names

logger = logging.getLogger(__name__)


@dataclass
class InstallPlan:
    """What would be installed, built, or could not be found."""

    prebuilt: list[Prebuilt] = field(default_factory=list)
    buildable: list[frozenset[Buildable]] = field(default_factory=list)
    unresolved: list[PkgName] = field(default_factory=list)
    installed: list[PkgName] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.prebuilt and not self.buildable

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "prebuilt": [
                {"name": p.name, "version": p.version, "repository": p.repository}
                for p in self.prebuilt
            ],
            "buildable": [
                [
                    {"name": b.name, "version": b.version, "base": b.effective_base}
                    for b in sorted(group, key=lambda b: b.name)
                ]
                for group in self.buildable
            ],
            "unresolved": sorted(self.unresolved),
            "installed": sorted(self.installed),
        }


def plan_install(
    settings: Settings,
    names: Iterable[str],
    repository: Repository,
    skip_installed: bool = False,
) -> Outcome[InstallPlan]:
    """Resolve names and split them into install and build work.

    Args:
        settings: Settings snapshot.
        names: Requested package names (must not be empty).
        repository: The (usually composed) repository to resolve through.
        skip_installed: Drop names that are already installed.

    Returns:
        The plan, or the provider failure that aborted the lookup.
    """
    requested = sorted({PkgName(n) for n in names})
    if not requested:
        raise ValueError("plan_install needs at least one package name")

    plan = InstallPlan()
    if skip_installed:
        installed = installed_names(settings, requested)
        if installed.failed:
            return Outcome.from_failure(installed.failure)
        plan.installed = sorted(installed.unwrap())
        requested = [n for n in requested if n not in installed.unwrap()]
        if not requested:
            logger.info("All requested packages are already installed")
            return Outcome.success(plan)

    outcome = repository.lookup(settings, requested)
    if outcome.failed:
        return Outcome.from_failure(outcome.failure)

    result = outcome.unwrap()
    plan.unresolved = sorted(result.unresolved)
    if result.resolved:
        partition = partition_packages(group_by_base(result.resolved))
        plan.prebuilt = partition.prebuilt
        plan.buildable = partition.buildable
    return Outcome.success(plan)
