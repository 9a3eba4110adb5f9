"""
Package partitioning: prebuilt vs. buildable.

Given ordered groups of resolved packages:

    prebuilt    flattened across all groups; pacman installs them in one batch
    buildable   group boundaries kept; members of a group depend on each
                other and are built together. Groups left empty are dropped.

Every input package lands in exactly one of the two outputs.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pacgate.core.models.package import Buildable, FromAur, FromRepo, Prebuilt

logger = logging.getLogger(__name__)

# Above this many groups, split them on a thread pool.
PARALLEL_THRESHOLD = 64


@dataclass
class Partition:
    """Result of partitioning a sequence of package groups."""

    prebuilt: list[Prebuilt] = field(default_factory=list)
    buildable: list[frozenset[Buildable]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.prebuilt) + sum(len(g) for g in self.buildable)


def _split_group(group: frozenset[FromRepo | FromAur]) -> tuple[list[Prebuilt], list[Buildable]]:
    if not group:
        raise ValueError("Package groups must not be empty")

    prebuilt: list[Prebuilt] = []
    buildable: list[Buildable] = []
    for pkg in sorted(group, key=lambda p: (p.name, p.origin)):
        if isinstance(pkg, FromRepo):
            prebuilt.append(pkg.pkg)
        elif isinstance(pkg, FromAur):
            buildable.append(pkg.pkg)
        else:
            raise TypeError(f"Unknown package origin: {pkg!r}")
    return prebuilt, buildable


def partition_packages(
    groups: Sequence[frozenset[FromRepo | FromAur]],
    *,
    parallel_threshold: int = PARALLEL_THRESHOLD,
) -> Partition:
    """Split groups into prebuilt artifacts and buildable groups.

    Args:
        groups: Ordered, non-empty sequence of non-empty package groups.
        parallel_threshold: Group count at which splitting runs on a
            thread pool. Output order does not depend on it.

    Raises:
        ValueError: If ``groups`` or any group is empty.
    """
    if not groups:
        raise ValueError("partition_packages needs at least one group")

    if len(groups) >= parallel_threshold:
        with concurrent.futures.ThreadPoolExecutor() as pool:
            splits = list(pool.map(_split_group, groups))
    else:
        splits = [_split_group(g) for g in groups]

    partition = Partition()
    for prebuilt, buildable in splits:
        partition.prebuilt.extend(prebuilt)
        if buildable:
            partition.buildable.append(frozenset(buildable))

    logger.debug(
        "Partitioned %d group(s): %d prebuilt, %d buildable group(s)",
        len(groups), len(partition.prebuilt), len(partition.buildable),
    )
    return partition


def group_by_base(packages: Iterable[FromRepo | FromAur]) -> list[frozenset[FromRepo | FromAur]]:
    """Default grouping: all prebuilt packages together, one group per AUR base.

    Split packages (several names from one PackageBase) are built in one go,
    so they share a group. Groups are ordered by base name, prebuilt first.
    """
    prebuilt: set[FromRepo | FromAur] = set()
    by_base: dict[str, set[FromRepo | FromAur]] = {}
    for pkg in packages:
        if isinstance(pkg, FromRepo):
            prebuilt.add(pkg)
        elif isinstance(pkg, FromAur):
            by_base.setdefault(pkg.pkg.effective_base, set()).add(pkg)
        else:
            raise TypeError(f"Unknown package origin: {pkg!r}")

    groups: list[frozenset[FromRepo | FromAur]] = []
    if prebuilt:
        groups.append(frozenset(prebuilt))
    groups.extend(frozenset(by_base[base]) for base in sorted(by_base))
    return groups
