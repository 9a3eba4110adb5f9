"""
Version demand evaluation.

pacgate never compares versions itself. Demands are rendered into the
syntax pacman understands and the answer comes from pacman:

    is_satisfied   pacman -T "name>=1.2"    (against the local database)
    satisfied      vercmp <installed> <v>   (against a given version)

Exactly one subprocess per check, no caching.
"""

from __future__ import annotations

import logging

from pacgate.adapters.pacman.command import pacman_success, run_command
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import (
    Anything,
    AtLeast,
    Dep,
    LessThan,
    MoreThan,
    MustBe,
    VersionDemand,
)
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)


def render_demand(demand: VersionDemand) -> str:
    """Render a demand as the suffix pacman expects (``>=1.2``, or ``""``)."""
    if isinstance(demand, Anything):
        return ""
    if isinstance(demand, LessThan):
        return f"<{demand.version}"
    if isinstance(demand, AtLeast):
        return f">={demand.version}"
    if isinstance(demand, MoreThan):
        return f">{demand.version}"
    if isinstance(demand, MustBe):
        return f"={demand.version}"
    raise TypeError(f"Unknown version demand: {demand!r}")


def is_satisfied(settings: Settings, dep: Dep) -> bool:
    """True if an installed package satisfies ``dep`` (``pacman -T``)."""
    return pacman_success(settings, ["-T", dep.as_query()])


def vercmp(settings: Settings, a: str, b: str) -> Outcome[int]:
    """Compare two versions with pacman's ``vercmp``: -1, 0 or 1.

    A vercmp that cannot run or prints something unexpected is a
    ``QUERY_FAILED`` outcome.
    """
    result = run_command([settings.pacman.vercmp, a, b], timeout=settings.pacman.timeout)
    if not result.ok:
        return Outcome.fail(
            FailureKind.QUERY_FAILED, "vercmp failed", detail=result.describe(), source="vercmp",
        )
    try:
        value = int(result.stdout.strip())
    except ValueError:
        return Outcome.fail(
            FailureKind.QUERY_FAILED,
            "Unexpected vercmp output",
            detail=result.stdout.strip(),
            source="vercmp",
        )
    return Outcome.success((value > 0) - (value < 0))


def satisfied(settings: Settings, installed_version: str, demand: VersionDemand) -> Outcome[bool]:
    """Whether ``installed_version`` meets ``demand``."""
    if isinstance(demand, Anything):
        return Outcome.success(True)

    compared = vercmp(settings, installed_version, demand.version)
    if compared.failed:
        return Outcome.from_failure(compared.failure)
    order = compared.unwrap()

    if isinstance(demand, LessThan):
        return Outcome.success(order < 0)
    if isinstance(demand, AtLeast):
        return Outcome.success(order >= 0)
    if isinstance(demand, MoreThan):
        return Outcome.success(order > 0)
    if isinstance(demand, MustBe):
        return Outcome.success(order == 0)
    raise TypeError(f"Unknown version demand: {demand!r}")
