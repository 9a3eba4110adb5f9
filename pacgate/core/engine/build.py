"""
Build hand-off to the external toolchain.

pacgate does not build anything. It hands each buildable recipe to a
``BuildToolchain``: first the customisation ("hot edit") step, exactly
once per package, then the build proper. Groups are built in order and
the first failed build stops the run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import Buildable, FromAur
from pacgate.core.models.settings import Settings
from pacgate.core.security.privilege import forbid_true_root

logger = logging.getLogger(__name__)


class BuildToolchain(ABC):
    """Contract of the external build toolchain."""

    @abstractmethod
    def hot_edit(self, settings: Settings, buildable: Buildable) -> Buildable:
        """Let the user customise the recipe; return the (possibly edited) recipe."""

    @abstractmethod
    def build(self, settings: Settings, buildable: Buildable) -> Outcome[Path]:
        """Build the recipe into an installable artifact."""


def package_buildable(
    settings: Settings, buildable: Buildable, toolchain: BuildToolchain,
) -> FromAur:
    """Run the customisation step and tag the result as an AUR package."""
    return FromAur(pkg=toolchain.hot_edit(settings, buildable))


def _build_all(
    settings: Settings,
    groups: Sequence[frozenset[Buildable]],
    toolchain: BuildToolchain,
) -> Outcome[list[Path]]:
    artifacts: list[Path] = []
    for index, group in enumerate(groups, start=1):
        for buildable in sorted(group, key=lambda b: b.name):
            edited = package_buildable(settings, buildable, toolchain).pkg
            logger.info("Building %s %s (group %d/%d)", edited.name, edited.version, index, len(groups))
            outcome = toolchain.build(settings, edited)
            if outcome.failed:
                failure = outcome.failure
                return Outcome.fail(
                    FailureKind.BUILD_FAILED,
                    f"Building {edited.name} failed",
                    detail=failure.detail or failure.message,
                    source=edited.name,
                )
            artifacts.append(outcome.unwrap())
    return Outcome.success(artifacts)


def build_groups(
    settings: Settings,
    groups: Sequence[frozenset[Buildable]],
    toolchain: BuildToolchain,
) -> Outcome[list[Path]]:
    """Build every group in order, refusing to run as the true root."""
    return forbid_true_root(settings, lambda: _build_all(settings, groups, toolchain))
