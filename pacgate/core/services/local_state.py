"""
Local install-state queries against the pacman database.

Read-only projections (foreign, orphans, devel, installed) plus the one
mutating call, ``remove_packages``. Nothing here is cached; every call
asks pacman again.

pacman exits 1 with no output when a query has no results. That is an
empty answer, not a failure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pacgate.adapters.pacman.command import PacmanResult, pacman
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import PkgName, SimplePkg
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)

DEVEL_SUFFIXES = ("-git", "-hg", "-svn", "-darcs", "-cvs", "-bzr")


def _query(settings: Settings, args: list[str]) -> Outcome[list[str]]:
    result: PacmanResult = pacman(settings, args)
    if result.ok:
        return Outcome.success(result.lines())
    if result.ran and result.returncode == 1 and not result.stdout.strip() and not result.stderr.strip():
        return Outcome.success([])
    return Outcome.fail(
        FailureKind.QUERY_FAILED,
        f"pacman {' '.join(args)} failed",
        detail=result.describe(),
        source="pacman",
    )


def foreign_packages(settings: Settings) -> Outcome[frozenset[SimplePkg]]:
    """Installed packages not found in any sync database (``-Qm``)."""
    outcome = _query(settings, ["-Qm"])
    if outcome.failed:
        return Outcome.from_failure(outcome.failure)

    pkgs = set()
    for line in outcome.unwrap():
        parts = line.split()
        if len(parts) != 2:
            logger.debug("Skipping unparsable -Qm line: %r", line)
            continue
        pkgs.add(SimplePkg(name=PkgName(parts[0]), version=parts[1]))
    return Outcome.success(frozenset(pkgs))


def orphans(settings: Settings) -> Outcome[frozenset[PkgName]]:
    """Dependencies that nothing requires any more (``-Qqdt``)."""
    outcome = _query(settings, ["-Qqdt"])
    if outcome.failed:
        return Outcome.from_failure(outcome.failure)
    return Outcome.success(frozenset(PkgName(line.strip()) for line in outcome.unwrap()))


def is_devel(name: str) -> bool:
    """Whether a name follows the VCS-package suffix convention."""
    return name.endswith(DEVEL_SUFFIXES)


def devel_pkgs(settings: Settings) -> Outcome[frozenset[PkgName]]:
    """Foreign packages that track an upstream VCS tip."""
    outcome = foreign_packages(settings)
    if outcome.failed:
        return Outcome.from_failure(outcome.failure)
    return Outcome.success(frozenset(p.name for p in outcome.unwrap() if is_devel(p.name)))


def is_installed(settings: Settings, name: str) -> PkgName | None:
    """Return the name if the package is installed, else None."""
    if pacman(settings, ["-Qq", "--", name]).ok:
        return PkgName(name)
    return None


def installed_names(settings: Settings, names: Iterable[str]) -> Outcome[frozenset[PkgName]]:
    """Which of ``names`` are installed, in one ``pacman -Qq`` call.

    pacman prints the installed ones and exits 1 when any is missing, so
    the exit status alone says nothing about individual names.
    """
    requested = sorted(set(names))
    if not requested:
        return Outcome.success(frozenset())

    result = pacman(settings, ["-Qq", "--", *requested])
    if not result.ran:
        return Outcome.fail(
            FailureKind.QUERY_FAILED, "pacman -Qq failed", detail=result.describe(), source="pacman",
        )
    found = frozenset(PkgName(line.strip()) for line in result.lines())
    return Outcome.success(found & frozenset(requested))


def remove_packages(settings: Settings, names: Iterable[str]) -> Outcome[None]:
    """Remove packages with their unneeded dependencies (``-Rsu``).

    Callers are expected to wrap this in ``require_elevated`` and to wait
    for the database lock first.
    """
    targets = sorted(set(names))
    if not targets:
        raise ValueError("remove_packages needs at least one package")

    args = ["-Rsu", *targets, *settings.pacman.as_flags()]
    logger.info("Removing %d package(s): %s", len(targets), " ".join(targets))
    result = pacman(settings, args)
    if result.ok:
        return Outcome.success(None)
    return Outcome.fail(
        FailureKind.REMOVAL_FAILED,
        "Package removal failed",
        detail=result.describe(),
        source="pacman",
    )
