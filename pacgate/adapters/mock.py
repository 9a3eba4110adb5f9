"""
Mock repository: in-memory test double for any package source.

Resolves names from a fixed catalogue without touching pacman or the
network. Can be switched to fail, and records every batch it receives.
"""

from __future__ import annotations

from collections.abc import Iterable

from pacgate.adapters.base import LookupResult, Repository
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import FromAur, FromRepo, PkgName
from pacgate.core.models.settings import Settings


class MockRepository(Repository):
    """In-memory repository for tests and dry runs."""

    def __init__(
        self,
        repository_name: str = "mock",
        packages: Iterable[FromRepo | FromAur] = (),
        available: bool = True,
    ):
        self._name = repository_name
        self._packages: dict[PkgName, FromRepo | FromAur] = {p.name: p for p in packages}
        self._available = available
        self._failure: str | None = None
        self._call_log: list[frozenset[PkgName]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[frozenset[PkgName]]:
        """Every batch of names this mock has been asked about."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def add(self, package: FromRepo | FromAur) -> None:
        self._packages[package.name] = package

    def set_failure(self, error: str = "Mock failure") -> None:
        """Make every subsequent lookup fail."""
        self._failure = error

    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        self._call_log.append(names)

        if self._failure is not None:
            return Outcome.fail(FailureKind.PROVIDER_FAILURE, self._failure, source=self._name)

        resolved = frozenset(self._packages[n] for n in names if n in self._packages)
        return Outcome.success(
            LookupResult(
                unresolved=frozenset(n for n in names if n not in self._packages),
                resolved=resolved,
            )
        )

    def reset(self) -> None:
        """Clear the call log and any configured failure."""
        self._call_log.clear()
        self._failure = None
