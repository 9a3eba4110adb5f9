"""
Repository base: the lookup protocol between the core and package sources.

A repository answers one question for a batch of names: which of these
can you provide? It returns the names it could not resolve and the
packages it did resolve. Repositories compose:

    compose(a, b)   ask ``a`` first, ask ``b`` only about what ``a`` missed
    chain([a, b, c])
                    fold a priority-ordered list with ``compose``
    alternatives([a, b])
                    ask unordered alternatives concurrently

A composed repository is itself a ``Repository``, so chains nest freely.
Lookups never raise; a provider that cannot be reached produces a failed
``Outcome`` and aborts the whole composed lookup.
"""

from __future__ import annotations

import concurrent.futures
import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.package import FromAur, FromRepo, PkgName
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupResult:
    """Answer of a single repository lookup."""

    unresolved: frozenset[PkgName] = field(default_factory=frozenset)
    resolved: frozenset[FromRepo | FromAur] = field(default_factory=frozenset)

    @property
    def resolved_names(self) -> frozenset[PkgName]:
        return frozenset(p.name for p in self.resolved)

    @property
    def complete(self) -> bool:
        """Whether every requested name was resolved."""
        return not self.unresolved

    def merge(self, later: LookupResult) -> LookupResult:
        """Combine with the answer for the names this result left open."""
        return LookupResult(unresolved=later.unresolved, resolved=self.resolved | later.resolved)


class Repository(ABC):
    """Abstract base class for package sources.

    To create a new source:
        1. Subclass Repository
        2. Implement ``name`` and ``_lookup``
        3. Register it in the RepositoryRegistry, or compose it directly
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The repository identifier (e.g., 'sync', 'aur')."""

    def is_available(self) -> bool:
        """Cheap check that the backing source can be queried."""
        return True

    @abstractmethod
    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        """Resolve a non-empty batch of names. May raise; ``lookup`` guards it."""

    def lookup(self, settings: Settings, names: Iterable[str]) -> Outcome[LookupResult]:
        """Resolve a non-empty batch of names.

        The provider's answer is normalised so that a name is never both
        resolved and unresolved, and unrequested packages are dropped.

        Raises:
            ValueError: If ``names`` is empty.
        """
        requested = frozenset(PkgName(n) for n in names)
        if not requested:
            raise ValueError(f"Empty lookup request for repository '{self.name}'")

        try:
            outcome = self._lookup(settings, requested)
        except Exception as e:
            logger.error("Repository %s raised during lookup: %s", self.name, e)
            return Outcome.fail(
                FailureKind.PROVIDER_FAILURE,
                f"Unexpected error: {e}",
                source=self.name,
            )

        if outcome.failed:
            return outcome
        if outcome.value is None:
            return Outcome.fail(
                FailureKind.PROVIDER_FAILURE, "Provider returned no result", source=self.name,
            )

        answered = [p for p in outcome.value.resolved if p.name in requested]
        dropped = len(outcome.value.resolved) - len(answered)
        if dropped:
            logger.debug("Repository %s returned %d unrequested package(s)", self.name, dropped)

        # One package per name; a prebuilt artifact beats a recipe.
        chosen: dict[PkgName, FromRepo | FromAur] = {}
        for pkg in sorted(answered, key=lambda p: (p.name, not isinstance(p, FromRepo))):
            if pkg.name in chosen:
                logger.debug(
                    "Repository %s returned %s twice, keeping the %s package",
                    self.name, pkg.name, chosen[pkg.name].origin,
                )
                continue
            chosen[pkg.name] = pkg

        resolved = frozenset(chosen.values())
        unresolved = requested - frozenset(chosen)
        return Outcome.success(LookupResult(unresolved=unresolved, resolved=resolved))

    def then(self, other: Repository) -> Repository:
        """Fall back to ``other`` for whatever this repository misses."""
        return compose(self, other)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class FallbackRepository(Repository):
    """Two repositories queried in priority order."""

    def __init__(self, first: Repository, second: Repository):
        self.first = first
        self.second = second

    @property
    def name(self) -> str:
        return f"{self.first.name}+{self.second.name}"

    def is_available(self) -> bool:
        return self.first.is_available() and self.second.is_available()

    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        head = self.first.lookup(settings, names)
        if head.failed:
            return head
        result = head.unwrap()
        if result.complete:
            return head

        tail = self.second.lookup(settings, result.unresolved)
        if tail.failed:
            return tail
        return Outcome.success(result.merge(tail.unwrap()))


class ParallelRepository(Repository):
    """Unordered alternatives queried concurrently.

    Every provider sees the full request. When several resolve the same
    name, the earliest provider in list order wins.
    """

    def __init__(self, repositories: Sequence[Repository]):
        if not repositories:
            raise ValueError("ParallelRepository needs at least one repository")
        self.repositories = list(repositories)

    @property
    def name(self) -> str:
        return "|".join(r.name for r in self.repositories)

    def is_available(self) -> bool:
        return all(r.is_available() for r in self.repositories)

    def _lookup(self, settings: Settings, names: frozenset[PkgName]) -> Outcome[LookupResult]:
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=len(self.repositories),
        ) as pool:
            outcomes = list(pool.map(lambda r: r.lookup(settings, names), self.repositories))

        for outcome in outcomes:
            if outcome.failed:
                return outcome

        chosen: dict[PkgName, FromRepo | FromAur] = {}
        for outcome in outcomes:
            for pkg in sorted(outcome.unwrap().resolved, key=lambda p: p.name):
                chosen.setdefault(pkg.name, pkg)

        resolved = frozenset(chosen.values())
        return Outcome.success(
            LookupResult(unresolved=names - frozenset(chosen), resolved=resolved)
        )


def compose(first: Repository, second: Repository) -> Repository:
    """Combine two repositories into one that falls back from first to second."""
    return FallbackRepository(first, second)


def chain(repositories: Sequence[Repository]) -> Repository:
    """Fold a priority-ordered, non-empty list of repositories into one."""
    if not repositories:
        raise ValueError("Cannot chain an empty list of repositories")
    return functools.reduce(compose, repositories)


def alternatives(repositories: Sequence[Repository]) -> Repository:
    """Combine unordered alternatives that may be queried in parallel."""
    return ParallelRepository(repositories)
