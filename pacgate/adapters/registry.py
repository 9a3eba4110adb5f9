"""
Repository registry: named package sources in priority order.

The registry is the single point of repository management. It handles
registration, ordering, availability, and building the fallback chain
that the rest of the core queries.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

from pacgate.adapters.base import LookupResult, Repository, chain
from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)


class RepositoryRegistry:
    """Registry of repositories, queried in registration order.

    Features:
        - Register/unregister repositories by name
        - Reorder by an explicit priority list (from settings)
        - Query repository availability
        - Look names up through the composed chain
    """

    def __init__(self) -> None:
        self._repositories: dict[str, Repository] = {}

    def register(self, repository: Repository) -> None:
        """Register a repository at the lowest priority."""
        name = repository.name
        if name in self._repositories:
            logger.warning("Overwriting existing repository: %s", name)
            del self._repositories[name]
        self._repositories[name] = repository
        logger.debug("Registered repository: %s", name)

    def unregister(self, name: str) -> None:
        """Remove a repository from the registry."""
        self._repositories.pop(name, None)

    def get(self, name: str) -> Repository | None:
        """Look up a repository by name."""
        return self._repositories.get(name)

    def list_repositories(self) -> list[str]:
        """Registered names, highest priority first."""
        return list(self._repositories.keys())

    def reorder(self, priority: Iterable[str]) -> None:
        """Apply a priority order; unknown names are ignored, unlisted ones dropped."""
        priority = list(priority)
        for name in priority:
            if name not in self._repositories:
                logger.warning("Unknown repository in priority list: %s", name)
        ordered = {n: self._repositories[n] for n in priority if n in self._repositories}
        for name in set(self._repositories) - set(ordered):
            logger.info("Repository '%s' not in priority list, disabled", name)
        self._repositories = ordered

    def repository_status(self) -> dict[str, dict[str, Any]]:
        """Availability status of all registered repositories."""
        status = {}
        for name, repository in self._repositories.items():
            try:
                available = repository.is_available()
            except Exception:
                available = False
            status[name] = {
                "name": name,
                "available": available,
                "type": repository.__class__.__name__,
            }
        return status

    def chain(self) -> Repository:
        """The fallback chain of all registered repositories.

        Raises:
            ValueError: If no repository is registered.
        """
        return chain(list(self._repositories.values()))

    def resolver(self) -> Outcome[Repository]:
        """The fallback chain, or a provider failure when nothing is registered."""
        if not self._repositories:
            return Outcome.fail(
                FailureKind.PROVIDER_FAILURE,
                "No repositories registered",
                detail="Check the repositories list in pacgate.yml (known: sync, aur)",
            )
        return Outcome.success(self.chain())

    def lookup(self, settings: Settings, names: Iterable[str]) -> Outcome[LookupResult]:
        """Look names up through the whole chain, with timing."""
        repository = self.resolver()
        if repository.failed:
            return Outcome.from_failure(repository.failure)

        start = time.monotonic()
        outcome = repository.unwrap().lookup(settings, names)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if outcome.failed:
            logger.error("Lookup failed after %dms: %s", elapsed_ms, outcome.failure)
        else:
            result = outcome.unwrap()
            logger.info(
                "Lookup: %d resolved, %d unresolved (%dms)",
                len(result.resolved), len(result.unresolved), elapsed_ms,
            )
        return outcome


def default_registry(settings: Settings) -> RepositoryRegistry:
    """Registry holding the built-in sources in the configured order."""
    from pacgate.adapters.aur.rpc import AurRepository
    from pacgate.adapters.pacman.sync import SyncRepository

    registry = RepositoryRegistry()
    registry.register(SyncRepository(settings.pacman.binary))
    registry.register(AurRepository())
    registry.reorder(settings.repositories)
    return registry
