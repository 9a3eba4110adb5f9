"""Adapters: package sources behind the Repository protocol.

Public re-exports for convenient access.
"""

from pacgate.adapters.base import (
    FallbackRepository,
    LookupResult,
    ParallelRepository,
    Repository,
    alternatives,
    chain,
    compose,
)
from pacgate.adapters.mock import MockRepository
from pacgate.adapters.registry import RepositoryRegistry, default_registry

__all__ = [
    "FallbackRepository",
    "LookupResult",
    "MockRepository",
    "ParallelRepository",
    "Repository",
    "RepositoryRegistry",
    "alternatives",
    "chain",
    "compose",
    "default_registry",
]
