"""
Outcome and Failure models: the result contract.

Every operation that can fail returns an ``Outcome``. Callers inspect
``outcome.ok`` / ``outcome.failure`` instead of catching exceptions.
The only place an exception is raised from a failure is ``unwrap()``,
which the CLI uses at its outer edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class FailureKind(StrEnum):
    """Enumerated failure kinds."""

    PROVIDER_FAILURE = "provider_failure"
    MUST_BE_ROOT = "must_be_root"
    TRUE_ROOT_FORBIDDEN = "true_root_forbidden"
    REMOVAL_FAILED = "removal_failed"
    QUERY_FAILED = "query_failed"
    BUILD_FAILED = "build_failed"


class Failure(BaseModel):
    """A structured failure value.

    ``detail`` carries the raw payload of the underlying tool (for example
    pacman's stderr) so callers can show it verbatim.
    """

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str
    detail: str = ""
    source: str | None = None   # provider or command that failed

    def __str__(self) -> str:
        prefix = f"[{self.source}] " if self.source else ""
        return f"{prefix}{self.message}"


class FailureError(Exception):
    """Raised by ``Outcome.unwrap()`` when the outcome is a failure."""

    def __init__(self, failure: Failure):
        super().__init__(str(failure))
        self.failure = failure


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a failure, never both."""

    value: T | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.failure is None

    @property
    def failed(self) -> bool:
        """Whether the operation failed."""
        return self.failure is not None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        """Create a success outcome."""
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        kind: FailureKind,
        message: str,
        detail: str = "",
        source: str | None = None,
    ) -> Outcome[T]:
        """Create a failure outcome."""
        return cls(failure=Failure(kind=kind, message=message, detail=detail, source=source))

    @classmethod
    def from_failure(cls, failure: Failure) -> Outcome[T]:
        """Re-wrap an existing failure, typically to change the value type."""
        return cls(failure=failure)

    def unwrap(self) -> T:
        """Return the value or raise ``FailureError``."""
        if self.failure is not None:
            raise FailureError(self.failure)
        return self.value  # type: ignore[return-value]
