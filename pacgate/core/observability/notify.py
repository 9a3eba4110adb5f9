"""
Notification sinks.

The core reports to a ``Notifier`` with three severities plus a labelled
list of package names. How that is rendered (colour, language, layout)
is the sink's business; the CLI provides a coloured one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Where the core sends user-facing messages."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Normal progress message."""

    @abstractmethod
    def warn(self, message: str) -> None:
        """Something needs attention but work continues."""

    @abstractmethod
    def scold(self, message: str) -> None:
        """Something went wrong."""

    @abstractmethod
    def report(self, label: str, names: Iterable[str]) -> None:
        """A message followed by the package names it concerns."""


class LoggingNotifier(Notifier):
    """Send everything to the ``logging`` module."""

    def __init__(self, name: str = "pacgate"):
        self._logger = logging.getLogger(name)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def scold(self, message: str) -> None:
        self._logger.error(message)

    def report(self, label: str, names: Iterable[str]) -> None:
        self._logger.warning("%s %s", label, ", ".join(names))
