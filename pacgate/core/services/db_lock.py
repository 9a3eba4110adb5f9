"""
Database lock monitor.

pacman holds ``db.lck`` while a transaction runs. Before touching the
database we wait for it to go away:

    LOCKED   -> warn, block on one line of acknowledgement, poll again
    UNLOCKED -> proceed (terminal)

There is no timeout and no retry limit: the wait ends when the lock is
gone or the operator interrupts the process. The monitor never removes
the lock itself.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path

from pacgate.core.models.settings import Settings
from pacgate.core.observability.notify import Notifier

logger = logging.getLogger(__name__)

LOCKED_MESSAGE = (
    "The package database is locked. Another package operation may be running. "
    "Press Enter once it has finished."
)


class LockState(StrEnum):
    """Lock monitor states."""

    UNLOCKED = "unlocked"
    LOCKED = "locked"


def read_acknowledgement() -> str:
    """Block for one line on stdin.

    Raises:
        EOFError: If stdin is closed, so the wait cannot spin forever.
    """
    line = sys.stdin.readline()
    if line == "":
        raise EOFError("stdin closed while waiting for the database lock")
    return line


class DbLockMonitor:
    """Polls a lock marker until it disappears.

    Args:
        lock_file: Path of the marker file.
        notifier: Sink for the "database is locked" warning.
        wait_for_input: Blocking acknowledgement step between polls.
        exists: Presence test for the marker (injectable for tests).
    """

    def __init__(
        self,
        lock_file: Path,
        notifier: Notifier,
        wait_for_input: Callable[[], object] = read_acknowledgement,
        exists: Callable[[Path], bool] = Path.exists,
    ):
        self.lock_file = lock_file
        self._notifier = notifier
        self._wait_for_input = wait_for_input
        self._exists = exists
        self.state: LockState = LockState.LOCKED
        self.polls = 0
        self.warnings = 0

    def poll(self) -> LockState:
        """Check the marker once and record the resulting state."""
        self.polls += 1
        self.state = LockState.LOCKED if self._exists(self.lock_file) else LockState.UNLOCKED
        return self.state

    def wait(self) -> LockState:
        """Block until the marker is absent."""
        while self.poll() == LockState.LOCKED:
            logger.debug("Database lock present: %s (poll %d)", self.lock_file, self.polls)
            self.warnings += 1
            self._notifier.warn(LOCKED_MESSAGE)
            self._wait_for_input()
        return self.state


def check_db_lock(
    settings: Settings,
    notifier: Notifier,
    wait_for_input: Callable[[], object] = read_acknowledgement,
) -> LockState:
    """Block further action until the package database is free."""
    return DbLockMonitor(settings.lock_path, notifier, wait_for_input=wait_for_input).wait()
