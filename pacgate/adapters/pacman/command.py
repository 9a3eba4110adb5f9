"""
Pacman command runner.

The single place where pacman (and vercmp) subprocesses are started.
It never raises: a missing binary, a timeout or an OS error comes back
as a failed ``PacmanResult``.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass

from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Keep captured output bounded in logs and failure payloads.
_TAIL = 4000


@dataclass(frozen=True)
class PacmanResult:
    """Outcome of one pacman invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    error: str = ""          # set when the process could not run at all
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.error

    @property
    def ran(self) -> bool:
        """Whether the binary actually ran (regardless of exit status)."""
        return not self.error

    def lines(self) -> list[str]:
        """Non-empty stdout lines."""
        return [line for line in self.stdout.splitlines() if line.strip()]

    def describe(self) -> str:
        """Short human-readable reason for a failure."""
        if self.error:
            return self.error
        return self.stderr.strip()[-_TAIL:] or f"exit status {self.returncode}"


def run_command(cmd: list[str], *, timeout: int = 120) -> PacmanResult:
    """Run a command and capture its output."""
    logger.debug("Executing: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        return PacmanResult(args=tuple(cmd), returncode=-1, error=f"{cmd[0]} not found on PATH")
    except subprocess.TimeoutExpired:
        return PacmanResult(args=tuple(cmd), returncode=-1, error=f"Command timed out ({timeout}s)")
    except OSError as e:
        logger.warning("OS error running %s: %s", cmd[0], e)
        return PacmanResult(args=tuple(cmd), returncode=-1, error=str(e))

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if result.returncode != 0:
        logger.debug("%s exited %d: %s", cmd[0], result.returncode, result.stderr.strip()[-200:])

    return PacmanResult(
        args=tuple(cmd),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=(result.stderr or "")[-_TAIL:],
        elapsed_ms=elapsed_ms,
    )


def pacman(settings: Settings, args: list[str]) -> PacmanResult:
    """Run ``pacman <args>`` with the configured binary and timeout."""
    return run_command([settings.pacman.binary, *args], timeout=settings.pacman.timeout)


def pacman_success(settings: Settings, args: list[str]) -> bool:
    """True if pacman exits 0."""
    return pacman(settings, args).ok
