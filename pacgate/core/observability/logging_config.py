"""
Logging configuration for the pacgate CLI.

Called once at startup by main.py. Every module logs through
``logger = logging.getLogger(__name__)`` and inherits this setup.

Level precedence:
    --debug / --verbose / --quiet  >  PACGATE_LOG_LEVEL  >  WARNING

File output is opt-in via PACGATE_LOG_FILE (and PACGATE_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "PACGATE_LOG_LEVEL"
ENV_FILE = "PACGATE_LOG_FILE"
ENV_FILE_LEVEL = "PACGATE_LOG_FILE_LEVEL"

# (format, datefmt) per console threshold, checked lowest first
_LOCATED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
CONSOLE_LAYOUTS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _LOCATED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
# WARNING and above: bare messages, the CLI already decorates its own output
CONSOLE_PLAIN = ("%(levelname)s: %(message)s", None)

# File output: full location plus the date
FILE_LAYOUT = (_LOCATED, "%Y-%m-%d %H:%M:%S")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def console_layout(level: int) -> tuple[str, str | None]:
    """The (format, datefmt) pair used on stderr at ``level``."""
    for threshold, fmt, datefmt in CONSOLE_LAYOUTS:
        if level <= threshold:
            return fmt, datefmt
    return CONSOLE_PLAIN


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a log file.
        log_file_level: Level for the file; defaults to ``level``.
    """
    numeric_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(*console_layout(numeric_level)))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    effective_level = numeric_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*FILE_LAYOUT))
        root.addHandler(fh)

    root.setLevel(effective_level)
    logging.raiseExceptions = False


def setup_from_env(debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """``setup_logging`` driven by CLI flags plus PACGATE_* variables."""
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value, defaulting to WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
