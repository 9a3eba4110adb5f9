"""
Privilege guards.

Two wrappers around an action that returns an ``Outcome``:

    require_elevated   root privilege is needed (directly or via sudo)
    forbid_true_root   the literal root account may not build packages,
                       unless the build user is explicitly set to "root"

Both only read the Settings snapshot. On success the action runs exactly
once and its Outcome is returned as-is; on failure it never runs. Guards
stack because they return what they wrap:

    require_elevated(ss, lambda: forbid_true_root(ss, action))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from pacgate.core.models.failure import FailureKind, Outcome
from pacgate.core.models.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

MUST_BE_ROOT = "You have to use sudo for that."
TRUE_ROOT = "You should never build packages as the true root. Are you okay?"


def require_elevated(settings: Settings, action: Callable[[], Outcome[T]]) -> Outcome[T]:
    """Run ``action`` only with root privilege."""
    if not settings.env.has_root_priv:
        logger.debug("Refusing privileged action: euid=%d", settings.env.euid)
        return Outcome.fail(FailureKind.MUST_BE_ROOT, MUST_BE_ROOT)
    return action()


def forbid_true_root(settings: Settings, action: Callable[[], Outcome[T]]) -> Outcome[T]:
    """Run ``action`` unless we are the true root without a root build user."""
    if settings.env.is_true_root and settings.build.user != "root":
        logger.debug("Refusing to build as true root")
        return Outcome.fail(FailureKind.TRUE_ROOT_FORBIDDEN, TRUE_ROOT)
    return action()
