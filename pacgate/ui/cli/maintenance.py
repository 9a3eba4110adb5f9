"""
CLI commands that touch the package database.

Both wait for pacman's database lock first. Removal additionally needs
root privilege.
"""

from __future__ import annotations

import sys

import click

from pacgate.ui.cli.common import fail, get_settings


def _abort_wait(e: EOFError) -> None:
    click.secho(f"❌ Gave up waiting for the database lock: {e}", fg="red", err=True)
    sys.exit(1)


@click.command("wait-lock")
@click.pass_context
def wait_lock(ctx: click.Context) -> None:
    """Block until the pacman database lock is released."""
    from pacgate.core.services.db_lock import check_db_lock
    from pacgate.ui.cli.notify import ClickNotifier

    settings = get_settings(ctx)
    try:
        check_db_lock(settings, ClickNotifier())
    except EOFError as e:
        _abort_wait(e)
    click.secho("✅ Package database is free", fg="green")


@click.command("remove-orphans")
@click.pass_context
def remove_orphans(ctx: click.Context) -> None:
    """Remove orphaned dependencies (requires root)."""
    from pacgate.core.models.failure import Outcome
    from pacgate.core.security.privilege import require_elevated
    from pacgate.core.services.db_lock import check_db_lock
    from pacgate.core.services.local_state import orphans, remove_packages
    from pacgate.ui.cli.notify import ClickNotifier

    settings = get_settings(ctx)
    notifier = ClickNotifier()

    def _remove() -> Outcome[None]:
        found = orphans(settings)
        if found.failed:
            return Outcome.from_failure(found.failure)
        names = sorted(found.unwrap())
        if not names:
            notifier.info("No orphans to remove.")
            return Outcome.success(None)
        notifier.report("Removing orphans:", names)
        check_db_lock(settings, notifier)
        return remove_packages(settings, names)

    try:
        outcome = require_elevated(settings, _remove)
    except EOFError as e:
        _abort_wait(e)
    if outcome.failed:
        fail(outcome.failure)
