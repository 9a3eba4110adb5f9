"""
Terminal notifier: coloured output through click.
"""

from __future__ import annotations

from collections.abc import Iterable

import click

from pacgate.core.observability.notify import Notifier


class ClickNotifier(Notifier):
    """Green for info, yellow for warnings, red for errors, cyan package names."""

    def info(self, message: str) -> None:
        click.secho(f"pacgate >>= {message}", fg="green")

    def warn(self, message: str) -> None:
        click.secho(f"pacgate >>= {message}", fg="yellow", err=True)

    def scold(self, message: str) -> None:
        click.secho(f"pacgate >>= {message}", fg="red", err=True)

    def report(self, label: str, names: Iterable[str]) -> None:
        click.secho(f"pacgate >>= {label}", fg="yellow")
        for name in names:
            click.secho(f"   {name}", fg="cyan")
