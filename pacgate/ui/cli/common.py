"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import sys

import click

from pacgate.core.models.failure import Failure
from pacgate.core.models.settings import Settings


def get_settings(ctx: click.Context) -> Settings:
    """Load settings once per invocation and cache them on the context."""
    settings = ctx.obj.get("settings")
    if settings is None:
        from pacgate.core.config.loader import ConfigError, load_settings

        try:
            settings = load_settings(ctx.obj.get("config_path"))
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(1)
        ctx.obj["settings"] = settings
    return settings


def fail(failure: Failure) -> None:
    """Print a failure and exit 1."""
    click.secho(f"❌ {failure}", fg="red", err=True)
    if failure.detail:
        click.echo(failure.detail, err=True)
    sys.exit(1)
