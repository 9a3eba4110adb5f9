"""
pacgate: CLI entrypoint.

Usage:
    python -m pacgate.main --help
    pacgate plan firefox yay
    pacgate devel
"""

from __future__ import annotations

from pathlib import Path

import click

from pacgate import __version__
from pacgate.core.observability.logging_config import setup_from_env
from pacgate.ui.cli.maintenance import remove_orphans, wait_lock
from pacgate.ui.cli.plan import plan
from pacgate.ui.cli.query import devel, foreign, orphans, satisfied


@click.group()
@click.version_option(version=__version__, prog_name="pacgate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pacgate.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """pacgate: pacman and AUR package decisions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_env(debug=debug, verbose=verbose, quiet=quiet)


cli.add_command(foreign)
cli.add_command(orphans)
cli.add_command(devel)
cli.add_command(satisfied)
cli.add_command(plan)
cli.add_command(wait_lock)
cli.add_command(remove_orphans)


def main() -> None:
    """Entry point for the ``pacgate`` console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
