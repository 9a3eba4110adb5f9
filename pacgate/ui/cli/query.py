"""
CLI commands for read-only local queries.

Thin wrappers over ``pacgate.core.services.local_state`` and
``pacgate.core.services.versions``.
"""

from __future__ import annotations

import json
import sys

import click

from pacgate.ui.cli.common import fail, get_settings


def _print_names(names: list[str], as_json: bool, empty_message: str) -> None:
    if as_json:
        click.echo(json.dumps(names, indent=2))
        return
    if not names:
        click.secho(f"✅ {empty_message}", fg="green")
        return
    for name in names:
        click.echo(name)


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def foreign(ctx: click.Context, as_json: bool) -> None:
    """List installed packages that come from no sync database."""
    from pacgate.core.services.local_state import foreign_packages

    outcome = foreign_packages(get_settings(ctx))
    if outcome.failed:
        fail(outcome.failure)

    pkgs = sorted(outcome.unwrap(), key=lambda p: p.name)
    if as_json:
        click.echo(json.dumps([{"name": p.name, "version": p.version} for p in pkgs], indent=2))
        return
    if not pkgs:
        click.secho("✅ No foreign packages", fg="green")
        return
    for p in pkgs:
        click.echo(f"{p.name:<40} {p.version}")


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def orphans(ctx: click.Context, as_json: bool) -> None:
    """List dependencies that nothing requires any more."""
    from pacgate.core.services.local_state import orphans as query_orphans

    outcome = query_orphans(get_settings(ctx))
    if outcome.failed:
        fail(outcome.failure)
    _print_names(sorted(outcome.unwrap()), as_json, "No orphans")


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def devel(ctx: click.Context, as_json: bool) -> None:
    """List installed VCS (-git, -hg, ...) packages."""
    from pacgate.core.services.local_state import devel_pkgs

    outcome = devel_pkgs(get_settings(ctx))
    if outcome.failed:
        fail(outcome.failure)
    _print_names(sorted(outcome.unwrap()), as_json, "No devel packages")


@click.command()
@click.argument("deps", nargs=-1, required=True)
@click.pass_context
def satisfied(ctx: click.Context, deps: tuple[str, ...]) -> None:
    """Check dependencies such as 'glibc>=2.38' against installed packages.

    Exits 1 if any dependency is unsatisfied.
    """
    from pacgate.core.models.package import parse_dep
    from pacgate.core.services.versions import is_satisfied

    settings = get_settings(ctx)
    all_ok = True
    for raw in deps:
        try:
            dep = parse_dep(raw)
        except ValueError as e:
            click.secho(f"❌ {e}", fg="red", err=True)
            sys.exit(2)
        if is_satisfied(settings, dep):
            click.secho(f"   ✅ {dep.as_query()}", fg="green")
        else:
            all_ok = False
            click.secho(f"   ❌ {dep.as_query()}", fg="red")

    if not all_ok:
        sys.exit(1)
