"""
CLI command for the install plan.

Thin wrapper over ``pacgate.core.use_cases.plan``.
"""

from __future__ import annotations

import json

import click

from pacgate.ui.cli.common import fail, get_settings


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--needed", is_flag=True, help="Skip packages that are already installed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, names: tuple[str, ...], needed: bool, as_json: bool) -> None:
    """Show where each package would come from: sync repos or the AUR."""
    from pacgate.adapters.registry import default_registry
    from pacgate.core.use_cases.plan import plan_install
    from pacgate.ui.cli.notify import ClickNotifier

    settings = get_settings(ctx)
    repository = default_registry(settings).resolver()
    if repository.failed:
        fail(repository.failure)
    outcome = plan_install(settings, names, repository.unwrap(), skip_installed=needed)
    if outcome.failed:
        fail(outcome.failure)

    result = outcome.unwrap()
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    notifier = ClickNotifier()
    if result.installed:
        notifier.report("Already installed:", result.installed)
    if result.unresolved:
        notifier.report("Not found in any repository:", result.unresolved)
    if result.empty:
        notifier.info("Nothing to do.")
        return

    if result.prebuilt:
        click.secho(f"📦 Repository packages ({len(result.prebuilt)}):", fg="cyan", bold=True)
        for p in result.prebuilt:
            click.echo(f"   {p.repository + '/' + p.name:<40} {p.version}")
    if result.buildable:
        click.secho(f"🔨 AUR builds ({len(result.buildable)} group(s)):", fg="cyan", bold=True)
        for group in result.buildable:
            members = sorted(group, key=lambda b: b.name)
            click.echo(f"   [{members[0].effective_base}]")
            for b in members:
                click.echo(f"      {b.name:<37} {b.version}")
    click.echo()
