"""Automation commands."""

import click

from ..context import CliState, cli_errors, pass_state, run_async


@click.group(name="automations")
def automations_group():
    """Stored automations."""
    pass


@automations_group.command(name="list")
@pass_state
@cli_errors
def list_command(state: CliState):
    """List automations."""
    controller = state.controller()
    automations = controller.automations.automations
    if not automations:
        click.echo("No automations.")
        return
    for automation in automations:
        status = "enabled" if automation.enabled else "disabled"
        click.echo(f"{automation.id:<34} {automation.name} ({status})")
        click.echo(f"    {automation.describe()}")
        if automation.last_run:
            click.echo(f"    Last run: {automation.last_run:%Y-%m-%d %H:%M}")


@automations_group.command(name="run")
@click.argument("automation")
@pass_state
@cli_errors
def run_command(state: CliState, automation):
    """Run an automation's actions now (by id or name)."""
    controller = state.controller()
    found = controller.automations.find_automation(automation)
    run_async(controller.automations.run(found.id))
    click.echo(f"Ran automation '{found.name}'")


@automations_group.command(name="enable")
@click.argument("automation")
@pass_state
@cli_errors
def enable_command(state: CliState, automation):
    """Enable an automation."""
    controller = state.controller()
    found = controller.automations.enable(controller.automations.find_automation(automation).id)
    click.echo(f"Enabled '{found.name}'")


@automations_group.command(name="disable")
@click.argument("automation")
@pass_state
@cli_errors
def disable_command(state: CliState, automation):
    """Disable an automation."""
    controller = state.controller()
    found = controller.automations.disable(controller.automations.find_automation(automation).id)
    click.echo(f"Disabled '{found.name}'")
