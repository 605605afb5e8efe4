"""Preset catalog commands."""

import click

from yeelightctl.flow import format_transition, list_presets, resolve_preset
from yeelightctl.models import FlowPreset

from ..context import cli_errors


@click.group(name="presets")
def presets_group():
    """Built-in flow presets."""
    pass


@presets_group.command(name="list")
def list_command():
    """List presets with their descriptions."""
    for preset in list_presets():
        transitions = resolve_preset(preset)
        steps = f"{len(transitions)} steps" if transitions else "editor"
        click.echo(f"{preset.value:<12} {steps:<8} {preset.description}")


@presets_group.command(name="show")
@click.argument("name")
@cli_errors
def show_command(name: str):
    """Show the transitions of a preset."""
    preset = FlowPreset.from_name(name)
    if preset is None:
        raise click.BadParameter(
            f"Unknown preset '{name}'. Choose from: {', '.join(p.value for p in FlowPreset)}",
            param_hint="NAME",
        )

    click.echo(f"{preset.value}: {preset.description}\n")
    transitions = resolve_preset(preset)
    if not transitions:
        click.echo("  (no transitions - build one with the flow editor or --transition)")
        return
    for i, transition in enumerate(transitions, start=1):
        click.echo(f"  {i}. {transition.describe():<32} [{format_transition(transition)}]")
