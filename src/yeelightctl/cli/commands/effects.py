"""Saved effect commands."""

import click

from yeelightctl.flow import parse_transition, preset_params
from yeelightctl.models import FlowAction, FlowPreset

from ..context import CliState, cli_errors, pass_state, run_async


@click.group(name="effects")
def effects_group():
    """Saved flow effects."""
    pass


@effects_group.command(name="list")
@pass_state
@cli_errors
def list_command(state: CliState):
    """List saved effects (built-ins first)."""
    controller = state.controller()
    for effect in controller.effects.effects:
        tag = " [built-in]" if effect.built_in else ""
        steps = len(effect.params.transitions)
        repeat = "forever" if effect.params.is_infinite else f"x{effect.params.count}"
        click.echo(f"{effect.id:<34} {effect.name}{tag}")
        click.echo(f"    {steps} steps, {repeat}, then {effect.params.action.value}")


@effects_group.command(name="create")
@click.argument("name")
@click.option(
    "--preset",
    "-p",
    type=click.Choice([p.value for p in FlowPreset if not p.is_custom], case_sensitive=False),
    default=None,
    help="Start from a preset",
)
@click.option("--transition", "-t", "transitions", multiple=True, help="DURATION:KIND:VALUES")
@click.option("--count", "-c", type=click.IntRange(min=0), default=0, help="Repetitions (0 = forever)")
@click.option(
    "--action",
    "-a",
    type=click.Choice([a.value for a in FlowAction], case_sensitive=False),
    default=FlowAction.RECOVER.value,
)
@pass_state
@cli_errors
def create_command(state: CliState, name, preset, transitions, count, action):
    """Save a new effect from a preset or from custom transitions."""
    controller = state.controller()
    chosen = FlowPreset.from_name(preset) if preset else None
    if chosen:
        params = preset_params(chosen, count, FlowAction(action.lower()))
    else:
        params = controller.activation.resolve(
            FlowPreset.CUSTOM,
            transitions=[parse_transition(t) for t in transitions],
            count=count,
            action=FlowAction(action.lower()),
        )
    effect = controller.effects.create_effect(name, params, chosen)
    click.echo(f"Created effect '{effect.name}' ({effect.id})")


@effects_group.command(name="play")
@click.argument("effect")
@click.option("--ip", "-i", "targets", multiple=True, required=True, help="Bulb IP or device id")
@pass_state
@cli_errors
def play_command(state: CliState, effect, targets):
    """Start a saved effect (by id or name) on bulbs."""
    controller = state.controller()
    found = controller.effects.find_effect(effect)

    async def run():
        devices = [await controller.target(t) for t in targets]
        await controller.effects.start_effect(found, on=[d.id for d in devices])

    run_async(run())
    click.echo(f"Started '{found.name}' on {len(targets)} bulb(s)")


@effects_group.command(name="delete")
@click.argument("effect")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@pass_state
@cli_errors
def delete_command(state: CliState, effect, yes):
    """Delete a saved effect (by id or name)."""
    controller = state.controller()
    found = controller.effects.find_effect(effect)
    if not yes:
        click.confirm(f"Delete effect '{found.name}'?", abort=True)
    controller.effects.delete_effect(found)
    click.echo(f"Deleted effect '{found.name}'")
