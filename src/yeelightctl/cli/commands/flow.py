"""Flow start/stop commands."""

import click

from yeelightctl.flow import parse_transition
from yeelightctl.models import FlowAction, FlowPreset

from ..context import CliState, cli_errors, pass_state, run_async

target_option = click.option(
    "--ip",
    "-i",
    "targets",
    multiple=True,
    required=True,
    help="Bulb IP address or device id (repeat for several bulbs)",
)
preset_option = click.option(
    "--preset",
    "-p",
    type=click.Choice([p.value for p in FlowPreset], case_sensitive=False),
    default=None,
    help="Preset to run (Custom uses --transition)",
)
count_option = click.option(
    "--count", "-c", type=click.IntRange(min=0), default=None, help="Repetitions (0 = forever)"
)
action_option = click.option(
    "--action",
    "-a",
    type=click.Choice([a.value for a in FlowAction], case_sensitive=False),
    default=None,
    help="What the bulb does when the flow ends",
)
transition_option = click.option(
    "--transition",
    "-t",
    "transitions",
    multiple=True,
    help="Custom transition DURATION:KIND:VALUES, e.g. 1000:rgb:255,0,0 (repeatable)",
)


@click.group(name="flow")
def flow_group():
    """Start and stop colour flows."""
    pass


def _build_params(controller, preset: str | None, count, action, transitions):
    if transitions and preset is None:
        preset = FlowPreset.CUSTOM.value
    chosen = FlowPreset.from_name(preset) if preset else controller.config.last_preset
    params = controller.activation.resolve(
        chosen or FlowPreset.CUSTOM,
        transitions=[parse_transition(t) for t in transitions],
        count=count,
        action=FlowAction(action.lower()) if action else None,
    )
    return chosen, params


@flow_group.command(name="start")
@target_option
@preset_option
@count_option
@action_option
@transition_option
@pass_state
@cli_errors
def start_command(state: CliState, targets, preset, count, action, transitions):
    """Start a preset or custom flow on one or more bulbs."""
    controller = state.controller()
    chosen, params = _build_params(controller, preset, count, action, transitions)
    controller.activation.validate(params, f"{chosen.value if chosen else 'custom'} flow")

    async def run():
        devices = [await controller.target(t) for t in targets]
        await controller.activation.start([d.id for d in devices], params)
        return devices

    devices = run_async(run())
    if chosen and not chosen.is_custom:
        controller.remember_preset(chosen)

    names = ", ".join(d.display_name for d in devices)
    click.echo(f"Started {len(params.transitions)}-step flow on {names}")


@flow_group.command(name="stop")
@target_option
@pass_state
@cli_errors
def stop_command(state: CliState, targets):
    """Stop the running flow on one or more bulbs."""
    controller = state.controller()

    async def run():
        devices = [await controller.target(t) for t in targets]
        await controller.activation.stop([d.id for d in devices])
        return devices

    devices = run_async(run())
    click.echo(f"Stopped flow on {', '.join(d.display_name for d in devices)}")


@flow_group.command(name="toggle")
@target_option
@preset_option
@count_option
@action_option
@transition_option
@pass_state
@cli_errors
def toggle_command(state: CliState, targets, preset, count, action, transitions):
    """Stop a flowing bulb, or start the flow on an idle one."""
    controller = state.controller()
    _, params = _build_params(controller, preset, count, action, transitions)

    async def run():
        results = []
        for target in targets:
            device = await controller.target(target)
            command = await controller.activation.toggle(device.id, params)
            results.append((device, command))
        return results

    for device, command in run_async(run()):
        click.echo(f"{device.display_name}: {command.value}")
