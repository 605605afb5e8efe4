"""Device group commands."""

import click

from yeelightctl.models import SyncMode

from ..context import CliState, cli_errors, pass_state, run_async


@click.group(name="groups")
def groups_group():
    """Groups of bulbs controlled together."""
    pass


@groups_group.command(name="list")
@pass_state
@cli_errors
def list_command(state: CliState):
    """List groups and their members."""
    controller = state.controller()
    groups = controller.groups.groups
    if not groups:
        click.echo("No groups. Create one with 'yeelightctl groups create NAME -d DEVICE'.")
        return
    for group in groups:
        click.echo(f"{group.name} ({group.sync_mode.value}, {len(group.device_ids)} devices)")
        for device_id in group.device_ids:
            device = controller.devices.get_device(device_id)
            click.echo(f"    - {device.display_name if device else device_id}")


@groups_group.command(name="create")
@click.argument("name")
@click.option("--device", "-d", "device_ids", multiple=True, help="Member device id (repeatable)")
@click.option(
    "--sync",
    "-s",
    type=click.Choice([m.value for m in SyncMode], case_sensitive=False),
    default=SyncMode.MIRROR.value,
    help="How commands reach the members",
)
@pass_state
@cli_errors
def create_command(state: CliState, name, device_ids, sync):
    """Create a group."""
    controller = state.controller()
    group = controller.groups.create_group(name, device_ids, SyncMode(sync.lower()))
    click.echo(f"Created group '{group.name}' with {len(group.device_ids)} device(s)")


@groups_group.command(name="delete")
@click.argument("name")
@pass_state
@cli_errors
def delete_command(state: CliState, name):
    """Delete a group (by id or name)."""
    controller = state.controller()
    group = controller.groups.find_group(name)
    controller.groups.delete_group(group.id)
    click.echo(f"Deleted group '{group.name}'")


@groups_group.command(name="on")
@click.argument("name")
@pass_state
@cli_errors
def on_command(state: CliState, name):
    """Turn every bulb in a group on."""
    controller = state.controller()
    group = controller.groups.find_group(name)
    run_async(controller.groups.turn_on_all(group.id))
    click.echo(f"Group '{group.name}' on")


@groups_group.command(name="off")
@click.argument("name")
@pass_state
@cli_errors
def off_command(state: CliState, name):
    """Turn every bulb in a group off."""
    controller = state.controller()
    group = controller.groups.find_group(name)
    run_async(controller.groups.turn_off_all(group.id))
    click.echo(f"Group '{group.name}' off")
