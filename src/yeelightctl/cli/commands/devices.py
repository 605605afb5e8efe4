"""Device commands."""

import click

from yeelightctl.models import Device

from ..context import CliState, cli_errors, pass_state, run_async


@click.group(name="devices")
def devices_group():
    """Bulbs on the local network."""
    pass


def _display_device(device: Device) -> None:
    click.echo(f"[{device.id}] {device.display_name}")
    click.echo(f"    Address: {device.ip}:{device.port}")
    click.echo(f"    Model: {device.model or 'unknown'}")
    click.echo(f"    State: {device.status_text}, brightness {device.brightness}%")
    if device.last_error:
        click.echo(f"    Last error: {device.last_error}")


@devices_group.command(name="discover")
@pass_state
@cli_errors
def discover_command(state: CliState):
    """Find bulbs on the network (LAN control must be enabled in the Yeelight app)."""
    controller = state.controller()
    devices = run_async(controller.devices.discover())

    if not devices:
        click.echo("No bulbs found.")
        click.echo("\nNote: bulbs only answer discovery when LAN control is enabled.")
        return

    click.echo(f"Found {len(devices)} bulb(s):\n")
    for device in devices:
        _display_device(device)
        click.echo()
