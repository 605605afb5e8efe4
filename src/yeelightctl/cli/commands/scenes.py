"""Scene commands."""

import click

from yeelightctl.exceptions import EntityNotFoundError

from ..context import CliState, cli_errors, pass_state, run_async


@click.group(name="scenes")
def scenes_group():
    """Saved effects bound to bulbs."""
    pass


@scenes_group.command(name="list")
@pass_state
@cli_errors
def list_command(state: CliState):
    """List scenes."""
    controller = state.controller()
    scenes = controller.scenes.scenes
    if not scenes:
        click.echo("No scenes. Create one with 'yeelightctl scenes create NAME -e EFFECT -d DEVICE'.")
        return
    for scene in scenes:
        marker = " [active]" if scene.is_active else ""
        try:
            effect_name = controller.effects.get_effect(scene.effect_id).name
        except EntityNotFoundError:
            effect_name = f"missing effect {scene.effect_id}"
        click.echo(f"{scene.name}{marker}: {effect_name}")
        for device_id in scene.device_ids:
            device = controller.devices.get_device(device_id)
            click.echo(f"    - {device.display_name if device else device_id}")


@scenes_group.command(name="create")
@click.argument("name")
@click.option("--effect", "-e", required=True, help="Effect id or name")
@click.option("--device", "-d", "device_ids", multiple=True, required=True, help="Device id (repeatable)")
@pass_state
@cli_errors
def create_command(state: CliState, name, effect, device_ids):
    """Create a scene."""
    controller = state.controller()
    found = controller.effects.find_effect(effect)
    scene = controller.scenes.create_scene(name, device_ids, found.id)
    click.echo(f"Created scene '{scene.name}': {found.name} on {len(scene.device_ids)} device(s)")


@scenes_group.command(name="delete")
@click.argument("scene")
@pass_state
@cli_errors
def delete_command(state: CliState, scene):
    """Delete a scene (by id or name)."""
    controller = state.controller()
    found = controller.scenes.find_scene(scene)
    controller.scenes.delete_scene(found.id)
    click.echo(f"Deleted scene '{found.name}'")


@scenes_group.command(name="activate")
@click.argument("scene")
@pass_state
@cli_errors
def activate_command(state: CliState, scene):
    """Start a scene's effect on its bulbs."""
    controller = state.controller()
    found = controller.scenes.find_scene(scene)
    run_async(controller.scenes.activate(found.id))
    click.echo(f"Scene '{found.name}' active")


@scenes_group.command(name="deactivate")
@click.argument("scene")
@pass_state
@cli_errors
def deactivate_command(state: CliState, scene):
    """Stop the flows on a scene's bulbs."""
    controller = state.controller()
    found = controller.scenes.find_scene(scene)
    run_async(controller.scenes.deactivate(found.id))
    click.echo(f"Scene '{found.name}' inactive")
