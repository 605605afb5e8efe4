"""
Config command group backed by ModelManagerService.

Commands:
    - config show [FIELD]           # Display configuration
    - config set FIELD VALUE        # Update one field and save
    - config reset [FIELD ...]      # Reset fields (or everything) to defaults
"""

import click

from yeelightctl.model_manager import ModelManagerService
from yeelightctl.models import AppConfig

from ..context import CliState, cli_errors, pass_state


def _service(state: CliState) -> ModelManagerService[AppConfig]:
    return ModelManagerService[AppConfig](
        AppConfig, state.load_config(), default_path=state.config_path
    )


def _format_value(value) -> str:
    if hasattr(value, "value"):
        return str(value.value)
    return "(not set)" if value is None else str(value)


@click.group(name="config")
def config_group():
    """Configure yeelightctl settings."""
    pass


@config_group.command(name="show")
@click.argument("field", required=False)
@pass_state
@cli_errors
def show_command(state: CliState, field):
    """Show configuration values."""
    service = _service(state)
    fields = AppConfig.model_fields
    if field:
        if field not in fields:
            raise click.BadParameter(f"Unknown field '{field}'", param_hint="FIELD")
        click.echo(_format_value(service.get(field)))
        return

    click.echo(f"Configuration ({state.config_path}):\n")
    for name, info in fields.items():
        click.echo(f"  {name:<28} {_format_value(service.get(name))}")
        if info.description:
            click.echo(f"  {'':<28} {info.description}")


@config_group.command(name="set")
@click.argument("field")
@click.argument("value")
@pass_state
@cli_errors
def set_command(state: CliState, field, value):
    """Set FIELD to VALUE and save."""
    if field not in AppConfig.model_fields:
        raise click.BadParameter(f"Unknown field '{field}'", param_hint="FIELD")
    service = _service(state)
    service.set(field, value)
    service.save()
    click.echo(f"{field} = {_format_value(service.get(field))}")


@config_group.command(name="reset")
@click.argument("fields", nargs=-1)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@pass_state
@cli_errors
def reset_command(state: CliState, fields, yes):
    """Reset the given fields, or all fields, to defaults."""
    unknown = [f for f in fields if f not in AppConfig.model_fields]
    if unknown:
        raise click.BadParameter(f"Unknown field(s): {', '.join(unknown)}", param_hint="FIELDS")
    if not yes:
        click.confirm(f"Reset {', '.join(fields) if fields else 'all settings'}?", abort=True)

    service = _service(state)
    service.reset(list(fields) or None)
    if state.data_dir:
        service.set("data_dir", state.data_dir)
    service.save()
    click.echo("Configuration reset")
