"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path

import click

from .commands import (
    automations_group,
    config_group,
    devices_group,
    effects_group,
    flow_group,
    groups_group,
    presets_group,
    scenes_group,
)
from .context import CliState, show_error

logger = logging.getLogger(__name__)

_file_handler: logging.Handler | None = None


def resolve_log_path(debug: bool, log_file: Path | None, data_dir: Path | None = None) -> Path:
    """Where logs go: --log-file, ./yeelightctl-debug.log in debug mode, else the data dir."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "yeelightctl-debug.log"
    log_dir = (data_dir or Path.home() / ".yeelightctl") / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "yeelightctl.log"


def setup_logging(
    verbose: int,
    debug: bool,
    log_file: Path | None,
    log_level: str,
    data_dir: Path | None = None,
) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
        data_dir: Data directory holding the default logs/ folder

    Returns:
        Path of the log file
    """
    global _file_handler

    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Explicit log level wins when logging to a custom file
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file, data_dir)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=10 * 1024 * 1024, backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if _file_handler is not None:
        root_logger.removeHandler(_file_handler)
        _file_handler.close()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    _file_handler = file_handler

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version="0.1.0", prog_name="yeelightctl")
@click.option("--simulate", is_flag=True, help="Use simulated bulbs instead of the network")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for config, effects, groups, scenes and logs (default: ~/.yeelightctl)",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option(
    "--debug", is_flag=True, help="Enable debug mode (DEBUG level, logs to ./yeelightctl-debug.log)"
)
@click.option("--log-file", type=click.Path(path_type=Path), default=None, help="Custom log file path")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(
    ctx,
    simulate: bool,
    data_dir: Path | None,
    verbose: int,
    debug: bool,
    log_file: Path | None,
    log_level: str,
):
    """
    yeelightctl - control Yeelight bulbs and their colour flows.

    Run without a command to open the terminal UI.

    \b
    Examples:
      # Open the TUI with demo bulbs
      yeelightctl --simulate

      # Find bulbs on the network
      yeelightctl devices discover

      # Start the Pulse preset forever on one bulb
      yeelightctl flow start --ip 192.168.1.20 --preset Pulse

      # Turn on a saved scene
      yeelightctl scenes activate Evening

      # Run a custom two-step flow three times, then turn off
      yeelightctl flow start -i 192.168.1.20 -t 500:rgb:255,0,0 -t 500:bright:10 -c 3 -a off

      # Enable debug logging
      yeelightctl --debug
    """
    log_path = setup_logging(verbose, debug, log_file, log_level, data_dir)
    ctx.obj = CliState(simulate=simulate, data_dir=data_dir, log_path=log_path)

    # A sub-command does its own work
    if ctx.invoked_subcommand is not None:
        return

    # Lazy imports keep sub-commands from loading Textual
    from yeelightctl.app import YeelightController
    from yeelightctl.tui import YeelightControlApp

    logger.info("Starting yeelightctl TUI")

    try:
        state = ctx.obj
        controller = YeelightController(
            state.load_config(), config_path=state.config_path, simulate=simulate
        )
        app = YeelightControlApp(controller)
        app.run()

        # Startup failures exit the app first so the message is readable
        if app.startup_error:
            raise app.startup_error

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running application")
        show_error(e, log_path)
        click.echo("For logging options, run: yeelightctl --help", err=True)
        sys.exit(1)


# Register commands
cli.add_command(presets_group)
cli.add_command(devices_group)
cli.add_command(flow_group)
cli.add_command(effects_group)
cli.add_command(groups_group)
cli.add_command(automations_group)
cli.add_command(scenes_group)
cli.add_command(config_group)

if __name__ == "__main__":
    cli()
