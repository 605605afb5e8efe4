"""Shared plumbing for CLI commands: controller construction and error display."""

import asyncio
import logging
import sys
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar

import click

from yeelightctl.exceptions import YeelightCtlError, format_error_for_display
from yeelightctl.models import AppConfig
from yeelightctl.models.config import DEFAULT_CONFIG_PATH

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CliState:
    """Options of the top-level command, shared with sub-commands via ctx.obj."""

    simulate: bool = False
    data_dir: Path | None = None
    log_path: Path | None = None

    @property
    def config_path(self) -> Path:
        return self.data_dir / "config.json" if self.data_dir else DEFAULT_CONFIG_PATH

    def load_config(self) -> AppConfig:
        """Load the config file, pointing data_dir at --data-dir when given."""
        config = AppConfig.load_or_default(self.config_path)
        if self.data_dir:
            config = config.model_copy(update={"data_dir": self.data_dir})
            config.ensure_directories()
        return config

    def controller(self):
        """Build and initialize a YeelightController for one command."""
        from yeelightctl.app import YeelightController

        controller = YeelightController(
            self.load_config(), config_path=self.config_path, simulate=self.simulate
        )
        controller.initialize()
        return controller


pass_state = click.make_pass_decorator(CliState, ensure=True)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run one request to completion from a synchronous click command."""
    return asyncio.run(coro)


def show_error(error: Exception, log_path: Path | None = None) -> None:
    """Print an error the way the top-level command does: message, hint, log location."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)


def cli_errors(func: Callable[..., T]) -> Callable[..., T]:
    """
    Turn application errors into a clean message and exit code 1.

    Only YeelightCtlError (and ValueError from bad user input) is handled;
    anything else is a bug and keeps its traceback.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (YeelightCtlError, ValueError) as e:
            logger.error(f"{func.__name__} failed: {e}")
            state = click.get_current_context().find_object(CliState)
            show_error(e, state.log_path if state else None)
            sys.exit(1)

    return wrapper
