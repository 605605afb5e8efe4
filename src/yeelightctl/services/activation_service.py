"""Start/stop dispatch of flows to devices."""

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable
from typing import Any

from pydantic import ValidationError

from yeelightctl.devices import DeviceManager
from yeelightctl.exceptions import (
    DeviceNotFoundError,
    EmptyFlowError,
    YeelightCtlError,
    collect_errors,
    wrap_flow_error,
)
from yeelightctl.flow import resolve_preset
from yeelightctl.models import AppConfig, FlowAction, FlowParams, FlowPreset, FlowTransition
from yeelightctl.protocols import FlowCommand

logger = logging.getLogger(__name__)


class FlowActivationService:
    """
    Turns preset or custom selections into FlowParams and sends them to devices.

    Requests come in two forms:
    - Coroutines (`start`, `stop`, `toggle`) that complete when the bulb has
      answered and raise DispatchError on failure. The CLI awaits these.
    - Fire-and-forget (`request_start`, `request_toggle`) that validate
      synchronously, schedule the coroutine with `dispatch` and return at
      once. The TUI uses these; the outcome reaches the UI through device
      observers, and failures are logged and passed to `on_error`.

    Threading:
        Must be used from the asyncio event loop thread.
    """

    def __init__(self, devices: DeviceManager, config: AppConfig):
        """
        Initialize the activation service.

        Args:
            devices: Device manager that owns the bulbs
            config: Application configuration (flow defaults)
        """
        self._devices = devices
        self.config = config
        self._tasks: set[asyncio.Task] = set()
        self.on_error: Callable[[YeelightCtlError], None] | None = None
        logger.info("FlowActivationService initialized")

    @property
    def devices(self) -> DeviceManager:
        return self._devices

    # =================================================================
    # Building params
    # =================================================================

    def resolve(
        self,
        preset: FlowPreset | str | None = None,
        transitions: Iterable[FlowTransition] | None = None,
        count: int | None = None,
        action: FlowAction | None = None,
    ) -> FlowParams:
        """
        Build FlowParams from a preset or from custom transitions.

        Custom (or no preset) uses `transitions`; any other preset ignores
        them. Missing count/action fall back to the configured defaults.
        The result may be empty; `validate` rejects that before dispatch.

        Raises:
            FlowValidationError: If count is negative
        """
        if isinstance(preset, str) and not isinstance(preset, FlowPreset):
            preset = FlowPreset.from_name(preset) or preset

        if preset is None or preset is FlowPreset.CUSTOM:
            sequence = tuple(transitions or ())
        else:
            sequence = resolve_preset(preset)

        try:
            return FlowParams(
                count=self.config.default_flow_count if count is None else count,
                action=action or self.config.default_flow_action,
                transitions=sequence,
            )
        except ValidationError as e:
            raise wrap_flow_error(e) from e

    @staticmethod
    def validate(params: FlowParams, context: str = "flow") -> FlowParams:
        """
        Reject params that must never be sent.

        Raises:
            EmptyFlowError: If params has no transitions
        """
        if params.is_empty:
            raise EmptyFlowError(context)
        return params

    # =================================================================
    # Awaitable requests
    # =================================================================

    async def start(self, device_ids: Iterable[str], params: FlowParams) -> None:
        """
        Start a flow on one or more devices.

        With several devices every device is tried; failures are reported
        together as one DispatchError afterwards.

        Raises:
            EmptyFlowError: If params has no transitions (nothing is sent)
            DispatchError: If any device failed
        """
        self.validate(params)
        ids = list(device_ids)
        if len(ids) == 1:
            await self._devices.start_color_flow(ids[0], params)
            return

        collector = collect_errors("start flow")
        for device_id in ids:
            with collector.try_operation(f"start flow on {device_id}"):
                await self._devices.start_color_flow(device_id, params)
        if collector.has_errors:
            raise collector.to_dispatch_error()

    async def stop(self, device_ids: Iterable[str]) -> None:
        """Stop flows on one or more devices."""
        ids = list(device_ids)
        if len(ids) == 1:
            await self._devices.stop_color_flow(ids[0])
            return

        collector = collect_errors("stop flow")
        for device_id in ids:
            with collector.try_operation(f"stop flow on {device_id}"):
                await self._devices.stop_color_flow(device_id)
        if collector.has_errors:
            raise collector.to_dispatch_error()

    def decide(self, device_id: str, params: FlowParams | None) -> FlowCommand:
        """
        Work out what a toggle on this device means right now.

        Raises:
            DeviceNotFoundError: If the device is unknown
            EmptyFlowError: If the device is idle and params is empty
        """
        device = self._devices.get_device(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        if device.flowing:
            return FlowCommand.STOP
        if params is None:
            raise EmptyFlowError()
        self.validate(params)
        return FlowCommand.START

    async def toggle(self, device_id: str, params: FlowParams | None) -> FlowCommand:
        """
        Stop the flow if the device is flowing, otherwise start `params`.

        Returns:
            The command that was sent
        """
        command = self.decide(device_id, params)
        await self._send(command, device_id, params)
        return command

    async def _send(self, command: FlowCommand, device_id: str, params: FlowParams | None) -> None:
        if command is FlowCommand.STOP:
            await self._devices.stop_color_flow(device_id)
        else:
            await self._devices.start_color_flow(device_id, params)

    # =================================================================
    # Fire-and-forget requests
    # =================================================================

    def dispatch(self, coro: Coroutine[Any, Any, Any], operation: str = "request") -> asyncio.Task:
        """
        Schedule a request without waiting for it.

        The task is kept alive until done. A failure is logged and handed to
        `on_error`; it never propagates into the caller.
        """
        task = asyncio.get_running_loop().create_task(coro, name=operation)
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_task_done(t, operation))
        return task

    def _on_task_done(self, task: asyncio.Task, operation: str) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"{operation} cancelled")
            return
        error = task.exception()
        if error is None:
            return
        if isinstance(error, YeelightCtlError):
            logger.error(f"Failed to {operation}: {error.technical_message}")
            if self.on_error:
                self.on_error(error)
        else:
            logger.error(f"Unexpected error during {operation}: {error}", exc_info=error)

    def request_start(self, device_ids: Iterable[str], params: FlowParams) -> asyncio.Task:
        """Validate now, start in the background."""
        self.validate(params)
        ids = list(device_ids)
        return self.dispatch(self.start(ids, params), f"start flow on {', '.join(ids)}")

    def request_toggle(self, device_id: str, params: FlowParams | None) -> FlowCommand:
        """Decide and validate now, send in the background."""
        command = self.decide(device_id, params)
        self.dispatch(self._send(command, device_id, params), f"{command.value} flow on {device_id}")
        return command

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait for all dispatched requests to finish (their errors stay logged)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
