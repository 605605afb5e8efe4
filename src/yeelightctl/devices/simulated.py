"""In-memory bulbs for demo mode and tests."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from yeelightctl.exceptions import DispatchError, wrap_dispatch_error
from yeelightctl.models import Device, FlowParams
from yeelightctl.protocols import DeviceEvent

from .base import BaseDeviceManager

logger = logging.getLogger(__name__)


@dataclass
class SimulatedCall:
    """A request received by a simulated bulb."""

    operation: str
    device_id: str
    args: dict[str, Any] = field(default_factory=dict)


def demo_devices(count: int = 3) -> list[Device]:
    """A few named bulbs for demo mode."""
    names = ["Living Room", "Bedroom", "Desk Lamp", "Hallway", "Kitchen", "Porch"]
    return [
        Device(
            id=f"sim-{i + 1}",
            ip=f"192.168.1.{101 + i}",
            name=names[i % len(names)],
            model="color",
            power=i % 2 == 0,
        )
        for i in range(count)
    ]


class SimulatedDeviceManager(BaseDeviceManager):
    """
    Device manager whose bulbs live in memory.

    Every request is recorded in `calls`. Failures can be injected per
    device with `fail_device`; a failing device raises DispatchError for
    every request until `heal_device` is called.

    Example:
        ```python
        manager = SimulatedDeviceManager(demo_devices())
        manager.fail_device("sim-2", TimeoutError("timed out"))
        await manager.start_color_flow("sim-1", params)
        assert manager.calls[0].operation == "start_color_flow"
        ```
    """

    def __init__(self, devices: list[Device] | None = None, latency: float = 0.0):
        super().__init__()
        self._pending = list(devices or [])
        self._failures: dict[str, Exception] = {}
        self.latency = latency
        self.calls: list[SimulatedCall] = []
        for device in self._pending:
            self._devices[device.id] = device

    def fail_device(self, device_id: str, error: Exception | None = None) -> None:
        """Make every request to a device fail."""
        self._failures[device_id] = error or ConnectionRefusedError("connection refused")

    def heal_device(self, device_id: str) -> None:
        self._failures.pop(device_id, None)

    def calls_for(self, operation: str) -> list[SimulatedCall]:
        return [call for call in self.calls if call.operation == operation]

    async def discover(self) -> list[Device]:
        await asyncio.sleep(self.latency)
        for device in self._pending:
            self._add_device(self._devices.get(device.id, device))
        return self.devices

    async def _request(self, operation: str, device_id: str, **args: Any) -> None:
        self._require_device(device_id)
        self.calls.append(SimulatedCall(operation, device_id, args))
        await asyncio.sleep(self.latency)
        error = self._failures.get(device_id)
        if error is not None:
            dispatch_error = wrap_dispatch_error(error, device_id, operation)
            self._record_error(device_id, dispatch_error.user_message)
            raise dispatch_error

    async def start_color_flow(self, device_id: str, params: FlowParams) -> None:
        if params.is_empty:
            raise DispatchError(
                user_message="Refusing to send a flow with no transitions.",
                device_id=device_id,
                operation="start_color_flow",
            )
        await self._request("start_color_flow", device_id, params=params)
        self._update_device(
            device_id, DeviceEvent.FLOW_STARTED, flowing=True, power=True, last_error=None
        )
        logger.debug(f"Simulated flow started on {device_id}: {len(params.transitions)} transitions")

    async def stop_color_flow(self, device_id: str) -> None:
        await self._request("stop_color_flow", device_id)
        self._update_device(device_id, DeviceEvent.FLOW_STOPPED, flowing=False, last_error=None)

    async def set_power(self, device_id: str, on: bool) -> None:
        await self._request("set_power", device_id, on=on)
        changes: dict[str, Any] = {"power": on, "last_error": None}
        if not on:
            changes["flowing"] = False
        self._update_device(device_id, DeviceEvent.POWER_CHANGED, **changes)
