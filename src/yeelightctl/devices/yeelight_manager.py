"""Device manager backed by the `yeelight` library.

The library does all protocol work (discovery, JSON commands, sockets). This
module only translates FlowParams into `yeelight.Flow` objects and runs the
blocking library calls in worker threads so the event loop stays free.
"""

import asyncio
import logging
from typing import Any

from yeelight import Bulb, BulbException, Flow, RGBTransition, TemperatureTransition, discover_bulbs

from yeelightctl.exceptions import DispatchError, wrap_dispatch_error
from yeelightctl.models import (
    AppConfig,
    BrightnessMode,
    ColorMode,
    Device,
    FlowAction,
    FlowParams,
    FlowTransition,
    TemperatureMode,
)
from yeelightctl.protocols import DeviceEvent

from .base import BaseDeviceManager

logger = logging.getLogger(__name__)

_FLOW_ACTIONS = {
    FlowAction.RECOVER: Flow.actions.recover,
    FlowAction.STAY: Flow.actions.stay,
    FlowAction.OFF: Flow.actions.off,
}


def to_yeelight_transition(
    transition: FlowTransition, brightness_kelvin: int = 4000
) -> RGBTransition | TemperatureTransition:
    """
    Convert one FlowTransition to a yeelight transition.

    Bulbs have no brightness-only flow step, so a BrightnessMode becomes a
    temperature step at `brightness_kelvin`. Flow brightness must be at least
    1, so level 0 is sent as 1.
    """
    mode = transition.mode
    if isinstance(mode, ColorMode):
        return RGBTransition(mode.red, mode.green, mode.blue, duration=transition.duration)
    if isinstance(mode, TemperatureMode):
        return TemperatureTransition(
            mode.kelvin, duration=transition.duration, brightness=mode.brightness
        )
    if isinstance(mode, BrightnessMode):
        return TemperatureTransition(
            brightness_kelvin, duration=transition.duration, brightness=max(1, mode.level)
        )
    raise TypeError(f"Unsupported transition mode: {type(mode).__name__}")


def to_yeelight_flow(params: FlowParams, brightness_kelvin: int = 4000) -> Flow:
    """Convert FlowParams to a yeelight Flow."""
    return Flow(
        count=params.count,
        action=_FLOW_ACTIONS[params.action],
        transitions=[to_yeelight_transition(t, brightness_kelvin) for t in params.transitions],
    )


def device_from_discovery(info: dict[str, Any], default_port: int = 55443) -> Device:
    """Build a Device from one `discover_bulbs()` entry."""
    capabilities = info.get("capabilities", {})
    ip = info["ip"]
    return Device(
        id=capabilities.get("id") or ip,
        ip=ip,
        port=int(info.get("port", default_port)),
        name=capabilities.get("name", ""),
        model=capabilities.get("model", ""),
        power=capabilities.get("power") == "on",
        brightness=int(capabilities.get("bright", 100) or 100),
        flowing=str(capabilities.get("flowing", "0")) == "1",
    )


class YeelightDeviceManager(BaseDeviceManager):
    """
    Device manager for real bulbs on the local network.

    Example:
        ```python
        manager = YeelightDeviceManager(config)
        await manager.discover()
        await manager.start_color_flow(device_id, preset_params(FlowPreset.PULSE))
        ```
    """

    def __init__(self, config: AppConfig):
        super().__init__()
        self._config = config
        self._bulbs: dict[str, Bulb] = {}

    def _bulb(self, device_id: str) -> Bulb:
        device = self._require_device(device_id)
        bulb = self._bulbs.get(device_id)
        if bulb is None:
            bulb = Bulb(
                device.ip,
                device.port,
                effect=self._config.transition_effect.value,
                duration=self._config.transition_duration_ms,
            )
            self._bulbs[device_id] = bulb
        return bulb

    async def _call(self, device_id: str, operation: str, method: str, *args: Any) -> Any:
        """Run a blocking Bulb method in a worker thread, mapping failures to DispatchError."""
        bulb = self._bulb(device_id)
        try:
            return await asyncio.to_thread(getattr(bulb, method), *args)
        except (BulbException, OSError) as e:
            error = wrap_dispatch_error(e, device_id, operation)
            logger.error(f"{operation} failed on {device_id}: {e}")
            self._record_error(device_id, error.user_message)
            raise error from e

    async def discover(self) -> list[Device]:
        timeout = self._config.discovery_timeout
        logger.info(f"Discovering bulbs (timeout {timeout}s)")
        try:
            found = await asyncio.to_thread(discover_bulbs, timeout)
        except OSError as e:
            raise DispatchError(
                user_message="Bulb discovery failed.",
                operation="discover",
                original_error=str(e),
                recovery_hint="Check that this machine is on the same network as the bulbs.",
            ) from e

        for info in found:
            self._add_device(device_from_discovery(info, self._config.bulb_port))
        logger.info(f"Discovery found {len(found)} bulb(s)")
        return self.devices

    def add_device(self, ip: str, port: int | None = None) -> Device:
        """Register a bulb by address without discovery."""
        existing = self.find_by_ip(ip)
        if existing:
            return existing
        return self._add_device(Device(id=ip, ip=ip, port=port or self._config.bulb_port)).model_copy()

    async def refresh(self, device_id: str) -> Device:
        """Read power, brightness and flow state back from the bulb."""
        props = await self._call(device_id, "refresh", "get_properties")
        return self._update_device(
            device_id,
            DeviceEvent.UPDATED,
            power=props.get("power") == "on",
            brightness=int(props.get("bright") or 0),
            flowing=str(props.get("flowing", "0")) == "1",
            name=props.get("name") or self._require_device(device_id).name,
        ).model_copy()

    async def start_color_flow(self, device_id: str, params: FlowParams) -> None:
        if params.is_empty:
            raise DispatchError(
                user_message="Refusing to send a flow with no transitions.",
                device_id=device_id,
                operation="start_color_flow",
            )
        flow = to_yeelight_flow(params, self._config.brightness_kelvin)
        await self._call(device_id, "start_color_flow", "start_flow", flow)
        self._update_device(
            device_id, DeviceEvent.FLOW_STARTED, flowing=True, power=True, last_error=None
        )
        logger.info(f"Flow started on {device_id} ({len(params.transitions)} transitions)")

    async def stop_color_flow(self, device_id: str) -> None:
        await self._call(device_id, "stop_color_flow", "stop_flow")
        self._update_device(device_id, DeviceEvent.FLOW_STOPPED, flowing=False, last_error=None)
        logger.info(f"Flow stopped on {device_id}")

    async def set_power(self, device_id: str, on: bool) -> None:
        await self._call(device_id, "set_power", "turn_on" if on else "turn_off")
        changes: dict[str, Any] = {"power": on, "last_error": None}
        if not on:
            changes["flowing"] = False
        self._update_device(device_id, DeviceEvent.POWER_CHANGED, **changes)
