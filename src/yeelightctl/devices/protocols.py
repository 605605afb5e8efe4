"""Device manager protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from yeelightctl.models import Device, FlowParams
    from yeelightctl.protocols import DeviceObserver


@runtime_checkable
class DeviceManager(Protocol):
    """
    Owner of bulb state and the only component that talks to bulbs.

    Requests are coroutines that may fail with DispatchError. State changes
    (including the outcome of a request) are reported to DeviceObservers.
    """

    @property
    def devices(self) -> list[Device]:
        """Snapshots of all known devices, in discovery order."""
        ...

    def get_device(self, device_id: str) -> Device | None:
        """Snapshot of one device, or None if unknown."""
        ...

    async def discover(self) -> list[Device]:
        """Find bulbs on the network and return all known devices."""
        ...

    async def start_color_flow(self, device_id: str, params: FlowParams) -> None:
        """
        Start a flow on a device.

        Raises:
            DeviceNotFoundError: If the device is unknown
            DispatchError: If the bulb rejected or never received the request
        """
        ...

    async def stop_color_flow(self, device_id: str) -> None:
        """Stop the running flow on a device."""
        ...

    async def set_power(self, device_id: str, on: bool) -> None:
        """Turn a device on or off."""
        ...

    def register_observer(self, observer: DeviceObserver) -> None:
        ...

    def unregister_observer(self, observer: DeviceObserver) -> None:
        ...
