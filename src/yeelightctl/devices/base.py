"""Shared device bookkeeping for device manager implementations."""

import logging
from typing import Any

from yeelightctl.exceptions import DeviceNotFoundError
from yeelightctl.model_manager import ObserverManager
from yeelightctl.models import Device
from yeelightctl.protocols import DeviceEvent, DeviceObserver

logger = logging.getLogger(__name__)


class BaseDeviceManager:
    """
    Device table plus observer notifications.

    Subclasses perform the actual bulb requests and call `_update_device`
    with the resulting state. Callers only ever see copies of the stored
    devices.
    """

    def __init__(self) -> None:
        self._devices: dict[str, Device] = {}
        self._observers = ObserverManager[DeviceObserver](observer_type_name="device")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: DeviceObserver) -> None:
        """Register an observer to receive device events."""
        self._observers.register(observer)

    def unregister_observer(self, observer: DeviceObserver) -> None:
        """Unregister an observer."""
        self._observers.unregister(observer)

    def _notify_observers(self, event: DeviceEvent, device_id: str, device: Device | None) -> None:
        self._observers.notify("on_device_event", event, device_id, device)

    # =================================================================
    # Device table
    # =================================================================

    @property
    def devices(self) -> list[Device]:
        return [device.model_copy() for device in self._devices.values()]

    def get_device(self, device_id: str) -> Device | None:
        device = self._devices.get(device_id)
        return device.model_copy() if device else None

    def _require_device(self, device_id: str) -> Device:
        device = self._devices.get(device_id)
        if device is None:
            raise DeviceNotFoundError(device_id)
        return device

    def _add_device(self, device: Device) -> Device:
        """Store a device, notifying DISCOVERED for new ids and UPDATED otherwise."""
        is_new = device.id not in self._devices
        self._devices[device.id] = device
        event = DeviceEvent.DISCOVERED if is_new else DeviceEvent.UPDATED
        if is_new:
            logger.info(f"Discovered device {device.id} at {device.ip}:{device.port}")
        self._notify_observers(event, device.id, device.model_copy())
        return device

    def _update_device(self, device_id: str, event: DeviceEvent, **changes: Any) -> Device:
        """Apply state changes to a stored device and notify observers."""
        device = self._require_device(device_id)
        updated = device.model_copy(update=changes)
        self._devices[device_id] = updated
        self._notify_observers(event, device_id, updated.model_copy())
        return updated

    def _record_error(self, device_id: str, message: str) -> None:
        if device_id in self._devices:
            self._update_device(device_id, DeviceEvent.ERROR, last_error=message)

    def remove_device(self, device_id: str) -> None:
        """Forget a device."""
        self._require_device(device_id)
        del self._devices[device_id]
        self._notify_observers(DeviceEvent.REMOVED, device_id, None)
        logger.info(f"Removed device {device_id}")

    def find_by_ip(self, ip: str) -> Device | None:
        for device in self._devices.values():
            if device.ip == ip:
                return device.model_copy()
        return None
