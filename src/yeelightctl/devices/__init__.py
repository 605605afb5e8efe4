"""Device managers: the bulb-facing side of the application."""

from .base import BaseDeviceManager
from .protocols import DeviceManager
from .registry import create_device_manager
from .simulated import SimulatedCall, SimulatedDeviceManager, demo_devices
from .yeelight_manager import YeelightDeviceManager, to_yeelight_flow, to_yeelight_transition

__all__ = [
    "BaseDeviceManager",
    "DeviceManager",
    "SimulatedCall",
    "SimulatedDeviceManager",
    "YeelightDeviceManager",
    "create_device_manager",
    "demo_devices",
    "to_yeelight_flow",
    "to_yeelight_transition",
]
