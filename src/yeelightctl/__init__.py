"""yeelightctl: colour flows, groups, scenes and automations for Yeelight bulbs."""

__version__ = "0.1.0"

from .app import YeelightController
from .devices import SimulatedDeviceManager, YeelightDeviceManager
from .models import AppConfig, FlowParams, FlowPreset, FlowTransition

__all__ = [
    "AppConfig",
    "FlowParams",
    "FlowPreset",
    "FlowTransition",
    "SimulatedDeviceManager",
    "YeelightController",
    "YeelightDeviceManager",
]
