"""Pick the device manager implementation for a run."""

import logging

from yeelightctl.models import AppConfig

from .base import BaseDeviceManager
from .simulated import SimulatedDeviceManager, demo_devices
from .yeelight_manager import YeelightDeviceManager

logger = logging.getLogger(__name__)


def create_device_manager(config: AppConfig, simulate: bool = False) -> BaseDeviceManager:
    """Real bulbs by default; in-memory demo bulbs when `simulate` is set."""
    if simulate:
        logger.info("Using simulated bulbs")
        return SimulatedDeviceManager(demo_devices())
    return YeelightDeviceManager(config)
