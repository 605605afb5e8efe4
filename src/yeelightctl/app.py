"""
Top-level application container.

Wires configuration, the device manager and every service together so the
CLI and the TUI share one construction path.
"""

import logging
from pathlib import Path

from yeelightctl.devices import (
    BaseDeviceManager,
    SimulatedDeviceManager,
    YeelightDeviceManager,
    create_device_manager,
)
from yeelightctl.exceptions import DeviceNotFoundError
from yeelightctl.model_manager import ModelManagerService
from yeelightctl.models import AppConfig, Device, FlowPreset
from yeelightctl.services import (
    AutomationService,
    EffectLibraryService,
    FlowActivationService,
    FlowEditorService,
    GroupService,
    SceneService,
)

logger = logging.getLogger(__name__)


class YeelightController:
    """
    Owns the device manager and all services.

    Architecture:
        YeelightController (this class)
        ├── config_service: ModelManagerService[AppConfig]
        ├── devices: DeviceManager (real or simulated bulbs)
        ├── activation: FlowActivationService
        ├── editor: FlowEditorService
        └── effects / groups / automations / scenes: stored entity services

    Services read the configuration given at construction; changes made
    through `config_service` apply on the next start.
    """

    def __init__(
        self,
        config: AppConfig,
        config_path: Path | None = None,
        simulate: bool = False,
        device_manager: BaseDeviceManager | None = None,
    ):
        """
        Initialize the controller.

        Args:
            config: Application configuration
            config_path: Where `config_service.save()` writes (default: data_dir/config.json)
            simulate: Use in-memory demo bulbs instead of the network
            device_manager: Explicit device manager (overrides `simulate`)
        """
        self.config = config
        self.config_service = ModelManagerService[AppConfig](
            AppConfig, config, default_path=config_path or config.data_dir / "config.json"
        )

        self.devices = device_manager or create_device_manager(config, simulate)
        self.activation = FlowActivationService(self.devices, config)
        self.editor = FlowEditorService(config, self.activation)
        self.effects = EffectLibraryService(config, self.activation)
        self.groups = GroupService(config, self.devices, self.activation)
        self.automations = AutomationService(
            config, self.devices, self.activation, self.effects, self.groups
        )
        self.scenes = SceneService(config, self.activation, self.effects)
        self._initialized = False

    @property
    def is_simulated(self) -> bool:
        return isinstance(self.devices, SimulatedDeviceManager)

    def initialize(self) -> None:
        """Load the stored effects, groups, automations and scenes."""
        if self._initialized:
            logger.warning("YeelightController already initialized")
            return
        self.effects.load()
        self.groups.load()
        self.automations.load()
        self.scenes.load()
        self._initialized = True
        logger.info("YeelightController initialized")

    async def target(self, ip_or_id: str) -> Device:
        """
        Resolve a device by id or IP address.

        Real bulbs given by IP are registered on the fly and their state is
        read back so toggles see the current `flowing` flag.

        Raises:
            DeviceNotFoundError: If a simulated device doesn't exist
            DispatchError: If a real bulb doesn't answer
        """
        device = self.devices.get_device(ip_or_id) or self.devices.find_by_ip(ip_or_id)
        if isinstance(self.devices, YeelightDeviceManager):
            device = device or self.devices.add_device(ip_or_id)
            return await self.devices.refresh(device.id)
        if device is None:
            raise DeviceNotFoundError(ip_or_id)
        return device

    def remember_preset(self, preset: FlowPreset) -> None:
        """Record the last started preset in the saved configuration."""
        self.config_service.set("last_preset", preset)
        self.config_service.save()
