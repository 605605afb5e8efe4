"""Service for device groups."""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Iterable

from yeelightctl.devices import DeviceManager
from yeelightctl.exceptions import EntityNotFoundError, ErrorCollector, collect_errors
from yeelightctl.model_manager import ObserverManager, PydanticPersistence
from yeelightctl.models import AppConfig, DeviceGroup, FlowParams, GroupRegistry, SyncMode
from yeelightctl.protocols import GroupEvent, GroupObserver

from .activation_service import FlowActivationService

logger = logging.getLogger(__name__)


class GroupService:
    """
    Manages device groups and fans commands out to their members.

    How a command reaches the members depends on the group's SyncMode:

    ========== ===========================================================
    mirror     every device at once, same command
    alternate  every device at once; odd positions get the opposite power
    wave       device n starts after n * group_wave_delay_ms
    random     each device starts after a random 0..group_random_delay_ms
    ========== ===========================================================

    Every member is tried even if some fail; failures are raised together
    as one DispatchError afterwards.
    """

    def __init__(
        self,
        config: AppConfig,
        devices: DeviceManager,
        activation: FlowActivationService,
        auto_save: bool = True,
        rng: random.Random | None = None,
    ):
        self.config = config
        self._devices = devices
        self._activation = activation
        self.auto_save = auto_save
        self._rng = rng or random.Random()
        self._groups: list[DeviceGroup] = []
        self._observers = ObserverManager[GroupObserver](observer_type_name="group")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: GroupObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: GroupObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: GroupEvent, group: DeviceGroup | None = None) -> None:
        self._observers.notify("on_group_event", event, group)

    # =================================================================
    # Persistence
    # =================================================================

    def load(self) -> list[DeviceGroup]:
        registry = PydanticPersistence.load_json_or_default(self.config.groups_file, GroupRegistry)
        self._groups = registry.groups
        logger.info(f"Loaded {len(self._groups)} groups from {self.config.groups_file}")
        self._notify_observers(GroupEvent.LOADED)
        return self.groups

    def save(self) -> None:
        PydanticPersistence.save_json(GroupRegistry(groups=self._groups), self.config.groups_file)

    def _changed(self, event: GroupEvent, group: DeviceGroup) -> None:
        if self.auto_save:
            self.save()
        self._notify_observers(event, group)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def groups(self) -> list[DeviceGroup]:
        return list(self._groups)

    def get_group(self, group_id: str) -> DeviceGroup:
        """
        Raises:
            EntityNotFoundError: If no group has this id
        """
        for group in self._groups:
            if group.id == group_id:
                return group
        raise EntityNotFoundError("group", group_id)

    def find_group(self, id_or_name: str) -> DeviceGroup:
        """Look up a group by id, then by case-insensitive name."""
        lowered = id_or_name.strip().lower()
        for group in self._groups:
            if group.id == id_or_name or group.name.lower() == lowered:
                return group
        raise EntityNotFoundError("group", id_or_name)

    # =================================================================
    # Mutations
    # =================================================================

    def create_group(
        self,
        name: str,
        device_ids: Iterable[str] = (),
        sync_mode: SyncMode = SyncMode.MIRROR,
        icon: str = "lightbulb",
    ) -> DeviceGroup:
        """
        Create a group.

        Raises:
            ValueError: If a group with this name already exists
        """
        if any(g.name.lower() == name.strip().lower() for g in self._groups):
            raise ValueError(f"A group named '{name}' already exists")
        group = DeviceGroup(
            name=name.strip(),
            device_ids=list(dict.fromkeys(device_ids)),
            sync_mode=sync_mode,
            icon=icon,
        )
        self._groups.append(group)
        logger.info(f"Created group '{group.name}' with {len(group.device_ids)} device(s)")
        self._changed(GroupEvent.CREATED, group)
        return group

    def delete_group(self, group_id: str) -> DeviceGroup:
        group = self.get_group(group_id)
        self._groups.remove(group)
        logger.info(f"Deleted group '{group.name}'")
        self._changed(GroupEvent.DELETED, group)
        return group

    def add_device(self, group_id: str, device_id: str) -> DeviceGroup:
        """Add a device to the end of a group (no-op if already a member)."""
        group = self.get_group(group_id)
        if device_id not in group.device_ids:
            group.device_ids.append(device_id)
            self._changed(GroupEvent.MEMBERS_CHANGED, group)
        return group

    def remove_device(self, group_id: str, device_id: str) -> DeviceGroup:
        """Remove a device from a group (no-op if not a member)."""
        group = self.get_group(group_id)
        if device_id in group.device_ids:
            group.device_ids.remove(device_id)
            self._changed(GroupEvent.MEMBERS_CHANGED, group)
        return group

    def set_sync_mode(self, group_id: str, sync_mode: SyncMode) -> DeviceGroup:
        group = self.get_group(group_id)
        group.sync_mode = SyncMode(sync_mode)
        self._changed(GroupEvent.MEMBERS_CHANGED, group)
        return group

    # =================================================================
    # Fan-out
    # =================================================================

    def delay_for(self, group: DeviceGroup, position: int) -> float:
        """Start delay in seconds for the member at `position`."""
        if group.sync_mode is SyncMode.WAVE:
            return position * self.config.group_wave_delay_ms / 1000
        if group.sync_mode is SyncMode.RANDOM:
            return self._rng.uniform(0, self.config.group_random_delay_ms) / 1000
        return 0.0

    async def _fan_out(
        self,
        group: DeviceGroup,
        operation: str,
        request: Callable[[int, str], Awaitable[None]],
    ) -> ErrorCollector:
        collector = collect_errors(f"{operation} {group.name}")

        async def run(position: int, device_id: str) -> None:
            delay = self.delay_for(group, position)
            if delay > 0:
                await asyncio.sleep(delay)
            with collector.try_operation(f"{operation} {device_id}"):
                await request(position, device_id)

        await asyncio.gather(*(run(i, d) for i, d in enumerate(group.device_ids)))
        return collector

    async def _set_power(self, group_id: str, on: bool) -> None:
        group = self.get_group(group_id)
        if group.is_empty:
            logger.warning(f"Group '{group.name}' has no devices")
            return

        def power_for(position: int) -> bool:
            if group.sync_mode is SyncMode.ALTERNATE and position % 2 == 1:
                return not on
            return on

        collector = await self._fan_out(
            group,
            "turn on" if on else "turn off",
            lambda position, device_id: self._devices.set_power(device_id, power_for(position)),
        )
        self._notify_observers(GroupEvent.POWER_CHANGED, group)
        if collector.has_errors:
            raise collector.to_dispatch_error()

    async def turn_on_all(self, group_id: str) -> None:
        """
        Turn a group on.

        Raises:
            EntityNotFoundError: If the group doesn't exist
            DispatchError: If any member failed
        """
        await self._set_power(group_id, True)

    async def turn_off_all(self, group_id: str) -> None:
        """Turn a group off (see turn_on_all)."""
        await self._set_power(group_id, False)

    async def start_flow(self, group_id: str, params: FlowParams) -> None:
        """
        Start the same flow on every member.

        Raises:
            EntityNotFoundError: If the group doesn't exist
            EmptyFlowError: If params has no transitions (nothing is sent)
            DispatchError: If any member failed
        """
        group = self.get_group(group_id)
        self._activation.validate(params, f"flow on group '{group.name}'")
        if group.is_empty:
            logger.warning(f"Group '{group.name}' has no devices")
            return

        collector = await self._fan_out(
            group,
            "start flow on",
            lambda position, device_id: self._devices.start_color_flow(device_id, params),
        )
        self._notify_observers(GroupEvent.FLOW_STARTED, group)
        if collector.has_errors:
            raise collector.to_dispatch_error()
