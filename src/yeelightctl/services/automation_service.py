"""Service for stored automations."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from yeelightctl.devices import DeviceManager
from yeelightctl.exceptions import DispatchError, EntityNotFoundError, collect_errors
from yeelightctl.flow import preset_params
from yeelightctl.model_manager import ObserverManager, PydanticPersistence
from yeelightctl.models import (
    AppConfig,
    Automation,
    AutomationAction,
    AutomationRegistry,
    EffectAction,
    GroupPowerAction,
    PowerAction,
    PresetAction,
    Trigger,
)
from yeelightctl.protocols import AutomationEvent, AutomationObserver

from .activation_service import FlowActivationService
from .effect_library_service import EffectLibraryService
from .group_service import GroupService

logger = logging.getLogger(__name__)


class AutomationService:
    """
    Stores automations and runs their actions on demand.

    Deciding *when* a trigger fires is not done here; `run` executes an
    automation's actions immediately, in order, and records `last_run`.
    """

    def __init__(
        self,
        config: AppConfig,
        devices: DeviceManager,
        activation: FlowActivationService,
        effects: EffectLibraryService,
        groups: GroupService,
        auto_save: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self._devices = devices
        self._activation = activation
        self._effects = effects
        self._groups = groups
        self.auto_save = auto_save
        self._clock = clock
        self._automations: list[Automation] = []
        self._observers = ObserverManager[AutomationObserver](observer_type_name="automation")

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: AutomationObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: AutomationObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: AutomationEvent, automation: Automation | None = None) -> None:
        self._observers.notify("on_automation_event", event, automation)

    # =================================================================
    # Persistence
    # =================================================================

    def load(self) -> list[Automation]:
        registry = PydanticPersistence.load_json_or_default(
            self.config.automations_file, AutomationRegistry
        )
        self._automations = registry.automations
        logger.info(f"Loaded {len(self._automations)} automations from {self.config.automations_file}")
        self._notify_observers(AutomationEvent.LOADED)
        return self.automations

    def save(self) -> None:
        PydanticPersistence.save_json(
            AutomationRegistry(automations=self._automations), self.config.automations_file
        )

    def _changed(self, event: AutomationEvent, automation: Automation) -> None:
        if self.auto_save:
            self.save()
        self._notify_observers(event, automation)

    # =================================================================
    # Queries
    # =================================================================

    @property
    def automations(self) -> list[Automation]:
        return list(self._automations)

    def get_automation(self, automation_id: str) -> Automation:
        """
        Raises:
            EntityNotFoundError: If no automation has this id
        """
        for automation in self._automations:
            if automation.id == automation_id:
                return automation
        raise EntityNotFoundError("automation", automation_id)

    def find_automation(self, id_or_name: str) -> Automation:
        lowered = id_or_name.strip().lower()
        for automation in self._automations:
            if automation.id == id_or_name or automation.name.lower() == lowered:
                return automation
        raise EntityNotFoundError("automation", id_or_name)

    # =================================================================
    # Mutations
    # =================================================================

    def create_automation(
        self,
        name: str,
        trigger: Trigger,
        actions: list[AutomationAction],
        enabled: bool = True,
    ) -> Automation:
        """
        Store a new automation.

        Raises:
            pydantic.ValidationError: If the name is empty or there are no actions
        """
        automation = Automation(name=name, trigger=trigger, actions=actions, enabled=enabled)
        self._automations.append(automation)
        logger.info(f"Created automation '{name}': {automation.describe()}")
        self._changed(AutomationEvent.CREATED, automation)
        return automation

    def update_automation(self, automation_id: str, **changes: Any) -> Automation:
        """
        Change fields of an automation (name, trigger, actions, enabled).

        Raises:
            EntityNotFoundError: If the automation doesn't exist
            pydantic.ValidationError: If the new values are invalid
        """
        current = self.get_automation(automation_id)
        unknown = set(changes) - {"name", "trigger", "actions", "enabled"}
        if unknown:
            raise AttributeError(f"Cannot update automation field(s): {', '.join(sorted(unknown))}")

        # model_copy skips validation, so round-trip through model_validate
        updated = Automation.model_validate(current.model_copy(update=changes).model_dump())

        self._automations[self._automations.index(current)] = updated
        self._changed(AutomationEvent.UPDATED, updated)
        return updated

    def delete_automation(self, automation_id: str) -> Automation:
        current = self.get_automation(automation_id)
        self._automations.remove(current)
        logger.info(f"Deleted automation '{current.name}'")
        self._changed(AutomationEvent.DELETED, current)
        return current

    def _set_enabled(self, automation_id: str, enabled: bool) -> Automation:
        current = self.get_automation(automation_id)
        current.enabled = enabled
        self._changed(AutomationEvent.ENABLED if enabled else AutomationEvent.DISABLED, current)
        return current

    def enable(self, automation_id: str) -> Automation:
        return self._set_enabled(automation_id, True)

    def disable(self, automation_id: str) -> Automation:
        return self._set_enabled(automation_id, False)

    # =================================================================
    # Running
    # =================================================================

    async def _run_action(self, action: AutomationAction) -> None:
        if isinstance(action, PowerAction):
            for device_id in action.device_ids:
                await self._devices.set_power(device_id, action.on)
        elif isinstance(action, EffectAction):
            await self._effects.start_effect(action.effect_id, on=action.device_ids)
        elif isinstance(action, GroupPowerAction):
            if action.on:
                await self._groups.turn_on_all(action.group_id)
            else:
                await self._groups.turn_off_all(action.group_id)
        elif isinstance(action, PresetAction):
            params = preset_params(
                action.preset, self.config.default_flow_count, self.config.default_flow_action
            )
            await self._activation.start(action.device_ids, params)
        else:
            raise TypeError(f"Unsupported automation action: {type(action).__name__}")

    async def run(self, automation_id: str) -> Automation:
        """
        Execute an automation's actions now.

        Runs regardless of `enabled`. Every action is attempted; `last_run`
        is recorded even if some actions fail.

        Raises:
            EntityNotFoundError: If the automation doesn't exist
            DispatchError: If any action failed
        """
        automation = self.get_automation(automation_id)
        logger.info(f"Running automation '{automation.name}'")

        collector = collect_errors(f"run automation '{automation.name}'")
        for action in automation.actions:
            with collector.try_operation(action.describe()):
                await self._run_action(action)

        automation.last_run = self._clock()
        self._changed(AutomationEvent.RAN, automation)

        if collector.has_errors:
            raise DispatchError(
                user_message=(
                    f"Automation '{automation.name}': {collector.error_count} of "
                    f"{len(automation.actions)} action(s) failed."
                ),
                operation="run automation",
                original_error=collector.get_summary(),
            )
        return automation
