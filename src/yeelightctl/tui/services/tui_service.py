"""Service for keeping the main screen in step with device and library state."""

import logging
from typing import TYPE_CHECKING

from yeelightctl.exceptions import YeelightCtlError
from yeelightctl.models import Automation, Device, DeviceGroup, Effect, Scene
from yeelightctl.protocols import (
    AutomationEvent,
    AutomationObserver,
    DeviceEvent,
    DeviceObserver,
    EffectEvent,
    EffectObserver,
    GroupEvent,
    GroupObserver,
    SceneEvent,
    SceneObserver,
)
from yeelightctl.tui.widgets import DeviceList, FlowPanel, StatusBar

if TYPE_CHECKING:
    from yeelightctl.tui.app import YeelightControlApp

logger = logging.getLogger(__name__)


class TUIService(DeviceObserver, EffectObserver, GroupObserver, AutomationObserver, SceneObserver):
    """
    Service for synchronizing the Terminal UI with application state.

    This service observes the device manager and the stored-entity services
    and updates the main screen (device list, flow panel, status bar)
    accordingly. Widgets never read services directly.

    Implements multiple observer protocols:
    - DeviceObserver: Discovery and state changes of bulbs
    - EffectObserver: Effect library changes
    - GroupObserver: Group changes and group requests
    - AutomationObserver: Automation changes and runs
    - SceneObserver: Scenes switched on and off

    It is also the sink for failed fire-and-forget requests (`on_request_error`).
    """

    def __init__(self, app: "YeelightControlApp"):
        """
        Initialize the TUI service.

        Args:
            app: The YeelightControlApp application instance
        """
        self.app = app
        logger.info("TUIService initialized")

    def attach(self) -> None:
        """Register with every service of the app's controller."""
        controller = self.app.controller
        controller.devices.register_observer(self)
        controller.effects.register_observer(self)
        controller.groups.register_observer(self)
        controller.automations.register_observer(self)
        controller.scenes.register_observer(self)
        controller.activation.on_error = self.on_request_error

    def detach(self) -> None:
        controller = self.app.controller
        controller.devices.unregister_observer(self)
        controller.effects.unregister_observer(self)
        controller.groups.unregister_observer(self)
        controller.automations.unregister_observer(self)
        controller.scenes.unregister_observer(self)
        if controller.activation.on_error == self.on_request_error:
            controller.activation.on_error = None

    # =================================================================
    # DeviceObserver Protocol
    # =================================================================

    def on_device_event(self, event: DeviceEvent, device_id: str, device: Device | None = None) -> None:
        """
        Handle device events.

        Args:
            event: The type of device event
            device_id: The device the event is about
            device: Snapshot of the device after the change (None when removed)
        """
        try:
            device_list = self.app.main_screen.query_one(DeviceList)
            if event == DeviceEvent.REMOVED or device is None:
                device_list.remove_device(device_id)
            else:
                device_list.update_device(device)

            if event == DeviceEvent.ERROR and device is not None:
                self.app.notify(f"{device.display_name}: {device.last_error}", severity="warning")

            if device_id == device_list.selected_device_id:
                self.app.main_screen.query_one(FlowPanel).show_device(device)

            message = {
                DeviceEvent.DISCOVERED: "found",
                DeviceEvent.FLOW_STARTED: "flow started",
                DeviceEvent.FLOW_STOPPED: "flow stopped",
                DeviceEvent.POWER_CHANGED: "power changed",
            }.get(event)
            name = device.display_name if device else device_id
            self.update_status(f"{name}: {message}" if message else None)

        except Exception as e:
            logger.error(f"Error handling device event {event}: {e}")

    # =================================================================
    # Library observers
    # =================================================================

    def on_effect_event(self, event: EffectEvent, effect: Effect | None = None) -> None:
        try:
            if effect and event in (EffectEvent.CREATED, EffectEvent.DELETED, EffectEvent.STARTED):
                self.update_status(f"Effect '{effect.name}' {event.value}")
        except Exception as e:
            logger.error(f"Error handling effect event {event}: {e}")

    def on_group_event(self, event: GroupEvent, group: DeviceGroup | None = None) -> None:
        try:
            if group and event in (GroupEvent.CREATED, GroupEvent.DELETED, GroupEvent.POWER_CHANGED):
                self.update_status(f"Group '{group.name}' {event.value.replace('_', ' ')}")
        except Exception as e:
            logger.error(f"Error handling group event {event}: {e}")

    def on_automation_event(self, event: AutomationEvent, automation: Automation | None = None) -> None:
        try:
            if automation and event == AutomationEvent.RAN:
                self.update_status(f"Automation '{automation.name}' ran")
        except Exception as e:
            logger.error(f"Error handling automation event {event}: {e}")

    def on_scene_event(self, event: SceneEvent, scene: Scene | None = None) -> None:
        try:
            if scene and event in (SceneEvent.ACTIVATED, SceneEvent.DEACTIVATED):
                self.update_status(f"Scene '{scene.name}' {event.value}")
        except Exception as e:
            logger.error(f"Error handling scene event {event}: {e}")

    # =================================================================
    # Requests
    # =================================================================

    def on_request_error(self, error: YeelightCtlError) -> None:
        """Show a failed background request (already logged by the activation service)."""
        self.app.notify(error.get_full_message(), severity="error", timeout=5)

    # =================================================================
    # Helpers
    # =================================================================

    def update_status(self, message: str | None = None) -> None:
        """Refresh the status bar counts, optionally with a new message."""
        try:
            devices = self.app.controller.devices.devices
            self.app.main_screen.query_one(StatusBar).update_state(
                devices=len(devices),
                flowing=sum(1 for d in devices if d.flowing),
                simulated=self.app.controller.is_simulated,
                message=message,
            )
        except Exception as e:
            logger.error(f"Error updating status bar: {e}")
