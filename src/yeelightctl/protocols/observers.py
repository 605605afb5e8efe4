"""Observer protocol definitions for domain-specific events.

This module contains observer protocols for the domain:
- Device observers: React to bulb state changes
- Flow edit observers: React to custom flow edits
- Effect, group, automation and scene observers: React to library changes
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from yeelightctl.models import Automation, Device, DeviceGroup, Effect, FlowTransition, Scene

from .events import AutomationEvent, DeviceEvent, EffectEvent, FlowEditEvent, GroupEvent, SceneEvent


@runtime_checkable
class DeviceObserver(Protocol):
    """
    Observer that receives device state changes.

    This is the only path by which device state flows back to views. A
    request dispatched earlier may complete at any time; its effect shows up
    here as a state change, never as a return value the UI waits on.
    """

    def on_device_event(
        self, event: "DeviceEvent", device_id: str, device: "Device | None" = None
    ) -> None:
        """
        Handle device events.

        Args:
            event: The type of device event
            device_id: Id of the affected device
            device: Snapshot of the device after the change (None for REMOVED)

        Threading:
            Called on the asyncio event loop thread.
        """
        ...


@runtime_checkable
class FlowEditObserver(Protocol):
    """Observer that receives custom flow editing events."""

    def on_flow_edit_event(
        self, event: "FlowEditEvent", transitions: "tuple[FlowTransition, ...]"
    ) -> None:
        """
        Handle flow editing events.

        Args:
            event: The type of editing event
            transitions: The full transition sequence after the edit
        """
        ...


@runtime_checkable
class EffectObserver(Protocol):
    """Observer that receives effect library events."""

    def on_effect_event(self, event: "EffectEvent", effect: "Effect | None" = None) -> None:
        ...


@runtime_checkable
class GroupObserver(Protocol):
    """Observer that receives group events."""

    def on_group_event(self, event: "GroupEvent", group: "DeviceGroup | None" = None) -> None:
        ...


@runtime_checkable
class AutomationObserver(Protocol):
    """Observer that receives automation events."""

    def on_automation_event(
        self, event: "AutomationEvent", automation: "Automation | None" = None
    ) -> None:
        ...


@runtime_checkable
class SceneObserver(Protocol):
    """Observer that receives scene events."""

    def on_scene_event(self, event: "SceneEvent", scene: "Scene | None" = None) -> None:
        ...
