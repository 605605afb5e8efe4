"""Protocol definitions for domain-specific observer patterns.

This package contains protocols and events specific to bulb control:
- Events: device, flow editing, flow commands, effects, groups, automations, scenes
- Observers: Protocols for components that react to these events
"""

from .events import (
    AutomationEvent,
    DeviceEvent,
    EffectEvent,
    FlowCommand,
    FlowEditEvent,
    GroupEvent,
    SceneEvent,
)
from .observers import (
    AutomationObserver,
    DeviceObserver,
    EffectObserver,
    FlowEditObserver,
    GroupObserver,
    SceneObserver,
)

__all__ = [
    # Events
    "AutomationEvent",
    "DeviceEvent",
    "EffectEvent",
    "FlowCommand",
    "FlowEditEvent",
    "GroupEvent",
    "SceneEvent",
    # Observers
    "AutomationObserver",
    "DeviceObserver",
    "EffectObserver",
    "FlowEditObserver",
    "GroupObserver",
    "SceneObserver",
]
