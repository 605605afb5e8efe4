"""Domain events for observer pattern.

This module defines events that can occur within the application:
- Device events: Bulb state changes reported by a device manager
- Flow edit events: Changes to the custom flow being edited
- Flow commands: What the activation service asked a device to do
- Library events: Effects, groups, automations and scenes being changed or run
"""

from enum import Enum


class DeviceEvent(Enum):
    """Events from a device manager."""

    DISCOVERED = "discovered"          # New device found
    UPDATED = "updated"                # Device state refreshed
    REMOVED = "removed"                # Device forgotten
    POWER_CHANGED = "power_changed"    # Device turned on/off
    FLOW_STARTED = "flow_started"      # Flow effect started on device
    FLOW_STOPPED = "flow_stopped"      # Flow effect stopped on device
    ERROR = "error"                    # A command to the device failed


class FlowEditEvent(Enum):
    """
    Events that occur while editing a custom flow.

    These are ephemeral: the edited sequence is not persisted until it is
    saved as an effect.
    """

    TRANSITION_ADDED = "transition_added"
    TRANSITION_REMOVED = "transition_removed"
    TRANSITION_UPDATED = "transition_updated"
    TRANSITION_MOVED = "transition_moved"
    PRESET_LOADED = "preset_loaded"        # Sequence replaced by a preset
    SETTINGS_CHANGED = "settings_changed"  # Repeat count or end action changed
    CLEARED = "cleared"                    # All transitions removed
    COMMITTED = "committed"                # Sequence handed to the activation service


class FlowCommand(Enum):
    """Command issued by a start/stop toggle."""

    START = "start"
    STOP = "stop"


class EffectEvent(Enum):
    """Events from the effect library."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STARTED = "started"
    LOADED = "loaded"


class GroupEvent(Enum):
    """Events from the group service."""

    CREATED = "created"
    DELETED = "deleted"
    MEMBERS_CHANGED = "members_changed"
    POWER_CHANGED = "power_changed"
    FLOW_STARTED = "flow_started"
    LOADED = "loaded"


class AutomationEvent(Enum):
    """Events from the automation service."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ENABLED = "enabled"
    DISABLED = "disabled"
    RAN = "ran"
    LOADED = "loaded"


class SceneEvent(Enum):
    """Events from the scene service."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"
    LOADED = "loaded"
