"""Enumerations for Yeelight control."""

from enum import Enum


class FlowAction(str, Enum):
    """What a bulb does once a flow has finished its repeat count."""

    RECOVER = "recover"  # Return to the state before the flow started
    STAY = "stay"  # Keep the last transition's state
    OFF = "off"  # Turn the bulb off


class FlowPreset(str, Enum):
    """Canonical flow effect presets."""

    CANDLELIGHT = "Candlelight"
    SUNRISE = "Sunrise"
    DISCO = "Disco"
    PULSE = "Pulse"
    STROBE = "Strobe"
    CUSTOM = "Custom"

    @property
    def description(self) -> str:
        """Human-readable description shown in preset pickers."""
        return _PRESET_DESCRIPTIONS[self]

    @property
    def is_custom(self) -> bool:
        return self is FlowPreset.CUSTOM

    @classmethod
    def from_name(cls, name: str) -> "FlowPreset | None":
        """
        Look up a preset by name, ignoring case and surrounding whitespace.

        Returns:
            The matching preset, or None if no preset has that name
        """
        key = name.strip().lower().replace(" ", "")
        for preset in cls:
            if preset.value.lower() == key or preset.name.lower() == key:
                return preset
        return None


_PRESET_DESCRIPTIONS = {
    FlowPreset.CANDLELIGHT: "Warm flickering glow",
    FlowPreset.SUNRISE: "Slow warm-to-daylight wake up",
    FlowPreset.DISCO: "Fast red, green and blue cycle",
    FlowPreset.PULSE: "Gentle breathing brightness",
    FlowPreset.STROBE: "Rapid full-brightness flashes",
    FlowPreset.CUSTOM: "Your own sequence of transitions",
}


class SyncMode(str, Enum):
    """How a group applies a command to its member devices."""

    MIRROR = "mirror"  # Every device gets the same command at once
    ALTERNATE = "alternate"  # Odd positions get the inverted power state
    WAVE = "wave"  # Each device is delayed by its position in the group
    RANDOM = "random"  # Each device is delayed by a random amount


class SunEvent(str, Enum):
    """Solar events an automation can be tied to."""

    SUNRISE = "sunrise"
    SUNSET = "sunset"


class TransitionEffect(str, Enum):
    """Yeelight transition effect for power and state changes."""

    SMOOTH = "smooth"
    SUDDEN = "sudden"
