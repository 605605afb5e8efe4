"""Build transitions from user input.

Text form used by the CLI and the TUI editor::

    1000:rgb:255,0,0       colour
    3000:ct:2700,80        colour temperature (kelvin, brightness)
    500:bright:40          brightness only
"""

from pydantic import ValidationError

from yeelightctl.exceptions import FlowValidationError, wrap_flow_error
from yeelightctl.models import BrightnessMode, ColorMode, FlowTransition, TemperatureMode

_KIND_ALIASES = {
    "rgb": "color",
    "color": "color",
    "colour": "color",
    "ct": "temperature",
    "temp": "temperature",
    "temperature": "temperature",
    "bright": "brightness",
    "brightness": "brightness",
}

_VALUE_COUNTS = {"color": 3, "temperature": 2, "brightness": 1}


def make_transition(kind: str, duration: int, *values: int) -> FlowTransition:
    """
    Create a transition, reporting bad values as FlowValidationError.

    Args:
        kind: "color"/"rgb", "temperature"/"ct" or "brightness"/"bright"
        duration: Duration in milliseconds
        *values: (red, green, blue), (kelvin, brightness) or (level,)

    Raises:
        FlowValidationError: Unknown kind, wrong number of values, or a value out of range
    """
    canonical = _KIND_ALIASES.get(kind.strip().lower())
    if canonical is None:
        raise FlowValidationError(
            user_message=f"Unknown transition kind '{kind}'.",
            field="mode",
            value=kind,
            recovery_hint="Use one of: rgb, ct, bright.",
        )

    expected = _VALUE_COUNTS[canonical]
    if len(values) != expected:
        raise FlowValidationError(
            user_message=f"A {canonical} transition takes {expected} value(s), got {len(values)}.",
            field="mode",
            value=values,
        )

    try:
        if canonical == "color":
            red, green, blue = values
            mode = ColorMode(red=red, green=green, blue=blue)
        elif canonical == "temperature":
            kelvin, brightness = values
            mode = TemperatureMode(kelvin=kelvin, brightness=brightness)
        else:
            mode = BrightnessMode(level=values[0])
        return FlowTransition(duration=duration, mode=mode)
    except ValidationError as e:
        raise wrap_flow_error(e) from e


def parse_transition(text: str) -> FlowTransition:
    """
    Parse 'DURATION:KIND:V1,V2,...' into a transition.

    Raises:
        FlowValidationError: If the text is malformed or a value is out of range
    """
    parts = [part.strip() for part in text.split(":")]
    if len(parts) != 3:
        raise FlowValidationError(
            user_message=f"Cannot parse transition '{text}'.",
            value=text,
            recovery_hint="Use DURATION:KIND:VALUES, e.g. 1000:rgb:255,0,0 or 500:bright:40.",
        )

    duration_text, kind, values_text = parts
    try:
        duration = int(duration_text)
        values = tuple(int(v) for v in values_text.split(",") if v.strip())
    except ValueError as e:
        raise FlowValidationError(
            user_message=f"Cannot parse transition '{text}': values must be whole numbers.",
            value=text,
            technical_message=str(e),
        ) from e

    return make_transition(kind, duration, *values)


def format_transition(transition: FlowTransition) -> str:
    """Inverse of parse_transition."""
    mode = transition.mode
    if isinstance(mode, ColorMode):
        return f"{transition.duration}:rgb:{mode.red},{mode.green},{mode.blue}"
    if isinstance(mode, TemperatureMode):
        return f"{transition.duration}:ct:{mode.kelvin},{mode.brightness}"
    return f"{transition.duration}:bright:{mode.level}"
