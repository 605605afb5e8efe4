"""Preset catalog: canonical transition sequences for each FlowPreset."""

import logging

from pydantic import ValidationError

from yeelightctl.exceptions import wrap_flow_error
from yeelightctl.models import FlowAction, FlowParams, FlowPreset, FlowTransition

logger = logging.getLogger(__name__)

_PRESET_TRANSITIONS: dict[FlowPreset, tuple[FlowTransition, ...]] = {
    FlowPreset.CANDLELIGHT: (
        FlowTransition.color(800, 255, 147, 41),
        FlowTransition.color(800, 255, 137, 31),
    ),
    FlowPreset.SUNRISE: (
        FlowTransition.temperature(3000, 1700, 1),
        FlowTransition.temperature(3000, 2500, 50),
        FlowTransition.temperature(3000, 5000, 100),
    ),
    FlowPreset.DISCO: (
        FlowTransition.color(500, 255, 0, 0),
        FlowTransition.color(500, 0, 255, 0),
        FlowTransition.color(500, 0, 0, 255),
    ),
    FlowPreset.PULSE: (
        FlowTransition.brightness(1000, 100),
        FlowTransition.brightness(1000, 1),
    ),
    FlowPreset.STROBE: (
        FlowTransition.brightness(50, 100),
        FlowTransition.brightness(50, 1),
    ),
    FlowPreset.CUSTOM: (),
}


def resolve_preset(preset: FlowPreset | str) -> tuple[FlowTransition, ...]:
    """
    Get the transition sequence for a preset.

    The result is the same on every call. Every preset except Custom yields
    a non-empty sequence; Custom yields an empty one because its transitions
    come from the flow editor.

    Args:
        preset: A FlowPreset, or a preset name

    Returns:
        The preset's transitions, or an empty tuple for Custom and for
        names that don't match any preset
    """
    if not isinstance(preset, FlowPreset):
        resolved = FlowPreset.from_name(str(preset))
        if resolved is None:
            logger.warning(f"Unknown preset '{preset}', resolving to no transitions")
            return ()
        preset = resolved
    return _PRESET_TRANSITIONS.get(preset, ())


def preset_params(
    preset: FlowPreset | str,
    count: int = 0,
    action: FlowAction = FlowAction.RECOVER,
) -> FlowParams:
    """
    Build FlowParams for a preset.

    The result may be empty (Custom or unknown preset); callers must check
    `is_empty` before dispatching it.
    """
    try:
        return FlowParams(count=count, action=action, transitions=resolve_preset(preset))
    except ValidationError as e:
        raise wrap_flow_error(e) from e


def list_presets(include_custom: bool = True) -> list[FlowPreset]:
    """All presets in catalog order."""
    return [p for p in FlowPreset if include_custom or not p.is_custom]
