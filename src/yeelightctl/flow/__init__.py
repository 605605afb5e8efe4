"""Flow effect catalog and transition parsing."""

from .presets import list_presets, preset_params, resolve_preset
from .transitions import format_transition, make_transition, parse_transition

__all__ = [
    "format_transition",
    "list_presets",
    "make_transition",
    "parse_transition",
    "preset_params",
    "resolve_preset",
]
