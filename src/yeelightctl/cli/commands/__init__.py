"""CLI commands for yeelightctl."""

from .automations import automations_group
from .config import config_group
from .devices import devices_group
from .effects import effects_group
from .flow import flow_group
from .groups import groups_group
from .presets import presets_group
from .scenes import scenes_group

__all__ = [
    "automations_group",
    "config_group",
    "devices_group",
    "effects_group",
    "flow_group",
    "groups_group",
    "presets_group",
    "scenes_group",
]
