"""Screens for editing flows and managing stored entities."""

from .automations import AutomationsScreen
from .base_table import BaseTableScreen
from .effects import EffectsScreen
from .flow_editor import FlowEditorScreen
from .groups import GroupsScreen
from .scenes import ScenesScreen

__all__ = [
    "AutomationsScreen",
    "BaseTableScreen",
    "EffectsScreen",
    "FlowEditorScreen",
    "GroupsScreen",
    "ScenesScreen",
]
