"""Application services (not TUI-specific)."""

from yeelightctl.model_manager import ModelManagerService
from yeelightctl.services.activation_service import FlowActivationService
from yeelightctl.services.automation_service import AutomationService
from yeelightctl.services.effect_library_service import EffectLibraryService, builtin_effects
from yeelightctl.services.flow_editor_service import FlowEditorService
from yeelightctl.services.group_service import GroupService
from yeelightctl.services.scene_service import SceneService

__all__ = [
    "AutomationService",
    "EffectLibraryService",
    "FlowActivationService",
    "FlowEditorService",
    "GroupService",
    "ModelManagerService",
    "SceneService",
    "builtin_effects",
]
