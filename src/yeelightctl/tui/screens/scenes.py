"""Scene screen."""

import logging

from textual.binding import Binding

from yeelightctl.models import Scene
from yeelightctl.protocols import SceneEvent
from yeelightctl.tui.decorators import handle_action_errors
from yeelightctl.tui.widgets import ConfirmationModal

from .base_table import BaseTableScreen

logger = logging.getLogger(__name__)


class ScenesScreen(BaseTableScreen):
    """List scenes, switch them on or off, delete them."""

    BINDINGS = [
        *BaseTableScreen.BINDINGS,
        Binding("space", "toggle_active", "On/Off"),
        Binding("d", "delete", "Delete"),
    ]

    TITLE_TEXT = "Scenes"
    COLUMNS = ("Name", "Effect", "Bulbs", "Active")
    INSTRUCTIONS = (
        "[dim]Space/Enter: activate/deactivate  d: delete  Esc: close"
        "  (create scenes from the Effects screen with s)[/dim]"
    )

    def on_mount(self) -> None:
        super().on_mount()
        self.controller.scenes.register_observer(self)

    def on_unmount(self) -> None:
        self.controller.scenes.unregister_observer(self)

    def on_scene_event(self, event: SceneEvent, scene: Scene | None = None) -> None:
        try:
            self.refresh_rows()
        except Exception as e:
            logger.error(f"Error handling scene event {event}: {e}")

    def _effect_name(self, scene: Scene) -> str:
        for effect in self.controller.effects.effects:
            if effect.id == scene.effect_id:
                return effect.name
        return "(missing)"

    def _device_names(self, scene: Scene) -> str:
        names = []
        for device_id in scene.device_ids:
            device = self.controller.devices.get_device(device_id)
            names.append(device.display_name if device else device_id)
        return ", ".join(names)

    def rows(self) -> list[tuple[str, tuple[str, ...]]]:
        return [
            (
                scene.id,
                (scene.name, self._effect_name(scene), self._device_names(scene), "yes" if scene.is_active else ""),
            )
            for scene in self.controller.scenes.scenes
        ]

    def on_data_table_row_selected(self, event) -> None:
        self.action_toggle_active()

    @handle_action_errors("switch scene")
    def action_toggle_active(self) -> None:
        scene_id = self.selected_key
        if scene_id is None:
            return
        scene = self.controller.scenes.get_scene(scene_id)
        if scene.is_active:
            self.app.run_request(self.controller.scenes.deactivate(scene_id), f"deactivate scene {scene.name}")
        else:
            self.app.run_request(self.controller.scenes.activate(scene_id), f"activate scene {scene.name}")

    @handle_action_errors("delete scene")
    def action_delete(self) -> None:
        scene_id = self.selected_key
        if scene_id is None:
            return
        scene = self.controller.scenes.get_scene(scene_id)

        def handle_confirmation(confirmed: bool | None) -> None:
            if confirmed:
                self.controller.scenes.delete_scene(scene_id)

        self.app.push_screen(ConfirmationModal("Delete this scene?", scene.name), handle_confirmation)
