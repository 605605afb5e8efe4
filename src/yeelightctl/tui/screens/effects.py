"""Effect library screen."""

import logging

from textual.binding import Binding

from yeelightctl.models import Effect
from yeelightctl.protocols import EffectEvent
from yeelightctl.tui.decorators import handle_action_errors
from yeelightctl.tui.widgets import ConfirmationModal

from .base_table import BaseTableScreen

logger = logging.getLogger(__name__)


class EffectsScreen(BaseTableScreen):
    """Browse saved effects, play them on the selected bulbs, copy or delete them."""

    BINDINGS = [
        *BaseTableScreen.BINDINGS,
        Binding("p", "play", "Play"),
        Binding("c", "duplicate", "Copy"),
        Binding("s", "save_scene", "Save scene"),
        Binding("d", "delete", "Delete"),
    ]

    TITLE_TEXT = "Effects"
    COLUMNS = ("Name", "Steps", "Length", "Repeat", "Then", "Type")
    INSTRUCTIONS = (
        "[dim]p/Enter: play on selected bulb  c: copy  s: save as scene for the selected bulb"
        "  d: delete  Esc: close[/dim]"
    )

    def on_mount(self) -> None:
        super().on_mount()
        self.controller.effects.register_observer(self)

    def on_unmount(self) -> None:
        self.controller.effects.unregister_observer(self)

    def on_effect_event(self, event: EffectEvent, effect: Effect | None = None) -> None:
        try:
            if event is EffectEvent.STARTED and effect:
                self.notify(f"Playing '{effect.name}'")
            else:
                self.refresh_rows()
        except Exception as e:
            logger.error(f"Error handling effect event {event}: {e}")

    def rows(self) -> list[tuple[str, tuple[str, ...]]]:
        rows = []
        for effect in self.controller.effects.effects:
            params = effect.params
            rows.append(
                (
                    effect.id,
                    (
                        effect.name,
                        str(len(params.transitions)),
                        f"{params.total_duration / 1000:.1f}s",
                        "forever" if params.is_infinite else str(params.count),
                        params.action.value,
                        "built-in" if effect.built_in else "saved",
                    ),
                )
            )
        return rows

    def on_data_table_row_selected(self, event) -> None:
        self.action_play()

    @handle_action_errors("play effect")
    def action_play(self) -> None:
        effect_id = self.selected_key
        if effect_id is None:
            return
        if not self.device_ids:
            self.notify("Select a bulb first", severity="warning")
            return
        effect = self.controller.effects.get_effect(effect_id)
        self.controller.activation.validate(effect.params, f"effect '{effect.name}'")
        self.app.run_request(
            self.controller.effects.start_effect(effect_id, on=self.device_ids),
            f"play effect {effect.name}",
        )

    @handle_action_errors("copy effect")
    def action_duplicate(self) -> None:
        effect_id = self.selected_key
        if effect_id is not None:
            copy = self.controller.effects.duplicate_effect(effect_id)
            self.notify(f"Created '{copy.name}'")

    @handle_action_errors("save scene")
    def action_save_scene(self) -> None:
        effect_id = self.selected_key
        if effect_id is None:
            return
        if not self.device_ids:
            self.notify("Select a bulb first", severity="warning")
            return
        effect = self.controller.effects.get_effect(effect_id)
        device = self.controller.devices.get_device(self.device_ids[0])
        target = device.display_name if device else self.device_ids[0]
        if len(self.device_ids) > 1:
            target += f" +{len(self.device_ids) - 1}"
        scene = self.controller.scenes.create_scene(f"{effect.name} on {target}", self.device_ids, effect_id)
        self.notify(f"Saved scene '{scene.name}'")

    @handle_action_errors("delete effect")
    def action_delete(self) -> None:
        effect_id = self.selected_key
        if effect_id is None:
            return
        effect = self.controller.effects.get_effect(effect_id)
        if effect.built_in:
            self.notify(f"'{effect.name}' is built in and cannot be deleted", severity="warning")
            return

        def handle_confirmation(confirmed: bool | None) -> None:
            if confirmed:
                self._delete(effect_id)

        self.app.push_screen(
            ConfirmationModal("Delete this effect?", effect.name), handle_confirmation
        )

    @handle_action_errors("delete effect")
    def _delete(self, effect_id: str) -> None:
        removed = self.controller.effects.delete_effect(effect_id)
        self.notify(f"Deleted '{removed.name}'")
