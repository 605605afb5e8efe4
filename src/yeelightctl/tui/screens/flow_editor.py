"""Screen for building a custom flow transition by transition."""

import logging
from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Input, Label, Select

from yeelightctl.flow import format_transition, parse_transition
from yeelightctl.models import FlowAction, FlowParams, FlowPreset, FlowTransition
from yeelightctl.protocols import FlowEditEvent
from yeelightctl.tui.decorators import handle_action_errors

if TYPE_CHECKING:
    from yeelightctl.app import YeelightController

logger = logging.getLogger(__name__)


class FlowEditorScreen(Screen[FlowParams | None]):
    """
    Edit the controller's FlowEditorService and start the result.

    The screen is a FlowEditObserver while it is open: every edit arrives as
    a FlowEditEvent carrying the whole sequence and the table is redrawn
    from it. Closing the screen drops the edits; requests already started
    keep running.

    Dismisses with the started FlowParams, or None when cancelled.
    """

    DEFAULT_CSS = """
    FlowEditorScreen {
        align: center middle;
    }

    FlowEditorScreen > Vertical {
        width: 90;
        height: 40;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    FlowEditorScreen #transitions {
        height: 1fr;
        margin: 1 0;
    }

    FlowEditorScreen Horizontal {
        height: auto;
        margin-bottom: 1;
    }

    FlowEditorScreen Horizontal Button {
        margin-right: 1;
    }

    FlowEditorScreen #transition-input {
        width: 1fr;
    }

    FlowEditorScreen #count-input {
        width: 12;
    }

    FlowEditorScreen #action-select {
        width: 20;
    }

    FlowEditorScreen #name-input {
        width: 1fr;
    }

    FlowEditorScreen #hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("a", "append", "Add"),
        Binding("delete", "remove", "Remove"),
        Binding("ctrl+up", "move_up", "Move Up"),
        Binding("ctrl+down", "move_down", "Move Down"),
        Binding("ctrl+s", "start", "Start"),
    ]

    def __init__(
        self,
        controller: "YeelightController",
        device_ids: list[str],
        preset: FlowPreset = FlowPreset.CUSTOM,
        count: int = 0,
        action: FlowAction = FlowAction.RECOVER,
    ) -> None:
        """
        Initialize the editor screen.

        Args:
            controller: Application controller (editor, effects)
            device_ids: Bulbs the flow is started on
            preset: Preset loaded as the starting sequence
            count: Initial repeat count
            action: Initial end action
        """
        super().__init__()
        self.controller = controller
        self.editor = controller.editor
        self.device_ids = device_ids
        self._preset = preset
        self._count = count
        self._action = action

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"[b]Flow Editor[/b] - {len(self.device_ids)} bulb(s)", id="title")
            yield DataTable(id="transitions", cursor_type="row", zebra_stripes=True)
            with Horizontal():
                yield Input(placeholder="1000:rgb:255,0,0", id="transition-input")
                yield Button("Add", id="add-btn", variant="primary")
                yield Button("Replace", id="replace-btn")
                yield Button("Remove", id="remove-btn", variant="warning")
            with Horizontal():
                yield Input(str(self._count), type="integer", id="count-input")
                yield Select(
                    [(action.value, action) for action in FlowAction],
                    value=self._action,
                    allow_blank=False,
                    id="action-select",
                )
                yield Button("Clear", id="clear-btn")
            with Horizontal():
                yield Input(placeholder="Effect name", id="name-input")
                yield Button("Save Effect", id="save-btn")
            with Horizontal():
                yield Button("Start", id="start-btn", variant="success")
                yield Button("Cancel", id="cancel-btn", variant="default")
            yield Label(
                "[dim]Transitions: DURATION:rgb:R,G,B | DURATION:ct:KELVIN,BRIGHTNESS | DURATION:bright:LEVEL[/dim]",
                id="hint",
            )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#transitions", DataTable)
        table.add_columns("#", "Duration", "Mode", "Text")
        self.editor.register_observer(self)
        self.editor.load_preset(self._preset)
        self.editor.set_count(self._count)
        self.editor.set_action(self._action)

    def on_unmount(self) -> None:
        self.editor.unregister_observer(self)

    # =================================================================
    # FlowEditObserver Protocol
    # =================================================================

    def on_flow_edit_event(self, event: FlowEditEvent, transitions: tuple[FlowTransition, ...]) -> None:
        try:
            self._refresh_table(transitions)
        except Exception as e:
            logger.error(f"Error handling flow edit event {event}: {e}")

    def _refresh_table(self, transitions: tuple[FlowTransition, ...]) -> None:
        table = self.query_one("#transitions", DataTable)
        cursor = table.cursor_row
        table.clear()
        for index, transition in enumerate(transitions):
            table.add_row(
                str(index + 1),
                f"{transition.duration} ms",
                transition.mode.kind,
                format_transition(transition),
            )
        if transitions:
            table.move_cursor(row=min(cursor, len(transitions) - 1))

    # =================================================================
    # Helpers
    # =================================================================

    @property
    def selected_index(self) -> int | None:
        if self.editor.is_empty:
            return None
        return self.query_one("#transitions", DataTable).cursor_row

    def _entered_transition(self) -> FlowTransition | None:
        """Parse the input field; None when it is empty."""
        text = self.query_one("#transition-input", Input).value.strip()
        return parse_transition(text) if text else None

    def _apply_settings(self) -> None:
        text = self.query_one("#count-input", Input).value.strip()
        self.editor.set_count(int(text) if text else 0)
        self.editor.set_action(self.query_one("#action-select", Select).value)

    # =================================================================
    # Actions
    # =================================================================

    @handle_action_errors("add transition")
    def action_append(self) -> None:
        self.editor.append(self._entered_transition())

    @handle_action_errors("replace transition")
    def action_replace(self) -> None:
        index = self.selected_index
        transition = self._entered_transition()
        if index is None or transition is None:
            self.notify("Select a transition and enter its replacement", severity="warning")
            return
        self.editor.update(index, transition)

    @handle_action_errors("remove transition")
    def action_remove(self) -> None:
        index = self.selected_index
        if index is not None:
            self.editor.remove_at({index})

    @handle_action_errors("move transition")
    def action_move_up(self) -> None:
        index = self.selected_index
        if index:
            self.editor.move(index, index - 1)
            self.query_one("#transitions", DataTable).move_cursor(row=index - 1)

    @handle_action_errors("move transition")
    def action_move_down(self) -> None:
        index = self.selected_index
        if index is not None and index < len(self.editor) - 1:
            self.editor.move(index, index + 1)
            self.query_one("#transitions", DataTable).move_cursor(row=index + 1)

    @handle_action_errors("save effect")
    def action_save_effect(self) -> None:
        name = self.query_one("#name-input", Input).value.strip()
        if not name:
            self.notify("Enter a name for the effect", severity="warning")
            return
        self._apply_settings()
        effect = self.controller.effects.create_effect(name, self.editor.snapshot())
        self.notify(f"Saved effect '{effect.name}'")

    @handle_action_errors("start custom flow")
    def action_start(self) -> None:
        self._apply_settings()
        params = self.editor.commit(self.device_ids)
        self._close(params)

    def action_cancel(self) -> None:
        self._close(None)

    def _close(self, result: FlowParams | None) -> None:
        self.editor.unregister_observer(self)
        self.editor.clear()
        self.dismiss(result)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "transition-input":
            self.action_append()
            event.input.value = ""

    def on_button_pressed(self, event: Button.Pressed) -> None:
        handlers = {
            "add-btn": self.action_append,
            "replace-btn": self.action_replace,
            "remove-btn": self.action_remove,
            "clear-btn": self.editor.clear,
            "save-btn": self.action_save_effect,
            "start-btn": self.action_start,
            "cancel-btn": self.action_cancel,
        }
        handler = handlers.get(event.button.id)
        if handler:
            event.stop()
            handler()
