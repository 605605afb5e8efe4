"""Side panel for choosing and starting a flow on the selected bulb."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Select, Static

from yeelightctl.exceptions import FlowValidationError
from yeelightctl.flow import format_transition, list_presets
from yeelightctl.models import Device, FlowAction, FlowPreset, FlowTransition


class FlowPanel(Vertical):
    """
    Preset picker, repeat count, end action and Start/Stop button.

    The panel does not send anything itself: the Start/Stop button bubbles
    a Button.Pressed that the app turns into a toggle request.
    """

    DEFAULT_CSS = """
    FlowPanel {
        width: 44;
        height: 1fr;
        border: round $accent;
        padding: 0 1;
    }

    FlowPanel .field-label {
        margin-top: 1;
        color: $text-muted;
    }

    FlowPanel #device-title {
        text-style: bold;
        padding: 1 0 0 0;
    }

    FlowPanel #preset-description {
        color: $text-muted;
        height: auto;
    }

    FlowPanel #preview {
        height: 1fr;
        margin-top: 1;
        color: $text;
    }

    FlowPanel #flow-buttons {
        height: auto;
        margin-top: 1;
    }

    FlowPanel #flow-buttons Button {
        margin-right: 1;
    }
    """

    def __init__(
        self,
        preset: FlowPreset = FlowPreset.CANDLELIGHT,
        count: int = 0,
        action: FlowAction = FlowAction.RECOVER,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._initial_preset = preset
        self._initial_count = count
        self._initial_action = action

    def compose(self) -> ComposeResult:
        yield Label("No bulb selected", id="device-title")
        yield Label("Preset", classes="field-label")
        yield Select(
            [(preset.value, preset) for preset in list_presets()],
            value=self._initial_preset,
            allow_blank=False,
            id="preset-select",
        )
        yield Static(self._initial_preset.description, id="preset-description")
        yield Label("Repeat count (0 = forever)", classes="field-label")
        yield Input(str(self._initial_count), type="integer", id="count-input")
        yield Label("When finished", classes="field-label")
        yield Select(
            [(action.value, action) for action in FlowAction],
            value=self._initial_action,
            allow_blank=False,
            id="action-select",
        )
        yield Static("", id="preview")
        with Horizontal(id="flow-buttons"):
            yield Button("Start", variant="success", id="toggle-btn")
            yield Button("Edit", variant="primary", id="edit-btn")

    def on_mount(self) -> None:
        self.border_title = "Flow"

    # =================================================================
    # Selected values
    # =================================================================

    @property
    def preset(self) -> FlowPreset:
        return self.query_one("#preset-select", Select).value

    @preset.setter
    def preset(self, preset: FlowPreset) -> None:
        self.query_one("#preset-select", Select).value = preset

    @property
    def count(self) -> int:
        """Repeat count, or 0 if the field is empty."""
        text = self.query_one("#count-input", Input).value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            raise FlowValidationError(f"Repeat count '{text}' is not a number.", field="count", value=text) from None

    @property
    def action(self) -> FlowAction:
        return self.query_one("#action-select", Select).value

    # =================================================================
    # Display
    # =================================================================

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "preset-select" and isinstance(event.value, FlowPreset):
            self.query_one("#preset-description", Static).update(event.value.description)

    def show_device(self, device: Device | None) -> None:
        """Reflect the selected bulb in the title and the Start/Stop button."""
        title = self.query_one("#device-title", Label)
        button = self.query_one("#toggle-btn", Button)
        if device is None:
            title.update("No bulb selected")
            button.label = "Start"
            button.variant = "success"
            button.disabled = True
            return

        title.update(f"{device.display_name} ({device.status_text})")
        button.disabled = False
        if device.flowing:
            button.label = "Stop"
            button.variant = "error"
        else:
            button.label = "Start"
            button.variant = "success"

    def show_preview(self, transitions: tuple[FlowTransition, ...]) -> None:
        """List the transitions that Start would send."""
        preview = self.query_one("#preview", Static)
        if not transitions:
            preview.update("(no transitions)")
            return
        lines = [f"{i + 1:>2}. {format_transition(t)}" for i, t in enumerate(transitions)]
        preview.update("\n".join(lines))
