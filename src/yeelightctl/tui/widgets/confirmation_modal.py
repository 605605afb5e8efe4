"""Modal dialog for confirming destructive operations."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label


class ConfirmationModal(ModalScreen[bool]):
    """Modal dialog asking the user to confirm an action (e.g. deleting an effect)."""

    DEFAULT_CSS = """
    ConfirmationModal {
        align: center middle;
    }

    #dialog {
        width: 50;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #question {
        width: 100%;
        content-align: center middle;
        padding: 1 0;
        text-style: bold;
    }

    #details {
        width: 100%;
        content-align: center middle;
        padding: 1 0;
        color: $text-muted;
    }

    #button-container {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1 0;
    }

    #button-container Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    def __init__(self, question: str, details: str = "", confirm_label: str = "Delete") -> None:
        """
        Initialize the modal.

        Args:
            question: Question shown in bold
            details: Extra line under the question (e.g. the item name)
            confirm_label: Label of the confirming button
        """
        super().__init__()
        self.question = question
        self.details = details
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Label(self.question, id="question")
            if self.details:
                yield Label(self.details, id="details")
            with Horizontal(id="button-container"):
                yield Button(self.confirm_label, variant="error", id="confirm-btn")
                yield Button("Cancel", variant="default", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm-btn":
            event.stop()
            self.dismiss(True)
        elif event.button.id == "cancel-btn":
            event.stop()
            self.dismiss(False)
