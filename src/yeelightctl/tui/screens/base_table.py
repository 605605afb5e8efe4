"""Base class for the stored-entity screens (effects, groups, automations, scenes)."""

from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Label

if TYPE_CHECKING:
    from yeelightctl.app import YeelightController


class BaseTableScreen(Screen):
    """
    A titled table of entities, keyed by entity id, with Escape to close.

    Subclasses provide the title, the columns and the rows, and call
    `refresh_rows()` whenever their service reports a change.
    """

    DEFAULT_CSS = """
    BaseTableScreen {
        align: center middle;
    }

    BaseTableScreen > Vertical {
        width: 100;
        height: 36;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    BaseTableScreen #title {
        height: auto;
        margin-bottom: 1;
    }

    BaseTableScreen #entities {
        height: 1fr;
    }

    BaseTableScreen #instructions {
        height: auto;
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    TITLE_TEXT = ""
    COLUMNS: tuple[str, ...] = ()
    INSTRUCTIONS = ""

    def __init__(self, controller: "YeelightController", device_ids: list[str] | None = None) -> None:
        """
        Initialize the screen.

        Args:
            controller: Application controller
            device_ids: Bulbs selected in the main screen (targets for play/add actions)
        """
        super().__init__()
        self.controller = controller
        self.device_ids = list(device_ids or [])

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(f"[b]{self.TITLE_TEXT}[/b]", id="title")
            yield from self.compose_extra()
            yield DataTable(id="entities", cursor_type="row", zebra_stripes=True)
            yield Label(self.INSTRUCTIONS, id="instructions")
        yield Footer()

    def compose_extra(self) -> ComposeResult:
        """Widgets shown between the title and the table."""
        yield from ()

    def on_mount(self) -> None:
        table = self.query_one("#entities", DataTable)
        table.add_columns(*self.COLUMNS)
        self.refresh_rows()
        table.focus()

    def rows(self) -> list[tuple[str, tuple[str, ...]]]:
        """(key, cells) pairs in display order."""
        raise NotImplementedError

    def refresh_rows(self) -> None:
        table = self.query_one("#entities", DataTable)
        cursor = table.cursor_row
        table.clear()
        rows = self.rows()
        for key, cells in rows:
            table.add_row(*cells, key=key)
        if rows:
            table.move_cursor(row=min(cursor, len(rows) - 1))

    @property
    def selected_key(self) -> str | None:
        table = self.query_one("#entities", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return row_key.value

    def action_close(self) -> None:
        self.dismiss(None)
