"""Device group screen."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Input

from yeelightctl.models import DeviceGroup, FlowParams, SyncMode
from yeelightctl.protocols import GroupEvent
from yeelightctl.tui.decorators import handle_action_errors
from yeelightctl.tui.widgets import ConfirmationModal

from .base_table import BaseTableScreen

logger = logging.getLogger(__name__)

_SYNC_ORDER = list(SyncMode)


class GroupsScreen(BaseTableScreen):
    """
    Create groups from the selected bulbs and drive every member at once.

    Power and flow requests run as workers; member failures come back as a
    single notification once every member has been tried.
    """

    DEFAULT_CSS = """
    GroupsScreen #create-row {
        height: auto;
        margin-bottom: 1;
    }

    GroupsScreen #group-name {
        width: 1fr;
    }
    """

    BINDINGS = [
        *BaseTableScreen.BINDINGS,
        Binding("o", "power_on", "On"),
        Binding("f", "power_off", "Off"),
        Binding("s", "start_flow", "Start Flow"),
        Binding("m", "cycle_sync", "Sync Mode"),
        Binding("a", "add_selected", "Add Bulb"),
        Binding("r", "remove_selected", "Remove Bulb"),
        Binding("d", "delete", "Delete"),
    ]

    TITLE_TEXT = "Groups"
    COLUMNS = ("Name", "Bulbs", "Sync")
    INSTRUCTIONS = (
        "[dim]o/f: on/off  s: start panel flow  m: sync mode  "
        "a/r: add/remove selected bulb  d: delete  Esc: close[/dim]"
    )

    def __init__(self, controller, device_ids=None, params: FlowParams | None = None) -> None:
        """
        Initialize the screen.

        Args:
            controller: Application controller
            device_ids: Bulbs selected in the main screen
            params: Flow currently chosen in the flow panel (for 's')
        """
        super().__init__(controller, device_ids)
        self.params = params

    def compose_extra(self) -> ComposeResult:
        with Horizontal(id="create-row"):
            yield Input(placeholder="New group name", id="group-name")
            yield Button("Create", id="create-btn", variant="primary")

    def on_mount(self) -> None:
        super().on_mount()
        self.controller.groups.register_observer(self)

    def on_unmount(self) -> None:
        self.controller.groups.unregister_observer(self)

    def on_group_event(self, event: GroupEvent, group: DeviceGroup | None = None) -> None:
        try:
            self.refresh_rows()
        except Exception as e:
            logger.error(f"Error handling group event {event}: {e}")

    def rows(self) -> list[tuple[str, tuple[str, ...]]]:
        rows = []
        for group in self.controller.groups.groups:
            names = []
            for device_id in group.device_ids:
                device = self.controller.devices.get_device(device_id)
                names.append(device.display_name if device else device_id)
            rows.append((group.id, (group.name, ", ".join(names) or "(empty)", group.sync_mode.value)))
        return rows

    # =================================================================
    # Editing
    # =================================================================

    @handle_action_errors("create group")
    def action_create(self) -> None:
        name_input = self.query_one("#group-name", Input)
        name = name_input.value.strip()
        if not name:
            self.notify("Enter a group name", severity="warning")
            return
        group = self.controller.groups.create_group(name, self.device_ids)
        name_input.value = ""
        self.notify(f"Created group '{group.name}' with {len(group.device_ids)} bulb(s)")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "group-name":
            self.action_create()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "create-btn":
            event.stop()
            self.action_create()

    @handle_action_errors("change sync mode")
    def action_cycle_sync(self) -> None:
        group_id = self.selected_key
        if group_id is None:
            return
        group = self.controller.groups.get_group(group_id)
        next_mode = _SYNC_ORDER[(_SYNC_ORDER.index(group.sync_mode) + 1) % len(_SYNC_ORDER)]
        self.controller.groups.set_sync_mode(group_id, next_mode)

    @handle_action_errors("add bulb to group")
    def action_add_selected(self) -> None:
        group_id = self.selected_key
        if group_id is None:
            return
        for device_id in self.device_ids:
            self.controller.groups.add_device(group_id, device_id)

    @handle_action_errors("remove bulb from group")
    def action_remove_selected(self) -> None:
        group_id = self.selected_key
        if group_id is None:
            return
        for device_id in self.device_ids:
            self.controller.groups.remove_device(group_id, device_id)

    @handle_action_errors("delete group")
    def action_delete(self) -> None:
        group_id = self.selected_key
        if group_id is None:
            return
        group = self.controller.groups.get_group(group_id)

        def handle_confirmation(confirmed: bool | None) -> None:
            if confirmed:
                self.controller.groups.delete_group(group_id)
                self.notify(f"Deleted group '{group.name}'")

        self.app.push_screen(ConfirmationModal("Delete this group?", group.name), handle_confirmation)

    # =================================================================
    # Requests
    # =================================================================

    @handle_action_errors("turn group on")
    def action_power_on(self) -> None:
        group_id = self.selected_key
        if group_id is not None:
            self.app.run_request(self.controller.groups.turn_on_all(group_id), "turn group on")

    @handle_action_errors("turn group off")
    def action_power_off(self) -> None:
        group_id = self.selected_key
        if group_id is not None:
            self.app.run_request(self.controller.groups.turn_off_all(group_id), "turn group off")

    @handle_action_errors("start group flow")
    def action_start_flow(self) -> None:
        group_id = self.selected_key
        if group_id is None:
            return
        if self.params is None:
            self.notify("Pick a flow in the flow panel first", severity="warning")
            return
        group = self.controller.groups.get_group(group_id)
        self.controller.activation.validate(self.params, f"flow on group '{group.name}'")
        self.app.run_request(
            self.controller.groups.start_flow(group_id, self.params), f"start flow on {group.name}"
        )
