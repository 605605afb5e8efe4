"""Main Textual application."""

import logging
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Select
from textual.worker import Worker

from yeelightctl.exceptions import YeelightCtlError, handle_errors
from yeelightctl.models import FlowParams, FlowPreset
from yeelightctl.protocols import FlowCommand

from .decorators import handle_action_errors, require_selection
from .screens import AutomationsScreen, EffectsScreen, FlowEditorScreen, GroupsScreen, ScenesScreen
from .services import TUIService
from .widgets import DeviceList, FlowPanel, StatusBar

if TYPE_CHECKING:
    from yeelightctl.app import YeelightController

logger = logging.getLogger(__name__)


class YeelightControlApp(App):
    """
    Textual TUI for controlling Yeelight bulbs.

    This is a pure UI layer. The YeelightController owns all state and
    services; the TUIService observes them and updates the widgets.

    Requests never block the UI:
    - Flow toggles go through FlowActivationService.request_toggle, which
      decides START/STOP synchronously and dispatches in the background.
    - Discovery, group, effect and automation requests run as Textual
      workers via `run_request`.

    Failures of either kind end up as error notifications.
    """

    TITLE = "yeelightctl"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("space", "toggle_flow", "Start/Stop", show=True),
        Binding("o", "power", "Power", show=True),
        Binding("e", "open_editor", "Editor", show=True),
        Binding("f", "effects", "Effects", show=True),
        Binding("g", "groups", "Groups", show=True),
        Binding("a", "automations", "Automations", show=True),
        Binding("s", "scenes", "Scenes", show=True),
        Binding("d", "discover", "Discover", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, controller: "YeelightController") -> None:
        """
        Initialize the app.

        Args:
            controller: Application controller owning devices and services
        """
        super().__init__()
        self.controller = controller
        self.tui_service = TUIService(self)
        self._startup_error: Optional[Exception] = None

    @property
    def startup_error(self) -> Optional[Exception]:
        """Error that made the app exit during startup (shown by the CLI after exit)."""
        return self._startup_error

    def compose(self) -> ComposeResult:
        config = self.controller.config
        preset = config.last_preset if config.last_preset is not FlowPreset.CUSTOM else FlowPreset.CANDLELIGHT
        yield Header(show_clock=True)
        with Horizontal(id="main"):
            yield DeviceList(id="device-list")
            yield FlowPanel(
                preset=preset,
                count=config.default_flow_count,
                action=config.default_flow_action,
                id="flow-panel",
            )
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        """
        Initialize the controller once Textual is running.

        Widgets exist at this point, so observer callbacks triggered by
        loading can update them.
        """
        logger.info("TUI mounting - Textual is now running")
        try:
            self.controller.initialize()
        except Exception as e:
            logger.error(f"Failed to initialize controller: {e}")
            self._startup_error = e
            self.exit(1)
            return

        self.tui_service.attach()
        self.main_screen.query_one(DeviceList).set_devices(self.controller.devices.devices)
        self._sync_flow_panel()
        self.tui_service.update_status("Ready")
        self.sub_title = "Simulated bulbs" if self.controller.is_simulated else "LAN"

        if not self.controller.is_simulated:
            self.action_discover()

    def on_unmount(self) -> None:
        self.tui_service.detach()
        logger.info("TUI unmounted")

    # =================================================================
    # Request helpers
    # =================================================================

    def run_request(self, coro: Coroutine[Any, Any, Any], operation: str) -> Worker:
        """
        Run an awaitable request as a worker.

        Failures are logged and shown as a notification; they never stop the app.
        """
        guarded = handle_errors(
            operation_name=operation,
            user_notification=lambda msg: self.notify(msg, severity="error", timeout=5),
            re_raise=False,
        )(self._await)
        return self.run_worker(guarded(coro), name=operation, group="requests", exit_on_error=False)

    @staticmethod
    async def _await(coro: Coroutine[Any, Any, Any]) -> Any:
        return await coro

    @property
    def main_screen(self) -> Screen:
        """
        The screen holding the device list and flow panel.

        It stays at the bottom of the stack while the secondary screens are
        open, so its widgets keep receiving device updates.
        """
        return self.screen_stack[0]

    @property
    def selected_device_id(self) -> Optional[str]:
        return self.main_screen.query_one(DeviceList).selected_device_id

    def current_params(self) -> FlowParams:
        """FlowParams for the flow panel's current choice (Custom uses the editor's sequence)."""
        panel = self.main_screen.query_one(FlowPanel)
        return self.controller.activation.resolve(
            preset=panel.preset,
            transitions=self.controller.editor.transitions,
            count=panel.count,
            action=panel.action,
        )

    def _sync_flow_panel(self) -> None:
        panel = self.main_screen.query_one(FlowPanel)
        panel.show_device(self.main_screen.query_one(DeviceList).selected_device)
        try:
            panel.show_preview(self.current_params().transitions)
        except YeelightCtlError:
            panel.show_preview(())

    # =================================================================
    # Widget events
    # =================================================================

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if isinstance(event.data_table, DeviceList):
            self._sync_flow_panel()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "preset-select":
            self._sync_flow_panel()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "toggle-btn":
            event.stop()
            self.action_toggle_flow()
        elif event.button.id == "edit-btn":
            event.stop()
            self.action_open_editor()

    # =================================================================
    # Actions
    # =================================================================

    @handle_action_errors("toggle flow")
    @require_selection
    def action_toggle_flow(self, device_id: str) -> None:
        """Stop the selected bulb's flow, or start the panel's flow on it."""
        params = self.current_params()
        command = self.controller.activation.request_toggle(device_id, params)
        if command is FlowCommand.START:
            preset = self.main_screen.query_one(FlowPanel).preset
            if not preset.is_custom:
                self.controller.remember_preset(preset)
        self.tui_service.update_status(f"{command.value.capitalize()} requested")

    @handle_action_errors("toggle power")
    @require_selection
    def action_power(self, device_id: str) -> None:
        device = self.controller.devices.get_device(device_id)
        on = not device.power
        self.run_request(
            self.controller.devices.set_power(device_id, on), f"turn {'on' if on else 'off'} {device.display_name}"
        )

    def action_discover(self) -> None:
        self.tui_service.update_status("Discovering...")
        self.run_request(self._discover(), "discover bulbs")

    async def _discover(self) -> None:
        devices = await self.controller.devices.discover()
        self.tui_service.update_status(f"Discovery found {len(devices)} bulb(s)")

    @handle_action_errors("open flow editor")
    @require_selection
    def action_open_editor(self, device_id: str) -> None:
        panel = self.main_screen.query_one(FlowPanel)

        def handle_result(params: FlowParams | None) -> None:
            if params is not None:
                panel.preset = FlowPreset.CUSTOM
                self.tui_service.update_status(f"Custom flow with {len(params.transitions)} step(s) started")
            self._sync_flow_panel()

        self.push_screen(
            FlowEditorScreen(
                self.controller,
                [device_id],
                preset=panel.preset,
                count=panel.count,
                action=panel.action,
            ),
            handle_result,
        )

    def _selected_ids(self) -> list[str]:
        device_id = self.selected_device_id
        return [device_id] if device_id else []

    def action_effects(self) -> None:
        self.push_screen(EffectsScreen(self.controller, self._selected_ids()))

    def action_groups(self) -> None:
        try:
            params = self.current_params()
        except YeelightCtlError:
            params = None
        self.push_screen(GroupsScreen(self.controller, self._selected_ids(), params=params))

    def action_automations(self) -> None:
        self.push_screen(AutomationsScreen(self.controller, self._selected_ids()))

    def action_scenes(self) -> None:
        self.push_screen(ScenesScreen(self.controller, self._selected_ids()))
