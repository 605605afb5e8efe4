"""Automation screen."""

import logging

from textual.binding import Binding

from yeelightctl.models import Automation
from yeelightctl.protocols import AutomationEvent
from yeelightctl.tui.decorators import handle_action_errors
from yeelightctl.tui.widgets import ConfirmationModal

from .base_table import BaseTableScreen

logger = logging.getLogger(__name__)


class AutomationsScreen(BaseTableScreen):
    """List automations, run them now, enable/disable or delete them."""

    BINDINGS = [
        *BaseTableScreen.BINDINGS,
        Binding("r", "run", "Run Now"),
        Binding("e", "toggle_enabled", "Enable/Disable"),
        Binding("d", "delete", "Delete"),
    ]

    TITLE_TEXT = "Automations"
    COLUMNS = ("Name", "On", "Summary", "Last run")
    INSTRUCTIONS = "[dim]r/Enter: run now  e: enable/disable  d: delete  Esc: close[/dim]"

    def on_mount(self) -> None:
        super().on_mount()
        self.controller.automations.register_observer(self)

    def on_unmount(self) -> None:
        self.controller.automations.unregister_observer(self)

    def on_automation_event(self, event: AutomationEvent, automation: Automation | None = None) -> None:
        try:
            self.refresh_rows()
            if event is AutomationEvent.RAN and automation:
                self.notify(f"Ran '{automation.name}'")
        except Exception as e:
            logger.error(f"Error handling automation event {event}: {e}")

    def rows(self) -> list[tuple[str, tuple[str, ...]]]:
        rows = []
        for automation in self.controller.automations.automations:
            last_run = automation.last_run.strftime("%Y-%m-%d %H:%M") if automation.last_run else "never"
            rows.append(
                (
                    automation.id,
                    (automation.name, "yes" if automation.enabled else "no", automation.describe(), last_run),
                )
            )
        return rows

    def on_data_table_row_selected(self, event) -> None:
        self.action_run()

    @handle_action_errors("run automation")
    def action_run(self) -> None:
        automation_id = self.selected_key
        if automation_id is not None:
            automation = self.controller.automations.get_automation(automation_id)
            self.app.run_request(
                self.controller.automations.run(automation_id), f"run automation {automation.name}"
            )

    @handle_action_errors("enable/disable automation")
    def action_toggle_enabled(self) -> None:
        automation_id = self.selected_key
        if automation_id is None:
            return
        automation = self.controller.automations.get_automation(automation_id)
        if automation.enabled:
            self.controller.automations.disable(automation_id)
        else:
            self.controller.automations.enable(automation_id)

    @handle_action_errors("delete automation")
    def action_delete(self) -> None:
        automation_id = self.selected_key
        if automation_id is None:
            return
        automation = self.controller.automations.get_automation(automation_id)

        def handle_confirmation(confirmed: bool | None) -> None:
            if confirmed:
                self.controller.automations.delete_automation(automation_id)

        self.app.push_screen(
            ConfirmationModal("Delete this automation?", automation.name), handle_confirmation
        )
