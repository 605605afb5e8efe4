"""TUI widgets."""

from .confirmation_modal import ConfirmationModal
from .device_list import DeviceList
from .flow_panel import FlowPanel
from .status_bar import StatusBar

__all__ = ["ConfirmationModal", "DeviceList", "FlowPanel", "StatusBar"]
