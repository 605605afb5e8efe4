"""TUI-side services."""

from .tui_service import TUIService

__all__ = ["TUIService"]
