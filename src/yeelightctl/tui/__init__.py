"""Terminal user interface."""

from .app import YeelightControlApp

__all__ = ["YeelightControlApp"]
