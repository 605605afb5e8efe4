"""Status bar widget showing device counts and the last message."""

from textual.widgets import Static


class StatusBar(Static):
    """
    Status bar displaying current application state.

    Shows:
    - Whether bulbs are simulated
    - Known and flowing device counts
    - The most recent status message
    """

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $panel;
        color: $text;
        padding: 0 1;
    }

    StatusBar.simulated {
        background: $warning-darken-2;
    }

    StatusBar.flowing {
        background: $success;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._simulated = False
        self._devices = 0
        self._flowing = 0
        self._message = ""
        self._update_display()

    def update_state(
        self, devices: int, flowing: int, simulated: bool = False, message: str | None = None
    ) -> None:
        """
        Update all status information.

        Args:
            devices: Number of known devices
            flowing: Number of devices running a flow
            simulated: Whether the bulbs are simulated
            message: New status message (None keeps the current one)
        """
        self._devices = devices
        self._flowing = flowing
        self._simulated = simulated
        if message is not None:
            self._message = message
        self._update_display()

    def set_message(self, message: str) -> None:
        self._message = message
        self._update_display()

    @property
    def message(self) -> str:
        return self._message

    def _update_display(self) -> None:
        self.set_class(self._simulated, "simulated")
        self.set_class(self._flowing > 0 and not self._simulated, "flowing")

        parts = ["SIMULATED" if self._simulated else "LAN"]
        parts.append(f"{self._devices} bulb(s)")
        if self._flowing:
            parts.append(f"{self._flowing} flowing")
        if self._message:
            parts.append(self._message)

        self.update(" | ".join(parts))
