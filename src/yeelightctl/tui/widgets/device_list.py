"""Table of known bulbs."""

from textual.widgets import DataTable

from yeelightctl.models import Device


class DeviceList(DataTable):
    """
    One row per device, keyed by device id.

    The table only shows snapshots handed to it; it never talks to the
    device manager. The highlighted row is the selected device.
    """

    DEFAULT_CSS = """
    DeviceList {
        width: 1fr;
        height: 1fr;
        border: round $primary;
    }
    """

    COLUMNS = ("Name", "Address", "State", "Brightness")

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._devices: dict[str, Device] = {}

    def on_mount(self) -> None:
        self.border_title = "Bulbs"
        for column in self.COLUMNS:
            self.add_column(column, key=column.lower())

    def _cells(self, device: Device) -> tuple[str, str, str, str]:
        state = device.status_text
        if device.last_error:
            state += " (!)"
        return (device.display_name, f"{device.ip}:{device.port}", state, f"{device.brightness}%")

    def set_devices(self, devices: list[Device]) -> None:
        """Replace all rows, keeping the selection if that device still exists."""
        selected = self.selected_device_id
        self._devices = {device.id: device for device in devices}
        self.clear()
        for device in devices:
            self.add_row(*self._cells(device), key=device.id)
        if selected in self._devices:
            self.move_cursor(row=self.get_row_index(selected))

    def update_device(self, device: Device) -> None:
        """Update one row in place (adds it if new)."""
        if device.id not in self._devices:
            self._devices[device.id] = device
            self.add_row(*self._cells(device), key=device.id)
            return
        self._devices[device.id] = device
        for column, value in zip(self.COLUMNS, self._cells(device), strict=True):
            self.update_cell(device.id, column.lower(), value)

    def remove_device(self, device_id: str) -> None:
        if device_id in self._devices:
            del self._devices[device_id]
            self.remove_row(device_id)

    @property
    def selected_device_id(self) -> str | None:
        if self.row_count == 0:
            return None
        row_key, _ = self.coordinate_to_cell_key(self.cursor_coordinate)
        return row_key.value

    @property
    def selected_device(self) -> Device | None:
        device_id = self.selected_device_id
        return self._devices.get(device_id) if device_id else None

    @property
    def devices(self) -> list[Device]:
        return list(self._devices.values())
