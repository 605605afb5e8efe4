"""Device command exceptions.

These are raised by device managers when a request cannot be delivered:
- DispatchError: Network or device failure while sending a command
- DeviceNotFoundError: The addressed device is unknown to the manager
"""

from typing import Optional

from .base import YeelightCtlError


class DispatchError(YeelightCtlError):
    """A command could not be delivered to a device."""

    def __init__(
        self,
        user_message: str,
        device_id: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[str] = None,
        recovery_hint: Optional[str] = None,
    ):
        """
        Initialize dispatch error.

        Args:
            user_message: User-friendly error message
            device_id: The device the command was addressed to
            operation: Name of the failed operation (e.g. "start_color_flow")
            original_error: Error text from the transport library
            recovery_hint: Suggestion for how to fix the issue
        """
        tech_msg = f"{operation or 'command'} failed for device {device_id}: {user_message}"
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_message,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint=recovery_hint
            or "Check that the bulb is powered and that LAN control is enabled in the Yeelight app.",
        )
        self.device_id = device_id
        self.operation = operation
        self.original_error = original_error


class DeviceNotFoundError(DispatchError):
    """Requested device is not known to the device manager."""

    def __init__(self, device_id: str):
        """
        Initialize device-not-found error.

        Args:
            device_id: The device id or IP that wasn't found
        """
        super().__init__(
            user_message=f"Device {device_id} not found.",
            device_id=device_id,
            recovery_hint="Run 'yeelightctl devices discover' to see available bulbs.",
        )
