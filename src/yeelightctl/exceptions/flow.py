"""Flow validation exceptions.

Raised before anything is sent to a bulb:
- FlowValidationError: A transition or flow parameter is out of range
- EmptyFlowError: A flow with no transitions was about to be started
"""

from typing import Any, Optional

from .base import YeelightCtlError


class FlowValidationError(YeelightCtlError):
    """A flow transition or flow parameter failed validation."""

    def __init__(
        self,
        user_message: str,
        field: Optional[str] = None,
        value: Any = None,
        technical_message: Optional[str] = None,
        recovery_hint: Optional[str] = None,
    ):
        """
        Initialize flow validation error.

        Args:
            user_message: User-friendly error message
            field: Name of the offending field (e.g. "mode.red")
            value: The rejected value
            technical_message: Detailed message for logs
            recovery_hint: Suggestion for how to fix the value
        """
        if recovery_hint is None and field:
            recovery_hint = _RANGE_HINTS.get(field.split(".")[-1])

        super().__init__(
            user_message=user_message,
            technical_message=technical_message or f"{user_message} (field={field}, value={value!r})",
            recoverable=True,
            recovery_hint=recovery_hint,
        )
        self.field = field
        self.value = value


class EmptyFlowError(FlowValidationError):
    """A flow without transitions cannot be started."""

    def __init__(self, context: str = "flow"):
        """
        Initialize empty flow error.

        Args:
            context: What was being started (e.g. "custom flow", "preset Custom")
        """
        super().__init__(
            user_message=f"Cannot start {context}: it has no transitions.",
            field="transitions",
            value=[],
            recovery_hint="Add at least one transition or pick a preset.",
        )
        self.context = context


_RANGE_HINTS = {
    "duration": "Duration is in milliseconds and must be at least 1.",
    "red": "Colour channels must be between 0 and 255.",
    "green": "Colour channels must be between 0 and 255.",
    "blue": "Colour channels must be between 0 and 255.",
    "kelvin": "Colour temperature must be between 1700K and 6500K.",
    "brightness": "Brightness must be between 1 and 100.",
    "level": "Brightness level must be between 0 and 100.",
    "count": "Repeat count must be 0 (forever) or a positive number.",
}
