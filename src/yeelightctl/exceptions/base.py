"""Root of the yeelightctl exception hierarchy.

Every error the CLI or TUI shows to a user derives from YeelightCtlError,
which carries two messages: a short one for the screen and a detailed one
for the log file. An optional recovery hint tells the user what to try next.
"""

from typing import Optional


class YeelightCtlError(Exception):
    """
    Base exception for all yeelightctl errors.

    Attributes:
        user_message: Shown in notifications and on stderr
        technical_message: Written to the log (defaults to user_message)
        recoverable: False only when retrying the same request cannot help
        recovery_hint: What the user can do about it, if anything
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = True,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.user_message!r})"

    def get_full_message(self) -> str:
        """User message followed by the recovery hint, for notifications."""
        if not self.recovery_hint:
            return self.user_message
        return f"{self.user_message}\n\nSuggestion: {self.recovery_hint}"
