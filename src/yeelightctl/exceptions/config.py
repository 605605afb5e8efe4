"""Configuration-related exceptions.

This module defines exceptions for configuration and data file errors:
- ConfigurationError: Base class for configuration errors
- ConfigFileInvalidError: File has invalid JSON syntax
- ConfigValidationError: File values fail validation
"""

from typing import Any, Optional

from .base import YeelightCtlError


class ConfigurationError(YeelightCtlError):
    """Configuration or a data file is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """File has invalid JSON syntax."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid file
            parse_error: The parsing error message
        """
        user_msg = "Configuration file has invalid syntax"
        recovery = "Check for common JSON errors:\n"
        recovery += "  - Trailing commas (remove commas after last item)\n"
        recovery += "  - Missing quotes around strings\n"
        recovery += "  - Unclosed braces or brackets\n"
        recovery += f"  - Edit: {file_path}"

        if "trailing comma" in parse_error.lower():
            user_msg = "Configuration file has a trailing comma"
            recovery = (
                f"Remove the trailing comma from {file_path}\n"
                "JSON doesn't allow commas after the last item in an object or array"
            )
        elif "empty" in parse_error.lower():
            user_msg = "Configuration file is empty"
            recovery = f"Delete {file_path} to recreate it with defaults"

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """File values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: Optional[str] = None):
        """
        Initialize config validation error.

        Args:
            field: The field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the file (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if "port" in field.lower():
            recovery += "\nYeelight bulbs listen on port 55443 by default"
        elif "action" in field.lower():
            recovery += "\nValid flow actions: recover, stay, off"
        elif "effect" in field.lower():
            recovery += "\nValid transition effects: smooth, sudden"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery,
        )
        self.field = field
        self.value = value
        self.file_path = file_path
