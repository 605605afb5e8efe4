"""
Centralized error handling utilities.

This module provides a layered approach to error handling:

1. **Custom Exceptions** - Typed, user-friendly error classes (see base, flow, dispatch, config)
2. **Error Context** - Preserve technical details for logging, show friendly messages to users
3. **Recovery Hints** - Tell users what to do when things fail
4. **Error Isolation** - One failing bulb shouldn't stop a whole group command

## Quick Reference

| Scenario | Use This |
|----------|----------|
| Transition value out of range | `wrap_flow_error(pydantic_error)` |
| Bulb unreachable | `wrap_dispatch_error(e, device_id, "start_color_flow")` |
| Config file syntax error | `wrap_pydantic_error(e, path)` |
| Fire-and-forget UI request | `@handle_errors(operation_name="start flow", re_raise=False)` |
| Command sent to several bulbs | `collector = collect_errors("turn on group")` |

## Architecture

```
USER LAYER (CLI/TUI)        formats user_message + recovery_hint
        ↑ YeelightCtlError
SERVICE LAYER               converts low-level errors, adds context
        ↑ BulbException, OSError, pydantic.ValidationError
LOW LEVEL (yeelight, I/O)
```
"""

import inspect
import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from .base import YeelightCtlError
from .config import ConfigFileInvalidError, ConfigValidationError
from .dispatch import DispatchError
from .flow import FlowValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def handle_errors(
    *,
    operation_name: str,
    user_notification: Optional[Callable[[str], None]] = None,
    fallback_value: Any = None,
    re_raise: bool = True,
    log_level: int = logging.ERROR,
) -> Callable:
    """
    Decorator for consistent error handling.

    Works on plain functions and on coroutine functions. Provides:
    - Logging errors with context
    - Showing user notifications
    - Returning fallback values
    - Re-raising or absorbing exceptions

    Args:
        operation_name: Name of the operation for logging (e.g., "start flow")
        user_notification: Optional callback to notify user (e.g., app.notify)
        fallback_value: Value to return if error occurs and re_raise=False
        re_raise: Whether to re-raise the exception after handling
        log_level: Logging level for the error (default: ERROR)

    Example:
        ```python
        @handle_errors(operation_name="stop flow", re_raise=False)
        async def stop(self, device_id: str) -> None:
            await self.devices.stop_color_flow(device_id)
        ```
    """

    def _report(e: Exception) -> None:
        if isinstance(e, YeelightCtlError):
            logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")
            if user_notification:
                user_notification(e.get_full_message())
        else:
            logger.log(log_level, f"Unexpected error during {operation_name}: {e}", exc_info=True)
            if user_notification:
                user_notification(f"Error: {e}")

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _report(e)
                    if re_raise:
                        raise
                    return fallback_value

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _report(e)
                if re_raise:
                    raise
                return fallback_value

        return wrapper

    return decorator


def _loc_to_field(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "unknown"


def wrap_pydantic_error(error: Exception, file_path: str) -> YeelightCtlError:
    """
    Convert Pydantic errors raised while reading a file to yeelightctl exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            return ConfigValidationError(
                field=_loc_to_field(first_error.get("loc", ())),
                value=first_error.get("input"),
                error_msg=first_error.get("msg", "validation failed"),
                file_path=file_path,
            )
        if errors:
            error_lines = [
                f"  - {_loc_to_field(err.get('loc', ()))}: {err.get('msg', 'validation failed')}"
                for err in errors
            ]
            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return ConfigValidationError(
                field="multiple fields", value=None, error_msg=combined_msg, file_path=file_path
            )

    return ConfigValidationError(field="unknown", value=None, error_msg=error_msg, file_path=file_path)


def wrap_flow_error(error: Exception) -> FlowValidationError:
    """
    Convert a Pydantic validation error on a flow model into a FlowValidationError.

    Only the first error is reported to the user; all of them go to the log.

    Args:
        error: The Pydantic ValidationError raised by a flow model

    Returns:
        FlowValidationError naming the offending field
    """
    from pydantic import ValidationError

    if isinstance(error, ValidationError) and error.errors():
        first_error = error.errors()[0]
        field = _loc_to_field(first_error.get("loc", ()))
        return FlowValidationError(
            user_message=f"Invalid flow value for '{field}': {first_error.get('msg', 'invalid value')}",
            field=field,
            value=first_error.get("input"),
            technical_message=str(error),
        )

    return FlowValidationError(user_message=f"Invalid flow: {error}", technical_message=repr(error))


def wrap_dispatch_error(
    error: Exception, device_id: Optional[str] = None, operation: Optional[str] = None
) -> DispatchError:
    """
    Convert transport errors (yeelight BulbException, socket errors) to DispatchError.

    Args:
        error: The original exception from the transport library
        device_id: The device the command was addressed to
        operation: The failed operation

    Returns:
        DispatchError with a user-friendly message
    """
    if isinstance(error, DispatchError):
        return error

    error_msg = str(error)
    lowered = error_msg.lower()

    if "quota" in lowered or "rate" in lowered:
        return DispatchError(
            user_message="The bulb rejected the command because too many were sent.",
            device_id=device_id,
            operation=operation,
            original_error=error_msg,
            recovery_hint="Yeelight bulbs accept about 60 commands per minute. Wait a moment and retry.",
        )

    if isinstance(error, (TimeoutError, ConnectionError)) or "timed out" in lowered or "refused" in lowered:
        return DispatchError(
            user_message=f"Device {device_id} is not reachable.",
            device_id=device_id,
            operation=operation,
            original_error=error_msg,
        )

    return DispatchError(
        user_message=f"Device {device_id} rejected the command: {error_msg}",
        device_id=device_id,
        operation=operation,
        original_error=error_msg,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, YeelightCtlError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for batch operations.

    Example:
        ```python
        collector = collect_errors("turn on living room")

        for device_id in group.device_ids:
            with collector.try_operation(f"turn on {device_id}"):
                await manager.set_power(device_id, True)

        if collector.has_errors:
            raise collector.to_dispatch_error()
        ```

    Args:
        operation: Description of the overall operation

    Returns:
        ErrorCollector instance
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        """
        Initialize error collector.

        Args:
            operation: Description of the overall operation
        """
        self.operation = operation
        self.errors: list[tuple[str, BaseException]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Args:
            sub_operation: Description of this specific operation

        Returns:
            Context manager that catches and stores errors
        """
        return self._OperationContext(self, sub_operation)

    def get_summary(self) -> str:
        """Get a multi-line summary of collected errors."""
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = f"Failed {self.error_count} of {self.error_count + self.success_count} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, YeelightCtlError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    def to_dispatch_error(self) -> DispatchError:
        """Summarize collected failures as a single DispatchError."""
        return DispatchError(
            user_message=f"Failed to {self.operation}: {self.error_count} device(s) did not respond.",
            operation=self.operation,
            original_error=self.get_summary(),
        )

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            if not issubclass(exc_type, Exception):
                return False

            logger.warning(f"{self.collector.operation}: {self.sub_operation} failed: {exc_val}")
            self.collector.errors.append((self.sub_operation, exc_val))
            return True
