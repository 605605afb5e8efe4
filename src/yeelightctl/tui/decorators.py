"""Decorators for TUI components."""

import inspect
from functools import wraps

from yeelightctl.exceptions import handle_errors as _handle_errors


def require_selection(func):
    """Decorator that skips an action (with a warning) when no bulb is selected.

    The decorated method receives the selected device id as its first argument.

    Example:
        @require_selection
        def action_power(self, device_id):
            ...
    """
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        device_id = self.selected_device_id
        if device_id is None:
            self.notify("Select a bulb first", severity="warning")
            return None
        return func(self, device_id, *args, **kwargs)
    return wrapper


def handle_action_errors(operation_name: str):
    """
    Decorator for TUI action methods that wraps the centralized error handler.

    This is a TUI-specific wrapper around the centralized error handler that:
    - Uses self.notify for user notifications
    - Doesn't re-raise exceptions (keeps TUI responsive)
    - Returns None on error

    Works on both plain and async action methods.

    Example:
        @handle_action_errors("toggle flow")
        def action_toggle_flow(self):
            ...
    """
    def decorator(func):
        def handler_for(self):
            return _handle_errors(
                operation_name=operation_name,
                user_notification=lambda msg: self.notify(msg, severity="error", timeout=5),
                re_raise=False,
                fallback_value=None,
            )

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(self, *args, **kwargs):
                return await handler_for(self)(func)(self, *args, **kwargs)
            return async_wrapper

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            return handler_for(self)(func)(self, *args, **kwargs)
        return wrapper
    return decorator
