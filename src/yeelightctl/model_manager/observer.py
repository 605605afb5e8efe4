"""Generic observer pattern manager.

This module provides a reusable ObserverManager class that handles thread-safe
registration, unregistration, and notification of observers. Device managers,
the flow editor and the stored-entity services all share it.
"""

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class ObserverManager[T: object]:
    """
    Generic observer list manager with thread-safe registration and notification.

    Type Parameters:
        T: The observer protocol type (e.g., DeviceObserver, FlowEditObserver)

    Thread Safety:
        All operations are thread-safe. The lock is released before calling
        observer callbacks to prevent potential deadlocks.

    Example:
        ```python
        class MyService:
            def __init__(self):
                self._observers = ObserverManager[MyObserver]()

            def register_observer(self, observer: MyObserver) -> None:
                self._observers.register(observer)

            def _notify_something_happened(self, data):
                self._observers.notify('on_something_happened', data)
        ```
    """

    def __init__(self, observer_type_name: str = "observer"):
        """
        Initialize the observer manager.

        Args:
            observer_type_name: Name of the observer type for logging (e.g., "device", "edit")
        """
        self._observers: list[T] = []
        self._lock = Lock()
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register an observer (idempotent - won't add duplicates)."""
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)
                logger.info(f"Registered {self._observer_type_name} observer: {observer}")
            else:
                logger.debug(f"{self._observer_type_name} observer already registered: {observer}")

    def unregister(self, observer: T) -> None:
        """Unregister an observer."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)
                logger.debug(f"Unregistered {self._observer_type_name} observer: {observer}")
            else:
                logger.warning(
                    f"Attempted to unregister unknown {self._observer_type_name} observer: {observer}"
                )

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Notify all observers by calling their callback method.

        The lock is acquired to copy the observer list, then released before
        calling callbacks. This prevents deadlocks if observers try to register/
        unregister during notification.

        Args:
            callback_name: Name of the callback method to call (e.g., 'on_device_event')
            *args: Positional arguments to pass to the callback
            **kwargs: Keyword arguments to pass to the callback

        Error Handling:
            Exceptions in observer callbacks are logged but don't affect other observers.
        """
        with self._lock:
            observers = list(self._observers)

        self._dispatch(observers, callback_name, *args, **kwargs)

    def _dispatch(self, observers: list[T], callback_name: str, *args: Any, **kwargs: Any) -> None:
        for observer in observers:
            callback = getattr(observer, callback_name, None)
            if callback is None:
                logger.error(
                    f"{self._observer_type_name} observer {observer} has no method '{callback_name}'"
                )
                continue
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Error notifying {self._observer_type_name} observer {observer} via {callback_name}: {e}",
                    exc_info=True,
                )

