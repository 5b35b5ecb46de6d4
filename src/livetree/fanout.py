"""Delivery of canonical change events to attached listeners."""

import logging
import threading
from typing import Callable, List

from .models import ChangeEvent

logger = logging.getLogger(__name__)

Listener = Callable[[ChangeEvent], None]


class SubscriberFanout:
    """
    Registry of listeners plus synchronous dispatch.

    Events are delivered to every attached listener in attachment order,
    on the thread that calls dispatch(). Dispatch iterates over a copy of
    the listener list, so listeners may attach or detach (themselves or
    others) while an event is being delivered.
    """

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> bool:
        """
        Attach a listener.

        Args:
            listener: Callable receiving each ChangeEvent

        Returns:
            True if attached, False if it was already attached
        """
        with self._lock:
            if listener in self._listeners:
                return False
            self._listeners.append(listener)
            return True

    def unsubscribe(self, listener: Listener) -> bool:
        """
        Detach a listener.

        Args:
            listener: A previously attached callable

        Returns:
            True if detached, False if it was not attached
        """
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                return False
            return True

    def dispatch(self, event: ChangeEvent) -> None:
        """
        Deliver one event to every attached listener.

        A listener that raises is logged and skipped; the remaining
        listeners still receive the event.
        """
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    f"Listener {listener!r} failed on {event.change_type.value} {event.path}"
                )

    def clear(self) -> int:
        """
        Detach all listeners.

        Returns:
            Number of listeners detached
        """
        with self._lock:
            count = len(self._listeners)
            self._listeners.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
