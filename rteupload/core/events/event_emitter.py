"""Notification channels for upload observers."""
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional

from ..logging import get_logger

logger = get_logger(__name__)


class EventEmitter:
    """
    Named notification channels (progress, success, error).

    A listener that raises is logged and skipped; the remaining listeners
    still run and the emitter never raises into the upload flow.
    """

    def __init__(self):
        self._listeners: DefaultDict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Optional[Callable]) -> 'EventEmitter':
        """Subscribe callback to event; None is ignored. Returns self."""
        if callback is not None:
            self._listeners[event].append(callback)
        return self

    def emit(self, event: str, *args, **kwargs) -> int:
        """
        Deliver a notification to every listener of event.

        Returns:
            Number of listeners that completed without raising
        """
        delivered = 0
        for callback in tuple(self._listeners.get(event, ())):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Listener for '{event}' raised {type(e).__name__}: {e}")
                continue
            delivered += 1
        return delivered

    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Unsubscribe one callback, or every listener of event when callback is None."""
        if callback is None:
            self._listeners.pop(event, None)
        elif event in self._listeners:
            self._listeners[event] = [cb for cb in self._listeners[event] if cb is not callback]
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))
