"""Change notification for the state containers."""
from typing import Any, Awaitable, Callable, List

from resource_tracker.logging_config import get_logger

logger = get_logger(__name__)

Listener = Callable[..., Awaitable[None]]


class Subscribers:
    """Ordered list of async listeners notified on state changes."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def add(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def notify(self, *args: Any) -> None:
        for listener in list(self._listeners):
            try:
                await listener(*args)
            except Exception:
                logger.exception("state_listener_failed", listener=getattr(listener, "__name__", repr(listener)))

    def __len__(self) -> int:
        return len(self._listeners)
