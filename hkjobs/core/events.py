"""
Application-level event bus.

Replaces a process-global event namespace: each client owns one bus, and
subsystems (cache, UI glue, CLI) subscribe to the events they care about.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
import inspect
from typing import Any

from loggers import get_logger

logger = get_logger(__name__)

AUTH_LOGOUT = "auth:logout"

EventHandler = Callable[[Any], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> Unsubscribe:
        """Register `handler` for `event` and return a callable that removes it."""
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    async def emit(self, event: str, payload: Any = None) -> None:
        """
        Call every handler subscribed to `event`, in subscription order.

        A failing handler is logged and does not stop the others.
        """
        handlers = list(self._handlers.get(event, []))
        logger.debug("[EventBus] Emitting '%s' to %s handler(s)", event, len(handlers))
        for handler in handlers:
            try:
                result = handler(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "[EventBus] Handler %r failed for event '%s'", handler, event
                )
