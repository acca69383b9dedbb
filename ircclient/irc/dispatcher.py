"""Event routing: identifier -> callback table with a default fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ..logs.logger import logger
from .models import Event, event_key

Handler = Callable[[Event], None]


class EventRouter:
    """Maps event identifiers to a single callback each.

    The table is filled during setup and only read while the session is
    serving. Dispatch is synchronous; a callback must not dispatch on the
    same router.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._default: Handler | None = None
        self._dispatching = False

    def register(self, event_id: str, callback: Handler) -> None:
        self._handlers[event_key(event_id)] = callback

    def register_many(self, event_ids: Iterable[str], callback: Handler) -> None:
        for event_id in event_ids:
            self.register(event_id, callback)

    def register_default(self, callback: Handler | None) -> None:
        self._default = callback

    def unregister(self, event_id: str) -> Handler | None:
        return self._handlers.pop(event_key(event_id), None)

    def handler_for(self, event_id: str) -> Handler | None:
        return self._handlers.get(event_key(event_id))

    @property
    def default_handler(self) -> Handler | None:
        return self._default

    def __contains__(self, event_id: str) -> bool:
        return event_key(event_id) in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def dispatch(self, event: Event) -> bool:
        """Invoke the callback for ``event.code``, else the default.

        Returns True when a callback ran. Exceptions from callbacks are
        logged and swallowed so one bad handler cannot end the receive loop.

        Raises:
            RuntimeError: If called from inside a callback of this router.
        """
        if self._dispatching:
            raise RuntimeError("nested dispatch on the same EventRouter")
        callback = self._handlers.get(event.code, self._default)
        if callback is None:
            logger.log_event("router", "unhandled", level=logging.DEBUG, code=event.code)
            return False
        self._dispatching = True
        try:
            callback(event)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "router",
                "handler_error",
                level=logging.ERROR,
                code=event.code,
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            self._dispatching = False
        return True
