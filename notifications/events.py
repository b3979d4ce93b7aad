"""
Event Dispatcher — Routes bot events to registered handlers.
Handlers may be plain functions or coroutines; a failing handler is logged
and never reaches the sender.
"""

from __future__ import annotations
import inspect
from typing import Any, Callable, Dict, List, Type
import logging

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]


class EventDispatcher:

    def __init__(self):
        self._handlers: Dict[Type, List[EventHandler]] = {}

    def on(self, event_type: Type, handler: EventHandler):
        """Register a handler for one event class."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    async def send(self, event: Any):
        for handler in self._handlers.get(type(event), []):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    f"[EVENTS] Handler error for {type(event).__name__}: {e}",
                    exc_info=True,
                )
