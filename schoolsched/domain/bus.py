"""Synchronous in-process bus for schedule domain events."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """Routes each domain event to the handlers registered for its exact class.

    Delivery is synchronous and in registration order, so by the time
    ``publish`` returns every handler has run.
    """

    def __init__(self) -> None:
        self._routes: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> None:
        self._routes[event_type].append(handler)

    def route(self, table: Mapping[type, Handler]) -> None:
        """Subscribe one handler per event type from *table*."""
        for event_type, handler in table.items():
            self.subscribe(event_type, handler)

    def publish(self, event: Any) -> int:
        """Deliver *event* and return how many handlers received it."""
        handlers = list(self._routes.get(type(event), ()))
        if not handlers:
            logger.debug("no handlers for %s", type(event).__name__)
        for handler in handlers:
            handler(event)
        return len(handlers)
