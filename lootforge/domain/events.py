"""Domain event dispatch."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Iterable, Mapping

logger = logging.getLogger(__name__)

EventPayload = Mapping[str, Any]
EventListener = Callable[[EventPayload], Awaitable[None]]

DRAW_COMPLETED = "gacha.draw.completed"
TRADE_UP_COMPLETED = "tradeup.completed"
CATALOG_REFRESHED = "catalog.refreshed"
REVEAL_COMPLETED = "reveal.completed"
REVEAL_CANCELLED = "reveal.cancelled"


class EventBus:
    """Small async pub-sub for economy notifications."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    async def publish(self, event_name: str, payload: EventPayload) -> None:
        listeners = list(self._listeners.get(event_name, ()))
        logger.debug("Publishing %s to %d listeners", event_name, len(listeners))
        for listener in listeners:
            await listener(payload)

    def clear(self) -> None:
        self._listeners.clear()

    def listeners(self, event_name: str) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_name, ()))
