"""Typed publish/subscribe channel between the snippet manager and its listeners."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, List, Mapping, Optional, Type

from playground.models import Snippet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Base event type."""


@dataclass(frozen=True)
class StorageEvent(Event):
    """Storage changed. `snippet` is None after a bulk clear."""

    snippet: Optional[Snippet] = None

    @property
    def is_clear(self) -> bool:
        return self.snippet is None


@dataclass(frozen=True)
class DialogEvent(Event):
    title: str
    message: str
    actions: Mapping[str, Callable[[str], Any]] = field(default_factory=dict)


Handler = Callable[[Any], None]


class EventChannel:
    """Synchronous pub/sub keyed by event class.

    Handlers run in registration order. A failing handler is logged and the
    remaining handlers still receive the event.
    """

    def __init__(self) -> None:
        self._subscribers: DefaultDict[Type[Event], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[Event], handler: Handler) -> Callable[[], None]:
        if not (isinstance(event_type, type) and issubclass(event_type, Event)):
            raise TypeError("event_type must be an Event subclass")
        self._subscribers[event_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: Event) -> int:
        delivered = 0
        for handler in list(self._subscribers.get(type(event), [])):
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.exception("Listener %r failed on %s", handler, type(event).__name__)
        return delivered

    def subscriber_count(self, event_type: Optional[Type[Event]] = None) -> int:
        if event_type is not None:
            return len(self._subscribers.get(event_type, []))
        return sum(len(handlers) for handlers in self._subscribers.values())
