"""In-memory event bus implementation.

Stands in for the admin screen's one-second re-read timer: every write to
the order collection publishes an event and interested parties subscribe
instead of polling the store.
"""

from __future__ import annotations

from typing import Dict, List, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers subscribed to a base class also receive its subclasses, so a
    subscriber can listen to ``DomainEvent`` to see everything.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        for event_class in type(event).__mro__:
            for handler in list(self._handlers.get(event_class, [])):
                handler.handle(event)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
