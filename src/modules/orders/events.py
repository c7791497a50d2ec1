"""Domain events for the Orders bounded context.

``aggregate_id`` is the order code.  ``OrdersReset`` concerns the whole
collection and carries the storage key instead.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    total_price: int = 0


@dataclass(frozen=True)
class OrderStageChanged(DomainEvent):
    """Raised when an order moves to another pipeline stage."""

    old_stage_index: int = 0
    new_stage_index: int = 0


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is removed from the store."""


@dataclass(frozen=True)
class OrdersReset(DomainEvent):
    """Raised when the whole order collection is cleared."""
