"""Order store interface.

Extends ``ICollectionStore[OrderRecord]``: the whole order collection,
newest first, lives under a single storage key.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Sequence

from modules.core.repositories.interfaces import ICollectionStore

if TYPE_CHECKING:
    from modules.orders.dtos import OrderRecord


class IOrderStore(ICollectionStore["OrderRecord"]):
    """Store contract for the order collection.

    ``load`` never raises: unreadable state is reported as an empty
    collection.  ``save`` replaces the collection in a single write.
    """

    @abstractmethod
    def load(self) -> List[OrderRecord]:
        """Return every stored order, newest first."""

    @abstractmethod
    def save(self, records: Sequence[OrderRecord]) -> None:
        """Replace the stored collection with *records*."""

    @abstractmethod
    def clear(self) -> None:
        """Drop the stored collection."""
