"""Generic collection store interface (Dependency Inversion Principle).

Provides ``ICollectionStore[T]``, the base abstract class for stores that
persist a whole ordered collection under one named key.  Service-layer
code depends on this abstraction, never on the Django ORM directly.

There is no partial update: callers read the full collection, mutate it
in memory and write the full collection back (last writer wins).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


class ICollectionStore(ABC, Generic[T]):
    """Base whole-collection store contract.

    Type parameter ``T`` represents the record type kept in the
    collection (e.g. ``OrderRecord``).
    """

    @abstractmethod
    def load(self) -> List[T]:
        """Return the stored collection, or an empty list if unreadable."""

    @abstractmethod
    def save(self, records: Sequence[T]) -> None:
        """Overwrite the stored collection with *records* in one write."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored collection entirely."""
