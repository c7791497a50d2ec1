"""Django ORM implementation of the order store.

Satisfies ``IOrderStore`` on top of ``StorageSlot``: the full collection is
serialized to one JSON array and kept in a single row.  Every read
transfers the entire collection and every write replaces it, so the last
writer wins.  No row locking is taken.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

import structlog
from django.conf import settings
from pydantic import ValidationError as PydanticValidationError

from modules.core.models import StorageSlot
from modules.orders.dtos import OrderRecord
from modules.orders.repositories.interfaces import IOrderStore

logger = structlog.get_logger(__name__)


class OrderStoreDjangoRepository(IOrderStore):
    """Concrete order store backed by a single ``StorageSlot`` row."""

    def __init__(self, key: Optional[str] = None) -> None:
        self._key = key or settings.ORDERS_STORAGE_KEY

    @property
    def key(self) -> str:
        return self._key

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def load(self) -> List[OrderRecord]:
        """Deserialize the stored collection.

        A missing slot, invalid JSON or a payload that is not a list yield
        ``[]``.  A single record that fails validation is skipped so the
        rest of the collection survives the next write.
        """
        raw = self.read_raw()
        if not raw:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("order_store.malformed_state", key=self._key, reason="invalid_json")
            return []
        if not isinstance(payload, list):
            logger.warning("order_store.malformed_state", key=self._key, reason="not_a_list")
            return []

        records: List[OrderRecord] = []
        for position, item in enumerate(payload):
            try:
                records.append(OrderRecord.model_validate(item))
            except PydanticValidationError as exc:
                logger.warning(
                    "order_store.malformed_record",
                    key=self._key,
                    position=position,
                    error_count=exc.error_count(),
                )
        return records

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save(self, records: Sequence[OrderRecord]) -> None:
        """Serialize *records* and overwrite the slot in one statement."""
        payload = serialize_records(records)
        StorageSlot.objects.update_or_create(
            key=self._key,
            defaults={"value": payload},
        )
        logger.info("order_store.saved", key=self._key, record_count=len(records))

    def clear(self) -> None:
        deleted, _ = StorageSlot.objects.filter(key=self._key).delete()
        logger.info("order_store.cleared", key=self._key, existed=bool(deleted))

    # ------------------------------------------------------------------
    # Raw access
    # ------------------------------------------------------------------

    def read_raw(self) -> Optional[str]:
        """Return the stored text exactly as persisted (``None`` if absent)."""
        return (
            StorageSlot.objects.filter(key=self._key)
            .values_list("value", flat=True)
            .first()
        )


def serialize_records(records: Sequence[OrderRecord]) -> str:
    return json.dumps(
        [record.to_storage() for record in records],
        ensure_ascii=False,
        separators=(",", ":"),
    )
