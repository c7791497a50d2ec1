"""Base abstract model and key/value storage for the laundry service.

Provides:
- ``BaseModel``: UUIDv7 primary key + created_at / updated_at timestamps.
- ``StorageSlot``: one named slot holding an opaque serialized payload.

A slot is read and written as a whole.  The payload is kept as raw text
(not ``JSONField``) so that a corrupted value can still be loaded and
recovered by the caller instead of failing inside the ORM.
"""

from __future__ import annotations

import uuid6
from django.db import models

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Key/value storage
# ---------------------------------------------------------------------------


class StorageSlot(BaseModel):
    """A single named storage slot (``key`` -> serialized ``value``)."""

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default="")

    class Meta:
        db_table = "storage_slots"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key} ({len(self.value)} bytes)"
