"""Order DTOs and the persisted order record.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers), the
Service layer and the order store.  All models are immutable
(``frozen=True``); state changes produce a new record via ``model_copy``.

- ``PriceQuoteDTO``: the fields that drive the price of an order.
- ``CreateOrderDTO``: input for order creation (the full order form).
- ``PriceBreakdown``: output of a price quote, one line per component.
- ``HistoryEntry``: one stage transition in an order's history.
- ``OrderRecord``: the persisted order, serialized with camelCase keys.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from modules.orders.constants import (
    LAST_STAGE_INDEX,
    MAX_WEIGHT_KG,
    PaymentMethod,
    ServiceTier,
)


def coerce_weight(value: Any) -> float:
    """Turn raw form input into a usable weight.

    Non-numeric, negative, NaN, infinite and absurdly large values
    (above ``MAX_WEIGHT_KG``) all become ``0.0``
    instead of raising: the price simply reads zero until the input makes
    sense.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(weight) or not 0 <= weight <= MAX_WEIGHT_KG:
        return 0.0
    return weight


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class PriceQuoteDTO(BaseModel):
    """Immutable DTO with the order options that affect the price."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    weight_kg: float = 0.0
    service_tier: ServiceTier = ServiceTier.REGULAR
    ironing_requested: bool = False
    stain_treatment_requested: bool = False
    delivery_requested: bool = True

    @field_validator("weight_kg", mode="before")
    @classmethod
    def weight_is_coerced(cls, v: Any) -> float:
        return coerce_weight(v)


class CreateOrderDTO(PriceQuoteDTO):
    """Immutable DTO for order creation requests (the whole order form).

    Customer fields are free text and may be blank, as in the shop form.
    ``scheduled_pickup_at`` defaults to the moment the form was built.
    """

    customer_name: str = ""
    phone: str = ""
    address: str = ""
    scheduled_pickup_at: datetime = Field(default_factory=_now)
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: str = ""

    @field_validator("customer_name", "phone", "address", "note", mode="before")
    @classmethod
    def strings_are_stripped(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class PriceBreakdown(BaseModel):
    """Immutable price quote.

    ``ironing``, ``stain`` and ``delivery`` are ``None`` when the service
    was not selected.
    """

    model_config = ConfigDict(frozen=True)

    weight_kg: float
    service_tier: str
    base_per_kg: int
    multiplier: Decimal
    base: int
    ironing: Optional[int] = None
    stain: Optional[int] = None
    delivery: Optional[int] = None
    total: int


# ---------------------------------------------------------------------------
# Persisted record
# ---------------------------------------------------------------------------


class _StoredModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class HistoryEntry(_StoredModel):
    """One entry of an order's stage history."""

    timestamp: datetime
    stage_name: str
    note: str = ""


class OrderRecord(_StoredModel):
    """An order as kept in the order store.

    ``history`` is ordered newest first and is never empty: it is seeded
    with the creation event.  ``total_price`` is computed once at creation
    and never recomputed.
    """

    code: str
    created_at: datetime
    customer_name: str = ""
    phone: str = ""
    address: str = ""
    service_tier: ServiceTier = ServiceTier.REGULAR
    weight_kg: float = 0.0
    ironing_requested: bool = False
    stain_treatment_requested: bool = False
    delivery_requested: bool = False
    scheduled_pickup_at: datetime
    payment_method: PaymentMethod = PaymentMethod.CASH
    note: str = ""
    total_price: int = Field(ge=0)
    current_stage_index: int = Field(default=0, ge=0, le=LAST_STAGE_INDEX)
    history: List[HistoryEntry] = Field(min_length=1)

    def to_storage(self) -> dict[str, Any]:
        """JSON-ready dict with the persisted (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)
