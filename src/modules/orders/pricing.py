"""Laundry price calculation.

Pure functions, no I/O and no Django dependency beyond the constants
module, so they are safe to call on every form change.

Rules:
1. ``base = base_per_kg * weight``; express orders multiply ``base`` by
   ``express_multiplier``.
2. Ironing adds ``ironing_per_kg * weight``; stain treatment and delivery
   each add a flat fee.
3. The total is ``base + add-ons`` in whole currency units.

Arithmetic is done in ``Decimal`` and only the final amount is rounded
(half up), which matters only for fractional weights.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional, Protocol

from modules.orders.constants import PRICES, ServiceTier
from modules.orders.dtos import PriceBreakdown, coerce_weight


class PriceSelection(Protocol):
    """The subset of an order form that drives its price."""

    weight_kg: float
    service_tier: str
    ironing_requested: bool
    stain_treatment_requested: bool
    delivery_requested: bool


def _to_units(amount: Decimal) -> int:
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _components(
    selection: PriceSelection, prices: Mapping[str, Decimal]
) -> dict[str, Optional[Decimal]]:
    weight = Decimal(str(coerce_weight(selection.weight_kg)))

    base = prices["base_per_kg"] * weight
    if selection.service_tier == ServiceTier.EXPRESS:
        base *= prices["express_multiplier"]

    return {
        "base": base,
        "ironing": (
            prices["ironing_per_kg"] * weight if selection.ironing_requested else None
        ),
        "stain": prices["stain_flat_fee"] if selection.stain_treatment_requested else None,
        "delivery": prices["delivery_flat_fee"] if selection.delivery_requested else None,
    }


def calculate_total(
    selection: PriceSelection, prices: Mapping[str, Decimal] = PRICES
) -> int:
    """Return the order total in whole IDR for *selection*."""
    parts = _components(selection, prices)
    total = sum((amount for amount in parts.values() if amount is not None), Decimal("0"))
    return _to_units(total)


def build_breakdown(
    selection: PriceSelection, prices: Mapping[str, Decimal] = PRICES
) -> PriceBreakdown:
    """Return a ``PriceBreakdown`` with one line per priced component.

    Lines for services that were not selected are ``None``.  ``total`` is
    always ``calculate_total(selection)``; individual lines are rounded
    for display on their own.
    """
    parts = _components(selection, prices)
    express = selection.service_tier == ServiceTier.EXPRESS
    return PriceBreakdown(
        weight_kg=coerce_weight(selection.weight_kg),
        service_tier=selection.service_tier,
        base_per_kg=_to_units(prices["base_per_kg"]),
        multiplier=prices["express_multiplier"] if express else Decimal("1"),
        base=_to_units(parts["base"]),
        ironing=None if parts["ironing"] is None else _to_units(parts["ironing"]),
        stain=None if parts["stain"] is None else _to_units(parts["stain"]),
        delivery=None if parts["delivery"] is None else _to_units(parts["delivery"]),
        total=calculate_total(selection, prices),
    )


def price_table(prices: Mapping[str, Decimal] = PRICES) -> dict[str, Any]:
    """Published rates, as shown on the home screen."""
    multiplier = prices["express_multiplier"]
    return {
        "base_per_kg": _to_units(prices["base_per_kg"]),
        "express_multiplier": multiplier,
        "express_surcharge_percent": _to_units((multiplier - 1) * 100),
        "ironing_per_kg": _to_units(prices["ironing_per_kg"]),
        "stain_flat_fee": _to_units(prices["stain_flat_fee"]),
        "delivery_flat_fee": _to_units(prices["delivery_flat_fee"]),
    }
