"""Order service layer (Use Cases).

Orchestrates order creation, pricing, stage transitions and look-ups.
Every write follows the same discipline: load the whole collection from
the store, change it in memory, save the whole collection back.

Business rules enforced:
- The total price is computed once, at creation, and stored.
- A new order starts at the first stage with a single history entry.
- Stage moves are one step at a time and clamped at both ends; a clamped
  move writes nothing and adds no history.
- History is kept newest first.
- Look-ups by customers are case-insensitive; admin actions match the
  code exactly.
"""

from __future__ import annotations

import secrets
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.utils import timezone

from modules.orders import pipeline
from modules.orders.constants import (
    FIRST_STAGE_INDEX,
    NOTE_CREATED,
    ORDER_CODE_MAX_RETRIES,
    ORDER_CODE_PREFIX,
    ORDER_CODE_SUFFIX_ALPHABET,
    ORDER_CODE_SUFFIX_LENGTH,
)
from modules.orders.dtos import HistoryEntry, OrderRecord
from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrdersReset,
    OrderStageChanged,
)
from modules.orders.exceptions import OrderCodeUnavailable, OrderNotFound
from modules.orders.pricing import build_breakdown, calculate_total
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, PriceBreakdown, PriceQuoteDTO
    from modules.orders.repositories.interfaces import IOrderStore
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def generate_order_code(now: Optional[datetime] = None) -> str:
    """Generate a shareable order code: ``CRyyMMdd-XXXX``.

    The date part uses the shop's local date; the suffix is four random
    base-36 characters.  Uniqueness is checked by the caller.
    """
    now = timezone.localtime(now or timezone.now())
    suffix = "".join(
        secrets.choice(ORDER_CODE_SUFFIX_ALPHABET)
        for _ in range(ORDER_CODE_SUFFIX_LENGTH)
    )
    return f"{ORDER_CODE_PREFIX}{now:%y%m%d}-{suffix}"


class OrderService:
    """Application service for laundry order use-cases.

    Receives the order store (and optionally an event bus) via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_store: IOrderStore,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._store = order_store
        self._bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> OrderRecord:
        """Create, price and persist a new order.

        Steps:
        1. Load the collection and pick a code not already in use.
        2. Compute the total from the form options.
        3. Seed the history with the creation entry at the first stage.
        4. Prepend the record (newest first) and save the collection.

        Raises:
            OrderCodeUnavailable: no free code after ``ORDER_CODE_MAX_RETRIES``.
        """
        now = timezone.now()
        records = self._store.load()
        code = self._unused_code(records, now)

        log = logger.bind(order_code=code)
        log.info("order.creation_started", weight_kg=dto.weight_kg)

        record = OrderRecord(
            code=code,
            created_at=now,
            customer_name=dto.customer_name,
            phone=dto.phone,
            address=dto.address,
            service_tier=dto.service_tier,
            weight_kg=dto.weight_kg,
            ironing_requested=dto.ironing_requested,
            stain_treatment_requested=dto.stain_treatment_requested,
            delivery_requested=dto.delivery_requested,
            scheduled_pickup_at=dto.scheduled_pickup_at,
            payment_method=dto.payment_method,
            note=dto.note,
            total_price=calculate_total(dto),
            current_stage_index=FIRST_STAGE_INDEX,
            history=[
                HistoryEntry(
                    timestamp=now,
                    stage_name=pipeline.stage_name(FIRST_STAGE_INDEX),
                    note=NOTE_CREATED,
                )
            ],
        )

        self._store.save([record, *records])

        log.info("order.created", total_price=record.total_price)
        self._bus.publish(OrderCreated(aggregate_id=code, total_price=record.total_price))
        return record

    def advance_stage(self, code: str, direction: int) -> Optional[OrderRecord]:
        """Move the order one stage forward (``+1``) or back (``-1``).

        Returns the order after the move, the unchanged order when the
        move was clamped at a boundary, or ``None`` when no order has
        this exact code.

        Raises:
            InvalidStageDirection: *direction* is not ``+1`` or ``-1``.
        """
        pipeline.validate_direction(direction)

        records = self._store.load()
        position = next((i for i, r in enumerate(records) if r.code == code), None)
        if position is None:
            logger.info("order.stage_change_skipped", order_code=code, reason="not_found")
            return None

        current = records[position]
        target = pipeline.next_stage_index(current.current_stage_index, direction)
        log = logger.bind(
            order_code=code,
            current_stage_index=current.current_stage_index,
            new_stage_index=target,
        )

        if target == current.current_stage_index:
            log.info("order.stage_change_skipped", reason="boundary")
            return current

        entry = HistoryEntry(
            timestamp=timezone.now(),
            stage_name=pipeline.stage_name(target),
            note=pipeline.transition_note(direction),
        )
        updated = current.model_copy(
            update={
                "current_stage_index": target,
                "history": [entry, *current.history],
            }
        )
        records[position] = updated
        self._store.save(records)

        log.info("order.stage_changed")
        self._bus.publish(
            OrderStageChanged(
                aggregate_id=code,
                old_stage_index=current.current_stage_index,
                new_stage_index=target,
            )
        )
        return updated

    def delete_order(self, code: str) -> bool:
        """Remove the order with this exact code.  Unknown codes are a no-op.

        Returns whether anything was removed.
        """
        records = self._store.load()
        remaining = [r for r in records if r.code != code]
        removed = len(records) - len(remaining)

        self._store.save(remaining)
        logger.info("order.deleted", order_code=code, removed=removed)

        if removed:
            self._bus.publish(OrderDeleted(aggregate_id=code))
        return bool(removed)

    def reset_all(self) -> None:
        """Clear the entire order collection."""
        self._store.clear()
        logger.warning("order.collection_reset")
        self._bus.publish(OrdersReset(aggregate_id=getattr(self._store, "key", "")))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def quote(self, dto: PriceQuoteDTO) -> PriceBreakdown:
        """Price the given options without creating anything."""
        return build_breakdown(dto)

    def find_by_code(self, code: str) -> Optional[OrderRecord]:
        """Case-insensitive look-up of a customer-entered code.

        Surrounding whitespace in the input is ignored.  Returns the first
        match or ``None``.
        """
        wanted = (code or "").strip().lower()
        if not wanted:
            return None
        return next((r for r in self._store.load() if r.code.lower() == wanted), None)

    def get_order(self, code: str) -> OrderRecord:
        """Like ``find_by_code`` but raises when nothing matches.

        Raises:
            OrderNotFound: no order carries this code.
        """
        record = self.find_by_code(code)
        if record is None:
            raise OrderNotFound(f"Order {code} not found.")
        return record

    def list_orders(self) -> List[OrderRecord]:
        """Return the whole collection, newest first."""
        return self._store.load()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _unused_code(records: List[OrderRecord], now: datetime) -> str:
        taken = {r.code.lower() for r in records}
        for _ in range(ORDER_CODE_MAX_RETRIES):
            candidate = generate_order_code(now)
            if candidate.lower() not in taken:
                return candidate
            logger.warning("order.code_collision", order_code=candidate)
        raise OrderCodeUnavailable(
            f"Failed to generate unique order code after "
            f"{ORDER_CODE_MAX_RETRIES} attempts"
        )
