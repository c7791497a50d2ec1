"""Unit tests for ``OrderService``.

Covers:
- Order creation (code format, pricing, initial stage and history).
- Code collisions and the retry limit.
- Stage moves, boundaries and history ordering.
- Look-ups, deletion and reset.
- Domain events published on every write.
"""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from modules.core.models import StorageSlot
from modules.orders.constants import LAST_STAGE_INDEX, ORDER_CODE_MAX_RETRIES
from modules.orders.dtos import CreateOrderDTO, PriceQuoteDTO
from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrdersReset,
    OrderStageChanged,
)
from modules.orders.exceptions import (
    InvalidStageDirection,
    OrderCodeUnavailable,
    OrderNotFound,
)
from modules.orders.pipeline import BACKWARD, FORWARD
from modules.orders.services import generate_order_code
from shared.domain.events import DomainEvent

pytestmark = pytest.mark.unit

CODE_RE = re.compile(r"^CR\d{6}-[0-9A-Z]{4}$")


class RecordingHandler:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)

    def of_type(self, event_class):
        return [e for e in self.events if isinstance(e, event_class)]


@pytest.fixture()
def recorder(bus):
    handler = RecordingHandler()
    bus.subscribe(DomainEvent, handler)
    return handler


# ---------------------------------------------------------------------------
# Code generation
# ---------------------------------------------------------------------------


class TestGenerateOrderCode:
    def test_format(self):
        assert CODE_RE.match(generate_order_code())

    def test_date_part_uses_local_date(self, settings):
        settings.TIME_ZONE = "Asia/Jakarta"
        # 20:00 UTC on the 16th is already the 17th in Jakarta (UTC+7)
        code = generate_order_code(datetime(2025, 8, 16, 20, 0, tzinfo=timezone.utc))
        assert code.startswith("CR250817-")


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


class TestCreateOrder:
    def test_new_order_starts_at_first_stage(self, service, order_form):
        order = service.create_order(order_form)
        assert CODE_RE.match(order.code)
        assert order.current_stage_index == 0
        assert len(order.history) == 1
        assert order.history[0].stage_name == "Diterima"
        assert order.history[0].note == "Order dibuat"

    def test_total_is_computed_at_creation(self, service, order_form):
        assert service.create_order(order_form).total_price == 21000

    def test_express_with_add_ons(self, service, order_form):
        dto = order_form.model_copy(
            update={
                "service_tier": "express",
                "ironing_requested": True,
                "delivery_requested": True,
            }
        )
        assert service.create_order(dto).total_price == 50500

    def test_form_fields_are_copied(self, service, order_form):
        order = service.create_order(order_form)
        assert order.customer_name == "Ani Wijaya"
        assert order.phone == "0812-3456-7890"
        assert order.service_tier == "regular"
        assert order.payment_method == "cash"
        assert order.scheduled_pickup_at == order_form.scheduled_pickup_at

    def test_newest_order_is_first(self, service, order_form):
        first = service.create_order(order_form)
        second = service.create_order(order_form)
        assert [o.code for o in service.list_orders()] == [second.code, first.code]

    def test_order_is_persisted(self, service, store, order_form):
        order = service.create_order(order_form)
        assert store.load() == [order]

    def test_blank_form_still_creates_an_order(self, service):
        order = service.create_order(CreateOrderDTO(weight_kg="", delivery_requested=False))
        assert order.customer_name == ""
        assert order.total_price == 0

    def test_one_bad_record_does_not_wipe_the_others(self, service, store, order_form):
        first = service.create_order(order_form)
        second = service.create_order(order_form)
        third = service.create_order(order_form)
        payload = json.loads(store.read_raw())
        payload[1]["currentStageIndex"] = 9
        StorageSlot.objects.filter(key=store.key).update(value=json.dumps(payload))

        newest = service.create_order(order_form)

        codes = [o.code for o in service.list_orders()]
        assert codes == [newest.code, third.code, first.code]
        assert second.code not in codes

    def test_collision_is_retried(self, service, order_form):
        existing = service.create_order(order_form)
        with patch(
            "modules.orders.services.generate_order_code",
            side_effect=[existing.code, "CR250817-ZZZZ"],
        ):
            order = service.create_order(order_form)
        assert order.code == "CR250817-ZZZZ"

    def test_collision_check_ignores_case(self, service, order_form):
        existing = service.create_order(order_form)
        with patch(
            "modules.orders.services.generate_order_code",
            side_effect=[existing.code.lower(), "CR250817-ZZZZ"],
        ):
            order = service.create_order(order_form)
        assert order.code == "CR250817-ZZZZ"

    def test_gives_up_after_max_retries(self, service, order_form):
        existing = service.create_order(order_form)
        with patch(
            "modules.orders.services.generate_order_code",
            return_value=existing.code,
        ) as generator:
            with pytest.raises(OrderCodeUnavailable):
                service.create_order(order_form)
        assert generator.call_count == ORDER_CODE_MAX_RETRIES
        assert len(service.list_orders()) == 1

    def test_publishes_order_created(self, service, order_form, recorder):
        order = service.create_order(order_form)
        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert isinstance(event, OrderCreated)
        assert event.aggregate_id == order.code
        assert event.total_price == 21000
        assert event.event_name == "OrderCreated"


# ---------------------------------------------------------------------------
# Stage moves
# ---------------------------------------------------------------------------


class TestAdvanceStage:
    def test_advance_one_step(self, service, order):
        moved = service.advance_stage(order.code, FORWARD)
        assert moved.current_stage_index == 1
        assert moved.history[0].stage_name == "Dicuci"
        assert moved.history[0].note == "Maju"

    def test_move_is_persisted(self, service, order):
        service.advance_stage(order.code, FORWARD)
        assert service.find_by_code(order.code).current_stage_index == 1

    def test_five_advances_reach_the_last_stage(self, service, order):
        for _ in range(5):
            service.advance_stage(order.code, FORWARD)
        finished = service.find_by_code(order.code)
        assert finished.current_stage_index == LAST_STAGE_INDEX
        assert len(finished.history) == 6

    def test_advance_at_last_stage_changes_nothing(self, service, order, store):
        for _ in range(5):
            service.advance_stage(order.code, FORWARD)
        before = store.read_raw()

        result = service.advance_stage(order.code, FORWARD)

        assert result.current_stage_index == LAST_STAGE_INDEX
        assert len(result.history) == 6
        assert store.read_raw() == before

    def test_revert_at_first_stage_changes_nothing(self, service, order):
        result = service.advance_stage(order.code, BACKWARD)
        assert result.current_stage_index == 0
        assert len(result.history) == 1

    def test_revert_one_step(self, service, order):
        service.advance_stage(order.code, FORWARD)
        service.advance_stage(order.code, FORWARD)
        reverted = service.advance_stage(order.code, BACKWARD)
        assert reverted.current_stage_index == 1
        assert reverted.history[0].stage_name == "Dicuci"
        assert reverted.history[0].note == "Mundur"

    def test_history_is_newest_first(self, service, order):
        for _ in range(3):
            service.advance_stage(order.code, FORWARD)
        history = service.find_by_code(order.code).history
        assert [h.stage_name for h in history] == [
            "Disetrika",
            "Pengeringan",
            "Dicuci",
            "Diterima",
        ]
        timestamps = [h.timestamp for h in history]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_history_grows_by_one_per_real_move(self, service, order):
        moves = [FORWARD, FORWARD, BACKWARD, BACKWARD, BACKWARD, FORWARD]
        for direction in moves:
            service.advance_stage(order.code, direction)
        # the third BACKWARD was clamped at stage 0
        assert len(service.find_by_code(order.code).history) == 1 + 5

    def test_other_orders_are_untouched(self, service, order_form):
        first = service.create_order(order_form)
        second = service.create_order(order_form)
        service.advance_stage(first.code, FORWARD)
        assert service.find_by_code(second.code) == second

    def test_unknown_code_returns_none(self, service, order):
        assert service.advance_stage("CR000000-NOPE", FORWARD) is None

    def test_admin_moves_match_code_exactly(self, service, order):
        assert service.advance_stage(order.code.lower(), FORWARD) is None

    @pytest.mark.parametrize("direction", [0, 2, -5])
    def test_invalid_direction_is_rejected(self, service, order, direction):
        with pytest.raises(InvalidStageDirection):
            service.advance_stage(order.code, direction)

    def test_publishes_stage_changed(self, service, order, recorder):
        service.advance_stage(order.code, FORWARD)
        (event,) = recorder.of_type(OrderStageChanged)
        assert isinstance(event, OrderStageChanged)
        assert event.aggregate_id == order.code
        assert (event.old_stage_index, event.new_stage_index) == (0, 1)

    def test_clamped_move_publishes_nothing(self, service, order, recorder):
        service.advance_stage(order.code, BACKWARD)
        assert recorder.of_type(OrderStageChanged) == []


# ---------------------------------------------------------------------------
# Look-ups
# ---------------------------------------------------------------------------


class TestFindByCode:
    def test_exact_code(self, service, order):
        assert service.find_by_code(order.code) == order

    def test_case_insensitive(self, service, order):
        assert service.find_by_code(order.code.lower()) == order

    def test_surrounding_whitespace_is_ignored(self, service, order):
        assert service.find_by_code(f"  {order.code.lower()} ") == order

    @pytest.mark.parametrize("code", ["", "   ", None, "CR000000-NOPE"])
    def test_no_match(self, service, order, code):
        assert service.find_by_code(code) is None

    def test_empty_store(self, service):
        assert service.find_by_code("CR250817-AB12") is None

    def test_get_order_raises_when_missing(self, service):
        with pytest.raises(OrderNotFound):
            service.get_order("CR000000-NOPE")

    def test_quote_does_not_touch_the_store(self, service, store):
        breakdown = service.quote(PriceQuoteDTO(weight_kg=3, delivery_requested=False))
        assert breakdown.total == 21000
        assert store.read_raw() is None


# ---------------------------------------------------------------------------
# Delete / reset
# ---------------------------------------------------------------------------


class TestDeleteOrder:
    def test_delete_removes_only_that_order(self, service, order_form):
        first = service.create_order(order_form)
        second = service.create_order(order_form)
        assert service.delete_order(first.code) is True
        assert [o.code for o in service.list_orders()] == [second.code]

    def test_delete_unknown_code_is_noop(self, service, order):
        assert service.delete_order("CR000000-NOPE") is False
        assert service.list_orders() == [order]

    def test_deleted_code_is_no_longer_found(self, service, order):
        service.delete_order(order.code)
        assert service.find_by_code(order.code) is None

    def test_publishes_deleted_only_when_removed(self, service, order, recorder):
        service.delete_order("CR000000-NOPE")
        assert recorder.of_type(OrderDeleted) == []
        service.delete_order(order.code)
        (event,) = recorder.of_type(OrderDeleted)
        assert isinstance(event, OrderDeleted)
        assert event.aggregate_id == order.code


class TestResetAll:
    def test_reset_clears_every_order(self, service, store, order_form):
        service.create_order(order_form)
        service.create_order(order_form)
        service.reset_all()
        assert service.list_orders() == []
        assert store.read_raw() is None

    def test_reset_on_empty_store(self, service):
        service.reset_all()
        assert service.list_orders() == []

    def test_publishes_reset(self, service, store, recorder):
        service.reset_all()
        (event,) = recorder.events
        assert isinstance(event, OrdersReset)
        assert event.aggregate_id == store.key
