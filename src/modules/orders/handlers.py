"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrdersReset,
    OrderStageChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_code=event.aggregate_id,
            total_price=event.total_price,
        )


class OrderStageChangedHandler(IEventHandler[OrderStageChanged]):
    def handle(self, event: OrderStageChanged) -> None:
        logger.info(
            "order.event.stage_changed",
            order_code=event.aggregate_id,
            old_stage_index=event.old_stage_index,
            new_stage_index=event.new_stage_index,
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info("order.event.deleted", order_code=event.aggregate_id)


class OrdersResetHandler(IEventHandler[OrdersReset]):
    def handle(self, event: OrdersReset) -> None:
        logger.warning("order.event.reset", storage_key=event.aggregate_id)


order_created_handler = OrderCreatedHandler()
order_stage_changed_handler = OrderStageChangedHandler()
order_deleted_handler = OrderDeletedHandler()
orders_reset_handler = OrdersResetHandler()
