"""Order and pricing API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Public (no PIN): pricing, order creation and tracking by code.
Admin (``X-Admin-Pin``): listing, stage moves, deletion and reset.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, BasePermission
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import ViewSet

from modules.orders.dtos import CreateOrderDTO, PriceQuoteDTO
from modules.orders.exceptions import OrderCodeUnavailable, OrderNotFound
from modules.orders.pipeline import BACKWARD, FORWARD
from modules.orders.pricing import price_table
from modules.orders.repositories.django_repository import OrderStoreDjangoRepository
from modules.orders.serializers import (
    CreatedOrderSerializer,
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    PriceBreakdownSerializer,
    PriceQuoteSerializer,
    TrackedOrderSerializer,
)
from modules.orders.services import OrderService

ORDER_NOT_FOUND = {"detail": "Order not found."}

PUBLIC_ACTIONS = {"create", "track"}


def _build_service() -> OrderService:
    return OrderService(order_store=OrderStoreDjangoRepository())


class PricingViewSet(ViewSet):
    """Price table and quotes.  Never touches the order store."""

    permission_classes = [AllowAny]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/pricing/"""
        return Response(price_table())

    @action(detail=False, methods=["post"])
    def quote(self, request: Request) -> Response:
        """POST /api/v1/pricing/quote/

        Prices the submitted form options without creating an order.
        """
        serializer = PriceQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        breakdown = self._service.quote(PriceQuoteDTO(**serializer.validated_data))
        return Response(PriceBreakdownSerializer(breakdown).data)


class OrderViewSet(ViewSet):
    """ViewSet for laundry order operations.

    Uses ``OrderService`` with an injected order store (DIP).  Orders are
    addressed by their code, not by a database key.
    """

    lookup_field = "code"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _build_service()

    def get_permissions(self) -> list[BasePermission]:
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return super().get_permissions()

    def get_throttles(self) -> list[BaseThrottle]:
        """Pick the throttling scope for the current action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action == "track":
            throttle_scope = "order_tracking"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Returns the stored order together with a WhatsApp share link.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        dto = CreateOrderDTO(**create_serializer.validated_data)

        try:
            order = self._service.create_order(dto)
        except OrderCodeUnavailable as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        out = CreatedOrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Track (public)
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path=r"track/(?P<code>[^/]+)")
    def track(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/orders/track/{code}/

        Case-insensitive look-up for customers.
        """
        try:
            order = self._service.get_order(code or "")
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(TrackedOrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        The whole collection, newest first, re-read on every call.
        """
        orders = self._service.list_orders()
        return Response(
            {
                "count": len(orders),
                "results": OrderListSerializer(orders, many=True).data,
            }
        )

    def retrieve(self, request: Request, code: str | None = None) -> Response:
        """GET /api/v1/orders/{code}/"""
        try:
            order = self._service.get_order(code or "")
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def advance(self, request: Request, code: str | None = None) -> Response:
        """POST /api/v1/orders/{code}/advance/"""
        return self._move(code, FORWARD)

    @action(detail=True, methods=["post"])
    def retreat(self, request: Request, code: str | None = None) -> Response:
        """POST /api/v1/orders/{code}/retreat/"""
        return self._move(code, BACKWARD)

    def destroy(self, request: Request, code: str | None = None) -> Response:
        """DELETE /api/v1/orders/{code}/

        Deleting an unknown code is not an error.
        """
        self._service.delete_order(code or "")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def reset(self, request: Request) -> Response:
        """POST /api/v1/orders/reset/

        Clears every order.
        """
        self._service.reset_all()
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _move(self, code: str | None, direction: int) -> Response:
        order = self._service.advance_stage(code or "", direction)
        if order is None:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)
