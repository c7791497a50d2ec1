"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

``weight_kg`` is deliberately a free-form field: whatever the form sends
is coerced to a number (or zero) by the DTO instead of being rejected.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders import pipeline
from modules.orders.constants import PaymentMethod, ServiceTier
from modules.orders.sharing import build_share_link, format_currency

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PriceQuoteSerializer(serializers.Serializer):
    """Validates the price-driving subset of the order form."""

    weight_kg = serializers.JSONField(required=False, default=0, allow_null=True)
    service_tier = serializers.ChoiceField(
        choices=ServiceTier.choices, required=False, default=ServiceTier.REGULAR
    )
    ironing_requested = serializers.BooleanField(required=False, default=False)
    stain_treatment_requested = serializers.BooleanField(required=False, default=False)
    delivery_requested = serializers.BooleanField(required=False, default=True)


class CreateOrderSerializer(PriceQuoteSerializer):
    """Validates the order creation request payload."""

    customer_name = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=200
    )
    phone = serializers.CharField(
        required=False, default="", allow_blank=True, max_length=32
    )
    address = serializers.CharField(required=False, default="", allow_blank=True)
    scheduled_pickup_at = serializers.DateTimeField(required=False)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, required=False, default=PaymentMethod.CASH
    )
    note = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PriceBreakdownSerializer(serializers.Serializer):
    """Read serializer for a price quote."""

    weight_kg = serializers.FloatField()
    service_tier = serializers.CharField()
    base_per_kg = serializers.IntegerField()
    multiplier = serializers.DecimalField(max_digits=4, decimal_places=2)
    base = serializers.IntegerField()
    ironing = serializers.IntegerField(allow_null=True)
    stain = serializers.IntegerField(allow_null=True)
    delivery = serializers.IntegerField(allow_null=True)
    total = serializers.IntegerField()
    total_display = serializers.SerializerMethodField()

    def get_total_display(self, obj) -> str:
        return format_currency(obj.total)


class HistoryEntrySerializer(serializers.Serializer):
    """Read serializer for one stage history entry."""

    timestamp = serializers.DateTimeField()
    stage_name = serializers.CharField()
    note = serializers.CharField()


class OrderSerializer(serializers.Serializer):
    """Read serializer for an order record with its history and progress."""

    code = serializers.CharField()
    created_at = serializers.DateTimeField()
    customer_name = serializers.CharField()
    phone = serializers.CharField()
    address = serializers.CharField()
    service_tier = serializers.CharField()
    weight_kg = serializers.FloatField()
    ironing_requested = serializers.BooleanField()
    stain_treatment_requested = serializers.BooleanField()
    delivery_requested = serializers.BooleanField()
    scheduled_pickup_at = serializers.DateTimeField()
    payment_method = serializers.CharField()
    note = serializers.CharField()
    total_price = serializers.IntegerField()
    total_display = serializers.SerializerMethodField()
    current_stage_index = serializers.IntegerField()
    current_stage = serializers.SerializerMethodField()
    is_finished = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()
    history = HistoryEntrySerializer(many=True)

    def get_total_display(self, obj) -> str:
        return format_currency(obj.total_price)

    def get_current_stage(self, obj) -> str:
        return pipeline.stage_name(obj.current_stage_index)

    def get_is_finished(self, obj) -> bool:
        return pipeline.is_final(obj.current_stage_index)

    def get_progress(self, obj) -> list:
        return pipeline.progress(obj.current_stage_index)


class CreatedOrderSerializer(OrderSerializer):
    """Order as returned right after creation, with the share link."""

    share_link = serializers.SerializerMethodField()

    def get_share_link(self, obj) -> str:
        return build_share_link(obj)


class OrderListSerializer(serializers.Serializer):
    """Lightweight serializer for the admin table (no history)."""

    code = serializers.CharField()
    customer_name = serializers.CharField()
    service_tier = serializers.CharField()
    weight_kg = serializers.FloatField()
    total_price = serializers.IntegerField()
    total_display = serializers.SerializerMethodField()
    current_stage_index = serializers.IntegerField()
    current_stage = serializers.SerializerMethodField()
    created_at = serializers.DateTimeField()

    def get_total_display(self, obj) -> str:
        return format_currency(obj.total_price)

    def get_current_stage(self, obj) -> str:
        return pipeline.stage_name(obj.current_stage_index)


class TrackedOrderSerializer(serializers.Serializer):
    """What a customer sees when tracking an order by code."""

    code = serializers.CharField()
    customer_name = serializers.CharField()
    current_stage_index = serializers.IntegerField()
    current_stage = serializers.SerializerMethodField()
    is_finished = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()
    history = HistoryEntrySerializer(many=True)

    def get_current_stage(self, obj) -> str:
        return pipeline.stage_name(obj.current_stage_index)

    def get_is_finished(self, obj) -> bool:
        return pipeline.is_final(obj.current_stage_index)

    def get_progress(self, obj) -> list:
        return pipeline.progress(obj.current_stage_index)
