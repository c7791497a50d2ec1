from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

TABLE_URL = "/api/v1/pricing/"
QUOTE_URL = "/api/v1/pricing/quote/"


class TestPricingAPI:
    def test_price_table_is_public(self, api_client):
        response = api_client.get(TABLE_URL)

        assert response.status_code == 200
        data = response.json()
        assert data["base_per_kg"] == 7000
        assert data["express_surcharge_percent"] == 50
        assert data["ironing_per_kg"] == 3000
        assert data["stain_flat_fee"] == 5000
        assert data["delivery_flat_fee"] == 10000

    def test_quote_regular(self, api_client):
        response = api_client.post(
            QUOTE_URL,
            {"weight_kg": 3, "service_tier": "regular", "delivery_requested": False},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["base"] == 21000
        assert data["ironing"] is None
        assert data["delivery"] is None
        assert data["total"] == 21000
        assert data["total_display"] == "Rp 21.000"

    def test_quote_express_with_add_ons(self, api_client):
        response = api_client.post(
            QUOTE_URL,
            {
                "weight_kg": 3,
                "service_tier": "express",
                "ironing_requested": True,
                "delivery_requested": True,
            },
            format="json",
        )
        data = response.json()
        assert data["base"] == 31500
        assert data["ironing"] == 9000
        assert data["delivery"] == 10000
        assert data["total"] == 50500

    def test_quote_with_garbage_weight(self, api_client):
        response = api_client.post(
            QUOTE_URL,
            {"weight_kg": "lots", "delivery_requested": False},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_quote_with_huge_weight(self, api_client):
        response = api_client.post(
            QUOTE_URL,
            {"weight_kg": 1e30, "delivery_requested": False},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_quote_creates_nothing(self, api_client, admin_client):
        api_client.post(QUOTE_URL, {"weight_kg": 3}, format="json")
        assert admin_client.get("/api/v1/orders/").json()["count"] == 0
