from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command

from modules.orders.management.commands.seed_orders import SEED_CUSTOMERS

pytestmark = pytest.mark.unit


class TestSeedOrders:
    def test_seeds_demo_orders(self, service):
        out = StringIO()
        call_command("seed_orders", stdout=out)

        orders = service.list_orders()
        assert len(orders) == len(SEED_CUSTOMERS)
        assert {o.customer_name for o in orders} == {c[0] for c in SEED_CUSTOMERS}
        assert all(0 <= o.current_stage_index <= 5 for o in orders)
        assert all(len(o.history) == o.current_stage_index + 1 for o in orders)
        assert "Seed completed" in out.getvalue()

    def test_reset_replaces_existing_orders(self, service):
        call_command("seed_orders", stdout=StringIO())
        call_command("seed_orders", "--reset", stdout=StringIO())
        assert len(service.list_orders()) == len(SEED_CUSTOMERS)

    def test_without_reset_appends(self, service):
        call_command("seed_orders", stdout=StringIO())
        call_command("seed_orders", stdout=StringIO())
        assert len(service.list_orders()) == 2 * len(SEED_CUSTOMERS)
