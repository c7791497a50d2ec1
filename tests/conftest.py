import pytest

from django.core.cache import cache

from rest_framework.test import APIClient

from modules.orders.dtos import CreateOrderDTO
from modules.orders.repositories.django_repository import OrderStoreDjangoRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus

ADMIN_PIN = "1234"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def admin_client():
    """APIClient that presents the admin PIN on every request."""
    client = APIClient()
    client.credentials(HTTP_X_ADMIN_PIN=ADMIN_PIN)
    return client


@pytest.fixture()
def store():
    return OrderStoreDjangoRepository()


@pytest.fixture()
def bus():
    """Isolated event bus so tests can subscribe without side effects."""
    return InMemoryEventBus()


@pytest.fixture()
def service(store, bus):
    return OrderService(order_store=store, event_bus=bus)


@pytest.fixture()
def order_form():
    """A regular 3 kg order with no add-ons."""
    return CreateOrderDTO(
        customer_name="Ani Wijaya",
        phone="0812-3456-7890",
        address="Jl. Melati No. 3, Bandung",
        service_tier="regular",
        weight_kg=3,
        ironing_requested=False,
        stain_treatment_requested=False,
        delivery_requested=False,
        payment_method="cash",
    )


@pytest.fixture()
def order(service, order_form):
    """An order freshly created at the first stage."""
    return service.create_order(order_form)
