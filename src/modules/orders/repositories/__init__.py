"""Order repositories package."""

from modules.orders.repositories.django_repository import OrderStoreDjangoRepository
from modules.orders.repositories.interfaces import IOrderStore

__all__ = ["IOrderStore", "OrderStoreDjangoRepository"]
