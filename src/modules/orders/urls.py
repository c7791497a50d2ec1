"""Order and pricing URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet, PricingViewSet

router = DefaultRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")
router.register("pricing", PricingViewSet, basename="pricing")

urlpatterns = router.urls
