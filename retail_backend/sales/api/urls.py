# sales/api/urls.py

"""
SALES API URLS (CANONICAL)

Mounted at /api/sales/ by backend/urls.py:

    GET  /api/sales/sales/                 list (filters + pagination)
    POST /api/sales/sales/                 create
    GET  /api/sales/sales/<uuid>/          retrieve
    GET  /api/sales/sales/<uuid>/receipt/  receipt payload
    POST /api/sales/sales/<uuid>/payments/ add payment
    POST /api/sales/sales/<uuid>/refunds/  create refund
    POST /api/sales/sales/<uuid>/cancel/   cancel unpaid sale
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.api.viewsets.sale import SaleViewSet

router = DefaultRouter()
router.register(r"sales", SaleViewSet, basename="sales")

urlpatterns = [
    path("", include(router.urls)),
]
