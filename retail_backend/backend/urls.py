# backend/urls.py
"""
PROJECT URLS

/api/               index of the mounted modules (public)
/api/health/        database ping (public)
/api/schema/, /api/docs/   OpenAPI + Swagger UI
/api/auth/jwt/...   SimpleJWT create / refresh
/api/sales/         sale ledger (see sales.api.urls)

The admin mount point comes from ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connection
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

MODULES = {
    "sales": "/api/sales/sales/",
}


@extend_schema(
    responses=inline_serializer(
        name="ApiIndex",
        fields={
            "service": serializers.CharField(),
            "modules": serializers.DictField(child=serializers.CharField()),
        },
    )
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_index(request):
    return Response(
        {
            "service": f"{settings.COMPANY_NAME} retail API",
            "modules": {
                **MODULES,
                "jwt_create": "/api/auth/jwt/create/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
                "docs": "/api/docs/",
            },
        }
    )


@extend_schema(
    responses=inline_serializer(
        name="Health",
        fields={
            "status": serializers.CharField(),
            "db": serializers.CharField(),
            "error": serializers.CharField(required=False),
        },
    )
)
@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        return Response({"status": "degraded", "db": "down", "error": str(exc)}, status=503)
    return Response({"status": "ok", "db": "ok"})


admin_path = settings.ADMIN_PATH.strip("/") + "/"

api_urlpatterns = [
    path("", api_index, name="api-index"),
    path("health/", health, name="health"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("sales/", include("sales.api.urls")),
]

urlpatterns = [
    path(admin_path, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False)),
    path("api/", include(api_urlpatterns)),
]
