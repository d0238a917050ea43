# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (STAFF)

Purpose:
- Create sales (POS checkout), list + retrieve with filters.
- Receipt endpoint (read-only payload for invoice renderers).
- Append payments, create refunds, cancel unpaid sales.

Security (capabilities, see permissions.roles):
    list / retrieve / receipt  -> reports.view_pos
    create / payments          -> pos.sell
    refunds                    -> pos.refund
    cancel                     -> pos.void

Errors:
- Every service failure comes back in the canonical envelope
  {"error": {"code", "message", "details"}} with the status the
  exception carries.
======================================================
"""

from __future__ import annotations

import uuid

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_POS_REFUND,
    CAP_POS_SELL,
    CAP_POS_VOID,
    CAP_REPORTS_VIEW_POS,
    HasCapability,
)
from sales.api.errors import sales_error_response, validated
from sales.serializers import (
    PaymentCreateSerializer,
    SaleCancelSerializer,
    SalePaymentSerializer,
    SaleRefundCommandSerializer,
    SaleRefundReadSerializer,
    SaleCreateSerializer,
    SaleSerializer,
)
from sales.services.cancellation_service import cancel_sale
from sales.services.exceptions import SalesError
from sales.services.payment_service import add_payment
from sales.services.refund_service import create_refund
from sales.services.sale_service import (
    create_sale,
    get_sale_by_id,
    get_sale_receipt,
    list_sales,
    sale_queryset,
)


def _plain(value):
    """UUIDs from validated data -> str; nested lists/dicts walked."""
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class SaleViewSet(viewsets.GenericViewSet):
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated]

    ACTION_CAPABILITIES = {
        "list": CAP_REPORTS_VIEW_POS,
        "retrieve": CAP_REPORTS_VIEW_POS,
        "receipt": CAP_REPORTS_VIEW_POS,
        "create": CAP_POS_SELL,
        "payments": CAP_POS_SELL,
        "refunds": CAP_POS_REFUND,
        "cancel": CAP_POS_VOID,
    }

    # Capability hook used by HasCapability
    required_capability = None

    def get_permissions(self):
        self.required_capability = self.ACTION_CAPABILITIES.get(self.action)
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        return sale_queryset()

    # ======================================================
    # LIST / RETRIEVE
    # ======================================================

    @extend_schema(
        parameters=[
            OpenApiParameter("location", str),
            OpenApiParameter("customer", str),
            OpenApiParameter("sold_by", str),
            OpenApiParameter("status", str, many=True),
            OpenApiParameter("payment_status", str, many=True),
            OpenApiParameter("date_from", str, description="YYYY-MM-DD"),
            OpenApiParameter("date_to", str, description="YYYY-MM-DD"),
            OpenApiParameter("search", str, description="Sale number, customer name or phone"),
        ],
        responses={200: SaleSerializer(many=True)},
    )
    def list(self, request):
        try:
            qs = list_sales(filters=request.query_params)
        except SalesError as exc:
            return sales_error_response(exc)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(SaleSerializer(page, many=True).data)
        return Response(SaleSerializer(qs, many=True).data)

    @extend_schema(responses={200: SaleSerializer})
    def retrieve(self, request, pk=None):
        try:
            sale = get_sale_by_id(pk)
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(SaleSerializer(sale).data)

    @extend_schema(
        responses={200: serializers.DictField()},
        description="Read-only receipt payload (sale, items, payments, refunds, company block).",
    )
    @action(detail=True, methods=["get"], url_path="receipt")
    def receipt(self, request, pk=None):
        try:
            payload = get_sale_receipt(pk)
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(payload, status=status.HTTP_200_OK)

    # ======================================================
    # CREATE (POS CHECKOUT)
    # ======================================================

    @extend_schema(request=SaleCreateSerializer, responses={201: SaleSerializer})
    def create(self, request):
        try:
            data = _plain(dict(validated(SaleCreateSerializer, request.data)))
            sale = create_sale(sold_by=request.user, **data)
            sale = get_sale_by_id(sale.id)
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)

    # ======================================================
    # PAYMENTS / REFUNDS / CANCEL
    # ======================================================

    @extend_schema(request=PaymentCreateSerializer, responses={201: SalePaymentSerializer})
    @action(detail=True, methods=["post"], url_path="payments")
    def payments(self, request, pk=None):
        try:
            data = validated(PaymentCreateSerializer, request.data)
            payment = add_payment(
                sale_id=pk,
                amount=data["amount"],
                method=data["method"],
                reference=data.get("reference", ""),
                notes=data.get("notes", ""),
                received_by=request.user,
            )
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(SalePaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SaleRefundCommandSerializer, responses={201: SaleRefundReadSerializer})
    @action(detail=True, methods=["post"], url_path="refunds")
    def refunds(self, request, pk=None):
        try:
            data = validated(SaleRefundCommandSerializer, request.data)
            refund = create_refund(
                sale_id=pk,
                amount=data["amount"],
                reason=data["reason"],
                method=data["method"],
                processed_by=request.user,
                items=_plain(data.get("items") or []),
            )
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(SaleRefundReadSerializer(refund).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SaleCancelSerializer, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        try:
            data = validated(SaleCancelSerializer, request.data)
            cancel_sale(sale_id=pk, actor=request.user, reason=data.get("reason", ""))
            sale = get_sale_by_id(pk)
        except SalesError as exc:
            return sales_error_response(exc)
        return Response(SaleSerializer(sale).data, status=status.HTTP_200_OK)
