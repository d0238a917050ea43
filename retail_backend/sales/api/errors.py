# sales/api/errors.py

from rest_framework.response import Response

from sales.services.exceptions import SalesError, ValidationError


def error_response(*, code: str, message: str, http_status: int, details: dict | None = None):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message, "details": details or {}}},
        status=http_status,
    )


def sales_error_response(exc: SalesError):
    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=exc.http_status,
        details=exc.details,
    )


def validated(serializer_class, data) -> dict:
    """
    Run a command serializer; shape errors surface as VALIDATION_ERROR with
    the field errors in details.
    """
    ser = serializer_class(data=data)
    if not ser.is_valid():
        raise ValidationError("Invalid request payload", details=ser.errors)
    return ser.validated_data
