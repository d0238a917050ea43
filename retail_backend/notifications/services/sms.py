# notifications/services/sms.py
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger(__name__)

_PHONE_NOISE = re.compile(r"[\s\-()]")


class SmsTransportError(RuntimeError):
    pass


@dataclass(frozen=True)
class SmsResult:
    success: bool
    message: str
    message_id: str = ""


def _gateway_cfg() -> dict:
    cfg = getattr(settings, "SMS_GATEWAY", {}) or {}
    return cfg if isinstance(cfg, dict) else {}


def is_configured() -> bool:
    cfg = _gateway_cfg()
    return bool((cfg.get("URL") or "").strip() and (cfg.get("API_KEY") or "").strip())


def format_phone_number(phone: str) -> str:
    """
    Normalize a local number to the gateway's 94XXXXXXXXX form.
    """
    cleaned = _PHONE_NOISE.sub("", phone or "")

    if cleaned.startswith("+94"):
        cleaned = cleaned[1:]
    if cleaned.startswith("94"):
        return cleaned
    if cleaned.startswith("0"):
        return "94" + cleaned[1:]
    if len(cleaned) == 9 and cleaned.isdigit():
        return "94" + cleaned
    if len(cleaned) == 10 and cleaned.startswith("7"):
        return "94" + cleaned
    return cleaned


def _http_get(url: str, params: dict, *, timeout: int) -> dict[str, Any]:
    req = Request(
        f"{url}?{urlencode(params)}",
        headers={"Accept": "application/json"},
        method="GET",
    )
    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raise SmsTransportError(f"SMS gateway HTTPError: {e.code}") from e
    except URLError as e:
        raise SmsTransportError(f"SMS gateway URLError: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError:
        raise SmsTransportError(f"SMS gateway returned non-JSON: {raw[:200]}") from None
    return parsed if isinstance(parsed, dict) else {}


def send_sms(*, to: str, message: str) -> SmsResult:
    """
    Send one message through the gateway's SEND_SINGLE call.

    Transport failures come back as an unsuccessful result rather than
    raising, so callers can record them on the notification row.
    """
    if not is_configured():
        return SmsResult(success=False, message="not configured")

    phone = format_phone_number(to)
    if not phone:
        return SmsResult(success=False, message="no phone number")

    cfg = _gateway_cfg()
    params = {
        "FUN": "SEND_SINGLE",
        "with_get": "true",
        "un": cfg.get("USER_ID") or "",
        "up": cfg.get("API_KEY") or "",
        "senderID": cfg.get("SENDER_ID") or "",
        "msg": (message or "").strip(),
        "to": phone,
    }

    try:
        data = _http_get(cfg["URL"], params, timeout=int(cfg.get("TIMEOUT_SECONDS") or 10))
    except SmsTransportError as exc:
        logger.warning("sms send failed", extra={"to": phone, "error": str(exc)})
        return SmsResult(success=False, message=str(exc))

    if data.get("status") == "success" and data.get("id"):
        return SmsResult(success=True, message="sent", message_id=str(data["id"]))

    return SmsResult(
        success=False,
        message=str(data.get("message") or data.get("status") or "rejected by gateway"),
    )


def plain_confirmation_text(
    *, customer_name: str, sale_number: str, total: Decimal, location_name: str
) -> str:
    return (
        f"Dear {customer_name}, Thank you for your purchase! "
        f"Sale #{sale_number} - Total: Rs. {Decimal(total):.2f}. "
        f"{location_name}. For support, contact us."
    )


def send_plain_confirmation(
    *,
    phone: str,
    customer_name: str,
    sale_number: str,
    total: Decimal,
    location_name: str,
) -> SmsResult:
    result = send_sms(
        to=phone,
        message=plain_confirmation_text(
            customer_name=customer_name,
            sale_number=sale_number,
            total=total,
            location_name=location_name,
        ),
    )
    logger.info(
        "sms confirmation attempted",
        extra={"sale_number": sale_number, "success": result.success},
    )
    return result
