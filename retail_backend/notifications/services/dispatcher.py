# notifications/services/dispatcher.py

"""
NOTIFICATION DISPATCHER

Sale events fan out to:
- the sale's customer (SMS), when the sale references a customer with a phone
- every active admin (in-app)
- active managers of the sale's location (in-app)

Each recipient gets its own Notification row; one failing channel never
stops the others. Callers learn whether the customer channel confirmed
delivery through DispatchResult.customer_delivered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q
from django.utils import timezone

from notifications.models import Notification
from notifications.services import sms

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    notifications: list = field(default_factory=list)
    customer_delivered: bool = False


def _company_name() -> str:
    return getattr(settings, "COMPANY_NAME", "") or "Our Shop"


def _staff_recipients(sale):
    User = get_user_model()
    return list(
        User.objects.filter(is_active=True)
        .filter(
            Q(role=User.Role.ADMIN)
            | Q(role=User.Role.MANAGER, location_id=sale.location_id)
        )
        .order_by("email")
    )


def _customer_phone(sale) -> str:
    if sale.customer_phone:
        return sale.customer_phone
    return sale.customer.phone if sale.customer else ""


def _thread_parent(*, sale, user=None, customer=None):
    qs = Notification.objects.filter(sale=sale, event_type=Notification.EventType.SALE_CREATED)
    if user is not None:
        qs = qs.filter(recipient_user=user)
    elif customer is not None:
        qs = qs.filter(recipient_customer=customer)
    else:
        return None
    return qs.order_by("-created_at").first()


def _send_customer_sms(*, sale, event_type, title, message, result: DispatchResult):
    phone = _customer_phone(sale)
    if not sale.customer_id or not phone:
        return

    parent = None
    if event_type != Notification.EventType.SALE_CREATED:
        parent = _thread_parent(sale=sale, customer=sale.customer)

    note = Notification.objects.create(
        event_type=event_type,
        recipient_type=Notification.RecipientType.CUSTOMER,
        channel=Notification.Channel.SMS,
        recipient_customer_id=sale.customer_id,
        recipient_address=phone,
        title=title,
        message=message,
        sale=sale,
        location_id=sale.location_id,
        parent=parent,
    )
    result.notifications.append(note)

    try:
        outcome = sms.send_sms(to=phone, message=message)
    except Exception as exc:
        logger.exception("customer sms raised", extra={"notification_id": str(note.id)})
        outcome = sms.SmsResult(success=False, message=str(exc))

    if outcome.success:
        note.status = Notification.Status.SENT
        note.sent_at = timezone.now()
        result.customer_delivered = True
    else:
        note.status = Notification.Status.FAILED
        note.error_message = outcome.message
    note.save(update_fields=["status", "sent_at", "error_message"])


def _notify_staff(*, sale, event_type, title, message, result: DispatchResult):
    User = get_user_model()
    for user in _staff_recipients(sale):
        recipient_type = (
            Notification.RecipientType.ADMIN
            if user.role == User.Role.ADMIN
            else Notification.RecipientType.MANAGER
        )
        parent = None
        if event_type != Notification.EventType.SALE_CREATED:
            parent = _thread_parent(sale=sale, user=user)

        try:
            note = Notification.objects.create(
                event_type=event_type,
                recipient_type=recipient_type,
                channel=Notification.Channel.IN_APP,
                recipient_user=user,
                title=title,
                message=message,
                sale=sale,
                location_id=sale.location_id,
                parent=parent,
                status=Notification.Status.SENT,
                sent_at=timezone.now(),
            )
        except Exception:
            logger.exception(
                "staff notification failed",
                extra={"sale_number": sale.sale_number, "user_id": str(user.pk)},
            )
            continue
        result.notifications.append(note)


def notify_sale_created(sale) -> DispatchResult:
    result = DispatchResult()
    company = _company_name()
    customer_name = sale.customer_name or "Customer"
    item_count = sum(item.quantity for item in sale.items.all())

    _send_customer_sms(
        sale=sale,
        event_type=Notification.EventType.SALE_CREATED,
        title=f"Sale Created: {sale.sale_number}",
        message=(
            f"Thank you {customer_name}! Your purchase {sale.sale_number} of "
            f"{item_count} items has been created. "
            f"Total: Rs.{sale.total_amount}. - {company}"
        ),
        result=result,
    )

    _notify_staff(
        sale=sale,
        event_type=Notification.EventType.SALE_CREATED,
        title=f"New Sale: {sale.sale_number}",
        message=(
            f"New sale {sale.sale_number} at {sale.location.name}. "
            f"Amount: Rs.{sale.total_amount}. "
            f"Customer: {sale.customer_name or 'Walk-in'}. Items: {item_count}"
        ),
        result=result,
    )

    logger.info(
        "sale notifications dispatched",
        extra={
            "sale_number": sale.sale_number,
            "count": len(result.notifications),
            "customer_delivered": result.customer_delivered,
        },
    )
    return result


def notify_sale_cancelled(sale, *, reason: str = "") -> DispatchResult:
    result = DispatchResult()
    company = _company_name()
    actor = getattr(sale.cancelled_by, "display_name", None) or "staff"

    _send_customer_sms(
        sale=sale,
        event_type=Notification.EventType.SALE_CANCELLED,
        title=f"Sale Cancelled: {sale.sale_number}",
        message=(
            f"Hello {sale.customer_name or 'Customer'}, Your sale {sale.sale_number} "
            f"has been cancelled. Contact: {sale.location.phone or 'the shop'} - {company}"
        ),
        result=result,
    )

    _notify_staff(
        sale=sale,
        event_type=Notification.EventType.SALE_CANCELLED,
        title=f"Sale Cancelled: {sale.sale_number}",
        message=(
            f"Sale {sale.sale_number} cancelled at {sale.location.name}. "
            f"Amount: Rs.{sale.total_amount}. Cancelled by: {actor}. "
            f"Reason: {reason or 'N/A'}"
        ),
        result=result,
    )

    logger.info(
        "cancellation notifications dispatched",
        extra={"sale_number": sale.sale_number, "count": len(result.notifications)},
    )
    return result
