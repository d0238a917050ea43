# customers/services/directory.py

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from customers.models import Customer


class CustomerNotFound(Exception):
    def __init__(self, customer_id):
        super().__init__(f"Customer not found: {customer_id}")
        self.customer_id = customer_id


def get_customer(customer_id) -> Customer:
    """
    Fetch a customer by id.

    Malformed ids are reported the same way as unknown ones.
    """
    try:
        return Customer.objects.get(pk=customer_id)
    except (Customer.DoesNotExist, DjangoValidationError, ValueError):
        raise CustomerNotFound(customer_id) from None
