# products/services/directory.py

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from products.models import Product


class ProductNotFound(Exception):
    def __init__(self, product_id):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


def get_product(product_id) -> Product:
    """
    Product directory lookup used by checkout.

    Returns the live product (name, sku, cost_price, unit_price,
    warranty_months). Malformed ids are reported as not found.
    """
    try:
        return Product.objects.get(pk=product_id)
    except (Product.DoesNotExist, DjangoValidationError, ValueError):
        raise ProductNotFound(product_id) from None
