"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .inventory import ProductInventory
from .product import Product
from .stock_movement import StockMovement

__all__ = [
    "Product",
    "ProductInventory",
    "StockMovement",
]
