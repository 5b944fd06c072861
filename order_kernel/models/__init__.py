"""ORM models for the order kernel."""

from order_kernel.models.order import Order
from order_kernel.models.product import Product
from order_kernel.models.stock_level import StockLevel

__all__ = [
    "Order",
    "Product",
    "StockLevel",
]
