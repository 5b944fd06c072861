"""
PricingCalculator -- total cost of an order line.

Pure: unit price times quantity, rounded with the kernel's money rounding.
There is no delivery surcharge.
"""

from decimal import Decimal

from order_kernel.db.types import round_money


def total_cost(unit_price: Decimal, quantity: int) -> Decimal:
    """
    Compute the total cost for ``quantity`` units at ``unit_price``.

    Raises:
        ValueError: If unit_price or quantity is not positive.
    """
    if unit_price <= 0:
        raise ValueError(f"unit_price must be positive, got {unit_price}")
    if quantity < 1:
        raise ValueError(f"quantity must be positive, got {quantity}")
    return round_money(Decimal(unit_price) * quantity)


class PricingCalculator:
    def total_cost(self, unit_price: Decimal, quantity: int) -> Decimal:
        return total_cost(unit_price, quantity)
