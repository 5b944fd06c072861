"""
Module: order_kernel.db.types
Responsibility: Annotated type aliases and rounding helpers for monetary
    columns.  Centralizes precision and rounding so that every model and
    domain function uses identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/
    and services/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats for money.  All monetary amounts use Decimal with two
      decimal places.
    - round_money() is the ONLY sanctioned rounding function for money.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric

# Monetary amount, matches catalog precision (18 digits, 2 decimal places)
Money = Annotated[Decimal, Numeric(18, 2)]

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def money_from_str(value: str) -> Decimal:
    """
    Create a Money value from string.

    Raises:
        decimal.InvalidOperation: If value cannot be converted to Decimal.
    """
    return Decimal(value)


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to specified decimal places.

    This is the ONLY sanctioned rounding function for monetary values.

    Args:
        value: Decimal value to round.
        decimal_places: Number of decimal places.
        rounding: Rounding mode (default ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)
