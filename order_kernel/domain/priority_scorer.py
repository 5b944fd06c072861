"""
PriorityScorer -- Rule-table priority for a single order.

Responsibility:
    Maps (quantity, delivery type, clock reading) to an integer priority.
    Higher is more urgent; the delivery estimator turns it into lead time.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  The current time is
    passed in, never read.

Invariants enforced:
    - Type ordering: for every quantity and hour,
      SameDay > Express > Standard.
    - Quantity monotonicity: for every type and hour, a larger quantity
      never scores lower than a smaller one.

    Both follow from the table shape: within an hour column every type row
    dominates the row below it, and every row is non-decreasing left to
    right across quantity brackets; ``check_rule_table()`` verifies both.

Design:
    Base urgency, quantity bonus and time-of-day bonus interact (large
    SameDay orders score lower after the morning cutoff), so the score is a
    lookup, not a formula.
"""

from datetime import datetime
from enum import Enum

from order_kernel.domain.dtos import DeliveryType


class QuantityBracket(str, Enum):
    """Order-size brackets, inclusive bounds."""

    SMALL = "1-5"
    MEDIUM = "6-10"
    LARGE = "11-50"
    BULK = "51+"

    @classmethod
    def for_quantity(cls, quantity: int) -> "QuantityBracket":
        if quantity <= 5:
            return cls.SMALL
        if quantity <= 10:
            return cls.MEDIUM
        if quantity <= 50:
            return cls.LARGE
        return cls.BULK


class HourBracket(str, Enum):
    """Time-of-day brackets on the clock hour."""

    MORNING = "morning"  # hour < 12
    MIDDAY = "midday"  # 12 <= hour < 18
    EVENING = "evening"  # hour >= 18

    @classmethod
    def for_hour(cls, hour: int) -> "HourBracket":
        if hour < 12:
            return cls.MORNING
        if hour < 18:
            return cls.MIDDAY
        return cls.EVENING


_Q = QuantityBracket
_H = HourBracket

# (delivery type, quantity bracket) -> (morning, midday, evening)
_RULES: dict[tuple[DeliveryType, QuantityBracket], tuple[int, int, int]] = {
    (DeliveryType.STANDARD, _Q.SMALL): (20, 30, 40),
    (DeliveryType.STANDARD, _Q.MEDIUM): (30, 40, 50),
    (DeliveryType.STANDARD, _Q.LARGE): (70, 80, 90),
    (DeliveryType.STANDARD, _Q.BULK): (90, 100, 110),
    (DeliveryType.EXPRESS, _Q.SMALL): (50, 55, 60),
    (DeliveryType.EXPRESS, _Q.MEDIUM): (60, 65, 70),
    (DeliveryType.EXPRESS, _Q.LARGE): (120, 135, 150),
    (DeliveryType.EXPRESS, _Q.BULK): (140, 155, 170),
    (DeliveryType.SAME_DAY, _Q.SMALL): (90, 110, 110),
    (DeliveryType.SAME_DAY, _Q.MEDIUM): (100, 120, 120),
    (DeliveryType.SAME_DAY, _Q.LARGE): (180, 160, 160),
    (DeliveryType.SAME_DAY, _Q.BULK): (200, 180, 180),
}

_HOUR_COLUMN = {_H.MORNING: 0, _H.MIDDAY: 1, _H.EVENING: 2}

# Least to most urgent
URGENCY_ORDER: tuple[DeliveryType, ...] = (
    DeliveryType.STANDARD,
    DeliveryType.EXPRESS,
    DeliveryType.SAME_DAY,
)


def rule_for(
    delivery_type: DeliveryType,
    quantity_bracket: QuantityBracket,
    hour_bracket: HourBracket,
) -> int:
    """Look up one cell of the rule table."""
    return _RULES[(delivery_type, quantity_bracket)][_HOUR_COLUMN[hour_bracket]]


def score(quantity: int, delivery_type: DeliveryType | str, now: datetime) -> int:
    """
    Compute the priority of an order.

    Args:
        quantity: Ordered units, must be positive.
        delivery_type: DeliveryType or its string tag ("Express", ...).
        now: Clock reading; only the hour is used.

    Returns:
        Integer priority.

    Raises:
        ValueError: If quantity is not positive or the delivery type is unknown.
    """
    if quantity < 1:
        raise ValueError(f"quantity must be positive, got {quantity}")
    return rule_for(
        DeliveryType(delivery_type),
        QuantityBracket.for_quantity(quantity),
        HourBracket.for_hour(now.hour),
    )


class PriorityScorer:
    """Object wrapper around ``score`` for injection into the orchestrator."""

    def score(self, quantity: int, delivery_type: DeliveryType | str, now: datetime) -> int:
        return score(quantity, delivery_type, now)


def check_rule_table() -> None:
    """
    Verify the table-level invariants.

    Raises:
        ValueError: If a row is not monotone across quantity brackets or
            a more urgent type does not strictly dominate a less urgent one.
    """
    brackets = list(QuantityBracket)
    for hour in HourBracket:
        for delivery_type in URGENCY_ORDER:
            row = [rule_for(delivery_type, q, hour) for q in brackets]
            if row != sorted(row):
                raise ValueError(f"{delivery_type.value} {hour.value} not monotone: {row}")
        for q in brackets:
            column = [rule_for(t, q, hour) for t in URGENCY_ORDER]
            if not all(a < b for a, b in zip(column, column[1:])):
                raise ValueError(f"{q.value} {hour.value} urgency not strict: {column}")

