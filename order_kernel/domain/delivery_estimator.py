"""
DeliveryEstimator -- lead time from priority.

Responsibility:
    Maps (delivery type, priority, order timestamp) to an estimated delivery
    timestamp.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Per delivery type, lead time is a non-increasing step function of
      priority: a higher priority never yields a later date than a lower one
      at the same order time.  Steps are listed highest threshold first and
      lead times must grow as thresholds fall; ``check_lead_time_steps()``
      verifies the table.
"""

from datetime import datetime, timedelta

from order_kernel.domain.dtos import DeliveryType

# delivery type -> ((minimum priority, lead time), ...), highest threshold first.
# The last step of every type has threshold 0 and catches everything else.
LEAD_TIME_STEPS: dict[DeliveryType, tuple[tuple[int, timedelta], ...]] = {
    DeliveryType.STANDARD: (
        (100, timedelta(days=4)),
        (80, timedelta(days=5)),
        (0, timedelta(days=7)),
    ),
    DeliveryType.EXPRESS: (
        (100, timedelta(days=2)),
        (60, timedelta(days=4)),
        (0, timedelta(days=5)),
    ),
    DeliveryType.SAME_DAY: (
        (150, timedelta(hours=6)),
        (0, timedelta(hours=12)),
    ),
}


def lead_time(delivery_type: DeliveryType | str, priority: int) -> timedelta:
    """Lead time for a priority within a delivery type."""
    for threshold, lead in LEAD_TIME_STEPS[DeliveryType(delivery_type)]:
        if priority >= threshold:
            return lead
    # Negative priorities fall through to the slowest step.
    return LEAD_TIME_STEPS[DeliveryType(delivery_type)][-1][1]


def estimate(
    delivery_type: DeliveryType | str,
    priority: int,
    order_timestamp: datetime,
) -> datetime:
    """
    Estimate the delivery timestamp of an order.

    Args:
        delivery_type: DeliveryType or its string tag.
        priority: Score from the priority scorer.
        order_timestamp: Clock reading at processing time.

    Returns:
        order_timestamp plus the lead time for (delivery_type, priority).
    """
    return order_timestamp + lead_time(delivery_type, priority)


class DeliveryEstimator:
    def estimate(
        self,
        delivery_type: DeliveryType | str,
        priority: int,
        order_timestamp: datetime,
    ) -> datetime:
        return estimate(delivery_type, priority, order_timestamp)


def check_lead_time_steps() -> None:
    """
    Verify every step list is ordered and ends with a catch-all.

    Raises:
        ValueError: On a malformed step list.
    """
    for delivery_type, steps in LEAD_TIME_STEPS.items():
        thresholds = [t for t, _ in steps]
        leads = [lead for _, lead in steps]
        if thresholds != sorted(thresholds, reverse=True) or thresholds[-1] != 0:
            raise ValueError(f"{delivery_type.value}: thresholds {thresholds}")
        if leads != sorted(leads):
            raise ValueError(f"{delivery_type.value}: lead times not increasing")
