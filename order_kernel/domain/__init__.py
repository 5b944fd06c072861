"""
Pure domain layer.

Data transfer objects and processing rules with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- System time
- I/O

All domain objects are immutable and deterministic.
"""

from order_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from order_kernel.domain.delivery_estimator import DeliveryEstimator
from order_kernel.domain.dtos import (
    DeliveryType,
    FailureKind,
    NotificationMessage,
    OrderSnapshot,
    OrderStatus,
    ProcessingFailure,
    ProcessingResult,
)
from order_kernel.domain.pricing import PricingCalculator
from order_kernel.domain.priority_scorer import PriorityScorer

__all__ = [
    "Clock",
    "DeliveryEstimator",
    "DeliveryType",
    "DeterministicClock",
    "FailureKind",
    "NotificationMessage",
    "OrderSnapshot",
    "OrderStatus",
    "PricingCalculator",
    "PriorityScorer",
    "ProcessingFailure",
    "ProcessingResult",
    "SystemClock",
]
