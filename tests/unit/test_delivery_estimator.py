"""Unit tests for the lead-time step functions."""

from datetime import datetime, timedelta

import pytest

from order_kernel.domain import delivery_estimator
from order_kernel.domain.delivery_estimator import (
    LEAD_TIME_STEPS,
    DeliveryEstimator,
    check_lead_time_steps,
    estimate,
    lead_time,
)
from order_kernel.domain.dtos import DeliveryType

ORDERED_AT = datetime(2024, 11, 7, 10, 10, 10)


class TestLeadTime:
    @pytest.mark.parametrize(
        "delivery_type, priority, expected",
        [
            (DeliveryType.STANDARD, 20, timedelta(days=7)),
            (DeliveryType.STANDARD, 79, timedelta(days=7)),
            (DeliveryType.STANDARD, 80, timedelta(days=5)),
            (DeliveryType.STANDARD, 99, timedelta(days=5)),
            (DeliveryType.STANDARD, 100, timedelta(days=4)),
            (DeliveryType.EXPRESS, 50, timedelta(days=5)),
            (DeliveryType.EXPRESS, 60, timedelta(days=4)),
            (DeliveryType.EXPRESS, 99, timedelta(days=4)),
            (DeliveryType.EXPRESS, 100, timedelta(days=2)),
            (DeliveryType.EXPRESS, 170, timedelta(days=2)),
            (DeliveryType.SAME_DAY, 90, timedelta(hours=12)),
            (DeliveryType.SAME_DAY, 149, timedelta(hours=12)),
            (DeliveryType.SAME_DAY, 150, timedelta(hours=6)),
            (DeliveryType.SAME_DAY, 200, timedelta(hours=6)),
        ],
    )
    def test_step_boundaries(self, delivery_type, priority, expected):
        assert lead_time(delivery_type, priority) == expected

    def test_negative_priority_gets_slowest_step(self):
        assert lead_time(DeliveryType.EXPRESS, -5) == timedelta(days=5)

    def test_string_delivery_type(self):
        assert lead_time("SameDay", 150) == timedelta(hours=6)


class TestEstimate:
    def test_demo_order(self):
        """Express, 5 units, morning: priority 50, five days out."""
        assert estimate(DeliveryType.EXPRESS, 50, ORDERED_AT) == datetime(2024, 11, 12, 10, 10, 10)

    def test_same_day_high_priority(self):
        assert estimate(DeliveryType.SAME_DAY, 180, ORDERED_AT) == datetime(2024, 11, 7, 16, 10, 10)

    def test_wrapper(self):
        assert DeliveryEstimator().estimate(DeliveryType.STANDARD, 100, ORDERED_AT) == (
            ORDERED_AT + timedelta(days=4)
        )


class TestStepTable:
    def test_table_passes_checks(self):
        check_lead_time_steps()

    def test_every_type_has_steps(self):
        assert set(LEAD_TIME_STEPS) == set(DeliveryType)

    def test_malformed_table_rejected(self, monkeypatch):
        broken = dict(LEAD_TIME_STEPS)
        broken[DeliveryType.EXPRESS] = ((60, timedelta(days=4)), (100, timedelta(days=2)))
        monkeypatch.setattr(delivery_estimator, "LEAD_TIME_STEPS", broken)
        with pytest.raises(ValueError, match="Express"):
            check_lead_time_steps()
