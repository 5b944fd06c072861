"""
Clock -- Injectable time source.

Responsibility:
    Provides the "current time" to the priority scorer, the delivery
    estimator and the stock ledger so that none of them reads the system
    clock directly.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Audit relevance:
    Every timestamp recorded on an order (ordered_at, estimated delivery,
    stock last_updated) comes from one Clock instance per processing call,
    so a run can be reproduced by replaying the same clock reading.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone, tzinfo


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Services that need the current time receive a Clock instance via
        constructor injection.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...


class SystemClock(Clock):
    """
    Production clock that returns actual system time.

    Readings are aware datetimes in ``tz`` (UTC unless given).  The priority
    scorer buckets on the hour of the reading, so ``tz`` decides which
    wall-clock hour counts as morning.

    Non-goals:
        Not suitable for deterministic tests.
    """

    def __init__(self, tz: tzinfo | None = None):
        self._tz = tz if tz is not None else timezone.utc

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until
          ``advance()`` or ``set_time()`` is called.
        - The supplied datetime is returned as-is (naive stays naive), so
          tests can pin a wall-clock hour exactly.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime(2024, 11, 7, 10, 10, 10)
        self._offset = timedelta()

    def now(self) -> datetime:
        return self._fixed_time + self._offset

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        self._fixed_time = time
        self._offset = timedelta()

    def advance(self, seconds: int = 1) -> None:
        """Advance the clock by the specified seconds."""
        self._offset += timedelta(seconds=seconds)
