"""
InventoryLedger -- atomic stock reservation.

Responsibility:
    Validates and decrements stock for one product on behalf of one order.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.  Called by the
    processing orchestrator inside its unit of work.

Invariants enforced:
    - Stock never goes negative.  The check and the decrement are one
      conditional UPDATE (see OrderStore.update_stock_level).
    - Reserving more than is available writes nothing and raises
      InsufficientStockError.
    - In-process reservations for the same product are serialized by a
      ProductLockArena, held by the caller until its transaction commits.

Failure modes:
    - InsufficientStockError when requested > available (a missing stock row
      counts as zero available).
    - ValueError on a non-positive quantity.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from order_kernel.domain.clock import Clock, SystemClock
from order_kernel.exceptions import InsufficientStockError
from order_kernel.logging_config import get_logger
from order_kernel.services.base import BaseService
from order_kernel.services.order_store import OrderStore

logger = get_logger("services.inventory_ledger")


class ProductLockArena:
    """
    One lock per product id, created on first use.

    Owned by whoever wires the pipeline (the HTTP app, a script, a test) and
    shared by every ledger that should serialize against the others.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def lock_for(self, product_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, product_id: int) -> Iterator[None]:
        with self.lock_for(product_id):
            yield

    def product_ids(self) -> frozenset[int]:
        """Products that have had a lock created."""
        with self._guard:
            return frozenset(self._locks)


@dataclass(frozen=True)
class StockReservation:
    """Record of a committed-to-be decrement."""

    product_id: int
    quantity: int
    remaining: int
    reserved_at: datetime


class InventoryLedger(BaseService):
    """
    Reserves stock within the caller's transaction.

    Usage:
        with ledger.reservation(product_id):
            ledger.reserve(product_id, quantity)
            ...  # record order state
            session.commit()
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        lock_arena: ProductLockArena | None = None,
    ):
        super().__init__(session)
        self._clock = clock if clock is not None else SystemClock()
        self._locks = lock_arena if lock_arena is not None else ProductLockArena()
        self._store = OrderStore(session)

    def reservation(self, product_id: int):
        """Context manager serializing reservations of ``product_id``."""
        return self._locks.hold(product_id)

    def available(self, product_id: int) -> int:
        level = self._store.get_stock_level(product_id)
        return level.quantity if level is not None else 0

    def reserve(self, product_id: int, quantity: int) -> StockReservation:
        """
        Decrement stock for ``product_id`` by ``quantity``.

        Postconditions:
            On success the stock row is decremented and last_updated stamped
            with the injected clock; the change is flushed, not committed.

        Raises:
            InsufficientStockError: If fewer than ``quantity`` units are on
                hand.  Stock is left untouched.
        """
        if quantity < 1:
            raise ValueError(f"quantity must be positive, got {quantity}")

        now = self._clock.now()
        if not self._store.update_stock_level(product_id, quantity, now):
            available = self.available(product_id)
            logger.warning(
                "stock_insufficient",
                extra={
                    "product_id": product_id,
                    "requested": quantity,
                    "available": available,
                },
            )
            raise InsufficientStockError(product_id, quantity, available)

        remaining = self.available(product_id)
        logger.info(
            "stock_reserved",
            extra={
                "product_id": product_id,
                "quantity": quantity,
                "remaining": remaining,
            },
        )
        return StockReservation(
            product_id=product_id,
            quantity=quantity,
            remaining=remaining,
            reserved_at=now,
        )
