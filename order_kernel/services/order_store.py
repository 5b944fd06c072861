"""
OrderStore -- persistence collaborator for order processing.

Responsibility:
    The narrow store interface the pipeline needs: load an order, its product
    and its stock level; compare-and-decrement stock; record order state.

Architecture position:
    Kernel > Services -- imperative shell over a SQLAlchemy session.

Invariants enforced:
    - update_stock_level() is a single conditional UPDATE
      (``... SET quantity = quantity - :q WHERE product_id = :p AND
      quantity >= :q``), so check and decrement are atomic in the database
      and stock can never cross zero, even across processes.
    - claim_for_processing() never moves a Processed order back to
      Processing.
    - Flush only; the caller commits.
    - Stock rows are re-read with populate_existing, so identity-map copies
      never go stale after a conditional UPDATE.
"""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm.attributes import set_committed_value

from order_kernel.domain.dtos import OrderStatus
from order_kernel.logging_config import get_logger
from order_kernel.models.order import Order
from order_kernel.models.product import Product
from order_kernel.models.stock_level import StockLevel
from order_kernel.services.base import BaseService

logger = get_logger("services.order_store")

# Outcome columns the orchestrator may record alongside a state change.
_RECORDABLE_FIELDS = frozenset({
    "priority",
    "total_cost",
    "ordered_at",
    "estimated_delivery_date",
    "stock_reserved_at",
    "failure_reason",
})


class OrderStore(BaseService):
    """Store collaborator bound to one session (one unit of work)."""

    def get_order(self, order_id: int) -> Order | None:
        return self.session.get(Order, order_id)

    def get_product(self, product_id: int) -> Product | None:
        return self.session.get(Product, product_id)

    def get_stock_level(self, product_id: int) -> StockLevel | None:
        return self.session.execute(
            select(StockLevel)
            .where(StockLevel.product_id == product_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def reload_order(self, order: Order) -> Order:
        """Re-read ``order`` from the database, discarding in-session state."""
        self.session.refresh(order)
        return order

    def claim_for_processing(self, order: Order) -> bool:
        """
        Move ``order`` to Processing unless it is already Processed.

        A single conditional UPDATE, so a worker holding a stale copy of the
        order cannot reopen one that another worker has committed as
        Processed.  Returns False, writing nothing, in that case.
        """
        result = self.session.execute(
            update(Order)
            .where(
                Order.id == order.id,
                Order.status != OrderStatus.PROCESSED.value,
            )
            .values(status=OrderStatus.PROCESSING.value)
            .execution_options(synchronize_session=False)
        )
        claimed = result.rowcount == 1
        if claimed:
            set_committed_value(order, "status", OrderStatus.PROCESSING.value)
        logger.debug("order_claim", extra={"claimed": claimed})
        return claimed

    def update_stock_level(self, product_id: int, quantity: int, now: datetime) -> bool:
        """
        Decrement stock by ``quantity`` iff at least that much is on hand.

        Returns:
            True if the row was decremented, False if stock was short or no
            stock row exists.  Nothing is written when False.
        """
        result = self.session.execute(
            update(StockLevel)
            .where(
                StockLevel.product_id == product_id,
                StockLevel.quantity >= quantity,
            )
            .values(
                quantity=StockLevel.quantity - quantity,
                last_updated=now,
            )
            .execution_options(synchronize_session=False)
        )
        applied = result.rowcount == 1
        logger.debug(
            "stock_level_update",
            extra={"product_id": product_id, "quantity": quantity, "applied": applied},
        )
        return applied

    def update_order_state(self, order: Order, status: OrderStatus, **recorded) -> Order:
        """
        Set ``order.status`` and any recorded outcome columns, then flush.

        Raises:
            ValueError: If ``recorded`` names a column that processing does
                not own.
        """
        unknown = set(recorded) - _RECORDABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot record order fields: {sorted(unknown)}")

        previous = order.status
        order.status = OrderStatus(status).value
        for name, value in recorded.items():
            setattr(order, name, value)
        self.session.flush()

        logger.debug(
            "order_state_updated",
            extra={"from_status": previous, "to_status": order.status},
        )
        return order
