"""
Module: order_kernel.models.stock_level
Responsibility: ORM persistence for the on-hand quantity of one product.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - One row per product (uq_stock_level_product).
    - quantity >= 0 (ck_stock_level_non_negative).  The ledger's conditional
      decrement never crosses zero; the check constraint backs it up.

Failure modes:
    - IntegrityError on a second row for the same product.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from order_kernel.db.base import Base


class StockLevel(Base):
    """
    Current stock for a product.

    Contract:
        Mutated exclusively by InventoryLedger through
        OrderStore.update_stock_level().
    """

    __tablename__ = "stock_levels"

    __table_args__ = (
        UniqueConstraint("product_id", name="uq_stock_level_product"),
        CheckConstraint("quantity >= 0", name="ck_stock_level_non_negative"),
    )

    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<StockLevel product={self.product_id} qty={self.quantity}>"
