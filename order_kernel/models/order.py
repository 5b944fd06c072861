"""
Module: order_kernel.models.order
Responsibility: ORM persistence for orders and their processing outcome.
Architecture position: Kernel > Models.  May import from db/ and the domain
    enumerations only.

Invariants enforced:
    - status is one of OrderStatus values, stored as its string tag.
    - delivery_type is one of DeliveryType values, stored as its string tag.
    - quantity > 0 (ck_order_quantity_positive).
    - stock_reserved_at is set in the same transaction that decrements stock,
      so a retried order never reserves twice.

Audit relevance:
    priority, total_cost, ordered_at and estimated_delivery_date are the
    values exported in the XML audit snapshot.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from order_kernel.db.base import TrackedBase
from order_kernel.domain.dtos import DeliveryType, OrderStatus


class Order(TrackedBase):
    """
    A customer order for one product.

    Contract:
        Created by external order intake with status NEW.  Only the
        processing orchestrator changes status; this kernel never deletes
        orders.
    """

    __tablename__ = "orders"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_quantity_positive"),
        Index("idx_order_status", "status"),
        Index("idx_order_product", "product_id"),
    )

    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    delivery_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=OrderStatus.NEW.value,
        nullable=False,
    )

    # Falls back to the configured default recipient when empty
    customer_email: Mapped[str | None] = mapped_column(
        String(320),
        nullable=True,
    )

    # Processing outcome
    priority: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )

    total_cost: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    ordered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    estimated_delivery_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    stock_reserved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    failure_reason: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Order {self.id}: {self.status} {self.quantity}x{self.product_id}>"

    @property
    def delivery(self) -> DeliveryType:
        return DeliveryType(self.delivery_type)

    @property
    def is_processed(self) -> bool:
        return self.status == OrderStatus.PROCESSED.value

    @property
    def has_reserved_stock(self) -> bool:
        return self.stock_reserved_at is not None
