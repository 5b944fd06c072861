"""
Module: order_kernel.models.product
Responsibility: ORM persistence for catalog products as seen by order
    processing.  Read-only to the kernel; the catalog system owns writes.
Architecture position: Kernel > Models.  May import from db/ only.
"""

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from order_kernel.db.base import TrackedBase


class Product(TrackedBase):
    """
    Catalog product.

    Guarantees:
        - price is stored as Numeric(18, 2).
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    price: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Product {self.id}: {self.name} @ {self.price}>"
