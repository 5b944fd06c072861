#!/usr/bin/env python3
"""
Seed the database with the demo product and order.

Creates the tables if needed, then upserts product 100 (10 units on hand)
and order 1 (5 units, Express, New).  Running it again resets both rows to
those values, so the demo order can be processed repeatedly.

Usage:
    python3 scripts/seed_data.py [--config PATH]
"""

import argparse
import sys
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from sqlalchemy import select  # noqa: E402

from order_config import get_active_config  # noqa: E402
from order_kernel.db.engine import create_tables, init_engine_from_url, session_scope  # noqa: E402
from order_kernel.domain.dtos import DeliveryType, OrderStatus  # noqa: E402
from order_kernel.models import Order, Product, StockLevel  # noqa: E402

# ---------------------------------------------------------------------------
# Demo data
# ---------------------------------------------------------------------------
PRODUCT_ID = 100
PRODUCT_NAME = "Widget"
PRODUCT_PRICE = Decimal("18.99")
STOCK_ON_HAND = 10

ORDER_ID = 1
ORDER_QUANTITY = 5
ORDER_DELIVERY = DeliveryType.EXPRESS
CUSTOMER_EMAIL = "customer@example.com"


def seed(session) -> None:
    session.merge(Product(id=PRODUCT_ID, name=PRODUCT_NAME, price=PRODUCT_PRICE))
    session.flush()

    stock = session.execute(
        select(StockLevel).where(StockLevel.product_id == PRODUCT_ID)
    ).scalar_one_or_none()
    if stock is None:
        session.add(StockLevel(product_id=PRODUCT_ID, quantity=STOCK_ON_HAND))
    else:
        stock.quantity = STOCK_ON_HAND

    session.merge(
        Order(
            id=ORDER_ID,
            product_id=PRODUCT_ID,
            quantity=ORDER_QUANTITY,
            delivery_type=ORDER_DELIVERY.value,
            status=OrderStatus.NEW.value,
            customer_email=CUSTOMER_EMAIL,
            priority=None,
            total_cost=None,
            ordered_at=None,
            estimated_delivery_date=None,
            stock_reserved_at=None,
            failure_reason=None,
        )
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the demo product and order.")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    args = parser.parse_args(argv)

    config = get_active_config(args.config)
    init_engine_from_url(config.database.url, echo=config.database.echo)
    create_tables()

    with session_scope() as session:
        seed(session)

    print(
        f"Seeded product {PRODUCT_ID} ({STOCK_ON_HAND} on hand) and "
        f"order {ORDER_ID} ({ORDER_QUANTITY} x {ORDER_DELIVERY.value}) "
        f"into {config.database.url}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
