#!/usr/bin/env python3
"""
Process one order from the command line.

Prints the JSON result payload on success, or the failure message on
stderr.  Exit status is 0 on success, 1 for client-side failures (unknown
order, insufficient stock, already processed) and 2 for server-side
failures.

With --dry-run the order, its product and the stock on hand are shown
along with the priority and delivery estimate processing would compute;
nothing is written.

Usage:
    python3 scripts/process_order.py ORDER_ID [--config PATH] [--dry-run]
"""

import argparse
import json
import sys
from pathlib import Path

from sqlalchemy import inspect

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from order_api.wiring import build_pipeline  # noqa: E402
from order_config import get_active_config  # noqa: E402
from order_kernel.db.engine import create_tables, get_engine  # noqa: E402
from order_kernel.domain.delivery_estimator import estimate  # noqa: E402
from order_kernel.domain.pricing import total_cost  # noqa: E402
from order_kernel.domain.priority_scorer import score  # noqa: E402
from order_kernel.models import Order  # noqa: E402
from order_kernel.services.inventory_ledger import InventoryLedger  # noqa: E402
from order_kernel.services.order_store import OrderStore  # noqa: E402


def dry_run(pipeline, order_id: int) -> int:
    if not inspect(get_engine()).has_table(Order.__tablename__):
        print(f"Order {order_id} not found.", file=sys.stderr)
        return 1
    session = pipeline.session_factory()
    try:
        store = OrderStore(session)
        order = store.get_order(order_id)
        if order is None:
            print(f"Order {order_id} not found.", file=sys.stderr)
            return 1
        product = store.get_product(order.product_id)
        available = InventoryLedger(session).available(order.product_id)
        now = pipeline.clock.now()
        priority = score(order.quantity, order.delivery, now)
        print(json.dumps(
            {
                "orderId": order.id,
                "status": order.status,
                "productId": order.product_id,
                "quantity": order.quantity,
                "available": available,
                "deliveryType": order.delivery_type,
                "priority": priority,
                "totalCost": str(total_cost(product.price, order.quantity)) if product else None,
                "estimatedDeliveryDate": estimate(order.delivery, priority, now).isoformat(),
            },
            indent=2,
        ))
        return 0
    finally:
        session.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Process one order.")
    parser.add_argument("order_id", type=int)
    parser.add_argument("--config", type=Path, default=None, help="YAML config file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what processing would compute without writing anything",
    )
    args = parser.parse_args(argv)

    pipeline = build_pipeline(get_active_config(args.config))
    if args.dry_run:
        return dry_run(pipeline, args.order_id)

    create_tables()

    outcome = pipeline.process(args.order_id)
    if outcome.is_success:
        print(json.dumps(outcome.to_payload(), indent=2))
        return 0
    print(outcome.message, file=sys.stderr)
    return 1 if outcome.is_client_error else 2


if __name__ == "__main__":
    sys.exit(main())
