"""
Pytest fixtures for the order kernel test suite.

Provides:
- A fresh in-memory SQLite database per test (tables created from the models)
- The demo catalog: product 100 at 18.99 with 10 units on hand
- A deterministic clock, a recording notification gateway and an audit
  exporter writing under tmp_path
- Factories for orders and wired orchestrators

Environment Variables:
- DATABASE_URL: Overrides the per-test database (e.g. a PostgreSQL URL).
  Tables are dropped and recreated for every test.
"""

import json
import logging
import os
from datetime import datetime
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy.orm import Session

from order_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from order_kernel.domain.clock import DeterministicClock
from order_kernel.domain.dtos import DeliveryType, OrderStatus
from order_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from order_kernel.models import Order, Product, StockLevel
from order_kernel.services.audit_exporter import AuditExporter
from order_kernel.services.inventory_ledger import ProductLockArena
from order_kernel.services.notification_dispatcher import (
    NotificationDispatcher,
    RecordingNotificationGateway,
)
from order_kernel.services.order_processing_orchestrator import OrderProcessingOrchestrator

DEFAULT_DATABASE_URL = "sqlite://"

PRODUCT_ID = 100
PRODUCT_PRICE = Decimal("18.99")
STOCK_ON_HAND = 10
CUSTOMER_EMAIL = "customer@example.com"

# Thursday morning; Express orders of 1-5 units score 50 at this hour
MORNING = datetime(2024, 11, 7, 10, 10, 10)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture order_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, orchestrator):
            orchestrator.process(1)
            logs = captured_logs()
            assert any(r["message"] == "order_processing_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("order_kernel")
    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def database_url() -> str:
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


@pytest.fixture
def engine(database_url):
    """Fresh schema for each test."""
    eng = init_engine_from_url(database_url, echo=False)
    drop_tables()
    create_tables()
    yield eng
    reset_engine()


@pytest.fixture
def session(engine) -> Session:
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def product(session) -> Product:
    """Product 100 with 10 units on hand."""
    prod = Product(id=PRODUCT_ID, name="Widget", price=PRODUCT_PRICE)
    session.add(prod)
    session.flush()
    session.add(StockLevel(product_id=PRODUCT_ID, quantity=STOCK_ON_HAND))
    session.commit()
    return prod


@pytest.fixture
def make_order(session, product):
    """Factory for committed New orders against the demo product."""

    def _make(
        quantity: int = 5,
        delivery_type: DeliveryType = DeliveryType.EXPRESS,
        order_id: int | None = None,
        status: OrderStatus = OrderStatus.NEW,
        customer_email: str | None = CUSTOMER_EMAIL,
        product_id: int = PRODUCT_ID,
    ) -> Order:
        order = Order(
            id=order_id,
            product_id=product_id,
            quantity=quantity,
            delivery_type=DeliveryType(delivery_type).value,
            status=status.value,
            customer_email=customer_email,
        )
        session.add(order)
        session.commit()
        return order

    return _make


@pytest.fixture
def stock_on_hand(session):
    """Committed on-hand quantity, bypassing the identity map."""

    def _read(product_id: int = PRODUCT_ID) -> int:
        session.expire_all()
        level = session.query(StockLevel).filter_by(product_id=product_id).one()
        return level.quantity

    return _read


# =============================================================================
# Pipeline fixtures
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(MORNING)


@pytest.fixture
def gateway() -> RecordingNotificationGateway:
    return RecordingNotificationGateway()


@pytest.fixture
def dispatcher(gateway) -> NotificationDispatcher:
    return NotificationDispatcher(gateway, default_recipient=CUSTOMER_EMAIL)


@pytest.fixture
def audit_exporter(tmp_path) -> AuditExporter:
    return AuditExporter(tmp_path / "audit")


@pytest.fixture
def lock_arena() -> ProductLockArena:
    return ProductLockArena()


@pytest.fixture
def orchestrator(session, dispatcher, audit_exporter, clock, lock_arena):
    return OrderProcessingOrchestrator(
        session,
        dispatcher=dispatcher,
        audit_exporter=audit_exporter,
        clock=clock,
        lock_arena=lock_arena,
    )


@pytest.fixture
def make_orchestrator(session, audit_exporter, clock, lock_arena):
    """Orchestrator factory for tests that need a custom gateway or exporter."""

    def _make(gateway, exporter=audit_exporter, **kwargs) -> OrderProcessingOrchestrator:
        return OrderProcessingOrchestrator(
            session,
            dispatcher=NotificationDispatcher(gateway, default_recipient=CUSTOMER_EMAIL),
            audit_exporter=exporter,
            clock=kwargs.pop("clock", clock),
            lock_arena=kwargs.pop("lock_arena", lock_arena),
        )

    return _make


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "concurrency: multi-threaded tests against a file-backed SQLite database"
    )
