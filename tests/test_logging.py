"""Tests for the structured logging system (order_kernel/logging_config.py)."""

import json
import logging
from datetime import datetime
from decimal import Decimal
from io import StringIO
from pathlib import Path
from uuid import uuid4

import pytest

from order_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


@pytest.fixture
def stream() -> StringIO:
    """JSON handler at the default level, writing into the returned buffer."""
    handler, buffer = _make_handler()
    configure_logging(handler=handler)
    return buffer


def _records(buffer: StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


def _first(buffer: StringIO) -> dict:
    return _records(buffer)[0]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self, stream):
        get_logger("test").info("hello")

        record = _first(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "order_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self, stream):
        get_logger("test").info("stock_reserved", extra={"remaining": 5, "product_id": 100})

        record = _first(stream)
        assert record["remaining"] == 5
        assert record["product_id"] == 100

    def test_context_fields_included(self, stream):
        LogContext.set(correlation_id="abc-123", order_id="1")
        get_logger("test").info("test_msg")

        record = _first(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["order_id"] == "1"

    def test_exception_fields(self, stream):
        try:
            raise ValueError("boom")
        except ValueError:
            get_logger("test").error("failed", exc_info=True)

        record = _first(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_kernel_exception_code_extracted(self, stream):
        """Kernel exceptions carry a .code attribute and structured fields."""
        from order_kernel.exceptions import InsufficientStockError

        try:
            raise InsufficientStockError(100, 11, 10)
        except InsufficientStockError:
            get_logger("test").error("reserve_failed", exc_info=True)

        record = _first(stream)
        assert record["exc_code"] == "INSUFFICIENT_STOCK"
        assert record["exc_type"] == "InsufficientStockError"
        assert record["exc_product_id"] == 100
        assert record["exc_requested"] == 11
        assert record["exc_available"] == 10

    def test_no_context_fields_when_empty(self, stream):
        get_logger("test").info("bare_message")

        record = _first(stream)
        assert "correlation_id" not in record
        assert "order_id" not in record

    def test_value_types_serialized(self, stream):
        uid = uuid4()
        get_logger("test").info(
            "typed",
            extra={
                "run_id": uid,
                "total_cost": Decimal("94.95"),
                "eta": datetime(2024, 11, 12, 10, 10, 10),
                "path": Path("audit/Order_1.xml"),
            },
        )

        record = _first(stream)
        assert record["run_id"] == str(uid)
        assert record["total_cost"] == "94.95"
        assert record["eta"] == "2024-11-12T10:10:10"
        assert record["path"] == "audit/Order_1.xml"

    def test_valid_json_every_line(self, stream):
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _records(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= record.keys()


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_and_get(self):
        LogContext.set(correlation_id="x", order_id="1")
        assert LogContext.get_all() == {"correlation_id": "x", "order_id": "1"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(order_id="outer")
        with LogContext.bind(order_id="inner"):
            assert LogContext.get_all()["order_id"] == "inner"
        assert LogContext.get_all()["order_id"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        with LogContext.bind(product_id="100"):
            assert LogContext.get_all()["product_id"] == "100"
        assert "product_id" not in LogContext.get_all()

    def test_all_fields(self):
        LogContext.set(correlation_id="c", order_id="o", product_id="p", trace_id="t")
        assert LogContext.get_all() == {
            "correlation_id": "c",
            "order_id": "o",
            "product_id": "p",
            "trace_id": "t",
        }


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op

        ours = [
            h for h in logging.getLogger("order_kernel").handlers
            if isinstance(h.formatter, StructuredFormatter)
        ]
        assert ours == [h1]

    def test_get_logger_returns_child(self):
        assert get_logger("services.inventory_ledger").name == "order_kernel.services.inventory_ledger"

    def test_logger_hierarchy(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("deep.nested.module").debug("hierarchy_test")

        record = _first(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "order_kernel.deep.nested.module"

    def test_level_by_name(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level="warning")
        logger = get_logger("test")
        logger.info("dropped")
        logger.warning("kept")

        assert [r["message"] for r in _records(stream)] == ["kept"]

    def test_reset_removes_handler(self):
        handler, _ = _make_handler()
        configure_logging(handler=handler)
        reset_logging()
        assert handler not in logging.getLogger("order_kernel").handlers


class TestLogContextValidation:
    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="event_id"):
            LogContext.set(event_id="x")

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(order_id="9"):
                raise RuntimeError("boom")
        assert LogContext.get_all() == {}
