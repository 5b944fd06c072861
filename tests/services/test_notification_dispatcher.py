"""Tests for confirmation messages (order_kernel/services/notification_dispatcher.py)."""

import json
from types import SimpleNamespace

import httpx
import pytest

from order_kernel.exceptions import NotificationDeliveryError
from order_kernel.services.notification_dispatcher import (
    HttpNotificationGateway,
    NotificationDispatcher,
    RecordingNotificationGateway,
)

EXPECTED_BODY = (
    "Dear Customer,\n\n"
    "Thank you for your order #1. Your order has been processed and will be "
    "delivered soon.\n\n"
    "Best Regards,\n"
    "Warehouse Team"
)


class FailingGateway:
    def __init__(self, text: str):
        self.text = text

    def send(self, message):
        raise RuntimeError(self.text)


class TestBuildMessage:
    def test_exact_payload(self, dispatcher):
        message = dispatcher.build_message(1, "customer@example.com")
        assert message.to_dict() == {
            "to": "customer@example.com",
            "subject": "Order Confirmation - Order #1",
            "body": EXPECTED_BODY,
        }

    def test_default_recipient(self, gateway):
        dispatcher = NotificationDispatcher(gateway, default_recipient="orders@example.com")
        assert dispatcher.build_message(3).to == "orders@example.com"

    def test_custom_signature(self, gateway):
        dispatcher = NotificationDispatcher(
            gateway, default_recipient="x@example.com", signature="Shipping Desk"
        )
        assert dispatcher.build_message(3).body.endswith("Best Regards,\nShipping Desk")


class TestNotify:
    def test_sends_through_gateway(self, dispatcher, gateway):
        sent = dispatcher.notify(SimpleNamespace(id=1), "customer@example.com")
        assert gateway.messages == [sent]
        assert gateway.last.subject == "Order Confirmation - Order #1"

    def test_gateway_error_text_kept_verbatim(self):
        dispatcher = NotificationDispatcher(
            FailingGateway("Something bad happened when sending email"),
            default_recipient="customer@example.com",
        )
        with pytest.raises(NotificationDeliveryError) as exc_info:
            dispatcher.notify(SimpleNamespace(id=1))

        assert exc_info.value.detail == "Something bad happened when sending email"
        assert str(exc_info.value) == "Something bad happened when sending email"
        assert exc_info.value.order_id == 1
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_logs_failure(self, captured_logs):
        dispatcher = NotificationDispatcher(FailingGateway("down"), default_recipient="c@example.com")
        with pytest.raises(NotificationDeliveryError):
            dispatcher.notify(SimpleNamespace(id=4))
        failures = [r for r in captured_logs() if r["message"] == "notification_send_failed"]
        assert failures[0]["gateway_error"] == "down"


class TestHttpNotificationGateway:
    def _client(self, handler) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    def test_posts_utf8_json(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers["content-type"]
            seen["body"] = request.content
            return httpx.Response(202)

        gateway = HttpNotificationGateway("http://mail.test/send", client=self._client(handler))
        dispatcher = NotificationDispatcher(gateway, default_recipient="zoë@example.com")
        dispatcher.notify(SimpleNamespace(id=1))

        assert seen["method"] == "POST"
        assert seen["url"] == "http://mail.test/send"
        assert seen["content_type"] == "application/json; charset=utf-8"
        payload = json.loads(seen["body"].decode("utf-8"))
        assert payload == {
            "to": "zoë@example.com",
            "subject": "Order Confirmation - Order #1",
            "body": EXPECTED_BODY,
        }
        assert "zoë".encode("utf-8") in seen["body"]

    def test_error_status_becomes_delivery_error(self):
        gateway = HttpNotificationGateway(
            "http://mail.test/send",
            client=self._client(lambda request: httpx.Response(503)),
        )
        dispatcher = NotificationDispatcher(gateway, default_recipient="c@example.com")
        with pytest.raises(NotificationDeliveryError) as exc_info:
            dispatcher.notify(SimpleNamespace(id=1))
        assert "503" in exc_info.value.detail

    def test_transport_error_becomes_delivery_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        gateway = HttpNotificationGateway("http://mail.test/send", client=self._client(handler))
        dispatcher = NotificationDispatcher(gateway, default_recipient="c@example.com")
        with pytest.raises(NotificationDeliveryError, match="connection refused"):
            dispatcher.notify(SimpleNamespace(id=1))


class TestRecordingGateway:
    def test_starts_empty(self):
        gateway = RecordingNotificationGateway()
        assert gateway.messages == []
        assert gateway.last is None
