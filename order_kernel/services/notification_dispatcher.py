"""
NotificationDispatcher -- order confirmation messages.

Responsibility:
    Builds the JSON confirmation message for a processed order and hands it
    to a notification gateway.

Architecture position:
    Kernel > Services.  The gateway is the external collaborator; this
    module owns the message shape and the error translation only.

Failure modes:
    - NotificationDeliveryError wrapping any gateway error, carrying the
      gateway's text verbatim.  No retry or backoff happens here.
"""

import threading
from typing import Any, Protocol

import httpx

from order_kernel.domain.dtos import NotificationMessage
from order_kernel.exceptions import NotificationDeliveryError
from order_kernel.logging_config import get_logger

logger = get_logger("services.notification_dispatcher")

SUBJECT_TEMPLATE = "Order Confirmation - Order #{order_id}"
BODY_TEMPLATE = (
    "Dear Customer,\n\n"
    "Thank you for your order #{order_id}. Your order has been processed "
    "and will be delivered soon.\n\n"
    "Best Regards,\n"
    "{signature}"
)
DEFAULT_SIGNATURE = "Warehouse Team"


class NotificationGateway(Protocol):
    """External gateway; raises on any transport error."""

    def send(self, message: NotificationMessage) -> None:
        ...


class HttpNotificationGateway:
    """
    Posts messages to an HTTP endpoint with httpx.

    The request body is the message JSON encoded as UTF-8 with content type
    ``application/json; charset=utf-8``.  Non-2xx responses raise
    ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, message: NotificationMessage) -> None:
        response = self._client.post(
            self._url,
            content=message.encode(),
            headers={"Content-Type": NotificationMessage.CONTENT_TYPE},
        )
        response.raise_for_status()

    def close(self) -> None:
        self._client.close()


class RecordingNotificationGateway:
    """In-memory gateway that keeps every message it is given."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.messages: list[NotificationMessage] = []

    def send(self, message: NotificationMessage) -> None:
        with self._lock:
            self.messages.append(message)

    @property
    def last(self) -> NotificationMessage | None:
        return self.messages[-1] if self.messages else None


class NotificationDispatcher:
    """
    Builds and sends confirmation messages.

    Args:
        gateway: Where messages go.
        default_recipient: Used when an order has no customer contact.
        signature: Last line of the message body.
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        default_recipient: str,
        signature: str = DEFAULT_SIGNATURE,
    ):
        self._gateway = gateway
        self._default_recipient = default_recipient
        self._signature = signature

    @property
    def gateway(self) -> NotificationGateway:
        return self._gateway

    def build_message(self, order_id: int, customer_contact: str | None = None) -> NotificationMessage:
        return NotificationMessage(
            to=customer_contact or self._default_recipient,
            subject=SUBJECT_TEMPLATE.format(order_id=order_id),
            body=BODY_TEMPLATE.format(order_id=order_id, signature=self._signature),
        )

    def notify(self, order: Any, customer_contact: str | None = None) -> NotificationMessage:
        """
        Send the confirmation for ``order`` (anything with an ``id``).

        Returns:
            The message that was accepted by the gateway.

        Raises:
            NotificationDeliveryError: If the gateway raises.
        """
        message = self.build_message(order.id, customer_contact)
        try:
            self._gateway.send(message)
        except Exception as exc:
            logger.error(
                "notification_send_failed",
                extra={"recipient": message.to, "gateway_error": str(exc)},
            )
            raise NotificationDeliveryError(order.id, str(exc)) from exc

        logger.info(
            "notification_sent",
            extra={"recipient": message.to, "subject": message.subject},
        )
        return message
