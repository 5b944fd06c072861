"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that flow through the processing
    pipeline: the DeliveryType and OrderStatus enumerations, the success
    payload (ProcessingResult), the classified failure (ProcessingFailure),
    the confirmation message (NotificationMessage) and the audit snapshot
    (OrderSnapshot).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from the
    service layer.

Data flow:
    Order (ORM) -> OrderSnapshot -> ProcessingResult / XML snapshot
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from order_kernel.models.order import Order as OrderModel
    from order_kernel.models.product import Product as ProductModel


class DeliveryType(str, Enum):
    """
    Closed set of delivery options.

    Urgency ordering SameDay > Express > Standard is enforced by the
    priority rule table, not by enum order.
    """

    STANDARD = "Standard"
    EXPRESS = "Express"
    SAME_DAY = "SameDay"


class OrderStatus(str, Enum):
    """Lifecycle status of an order.

    Contract: NEW -> PROCESSING -> PROCESSED on success,
    NEW -> PROCESSING -> FAILED when stock is short.  FAILED orders may be
    processed again; PROCESSED orders may not.
    """

    NEW = "New"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    FAILED = "Failed"


class FailureKind(str, Enum):
    """Tagged reason carried by a ProcessingFailure."""

    ORDER_NOT_FOUND = "order-not-found"
    INSUFFICIENT_STOCK = "insufficient-stock"
    NOTIFICATION_FAILURE = "notification-failure"
    ORDER_ALREADY_PROCESSED = "order-already-processed"

    @property
    def is_client_error(self) -> bool:
        """Client errors are expected business outcomes; the rest are server faults."""
        return self is not FailureKind.NOTIFICATION_FAILURE


ORDER_NOT_FOUND_MESSAGE = "Order not found."
INSUFFICIENT_STOCK_MESSAGE = "Insufficient stock to process the order."
ORDER_ALREADY_PROCESSED_MESSAGE = "Order has already been processed."
INTERNAL_ERROR_PREFIX = "Internal server error: "


@dataclass(frozen=True)
class ProcessingResult:
    """Externally visible success payload of one processing call."""

    order_id: int
    total_cost: Decimal
    estimated_delivery_date: datetime
    delivery_type: DeliveryType

    @property
    def is_success(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready payload with the wire field names."""
        return {
            "orderId": self.order_id,
            "totalCost": float(self.total_cost),
            "estimatedDeliveryDate": self.estimated_delivery_date.isoformat(),
            "deliveryType": self.delivery_type.value,
        }


@dataclass(frozen=True)
class ProcessingFailure:
    """
    Externally visible classified failure.

    ``message`` is the human-readable text shown to the caller; ``detail``
    keeps the underlying fault text where there is one.
    """

    kind: FailureKind
    order_id: int
    message: str
    detail: str | None = None

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_client_error(self) -> bool:
        return self.kind.is_client_error

    @classmethod
    def order_not_found(cls, order_id: int) -> ProcessingFailure:
        return cls(FailureKind.ORDER_NOT_FOUND, order_id, ORDER_NOT_FOUND_MESSAGE)

    @classmethod
    def insufficient_stock(cls, order_id: int, detail: str | None = None) -> ProcessingFailure:
        return cls(
            FailureKind.INSUFFICIENT_STOCK,
            order_id,
            INSUFFICIENT_STOCK_MESSAGE,
            detail,
        )

    @classmethod
    def already_processed(cls, order_id: int) -> ProcessingFailure:
        return cls(
            FailureKind.ORDER_ALREADY_PROCESSED,
            order_id,
            ORDER_ALREADY_PROCESSED_MESSAGE,
        )

    @classmethod
    def notification_failure(cls, order_id: int, detail: str) -> ProcessingFailure:
        return cls(
            FailureKind.NOTIFICATION_FAILURE,
            order_id,
            f"{INTERNAL_ERROR_PREFIX}{detail}",
            detail,
        )


@dataclass(frozen=True)
class NotificationMessage:
    """
    Confirmation message handed to the notification gateway.

    Serialized as a JSON object with exactly the keys ``to``, ``subject``
    and ``body``.
    """

    to: str
    subject: str
    body: str

    CONTENT_TYPE = "application/json; charset=utf-8"

    def to_dict(self) -> dict[str, str]:
        return {"to": self.to, "subject": self.subject, "body": self.body}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def encode(self) -> bytes:
        """UTF-8 body bytes matching CONTENT_TYPE."""
        return self.to_json().encode("utf-8")


@dataclass(frozen=True)
class OrderSnapshot:
    """Final state of a processed order, as exported for audit."""

    order_id: int
    product_id: int
    quantity: int
    delivery_type: DeliveryType
    status: OrderStatus
    priority: int | None
    unit_price: Decimal
    total_cost: Decimal | None
    ordered_at: datetime | None
    estimated_delivery_date: datetime | None

    @classmethod
    def from_model(cls, order: OrderModel, product: ProductModel) -> OrderSnapshot:
        return cls(
            order_id=order.id,
            product_id=order.product_id,
            quantity=order.quantity,
            delivery_type=DeliveryType(order.delivery_type),
            status=OrderStatus(order.status),
            priority=order.priority,
            unit_price=product.price,
            total_cost=order.total_cost,
            ordered_at=order.ordered_at,
            estimated_delivery_date=order.estimated_delivery_date,
        )
