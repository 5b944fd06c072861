"""
Typed Exception Hierarchy for the Order Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the processing pipeline branch on the kind of failure: an unknown
order and an empty shelf are client errors, a broken notification gateway is
a server error, and a failed audit write is only worth a log line.  Branching
on message text is fragile, so every error has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. Structured DATA as attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    OrderKernelError (base)
    |
    +-- OrderError
    |   +-- OrderNotFoundError
    |   +-- OrderAlreadyProcessedError
    |
    +-- CatalogError
    |   +-- ProductNotFoundError
    |
    +-- InventoryError
    |   +-- InsufficientStockError
    |
    +-- NotificationError
    |   +-- NotificationDeliveryError
    |
    +-- AuditError
    |   +-- AuditWriteError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                         | When Raised
----------------|------------------------------|--------------------------------------
Order           | ORDER_NOT_FOUND              | Order ID doesn't resolve in the store
                | ORDER_ALREADY_PROCESSED      | Order is already in Processed state
----------------|------------------------------|--------------------------------------
Catalog         | PRODUCT_NOT_FOUND            | Order references a missing product
----------------|------------------------------|--------------------------------------
Inventory       | INSUFFICIENT_STOCK           | Requested quantity exceeds stock
----------------|------------------------------|--------------------------------------
Notification    | NOTIFICATION_DELIVERY_FAILED | Gateway raised a transport error
----------------|------------------------------|--------------------------------------
Audit           | AUDIT_WRITE_FAILED           | Snapshot file could not be written
----------------|------------------------------|--------------------------------------
Configuration   | CONFIGURATION_ERROR          | Config file missing keys / malformed

===============================================================================
HANDLING PATTERNS
===============================================================================

1. BUSINESS OUTCOMES ARE RECOVERED LOCALLY:

    try:
        ledger.reserve(product_id, quantity)
    except InsufficientStockError as e:
        return ProcessingFailure.insufficient_stock(order_id)

2. DOWNSTREAM FAULTS KEEP THEIR UNDERLYING TEXT:

    except NotificationDeliveryError as e:
        return ProcessingFailure.notification_failure(order_id, e.detail)

3. AUDIT ERRORS ARE OBSERVED, NOT PROPAGATED:

    except AuditWriteError as e:
        logger.warning("audit_export_failed", exc_info=True)

===============================================================================
"""


class OrderKernelError(Exception):
    """
    Base exception for all order kernel errors.

    All subclasses must have a `code` class attribute
    for machine-readable error identification.
    """

    code: str = "ORDER_KERNEL_ERROR"


# Order-related exceptions


class OrderError(OrderKernelError):
    """Base exception for order-related errors."""

    code: str = "ORDER_ERROR"


class OrderNotFoundError(OrderError):
    """Order with given ID was not found."""

    code: str = "ORDER_NOT_FOUND"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class OrderAlreadyProcessedError(OrderError):
    """Order has already completed processing."""

    code: str = "ORDER_ALREADY_PROCESSED"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order already processed: {order_id}")


# Catalog-related exceptions


class CatalogError(OrderKernelError):
    """Base exception for product catalog errors."""

    code: str = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """
    Order references a product that does not exist.

    Orders are created by an external intake process, so this indicates a
    data-integrity fault rather than a client mistake.
    """

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


# Inventory-related exceptions


class InventoryError(OrderKernelError):
    """Base exception for inventory errors."""

    code: str = "INVENTORY_ERROR"


class InsufficientStockError(InventoryError):
    """Requested quantity exceeds the available stock for a product."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )


# Notification-related exceptions


class NotificationError(OrderKernelError):
    """Base exception for notification errors."""

    code: str = "NOTIFICATION_ERROR"


class NotificationDeliveryError(NotificationError):
    """
    The notification gateway failed to accept a message.

    ``detail`` carries the gateway's own error text verbatim so callers can
    surface it.
    """

    code: str = "NOTIFICATION_DELIVERY_FAILED"

    def __init__(self, order_id: int, detail: str):
        self.order_id = order_id
        self.detail = detail
        super().__init__(detail)


# Audit-related exceptions


class AuditError(OrderKernelError):
    """Base exception for audit errors."""

    code: str = "AUDIT_ERROR"


class AuditWriteError(AuditError):
    """The audit snapshot for an order could not be written."""

    code: str = "AUDIT_WRITE_FAILED"

    def __init__(self, order_id: int, path: str, reason: str):
        self.order_id = order_id
        self.path = path
        self.reason = reason
        super().__init__(
            f"Audit snapshot for order {order_id} not written to {path}: {reason}"
        )


# Configuration exceptions


class ConfigurationError(OrderKernelError):
    """Configuration file is missing, malformed or incomplete."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")
