"""Services for the order kernel (write side)."""

from order_kernel.services.audit_exporter import AuditExporter
from order_kernel.services.inventory_ledger import (
    InventoryLedger,
    ProductLockArena,
    StockReservation,
)
from order_kernel.services.notification_dispatcher import (
    HttpNotificationGateway,
    NotificationDispatcher,
    NotificationGateway,
    RecordingNotificationGateway,
)
from order_kernel.services.order_processing_orchestrator import (
    OrderProcessingOrchestrator,
    ProcessingOutcome,
)
from order_kernel.services.order_store import OrderStore

__all__ = [
    "AuditExporter",
    "HttpNotificationGateway",
    "InventoryLedger",
    "NotificationDispatcher",
    "NotificationGateway",
    "OrderProcessingOrchestrator",
    "OrderStore",
    "ProcessingOutcome",
    "ProductLockArena",
    "RecordingNotificationGateway",
    "StockReservation",
]
