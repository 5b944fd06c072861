"""
Wiring -- assemble the processing pipeline from configuration.

``ProcessingPipeline`` holds the long-lived collaborators (session factory,
notification dispatcher, audit exporter, clock, product lock arena) and
opens one session per ``process()`` call, so it can be shared by every
request worker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session, sessionmaker

from order_config import OrderKernelConfig
from order_kernel.db.engine import get_session_factory, init_engine_from_url
from order_kernel.domain.clock import Clock, SystemClock
from order_kernel.logging_config import configure_logging
from order_kernel.services.audit_exporter import AuditExporter
from order_kernel.services.inventory_ledger import ProductLockArena
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


@dataclass
class ProcessingPipeline:
    session_factory: sessionmaker[Session]
    dispatcher: NotificationDispatcher
    audit_exporter: AuditExporter | None = None
    clock: Clock = field(default_factory=SystemClock)
    lock_arena: ProductLockArena = field(default_factory=ProductLockArena)

    def process(self, order_id: int) -> ProcessingOutcome:
        """Process one order in its own session."""
        session = self.session_factory()
        try:
            orchestrator = OrderProcessingOrchestrator(
                session,
                dispatcher=self.dispatcher,
                audit_exporter=self.audit_exporter,
                clock=self.clock,
                lock_arena=self.lock_arena,
            )
            return orchestrator.process(order_id)
        finally:
            session.close()


def build_gateway(config: OrderKernelConfig) -> NotificationGateway:
    """HTTP gateway when a URL is configured, otherwise an in-memory one."""
    settings = config.notifications
    if settings.gateway_url:
        return HttpNotificationGateway(settings.gateway_url, timeout=settings.timeout_seconds)
    return RecordingNotificationGateway()


def build_pipeline(
    config: OrderKernelConfig,
    gateway: NotificationGateway | None = None,
    clock: Clock | None = None,
) -> ProcessingPipeline:
    """
    Initialize logging and the engine from ``config`` and wire a pipeline.

    Args:
        config: Active configuration.
        gateway: Overrides the configured notification gateway.
        clock: Overrides the system clock, which otherwise reads in
            ``config.clock.timezone``.
    """
    configure_logging(level=config.logging.level)
    init_engine_from_url(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )
    dispatcher = NotificationDispatcher(
        gateway if gateway is not None else build_gateway(config),
        default_recipient=config.notifications.default_recipient,
        signature=config.notifications.signature,
    )
    return ProcessingPipeline(
        session_factory=get_session_factory(),
        dispatcher=dispatcher,
        audit_exporter=AuditExporter(config.audit.directory) if config.audit.enabled else None,
        clock=clock if clock is not None else SystemClock(ZoneInfo(config.clock.timezone)),
    )
