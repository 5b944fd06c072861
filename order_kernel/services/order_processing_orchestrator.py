"""
Order Processing Orchestrator - Coordinates the processing pipeline.

The Orchestrator ties together:
- PriorityScorer: urgency of the order (pure)
- InventoryLedger: atomic stock reservation
- PricingCalculator / DeliveryEstimator: cost and lead time (pure)
- NotificationDispatcher: customer confirmation
- AuditExporter: XML snapshot

State machine (one call, one order):

    New/Failed --> Processing --> Processed
                        |
                        +--> Failed (insufficient stock)

Transaction boundaries:
1. The stock reservation and the Processing state (with priority, cost and
   delivery estimate) commit together, under the product's lock.
   Insufficient stock rolls both back and commits Failed instead.
2. Processed commits after the notification is accepted.  A notification
   failure leaves the order in Processing with stock already decremented;
   a retry skips the reservation because stock_reserved_at is set.
3. The audit snapshot is written after the final commit; a failed write is
   logged and does not change the outcome.

Validation outcomes (unknown order, already processed, insufficient stock)
come back as ProcessingFailure values.  Anything unexpected is rolled back,
logged and re-raised.
"""

import time
from uuid import uuid4

from sqlalchemy.orm import Session

from order_kernel.domain.clock import Clock, SystemClock
from order_kernel.domain.delivery_estimator import DeliveryEstimator
from order_kernel.domain.dtos import (
    OrderSnapshot,
    OrderStatus,
    ProcessingFailure,
    ProcessingResult,
)
from order_kernel.domain.pricing import PricingCalculator
from order_kernel.domain.priority_scorer import PriorityScorer
from order_kernel.exceptions import (
    AuditWriteError,
    InsufficientStockError,
    NotificationDeliveryError,
    OrderAlreadyProcessedError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from order_kernel.logging_config import LogContext, get_logger
from order_kernel.models.order import Order
from order_kernel.services.audit_exporter import AuditExporter
from order_kernel.services.inventory_ledger import InventoryLedger, ProductLockArena
from order_kernel.services.notification_dispatcher import NotificationDispatcher
from order_kernel.services.order_store import OrderStore

logger = get_logger("services.order_processing_orchestrator")

ProcessingOutcome = ProcessingResult | ProcessingFailure


class OrderProcessingOrchestrator:
    """
    Orchestrates processing of a single order.

    Defines its own transaction boundaries on the session it is given; the
    session should not be shared with another unit of work.
    """

    def __init__(
        self,
        session: Session,
        dispatcher: NotificationDispatcher,
        audit_exporter: AuditExporter | None = None,
        clock: Clock | None = None,
        lock_arena: ProductLockArena | None = None,
    ):
        """
        Args:
            session: SQLAlchemy session for this unit of work.
            dispatcher: Sends the confirmation message.
            audit_exporter: Writes the XML snapshot; None disables export.
            clock: Time source for scoring, estimation and stock stamps.
                Defaults to SystemClock.
            lock_arena: Shared per-product locks.  Pass the same arena to
                every orchestrator that may touch the same products.
        """
        self._session = session
        self._clock = clock if clock is not None else SystemClock()
        self._store = OrderStore(session)
        self._ledger = InventoryLedger(session, self._clock, lock_arena)
        self._scorer = PriorityScorer()
        self._pricing = PricingCalculator()
        self._estimator = DeliveryEstimator()
        self._dispatcher = dispatcher
        self._audit_exporter = audit_exporter

    def process(self, order_id: int) -> ProcessingOutcome:
        """
        Process an order by identifier.

        Returns:
            ProcessingResult on success, ProcessingFailure for a classified
            failure.

        Raises:
            ProductNotFoundError: If the order references a missing product.
            Any database error, after rollback.
        """
        with LogContext.bind(
            correlation_id=str(uuid4()),
            order_id=str(order_id),
        ):
            logger.info("order_processing_started")
            t0 = time.monotonic()
            try:
                outcome = self._do_process(order_id)
            except Exception:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                self._session.rollback()
                logger.error(
                    "order_processing_failed",
                    extra={"duration_ms": duration_ms},
                    exc_info=True,
                )
                raise

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info(
                "order_processing_completed",
                extra={
                    "outcome": "processed" if outcome.is_success else outcome.kind.value,
                    "duration_ms": duration_ms,
                },
            )
            return outcome

    def _do_process(self, order_id: int) -> ProcessingOutcome:
        try:
            return self._run(order_id)
        except OrderNotFoundError:
            logger.warning("order_not_found")
            return ProcessingFailure.order_not_found(order_id)
        except OrderAlreadyProcessedError:
            logger.warning("order_already_processed")
            return ProcessingFailure.already_processed(order_id)

    @staticmethod
    def _ensure_processable(order: Order | None, order_id: int) -> Order:
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.is_processed:
            raise OrderAlreadyProcessedError(order_id)
        return order

    def _run(self, order_id: int) -> ProcessingOutcome:
        """Pipeline body; commits at the documented boundaries."""
        order = self._ensure_processable(self._store.get_order(order_id), order_id)

        product = self._store.get_product(order.product_id)
        if product is None:
            raise ProductNotFoundError(order.product_id)

        now = self._clock.now()
        priority = self._scorer.score(order.quantity, order.delivery, now)

        with LogContext.bind(product_id=str(product.id)):
            with self._ledger.reservation(product.id):
                # Another worker may have finished or reserved this order
                # while we waited for the lock.
                self._ensure_processable(self._store.reload_order(order), order_id)
                if not self._store.claim_for_processing(order):
                    self._session.rollback()
                    raise OrderAlreadyProcessedError(order_id)

                reserved_at = order.stock_reserved_at
                if not order.has_reserved_stock:
                    try:
                        reserved_at = self._ledger.reserve(product.id, order.quantity).reserved_at
                    except InsufficientStockError as exc:
                        self._session.rollback()
                        self._store.update_order_state(
                            order, OrderStatus.FAILED, failure_reason=str(exc),
                        )
                        self._session.commit()
                        return ProcessingFailure.insufficient_stock(order.id, str(exc))
                else:
                    logger.info(
                        "stock_reservation_reused",
                        extra={"stock_reserved_at": reserved_at},
                    )

                cost = self._pricing.total_cost(product.price, order.quantity)
                estimated = self._estimator.estimate(order.delivery, priority, now)
                self._store.update_order_state(
                    order,
                    OrderStatus.PROCESSING,
                    priority=priority,
                    total_cost=cost,
                    ordered_at=now,
                    estimated_delivery_date=estimated,
                    stock_reserved_at=reserved_at,
                    failure_reason=None,
                )
                self._session.commit()

            logger.info(
                "order_priced",
                extra={
                    "priority": priority,
                    "total_cost": cost,
                    "estimated_delivery_date": estimated,
                },
            )

            try:
                self._dispatcher.notify(order, order.customer_email)
            except NotificationDeliveryError as exc:
                logger.error(
                    "order_notification_failed",
                    extra={"gateway_error": exc.detail},
                )
                return ProcessingFailure.notification_failure(order.id, exc.detail)

            self._store.update_order_state(order, OrderStatus.PROCESSED)
            self._session.commit()

            self._export_audit(OrderSnapshot.from_model(order, product))

        return ProcessingResult(
            order_id=order.id,
            total_cost=cost,
            estimated_delivery_date=estimated,
            delivery_type=order.delivery,
        )

    def _export_audit(self, snapshot: OrderSnapshot) -> None:
        if self._audit_exporter is None:
            return
        try:
            self._audit_exporter.export(snapshot)
        except AuditWriteError:
            logger.warning("audit_export_failed", exc_info=True)
