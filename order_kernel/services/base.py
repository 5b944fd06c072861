"""
BaseService -- abstract base for kernel services that touch the database.

Responsibility:
    Provides the common constructor and session-handling contract.  Services
    receive a SQLAlchemy ``Session`` and use ``session.flush()`` -- never
    ``session.commit()``.

Invariants enforced:
    Transaction boundaries: services flush within the caller's transaction
    and never commit or roll back themselves.  The processing orchestrator
    (or the test harness) owns commit/rollback, which is what lets a stock
    reservation and an order-state change commit together.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseService(ABC):
    """
    Abstract base class for session-bound kernel services.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
    """

    def __init__(self, session: Session):
        self.session = session
