"""Database layer - engine, base classes and types."""

from order_kernel.db.base import Base, TrackedBase
from order_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from order_kernel.db.types import Money, round_money

__all__ = [
    "Base",
    "TrackedBase",
    "Money",
    "round_money",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "session_scope",
]
