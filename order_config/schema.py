"""
Configuration Schema (``order_config.schema``).

Frozen dataclasses describing the runtime configuration of the order
kernel.  Instances are produced by ``order_config.loader`` and are never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class NotificationConfig:
    """Where confirmation messages go and what they say."""

    gateway_url: str | None = None
    timeout_seconds: float = 10.0
    default_recipient: str = "customer@example.com"
    signature: str = "Warehouse Team"


@dataclass(frozen=True)
class AuditConfig:
    directory: Path = Path("audit")
    enabled: bool = True


@dataclass(frozen=True)
class ClockConfig:
    """IANA zone in which processing reads the wall clock."""

    timezone: str = "UTC"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class OrderKernelConfig:
    """Complete runtime configuration."""

    database: DatabaseConfig
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    source: str = "<defaults>"
