"""
order_config -- single public entrypoint for runtime configuration.

Responsibility:
    ``get_active_config()`` is the only way scripts and the HTTP app obtain
    configuration.  It reads a YAML file (the packaged
    ``sets/default.yaml`` unless a path or ``ORDER_KERNEL_CONFIG`` is
    given), applies ``ORDER_KERNEL_*`` environment overrides, and returns a
    frozen ``OrderKernelConfig``.

Architecture position:
    Configuration sits above ``order_kernel``.  The kernel never imports
    from ``order_config``; wiring code passes plain values in.

Audit relevance:
    Every successful load emits a ``config_loaded`` log entry naming the
    source file, database dialect and audit directory.
"""

from __future__ import annotations

import os
from pathlib import Path

from order_config.loader import load_config
from order_config.schema import (
    AuditConfig,
    ClockConfig,
    DatabaseConfig,
    LoggingConfig,
    NotificationConfig,
    OrderKernelConfig,
)
from order_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> OrderKernelConfig:
    """
    Load the active configuration.

    Args:
        path: Explicit YAML file.  Falls back to ``ORDER_KERNEL_CONFIG`` and
            then to the packaged default.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    if path is None:
        path = os.environ.get("ORDER_KERNEL_CONFIG") or DEFAULT_CONFIG_PATH
    config = load_config(Path(path))
    _logger.info(
        "config_loaded",
        extra={
            "source": config.source,
            "database_dialect": config.database.url.split(":", 1)[0],
            "audit_directory": str(config.audit.directory),
            "audit_enabled": config.audit.enabled,
            "notification_gateway": config.notifications.gateway_url,
        },
    )
    return config


__all__ = [
    "AuditConfig",
    "ClockConfig",
    "DEFAULT_CONFIG_PATH",
    "DatabaseConfig",
    "LoggingConfig",
    "NotificationConfig",
    "OrderKernelConfig",
    "get_active_config",
]
