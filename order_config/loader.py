"""
Configuration Loader (``order_config.loader``).

Responsibility
--------------
Loads a YAML configuration file, parses it into the frozen dataclasses of
``order_config.schema`` and applies environment-variable overrides.

Failure modes
-------------
* Missing YAML file  -> ``ConfigurationError``.
* Malformed YAML  -> ``ConfigurationError`` chained from ``yaml.YAMLError``.
* Missing ``database.url`` or wrongly-typed values  -> ``ConfigurationError``.
* Unknown ``clock.timezone``  -> ``ConfigurationError``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from order_config.schema import (
    AuditConfig,
    ClockConfig,
    DatabaseConfig,
    LoggingConfig,
    NotificationConfig,
    OrderKernelConfig,
)
from order_kernel.exceptions import ConfigurationError

# environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "ORDER_KERNEL_DATABASE_URL": ("database", "url"),
    "ORDER_KERNEL_AUDIT_DIR": ("audit", "directory"),
    "ORDER_KERNEL_NOTIFICATION_URL": ("notifications", "gateway_url"),
    "ORDER_KERNEL_LOG_LEVEL": ("logging", "level"),
    "ORDER_KERNEL_TIMEZONE": ("clock", "timezone"),
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, not valid
            YAML, or its top level is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(str(path), "file not found") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def _section(data: Mapping[str, Any], name: str, source: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(source, f"'{name}' must be a mapping")
    return dict(value)


def apply_env_overrides(
    data: dict[str, Any],
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return a copy of ``data`` with ENV_OVERRIDES applied."""
    environ = os.environ if environ is None else environ
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in data.items()}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            target = merged.get(section)
            if not isinstance(target, dict):
                target = merged[section] = {}
            target[key] = value
    return merged


def parse_config(data: Mapping[str, Any], source: str = "<dict>") -> OrderKernelConfig:
    """
    Build an OrderKernelConfig from a plain mapping.

    Raises:
        ConfigurationError: on missing required keys or bad value types.
    """
    database = _section(data, "database", source)
    if not database.get("url"):
        raise ConfigurationError(source, "database.url is required")

    notifications = _section(data, "notifications", source)
    audit = _section(data, "audit", source)
    logging_section = _section(data, "logging", source)
    clock = _section(data, "clock", source)

    try:
        config = OrderKernelConfig(
            database=DatabaseConfig(
                url=str(database["url"]),
                echo=bool(database.get("echo", False)),
                pool_size=int(database.get("pool_size", 20)),
                max_overflow=int(database.get("max_overflow", 10)),
            ),
            notifications=NotificationConfig(
                gateway_url=notifications.get("gateway_url") or None,
                timeout_seconds=float(notifications.get("timeout_seconds", 10.0)),
                default_recipient=str(
                    notifications.get("default_recipient", "customer@example.com")
                ),
                signature=str(notifications.get("signature", "Warehouse Team")),
            ),
            audit=AuditConfig(
                directory=Path(audit.get("directory", "audit")),
                enabled=bool(audit.get("enabled", True)),
            ),
            logging=LoggingConfig(
                level=str(logging_section.get("level", "INFO")).upper(),
            ),
            clock=ClockConfig(
                timezone=str(clock.get("timezone", "UTC")),
            ),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(source, str(exc)) from exc

    try:
        ZoneInfo(config.clock.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            source, f"unknown clock.timezone {config.clock.timezone!r}"
        ) from exc

    return replace(config, source=source)


def load_config(
    path: Path,
    environ: Mapping[str, str] | None = None,
) -> OrderKernelConfig:
    """Load ``path``, apply environment overrides and parse."""
    data = apply_env_overrides(load_yaml_file(path), environ)
    return parse_config(data, source=str(path))
