"""
AuditExporter -- XML snapshot of a processed order.

Responsibility:
    Writes one ``Order_{id}.xml`` file per processed order into the audit
    directory, for downstream inspection.  Not used for replay.

Architecture position:
    Kernel > Services.  Filesystem I/O only; no database access.

Invariants enforced:
    - File name is a pure function of the order id.
    - Files are written to a temporary sibling and renamed into place, so a
      reader never sees a half-written snapshot.

Failure modes:
    - AuditWriteError on any OSError.  Never retried; the caller decides
      what a failed write means (the orchestrator only logs it).
"""

import os
import xml.etree.ElementTree as ET
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path

from order_kernel.domain.dtos import OrderSnapshot
from order_kernel.exceptions import AuditWriteError
from order_kernel.logging_config import get_logger

logger = get_logger("services.audit_exporter")

# (element name, snapshot attribute) in document order
_FIELDS = (
    ("OrderId", "order_id"),
    ("ProductId", "product_id"),
    ("Quantity", "quantity"),
    ("DeliveryType", "delivery_type"),
    ("Status", "status"),
    ("Priority", "priority"),
    ("UnitPrice", "unit_price"),
    ("TotalCost", "total_cost"),
    ("OrderedAt", "ordered_at"),
    ("EstimatedDeliveryDate", "estimated_delivery_date"),
)


def snapshot_filename(order_id: int) -> str:
    return f"Order_{order_id}.xml"


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return f"{value:f}"
    return str(value)


def build_document(snapshot: OrderSnapshot) -> ET.ElementTree:
    root = ET.Element("Order")
    for tag, attr in _FIELDS:
        ET.SubElement(root, tag).text = _text(getattr(snapshot, attr))
    ET.indent(root)
    return ET.ElementTree(root)


class AuditExporter:
    def __init__(self, directory: Path | str):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, order_id: int) -> Path:
        return self._directory / snapshot_filename(order_id)

    def export(self, snapshot: OrderSnapshot) -> Path:
        """
        Write the snapshot file.

        Returns:
            Path of the written file.

        Raises:
            AuditWriteError: If the directory or file cannot be written.
        """
        path = self.path_for(snapshot.order_id)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            build_document(snapshot).write(tmp_path, encoding="utf-8", xml_declaration=True)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise AuditWriteError(snapshot.order_id, str(path), str(exc)) from exc

        logger.info("audit_snapshot_written", extra={"path": str(path)})
        return path
