"""
Inventory Persistence

The gateway interface the ingest pipeline writes through, a JSON file backed
implementation of it, and the per-document ingest report.

Entity upserts are keyed on natural keys (supplier and manufacturer name,
customer number, PO number) so re-importing a document never duplicates them.
Parts are always inserted.
"""

import json
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Any, Optional, Union

from ingest_pipeline import PipelineResult

logger = logging.getLogger(__name__)

STORE_TABLES = ("suppliers", "manufacturers", "customers", "purchase_orders", "parts", "po_line_items")


class StoreError(RuntimeError):
    """Raised when the inventory store cannot be read or written."""


@dataclass
class IngestReport:
    """Outcome of persisting one document (or a combination of several)."""
    source: str = ""
    parts_inserted: int = 0
    parts_updated: int = 0
    pos_created: int = 0
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "partsInserted": self.parts_inserted,
            "partsUpdated": self.parts_updated,
            "posCreated": self.pos_created,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }


class InventoryGateway(ABC):
    """Write interface to the inventory database. Every method returns a record id."""

    @abstractmethod
    def upsert_supplier(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def upsert_manufacturer(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def upsert_customer(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def upsert_purchase_order(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def insert_part(self, record: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def insert_po_line_item(self, record: Dict[str, Any]) -> str:
        ...


class JsonInventoryStore(InventoryGateway):
    """
    Inventory store held in memory and saved to a JSON file.

    All operations take a lock, so one store can be shared by batch worker
    threads. Without a path the store is memory-only.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._lock = threading.RLock()
        self._tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in STORE_TABLES}

        if self.path and self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as e:
            raise StoreError(f"Failed to read/parse inventory store: {self.path}") from e

        if not isinstance(raw, dict):
            raise StoreError(f"Invalid store format in {self.path}. Expected a JSON object")

        for name in STORE_TABLES:
            rows = raw.get(name, [])
            if not isinstance(rows, list):
                raise StoreError(f"Invalid '{name}' table in {self.path}")
            self._tables[name] = rows

        logger.info(f"Loaded inventory store from {self.path}")

    def save(self) -> None:
        """Persist the store (write-temp-then-replace). No-op for memory-only stores."""
        if not self.path:
            return

        with self._lock:
            payload = json.dumps(self._tables, ensure_ascii=False, indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)
        logger.info(f"Saved inventory store to {self.path}")

    def rows(self, table: str) -> List[Dict[str, Any]]:
        """Return a copy of a table's rows."""
        with self._lock:
            return [dict(row) for row in self._tables[table]]

    def _upsert(self, table: str, key: str, record: Dict[str, Any]) -> str:
        key_value = record.get(key)
        if not key_value:
            raise StoreError(f"{table} record is missing its '{key}' key")

        with self._lock:
            for row in self._tables[table]:
                if row.get(key) == key_value:
                    row.update(record)
                    return row["id"]

            row = dict(record, id=str(uuid.uuid4()))
            self._tables[table].append(row)
            return row["id"]

    def _insert(self, table: str, record: Dict[str, Any]) -> str:
        with self._lock:
            row = dict(record, id=str(uuid.uuid4()))
            self._tables[table].append(row)
            return row["id"]

    def upsert_supplier(self, record: Dict[str, Any]) -> str:
        return self._upsert("suppliers", "name", record)

    def upsert_manufacturer(self, record: Dict[str, Any]) -> str:
        return self._upsert("manufacturers", "name", record)

    def upsert_customer(self, record: Dict[str, Any]) -> str:
        return self._upsert("customers", "customer_number", record)

    def upsert_purchase_order(self, record: Dict[str, Any]) -> str:
        return self._upsert("purchase_orders", "po_number", record)

    def insert_part(self, record: Dict[str, Any]) -> str:
        if not record.get("part"):
            raise StoreError("part record is missing its part code")
        return self._insert("parts", record)

    def insert_po_line_item(self, record: Dict[str, Any]) -> str:
        return self._insert("po_line_items", record)


def persist_pipeline_result(result: PipelineResult, gateway: InventoryGateway, source: str = "") -> IngestReport:
    """
    Write one document's pipeline output through the gateway.

    Entities are upserted first, then the purchase order (when the document has a
    PO number), then each part with its PO line item. A failure on any single
    record becomes a report warning and the remaining records are still written.

    Args:
        result: Pipeline output for one document
        gateway: Inventory write interface
        source: Document path or name, recorded on the report and PO notes

    Returns:
        IngestReport for the document
    """
    report = IngestReport(source=source, warnings=list(result.warnings))
    document = result.document
    entities = result.entities

    supplier_id = None
    manufacturer_id = None
    customer_id = None

    if entities.suppliers:
        try:
            supplier_id = gateway.upsert_supplier(entities.suppliers[0].to_record())
        except Exception as e:
            report.warnings.append(f"Failed to upsert supplier: {e}")

    if entities.manufacturers:
        try:
            manufacturer_id = gateway.upsert_manufacturer(entities.manufacturers[0].to_record())
        except Exception as e:
            report.warnings.append(f"Failed to upsert manufacturer: {e}")

    if entities.customers:
        try:
            customer_id = gateway.upsert_customer(entities.customers[0].to_record())
        except Exception as e:
            report.warnings.append(f"Failed to upsert customer: {e}")

    purchase_order_id = None
    if document.po_number:
        try:
            purchase_order_id = gateway.upsert_purchase_order({
                "po_number": document.po_number,
                "supplier_id": supplier_id,
                "customer_id": customer_id,
                "order_date": document.order_date,
                "currency": document.currency.value,
                "notes": f"Imported from document: {source}",
            })
            report.pos_created = 1
        except Exception as e:
            report.warnings.append(f"Failed to create/update PO: {e}")

    for part in result.parts:
        record = part.to_record()
        record["sup"] = supplier_id
        record["mfg"] = manufacturer_id
        try:
            part_id = gateway.insert_part(record)
        except Exception as e:
            report.warnings.append(f"Failed to insert part {part.part_number}: {e}")
            continue
        report.parts_inserted += 1

        if not purchase_order_id:
            continue
        try:
            gateway.insert_po_line_item({
                "purchase_order_id": purchase_order_id,
                "part_id": part_id,
                "quantity": part.quantity,
                "unit_price": part.each,
                "currency": part.currency.value,
            })
        except Exception as e:
            report.warnings.append(f"Error processing line item {part.part_number}: {e}")

    if len(report.warnings) > len(result.warnings):
        logger.warning(f"{source or 'document'}: {len(report.warnings) - len(result.warnings)} record(s) failed to persist")

    return report
