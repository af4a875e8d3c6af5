"""
Document Ingest Schema

Data types shared by the ingest pipeline: the parsed document and its line items,
the entity upsert candidates derived from the header, and the part records handed
to the inventory store.
"""

import json
from dataclasses import dataclass, field, asdict
from enum import Enum, IntEnum
from typing import Dict, List, Any, Optional

from category_classifier import CategoryCode, DEFAULT_CATEGORY


class Currency(str, Enum):
    """Document currency codes."""
    CAD = "C"
    USD = "U"


DEFAULT_CURRENCY = Currency.CAD


class StatusCode(IntEnum):
    """Part lifecycle status codes."""
    UNKNOWN = 0
    QUOTED = 1
    ORDERED = 2
    SHIPPED = 3
    RECEIVED = 4
    INSTALLED = 5
    BACKORDER = 6
    CANCELLED = 7
    RETURNED = 8
    ARCHIVED = 9


def _json_safe(value: Any) -> Any:
    """Render enums as their codes, recursively."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


@dataclass(frozen=True)
class ParsedLineItem:
    """One extracted row of a document."""
    part_number: Optional[str] = None
    description: Optional[str] = None
    quantity: int = 0
    unit_price: float = 0.0
    currency: Currency = DEFAULT_CURRENCY
    category: CategoryCode = DEFAULT_CATEGORY
    project: Optional[str] = None
    drawing: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _json_safe(asdict(self))


@dataclass
class ParsedDocument:
    """Header fields and line items extracted from one document's text."""
    po_number: Optional[str] = None
    customer_number: Optional[str] = None
    supplier_name: Optional[str] = None
    manufacturer_name: Optional[str] = None
    order_date: Optional[str] = None
    project: Optional[str] = None
    drawing: Optional[str] = None
    currency: Currency = DEFAULT_CURRENCY
    line_items: List[ParsedLineItem] = field(default_factory=list)
    raw_text: str = ""

    def to_dict(self, include_raw_text: bool = False) -> Dict[str, Any]:
        data = _json_safe(asdict(self))
        if not include_raw_text:
            data.pop("raw_text", None)
        return data


@dataclass(frozen=True)
class SupplierCandidate:
    name: str
    notes: str

    @property
    def natural_key(self) -> str:
        return self.name

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, "notes": self.notes}


@dataclass(frozen=True)
class ManufacturerCandidate:
    name: str
    notes: str

    @property
    def natural_key(self) -> str:
        return self.name

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, "notes": self.notes}


@dataclass(frozen=True)
class CustomerCandidate:
    customer_number: str
    name: str
    notes: str

    @property
    def natural_key(self) -> str:
        return self.customer_number

    def to_record(self) -> Dict[str, Any]:
        return {"customer_number": self.customer_number, "name": self.name, "notes": self.notes}


@dataclass
class EntityCandidates:
    """Supplier, manufacturer and customer upserts derived from a document header."""
    suppliers: List[SupplierCandidate] = field(default_factory=list)
    manufacturers: List[ManufacturerCandidate] = field(default_factory=list)
    customers: List[CustomerCandidate] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.suppliers or self.manufacturers or self.customers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suppliers": [candidate.to_record() for candidate in self.suppliers],
            "manufacturers": [candidate.to_record() for candidate in self.manufacturers],
            "customers": [candidate.to_record() for candidate in self.customers],
        }


@dataclass
class PartInsertCandidate:
    """A database-ready part record built from one line item."""
    category: CategoryCode
    part: str
    description: Optional[str]
    quantity: int
    purchase_order: Optional[str]
    project: Optional[str]
    each: float
    currency: Currency
    part_number: Optional[str]
    drawing: Optional[str]
    order_date: Optional[str]
    status: StatusCode
    note: str

    def to_record(self) -> Dict[str, Any]:
        """
        Convert to the inventory column layout.

        Returns:
            Dictionary keyed by the inventory's short column names
        """
        return {
            "c": self.category.value,
            "part": self.part,
            "desc": self.description,
            "qty": self.quantity,
            "po": self.purchase_order,
            "proj": self.project,
            "each": self.each,
            "d": self.currency.value,
            "pn": self.part_number,
            "dwg": self.drawing,
            "ord": self.order_date,
            "s": int(self.status),
            "n": self.note,
        }

    def to_dict(self) -> Dict[str, Any]:
        return _json_safe(asdict(self))


def to_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Serialize a schema dictionary to JSON."""
    return json.dumps(_json_safe(data), indent=indent, ensure_ascii=False)
