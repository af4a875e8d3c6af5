"""
Entity Resolver

Turns document header fields into supplier, manufacturer and customer upsert
candidates, each carrying a provenance note with the import timestamp.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from document_schema import (
    CustomerCandidate, EntityCandidates, ManufacturerCandidate, ParsedDocument, SupplierCandidate
)

logger = logging.getLogger(__name__)


def provenance_note(imported_at: Optional[datetime] = None) -> str:
    timestamp = (imported_at or datetime.now(timezone.utc)).isoformat()
    return f"Auto-created from document import on {timestamp}"


def resolve_entities(header: ParsedDocument, imported_at: Optional[datetime] = None) -> EntityCandidates:
    """
    Build entity upsert candidates from a parsed header.

    A manufacturer identical to the supplier (exact string match) is not emitted
    separately. Customers are named after their customer number.

    Args:
        header: Parsed document header
        imported_at: Import timestamp for provenance notes, defaults to the current UTC time

    Returns:
        EntityCandidates with at most one entry per entity kind
    """
    notes = provenance_note(imported_at)
    candidates = EntityCandidates()

    if header.supplier_name:
        candidates.suppliers.append(SupplierCandidate(name=header.supplier_name, notes=notes))

    if header.manufacturer_name and header.manufacturer_name != header.supplier_name:
        candidates.manufacturers.append(ManufacturerCandidate(name=header.manufacturer_name, notes=notes))

    if header.customer_number:
        candidates.customers.append(CustomerCandidate(
            customer_number=header.customer_number,
            name=f"Customer {header.customer_number}",
            notes=notes,
        ))

    logger.debug(
        f"Resolved {len(candidates.suppliers)} supplier(s), {len(candidates.manufacturers)} "
        f"manufacturer(s), {len(candidates.customers)} customer(s)"
    )
    return candidates
