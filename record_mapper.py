"""
Record Mapper

Converts a parsed document into database-ready part records, one per line item.
"""

import logging
import time
import warnings
from datetime import date, datetime, timezone
from typing import List, Optional

from category_classifier import DEFAULT_CATEGORY
from document_schema import DEFAULT_CURRENCY, ParsedDocument, PartInsertCandidate, StatusCode

logger = logging.getLogger(__name__)

ORDER_DATE_FORMATS = ("%Y/%m/%d", "%m/%d/%Y", "%m/%d/%y")


def normalize_order_date(value: Optional[str]) -> Optional[str]:
    """
    Normalize an order date to YYYY-MM-DD.

    Accepts YYYY-MM-DD, YYYY/MM/DD, MM/DD/YYYY and MM/DD/YY, with either '/' or
    '-' separators.

    Returns:
        ISO date string, or None when the value is absent or unparsable
    """
    if not value:
        return None

    candidate = value.strip().replace('-', '/')
    for date_format in ORDER_DATE_FORMATS:
        try:
            return datetime.strptime(candidate, date_format).date().isoformat()
        except ValueError:
            continue

    logger.debug(f"Unparsable order date: '{value}'")
    return None


def format_date_for_db(value: Optional[str]) -> str:
    """
    Deprecated: use normalize_order_date.

    Unlike normalize_order_date this substitutes today's date when the value
    cannot be parsed.
    """
    warnings.warn(
        "format_date_for_db is deprecated; use normalize_order_date",
        DeprecationWarning,
        stacklevel=2,
    )
    return normalize_order_date(value) or date.today().isoformat()


def map_to_part_records(document: ParsedDocument, imported_at: Optional[datetime] = None) -> List[PartInsertCandidate]:
    """
    Map every line item of a document to a part insert candidate.

    Args:
        document: Parsed document with header fields and line items
        imported_at: Import timestamp for the provenance note, defaults to the current UTC time

    Returns:
        Part insert candidates in line item order
    """
    note = f"Imported from document on {(imported_at or datetime.now(timezone.utc)).isoformat()}"
    order_date = normalize_order_date(document.order_date)

    records: List[PartInsertCandidate] = []
    for item in document.line_items:
        records.append(PartInsertCandidate(
            category=item.category or DEFAULT_CATEGORY,
            part=item.part_number or f"UNKNOWN-{int(time.time() * 1000)}",
            description=item.description,
            quantity=item.quantity or 0,
            purchase_order=document.po_number,
            project=item.project or document.project,
            each=item.unit_price,
            currency=item.currency or DEFAULT_CURRENCY,
            part_number=item.part_number,
            drawing=item.drawing,
            order_date=order_date,
            status=StatusCode.QUOTED,
            note=note,
        ))

    return records
