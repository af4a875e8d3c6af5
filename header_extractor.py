"""
Header Extractor

Pulls document-level fields (PO number, customer, supplier, manufacturer, date,
project, drawing, currency) out of raw document text.
"""

import logging
from typing import Dict, Optional

from document_schema import Currency, DEFAULT_CURRENCY, ParsedDocument
from ocr_patterns import FieldType, extract_first_match

logger = logging.getLogger(__name__)

HEADER_FIELDS: Dict[str, FieldType] = {
    "po_number": FieldType.PO_NUMBER,
    "customer_number": FieldType.CUSTOMER_NUMBER,
    "supplier_name": FieldType.SUPPLIER_NAME,
    "manufacturer_name": FieldType.MANUFACTURER_NAME,
    "order_date": FieldType.ORDER_DATE,
    "project": FieldType.PROJECT,
    "drawing": FieldType.DRAWING,
}


def normalize_currency(token: Optional[str]) -> Currency:
    """Map a currency token to a currency code. Only tokens naming USD are U."""
    if token and "USD" in token.upper():
        return Currency.USD
    return DEFAULT_CURRENCY


def extract_header(raw_text: str) -> ParsedDocument:
    """
    Extract header fields from document text.

    Fields that cannot be found are left as None; the currency falls back to C.

    Args:
        raw_text: Raw document text

    Returns:
        ParsedDocument with header fields populated and no line items
    """
    text = raw_text or ""
    values = {name: extract_first_match(text, field_type) for name, field_type in HEADER_FIELDS.items()}
    currency = normalize_currency(extract_first_match(text, FieldType.CURRENCY))

    found = [name for name, value in values.items() if value]
    logger.debug(f"Header fields found: {', '.join(found) if found else 'none'}; currency {currency.value}")

    return ParsedDocument(currency=currency, line_items=[], raw_text=text, **values)
