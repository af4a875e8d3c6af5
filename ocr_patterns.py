"""
OCR Text Pattern Library

Ordered regular-expression rules per semantic field of a purchase order or
quote, plus the tabular row patterns used for line item extraction.

Patterns are compiled once at import and matched case-insensitively. Compiled
patterns carry no cursor state between calls, so every extraction pass scans the
text from the beginning.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

# Free-text values stop at a newline, pipe or semicolon.
_FIELD_END = r"(?=[ \t]*(?:\r?\n|\||;|\Z))"
_IDENTIFIER = r"([A-Z0-9][A-Z0-9\-]*)"
_IDENTIFIER_WITH_DIGIT = r"((?=[A-Z0-9\-]*\d)[A-Z0-9][A-Z0-9\-]*)"
_PART_CODE = r"([A-Z0-9][A-Z0-9\-/._]*)"
_AMOUNT = r"(\d[\d,]*(?:\.\d+)?)"
_DATE = r"(\d{4}[/\-]\d{1,2}[/\-]\d{1,2}|\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})"
_COMPANY = r"([A-Za-z0-9 \t.,&\-']+?)"
_FREE_TEXT = r"([A-Za-z0-9 \t.,\-/()'\"#&+%]+?)"


class FieldType(Enum):
    """Fields recognised by the pattern library."""
    PO_NUMBER = "po_number"
    CUSTOMER_NUMBER = "customer_number"
    SUPPLIER_NAME = "supplier_name"
    MANUFACTURER_NAME = "manufacturer_name"
    PART_NUMBER = "part_number"
    UNIT_PRICE = "unit_price"
    QUANTITY = "quantity"
    DESCRIPTION = "description"
    ORDER_DATE = "order_date"
    CURRENCY = "currency"
    PROJECT = "project"
    DRAWING = "drawing"


@dataclass(frozen=True)
class FieldPattern:
    """A single field rule. Group 1 holds the value."""
    pattern: str
    description: str = ""
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "regex", re.compile(self.pattern, re.IGNORECASE))


@dataclass(frozen=True)
class RowPattern:
    """
    A tabular line item rule.

    Fields are read through named groups (part_number, description, quantity,
    unit_price, and line_number for numbered variants) rather than positions.
    """
    name: str
    pattern: str
    has_line_number: bool = False
    description: str = ""
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "regex", re.compile(self.pattern, re.IGNORECASE | re.MULTILINE))


FIELD_PATTERNS = MappingProxyType({
    FieldType.PO_NUMBER: (
        FieldPattern(r"\bP\.?O\b\.?[ \t]*(?:Number|No\.?|#)?[ \t]*[:#]?[ \t]*" + _IDENTIFIER_WITH_DIGIT,
                     "PO number label"),
        FieldPattern(r"\bPurchase[ \t]*Order[ \t]*(?:Number|No\.?|#)?[ \t]*[:#]?[ \t]*" + _IDENTIFIER_WITH_DIGIT,
                     "Purchase order label"),
        FieldPattern(r"\bOrder[ \t]*(?:Number|No\.?|#)[ \t]*:?[ \t]*" + _IDENTIFIER_WITH_DIGIT,
                     "Order number label"),
        FieldPattern(r"\b(PO-(?=[A-Z0-9\-]*\d)[A-Z0-9\-]*)", "Bare PO reference"),
    ),
    FieldType.CUSTOMER_NUMBER: (
        FieldPattern(r"\bCustomer[ \t]*(?:Number|No\.?|#)[ \t]*:?[ \t]*" + _IDENTIFIER, "Customer number label"),
        FieldPattern(r"\bCust\.?[ \t]*(?:Number|No\.?|#)[ \t]*:?[ \t]*" + _IDENTIFIER, "Cust # label"),
        FieldPattern(r"\bAccount[ \t]*(?:Number|No\.?|#)[ \t]*:?[ \t]*" + _IDENTIFIER, "Account number label"),
    ),
    FieldType.SUPPLIER_NAME: (
        FieldPattern(r"\bSupplier[ \t]*(?:Name)?[ \t]*:?[ \t]*" + _COMPANY + _FIELD_END, "Supplier label"),
        FieldPattern(r"\bVendor[ \t]*(?:Name)?[ \t]*:?[ \t]*" + _COMPANY + _FIELD_END, "Vendor label"),
        FieldPattern(r"\bFrom[ \t]*:[ \t]*" + _COMPANY + _FIELD_END, "From label"),
    ),
    FieldType.MANUFACTURER_NAME: (
        FieldPattern(r"\bManufacturer[ \t]*(?:Name)?[ \t]*:?[ \t]*" + _COMPANY + _FIELD_END, "Manufacturer label"),
        FieldPattern(r"\bMfg\.?[ \t]*:[ \t]*" + _COMPANY + _FIELD_END, "Mfg label"),
        FieldPattern(r"\bBrand[ \t]*:[ \t]*" + _COMPANY + _FIELD_END, "Brand label"),
    ),
    FieldType.PART_NUMBER: (
        FieldPattern(r"\bPart[ \t]*(?:Number|No\.?)?[ \t]*(?:#[ \t]*:?|:)[ \t]*" + _PART_CODE, "Part # label"),
        FieldPattern(r"\bP/?N[ \t]*[:#][ \t]*" + _PART_CODE, "PN label"),
        FieldPattern(r"\bItem[ \t]*(?:Number|No\.?|#)?[ \t]*:[ \t]*" + _PART_CODE, "Item label"),
        FieldPattern(r"\bModel[ \t]*(?:Number|No\.?|#)?[ \t]*:[ \t]*" + _PART_CODE, "Model label"),
    ),
    FieldType.UNIT_PRICE: (
        FieldPattern(r"\bUnit[ \t]*Price[ \t]*:?[ \t]*\$?[ \t]*" + _AMOUNT, "Unit price label"),
        FieldPattern(r"\bEach[ \t]*:?[ \t]*\$?[ \t]*" + _AMOUNT, "Each label"),
        FieldPattern(r"\bPrice[ \t]*:?[ \t]*\$?[ \t]*" + _AMOUNT, "Price label"),
        FieldPattern(r"\bCost[ \t]*:?[ \t]*\$?[ \t]*" + _AMOUNT, "Cost label"),
    ),
    FieldType.QUANTITY: (
        FieldPattern(r"\bQty\.?[ \t]*:?[ \t]*(\d[\d,]*)", "Qty label"),
        FieldPattern(r"\bQuantity[ \t]*:?[ \t]*(\d[\d,]*)", "Quantity label"),
    ),
    FieldType.DESCRIPTION: (
        FieldPattern(r"\bDesc(?:ription)?\.?[ \t]*:[ \t]*" + _FREE_TEXT + _FIELD_END, "Description label"),
    ),
    FieldType.ORDER_DATE: (
        FieldPattern(r"\bOrder[ \t]*Date[ \t]*:?[ \t]*" + _DATE, "Order date label"),
        FieldPattern(r"\bDate[ \t]*:?[ \t]*" + _DATE, "Date label"),
        FieldPattern(r"\b(\d{4}[/\-]\d{1,2}[/\-]\d{1,2})\b", "ISO date"),
    ),
    FieldType.CURRENCY: (
        FieldPattern(r"\bCurrency[ \t]*:?[ \t]*(USD|CAD|US|CA)\b", "Currency label"),
        FieldPattern(r"\$[ \t]*(USD|CAD)\b", "Dollar sign currency"),
        FieldPattern(r"\b(USD|CAD)\b", "Currency token"),
    ),
    FieldType.PROJECT: (
        FieldPattern(r"\bProject[ \t]*(?:Number|No\.?|#)?[ \t]*:[ \t]*" + _IDENTIFIER, "Project label"),
        FieldPattern(r"\bProj\.?[ \t]*(?:No\.?|#)?[ \t]*:[ \t]*" + _IDENTIFIER, "Proj label"),
        FieldPattern(r"\bJob[ \t]*(?:Number|No\.?|#)?[ \t]*:[ \t]*" + _IDENTIFIER, "Job label"),
    ),
    FieldType.DRAWING: (
        FieldPattern(r"\bDrawing[ \t]*(?:Number|No\.?|#)?[ \t]*:[ \t]*([A-Z0-9][A-Z0-9\-.]*)", "Drawing label"),
        FieldPattern(r"\bDWG[ \t]*(?:No\.?|#)?[ \t]*:?[ \t]*((?=[A-Z0-9\-.]*\d)[A-Z0-9][A-Z0-9\-.]*)", "DWG label"),
        FieldPattern(r"\bPrint[ \t]*(?:No\.?|#)?[ \t]*:[ \t]*([A-Z0-9][A-Z0-9\-.]*)", "Print label"),
    ),
})

LINE_ITEM_ROW_PATTERNS: Tuple[RowPattern, ...] = (
    RowPattern(
        name="labelled",
        pattern=(
            r"\bPart[ \t]*(?:Number|No\.?)?[ \t]*#?[ \t]*:?[ \t]*(?P<part_number>[A-Z0-9][A-Z0-9\-/._]*)"
            r"[ \t]+Desc(?:ription)?\.?[ \t]*:?[ \t]*(?P<description>[^\n|;]+?)"
            r"[ \t]+(?:Qty|Quantity)\.?[ \t]*:?[ \t]*(?P<quantity>\d[\d,]*)"
            r"[ \t]+(?:Unit[ \t]*Price|Price|Each)[ \t]*:?[ \t]*\$?[ \t]*(?P<unit_price>\d[\d,]*(?:\.\d+)?)"
        ),
        description="Part#: X  Description: Y  Qty: N  Price: $P",
    ),
    RowPattern(
        name="numbered",
        pattern=(
            r"^[ \t]*(?P<line_number>\d{1,4})[.)]?[ \t]+(?P<part_number>[A-Z0-9][A-Z0-9\-/._]*)"
            r"[ \t]+(?P<description>[^\n|;]+?)"
            r"[ \t]+(?P<quantity>\d[\d,]*)"
            r"[ \t]+\$?(?P<unit_price>\d[\d,]*(?:\.\d+)?)"
            r"(?:[ \t]+\$?\d[\d,]*\.\d+)?[ \t]*$"
        ),
        has_line_number=True,
        description="<line> <part> <description> <qty> <price> [<extended>]",
    ),
    RowPattern(
        name="plain",
        pattern=(
            r"^[ \t]*(?P<part_number>(?=[A-Z0-9\-/._]*\d)[A-Z0-9][A-Z0-9\-/._]*)"
            r"[ \t]+(?P<description>[^\n|;]+?)"
            r"[ \t]+(?P<quantity>\d[\d,]*)"
            r"[ \t]+\$?(?P<unit_price>\d[\d,]*(?:\.\d+)?)"
            r"(?:[ \t]+\$?\d[\d,]*\.\d+)?[ \t]*$"
        ),
        description="<part> <description> <qty> <price> [<extended>]",
    ),
)


def get_patterns(field_type: FieldType) -> Tuple[FieldPattern, ...]:
    """Return the ordered rules for a field."""
    return FIELD_PATTERNS.get(field_type, ())


def extract_first_match(text: str, field_type: FieldType) -> Optional[str]:
    """
    Extract a field using the first pattern that yields a value.

    Args:
        text: Raw document text
        field_type: Field to extract

    Returns:
        Stripped captured value, or None when no pattern matched
    """
    if not text:
        return None

    for pattern_obj in get_patterns(field_type):
        for match in pattern_obj.regex.finditer(text):
            value = (match.group(1) or "").strip()
            if value:
                logger.debug(f"{field_type.value}: '{value}' via {pattern_obj.description}")
                return value

    return None


def extract_all_matches(text: str, field_type: FieldType) -> List[str]:
    """
    Extract every value for a field, pattern by pattern.

    A text position captured by an earlier pattern is not reported again by a
    later one.

    Args:
        text: Raw document text
        field_type: Field to extract

    Returns:
        Stripped values in pattern order, then text order within a pattern
    """
    values: List[str] = []
    if not text:
        return values

    claimed: Set[int] = set()

    for pattern_obj in get_patterns(field_type):
        for match in pattern_obj.regex.finditer(text):
            if not match.group(1):
                continue
            start = match.start(1)
            if start in claimed:
                continue
            value = match.group(1).strip()
            if value:
                claimed.add(start)
                values.append(value)

    return values


def iter_row_matches(text: str) -> List[Tuple[RowPattern, re.Match]]:
    """
    Collect line item row matches across all row patterns, in pattern order.

    A match overlapping text already consumed by an earlier row match is skipped
    so each physical row yields one line item.
    """
    results: List[Tuple[RowPattern, re.Match]] = []
    if not text:
        return results

    taken: List[Tuple[int, int]] = []

    for row_pattern in LINE_ITEM_ROW_PATTERNS:
        for match in row_pattern.regex.finditer(text):
            start, end = match.span()
            if any(start < t_end and t_start < end for t_start, t_end in taken):
                logger.debug(f"Skipping overlapping '{row_pattern.name}' row at {start}")
                continue
            taken.append((start, end))
            results.append((row_pattern, match))

    return results
