"""
Line Item Extractor

Two extraction modes:

- Structured mode matches whole tabular rows using the row patterns from the
  pattern library. Each match becomes one line item.
- Fallback mode is the last resort when no row matched. It collects part numbers,
  quantities, prices and descriptions independently and pairs them by position.
  The pairing is lossy; it only runs for documents that have a PO number.
"""

import logging
from enum import Enum
from typing import List, Optional, Tuple

from category_classifier import infer_category
from document_schema import ParsedDocument, ParsedLineItem
from ocr_patterns import FieldType, extract_all_matches, extract_first_match, iter_row_matches

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_QUANTITY = 1


class ExtractionMode(Enum):
    """Which extraction path produced the line items."""
    STRUCTURED = "structured"
    FALLBACK = "fallback"
    NONE = "none"


def _safe_int_convert(value: Optional[str]) -> int:
    """Safely convert string to integer."""
    try:
        return int(str(value).replace(',', '').strip())
    except (ValueError, AttributeError):
        return 0


def _safe_float_convert(value: Optional[str]) -> float:
    """Safely convert string to float."""
    try:
        return float(str(value).replace(',', '').replace('$', '').strip())
    except (ValueError, AttributeError):
        return 0.0


def _line_at(text: str, position: int) -> str:
    start = text.rfind('\n', 0, position) + 1
    end = text.find('\n', position)
    return text[start:] if end == -1 else text[start:end]


def extract_structured_line_items(text: str, header: ParsedDocument) -> List[ParsedLineItem]:
    """
    Extract line items from rows matching the tabular row patterns.

    Args:
        text: Raw document text
        header: Parsed header supplying currency, project and drawing

    Returns:
        One line item per matched row, in row pattern order
    """
    items: List[ParsedLineItem] = []

    for row_pattern, match in iter_row_matches(text):
        part_number = match.group("part_number").strip()
        description = match.group("description").strip() or None
        drawing = extract_first_match(_line_at(text, match.start()), FieldType.DRAWING) or header.drawing

        items.append(ParsedLineItem(
            part_number=part_number,
            description=description,
            quantity=_safe_int_convert(match.group("quantity")),
            unit_price=_safe_float_convert(match.group("unit_price")),
            currency=header.currency,
            category=infer_category(description or part_number),
            project=header.project,
            drawing=drawing,
        ))
        logger.debug(f"Row '{row_pattern.name}' matched part {part_number}")

    return items


def extract_fallback_line_items(text: str, header: ParsedDocument) -> List[ParsedLineItem]:
    """
    Last-resort extraction: pair independently found fields by index.

    Produces max(parts, quantities, prices, 1) items. Missing part numbers become
    PART-<n> (1-based), missing quantities 1 and missing prices 0.0. Nothing is
    produced when the header has no PO number.

    Args:
        text: Raw document text
        header: Parsed header

    Returns:
        Positionally paired line items
    """
    if not header.po_number:
        return []

    part_numbers = extract_all_matches(text, FieldType.PART_NUMBER)
    quantities = extract_all_matches(text, FieldType.QUANTITY)
    prices = extract_all_matches(text, FieldType.UNIT_PRICE)
    descriptions = extract_all_matches(text, FieldType.DESCRIPTION)

    count = max(len(part_numbers), len(quantities), len(prices), 1)
    logger.debug(
        f"Fallback pairing: {len(part_numbers)} parts, {len(quantities)} quantities, "
        f"{len(prices)} prices, {len(descriptions)} descriptions -> {count} items"
    )

    items: List[ParsedLineItem] = []
    for index in range(count):
        part_number = part_numbers[index] if index < len(part_numbers) else f"PART-{index + 1}"
        description = descriptions[index] if index < len(descriptions) else None

        quantity = DEFAULT_FALLBACK_QUANTITY
        if index < len(quantities):
            try:
                quantity = int(quantities[index].replace(',', ''))
            except ValueError:
                quantity = DEFAULT_FALLBACK_QUANTITY

        unit_price = _safe_float_convert(prices[index]) if index < len(prices) else 0.0

        items.append(ParsedLineItem(
            part_number=part_number,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            currency=header.currency,
            category=infer_category(description or part_number),
            project=header.project,
            drawing=header.drawing,
        ))

    return items


def extract_line_items_with_mode(text: str, header: ParsedDocument) -> Tuple[List[ParsedLineItem], ExtractionMode]:
    """
    Extract line items, reporting which mode produced them.

    Fallback mode runs only when structured mode found nothing.
    """
    items = extract_structured_line_items(text, header)
    if items:
        return items, ExtractionMode.STRUCTURED

    items = extract_fallback_line_items(text, header)
    if items:
        logger.warning(f"No structured rows found; fallback pairing produced {len(items)} item(s)")
        return items, ExtractionMode.FALLBACK

    return [], ExtractionMode.NONE


def extract_line_items(text: str, header: ParsedDocument) -> List[ParsedLineItem]:
    items, _ = extract_line_items_with_mode(text, header)
    return items
