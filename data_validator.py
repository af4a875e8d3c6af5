"""
Data Validation Module

Checks a parsed document for completeness and produces the warnings that are
carried into the ingest report. Validation never rejects a document; it only
describes how trustworthy the extraction looks.
"""

import re
import logging
from typing import List, Any, Optional
from dataclasses import dataclass, field

from document_schema import ParsedDocument, ParsedLineItem
from line_item_extractor import ExtractionMode
from record_mapper import normalize_order_date

logger = logging.getLogger(__name__)

PLACEHOLDER_PART_PATTERN = re.compile(r"^PART-\d+$")


@dataclass
class ValidationResult:
    """Result of data validation."""
    is_valid: bool
    completeness_score: float
    missing_fields: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


class DataValidator:
    """
    Validator for parsed purchase order and quote documents.
    """

    def __init__(self):
        """Initialize the data validator."""
        self.required_fields = ['po_number']
        self.recommended_fields = ['supplier_name', 'customer_number', 'order_date']
        self.line_item_fields = ['part_number', 'description', 'quantity', 'unit_price']

    def validate_document(self, document: ParsedDocument,
                          extraction_mode: Optional[ExtractionMode] = None) -> ValidationResult:
        """
        Validate a parsed document.

        Args:
            document: Parsed document
            extraction_mode: Mode that produced the line items, if known

        Returns:
            ValidationResult with validation details
        """
        missing_fields = []
        warnings = []
        suggestions = []

        for field_name in self.required_fields:
            if not self._is_field_populated(getattr(document, field_name)):
                missing_fields.append(field_name)
                warnings.append("No PO number found; line items cannot be recovered without one")

        for field_name in self.recommended_fields:
            if not self._is_field_populated(getattr(document, field_name)):
                suggestions.append(f"Consider adding {field_name} for better completeness")

        if document.order_date and normalize_order_date(document.order_date) is None:
            warnings.append(f"Order date '{document.order_date}' could not be parsed")

        line_items = document.line_items
        if not line_items:
            missing_fields.append("line_items")
            warnings.append("No line items found")
        else:
            if extraction_mode == ExtractionMode.FALLBACK:
                warnings.append(
                    f"Line items recovered by fallback pairing ({len(line_items)} item(s)); "
                    "verify part numbers, quantities and prices"
                )

            placeholders = sum(1 for item in line_items if self._is_placeholder(item))
            if placeholders:
                warnings.append(f"{placeholders} line item(s) have placeholder part numbers")

            zero_priced = sum(1 for item in line_items if not item.unit_price)
            if zero_priced > len(line_items) * 0.5:  # More than 50% unpriced
                suggestions.append("Consider improving extraction of line item prices")

        completeness_score = self._calculate_completeness_score(document)

        is_valid = len(missing_fields) == 0

        if warnings:
            logger.debug(f"Validation warnings: {warnings}")

        return ValidationResult(
            is_valid=is_valid,
            completeness_score=completeness_score,
            missing_fields=missing_fields,
            warnings=warnings,
            suggestions=suggestions
        )

    def _is_placeholder(self, item: ParsedLineItem) -> bool:
        return bool(item.part_number and PLACEHOLDER_PART_PATTERN.match(item.part_number))

    def _is_field_populated(self, value: Any) -> bool:
        """Check if a field has meaningful content."""
        if value is None:
            return False

        if isinstance(value, str):
            return len(value.strip()) > 0

        if isinstance(value, (int, float)):
            return value != 0

        if isinstance(value, (list, dict)):
            return len(value) > 0

        return True

    def _calculate_completeness_score(self, document: ParsedDocument) -> float:
        """Calculate a completeness score for the parsed document."""
        total_score = 0.0
        max_score = 100.0

        # Header (60 points)
        if self._is_field_populated(document.po_number):
            total_score += 25
        if self._is_field_populated(document.supplier_name):
            total_score += 15
        if self._is_field_populated(document.customer_number):
            total_score += 10
        if self._is_field_populated(document.order_date):
            total_score += 10

        # Line items (40 points)
        line_items = document.line_items
        if line_items:
            total_score += 20

            complete_items = sum(
                1 for item in line_items
                if not self._is_placeholder(item)
                and all(self._is_field_populated(getattr(item, name)) for name in self.line_item_fields)
            )
            total_score += 20 * (complete_items / len(line_items))

        return min(total_score, max_score)
