"""
Document Ingest Pipeline

Text -> header fields -> line items -> entity candidates -> part records.

Every stage is a pure function of its input. The pipeline does no I/O and keeps
no shared mutable state, so documents can be processed concurrently.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Any, Optional

from data_validator import DataValidator
from document_schema import EntityCandidates, ParsedDocument, PartInsertCandidate
from entity_resolver import resolve_entities
from header_extractor import extract_header
from line_item_extractor import ExtractionMode, extract_line_items_with_mode
from record_mapper import map_to_part_records

logger = logging.getLogger(__name__)


class MissingDocumentTextError(ValueError):
    """Raised when a document has no text to parse."""


@dataclass
class PipelineResult:
    """Everything derived from one document's text."""
    document: ParsedDocument
    parts: List[PartInsertCandidate]
    entities: EntityCandidates
    extraction_mode: ExtractionMode
    completeness_score: float = 0.0
    warnings: List[str] = field(default_factory=list)
    processing_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document": self.document.to_dict(),
            "parts": [part.to_record() for part in self.parts],
            "entities": self.entities.to_dict(),
            "extraction_mode": self.extraction_mode.value,
            "completeness_score": self.completeness_score,
            "warnings": list(self.warnings),
            "processing_time": self.processing_time,
        }


def _require_text(raw_text: Any) -> str:
    if raw_text is None or not isinstance(raw_text, str):
        raise MissingDocumentTextError("Document text is required")
    return raw_text


def _parse(raw_text: str):
    header = extract_header(raw_text)
    items, mode = extract_line_items_with_mode(raw_text, header)
    header.line_items = items
    return header, mode


def parse_po_text(raw_text: str) -> ParsedDocument:
    """
    Parse raw PO or quote text into a document.

    Args:
        raw_text: Document text; may be empty

    Returns:
        ParsedDocument with header fields and line items

    Raises:
        MissingDocumentTextError: If no text was supplied
    """
    document, _ = _parse(_require_text(raw_text))
    return document


def run_pipeline(raw_text: str, imported_at: Optional[datetime] = None) -> PipelineResult:
    """
    Run the full pipeline over one document's text.

    Args:
        raw_text: Document text
        imported_at: Timestamp used in provenance notes, defaults to the current UTC time

    Returns:
        PipelineResult with parsed document, part records and entity candidates

    Raises:
        MissingDocumentTextError: If no text was supplied
    """
    text = _require_text(raw_text)
    start_time = time.time()
    imported_at = imported_at or datetime.now(timezone.utc)

    document, mode = _parse(text)
    entities = resolve_entities(document, imported_at)
    parts = map_to_part_records(document, imported_at)
    validation = DataValidator().validate_document(document, mode)

    processing_time = time.time() - start_time
    logger.info(
        f"Parsed document PO {document.po_number or '-'}: {len(parts)} part(s) via {mode.value} mode "
        f"({validation.completeness_score:.0f}% complete)"
    )

    return PipelineResult(
        document=document,
        parts=parts,
        entities=entities,
        extraction_mode=mode,
        completeness_score=validation.completeness_score,
        warnings=validation.warnings,
        processing_time=processing_time,
    )
