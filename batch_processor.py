"""
Batch Document Ingest Module

Reads, parses and persists many documents concurrently. Each document is
isolated: a failure is recorded on that document's report and the rest of the
batch continues.
"""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Any, Optional, Callable, Iterable
from pathlib import Path
from dataclasses import dataclass, field

from ingest_pipeline import PipelineResult, run_pipeline
from pdf_text_reader import read_document_text
from persistence import IngestReport, InventoryGateway, persist_pipeline_result
from settings import IngestSettings

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Container for batch processing results."""
    total_files: int
    successful: int
    failed: int
    processing_time: float
    reports: List[IngestReport] = field(default_factory=list)
    combined: IngestReport = field(default_factory=IngestReport)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "successful": self.successful,
            "failed": self.failed,
            "processing_time_seconds": round(self.processing_time, 2),
            "combined": self.combined.to_dict(),
            "documents": [report.to_dict() for report in self.reports],
        }


def combine_reports(reports: Iterable[IngestReport], general_errors: Optional[List[str]] = None) -> IngestReport:
    """
    Combine per-document reports into one.

    Counts are summed; warnings and errors are concatenated in report order,
    followed by any general errors not tied to a document.
    """
    combined = IngestReport(source="batch")

    for report in reports:
        combined.parts_inserted += report.parts_inserted
        combined.parts_updated += report.parts_updated
        combined.pos_created += report.pos_created
        combined.warnings.extend(report.warnings)
        combined.errors.extend(report.errors)

    combined.errors.extend(general_errors or [])
    return combined


class BatchProcessor:
    """
    Processes multiple documents in batch with per-document error isolation.
    """

    def __init__(self, gateway: Optional[InventoryGateway], settings: Optional[IngestSettings] = None):
        """
        Initialize the batch processor.

        Args:
            gateway: Inventory write interface; None parses without persisting
            settings: Ingest settings, defaults when omitted
        """
        self.gateway = gateway
        self.settings = settings or IngestSettings()
        self.output_dir = Path(self.settings.output_dir)
        self.max_workers = max(1, self.settings.max_workers)

        logger.info(f"BatchProcessor initialized with {self.max_workers} workers")

    def process_directory(
        self,
        input_dir: str,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> BatchResult:
        """
        Process every document in a directory matching the configured patterns.

        Args:
            input_dir: Directory containing documents
            progress_callback: Optional callback function for progress updates

        Returns:
            BatchResult containing processing results
        """
        input_path = Path(input_dir)
        if not input_path.exists():
            raise FileNotFoundError(f"Input directory not found: {input_dir}")

        files = sorted({p for pattern in self.settings.file_patterns for p in input_path.glob(pattern)})
        if not files:
            logger.warning(f"No documents found in {input_dir} matching {self.settings.file_patterns}")

        logger.info(f"Found {len(files)} documents to process")
        return self.process_files([str(p) for p in files], progress_callback)

    def process_files(
        self,
        file_paths: List[str],
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> BatchResult:
        """
        Process a list of documents.

        Args:
            file_paths: Document paths
            progress_callback: Optional callback function for progress updates

        Returns:
            BatchResult with one report per document, in input order
        """
        start_time = time.time()
        paths = [Path(p) for p in file_paths]
        total_files = len(paths)
        reports: Dict[int, IngestReport] = {}

        logger.info(f"Starting batch processing of {total_files} files")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._process_single_file, path): index
                for index, path in enumerate(paths)
            }

            for completed, future in enumerate(as_completed(future_to_index), start=1):
                index = future_to_index[future]
                try:
                    reports[index] = future.result()
                except Exception as e:
                    logger.error(f"Unexpected error processing {paths[index].name}: {e}")
                    reports[index] = IngestReport(source=str(paths[index]), errors=[f"Unexpected error: {e}"])

                if progress_callback:
                    progress_callback(completed, total_files)

        ordered = [reports[index] for index in range(total_files)]
        failed = sum(1 for report in ordered if report.errors)
        processing_time = time.time() - start_time

        batch_result = BatchResult(
            total_files=total_files,
            successful=total_files - failed,
            failed=failed,
            processing_time=processing_time,
            reports=ordered,
            combined=combine_reports(ordered),
        )

        logger.info(f"Batch processing completed: {batch_result.successful}/{total_files} successful "
                    f"in {processing_time:.2f}s")

        return batch_result

    def _process_single_file(self, path: Path) -> IngestReport:
        """
        Read, parse and persist one document.

        Args:
            path: Document path

        Returns:
            IngestReport; failures are recorded in its errors
        """
        source = str(path)
        try:
            logger.info(f"Processing {path.name}")
            result = run_pipeline(read_document_text(path))

            if self.settings.save_parsed_json:
                self._save_parsed_result(path, result)

            if self.gateway is None:
                return IngestReport(source=source, warnings=list(result.warnings))
            return persist_pipeline_result(result, self.gateway, source)
        except Exception as e:
            logger.error(f"Error processing {path.name}: {e}")
            return IngestReport(source=source, errors=[f"Processing error: {e}"])

    def _save_parsed_result(self, path: Path, result: PipelineResult) -> None:
        """Write the parsed document to <output_dir>/parsed/<stem>_<suffix>_parsed.json."""
        try:
            output_folder = self.output_dir / "parsed"
            output_folder.mkdir(parents=True, exist_ok=True)

            suffix = path.suffix.lstrip('.').lower()
            name = f"{path.stem}_{suffix}" if suffix else path.stem
            output_file = output_folder / f"{name}_parsed.json"
            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
            logger.debug(f"Saved parsed result to {output_file}")
        except Exception as e:
            logger.error(f"Error saving parsed result for {path.name}: {e}")
