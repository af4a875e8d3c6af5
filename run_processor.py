#!/usr/bin/env python3
"""
Document Ingest Runner

Parses PO and quote documents (PDF or plain text) into inventory records and
writes them to the JSON inventory store.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from batch_processor import BatchProcessor
from ingest_pipeline import run_pipeline
from pdf_text_reader import read_document_text
from persistence import JsonInventoryStore, StoreError
from settings import IngestSettings, load_settings

logger = logging.getLogger(__name__)


def create_progress_callback():
    """Create a simple progress callback for batch processing."""
    def progress_callback(completed: int, total: int):
        percentage = (completed / total) * 100
        print(f"Progress: {completed}/{total} ({percentage:.1f}%)")
    return progress_callback


def collect_document_paths(paths: List[str], settings: IngestSettings) -> List[Path]:
    """
    Expand files and directories into a list of document paths.

    Raises:
        FileNotFoundError: If a path does not exist
    """
    documents: List[Path] = []
    for raw_path in paths:
        path = Path(raw_path)
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {raw_path}")
        if path.is_dir():
            documents.extend(sorted({p for pattern in settings.file_patterns for p in path.glob(pattern)}))
        else:
            documents.append(path)
    return documents


def dry_run(documents: List[Path]) -> int:
    """Parse documents and print the parsed records without persisting anything."""
    results = []
    failed = 0
    for document in documents:
        try:
            result = run_pipeline(read_document_text(document))
            results.append({"source": str(document), **result.to_dict()})
        except Exception as e:
            failed += 1
            logger.error(f"Error processing {document.name}: {e}")
            results.append({"source": str(document), "errors": [str(e)]})

    print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0 if failed == 0 else 1


def main(argv=None):
    """Main entry point for command-line usage."""
    parser = argparse.ArgumentParser(
        description="PO / Quote Document Ingest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ingest a single document
  python run_processor.py quote.pdf

  # Ingest every document in a directory with 8 workers
  python run_processor.py ./incoming --max-workers 8

  # Show what would be imported without writing the store
  python run_processor.py quote.pdf --dry-run
        """
    )

    parser.add_argument('paths', nargs='+', help='Documents or directories to ingest')
    parser.add_argument('--config', help='Settings file (default: config/ingest.yaml)')
    parser.add_argument('--store', help='Inventory store JSON file')
    parser.add_argument('--output-dir', help='Output directory for parsed JSON')
    parser.add_argument('--max-workers', type=int, help='Maximum workers for batch processing')
    parser.add_argument('--dry-run', action='store_true',
                        help='Parse only and print the parsed records as JSON')
    parser.add_argument('--json-only', action='store_true',
                        help='Output only the combined report JSON to stdout')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress all output except results')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    settings = load_settings(args.config)

    # Configure logging based on arguments
    if args.quiet:
        logging.getLogger().setLevel(logging.ERROR)
    elif args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(getattr(logging, str(settings.log_level).upper(), logging.INFO))

    if args.store:
        settings.store_path = args.store
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.max_workers:
        settings.max_workers = args.max_workers

    try:
        documents = collect_document_paths(args.paths, settings)
        if not documents:
            print("Error: No documents found", file=sys.stderr)
            return 1

        if args.dry_run:
            return dry_run(documents)

        store = JsonInventoryStore(settings.store_path)
        processor = BatchProcessor(store, settings)

        progress_callback = None if (args.quiet or args.json_only) else create_progress_callback()
        batch_result = processor.process_files([str(d) for d in documents], progress_callback=progress_callback)
        store.save()

        if args.json_only:
            print(json.dumps(batch_result.combined.to_dict(), indent=2))
        else:
            combined = batch_result.combined
            print(f"Batch processing completed:")
            print(f"  Total files: {batch_result.total_files}")
            print(f"  Successful: {batch_result.successful}")
            print(f"  Failed: {batch_result.failed}")
            print(f"  Parts inserted: {combined.parts_inserted}")
            print(f"  POs created: {combined.pos_created}")
            print(f"  Processing time: {batch_result.processing_time:.2f}s")
            for warning in combined.warnings:
                print(f"  Warning: {warning}")
            for error in combined.errors:
                print(f"  Error: {error}")

        return 0 if batch_result.failed == 0 else 1

    except (FileNotFoundError, StoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
