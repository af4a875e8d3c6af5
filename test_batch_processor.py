import json

import batch_processor
from batch_processor import BatchProcessor, combine_reports
from persistence import IngestReport, JsonInventoryStore
from settings import IngestSettings


def _settings(tmp_path, **overrides):
    values = dict(output_dir=str(tmp_path / "out"), max_workers=2, save_parsed_json=True)
    values.update(overrides)
    return IngestSettings(**values)


def test_failures_are_isolated(tmp_path, quote_text):
    good = tmp_path / "quote.txt"
    good.write_text(quote_text, encoding="utf-8")
    unsupported = tmp_path / "quote.docx"
    unsupported.write_text("binary", encoding="utf-8")
    missing = tmp_path / "missing.txt"

    store = JsonInventoryStore()
    result = BatchProcessor(store, _settings(tmp_path)).process_files(
        [str(good), str(unsupported), str(missing)]
    )

    assert result.total_files == 3
    assert result.successful == 1
    assert result.failed == 2
    assert [report.source for report in result.reports] == [str(good), str(unsupported), str(missing)]
    assert result.reports[0].parts_inserted == 2
    assert result.reports[1].errors[0].startswith("Processing error: Unsupported document type")
    assert result.reports[2].errors[0].startswith("Processing error: Document not found")
    assert result.combined.parts_inserted == 2
    assert len(result.combined.errors) == 2
    assert len(store.rows("parts")) == 2


def test_parsed_json_is_written(tmp_path, quote_text):
    document = tmp_path / "quote.txt"
    document.write_text(quote_text, encoding="utf-8")

    BatchProcessor(JsonInventoryStore(), _settings(tmp_path)).process_files([str(document)])

    parsed = json.loads((tmp_path / "out" / "parsed" / "quote_txt_parsed.json").read_text(encoding="utf-8"))
    assert parsed["document"]["po_number"] == "PO-538-003"
    assert len(parsed["parts"]) == 2


def test_same_stem_documents_keep_separate_parsed_json(tmp_path, monkeypatch, quote_text, unstructured_text):
    texts = {"quote.pdf": unstructured_text, "quote.txt": quote_text}
    monkeypatch.setattr(batch_processor, "read_document_text", lambda path: texts[path.name])
    for name in texts:
        (tmp_path / name).write_bytes(b"")

    BatchProcessor(JsonInventoryStore(), _settings(tmp_path)).process_files(
        [str(tmp_path / name) for name in texts]
    )

    parsed_dir = tmp_path / "out" / "parsed"
    assert sorted(p.name for p in parsed_dir.iterdir()) == ["quote_pdf_parsed.json", "quote_txt_parsed.json"]
    from_pdf = json.loads((parsed_dir / "quote_pdf_parsed.json").read_text(encoding="utf-8"))
    from_txt = json.loads((parsed_dir / "quote_txt_parsed.json").read_text(encoding="utf-8"))
    assert from_pdf["extraction_mode"] == "fallback"
    assert from_txt["extraction_mode"] == "structured"


def test_parsed_json_can_be_disabled(tmp_path, quote_text):
    document = tmp_path / "quote.txt"
    document.write_text(quote_text, encoding="utf-8")

    BatchProcessor(JsonInventoryStore(), _settings(tmp_path, save_parsed_json=False)).process_files([str(document)])

    assert not (tmp_path / "out" / "parsed").exists()


def test_process_directory_uses_file_patterns(tmp_path, quote_text, unstructured_text):
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    (inbox / "a.txt").write_text(quote_text, encoding="utf-8")
    (inbox / "b.txt").write_text(unstructured_text, encoding="utf-8")
    (inbox / "notes.md").write_text("ignored", encoding="utf-8")

    progress = []
    result = BatchProcessor(JsonInventoryStore(), _settings(tmp_path, file_patterns=["*.txt"])).process_directory(
        str(inbox), progress_callback=lambda done, total: progress.append((done, total))
    )

    assert result.total_files == 2
    assert result.failed == 0
    assert result.combined.parts_inserted == 6
    assert result.combined.pos_created == 2
    assert progress[-1] == (2, 2)


def test_without_gateway_nothing_is_persisted(tmp_path, quote_text):
    document = tmp_path / "quote.txt"
    document.write_text(quote_text, encoding="utf-8")

    result = BatchProcessor(None, _settings(tmp_path)).process_files([str(document)])

    assert result.successful == 1
    assert result.reports[0].parts_inserted == 0


def test_combine_reports():
    combined = combine_reports(
        [
            IngestReport(source="a", parts_inserted=2, pos_created=1, warnings=["w1"]),
            IngestReport(source="b", parts_inserted=3, warnings=["w2"], errors=["e1"]),
        ],
        general_errors=["storage offline"],
    )

    assert combined.parts_inserted == 5
    assert combined.parts_updated == 0
    assert combined.pos_created == 1
    assert combined.warnings == ["w1", "w2"]
    assert combined.errors == ["e1", "storage offline"]


def test_combine_no_reports():
    combined = combine_reports([])
    assert combined.to_dict()["partsInserted"] == 0
    assert combined.warnings == []
    assert combined.errors == []
