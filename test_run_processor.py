import json

import run_processor
from settings import IngestSettings


def test_ingest_writes_store(tmp_path, monkeypatch, capsys, quote_text):
    monkeypatch.chdir(tmp_path)
    document = tmp_path / "quote.txt"
    document.write_text(quote_text, encoding="utf-8")
    store_path = tmp_path / "inventory.json"

    exit_code = run_processor.main([
        str(document), "--store", str(store_path), "--output-dir", str(tmp_path / "out"), "--json-only", "-q",
    ])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["partsInserted"] == 2
    assert report["posCreated"] == 1
    stored = json.loads(store_path.read_text(encoding="utf-8"))
    assert len(stored["parts"]) == 2


def test_dry_run_prints_parsed_records(tmp_path, monkeypatch, capsys, quote_text):
    monkeypatch.chdir(tmp_path)
    document = tmp_path / "quote.txt"
    document.write_text(quote_text, encoding="utf-8")

    exit_code = run_processor.main([str(document), "--dry-run", "-q"])

    assert exit_code == 0
    results = json.loads(capsys.readouterr().out)
    assert results[0]["document"]["po_number"] == "PO-538-003"
    assert [part["part"] for part in results[0]["parts"]] == ["VALVE-SS-1/4", "GAUGE-VAC-001"]
    assert not (tmp_path / "output" / "inventory.json").exists()


def test_failed_document_sets_exit_code(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    document = tmp_path / "quote.docx"
    document.write_text("not supported", encoding="utf-8")

    exit_code = run_processor.main([str(document), "--store", str(tmp_path / "inv.json"), "-q"])

    assert exit_code == 1
    assert "Failed: 1" in capsys.readouterr().out


def test_missing_path(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert run_processor.main([str(tmp_path / "absent.pdf")]) == 1
    assert "Path not found" in capsys.readouterr().err


def test_collect_document_paths(tmp_path):
    (tmp_path / "a.pdf").write_bytes(b"%PDF")
    (tmp_path / "b.txt").write_text("x", encoding="utf-8")
    (tmp_path / "c.csv").write_text("x", encoding="utf-8")
    single = tmp_path / "c.csv"

    paths = run_processor.collect_document_paths([str(tmp_path), str(single)], IngestSettings())

    assert [p.name for p in paths] == ["a.pdf", "b.txt", "c.csv"]
