import pytest

import pdf_text_reader
from ingest_pipeline import run_pipeline
from pdf_text_reader import DocumentReadError, read_document_text, read_pdf_text

PDF_LINES = ["PO Number: PO-538-003", "Supplier: Advanced Components Ltd."]


def _write_pdf(path, lines):
    """Write a one-page PDF whose content stream draws each line in Helvetica."""
    content = b"BT /F1 12 Tf 72 720 Td "
    content += b" 0 -20 Td ".join(b"(%s) Tj" % line.encode("latin-1") for line in lines)
    content += b" ET"
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n%s\nendstream" % (len(content), content),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    data = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(data))
        data += b"%d 0 obj\n%s\nendobj\n" % (number, body)

    xref_offset = len(data)
    data += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        data += b"%010d 00000 n \n" % offset
    data += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)

    path.write_bytes(bytes(data))
    return path


def test_reads_plain_text(tmp_path, quote_text):
    path = tmp_path / "quote.txt"
    path.write_text(quote_text, encoding="utf-8")
    assert read_document_text(path) == quote_text


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_document_text(tmp_path / "absent.pdf")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "quote.docx"
    path.write_bytes(b"PK")
    with pytest.raises(DocumentReadError):
        read_document_text(path)


def test_pdf_uses_pdfplumber_text(tmp_path, monkeypatch):
    path = tmp_path / "quote.pdf"
    path.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pdfplumber", lambda p: "PO Number: PO-1-1")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pypdf2", lambda p: pytest.fail("PyPDF2 should not run"))

    assert read_document_text(path) == "PO Number: PO-1-1"


def test_pdf_falls_back_to_pypdf2_when_empty(tmp_path, monkeypatch):
    path = tmp_path / "quote.pdf"
    path.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pdfplumber", lambda p: "  \n")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pypdf2", lambda p: "from pypdf2")

    assert read_document_text(path) == "from pypdf2"


def test_pdf_falls_back_when_pdfplumber_fails(tmp_path, monkeypatch):
    def broken(p):
        raise RuntimeError("bad xref")

    path = tmp_path / "quote.pdf"
    path.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pdfplumber", broken)
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pypdf2", lambda p: "recovered")

    assert read_document_text(path) == "recovered"


def test_unreadable_pdf_raises(tmp_path, monkeypatch):
    def broken(p):
        raise RuntimeError("not a pdf")

    path = tmp_path / "quote.pdf"
    path.write_bytes(b"garbage")
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pdfplumber", broken)
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pypdf2", broken)

    with pytest.raises(DocumentReadError):
        read_document_text(path)


def test_real_pdf_is_read_with_pdfplumber(tmp_path, monkeypatch):
    path = _write_pdf(tmp_path / "quote.pdf", PDF_LINES)
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pypdf2", lambda p: pytest.fail("PyPDF2 should not run"))

    text = read_document_text(path)

    assert [line.strip() for line in text.splitlines() if line.strip()] == PDF_LINES


def test_real_pdf_is_read_with_pypdf2(tmp_path, monkeypatch):
    path = _write_pdf(tmp_path / "quote.pdf", PDF_LINES)
    monkeypatch.setattr(pdf_text_reader, "_extract_with_pdfplumber", lambda p: "")

    text = read_pdf_text(path)

    assert "PO Number: PO-538-003" in text
    assert "Supplier: Advanced Components Ltd." in text


def test_real_pdf_feeds_the_pipeline(tmp_path):
    path = _write_pdf(tmp_path / "quote.pdf", PDF_LINES)

    document = run_pipeline(read_document_text(path)).document

    assert document.po_number == "PO-538-003"
    assert document.supplier_name == "Advanced Components Ltd."
