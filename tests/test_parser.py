import pytest

from parser import parser as doc_parser
from parser.parser import (
    UnsupportedDocumentError,
    extract_document_text,
    resolve_extension,
    title_from_filename,
)


def test_title_from_filename():
    assert title_from_filename("Q4 plan.final.md") == "Q4 plan.final"
    assert title_from_filename(None) == "Untitled Document"


def test_resolve_extension_prefers_filename_then_content_type():
    assert resolve_extension("memo.PDF", "application/octet-stream") == ".pdf"
    assert resolve_extension("memo", "text/markdown") == ".md"
    with pytest.raises(UnsupportedDocumentError):
        resolve_extension("memo.exe", "application/octet-stream")


def test_text_files_are_decoded():
    title, text = extract_document_text("notes.txt", "text/plain", "Grow mobile – now".encode("utf-8"))
    assert title == "notes"
    assert text == "Grow mobile – now"


def test_pdf_goes_through_converter(monkeypatch):
    seen = {}

    def fake_docling(filename, data):
        seen["args"] = (filename, data)
        return "# Converted"

    monkeypatch.setattr(doc_parser, "USE_LLAMAPARSE", False)
    monkeypatch.setattr(doc_parser, "parse_with_docling", fake_docling)

    title, text = extract_document_text("report.pdf", "application/pdf", b"%PDF-1.4")
    assert (title, text) == ("report", "# Converted")
    assert seen["args"] == ("report.pdf", b"%PDF-1.4")


def test_oversized_upload_is_rejected(monkeypatch):
    monkeypatch.setattr(doc_parser, "MAX_UPLOAD_BYTES", 4)
    with pytest.raises(UnsupportedDocumentError):
        extract_document_text("notes.txt", "text/plain", b"12345")
