"""
Tests für die Text-Extraktion (Format-Dispatch, Fehlerfälle).
"""

import asyncio

import docx
import pytest

from resume_judge.core.errors import SourceUnavailable, UnsupportedFormat
from resume_judge.services.extraction import text_extractor
from resume_judge.services.extraction.text_extractor import (
    DocumentFormat,
    detect_format,
    extract_text,
    extract_text_async,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("cv.txt", DocumentFormat.PLAIN_TEXT),
        ("cv.MD", DocumentFormat.MARKDOWN),
        ("cv.pdf", DocumentFormat.PDF),
        ("cv.docx", DocumentFormat.RICH_DOCUMENT),
        ("cv.exe", DocumentFormat.UNSUPPORTED),
        ("cv.doc", DocumentFormat.UNSUPPORTED),
        ("cv", DocumentFormat.PLAIN_TEXT),
    ],
)
def test_detect_format_by_extension(name, expected):
    assert detect_format(f"/tmp/{name}") is expected


def test_detect_format_falls_back_to_mime():
    assert detect_format("/tmp/blob", "application/pdf") is DocumentFormat.PDF
    assert detect_format("/tmp/blob", "text/plain; charset=utf-8") is DocumentFormat.PLAIN_TEXT
    assert detect_format("/tmp/blob", "image/png") is DocumentFormat.UNSUPPORTED


def test_txt_passes_through(tmp_path):
    path = tmp_path / "cv.txt"
    path.write_text("Experienced engineer", encoding="utf-8")
    assert extract_text(str(path)) == "Experienced engineer"


def test_markdown_keeps_unicode_and_strips_bom(tmp_path):
    path = tmp_path / "cv.md"
    path.write_bytes("\ufeff# Jürgen Müller\n漢字".encode("utf-8"))
    assert extract_text(str(path)) == "# Jürgen Müller\n漢字"


def test_empty_text_is_valid(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")
    assert extract_text(str(path)) == ""


def test_unsupported_extension(tmp_path):
    path = tmp_path / "virus.exe"
    path.write_bytes(b"MZ")
    with pytest.raises(UnsupportedFormat) as exc_info:
        extract_text(str(path))
    assert exc_info.value.extension == ".exe"
    assert exc_info.value.kind == "UnsupportedFormat"


def test_missing_file_is_source_unavailable(tmp_path):
    with pytest.raises(SourceUnavailable):
        extract_text(str(tmp_path / "missing.txt"))


def test_invalid_utf8_is_source_unavailable(tmp_path):
    path = tmp_path / "latin.txt"
    path.write_bytes(b"\xff\xfe\xfa broken")
    with pytest.raises(SourceUnavailable):
        extract_text(str(path))


def test_docx_paragraph_text(tmp_path):
    path = tmp_path / "cv.docx"
    document = docx.Document()
    document.add_paragraph("Senior Engineer")
    p = document.add_paragraph("Python, ")
    p.add_run("AWS").bold = True
    document.save(str(path))

    text = extract_text(str(path))
    assert text.endswith("Senior Engineer\nPython, AWS")


def test_corrupt_docx_is_source_unavailable(tmp_path):
    path = tmp_path / "broken.docx"
    path.write_bytes(b"this is not a zip container")
    with pytest.raises(SourceUnavailable):
        extract_text(str(path))


def test_corrupt_pdf_is_source_unavailable(tmp_path):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"definitely not a pdf")
    with pytest.raises(SourceUnavailable):
        extract_text(str(path))


class _FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class _FakePdf:
    def __init__(self, pages):
        self.pages = pages

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_pdf_pages_in_order_and_image_pages_empty(tmp_path, monkeypatch):
    path = tmp_path / "cv.pdf"
    path.write_bytes(b"%PDF-1.4")
    fake = _FakePdf([_FakePage("Page one"), _FakePage(None), _FakePage("Page three")])
    monkeypatch.setattr(text_extractor.pdfplumber, "open", lambda p: fake)

    assert extract_text(str(path)) == "Page one\n\nPage three"


def test_pdf_without_text_layer_yields_empty_string(tmp_path, monkeypatch):
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF-1.4")
    monkeypatch.setattr(text_extractor.pdfplumber, "open", lambda p: _FakePdf([_FakePage(None)]))

    assert extract_text(str(path)) == ""


def test_extract_text_async(tmp_path):
    path = tmp_path / "cv.txt"
    path.write_text("Async engineer", encoding="utf-8")
    assert asyncio.run(extract_text_async(str(path))) == "Async engineer"
