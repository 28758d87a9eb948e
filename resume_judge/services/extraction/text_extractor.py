"""
Text-Extraktion aus hochgeladenen Dokumenten.

Unterstützt:
- Plaintext / Markdown (UTF-8)
- PDF (Seitentext in Seitenreihenfolge, via pdfplumber)
- DOCX (Absatztext ohne Formatierung, via python-docx)

Unbekannte Endungen werden explizit als UNSUPPORTED abgelehnt.
"""

import asyncio
import logging
import zipfile
from enum import Enum
from pathlib import Path
from typing import Callable

import docx
import pdfplumber
from docx.opc.exceptions import PackageNotFoundError
from pdfminer.pdfparser import PDFSyntaxError
from pdfplumber.utils.exceptions import PdfminerException

from resume_judge.core.errors import SourceUnavailable, UnsupportedFormat

logger = logging.getLogger(__name__)


class DocumentFormat(str, Enum):
    PLAIN_TEXT = "plain_text"
    MARKDOWN = "markdown"
    PDF = "pdf"
    RICH_DOCUMENT = "rich_document"
    UNSUPPORTED = "unsupported"


EXTENSION_FORMATS: dict[str, DocumentFormat] = {
    ".txt": DocumentFormat.PLAIN_TEXT,
    ".md": DocumentFormat.MARKDOWN,
    ".markdown": DocumentFormat.MARKDOWN,
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.RICH_DOCUMENT,
}

MIME_FORMATS: dict[str, DocumentFormat] = {
    "text/plain": DocumentFormat.PLAIN_TEXT,
    "text/markdown": DocumentFormat.MARKDOWN,
    "application/pdf": DocumentFormat.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentFormat.RICH_DOCUMENT,
}


def detect_format(locator: str, content_type: str | None = None) -> DocumentFormat:
    """
    Bestimmt das Format über die Dateiendung, ohne Endung über den MIME-Typ.
    Weder Endung noch MIME-Typ -> Plaintext.
    """
    extension = Path(locator).suffix.lower()
    if extension:
        return EXTENSION_FORMATS.get(extension, DocumentFormat.UNSUPPORTED)
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        return MIME_FORMATS.get(mime, DocumentFormat.UNSUPPORTED)
    return DocumentFormat.PLAIN_TEXT


def _read_plain_text(path: Path) -> str:
    try:
        # utf-8-sig entfernt ein evtl. vorhandenes BOM
        return path.read_bytes().decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceUnavailable(f"{path.name} is not valid UTF-8: {exc.reason}") from exc


def _read_pdf(path: Path) -> str:
    try:
        with pdfplumber.open(path) as pdf:
            # Seiten ohne Textlayer (Scans) liefern None -> ""
            pages = [page.extract_text() or "" for page in pdf.pages]
    except (PDFSyntaxError, PdfminerException) as exc:
        raise SourceUnavailable(f"{path.name} is not a readable PDF: {exc}") from exc
    return "\n".join(pages)


def _read_docx(path: Path) -> str:
    try:
        document = docx.Document(str(path))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise SourceUnavailable(f"{path.name} is not a readable DOCX: {exc}") from exc
    return "\n".join(p.text for p in document.paragraphs)


DECODERS: dict[DocumentFormat, Callable[[Path], str]] = {
    DocumentFormat.PLAIN_TEXT: _read_plain_text,
    DocumentFormat.MARKDOWN: _read_plain_text,
    DocumentFormat.PDF: _read_pdf,
    DocumentFormat.RICH_DOCUMENT: _read_docx,
}


def extract_text(locator: str, content_type: str | None = None) -> str:
    """
    Extrahiert Plaintext aus dem Dokument hinter locator.

    Raises:
        UnsupportedFormat: Endung/MIME-Typ wird nicht unterstützt
        SourceUnavailable: Datei nicht lesbar oder Container defekt
    """
    fmt = detect_format(locator, content_type)
    if fmt is DocumentFormat.UNSUPPORTED:
        raise UnsupportedFormat(Path(locator).suffix.lower() or (content_type or ""))

    path = Path(locator)
    try:
        text = DECODERS[fmt](path)
    except OSError as exc:
        raise SourceUnavailable(f"Cannot read {path.name}: {exc.strerror or exc}") from exc

    logger.debug("Extracted %d chars from %s (%s)", len(text), path.name, fmt.value)
    return text


async def extract_text_async(locator: str, content_type: str | None = None) -> str:
    """Wie extract_text, blockierende I/O läuft im Worker-Thread."""
    return await asyncio.to_thread(extract_text, locator, content_type)
