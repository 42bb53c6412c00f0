# upload checks, pdfplumber / python-docx text extraction, image-only heuristic (no OCR)

# app/extraction/document_text.py
from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"

SUPPORTED_MIME_TYPES = (PDF_MIME, DOCX_MIME)
MAX_UPLOAD_BYTES = 20 * 1024 * 1024

_SUFFIX_TO_MIME = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
    ".doc": DOC_MIME,
}


class DocumentRejectedError(ValueError):
    """Upload refused before any parsing; `message` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedDocumentError(DocumentRejectedError):
    pass


class DocumentTooLargeError(DocumentRejectedError):
    pass


class DocumentReadError(RuntimeError):
    """The file passed the upload checks but its text could not be read."""


@dataclass(frozen=True)
class DocumentPage:
    page_number: int
    content: str


@dataclass
class ParsedDocument:
    content: str
    pages: List[DocumentPage] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "pages": [{"page_number": p.page_number, "content": p.content} for p in self.pages],
        }


def guess_content_type(path: str) -> Optional[str]:
    return _SUFFIX_TO_MIME.get(Path(path).suffix.lower())


def validate_upload(content_type: Optional[str], size_bytes: int) -> None:
    """
    Reject uploads before any text acquisition is attempted.

    - size above MAX_UPLOAD_BYTES -> DocumentTooLargeError
    - legacy .doc -> UnsupportedDocumentError (accepted by the picker, not parseable)
    - anything else outside PDF/DOCX -> UnsupportedDocumentError
    """
    if size_bytes > MAX_UPLOAD_BYTES:
        raise DocumentTooLargeError("File too large. Please upload a file smaller than 20MB.")

    if content_type == DOC_MIME:
        raise UnsupportedDocumentError("Unsupported file type. Please upload a PDF or DOCX file.")

    if content_type not in SUPPORTED_MIME_TYPES:
        raise UnsupportedDocumentError("Invalid file type. Please upload a PDF or Word document.")


def extract_pdf_pages(data: bytes) -> List[str]:
    """
    Extract text per page using pdfplumber.

    Notes:
    - Each page's text items are joined with single spaces; whitespace runs collapse.
    - Image-only PDFs (scans) come back as empty strings; there is no OCR step.
    """
    import pdfplumber  # local import to reduce editor import sensitivity

    pages: List[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            t = page.extract_text() or ""
            t = re.sub(r"\s+", " ", t)
            pages.append(t.strip())
    return pages


def extract_docx_text(data: bytes) -> str:
    """
    Raw text of a .docx: paragraphs one per line, then table rows
    (cells joined with spaces so regexes still see label/value pairs).
    """
    import docx

    document = docx.Document(io.BytesIO(data))
    lines: List[str] = [p.text for p in document.paragraphs]

    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            cells = [c for c in cells if c]
            if cells:
                lines.append("   ".join(cells))

    return "\n".join(lines).strip()


def looks_like_image_only(pages_text: List[str], min_chars_per_page: int = 40) -> bool:
    """
    Heuristic: if >=80% pages have fewer than min_chars_per_page characters, treat as image-only.
    """
    if not pages_text:
        return True
    low = sum(1 for t in pages_text if len(t) < min_chars_per_page)
    return (low / max(len(pages_text), 1)) >= 0.8


def extract_document_text(data: bytes, content_type: Optional[str]) -> ParsedDocument:
    """
    Returns ParsedDocument(content, pages).

    - PDF: one DocumentPage per page, content = page texts joined by newlines.
    - DOCX: a single synthetic page holding the whole raw text.
    - Corrupt streams and documents with no readable text raise DocumentReadError.
    """
    validate_upload(content_type, len(data))

    try:
        if content_type == PDF_MIME:
            page_texts = extract_pdf_pages(data)
            pages = [DocumentPage(page_number=i, content=t) for i, t in enumerate(page_texts, start=1)]
        else:
            text = extract_docx_text(data)
            pages = [DocumentPage(page_number=1, content=text)]
    except Exception as e:
        raise DocumentReadError(
            "Could not read this document. The file may be corrupt or password protected."
        ) from e

    content = "\n".join(p.content for p in pages)
    if not content.strip():
        raise DocumentReadError(
            "No readable text found in this document. Scanned (image-only) files are not supported."
        )

    return ParsedDocument(content=content, pages=pages)


def load_document(path: str) -> ParsedDocument:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Document not found: {p}")
    return extract_document_text(p.read_bytes(), guess_content_type(str(p)))
