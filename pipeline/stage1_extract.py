"""Stage 1: Extract paragraph lines from uploaded document bytes.

Recognised formats, detected from the leading bytes:
  - DOCX   (zip container)   read with python-docx
  - PDF                      read with pdfplumber
  - UTF-8 plain text / markdown

Every returned line is stripped and non-empty. The first line is the
document title; the assembly service splits it off before classification.
"""
import io
import logging
from typing import Iterator

from errors import UnreadableDocument

logger = logging.getLogger(__name__)

_ZIP_MAGIC = b"PK\x03\x04"
_PDF_MAGIC = b"%PDF"


def extract_paragraphs(data: bytes) -> list[str]:
    """Return the non-empty, stripped text lines of a document.

    Raises UnreadableDocument when the bytes are not a document we can read.
    """
    if data.startswith(_ZIP_MAGIC):
        text = _read_docx(data)
        source = "docx"
    elif data.startswith(_PDF_MAGIC):
        text = _read_pdf(data)
        source = "pdf"
    else:
        text = _read_plain_text(data)
        source = "text"

    paragraphs = _split_lines(text)
    logger.info("Stage 1 complete → %d paragraphs (%s, %d bytes)", len(paragraphs), source, len(data))
    return paragraphs


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def _read_docx(data: bytes) -> str:
    from docx import Document

    try:
        doc = Document(io.BytesIO(data))
    except Exception as exc:
        raise UnreadableDocument(f"Could not read DOCX document: {exc}") from exc
    return "\n".join(_docx_block_lines(doc))


def _docx_block_lines(container) -> Iterator[str]:
    """Yield paragraph text in body order, descending into table cells."""
    from docx.table import Table

    for block in container.iter_inner_content():
        if isinstance(block, Table):
            yield from _docx_table_lines(block)
        else:
            yield block.text


def _docx_table_lines(table) -> Iterator[str]:
    # a merged cell is returned once per grid column it spans
    seen = set()
    for row in table.rows:
        for cell in row.cells:
            if cell._tc in seen:
                continue
            seen.add(cell._tc)
            yield from _docx_block_lines(cell)


def _read_pdf(data: bytes) -> str:
    import pdfplumber

    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            return "\n".join(page.extract_text() or "" for page in pdf.pages)
    except Exception as exc:
        raise UnreadableDocument(f"Could not read PDF document: {exc}") from exc


def _read_plain_text(data: bytes) -> str:
    if b"\x00" in data:
        raise UnreadableDocument("Unrecognised binary document format")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnreadableDocument(f"Document is neither DOCX, PDF nor UTF-8 text: {exc}") from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]
