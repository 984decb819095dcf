"""PDF text extraction using PyMuPDF."""

import logging
import re
from urllib.parse import unquote

import fitz  # PyMuPDF

from lecture_sync.config import MAX_EXTRACTED_CHARS, MIN_EXTRACTED_CHARS
from lecture_sync.errors import EmptyOrCorruptError, PDFParseError, UnsupportedFormatError

logger = logging.getLogger(__name__)

_ESCAPE_SEQUENCE = re.compile(r"%[0-9A-Fa-f]{2}")
_WHITESPACE = re.compile(r"\s+")


def decode_run(run: str) -> str:
    """Percent-decode a text run if it is URI-escaped.

    Runs that fail to decode are returned unchanged.
    """
    if not _ESCAPE_SEQUENCE.search(run):
        return run
    try:
        return unquote(run, errors="strict")
    except UnicodeDecodeError:
        return run


def join_page_runs(lines: list[list[str]]) -> str:
    """Build page text from its lines of text runs.

    Runs within a line are concatenated; blank lines are dropped and the
    rest are joined with a space.
    """
    texts = ("".join(decode_run(run) for run in runs) for runs in lines)
    return " ".join(text for text in texts if text.strip()).strip()


def clean_text(page_texts: list[str], max_chars: int = MAX_EXTRACTED_CHARS) -> str:
    """Join page texts as paragraphs, collapse whitespace and cap the length."""
    full_text = "".join(f"{text}\n\n" for text in page_texts if text)
    return _WHITESPACE.sub(" ", full_text).strip()[:max_chars]


def _page_lines(page: fitz.Page) -> list[list[str]]:
    lines = []
    for block in page.get_text("dict").get("blocks", []):
        # Image blocks carry no lines
        for line in block.get("lines", []):
            lines.append([span.get("text", "") for span in line.get("spans", [])])
    return lines


def extract_text(data: bytes, mime_type: str) -> str:
    """Extract normalized plain text from a PDF.

    Args:
        data: Raw file bytes
        mime_type: MIME type reported by the source

    Returns:
        Whitespace-normalized text, at most MAX_EXTRACTED_CHARS long

    Raises:
        UnsupportedFormatError: If the file is not a PDF
        PDFParseError: If the byte stream cannot be parsed
        EmptyOrCorruptError: If the PDF has no pages or too little text
    """
    if "pdf" not in (mime_type or "").lower():
        raise UnsupportedFormatError(mime_type)

    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.error(f"PDF parser error: {e}")
        raise PDFParseError(f"Failed to parse PDF: {e}") from e

    with doc:
        if doc.needs_pass:
            raise PDFParseError("Failed to parse PDF: document is encrypted")

        page_count = doc.page_count
        if page_count == 0:
            raise EmptyOrCorruptError("PDF contains no pages")

        page_texts = []
        try:
            for page in doc:
                page_texts.append(join_page_runs(_page_lines(page)))
        except Exception as e:
            logger.error(f"Error reading PDF pages: {e}")
            raise PDFParseError(f"Failed to extract PDF text: {e}") from e

    text = clean_text(page_texts)

    if len(text) < MIN_EXTRACTED_CHARS:
        raise EmptyOrCorruptError(
            "Extracted text is too short or invalid; the PDF may be empty or corrupted",
            {"length": len(text), "minimum": MIN_EXTRACTED_CHARS},
        )

    logger.info(f"Extracted {len(text)} characters from {page_count} page(s)")
    return text
