"""PDF text extraction for chat attachments, using PyMuPDF."""

import asyncio
import logging
import re
from dataclasses import dataclass

import pymupdf  # PyMuPDF

from adaptive_chat.errors import ValidationError

logger = logging.getLogger(__name__)

# Control characters that Postgres TEXT/VARCHAR cannot store (NUL, etc.)
_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


@dataclass(frozen=True)
class PdfText:
    text: str
    page_count: int


def _extract(pdf_bytes: bytes) -> PdfText:
    with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:
        pages = [page.get_text() for page in doc]
    # Pages separated by a blank line
    return PdfText(text=_ILLEGAL_CHARS.sub("", "\n\n".join(pages)), page_count=len(pages))


class PDFProcessor:
    """Turns an uploaded PDF into plain text for the prompt."""

    async def extract_text(self, pdf_bytes: bytes, filename: str = "") -> PdfText:
        """
        Extract the text of every page.

        Parsing runs in a worker thread. Any parse failure is reported as a
        ValidationError, since the upload itself is what is broken.
        """
        try:
            return await asyncio.to_thread(_extract, pdf_bytes)
        except Exception as e:
            logger.warning("PDF text extraction failed for %s: %s", filename or "<upload>", e)
            raise ValidationError("Error processing file") from e


pdf_processor = PDFProcessor()
