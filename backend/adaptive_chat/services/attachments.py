"""
Attachment intake for chat turns.

An uploaded file is read into memory exactly once and the spooled upload
is closed straight away, which removes its temporary file. Only the
metadata (filename, mimetype, size) is ever persisted.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import PurePath

from fastapi import UploadFile

from adaptive_chat.errors import ValidationError
from adaptive_chat.schemas.chat import AttachmentMeta
from adaptive_chat.services.pdf_processor import pdf_processor

logger = logging.getLogger(__name__)

TEXT_MIME_TYPES = {
    "text/plain",
    "text/csv",
    "text/html",
    "text/css",
    "text/javascript",
    "text/markdown",
    "application/json",
    "application/javascript",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# Image formats the vision model accepts
IMAGE_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

ALLOWED_EXTENSIONS = {
    # Text and code
    ".txt", ".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".cpp", ".c", ".h",
    ".css", ".html", ".json", ".md", ".pdf", ".doc", ".docx", ".csv",
    # Images
    ".jpg", ".jpeg", ".png", ".gif", ".webp",
}

_MIME_ALIASES = {"image/jpg": "image/jpeg"}


@dataclass(frozen=True)
class Attachment:
    """File content held in memory for a single prompt."""

    filename: str
    mimetype: str
    size: int
    text: str | None = None
    data: bytes | None = None

    @property
    def is_image(self) -> bool:
        return self.data is not None

    def meta(self) -> AttachmentMeta:
        return AttachmentMeta(filename=self.filename, mimetype=self.mimetype, size=self.size)


def _resolve_mimetype(filename: str, declared: str | None) -> str:
    mimetype = _MIME_ALIASES.get(declared or "", declared or "")
    if mimetype in TEXT_MIME_TYPES or mimetype in IMAGE_MIME_TYPES:
        return mimetype
    guessed, _ = mimetypes.guess_type(filename)
    guessed = _MIME_ALIASES.get(guessed or "", guessed or "")
    if guessed in IMAGE_MIME_TYPES:
        return guessed
    return mimetype or guessed or "application/octet-stream"


def check_allowed(filename: str, mimetype: str) -> None:
    extension = PurePath(filename).suffix.lower()
    if mimetype.startswith("image/") and mimetype not in IMAGE_MIME_TYPES:
        raise ValidationError("Unsupported image type. Use JPEG, PNG, GIF or WebP.")
    if mimetype in TEXT_MIME_TYPES or mimetype in IMAGE_MIME_TYPES or extension in ALLOWED_EXTENSIONS:
        return
    raise ValidationError("Invalid file type. Only text-based files and images are allowed.")


async def decode_content(filename: str, mimetype: str, content: bytes) -> Attachment:
    """Turn raw upload bytes into an in-memory attachment."""
    size = len(content)
    if mimetype in IMAGE_MIME_TYPES:
        return Attachment(filename=filename, mimetype=mimetype, size=size, data=content)

    if mimetype == "application/pdf" or filename.lower().endswith(".pdf"):
        pdf = await pdf_processor.extract_text(content, filename)
        logger.debug("Extracted %d pages from %s", pdf.page_count, filename)
        return Attachment(filename=filename, mimetype=mimetype, size=size, text=pdf.text)

    return Attachment(
        filename=filename,
        mimetype=mimetype,
        size=size,
        text=content.decode("utf-8", errors="replace"),
    )


async def read_upload(upload: UploadFile | None, max_size: int) -> Attachment | None:
    """
    Read an optional multipart upload into an Attachment.

    Raises ValidationError for oversized or disallowed files. The upload is
    always closed before returning.
    """
    if upload is None or not upload.filename:
        return None

    try:
        if upload.size is not None and upload.size > max_size:
            raise ValidationError(f"File too large. Maximum size is {max_size // (1024 * 1024)} MB.")

        filename = PurePath(upload.filename).name
        mimetype = _resolve_mimetype(filename, upload.content_type)
        check_allowed(filename, mimetype)

        content = await upload.read(max_size + 1)
        if len(content) > max_size:
            raise ValidationError(f"File too large. Maximum size is {max_size // (1024 * 1024)} MB.")
    finally:
        await upload.close()

    return await decode_content(filename, mimetype, content)
