"""Acceptance checks for uploaded statements.

Rejections happen before any processing starts and leave no partial state.
"""

from __future__ import annotations

import mimetypes
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import StatementDocument

PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
_PDF_MAGIC = b"%PDF-"


_logger = get_logger("statement_converter.intake")


class UploadRejected(ValueError):
    """The uploaded file is not acceptable; the message is user-facing."""


def guess_content_type(filename: str, data: bytes) -> str:
    """Guess a content type from the file name, then from the PDF signature."""

    guessed, _encoding = mimetypes.guess_type(filename)
    if guessed:
        return guessed
    if data.startswith(_PDF_MAGIC):
        return PDF_CONTENT_TYPE
    return "application/octet-stream"


def read_document(path: str | PathLike[str]) -> StatementDocument:
    """Read ``path`` into a :class:`StatementDocument`.

    I/O errors (missing file, permissions) propagate to the caller.
    """

    p = Path(path)
    data = p.read_bytes()
    return StatementDocument(
        filename=p.name,
        content_type=guess_content_type(p.name, data),
        data=data,
    )


def check_document(document: StatementDocument) -> None:
    """Raise :class:`UploadRejected` unless ``document`` is a PDF within the size limit."""

    if document.content_type != PDF_CONTENT_TYPE:
        _logger.info(
            "intake:rejected filename=%s reason=content_type content_type=%s",
            document.filename,
            document.content_type,
        )
        raise UploadRejected("Please upload a PDF file only")
    if document.size == 0:
        _logger.info("intake:rejected filename=%s reason=empty", document.filename)
        raise UploadRejected("The uploaded file is empty")
    if document.size > MAX_UPLOAD_BYTES:
        _logger.info(
            "intake:rejected filename=%s reason=size size=%d", document.filename, document.size
        )
        raise UploadRejected("File size must be less than 10MB")
