"""Upload error kinds and their mapping to HTTP responses.

Every failure seen while ingesting an upload ends up in one of two buckets:

* ``UploadError``     – the multipart layer rejected the request (400).
* ``ProcessingError`` – anything else, e.g. a failed disk write (500).
"""

from __future__ import annotations

from python_multipart.exceptions import FormParserError
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

# Errors raised by the multipart decoding stack (Starlette + python-multipart).
UPLOAD_LIBRARY_ERRORS: tuple[type[BaseException], ...] = (
    MultiPartException,
    FormParserError,
    ClientDisconnect,
)


class IngestionError(Exception):
    """Base class for failures surfaced to the uploading client."""

    status_code: int = 500
    message: str = "Error uploading image"
    label: str = "Error uploading image"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail


class UploadError(IngestionError):
    """The multipart body could not be decoded into a single image part."""

    status_code = 400
    message = "Image upload error"
    label = "Upload library error"


class ProcessingError(IngestionError):
    """Unexpected failure while storing an already decoded upload."""


def is_upload_library_error(exc: BaseException) -> bool:
    return isinstance(exc, UPLOAD_LIBRARY_ERRORS)


def error_detail(exc: BaseException) -> str:
    """Best human-readable description of *exc* for the logs."""
    detail = getattr(exc, "detail", None) or getattr(exc, "message", None)
    if isinstance(detail, str) and detail:
        return detail
    return str(exc) or type(exc).__name__


def classify_error(exc: Exception) -> IngestionError:
    """Map any exception onto ``UploadError`` or ``ProcessingError``."""
    if isinstance(exc, IngestionError):
        return exc
    if is_upload_library_error(exc):
        return UploadError(error_detail(exc))
    return ProcessingError(error_detail(exc))

