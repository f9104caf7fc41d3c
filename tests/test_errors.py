"""Tests for upload error classification and the logging sink."""

import logging

import pytest
from python_multipart.exceptions import MultipartParseError
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

from src.image_upload.errors import (
    ProcessingError,
    UploadError,
    classify_error,
    is_upload_library_error,
)
from src.image_upload.log import log_data


@pytest.mark.parametrize(
    "exc",
    [
        MultiPartException("Missing boundary in multipart."),
        MultipartParseError("Did not find boundary character"),
        ClientDisconnect(),
    ],
)
def test_library_errors_are_upload_errors(exc: Exception) -> None:
    assert is_upload_library_error(exc)
    error = classify_error(exc)
    assert isinstance(error, UploadError)
    assert error.status_code == 400
    assert error.message == "Image upload error"


@pytest.mark.parametrize("exc", [OSError("disk full"), RuntimeError("boom"), KeyError("x")])
def test_other_errors_are_processing_errors(exc: Exception) -> None:
    assert not is_upload_library_error(exc)
    error = classify_error(exc)
    assert isinstance(error, ProcessingError)
    assert error.status_code == 500
    assert error.message == "Error uploading image"


def test_classify_keeps_ingestion_errors() -> None:
    error = UploadError("Missing file field 'image'")
    assert classify_error(error) is error


def test_library_error_message_is_kept_for_logs() -> None:
    error = classify_error(MultiPartException("Too many files. Maximum number of files is 1."))
    assert error.detail == "Too many files. Maximum number of files is 1."


def test_log_data_levels(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="sink-test")

    log_data("sink-test", "stored", "info")
    log_data("sink-test", "failed", "ERROR")

    assert [(r.name, r.levelno, r.getMessage()) for r in caplog.records] == [
        ("sink-test", logging.INFO, "stored"),
        ("sink-test", logging.ERROR, "failed"),
    ]


def test_log_data_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        log_data("sink-test", "message", "verbose")
