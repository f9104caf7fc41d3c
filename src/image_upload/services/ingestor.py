"""Service layer – image upload ingestion.

``UploadIngestor`` decodes a ``multipart/form-data`` request, stores its single
``image`` file part through ``DiskStorage`` and builds the public URL of the
stored file.  Every call produces exactly one log record and one
``UploadResult``; failures never escape as exceptions.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel
from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartParser
from starlette.requests import Request

from src.image_upload.config import Settings
from src.image_upload.errors import UploadError, classify_error, error_detail
from src.image_upload.log import log_data
from src.image_upload.schemas.upload import UploadResult
from src.image_upload.services.storage_service import DiskStorage, epoch_millis, percent_encode

LOG_SOURCE = "ingestor.py"


class UploadConfig(BaseModel):
    """Everything an ``UploadIngestor`` needs to know about its deployment."""
    upload_root: Path
    field_name: str = "image"
    url_path: str = "/uploads"
    max_files: int = 1
    max_fields: int = 1000

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadConfig":
        return cls(
            upload_root=settings.upload_dir,
            field_name=settings.upload_field_name,
            url_path=settings.uploads_url_path,
            max_files=settings.max_upload_files,
            max_fields=settings.max_upload_fields,
        )


class UploadIngestor:
    """Accept one image per request and store it in the upload root."""

    def __init__(self, config: UploadConfig, clock: Callable[[], int] = epoch_millis) -> None:
        self.config = config
        self.storage = DiskStorage(config.upload_root, clock=clock)

    # ──────────────────────────────────────────────
    # Logging helpers
    # ──────────────────────────────────────────────
    def _log_error(self, message: str, error: BaseException, origin: str) -> None:
        log_data(LOG_SOURCE, f"[{origin}] {message}: {error_detail(error)}", "error")

    def _log_info(self, message: str, origin: str) -> None:
        log_data(LOG_SOURCE, f"[{origin}] {message}", "info")

    # ──────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────
    async def handle_image_upload(self, request: Request) -> UploadResult:
        """Ingest the ``image`` part of *request*.

        Returns 200 with ``imageUrl`` on success, 400 when the multipart
        body cannot be decoded into a single image part and 500 for any
        other failure.
        """
        origin = "handle_image_upload"
        try:
            form = await self._decode(request)
            try:
                upload = self._select_upload(form)
                stored = await self.storage.save(upload)
            finally:
                await form.close()
            image_url = self.build_image_url(request, stored.generated_name)
        except Exception as exc:
            error = classify_error(exc)
            self._log_error(error.label, exc, origin)
            return UploadResult.failure(error)

        self._log_info(f"Image uploaded: {image_url}", origin)
        return UploadResult.success(image_url, stored)

    def build_image_url(self, request: Request, generated_name: str) -> str:
        scheme = request.url.scheme
        host = request.headers.get("host") or request.url.netloc
        path = self.config.url_path.rstrip("/")
        return f"{scheme}://{host}{path}/{percent_encode(generated_name)}"

    # ──────────────────────────────────────────────
    # Multipart decoding
    # ──────────────────────────────────────────────
    async def _decode(self, request: Request) -> FormData:
        content_type = request.headers.get("content-type", "")
        if not content_type.lower().startswith("multipart/form-data"):
            raise UploadError(f"Expected multipart/form-data, got '{content_type or 'nothing'}'")

        parser = MultiPartParser(
            request.headers,
            request.stream(),
            max_files=self.config.max_files,
            max_fields=self.config.max_fields,
        )
        return await parser.parse()

    def _select_upload(self, form: FormData) -> UploadFile:
        """Pick the single file part named after ``config.field_name``."""
        upload: UploadFile | None = None
        for name, value in form.multi_items():
            # A file input left empty still sends a part, with an empty filename.
            if not isinstance(value, UploadFile) or not value.filename:
                continue
            if name != self.config.field_name or upload is not None:
                raise UploadError(f"Unexpected field '{name}'")
            upload = value

        if upload is None:
            raise UploadError(f"Missing file field '{self.config.field_name}'")
        return upload
