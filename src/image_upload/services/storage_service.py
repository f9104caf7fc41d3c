"""Service layer – disk storage for uploaded files.

Files land flat in a single upload directory as
``<epoch millis>-<percent-encoded original name>``.  Two uploads with the
same original name accepted within the same millisecond resolve to the same
name; the later write replaces the earlier file.
"""

from __future__ import annotations

import shutil
import time
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from src.image_upload.errors import ProcessingError
from src.image_upload.schemas.upload import StoredFile

# Characters ``encodeURIComponent`` leaves untouched besides [A-Za-z0-9_.-~].
_URI_COMPONENT_SAFE = "!*'()"

COPY_BUFFER_SIZE = 1024 * 1024  # 1 MB


def percent_encode(value: str) -> str:
    """Percent-encode *value* as a single URI component (UTF-8)."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class DiskStorage:
    """Write uploads into *destination* under timestamp-prefixed names."""

    def __init__(self, destination: Path, clock: Callable[[], int] = epoch_millis) -> None:
        self.destination = Path(destination).resolve()
        self.clock = clock

    def generate_filename(self, original_name: str) -> tuple[str, int]:
        """Return ``(generated_name, millis)`` for a client-supplied name."""
        millis = self.clock()
        return f"{millis}-{percent_encode(original_name)}", millis

    def resolve_path(self, generated_name: str) -> Path:
        """Absolute path for *generated_name*, guaranteed to sit directly in the upload root."""
        path = (self.destination / generated_name).resolve()
        if path.parent != self.destination:
            raise ProcessingError(f"Refusing to write outside {self.destination}: {generated_name}")
        return path

    async def save(self, upload: UploadFile) -> StoredFile:
        """Persist *upload* and describe the stored file."""
        original_name = upload.filename or ""
        generated_name, millis = self.generate_filename(original_name)
        path = self.resolve_path(generated_name)

        await upload.seek(0)
        size = await run_in_threadpool(self._write, upload.file, path)

        return StoredFile(
            original_name=original_name,
            generated_name=generated_name,
            storage_path=path,
            size_bytes=size,
            created_at_millis=millis,
        )

    @staticmethod
    def _write(source: BinaryIO, path: Path) -> int:
        with open(path, "wb") as f:
            shutil.copyfileobj(source, f, COPY_BUFFER_SIZE)
            return f.tell()
