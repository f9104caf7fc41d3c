"""Shared fixtures – every test gets its own upload directory."""

import io
import os
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

# The app reads its settings and mounts /uploads at import time; keep test
# uploads out of the source tree.
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="image-upload-tests-")

from src.image_upload.main import app  # noqa: E402
from src.image_upload.router.upload import get_ingestor  # noqa: E402
from src.image_upload.services.ingestor import UploadConfig, UploadIngestor  # noqa: E402

FIXED_MILLIS = 1_700_000_000_123


@pytest.fixture
def upload_root(tmp_path: Path) -> Path:
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture
def ingestor(upload_root: Path) -> UploadIngestor:
    return UploadIngestor(UploadConfig(upload_root=upload_root))


@pytest.fixture
def frozen_ingestor(upload_root: Path) -> UploadIngestor:
    """Ingestor whose clock is stuck on ``FIXED_MILLIS``."""
    return UploadIngestor(UploadConfig(upload_root=upload_root), clock=lambda: FIXED_MILLIS)


@pytest.fixture
def client_for() -> Iterator[Callable[..., TestClient]]:
    """Build a ``TestClient`` whose ``/upload`` route uses the given ingestor."""

    def _make(ingestor: UploadIngestor, base_url: str = "http://testserver") -> TestClient:
        app.dependency_overrides[get_ingestor] = lambda: ingestor
        return TestClient(app, base_url=base_url)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for: Callable[..., TestClient], ingestor: UploadIngestor) -> TestClient:
    return client_for(ingestor)


@pytest.fixture
def frozen_client(client_for: Callable[..., TestClient], frozen_ingestor: UploadIngestor) -> TestClient:
    return client_for(frozen_ingestor, "https://example.com")


@pytest.fixture
def png_bytes() -> bytes:
    """A small real PNG image."""
    img = Image.new("RGB", (64, 64), color="red")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
