"""Router – health checks."""

import os

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from src.image_upload.config import UPLOAD_DIR

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/health/ready")
def readiness_check() -> JSONResponse:
    """Readiness probe – the upload directory must exist and be writable."""
    ready = UPLOAD_DIR.is_dir() and os.access(UPLOAD_DIR, os.W_OK)
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "unavailable", "upload_dir": str(UPLOAD_DIR)},
    )
