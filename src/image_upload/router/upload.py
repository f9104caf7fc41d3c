"""Router – image upload."""

from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.image_upload.config import settings
from src.image_upload.schemas.upload import ErrorResponse, UploadResponse
from src.image_upload.services.ingestor import UploadConfig, UploadIngestor

router = APIRouter(tags=["Upload"])


@lru_cache
def get_ingestor() -> UploadIngestor:
    """Ingestor configured from application settings."""
    return UploadIngestor(UploadConfig.from_settings(settings))


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Image upload error"},
        500: {"model": ErrorResponse, "description": "Error uploading image"},
    },
)
async def upload_image(
    request: Request,
    ingestor: UploadIngestor = Depends(get_ingestor),
) -> JSONResponse:
    """
    Upload one image as the ``image`` field of a multipart form.

    Returns
    -------
    200 ``{"imageUrl": "<scheme>://<host>/uploads/<stored name>"}``
    400 ``{"message": "Image upload error"}`` when the multipart body is unusable.
    500 ``{"message": "Error uploading image"}`` for any other failure.
    """
    result = await ingestor.handle_image_upload(request)
    return result.to_response()
