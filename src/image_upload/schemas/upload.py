from pathlib import Path

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from src.image_upload.errors import IngestionError


class StoredFile(BaseModel):
    """A file persisted in the upload directory."""
    original_name: str
    generated_name: str
    storage_path: Path
    size_bytes: int
    created_at_millis: int


class UploadResponse(BaseModel):
    """Success body for POST /upload."""
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")


class ErrorResponse(BaseModel):
    """Failure body for POST /upload."""
    message: str


class UploadResult(BaseModel):
    """Outcome of one upload: the HTTP status plus its JSON body."""
    status_code: int
    body: UploadResponse | ErrorResponse
    stored_file: StoredFile | None = None

    @classmethod
    def success(cls, image_url: str, stored_file: StoredFile) -> "UploadResult":
        return cls(
            status_code=200,
            body=UploadResponse(image_url=image_url),
            stored_file=stored_file,
        )

    @classmethod
    def failure(cls, error: IngestionError) -> "UploadResult":
        return cls(status_code=error.status_code, body=ErrorResponse(message=error.message))

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.body.model_dump(by_alias=True),
        )
