from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

from photogallery.utils import now


class PhotoSize(StrEnum):
    """Stored renditions of a photo."""

    THUMB = "thumb"
    FULL = "full"


class PhotoMetadata(BaseModel):
    """Per-photo record kept in the key-value store under `photo:<filename>`."""

    filename: str
    size: int = 0  # Original file size in bytes
    content_type: str = "image/jpeg"
    uploaded_at: datetime = Field(default_factory=now)
    views: int = 0
    last_viewed: datetime | None = None


class PhotoList(BaseModel):
    """Gallery listing, either bare filenames or full metadata."""

    count: int = Field(..., ge=0)
    photos: list[str] | list[PhotoMetadata]


@dataclass
class UploadedFile:
    """A file received in a multipart upload.

    `size` is the declared size when it is known before the body is read;
    oversized parts are passed on without their content.
    """

    filename: str
    content_type: str
    content: bytes
    size: int | None = None


class UploadFileResult(BaseModel):
    filename: str
    status: str = "success"


class UploadFileError(BaseModel):
    filename: str
    error: str


class UploadReport(BaseModel):
    """Outcome of a multi-file upload."""

    success: bool = True
    uploaded: int
    failed: int
    results: list[UploadFileResult]
    errors: list[UploadFileError] | None = None


@dataclass
class PhotoFile:
    """A stored rendition ready to be served."""

    path: Path
    filename: str
    size: PhotoSize
    content_type: str
    etag: str
