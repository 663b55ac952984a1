from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from photogallery.core.modules.photo.models import UploadedFile, UploadReport
from photogallery.core.modules.ratelimit.models import UPLOAD, RateLimitResult
from photogallery.web.deps import AppDep, AuthTokenDep, ConfigDep, rate_limit
from photogallery.web.openapi import ErrorResponse

router = APIRouter(tags=["upload"])

upload_rate_limit = rate_limit(UPLOAD)


async def read_upload(file: UploadFile, max_size: int) -> UploadedFile:
    """Read a multipart part, skipping the body of parts already known to be too large."""
    filename = file.filename or ""
    content_type = file.content_type or "application/octet-stream"
    if file.size is not None and file.size > max_size:
        return UploadedFile(filename=filename, content_type=content_type, content=b"", size=file.size)
    return UploadedFile(filename=filename, content_type=content_type, content=await file.read())


@router.post(
    "/upload",
    summary="Upload photos",
    description="Upload up to 10 images (multipart field `files`). Only the site owner can upload.",
    operation_id="uploadPhotos",
    response_model=UploadReport,
    response_model_exclude_none=True,
    responses={
        200: {"description": "At least one file was stored"},
        400: {"model": ErrorResponse, "description": "No files or too many files"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the site owner"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"description": "All uploads failed"},
    },
)
async def upload_photos(
    limit: Annotated[RateLimitResult, Depends(upload_rate_limit)],
    app: AppDep,
    config: ConfigDep,
    auth_token: AuthTokenDep,
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> UploadReport | JSONResponse:
    uploaded = [await read_upload(file, config.max_upload_size) for file in files or []]
    report = await app.upload_photos(auth_token, uploaded)

    if report.uploaded == 0:
        errors = [error.model_dump() for error in report.errors or []]
        return JSONResponse(
            status_code=500, content={"error": "All uploads failed", "details": errors}, headers=limit.headers()
        )

    return report
