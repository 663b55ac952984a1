"""Gallery listing and photo serving."""

from typing import Annotated
from urllib.parse import quote, urlparse

from fastapi import APIRouter, Header, Response
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse

from photogallery.config import Config
from photogallery.core.modules.photo.models import PhotoList, PhotoSize
from photogallery.core.modules.photo.validators import is_allowed_referer
from photogallery.web.deps import AppDep, ClientIpDep, ConfigDep
from photogallery.web.openapi import ErrorResponse

api_router = APIRouter(tags=["photos"])
router = APIRouter(tags=["photos"])

PHOTO_CACHE_CONTROL = "public, max-age=31536000"


def allowed_referer_hosts(config: Config) -> list[str]:
    site_host = urlparse(config.site_url).hostname
    return [*config.allowed_referer_hosts, *([site_host] if site_host else [])]


@api_router.get(
    "/photos",
    summary="List photos",
    description="List gallery photos. Use `?metadata=true` to include per-photo metadata and view counts.",
    operation_id="listPhotos",
)
async def list_photos(app: AppDep, response: Response, metadata: bool = False) -> PhotoList:
    response.headers["Cache-Control"] = "public, max-age=60"
    return await app.list_photos(include_metadata=metadata)


@router.get(
    "/photos/{filename}",
    summary="Serve photo",
    description=(
        "Serve a stored photo. `?size=thumb` serves the thumbnail, falling back to the full photo. "
        "Requests must come from the gallery: direct access is redirected and hotlinking is refused."
    ),
    operation_id="servePhoto",
    response_model=None,
    responses={
        200: {"description": "Photo bytes"},
        302: {"description": "Direct access, redirect to the gallery"},
        304: {"description": "Not modified"},
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        403: {"description": "Hotlinking not allowed"},
        404: {"model": ErrorResponse, "description": "Photo not found"},
    },
)
async def serve_photo(
    filename: str,
    app: AppDep,
    config: ConfigDep,
    client_ip: ClientIpDep,
    size: str = "full",
    referer: Annotated[str | None, Header()] = None,
    sec_fetch_site: Annotated[str | None, Header()] = None,
    if_none_match: Annotated[str | None, Header()] = None,
    user_agent: Annotated[str | None, Header()] = None,
) -> Response:
    if not referer and sec_fetch_site != "same-origin":
        return RedirectResponse(config.gallery_url, status_code=302)

    if referer and not is_allowed_referer(referer, allowed_referer_hosts(config)):
        return PlainTextResponse(
            "Hotlinking not allowed. View photos in the gallery.",
            status_code=403,
            headers={"X-Blocked-Reason": "hotlinking"},
        )

    photo_size = PhotoSize.THUMB if size == PhotoSize.THUMB else PhotoSize.FULL
    photo = app.get_photo_file(filename, photo_size)
    app.track_photo_view(filename, photo_size, client_ip, referer, user_agent)

    headers = {
        "Cache-Control": PHOTO_CACHE_CONTROL,
        "ETag": photo.etag,
        "X-Photo-Name": quote(photo.filename),
        "X-Photo-Size": photo.size.value,
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
    }
    if if_none_match == photo.etag:
        return Response(status_code=304, headers=headers)

    return FileResponse(path=photo.path, media_type=photo.content_type, headers=headers)
