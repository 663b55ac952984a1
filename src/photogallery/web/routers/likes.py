from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from photogallery.core.modules.like.models import LikeStatus, LikeToggleResult
from photogallery.core.modules.ratelimit.models import LIKES_GET, LIKES_POST
from photogallery.web.deps import AppDep, ClientIpDep, rate_limit
from photogallery.web.openapi import ErrorResponse

router = APIRouter(tags=["likes"])


class ToggleLikeRequest(BaseModel):
    """Request to like or unlike a photo."""

    photo: str | None = Field(None, description="Photo filename")


@router.get(
    "/likes",
    summary="Get likes",
    description="Like count for a photo and whether the caller has liked it.",
    operation_id="getLikes",
    dependencies=[Depends(rate_limit(LIKES_GET))],
    responses={
        200: {"description": "Like status"},
        400: {"model": ErrorResponse, "description": "Missing photo parameter"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def get_likes(app: AppDep, client_ip: ClientIpDep, response: Response, photo: str | None = None) -> LikeStatus:
    response.headers["Cache-Control"] = "no-cache"
    return await app.get_likes(photo, client_ip)


@router.post(
    "/likes",
    summary="Toggle like",
    description="Like the photo, or remove the caller's like if present.",
    operation_id="toggleLike",
    dependencies=[Depends(rate_limit(LIKES_POST))],
    responses={
        200: {"description": "Like toggled"},
        400: {"model": ErrorResponse, "description": "Missing photo"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def toggle_like(request: ToggleLikeRequest, app: AppDep, client_ip: ClientIpDep) -> LikeToggleResult:
    return await app.toggle_like(request.photo, client_ip)
