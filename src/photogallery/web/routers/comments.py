"""Comment-related API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Response
from pydantic import BaseModel, Field

from photogallery.core.modules.comment.models import CommentView
from photogallery.core.modules.ratelimit.models import COMMENTS_POST
from photogallery.web.deps import AppDep, AuthTokenDep, ClientIpDep, rate_limit
from photogallery.web.openapi import ErrorResponse, SuccessResponse

router: APIRouter = APIRouter(tags=["comments"])


class CreateCommentRequest(BaseModel):
    """Request to create a new comment."""

    photo: str | None = Field(None, description="Photo filename")
    author: str | None = Field(None, description="Display name, defaults to Anonymous")
    text: str | None = Field(None, description="The comment text (max 1000 characters)")


class CommentListResponse(BaseModel):
    comments: list[CommentView]


class CommentResponse(BaseModel):
    comment: CommentView


@router.get(
    "/comments",
    summary="List photo comments",
    description="Get all comments for a photo, newest first.",
    operation_id="listComments",
    responses={
        200: {"description": "List of comments"},
        400: {"model": ErrorResponse, "description": "Missing photo parameter"},
    },
)
async def list_comments(app: AppDep, response: Response, photo: str | None = None) -> CommentListResponse:
    response.headers["Cache-Control"] = "no-cache"
    return CommentListResponse(comments=await app.get_comments(photo))


@router.post(
    "/comments",
    summary="Create comment",
    description="Add an anonymous comment to a photo.",
    operation_id="createComment",
    status_code=201,
    dependencies=[Depends(rate_limit(COMMENTS_POST))],
    responses={
        201: {"description": "Comment created successfully"},
        400: {"model": ErrorResponse, "description": "Missing photo or text, or text too long"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
async def create_comment(
    request: CreateCommentRequest,
    app: AppDep,
    client_ip: ClientIpDep,
    user_agent: Annotated[str | None, Header()] = None,
) -> CommentResponse:
    comment = await app.create_comment(request.photo, request.author, request.text, client_ip, user_agent)
    return CommentResponse(comment=comment)


@router.delete(
    "/comments/{comment_id}",
    summary="Delete comment",
    description="Delete a comment. Only the site owner can delete comments.",
    operation_id="deleteComment",
    responses={
        200: {"description": "Comment deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the site owner"},
        404: {"model": ErrorResponse, "description": "Comment not found"},
    },
)
async def delete_comment(comment_id: int, app: AppDep, auth_token: AuthTokenDep) -> SuccessResponse:
    await app.delete_comment(auth_token, comment_id)
    return SuccessResponse()
