from datetime import datetime

from pydantic import BaseModel, Field

from photogallery.core.db import MongoModel
from photogallery.utils import now

MAX_COMMENT_LENGTH = 1000
DEFAULT_AUTHOR = "Anonymous"


class Comment(MongoModel):
    """Visitor comment on a photo.

    Indexed on photo_name and created_at.
    """

    id: int = Field(alias="_id")  # Sequential, from the comment counter
    photo_name: str
    author_name: str = DEFAULT_AUTHOR
    comment_text: str
    created_at: datetime = Field(default_factory=now)
    ip_hash: str  # Truncated salted hash, never the address itself
    user_agent: str = "unknown"


class CommentView(BaseModel):
    """Comment as shown to visitors (API representation)."""

    id: int = Field(..., description="Comment ID")
    photo_name: str = Field(..., description="Photo filename")
    author_name: str = Field(..., description="Display name of the author")
    comment_text: str = Field(..., description="Comment text")
    created_at: datetime = Field(..., description="When the comment was posted")

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentView":
        """Create view model from domain model."""
        return cls(
            id=comment.id,
            photo_name=comment.photo_name,
            author_name=comment.author_name,
            comment_text=comment.comment_text,
            created_at=comment.created_at,
        )
