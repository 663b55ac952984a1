from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from photogallery.core.db import MongoModel
from photogallery.utils import now


class Like(MongoModel):
    """A like on a photo by one (hashed) client address.

    Indexed on (photo_name, ip_hash) - unique.
    """

    id: UUID = Field(alias="_id", default_factory=uuid4)
    photo_name: str
    ip_hash: str
    created_at: datetime = Field(default_factory=now)


class LikeStatus(BaseModel):
    """Like count for a photo and whether the caller has liked it."""

    photo: str = Field(..., description="Photo filename")
    count: int = Field(..., description="Total number of likes", ge=0)
    liked: bool = Field(..., description="Whether the caller has liked the photo")


class LikeToggleResult(LikeStatus):
    action: str = Field(..., description="'liked' or 'unliked'")
