from photogallery.core.modules.comment.models import DEFAULT_AUTHOR, MAX_COMMENT_LENGTH
from photogallery.errors import ValidationError


def validate_comment(photo: str | None, author: str | None, text: str | None) -> tuple[str, str, str]:
    """Validate comment input and return (photo, author, text) with defaults applied."""
    if not photo or not text:
        raise ValidationError("Missing photo or text")
    if len(text) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment too long (max {MAX_COMMENT_LENGTH} characters)")
    return photo, author or DEFAULT_AUTHOR, text
