"""Upload validation rules."""

from pathlib import PurePosixPath
from urllib.parse import urlparse

from photogallery.errors import ValidationError

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/heic", "image/heif"}

# Extension -> content type served for the full-size rendition
EXTENSION_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}


def is_safe_filename(filename: str) -> bool:
    """Reject names that could escape the photo directory."""
    return bool(filename) and ".." not in filename and "/" not in filename and "\\" not in filename


def content_type_for(filename: str) -> str:
    return EXTENSION_CONTENT_TYPES.get(PurePosixPath(filename).suffix.lower(), "image/jpeg")


def validate_upload(filename: str | None, content_type: str | None, size: int, max_size: int) -> str:
    """Validate an uploaded file's name, size and type.

    Args:
        filename: Name supplied by the client
        content_type: Content type supplied by the client
        size: File size in bytes
        max_size: Maximum allowed size in bytes

    Returns:
        The validated filename

    Raises:
        ValidationError: If any check fails
    """
    if not filename:
        raise ValidationError("File has no name")

    if size > max_size:
        raise ValidationError(f"File {filename} is too large. Max size is {max_size // (1024 * 1024)}MB.")

    file_type = (content_type or "").lower()
    if file_type not in ALLOWED_CONTENT_TYPES and PurePosixPath(filename.lower()).suffix not in EXTENSION_CONTENT_TYPES:
        raise ValidationError(f"File {filename} is not a supported image type.")

    if not is_safe_filename(filename):
        raise ValidationError(f"Invalid filename: {filename}")

    return filename


def is_allowed_referer(referer: str, allowed_hosts: list[str]) -> bool:
    """Whether a Referer header points at one of the allowed hosts or their subdomains."""
    host = (urlparse(referer).hostname or "").lower()
    if not host:
        return False
    for allowed in allowed_hosts:
        allowed_host = allowed.lower()
        if host == allowed_host or host.endswith(f".{allowed_host}"):
            return True
    return False
