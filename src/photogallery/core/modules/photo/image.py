"""Image checks and thumbnail generation."""

from io import BytesIO
from pathlib import Path

from PIL import Image
from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

register_heif_opener()

THUMBNAIL_MAX_WIDTH = 400


def is_valid_image(content: bytes) -> bool:
    """Check if bytes are a valid image that can be opened by PIL."""
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
    except Exception:
        return False
    else:
        return True


def generate_thumbnail(source: Path, destination: Path, max_width: int = THUMBNAIL_MAX_WIDTH) -> tuple[int, int]:
    """Resize image to max_width while maintaining aspect ratio, save as WebP.

    Returns:
        Tuple of (width, height) of the generated thumbnail

    Raises:
        OSError: If image cannot be opened or saved
    """
    with Image.open(source) as img:
        original_width, original_height = img.size

        if original_width <= max_width:
            new_width = original_width
            new_height = original_height
        else:
            new_width = max_width
            new_height = int((max_width / original_width) * original_height)

        frame = img if img.mode in ("RGB", "RGBA") else img.convert("RGB")
        resized = frame.resize((new_width, new_height), Image.Resampling.LANCZOS)

        destination.parent.mkdir(parents=True, exist_ok=True)
        resized.save(destination, format="WEBP", quality=85)

        return new_width, new_height
