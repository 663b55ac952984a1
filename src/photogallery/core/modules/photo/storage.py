"""Blob storage for photo renditions.

Layout: `<photos_path>/full/<filename>` and `<photos_path>/thumb/<filename>`.
"""

from pathlib import Path

from photogallery.core.modules.photo.models import PhotoSize


def get_photo_file_path(photos_path: str, size: PhotoSize, filename: str) -> Path:
    """Get absolute path to a photo rendition."""
    return Path(photos_path) / size.value / filename


def write_photo_file(photos_path: str, size: PhotoSize, filename: str, content: bytes) -> Path:
    """Write a photo rendition to disk, replacing any existing file.

    Returns:
        Absolute path to written file
    """
    file_path = get_photo_file_path(photos_path, size, filename)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    return file_path


def get_file_etag(path: Path) -> str:
    """Quoted entity tag derived from modification time and size."""
    stat = path.stat()
    return f'"{stat.st_mtime_ns:x}-{stat.st_size:x}"'
