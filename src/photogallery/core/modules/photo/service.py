import asyncio
import json
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from photogallery.core.core import Service
from photogallery.core.modules.photo.image import generate_thumbnail, is_valid_image
from photogallery.core.modules.photo.models import (
    PhotoFile,
    PhotoList,
    PhotoMetadata,
    PhotoSize,
    UploadedFile,
    UploadFileError,
    UploadFileResult,
    UploadReport,
)
from photogallery.core.modules.photo.storage import get_file_etag, get_photo_file_path, write_photo_file
from photogallery.core.modules.photo.validators import content_type_for, is_safe_filename, validate_upload
from photogallery.errors import NotFoundError, ValidationError
from photogallery.utils import hash_ip, now, now_ms

logger = structlog.get_logger(__name__)

PHOTO_LIST_KEY = "photo-list"
DAILY_VIEWS_TTL_SECONDS = 30 * 24 * 60 * 60
VIEW_LOG_TTL_SECONDS = 7 * 24 * 60 * 60


def photo_key(filename: str) -> str:
    return f"photo:{filename}"


class PhotoService(Service):
    """Stores uploaded photos, lists the gallery and counts views.

    Blobs live on disk under `photos_path`; the gallery index, per-photo
    metadata and view counters live in the key-value store.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._background_tasks: set[asyncio.Task[Any]] = set()

    async def on_start(self) -> None:
        """Create the rendition directories."""
        for size in PhotoSize:
            get_photo_file_path(self.core.config.photos_path, size, "").mkdir(parents=True, exist_ok=True)
        logger.info("Photo storage ready", photos_path=self.core.config.photos_path)

    async def on_stop(self) -> None:
        """Let pending thumbnail and view tracking tasks finish."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def upload_photos(self, files: list[UploadedFile]) -> UploadReport:
        """Validate and store each file; failures are reported per file.

        Raises:
            ValidationError: If no files or too many files were sent
        """
        config = self.core.config
        if not files:
            raise ValidationError("No files uploaded")
        if len(files) > config.max_upload_files:
            raise ValidationError(f"Maximum {config.max_upload_files} files per upload")

        results: list[UploadFileResult] = []
        errors: list[UploadFileError] = []
        for file in files:
            try:
                await self._store_photo(file)
                results.append(UploadFileResult(filename=file.filename))
            except (ValidationError, OSError) as e:
                logger.warning("Upload rejected", filename=file.filename, error=str(e))
                errors.append(UploadFileError(filename=file.filename or "unknown", error=str(e)))

        return UploadReport(
            uploaded=len(results),
            failed=len(errors),
            results=results,
            errors=errors or None,
        )

    async def _store_photo(self, file: UploadedFile) -> None:
        config = self.core.config
        size = file.size if file.size is not None else len(file.content)
        logger.info("Processing file", filename=file.filename, content_type=file.content_type, size=size)

        filename = validate_upload(file.filename, file.content_type, size, config.max_upload_size)
        if not is_valid_image(file.content):
            raise ValidationError(f"File {filename} is not a valid image.")

        source = await asyncio.to_thread(write_photo_file, config.photos_path, PhotoSize.FULL, filename, file.content)
        await self._register_photo(
            PhotoMetadata(filename=filename, size=len(file.content), content_type=content_type_for(filename))
        )
        self._spawn(self._generate_thumbnail(filename, source))

    async def _register_photo(self, metadata: PhotoMetadata) -> None:
        kv = self.core.services.kv
        existing = await self.get_metadata(metadata.filename)
        if existing is not None:
            # Re-upload replaces the file but keeps accumulated views
            metadata.views = existing.views
            metadata.last_viewed = existing.last_viewed
        await kv.put(photo_key(metadata.filename), metadata.model_dump_json())

        filenames = await self._get_photo_list()
        if metadata.filename not in filenames:
            filenames.append(metadata.filename)
            await kv.put(PHOTO_LIST_KEY, json.dumps(filenames))

    async def _generate_thumbnail(self, filename: str, source: Path) -> None:
        destination = get_photo_file_path(self.core.config.photos_path, PhotoSize.THUMB, filename)
        try:
            width, height = await asyncio.to_thread(generate_thumbnail, source, destination)
            logger.info("Generated thumbnail", filename=filename, width=width, height=height)
        except Exception:
            logger.exception("Failed to generate thumbnail", filename=filename)

    async def _get_photo_list(self) -> list[str]:
        raw = await self.core.services.kv.get(PHOTO_LIST_KEY)
        if raw is None:
            return []
        return [str(name) for name in json.loads(raw)]

    async def get_metadata(self, filename: str) -> PhotoMetadata | None:
        raw = await self.core.services.kv.get(photo_key(filename))
        if raw is None:
            return None
        return PhotoMetadata.model_validate_json(raw)

    async def list_photos(self, include_metadata: bool = False) -> PhotoList:
        """List gallery photos in upload order."""
        filenames = await self._get_photo_list()
        if not include_metadata:
            return PhotoList(count=len(filenames), photos=filenames)

        found = await asyncio.gather(*(self.get_metadata(name) for name in filenames))
        photos = [meta or PhotoMetadata(filename=name) for name, meta in zip(filenames, found, strict=True)]
        return PhotoList(count=len(photos), photos=photos)

    def get_photo_file(self, filename: str, size: PhotoSize) -> PhotoFile:
        """Resolve the rendition to serve; thumbnails fall back to the full photo.

        Raises:
            ValidationError: If the filename is unsafe
            NotFoundError: If no rendition exists
        """
        if not is_safe_filename(filename):
            raise ValidationError("Invalid filename")

        photos_path = self.core.config.photos_path
        path = get_photo_file_path(photos_path, size, filename)
        content_type = "image/webp" if size == PhotoSize.THUMB else content_type_for(filename)

        if not path.is_file() and size == PhotoSize.THUMB:
            logger.debug("Thumb not found, falling back to full", filename=filename)
            path = get_photo_file_path(photos_path, PhotoSize.FULL, filename)
            content_type = content_type_for(filename)

        if not path.is_file():
            raise NotFoundError("Photo not found")

        return PhotoFile(path=path, filename=filename, size=size, content_type=content_type, etag=get_file_etag(path))

    def schedule_view_tracking(
        self, filename: str, size: PhotoSize, client_ip: str, referer: str | None, user_agent: str | None
    ) -> None:
        """Count a view in the background so serving is never slowed down."""
        self._spawn(self.track_view(filename, size, client_ip, referer, user_agent))

    async def track_view(
        self, filename: str, size: PhotoSize, client_ip: str, referer: str | None, user_agent: str | None
    ) -> None:
        """Update total and daily counters, photo metadata and the detailed view log.

        Failures are logged and never propagated.
        """
        kv = self.core.services.kv
        try:
            view_key = f"views:{filename}"
            views = int(await kv.get(view_key) or "0") + 1
            await kv.put(view_key, str(views))

            timestamp = now()
            daily_key = f"views:{filename}:{timestamp.date().isoformat()}"
            daily_views = int(await kv.get(daily_key) or "0") + 1
            await kv.put(daily_key, str(daily_views), expire_after_seconds=DAILY_VIEWS_TTL_SECONDS)

            metadata = await self.get_metadata(filename)
            if metadata is not None:
                metadata.views = views
                metadata.last_viewed = timestamp
                await kv.put(photo_key(filename), metadata.model_dump_json())

            logged_at = now_ms()
            await kv.put(
                f"viewlog:{filename}:{logged_at}",
                json.dumps(
                    {
                        "timestamp": logged_at,
                        "size": size.value,
                        "referer": referer,
                        "user_agent": user_agent,
                        "ip_hash": hash_ip(client_ip, self.core.config.ip_hash_salt, length=16),
                    }
                ),
                expire_after_seconds=VIEW_LOG_TTL_SECONDS,
            )
            logger.debug("Tracked view", filename=filename, views=views)
        except Exception:
            logger.exception("View tracking failed", filename=filename)
