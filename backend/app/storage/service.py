"""
Album storage service.

Owns the business rules around object storage:
- validate uploads (MIME allow-list, size ceilings)
- generate unique storage filenames
- derive and store WebP thumbnails next to original images
- delete assets idempotently
- build public links and presigned URLs

Flow for an image upload:
1. Validate content type and size (nothing is written on rejection)
2. Generate filename {epoch_ms}-{uuid}{ext}
3. Render the thumbnail in a worker thread
4. Upload original and thumbnail concurrently
5. If either upload fails, delete both keys and re-raise
"""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Optional, Union

from app.storage import keys
from app.storage.config import StorageConfig
from app.storage.disposition import ATTACHMENT, INLINE, build_content_disposition
from app.storage.errors import UploadError
from app.storage.images import THUMBNAIL_CONTENT_TYPE, UnreadableImageError, create_thumbnail
from app.storage.mime import (
    DEFAULT_MIME_TYPE,
    FILE_EXTENSION_STRATEGIES,
    IMAGE_EXTENSION_STRATEGIES,
    resolve_extension,
)
from app.storage.object_client import ObjectStorageClient
from app.storage.results import ResultStatus, StorageResult
from app.utils.logging import (
    log_assets_deleted,
    log_storage_failure,
    log_upload_completed,
    log_upload_rejected,
)
from app.utils.metrics import storage_bytes_uploaded_total, uploads_rejected_total

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB
MAX_FILE_SIZE = 512 * 1024 * 1024  # 512MB for general files


@dataclass(frozen=True)
class UploadedFile:
    """An upload as received from the client."""
    name: str
    content_type: str
    size: int
    data: bytes


@dataclass(frozen=True)
class StoredAsset:
    """Result of a successful upload, to be persisted by the caller."""
    filename: str
    original_name: str


def generate_filename(extension: str) -> str:
    """Unique storage filename: {epoch_ms}-{uuid4}{extension}."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4()}{extension}"


def _format_limit(size_bytes: int) -> str:
    return f"{size_bytes // (1024 * 1024)}MB"


class StorageService:
    """
    Service for album uploads, deletions and links.

    Assembled once per process from a StorageConfig and an
    ObjectStorageClient; see build_storage_service().
    """

    def __init__(self, config: StorageConfig, client: ObjectStorageClient):
        self.config = config
        self.client = client

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _reject(self, reason: str, message: str, original_name: Optional[str] = None):
        uploads_rejected_total.labels(reason=reason).inc()
        log_upload_rejected(logger, reason=reason, message=message, original_name=original_name)
        raise UploadError(message)

    def validate_image(self, file: UploadedFile) -> None:
        """
        Check an image upload against the MIME allow-list and size limit.

        Raises:
            UploadError: With status 400 on violation
        """
        if file.content_type not in ALLOWED_IMAGE_TYPES:
            self._reject("mime_type", "Only JPG/PNG/GIF/WebP images are supported", file.name)
        if file.size > MAX_IMAGE_SIZE:
            self._reject("size", f"File size exceeds the limit ({_format_limit(MAX_IMAGE_SIZE)})", file.name)

    def validate_file(self, file: UploadedFile) -> None:
        """Check a generic upload against the size limit."""
        if file.size > MAX_FILE_SIZE:
            self._reject("size", f"File size exceeds the limit ({_format_limit(MAX_FILE_SIZE)})", file.name)

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def persist_image(self, file: UploadedFile) -> StoredAsset:
        """
        Store an image and its WebP thumbnail.

        Args:
            file: Uploaded image

        Returns:
            StoredAsset with the generated filename and the original name

        Raises:
            UploadError: If validation fails or the bytes are not an image
        """
        self.validate_image(file)
        start_time = time.time()

        try:
            thumbnail = await asyncio.to_thread(create_thumbnail, file.data)
        except UnreadableImageError:
            self._reject("unreadable", "Unable to read image", file.name)

        extension = resolve_extension(file.name, file.content_type, IMAGE_EXTENSION_STRATEGIES)
        filename = generate_filename(extension)
        original_key = keys.object_key(self.config, filename)
        thumb_key = keys.thumbnail_key(self.config, filename)

        results = await asyncio.gather(
            self.client.put(original_key, file.data, file.content_type),
            self.client.put(thumb_key, thumbnail, THUMBNAIL_CONTENT_TYPE),
            return_exceptions=True,
        )
        errors = [result for result in results if isinstance(result, BaseException)]
        if errors:
            log_storage_failure(
                logger,
                operation="persist_image",
                error=str(errors[0]),
                filename=filename,
            )
            await self._discard_image_assets(filename)
            raise errors[0]

        storage_bytes_uploaded_total.labels(object_class="original").inc(len(file.data))
        storage_bytes_uploaded_total.labels(object_class="thumbnail").inc(len(thumbnail))
        log_upload_completed(
            logger,
            filename=filename,
            object_class="image",
            duration_ms=(time.time() - start_time) * 1000,
            size_bytes=len(file.data),
        )
        return StoredAsset(filename=filename, original_name=file.name)

    async def _discard_image_assets(self, filename: str) -> None:
        """Best-effort removal of whatever part of a failed image upload landed."""
        try:
            await self.delete_image_assets(filename)
        except Exception as e:
            log_storage_failure(
                logger,
                operation="discard_image_assets",
                error=str(e),
                filename=filename,
            )

    async def persist_file(self, file: UploadedFile) -> StoredAsset:
        """
        Store a generic (non-image) file as a single object.

        Raises:
            UploadError: If the file exceeds the size limit
        """
        self.validate_file(file)
        start_time = time.time()

        extension = resolve_extension(file.name, file.content_type, FILE_EXTENSION_STRATEGIES)
        filename = generate_filename(extension)
        await self.client.put(
            keys.file_object_key(self.config, filename),
            file.data,
            file.content_type or DEFAULT_MIME_TYPE,
        )

        storage_bytes_uploaded_total.labels(object_class="file").inc(len(file.data))
        log_upload_completed(
            logger,
            filename=filename,
            object_class="file",
            duration_ms=(time.time() - start_time) * 1000,
            size_bytes=len(file.data),
        )
        return StoredAsset(filename=filename, original_name=file.name)

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def _delete_keys(self, filename: str, object_keys: list[str]) -> None:
        results = await asyncio.gather(*(self.client.try_delete(key) for key in object_keys))

        failed = [result for result in results if result.status is ResultStatus.ERROR]
        if failed:
            raise failed[0].error

        log_assets_deleted(
            logger,
            filename=filename,
            keys=object_keys,
            missing=[result.key for result in results if result.missing],
        )

    async def delete_image_assets(self, filename: str) -> None:
        """
        Delete an image and its thumbnail.

        Idempotent: keys that are already gone are ignored.
        """
        await self._delete_keys(
            filename,
            [keys.object_key(self.config, filename), keys.thumbnail_key(self.config, filename)],
        )

    async def delete_file_asset(self, filename: str) -> None:
        """Delete a generic file. Idempotent."""
        await self._delete_keys(filename, [keys.file_object_key(self.config, filename)])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_original(self, filename: str) -> StorageResult:
        return await self.client.fetch(keys.object_key(self.config, filename))

    async def fetch_file(self, filename: str) -> StorageResult:
        return await self.client.fetch(keys.file_object_key(self.config, filename))

    async def get_original_buffer(self, filename: str) -> bytes:
        """Original image bytes. Raises ObjectNotFoundError when missing."""
        return await self.client.get(keys.object_key(self.config, filename))

    async def get_file_buffer(self, filename: str) -> bytes:
        """Generic file bytes. Raises ObjectNotFoundError when missing."""
        return await self.client.get(keys.file_object_key(self.config, filename))

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def public_object_url(self, filename: str) -> str:
        return keys.join_url(self.config.public_base_url, keys.object_key(self.config, filename))

    def public_thumbnail_url(self, filename: str) -> str:
        return keys.join_url(self.config.public_base_url, keys.thumbnail_key(self.config, filename))

    def public_file_url(self, filename: str) -> str:
        return keys.join_url(self.config.public_base_url, keys.file_object_key(self.config, filename))

    def files_storage_key(
        self,
        fileset_id: Union[int, str],
        file_id: Union[int, str],
        name: Optional[str] = None
    ) -> str:
        return keys.files_storage_key(self.config, fileset_id, file_id, name)

    def presigned_put_url(self, storage_key: str, mime: str, size: Optional[int] = None) -> str:
        """Presigned PUT for a direct browser upload; ``size`` pins Content-Length."""
        return self.client.presign(
            storage_key,
            "PUT",
            content_type=mime,
            content_length=size,
        )

    def presigned_get_url(self, storage_key: str, attachment_name: Optional[str] = None) -> str:
        """Presigned GET; forces a download under ``attachment_name`` when given."""
        disposition = None
        if attachment_name:
            disposition = build_content_disposition(attachment_name, ATTACHMENT)
        return self.client.presign(storage_key, "GET", content_disposition=disposition)

    def presigned_inline_file_url(
        self,
        filename: str,
        original_name: Optional[str] = None,
        mime: Optional[str] = None
    ) -> str:
        """
        Presigned GET for previewing a generic file in the browser.

        Useful for PDFs: the response carries an inline disposition so the
        browser renders instead of downloading.
        """
        return self.client.presign(
            keys.file_object_key(self.config, filename),
            "GET",
            content_type=mime or None,
            content_disposition=build_content_disposition(original_name, INLINE),
        )

    def presigned_inline_url(self, storage_key: str) -> str:
        return self.client.presign(storage_key, "GET", content_disposition=INLINE)
