"""
Storage module for S3-compatible object storage.

Photos are stored as an original plus a WebP thumbnail; generic files as a
single object. Browsers can also upload and download directly with
presigned URLs.
"""
from typing import Optional

from app.storage.config import StorageConfig, get_storage_config
from app.storage.disposition import build_content_disposition
from app.storage.errors import ConfigurationError, ObjectNotFoundError, UploadError, is_not_found_error
from app.storage.mime import guess_mime_from_filename
from app.storage.object_client import ObjectStorageClient
from app.storage.results import ResultStatus, StorageResult
from app.storage.service import StorageService, StoredAsset, UploadedFile


def build_storage_service(config: Optional[StorageConfig] = None, client=None) -> StorageService:
    """
    Assemble a StorageService.

    Args:
        config: Storage configuration (default: resolved from the environment)
        client: Optional boto3-compatible client (default: built from config)

    Raises:
        ConfigurationError: If no config is given and the environment is incomplete
    """
    if config is None:
        config = get_storage_config()
    return StorageService(config, ObjectStorageClient(config, client))


__all__ = [
    "build_storage_service",
    "build_content_disposition",
    "guess_mime_from_filename",
    "is_not_found_error",
    "ConfigurationError",
    "ObjectNotFoundError",
    "ObjectStorageClient",
    "ResultStatus",
    "StorageConfig",
    "StorageResult",
    "StorageService",
    "StoredAsset",
    "UploadError",
    "UploadedFile",
]
