"""
Object key naming.

Layout inside the bucket:
    {upload_prefix}{filename}                original images
    {thumbnail_prefix}thumb-{filename}       WebP thumbnails
    {files_prefix}{filename}                 generic files
    {files_prefix}{fileset_id}/{file_id}[-{name}]   direct browser uploads
"""
import re
from typing import Optional, Union

from app.storage.config import StorageConfig

THUMBNAIL_PREFIX = "thumb-"

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def object_key(config: StorageConfig, filename: str) -> str:
    return f"{config.upload_prefix}{filename}"


def thumbnail_key(config: StorageConfig, filename: str) -> str:
    return f"{config.thumbnail_prefix}{THUMBNAIL_PREFIX}{filename}"


def file_object_key(config: StorageConfig, filename: str) -> str:
    return f"{config.files_prefix}{filename}"


def sanitize_key_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9._-] with an underscore."""
    return _UNSAFE_KEY_CHARS.sub("_", name)


def files_storage_key(
    config: StorageConfig,
    fileset_id: Union[int, str],
    file_id: Union[int, str],
    name: Optional[str] = None
) -> str:
    """
    Build the key for a file uploaded directly by the browser.

    Args:
        config: Storage configuration
        fileset_id: Owning fileset identifier
        file_id: File identifier
        name: Optional human filename, sanitized into the key

    Returns:
        Object key under the files prefix
    """
    base = f"{config.files_prefix}{fileset_id}/{file_id}"
    if name:
        return f"{base}-{sanitize_key_name(name)}"
    return base


def join_url(base: str, path: str) -> str:
    """Join a public base URL and an object key with a single slash."""
    if not base:
        return path
    return f"{base}/{path.lstrip('/')}"
