"""
Validated storage configuration.

Turns the raw environment values from ``app.config.settings`` into a frozen
StorageConfig. Missing credentials fail fast with ConfigurationError; key
prefixes and the public base URL are normalized here once so the key builder
can stay a plain string concatenation.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from app.config import Settings, settings as default_settings
from app.storage.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_PREFIX = "uploads/"
DEFAULT_FILES_PREFIX = "files/"
DEFAULT_PRESIGN_EXPIRATION = 900


@dataclass(frozen=True)
class StorageConfig:
    """Immutable storage settings shared by the client and the service."""
    access_key: str
    secret_key: str
    region: str
    endpoint: str
    bucket: str
    upload_prefix: str
    thumbnail_prefix: str
    files_prefix: str
    public_base_url: str
    presign_expires_seconds: int = DEFAULT_PRESIGN_EXPIRATION
    addressing_style: str = "path"

    def __repr__(self):
        # Keep credentials out of logs and tracebacks
        return (
            f"<StorageConfig(bucket={self.bucket}, endpoint={self.endpoint}, "
            f"region={self.region}, upload_prefix={self.upload_prefix!r}, "
            f"thumbnail_prefix={self.thumbnail_prefix!r}, files_prefix={self.files_prefix!r})>"
        )


def sanitize_prefix(value: str) -> str:
    """
    Normalize a key prefix.

    Strips whitespace and leading slashes and makes the prefix end with
    exactly one slash. A blank prefix stays blank (bucket root).
    """
    trimmed = value.strip().lstrip("/").rstrip("/")
    if not trimmed:
        return ""
    return f"{trimmed}/"


def sanitize_base_url(value: str) -> str:
    """Trim whitespace and trailing slashes from a base URL."""
    return value.strip().rstrip("/")


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


def load_storage_config(settings: Settings) -> StorageConfig:
    """
    Build a StorageConfig from application settings.

    Args:
        settings: Application settings (environment-backed)

    Returns:
        Validated, normalized StorageConfig

    Raises:
        ConfigurationError: If a required value is missing or blank
    """
    required = {
        "STORAGE_ACCESS_KEY": _clean(settings.storage_access_key),
        "STORAGE_SECRET_KEY": _clean(settings.storage_secret_key),
        "STORAGE_REGION": _clean(settings.storage_region),
        "STORAGE_ENDPOINT": _clean(settings.storage_endpoint),
        "STORAGE_BUCKET": _clean(settings.storage_bucket),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Object storage configuration missing: {', '.join(missing)}"
        )

    public_base_url = sanitize_base_url(settings.storage_public_base_url or "")
    if not public_base_url:
        raise ConfigurationError(
            "STORAGE_PUBLIC_BASE_URL is not set; it is required to build object links"
        )

    upload_prefix = sanitize_prefix(
        settings.storage_upload_prefix
        if settings.storage_upload_prefix is not None
        else DEFAULT_UPLOAD_PREFIX
    )
    thumbnail_prefix = sanitize_prefix(
        settings.storage_thumbnail_prefix
        if settings.storage_thumbnail_prefix is not None
        else f"{upload_prefix}thumbnails/"
    )
    files_prefix = sanitize_prefix(
        settings.storage_files_prefix
        if settings.storage_files_prefix is not None
        else DEFAULT_FILES_PREFIX
    )

    expiration = settings.storage_presign_expiration
    if not expiration or expiration <= 0:
        expiration = DEFAULT_PRESIGN_EXPIRATION

    return StorageConfig(
        access_key=required["STORAGE_ACCESS_KEY"],
        secret_key=required["STORAGE_SECRET_KEY"],
        region=required["STORAGE_REGION"],
        endpoint=required["STORAGE_ENDPOINT"],
        bucket=required["STORAGE_BUCKET"],
        upload_prefix=upload_prefix,
        thumbnail_prefix=thumbnail_prefix,
        files_prefix=files_prefix,
        public_base_url=public_base_url,
        presign_expires_seconds=expiration,
        addressing_style=settings.storage_addressing_style or "path",
    )


@lru_cache(maxsize=1)
def get_storage_config() -> StorageConfig:
    """
    Get the process-wide StorageConfig.

    Resolved on first call and cached afterwards. A failed resolution is
    not cached, but settings are read once at import, so an environment
    fix still needs a restart.
    """
    config = load_storage_config(default_settings)
    logger.info(f"Storage configured: {config!r}")
    return config
