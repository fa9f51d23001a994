"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # S3-compatible object storage
    # Required values are validated lazily by app.storage.config
    storage_endpoint: Optional[str] = None  # e.g., https://s3.eu-central-1.amazonaws.com
    storage_bucket: Optional[str] = None
    storage_access_key: Optional[str] = None
    storage_secret_key: Optional[str] = None
    storage_region: Optional[str] = None
    storage_addressing_style: str = "path"  # "path" or "virtual"

    # Key prefixes (normalized to a single trailing slash)
    storage_upload_prefix: Optional[str] = None  # default: uploads/
    storage_thumbnail_prefix: Optional[str] = None  # default: {upload_prefix}thumbnails/
    storage_files_prefix: Optional[str] = None  # default: files/

    # Base URL used to build direct (CDN-style) object links
    storage_public_base_url: Optional[str] = None
    storage_presign_expiration: int = 900  # Presigned URL expiration in seconds (15 min)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
