"""
Pydantic schemas for API request/response validation.
"""
from app.schemas.storage import (
    PhotoUploadResponse,
    PhotoDownloadItem,
    PhotoDownloadRequest,
    FileUploadResponse,
    InlineUrlResponse,
    PresignRequest,
    PresignResponse,
    DownloadUrlRequest,
    DownloadUrlResponse,
)

__all__ = [
    "PhotoUploadResponse",
    "PhotoDownloadItem",
    "PhotoDownloadRequest",
    "FileUploadResponse",
    "InlineUrlResponse",
    "PresignRequest",
    "PresignResponse",
    "DownloadUrlRequest",
    "DownloadUrlResponse",
]
