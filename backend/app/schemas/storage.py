"""
Pydantic schemas for photo, file and direct-upload endpoints.
"""
from pydantic import BaseModel, Field
from typing import Optional, Union


class PhotoUploadResponse(BaseModel):
    """Schema for a stored photo."""
    filename: str
    original_name: str
    url: str
    thumbnail_url: str


class FileUploadResponse(BaseModel):
    """Schema for a stored generic file."""
    filename: str
    original_name: str
    size: int
    mime_type: str
    url: str


class PhotoDownloadItem(BaseModel):
    filename: str = Field(..., min_length=1)
    original_name: Optional[str] = Field(None, description="Name used inside the archive")


class PhotoDownloadRequest(BaseModel):
    """Request schema for bulk zip export of original photos."""
    items: list[PhotoDownloadItem] = Field(..., min_length=1, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {
                        "filename": "1700000000000-0b7e3c1e-5d1a-4b8e-9a51-2f6f1d9c8e21.jpg",
                        "original_name": "beach.jpg"
                    }
                ]
            }
        }


class InlineUrlResponse(BaseModel):
    url: str


class PresignRequest(BaseModel):
    """Request schema for presigned direct-upload URL generation."""
    fileset_id: Union[int, str] = Field(..., description="Fileset the file belongs to")
    file_id: Union[int, str] = Field(..., description="File identifier")
    name: Optional[str] = Field(None, description="Original filename, sanitized into the key")
    content_type: str = Field(..., description="MIME type the browser will send")
    size: Optional[int] = Field(None, ge=0, description="Exact size in bytes (signed as Content-Length)")

    class Config:
        json_schema_extra = {
            "example": {
                "fileset_id": 12,
                "file_id": 345,
                "name": "report.pdf",
                "content_type": "application/pdf",
                "size": 1048576
            }
        }


class PresignResponse(BaseModel):
    """Response schema for presigned upload URL."""
    upload_url: str = Field(..., description="Presigned PUT URL for direct upload")
    object_key: str = Field(..., description="Object key in storage bucket")
    expires_in: int = Field(..., description="URL expiration time in seconds")


class DownloadUrlRequest(BaseModel):
    object_key: str = Field(..., min_length=1)
    attachment_name: Optional[str] = Field(None, description="Forces a download under this name")


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int
