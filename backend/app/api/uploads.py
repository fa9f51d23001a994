"""
Direct-to-storage upload and download endpoints.

Implements the browser direct-transfer flow:
1. POST /uploads/presign       - Get presigned PUT URL for a fileset file
2. POST /uploads/download-url  - Get presigned GET URL (optionally as attachment)

Why this approach?
- Large files never pass through the API process
- Bucket stays private - only presigned URLs can access

Security:
- Presigned URLs expire after 15 minutes (configurable)
- Download URLs are only issued for keys under the files prefix
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_storage_service
from app.schemas.storage import (
    DownloadUrlRequest,
    DownloadUrlResponse,
    PresignRequest,
    PresignResponse,
)
from app.storage import StorageService

router = APIRouter()


@router.post("/presign", response_model=PresignResponse)
async def presign_upload(
    request: PresignRequest,
    storage: StorageService = Depends(get_storage_service)
):
    """
    Generate a presigned URL for direct file upload.

    Client then PUTs the file to upload_url with the same Content-Type
    (and Content-Length when size was given).
    """
    object_key = storage.files_storage_key(request.fileset_id, request.file_id, request.name)
    upload_url = storage.presigned_put_url(object_key, request.content_type, request.size)

    return PresignResponse(
        upload_url=upload_url,
        object_key=object_key,
        expires_in=storage.config.presign_expires_seconds,
    )


@router.post("/download-url", response_model=DownloadUrlResponse)
async def presign_download(
    request: DownloadUrlRequest,
    storage: StorageService = Depends(get_storage_service)
):
    """Generate a presigned GET URL for a directly uploaded file."""
    files_prefix = storage.config.files_prefix
    if not request.object_key.startswith(files_prefix) or ".." in request.object_key.split("/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Object key is outside the files area"
        )

    return DownloadUrlResponse(
        url=storage.presigned_get_url(request.object_key, request.attachment_name),
        expires_in=storage.config.presign_expires_seconds,
    )
