"""
Generic file endpoints.

- POST   /files                         upload any file type (no thumbnail)
- DELETE /files/{name}                  delete (idempotent)
- GET    /files/{name}/inline-url       presigned URL that previews inline
- GET    /files/{name}/preview          stream bytes with an inline disposition
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from app.api.dependencies import get_storage_service
from app.api.photos import read_upload
from app.schemas.storage import FileUploadResponse, InlineUrlResponse
from app.storage import StorageService, build_content_disposition, guess_mime_from_filename
from app.storage.mime import DEFAULT_MIME_TYPE
from app.utils.logging import log_storage_failure

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=FileUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    storage: StorageService = Depends(get_storage_service)
):
    """Upload a generic file (up to 512MB)."""
    upload = await read_upload(file, storage.validate_file)
    asset = await storage.persist_file(upload)
    return FileUploadResponse(
        filename=asset.filename,
        original_name=asset.original_name,
        size=upload.size,
        mime_type=upload.content_type or DEFAULT_MIME_TYPE,
        url=storage.public_file_url(asset.filename),
    )


@router.delete("/{filename}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    filename: str,
    storage: StorageService = Depends(get_storage_service)
):
    await storage.delete_file_asset(filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{filename}/inline-url", response_model=InlineUrlResponse)
async def get_inline_url(
    filename: str,
    original_name: Optional[str] = Query(None),
    mime: Optional[str] = Query(None),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Return a presigned URL with an inline content-disposition.

    Lets the browser preview PDFs and images directly from storage.
    """
    return InlineUrlResponse(
        url=storage.presigned_inline_file_url(filename, original_name, mime)
    )


@router.get("/{filename}/preview")
async def preview_file(
    filename: str,
    original_name: Optional[str] = Query(None),
    mime: Optional[str] = Query(None),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Proxy file bytes with an inline Content-Disposition.

    Header values must be ASCII, so the name is sent both as an ASCII
    fallback and as an RFC 5987 UTF-8 encoded ``filename*``.
    A missing object is a hard failure here (the caller believes it exists).
    """
    display_name = original_name or filename
    try:
        data = await storage.get_file_buffer(filename)
    except Exception as e:
        log_storage_failure(
            logger,
            operation="preview",
            error=str(e),
            filename=filename,
            include_traceback=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Preview failed"
        )

    return Response(
        content=data,
        media_type=mime or guess_mime_from_filename(display_name),
        headers={
            "Content-Disposition": build_content_disposition(display_name, "inline"),
            "Cache-Control": "private, max-age=60",
        },
    )
