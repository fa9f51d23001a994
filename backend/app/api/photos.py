"""
Photo endpoints.

- POST   /photos           upload an image (original + thumbnail)
- DELETE /photos/{name}    delete original + thumbnail (idempotent)
- POST   /photos/download  zip of originals; missing objects are skipped

Database bookkeeping (Photo rows, categories, permissions) belongs to the
caller; these endpoints only deal with object storage.
"""
import io
import logging
import time
import zipfile
from typing import Callable, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from app.api.dependencies import get_storage_service
from app.schemas.storage import PhotoDownloadRequest, PhotoUploadResponse
from app.storage import StorageService, UploadedFile
from app.storage.results import ResultStatus

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_upload(
    upload: UploadFile,
    validate: Optional[Callable[[UploadedFile], None]] = None
) -> UploadedFile:
    """
    Read a multipart upload into memory.

    Starlette has already spooled the body and recorded its size, so
    ``validate`` runs against that size before any bytes are read.
    """
    name = upload.filename or ""
    content_type = upload.content_type or ""
    if validate is not None and upload.size is not None:
        validate(UploadedFile(name=name, content_type=content_type, size=upload.size, data=b""))

    data = await upload.read()
    return UploadedFile(
        name=name,
        content_type=content_type,
        size=len(data),
        data=data,
    )


@router.post("", response_model=PhotoUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
    file: UploadFile = File(...),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Upload an image.

    Stores the original bytes and a 400x400 WebP thumbnail. The returned
    filename is what the caller should persist.
    """
    asset = await storage.persist_image(await read_upload(file, storage.validate_image))
    return PhotoUploadResponse(
        filename=asset.filename,
        original_name=asset.original_name,
        url=storage.public_object_url(asset.filename),
        thumbnail_url=storage.public_thumbnail_url(asset.filename),
    )


@router.delete("/{filename}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_photo(
    filename: str,
    storage: StorageService = Depends(get_storage_service)
):
    """Delete a photo's original and thumbnail."""
    await storage.delete_image_assets(filename)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/download")
async def download_photos(
    request: PhotoDownloadRequest,
    storage: StorageService = Depends(get_storage_service)
):
    """
    Bundle original photos into a zip archive.

    Photos whose object is gone from storage are skipped; any other storage
    error aborts the export. Returns 404 if nothing could be added.
    """
    buffer = io.BytesIO()
    used_names: set[str] = set()
    added = 0

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for item in request.items:
            result = await storage.fetch_original(item.filename)
            if result.status is ResultStatus.NOT_FOUND:
                logger.info(f"Skipping missing photo during export: {item.filename}")
                continue
            data = result.unwrap()

            name = item.original_name or item.filename
            if name in used_names:
                name = item.filename
            used_names.add(name)

            archive.writestr(name, data)
            added += 1

    if added == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Photo files not found"
        )

    return Response(
        content=buffer.getvalue(),
        media_type="application/zip",
        headers={
            "Content-Disposition": f"attachment; filename=photos-{int(time.time() * 1000)}.zip"
        },
    )
