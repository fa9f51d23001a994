"""
S3-compatible object storage client.

Thin wrapper over a boto3 S3 client. Works against AWS S3, Cloudflare R2,
MinIO, Volcengine TOS or any other S3-compatible endpoint.

boto3 is blocking, so every network call runs in a worker thread via
asyncio.to_thread. That lets the pipelines await uploads and deletes and
keep several of them in flight with asyncio.gather.

Errors are NOT swallowed here: "not found" surfaces as ObjectNotFoundError
(or the provider's NoSuchKey ClientError on delete) and everything else
propagates unchanged. Presigning is local signing and never hits the network.
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config

from app.storage.config import StorageConfig
from app.storage.errors import ObjectNotFoundError, is_not_found_error
from app.storage.results import StorageResult
from app.utils.metrics import storage_operations_total, storage_operation_duration_seconds

logger = logging.getLogger(__name__)

PRESIGN_METHODS = {
    "GET": "get_object",
    "PUT": "put_object",
}


def build_s3_client(config: StorageConfig):
    """
    Create a boto3 S3 client from a StorageConfig.

    Uses signature_version='s3v4', which every S3-compatible provider accepts.
    """
    return boto3.client(
        's3',
        endpoint_url=config.endpoint,
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
        region_name=config.region,
        config=Config(
            signature_version='s3v4',
            s3={'addressing_style': config.addressing_style}
        )
    )


class ObjectStorageClient:
    """
    Async facade over one boto3 S3 client bound to one bucket.

    Provides put/get/delete plus presigned URL generation.
    """

    def __init__(self, config: StorageConfig, client: Any = None):
        """
        Args:
            config: Validated storage configuration
            client: Optional pre-built boto3-compatible client (tests inject fakes)
        """
        self._config = config
        self._client = client if client is not None else build_s3_client(config)
        logger.info(f"Object storage client initialized for bucket: {config.bucket}")

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self._config.bucket

    async def _call(self, operation: str, func, **kwargs) -> Any:
        start_time = time.time()
        status = "ok"
        try:
            return await asyncio.to_thread(func, Bucket=self.bucket, **kwargs)
        except Exception as e:
            status = "not_found" if is_not_found_error(e) else "error"
            raise
        finally:
            storage_operations_total.labels(operation=operation, status=status).inc()
            storage_operation_duration_seconds.labels(operation=operation).observe(
                time.time() - start_time
            )

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Upload bytes under ``key``.

        Args:
            key: Object key (path in bucket)
            data: Object payload
            content_type: MIME type stored with the object
        """
        await self._call(
            "put",
            self._client.put_object,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.debug(f"Uploaded {key} ({len(data)} bytes)")

    async def get(self, key: str) -> bytes:
        """
        Download the full object stored under ``key``.

        Raises:
            ObjectNotFoundError: If the key does not exist
        """
        try:
            response = await self._call("get", self._client.get_object, Key=key)
        except Exception as e:
            if is_not_found_error(e):
                raise ObjectNotFoundError(key) from e
            raise

        body = response["Body"]
        try:
            return await asyncio.to_thread(body.read)
        finally:
            body.close()

    async def fetch(self, key: str) -> StorageResult:
        """Download ``key`` and report the outcome as a StorageResult."""
        try:
            return StorageResult.found(key, await self.get(key))
        except ObjectNotFoundError:
            return StorageResult.not_found(key)
        except Exception as e:
            return StorageResult.failed(key, e)

    async def delete(self, key: str) -> None:
        """
        Delete ``key``.

        Plain S3 answers 204 for a missing key, but some providers return
        NoSuchKey; that error is passed through for the caller to classify.
        """
        await self._call("delete", self._client.delete_object, Key=key)
        logger.debug(f"Deleted object {key}")

    async def try_delete(self, key: str) -> StorageResult:
        """Delete ``key`` and report a missing object as NOT_FOUND."""
        try:
            await self.delete(key)
            return StorageResult.found(key)
        except Exception as e:
            if is_not_found_error(e):
                return StorageResult.not_found(key)
            return StorageResult.failed(key, e)

    def presign(
        self,
        key: str,
        method: str,
        expires_in: Optional[int] = None,
        content_type: Optional[str] = None,
        content_disposition: Optional[str] = None,
        content_length: Optional[int] = None
    ) -> str:
        """
        Generate a presigned URL for one GET or PUT on ``key``.

        Args:
            key: Object key
            method: "GET" or "PUT"
            expires_in: Lifetime in seconds (default from configuration)
            content_type: PUT: Content-Type the uploader must send.
                GET: Content-Type the response will carry.
            content_disposition: GET only: response Content-Disposition
            content_length: PUT only: exact body size to sign

        Returns:
            Presigned URL string

        Security:
            - URL expires after the given time
            - Grants exactly one method on exactly one key
        """
        client_method = PRESIGN_METHODS.get(method.upper())
        if client_method is None:
            raise ValueError(f"Unsupported presign method: {method}")

        if expires_in is None:
            expires_in = self._config.presign_expires_seconds

        params: Dict[str, Any] = {
            'Bucket': self.bucket,
            'Key': key,
        }
        if client_method == 'put_object':
            if content_type:
                params['ContentType'] = content_type
            if content_length is not None:
                params['ContentLength'] = content_length
        else:
            if content_type:
                params['ResponseContentType'] = content_type
            if content_disposition:
                params['ResponseContentDisposition'] = content_disposition

        url = self._client.generate_presigned_url(
            ClientMethod=client_method,
            Params=params,
            ExpiresIn=expires_in
        )
        storage_operations_total.labels(operation=f"presign_{method.lower()}", status="ok").inc()
        logger.debug(f"Generated presigned {method.upper()} URL for {key} (expires in {expires_in}s)")
        return url
