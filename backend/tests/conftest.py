"""
Test configuration and fixtures.
Storage calls go to an in-memory fake S3 client; presigning uses a real
boto3 client with dummy credentials (signing is local, no network).
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"
os.environ["STORAGE_ENDPOINT"] = "https://s3.test.example.com"
os.environ["STORAGE_BUCKET"] = "album-test"
os.environ["STORAGE_ACCESS_KEY"] = "test-access-key"
os.environ["STORAGE_SECRET_KEY"] = "test-secret-key"
os.environ["STORAGE_REGION"] = "us-east-1"
os.environ["STORAGE_PUBLIC_BASE_URL"] = "https://cdn.test.example.com/"

import io
import pytest
from typing import AsyncGenerator, Optional

from botocore.exceptions import ClientError
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from PIL import Image

from app.config import Settings
from app.storage import StorageService, build_storage_service
from app.storage.config import StorageConfig, load_storage_config


def make_client_error(code: str, operation: str, status_code: int = 400) -> ClientError:
    """Build a botocore ClientError the way the S3 client raises it."""
    return ClientError(
        {
            "Error": {"Code": code, "Message": code},
            "ResponseMetadata": {"HTTPStatusCode": status_code},
        },
        operation,
    )


class FakeBody:
    """Stand-in for botocore's StreamingBody."""

    def __init__(self, data: bytes):
        self._stream = io.BytesIO(data)
        self.closed = False

    def read(self) -> bytes:
        return self._stream.read()

    def close(self):
        self.closed = True


class FakeS3Client:
    """
    In-memory S3 client.

    Mirrors the boto3 call signatures used by ObjectStorageClient.
    ``missing_key_on_delete`` makes delete of an absent key raise NoSuchKey,
    like providers that do not answer 204. ``fail_put``/``fail_delete`` map
    a key to the exception the next call on it should raise.
    """

    def __init__(self, missing_key_on_delete: bool = True):
        self.objects: dict[str, dict] = {}
        self.missing_key_on_delete = missing_key_on_delete
        self.fail_put: dict[str, Exception] = {}
        self.fail_get: dict[str, Exception] = {}
        self.fail_delete: dict[str, Exception] = {}
        self.calls: list[tuple[str, str]] = []

    def put_object(self, Bucket: str, Key: str, Body: bytes, ContentType: Optional[str] = None):
        self.calls.append(("put_object", Key))
        if Key in self.fail_put:
            raise self.fail_put[Key]
        self.objects[Key] = {"Body": bytes(Body), "ContentType": ContentType, "Bucket": Bucket}
        return {"ETag": '"etag"'}

    def get_object(self, Bucket: str, Key: str):
        self.calls.append(("get_object", Key))
        if Key in self.fail_get:
            raise self.fail_get[Key]
        if Key not in self.objects:
            raise make_client_error("NoSuchKey", "GetObject", 404)
        stored = self.objects[Key]
        return {"Body": FakeBody(stored["Body"]), "ContentType": stored["ContentType"]}

    def delete_object(self, Bucket: str, Key: str):
        self.calls.append(("delete_object", Key))
        if Key in self.fail_delete:
            raise self.fail_delete[Key]
        if Key not in self.objects:
            if self.missing_key_on_delete:
                raise make_client_error("NoSuchKey", "DeleteObject", 404)
            return {}
        del self.objects[Key]
        return {}

    def generate_presigned_url(self, ClientMethod: str, Params: dict, ExpiresIn: int):
        query = "&".join(f"{k}={v}" for k, v in sorted(Params.items()) if k not in ("Bucket", "Key"))
        return f"https://signed.test/{Params['Bucket']}/{Params['Key']}?method={ClientMethod}&expires={ExpiresIn}&{query}"


def make_image_bytes(size=(800, 600), fmt="JPEG", mode="RGB", color=(200, 30, 30)) -> bytes:
    """Render a solid-color test image."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def storage_config() -> StorageConfig:
    """StorageConfig resolved from the test environment."""
    return load_storage_config(Settings())


@pytest.fixture
def fake_s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def storage(storage_config: StorageConfig, fake_s3: FakeS3Client) -> StorageService:
    """StorageService backed by the in-memory fake."""
    return build_storage_service(storage_config, fake_s3)


@pytest.fixture
def signing_storage(storage_config: StorageConfig) -> StorageService:
    """StorageService backed by a real boto3 client, used for presigning."""
    return build_storage_service(storage_config)


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes()


def get_test_app(storage: StorageService) -> FastAPI:
    """Create a test FastAPI app with the storage dependency overridden."""
    from app.main import app
    from app.api.dependencies import get_storage_service

    app.dependency_overrides[get_storage_service] = lambda: storage
    return app


@pytest.fixture(scope="function")
async def client(storage: StorageService) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = get_test_app(storage)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()
