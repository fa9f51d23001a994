"""
Storage error taxonomy.

- ConfigurationError: storage settings missing or invalid (operator problem)
- UploadError: user input rejected by validation (carries an HTTP status)
- ObjectNotFoundError: the requested key does not exist in the bucket

Anything else raised by boto3/botocore is left unclassified and propagates.
"""
from typing import Optional

from botocore.exceptions import ClientError

NOT_FOUND_CODES = frozenset({"NoSuchKey"})


class StorageError(Exception):
    """Base class for storage-layer errors."""


class ConfigurationError(StorageError):
    """Storage configuration is missing or invalid."""


class UploadError(StorageError):
    """An upload was rejected because the input violates a validation rule."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ObjectNotFoundError(StorageError):
    """The object addressed by ``key`` does not exist."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


def client_error_code(error: BaseException) -> Optional[str]:
    """Return the S3 error code carried by a botocore ClientError, if any."""
    if not isinstance(error, ClientError):
        return None
    return error.response.get("Error", {}).get("Code")


def is_not_found_error(error: BaseException) -> bool:
    """
    Check whether ``error`` means "the key does not exist".

    True for our own ObjectNotFoundError and for a server-side
    ``NoSuchKey`` ClientError. False for every other error shape,
    including access-denied and connection failures.
    """
    if isinstance(error, ObjectNotFoundError):
        return True
    return client_error_code(error) in NOT_FOUND_CODES
