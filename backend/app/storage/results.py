"""
Typed outcome of storage reads and deletes.

Callers that treat a missing object as normal (bulk export, cleanup) branch
on ``status`` instead of catching and classifying exceptions. Callers that
need the object call ``unwrap()`` and get an exception back.
"""
import enum
from dataclasses import dataclass
from typing import Optional

from app.storage.errors import ObjectNotFoundError


class ResultStatus(str, enum.Enum):
    """Outcome of a single storage operation."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class StorageResult:
    key: str
    status: ResultStatus
    data: Optional[bytes] = None
    error: Optional[BaseException] = None

    @classmethod
    def found(cls, key: str, data: Optional[bytes] = None) -> "StorageResult":
        return cls(key=key, status=ResultStatus.FOUND, data=data)

    @classmethod
    def not_found(cls, key: str) -> "StorageResult":
        return cls(key=key, status=ResultStatus.NOT_FOUND)

    @classmethod
    def failed(cls, key: str, error: BaseException) -> "StorageResult":
        return cls(key=key, status=ResultStatus.ERROR, error=error)

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.FOUND

    @property
    def missing(self) -> bool:
        return self.status is ResultStatus.NOT_FOUND

    def unwrap(self) -> bytes:
        """
        Return the payload or raise.

        Raises:
            ObjectNotFoundError: For a NOT_FOUND result
            Exception: The captured error for an ERROR result
        """
        if self.status is ResultStatus.FOUND:
            return self.data if self.data is not None else b""
        if self.status is ResultStatus.NOT_FOUND:
            raise ObjectNotFoundError(self.key)
        raise self.error
