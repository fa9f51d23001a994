"""
Shared FastAPI dependencies.
"""
from functools import lru_cache

from app.storage import StorageService, build_storage_service


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    """
    Dependency for FastAPI routes to get the storage service.

    Built on first use and reused for the process lifetime.
    Usage: storage: StorageService = Depends(get_storage_service)
    Tests replace it through app.dependency_overrides.
    """
    return build_storage_service()
