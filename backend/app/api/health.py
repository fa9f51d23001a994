"""
Health check endpoint.
Verifies that object storage is configured.
"""
from fastapi import APIRouter, HTTPException

from app.storage import ConfigurationError
from app.storage.config import get_storage_config

router = APIRouter()


@router.get("")
async def health_check():
    """
    Health check endpoint.
    Returns status of the storage configuration.
    """
    health_status = {
        "status": "healthy",
        "storage": "unknown"
    }

    try:
        config = get_storage_config()
        health_status["storage"] = f"configured: {config.bucket}"
    except ConfigurationError as e:
        health_status["storage"] = f"error: {str(e)}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
