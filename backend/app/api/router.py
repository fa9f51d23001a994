"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from app.api import health, photos, files, uploads

api_router = APIRouter()

# Include route modules
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(photos.router, prefix="/photos", tags=["photos"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
