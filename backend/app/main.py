"""
FastAPI application entry point.
Sets up the API, storage error handlers and metrics.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import settings
from app.api.router import api_router
from app.middleware.metrics_middleware import MetricsMiddleware
from app.storage import ConfigurationError, ObjectNotFoundError, UploadError
from app.utils.logging import configure_logging, log_storage_failure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: Configure logging
    - Shutdown: nothing to release (boto3 clients need no teardown)
    """
    configure_logging('album-storage', settings.log_level)
    yield


# Create FastAPI app
app = FastAPI(
    title="Album Storage API",
    description="Object storage backend for the photo and file album",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware (must be after CORS to track all requests)
app.add_middleware(MetricsMiddleware)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Storage configuration error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Object storage is not configured"}
    )


@app.exception_handler(ObjectNotFoundError)
async def object_not_found_handler(request: Request, exc: ObjectNotFoundError):
    # Reaching here means a caller expected the object to exist
    log_storage_failure(logger, operation="get", error=str(exc), key=exc.key)
    return JSONResponse(status_code=500, content={"detail": "Stored object is missing"})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Album Storage API",
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
