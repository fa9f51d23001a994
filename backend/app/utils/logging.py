"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- asset_filename
- key
- duration_ms

Usage:
    from app.utils.logging import configure_logging, log_upload_completed

    configure_logging('album-storage', 'INFO')
    log_upload_completed(logger, filename='1700000000000-....jpg', object_class='image', duration_ms=45.2)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (e.g. album-storage)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        # Configure root logger
        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    filename: Optional[str] = None,
    key: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        filename: Optional generated storage filename
        key: Optional object key
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if filename:
        extra["asset_filename"] = filename
    if key:
        extra["key"] = key
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Upload event functions

def log_upload_completed(
    logger: logging.Logger,
    filename: str,
    object_class: str,
    duration_ms: Optional[float] = None,
    size_bytes: Optional[int] = None,
    **kwargs
):
    """
    Log a successful upload.

    Args:
        logger: Logger instance
        filename: Generated storage filename (required)
        object_class: "image" or "file" (required)
        duration_ms: Optional duration in milliseconds
        size_bytes: Optional size of the original bytes
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="upload_completed",
        filename=filename,
        duration_ms=duration_ms,
        object_class=object_class,
        **kwargs
    )
    if size_bytes is not None:
        extra["size_bytes"] = size_bytes

    logger.info(f"Upload completed: {filename}", extra=extra)


def log_upload_rejected(
    logger: logging.Logger,
    reason: str,
    message: str,
    original_name: Optional[str] = None,
    **kwargs
):
    """
    Log an upload rejected by validation.

    Args:
        logger: Logger instance
        reason: Short machine-readable reason (mime_type, size, unreadable)
        message: User-facing message returned to the client
        original_name: Optional name supplied by the client
        **kwargs: Additional fields
    """
    extra = _build_log_extra(event="upload_rejected", reason=reason, **kwargs)
    if original_name:
        extra["original_name"] = original_name

    logger.warning(f"Upload rejected ({reason}): {message}", extra=extra)


# Deletion event functions

def log_assets_deleted(
    logger: logging.Logger,
    filename: str,
    keys: list[str],
    missing: Optional[list[str]] = None,
    **kwargs
):
    """
    Log deletion of the objects behind one filename.

    Args:
        logger: Logger instance
        filename: Storage filename (required)
        keys: Object keys targeted (required)
        missing: Keys that were already absent
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="assets_deleted",
        filename=filename,
        keys=keys,
        **kwargs
    )
    if missing:
        extra["missing"] = missing

    logger.info(f"Assets deleted: {filename}", extra=extra)


# Storage failure functions

def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    key: Optional[str] = None,
    filename: Optional[str] = None,
    duration_ms: Optional[float] = None,
    include_traceback: bool = False,
    **kwargs
):
    """
    Log a failed storage operation.

    Args:
        logger: Logger instance
        operation: Operation name (put, get, delete, persist_image, ...) (required)
        error: Error message (required)
        key: Optional object key
        filename: Optional storage filename
        duration_ms: Optional duration in milliseconds
        include_traceback: Whether to include stack trace
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        filename=filename,
        key=key,
        duration_ms=duration_ms,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage failure: {operation} - {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
        else:
            logger.error(message, extra=extra)
    else:
        logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
