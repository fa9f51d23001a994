"""
Tests for logging and metrics helpers.
"""
import logging

import pytest

from app.middleware.metrics_middleware import normalize_path
from app.utils.logging import _build_log_extra, log_upload_rejected


class TestNormalizePath:
    """Tests for metric path normalization."""

    @pytest.mark.parametrize("path,expected", [
        (
            "/api/photos/1700000000000-0b7e3c1e-5d1a-4b8e-9a51-2f6f1d9c8e21.jpg",
            "/api/photos/{filename}",
        ),
        (
            "/api/files/1700000000000-0b7e3c1e-5d1a-4b8e-9a51-2f6f1d9c8e21/preview",
            "/api/files/{filename}/preview",
        ),
        ("/api/items/0b7e3c1e-5d1a-4b8e-9a51-2f6f1d9c8e21", "/api/items/{id}"),
        ("/api/files/42/inline-url", "/api/files/{id}/inline-url"),
        ("/api/health", "/api/health"),
    ])
    def test_normalize_path(self, path, expected):
        assert normalize_path(path) == expected


class TestStructuredLogging:
    """Tests for structured log helpers."""

    def test_build_log_extra(self):
        extra = _build_log_extra(
            event="upload_completed",
            filename="1700000000000-abc.jpg",
            key="uploads/1700000000000-abc.jpg",
            duration_ms=12.3456,
            object_class="image",
        )

        assert extra == {
            "event": "upload_completed",
            "asset_filename": "1700000000000-abc.jpg",
            "key": "uploads/1700000000000-abc.jpg",
            "duration_ms": 12.35,
            "object_class": "image",
        }

    def test_optional_fields_omitted(self):
        assert _build_log_extra(event="assets_deleted") == {"event": "assets_deleted"}

    def test_upload_rejected_record(self, caplog):
        logger = logging.getLogger("tests.upload")
        with caplog.at_level(logging.WARNING, logger="tests.upload"):
            log_upload_rejected(logger, reason="size", message="File size exceeds the limit (10MB)",
                                original_name="big.png")

        record = caplog.records[-1]
        assert record.event == "upload_rejected"
        assert record.reason == "size"
        assert record.original_name == "big.png"
