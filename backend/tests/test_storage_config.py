"""
Tests for storage configuration resolution and key naming.
"""
import pytest

from app.config import Settings
from app.storage import ConfigurationError
from app.storage import keys
from app.storage.config import (
    DEFAULT_PRESIGN_EXPIRATION,
    load_storage_config,
    sanitize_base_url,
    sanitize_prefix,
)


def make_settings(**overrides) -> Settings:
    """Settings with explicit storage values layered over the environment."""
    values = {
        "storage_endpoint": "https://s3.example.com",
        "storage_bucket": "album",
        "storage_access_key": "ak",
        "storage_secret_key": "sk",
        "storage_region": "us-east-1",
        "storage_public_base_url": "https://cdn.example.com",
    }
    values.update(overrides)
    return Settings.model_construct(**{**Settings().model_dump(), **values})


class TestLoadStorageConfig:
    """Tests for load_storage_config."""

    def test_defaults(self):
        config = load_storage_config(make_settings(
            storage_upload_prefix=None,
            storage_thumbnail_prefix=None,
            storage_files_prefix=None,
            storage_presign_expiration=900,
        ))

        assert config.upload_prefix == "uploads/"
        assert config.thumbnail_prefix == "uploads/thumbnails/"
        assert config.files_prefix == "files/"
        assert config.presign_expires_seconds == 900
        assert config.public_base_url == "https://cdn.example.com"

    @pytest.mark.parametrize("field", [
        "storage_endpoint",
        "storage_bucket",
        "storage_access_key",
        "storage_secret_key",
        "storage_region",
        "storage_public_base_url",
    ])
    def test_missing_required_value(self, field):
        with pytest.raises(ConfigurationError):
            load_storage_config(make_settings(**{field: None}))

    def test_blank_required_value(self):
        with pytest.raises(ConfigurationError, match="STORAGE_BUCKET"):
            load_storage_config(make_settings(storage_bucket="   "))

    def test_thumbnail_prefix_follows_upload_prefix(self):
        config = load_storage_config(make_settings(
            storage_upload_prefix="/media//",
            storage_thumbnail_prefix=None,
        ))

        assert config.upload_prefix == "media/"
        assert config.thumbnail_prefix == "media/thumbnails/"

    def test_explicit_prefixes_are_normalized(self):
        config = load_storage_config(make_settings(
            storage_upload_prefix="  /a/b  ",
            storage_thumbnail_prefix="thumbs",
            storage_files_prefix="//docs///",
        ))

        assert config.upload_prefix == "a/b/"
        assert config.thumbnail_prefix == "thumbs/"
        assert config.files_prefix == "docs/"

    @pytest.mark.parametrize("value", [0, -5])
    def test_non_positive_expiration_falls_back(self, value):
        config = load_storage_config(make_settings(storage_presign_expiration=value))
        assert config.presign_expires_seconds == DEFAULT_PRESIGN_EXPIRATION

    def test_custom_expiration(self):
        config = load_storage_config(make_settings(storage_presign_expiration=120))
        assert config.presign_expires_seconds == 120

    def test_repr_hides_credentials(self):
        config = load_storage_config(make_settings(storage_secret_key="super-secret-value"))
        assert "super-secret-value" not in repr(config)
        assert "album" in repr(config)


class TestSanitizers:
    """Tests for prefix and URL normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("uploads", "uploads/"),
        ("uploads/", "uploads/"),
        ("/uploads", "uploads/"),
        ("uploads///", "uploads/"),
        ("  ", ""),
        ("", ""),
    ])
    def test_sanitize_prefix(self, raw, expected):
        assert sanitize_prefix(raw) == expected

    def test_sanitize_base_url(self):
        assert sanitize_base_url(" https://cdn.example.com/// ") == "https://cdn.example.com"


class TestKeys:
    """Tests for object key naming."""

    def test_object_keys(self, storage_config):
        filename = "1700000000000-abc.jpg"

        assert keys.object_key(storage_config, filename) == "uploads/1700000000000-abc.jpg"
        assert keys.thumbnail_key(storage_config, filename) == "uploads/thumbnails/thumb-1700000000000-abc.jpg"
        assert keys.file_object_key(storage_config, filename) == "files/1700000000000-abc.jpg"

    def test_files_storage_key(self, storage_config):
        assert keys.files_storage_key(storage_config, 3, 42) == "files/3/42"
        assert keys.files_storage_key(storage_config, 3, 42, "my report (v2).pdf") == "files/3/42-my_report__v2_.pdf"

    def test_join_url(self):
        assert keys.join_url("https://cdn.example.com", "/uploads/a.jpg") == "https://cdn.example.com/uploads/a.jpg"
        assert keys.join_url("", "uploads/a.jpg") == "uploads/a.jpg"
