"""Unit tests for environment-driven configuration."""

import pytest

from gallery_gateway.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BUCKET_NAME", "BACKEND_AUTH_TOKEN", "AUTH_TOKEN", "PORT", "STORAGE_BACKEND"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings loading and derived values."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.bucket_name is None
        assert settings.auth_secret is None
        assert settings.port == 8080
        assert settings.storage_backend == "gcs"
        assert settings.max_upload_size_bytes == 25 * 1024 * 1024
        assert settings.signed_url_expiry_seconds == 600
        assert settings.cors_origins_list == ["*"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("BUCKET_NAME", "gallery-photos")
        monkeypatch.setenv("PORT", "9000")
        settings = Settings(_env_file=None)
        assert settings.bucket_name == "gallery-photos"
        assert settings.port == 9000

    def test_backend_auth_token_preferred(self, monkeypatch):
        monkeypatch.setenv("BACKEND_AUTH_TOKEN", "primary")
        monkeypatch.setenv("AUTH_TOKEN", "fallback")
        assert Settings(_env_file=None).auth_secret == "primary"

    def test_auth_token_fallback(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN", "fallback")
        assert Settings(_env_file=None).auth_secret == "fallback"

    def test_empty_token_disables_auth(self, monkeypatch):
        monkeypatch.setenv("AUTH_TOKEN", "")
        assert Settings(_env_file=None).auth_secret is None

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="https://a.com, https://b.com,")
        assert settings.cors_origins_list == ["https://a.com", "https://b.com"]

    def test_missing_bucket_reported(self):
        assert Settings(_env_file=None).validate_required_fields() == ["BUCKET_NAME"]

    def test_s3_backend_requires_credentials(self):
        settings = Settings(_env_file=None, bucket_name="b", storage_backend="s3")
        assert settings.validate_required_fields() == [
            "S3_ENDPOINT_URL",
            "S3_ACCESS_KEY_ID",
            "S3_SECRET_ACCESS_KEY",
        ]
