"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

An unset BUCKET_NAME is allowed: the service still starts and answers
liveness checks, but every storage route returns 500.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Gallery Upload Gateway"
    api_version: str = "v1"
    host: str = "0.0.0.0"
    port: int = Field(
        default=8080,
        description="Listen port. Cloud Run injects PORT."
    )

    # Authentication
    auth_token: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("backend_auth_token", "auth_token"),
        description="Shared secret expected in X-PT-Auth or Authorization. Empty disables auth."
    )

    # Storage
    bucket_name: Optional[str] = Field(
        default=None,
        description="Bucket holding albums and images. Unset disables storage routes."
    )
    storage_backend: Literal["gcs", "s3", "mock"] = Field(
        default="gcs",
        description="gcs (Google Cloud Storage), s3 (any S3-compatible store) or mock (in-memory)"
    )
    gcs_project: Optional[str] = Field(
        default=None,
        description="GCP project for the storage client. Defaults to the ambient project."
    )
    s3_endpoint_url: Optional[str] = Field(
        default=None,
        description="S3-compatible endpoint, e.g. https://<account>.r2.cloudflarestorage.com"
    )
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_region: str = "auto"

    # Application Behavior
    max_upload_size_mb: int = Field(
        default=25,
        description="Maximum request body size in MB."
    )
    signed_url_expiry_seconds: int = Field(
        default=600,
        description="Lifetime of pre-signed upload URLs."
    )
    unify_upload_paths: bool = Field(
        default=False,
        description="Write /api/upload images under the domain-qualified album path."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def auth_secret(self) -> Optional[str]:
        """Configured secret, with empty strings treated as unset."""
        return self.auth_token or None

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Return the settings the chosen backend needs but doesn't have.

        Separate from Pydantic validation because a missing bucket is a
        degraded mode, not a startup failure.
        """
        missing = []

        if not self.bucket_name:
            missing.append("BUCKET_NAME")

        if self.storage_backend == "s3":
            if not self.s3_endpoint_url:
                missing.append("S3_ENDPOINT_URL")
            if not self.s3_access_key_id:
                missing.append("S3_ACCESS_KEY_ID")
            if not self.s3_secret_access_key:
                missing.append("S3_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() or pass Settings to create_app.
    """
    return Settings()
