"""Shared test fixtures."""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from gallery_gateway.config.settings import Settings
from gallery_gateway.core.gallery.service import GalleryService
from gallery_gateway.infrastructure.storage.client import MockStorageClient
from gallery_gateway.main import create_app

FIXED_NOW = "2024-06-01T12:00:00.000Z"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {
        "bucket_name": "test-bucket",
        "storage_backend": "mock",
        "auth_token": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def store() -> MockStorageClient:
    return MockStorageClient(bucket_name="test-bucket")


@pytest.fixture
def service(store: MockStorageClient) -> GalleryService:
    return GalleryService(store=store, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_client(store: MockStorageClient):
    """Build a TestClient around the shared mock store."""

    def _make(secret: Optional[str] = None, **overrides) -> TestClient:
        settings = make_settings(auth_token=secret, **overrides)
        return TestClient(create_app(settings, store=store))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
