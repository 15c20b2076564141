"""
Object storage integration for gallery albums and images.

Supports Google Cloud Storage and S3-compatible stores, plus an in-memory
mock for local development without credentials.
"""

from .client import (
    GCSStorageClient,
    MockStorageClient,
    S3StorageClient,
    StorageConfig,
    create_storage_client,
)

__all__ = [
    "GCSStorageClient",
    "MockStorageClient",
    "S3StorageClient",
    "StorageConfig",
    "create_storage_client",
]
