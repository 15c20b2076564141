"""
Object store clients for gallery uploads.

Three backends implement the ObjectStore protocol:
- GCSStorageClient: Google Cloud Storage, the production bucket
- S3StorageClient: any S3-compatible store (AWS S3, Cloudflare R2, MinIO)
- MockStorageClient: in-memory, for local development and tests

The cloud SDKs are synchronous. Every call is pushed to a worker thread with
asyncio.to_thread so a slow bucket never blocks the event loop.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Optional

from ...core.errors import StorageError
from ...core.gallery.service import ObjectStore

logger = logging.getLogger(__name__)


@dataclass
class StorageConfig:
    """
    Configuration for the object store.

    Only bucket_name is needed for GCS; credentials come from the
    environment (Application Default Credentials). The s3_* fields are
    used by the S3-compatible backend.
    """
    bucket_name: str
    gcs_project: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    s3_access_key_id: Optional[str] = None
    s3_secret_access_key: Optional[str] = None
    s3_region: str = "auto"


# ---------------------------------------------------------------------------
# Google Cloud Storage
# ---------------------------------------------------------------------------

class GCSStorageClient:
    """
    Google Cloud Storage client.

    Object metadata maps to the blob's custom metadata. blob.patch() merges
    keys server-side, which is exactly update_metadata's contract.
    """

    def __init__(self, config: StorageConfig, bucket: Any = None) -> None:
        """
        Initialize the bucket handle.

        A pre-built bucket can be passed in; tests use this to avoid
        touching credentials.
        """
        self.bucket_name = config.bucket_name
        self._credentials = None

        if bucket is None:
            from google.cloud import storage

            client = storage.Client(project=config.gcs_project)
            bucket = client.bucket(config.bucket_name)

        self._bucket = bucket

        logger.info(
            "Initialized GCS storage client",
            extra={"bucket": config.bucket_name},
        )

    async def check_bucket(self) -> None:
        try:
            await asyncio.to_thread(self._bucket.reload)
        except Exception as e:
            logger.error(
                "Bucket check failed",
                extra={"bucket": self.bucket_name, "error": str(e)},
            )
            raise StorageError(f"Bucket check failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return await asyncio.to_thread(self._bucket.blob(key).exists)
        except Exception as e:
            logger.error("Existence check failed", extra={"key": key, "error": str(e)})
            raise StorageError(f"Existence check failed: {e}") from e

    async def write(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Upload bytes in a single request (no resumable session)."""
        blob = self._bucket.blob(key)
        if metadata:
            blob.metadata = metadata

        try:
            await asyncio.to_thread(
                blob.upload_from_string, data, content_type=content_type
            )
        except Exception as e:
            logger.error("Failed to write object", extra={"key": key, "error": str(e)})
            raise StorageError(f"Upload failed: {e}") from e

        logger.debug("Wrote object", extra={"key": key, "size_bytes": len(data)})

    async def read_metadata(self, key: str) -> dict[str, str]:
        blob = self._bucket.blob(key)
        try:
            await asyncio.to_thread(blob.reload)
        except Exception as e:
            logger.error("Failed to read metadata", extra={"key": key, "error": str(e)})
            raise StorageError(f"Metadata read failed: {e}") from e
        return dict(blob.metadata or {})

    async def update_metadata(self, key: str, metadata: dict[str, str]) -> None:
        """Patch custom metadata. Raises StorageError if the object is missing."""
        blob = self._bucket.blob(key)
        blob.metadata = metadata
        try:
            await asyncio.to_thread(blob.patch)
        except Exception as e:
            logger.error(
                "Failed to update metadata",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Metadata update failed: {e}") from e

    async def generate_upload_url(
        self,
        key: str,
        content_type: str,
        expiry_seconds: int,
    ) -> str:
        """
        Generate a V4 signed URL for a PUT of the object.

        On Cloud Run the default credentials carry no private key, so the
        signature is delegated to IAM with the service account email and a
        fresh access token.
        """
        try:
            return await asyncio.to_thread(
                self._sign_put_url, key, content_type, expiry_seconds
            )
        except Exception as e:
            logger.error(
                "Failed to generate upload URL",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Signed URL generation failed: {e}") from e

    def _sign_put_url(self, key: str, content_type: str, expiry_seconds: int) -> str:
        # Runs in a worker thread; credential lookup and refresh are network calls.
        return self._bucket.blob(key).generate_signed_url(
            version="v4",
            expiration=timedelta(seconds=expiry_seconds),
            method="PUT",
            content_type=content_type,
            **self._signing_kwargs(),
        )

    def _signing_kwargs(self) -> dict[str, Any]:
        import google.auth
        import google.auth.transport.requests
        from google.auth.credentials import Signing

        if self._credentials is None:
            self._credentials, _ = google.auth.default()
        credentials = self._credentials

        if isinstance(credentials, Signing):
            return {}

        if not credentials.valid:
            credentials.refresh(google.auth.transport.requests.Request())
        return {
            "service_account_email": credentials.service_account_email,
            "access_token": credentials.token,
        }


# ---------------------------------------------------------------------------
# S3-compatible storage
# ---------------------------------------------------------------------------

class S3StorageClient:
    """
    S3-compatible object storage client.

    Uses boto3, so it works against AWS S3, Cloudflare R2 or MinIO by
    changing only the endpoint. S3 cannot edit metadata in place: an update
    is a head_object, a merge, and a copy of the object onto itself.
    """

    def __init__(self, config: StorageConfig, s3_client: Any = None) -> None:
        """
        Initialize the client with boto3.

        boto3 is imported here, not at module level, so the GCS and mock
        backends can run without it being importable at startup.
        """
        self.bucket_name = config.bucket_name
        self._config = config

        if s3_client is None:
            import boto3
            from botocore.config import Config

            boto_config = Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            s3_client = boto3.client(
                "s3",
                endpoint_url=config.s3_endpoint_url,
                aws_access_key_id=config.s3_access_key_id,
                aws_secret_access_key=config.s3_secret_access_key,
                region_name=config.s3_region,
                config=boto_config,
            )

        self._s3_client = s3_client

        logger.info(
            "Initialized S3 storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.s3_endpoint_url,
            },
        )

    async def check_bucket(self) -> None:
        try:
            await asyncio.to_thread(self._s3_client.head_bucket, Bucket=self.bucket_name)
        except Exception as e:
            logger.error(
                "Bucket check failed",
                extra={"bucket": self.bucket_name, "error": str(e)},
            )
            raise StorageError(f"Bucket check failed: {e}") from e

    async def exists(self, key: str) -> bool:
        from botocore.exceptions import ClientError

        try:
            await asyncio.to_thread(
                self._s3_client.head_object, Bucket=self.bucket_name, Key=key
            )
            return True
        except ClientError as e:
            if _is_not_found(e):
                return False
            logger.error("Existence check failed", extra={"key": key, "error": str(e)})
            raise StorageError(f"Existence check failed: {e}") from e
        except Exception as e:
            logger.error("Existence check failed", extra={"key": key, "error": str(e)})
            raise StorageError(f"Existence check failed: {e}") from e

    async def write(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata=metadata or {},
            )
        except Exception as e:
            logger.error("Failed to write object", extra={"key": key, "error": str(e)})
            raise StorageError(f"Upload failed: {e}") from e

        logger.debug("Wrote object", extra={"key": key, "size_bytes": len(data)})

    async def read_metadata(self, key: str) -> dict[str, str]:
        try:
            response = await asyncio.to_thread(
                self._s3_client.head_object, Bucket=self.bucket_name, Key=key
            )
        except Exception as e:
            logger.error("Failed to read metadata", extra={"key": key, "error": str(e)})
            raise StorageError(f"Metadata read failed: {e}") from e
        return dict(response.get("Metadata") or {})

    async def update_metadata(self, key: str, metadata: dict[str, str]) -> None:
        """
        Merge metadata by copying the object onto itself.

        S3 lowercases user metadata keys, so "photoId" reads back as
        "photoid". The content type is carried over from the existing object.
        """
        try:
            head = await asyncio.to_thread(
                self._s3_client.head_object, Bucket=self.bucket_name, Key=key
            )
            merged = {**(head.get("Metadata") or {}), **metadata}
            await asyncio.to_thread(
                self._s3_client.copy_object,
                Bucket=self.bucket_name,
                Key=key,
                CopySource={"Bucket": self.bucket_name, "Key": key},
                Metadata=merged,
                MetadataDirective="REPLACE",
                ContentType=head.get("ContentType", "application/octet-stream"),
            )
        except Exception as e:
            logger.error(
                "Failed to update metadata",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Metadata update failed: {e}") from e

    async def generate_upload_url(
        self,
        key: str,
        content_type: str,
        expiry_seconds: int,
    ) -> str:
        """Presigned PUT URL; the client must send the same Content-Type."""
        try:
            return await asyncio.to_thread(
                self._s3_client.generate_presigned_url,
                "put_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=expiry_seconds,
                HttpMethod="PUT",
            )
        except Exception as e:
            logger.error(
                "Failed to generate presigned URL",
                extra={"key": key, "error": str(e)},
            )
            raise StorageError(f"Presigned URL generation failed: {e}") from e


def _is_not_found(error: Any) -> bool:
    code = str(error.response.get("Error", {}).get("Code", ""))
    return code in {"404", "NoSuchKey", "NotFound"}


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class StoredObject:
    data: bytes
    content_type: str
    metadata: dict[str, str] = field(default_factory=dict)


class MockStorageClient:
    """
    In-memory storage for local development.

    Objects live in a dict keyed by object path and "URLs" are mock URIs.
    Like GCS and S3, updating metadata on a missing key fails.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self, bucket_name: str = "mock-bucket") -> None:
        self.bucket_name = bucket_name
        self.objects: dict[str, StoredObject] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def check_bucket(self) -> None:
        return None

    async def exists(self, key: str) -> bool:
        return key in self.objects

    async def write(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        self.objects[key] = StoredObject(
            data=bytes(data),
            content_type=content_type,
            metadata=dict(metadata or {}),
        )

    async def read_metadata(self, key: str) -> dict[str, str]:
        return dict(self._get(key).metadata)

    async def update_metadata(self, key: str, metadata: dict[str, str]) -> None:
        self._get(key).metadata.update(metadata)

    async def generate_upload_url(
        self,
        key: str,
        content_type: str,
        expiry_seconds: int,
    ) -> str:
        return f"mock://{self.bucket_name}/{key}?method=PUT&expires={expiry_seconds}"

    def _get(self, key: str) -> StoredObject:
        if key not in self.objects:
            raise StorageError(f"No such object: {key}")
        return self.objects[key]


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    backend: str = "gcs",
) -> ObjectStore:
    """
    Create a storage client for the configured backend.

    Args:
        config: Storage configuration (required unless backend is "mock")
        backend: "gcs", "s3" or "mock"

    Returns:
        ObjectStore implementation
    """
    if backend == "mock":
        return MockStorageClient(config.bucket_name if config else "mock-bucket")

    if config is None:
        raise ValueError("config is required unless backend is 'mock'")

    if backend == "gcs":
        return GCSStorageClient(config)
    if backend == "s3":
        return S3StorageClient(config)

    raise ValueError(f"Unknown storage backend: {backend}")
