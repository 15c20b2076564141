"""
Album and image operations.

Each operation validates its input, builds an object key and hands the work
to an ObjectStore. There is no state between calls and no retry: a store
failure propagates to the caller as-is.

Concurrency contract: the existence checks below are not transactional with
the writes that follow them. Two concurrent uploads of the same key may both
see "absent" and both write; the store's last write wins. Once content is
present it is never overwritten by this service, only its metadata is.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..errors import MissingFieldsError
from .models import AlbumSummary, UploadResult, UploadUrlResult, iso_timestamp
from .paths import DEFAULT_DOMAIN, album_path, image_path, legacy_image_path

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"
SIGNED_UPLOAD_CONTENT_TYPE = "application/octet-stream"
DEFAULT_SIGNED_URL_EXPIRY_SECONDS = 10 * 60


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ObjectStore(Protocol):
    """
    Interface for the bucket the gateway writes into.

    Metadata is string key/value pairs attached to an object. update_metadata
    merges into what is already there rather than replacing it.
    """

    bucket_name: str

    async def check_bucket(self) -> None:
        """Raise StorageError if the bucket is unreachable."""
        ...

    async def exists(self, key: str) -> bool:
        ...

    async def write(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Create or replace an object."""
        ...

    async def read_metadata(self, key: str) -> dict[str, str]:
        ...

    async def update_metadata(self, key: str, metadata: dict[str, str]) -> None:
        """Merge metadata into an existing object."""
        ...

    async def generate_upload_url(
        self,
        key: str,
        content_type: str,
        expiry_seconds: int,
    ) -> str:
        """Return a pre-signed URL allowing a single PUT of the object."""
        ...


def _require(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise MissingFieldsError(missing)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

@dataclass
class GalleryService:
    """
    Gallery storage operations on top of an ObjectStore.

    unify_upload_paths switches upload_image to the domain-qualified key
    layout used by every other operation. It is off by default because
    existing clients read uploads from the domain-less layout.
    """
    store: ObjectStore
    signed_url_expiry_seconds: int = DEFAULT_SIGNED_URL_EXPIRY_SECONDS
    unify_upload_paths: bool = False
    clock: Callable[[], str] = iso_timestamp

    async def create_album(
        self,
        album_name: str,
        project_id: str,
        full_metadata: dict[str, Any],
        photos: Optional[list[Any]] = None,
        domain: Optional[str] = None,
    ) -> str:
        """
        Write album.json and attach its summary metadata.

        Two writes: the document first, then the summary as object metadata.
        If the second fails the document is left without a summary.

        Returns:
            The album path, e.g. "studio/summer-wedding_42".
        """
        _require(albumName=album_name, projectId=project_id)
        if not isinstance(full_metadata, dict):
            raise MissingFieldsError(["fullMetadata"])

        path = album_path(domain or DEFAULT_DOMAIN, album_name, project_id)
        key = f"{path}/album.json"
        summary = AlbumSummary.from_metadata(
            full_metadata, photos=photos, created_at=self.clock()
        )

        await self.store.write(
            key,
            json.dumps(full_metadata, indent=2).encode("utf-8"),
            content_type="application/json",
        )
        await self.store.update_metadata(key, summary.to_metadata())

        logger.info(
            "Created album",
            extra={"album_path": path, "total_photos": summary.total_photos},
        )
        return path

    async def upload_image(
        self,
        filename: str,
        album_name: str,
        project_id: str,
        content: bytes,
        content_type: Optional[str] = None,
        scene: Optional[str] = None,
        photo_id: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> UploadResult:
        """
        Store image bytes unless the object already exists.

        An existing object keeps its content; only scene/photoId/originalName
        and updatedAt are refreshed. domain is ignored unless
        unify_upload_paths is set.
        """
        _require(filename=filename, albumName=album_name, projectId=project_id)
        if not content:
            raise MissingFieldsError(["file"], message="Missing file")

        if self.unify_upload_paths:
            key = image_path(domain or DEFAULT_DOMAIN, album_name, project_id, filename)
        else:
            key = legacy_image_path(album_name, project_id, filename)

        now = self.clock()

        if await self.store.exists(key):
            await self.store.update_metadata(
                key,
                {
                    "scene": scene or "",
                    "photoId": photo_id or "",
                    "originalName": filename,
                    "updatedAt": now,
                },
            )
            logger.info("Image exists, refreshed metadata", extra={"object_path": key})
            return UploadResult(object_path=key, skipped=True)

        await self.store.write(
            key,
            content,
            content_type=content_type or DEFAULT_IMAGE_CONTENT_TYPE,
            metadata={
                "scene": scene or "",
                "photoId": photo_id or "",
                "originalName": filename,
                "uploadedAt": now,
            },
        )
        logger.info(
            "Uploaded image",
            extra={"object_path": key, "size_bytes": len(content)},
        )
        return UploadResult(object_path=key, skipped=False)

    async def set_image_metadata(
        self,
        filename: str,
        album_name: str,
        project_id: str,
        domain: str,
        scene: Optional[str] = None,
        photo_id: Optional[str] = None,
    ) -> str:
        """
        Overwrite the image metadata set after a signed-URL upload.

        No existence check is made. A missing object is reported by the
        store itself; every bundled backend raises StorageError for it.
        """
        _require(
            filename=filename,
            albumName=album_name,
            projectId=project_id,
            domain=domain,
        )
        key = image_path(domain, album_name, project_id, filename)

        await self.store.update_metadata(
            key,
            {
                "scene": scene or "",
                "photoId": photo_id or "",
                "originalName": filename,
                "uploadedAt": self.clock(),
            },
        )
        logger.info("Set image metadata", extra={"object_path": key})
        return key

    async def get_upload_url(
        self,
        filename: str,
        album_name: str,
        project_id: str,
        domain: str,
    ) -> UploadUrlResult:
        """
        Authorize a direct-to-store upload.

        The client PUTs the bytes itself with Content-Type
        application/octet-stream, then calls set_image_metadata. When the
        object already exists, no URL is issued and the caller must not
        upload.
        """
        _require(
            filename=filename,
            albumName=album_name,
            projectId=project_id,
            domain=domain,
        )
        key = image_path(domain, album_name, project_id, filename)

        if await self.store.exists(key):
            await self.store.update_metadata(
                key,
                {"originalName": filename, "lastCheckedAt": self.clock()},
            )
            logger.info("Image exists, no upload URL issued", extra={"object_path": key})
            return UploadUrlResult(object_path=key, skipped=True)

        url = await self.store.generate_upload_url(
            key,
            content_type=SIGNED_UPLOAD_CONTENT_TYPE,
            expiry_seconds=self.signed_url_expiry_seconds,
        )
        logger.debug(
            "Issued upload URL",
            extra={"object_path": key, "expiry_seconds": self.signed_url_expiry_seconds},
        )
        return UploadUrlResult(object_path=key, skipped=False, upload_url=url)
