"""
Domain models for gallery storage.

These models describe what the gateway writes and reports back. They have no
knowledge of HTTP or of any particular object store.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format a moment as UTC ISO-8601 with millisecond precision.

    Example: 2024-06-01T12:30:00.000Z. Front-end clients parse this form
    directly, so the "Z" suffix is kept instead of "+00:00".
    """
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(value: Any) -> str:
    """
    Render a scalar for object metadata.

    Booleans become true/false, integral floats drop their ".0" and None
    becomes "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flag(value: Any) -> str:
    """Render a flag for object metadata: true/false, or "" when unset."""
    return _text(value)


def _number(value: Any) -> Optional[float]:
    """Numeric reading of a document value; numeric strings count."""
    if isinstance(value, (bool, int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip() or 0)
        except ValueError:
            return None
    return None


def _positive(value: Any) -> bool:
    number = _number(value)
    return number is not None and number > 0


def _dig(document: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(document, dict):
            return None
        document = document.get(key)
    return document


@dataclass(frozen=True)
class AlbumSummary:
    """
    Flat, string-only digest of an album's metadata document.

    Object stores only accept string key/value metadata, so the handful of
    fields worth seeing without downloading album.json are lifted out and
    stringified here.
    """
    gallery_name: str
    client_name: str
    client_email: str
    event_date: str
    allow_download: str
    allow_hi_res_download: str
    video_download_enabled: str
    watermark_applied: str
    total_photos: str
    allow_store: str
    created_at: str

    @classmethod
    def from_metadata(
        cls,
        full_metadata: dict[str, Any],
        photos: Optional[list[Any]] = None,
        created_at: Optional[str] = None,
    ) -> "AlbumSummary":
        """Derive the summary from a client-supplied album document."""
        policy = full_metadata.get("videoDownloadPolicy")
        video_enabled = _positive(_dig(policy, "hiresScope")) or _positive(
            _dig(policy, "lowresScope")
        )
        watermarked = bool(full_metadata.get("hasBurnedWatermark")) or _positive(
            full_metadata.get("blockWatermark")
        )
        total = full_metadata.get("numAllPhotos") or (len(photos) if photos else 0)

        return cls(
            gallery_name=_text(full_metadata.get("name") or ""),
            client_name=_text(_dig(full_metadata, "user", "name") or ""),
            client_email=_text(_dig(full_metadata, "user", "email") or ""),
            event_date=_text(
                full_metadata.get("projectDate")
                or _dig(full_metadata, "details", "eventDate")
                or ""
            ),
            allow_download=_flag(full_metadata.get("allowDownload")),
            allow_hi_res_download=_flag(full_metadata.get("allowHiResDownload")),
            video_download_enabled=_flag(video_enabled),
            watermark_applied=_flag(watermarked),
            total_photos=_text(total),
            allow_store=_flag(full_metadata.get("allowStore")),
            created_at=created_at or iso_timestamp(),
        )

    def to_metadata(self) -> dict[str, str]:
        """Key/value metadata as attached to album.json."""
        return {
            "galleryName": self.gallery_name,
            "clientName": self.client_name,
            "clientEmail": self.client_email,
            "eventDate": self.event_date,
            "allowDownload": self.allow_download,
            "allowHiResDownload": self.allow_hi_res_download,
            "videoDownloadEnabled": self.video_download_enabled,
            "watermarkApplied": self.watermark_applied,
            "totalPhotos": self.total_photos,
            "allowStore": self.allow_store,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a direct image upload."""
    object_path: str
    skipped: bool

    @property
    def uploaded(self) -> bool:
        return not self.skipped


@dataclass(frozen=True)
class UploadUrlResult:
    """Outcome of a signed-URL request. upload_url is None when skipped."""
    object_path: str
    skipped: bool
    upload_url: Optional[str] = None
