"""
Gallery domain: key layout, authentication and album/image operations.
"""

from .auth import Authenticator, extract_token
from .models import AlbumSummary, UploadResult, UploadUrlResult, iso_timestamp
from .paths import (
    album_path,
    image_path,
    legacy_image_path,
    sanitize_album_name,
    sanitize_domain,
)
from .service import GalleryService, ObjectStore

__all__ = [
    "AlbumSummary",
    "Authenticator",
    "GalleryService",
    "ObjectStore",
    "UploadResult",
    "UploadUrlResult",
    "album_path",
    "extract_token",
    "image_path",
    "iso_timestamp",
    "legacy_image_path",
    "sanitize_album_name",
    "sanitize_domain",
]
