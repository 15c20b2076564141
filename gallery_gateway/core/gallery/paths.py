"""
Object key construction for albums and images.

Key layout in the bucket:

    <domain>/<album-name>_<projectId>/album.json
    <domain>/<album-name>_<projectId>/images/<filename>

Uploads made through the multipart endpoint historically used a layout
without the domain segment:

    <album-name>_<projectId>/images/<filename>

Both builders live here so the divergence stays visible in one place.
"""

import re

DEFAULT_DOMAIN = "unknown"

_WHITESPACE_RUN = re.compile(r"\s+")
_NON_DOMAIN_CHAR = re.compile(r"[^a-z0-9-]")


def sanitize_album_name(album_name: str) -> str:
    """Lowercase and collapse every whitespace run into a single hyphen."""
    return _WHITESPACE_RUN.sub("-", album_name.lower())


def sanitize_domain(domain: str) -> str:
    """
    Lowercase and replace anything outside [a-z0-9-] with a hyphen.

    Replacement is per character, so "a.b.c" becomes "a-b-c" and the
    result always matches ^[a-z0-9-]*$.
    """
    return _NON_DOMAIN_CHAR.sub("-", domain.lower())


def album_path(domain: str | None, album_name: str, project_id: str) -> str:
    """Root key prefix of an album: domain/albumname_projectId."""
    safe_domain = sanitize_domain(domain or DEFAULT_DOMAIN)
    return f"{safe_domain}/{sanitize_album_name(album_name)}_{project_id}"


def image_path(
    domain: str | None,
    album_name: str,
    project_id: str,
    filename: str,
) -> str:
    """Domain-qualified key of an image inside an album."""
    return f"{album_path(domain, album_name, project_id)}/images/{filename}"


def legacy_image_path(album_name: str, project_id: str, filename: str) -> str:
    """Image key without the domain segment, as written by /api/upload."""
    return f"{sanitize_album_name(album_name)}_{project_id}/images/{filename}"
