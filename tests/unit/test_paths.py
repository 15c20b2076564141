"""
Unit tests for object key construction.

The sanitizers must be total: any string in, a valid path segment out.
"""

import re

import pytest

from gallery_gateway.core.gallery.paths import (
    album_path,
    image_path,
    legacy_image_path,
    sanitize_album_name,
    sanitize_domain,
)

AWKWARD_INPUTS = [
    "",
    " ",
    "Summer Wedding",
    "  leading and trailing  ",
    "tabs\tand\nnewlines",
    "Ünïcödé Straße",
    "studio.example.com",
    "emoji 📸 album",
    "slash/and\\backslash",
    "MiXeD-CaSe_123",
    " non-breaking spaces",
]


class TestSanitizeDomain:
    """Tests for domain segment sanitizing."""

    @pytest.mark.parametrize("raw", AWKWARD_INPUTS)
    def test_output_only_contains_safe_characters(self, raw):
        """Every output matches ^[a-z0-9-]*$."""
        assert re.fullmatch(r"[a-z0-9-]*", sanitize_domain(raw))

    def test_replaces_each_character_individually(self):
        """Dots are replaced one-for-one, not collapsed."""
        assert sanitize_domain("My.Studio..com") == "my-studio--com"

    def test_empty_string_stays_empty(self):
        assert sanitize_domain("") == ""


class TestSanitizeAlbumName:
    """Tests for album name sanitizing."""

    @pytest.mark.parametrize("raw", AWKWARD_INPUTS)
    def test_output_has_no_whitespace(self, raw):
        """Whitespace runs become hyphens, so none survive."""
        assert not re.search(r"\s", sanitize_album_name(raw))

    def test_collapses_whitespace_runs(self):
        assert sanitize_album_name("Summer   \t Wedding") == "summer-wedding"

    def test_keeps_other_punctuation(self):
        """Only whitespace is rewritten in album names."""
        assert sanitize_album_name("Anna & Ben's Day!") == "anna-&-ben's-day!"

    def test_empty_string_stays_empty(self):
        assert sanitize_album_name("") == ""


class TestPaths:
    """Tests for album and image key builders."""

    def test_album_path(self):
        assert album_path("studio", "Summer Wedding", "42") == "studio/summer-wedding_42"

    def test_album_path_defaults_domain(self):
        """A missing domain becomes 'unknown'."""
        assert album_path(None, "Party", "7") == "unknown/party_7"
        assert album_path("", "Party", "7") == "unknown/party_7"

    def test_image_path_is_domain_qualified(self):
        path = image_path("Studio.com", "Summer Wedding", "42", "IMG_1.jpg")
        assert path == "studio-com/summer-wedding_42/images/IMG_1.jpg"

    def test_legacy_image_path_omits_domain(self):
        path = legacy_image_path("Summer Wedding", "42", "IMG_1.jpg")
        assert path == "summer-wedding_42/images/IMG_1.jpg"
