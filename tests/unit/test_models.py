"""
Unit tests for the gallery domain models.

These tests verify summary derivation without touching any store.
"""

from datetime import datetime, timedelta, timezone

from gallery_gateway.core.gallery.models import AlbumSummary, UploadResult, iso_timestamp


class TestIsoTimestamp:
    """Tests for the metadata timestamp format."""

    def test_millisecond_precision_with_z_suffix(self):
        moment = datetime(2024, 6, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)
        assert iso_timestamp(moment) == "2024-06-01T12:30:05.123Z"

    def test_converts_to_utc(self):
        moment = datetime(2024, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert iso_timestamp(moment) == "2024-06-01T12:00:00.000Z"

    def test_defaults_to_now(self):
        assert iso_timestamp().endswith("Z")


class TestAlbumSummary:
    """Tests for deriving summary metadata from an album document."""

    def test_full_document(self):
        """Every summary field is lifted from its source location."""
        document = {
            "name": "Summer Wedding",
            "user": {"name": "Ana", "email": "ana@example.com"},
            "projectDate": "2024-07-01",
            "allowDownload": True,
            "allowHiResDownload": False,
            "videoDownloadPolicy": {"hiresScope": 0, "lowresScope": 2},
            "hasBurnedWatermark": False,
            "blockWatermark": 1,
            "numAllPhotos": 120,
            "allowStore": True,
        }

        summary = AlbumSummary.from_metadata(document, created_at="2024-06-01T00:00:00.000Z")

        assert summary.to_metadata() == {
            "galleryName": "Summer Wedding",
            "clientName": "Ana",
            "clientEmail": "ana@example.com",
            "eventDate": "2024-07-01",
            "allowDownload": "true",
            "allowHiResDownload": "false",
            "videoDownloadEnabled": "true",
            "watermarkApplied": "true",
            "totalPhotos": "120",
            "allowStore": "true",
            "createdAt": "2024-06-01T00:00:00.000Z",
        }

    def test_empty_document_defaults(self):
        """Missing fields become empty strings, derived flags become false."""
        metadata = AlbumSummary.from_metadata({}, created_at="t").to_metadata()

        assert metadata["galleryName"] == ""
        assert metadata["clientName"] == ""
        assert metadata["eventDate"] == ""
        assert metadata["allowDownload"] == ""
        assert metadata["videoDownloadEnabled"] == "false"
        assert metadata["watermarkApplied"] == "false"
        assert metadata["totalPhotos"] == "0"

    def test_event_date_falls_back_to_details(self):
        summary = AlbumSummary.from_metadata({"details": {"eventDate": "2024-08-08"}})
        assert summary.event_date == "2024-08-08"

    def test_photo_count_falls_back_to_photos_list(self):
        summary = AlbumSummary.from_metadata({"numAllPhotos": 0}, photos=[{}, {}, {}])
        assert summary.total_photos == "3"

    def test_burned_watermark_flag(self):
        summary = AlbumSummary.from_metadata({"hasBurnedWatermark": True})
        assert summary.watermark_applied == "true"

    def test_non_dict_nested_values_are_ignored(self):
        """A malformed user or policy block doesn't raise."""
        summary = AlbumSummary.from_metadata(
            {"user": "ana", "videoDownloadPolicy": [1, 2]}
        )
        assert summary.client_name == ""
        assert summary.video_download_enabled == "false"

    def test_integral_float_photo_count(self):
        summary = AlbumSummary.from_metadata({"numAllPhotos": 12.0})
        assert summary.total_photos == "12"

    def test_fractional_photo_count_kept(self):
        summary = AlbumSummary.from_metadata({"numAllPhotos": 2.5})
        assert summary.total_photos == "2.5"

    def test_boolean_photo_count_rendered_lowercase(self):
        summary = AlbumSummary.from_metadata({"numAllPhotos": True})
        assert summary.total_photos == "true"

    def test_numeric_strings_count_as_positive(self):
        summary = AlbumSummary.from_metadata(
            {"videoDownloadPolicy": {"hiresScope": "5"}, "blockWatermark": "2"}
        )
        assert summary.video_download_enabled == "true"
        assert summary.watermark_applied == "true"

    def test_non_numeric_strings_are_not_positive(self):
        summary = AlbumSummary.from_metadata(
            {"videoDownloadPolicy": {"lowresScope": "all"}, "blockWatermark": "0"}
        )
        assert summary.video_download_enabled == "false"
        assert summary.watermark_applied == "false"

    def test_all_values_are_strings(self):
        metadata = AlbumSummary.from_metadata({"numAllPhotos": 5, "allowStore": 1}).to_metadata()
        assert all(isinstance(value, str) for value in metadata.values())


class TestUploadResult:
    def test_uploaded_is_inverse_of_skipped(self):
        assert UploadResult(object_path="k", skipped=False).uploaded
        assert not UploadResult(object_path="k", skipped=True).uploaded
