"""
Tests for MediaUploadService.
"""

from __future__ import annotations

import pytest

from core.exceptions import (
    ExternalServiceError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)
from media.services import MediaUploadService


class TestMediaUploadService:
    """Tests for MediaUploadService.upload()."""

    def test_stores_image_under_user_folder(self, user, blob_store, sample_png_uploaded):
        uploaded = MediaUploadService.upload(user, sample_png_uploaded)

        assert uploaded.file_url.startswith(
            f"https://blobs.example.com/attachments/user_{user.id}/"
        )
        assert uploaded.file_url.endswith(".png")
        assert blob_store.objects[uploaded.file_url] == "image/png"

    def test_image_metadata(self, user, blob_store, sample_png_uploaded):
        """
        Image uploads report dimensions and the image message type.

        Why it matters: The metadata is posted back verbatim as an attachment.
        """
        uploaded = MediaUploadService.upload(user, sample_png_uploaded)

        assert uploaded.file_name == "test_image.png"
        assert uploaded.file_type == "image/png"
        assert uploaded.file_size == sample_png_uploaded.size
        assert uploaded.message_type == "image"
        assert (uploaded.width, uploaded.height) == (120, 80)

    def test_document_has_no_dimensions(self, user, blob_store, sample_pdf_uploaded):
        uploaded = MediaUploadService.upload(user, sample_pdf_uploaded)

        assert uploaded.message_type == "file"
        assert uploaded.width is None
        assert uploaded.height is None

    def test_keys_are_unique(self, user, blob_store, sample_pdf_uploaded):
        first = MediaUploadService.upload(user, sample_pdf_uploaded)
        second = MediaUploadService.upload(user, sample_pdf_uploaded)

        assert first.file_url != second.file_url

    def test_as_attachment_drops_message_type(self, user, blob_store, sample_pdf_uploaded):
        attachment = MediaUploadService.upload(user, sample_pdf_uploaded).as_attachment()

        assert "message_type" not in attachment
        assert attachment["file_name"] == "test_document.pdf"

    def test_rejects_executable(self, user, blob_store, executable_file_uploaded):
        with pytest.raises(UnsupportedMediaTypeError):
            MediaUploadService.upload(user, executable_file_uploaded)

        assert blob_store.objects == {}

    def test_rejects_oversized_image(self, user, blob_store, oversized_image):
        with pytest.raises(PayloadTooLargeError):
            MediaUploadService.upload(user, oversized_image)

        assert blob_store.objects == {}

    def test_store_failure_propagates(self, user, mocker, sample_pdf_uploaded):
        store = mocker.Mock()
        store.put.side_effect = ExternalServiceError("down", error_code="BLOB_PUT_FAILED")
        mocker.patch("media.services.uploads.get_blob_store", return_value=store)

        with pytest.raises(ExternalServiceError):
            MediaUploadService.upload(user, sample_pdf_uploaded)
