"""
Tests for POST /api/v1/media/upload/.
"""

from __future__ import annotations

from rest_framework import status

UPLOAD_URL = "/api/v1/media/upload/"


class TestMediaUploadView:
    """Tests for MediaUploadView."""

    def test_upload_returns_metadata(
        self, authenticated_client, blob_store, sample_png_uploaded
    ):
        response = authenticated_client.post(
            UPLOAD_URL, {"file": sample_png_uploaded}, format="multipart"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["file_type"] == "image/png"
        assert response.data["message_type"] == "image"
        assert response.data["width"] == 120
        assert response.data["file_url"].startswith("https://blobs.example.com/")

    def test_missing_file(self, authenticated_client, blob_store):
        response = authenticated_client.post(UPLOAD_URL, {}, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "file" in response.data

    def test_disallowed_type_returns_415(
        self, authenticated_client, blob_store, executable_file_uploaded
    ):
        response = authenticated_client.post(
            UPLOAD_URL, {"file": executable_file_uploaded}, format="multipart"
        )

        assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        assert response.data["error_code"] == "MIME_TYPE_NOT_ALLOWED"

    def test_oversized_returns_413(self, authenticated_client, blob_store, oversized_image):
        response = authenticated_client.post(
            UPLOAD_URL, {"file": oversized_image}, format="multipart"
        )

        assert response.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        assert response.data["error_code"] == "FILE_TOO_LARGE"

    def test_requires_authentication(self, db, api_client, sample_png_uploaded):
        response = api_client.post(
            UPLOAD_URL, {"file": sample_png_uploaded}, format="multipart"
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
