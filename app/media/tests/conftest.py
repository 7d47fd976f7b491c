"""
Test fixtures for media app.

Raw BytesIO buffers feed MediaValidator directly; the *_uploaded variants
are what the upload endpoint and MediaUploadService receive. Uploads go to
the in-memory blob store double from the root conftest.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory

if TYPE_CHECKING:
    from authentication.models import User

# Smallest PDF libmagic still identifies as application/pdf
MINIMAL_PDF = b"""%PDF-1.4
1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj
2 0 obj << /Type /Pages /Kids [] /Count 0 >> endobj
trailer << /Size 3 /Root 1 0 R >>
%%EOF"""

ELF_HEADER = b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 100


def _buffer(data: bytes, name: str) -> io.BytesIO:
    buffer = io.BytesIO(data)
    buffer.name = name
    return buffer


def _image_bytes(fmt: str, size=(100, 100), mode="RGB", color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color=color).save(buffer, format=fmt)
    return buffer.getvalue()


# =============================================================================
# Clients and Users
# =============================================================================


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user(db) -> "User":
    """A user uploading attachments."""
    return UserFactory(display_name="Uploader")


@pytest.fixture
def authenticated_client(user: "User") -> APIClient:
    """API client carrying a JWT access token for ``user``."""
    client = APIClient()
    client.credentials(
        HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}"
    )
    return client


@pytest.fixture
def blob_store(mocker, blob_store_double):
    """Replace the configured blob store for attachment uploads."""
    mocker.patch(
        "media.services.uploads.get_blob_store", return_value=blob_store_double
    )
    return blob_store_double


# =============================================================================
# Accepted Files
# =============================================================================


@pytest.fixture
def sample_jpeg() -> io.BytesIO:
    return _buffer(_image_bytes("JPEG"), "test_image.jpg")


@pytest.fixture
def sample_png() -> io.BytesIO:
    """A 120x80 PNG with an alpha channel."""
    data = _image_bytes("PNG", size=(120, 80), mode="RGBA", color=(0, 0, 255, 128))
    return _buffer(data, "test_image.png")


@pytest.fixture
def sample_png_uploaded(sample_png: io.BytesIO) -> SimpleUploadedFile:
    return SimpleUploadedFile(
        "test_image.png", sample_png.getvalue(), content_type="image/png"
    )


@pytest.fixture
def sample_pdf() -> io.BytesIO:
    return _buffer(MINIMAL_PDF, "test_document.pdf")


@pytest.fixture
def sample_pdf_uploaded() -> SimpleUploadedFile:
    return SimpleUploadedFile(
        "test_document.pdf", MINIMAL_PDF, content_type="application/pdf"
    )


@pytest.fixture
def sample_txt() -> io.BytesIO:
    return _buffer(b"Meeting notes\nSecond line\n", "notes.txt")


# =============================================================================
# Rejected Files
# =============================================================================


@pytest.fixture
def empty_file() -> io.BytesIO:
    return _buffer(b"", "empty.txt")


@pytest.fixture
def executable_file() -> io.BytesIO:
    """ELF binary disguised with a .jpg name."""
    return _buffer(ELF_HEADER, "malware.jpg")


@pytest.fixture
def executable_file_uploaded() -> SimpleUploadedFile:
    """ELF binary claiming to be a JPEG in both name and content type."""
    return SimpleUploadedFile(
        "totally_not_malware.jpg", ELF_HEADER, content_type="image/jpeg"
    )


@pytest.fixture
def oversized_image(image_factory) -> SimpleUploadedFile:
    """
    A PNG just over the 10MB image limit.

    The padding follows the PNG data so libmagic still detects image/png.
    """
    return image_factory(name="large_image.png", pad_to=10 * 1024 * 1024 + 1)
