"""
Test configuration and fixtures for authentication tests.

This module provides:
- Reusable user fixtures
- API client helpers for authenticated requests
- In-memory blob store replacing the configured backend
- Image payloads for profile picture uploads

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/user/')
        assert response.status_code == 200
"""

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.tests.factories import UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic user with auto-created profile and settings."""
    return UserFactory(display_name="Test User")


@pytest.fixture
def other_user(db):
    """Create a second user for uniqueness checks."""
    return UserFactory(display_name="Other User")


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com", username="admin", password="AdminPass123!"
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """
    API client authenticated with JWT token for the default user fixture.
    """
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# Blob Store Fixtures
# =============================================================================


@pytest.fixture
def blob_store(mocker, blob_store_double):
    """Replace the configured blob store for the profile picture service."""
    mocker.patch(
        "authentication.services.get_blob_store", return_value=blob_store_double
    )
    return blob_store_double


# =============================================================================
# Upload Payload Fixtures
# =============================================================================


@pytest.fixture
def png_image(image_factory):
    return image_factory()


@pytest.fixture
def jpeg_image(image_factory):
    return image_factory(fmt="JPEG", name="avatar.jpg")


@pytest.fixture
def text_file():
    """A plain text file disguised with an image extension."""
    return SimpleUploadedFile(
        "avatar.png", b"definitely not an image", content_type="image/png"
    )


@pytest.fixture
def valid_registration_data():
    """Valid registration request payload."""
    return {
        "username": "alice",
        "email": "alice@example.com",
        "display_name": "Alice",
        "password": "Correct-Horse-42",
        "password_confirmation": "Correct-Horse-42",
    }
