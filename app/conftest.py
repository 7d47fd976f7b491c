"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide fixtures.
App-specific fixtures are defined in each app's tests/conftest.py.

Project-wide fixtures:
    blob_store_double: In-memory BlobStore recording puts and deletes
    image_factory: Builds real image uploads that libmagic recognizes
"""

import io
import os

import django
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure(config):
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    for marker in ("unit", "integration", "e2e"):
        config.addinivalue_line("markers", f"{marker}: auto-assigned by file name")


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_serializers.py, test_validators.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_storage.py",
        "test_exception_handler.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_validators.py",
        "test_policies.py",
        "test_states.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Blob Store Fixtures
# =============================================================================


class InMemoryBlobStore:
    """BlobStore double recording puts and deletes."""

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail_deletes = False

    def put(self, key, content, folder, content_type=None):
        url = f"https://blobs.example.com/{folder}/{key}"
        self.objects[url] = content_type
        return url

    def delete(self, url):
        if self.fail_deletes:
            return False
        self.deleted.append(url)
        self.objects.pop(url, None)
        return True


@pytest.fixture
def blob_store_double():
    """Fresh in-memory blob store; patch it in where the code under test looks it up."""
    return InMemoryBlobStore()


# =============================================================================
# Upload Payload Fixtures
# =============================================================================


@pytest.fixture
def image_factory():
    """
    Factory building a small real image so libmagic detects its type.

    pad_to appends zero bytes up to that total size; the header still
    identifies the format.

    Usage:
        def test_big(image_factory):
            upload = image_factory(pad_to=6 * 1024 * 1024)
    """

    def _make_image(fmt="PNG", name="avatar.png", size=(8, 8), pad_to=0):
        buffer = io.BytesIO()
        Image.new("RGB", size, color="red").save(buffer, format=fmt)
        data = buffer.getvalue()
        if pad_to:
            data += b"\0" * (pad_to - len(data))
        return SimpleUploadedFile(name, data, content_type=f"image/{fmt.lower()}")

    return _make_image
