"""
Blob store backends for user-uploaded media.

The rest of the application only sees the BlobStore protocol:

    put(key, content, folder, content_type) -> url
    delete(url) -> bool

put() raises ExternalServiceError when the object could not be written;
delete() reports failure through its return value so each caller can apply
its own policy (profile picture replacement proceeds with a warning, explicit
deletion keeps the reference). No backend retries on its own.

Backends:
    LocalBlobStore: Django default storage (MEDIA_ROOT), used in dev and tests
    S3BlobStore: S3-compatible bucket through boto3

Select one with settings.BLOB_STORE_BACKEND ("local" or "s3").

Note: boto3 is imported lazily so local development and the test suite never
need AWS credentials or a network connection.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

from core.exceptions import ExternalServiceError

if TYPE_CHECKING:
    from typing import BinaryIO

logger = logging.getLogger(__name__)


@runtime_checkable
class BlobStore(Protocol):
    """
    Protocol for external object storage.

    Example:
        store = get_blob_store()
        url = store.put("user_42.png", file, folder="profile_pictures")
        ...
        if not store.delete(url):
            logger.warning("Orphaned blob left behind")
    """

    def put(
        self,
        key: str,
        content: BinaryIO,
        folder: str,
        content_type: str | None = None,
    ) -> str:
        """
        Store content under folder/key, replacing any existing object.

        Returns:
            Public URL of the stored object

        Raises:
            ExternalServiceError: If the store rejected the write
        """
        ...

    def delete(self, url: str) -> bool:
        """
        Delete the object behind a URL previously returned by put().

        Returns:
            True if the object is gone, False if the store failed
        """
        ...


def _object_path(folder: str, key: str) -> str:
    return f"{folder.strip('/')}/{key}" if folder else key


class LocalBlobStore:
    """Blob store on top of Django's default storage."""

    def __init__(self, storage=None) -> None:
        self.storage = storage or default_storage

    def put(self, key, content, folder, content_type=None) -> str:
        path = _object_path(folder, key)
        content.seek(0)
        try:
            # Deterministic keys overwrite instead of getting a random suffix
            if self.storage.exists(path):
                self.storage.delete(path)
            name = self.storage.save(path, ContentFile(content.read()))
        except OSError as e:
            logger.error(f"Local blob write failed for {path}: {e}")
            raise ExternalServiceError(
                "Could not store file",
                error_code="BLOB_PUT_FAILED",
                details={"service": "local_storage"},
            ) from e
        return self.storage.url(name)

    def delete(self, url) -> bool:
        name = self._name_from_url(url)
        try:
            self.storage.delete(name)
        except OSError as e:
            logger.warning(f"Local blob delete failed for {name}: {e}")
            return False
        return True

    def _name_from_url(self, url: str) -> str:
        media_url = settings.MEDIA_URL
        if media_url and media_url in url:
            return url.split(media_url, 1)[1]
        return url.lstrip("/")


class S3BlobStore:
    """
    Blob store for S3-compatible buckets.

    Objects are written with put_object under folder/key and addressed by
    AWS_S3_PUBLIC_URL (a CDN in front of the bucket) or the bucket URL.
    """

    def __init__(
        self,
        bucket_name: str | None = None,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        public_url: str | None = None,
    ) -> None:
        self.bucket_name = bucket_name or settings.AWS_STORAGE_BUCKET_NAME
        if not self.bucket_name:
            raise ImproperlyConfigured(
                "AWS_STORAGE_BUCKET_NAME is required for the s3 blob store"
            )
        self.region_name = region_name or settings.AWS_S3_REGION_NAME
        self.endpoint_url = endpoint_url or settings.AWS_S3_ENDPOINT_URL
        self.public_url = (
            public_url
            or settings.AWS_S3_PUBLIC_URL
            or f"https://{self.bucket_name}.s3.{self.region_name}.amazonaws.com"
        ).rstrip("/")
        self._s3_client = None

    @property
    def s3_client(self):
        """Get or create S3 client."""
        if self._s3_client is None:
            import boto3

            self._s3_client = boto3.client(
                "s3",
                region_name=self.region_name,
                endpoint_url=self.endpoint_url,
            )
        return self._s3_client

    def put(self, key, content, folder, content_type=None) -> str:
        from botocore.exceptions import BotoCoreError, ClientError

        path = _object_path(folder, key)
        content.seek(0)
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=content.read(),
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 put_object failed for {path}: {e}")
            raise ExternalServiceError(
                "Could not store file",
                error_code="BLOB_PUT_FAILED",
                details={"service": "s3"},
            ) from e
        return f"{self.public_url}/{path}"

    def delete(self, url) -> bool:
        from botocore.exceptions import BotoCoreError, ClientError

        path = self._key_from_url(url)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=path)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"S3 delete_object failed for {path}: {e}")
            return False
        return True

    def _key_from_url(self, url: str) -> str:
        if url.startswith(self.public_url):
            return url[len(self.public_url):].lstrip("/")
        # Drop scheme and host of a URL built against another public base
        return url.split("/", 3)[-1]


BLOB_STORE_BACKENDS = {
    "local": LocalBlobStore,
    "s3": S3BlobStore,
}


def get_blob_store() -> BlobStore:
    """
    Build the blob store configured by settings.BLOB_STORE_BACKEND.

    Raises:
        ImproperlyConfigured: For an unknown backend name
    """
    backend = settings.BLOB_STORE_BACKEND
    try:
        store_class = BLOB_STORE_BACKENDS[backend]
    except KeyError:
        raise ImproperlyConfigured(f"Unknown BLOB_STORE_BACKEND: {backend!r}") from None
    return store_class()
