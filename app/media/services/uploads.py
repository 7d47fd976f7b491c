"""
Attachment upload service.

Uploads are validated (content-sniffed type, per-category size limit),
written to the blob store and described as attachment metadata. The returned
metadata is what a client sends back when posting a message with attachments;
this service never creates messages itself.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from core.services import BaseService
from media.storage import get_blob_store
from media.validators import MIME_TO_EXTENSION, validate_attachment_upload

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from authentication.models import User

ATTACHMENT_FOLDER = "attachments"


@dataclass
class UploadedMedia:
    """Metadata of a stored upload, shaped like an Attachment row."""

    file_url: str
    file_name: str
    file_type: str
    file_size: int
    message_type: str
    width: int | None = None
    height: int | None = None

    def as_attachment(self) -> dict:
        """Return the fields accepted by AttachmentService.create_attachment."""
        data = asdict(self)
        data.pop("message_type")
        return data


class MediaUploadService(BaseService):
    """Store message media in the blob store."""

    @classmethod
    def upload(cls, user: User, uploaded_file: UploadedFile) -> UploadedMedia:
        """
        Validate and store an attachment file.

        Args:
            user: Uploading user (explicit caller identity)
            uploaded_file: File from the multipart request

        Returns:
            UploadedMedia describing the stored object

        Raises:
            ValidationError: Empty file
            UnsupportedMediaTypeError: Type not in any allowed category
            PayloadTooLargeError: File over its category limit
            ExternalServiceError: Blob store write failed
        """
        result = validate_attachment_upload(uploaded_file)
        result.raise_if_invalid()

        extension = MIME_TO_EXTENSION.get(result.mime_type, "")
        key = f"{uuid.uuid4().hex}{extension}"
        folder = f"{ATTACHMENT_FOLDER}/user_{user.id}"

        url = get_blob_store().put(
            key, uploaded_file, folder=folder, content_type=result.mime_type
        )

        width = height = None
        if result.media_type == "image":
            width, height = cls._image_dimensions(uploaded_file)

        cls.get_logger().info(
            f"User {user.id} uploaded {result.mime_type} ({result.size} bytes) to {folder}/{key}"
        )

        return UploadedMedia(
            file_url=url,
            file_name=getattr(uploaded_file, "name", "") or key,
            file_type=result.mime_type,
            file_size=result.size,
            message_type=result.media_type,
            width=width,
            height=height,
        )

    @staticmethod
    def _image_dimensions(uploaded_file) -> tuple[int | None, int | None]:
        """Read width/height without decoding the full image."""
        uploaded_file.seek(0)
        try:
            with Image.open(uploaded_file) as img:
                return img.size
        except (UnidentifiedImageError, OSError):
            # Formats Pillow cannot open (HEIC) are stored without dimensions
            return None, None
        finally:
            uploaded_file.seek(0)
