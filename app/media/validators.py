"""
Media file validators.

Provides content-based MIME type detection and validation using python-magic.
File types are sniffed from content, never trusted from extensions or the
client-supplied Content-Type.

Categories line up with message types (image, video, audio, file) so an
uploaded attachment maps directly onto the message that will carry it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from core.exceptions import (
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)


# =============================================================================
# Configuration
# =============================================================================

ALLOWED_MIME_TYPES: dict[str, set[str]] = {
    "image": {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/heic",
        "image/heif",
    },
    "video": {
        "video/mp4",
        "video/quicktime",
        "video/webm",
        "video/x-matroska",
    },
    "audio": {
        "audio/mpeg",
        "audio/mp4",
        "audio/wav",
        "audio/x-wav",
        "audio/aac",
        "audio/ogg",
        "audio/x-m4a",
    },
    "file": {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/zip",
        "text/plain",
        "text/csv",
    },
}

SIZE_LIMITS: dict[str, int] = {
    "image": 10 * 1024 * 1024,  # 10MB
    "video": 100 * 1024 * 1024,  # 100MB
    "audio": 25 * 1024 * 1024,  # 25MB
    "file": 25 * 1024 * 1024,  # 25MB
}

# Profile pictures are rendered everywhere, so only browser-safe formats
PROFILE_PICTURE_MIME_TYPES: set[str] = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
}

# Canonical extension used when building storage keys
MIME_TO_EXTENSION: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "image/heif": ".heif",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "video/webm": ".webm",
    "video/x-matroska": ".mkv",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/aac": ".aac",
    "audio/ogg": ".ogg",
    "audio/x-m4a": ".m4a",
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/zip": ".zip",
    "text/plain": ".txt",
    "text/csv": ".csv",
}


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Result of file validation.

    Attributes:
        is_valid: Whether the file passed validation.
        media_type: Category of the file (image, video, audio, file).
        mime_type: Detected MIME type of the file.
        size: File size in bytes.
        error: Human-readable error message if validation failed.
        error_code: Machine-readable error code if validation failed.
    """

    is_valid: bool
    media_type: str | None = None
    mime_type: str | None = None
    size: int = 0
    error: str | None = None
    error_code: str | None = None

    def raise_if_invalid(self) -> None:
        """Raise the application error matching a failed validation.

        Raises:
            ValidationError: Empty file.
            UnsupportedMediaTypeError: Undetectable or disallowed type.
            PayloadTooLargeError: File over the category's size limit.
        """
        if self.is_valid:
            return
        if self.error_code == "FILE_TOO_LARGE":
            raise PayloadTooLargeError(
                self.error, error_code=self.error_code, details={"size": self.size}
            )
        if self.error_code == "MIME_TYPE_NOT_ALLOWED":
            raise UnsupportedMediaTypeError(
                self.error,
                error_code=self.error_code,
                details={"mime_type": self.mime_type},
            )
        raise ValidationError(self.error, error_code=self.error_code)


# =============================================================================
# Validator Class
# =============================================================================


class MediaValidator:
    """Validates media files using content-based MIME detection.

    Uses python-magic (libmagic) to detect file types from content. The
    libmagic handle is opened on first use so importing this module never
    needs the shared library.

    Example:
        validator = MediaValidator()
        result = validator.validate(uploaded_file)
        result.raise_if_invalid()
        print(f"File type: {result.media_type}, MIME: {result.mime_type}")
    """

    def __init__(
        self,
        allowed_mime_types: dict[str, set[str]] | None = None,
        size_limits: dict[str, int] | None = None,
    ) -> None:
        """Initialize validator with optional custom configuration.

        Args:
            allowed_mime_types: Custom mapping of media types to allowed MIME types.
            size_limits: Custom mapping of media types to size limits in bytes.
        """
        self._allowed_mime_types = allowed_mime_types or ALLOWED_MIME_TYPES
        self._size_limits = size_limits or SIZE_LIMITS
        self._magic = None

    @property
    def magic(self):
        """Get or create the libmagic MIME detector."""
        if self._magic is None:
            import magic

            self._magic = magic.Magic(mime=True)
        return self._magic

    def validate(self, file: BinaryIO) -> ValidationResult:
        """Validate a file upload.

        Performs the following checks in order:
        1. Empty file check
        2. MIME type detection from content
        3. MIME type allowlist check
        4. File size limit check

        Args:
            file: File-like object to validate. Must support read() and seek().

        Returns:
            ValidationResult with validation outcome and detected file info.
        """
        file.seek(0, 2)
        file_size = file.tell()
        file.seek(0)

        if file_size == 0:
            return ValidationResult(
                is_valid=False,
                error="File is empty",
                error_code="EMPTY_FILE",
            )

        mime_type = self._detect_mime_type(file)
        if mime_type is None:
            return ValidationResult(
                is_valid=False,
                size=file_size,
                error="Could not detect file type",
                error_code="MIME_TYPE_NOT_ALLOWED",
            )

        media_type = self._get_media_type(mime_type)
        if media_type is None:
            return ValidationResult(
                is_valid=False,
                mime_type=mime_type,
                size=file_size,
                error=f"File type '{mime_type}' is not allowed",
                error_code="MIME_TYPE_NOT_ALLOWED",
            )

        size_limit = self._size_limits.get(media_type, 0)
        if file_size > size_limit:
            limit_mb = size_limit // (1024 * 1024)
            return ValidationResult(
                is_valid=False,
                media_type=media_type,
                mime_type=mime_type,
                size=file_size,
                error=f"File size exceeds {limit_mb}MB limit for {media_type} files",
                error_code="FILE_TOO_LARGE",
            )

        return ValidationResult(
            is_valid=True,
            media_type=media_type,
            mime_type=mime_type,
            size=file_size,
        )

    def _detect_mime_type(self, file: BinaryIO) -> str | None:
        """Detect MIME type from the first 2KB of content."""
        file.seek(0)
        header = file.read(2048)
        file.seek(0)

        if not header:
            return None

        return self.magic.from_buffer(header) or None

    def _get_media_type(self, mime_type: str) -> str | None:
        """Map a MIME type to its media category, or None if not allowed."""
        for media_type, allowed_types in self._allowed_mime_types.items():
            if mime_type in allowed_types:
                return media_type
        return None


# =============================================================================
# Convenience Functions
# =============================================================================


def validate_attachment_upload(file: BinaryIO) -> ValidationResult:
    """Validate a message attachment using the default categories and limits."""
    return MediaValidator().validate(file)


def validate_profile_picture(file: BinaryIO, max_size: int) -> ValidationResult:
    """Validate a profile picture: browser-safe image types up to max_size."""
    validator = MediaValidator(
        allowed_mime_types={"image": PROFILE_PICTURE_MIME_TYPES},
        size_limits={"image": max_size},
    )
    return validator.validate(file)
