"""Media services for validated uploads to the blob store."""

from media.services.uploads import MediaUploadService, UploadedMedia

__all__ = [
    "MediaUploadService",
    "UploadedMedia",
]
