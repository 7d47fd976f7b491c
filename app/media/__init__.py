"""
Media app for validated uploads and blob storage.

This app provides:
- Content-based MIME type validation (python-magic)
- Per-media-type size limits
- Blob store backends (local filesystem storage, S3)
- The upload endpoint whose results become message attachments
"""
