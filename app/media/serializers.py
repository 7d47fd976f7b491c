"""
Serializers for media uploads.

Upload validation beyond "a file is present" (type sniffing, size limits)
happens in MediaUploadService so that the same rules apply to every caller.
"""

from __future__ import annotations

from rest_framework import serializers


class MediaUploadSerializer(serializers.Serializer):
    """Multipart input for POST /media/upload/."""

    file = serializers.FileField(
        required=True,
        help_text="The file to upload",
    )


class UploadedMediaSerializer(serializers.Serializer):
    """
    Metadata of a stored upload.

    Clients post these fields back as an attachment when sending a message,
    together with ``message_type`` as the message's type.
    """

    file_url = serializers.URLField(read_only=True)
    file_name = serializers.CharField(read_only=True)
    file_type = serializers.CharField(read_only=True, help_text="Detected MIME type")
    file_size = serializers.IntegerField(read_only=True)
    message_type = serializers.CharField(read_only=True)
    width = serializers.IntegerField(read_only=True, allow_null=True)
    height = serializers.IntegerField(read_only=True, allow_null=True)
