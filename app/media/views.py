"""
Views for media uploads.

POST /api/v1/media/upload/ stores a file in the blob store and returns the
metadata to attach to a message. Errors raised by the service (413, 415, 502)
are rendered by core.exception_handler.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from media.serializers import MediaUploadSerializer, UploadedMediaSerializer
from media.services import MediaUploadService


class MediaUploadView(APIView):
    """
    Handle attachment uploads.

    Request:
        Content-Type: multipart/form-data
        - file (required): The file to upload

    Response:
        201 Created: File stored, metadata returned
        400 Bad Request: Missing or empty file
        413 Payload Too Large: File over its category limit
        415 Unsupported Media Type: File type not allowed
        502 Bad Gateway: Blob store failure
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="upload_media_file",
        summary="Upload media file",
        description=(
            "Upload a file for use as a message attachment. The type is detected "
            "from content and size limits depend on the detected category."
        ),
        request=MediaUploadSerializer,
        responses={
            201: OpenApiResponse(
                response=UploadedMediaSerializer,
                description="File uploaded successfully",
            ),
            413: OpenApiResponse(description="File too large"),
            415: OpenApiResponse(description="File type not allowed"),
        },
        tags=["Media - Upload"],
    )
    def post(self, request):
        serializer = MediaUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        uploaded = MediaUploadService.upload(
            request.user, serializer.validated_data["file"]
        )

        return Response(
            UploadedMediaSerializer(uploaded).data,
            status=status.HTTP_201_CREATED,
        )
