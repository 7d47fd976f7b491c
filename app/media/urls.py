"""
URL configuration for media app.

Media - Upload:
    POST /upload/    - Upload an attachment file
"""

from django.urls import path

from media.views import MediaUploadView

app_name = "media"

urlpatterns = [
    path("upload/", MediaUploadView.as_view(), name="upload"),
]
