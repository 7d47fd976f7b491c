"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /ping/                         - Liveness probe ({"message": "pong"})
    /api/schema/                   - OpenAPI schema (YAML)
    /api/docs/                     - Swagger UI
    /api/v1/                       - Accounts
        register/                  - User registration
        login/                     - Email/password login
        refresh/                   - Refresh token pair
        logout/                    - Blacklist refresh token
        user/                      - Current user (GET/PUT/PATCH)
        user/profile-picture/      - Upload/delete profile picture
        user/settings/             - User preferences
    /api/v1/contacts/              - Contacts
        {id}/                      - Contact detail/update/remove
        {id}/block/                - Block contact
        {id}/unblock/              - Unblock contact
    /api/v1/conversations/         - Conversation list/create
        {id}/                      - Conversation detail/update
        {id}/read/                 - Advance read watermark
        {id}/typing/               - Typing indicators
        {id}/participants/         - Participant list/add
        {id}/participants/{user}/  - Remove participant or leave
        {id}/messages/             - Message list/post
        {id}/messages/{pk}/        - Message get/edit/delete
        {id}/messages/{pk}/attachments/ - Attach uploaded file
    /api/v1/media/                 - Media endpoints
        upload/                    - Upload attachment file

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from core.views import health_check, ping

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Accounts
    path("", include("authentication.urls")),
    # Contacts
    path("", include("contacts.urls")),
    # Chat
    path("", include("chat.urls")),
    # Media
    path("media/", include("media.urls")),
]

urlpatterns = [
    # Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    path("ping/", ping, name="ping"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# Local blob store objects are served by Django in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Messaging Admin"
admin.site.site_title = "Messaging Admin Portal"
admin.site.index_title = "Welcome to the Messaging Admin Portal"
