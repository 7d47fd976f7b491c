"""
URL configuration for authentication app.

Included at /api/v1/ by config/urls.py.

URL structure:
    /api/v1/register/                 - Create account (public)
    /api/v1/login/                    - Email/password login (public)
    /api/v1/refresh/                  - Refresh JWT pair (public, token-bearing)
    /api/v1/logout/                   - Blacklist refresh token
    /api/v1/user/                     - Current user (GET/PUT/PATCH)
    /api/v1/user/profile-picture/     - Upload (POST) / delete (DELETE) picture
    /api/v1/user/settings/            - Preferences (GET/PATCH)
"""

from django.urls import path

from authentication.views import (
    CurrentUserView,
    LoginView,
    LogoutView,
    ProfilePictureView,
    RefreshView,
    RegisterView,
    UserSettingsView,
)

app_name = "authentication"

urlpatterns = [
    # Session
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshView.as_view(), name="refresh"),
    path("logout/", LogoutView.as_view(), name="logout"),
    # Current user
    path("user/", CurrentUserView.as_view(), name="user"),
    path(
        "user/profile-picture/",
        ProfilePictureView.as_view(),
        name="profile-picture",
    ),
    path("user/settings/", UserSettingsView.as_view(), name="settings"),
]
