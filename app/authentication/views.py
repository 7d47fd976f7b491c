"""
Authentication views.

This module provides API views for:
- Registration, login, logout and token refresh (JWT via simplejwt)
- Current user read/update
- Profile picture upload/delete
- User settings

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (RegistrationService, ProfileService, ...)
    - urls.py: URL routing

Note:
    Views pass request.user explicitly into the services. Application
    errors raised there (404 for a missing picture, 413/415 for bad uploads,
    502 for storage failures) are rendered by core.exception_handler.
"""

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from authentication.serializers import (
    LoginSerializer,
    LogoutSerializer,
    ProfilePictureUploadSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
    UserSettingsSerializer,
    tokens_for_user,
)
from authentication.services import (
    ProfilePictureService,
    ProfileService,
    RegistrationService,
    UserSettingsService,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Session Views
# =============================================================================


class RegisterView(APIView):
    """
    Create an account and return it with a fresh token pair.

    URL: /api/v1/register/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="register",
        summary="Register",
        description=(
            "Create an account. Username and email must be unique, the password "
            "must pass the configured strength validators and match "
            "password_confirmation."
        ),
        tags=["Auth - Session"],
        request=RegisterSerializer,
        responses={
            201: OpenApiResponse(description="User and tokens"),
            400: OpenApiResponse(description="Validation error"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = RegistrationService.register(
            username=data["username"],
            email=data["email"],
            password=data["password"],
            display_name=data["display_name"],
            phone_number=data.get("phone_number"),
        )

        return Response(
            {"user": UserSerializer(user).data, **tokens_for_user(user)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(
    operation_id="login",
    summary="Log in",
    description="Exchange email and password for an access/refresh token pair.",
    tags=["Auth - Session"],
)
class LoginView(TokenObtainPairView):
    """
    Email/password login.

    URL: /api/v1/login/
    """

    serializer_class = LoginSerializer


@extend_schema(
    operation_id="refresh",
    summary="Refresh access token",
    description="Exchange a refresh token for a new pair; the old refresh token is blacklisted.",
    tags=["Auth - Session"],
)
class RefreshView(TokenRefreshView):
    """
    Token refresh with rotation.

    URL: /api/v1/refresh/
    """


class LogoutView(APIView):
    """
    Revoke a refresh token.

    URL: /api/v1/logout/

    Access tokens stay valid until they expire; clients drop them locally.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="logout",
        summary="Log out",
        tags=["Auth - Session"],
        request=LogoutSerializer,
        responses={205: OpenApiResponse(description="Refresh token revoked")},
    )
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.validated_data["refresh"].blacklist()

        logger.info(f"User {request.user.id} logged out")
        return Response(status=status.HTTP_205_RESET_CONTENT)


# =============================================================================
# Current User Views
# =============================================================================


class CurrentUserView(APIView):
    """
    Current user operations.

    GET: Retrieve the authenticated user with profile fields
    PUT/PATCH: Partial update of first_name, last_name, bio, username,
        email, phone_number (all optional and nullable)

    URL: /api/v1/user/
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    @extend_schema(
        operation_id="get_current_user",
        summary="Get current user",
        tags=["Auth - User"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="update_current_user",
        summary="Update current user",
        description="Every field is optional; only the fields sent are changed.",
        tags=["Auth - User"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def put(self, request):
        return self._update(request)

    @extend_schema(
        operation_id="partial_update_current_user",
        summary="Partially update current user",
        tags=["Auth - User"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        return self._update(request)

    def _update(self, request):
        serializer = ProfileUpdateSerializer(
            data=request.data,
            partial=True,
            context={"request": request, "user": request.user},
        )
        serializer.is_valid(raise_exception=True)

        user = ProfileService.update_profile(request.user, **serializer.validated_data)

        return Response(UserSerializer(user).data)


class ProfilePictureView(APIView):
    """
    Profile picture upload/delete.

    POST: multipart ``image`` (max 5MB, JPEG/PNG/GIF/WebP)
    DELETE: remove the picture; 404 if none is set

    URL: /api/v1/user/profile-picture/
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="upload_profile_picture",
        summary="Upload profile picture",
        tags=["Auth - User"],
        request=ProfilePictureUploadSerializer,
        responses={
            200: UserSerializer,
            413: OpenApiResponse(description="Image larger than 5MB"),
            415: OpenApiResponse(description="Not an allowed image type"),
            502: OpenApiResponse(description="Storage failure"),
        },
    )
    def post(self, request):
        serializer = ProfilePictureUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ProfilePictureService.upload(request.user, serializer.validated_data["image"])

        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="delete_profile_picture",
        summary="Delete profile picture",
        tags=["Auth - User"],
        responses={
            200: UserSerializer,
            404: OpenApiResponse(description="No picture set"),
            502: OpenApiResponse(description="Storage failure, picture kept"),
        },
    )
    def delete(self, request):
        ProfilePictureService.delete(request.user)
        return Response(UserSerializer(request.user).data)


class UserSettingsView(APIView):
    """
    Per-user preferences.

    URL: /api/v1/user/settings/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_user_settings",
        summary="Get settings",
        tags=["Auth - Settings"],
        responses={200: UserSettingsSerializer},
    )
    def get(self, request):
        user_settings = UserSettingsService.get_settings(request.user)
        return Response(UserSettingsSerializer(user_settings).data)

    @extend_schema(
        operation_id="update_user_settings",
        summary="Update settings",
        tags=["Auth - Settings"],
        request=UserSettingsSerializer,
        responses={200: UserSettingsSerializer},
    )
    def patch(self, request):
        user_settings = UserSettingsService.get_settings(request.user)
        serializer = UserSettingsSerializer(
            user_settings, data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)

        user_settings = UserSettingsService.update_settings(
            request.user, **serializer.validated_data
        )

        return Response(UserSettingsSerializer(user_settings).data)
