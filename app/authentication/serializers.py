"""
Serializers for authentication models.

This module provides DRF serializers for:
- User model (current user, public summaries)
- Profile updates (PUT /user/)
- Registration, login, logout
- Profile picture upload
- UserSettings

Related files:
    - models.py: User, Profile, UserSettings
    - views.py: Views that use these serializers
    - services.py: Business logic called from the views

Security:
    - Password fields are write-only
    - Passwords run through Django's AUTH_PASSWORD_VALIDATORS
"""

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User, UserSettings


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for the current user (read operations).

    Flattens the profile so clients get one object for GET /user/.
    """

    display_name = serializers.CharField(source="profile.display_name", read_only=True)
    first_name = serializers.CharField(source="profile.first_name", read_only=True)
    last_name = serializers.CharField(source="profile.last_name", read_only=True)
    full_name = serializers.CharField(source="profile.full_name", read_only=True)
    bio = serializers.CharField(source="profile.bio", read_only=True)
    phone_number = serializers.CharField(source="profile.phone_number", read_only=True)
    profile_picture_url = serializers.CharField(
        source="profile.profile_picture_url", read_only=True
    )

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "display_name",
            "first_name",
            "last_name",
            "full_name",
            "bio",
            "phone_number",
            "profile_picture_url",
            "date_joined",
        ]
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """Compact user representation shown to other users (participants, contacts)."""

    display_name = serializers.CharField(source="profile.display_name", read_only=True)
    profile_picture_url = serializers.CharField(
        source="profile.profile_picture_url", read_only=True
    )

    class Meta:
        model = User
        fields = ["id", "username", "display_name", "profile_picture_url"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    """
    Input for PUT /user/.

    Every field is optional and nullable; only the keys present in the
    request are changed.
    """

    first_name = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    last_name = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    bio = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    username = serializers.CharField(max_length=50, required=False, allow_null=True)
    email = serializers.EmailField(max_length=255, required=False, allow_null=True)
    phone_number = serializers.CharField(
        max_length=20, required=False, allow_null=True, allow_blank=True
    )

    def validate_username(self, value):
        """Reject usernames taken by another account (case-insensitive)."""
        if value is None:
            return value
        user = self.context.get("user")
        existing = User.objects.filter(username__iexact=value)
        if user:
            existing = existing.exclude(pk=user.pk)
        if existing.exists():
            raise serializers.ValidationError("This username is already taken.")
        return value

    def validate_email(self, value):
        """Reject emails registered to another account."""
        if value is None:
            return value
        email = value.strip().lower()
        user = self.context.get("user")
        existing = User.objects.filter(email__iexact=email)
        if user:
            existing = existing.exclude(pk=user.pk)
        if existing.exists():
            raise serializers.ValidationError("This email is already registered.")
        return email


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for user registration (POST /register/).

    Validates uniqueness, password confirmation and password strength; the
    account itself is created by RegistrationService.
    """

    username = serializers.CharField(max_length=255)
    email = serializers.EmailField(max_length=255)
    display_name = serializers.CharField(max_length=255)
    phone_number = serializers.CharField(
        max_length=15, required=False, allow_null=True, allow_blank=True
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )
    password_confirmation = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Must match password.",
    )

    def validate_username(self, value):
        """Validate that the username is not already in use."""
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("This username is already taken.")
        return value

    def validate_email(self, value):
        """Validate that the email is not already in use."""
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("This email is already registered.")
        return email

    def validate(self, attrs):
        """Check confirmation, then password strength against the new identity."""
        if attrs["password"] != attrs["password_confirmation"]:
            raise serializers.ValidationError(
                {"password_confirmation": "Password confirmation does not match."}
            )

        candidate = User(email=attrs["email"], username=attrs["username"])
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({"password": list(e.messages)}) from e

        return attrs


class LoginSerializer(TokenObtainPairSerializer):
    """
    Exchange email/password for a JWT pair (POST /login/).

    Adds the current user to simplejwt's {access, refresh} response.
    """

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data


class LogoutSerializer(serializers.Serializer):
    """Refresh token to revoke on POST /logout/."""

    refresh = serializers.CharField()

    def validate_refresh(self, value):
        """Parse the token so invalid or expired tokens fail validation."""
        try:
            return RefreshToken(value)
        except TokenError as e:
            raise serializers.ValidationError(str(e)) from e


class ProfilePictureUploadSerializer(serializers.Serializer):
    """Multipart input for POST /user/profile-picture/."""

    image = serializers.FileField(help_text="JPEG, PNG, GIF or WebP image, max 5MB")


class UserSettingsSerializer(serializers.ModelSerializer):
    """Read/partial-update representation of UserSettings."""

    class Meta:
        model = UserSettings
        fields = [
            "theme",
            "language",
            "notification_sound",
            "show_read_receipts",
            "show_typing_indicator",
            "show_online_status",
            "two_factor_enabled",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]


def tokens_for_user(user):
    """Issue a fresh JWT pair, as returned right after registration."""
    refresh = RefreshToken.for_user(user)
    return {"access": str(refresh.access_token), "refresh": str(refresh)}
