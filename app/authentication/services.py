"""
Authentication services.

This module provides account business logic:
- RegistrationService: create users with their profile data
- ProfileService: partial profile updates
- ProfilePictureService: picture upload/delete against the blob store
- UserSettingsService: per-user preferences

Related files:
    - models.py: User, Profile, UserSettings
    - signals.py: Profile/UserSettings auto-creation
    - media/storage.py: Blob store used for profile pictures

Security:
    - Passwords hashed with Django's PBKDF2
    - Picture type is sniffed from content (python-magic)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError

from authentication.models import Profile, User, UserSettings
from core.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from core.services import BaseService
from media.storage import get_blob_store
from media.validators import validate_profile_picture

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

PROFILE_PICTURE_FOLDER = "profile_pictures"

USER_FIELDS = ("username", "email")
PROFILE_FIELDS = ("first_name", "last_name", "bio", "phone_number")


class RegistrationService(BaseService):
    """Create accounts."""

    @classmethod
    def register(
        cls,
        username: str,
        email: str,
        password: str,
        display_name: str,
        phone_number: str | None = None,
    ) -> User:
        """
        Create a user together with its profile data.

        Uniqueness is normally checked by RegisterSerializer; the database
        constraints catch concurrent registrations of the same handle.

        Raises:
            ValidationError: Username or email already registered
        """
        cls._ensure_available(username=username, email=email)

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    email=email, username=username, password=password
                )
                profile = user.profile
                profile.display_name = display_name
                profile.phone_number = phone_number or None
                profile.save(update_fields=["display_name", "phone_number", "updated_at"])
        except IntegrityError as e:
            raise ValidationError(
                "Username or email is already registered",
                error_code="ACCOUNT_EXISTS",
            ) from e

        cls.get_logger().info(f"Registered user {user.id} ({user.username})")
        return user

    @classmethod
    def _ensure_available(cls, username: str, email: str) -> None:
        errors = {}
        if User.objects.filter(username__iexact=username).exists():
            errors["username"] = ["This username is already taken."]
        if User.objects.filter(email__iexact=email).exists():
            errors["email"] = ["This email is already registered."]
        if errors:
            raise ValidationError(
                "Username or email is already registered",
                error_code="ACCOUNT_EXISTS",
                details=errors,
            )


class ProfileService(BaseService):
    """Profile field updates."""

    @classmethod
    def update_profile(cls, user: User, **data) -> User:
        """
        Partially update account and profile fields.

        Args:
            user: User being updated (always the caller)
            **data: Any of username, email, first_name, last_name, bio,
                phone_number. Profile fields accept None to clear them;
                username/email are left untouched when None.

        Returns:
            The refreshed user

        Raises:
            ConflictError: The new username or email belongs to someone else
        """
        user_changes = {
            name: data[name]
            for name in USER_FIELDS
            if name in data and data[name] is not None
        }
        profile_changes = {name: data[name] for name in PROFILE_FIELDS if name in data}

        try:
            with cls.atomic():
                if user_changes:
                    for name, value in user_changes.items():
                        setattr(user, name, value)
                    user.save(update_fields=[*user_changes, "updated_at"])
                if profile_changes:
                    profile = user.profile
                    for name, value in profile_changes.items():
                        setattr(profile, name, value)
                    profile.save(update_fields=[*profile_changes, "updated_at"])
        except IntegrityError as e:
            raise ConflictError(
                "Username or email is already in use",
                error_code="ACCOUNT_FIELD_TAKEN",
                details={"fields": sorted(user_changes)},
            ) from e

        cls.get_logger().info(
            f"User {user.id} updated profile fields: "
            f"{', '.join(sorted([*user_changes, *profile_changes]))}"
        )
        user.refresh_from_db()
        return user


class ProfilePictureService(BaseService):
    """
    Profile picture lifecycle against the blob store.

    There is no distributed transaction between the store and the database,
    so the two operations use opposite failure policies:

    - upload: a failed delete of the previous object is logged and the
      upload proceeds (an orphaned blob is preferable to a stuck picture).
    - delete: a failed external delete keeps the reference so the deletion
      can be retried instead of losing the pointer to a live object.
    """

    @classmethod
    def upload(cls, user: User, uploaded_file: UploadedFile) -> Profile:
        """
        Validate, store and attach a new profile picture.

        The object key is derived from the user id so re-uploads overwrite
        the same object.

        Raises:
            PayloadTooLargeError: Over PROFILE_PICTURE_MAX_SIZE
            UnsupportedMediaTypeError: Not a JPEG/PNG/GIF/WebP image
            ExternalServiceError: The new object could not be written; the
                stored reference is left unchanged
        """
        result = validate_profile_picture(
            uploaded_file, max_size=settings.PROFILE_PICTURE_MAX_SIZE
        )
        result.raise_if_invalid()

        store = get_blob_store()
        profile = user.profile
        previous_url = profile.profile_picture_url

        if previous_url and not store.delete(previous_url):
            cls.get_logger().warning(
                f"Could not delete previous profile picture of user {user.id} "
                f"({previous_url}); continuing with upload"
            )

        key = f"user_{user.id}"
        url = store.put(
            key,
            uploaded_file,
            folder=PROFILE_PICTURE_FOLDER,
            content_type=result.mime_type,
        )

        profile.profile_picture_url = url
        profile.save(update_fields=["profile_picture_url", "updated_at"])

        cls.get_logger().info(f"User {user.id} uploaded profile picture {url}")
        return profile

    @classmethod
    def delete(cls, user: User) -> Profile:
        """
        Delete the stored picture, then clear the reference.

        Raises:
            NotFoundError: No picture is set
            ExternalServiceError: The store refused the delete; the
                reference is kept
        """
        profile = user.profile
        url = profile.profile_picture_url
        if not url:
            raise NotFoundError(
                "No image found",
                error_code="PROFILE_PICTURE_NOT_FOUND",
            )

        if not get_blob_store().delete(url):
            cls.get_logger().error(
                f"Could not delete profile picture of user {user.id} ({url})"
            )
            raise ExternalServiceError(
                "Could not delete profile picture from storage",
                error_code="BLOB_DELETE_FAILED",
                details={"service": "blob_store"},
            )

        profile.profile_picture_url = None
        profile.save(update_fields=["profile_picture_url", "updated_at"])

        cls.get_logger().info(f"User {user.id} deleted profile picture")
        return profile


class UserSettingsService(BaseService):
    """Per-user preferences."""

    UPDATABLE_FIELDS = (
        "theme",
        "language",
        "notification_sound",
        "show_read_receipts",
        "show_typing_indicator",
        "show_online_status",
        "two_factor_enabled",
    )

    @classmethod
    def get_settings(cls, user: User) -> UserSettings:
        """Return the user's settings, creating defaults if missing."""
        user_settings, _ = UserSettings.objects.get_or_create(user=user)
        return user_settings

    @classmethod
    def update_settings(cls, user: User, **data) -> UserSettings:
        """
        Partially update preferences.

        Raises:
            ValidationError: Unknown field or a value outside the theme /
                language enumerations
        """
        unknown = sorted(set(data) - set(cls.UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(
                "Unknown settings fields",
                details={name: ["Unknown field."] for name in unknown},
            )
        if "theme" in data and data["theme"] not in UserSettings.Theme.values:
            raise ValidationError(
                f"Unsupported theme '{data['theme']}'",
                error_code="INVALID_THEME",
                details={"allowed": UserSettings.Theme.values},
            )
        if "language" in data and data["language"] not in UserSettings.Language.values:
            raise ValidationError(
                f"Unsupported language '{data['language']}'",
                error_code="INVALID_LANGUAGE",
                details={"allowed": UserSettings.Language.values},
            )

        user_settings = cls.get_settings(user)
        if data:
            for name, value in data.items():
                setattr(user_settings, name, value)
            user_settings.save(update_fields=[*data, "updated_at"])
            cls.get_logger().info(
                f"User {user.id} updated settings: {', '.join(sorted(data))}"
            )
        return user_settings
