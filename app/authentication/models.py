"""
Authentication models.

This module defines the account models:
- User: Custom user model with email-based login and a unique username
- Profile: Display and contact data shown to other users (OneToOne with User)
- UserSettings: Per-user preferences (OneToOne with User)

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: Registration, profile, picture and settings services
    - signals.py: Auto-create Profile and UserSettings on user creation

Security:
    - User passwords hashed with Django's PBKDF2
    - Usernames are unique case-insensitively
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.db.models.functions import Lower

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the login identifier.

    Profile data (display name, bio, picture) is stored in Profile and
    preferences in UserSettings, both created automatically.

    Fields:
        email: Login identifier, unique
        username: Public handle, unique (case-insensitive)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email="alice@example.com",
            username="alice",
            password="securepassword",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=255,
        help_text="User's email address (login identifier)",
    )
    username = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Public handle, unique regardless of case",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"

    # Prompted by createsuperuser in addition to email and password
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        constraints = [
            models.UniqueConstraint(
                Lower("username"),
                name="unique_username_case_insensitive",
            ),
        ]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the profile's full name, falling back to the username."""
        try:
            return self.profile.full_name or self.username
        except Profile.DoesNotExist:
            return self.username

    def get_short_name(self):
        """Return the display name, falling back to the username."""
        try:
            return self.profile.display_name or self.username
        except Profile.DoesNotExist:
            return self.username


class Profile(BaseModel):
    """
    Extended user profile data.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        display_name: Name shown in conversations
        first_name / last_name: Optional legal name parts (max 100 chars)
        bio: Short free text (max 255 chars)
        phone_number: Optional phone (max 20 chars)
        profile_picture_url: URL of the picture in the blob store, if any

    Note:
        Profile is automatically created via signals when a User is created.
        The picture itself lives in the blob store under a key derived from
        the user id; only its URL is stored here.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )

    display_name = models.CharField(
        max_length=255,
        blank=True,
        help_text="Name shown to other users",
    )
    first_name = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="User's first name",
    )
    last_name = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        help_text="User's last name",
    )
    bio = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        help_text="Short biography",
    )
    phone_number = models.CharField(
        max_length=20,
        blank=True,
        null=True,
        help_text="Contact phone number",
    )
    profile_picture_url = models.URLField(
        max_length=500,
        blank=True,
        null=True,
        help_text="Public URL of the profile picture in the blob store",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        return self.display_name or str(self.user)

    @property
    def full_name(self):
        """Return full name or empty string."""
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class UserSettings(BaseModel):
    """
    Per-user preferences.

    Theme and language are closed enumerations; anything else is rejected
    by the settings serializer before it reaches the database.

    Fields:
        user: OneToOne link to User (also serves as primary key)
        theme: UI theme
        language: UI language code
        notification_sound: Play a sound for new messages
        show_read_receipts: Let others see when this user read their messages
        show_typing_indicator: Broadcast typing activity to conversations
        show_online_status: Let others see when this user is online
        two_factor_enabled: Whether two-factor login is switched on
    """

    class Theme(models.TextChoices):
        """Available UI themes."""

        LIGHT = "light", "Light"
        DARK = "dark", "Dark"
        SYSTEM = "system", "System"

    class Language(models.TextChoices):
        """Supported UI languages (ISO 639-1)."""

        ENGLISH = "en", "English"
        SPANISH = "es", "Spanish"
        FRENCH = "fr", "French"
        GERMAN = "de", "German"
        PORTUGUESE = "pt", "Portuguese"
        ARABIC = "ar", "Arabic"
        VIETNAMESE = "vi", "Vietnamese"
        JAPANESE = "ja", "Japanese"
        CHINESE = "zh", "Chinese"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="settings",
        primary_key=True,
        help_text="User these settings belong to",
    )
    theme = models.CharField(
        max_length=10,
        choices=Theme.choices,
        default=Theme.SYSTEM,
        help_text="UI theme",
    )
    language = models.CharField(
        max_length=5,
        choices=Language.choices,
        default=Language.ENGLISH,
        help_text="UI language",
    )
    notification_sound = models.BooleanField(
        default=True,
        help_text="Play a sound for new messages",
    )
    show_read_receipts = models.BooleanField(
        default=True,
        help_text="Share read receipts with other participants",
    )
    show_typing_indicator = models.BooleanField(
        default=True,
        help_text="Share typing activity with other participants",
    )
    show_online_status = models.BooleanField(
        default=True,
        help_text="Share online status with other users",
    )
    two_factor_enabled = models.BooleanField(
        default=False,
        help_text="Whether two-factor authentication is enabled",
    )

    class Meta:
        db_table = "authentication_user_settings"
        verbose_name = "user settings"
        verbose_name_plural = "user settings"

    def __str__(self):
        return f"Settings for {self.user}"
