"""
Authentication application.

This app provides accounts, JWT login, profiles, profile pictures and
per-user settings.

Key components:
    - User model: Custom email-based user with a unique username
    - Profile model: Display name, bio, phone number and picture
    - UserSettings model: Theme, notification and privacy preferences
    - RegistrationService, ProfileService, ProfilePictureService,
      UserSettingsService: Business logic behind the endpoints

Usage:
    from authentication.models import User, Profile
    from authentication.services import RegistrationService
"""
