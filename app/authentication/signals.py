"""
Django signals for authentication.

Signal handlers:
- Auto-create Profile and UserSettings when a User is created

Related files:
    - models.py: User, Profile and UserSettings models
    - apps.py: Signal import in ready()
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    """
    Create the Profile and UserSettings rows for newly created users.

    Both start with defaults; registration fills the display name right
    after, inside the same transaction.
    """
    if created:
        from authentication.models import Profile, UserSettings

        Profile.objects.get_or_create(user=instance)
        UserSettings.objects.get_or_create(user=instance)
        logger.debug(f"Profile and settings created for user: {instance.email}")
