"""
Tests for chat Celery tasks.

Tasks are called directly (synchronously); the broker is not involved.
"""

from freezegun import freeze_time

from chat.models import TypingIndicator
from chat.tasks import expire_typing_indicators
from chat.tests.factories import TypingIndicatorFactory


class TestExpireTypingIndicators:
    """Tests for expire_typing_indicators task."""

    def test_removes_only_stale_indicators(self, group_conversation, member_user, admin_user):
        """
        Indicators older than the TTL are deleted, fresh ones stay.

        Why it matters: The sweep must not hide someone who is still typing.
        """
        with freeze_time("2026-03-01 09:00:00"):
            TypingIndicatorFactory(conversation=group_conversation, user=member_user)
        with freeze_time("2026-03-01 09:00:10"):
            TypingIndicatorFactory(conversation=group_conversation, user=admin_user)
            removed = expire_typing_indicators()

        assert removed == 1
        assert list(TypingIndicator.objects.values_list("user_id", flat=True)) == [
            admin_user.id
        ]

    def test_nothing_to_remove(self, db):
        assert expire_typing_indicators() == 0

    def test_ttl_is_configurable(self, group_conversation, member_user, settings):
        settings.CHAT_TYPING_INDICATOR_TTL_SECONDS = 60

        with freeze_time("2026-03-01 09:00:00"):
            TypingIndicatorFactory(conversation=group_conversation, user=member_user)
        with freeze_time("2026-03-01 09:00:30"):
            removed = expire_typing_indicators()

        assert removed == 0
        assert TypingIndicator.objects.count() == 1
