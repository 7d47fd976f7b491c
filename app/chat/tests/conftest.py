"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures with different conversation roles
- Conversation fixtures (direct and group)
- Message fixtures
- API client helpers for authenticated requests

Usage:
    def test_example(group_conversation, client_for, owner_user):
        client = client_for(owner_user)
        response = client.get(f'/api/v1/conversations/{group_conversation.id}/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.models import Participant, ParticipantRole
from chat.tests.factories import (
    DirectConversationFactory,
    GroupConversationFactory,
    MessageFactory,
    ParticipantFactory,
)


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def owner_user(db):
    """Create a user who will be a conversation owner."""
    return UserFactory(display_name="Owner")


@pytest.fixture
def admin_user(db):
    """Create a user who will be a conversation admin."""
    return UserFactory(display_name="Admin")


@pytest.fixture
def member_user(db):
    """Create a user who will be a conversation member."""
    return UserFactory(display_name="Member")


@pytest.fixture
def other_user(db):
    """Create another user for various tests."""
    return UserFactory(display_name="Other")


@pytest.fixture
def non_participant_user(db):
    """Create a user who is not a participant in any test conversation."""
    return UserFactory(display_name="Outsider")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def group_conversation(db, owner_user, admin_user, member_user):
    """
    Create a group conversation with owner, admin, and member.

    Provides a full role hierarchy for permission testing.
    """
    conversation = GroupConversationFactory(
        created_by=owner_user,
        name="Test Group",
        members=[member_user],
    )
    ParticipantFactory(
        conversation=conversation,
        user=admin_user,
        role=ParticipantRole.ADMIN,
    )
    conversation.participant_count = 3
    conversation.save(update_fields=["participant_count"])
    return conversation


@pytest.fixture
def direct_conversation(db, owner_user, other_user):
    """
    Create a direct conversation between two users.

    owner_user is the creator.
    """
    return DirectConversationFactory(user1=owner_user, user2=other_user)


# =============================================================================
# Participant Fixtures
# =============================================================================


@pytest.fixture
def owner_participant(group_conversation, owner_user):
    """Get the owner participant of the group conversation."""
    return Participant.objects.get(
        conversation=group_conversation, user=owner_user, is_active=True
    )


@pytest.fixture
def member_participant(group_conversation, member_user):
    """Get the member participant of the group conversation."""
    return Participant.objects.get(
        conversation=group_conversation, user=member_user, is_active=True
    )


# =============================================================================
# Message Fixtures
# =============================================================================


@pytest.fixture
def message(group_conversation, member_user):
    """A text message from the member."""
    return MessageFactory(
        conversation=group_conversation, sender=member_user, content="Hello team"
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """
    Factory fixture returning an APIClient authenticated as the given user.

    Usage:
        def test_example(client_for, owner_user):
            client = client_for(owner_user)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client
