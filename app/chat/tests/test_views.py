"""
Tests for chat API views.

This module tests all chat view endpoints:
- ConversationViewSet: list, create, retrieve, update, read, typing
- ParticipantViewSet: list, add, remove/leave
- MessageViewSet: list, post, get, edit, delete, attachments

Test Organization:
    - Each ViewSet action has its own test class
    - Each test validates ONE specific HTTP interaction
    - Tests follow pattern: test_<scenario>_<expected_outcome>

Testing Philosophy:
    Tests focus on observable HTTP behavior:
    - Response status codes
    - Response body structure and error codes
    - Database state changes
    - Authentication enforcement
"""

import pytest
from rest_framework import status

from chat.models import Conversation, Message, Participant, TypingIndicator
from chat.tests.factories import AttachmentFactory, MessageFactory


# =============================================================================
# URL Constants
# =============================================================================


CONVERSATIONS_URL = "/api/v1/conversations/"


def conversation_detail_url(conversation_id):
    """Generate URL for conversation detail endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/"


def conversation_read_url(conversation_id):
    """Generate URL for mark as read endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/read/"


def typing_url(conversation_id):
    """Generate URL for typing indicator endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/typing/"


def participants_url(conversation_id):
    """Generate URL for participants list endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/participants/"


def participant_detail_url(conversation_id, user_id):
    """Generate URL for participant removal endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/participants/{user_id}/"


def messages_url(conversation_id):
    """Generate URL for messages list endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/messages/"


def message_detail_url(conversation_id, message_id):
    """Generate URL for message detail endpoint."""
    return f"{CONVERSATIONS_URL}{conversation_id}/messages/{message_id}/"


def message_attachments_url(conversation_id, message_id):
    """Generate URL for message attachments endpoint."""
    return f"{message_detail_url(conversation_id, message_id)}attachments/"


# =============================================================================
# TestConversationList
# =============================================================================


class TestConversationList:
    """Tests for GET /api/v1/conversations/."""

    def test_returns_users_conversations(self, group_conversation, client_for, owner_user):
        """
        Returns conversations where user is an active participant.

        Why it matters: Users should only see their own conversations.
        """
        response = client_for(owner_user).get(CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert [c["id"] for c in response.data["results"]] == [group_conversation.id]
        assert response.data["count"] == 1

    def test_excludes_conversations_user_is_not_in(
        self, group_conversation, client_for, non_participant_user
    ):
        response = client_for(non_participant_user).get(CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["results"] == []

    def test_includes_unread_count(self, group_conversation, message, client_for, owner_user):
        response = client_for(owner_user).get(CONVERSATIONS_URL)

        assert response.data["results"][0]["unread_count"] == 1

    def test_requires_authentication(self, db, api_client):
        """
        Unauthenticated requests are rejected.

        Why it matters: Conversation list is private data.
        """
        response = api_client.get(CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestConversationCreate
# =============================================================================


class TestConversationCreate:
    """Tests for POST /api/v1/conversations/."""

    def test_creates_direct_conversation(self, client_for, owner_user, other_user):
        """
        Successfully creates direct conversation with another user.

        Why it matters: Primary happy path for starting DMs.
        """
        data = {"conversation_type": "direct", "participant_ids": [other_user.id]}

        response = client_for(owner_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["conversation_type"] == "direct"
        assert response.data["current_user_role"] == "owner"
        assert {p["user"]["id"] for p in response.data["participants"]} == {
            owner_user.id,
            other_user.id,
        }

    def test_returns_existing_direct_conversation(
        self, direct_conversation, client_for, other_user, owner_user
    ):
        data = {"conversation_type": "direct", "participant_ids": [owner_user.id]}

        response = client_for(other_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.data["id"] == direct_conversation.id
        assert Conversation.objects.count() == 1

    def test_creates_group(self, client_for, owner_user, member_user, other_user):
        data = {
            "conversation_type": "group",
            "name": "Launch",
            "participant_ids": [member_user.id, other_user.id],
        }

        response = client_for(owner_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["name"] == "Launch"
        assert response.data["participant_count"] == 3

    def test_group_without_name_rejected(self, client_for, owner_user, member_user, other_user):
        data = {
            "conversation_type": "group",
            "participant_ids": [member_user.id, other_user.id],
        }

        response = client_for(owner_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "NAME_REQUIRED"

    def test_unknown_participant(self, client_for, owner_user):
        data = {"conversation_type": "direct", "participant_ids": [987654]}

        response = client_for(owner_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "USER_NOT_FOUND"

    def test_invalid_type_is_serializer_error(self, client_for, owner_user, other_user):
        data = {"conversation_type": "channel", "participant_ids": [other_user.id]}

        response = client_for(owner_user).post(CONVERSATIONS_URL, data, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "conversation_type" in response.data


# =============================================================================
# TestConversationDetail
# =============================================================================


class TestConversationDetail:
    """Tests for GET/PATCH /api/v1/conversations/{id}/."""

    def test_participant_sees_details(self, group_conversation, client_for, member_user):
        response = client_for(member_user).get(conversation_detail_url(group_conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["current_user_role"] == "member"
        assert len(response.data["participants"]) == 3

    def test_non_participant_forbidden(
        self, group_conversation, client_for, non_participant_user
    ):
        """
        Outsiders cannot read a conversation.

        Why it matters: Conversation membership is the access boundary.
        """
        response = client_for(non_participant_user).get(
            conversation_detail_url(group_conversation.id)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PARTICIPANT"

    def test_missing_conversation(self, client_for, owner_user):
        response = client_for(owner_user).get(conversation_detail_url(424242))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize("suffix", ["", "read/", "typing/"])
    def test_non_numeric_id_is_not_found(self, client_for, owner_user, suffix):
        """
        Conversation ids that are not integers never reach the services.

        Why it matters: A malformed id in the URL must be a 404, not a crash.
        """
        client = client_for(owner_user)
        url = f"{CONVERSATIONS_URL}abc/{suffix}"

        response = client.post(url, {}) if suffix == "read/" else client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_admin_renames_group(self, group_conversation, client_for, admin_user):
        response = client_for(admin_user).patch(
            conversation_detail_url(group_conversation.id),
            {"name": "New name"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["name"] == "New name"

    def test_member_cannot_rename(self, group_conversation, client_for, member_user):
        response = client_for(member_user).patch(
            conversation_detail_url(group_conversation.id),
            {"name": "New name"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_put_not_allowed(self, group_conversation, client_for, owner_user):
        response = client_for(owner_user).put(
            conversation_detail_url(group_conversation.id),
            {"name": "New name"},
            format="json",
        )

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


# =============================================================================
# TestConversationRead
# =============================================================================


class TestConversationRead:
    """Tests for POST /api/v1/conversations/{id}/read/."""

    def test_marks_read(self, group_conversation, message, client_for, owner_user):
        response = client_for(owner_user).post(
            conversation_read_url(group_conversation.id),
            {"message_id": message.id},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["last_read_message_id"] == message.id

    def test_regression_rejected(self, group_conversation, client_for, owner_user, member_user):
        older = MessageFactory(conversation=group_conversation, sender=member_user)
        newer = MessageFactory(conversation=group_conversation, sender=member_user)
        client = client_for(owner_user)
        client.post(
            conversation_read_url(group_conversation.id),
            {"message_id": newer.id},
            format="json",
        )

        response = client.post(
            conversation_read_url(group_conversation.id),
            {"message_id": older.id},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "READ_CURSOR_REGRESSION"

    def test_missing_message_id(self, group_conversation, client_for, owner_user):
        response = client_for(owner_user).post(
            conversation_read_url(group_conversation.id), {}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message_id" in response.data


# =============================================================================
# TestTyping
# =============================================================================


class TestTyping:
    """Tests for /api/v1/conversations/{id}/typing/."""

    def test_start_list_stop(self, group_conversation, client_for, member_user, owner_user):
        response = client_for(member_user).post(typing_url(group_conversation.id))
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = client_for(owner_user).get(typing_url(group_conversation.id))
        assert response.status_code == status.HTTP_200_OK
        assert [t["user"]["id"] for t in response.data] == [member_user.id]

        response = client_for(member_user).delete(typing_url(group_conversation.id))
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not TypingIndicator.objects.exists()

    def test_outsider_forbidden(self, group_conversation, client_for, non_participant_user):
        response = client_for(non_participant_user).post(typing_url(group_conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# TestParticipants
# =============================================================================


class TestParticipantList:
    """Tests for GET /api/v1/conversations/{id}/participants/."""

    def test_lists_active_participants(self, group_conversation, client_for, member_user):
        response = client_for(member_user).get(participants_url(group_conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 3
        assert {p["role"] for p in response.data} == {"owner", "admin", "member"}


class TestParticipantAdd:
    """Tests for POST /api/v1/conversations/{id}/participants/."""

    def test_owner_adds_member(self, group_conversation, client_for, owner_user, other_user):
        response = client_for(owner_user).post(
            participants_url(group_conversation.id),
            {"user_id": other_user.id},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["user"]["id"] == other_user.id
        assert response.data["role"] == "member"

    def test_member_forbidden(self, group_conversation, client_for, member_user, other_user):
        response = client_for(member_user).post(
            participants_url(group_conversation.id),
            {"user_id": other_user.id},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_role_not_accepted(
        self, group_conversation, client_for, owner_user, other_user
    ):
        response = client_for(owner_user).post(
            participants_url(group_conversation.id),
            {"user_id": other_user.id, "role": "owner"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "role" in response.data

    def test_direct_conversation_conflict(
        self, direct_conversation, client_for, owner_user, non_participant_user
    ):
        response = client_for(owner_user).post(
            participants_url(direct_conversation.id),
            {"user_id": non_participant_user.id},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "CONVERSATION_IS_DIRECT"


class TestParticipantRemove:
    """Tests for DELETE /api/v1/conversations/{id}/participants/{user_id}/."""

    def test_member_leaves(self, group_conversation, client_for, member_user):
        response = client_for(member_user).delete(
            participant_detail_url(group_conversation.id, member_user.id)
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Participant.objects.filter(
            conversation=group_conversation, user=member_user, is_active=True
        ).exists()

    def test_admin_removes_member(self, group_conversation, client_for, admin_user, member_user):
        response = client_for(admin_user).delete(
            participant_detail_url(group_conversation.id, member_user.id)
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_unknown_participant(self, group_conversation, client_for, owner_user):
        response = client_for(owner_user).delete(
            participant_detail_url(group_conversation.id, 999999)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "PARTICIPANT_NOT_FOUND"


# =============================================================================
# TestMessages
# =============================================================================


class TestMessageList:
    """Tests for GET /api/v1/conversations/{id}/messages/."""

    def test_lists_oldest_first(self, group_conversation, client_for, member_user):
        first = MessageFactory(conversation=group_conversation, sender=member_user)
        second = MessageFactory(conversation=group_conversation, sender=member_user)

        response = client_for(member_user).get(messages_url(group_conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.data["results"]] == [first.id, second.id]
        assert [m["sequence"] for m in response.data["results"]] == [1, 2]

    def test_deleted_message_rendered_as_tombstone(
        self, group_conversation, message, client_for, member_user, owner_user
    ):
        """
        Deleted messages keep their slot but hide content.

        Why it matters: Other participants must not see deleted content,
        while the history keeps its ordering.
        """
        AttachmentFactory(message=message)
        client_for(member_user).delete(message_detail_url(group_conversation.id, message.id))

        response = client_for(owner_user).get(messages_url(group_conversation.id))

        tombstone = response.data["results"][0]
        assert tombstone["id"] == message.id
        assert tombstone["is_deleted"] is True
        assert tombstone["content"] is None
        assert tombstone["attachments"] == []
        assert tombstone["sender"]["id"] == member_user.id

    def test_page_size(self, group_conversation, client_for, member_user):
        MessageFactory.create_batch(3, conversation=group_conversation, sender=member_user)

        response = client_for(member_user).get(
            messages_url(group_conversation.id), {"page_size": 2}
        )

        assert len(response.data["results"]) == 2
        assert response.data["next"] is not None

    def test_outsider_forbidden(self, group_conversation, client_for, non_participant_user):
        response = client_for(non_participant_user).get(messages_url(group_conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestMessagePost:
    """Tests for POST /api/v1/conversations/{id}/messages/."""

    def test_posts_text(self, group_conversation, client_for, member_user):
        response = client_for(member_user).post(
            messages_url(group_conversation.id), {"content": "hi all"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["content"] == "hi all"
        assert response.data["sequence"] == 1
        assert response.data["state"] == "active"

    def test_posts_with_attachments(self, group_conversation, client_for, member_user):
        data = {
            "message_type": "file",
            "content": "floor plan",
            "attachments": [
                {
                    "file_url": "https://cdn.example.com/attachments/sheet.pdf",
                    "file_name": "sheet.pdf",
                    "file_type": "application/pdf",
                    "file_size": 4096,
                }
            ],
        }

        response = client_for(member_user).post(
            messages_url(group_conversation.id), data, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["attachments"][0]["file_name"] == "sheet.pdf"

    def test_empty_message(self, group_conversation, client_for, member_user):
        response = client_for(member_user).post(
            messages_url(group_conversation.id), {"content": " "}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "EMPTY_MESSAGE"

    def test_outsider_forbidden(self, group_conversation, client_for, non_participant_user):
        response = client_for(non_participant_user).post(
            messages_url(group_conversation.id), {"content": "hi"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Message.objects.exists()


class TestMessageDetail:
    """Tests for GET/PATCH/DELETE /api/v1/conversations/{id}/messages/{pk}/."""

    def test_get(self, group_conversation, message, client_for, owner_user):
        response = client_for(owner_user).get(
            message_detail_url(group_conversation.id, message.id)
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["content"] == "Hello team"

    def test_message_from_other_conversation_not_found(
        self, group_conversation, direct_conversation, client_for, owner_user
    ):
        elsewhere = MessageFactory(conversation=direct_conversation, sender=owner_user)

        response = client_for(owner_user).get(
            message_detail_url(group_conversation.id, elsewhere.id)
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_sender_edits(self, group_conversation, message, client_for, member_user):
        response = client_for(member_user).patch(
            message_detail_url(group_conversation.id, message.id),
            {"content": "Hello everyone"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["content"] == "Hello everyone"
        assert response.data["is_edited"] is True
        assert response.data["state"] == "edited"

    def test_other_user_cannot_edit(self, group_conversation, message, client_for, owner_user):
        response = client_for(owner_user).patch(
            message_detail_url(group_conversation.id, message.id),
            {"content": "Mine"},
            format="json",
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_SENDER"

    def test_edit_deleted_message_conflict(
        self, group_conversation, message, client_for, member_user
    ):
        client = client_for(member_user)
        client.delete(message_detail_url(group_conversation.id, message.id))

        response = client.patch(
            message_detail_url(group_conversation.id, message.id),
            {"content": "back"},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "MESSAGE_DELETED"

    def test_delete_is_idempotent(self, group_conversation, message, client_for, member_user):
        client = client_for(member_user)

        first = client.delete(message_detail_url(group_conversation.id, message.id))
        second = client.delete(message_detail_url(group_conversation.id, message.id))

        assert first.status_code == status.HTTP_204_NO_CONTENT
        assert second.status_code == status.HTTP_204_NO_CONTENT
        message.refresh_from_db()
        assert message.is_deleted is True

    def test_member_cannot_delete_others(
        self, group_conversation, client_for, member_user, admin_user
    ):
        message = MessageFactory(conversation=group_conversation, sender=admin_user)

        response = client_for(member_user).delete(
            message_detail_url(group_conversation.id, message.id)
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestMessageAttachments:
    """Tests for POST /api/v1/conversations/{id}/messages/{pk}/attachments/."""

    def test_sender_attaches(self, group_conversation, message, client_for, member_user):
        response = client_for(member_user).post(
            message_attachments_url(group_conversation.id, message.id),
            {
                "file_url": "https://cdn.example.com/attachments/clip.mp4",
                "file_name": "clip.mp4",
                "file_type": "video/mp4",
                "duration": 12,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["duration"] == 12
        assert message.attachments.count() == 1

    def test_missing_url(self, group_conversation, message, client_for, member_user):
        response = client_for(member_user).post(
            message_attachments_url(group_conversation.id, message.id),
            {"file_name": "clip.mp4", "file_type": "video/mp4"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "file_url" in response.data


# =============================================================================
# End-to-end scenario
# =============================================================================


class TestDirectMessagingFlow:
    """Register, chat and delete over HTTP."""

    def test_register_chat_delete(self, db, api_client):
        """
        Two accounts register, talk in a DM, and one deletes a message.

        Why it matters: Exercises auth and chat endpoints together.
        """
        tokens = {}
        ids = {}
        for name in ("alice", "bob"):
            response = api_client.post(
                "/api/v1/register/",
                {
                    "username": name,
                    "email": f"{name}@example.com",
                    "password": "Correct-Horse-42",
                    "password_confirmation": "Correct-Horse-42",
                    "display_name": name.title(),
                },
                format="json",
            )
            assert response.status_code == status.HTTP_201_CREATED
            tokens[name] = response.data["access"]
            ids[name] = response.data["user"]["id"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['alice']}")
        conversation = api_client.post(
            CONVERSATIONS_URL,
            {"conversation_type": "direct", "participant_ids": [ids["bob"]]},
            format="json",
        ).data
        posted = api_client.post(
            messages_url(conversation["id"]), {"content": "hi"}, format="json"
        ).data
        assert posted["sequence"] == 1

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['bob']}")
        read = api_client.post(
            conversation_read_url(conversation["id"]),
            {"message_id": posted["id"]},
            format="json",
        )
        assert read.data["last_read_message_id"] == posted["id"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['alice']}")
        deleted = api_client.delete(message_detail_url(conversation["id"], posted["id"]))
        assert deleted.status_code == status.HTTP_204_NO_CONTENT

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['bob']}")
        seen = api_client.get(message_detail_url(conversation["id"], posted["id"]))
        assert seen.data["is_deleted"] is True
        assert seen.data["content"] is None
