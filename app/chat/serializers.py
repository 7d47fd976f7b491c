"""
Serializers for chat API.

This module provides serializers for the chat system:
- Conversation serializers (list, detail, create, update)
- Participant serializers (read, create)
- Message serializers (read, create, edit)
- Attachment, read-cursor and typing serializers

Serializer Hierarchy:
    ConversationListSerializer: List view with unread count
    ConversationDetailSerializer: Full details including participants
    ConversationCreateSerializer: Direct/group conversation creation
    ConversationUpdateSerializer: Group name/description/avatar update

    ParticipantSerializer: Participant with public user info
    ParticipantCreateSerializer: Add participant to group

    MessageSerializer: Message with tombstone handling
    MessageCreateSerializer: Post new message
    MessageEditSerializer: Edit content

Design Decisions:
    - Read and write serializers are separate for clarity
    - Deleted messages keep id, sender, sequence and timestamps; content,
      media_url and attachments are withheld
    - Business rules (participant counts, roles) are enforced by services;
      serializers only check shape
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from chat.constants import ATTACHMENT_CONFIG, CONVERSATION_CONFIG, MESSAGE_CONFIG
from chat.models import (
    Attachment,
    Conversation,
    ConversationType,
    Message,
    MessageType,
    Participant,
    ParticipantRole,
    TypingIndicator,
)
from chat.services import MessageService


# =============================================================================
# Attachment Serializers
# =============================================================================


class AttachmentSerializer(serializers.ModelSerializer):
    """Read serializer for attachment metadata."""

    class Meta:
        model = Attachment
        fields = [
            "id",
            "file_name",
            "file_type",
            "file_size",
            "file_url",
            "thumbnail_url",
            "duration",
            "width",
            "height",
            "uploaded_at",
        ]
        read_only_fields = fields


class AttachmentCreateSerializer(serializers.Serializer):
    """
    Metadata for an already-uploaded file.

    Typically the output of POST /media/upload/.
    """

    file_url = serializers.URLField(max_length=500)
    file_name = serializers.CharField(max_length=255)
    file_type = serializers.CharField(max_length=100, help_text="MIME type")
    file_size = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    thumbnail_url = serializers.URLField(
        max_length=500, required=False, allow_null=True
    )
    duration = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    width = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    height = serializers.IntegerField(min_value=0, required=False, allow_null=True)


# =============================================================================
# Message Serializers
# =============================================================================


class MessageSerializer(serializers.ModelSerializer):
    """
    Full message serializer for message lists.

    Deleted messages are rendered as tombstones: position, sender and
    timestamps stay, content/media/attachments are null or empty.
    """

    sender = PublicUserSerializer(read_only=True, allow_null=True)
    reply_to_id = serializers.IntegerField(read_only=True, allow_null=True)
    attachments = AttachmentSerializer(many=True, read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "sequence",
            "sender",
            "message_type",
            "content",
            "media_url",
            "reply_to_id",
            "attachments",
            "state",
            "is_edited",
            "edited_at",
            "is_deleted",
            "deleted_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def to_representation(self, instance: Message) -> dict:
        data = super().to_representation(instance)
        if instance.is_deleted:
            data["content"] = None
            data["media_url"] = None
            data["attachments"] = []
        return data


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for posting messages.

    Either content or media_url must be present; the service enforces it.
    """

    message_type = serializers.ChoiceField(
        choices=MessageType.choices,
        default=MessageType.TEXT,
    )
    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        required=False,
        allow_null=True,
        allow_blank=True,
        trim_whitespace=False,
        help_text="Message text (max 10,000 characters)",
    )
    media_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    reply_to_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="Id of a message in the same conversation",
    )
    attachments = AttachmentCreateSerializer(
        many=True,
        required=False,
        max_length=ATTACHMENT_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE,
    )


class MessageEditSerializer(serializers.Serializer):
    """New content for an existing message."""

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        allow_null=True,
        allow_blank=True,
        trim_whitespace=False,
    )


class ReadCursorSerializer(serializers.Serializer):
    """Input for POST /conversations/{id}/read/."""

    message_id = serializers.IntegerField(min_value=1)


# =============================================================================
# Participant Serializers
# =============================================================================


class ParticipantSerializer(serializers.ModelSerializer):
    """
    Read serializer for conversation participants.

    Includes public user details, role and read watermark.
    """

    user = PublicUserSerializer(read_only=True)

    class Meta:
        model = Participant
        fields = [
            "id",
            "user",
            "role",
            "joined_at",
            "left_at",
            "is_active",
            "last_read_message_id",
            "notifications_enabled",
        ]
        read_only_fields = fields


class ParticipantCreateSerializer(serializers.Serializer):
    """
    Serializer for adding participants to group conversations.

    OWNER cannot be assigned through this endpoint.
    """

    user_id = serializers.IntegerField(min_value=1, help_text="User to add")
    role = serializers.ChoiceField(
        choices=[
            (ParticipantRole.ADMIN, "Admin"),
            (ParticipantRole.MEMBER, "Member"),
        ],
        default=ParticipantRole.MEMBER,
        help_text="Role for the new participant (admin or member)",
    )


# =============================================================================
# Typing Serializers
# =============================================================================


class TypingIndicatorSerializer(serializers.ModelSerializer):
    """Who is typing and since when."""

    user = PublicUserSerializer(read_only=True)

    class Meta:
        model = TypingIndicator
        fields = ["user", "started_at"]
        read_only_fields = fields


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationListSerializer(serializers.ModelSerializer):
    """
    Serializer for conversation list view.

    unread_count is computed for the requesting user.
    """

    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    unread_count = serializers.SerializerMethodField(
        help_text="Number of unread messages"
    )

    class Meta:
        model = Conversation
        fields = [
            "id",
            "conversation_type",
            "name",
            "description",
            "avatar_url",
            "created_by_id",
            "participant_count",
            "unread_count",
            "last_message_at",
            "last_message_sequence",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_unread_count(self, obj: Conversation) -> int:
        """Count messages after the user's read watermark."""
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return 0
        return MessageService.get_unread_count(request.user, obj)


class ConversationDetailSerializer(ConversationListSerializer):
    """
    Full conversation details including all active participants and the
    current user's role.
    """

    participants = serializers.SerializerMethodField(
        help_text="All active participants"
    )
    current_user_role = serializers.SerializerMethodField(
        help_text="Current user's role in this conversation"
    )

    class Meta(ConversationListSerializer.Meta):
        fields = ConversationListSerializer.Meta.fields + [
            "participants",
            "current_user_role",
        ]

    def get_participants(self, obj: Conversation) -> list[dict]:
        """Get all active participants."""
        participants = (
            obj.get_active_participants()
            .select_related("user__profile")
            .order_by("joined_at", "id")
        )
        return ParticipantSerializer(participants, many=True).data

    def get_current_user_role(self, obj: Conversation) -> str | None:
        """Get current user's role in conversation."""
        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return None

        participant = obj.get_active_participant_for_user(request.user)
        return participant.role if participant else None


class ConversationCreateSerializer(serializers.Serializer):
    """
    Serializer for creating conversations.

    - Direct: exactly one other user; returns the existing conversation if
      the pair already has one
    - Group: a name plus 2-50 other users
    """

    conversation_type = serializers.ChoiceField(
        choices=ConversationType.choices,
        help_text="Type of conversation to create",
    )
    participant_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        min_length=1,
        help_text="Ids of the other users",
    )
    name = serializers.CharField(
        max_length=CONVERSATION_CONFIG.NAME_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Group name (required for groups)",
    )
    description = serializers.CharField(
        max_length=CONVERSATION_CONFIG.DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    avatar_url = serializers.URLField(max_length=500, required=False, allow_null=True)


class ConversationUpdateSerializer(serializers.Serializer):
    """Partial update of a group's name, description and avatar."""

    name = serializers.CharField(
        max_length=CONVERSATION_CONFIG.NAME_MAX_LENGTH, required=False
    )
    description = serializers.CharField(
        max_length=CONVERSATION_CONFIG.DESCRIPTION_MAX_LENGTH,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    avatar_url = serializers.URLField(max_length=500, required=False, allow_null=True)
