"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct (1:1) conversations between exactly two users
- Group conversations with role-based permissions
- Messages with an explicit edit/delete state machine
- Attachment metadata and ephemeral typing indicators

Models:
    Conversation: Container for messages between participants
    DirectConversationPair: Helper for enforcing uniqueness of direct conversations
    Participant: User participation in a conversation with role and read cursor
    Message: Individual message within a conversation
    Attachment: Metadata for a stored file attached to a message
    TypingIndicator: Short-lived "user is typing" marker

Design Decisions:
    - Direct conversations are immutable once created (no adding/removing participants)
    - Group conversations use a three-tier role hierarchy: owner > admin > member
    - Participant records are never reused; leaving and rejoining creates a new record
    - Message order is a per-conversation sequence allocated under a row lock
    - Soft delete keeps the row as a tombstone; content is hidden at the API boundary
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone
from django_fsm import FSMField, transition

from chat.states import MessageState, MessageStatus, status_of
from core.models import BaseModel

if TYPE_CHECKING:
    from authentication.models import User


class ConversationType(models.TextChoices):
    """
    Type of conversation.

    DIRECT: Exactly two participants, immutable membership
    GROUP: Owner plus 2-50 members, mutable membership, role-based permissions
    """

    DIRECT = "direct", "Direct Message"
    GROUP = "group", "Group"


class ParticipantRole(models.TextChoices):
    """
    Role within a conversation.

    Hierarchy: OWNER > ADMIN > MEMBER

    OWNER: Full control (remove admins, edit the group)
    ADMIN: Can add participants, remove members, edit the group, delete any message
    MEMBER: Can send messages, delete own messages, leave

    The creator of any conversation is its OWNER; everyone else joins as MEMBER.
    """

    OWNER = "owner", "Owner"
    ADMIN = "admin", "Admin"
    MEMBER = "member", "Member"


class MessageType(models.TextChoices):
    """
    Declared type of message content.

    The type is supplied by the client and is not re-derived from the payload.
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    VIDEO = "video", "Video"
    AUDIO = "audio", "Audio"
    FILE = "file", "File"


class Conversation(BaseModel):
    """
    A conversation between two or more users.

    Conversation Types:
        DIRECT: Exactly 2 participants, immutable membership, no name.
                Unique per user pair (enforced via DirectConversationPair).

        GROUP: Owner plus members with role-based permissions.
               Creator automatically becomes owner. Name is required.

    Fields:
        conversation_type: Type of conversation (direct or group)
        name: Group name (empty string for direct conversations)
        description: Optional group description
        avatar_url: Optional group avatar
        created_by: User who created the conversation (never reassigned)
        participant_count: Cached count of active participants
        last_message_at: Timestamp of most recent message (for sorting)
        last_message_sequence: Sequence number of the most recent message

    Relationships:
        participants: All Participant records for this conversation
        messages: All Message records for this conversation
        direct_pair: DirectConversationPair if type is DIRECT
        typing_indicators: Current TypingIndicator rows
    """

    conversation_type = models.CharField(
        max_length=10,
        choices=ConversationType.choices,
        default=ConversationType.GROUP,
        db_index=True,
        help_text="Type of conversation (direct or group)",
    )

    name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Name for group conversations (empty for direct)",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Optional group description",
    )

    avatar_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Optional group avatar image URL",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_conversations",
        help_text="User who created this conversation",
    )

    participant_count = models.PositiveIntegerField(
        default=0,
        help_text="Current number of active participants (cached for performance)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting conversation lists)",
    )

    last_message_sequence = models.PositiveBigIntegerField(
        default=0,
        help_text="Sequence number assigned to the most recent message",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-last_message_at", "-created_at"]
        indexes = [
            models.Index(
                fields=["-last_message_at", "-created_at"],
                name="chat_conv_last_msg_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.conversation_type == ConversationType.DIRECT:
            return f"Direct({self.pk})"
        if self.name:
            return f"Group: {self.name}"
        return f"Group({self.pk})"

    @property
    def is_direct(self) -> bool:
        """Check if this is a direct (1:1) conversation."""
        return self.conversation_type == ConversationType.DIRECT

    @property
    def is_group(self) -> bool:
        """Check if this is a group conversation."""
        return self.conversation_type == ConversationType.GROUP

    def get_active_participants(self):
        """
        Get queryset of active participants.

        Returns:
            QuerySet of Participant objects where is_active is True
        """
        return self.participants.filter(is_active=True)

    def get_active_participant_for_user(self, user: User) -> Participant | None:
        """
        Get active participant record for a specific user.

        Args:
            user: User to find participant for

        Returns:
            Participant if user is active in conversation, None otherwise
        """
        return self.participants.filter(user=user, is_active=True).first()


class DirectConversationPair(models.Model):
    """
    Enforces uniqueness of direct conversations between two users.

    This helper table stores user pairs in canonical order (lower user_id first)
    to prevent duplicate direct conversations between the same two users.

    The uniqueness constraint ensures that regardless of who initiates the
    conversation, there can only be one direct conversation between any pair.

    Fields:
        conversation: The direct conversation (OneToOne, serves as PK)
        user_lower: User with lower ID
        user_higher: User with higher ID

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One conversation per pair
        - CheckConstraint(user_lower_id < user_higher_id): Enforce canonical order
    """

    conversation = models.OneToOneField(
        Conversation,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct conversation this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",  # No reverse accessor needed
        help_text="User with lower ID in this conversation pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",  # No reverse accessor needed
        help_text="User with higher ID in this conversation pair",
    )

    class Meta:
        db_table = "chat_direct_conversation_pair"
        constraints = [
            # Ensure only one direct conversation exists per user pair
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_conversation_pair",
            ),
            # Enforce canonical ordering: lower ID first
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="user_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def canonical(first: User, second: User) -> tuple[User, User]:
        """Order two users lower id first."""
        return (first, second) if first.id < second.id else (second, first)


class Participant(BaseModel):
    """
    Tracks user participation in conversations.

    Design Decision:
        Each join creates a NEW Participant record to preserve full membership
        history. When a user leaves and later rejoins, they get a new record.
        Previous memberships are preserved with is_active=False and left_at set.

    Membership Lifecycle:
        1. User joins: Participant created with is_active=True
        2. User leaves voluntarily: is_active=False, left_at set, left_voluntarily=True
        3. User removed: is_active=False, left_at set, removed_by set
        4. User rejoins: NEW Participant record created

    Fields:
        conversation: Conversation this participation belongs to
        user: User participating in the conversation
        role: owner, admin or member
        joined_at: When the user joined
        left_at: When the user left (NULL if still active)
        is_active: Whether this membership is current
        left_voluntarily: True if user left, False if removed
        removed_by: User who removed this participant (if applicable)
        last_read_message_id: Read watermark (id of the last message read, 0 if none)
        notifications_enabled: Whether the user wants notifications for this conversation

    Constraints:
        - UniqueConstraint(conversation, user) WHERE is_active:
          Only one active participation per user per conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="Conversation this participation belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversation_participations",
        help_text="User participating in the conversation",
    )

    role = models.CharField(
        max_length=10,
        choices=ParticipantRole.choices,
        default=ParticipantRole.MEMBER,
        db_index=True,
        help_text="Role in the conversation",
    )

    joined_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user joined this conversation",
    )

    left_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the user left (null if still active)",
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this participation is current",
    )

    left_voluntarily = models.BooleanField(
        null=True,
        blank=True,
        help_text="True if user left voluntarily, False if removed by someone",
    )

    removed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="removed_participants",
        help_text="User who removed this participant (if removed by someone)",
    )

    last_read_message_id = models.PositiveBigIntegerField(
        default=0,
        help_text="Id of the last message this participant has read (0 if none)",
    )

    notifications_enabled = models.BooleanField(
        default=True,
        help_text="Whether the user receives notifications for this conversation",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["joined_at", "id"]
        indexes = [
            # Active participants in a conversation
            models.Index(
                fields=["conversation", "is_active"],
                name="chat_part_conv_active_idx",
            ),
            # User's active conversations
            models.Index(
                fields=["user", "is_active", "-joined_at"],
                name="chat_part_user_active_idx",
            ),
            # Role-based lookups (for ownership transfer)
            models.Index(
                fields=["conversation", "role", "joined_at"],
                name="chat_part_conv_role_idx",
                condition=Q(is_active=True),
            ),
        ]
        constraints = [
            # Only one active participation per user per conversation
            models.UniqueConstraint(
                fields=["conversation", "user"],
                condition=Q(is_active=True),
                name="unique_active_participation",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        status = "active" if self.is_active else "left"
        return (
            f"Participant: {self.user_id} in {self.conversation_id} "
            f"({self.role}) [{status}]"
        )

    @property
    def is_owner(self) -> bool:
        """Check if participant has OWNER role."""
        return self.role == ParticipantRole.OWNER

    @property
    def is_admin(self) -> bool:
        """Check if participant has ADMIN role."""
        return self.role == ParticipantRole.ADMIN

    @property
    def is_member(self) -> bool:
        """Check if participant has MEMBER role."""
        return self.role == ParticipantRole.MEMBER

    @property
    def is_admin_or_owner(self) -> bool:
        """Check if participant has ADMIN or OWNER role."""
        return self.role in (ParticipantRole.OWNER, ParticipantRole.ADMIN)


class Message(BaseModel):
    """
    A message within a conversation.

    State Machine (django-fsm):
        ACTIVE → EDITED → EDITED ... (edit)
        ACTIVE/EDITED → DELETED (soft_delete)

        is_edited/edited_at and is_deleted/deleted_at mirror the state so
        they can be filtered on directly. ``status`` exposes the same
        information as an Active / Edited(at) / Deleted(at) variant.

    Ordering:
        ``sequence`` is allocated from Conversation.last_message_sequence
        while the conversation row is locked, and is unique per
        conversation. Creation time is informational only.

    Soft Delete Behavior:
        When deleted the row is kept so replies and ordering stay intact.
        Content, media_url and attachments are stripped by the serializers.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message
        message_type: Declared content type (text, image, video, audio, file)
        content: Message text (nullable when media_url is present)
        media_url: Primary media URL (nullable when content is present)
        reply_to: Message in the same conversation this one replies to
        sequence: Position within the conversation (1-based)
        state: Lifecycle state (active, edited, deleted)
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        db_index=True,
        help_text="Declared type of the message content",
    )

    content = models.TextField(
        null=True,
        blank=True,
        help_text="Message text (optional when media_url is set)",
    )

    media_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Primary media URL (optional when content is set)",
    )

    reply_to = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
        help_text="Message this one replies to (same conversation)",
    )

    sequence = models.PositiveBigIntegerField(
        help_text="Position of the message within its conversation",
    )

    state = FSMField(
        default=MessageState.ACTIVE,
        choices=MessageState.choices,
        db_index=True,
        protected=False,
        help_text="Lifecycle state of the message (managed by FSM)",
    )

    is_edited = models.BooleanField(
        default=False,
        help_text="Whether the content was edited at least once",
    )

    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the content was last edited",
    )

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the message was deleted (tombstone)",
    )

    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the message was deleted",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["sequence"]
        indexes = [
            # User's messages
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
            # Replies to a message
            models.Index(
                fields=["reply_to"],
                name="chat_msg_reply_idx",
                condition=Q(reply_to__isnull=False),
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "sequence"],
                name="unique_message_sequence",
            ),
            models.CheckConstraint(
                condition=Q(content__isnull=False) | Q(media_url__isnull=False),
                name="message_has_content_or_media",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        preview = self.content or self.media_url or ""
        if len(preview) > 50:
            preview = preview[:50] + "..."
        deleted_str = " [deleted]" if self.is_deleted else ""
        return f"#{self.sequence} User {self.sender_id}: {preview}{deleted_str}"

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=state,
        source=[MessageState.ACTIVE, MessageState.EDITED],
        target=MessageState.EDITED,
    )
    def edit(self, content: str | None):
        """
        Replace the content.

        Transition: ACTIVE/EDITED -> EDITED
        """
        self.content = content
        self.is_edited = True
        self.edited_at = timezone.now()

    @transition(
        field=state,
        source=[MessageState.ACTIVE, MessageState.EDITED],
        target=MessageState.DELETED,
    )
    def soft_delete(self):
        """
        Turn the message into a tombstone.

        Transition: ACTIVE/EDITED -> DELETED
        """
        self.is_deleted = True
        self.deleted_at = timezone.now()

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def status(self) -> MessageStatus:
        """Lifecycle state as an Active / Edited(at) / Deleted(at) variant."""
        return status_of(self)

    @property
    def is_reply(self) -> bool:
        """Check if this message is a reply to another message."""
        return self.reply_to_id is not None


class Attachment(BaseModel):
    """
    Metadata for a stored file attached to a message.

    Rows are created from already-uploaded objects (see
    media.services.MediaUploadService) and are never modified afterwards.
    They disappear only with their message.

    Numeric metadata is optional because it is not known for every file
    type (e.g. duration for documents).
    """

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="attachments",
        help_text="Message this file is attached to",
    )

    file_name = models.CharField(
        max_length=255,
        help_text="Original file name",
    )

    file_type = models.CharField(
        max_length=100,
        help_text="MIME type of the file",
    )

    file_size = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="File size in bytes",
    )

    file_url = models.URLField(
        max_length=500,
        help_text="URL of the stored file",
    )

    thumbnail_url = models.URLField(
        max_length=500,
        null=True,
        blank=True,
        help_text="Optional preview image URL",
    )

    duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Duration in seconds (audio/video)",
    )

    width = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Width in pixels (image/video)",
    )

    height = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Height in pixels (image/video)",
    )

    uploaded_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the file was uploaded",
    )

    class Meta:
        db_table = "chat_attachment"
        ordering = ["uploaded_at", "id"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Attachment({self.file_name}) on message {self.message_id}"


class TypingIndicator(BaseModel):
    """
    Marker that a user is currently typing in a conversation.

    One row per (user, conversation). Rows older than
    CHAT_TYPING_INDICATOR_TTL_SECONDS are ignored by readers and removed by
    the chat.tasks.expire_typing_indicators sweep.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="typing_indicators",
        help_text="User who is typing",
    )

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="typing_indicators",
        help_text="Conversation the user is typing in",
    )

    started_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Last time the user reported typing",
    )

    class Meta:
        db_table = "chat_typing_indicator"
        ordering = ["started_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "conversation"],
                name="unique_typing_indicator",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Typing: {self.user_id} in {self.conversation_id}"
