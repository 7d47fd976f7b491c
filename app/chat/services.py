"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on conversations, participants, messages, attachments and
typing indicators.

Services:
    ConversationService: Conversation lifecycle (create, update, list)
    ParticipantService: Participant management (add, remove/leave, ownership)
    MessageService: Message operations (post, edit, delete, mark as read)
    AttachmentService: Attachment metadata records
    TypingService: Typing indicators and their expiry

Design Principles:
    - Services are stateless (use class methods)
    - The acting user is always passed in explicitly
    - Failures raise core.exceptions errors; the API exception handler
      renders them
    - Invariants that depend on counts or ordering are checked while the
      conversation row is locked (select_for_update) and are backed by
      database constraints

Usage:
    from chat.services import ConversationService, MessageService

    conversation = ConversationService.create_conversation(
        creator=alice,
        conversation_type=ConversationType.DIRECT,
        participant_ids=[bob.id],
    )

    message = MessageService.post_message(
        sender=alice,
        conversation_id=conversation.id,
        message_type=MessageType.TEXT,
        content="hi",
    )
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Iterable

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import F
from django.utils import timezone
from django.utils.module_loading import import_string
from django_fsm import TransitionNotAllowed

from authentication.services import UserSettingsService
from chat.constants import ATTACHMENT_CONFIG, CONVERSATION_CONFIG, MESSAGE_CONFIG
from chat.models import (
    Attachment,
    Conversation,
    ConversationType,
    DirectConversationPair,
    Message,
    MessageType,
    Participant,
    ParticipantRole,
    TypingIndicator,
)
from core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from core.services import BaseService

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


def get_conversation_policy():
    """Instantiate the policy named by CHAT_CONVERSATION_POLICY."""
    return import_string(settings.CHAT_CONVERSATION_POLICY)()


def _require_conversation(conversation_id: int) -> Conversation:
    conversation = Conversation.objects.filter(pk=conversation_id).first()
    if conversation is None:
        raise NotFoundError(
            f"Conversation {conversation_id} not found",
            error_code="CONVERSATION_NOT_FOUND",
        )
    return conversation


def _require_participant(conversation: Conversation, user: User) -> Participant:
    participant = conversation.get_active_participant_for_user(user)
    if participant is None:
        raise AuthorizationError(
            "You are not a participant in this conversation",
            error_code="NOT_PARTICIPANT",
        )
    return participant


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _message_text(value: str | None) -> str | None:
    # Whitespace-only counts as empty; anything else is stored as sent
    if value is None or not value.strip():
        return None
    return value


class ConversationService(BaseService):
    """
    Service for conversation lifecycle operations.

    Methods:
        create_conversation: Create a direct or group conversation
        update_conversation: Change group name, description or avatar
        get_conversation: Fetch a conversation the user participates in
        list_for_user: List the user's active conversations
    """

    @classmethod
    def create_conversation(
        cls,
        creator: User,
        conversation_type: str,
        participant_ids: Iterable[int],
        name: str | None = None,
        description: str | None = None,
        avatar_url: str | None = None,
    ) -> Conversation:
        """
        Create a conversation and its participant rows.

        The creator joins as OWNER, everyone else as MEMBER. Duplicate ids
        and the creator's own id are dropped from ``participant_ids``.

        Direct conversations are unique per user pair: asking again for the
        same pair (in either order) returns the existing conversation.

        Args:
            creator: User creating the conversation
            conversation_type: "direct" or "group"
            participant_ids: Ids of the other users
            name: Group name (required for groups, ignored for direct)
            description: Optional group description
            avatar_url: Optional group avatar URL

        Returns:
            The new (or, for direct, existing) Conversation

        Raises:
            ValidationError: Bad type, missing group name, wrong number of
                participants
            NotFoundError: A participant id is not an active user
            ConflictError: The conversation policy refused a direct
                conversation (e.g. one side blocked the other)
        """
        if conversation_type not in ConversationType.values:
            raise ValidationError(
                f"Unknown conversation type '{conversation_type}'",
                error_code="INVALID_CONVERSATION_TYPE",
                details={"allowed": ConversationType.values},
            )

        other_ids = list(
            dict.fromkeys(pid for pid in participant_ids if pid != creator.id)
        )

        if conversation_type == ConversationType.DIRECT:
            if len(other_ids) != 1:
                raise ValidationError(
                    "Direct conversations require exactly one other participant",
                    error_code="INVALID_PARTICIPANTS",
                    details={"participant_ids": other_ids},
                )
        else:
            name = _clean_text(name)
            if not name:
                raise ValidationError(
                    "Group conversations require a name",
                    error_code="NAME_REQUIRED",
                )
            minimum = CONVERSATION_CONFIG.GROUP_MIN_INITIAL_MEMBERS
            maximum = settings.CHAT_GROUP_MAX_PARTICIPANTS
            if not minimum <= len(other_ids) <= maximum:
                raise ValidationError(
                    f"Group conversations need between {minimum} and {maximum} "
                    f"participants besides the creator",
                    error_code="INVALID_PARTICIPANTS",
                    details={"count": len(other_ids), "min": minimum, "max": maximum},
                )

        users = cls._resolve_users(other_ids)

        if conversation_type == ConversationType.DIRECT:
            other = users[0]
            get_conversation_policy().check_direct(creator, other)
            return cls._get_or_create_direct(creator, other)

        with cls.atomic():
            conversation = Conversation.objects.create(
                conversation_type=ConversationType.GROUP,
                name=name,
                description=description or "",
                avatar_url=avatar_url or None,
                created_by=creator,
                participant_count=1 + len(users),
            )
            now = timezone.now()
            Participant.objects.bulk_create(
                [
                    Participant(
                        conversation=conversation,
                        user=creator,
                        role=ParticipantRole.OWNER,
                        joined_at=now,
                    )
                ]
                + [
                    Participant(
                        conversation=conversation,
                        user=user,
                        role=ParticipantRole.MEMBER,
                        joined_at=now,
                    )
                    for user in users
                ]
            )

        cls.get_logger().info(
            f"Created group conversation {conversation.id} "
            f"named '{name}' with {1 + len(users)} participants"
        )
        return conversation

    @classmethod
    def _resolve_users(cls, user_ids: list[int]) -> list[User]:
        User = get_user_model()
        found = User.objects.filter(id__in=user_ids, is_active=True).in_bulk()
        missing = [uid for uid in user_ids if uid not in found]
        if missing:
            raise NotFoundError(
                "Some participants do not exist",
                error_code="USER_NOT_FOUND",
                details={"user_ids": missing},
            )
        return [found[uid] for uid in user_ids]

    @classmethod
    def _get_or_create_direct(cls, creator: User, other: User) -> Conversation:
        """
        Return the direct conversation for a pair, creating it if needed.

        A concurrent request creating the same pair loses on the
        DirectConversationPair unique constraint and falls back to the row
        the winner inserted.
        """
        user_lower, user_higher = DirectConversationPair.canonical(creator, other)

        existing = (
            DirectConversationPair.objects.select_related("conversation")
            .filter(user_lower=user_lower, user_higher=user_higher)
            .first()
        )
        if existing:
            cls.get_logger().debug(
                f"Found existing direct conversation {existing.conversation_id} "
                f"between users {user_lower.id} and {user_higher.id}"
            )
            return existing.conversation

        try:
            with cls.atomic():
                conversation = Conversation.objects.create(
                    conversation_type=ConversationType.DIRECT,
                    created_by=creator,
                    participant_count=2,
                )
                DirectConversationPair.objects.create(
                    conversation=conversation,
                    user_lower=user_lower,
                    user_higher=user_higher,
                )
                now = timezone.now()
                Participant.objects.bulk_create(
                    [
                        Participant(
                            conversation=conversation,
                            user=creator,
                            role=ParticipantRole.OWNER,
                            joined_at=now,
                        ),
                        Participant(
                            conversation=conversation,
                            user=other,
                            role=ParticipantRole.MEMBER,
                            joined_at=now,
                        ),
                    ]
                )
        except IntegrityError:
            pair = DirectConversationPair.objects.select_related("conversation").get(
                user_lower=user_lower, user_higher=user_higher
            )
            cls.get_logger().info(
                f"Concurrent creation of direct conversation between users "
                f"{user_lower.id} and {user_higher.id}; using {pair.conversation_id}"
            )
            return pair.conversation

        cls.get_logger().info(
            f"Created direct conversation {conversation.id} "
            f"between users {user_lower.id} and {user_higher.id}"
        )
        return conversation

    @classmethod
    def update_conversation(
        cls,
        actor: User,
        conversation: Conversation,
        **data,
    ) -> Conversation:
        """
        Update name, description or avatar_url of a group.

        Raises:
            ValidationError: Direct conversation, or blank name
            AuthorizationError: Actor is not an active owner/admin
        """
        if conversation.is_direct:
            raise ValidationError(
                "Direct conversations cannot be edited",
                error_code="NOT_GROUP",
            )

        participant = _require_participant(conversation, actor)
        if not participant.is_admin_or_owner:
            raise AuthorizationError(
                "Only admins and owners can edit the group",
                error_code="PERMISSION_DENIED",
            )

        changes = {}
        if "name" in data and data["name"] is not None:
            name = _clean_text(data["name"])
            if not name:
                raise ValidationError(
                    "Group name cannot be empty",
                    error_code="NAME_REQUIRED",
                )
            changes["name"] = name
        if "description" in data:
            changes["description"] = data["description"] or ""
        if "avatar_url" in data:
            changes["avatar_url"] = data["avatar_url"] or None

        if changes:
            for field, value in changes.items():
                setattr(conversation, field, value)
            conversation.save(update_fields=[*changes, "updated_at"])
            cls.get_logger().info(
                f"User {actor.id} updated conversation {conversation.id}: "
                f"{', '.join(sorted(changes))}"
            )
        return conversation

    @classmethod
    def get_conversation(cls, user: User, conversation_id: int) -> Conversation:
        """
        Fetch a conversation for an active participant.

        Raises:
            NotFoundError: No such conversation
            AuthorizationError: User is not an active participant
        """
        conversation = _require_conversation(conversation_id)
        _require_participant(conversation, user)
        return conversation

    @classmethod
    def list_for_user(cls, user: User) -> QuerySet[Conversation]:
        """Conversations the user is an active participant of, most recent first."""
        return (
            Conversation.objects.filter(
                participants__user=user,
                participants__is_active=True,
            )
            .select_related("created_by")
            .distinct()
            .order_by(F("last_message_at").desc(nulls_last=True), "-created_at", "-id")
        )


class ParticipantService(BaseService):
    """
    Service for participant management operations.

    Methods:
        add_participant: Add a user to a group
        remove_participant: Remove a user, or leave when removing yourself
        list_participants: Active participants of a conversation
    """

    @classmethod
    def add_participant(
        cls,
        actor: User,
        conversation: Conversation,
        user_id: int,
        role: str = ParticipantRole.MEMBER,
    ) -> Participant:
        """
        Add a user to a group conversation.

        Permission rules:
        - Owner: can add members and admins
        - Admin: can only add members
        - Member: cannot add anyone

        The active-count check runs with the conversation row locked and the
        partial unique constraint on active participations backs the
        duplicate check.

        Raises:
            ValidationError: Invalid role or an attempt to add an owner
            NotFoundError: User does not exist
            AuthorizationError: Actor cannot add participants
            ConflictError: Direct conversation, user already active, or the
                group is full
        """
        if role not in ParticipantRole.values:
            raise ValidationError(
                f"Unknown role '{role}'",
                error_code="INVALID_ROLE",
                details={"allowed": ParticipantRole.values},
            )
        if role == ParticipantRole.OWNER:
            raise ValidationError(
                "Participants cannot be added as owner",
                error_code="CANNOT_ADD_OWNER",
            )

        User = get_user_model()
        user = User.objects.filter(id=user_id, is_active=True).first()
        if user is None:
            raise NotFoundError(
                f"User {user_id} not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": user_id},
            )

        if conversation.is_direct:
            raise ConflictError(
                "Cannot add participants to direct conversations",
                error_code="CONVERSATION_IS_DIRECT",
            )

        with cls.atomic():
            conversation = Conversation.objects.select_for_update().get(
                pk=conversation.pk
            )

            actor_participant = _require_participant(conversation, actor)
            if not actor_participant.is_admin_or_owner:
                raise AuthorizationError(
                    "Members cannot add participants",
                    error_code="PERMISSION_DENIED",
                )
            if role == ParticipantRole.ADMIN and not actor_participant.is_owner:
                raise AuthorizationError(
                    "Only owners can add admins",
                    error_code="PERMISSION_DENIED",
                )

            if conversation.get_active_participant_for_user(user):
                raise ConflictError(
                    "User is already a participant in this conversation",
                    error_code="ALREADY_PARTICIPANT",
                    details={"user_id": user.id},
                )

            limit = settings.CHAT_GROUP_MAX_PARTICIPANTS + 1
            if conversation.get_active_participants().count() >= limit:
                raise ConflictError(
                    f"Group already has the maximum of {limit} participants",
                    error_code="GROUP_FULL",
                    details={"limit": limit},
                )

            try:
                with cls.atomic():
                    participant = Participant.objects.create(
                        conversation=conversation,
                        user=user,
                        role=role,
                    )
            except IntegrityError as e:
                raise ConflictError(
                    "User is already a participant in this conversation",
                    error_code="ALREADY_PARTICIPANT",
                    details={"user_id": user.id},
                ) from e

            Conversation.objects.filter(pk=conversation.pk).update(
                participant_count=F("participant_count") + 1,
                updated_at=timezone.now(),
            )

        cls.get_logger().info(
            f"Added user {user.id} to conversation {conversation.id} "
            f"as {role} by user {actor.id}"
        )
        return participant

    @classmethod
    def remove_participant(
        cls,
        actor: User,
        conversation: Conversation,
        user_id: int,
    ) -> Participant:
        """
        End a user's membership.

        Removing yourself is leaving. Removing someone else requires
        owner/admin; admins cannot remove owners or other admins. If the
        owner leaves, ownership passes to the longest-standing admin, then to
        the longest-standing member.

        Returns:
            The now inactive Participant

        Raises:
            NotFoundError: User has no active membership
            AuthorizationError: Actor may not remove this participant
            ConflictError: Direct conversation, or the group would drop below
                CHAT_GROUP_MIN_PARTICIPANTS
        """
        with cls.atomic():
            conversation = Conversation.objects.select_for_update().get(
                pk=conversation.pk
            )

            target = (
                conversation.participants.filter(user_id=user_id, is_active=True)
                .select_related("user")
                .first()
            )
            if target is None:
                raise NotFoundError(
                    "User is not an active participant in this conversation",
                    error_code="PARTICIPANT_NOT_FOUND",
                    details={"user_id": user_id},
                )

            leaving = target.user_id == actor.id
            if not leaving:
                actor_participant = _require_participant(conversation, actor)
                if not actor_participant.is_admin_or_owner:
                    raise AuthorizationError(
                        "Members cannot remove other participants",
                        error_code="PERMISSION_DENIED",
                    )
                if actor_participant.is_admin and target.is_admin_or_owner:
                    raise AuthorizationError(
                        "Admins can only remove members",
                        error_code="PERMISSION_DENIED",
                    )

            if conversation.is_direct:
                raise ConflictError(
                    "Direct conversations must keep both participants",
                    error_code="CONVERSATION_IS_DIRECT",
                )

            floor = settings.CHAT_GROUP_MIN_PARTICIPANTS
            active_count = conversation.get_active_participants().count()
            if active_count - 1 < floor:
                raise ConflictError(
                    f"Groups must keep at least {floor} participants",
                    error_code="GROUP_MINIMUM",
                    details={"minimum": floor},
                )

            if target.is_owner:
                cls._transfer_ownership_on_departure(conversation, target)

            target.is_active = False
            target.left_at = timezone.now()
            target.left_voluntarily = leaving
            target.removed_by = None if leaving else actor
            target.save(
                update_fields=[
                    "is_active",
                    "left_at",
                    "left_voluntarily",
                    "removed_by",
                    "updated_at",
                ]
            )

            Conversation.objects.filter(pk=conversation.pk).update(
                participant_count=F("participant_count") - 1,
                updated_at=timezone.now(),
            )
            TypingIndicator.objects.filter(
                conversation=conversation, user_id=user_id
            ).delete()

        if leaving:
            cls.get_logger().info(
                f"User {user_id} left conversation {conversation.id}"
            )
        else:
            cls.get_logger().info(
                f"Removed user {user_id} from conversation {conversation.id} "
                f"by user {actor.id}"
            )
        return target

    @classmethod
    def _transfer_ownership_on_departure(
        cls,
        conversation: Conversation,
        departing_owner: Participant,
    ) -> Participant | None:
        """
        Internal: Hand ownership to the next participant when the owner leaves.

        Transfer priority:
        1. Oldest admin (by joined_at)
        2. Oldest member (by joined_at)

        This method is called within an existing transaction.
        """
        candidates = (
            conversation.get_active_participants()
            .exclude(pk=departing_owner.pk)
            .order_by("joined_at", "id")
        )

        successor = (
            candidates.filter(role=ParticipantRole.ADMIN).first()
            or candidates.filter(role=ParticipantRole.MEMBER).first()
        )
        if successor is None:
            return None

        successor.role = ParticipantRole.OWNER
        successor.save(update_fields=["role", "updated_at"])

        cls.get_logger().info(
            f"Transferred ownership of conversation {conversation.id} "
            f"from user {departing_owner.user_id} to user {successor.user_id}"
        )
        return successor

    @classmethod
    def list_participants(
        cls, user: User, conversation: Conversation
    ) -> QuerySet[Participant]:
        """Active participants, oldest first. Requires the caller to be one."""
        _require_participant(conversation, user)
        return (
            conversation.get_active_participants()
            .select_related("user__profile")
            .order_by("joined_at", "id")
        )


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        post_message: Append a message to a conversation
        edit_message: Change a message's content
        delete_message: Turn a message into a tombstone
        mark_read: Advance a participant's read watermark
        get_unread_count: Messages after the watermark not sent by the user
        list_messages / get_message: Reads for active participants
    """

    @classmethod
    def post_message(
        cls,
        sender: User,
        conversation_id: int,
        message_type: str = MessageType.TEXT,
        content: str | None = None,
        media_url: str | None = None,
        reply_to_id: int | None = None,
        attachments: Iterable[dict] = (),
    ) -> Message:
        """
        Post a message to a conversation.

        The sequence number is allocated while the conversation row is
        locked; the (conversation, sequence) unique constraint backs it.
        Posting also clears the sender's typing indicator.

        Args:
            sender: User posting the message
            conversation_id: Target conversation
            message_type: Declared type (text, image, video, audio, file)
            content: Message text
            media_url: Primary media URL
            reply_to_id: Message in the same conversation being replied to
            attachments: Metadata dicts for already-uploaded files (see
                AttachmentService.create_attachment for the keys)

        Returns:
            The created Message

        Raises:
            NotFoundError: Conversation or reply target not found
            AuthorizationError: Sender is not an active participant
            ValidationError: No content and no media, unknown type, content
                too long or too many attachments
        """
        conversation = _require_conversation(conversation_id)
        _require_participant(conversation, sender)

        if message_type not in MessageType.values:
            raise ValidationError(
                f"Unknown message type '{message_type}'",
                error_code="INVALID_MESSAGE_TYPE",
                details={"allowed": MessageType.values},
            )

        content = _message_text(content)
        media_url = media_url or None
        if content is None and media_url is None:
            raise ValidationError(
                "A message needs content or media",
                error_code="EMPTY_MESSAGE",
            )
        cls._check_content_length(content)

        attachments = list(attachments)
        if len(attachments) > ATTACHMENT_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE:
            raise ValidationError(
                f"A message can carry at most "
                f"{ATTACHMENT_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE} attachments",
                error_code="TOO_MANY_ATTACHMENTS",
            )

        reply_to = None
        if reply_to_id is not None:
            reply_to = Message.objects.filter(
                pk=reply_to_id, conversation=conversation
            ).first()
            if reply_to is None:
                raise NotFoundError(
                    "Reply target not found in this conversation",
                    error_code="REPLY_TARGET_NOT_FOUND",
                    details={"reply_to_id": reply_to_id},
                )

        with cls.atomic():
            conversation = Conversation.objects.select_for_update().get(
                pk=conversation.pk
            )
            # Membership may have changed since the unlocked check above
            _require_participant(conversation, sender)

            sequence = conversation.last_message_sequence + 1
            message = Message.objects.create(
                conversation=conversation,
                sender=sender,
                message_type=message_type,
                content=content,
                media_url=media_url,
                reply_to=reply_to,
                sequence=sequence,
            )

            Conversation.objects.filter(pk=conversation.pk).update(
                last_message_sequence=sequence,
                last_message_at=message.created_at,
                updated_at=timezone.now(),
            )

            if attachments:
                Attachment.objects.bulk_create(
                    [
                        AttachmentService.build(message, **metadata)
                        for metadata in attachments
                    ]
                )

            TypingIndicator.objects.filter(
                conversation=conversation, user=sender
            ).delete()

        cls.get_logger().debug(
            f"User {sender.id} posted message {message.id} (#{sequence}) "
            f"to conversation {conversation.id}"
        )
        return message

    @classmethod
    def edit_message(cls, actor: User, message_id: int, new_content: str | None) -> Message:
        """
        Replace a message's content.

        Returns:
            The updated Message (state EDITED, is_edited True)

        Raises:
            NotFoundError: Message does not exist
            AuthorizationError: Actor is not the sender
            StateError: Message is deleted
            ValidationError: Empty content on a message without media, or
                content too long
        """
        message = cls._require_message(message_id)
        if message.sender_id != actor.id:
            raise AuthorizationError(
                "You can only edit your own messages",
                error_code="NOT_SENDER",
            )

        with cls.atomic():
            message = Message.objects.select_for_update().get(pk=message.pk)
            if message.is_deleted:
                raise StateError(
                    "Deleted messages cannot be edited",
                    error_code="MESSAGE_DELETED",
                    details={"state": message.state},
                )

            content = _message_text(new_content)
            if content is None and message.media_url is None:
                raise ValidationError(
                    "A message needs content or media",
                    error_code="EMPTY_MESSAGE",
                )
            cls._check_content_length(content)

            try:
                message.edit(content)
            except TransitionNotAllowed as e:
                raise StateError(
                    f"Cannot edit a message in state '{message.state}'",
                    error_code="INVALID_STATE_TRANSITION",
                    details={"state": message.state, "transition": "edit"},
                ) from e
            message.save(
                update_fields=["content", "state", "is_edited", "edited_at", "updated_at"]
            )

        cls.get_logger().info(f"User {actor.id} edited message {message.id}")
        return message

    @classmethod
    def delete_message(cls, actor: User, message_id: int) -> Message:
        """
        Soft delete a message.

        Senders can delete their own messages; active owners and admins can
        delete any message in their conversation. Deleting an already
        deleted message returns it unchanged.

        Raises:
            NotFoundError: Message does not exist
            AuthorizationError: Actor is neither sender nor owner/admin
        """
        message = cls._require_message(message_id)

        if message.sender_id != actor.id:
            moderator = (
                message.conversation.get_active_participant_for_user(actor)
            )
            if moderator is None or not moderator.is_admin_or_owner:
                raise AuthorizationError(
                    "You can only delete your own messages",
                    error_code="PERMISSION_DENIED",
                )

        with cls.atomic():
            message = Message.objects.select_for_update().get(pk=message.pk)
            if message.is_deleted:
                return message

            message.soft_delete()
            message.save(update_fields=["state", "is_deleted", "deleted_at", "updated_at"])

        cls.get_logger().info(
            f"User {actor.id} deleted message {message.id} "
            f"in conversation {message.conversation_id}"
        )
        return message

    @classmethod
    def mark_read(cls, user: User, conversation_id: int, message_id: int) -> Participant:
        """
        Advance the user's read watermark to ``message_id``.

        The update is conditional (``last_read_message_id < message_id``) so
        concurrent calls from several sessions can only move it forward.
        Marking the current watermark again is a no-op.

        Returns:
            The refreshed Participant

        Raises:
            NotFoundError: Conversation does not exist
            AuthorizationError: User is not an active participant
            ValidationError: Message is not in the conversation, or is
                before the current watermark
        """
        conversation = _require_conversation(conversation_id)
        participant = _require_participant(conversation, user)

        if not Message.objects.filter(pk=message_id, conversation=conversation).exists():
            raise ValidationError(
                "Message does not belong to this conversation",
                error_code="MESSAGE_NOT_IN_CONVERSATION",
                details={"message_id": message_id},
            )

        if message_id < participant.last_read_message_id:
            raise ValidationError(
                "Read position cannot move backwards",
                error_code="READ_CURSOR_REGRESSION",
                details={
                    "message_id": message_id,
                    "last_read_message_id": participant.last_read_message_id,
                },
            )

        updated = Participant.objects.filter(
            pk=participant.pk,
            last_read_message_id__lt=message_id,
        ).update(last_read_message_id=message_id, updated_at=timezone.now())

        participant.refresh_from_db()
        if updated:
            cls.get_logger().debug(
                f"User {user.id} read conversation {conversation.id} "
                f"up to message {message_id}"
            )
        return participant

    @classmethod
    def get_unread_count(cls, user: User, conversation: Conversation) -> int:
        """
        Count messages after the user's watermark that others sent.

        Returns 0 if the user is not an active participant.
        """
        participant = conversation.get_active_participant_for_user(user)
        if participant is None:
            return 0

        return (
            conversation.messages.filter(id__gt=participant.last_read_message_id)
            .exclude(sender=user)
            .count()
        )

    @classmethod
    def list_messages(cls, user: User, conversation_id: int) -> QuerySet[Message]:
        """All messages of a conversation (tombstones included) in sequence order."""
        conversation = _require_conversation(conversation_id)
        _require_participant(conversation, user)
        return (
            Message.objects.filter(conversation=conversation)
            .select_related("sender__profile")
            .prefetch_related("attachments")
            .order_by("sequence")
        )

    @classmethod
    def get_message(cls, user: User, conversation_id: int, message_id: int) -> Message:
        """
        Fetch one message for an active participant.

        Raises:
            NotFoundError: Conversation or message not found
            AuthorizationError: User is not an active participant
        """
        message = cls.list_messages(user, conversation_id).filter(pk=message_id).first()
        if message is None:
            raise NotFoundError(
                f"Message {message_id} not found",
                error_code="MESSAGE_NOT_FOUND",
            )
        return message

    @classmethod
    def _require_message(cls, message_id: int) -> Message:
        message = Message.objects.select_related("conversation").filter(pk=message_id).first()
        if message is None:
            raise NotFoundError(
                f"Message {message_id} not found",
                error_code="MESSAGE_NOT_FOUND",
            )
        return message

    @classmethod
    def _check_content_length(cls, content: str | None) -> None:
        if content and len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Message content cannot exceed "
                f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )


class AttachmentService(BaseService):
    """
    Attachment metadata records.

    No binary I/O happens here; files are stored beforehand through
    media.services.MediaUploadService and referenced by URL.
    """

    FIELDS = (
        "file_url",
        "file_name",
        "file_type",
        "file_size",
        "thumbnail_url",
        "duration",
        "width",
        "height",
    )

    @classmethod
    def build(cls, message: Message, **metadata) -> Attachment:
        """Validate metadata and return an unsaved Attachment."""
        unknown = sorted(set(metadata) - set(cls.FIELDS))
        if unknown:
            raise ValidationError(
                "Unknown attachment fields",
                details={name: ["Unknown field."] for name in unknown},
            )
        cls.validate_required(
            file_url=metadata.get("file_url"),
            file_name=metadata.get("file_name"),
            file_type=metadata.get("file_type"),
        )
        return Attachment(message=message, **metadata)

    @classmethod
    def create_attachment(cls, actor: User, message: Message, **metadata) -> Attachment:
        """
        Attach an already-uploaded file to a message.

        Args:
            actor: Must be the message sender
            message: Message to attach to
            **metadata: file_url, file_name, file_type (required) and
                file_size, thumbnail_url, duration, width, height (optional)

        Raises:
            AuthorizationError: Actor is not the sender
            StateError: Message is deleted
            ValidationError: Missing/unknown fields or too many attachments
        """
        if message.sender_id != actor.id:
            raise AuthorizationError(
                "Only the sender can attach files to a message",
                error_code="NOT_SENDER",
            )
        if message.is_deleted:
            raise StateError(
                "Cannot attach files to a deleted message",
                error_code="MESSAGE_DELETED",
            )
        if (
            message.attachments.count()
            >= ATTACHMENT_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE
        ):
            raise ValidationError(
                f"A message can carry at most "
                f"{ATTACHMENT_CONFIG.MAX_ATTACHMENTS_PER_MESSAGE} attachments",
                error_code="TOO_MANY_ATTACHMENTS",
            )

        attachment = cls.build(message, **metadata)
        attachment.save()

        cls.get_logger().info(
            f"User {actor.id} attached {attachment.file_name} to message {message.id}"
        )
        return attachment


class TypingService(BaseService):
    """
    Typing indicators.

    Rows are best-effort: readers ignore anything older than
    CHAT_TYPING_INDICATOR_TTL_SECONDS and the periodic sweep deletes them.
    """

    @classmethod
    def ttl(cls) -> timedelta:
        return timedelta(seconds=settings.CHAT_TYPING_INDICATOR_TTL_SECONDS)

    @classmethod
    def start_typing(
        cls, user: User, conversation: Conversation
    ) -> TypingIndicator | None:
        """
        Record that the user is typing.

        Returns None without writing anything when the user has turned off
        show_typing_indicator in their settings.

        Raises:
            AuthorizationError: User is not an active participant
        """
        _require_participant(conversation, user)

        if not UserSettingsService.get_settings(user).show_typing_indicator:
            return None

        indicator, _ = TypingIndicator.objects.update_or_create(
            user=user,
            conversation=conversation,
            defaults={"started_at": timezone.now()},
        )
        return indicator

    @classmethod
    def stop_typing(cls, user: User, conversation: Conversation) -> None:
        """Clear the user's indicator; no-op when there is none."""
        TypingIndicator.objects.filter(user=user, conversation=conversation).delete()

    @classmethod
    def active_typers(
        cls, user: User, conversation: Conversation
    ) -> QuerySet[TypingIndicator]:
        """
        Indicators younger than the TTL, excluding the caller's own.

        Raises:
            AuthorizationError: User is not an active participant
        """
        _require_participant(conversation, user)
        cutoff = timezone.now() - cls.ttl()
        return (
            TypingIndicator.objects.filter(
                conversation=conversation, started_at__gte=cutoff
            )
            .exclude(user=user)
            .select_related("user__profile")
        )

    @classmethod
    def sweep_expired(cls) -> int:
        """Delete indicators older than the TTL. Returns the number removed."""
        cutoff = timezone.now() - cls.ttl()
        deleted, _ = TypingIndicator.objects.filter(started_at__lt=cutoff).delete()
        if deleted:
            cls.get_logger().debug(f"Expired {deleted} typing indicators")
        return deleted
