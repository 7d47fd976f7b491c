"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Conversation management
- Participant viewing
- Message moderation
"""

from django.contrib import admin

from chat.models import (
    Attachment,
    Conversation,
    DirectConversationPair,
    Message,
    Participant,
    TypingIndicator,
)


class ParticipantInline(admin.TabularInline):
    """Inline display of participants in conversation admin."""

    model = Participant
    extra = 0
    readonly_fields = [
        "joined_at",
        "left_at",
        "left_voluntarily",
        "removed_by",
        "last_read_message_id",
    ]
    raw_id_fields = ["user", "removed_by"]


class AttachmentInline(admin.TabularInline):
    """Inline display of attachments in message admin."""

    model = Attachment
    extra = 0
    readonly_fields = ["uploaded_at"]


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    """Admin interface for Conversation model."""

    list_display = [
        "id",
        "conversation_type",
        "name",
        "participant_count",
        "last_message_sequence",
        "created_at",
        "last_message_at",
    ]
    list_filter = ["conversation_type", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = [
        "created_at",
        "updated_at",
        "participant_count",
        "last_message_at",
        "last_message_sequence",
    ]
    raw_id_fields = ["created_by"]
    inlines = [ParticipantInline]
    ordering = ["-created_at"]


@admin.register(DirectConversationPair)
class DirectConversationPairAdmin(admin.ModelAdmin):
    """Admin interface for DirectConversationPair model."""

    list_display = ["conversation", "user_lower", "user_higher"]
    raw_id_fields = ["conversation", "user_lower", "user_higher"]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    """Admin interface for Participant model."""

    list_display = [
        "id",
        "conversation",
        "user",
        "role",
        "is_active",
        "joined_at",
        "left_at",
        "left_voluntarily",
    ]
    list_filter = ["role", "is_active", "left_voluntarily", "joined_at"]
    search_fields = ["user__email", "user__username", "conversation__name"]
    readonly_fields = ["created_at", "updated_at", "joined_at"]
    raw_id_fields = ["conversation", "user", "removed_by"]
    ordering = ["-joined_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "conversation",
        "sequence",
        "sender",
        "message_type",
        "content_preview",
        "state",
        "created_at",
    ]
    list_filter = ["message_type", "state", "created_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = [
        "created_at",
        "updated_at",
        "sequence",
        "state",
        "edited_at",
        "deleted_at",
    ]
    raw_id_fields = ["conversation", "sender", "reply_to"]
    inlines = [AttachmentInline]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated content for list display."""
        content = obj.content or ""
        max_length = 50
        if len(content) > max_length:
            return content[:max_length] + "..."
        return content


@admin.register(TypingIndicator)
class TypingIndicatorAdmin(admin.ModelAdmin):
    """Admin interface for TypingIndicator model."""

    list_display = ["user", "conversation", "started_at"]
    raw_id_fields = ["user", "conversation"]
    ordering = ["-started_at"]
