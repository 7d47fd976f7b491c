"""
Constants and configuration for chat module features.

This module centralizes static limits for:
- Group membership at creation time
- Message content
- Attachments per message

Tunable policy knobs (group cap, membership floor, typing TTL, conversation
policy) live in Django settings as CHAT_* values.

Import example:
    from chat.constants import ATTACHMENT_CONFIG, MESSAGE_CONFIG
"""

from typing import Final


# =============================================================================
# Conversation Configuration
# =============================================================================


class CONVERSATION_CONFIG:
    """Configuration for conversation creation."""

    # Members invited alongside the owner when a group is created
    GROUP_MIN_INITIAL_MEMBERS: Final[int] = 2

    NAME_MAX_LENGTH: Final[int] = 255
    DESCRIPTION_MAX_LENGTH: Final[int] = 1000


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters

    # Pagination
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 100


# =============================================================================
# Attachment Configuration
# =============================================================================


class ATTACHMENT_CONFIG:
    """
    Configuration for message attachments.

    Binary upload happens through media.services.MediaUploadService; the
    chat app only records metadata for already-stored objects.
    """

    MAX_ATTACHMENTS_PER_MESSAGE: Final[int] = 10
