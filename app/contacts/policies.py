"""
Conversation-creation policies backed by contacts.

chat.services.ConversationService loads the policy named by
settings.CHAT_CONVERSATION_POLICY and calls ``check_direct`` before creating
a direct conversation. A policy raises ConflictError to refuse.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from contacts.services import ContactService
from core.exceptions import ConflictError

if TYPE_CHECKING:
    from authentication.models import User


class ConversationPolicy(Protocol):
    """Hook consulted before a direct conversation is created."""

    def check_direct(self, creator: User, other: User) -> None:
        """Raise ConflictError if ``creator`` may not start a chat with ``other``."""
        ...


class BlockedContactPolicy:
    """Refuse direct conversations when either side has blocked the other."""

    def check_direct(self, creator, other) -> None:
        if ContactService.is_blocked_between(creator, other):
            raise ConflictError(
                "A direct conversation cannot be started with this user",
                error_code="CONTACT_BLOCKED",
                details={"user_id": other.id},
            )


class AllowAllPolicy:
    """No restrictions; for deployments without blocking."""

    def check_direct(self, creator, other) -> None:
        return None
