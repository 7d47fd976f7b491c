"""
Message lifecycle states.

MessageState is stored in Message.state and driven by django-fsm transitions.
MessageStatus is the read-side view of the same lifecycle: a tagged variant
that carries the timestamp relevant to each state so callers can match on it
exhaustively instead of juggling is_edited/is_deleted flags.

State Flow:
    ACTIVE → EDITED (re-entrant, each edit moves edited_at)
    ACTIVE → DELETED
    EDITED → DELETED

DELETED is terminal.

Usage:
    from chat.states import Active, Deleted, Edited

    match message.status:
        case Active():
            ...
        case Edited(at=edited_at):
            ...
        case Deleted(at=deleted_at):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Union

from django.db import models

if TYPE_CHECKING:
    from chat.models import Message


class MessageState(models.TextChoices):
    """
    Persisted state of a message.

    Terminal states: DELETED
    """

    ACTIVE = "active", "Active"
    EDITED = "edited", "Edited"
    DELETED = "deleted", "Deleted"


@dataclass(frozen=True)
class Active:
    """Message as originally posted."""


@dataclass(frozen=True)
class Edited:
    """Message whose content was changed; ``at`` is the latest edit."""

    at: datetime


@dataclass(frozen=True)
class Deleted:
    """Tombstone; ``at`` is when the message was deleted."""

    at: datetime


MessageStatus = Union[Active, Edited, Deleted]


def status_of(message: Message) -> MessageStatus:
    """Build the tagged variant for a message from its stored state."""
    if message.state == MessageState.DELETED:
        return Deleted(at=message.deleted_at)
    if message.state == MessageState.EDITED:
        return Edited(at=message.edited_at)
    return Active()
