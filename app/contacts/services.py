"""
Contact services.

ContactService manages a user's address book. Every method takes the owner
explicitly and only ever touches rows that owner owns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db import IntegrityError

from contacts.models import Contact
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User


class ContactService(BaseService):
    """Address book operations."""

    @classmethod
    def list_contacts(cls, owner: User) -> QuerySet[Contact]:
        """Return the owner's contacts, favorites first."""
        return Contact.objects.filter(owner=owner).select_related(
            "contact_user", "contact_user__profile"
        )

    @classmethod
    def add_contact(
        cls,
        owner: User,
        contact_user_id: int,
        nickname: str = "",
        is_favorite: bool = False,
    ) -> Contact:
        """
        Save another user as a contact.

        Raises:
            ValidationError: Adding yourself
            NotFoundError: Unknown or inactive user
            ConflictError: The contact already exists
        """
        if contact_user_id == owner.id:
            raise ValidationError(
                "You cannot add yourself as a contact",
                error_code="CONTACT_SELF",
            )

        User = get_user_model()
        contact_user = User.objects.filter(id=contact_user_id, is_active=True).first()
        if contact_user is None:
            raise NotFoundError(
                f"User {contact_user_id} not found",
                error_code="USER_NOT_FOUND",
                details={"user_id": contact_user_id},
            )

        try:
            with cls.atomic():
                contact = Contact.objects.create(
                    owner=owner,
                    contact_user=contact_user,
                    nickname=nickname or "",
                    is_favorite=is_favorite,
                )
        except IntegrityError as e:
            raise ConflictError(
                "This user is already in your contacts",
                error_code="CONTACT_EXISTS",
                details={"user_id": contact_user_id},
            ) from e

        cls.get_logger().info(f"User {owner.id} added contact {contact_user.id}")
        return contact

    @classmethod
    def get_contact(cls, owner: User, contact_id: int) -> Contact:
        """
        Fetch one of the owner's contacts.

        Raises:
            NotFoundError: No such contact in the owner's address book
        """
        contact = cls.list_contacts(owner).filter(id=contact_id).first()
        if contact is None:
            raise NotFoundError(
                f"Contact {contact_id} not found",
                error_code="CONTACT_NOT_FOUND",
            )
        return contact

    @classmethod
    def update_contact(cls, owner: User, contact: Contact, **data) -> Contact:
        """Update nickname / is_blocked / is_favorite on the owner's contact."""
        if contact.owner_id != owner.id:
            raise NotFoundError("Contact not found", error_code="CONTACT_NOT_FOUND")

        allowed = {"nickname", "is_blocked", "is_favorite"}
        changes = {name: value for name, value in data.items() if name in allowed}
        if "nickname" in changes and changes["nickname"] is None:
            changes["nickname"] = ""

        if changes:
            for name, value in changes.items():
                setattr(contact, name, value)
            contact.save(update_fields=[*changes, "updated_at"])
            cls.get_logger().info(
                f"User {owner.id} updated contact {contact.id}: {', '.join(sorted(changes))}"
            )
        return contact

    @classmethod
    def block(cls, owner: User, contact: Contact) -> Contact:
        """Block a contact; idempotent."""
        return cls.update_contact(owner, contact, is_blocked=True)

    @classmethod
    def unblock(cls, owner: User, contact: Contact) -> Contact:
        """Unblock a contact; idempotent."""
        return cls.update_contact(owner, contact, is_blocked=False)

    @classmethod
    def remove_contact(cls, owner: User, contact: Contact) -> None:
        """Delete the owner's contact entry."""
        if contact.owner_id != owner.id:
            raise NotFoundError("Contact not found", error_code="CONTACT_NOT_FOUND")
        contact_id = contact.id
        contact.delete()
        cls.get_logger().info(f"User {owner.id} removed contact {contact_id}")

    @classmethod
    def is_blocked(cls, owner: User, other: User) -> bool:
        """Whether ``owner`` has blocked ``other``."""
        return Contact.objects.filter(
            owner=owner, contact_user=other, is_blocked=True
        ).exists()

    @classmethod
    def is_blocked_between(cls, first: User, second: User) -> bool:
        """Whether either user has blocked the other."""
        return cls.is_blocked(first, second) or cls.is_blocked(second, first)
