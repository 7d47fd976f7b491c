"""
Contact model.

A contact is owned by one user and points at another. The relation is not
symmetric: Alice having Bob as a (blocked) contact says nothing about Bob's
address book.
"""

from django.conf import settings
from django.db import models

from core.models import BaseModel


class Contact(BaseModel):
    """
    Directed contact edge between two users.

    Fields:
        owner: User whose address book this entry belongs to
        contact_user: The user being saved
        nickname: Owner's private label for the contact
        is_blocked: Contact may not start direct conversations with the owner
        is_favorite: Pinned in the owner's contact list

    Invariants:
        - At most one row per (owner, contact_user)
        - A user cannot add themselves
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contacts",
        help_text="User who owns this contact entry",
    )
    contact_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contact_of",
        help_text="User saved as a contact",
    )
    nickname = models.CharField(
        max_length=255,
        blank=True,
        help_text="Owner's private label for this contact",
    )
    is_blocked = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Blocked contacts cannot start direct conversations with the owner",
    )
    is_favorite = models.BooleanField(
        default=False,
        help_text="Pinned in the owner's contact list",
    )

    class Meta:
        db_table = "contacts_contact"
        ordering = ["-is_favorite", "nickname", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "contact_user"],
                name="unique_contact_pair",
            ),
            models.CheckConstraint(
                condition=~models.Q(owner=models.F("contact_user")),
                name="contact_not_self",
            ),
        ]
        indexes = [
            models.Index(
                fields=["contact_user", "is_blocked"],
                name="contact_blocked_lookup_idx",
            ),
        ]

    def __str__(self):
        return f"{self.owner_id} -> {self.contact_user_id}"
