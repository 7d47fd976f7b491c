# Generated manually - Contacts

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """
    Create the Contact table.

    One row per (owner, contact_user); a user can never be their own contact.
    """

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("authentication", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Contact",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "nickname",
                    models.CharField(
                        blank=True,
                        help_text="Owner's private label for this contact",
                        max_length=255,
                    ),
                ),
                (
                    "is_blocked",
                    models.BooleanField(
                        db_index=True,
                        default=False,
                        help_text="Blocked contacts cannot start direct conversations with the owner",
                    ),
                ),
                (
                    "is_favorite",
                    models.BooleanField(
                        default=False,
                        help_text="Pinned in the owner's contact list",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User who owns this contact entry",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contacts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "contact_user",
                    models.ForeignKey(
                        help_text="User saved as a contact",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contact_of",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "contacts_contact",
                "ordering": ["-is_favorite", "nickname", "id"],
                "indexes": [
                    models.Index(
                        fields=["contact_user", "is_blocked"],
                        name="contact_blocked_lookup_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("owner", "contact_user"),
                        name="unique_contact_pair",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("owner", models.F("contact_user")), _negated=True),
                        name="contact_not_self",
                    ),
                ],
            },
        ),
    ]
