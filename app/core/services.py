"""
Base service layer patterns for business logic encapsulation.

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

    Every operation receives the acting user explicitly (``actor``/``sender``)
    instead of reading it from ambient request state, so the same call works
    from a view, a Celery task or a test.

Error Handling:
    Services raise core.exceptions subclasses for expected failures
    (validation, authorization, invariants). The API exception handler turns
    them into responses; nothing is returned as an error value.

Usage:
    from core.services import BaseService
    from core.exceptions import ConflictError

    class ContactService(BaseService):
        @classmethod
        def add_contact(cls, owner, contact_user):
            if Contact.objects.filter(owner=owner, contact_user=contact_user).exists():
                raise ConflictError("Contact already exists")

            with cls.atomic():
                contact = Contact.objects.create(owner=owner, contact_user=contact_user)

            cls.get_logger().info(f"User {owner.id} added contact {contact_user.id}")
            return contact
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

from core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Required-argument validation

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Raise core.exceptions for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Example:
            class MessageService(BaseService):
                @classmethod
                def post_message(cls, sender, ...):
                    cls.get_logger().info(f"User {sender.id} posted a message")
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                conversation = Conversation.objects.create(...)
                Participant.objects.bulk_create(rows)
                # If participant creation fails, the conversation is rolled back

        Note:
            This is a thin wrapper around Django's transaction.atomic().
            Use it to make transaction boundaries explicit in service code.
        """
        with transaction.atomic():
            yield

    @classmethod
    def validate_required(cls, **kwargs) -> None:
        """
        Validate that required fields are provided.

        Raises:
            ValidationError: If any field is None or a blank string. The
                offending field names are listed in ``details``.

        Example:
            cls.validate_required(file_name=file_name, file_url=file_url)
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            raise ValidationError(
                "Required fields missing",
                error_code="VALIDATION_ERROR",
                details=errors,
            )
