"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A single HTTP status per error category

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed or missing input (400)
    ├── AuthorizationError - Caller lacks rights on the target entity (403)
    ├── NotFoundError - Referenced entity absent (404)
    ├── ConflictError - Invariant violations, duplicates, count breaches (409)
    ├── StateError - Illegal state transitions (409)
    ├── PayloadTooLargeError - Media over the size limit (413)
    ├── UnsupportedMediaTypeError - Media of a disallowed type (415)
    └── ExternalServiceError - Object store / third-party failures (502)

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("Message content or media is required")

    # Raise with error code for client handling
    raise ConflictError("Username already taken", error_code="USERNAME_TAKEN")

    # Raise with additional details
    raise ValidationError(
        "Validation failed",
        details={"participant_ids": ["At least 2 participants are required"]},
    )

Note:
    These exceptions are for domain/business logic errors raised by services.
    core.exception_handler turns them into API responses; DRF keeps handling
    its own API-layer exceptions (serializer errors, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        http_status: Status code used when the error reaches the API layer

    Example:
        try:
            message = MessageService.edit_message(actor, message_id, content)
        except StateError as e:
            logger.warning(f"Edit rejected: {e.error_code}")
            return Response(e.to_dict(), status=e.http_status)
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Conversation not found",
                "error_code": "CONVERSATION_NOT_FOUND",
                "details": {"conversation_id": 123}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing payloads (a message with neither content nor media)
    - Business rule violations (group without a name, wrong participant count)
    - Read cursors that would move backwards

    Example:
        raise ValidationError(
            "Group conversations require a name",
            error_code="GROUP_NAME_REQUIRED",
        )

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class AuthorizationError(BaseApplicationError):
    """
    Raised when the caller lacks rights for the target entity.

    Use for:
    - Posting into a conversation the caller is not an active member of
    - Editing someone else's message
    - Role-based restrictions (only owners/admins may remove members)

    Example:
        if message.sender_id != actor.id:
            raise AuthorizationError(
                "Only the sender can edit this message",
                error_code="NOT_MESSAGE_SENDER",
            )

    Note:
        For authentication failures (missing/invalid token), DRF's
        NotAuthenticated/AuthenticationFailed still apply.
    """

    default_error_code: str = "AUTHORIZATION_ERROR"
    http_status: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a referenced entity is absent.

    Example:
        conversation = Conversation.objects.filter(id=conversation_id).first()
        if not conversation:
            raise NotFoundError(
                f"Conversation {conversation_id} not found",
                error_code="CONVERSATION_NOT_FOUND",
                details={"conversation_id": conversation_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation would violate an invariant.

    Use for:
    - Duplicate entries (unique constraint violations)
    - Participant-count breaches (direct conversations, group cap/floor)
    - Conversation creation rejected by the blocking policy

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409


class StateError(BaseApplicationError):
    """
    Raised on an illegal state transition.

    Example:
        if message.is_deleted:
            raise StateError(
                "Deleted messages cannot be edited",
                error_code="MESSAGE_DELETED",
                details={"state": message.state},
            )
    """

    default_error_code: str = "INVALID_STATE"
    http_status: int = 409


class PayloadTooLargeError(BaseApplicationError):
    """
    Raised when an uploaded file exceeds its size limit.

    Include the limit in details so clients can react:
        details={"max_size": 5 * 1024 * 1024, "size": upload.size}
    """

    default_error_code: str = "PAYLOAD_TOO_LARGE"
    http_status: int = 413


class UnsupportedMediaTypeError(BaseApplicationError):
    """
    Raised when an uploaded file's detected type is not allowed.

    The type is sniffed from the file content, never taken from the
    client-supplied Content-Type.
    """

    default_error_code: str = "UNSUPPORTED_MEDIA_TYPE"
    http_status: int = 415


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Object store put/delete failures
    - Network timeouts
    - Unexpected external service responses

    Example:
        if not store.delete(user.profile.profile_picture_url):
            raise ExternalServiceError(
                "Could not delete profile picture from storage",
                error_code="BLOB_DELETE_FAILED",
                details={"service": "blob_store"},
            )

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    http_status: int = 502
