"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (authentication, contacts,
chat, media). Business logic does not live here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer (logger, atomic, validation)

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError, AuthorizationError, NotFoundError, ConflictError,
      StateError, PayloadTooLargeError, UnsupportedMediaTypeError,
      ExternalServiceError

API (import from core.exception_handler / core.views):
    - api_exception_handler: DRF handler mapping application errors
    - health_check, ping: Infrastructure endpoints

Note:
    Django models are NOT imported here to avoid AppRegistryNotReady errors.
    Import them directly from core.models.
"""

# Services (no Django model dependencies)
from .services import BaseService

# Exceptions (no Django dependencies)
from .exceptions import (
    AuthorizationError,
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PayloadTooLargeError,
    StateError,
    UnsupportedMediaTypeError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "StateError",
    "PayloadTooLargeError",
    "UnsupportedMediaTypeError",
    "ExternalServiceError",
]
