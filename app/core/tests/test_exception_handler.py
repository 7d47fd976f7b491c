"""
Tests for the DRF exception handler.
"""

from rest_framework import serializers, status
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import api_exception_handler
from core.exceptions import ExternalServiceError, NotFoundError


class DummyView:
    pass


class TestApiExceptionHandler:
    """Tests for api_exception_handler()."""

    def test_application_error_rendered(self):
        exc = NotFoundError(
            "Message 5 not found", error_code="MESSAGE_NOT_FOUND", details={"id": 5}
        )

        response = api_exception_handler(exc, {"view": DummyView()})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {
            "error": "Message 5 not found",
            "error_code": "MESSAGE_NOT_FOUND",
            "details": {"id": 5},
        }

    def test_external_error_logged_as_error(self, caplog):
        exc = ExternalServiceError("Store down", error_code="BLOB_PUT_FAILED")

        with caplog.at_level("ERROR", logger="core.exception_handler"):
            response = api_exception_handler(exc, {"view": DummyView()})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert "DummyView" in caplog.text

    def test_serializer_errors_keep_drf_format(self):
        """
        Field errors are left to DRF's default handler.

        Why it matters: Clients rely on DRF's field -> messages mapping.
        """
        exc = serializers.ValidationError({"email": ["Enter a valid email address."]})

        response = api_exception_handler(exc, {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {"email": ["Enter a valid email address."]}

    def test_drf_exceptions_fall_through(self):
        response = api_exception_handler(NotAuthenticated(), {})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unknown_exceptions_return_none(self):
        assert api_exception_handler(RuntimeError("bug"), {}) is None
