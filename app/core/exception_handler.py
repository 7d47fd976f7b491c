"""
DRF exception handler for application errors.

Services raise core.exceptions subclasses; this handler is registered as
REST_FRAMEWORK["EXCEPTION_HANDLER"] so views never translate errors by hand.
Anything that is not a BaseApplicationError falls through to DRF's default
handler (serializer errors, authentication failures, 404s from get_object).
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import BaseApplicationError, ExternalServiceError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Convert application errors into JSON responses.

    Returns:
        Response with ``exc.to_dict()`` and the error's HTTP status, or
        whatever DRF's default handler returns for other exceptions.
    """
    if isinstance(exc, BaseApplicationError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view else "unknown"
        if isinstance(exc, ExternalServiceError):
            logger.error(f"{view_name}: {exc}")
        else:
            logger.info(f"{view_name}: {exc}")
        return Response(exc.to_dict(), status=exc.http_status)

    return drf_exception_handler(exc, context)
