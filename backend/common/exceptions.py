"""
DRF exception handler rendering every failure in the same envelope:
{"success": false, "error": <code>, "message": <human readable>}
"""

import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from services.exceptions import ServiceError

logger = logging.getLogger(__name__)


def _error_payload(code: str, message: str, **extra):
    payload = {"success": False, "error": code, "message": message}
    payload.update(extra)
    return payload


def api_exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        return Response(
            _error_payload(exc.code, exc.message, **exc.extra),
            status=exc.status_code,
        )

    response = exception_handler(exc, context)

    if response is None:
        # Unhandled: log it, never leak the traceback to the client
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "unknown view")
        return Response(
            _error_payload("server_error", "Something went wrong, please try again later"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = _error_payload(
            "validation_error", "Invalid request payload", errors=response.data
        )
    elif isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        response.data = _error_payload("unauthenticated", "Authentication credentials were not provided or are invalid")
    elif isinstance(exc, exceptions.PermissionDenied):
        response.data = _error_payload("unauthorized", str(exc.detail))
    elif isinstance(exc, (exceptions.NotFound, Http404)):
        response.data = _error_payload("not_found", "Resource not found")
    else:
        detail = response.data.get("detail") if isinstance(response.data, dict) else None
        response.data = _error_payload("error", str(detail or "Request could not be processed"))

    return response
