"""DRF exception handler that renders every error with the same body shape.

Clients always receive ``{"detail": <CODE>, "message": <text>, ...}``:
``ShopError``s carry their own code, status and extra fields; DRF and
Django exceptions are mapped onto the same codes; database outages become
503 and anything unexpected becomes a logged 500 without a traceback.
"""

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db import InterfaceError, OperationalError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import set_rollback

from apps.common.errors import ShopError

logger = logging.getLogger(__name__)

API_EXCEPTION_CODES = {
    exceptions.NotAuthenticated: "UNAUTHORIZED",
    exceptions.AuthenticationFailed: "UNAUTHORIZED",
    exceptions.PermissionDenied: "FORBIDDEN",
    exceptions.NotFound: "NOT_FOUND",
    exceptions.Throttled: "THROTTLED",
    exceptions.ParseError: "VALIDATION_ERROR",
    exceptions.ValidationError: "VALIDATION_ERROR",
    exceptions.MethodNotAllowed: "METHOD_NOT_ALLOWED",
    exceptions.UnsupportedMediaType: "UNSUPPORTED_MEDIA_TYPE",
    exceptions.NotAcceptable: "NOT_ACCEPTABLE",
}


def _message(detail) -> str:
    if isinstance(detail, (list, tuple)):
        return "; ".join(_message(d) for d in detail)
    if isinstance(detail, dict):
        return "; ".join(f"{k}: {_message(v)}" for k, v in detail.items())
    return str(detail)


def _api_exception_response(exc: exceptions.APIException) -> Response:
    code = next(
        (c for cls, c in API_EXCEPTION_CODES.items() if isinstance(exc, cls)),
        str(exc.default_code).upper(),
    )
    headers = {}
    auth_header = getattr(exc, "auth_header", None)
    if auth_header:
        headers["WWW-Authenticate"] = auth_header
    wait = getattr(exc, "wait", None)
    if wait is not None:
        headers["Retry-After"] = str(int(wait))
    return Response({"detail": code, "message": _message(exc.detail)}, status=exc.status_code, headers=headers)


def api_exception_handler(exc, context):
    """Return the error response for ``exc`` raised inside an API view.

    Args:
        exc: The raised exception.
        context: DRF context with the ``view`` and ``request``.

    Returns:
        Response: Always a JSON response, never ``None``.
    """
    view = context.get("view")
    view_name = type(view).__name__ if view is not None else "-"

    if isinstance(exc, ShopError):
        set_rollback()
        return Response(exc.to_body(), status=exc.status_code)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, exceptions.APIException):
        set_rollback()
        return _api_exception_response(exc)

    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error("database unavailable", extra={"view": view_name, "error": str(exc)})
        set_rollback()
        return Response(
            {"detail": "SERVICE_UNAVAILABLE", "message": "Service temporarily unavailable, please retry"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    logger.exception("unhandled API error", extra={"view": view_name})
    set_rollback()
    return Response(
        {"detail": "INTERNAL_ERROR", "message": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
