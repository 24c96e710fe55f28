import logging

from django.db.utils import OperationalError, ProgrammingError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from pos.services.errors import PosError

LOGGER = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Return JSON for domain errors and known infra/runtime errors (DB not ready,
    migrations missing) instead of the default Django HTML 500 page.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, PosError):
        if exc.status_code >= 500:
            LOGGER.error("%s: %s", exc.code, exc.detail)
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)

    if isinstance(exc, (OperationalError, ProgrammingError)):
        request = context.get("request")
        if request is not None:
            LOGGER.exception("Database error on %s %s", request.method, request.get_full_path())
        else:
            LOGGER.exception("Database error (no request in context)")

        return Response(
            {
                "detail": "Service unavailable (database). Try again in a moment.",
                "code": "db_unavailable",
            },
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return None
