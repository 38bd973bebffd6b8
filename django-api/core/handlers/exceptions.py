"""Map domain errors to HTTP responses.

Installed as DRF's ``EXCEPTION_HANDLER``. Responses carry the domain error
code and a user-safe message, never internal details.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.errors import (
    ConflictError,
    DomainError,
    ErrorCode,
    NotFoundError,
    TransactionFailedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransactionFailedError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(error: DomainError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(error: DomainError) -> dict:
    return {
        "error": {
            "code": error.code.value,
            "message": error.message,
            "field": error.field,
        }
    }


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("Request failed: %s", exc)
        return Response(error_body(exc), status=status_code)

    if isinstance(exc, exceptions.ValidationError):
        detail = exc.detail if isinstance(exc.detail, dict) else {"non_field_errors": exc.detail}
        return Response(
            {
                "error": {
                    "code": ErrorCode.VALIDATION_ERROR.value,
                    "message": "Invalid request body",
                    "fields": detail,
                }
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    return exception_handler(exc, context)
