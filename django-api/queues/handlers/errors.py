"""Mapping of domain errors to HTTP responses.

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"].
"""

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from queues.domain.errors import (
    DomainError,
    ErrorCode,
    IntegrityError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (IntegrityError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (StoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainError) -> int:
    for error_type, code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for field, value in detail.items():
            return f"{field}: {_first_message(value)}"
    if isinstance(detail, list) and detail:
        return _first_message(detail[0])
    return str(detail)


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    if isinstance(exc, DomainError):
        code = status_for(exc)
        log = logger.error if code >= 500 else logger.info
        log("request.rejected", code=exc.code.value, error=exc.message, status=code)
        return Response({"error": exc.message, "code": exc.code.value}, status=code)

    if isinstance(exc, exceptions.ValidationError):
        return Response(
            {
                "error": _first_message(exc.detail),
                "code": ErrorCode.VALIDATION_ERROR.value,
                "details": exc.detail,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )

    # Parse errors, 405s and the like: keep DRF's status and headers, reshape the body.
    response = exception_handler(exc, context)
    if response is None:
        return None
    detail = response.data
    if isinstance(detail, dict) and "detail" in detail:
        detail = detail["detail"]
    code = getattr(detail, "code", None) or "error"
    response.data = {"error": _first_message(detail), "code": str(code).upper()}
    return response
