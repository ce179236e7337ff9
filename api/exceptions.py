"""
Custom Exception Handler for API
"""
import logging
import traceback

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import StoreException

logger = logging.getLogger(__name__)


def _error_body(message, code, status_code, details=None):
    body = {
        "status": "error",
        "message": message,
        "code": code,
        "status_code": status_code,
    }
    if details is not None:
        body["details"] = details
    return body


def _database_error(exc):
    """Map a database constraint violation to (status, message, code)."""
    if isinstance(exc, ProtectedError):
        return status.HTTP_400_BAD_REQUEST, "Record is referenced by other records", "PROTECTED"
    text = str(exc).lower()
    if isinstance(exc, IntegrityError) and 'unique' in text:
        return status.HTTP_400_BAD_REQUEST, "A record with this value already exists", "DUPLICATE"
    if isinstance(exc, IntegrityError) and 'foreign key' in text:
        return status.HTTP_400_BAD_REQUEST, "Invalid reference to related record", "INVALID_REFERENCE"
    return status.HTTP_400_BAD_REQUEST, "Database operation failed", "DATABASE_ERROR"


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error responses.
    """
    if isinstance(exc, StoreException):
        logger.info(f"{exc.code}: {exc.message}")
        return Response(
            _error_body(exc.message, exc.code, exc.status_code),
            status=exc.status_code,
        )

    if isinstance(exc, (ObjectDoesNotExist, Http404)):
        return Response(
            _error_body("Record not found", "NOT_FOUND", status.HTTP_404_NOT_FOUND),
            status=status.HTTP_404_NOT_FOUND,
        )

    if isinstance(exc, (IntegrityError, DatabaseError)):
        status_code, message, code = _database_error(exc)
        logger.warning(f"Database error mapped to {status_code}: {exc}")
        return Response(_error_body(message, code, status_code), status=status_code)

    # Call REST framework's default exception handler for its own exceptions
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            message = "Validation failed"
            details = response.data if isinstance(response.data, dict) else {"detail": response.data}
        else:
            message = str(exc.detail) if isinstance(exc, APIException) else str(exc)
            details = None
        code = "VALIDATION_ERROR"
        if not isinstance(exc, ValidationError) and isinstance(exc, APIException):
            codes = exc.get_codes()
            code = codes if isinstance(codes, str) else "ERROR"
        response.data = _error_body(message, code.upper(), response.status_code, details)
        return response

    # Handle unexpected exceptions
    logger.exception(f"Unhandled exception: {exc}")
    body = _error_body(
        "An unexpected error occurred",
        "INTERNAL_ERROR",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if settings.DEBUG:
        body["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
