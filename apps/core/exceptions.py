"""
Standardized error handling for the Vlaams Woordenboek API.

Provides consistent error codes, exception classes, and response formatting.
"""

import logging
import traceback
import uuid
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.articles.state_machine import (
    ConcurrentModification,
    InvalidStateTransition,
    PersistenceFailure,
    StateMachineError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_VALUE = "INVALID_VALUE"
    SPAM_DETECTED = "SPAM_DETECTED"

    # Authentication/Authorization (401/403)
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ACCOUNT_BANNED = "ACCOUNT_BANNED"
    RATE_LIMITED = "RATE_LIMITED"

    # Resource errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE = "DUPLICATE"
    CONFLICT = "CONFLICT"

    # Review workflow errors
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


# =============================================================================
# Error Response Schema
# =============================================================================

@dataclass
class ErrorDetail:
    """Detailed error information."""
    code: ErrorCode
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code.value if isinstance(self.code, ErrorCode) else self.code,
            "message": self.message,
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class ErrorResponse:
    """Standardized error response."""
    error: ErrorDetail
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error.to_dict(),
            "request_id": self.request_id,
        }

    def to_response(self, status_code: int = 400) -> Response:
        return Response(self.to_dict(), status=status_code)


# =============================================================================
# Custom Exceptions
# =============================================================================

class WoordenboekException(APIException):
    """Base exception for dictionary API errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.INTERNAL_ERROR
    default_detail = "An error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_detail
        self.error_code = code or self.error_code
        self.field = field
        self.error_details = details or {}

        if status_code:
            self.status_code = status_code

        super().__init__(detail=self.message)

    def get_error_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        return ErrorResponse(
            error=ErrorDetail(
                code=self.error_code,
                message=self.message,
                field=self.field,
                details=self.error_details if self.error_details else None,
            ),
            request_id=request_id or str(uuid.uuid4()),
        )


class ValidationError(WoordenboekException):
    """Validation error."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR
    default_detail = "Validation failed"


class SpamDetectedError(WoordenboekException):
    """Honeypot field was filled in."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.SPAM_DETECTED
    default_detail = "Submission rejected"


class NotFoundError(WoordenboekException):
    """Resource not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.NOT_FOUND
    default_detail = "Resource not found"


class PermissionDeniedError(WoordenboekException):
    """Permission denied."""
    status_code = status.HTTP_403_FORBIDDEN
    error_code = ErrorCode.PERMISSION_DENIED
    default_detail = "Permission denied"


# Status and code for the review workflow errors raised by apps.articles.state_machine
STATE_MACHINE_ERROR_MAP = {
    InvalidStateTransition: (status.HTTP_409_CONFLICT, ErrorCode.INVALID_STATE_TRANSITION),
    ConcurrentModification: (status.HTTP_409_CONFLICT, ErrorCode.CONCURRENT_MODIFICATION),
    PersistenceFailure: (status.HTTP_503_SERVICE_UNAVAILABLE, ErrorCode.PERSISTENCE_FAILURE),
}


# =============================================================================
# Exception Handler
# =============================================================================

def get_request_id(request) -> str:
    """Get or generate request ID from request."""
    if hasattr(request, 'request_id'):
        return request.request_id
    return str(uuid.uuid4())


def _state_machine_error_response(exc, request_id: str) -> Optional[Response]:
    if not isinstance(exc, StateMachineError):
        return None

    for klass, (status_code, code) in STATE_MACHINE_ERROR_MAP.items():
        if isinstance(exc, klass):
            break
    else:
        status_code, code = status.HTTP_409_CONFLICT, ErrorCode.CONFLICT

    logger.warning(
        f"Workflow error: {code.value}",
        extra={
            "request_id": request_id,
            "error_code": code.value,
            "error_message": str(exc),
        }
    )
    error_response = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=str(exc),
            details=exc.to_dict() or None,
        ),
        request_id=request_id,
    )
    return error_response.to_response(status_code)


def woordenboek_exception_handler(exc, context):
    """
    Custom exception handler for the dictionary API.

    Converts all exceptions to standardized error response format.
    """
    request = context.get('request')
    request_id = get_request_id(request) if request else str(uuid.uuid4())

    # Handle our custom exceptions
    if isinstance(exc, WoordenboekException):
        error_response = exc.get_error_response(request_id)
        logger.warning(
            f"API Error: {exc.error_code.value}",
            extra={
                "request_id": request_id,
                "error_code": exc.error_code.value,
                "error_message": exc.message,
                "field": exc.field,
                "status_code": exc.status_code,
            }
        )
        return error_response.to_response(exc.status_code)

    # Handle review workflow errors
    response = _state_machine_error_response(exc, request_id)
    if response is not None:
        return response

    # Handle Django validation errors
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            details = exc.message_dict
            message = "Validation failed"
        else:
            details = {"errors": exc.messages}
            message = exc.messages[0] if exc.messages else "Validation failed"

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.VALIDATION_ERROR,
                message=message,
                details=details,
            ),
            request_id=request_id,
        )
        return error_response.to_response(status.HTTP_400_BAD_REQUEST)

    # Handle 404
    if isinstance(exc, Http404):
        error_response = ErrorResponse(
            error=ErrorDetail(
                code=ErrorCode.NOT_FOUND,
                message=str(exc) if str(exc) else "Resource not found",
            ),
            request_id=request_id,
        )
        return error_response.to_response(status.HTTP_404_NOT_FOUND)

    # Use DRF's default handler for standard exceptions
    response = drf_exception_handler(exc, context)

    if response is not None:
        error_code = ErrorCode.VALIDATION_ERROR
        if response.status_code == 401:
            error_code = ErrorCode.AUTHENTICATION_REQUIRED
        elif response.status_code == 403:
            error_code = ErrorCode.PERMISSION_DENIED
            if isinstance(exc, APIException) and exc.get_codes() == 'account_banned':
                error_code = ErrorCode.ACCOUNT_BANNED
        elif response.status_code == 404:
            error_code = ErrorCode.NOT_FOUND
        elif response.status_code == 405:
            error_code = ErrorCode.INVALID_VALUE
        elif response.status_code == 429:
            error_code = ErrorCode.RATE_LIMITED
        elif response.status_code >= 500:
            error_code = ErrorCode.INTERNAL_ERROR

        if isinstance(response.data, dict):
            if 'detail' in response.data:
                message = str(response.data['detail'])
                details = None
            else:
                message = "Validation failed"
                details = response.data
        elif isinstance(response.data, list):
            message = response.data[0] if response.data else "Error"
            details = {"errors": response.data}
        else:
            message = str(response.data)
            details = None

        error_response = ErrorResponse(
            error=ErrorDetail(
                code=error_code,
                message=message,
                details=details,
            ),
            request_id=request_id,
        )
        drf_response = error_response.to_response(response.status_code)
        # Keep Retry-After / WWW-Authenticate headers set by DRF
        for header in ('Retry-After', 'WWW-Authenticate'):
            if header in response:
                drf_response[header] = response[header]
        return drf_response

    # Unhandled exception - log and return generic error
    logger.exception(
        f"Unhandled exception: {type(exc).__name__}",
        extra={
            "request_id": request_id,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
            "traceback": traceback.format_exc(),
        }
    )

    error_response = ErrorResponse(
        error=ErrorDetail(
            code=ErrorCode.INTERNAL_ERROR,
            message="An unexpected error occurred",
        ),
        request_id=request_id,
    )
    return error_response.to_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


# =============================================================================
# Response Helpers
# =============================================================================

def error_response(
    code: ErrorCode,
    message: str,
    status_code: int = 400,
    field: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Response:
    """
    Create a standardized error response.

    Use this helper for manual error returns in views to maintain consistency
    with the exception handler's response format.
    """
    from apps.core.middleware import get_request_id as current_request_id

    if request_id is None:
        request_id = current_request_id() or str(uuid.uuid4())

    response = ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            field=field,
            details=details,
        ),
        request_id=request_id,
    )
    return response.to_response(status_code)
