"""
Centralized error handling for the Acme Air Flight Service.

This module provides consistent error response formatting, specific error codes
for the failure scenarios of the flight query and reward miles endpoints, and
request-context logging.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse

from flightservice.models.responses import ErrorResponse


class ErrorCode(str, Enum):
    """Enumeration of error codes for different failure scenarios."""

    # HTTP status code specific errors
    HTTP_400 = "HTTP_400"
    HTTP_404 = "HTTP_404"
    HTTP_405 = "HTTP_405"
    HTTP_500 = "HTTP_500"

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    FLIGHT_SEGMENT_NOT_FOUND = "FLIGHT_SEGMENT_NOT_FOUND"

    # Signed request failures (403)
    BODY_HASH_MISMATCH = "BODY_HASH_MISMATCH"
    SIGNATURE_MISMATCH = "SIGNATURE_MISMATCH"
    EXPIRED_OR_INVALID_TIMESTAMP = "EXPIRED_OR_INVALID_TIMESTAMP"

    # Server errors (5xx)
    DATABASE_NOT_POPULATED = "DATABASE_NOT_POPULATED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class ErrorHandler:
    """
    Centralized error handling class with consistent error response formatting.

    Maps error codes to HTTP status codes and default messages, builds
    ErrorResponse bodies and logs failures with the context of the request
    that caused them.
    """

    # Error code to HTTP status code mapping
    ERROR_STATUS_MAPPING: Dict[ErrorCode, int] = {
        ErrorCode.HTTP_400: 400,
        ErrorCode.HTTP_404: 404,
        ErrorCode.HTTP_405: 405,
        ErrorCode.HTTP_500: 500,

        ErrorCode.VALIDATION_ERROR: 422,
        ErrorCode.INVALID_DATE_FORMAT: 400,
        ErrorCode.FLIGHT_SEGMENT_NOT_FOUND: 404,

        ErrorCode.BODY_HASH_MISMATCH: 403,
        ErrorCode.SIGNATURE_MISMATCH: 403,
        ErrorCode.EXPIRED_OR_INVALID_TIMESTAMP: 403,

        ErrorCode.DATABASE_NOT_POPULATED: 500,
        ErrorCode.INTERNAL_SERVER_ERROR: 500,
    }

    # Error code to default message mapping
    ERROR_MESSAGES: Dict[ErrorCode, str] = {
        ErrorCode.HTTP_400: "Bad Request",
        ErrorCode.HTTP_404: "Not Found",
        ErrorCode.HTTP_405: "Method Not Allowed",
        ErrorCode.HTTP_500: "Internal Server Error",
        ErrorCode.VALIDATION_ERROR: "Request validation failed",
        ErrorCode.INVALID_DATE_FORMAT: "Date must be of the form 'Www Mmm dd'",
        ErrorCode.FLIGHT_SEGMENT_NOT_FOUND: "Flight segment not found",
        ErrorCode.BODY_HASH_MISMATCH: "Request body hash does not match",
        ErrorCode.SIGNATURE_MISMATCH: "Request signature does not match",
        ErrorCode.EXPIRED_OR_INVALID_TIMESTAMP: "Request timestamp is expired or invalid",
        ErrorCode.DATABASE_NOT_POPULATED: "Flight DB has not been populated",
        ErrorCode.INTERNAL_SERVER_ERROR: "An unexpected error occurred",
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the ErrorHandler.

        Args:
            logger: Optional logger instance. If not provided, creates a new logger.
        """
        self.logger = logger or logging.getLogger(__name__)

    def get_status_code(self, error_code: ErrorCode) -> int:
        """Return the HTTP status code for an error code (500 when unmapped)."""
        return self.ERROR_STATUS_MAPPING.get(error_code, 500)

    def create_error_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> ErrorResponse:
        """
        Create a standardized error response.

        Args:
            error_code: The error code enum value
            message: Optional custom error message. If not provided, uses default message.
            details: Optional additional error details

        Returns:
            ErrorResponse: Standardized error response object
        """
        final_message = message or self.ERROR_MESSAGES.get(error_code, "Unknown error")

        if details:
            final_message = f"{final_message}. Details: {details}"

        return ErrorResponse(
            error=error_code.value,
            message=final_message,
            timestamp=datetime.now(timezone.utc)
        )

    def log_error(
        self,
        error_code: ErrorCode,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        additional_context: Optional[Dict[str, Any]] = None,
        level: int = logging.ERROR
    ) -> None:
        """
        Log error with request context information.

        Args:
            error_code: The error code enum value
            message: Error message
            request: Optional FastAPI request object
            exception: Optional exception whose traceback should be logged
            additional_context: Optional additional context information
            level: Logging level to use
        """
        context = {
            "error_code": error_code.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if request:
            context.update({
                "method": request.method,
                "path": request.url.path,
                "client_ip": getattr(request.client, 'host', 'unknown') if request.client else 'unknown',
                "user_agent": request.headers.get("user-agent", "unknown"),
            })

        if additional_context:
            context.update(additional_context)

        self.logger.log(
            level,
            f"{error_code.value}: {message}",
            extra={"context": context},
            exc_info=exception is not None
        )

    def create_json_response(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> JSONResponse:
        """
        Create a JSON response for an error.

        Args:
            error_code: The error code enum value
            message: Optional custom error message
            details: Optional additional error details

        Returns:
            JSONResponse: FastAPI JSON response with appropriate status code
        """
        error_response = self.create_error_response(error_code, message, details)

        return JSONResponse(
            status_code=self.get_status_code(error_code),
            content=error_response.model_dump(mode='json')
        )

    def handle_service_error(self, error: Exception, request: Optional[Request] = None) -> JSONResponse:
        """
        Log an application error and turn it into a JSON error response.

        Client-side failures (4xx) are logged as warnings without a traceback;
        server-side failures are logged as errors.

        Args:
            error: An exception carrying an ``error_code`` attribute
            request: Optional FastAPI request object

        Returns:
            JSONResponse: Error response for the failure
        """
        error_code = getattr(error, "error_code", ErrorCode.INTERNAL_SERVER_ERROR)
        message = str(error) or self.ERROR_MESSAGES.get(error_code, "Unknown error")
        status_code = self.get_status_code(error_code)

        self.log_error(
            error_code=error_code,
            message=message,
            request=request,
            additional_context={"error_type": type(error).__name__},
            level=logging.WARNING if status_code < 500 else logging.ERROR
        )

        return self.create_json_response(error_code, message)


# Global error handler instance
error_handler = ErrorHandler()
