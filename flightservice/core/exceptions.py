"""Custom exceptions for the flight service."""

from flightservice.core.error_handler import ErrorCode


class FlightServiceError(Exception):
    """Base class for errors surfaced to API clients with a specific error code."""

    error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR


class InvalidDateFormat(FlightServiceError):
    """Raised when a date token is not of the form 'Www Mmm dd'."""

    error_code = ErrorCode.INVALID_DATE_FORMAT


class DatabaseNotPopulated(FlightServiceError):
    """Raised when the flight data source reports it has not been populated."""

    error_code = ErrorCode.DATABASE_NOT_POPULATED


class FlightSegmentNotFound(FlightServiceError):
    """Raised when reward miles are requested for an unknown flight segment."""

    error_code = ErrorCode.FLIGHT_SEGMENT_NOT_FOUND


class SignatureError(FlightServiceError):
    """Base class for signed-request verification failures."""

    error_code = ErrorCode.SIGNATURE_MISMATCH


class BodyHashMismatch(SignatureError):
    error_code = ErrorCode.BODY_HASH_MISMATCH


class SignatureMismatch(SignatureError):
    error_code = ErrorCode.SIGNATURE_MISMATCH


class ExpiredOrInvalidTimestamp(SignatureError):
    error_code = ErrorCode.EXPIRED_OR_INVALID_TIMESTAMP
