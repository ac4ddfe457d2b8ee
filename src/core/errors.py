"""Error taxonomy for swap lifecycle and feedback operations."""

from enum import Enum, StrEnum

from pydantic import BaseModel


class ErrorKind(StrEnum):
    """Programmatically distinguishable kinds of rejected operations."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_STATE = "invalid_state"
    SELF_REQUEST = "self_request"
    DUPLICATE_ACTIVE = "duplicate_active"
    ALREADY_REVIEWED = "already_reviewed"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"
    ERR_INVALID_STATE = "ERR_INVALID_STATE"
    ERR_SELF_REQUEST = "ERR_SELF_REQUEST"
    ERR_DUPLICATE_ACTIVE = "ERR_DUPLICATE_ACTIVE"
    ERR_ALREADY_REVIEWED = "ERR_ALREADY_REVIEWED"
    ERR_VALIDATION = "ERR_VALIDATION"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    kind: ErrorKind
    message: str
    suggestion: str
    severity: ErrorSeverity


class ServiceError(Exception):
    """Base class for every rejected service operation."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    code: str = ErrorCode.ERR_UNKNOWN

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """The referenced swap, feedback, user or skill does not exist."""

    kind = ErrorKind.NOT_FOUND
    code = ErrorCode.ERR_NOT_FOUND


class ForbiddenError(ServiceError):
    """The actor is not allowed to perform this operation on this record."""

    kind = ErrorKind.FORBIDDEN
    code = ErrorCode.ERR_FORBIDDEN


class InvalidStateError(ServiceError):
    """The operation is not legal from the record's current status."""

    kind = ErrorKind.INVALID_STATE
    code = ErrorCode.ERR_INVALID_STATE


class SelfRequestError(ServiceError):
    """A user tried to send a swap request to themselves."""

    kind = ErrorKind.SELF_REQUEST
    code = ErrorCode.ERR_SELF_REQUEST


class DuplicateActiveError(ServiceError):
    """An active request already exists for the same participants and skills."""

    kind = ErrorKind.DUPLICATE_ACTIVE
    code = ErrorCode.ERR_DUPLICATE_ACTIVE


class AlreadyReviewedError(ServiceError):
    """The reviewer already left feedback for this swap."""

    kind = ErrorKind.ALREADY_REVIEWED
    code = ErrorCode.ERR_ALREADY_REVIEWED


class InvalidInputError(ServiceError):
    """Malformed input such as an out-of-range rating or over-long text."""

    kind = ErrorKind.VALIDATION_ERROR
    code = ErrorCode.ERR_VALIDATION


_RESPONSES: dict[ErrorKind, tuple[str, ErrorSeverity]] = {
    ErrorKind.NOT_FOUND: ("Check the id and try again.", ErrorSeverity.LOW),
    ErrorKind.FORBIDDEN: ("Only the participants allowed for this action can perform it.", ErrorSeverity.MEDIUM),
    ErrorKind.INVALID_STATE: ("Refresh the request to see its current status and try again.", ErrorSeverity.LOW),
    ErrorKind.SELF_REQUEST: ("Pick another user to swap skills with.", ErrorSeverity.LOW),
    ErrorKind.DUPLICATE_ACTIVE: (
        "Wait for the existing request to be resolved before sending it again.",
        ErrorSeverity.LOW,
    ),
    ErrorKind.ALREADY_REVIEWED: ("Edit your existing feedback instead.", ErrorSeverity.LOW),
    ErrorKind.VALIDATION_ERROR: ("Fix the highlighted fields and resubmit.", ErrorSeverity.LOW),
}

_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.SELF_REQUEST: 400,
    ErrorKind.DUPLICATE_ACTIVE: 409,
    ErrorKind.ALREADY_REVIEWED: 409,
    ErrorKind.VALIDATION_ERROR: 422,
    ErrorKind.UNKNOWN: 500,
}


def error_kind_of(exception: Exception) -> ErrorKind:
    """Return the error kind for an exception, falling back to UNKNOWN."""
    if isinstance(exception, ServiceError):
        return exception.kind
    return ErrorKind.UNKNOWN


def http_status_for(exception: Exception) -> int:
    """Map an exception to the HTTP status code used by the API layer."""
    return _HTTP_STATUS[error_kind_of(exception)]


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Service errors keep their own message. Anything else is reported as an
    unexpected error so that storage details never leak to callers.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, kind, message, suggestion, and severity
    """
    if isinstance(exception, ServiceError):
        suggestion, severity = _RESPONSES[exception.kind]
        return ErrorResponse(
            code=exception.code,
            kind=exception.kind,
            message=exception.message,
            suggestion=suggestion,
            severity=severity,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        kind=ErrorKind.UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
