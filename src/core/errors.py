"""Error taxonomy for the task sync core and user-facing classification."""

from enum import Enum

from pydantic import BaseModel


class TaskSyncError(Exception):
    """Base class for every error raised by the sync core."""


class TaskValidationError(TaskSyncError, ValueError):
    """A task draft violates a field constraint (empty title, tag limit, ...)."""


class RemoteError(TaskSyncError):
    """A remote task API call did not produce a usable payload."""


class RemoteUnreachableError(RemoteError):
    """The API could not be reached (no base URL, connection failure, timeout)."""


class RemoteRejectedError(RemoteError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"Task API rejected the request with HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MalformedPayloadError(RemoteError):
    """The API answered successfully but the body failed decoding or schema validation."""


class CacheUnavailableError(TaskSyncError):
    """The local cache could not be read or written."""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_REMOTE_UNREACHABLE = "ERR_REMOTE_UNREACHABLE"
    ERR_REMOTE_REJECTED = "ERR_REMOTE_REJECTED"
    ERR_TASK_NOT_FOUND = "ERR_TASK_NOT_FOUND"
    ERR_MALFORMED_PAYLOAD = "ERR_MALFORMED_PAYLOAD"
    ERR_CACHE_UNAVAILABLE = "ERR_CACHE_UNAVAILABLE"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_HTTP_NOT_FOUND = 404
_HTTP_SERVER_ERROR = 500


def classify_error(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify a sync core error and return a structured response for the UI.

    Args:
        exception: The exception raised by a coordinator operation

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    if isinstance(exception, TaskValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=str(exception) or "The task is not valid.",
            suggestion="Check the title, description and tags, then try again.",
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, RemoteUnreachableError):
        return ErrorResponse(
            code=ErrorCode.ERR_REMOTE_UNREACHABLE,
            message="The task server could not be reached.",
            suggestion="You are now working offline. Retry to save your change locally.",
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, RemoteRejectedError):
        if exception.status_code == _HTTP_NOT_FOUND:
            return ErrorResponse(
                code=ErrorCode.ERR_TASK_NOT_FOUND,
                message="That task no longer exists on the server.",
                suggestion="Pull to refresh to see the current list.",
                severity=ErrorSeverity.LOW,
            )
        severity = ErrorSeverity.HIGH if exception.status_code >= _HTTP_SERVER_ERROR else ErrorSeverity.MEDIUM
        return ErrorResponse(
            code=ErrorCode.ERR_REMOTE_REJECTED,
            message=f"The task server refused the change (HTTP {exception.status_code}).",
            suggestion="Please try again later.",
            severity=severity,
        )

    if isinstance(exception, MalformedPayloadError):
        return ErrorResponse(
            code=ErrorCode.ERR_MALFORMED_PAYLOAD,
            message="The task server sent an unexpected response.",
            suggestion="Please try again later. If the problem persists, contact support.",
            severity=ErrorSeverity.HIGH,
        )

    if isinstance(exception, CacheUnavailableError):
        return ErrorResponse(
            code=ErrorCode.ERR_CACHE_UNAVAILABLE,
            message="Saved tasks could not be read from this device.",
            suggestion="Reconnect to reload your tasks from the server.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
