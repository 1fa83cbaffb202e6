"""Unit tests for the error taxonomy and classification."""

import pytest

from src.core.errors import (
    CacheUnavailableError,
    ErrorCode,
    ErrorSeverity,
    MalformedPayloadError,
    RemoteError,
    RemoteRejectedError,
    RemoteUnreachableError,
    TaskSyncError,
    TaskValidationError,
    classify_error,
)


@pytest.mark.unit
class TestErrorHierarchy:
    """Tests for the error classes."""

    def test_remote_errors_share_a_base(self):
        for error_cls in (RemoteUnreachableError, MalformedPayloadError):
            assert issubclass(error_cls, RemoteError)
        assert isinstance(RemoteRejectedError(500), RemoteError)

    def test_everything_is_a_task_sync_error(self):
        for error in (TaskValidationError("x"), RemoteUnreachableError("x"), CacheUnavailableError("x")):
            assert isinstance(error, TaskSyncError)

    def test_rejected_error_message(self):
        error = RemoteRejectedError(503, "maintenance")

        assert error.status_code == 503
        assert str(error) == "Task API rejected the request with HTTP 503: maintenance"


@pytest.mark.unit
class TestClassifyError:
    """Tests for classify_error."""

    def test_validation(self):
        response = classify_error(TaskValidationError("Please enter a task title"))

        assert response.code == ErrorCode.ERR_VALIDATION
        assert response.message == "Please enter a task title"
        assert response.severity == ErrorSeverity.LOW

    def test_unreachable(self):
        response = classify_error(RemoteUnreachableError("down"))

        assert response.code == ErrorCode.ERR_REMOTE_UNREACHABLE
        assert "offline" in response.suggestion.lower()

    def test_not_found(self):
        assert classify_error(RemoteRejectedError(404)).code == ErrorCode.ERR_TASK_NOT_FOUND

    def test_server_error_is_high_severity(self):
        response = classify_error(RemoteRejectedError(502))

        assert response.code == ErrorCode.ERR_REMOTE_REJECTED
        assert response.severity == ErrorSeverity.HIGH
        assert "502" in response.message

    def test_client_error_is_medium_severity(self):
        assert classify_error(RemoteRejectedError(422)).severity == ErrorSeverity.MEDIUM

    def test_malformed(self):
        assert classify_error(MalformedPayloadError("bad")).code == ErrorCode.ERR_MALFORMED_PAYLOAD

    def test_cache(self):
        assert classify_error(CacheUnavailableError("bad")).code == ErrorCode.ERR_CACHE_UNAVAILABLE

    def test_unknown(self):
        assert classify_error(RuntimeError("boom")).code == ErrorCode.ERR_UNKNOWN
