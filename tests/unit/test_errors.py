"""Unit tests for the service error taxonomy."""

import pytest

from src.core.errors import (
    AlreadyReviewedError,
    DuplicateActiveError,
    ErrorCode,
    ErrorKind,
    ErrorSeverity,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    SelfRequestError,
    ServiceError,
    classify_error_with_response,
    error_kind_of,
    http_status_for,
)


@pytest.mark.unit
class TestErrorKinds:
    """Each error class carries a distinguishable kind and HTTP status."""

    @pytest.mark.parametrize(
        ("error_class", "kind", "status"),
        [
            (NotFoundError, ErrorKind.NOT_FOUND, 404),
            (ForbiddenError, ErrorKind.FORBIDDEN, 403),
            (InvalidStateError, ErrorKind.INVALID_STATE, 409),
            (SelfRequestError, ErrorKind.SELF_REQUEST, 400),
            (DuplicateActiveError, ErrorKind.DUPLICATE_ACTIVE, 409),
            (AlreadyReviewedError, ErrorKind.ALREADY_REVIEWED, 409),
            (InvalidInputError, ErrorKind.VALIDATION_ERROR, 422),
        ],
    )
    def test_kind_and_status(self, error_class, kind, status):
        error = error_class("boom")

        assert isinstance(error, ServiceError)
        assert error_kind_of(error) == kind
        assert http_status_for(error) == status
        assert str(error) == "boom"

    def test_unknown_exception(self):
        error = RuntimeError("disk on fire")

        assert error_kind_of(error) == ErrorKind.UNKNOWN
        assert http_status_for(error) == 500


@pytest.mark.unit
class TestClassifyErrorWithResponse:
    """Tests for classify_error_with_response function."""

    def test_service_error_keeps_message(self):
        response = classify_error_with_response(DuplicateActiveError("Already asked"))

        assert response.code == ErrorCode.ERR_DUPLICATE_ACTIVE
        assert response.kind == ErrorKind.DUPLICATE_ACTIVE
        assert response.message == "Already asked"
        assert response.suggestion
        assert response.severity == ErrorSeverity.LOW

    def test_unexpected_error_hides_details(self):
        response = classify_error_with_response(RuntimeError("sqlite3.OperationalError: database is locked"))

        assert response.code == ErrorCode.ERR_UNKNOWN
        assert "sqlite" not in response.message
        assert response.severity == ErrorSeverity.MEDIUM
