"""Unit tests for exception hierarchy."""

from relay.core.exceptions import (
    BaseError,
    ClientError,
    ErrorCategory,
    ExternalServiceError,
    IntegrationDisabledError,
    PayloadTooLargeError,
    ServerError,
    UnsupportedFileTypeError,
    ValidationError,
)


class TestBaseError:
    """Tests for BaseError class."""

    def test_base_error_to_dict(self):
        """Test BaseError converts to RFC 7807 format."""
        error = BaseError(
            message="Test error",
            error_code="TEST_ERROR",
            category=ErrorCategory.CLIENT_ERROR,
            http_status=400,
            details={"detail": "Additional context"},
        )

        result = error.to_dict()

        assert str(error) == "Test error"
        assert result["type"] == "/errors/TEST_ERROR"
        assert result["title"] == "Test error"
        assert result["status"] == 400
        assert result["code"] == "TEST_ERROR"
        assert result["category"] == "client_error"
        assert result["detail"] == "Additional context"
        assert result["retryable"] is False

    def test_missing_detail_is_none(self):
        """Test to_dict tolerates empty details."""
        error = ClientError("Bad", "BAD")
        assert error.to_dict()["detail"] is None
        assert error.http_status == 400


class TestClientErrors:
    """Tests for 4xx errors raised by upload validation."""

    def test_validation_error(self):
        """Test ValidationError is 422 and records the field."""
        error = ValidationError("Document description is required", field="message")

        assert error.http_status == 422
        assert error.error_code == "VALIDATION_ERROR"
        assert error.details["field"] == "message"
        assert error.retryable is False

    def test_payload_too_large(self):
        """Test PayloadTooLargeError is 413 with sizes in details."""
        error = PayloadTooLargeError(max_size_mb=50, actual_size_mb=51.5)

        assert error.http_status == 413
        assert "51.50MB" in error.message
        assert error.details == {"max_size_mb": 50, "actual_size_mb": 51.5}

    def test_unsupported_file_type(self):
        """Test UnsupportedFileTypeError is 415 and keeps extra details."""
        error = UnsupportedFileTypeError(
            "notes.txt", "extension .txt is not allowed", details={"magic_bytes": "00"}
        )

        assert error.http_status == 415
        assert error.error_code == "UNSUPPORTED_FILE_TYPE"
        assert error.details["filename"] == "notes.txt"
        assert error.details["magic_bytes"] == "00"
        assert error.to_dict()["detail"] == "extension .txt is not allowed"
        assert isinstance(error, ClientError)


class TestServerErrors:
    """Tests for 5xx errors."""

    def test_external_timeout_is_504(self):
        """Test timeouts map to 504 Gateway Timeout."""
        error = ExternalServiceError("n8n", "timeout")

        assert error.http_status == 504
        assert error.error_code == "N8N_TIMEOUT"
        assert error.retryable is True
        assert error.category == ErrorCategory.EXTERNAL_SERVICE

    def test_external_error_is_502(self):
        """Test other upstream failures map to 502 Bad Gateway."""
        error = ExternalServiceError("onec", "invalid_response", details={"detail": "x"})

        assert error.http_status == 502
        assert error.error_code == "ONEC_INVALID_RESPONSE"
        assert error.details["service"] == "onec"
        assert error.details["detail"] == "x"
        assert isinstance(error, ServerError)

    def test_integration_disabled(self):
        """Test IntegrationDisabledError is 503."""
        error = IntegrationDisabledError()

        assert error.http_status == 503
        assert error.error_code == "INTEGRATION_DISABLED"
        assert error.details == {"integration": "onec"}
