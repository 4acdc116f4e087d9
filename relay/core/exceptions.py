"""Exception hierarchy for the Document AI relay.

Every error the HTTP layer renders derives from BaseError and knows its own
status code and RFC 7807 representation. Payload normalization never raises;
these errors cover the upload relay and the 1C integration.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCategory(str, Enum):
    """Coarse error class reported in the `category` problem field."""

    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    EXTERNAL_SERVICE = "external_service"


class BaseError(Exception):
    """Root of all relay errors.

    Attributes:
        message: Problem title shown to the caller
        error_code: Stable machine-readable code, also used in the problem `type`
        category: ErrorCategory of the failure
        http_status: Status code of the error response
        details: Extra context; a `detail` entry becomes the problem detail
        retryable: True when repeating the same request may succeed
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        http_status: int,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.http_status = http_status
        self.details = details or {}
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Problem Details fields for this error (without instance/trace_id)."""
        return {
            "type": f"/errors/{self.error_code}",
            "title": self.message,
            "status": self.http_status,
            "code": self.error_code,
            "detail": self.details.get("detail"),
            "category": self.category.value,
            "retryable": self.retryable,
        }


class ClientError(BaseError):
    """The request itself is wrong (4xx); repeating it cannot help."""

    def __init__(
        self,
        message: str,
        error_code: str,
        http_status: int = 400,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            error_code,
            ErrorCategory.CLIENT_ERROR,
            http_status,
            details=details,
        )


class ValidationError(ClientError):
    """A form field is missing or invalid (422).

    Args:
        message: What is wrong with the field
        field: Form field name ("message", "file")
        details: Extra context merged with the field name
    """

    def __init__(
        self, message: str, field: str, details: Optional[dict[str, Any]] = None
    ):
        super().__init__(
            message,
            "VALIDATION_ERROR",
            http_status=422,
            details={**(details or {}), "field": field},
        )


class PayloadTooLargeError(ClientError):
    """Uploaded document exceeds MAX_FILE_SIZE_MB (413)."""

    def __init__(self, max_size_mb: int, actual_size_mb: float):
        super().__init__(
            f"Document is {actual_size_mb:.2f}MB, the limit is {max_size_mb}MB",
            "PAYLOAD_TOO_LARGE",
            http_status=413,
            details={"max_size_mb": max_size_mb, "actual_size_mb": actual_size_mb},
        )


class UnsupportedFileTypeError(ClientError):
    """Uploaded document is not a PDF, JPEG or PNG (415)."""

    def __init__(
        self,
        filename: str | None,
        reason: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            "Only PDF, JPG, JPEG and PNG files are supported",
            "UNSUPPORTED_FILE_TYPE",
            http_status=415,
            details={**(details or {}), "filename": filename, "detail": reason},
        )


class ServerError(BaseError):
    """The relay or one of its upstreams failed (5xx)."""

    def __init__(
        self,
        message: str,
        error_code: str,
        http_status: int = 500,
        details: Optional[dict[str, Any]] = None,
        retryable: bool = False,
        category: ErrorCategory = ErrorCategory.SERVER_ERROR,
    ):
        super().__init__(
            message,
            error_code,
            category,
            http_status,
            details=details,
            retryable=retryable,
        )


# Upstream failure kind -> status returned to our caller
_UPSTREAM_STATUS = {"timeout": 504}


class ExternalServiceError(ServerError):
    """n8n or 1C failed, timed out or answered with garbage.

    Timeouts map to 504 Gateway Timeout, everything else to 502 Bad Gateway.

    Args:
        service_name: "n8n" or "onec"
        error_type: "timeout", "unavailable", "error" or "invalid_response"
        details: Extra context, usually a `detail` string and upstream `http_status`
    """

    def __init__(
        self,
        service_name: str,
        error_type: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            f"{service_name} request failed: {error_type}",
            f"{service_name.upper()}_{error_type.upper()}",
            http_status=_UPSTREAM_STATUS.get(error_type, 502),
            details={
                **(details or {}),
                "service": service_name,
                "error_type": error_type,
            },
            retryable=True,
            category=ErrorCategory.EXTERNAL_SERVICE,
        )


class IntegrationDisabledError(ServerError):
    """An optional integration is switched off or not configured (503)."""

    def __init__(self, integration: str = "onec"):
        super().__init__(
            f"{integration} integration is disabled",
            "INTEGRATION_DISABLED",
            http_status=503,
            details={"integration": integration},
        )
