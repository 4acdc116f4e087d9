"""Pydantic request/response schemas for API endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://www.rfc-editor.org/rfc/rfc7807
    """

    type: str = Field(..., description="URI reference identifying the problem type")
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code for this problem")
    detail: Optional[str] = Field(
        None, description="Human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None, description="Request path where the problem occurred"
    )

    # Extension members (allowed by RFC 7807)
    code: str = Field(..., description="Application-specific error code")
    category: str = Field(
        ..., description="Error category (client_error, server_error, etc.)"
    )
    retryable: bool = Field(
        default=False, description="Whether the request can be retried"
    )
    trace_id: Optional[str] = Field(
        None, description="Trace ID echoed in the X-Trace-ID header"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "/errors/UNSUPPORTED_FILE_TYPE",
                "title": "Only PDF, JPG, JPEG and PNG files are supported",
                "status": 415,
                "detail": "extension .docx is not allowed",
                "instance": "/upload",
                "code": "UNSUPPORTED_FILE_TYPE",
                "category": "client_error",
                "retryable": False,
                "trace_id": "a1b2c3d4-e5f6-7890-abcd-ef1234567890",
            }
        }
    )


class APIResponse(BaseModel):
    """Envelope used by every successful JSON endpoint."""

    status: str = Field(..., description="'success' for handled requests")
    message: Optional[str] = Field(None, description="Human-readable outcome")
    data: Optional[Any] = Field(None, description="Endpoint-specific payload")

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class OneCSendRequest(BaseModel):
    """Body of POST /onec/send."""

    document_id: str = Field("", description="Result or document identifier")
    data: dict[str, Any] = Field(
        default_factory=dict, description="n8n payload to forward to 1C"
    )
