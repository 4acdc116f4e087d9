"""HTTP client for the 1C "DocumentAI" HTTP service."""

import logging
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from relay.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30
CREATE_DOCUMENT_PATH = "/hs/DocumentAI/CreateDocument"
TEST_PATH = "/hs/DocumentAI/Test"


class DocumentMetadata(BaseModel):
    original_name: str = "unknown"
    file_size: int = 0
    processed_by: str = "Document AI"
    confidence: float = 0.0


class DocumentData(BaseModel):
    """Document payload accepted by 1C."""

    id: str
    document_type: str = "unknown"
    created_at: datetime
    fields: dict[str, Any] = Field(default_factory=dict)
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)


class OneCResponse(BaseModel):
    success: bool = False
    message: str = ""
    reference: str | None = None
    error: str | None = None


class OneCClient:
    """Async client for 1C with HTTP basic auth.

    Args:
        base_url: 1C publication root, e.g. "https://erp.local/base"
        username: 1C user
        password: 1C password
        timeout: Request timeout in seconds (default 30)
        transport: Optional httpx transport (tests)
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self.timeout = timeout if timeout and timeout > 0 else DEFAULT_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            auth=(self.username, self.password),
            transport=self._transport,
        )

    async def send_document(self, document: DocumentData) -> OneCResponse:
        """Create a document in 1C.

        Returns:
            Parsed 1C answer; `success` may still be False if 1C rejected it

        Raises:
            ExternalServiceError: On transport failure, unparsable body or non-2xx
        """
        url = f"{self.base_url}{CREATE_DOCUMENT_PATH}"
        try:
            async with self._client() as client:
                response = await client.post(
                    url,
                    json=document.model_dump(mode="json"),
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as e:
            raise ExternalServiceError(
                "onec", "timeout", details={"detail": str(e) or "request timed out"}
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "onec", "unavailable", details={"detail": str(e)}
            ) from e

        try:
            onec_response = OneCResponse.model_validate_json(response.content)
        except PydanticValidationError as e:
            raise ExternalServiceError(
                "onec",
                "invalid_response",
                details={
                    "detail": f"cannot parse 1C response: {response.text[:200]}",
                    "http_status": response.status_code,
                },
            ) from e

        if not response.is_success:
            raise ExternalServiceError(
                "onec",
                "error",
                details={
                    "detail": f"1C returned {response.status_code}: {onec_response.error}",
                    "http_status": response.status_code,
                },
            )

        return onec_response

    async def test_connection(self) -> None:
        """Check that 1C answers 200 on the test endpoint.

        Raises:
            ExternalServiceError: If 1C is unreachable or answers non-200
        """
        url = f"{self.base_url}{TEST_PATH}"
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            raise ExternalServiceError(
                "onec", "timeout", details={"detail": str(e) or "request timed out"}
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "onec", "unavailable", details={"detail": str(e)}
            ) from e

        if response.status_code != 200:
            raise ExternalServiceError(
                "onec",
                "unavailable",
                details={
                    "detail": f"1C unavailable, status: {response.status_code}",
                    "http_status": response.status_code,
                },
            )
