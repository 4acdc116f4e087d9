import logging
from typing import BinaryIO

import httpx
from core.settings import n8n_settings
from relay.core.config import EXECUTION_MODE
from relay.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class N8nClient:
    """Forwards uploaded documents to the n8n workflow webhook.

    The workflow processes the document asynchronously and later calls back
    POST /webhook with the result; this client only hands the file over.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url or n8n_settings.N8N_WEBHOOK_URL
        self.timeout = timeout or n8n_settings.N8N_TIMEOUT
        self._transport = transport

        logger.info(f"N8nClient initialized with URL: {self.url}, timeout: {self.timeout}s")

    async def forward_document(
        self,
        message: str,
        file_name: str,
        file: BinaryIO,
        content_type: str | None = None,
    ) -> int:
        """Send the document and the user's instruction to n8n.

        Args:
            message: Free-text instruction typed by the user
            file_name: Original upload file name
            file: Readable binary stream with the document
            content_type: MIME type reported by the browser

        Returns:
            int: HTTP status code returned by n8n (2xx)

        Raises:
            ExternalServiceError: On timeout, connection failure or non-2xx status
        """
        file.seek(0)
        data = {
            "message": message,
            "fileName": file_name,
            "webhookUrl": self.url,
            "executionMode": EXECUTION_MODE,
        }
        files = {
            "file": (file_name, file, content_type or "application/octet-stream")
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                logger.info(
                    f"Forwarding document to n8n: {file_name}",
                    extra={"service": "n8n", "file_name": file_name},
                )
                response = await client.post(self.url, data=data, files=files)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ExternalServiceError(
                "n8n", "timeout", details={"detail": str(e) or "request timed out"}
            ) from e
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                "n8n",
                "error",
                details={
                    "detail": f"n8n returned {e.response.status_code}: {e.response.text}",
                    "http_status": e.response.status_code,
                },
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(
                "n8n", "unavailable", details={"detail": str(e)}
            ) from e

        logger.info(
            f"Document delivered to n8n. Status: {response.status_code}",
            extra={"service": "n8n", "http_status": response.status_code},
        )
        return response.status_code


def create_n8n_client_from_env() -> N8nClient:
    """Factory function to create N8nClient from centralized settings."""
    return N8nClient(
        url=n8n_settings.N8N_WEBHOOK_URL,
        timeout=n8n_settings.N8N_TIMEOUT,
    )
