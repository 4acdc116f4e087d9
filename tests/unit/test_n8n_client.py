"""Unit tests for the n8n upload client."""

import asyncio
import io

import httpx
import pytest
from relay.core.exceptions import ExternalServiceError
from services.n8n_client import N8nClient

N8N_URL = "https://n8n.example.com/webhook/documents"


def _client(handler) -> N8nClient:
    return N8nClient(url=N8N_URL, timeout=5, transport=httpx.MockTransport(handler))


def _forward(client: N8nClient, content: bytes = b"%PDF-1.4 body") -> int:
    return asyncio.run(
        client.forward_document(
            message="Extract the invoice total",
            file_name="invoice.pdf",
            file=io.BytesIO(content),
            content_type="application/pdf",
        )
    )


class TestForwardDocument:
    """Tests for N8nClient.forward_document."""

    def test_multipart_fields(self):
        """Test the form carries message, fileName, webhookUrl, executionMode and the file."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = str(request.url)
            captured["content_type"] = request.headers["content-type"]
            captured["body"] = request.content
            return httpx.Response(200, json={"message": "Workflow was started"})

        assert _forward(_client(handler)) == 200

        body = captured["body"]
        assert captured["method"] == "POST"
        assert captured["url"] == N8N_URL
        assert captured["content_type"].startswith("multipart/form-data")
        assert b'name="message"' in body
        assert b"Extract the invoice total" in body
        assert b'name="fileName"' in body
        assert b'name="webhookUrl"' in body
        assert N8N_URL.encode() in body
        assert b'name="executionMode"' in body
        assert b"production" in body
        assert b'name="file"; filename="invoice.pdf"' in body
        assert b"%PDF-1.4 body" in body

    def test_stream_rewound_before_send(self):
        """Test a partially read stream is sent in full."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = request.content
            return httpx.Response(200)

        stream = io.BytesIO(b"%PDF-1.7 whole file")
        stream.read(4)
        asyncio.run(
            _client(handler).forward_document("msg", "a.pdf", stream, "application/pdf")
        )

        assert b"%PDF-1.7 whole file" in captured["body"]

    def test_error_status_raises_502(self):
        """Test non-2xx answers become ExternalServiceError with 502."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="workflow crashed")

        with pytest.raises(ExternalServiceError) as exc_info:
            _forward(_client(handler))

        error = exc_info.value
        assert error.http_status == 502
        assert error.error_code == "N8N_ERROR"
        assert error.details["http_status"] == 500
        assert "workflow crashed" in error.details["detail"]

    def test_timeout_raises_504(self):
        """Test timeouts become ExternalServiceError with 504."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            _forward(_client(handler))

        assert exc_info.value.http_status == 504
        assert exc_info.value.error_code == "N8N_TIMEOUT"

    def test_connection_error_raises_502(self):
        """Test unreachable n8n becomes ExternalServiceError with 502."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            _forward(_client(handler))

        assert exc_info.value.http_status == 502
        assert exc_info.value.error_code == "N8N_UNAVAILABLE"
