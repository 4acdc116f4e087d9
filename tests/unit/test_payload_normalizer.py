"""Unit tests for webhook payload normalization."""

import json
import logging

import pytest
from relay.core.config import EMPTY_TEXT_PLACEHOLDER
from relay.processors.payload_normalizer import (
    NormalizedPayload,
    format_field_value,
    normalize_webhook_payload,
    synthesize_text,
)


def _normalize(payload) -> NormalizedPayload:
    return normalize_webhook_payload(json.dumps(payload).encode("utf-8"))


class TestCanonicalTextFields:
    """Tests for payloads carrying `text` or `message`."""

    def test_text_used_verbatim(self):
        """Test non-empty `text` becomes the record text unchanged."""
        normalized = _normalize({"text": "  Invoice #42\nTotal: 100 ", "message": "ignored"})

        assert normalized.result.text == "  Invoice #42\nTotal: 100 "
        assert normalized.structured is True

    def test_message_used_when_text_missing(self):
        """Test `message` is the fallback for a missing `text`."""
        normalized = _normalize({"message": "Document processed", "foo": "bar"})
        assert normalized.result.text == "Document processed"

    def test_message_used_when_text_empty(self):
        """Test empty `text` falls through to `message`."""
        normalized = _normalize({"text": "", "message": "fallback"})
        assert normalized.result.text == "fallback"

    def test_non_string_text_is_not_canonical(self):
        """Test a numeric `text` value is rendered as a field instead."""
        normalized = _normalize({"text": 5})
        assert normalized.result.text == "text: 5.00"


class TestSynthesizedText:
    """Tests for payloads without `text`/`message`."""

    def test_one_line_per_field_sorted(self):
        """Test every non-reserved field renders as a sorted "key: value" line."""
        normalized = _normalize(
            {
                "supplier": "ACME",
                "amount": 12.5,
                "count": 3,
                "paid": True,
                "lines": [1, "x"],
                "meta": {"b": 1, "a": "я"},
                "note": None,
            }
        )

        assert normalized.result.text.split("\n") == [
            "amount: 12.50",
            "count: 3.00",
            'lines: [1,"x"]',
            'meta: {"a":"я","b":1}',
            "note: null",
            "paid: true",
            "supplier: ACME",
        ]

    def test_reserved_keys_excluded(self):
        """Test bookkeeping keys never appear in the text."""
        normalized = _normalize(
            {
                "status": "done",
                "webhookUrl": "https://n8n/webhook",
                "executionMode": "production",
                "timestamp": "2025-01-01T00:00:00Z",
                "id": "upstream-1",
                "result": "ok",
            }
        )

        assert normalized.result.text == "result: ok"

    def test_empty_strings_skipped(self):
        """Test empty string values produce no line."""
        normalized = _normalize({"a": "", "b": "value"})
        assert normalized.result.text == "b: value"

    def test_synthesize_text_is_deterministic(self):
        """Test key order in the payload does not change the output."""
        first = synthesize_text({"b": 1, "a": 2})
        second = synthesize_text({"a": 2, "b": 1})
        assert first == second == "a: 2.00\nb: 1.00"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("text", "text"),
            ("", None),
            (False, "false"),
            (1.005, "1.00"),
            (-7, "-7.00"),
            ({}, "{}"),
            ([], "[]"),
            (None, "null"),
        ],
    )
    def test_format_field_value(self, value, expected):
        """Test value rendering rules per JSON type."""
        assert format_field_value(value) == expected


class TestStatus:
    """Tests for status extraction."""

    def test_status_from_payload(self):
        """Test a non-empty string status is kept."""
        normalized = _normalize({"text": "x", "status": "error"})
        assert normalized.result.status == "error"

    def test_status_defaults_to_completed(self):
        """Test missing or non-string status falls back to completed."""
        assert _normalize({"text": "x"}).result.status == "completed"
        assert _normalize({"text": "x", "status": ""}).result.status == "completed"
        assert _normalize({"text": "x", "status": 1}).result.status == "completed"

    def test_only_status_gives_placeholder(self):
        """Test {"status": "error"} yields placeholder text and status error."""
        normalized = _normalize({"status": "error"})

        assert normalized.result.text == EMPTY_TEXT_PLACEHOLDER
        assert normalized.result.status == "error"


class TestRawPayloads:
    """Tests for bodies that are not JSON objects."""

    def test_plain_text(self):
        """Test raw `Hello` is stored verbatim with status completed."""
        normalized = normalize_webhook_payload(b"Hello")

        assert normalized.result.text == "Hello"
        assert normalized.result.status == "completed"
        assert normalized.structured is False
        assert normalized.data == {"text": "Hello"}

    def test_malformed_json_kept_as_text(self):
        """Test truncated JSON is treated as plain text."""
        normalized = normalize_webhook_payload(b'{"text": "abc"')
        assert normalized.result.text == '{"text": "abc"'

    @pytest.mark.parametrize("body", [b"[1, 2]", b'"quoted"', b"42", b"null"])
    def test_non_object_json_kept_as_text(self, body):
        """Test JSON arrays and scalars are not structured payloads."""
        normalized = normalize_webhook_payload(body)

        assert normalized.structured is False
        assert normalized.result.text == body.decode()

    def test_nan_literal_kept_as_text(self):
        """Test non-standard JSON constants are not accepted as structured."""
        normalized = normalize_webhook_payload(b'{"score": NaN}')
        assert normalized.result.text == '{"score": NaN}'

    @pytest.mark.parametrize("body", [b'{"amount": 1e400}', b'{"amount": -1e400}'])
    def test_overflowing_number_kept_as_text(self, body):
        """Test numbers outside the float range make the body plain text."""
        normalized = normalize_webhook_payload(body)

        assert normalized.structured is False
        assert normalized.result.text == body.decode()

    def test_invalid_utf8_replaced(self):
        """Test undecodable bytes do not break normalization."""
        normalized = normalize_webhook_payload(b"abc\xff")
        assert normalized.result.text == "abc�"

    def test_empty_body_gives_placeholder(self, caplog):
        """Test empty body produces the placeholder and a warning."""
        with caplog.at_level(logging.WARNING):
            normalized = normalize_webhook_payload(b"")

        assert normalized.result.text == EMPTY_TEXT_PLACEHOLDER
        assert any(r.levelno == logging.WARNING for r in caplog.records)


class TestIdentity:
    """Tests for server-assigned id and timestamp."""

    def test_upstream_id_ignored(self):
        """Test payload id never becomes the record id."""
        normalized = _normalize({"text": "x", "id": "upstream-1"})

        assert normalized.result.id != "upstream-1"
        assert normalized.result.id.startswith("res_")

    def test_ids_unique(self):
        """Test each call yields a fresh id."""
        ids = {normalize_webhook_payload(b"same").result.id for _ in range(200)}
        assert len(ids) == 200

    def test_timestamp_is_timezone_aware(self):
        """Test timestamps are assigned in UTC."""
        result = normalize_webhook_payload(b"x").result
        assert result.timestamp.tzinfo is not None


class TestLoneSurrogates:
    """Tests for \\uD800-\\uDFFF escapes that do not form a pair."""

    def test_in_text(self):
        """Test a lone surrogate in `text` becomes U+FFFD."""
        normalized = normalize_webhook_payload(b'{"text": "bad \\ud800 char"}')

        assert normalized.result.text == "bad � char"
        normalized.result.text.encode("utf-8")

    def test_in_synthesized_field(self):
        """Test lone surrogates in keys and values are replaced."""
        normalized = normalize_webhook_payload(b'{"n\\udc00te": "\\udfff"}')

        assert normalized.result.text == "n�te: �"
        assert normalized.data == {"n�te": "�"}

    def test_in_status(self):
        """Test the stored status is always encodable."""
        normalized = normalize_webhook_payload(b'{"text": "ok", "status": "\\ud800"}')

        assert normalized.result.status == "�"
        assert json.dumps(normalized.result.to_public_dict(), ensure_ascii=False).encode("utf-8")

    def test_in_nested_value(self):
        """Test nested lists and objects are cleaned as well."""
        normalized = normalize_webhook_payload(b'{"items": ["\\ud800", {"k": "\\udbff"}]}')

        assert normalized.result.text == 'items: ["�",{"k":"�"}]'

    def test_valid_pair_kept(self):
        """Test an escaped surrogate pair still decodes to one character."""
        normalized = normalize_webhook_payload(b'{"text": "\\ud83d\\ude00"}')

        assert normalized.result.text == "\U0001F600"
