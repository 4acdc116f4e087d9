"""
Normalize n8n callback payloads into ProcessingResult records.

n8n workflows answer with whatever shape the workflow author chose: a JSON
object with a `text` or `message` field, an object of extracted fields, or
plain text. Every payload, including an empty one, yields exactly one record.
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from relay.core.config import (
    DEFAULT_STATUS,
    EMPTY_TEXT_PLACEHOLDER,
    EXCLUDED_PAYLOAD_KEYS,
)
from relay.models.dto import ProcessingResult, generate_result_id, utc_now

logger = logging.getLogger(__name__)

# json.loads joins valid surrogate pairs; any left over cannot be encoded as UTF-8
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


@dataclass(frozen=True)
class NormalizedPayload:
    """A normalized record plus the structured view of the payload.

    `data` is the decoded JSON object, or {"text": raw} when the payload was
    not a JSON object. The 1C integration consumes it.
    """

    result: ProcessingResult
    data: dict[str, Any]
    structured: bool


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {literal}")
    return value


def _clean_str(value: str) -> str:
    return _LONE_SURROGATE.sub("\ufffd", value)


def _clean_strings(value: Any) -> Any:
    if isinstance(value, str):
        return _clean_str(value)
    if isinstance(value, dict):
        return {_clean_str(k): _clean_strings(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_clean_strings(item) for item in value]
    return value


def _try_parse_object(raw: str) -> dict[str, Any] | None:
    try:
        obj = json.loads(
            raw, parse_constant=_reject_constant, parse_float=_finite_float
        )
        if not isinstance(obj, dict):
            return None
        return _clean_strings(obj)
    except (ValueError, RecursionError):
        return None


def _non_empty_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def format_field_value(value: Any) -> str | None:
    """Render one payload value for the synthesized result text.

    Returns None for values that produce no line (empty strings).
    """
    if isinstance(value, str):
        return value or None
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}.00"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (dict, list)):
        return json.dumps(
            value, ensure_ascii=False, sort_keys=True, separators=(",", ":")
        )
    if value is None:
        return "null"
    return str(value)


def synthesize_text(data: dict[str, Any]) -> str:
    """Build "key: value" lines for every non-bookkeeping field.

    Keys are sorted so the same payload always renders the same text.
    """
    parts = []
    for key in sorted(data):
        if key in EXCLUDED_PAYLOAD_KEYS:
            continue
        rendered = format_field_value(data[key])
        if rendered is not None:
            parts.append(f"{key}: {rendered}")
    return "\n".join(parts)


def normalize_webhook_payload(body: bytes) -> NormalizedPayload:
    """Turn a raw callback body into a ProcessingResult.

    Strategy:
      1) JSON object with non-empty string `text` -> verbatim.
      2) Else non-empty string `message` -> verbatim.
      3) Else "key: value" lines over the remaining fields.
      4) Not a JSON object -> the whole body is the text.

    `status` is taken from the payload when it is a non-empty string. The id
    and timestamp are always assigned here; an upstream `id` is ignored.

    Args:
        body: Raw request body as received from n8n

    Returns:
        NormalizedPayload with the record and the structured payload view
    """
    raw = body.decode("utf-8", errors="replace")
    data = _try_parse_object(raw)
    status = DEFAULT_STATUS

    if data is not None:
        structured = True
        text = (
            _non_empty_str(data, "text")
            or _non_empty_str(data, "message")
            or synthesize_text(data)
        )
        status = _non_empty_str(data, "status") or DEFAULT_STATUS
    else:
        structured = False
        text = raw
        data = {"text": raw}

    if not text:
        logger.warning(
            "Empty result text, substituting placeholder (payload keys: %s)",
            sorted(data) if structured else [],
            extra={"payload_bytes": len(body), "status": status},
        )
        text = EMPTY_TEXT_PLACEHOLDER

    result = ProcessingResult(
        id=generate_result_id(),
        text=text,
        timestamp=utc_now(),
        status=status,
    )
    return NormalizedPayload(result=result, data=data, structured=structured)
