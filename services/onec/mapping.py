"""Mapping of n8n result payloads onto 1C documents."""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any

from services.onec.client import DocumentData, DocumentMetadata

logger = logging.getLogger(__name__)

# Top-level payload keys copied into document fields as-is
PASSTHROUGH_KEYS = ("dates", "amounts", "contacts")
TARGET_OBJECT_FIELD = "_target_object"


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def get_str(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def get_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    return int(value) if _is_number(value) else default


def get_float(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key)
    return float(value) if _is_number(value) else default


def generate_document_id() -> str:
    return f"doc_{time.time_ns()}"


def parse_n8n_response(data: dict[str, Any]) -> DocumentData:
    """Build a 1C document from an n8n result payload.

    Fields come from the `extracted_data` object plus the `dates`, `amounts`
    and `contacts` keys when present. Missing metadata falls back to defaults.
    """
    fields: dict[str, Any] = {}

    extracted = data.get("extracted_data")
    if isinstance(extracted, dict):
        fields.update(extracted)

    for key in PASSTHROUGH_KEYS:
        if key in data:
            fields[key] = data[key]

    metadata = DocumentMetadata(
        original_name=get_str(data, "original_name", "unknown"),
        file_size=get_int(data, "file_size", 0),
        processed_by="Document AI",
        confidence=get_float(data, "confidence", 0.0),
    )

    return DocumentData(
        id=get_str(data, "id", "") or generate_document_id(),
        document_type=get_str(data, "document_type", "unknown"),
        created_at=datetime.now(timezone.utc),
        fields=fields,
        metadata=metadata,
    )


def apply_field_mapping(
    document: DocumentData, target_object: str, field_map: dict[str, str]
) -> DocumentData:
    """Rename document fields for a 1C target object.

    Mapped fields take their target names, unmapped fields are kept, and the
    target object name is recorded under `_target_object`.
    """
    mapped: dict[str, Any] = {}

    for source, target in field_map.items():
        if source in document.fields:
            mapped[target] = document.fields[source]
            logger.debug("Field mapping: %s -> %s", source, target)

    for key, value in document.fields.items():
        if key not in field_map:
            mapped[key] = value

    mapped[TARGET_OBJECT_FIELD] = target_object
    return document.model_copy(update={"fields": mapped})
