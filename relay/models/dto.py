"""
Typed records stored in the result history.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from relay.core.config import DEFAULT_STATUS, RESULT_ID_PREFIX


def generate_result_id() -> str:
    """Return a fresh result identifier, never reused within the process."""
    return f"{RESULT_ID_PREFIX}{uuid.uuid4().hex}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class IntegrationResult(BaseModel):
    """
    Outcome of forwarding one result to 1C.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = False
    document_id: str = ""
    onec_ref: str | None = None
    error_message: str | None = None


class ProcessingResult(BaseModel):
    """
    One processing result received from n8n.

    Frozen: snapshots of the store share instances with the store itself.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_result_id)
    text: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)
    status: str = DEFAULT_STATUS
    onec_status: IntegrationResult | None = None

    def to_public_dict(self) -> dict:
        """Serialize for the JSON API; `onec_status` only when present."""
        return self.model_dump(mode="json", exclude_none=True)
