"""n8n callback endpoint: normalizes results and stores them."""

import logging
from typing import Optional

from api.schemas import APIResponse
from core.dependencies import get_onec_service, get_result_store
from core.logging_utils import truncate_text
from core.middleware import ensure_trace_id
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from relay.core.config import LOG_PREVIEW_LENGTH
from relay.models.dto import IntegrationResult
from relay.processors.payload_normalizer import normalize_webhook_payload
from relay.storage.result_store import ResultStore
from services.onec.service import OneCService

router = APIRouter()
logger = logging.getLogger(__name__)


def _log_request(request: Request, body: bytes, trace_id: str) -> None:
    client = request.client
    logger.info(
        "[WEBHOOK] %s %s from=%s user_agent=%s content_type=%s length=%d",
        request.method,
        request.url,
        f"{client.host}:{client.port}" if client else "unknown",
        request.headers.get("user-agent", ""),
        request.headers.get("content-type", ""),
        len(body),
        extra={"trace_id": trace_id, "payload_bytes": len(body)},
    )
    if logger.isEnabledFor(logging.DEBUG):
        for name, value in request.headers.items():
            logger.debug("[WEBHOOK] header %s: %s", name, value, extra={"trace_id": trace_id})
        logger.debug(
            "[WEBHOOK] body: %s",
            body.decode("utf-8", errors="replace"),
            extra={"trace_id": trace_id},
        )


@router.post("/webhook", response_model=APIResponse, tags=["results"])
@router.post("/webhook-test", response_model=APIResponse, tags=["results"])
async def receive_result(
    request: Request,
    store: ResultStore = Depends(get_result_store),
    onec: Optional[OneCService] = Depends(get_onec_service),
):
    """Accept a processing result from n8n.

    Any body is accepted: JSON objects are normalized field by field, anything
    else is stored as plain text. The answer is always 200 so n8n never
    retries and duplicates a result.
    """
    trace_id = ensure_trace_id(request)
    body = await request.body()
    _log_request(request, body, trace_id)

    normalized = normalize_webhook_payload(body)
    record = normalized.result

    if onec is not None:
        logger.info("Forwarding result to 1C...", extra={"trace_id": trace_id})
        try:
            onec_status = await onec.process_n8n_response(normalized.data)
        except Exception as e:
            logger.error(
                f"1C integration error: {e}",
                exc_info=True,
                extra={"trace_id": trace_id},
            )
            onec_status = IntegrationResult(success=False, error_message=str(e))
        record = record.model_copy(update={"onec_status": onec_status})

    stored = store.append(record)

    logger.info(
        "[RESULT] %s (status: %s)",
        truncate_text(stored.text, LOG_PREVIEW_LENGTH),
        stored.status,
        extra={
            "trace_id": trace_id,
            "result_id": stored.id,
            "status": stored.status,
            "stored": len(store),
            "capacity": store.capacity,
        },
    )

    return JSONResponse(
        content=APIResponse(status="success", message="Result saved").to_content()
    )
