"""1C integration status and manual delivery endpoints."""

import logging
from typing import Optional

from api.schemas import APIResponse, OneCSendRequest, ProblemDetail
from core.dependencies import get_onec_service
from core.middleware import ensure_trace_id
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from relay.core.exceptions import IntegrationDisabledError
from services.onec.service import OneCService

router = APIRouter(prefix="/onec", tags=["onec"])
logger = logging.getLogger(__name__)


@router.get("/status", response_model=APIResponse)
async def onec_status(onec: Optional[OneCService] = Depends(get_onec_service)):
    if onec is None:
        data = {
            "enabled": False,
            "connection": "not_configured",
            "message": "1C integration is not configured",
        }
    else:
        data = await onec.get_status()

    return JSONResponse(content=APIResponse(status="success", data=data).to_content())


@router.post(
    "/send",
    response_model=APIResponse,
    responses={
        502: {"description": "1C error", "model": ProblemDetail},
        503: {"description": "Integration disabled", "model": ProblemDetail},
    },
)
async def onec_manual_send(
    request: Request,
    payload: OneCSendRequest,
    onec: Optional[OneCService] = Depends(get_onec_service),
):
    if onec is None:
        raise IntegrationDisabledError("onec")

    trace_id = ensure_trace_id(request)
    logger.info(
        "[ONEC SEND] document_id=%s",
        payload.document_id,
        extra={"trace_id": trace_id, "document_id": payload.document_id},
    )

    result = await onec.send_manually(payload.document_id, payload.data)
    return JSONResponse(
        content=APIResponse(status="success", data=result.model_dump(mode="json")).to_content()
    )
