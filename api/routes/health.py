from datetime import datetime, timezone
from typing import Optional

from api.schemas import APIResponse
from core.dependencies import get_onec_service, get_result_store
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from relay.storage.result_store import ResultStore
from services.onec.service import OneCService

router = APIRouter()

SERVICE_VERSION = "2.0.0"


@router.get("/health", response_model=APIResponse, tags=["health"])
async def health_check(
    store: ResultStore = Depends(get_result_store),
    onec: Optional[OneCService] = Depends(get_onec_service),
):
    health = {
        "status": "healthy",
        "message": "Document AI is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": SERVICE_VERSION,
        "results": {"stored": len(store), "capacity": store.capacity},
    }

    if onec is not None:
        health["onec_integration"] = await onec.get_status()
    else:
        health["onec_integration"] = {"status": "not_configured"}

    return JSONResponse(content=APIResponse(status="success", data=health).to_content())
