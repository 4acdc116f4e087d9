import logging

from api.schemas import APIResponse
from core.dependencies import get_result_store
from core.logging_utils import truncate_text
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from relay.storage.result_store import ResultStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/results", response_model=APIResponse, tags=["results"])
async def get_results(store: ResultStore = Depends(get_result_store)):
    """Return the stored results, oldest first."""
    records = store.snapshot()

    logger.info("Returning %d processing results", len(records), extra={"stored": len(records)})
    if records:
        latest = records[-1]
        logger.debug(
            "Latest result: id=%s text=%s status=%s",
            latest.id,
            truncate_text(latest.text, 100),
            latest.status,
        )

    return JSONResponse(
        content=APIResponse(
            status="success",
            data=[record.to_public_dict() for record in records],
        ).to_content()
    )
