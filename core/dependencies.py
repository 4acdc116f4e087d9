"""FastAPI dependency injection functions.

Route handlers receive the process-wide collaborators created in
core.lifespan through these functions, which keeps them replaceable in tests.
"""

from typing import Optional

from fastapi import HTTPException, Request, status
from relay.storage.result_store import ResultStore
from services.n8n_client import N8nClient
from services.onec.service import OneCService


async def get_result_store(request: Request) -> ResultStore:
    """Get the result history from app state.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    store = getattr(request.app.state, "result_store", None)

    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Result store unavailable",
        )

    return store


async def get_n8n_client(request: Request) -> N8nClient:
    """Get n8n client from app state.

    Raises:
        HTTPException: 503 if n8n client is unavailable
    """
    n8n_client = getattr(request.app.state, "n8n_client", None)

    if n8n_client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="n8n client unavailable",
        )

    return n8n_client


async def get_onec_service(request: Request) -> Optional[OneCService]:
    """Get the 1C integration service, or None when it failed to initialize."""
    return getattr(request.app.state, "onec_service", None)
