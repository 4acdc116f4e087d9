from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging
from core.settings import app_settings
from relay.storage.result_store import ResultStore
from services.n8n_client import create_n8n_client_from_env
from services.onec.service import create_onec_service_from_env

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""

    app.state.result_store = ResultStore(capacity=app_settings.MAX_RESPONSES)
    logger.info(
        "Result store ready",
        extra={"capacity": app_settings.MAX_RESPONSES},
    )

    app.state.n8n_client = create_n8n_client_from_env()

    logger.info("Initializing 1C integration...")
    try:
        app.state.onec_service = await create_onec_service_from_env()
        if app.state.onec_service.is_enabled():
            logger.info("1C integration active")
        else:
            logger.info("1C integration disabled in configuration")
    except Exception as e:
        logger.error(f"1C integration initialization failed: {e}", exc_info=True)
        logger.warning("Application will continue without 1C integration")
        app.state.onec_service = None

    logger.info("Document AI relay is ready")

    yield

    stored = len(app.state.result_store)
    logger.info("Shutting down, %d stored results discarded", stored, extra={"stored": stored})
