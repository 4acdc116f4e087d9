"""FastAPI application entry point."""

from dotenv import load_dotenv

load_dotenv()

import logging

from api.routes import health, onec, pages, results, upload, webhook
from core.error_handlers import (
    handle_app_error,
    handle_http_error,
    handle_pydantic_error,
    handle_unknown_error,
    handle_validation_error,
)
from core.lifespan import lifespan
from core.middleware import trace_id_middleware
from core.openapi import custom_openapi
from core.settings import app_settings
from core.validation import validate_all_settings
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from pydantic_core import ValidationError as PydanticCoreValidationError
from relay.core.exceptions import BaseError
from relay.core.logging_config import configure_structured_logging
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
configure_structured_logging(level=app_settings.LOG_LEVEL, json_format=app_settings.LOG_JSON)
logger = logging.getLogger(__name__)

# Validate environment before starting application
validate_all_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Document AI Relay",
    version=health.SERVICE_VERSION,
    description="Relays documents to n8n and keeps the latest processing results",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Custom OpenAPI
app.openapi = lambda: custom_openapi(app)

# 1. Register Middleware
app.middleware("http")(trace_id_middleware)

# 2. Register Exception Handlers
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(PydanticCoreValidationError, handle_pydantic_error)
app.add_exception_handler(StarletteHTTPException, handle_http_error)
app.add_exception_handler(BaseError, handle_app_error)
app.add_exception_handler(Exception, handle_unknown_error)

# Routes
app.include_router(pages.router)
app.include_router(health.router)
app.include_router(upload.router)
app.include_router(webhook.router)
app.include_router(results.router)
app.include_router(onec.router)

if app_settings.static_dir.is_dir():
    app.mount("/static", StaticFiles(directory=app_settings.static_dir), name="static")
else:
    logger.warning("Static directory %s not found, /static disabled", app_settings.static_dir)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app_settings.SERVER_PORT)
