"""Exception handlers rendering every failure as RFC 7807 Problem Details.

Each response carries the request's trace ID both in the body and in the
X-Trace-ID header.
"""

import logging
from typing import Any, Optional

from api.schemas import ProblemDetail
from core.middleware import TRACE_HEADER, ensure_trace_id
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic_core import ValidationError as PydanticCoreValidationError
from relay.core.exceptions import BaseError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _problem_response(
    request: Request,
    trace_id: str,
    fields: dict[str, Any],
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    problem = ProblemDetail(**fields, instance=request.url.path, trace_id=trace_id)
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        headers={**(headers or {}), TRACE_HEADER: trace_id},
    )


def _validation_problem(detail: str) -> dict[str, Any]:
    return {
        "type": "/errors/VALIDATION_ERROR",
        "title": "Request validation failed",
        "status": status.HTTP_422_UNPROCESSABLE_ENTITY,
        "detail": detail,
        "code": "VALIDATION_ERROR",
        "category": "client_error",
    }


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Missing or malformed form fields and JSON bodies."""
    trace_id = ensure_trace_id(request)

    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "Validation failed")
    detail = f"{field}: {msg}" if field else msg

    logger.warning(
        "Request validation failed: %s",
        detail,
        extra={"trace_id": trace_id, "http_status": 422},
    )
    return _problem_response(request, trace_id, _validation_problem(detail))


async def handle_pydantic_error(request: Request, exc: PydanticCoreValidationError):
    """Model validation errors raised inside handlers."""
    trace_id = ensure_trace_id(request)

    errors = exc.errors()
    msg = errors[0].get("msg", "Validation failed") if errors else "Validation failed"

    logger.warning(
        "Model validation failed: %s",
        msg,
        extra={"trace_id": trace_id, "http_status": 422},
    )
    return _problem_response(request, trace_id, _validation_problem(msg))


async def handle_app_error(request: Request, exc: BaseError):
    """Relay errors: upload validation, n8n and 1C failures."""
    trace_id = ensure_trace_id(request)

    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        "Request failed: %s (%s)",
        exc.message,
        exc.error_code,
        extra={
            "trace_id": trace_id,
            "http_status": exc.http_status,
            "service": exc.details.get("service"),
        },
    )
    return _problem_response(request, trace_id, exc.to_dict())


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    """Routing errors (404, 405) and HTTPExceptions raised by dependencies."""
    trace_id = ensure_trace_id(request)

    logger.warning(
        "HTTP %s on %s: %s",
        exc.status_code,
        request.url.path,
        exc.detail,
        extra={"trace_id": trace_id, "http_status": exc.status_code},
    )
    fields = {
        "type": f"/errors/HTTP_{exc.status_code}",
        "title": str(exc.detail),
        "status": exc.status_code,
        "detail": str(exc.detail),
        "code": f"HTTP_{exc.status_code}",
        "category": "server_error" if exc.status_code >= 500 else "client_error",
    }
    return _problem_response(request, trace_id, fields, headers=exc.headers)


async def handle_unknown_error(request: Request, exc: Exception):
    """Anything else becomes an opaque 500; the traceback goes to the log."""
    trace_id = ensure_trace_id(request)

    logger.exception(
        "Unhandled %s",
        type(exc).__name__,
        extra={"trace_id": trace_id, "http_status": 500},
    )
    fields = {
        "type": "/errors/INTERNAL_SERVER_ERROR",
        "title": "Internal server error",
        "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "detail": "An unexpected error occurred. Please contact support with trace ID.",
        "code": "INTERNAL_SERVER_ERROR",
        "category": "server_error",
    }
    return _problem_response(request, trace_id, fields)
