"""Request tracing middleware."""

import uuid

from fastapi import Request

TRACE_HEADER = "X-Trace-ID"


def ensure_trace_id(request: Request) -> str:
    """Return the request's trace ID, creating one on first use.

    An inbound X-Trace-ID header wins so n8n executions can be correlated.
    """
    trace_id = getattr(request.state, "trace_id", None)
    if not trace_id:
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
    return trace_id


async def trace_id_middleware(request: Request, call_next):
    """Ensure every request has a trace ID in state and response headers."""
    trace_id = ensure_trace_id(request)
    response = await call_next(request)
    response.headers[TRACE_HEADER] = trace_id
    return response
