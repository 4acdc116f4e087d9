"""Document upload endpoint: validates the form and relays it to n8n."""

import logging

from api.file_validation import validate_message, validate_upload_file
from api.schemas import APIResponse, ProblemDetail
from core.dependencies import get_n8n_client
from core.middleware import ensure_trace_id
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from services.n8n_client import N8nClient

router = APIRouter()
logger = logging.getLogger(__name__)

UPLOAD_ACCEPTED_MESSAGE = (
    "Document sent for processing! Results will appear below in a few minutes."
)


@router.post(
    "/upload",
    response_model=APIResponse,
    tags=["upload"],
    responses={
        413: {"description": "File too large", "model": ProblemDetail},
        415: {"description": "Unsupported file type", "model": ProblemDetail},
        422: {"description": "Validation Error", "model": ProblemDetail},
        502: {"description": "n8n error", "model": ProblemDetail},
        504: {"description": "n8n timeout", "model": ProblemDetail},
    },
)
async def upload_document(
    request: Request,
    file: UploadFile = File(..., description="PDF, JPG or PNG document"),
    message: str = Form("", description="Instruction for the AI workflow"),
    n8n: N8nClient = Depends(get_n8n_client),
):
    trace_id = ensure_trace_id(request)

    cleaned_message = validate_message(message)
    content_type = await validate_upload_file(file)

    logger.info(
        "[UPLOAD] file=%s size=%s",
        file.filename,
        file.size,
        extra={"trace_id": trace_id, "file_name": file.filename},
    )

    try:
        await n8n.forward_document(
            message=cleaned_message,
            file_name=file.filename,
            file=file.file,
            content_type=content_type,
        )
    finally:
        await file.close()

    logger.info(
        "File %s forwarded to n8n",
        file.filename,
        extra={"trace_id": trace_id, "file_name": file.filename},
    )
    return JSONResponse(
        content=APIResponse(status="success", message=UPLOAD_ACCEPTED_MESSAGE).to_content()
    )
