"""Upload validation for the document relay.

Checks the form message, the file extension, the size and the magic bytes
before anything is forwarded to n8n.
"""

import logging
import os

from core.settings import app_settings
from fastapi import UploadFile
from relay.core.exceptions import (
    PayloadTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)
from relay.utils.file_detection import detect_file_type_from_bytes, has_allowed_extension

logger = logging.getLogger(__name__)


def _get_file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def _validate_file_size(size: int, max_size_mb: int) -> None:
    if size == 0:
        raise ValidationError(
            message="File is empty (0 bytes)",
            field="file",
            details={"file_size": 0},
        )

    if size > max_size_mb * 1024 * 1024:
        raise PayloadTooLargeError(
            max_size_mb=max_size_mb,
            actual_size_mb=size / (1024 * 1024),
        )


def validate_message(message: str | None) -> str:
    """Return the stripped instruction text, rejecting blank input."""
    cleaned = (message or "").strip()
    if not cleaned:
        raise ValidationError(
            message="Document description is required",
            field="message",
        )
    return cleaned


async def validate_upload_file(file: UploadFile, max_size_mb: int | None = None) -> str:
    """Validate an uploaded document.

    Args:
        file: FastAPI UploadFile object
        max_size_mb: Size limit, defaults to MAX_FILE_SIZE_MB

    Returns:
        The detected MIME type

    Raises:
        UnsupportedFileTypeError: Wrong extension or unrecognized magic bytes
        ValidationError: Empty file
        PayloadTooLargeError: File exceeds size limit
    """
    max_size_mb = max_size_mb or app_settings.MAX_FILE_SIZE_MB

    if not has_allowed_extension(file.filename):
        ext = os.path.splitext(file.filename or "")[1] or "(none)"
        raise UnsupportedFileTypeError(
            file.filename, f"extension {ext} is not allowed"
        )

    file_size = _get_file_size(file)
    _validate_file_size(file_size, max_size_mb)

    header = file.file.read(8)
    file.file.seek(0)

    result = detect_file_type_from_bytes(header)
    if result is None:
        raise UnsupportedFileTypeError(
            file.filename,
            "file content is not a PDF, JPEG or PNG",
            details={"magic_bytes": header.hex()},
        )

    detected_type, detected_content_type = result

    if file.content_type and file.content_type != detected_content_type:
        logger.warning(
            "Content-Type mismatch: header=%s detected=%s",
            file.content_type,
            detected_content_type,
        )

    logger.info(
        "File validated: type=%s size=%d name=%s",
        detected_type,
        file_size,
        file.filename,
        extra={"file_name": file.filename},
    )
    return detected_content_type
