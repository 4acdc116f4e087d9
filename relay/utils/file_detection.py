"""
File type checks for uploaded documents.

Magic bytes reference:
- PDF:  %PDF (0x25504446)
- JPEG: 0xFFD8FF
- PNG:  0x89504E47 (89 P N G)
"""

from pathlib import PurePath
from typing import Final, Literal

from relay.core.config import ALLOWED_EXTENSIONS

FileType = Literal["pdf", "jpeg", "png"]
MimeType = Literal["application/pdf", "image/jpeg", "image/png"]

MAGIC_BYTES_MAP: Final[dict[bytes, tuple[FileType, MimeType]]] = {
    b"%PDF": ("pdf", "application/pdf"),
    b"\xff\xd8\xff": ("jpeg", "image/jpeg"),
    b"\x89PNG": ("png", "image/png"),
}


def has_allowed_extension(filename: str | None) -> bool:
    """Check the file extension against PDF/JPG/JPEG/PNG, case-insensitive.

    Example:
        >>> has_allowed_extension("scan.PDF")
        True
        >>> has_allowed_extension("notes.txt")
        False
    """
    if not filename:
        return False
    return PurePath(filename).suffix.lower() in ALLOWED_EXTENSIONS


def detect_file_type_from_bytes(
    header: bytes,
) -> tuple[FileType, MimeType] | None:
    """
    Detect file type from magic bytes header.

    Args:
        header: First 8+ bytes of file

    Returns:
        Tuple of (file_type, mime_type) or None if unrecognized

    Example:
        >>> detect_file_type_from_bytes(b'%PDF-1.4')
        ('pdf', 'application/pdf')
    """
    for signature, result in MAGIC_BYTES_MAP.items():
        if header.startswith(signature):
            return result
    return None
