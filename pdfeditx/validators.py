"""Validation utilities for :mod:`pdfeditx`.

All checks here run before a document is mutated. A failed check raises
:class:`~pdfeditx.exceptions.InvalidInputError` and leaves nothing behind.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from pypdf import PdfReader

from .config import EngineLimits, get_limits
from .exceptions import InvalidInputError

LOGGER = logging.getLogger("pdfeditx.validators")


@dataclass(frozen=True)
class PDFInfo:
    """Summary information describing a PDF payload."""

    page_count: int
    file_size: int
    is_encrypted: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)


def validate_payload(
    data: bytes | None,
    content_type: str | None,
    limits: EngineLimits | None = None,
) -> None:
    """Reject empty, oversized or wrongly typed uploads.

    The size ceiling is checked before the content type so that an oversized
    upload is always reported as such, whatever else is wrong with it.
    """

    active = get_limits(limits)
    if not data:
        raise InvalidInputError("PDF file cannot be null or empty")
    if len(data) > active.max_file_size:
        raise InvalidInputError(
            f"File size exceeds maximum limit of {active.max_file_size} bytes"
        )
    if (content_type or "").strip().lower() != active.content_type:
        raise InvalidInputError("Invalid file type. Only PDF files are allowed.")
    LOGGER.debug("Payload of %d bytes passed upload checks", len(data))


def validate_page_count(page_count: int, limits: EngineLimits | None = None) -> None:
    active = get_limits(limits)
    if page_count > active.max_pages:
        raise InvalidInputError(
            f"PDF has too many pages ({page_count}). Maximum allowed: {active.max_pages}"
        )


def coerce_page_number(value: object) -> int:
    """Return ``value`` as an integer page number or raise."""

    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid page number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise InvalidInputError(f"Invalid page number: {value!r}")


def validate_page_number(page: object, page_count: int) -> int:
    number = coerce_page_number(page)
    if number < 1 or number > page_count:
        raise InvalidInputError(
            f"Page number {number} is out of range (1-{page_count})"
        )
    return number


def validate_page_numbers(pages: Iterable[object], page_count: int) -> List[int]:
    """Validate every entry of ``pages`` and return them as integers.

    Order and duplicates are preserved; the first bad entry aborts the whole
    list.
    """

    return [validate_page_number(page, page_count) for page in pages]


def load_reader(data: bytes) -> PdfReader:
    """Parse ``data`` into a :class:`PdfReader`.

    Encrypted documents are accepted only when they open with an empty
    password.
    """

    reader = PdfReader(io.BytesIO(data))
    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF with empty password")
        try:
            decrypted = reader.decrypt("")
        except Exception as exc:
            raise InvalidInputError("Encrypted PDF cannot be decrypted") from exc
        if decrypted == 0:
            raise InvalidInputError("Encrypted PDF cannot be decrypted")
    return reader


def validate_document(
    data: bytes | None,
    content_type: str | None,
    limits: EngineLimits | None = None,
) -> PDFInfo:
    """Run every pre-mutation check and return :class:`PDFInfo`.

    Raises:
        InvalidInputError: If the upload or its page count is rejected.
    """

    validate_payload(data, content_type, limits)
    reader = load_reader(data)
    page_count = len(reader.pages)
    validate_page_count(page_count, limits)

    metadata: Dict[str, Any] = {}
    if reader.metadata:
        metadata = {
            key: value for key, value in reader.metadata.items() if value is not None
        }
    info = PDFInfo(
        page_count=page_count,
        file_size=len(data),
        is_encrypted=reader.is_encrypted,
        metadata=metadata,
    )
    LOGGER.info("Validated PDF: pages=%s, size=%s bytes", info.page_count, info.file_size)
    return info


__all__ = [
    "PDFInfo",
    "validate_payload",
    "validate_page_count",
    "validate_page_number",
    "validate_page_numbers",
    "coerce_page_number",
    "load_reader",
    "validate_document",
]
