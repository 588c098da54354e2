"""Map low-level failures onto the :mod:`pdfeditx.exceptions` taxonomy."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from .exceptions import (
    CorruptedDocumentError,
    PDFEditXError,
    ResourceExhaustedError,
    ServiceFailureError,
)

LOGGER = logging.getLogger("pdfeditx.classifier")

# Lower-cased fragments of parser messages that indicate a damaged file.
CORRUPTION_MARKERS = (
    "damaged",
    "corrupt",
    "eof marker",
    "startxref",
    "stream has ended unexpectedly",
    "invalid pdf header",
    "xref table",
)


def is_corruption_message(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in CORRUPTION_MARKERS)


def classify_error(exc: BaseException, operation: str = "PDF processing") -> PDFEditXError:
    """Return the :class:`PDFEditXError` that represents ``exc``.

    Errors that are already part of the taxonomy are returned unchanged.
    Memory exhaustion becomes :class:`ResourceExhaustedError`, parser failures
    whose message carries a damage marker become
    :class:`CorruptedDocumentError`, and everything else is wrapped in a
    :class:`ServiceFailureError` that keeps the original message.
    """

    if isinstance(exc, PDFEditXError):
        return exc
    if isinstance(exc, MemoryError):
        return ResourceExhaustedError(
            f"File too complex for {operation} - insufficient memory"
        )
    message = str(exc)
    if is_corruption_message(message):
        return CorruptedDocumentError("PDF file appears to be corrupted")
    return ServiceFailureError(f"{operation} failed: {message or type(exc).__name__}")


@contextmanager
def error_boundary(operation: str) -> Iterator[None]:
    """Re-raise anything escaping the block as a classified error."""

    try:
        yield
    except PDFEditXError as exc:
        LOGGER.error("%s failed: %s", operation, exc.message)
        raise
    except Exception as exc:
        classified = classify_error(exc, operation)
        LOGGER.error(
            "%s failed (%s): %s", operation, classified.kind.value, exc
        )
        raise classified from exc


__all__ = ["CORRUPTION_MARKERS", "classify_error", "error_boundary", "is_corruption_message"]
