"""
Custom exceptions for pdfeditx.

Every failure that leaves a public operation is one of the four kinds below.
Soft failures (a bad rotation, an unknown font, color or change action) are
logged and skipped instead of being raised.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    CORRUPTED_DOCUMENT = "corrupted_document"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    SERVICE_FAILURE = "service_failure"


class PDFEditXError(Exception):
    """Base exception for all pdfeditx errors."""

    kind: ErrorKind = ErrorKind.SERVICE_FAILURE
    error_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF editing error occurred."

    @property
    def user_message(self) -> str:
        return "An error occurred while processing your file. Please try again or contact support."


class InvalidInputError(PDFEditXError):
    """Raised for empty, oversized or mistyped files and bad arguments."""

    kind = ErrorKind.INVALID_INPUT
    error_code = 400

    @property
    def default_message(self) -> str:
        return "Invalid file or parameters."

    @property
    def user_message(self) -> str:
        return self.message


class CorruptedDocumentError(PDFEditXError):
    """Raised when the PDF structure is damaged and cannot be parsed."""

    kind = ErrorKind.CORRUPTED_DOCUMENT
    error_code = 422

    @property
    def default_message(self) -> str:
        return "PDF file appears to be corrupted."

    @property
    def user_message(self) -> str:
        return "The PDF file appears to be corrupted or damaged. Please try with a different file."


class ResourceExhaustedError(PDFEditXError):
    """Raised when a document is too complex to process in memory."""

    kind = ErrorKind.RESOURCE_EXHAUSTED
    error_code = 507

    @property
    def default_message(self) -> str:
        return "File too complex to process - insufficient memory."

    @property
    def user_message(self) -> str:
        return "The file is too complex to process. Please try with a simpler or smaller file."


class ServiceFailureError(PDFEditXError):
    """Raised for any other I/O or unexpected failure."""

    @property
    def default_message(self) -> str:
        return "PDF processing failed due to an unexpected error."


__all__ = [
    "ErrorKind",
    "PDFEditXError",
    "InvalidInputError",
    "CorruptedDocumentError",
    "ResourceExhaustedError",
    "ServiceFailureError",
]
