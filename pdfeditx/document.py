"""Scoped ownership of PDF documents opened from uploaded bytes."""

from __future__ import annotations

import io
import logging
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Set, Union

from pypdf import PageObject, PdfReader, PdfWriter

from .classifier import error_boundary
from .config import PDF_CONTENT_TYPE, EngineLimits
from .exceptions import InvalidInputError
from .validators import (
    PDFInfo,
    load_reader,
    validate_document,
    validate_page_count,
    validate_page_number,
    validate_payload,
)

LOGGER = logging.getLogger("pdfeditx.document")


@dataclass(frozen=True)
class PdfPayload:
    """Uploaded document bytes together with their declared content type."""

    data: bytes
    content_type: str = PDF_CONTENT_TYPE
    filename: Optional[str] = None

    @property
    def label(self) -> str:
        return self.filename or f"<{len(self.data)} bytes>"


PayloadLike = Union[bytes, bytearray, PdfPayload]


def as_payload(value: PayloadLike | None) -> PdfPayload:
    """Wrap raw bytes in a :class:`PdfPayload`; payloads pass through."""

    if isinstance(value, PdfPayload):
        return value
    if isinstance(value, (bytes, bytearray)):
        return PdfPayload(bytes(value))
    if value is None:
        raise InvalidInputError("PDF file cannot be null or empty")
    raise InvalidInputError(f"Unsupported document input: {type(value).__name__}")


class PdfDocument:
    """An open, mutable PDF owned by exactly one operation.

    Pages are addressed with 1-based numbers. Importing a page copies it and
    the resources it references into this document, so the source document can
    be closed without affecting the copy.
    """

    def __init__(
        self,
        writer: PdfWriter,
        *,
        source: Optional[io.BytesIO] = None,
        name: str = "document",
    ) -> None:
        self._writer: Optional[PdfWriter] = writer
        self._source = source
        self.name = name
        self._wrapped: Set[int] = set()

    @classmethod
    def load(
        cls,
        data: bytes,
        *,
        name: str = "document",
        limits: EngineLimits | None = None,
    ) -> "PdfDocument":
        """Parse ``data`` and copy it into a writable document.

        The page-count ceiling is checked on the parsed reader, before any page
        is copied.
        """

        reader: PdfReader = load_reader(data)
        validate_page_count(len(reader.pages), limits)
        writer = PdfWriter(clone_from=reader)
        LOGGER.debug("Loaded %s with %d pages", name, len(writer.pages))
        return cls(writer, source=reader.stream, name=name)

    # ------------------------------------------------------------------
    # Page tree
    # ------------------------------------------------------------------
    @property
    def writer(self) -> PdfWriter:
        if self._writer is None:
            raise InvalidInputError(f"Document {self.name} is closed")
        return self._writer

    @property
    def closed(self) -> bool:
        return self._writer is None

    @property
    def page_count(self) -> int:
        return len(self.writer.pages)

    @property
    def pages(self) -> List[PageObject]:
        return list(self.writer.pages)

    def page(self, number: object) -> PageObject:
        checked = validate_page_number(number, self.page_count)
        return self.writer.pages[checked - 1]

    def remove_page(self, number: int) -> None:
        checked = validate_page_number(number, self.page_count)
        del self.writer.pages[checked - 1]

    def import_page(self, page: PageObject) -> PageObject:
        return self.writer.add_page(page)

    def is_wrapped(self, page: PageObject) -> bool:
        """Whether ``page`` already had its original content wrapped by an overlay."""

        return page.indirect_reference.idnum in self._wrapped

    def mark_wrapped(self, page: PageObject) -> None:
        self._wrapped.add(page.indirect_reference.idnum)

    def copy_metadata_from(self, other: "PdfDocument") -> None:
        metadata = other.writer.metadata
        if metadata:
            self.writer.add_metadata(
                {key: value for key, value in metadata.items() if value is not None}
            )

    # ------------------------------------------------------------------
    # Serialization and lifecycle
    # ------------------------------------------------------------------
    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()

    def close(self) -> None:
        if self._writer is None:
            return
        self._writer = None
        if self._source is not None:
            self._source.close()
            self._source = None
        LOGGER.debug("Closed %s", self.name)

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@contextmanager
def open_document(
    payload: PayloadLike,
    limits: EngineLimits | None = None,
    *,
    name: Optional[str] = None,
) -> Iterator[PdfDocument]:
    """Validate and open ``payload``, closing it on every exit path."""

    source = as_payload(payload)
    validate_payload(source.data, source.content_type, limits)
    document = PdfDocument.load(source.data, name=name or source.label, limits=limits)
    try:
        yield document
    finally:
        document.close()


@contextmanager
def new_document(name: str = "output") -> Iterator[PdfDocument]:
    document = PdfDocument(PdfWriter(), name=name)
    try:
        yield document
    finally:
        document.close()


@contextmanager
def open_documents(
    payloads: Iterable[PayloadLike],
    limits: EngineLimits | None = None,
) -> Iterator[List[PdfDocument]]:
    """Open every payload and keep them all open for the duration of the block.

    Each upload is checked before any of them is parsed. If parsing input N
    fails, inputs 1..N-1 are closed before the error propagates.
    """

    sources = [as_payload(payload) for payload in payloads]
    if not sources:
        raise InvalidInputError("Files list cannot be null or empty")
    for source in sources:
        validate_payload(source.data, source.content_type, limits)

    with ExitStack() as stack:
        documents = [
            stack.enter_context(open_document(source, limits, name=source.filename))
            for source in sources
        ]
        yield documents


def get_pdf_info(payload: PayloadLike, *, limits: EngineLimits | None = None) -> PDFInfo:
    """Return page count, size and metadata for ``payload`` without editing it."""

    source = as_payload(payload)
    with error_boundary("PDF info retrieval"):
        return validate_document(source.data, source.content_type, limits)


__all__ = [
    "PdfPayload",
    "PayloadLike",
    "PdfDocument",
    "as_payload",
    "open_document",
    "open_documents",
    "new_document",
    "get_pdf_info",
]
