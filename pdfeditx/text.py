"""Per-page text extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pypdf import PageObject

from .classifier import error_boundary
from .config import EngineLimits
from .document import PayloadLike, open_document

LOGGER = logging.getLogger("pdfeditx.text")


@dataclass(frozen=True)
class PageText:
    """Text and media box size of one page."""

    page_number: int
    text: str
    width: Optional[float]
    height: Optional[float]


@dataclass(frozen=True)
class DocumentText:
    pages: List[PageText] = field(default_factory=list)
    total_pages: int = 0


def page_text(page: PageObject) -> str:
    return page.extract_text() or ""


def extract_text(payload: PayloadLike, *, limits: EngineLimits | None = None) -> DocumentText:
    """Extract the text of every page of ``payload``.

    A page whose text cannot be extracted is logged and left out of the
    result; the remaining pages are still returned.
    """

    with error_boundary("extracting text"):
        with open_document(payload, limits) as document:
            LOGGER.info("Extracting text from %s", document.name)
            pages: List[PageText] = []
            for number, page in enumerate(document.pages, start=1):
                try:
                    text = page_text(page)
                except MemoryError:
                    raise
                except Exception as exc:
                    LOGGER.warning("Error extracting text from page %d: %s", number, exc)
                    continue
                mediabox = page.mediabox
                pages.append(
                    PageText(
                        page_number=number,
                        text=text,
                        width=float(mediabox.width) if mediabox is not None else None,
                        height=float(mediabox.height) if mediabox is not None else None,
                    )
                )
                LOGGER.debug("Extracted text from page %d of %d", number, document.page_count)
            LOGGER.info("Extracted text from %d pages", len(pages))
            return DocumentText(pages=pages, total_pages=document.page_count)


__all__ = ["PageText", "DocumentText", "page_text", "extract_text"]
