"""Page-level PDF editing toolkit.

Loads uploaded PDF bytes, restructures the page tree (delete, rotate,
reorder, extract, split, merge) and overlays text and rectangles onto
existing pages. Every operation takes bytes and returns bytes.

Quick Start:
    >>> from pdfeditx import delete_pages, apply_changes
    >>> trimmed = delete_pages(pdf_bytes, [2, 4])
    >>> edited = apply_changes(trimmed, '[{"page": 1, "action": "add_text", '
    ...                                 '"x": 72, "y": 72, "text": "Draft"}]')
"""

from __future__ import annotations

from .changes import (
    AppliedChanges,
    ChangeAction,
    ChangeRecord,
    apply_changes,
    apply_changes_to_document,
    parse_changes,
)
from .classifier import classify_error, error_boundary
from .colors import RGBColor, resolve_color
from .config import EngineLimits, get_limits
from .coordinates import Position, to_native_y
from .document import (
    PdfDocument,
    PdfPayload,
    get_pdf_info,
    new_document,
    open_document,
    open_documents,
)
from .exceptions import (
    CorruptedDocumentError,
    ErrorKind,
    InvalidInputError,
    PDFEditXError,
    ResourceExhaustedError,
    ServiceFailureError,
)
from .fonts import StandardFont, resolve_font
from .overlay import (
    add_highlight,
    add_highlight_to_pdf,
    add_text,
    add_text_to_pdf,
    delete_text_region,
    delete_text_region_in_pdf,
    replace_text,
)
from .pages import (
    delete_pages,
    extract_pages,
    merge_pdfs,
    reorder_pages,
    rotate_pages,
    split_pdf,
)
from .text import DocumentText, PageText, extract_text
from .utils import configure_logging, get_logger
from .validators import PDFInfo, validate_document

__version__ = "1.0.0"

__all__ = [
    # Page operations
    "delete_pages",
    "rotate_pages",
    "extract_pages",
    "reorder_pages",
    "split_pdf",
    "merge_pdfs",
    # Overlays
    "add_text",
    "add_highlight",
    "delete_text_region",
    "add_text_to_pdf",
    "add_highlight_to_pdf",
    "delete_text_region_in_pdf",
    "replace_text",
    # Change lists
    "apply_changes",
    "apply_changes_to_document",
    "parse_changes",
    "ChangeAction",
    "ChangeRecord",
    "AppliedChanges",
    # Documents
    "PdfDocument",
    "PdfPayload",
    "open_document",
    "open_documents",
    "new_document",
    "get_pdf_info",
    "validate_document",
    "extract_text",
    "PDFInfo",
    "PageText",
    "DocumentText",
    # Resolvers
    "resolve_color",
    "resolve_font",
    "RGBColor",
    "StandardFont",
    "Position",
    "to_native_y",
    # Configuration and logging
    "EngineLimits",
    "get_limits",
    "configure_logging",
    "get_logger",
    # Errors
    "classify_error",
    "error_boundary",
    "ErrorKind",
    "PDFEditXError",
    "InvalidInputError",
    "CorruptedDocumentError",
    "ResourceExhaustedError",
    "ServiceFailureError",
    "__version__",
]
