"""Append text and filled rectangles to existing page content.

Overlays never rewrite what is already on a page. Each call adds a new
content stream to the end of the page's ``/Contents`` array, and the content
that was there before is wrapped in a ``q``/``Q`` pair so its graphics state
cannot leak into the overlay.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Tuple

from pypdf import PageObject
from pypdf.generic import (
    ArrayObject,
    ByteStringObject,
    ContentStream,
    DecodedStreamObject,
    DictionaryObject,
    FloatObject,
    IndirectObject,
    NameObject,
    StreamObject,
)

from .classifier import error_boundary
from .colors import WHITE, RGBColor, resolve_color
from .config import (
    DEFAULT_FONT,
    DEFAULT_FONT_SIZE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_TEXT_COLOR,
    REPLACEMENT_FONT_SIZE,
    REPLACEMENT_LINE_STEP,
    REPLACEMENT_MARGIN,
    EngineLimits,
)
from .coordinates import Position, to_native
from .document import PayloadLike, PdfDocument, as_payload, open_document
from .exceptions import InvalidInputError
from .fonts import StandardFont, resolve_font
from .text import page_text
from .validators import validate_payload

LOGGER = logging.getLogger("pdfeditx.overlay")

Operation = Tuple[List[Any], bytes]


# ----------------------------------------------------------------------
# Content stream plumbing
# ----------------------------------------------------------------------
def _serialize(document: PdfDocument, operations: List[Operation]) -> IndirectObject:
    content = ContentStream(None, document.writer)
    content.operations = operations
    stream = DecodedStreamObject()
    stream.set_data(content.get_data())
    return document.writer._add_object(stream)


def _existing_contents(document: PdfDocument, page: PageObject) -> List[Any]:
    if NameObject("/Contents") not in page:
        return []
    raw = page.raw_get(NameObject("/Contents"))
    resolved = raw.get_object()
    if isinstance(resolved, ArrayObject):
        return list(resolved)
    if isinstance(raw, StreamObject):
        return [document.writer._add_object(raw)]
    return [raw]


def append_operations(document: PdfDocument, page: PageObject, operations: List[Operation]) -> None:
    """Append ``operations`` to ``page`` as a new content stream.

    The content already on the page is wrapped in ``q``/``Q`` the first time
    the page is overlaid. Later overlays only add a balanced ``q ... Q``
    stream, so the nesting depth does not grow with the number of overlays.
    """

    existing = _existing_contents(document, page)
    contents = ArrayObject()
    if document.is_wrapped(page):
        contents.extend(existing)
        operations = [([], b"q"), *operations, ([], b"Q")]
    elif existing:
        contents.append(_serialize(document, [([], b"q")]))
        contents.extend(existing)
        operations = [([], b"Q"), ([], b"q"), *operations, ([], b"Q")]
    else:
        operations = [([], b"q"), *operations, ([], b"Q")]
    contents.append(_serialize(document, operations))
    page[NameObject("/Contents")] = contents
    document.mark_wrapped(page)


def _register_font(document: PdfDocument, page: PageObject, font: StandardFont) -> NameObject:
    if NameObject("/Resources") not in page:
        page[NameObject("/Resources")] = DictionaryObject()
    resources = page[NameObject("/Resources")]
    if NameObject("/Font") not in resources:
        resources[NameObject("/Font")] = DictionaryObject()
    fonts = resources[NameObject("/Font")]
    name = NameObject(font.resource_name)
    if name not in fonts:
        fonts[name] = document.writer._add_object(font.font_dictionary())
    return name


def _fill_color(color: RGBColor) -> Operation:
    return ([FloatObject(channel) for channel in color.operands()], b"rg")


def _encode_text(text: str) -> ByteStringObject:
    # Standard fonts are registered with WinAnsiEncoding.
    return ByteStringObject(text.encode("cp1252", errors="replace"))


def _positive(value: object, label: str) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{label} must be a number, got {value!r}") from exc
    if number <= 0:
        raise InvalidInputError(f"{label} must be positive")
    return number


def _page_height(page: PageObject) -> float:
    return float(page.mediabox.height)


def _draw_text(
    document: PdfDocument,
    page: PageObject,
    text: str,
    native: Position,
    font: StandardFont,
    size: float,
    color: RGBColor,
) -> None:
    font_name = _register_font(document, page, font)
    append_operations(
        document,
        page,
        [
            _fill_color(color),
            ([], b"BT"),
            ([font_name, FloatObject(size)], b"Tf"),
            ([FloatObject(native.x), FloatObject(native.y)], b"Td"),
            ([_encode_text(text)], b"Tj"),
            ([], b"ET"),
        ],
    )


def _fill_rectangle(
    document: PdfDocument,
    page: PageObject,
    position: Position,
    width: float,
    height: float,
    color: RGBColor,
) -> Position:
    native = to_native(_page_height(page), position, height)
    append_operations(
        document,
        page,
        [
            _fill_color(color),
            (
                [
                    FloatObject(native.x),
                    FloatObject(native.y),
                    FloatObject(width),
                    FloatObject(height),
                ],
                b"re",
            ),
            ([], b"f"),
        ],
    )
    return native


# ----------------------------------------------------------------------
# Document-level overlays
# ----------------------------------------------------------------------
def add_text(
    document: PdfDocument,
    page: object,
    text: str | None,
    position: Position,
    *,
    font: str | StandardFont | None = DEFAULT_FONT,
    size: object = DEFAULT_FONT_SIZE,
    color: str | None = DEFAULT_TEXT_COLOR,
) -> bool:
    """Draw ``text`` on ``page`` with its top-left corner at ``position``.

    ``position`` uses top-left/Y-down coordinates. Empty or whitespace-only
    text is a no-op. Unknown fonts and colors fall back to Helvetica and black.

    Returns:
        ``True`` when something was drawn.
    """

    if text is None or not text.strip():
        LOGGER.debug("Skipping empty text on page %s", page)
        return False

    font_size = _positive(size, "Font size")
    target = document.page(page)
    native = to_native(_page_height(target), position, font_size)
    _draw_text(
        document,
        target,
        text,
        native,
        resolve_font(font),
        font_size,
        resolve_color(color),
    )
    LOGGER.debug(
        "Added text %r at (%s, %s) on page %s", text, native.x, native.y, page
    )
    return True


def add_highlight(
    document: PdfDocument,
    page: object,
    position: Position,
    width: object,
    height: object,
    color: str | None = DEFAULT_HIGHLIGHT_COLOR,
) -> None:
    """Fill a ``width`` x ``height`` rectangle whose top-left is ``position``.

    With an opaque color this doubles as a visual redaction; see
    :func:`delete_text_region` for the caveat that applies.
    """

    rect_width = _positive(width, "Width")
    rect_height = _positive(height, "Height")
    native = _fill_rectangle(
        document, document.page(page), position, rect_width, rect_height, resolve_color(color)
    )
    LOGGER.debug(
        "Added highlight at (%s, %s) with size %sx%s", native.x, native.y, rect_width, rect_height
    )


def delete_text_region(
    document: PdfDocument,
    page: object,
    position: Position,
    width: object,
    height: object,
) -> None:
    """Hide a region of ``page`` behind an opaque white rectangle.

    This is a display-layer redaction only. The original glyphs stay in the
    page's content stream and can still be extracted, copied or searched; do
    not rely on it to remove confidential text.
    """

    rect_width = _positive(width, "Width")
    rect_height = _positive(height, "Height")
    native = _fill_rectangle(
        document, document.page(page), position, rect_width, rect_height, WHITE
    )
    LOGGER.debug(
        "Covered region at (%s, %s) with size %sx%s", native.x, native.y, rect_width, rect_height
    )


def overlay_replacements(
    document: PdfDocument,
    page: object,
    replacements: Iterable[str | None],
) -> int:
    """Write each replacement as a line of black Helvetica near the top of ``page``.

    Lines start 50pt from the left and top edges and step down 20pt at a
    time. Empty replacements are skipped.
    """

    target = document.page(page)
    baseline = _page_height(target) - REPLACEMENT_MARGIN
    written = 0
    for replacement in replacements:
        if replacement is None or not replacement.strip():
            continue
        _draw_text(
            document,
            target,
            replacement,
            Position(REPLACEMENT_MARGIN, baseline - written * REPLACEMENT_LINE_STEP),
            StandardFont.HELVETICA,
            REPLACEMENT_FONT_SIZE,
            resolve_color(DEFAULT_TEXT_COLOR),
        )
        written += 1
    return written


def apply_replacements(document: PdfDocument, replacements: Mapping[str, str | None]) -> int:
    """Overlay the replacements whose search key occurs on each page.

    Text is not located or replaced in place: for every page whose extracted
    text contains a key, the matching replacement values are written near the
    top of that page. Pages whose text cannot be extracted are skipped.

    Returns:
        The number of pages that received an overlay.
    """

    touched = 0
    for number in range(1, document.page_count + 1):
        try:
            text = page_text(document.page(number))
        except MemoryError:
            raise
        except Exception as exc:
            LOGGER.warning("Error processing page %d for text replacement: %s", number, exc)
            continue
        matched = [value for key, value in replacements.items() if key and key in text]
        if matched and overlay_replacements(document, number, matched):
            touched += 1
            LOGGER.debug("Added text overlay to page %d", number)
    return touched


# ----------------------------------------------------------------------
# Byte-level wrappers
# ----------------------------------------------------------------------
def add_text_to_pdf(
    payload: PayloadLike,
    page: object,
    text: str | None,
    x: float,
    y: float,
    *,
    font: str | None = DEFAULT_FONT,
    size: object = DEFAULT_FONT_SIZE,
    color: str | None = DEFAULT_TEXT_COLOR,
    limits: EngineLimits | None = None,
) -> bytes:
    """Return ``payload`` with ``text`` drawn on ``page``.

    Empty text returns the input bytes unchanged.
    """

    source = as_payload(payload)
    if text is None or not text.strip():
        validate_payload(source.data, source.content_type, limits)
        return source.data

    with error_boundary("adding text"):
        with open_document(source, limits) as document:
            add_text(
                document, page, text, Position(x, y), font=font, size=size, color=color
            )
            LOGGER.info("Added text on page %s of %s", page, document.name)
            return document.to_bytes()


def add_highlight_to_pdf(
    payload: PayloadLike,
    page: object,
    x: float,
    y: float,
    width: object,
    height: object,
    *,
    color: str | None = DEFAULT_HIGHLIGHT_COLOR,
    limits: EngineLimits | None = None,
) -> bytes:
    with error_boundary("adding highlight"):
        with open_document(payload, limits) as document:
            add_highlight(document, page, Position(x, y), width, height, color)
            LOGGER.info("Added highlight on page %s of %s", page, document.name)
            return document.to_bytes()


def delete_text_region_in_pdf(
    payload: PayloadLike,
    page: object,
    x: float,
    y: float,
    width: object,
    height: object,
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Byte-level :func:`delete_text_region`; the same caveat applies."""

    with error_boundary("deleting text region"):
        with open_document(payload, limits) as document:
            delete_text_region(document, page, Position(x, y), width, height)
            LOGGER.info("Covered text region on page %s of %s", page, document.name)
            return document.to_bytes()


def replace_text(
    payload: PayloadLike,
    replacements: Mapping[str, str | None],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Byte-level :func:`apply_replacements`.

    Raises:
        InvalidInputError: If ``replacements`` is empty.
    """

    if not replacements:
        raise InvalidInputError("Replacements map cannot be null or empty")

    with error_boundary("replacing text"):
        with open_document(payload, limits) as document:
            LOGGER.info("Replacing text in %s", document.name)
            touched = apply_replacements(document, replacements)
            LOGGER.info("Overlaid replacements on %d pages", touched)
            return document.to_bytes()


__all__ = [
    "append_operations",
    "add_text",
    "add_highlight",
    "delete_text_region",
    "overlay_replacements",
    "apply_replacements",
    "add_text_to_pdf",
    "add_highlight_to_pdf",
    "delete_text_region_in_pdf",
    "replace_text",
]
