"""Structural page-tree operations: delete, rotate, extract, split and merge.

Every byte-level operation opens its inputs through
:func:`~pdfeditx.document.open_document`, validates its arguments against the
page count before touching the page tree, serializes the result and closes
every document it opened, whatever happens in between.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from .classifier import error_boundary
from .config import EngineLimits
from .document import PayloadLike, PdfDocument, new_document, open_document, open_documents
from .exceptions import InvalidInputError
from .validators import coerce_page_number, validate_page_number, validate_page_numbers

LOGGER = logging.getLogger("pdfeditx.pages")

RotationSpec = Union[
    Mapping[object, object],
    Iterable[Union[Tuple[object, object], Mapping[object, object]]],
]


# ----------------------------------------------------------------------
# Document-level operations
# ----------------------------------------------------------------------
def remove_pages(document: PdfDocument, pages: Sequence[object]) -> List[int]:
    """Delete ``pages`` (1-based) from ``document``.

    Every number is checked before the first deletion so that a bad entry
    leaves the document untouched. Pages are removed from the highest number
    down, which keeps the remaining numbers valid while the loop runs.

    Returns:
        The page numbers that were removed, highest first.
    """

    if not pages:
        raise InvalidInputError("Pages to delete list cannot be null or empty")

    numbers = validate_page_numbers(pages, document.page_count)
    ordered = sorted(set(numbers), reverse=True)
    for number in ordered:
        document.remove_page(number)
        LOGGER.debug("Deleted page %s", number)
    return ordered


def _coerce_degrees(value: object) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid rotation angle: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise InvalidInputError(f"Invalid rotation angle: {value!r}") from exc
    raise InvalidInputError(f"Invalid rotation angle: {value!r}")


def normalize_rotations(rotations: RotationSpec | None) -> List[Tuple[int, float]]:
    """Flatten ``rotations`` into ``(page, degrees)`` pairs.

    Accepts a ``{page: degrees}`` mapping, a sequence of such mappings, or a
    sequence of pairs. Values that are not numbers at all raise
    :class:`InvalidInputError`; range and angle checks happen later and only
    skip the offending entry.
    """

    if rotations is None:
        raise InvalidInputError("Rotations map cannot be null or empty")

    items: List[Tuple[object, object]] = []
    if isinstance(rotations, Mapping):
        items.extend(rotations.items())
    else:
        for entry in rotations:
            if isinstance(entry, Mapping):
                items.extend(entry.items())
            else:
                page, degrees = entry
                items.append((page, degrees))

    if not items:
        raise InvalidInputError("Rotations map cannot be null or empty")
    return [(coerce_page_number(page), _coerce_degrees(degrees)) for page, degrees in items]


def apply_rotations(document: PdfDocument, rotations: RotationSpec) -> Dict[int, int]:
    """Set the rotation of each requested page.

    Entries with an out-of-range page or an angle that is not a multiple of 90
    are logged and skipped; the rest of the batch is still applied.

    Returns:
        Mapping of page number to the normalized rotation that was applied.
    """

    applied: Dict[int, int] = {}
    for page_number, degrees in normalize_rotations(rotations):
        if page_number < 1 or page_number > document.page_count:
            LOGGER.warning("Invalid page number for rotation: %s", page_number)
            continue
        if degrees % 90 != 0:
            LOGGER.warning("Invalid rotation angle: %s. Must be multiple of 90.", degrees)
            continue

        normalized = int(degrees) % 360
        document.page(page_number).rotation = normalized
        applied[page_number] = normalized
        LOGGER.debug("Rotated page %s to %s degrees", page_number, normalized)
    return applied


def copy_pages(
    source: PdfDocument,
    destination: PdfDocument,
    numbers: Iterable[int],
) -> int:
    """Import ``numbers`` from ``source`` into ``destination`` in the given order."""

    copied = 0
    for number in numbers:
        destination.import_page(source.page(number))
        copied += 1
    return copied


def compute_split_boundaries(split_points: Iterable[object] | None, page_count: int) -> List[int]:
    """Return the sorted, de-duplicated segment starts plus ``page_count + 1``.

    Page 1 and ``page_count + 1`` are always present. A split point outside
    ``[1, page_count]`` raises :class:`InvalidInputError`.
    """

    points: List[int] = []
    for point in split_points or []:
        try:
            points.append(validate_page_number(point, page_count))
        except InvalidInputError as exc:
            raise InvalidInputError(f"Invalid split point: {point!r}") from exc
    return sorted({1, *points, page_count + 1})


# ----------------------------------------------------------------------
# Byte-level operations
# ----------------------------------------------------------------------
def delete_pages(
    payload: PayloadLike,
    pages: Sequence[object],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Return ``payload`` without ``pages``.

    Raises:
        InvalidInputError: If ``pages`` is empty or any page number is out of
            range. Nothing is deleted in that case.
    """

    with error_boundary("deleting pages"):
        with open_document(payload, limits) as document:
            LOGGER.info("Deleting %d pages from %s", len(pages or []), document.name)
            removed = remove_pages(document, pages)
            LOGGER.info(
                "Deleted %d pages. Remaining pages: %d", len(removed), document.page_count
            )
            return document.to_bytes()


def rotate_pages(
    payload: PayloadLike,
    rotations: RotationSpec,
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Return ``payload`` with the valid entries of ``rotations`` applied.

    Rotation is lenient on purpose: a bad page number or angle only skips that
    entry. Values that are not numbers at all are rejected up front.
    """

    with error_boundary("rotating pages"):
        with open_document(payload, limits) as document:
            applied = apply_rotations(document, rotations)
            LOGGER.info("Rotated %d pages in %s", len(applied), document.name)
            return document.to_bytes()


def extract_pages(
    payload: PayloadLike,
    selected_pages: Sequence[object],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Build a new PDF from ``selected_pages`` in the order given.

    Duplicates are allowed and yield independent copies. Any out-of-range
    number fails the whole operation before a page is copied.
    """

    if not selected_pages:
        raise InvalidInputError("Selected pages list cannot be null or empty")

    with error_boundary("extracting pages"):
        with open_document(payload, limits) as source:
            numbers = validate_page_numbers(selected_pages, source.page_count)
            with new_document("extracted") as extracted:
                extracted.copy_metadata_from(source)
                copy_pages(source, extracted, numbers)
                LOGGER.info("Extracted %d pages from %s", len(numbers), source.name)
                return extracted.to_bytes()


def reorder_pages(
    payload: PayloadLike,
    new_order: Sequence[object],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Rebuild ``payload`` with its pages in ``new_order``.

    Pages left out of ``new_order`` are dropped and repeated pages are
    duplicated, matching :func:`extract_pages`.
    """

    if not new_order:
        raise InvalidInputError("New order cannot be null or empty")
    LOGGER.info("Reordering pages to %s", list(new_order))
    return extract_pages(payload, new_order, limits=limits)


def split_pdf(
    payload: PayloadLike,
    split_points: Sequence[object] | None = None,
    *,
    limits: EngineLimits | None = None,
) -> Dict[str, bytes]:
    """Split ``payload`` at ``split_points`` into ``part_N.pdf`` documents.

    Each split point is the first page of a new part. With no split points
    the result is a single part holding every page.
    """

    with error_boundary("splitting PDF"):
        with open_document(payload, limits) as source:
            boundaries = compute_split_boundaries(split_points, source.page_count)
            LOGGER.info(
                "Splitting %s at %d points", source.name, len(boundaries) - 2
            )
            parts: Dict[str, bytes] = {}
            for index, (start, end) in enumerate(zip(boundaries, boundaries[1:]), start=1):
                with new_document(f"part_{index}") as part:
                    part.copy_metadata_from(source)
                    copy_pages(source, part, range(start, end))
                    parts[f"part_{index}.pdf"] = part.to_bytes()
                    LOGGER.debug(
                        "Created split part %d with %d pages", index, part.page_count
                    )
            LOGGER.info("Split PDF into %d parts", len(parts))
            return parts


def merge_pdfs(
    payloads: Sequence[PayloadLike],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Concatenate the pages of ``payloads`` in order into one PDF.

    Every input is checked before any is parsed, all inputs stay open while
    pages are imported, and all of them are closed afterwards. Metadata is
    taken from the first input.
    """

    if not payloads:
        raise InvalidInputError("Files list cannot be null or empty")

    with error_boundary("merging PDFs"):
        with open_documents(payloads, limits) as sources:
            LOGGER.info("Merging %d PDF files", len(sources))
            with new_document("merged") as merged:
                merged.copy_metadata_from(sources[0])
                for source in sources:
                    copied = copy_pages(source, merged, range(1, source.page_count + 1))
                    LOGGER.debug("Added %d pages from %s", copied, source.name)
                LOGGER.info("Merged PDF has %d pages", merged.page_count)
                return merged.to_bytes()


__all__ = [
    "remove_pages",
    "apply_rotations",
    "normalize_rotations",
    "copy_pages",
    "compute_split_boundaries",
    "delete_pages",
    "rotate_pages",
    "extract_pages",
    "reorder_pages",
    "split_pdf",
    "merge_pdfs",
]
