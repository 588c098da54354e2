"""Apply a declarative list of edit records to a PDF.

A change list is a JSON array such as::

    [
        {"page": 1, "action": "add_text", "x": 120, "y": 300,
         "text": "Hello World", "font": "Arial", "size": 14},
        {"page": 2, "action": "highlight", "x": 50, "y": 100,
         "width": 200, "height": 20, "color": "#FFFF00"}
    ]

Coordinates are top-left/Y-down. Records are applied in order, so later
records draw over earlier ones. Records with an unrecognized action are
skipped with a warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .classifier import error_boundary
from .config import (
    DEFAULT_DELETE_HEIGHT,
    DEFAULT_DELETE_WIDTH,
    DEFAULT_FONT,
    DEFAULT_FONT_SIZE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_HIGHLIGHT_HEIGHT,
    DEFAULT_HIGHLIGHT_WIDTH,
    DEFAULT_TEXT_COLOR,
    EngineLimits,
)
from .coordinates import Position
from .document import PayloadLike, PdfDocument, open_document
from .exceptions import InvalidInputError, ResourceExhaustedError
from .overlay import add_highlight, add_text, delete_text_region
from .validators import coerce_page_number, validate_page_number

LOGGER = logging.getLogger("pdfeditx.changes")


class ChangeAction(str, Enum):
    ADD_TEXT = "add_text"
    HIGHLIGHT = "highlight"
    DELETE_TEXT = "delete_text"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "ChangeAction":
        """Return the action named by ``value``, or :attr:`UNKNOWN`."""

        if isinstance(value, str):
            for action in cls:
                if action is not cls.UNKNOWN and action.value == value:
                    return action
        return cls.UNKNOWN


def _number(record: Mapping[str, Any], key: str) -> float:
    value = record.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Change field '{key}' must be a number, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class ChangeRecord:
    """One edit instruction from a change list."""

    page: int
    action: ChangeAction
    x: float
    y: float
    raw_action: Optional[str] = None
    text: Optional[str] = None
    font: Optional[str] = None
    size: Optional[float] = None
    color: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "ChangeRecord":
        """Build a record from one decoded JSON object.

        ``page``, ``x`` and ``y`` are required; the action-specific fields are
        optional and defaulted when the record is applied.
        """

        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Change record must be an object, got {record!r}")

        raw_action = record.get("action")
        optional: Dict[str, Any] = {}
        for key in ("size", "width", "height"):
            if record.get(key) is not None:
                optional[key] = _number(record, key)
        for key in ("text", "font", "color"):
            if record.get(key) is not None:
                optional[key] = str(record[key])

        return cls(
            page=coerce_page_number(record.get("page")),
            action=ChangeAction.parse(raw_action),
            x=_number(record, "x"),
            y=_number(record, "y"),
            raw_action=None if raw_action is None else str(raw_action),
            **optional,
        )


@dataclass
class AppliedChanges:
    """Outcome of a change-list run."""

    applied: List[ChangeRecord] = field(default_factory=list)
    skipped: List[ChangeRecord] = field(default_factory=list)


def parse_changes(changes: str | bytes | Sequence[Mapping[str, Any]]) -> List[ChangeRecord]:
    """Decode ``changes`` (JSON text or already-decoded records)."""

    if isinstance(changes, (str, bytes, bytearray)):
        try:
            decoded = json.loads(changes)
        except ValueError as exc:
            raise InvalidInputError(f"Change list is not valid JSON: {exc}") from exc
    else:
        decoded = changes

    if not isinstance(decoded, list):
        raise InvalidInputError("Change list must be a JSON array")
    return [ChangeRecord.from_mapping(record) for record in decoded]


def _apply_add_text(document: PdfDocument, change: ChangeRecord) -> bool:
    return add_text(
        document,
        change.page,
        change.text,
        change.position,
        font=change.font or DEFAULT_FONT,
        size=change.size if change.size is not None else DEFAULT_FONT_SIZE,
        color=change.color or DEFAULT_TEXT_COLOR,
    )


def _apply_highlight(document: PdfDocument, change: ChangeRecord) -> bool:
    add_highlight(
        document,
        change.page,
        change.position,
        change.width if change.width is not None else DEFAULT_HIGHLIGHT_WIDTH,
        change.height if change.height is not None else DEFAULT_HIGHLIGHT_HEIGHT,
        change.color or DEFAULT_HIGHLIGHT_COLOR,
    )
    return True


def _apply_delete_text(document: PdfDocument, change: ChangeRecord) -> bool:
    delete_text_region(
        document,
        change.page,
        change.position,
        change.width if change.width is not None else DEFAULT_DELETE_WIDTH,
        change.height if change.height is not None else DEFAULT_DELETE_HEIGHT,
    )
    return True


def _skip_unknown(document: PdfDocument, change: ChangeRecord) -> bool:
    LOGGER.warning("Unknown action: %s. Skipping change.", change.raw_action)
    return False


HANDLERS: Dict[ChangeAction, Callable[[PdfDocument, ChangeRecord], bool]] = {
    ChangeAction.ADD_TEXT: _apply_add_text,
    ChangeAction.HIGHLIGHT: _apply_highlight,
    ChangeAction.DELETE_TEXT: _apply_delete_text,
    ChangeAction.UNKNOWN: _skip_unknown,
}


def apply_changes_to_document(
    document: PdfDocument,
    changes: Sequence[ChangeRecord],
) -> AppliedChanges:
    """Apply ``changes`` to an open document in order.

    The page of every recognized record is checked against the page count
    before the first record is applied. Memory exhaustion aborts the whole batch with
    :class:`ResourceExhaustedError`.
    """

    for change in changes:
        if change.action is not ChangeAction.UNKNOWN:
            validate_page_number(change.page, document.page_count)

    result = AppliedChanges()
    try:
        for change in changes:
            LOGGER.debug(
                "Applying change: %s on page %s at (%s, %s)",
                change.raw_action,
                change.page,
                change.x,
                change.y,
            )
            if HANDLERS[change.action](document, change):
                result.applied.append(change)
            else:
                result.skipped.append(change)
    except MemoryError as exc:
        LOGGER.error("Out of memory during change application")
        raise ResourceExhaustedError(
            "File too complex for editing - insufficient memory"
        ) from exc
    return result


def apply_changes(
    payload: PayloadLike,
    changes: str | bytes | Sequence[Mapping[str, Any]],
    *,
    limits: EngineLimits | None = None,
) -> bytes:
    """Return ``payload`` with the change list applied."""

    with error_boundary("applying changes"):
        records = parse_changes(changes)
        with open_document(payload, limits) as document:
            LOGGER.info("Applying %d changes to %s", len(records), document.name)
            result = apply_changes_to_document(document, records)
            output = document.to_bytes()
            LOGGER.info(
                "Applied %d changes, skipped %d", len(result.applied), len(result.skipped)
            )
            return output


__all__ = [
    "ChangeAction",
    "ChangeRecord",
    "AppliedChanges",
    "HANDLERS",
    "parse_changes",
    "apply_changes_to_document",
    "apply_changes",
]
