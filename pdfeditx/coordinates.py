"""Conversion from top-left/Y-down caller coordinates to PDF user space."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """A point on a page."""

    x: float
    y: float


def to_native_y(page_height: float, caller_y: float, element_height: float) -> float:
    """Return the PDF y coordinate of an element placed at ``caller_y``.

    ``caller_y`` is measured downwards from the top edge of the page and
    ``element_height`` is the font size for text or the rectangle height for
    shapes. The result is the bottom edge of the element measured upwards from
    the bottom of the page.
    """

    return float(page_height) - float(caller_y) - float(element_height)


def to_native(page_height: float, position: Position, element_height: float) -> Position:
    return Position(
        float(position.x), to_native_y(page_height, position.y, element_height)
    )


__all__ = ["Position", "to_native_y", "to_native"]
