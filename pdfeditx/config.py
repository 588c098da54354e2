"""Engine limits and overlay defaults for :mod:`pdfeditx`."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

LOGGER = logging.getLogger("pdfeditx.config")

PDF_CONTENT_TYPE = "application/pdf"
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024
DEFAULT_MAX_PAGES = 1000

MAX_FILE_SIZE_ENV = "PDFEDITX_MAX_FILE_SIZE"
MAX_PAGES_ENV = "PDFEDITX_MAX_PAGES"

DEFAULT_FONT = "Arial"
DEFAULT_FONT_SIZE = 14.0
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_HIGHLIGHT_WIDTH = 200.0
DEFAULT_HIGHLIGHT_HEIGHT = 20.0
DEFAULT_HIGHLIGHT_COLOR = "#FFFF00"
DEFAULT_DELETE_WIDTH = 100.0
DEFAULT_DELETE_HEIGHT = 20.0

# Layout of the text-replacement overlay.
REPLACEMENT_FONT_SIZE = 12.0
REPLACEMENT_MARGIN = 50.0
REPLACEMENT_LINE_STEP = 20.0


@dataclass(frozen=True)
class EngineLimits:
    """Ceilings enforced on every document before it is mutated."""

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    content_type: str = PDF_CONTENT_TYPE

    @classmethod
    def from_env(cls) -> "EngineLimits":
        """Build limits from the environment, falling back to the defaults."""

        return cls(
            max_file_size=_env_int(MAX_FILE_SIZE_ENV, DEFAULT_MAX_FILE_SIZE),
            max_pages=_env_int(MAX_PAGES_ENV, DEFAULT_MAX_PAGES),
        )


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        LOGGER.warning("Ignoring malformed %s=%r, using %s", name, value, default)
        return default
    if parsed <= 0:
        LOGGER.warning("Ignoring non-positive %s=%r, using %s", name, value, default)
        return default
    return parsed


def get_limits(limits: EngineLimits | None = None) -> EngineLimits:
    """Return ``limits`` or the environment-aware defaults."""

    if limits is not None:
        return limits
    return EngineLimits.from_env()


__all__ = [
    "EngineLimits",
    "get_limits",
    "PDF_CONTENT_TYPE",
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_MAX_PAGES",
    "DEFAULT_FONT",
    "DEFAULT_FONT_SIZE",
    "DEFAULT_TEXT_COLOR",
    "DEFAULT_HIGHLIGHT_WIDTH",
    "DEFAULT_HIGHLIGHT_HEIGHT",
    "DEFAULT_HIGHLIGHT_COLOR",
    "DEFAULT_DELETE_WIDTH",
    "DEFAULT_DELETE_HEIGHT",
]
