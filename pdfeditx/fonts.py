"""Built-in Type1 fonts available to text overlays."""

from __future__ import annotations

import logging
from enum import Enum

from pypdf.generic import DictionaryObject, NameObject

LOGGER = logging.getLogger("pdfeditx.fonts")


class StandardFont(str, Enum):
    """The six standard PDF fonts reachable through :func:`resolve_font`."""

    HELVETICA = "Helvetica"
    HELVETICA_BOLD = "Helvetica-Bold"
    TIMES_ROMAN = "Times-Roman"
    TIMES_BOLD = "Times-Bold"
    COURIER = "Courier"
    COURIER_BOLD = "Courier-Bold"

    @property
    def resource_name(self) -> str:
        """Name under which the font is registered in a page's resources."""

        return "/PdfEditX-" + self.value

    def font_dictionary(self) -> DictionaryObject:
        return DictionaryObject(
            {
                NameObject("/Type"): NameObject("/Font"),
                NameObject("/Subtype"): NameObject("/Type1"),
                NameObject("/BaseFont"): NameObject("/" + self.value),
                NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
            }
        )


DEFAULT_FONT = StandardFont.HELVETICA

FONT_ALIASES: dict[str, StandardFont] = {
    "arial": StandardFont.HELVETICA,
    "helvetica": StandardFont.HELVETICA,
    "times": StandardFont.TIMES_ROMAN,
    "times new roman": StandardFont.TIMES_ROMAN,
    "courier": StandardFont.COURIER,
    "arial-bold": StandardFont.HELVETICA_BOLD,
    "helvetica-bold": StandardFont.HELVETICA_BOLD,
    "times-bold": StandardFont.TIMES_BOLD,
    "times new roman-bold": StandardFont.TIMES_BOLD,
    "courier-bold": StandardFont.COURIER_BOLD,
}


def resolve_font(alias: str | StandardFont | None) -> StandardFont:
    """Map a case-insensitive font alias to a :class:`StandardFont`.

    Unknown aliases fall back to Helvetica with a warning.
    """

    if isinstance(alias, StandardFont):
        return alias
    if alias is None or not str(alias).strip():
        return DEFAULT_FONT
    font = FONT_ALIASES.get(str(alias).strip().lower())
    if font is None:
        LOGGER.warning("Unknown font %r, using %s", alias, DEFAULT_FONT.value)
        return DEFAULT_FONT
    return font


__all__ = ["StandardFont", "DEFAULT_FONT", "FONT_ALIASES", "resolve_font"]
