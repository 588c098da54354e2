from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfReader, PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

PAGE_HEIGHT = 200


def _write(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    """Build a PDF whose page N is ``100 + 10 * (N - 1)`` points wide.

    Distinct widths let tests tell which original page ended up where.
    """

    def _create(
        page_count: int = 5,
        *,
        widths: Sequence[int] | None = None,
        title: str | None = None,
    ) -> bytes:
        writer = PdfWriter()
        for index in range(page_count):
            width = widths[index] if widths is not None else 100 + 10 * index
            writer.add_blank_page(width=width, height=PAGE_HEIGHT)
        if title is not None:
            writer.add_metadata({"/Title": title})
        return _write(writer)

    return _create


@pytest.fixture()
def sample_pdf(pdf_factory: Callable[..., bytes]) -> bytes:
    return pdf_factory(5, title="Sample")


@pytest.fixture()
def text_pdf() -> bytes:
    """Two pages; only the first carries the text ``Hello World``."""

    writer = PdfWriter()
    page = writer.add_blank_page(width=300, height=400)
    font = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
        }
    )
    page[NameObject("/Resources")] = DictionaryObject(
        {
            NameObject("/Font"): DictionaryObject(
                {NameObject("/F1"): writer._add_object(font)}
            )
        }
    )
    stream = DecodedStreamObject()
    stream.set_data(b"BT /F1 12 Tf 72 300 Td (Hello World) Tj ET")
    page[NameObject("/Contents")] = writer._add_object(stream)
    writer.add_blank_page(width=300, height=400)
    return _write(writer)


@pytest.fixture()
def page_widths() -> Callable[[bytes], list[int]]:
    def _widths(data: bytes) -> list[int]:
        reader = PdfReader(io.BytesIO(data))
        return [int(float(page.mediabox.width)) for page in reader.pages]

    return _widths


@pytest.fixture()
def page_operations() -> Callable[[bytes, int], list[tuple[list, bytes]]]:
    """Return the parsed content stream operations of a 1-based page."""

    def _operations(data: bytes, page_number: int) -> list[tuple[list, bytes]]:
        reader = PdfReader(io.BytesIO(data))
        contents = reader.pages[page_number - 1].get_contents()
        if contents is None:
            return []
        return list(contents.operations)

    return _operations


def shown_strings(operations: list[tuple[list, bytes]]) -> list[str]:
    shown = []
    for operands, operator in operations:
        if operator != b"Tj":
            continue
        operand = operands[0]
        if isinstance(operand, bytes):
            shown.append(operand.decode("cp1252"))
        else:
            shown.append(str(operand))
    return shown


@pytest.fixture()
def shown_text() -> Callable[[list[tuple[list, bytes]]], list[str]]:
    return shown_strings
