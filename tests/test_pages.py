from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfReader

from pdfeditx import (
    EngineLimits,
    InvalidInputError,
    PdfPayload,
    delete_pages,
    extract_pages,
    merge_pdfs,
    open_document,
    reorder_pages,
    rotate_pages,
    split_pdf,
)
from pdfeditx.pages import compute_split_boundaries, normalize_rotations, remove_pages


def _reader(data: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(data))


# ----------------------------------------------------------------------
# Delete
# ----------------------------------------------------------------------
def test_delete_pages_keeps_the_rest_in_order(
    sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]
) -> None:
    result = delete_pages(sample_pdf, [2, 4])
    assert page_widths(result) == [100, 120, 140]


def test_delete_pages_order_and_duplicates_do_not_matter(
    sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]
) -> None:
    result = delete_pages(sample_pdf, [4, 2, 4])
    assert page_widths(result) == [100, 120, 140]


@pytest.mark.parametrize("pages", [[], None])
def test_delete_pages_requires_pages(sample_pdf: bytes, pages: list[int] | None) -> None:
    with pytest.raises(InvalidInputError):
        delete_pages(sample_pdf, pages)  # type: ignore[arg-type]


def test_remove_pages_is_all_or_nothing(sample_pdf: bytes) -> None:
    with open_document(sample_pdf) as document:
        with pytest.raises(InvalidInputError):
            remove_pages(document, [2, 9])
        assert document.page_count == 5


def test_delete_every_page_yields_empty_document(sample_pdf: bytes) -> None:
    result = delete_pages(sample_pdf, [1, 2, 3, 4, 5])
    assert len(_reader(result).pages) == 0


# ----------------------------------------------------------------------
# Rotate
# ----------------------------------------------------------------------
def test_rotate_pages_skips_bad_angles(sample_pdf: bytes) -> None:
    result = rotate_pages(sample_pdf, {1: 90, 2: 45})
    reader = _reader(result)
    assert reader.pages[0].rotation == 90
    assert reader.pages[1].rotation == 0


def test_rotate_pages_skips_out_of_range_pages(sample_pdf: bytes) -> None:
    result = rotate_pages(sample_pdf, [(9, 90), (3, 180)])
    reader = _reader(result)
    assert len(reader.pages) == 5
    assert reader.pages[2].rotation == 180


def test_rotation_is_absolute_and_normalized(sample_pdf: bytes) -> None:
    once = rotate_pages(sample_pdf, {1: 90})
    twice = rotate_pages(once, {"1": "-90"})
    assert _reader(twice).pages[0].rotation == 270

    full = rotate_pages(sample_pdf, [{1: 450}, {2: 360}])
    reader = _reader(full)
    assert reader.pages[0].rotation == 90
    assert reader.pages[1].rotation == 0


@pytest.mark.parametrize("rotations", [None, {}, []])
def test_rotate_pages_requires_rotations(sample_pdf: bytes, rotations: object) -> None:
    with pytest.raises(InvalidInputError):
        rotate_pages(sample_pdf, rotations)  # type: ignore[arg-type]


def test_normalize_rotations_accepts_all_shapes() -> None:
    assert normalize_rotations({1: 90}) == [(1, 90.0)]
    assert normalize_rotations([(2, "180")]) == [(2, 180.0)]
    assert normalize_rotations([{3: 270}, {4: 0}]) == [(3, 270.0), (4, 0.0)]


@pytest.mark.parametrize("rotations", [{"one": 90}, {1: "left"}, {1: True}])
def test_normalize_rotations_rejects_non_numbers(rotations: dict) -> None:
    with pytest.raises(InvalidInputError):
        normalize_rotations(rotations)


# ----------------------------------------------------------------------
# Extract and reorder
# ----------------------------------------------------------------------
def test_extract_pages_honours_order_and_duplicates(
    sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]
) -> None:
    result = extract_pages(sample_pdf, [3, 1, 3])
    assert page_widths(result) == [120, 100, 120]


def test_extract_pages_copies_metadata(sample_pdf: bytes) -> None:
    result = extract_pages(sample_pdf, [1])
    assert _reader(result).metadata.get("/Title") == "Sample"


def test_extract_pages_rejects_out_of_range(sample_pdf: bytes) -> None:
    with pytest.raises(InvalidInputError, match="out of range"):
        extract_pages(sample_pdf, [1, 6])


def test_extract_pages_requires_selection(sample_pdf: bytes) -> None:
    with pytest.raises(InvalidInputError):
        extract_pages(sample_pdf, [])


def test_reorder_pages(sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]) -> None:
    result = reorder_pages(sample_pdf, [5, 4, 3, 2, 1])
    assert page_widths(result) == [140, 130, 120, 110, 100]


# ----------------------------------------------------------------------
# Split
# ----------------------------------------------------------------------
def test_compute_split_boundaries() -> None:
    assert compute_split_boundaries([3, 3, 1], 5) == [1, 3, 6]
    assert compute_split_boundaries([], 5) == [1, 6]
    assert compute_split_boundaries(None, 5) == [1, 6]


def test_split_without_points_yields_one_part(sample_pdf: bytes) -> None:
    parts = split_pdf(sample_pdf, [])
    assert list(parts) == ["part_1.pdf"]
    assert len(_reader(parts["part_1.pdf"]).pages) == 5


def test_split_pdf_parts(
    sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]
) -> None:
    parts = split_pdf(sample_pdf, [4, 2])

    assert list(parts) == ["part_1.pdf", "part_2.pdf", "part_3.pdf"]
    assert page_widths(parts["part_1.pdf"]) == [100]
    assert page_widths(parts["part_2.pdf"]) == [110, 120]
    assert page_widths(parts["part_3.pdf"]) == [130, 140]


@pytest.mark.parametrize("point", [0, 6, "x"])
def test_split_rejects_bad_points(sample_pdf: bytes, point: object) -> None:
    with pytest.raises(InvalidInputError, match="Invalid split point"):
        split_pdf(sample_pdf, [point])


# ----------------------------------------------------------------------
# Merge
# ----------------------------------------------------------------------
def test_split_then_merge_restores_page_sequence(
    sample_pdf: bytes, page_widths: Callable[[bytes], list[int]]
) -> None:
    parts = split_pdf(sample_pdf, [2, 4])
    merged = merge_pdfs(list(parts.values()))
    assert page_widths(merged) == page_widths(sample_pdf)


def test_merge_pdfs_concatenates_and_keeps_first_metadata(
    pdf_factory: Callable[..., bytes], page_widths: Callable[[bytes], list[int]]
) -> None:
    first = pdf_factory(2, widths=[72, 73], title="Document One")
    second = pdf_factory(1, widths=[74], title="Document Two")

    merged = merge_pdfs([first, PdfPayload(second, filename="two.pdf")])

    assert page_widths(merged) == [72, 73, 74]
    assert _reader(merged).metadata.get("/Title") == "Document One"


def test_merge_pdfs_requires_inputs() -> None:
    with pytest.raises(InvalidInputError):
        merge_pdfs([])


def test_merge_pdfs_checks_size_of_every_input(sample_pdf: bytes) -> None:
    limits = EngineLimits(max_file_size=len(sample_pdf))
    with pytest.raises(InvalidInputError, match="maximum limit"):
        merge_pdfs([sample_pdf, sample_pdf + b"\n" * 10], limits=limits)


def test_merge_pdfs_checks_page_count_of_every_input(
    pdf_factory: Callable[..., bytes],
) -> None:
    with pytest.raises(InvalidInputError, match="too many pages"):
        merge_pdfs([pdf_factory(1), pdf_factory(4)], limits=EngineLimits(max_pages=3))
