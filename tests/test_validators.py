from __future__ import annotations

import io
from typing import Callable

import pytest
from pypdf import PdfWriter

from pdfeditx import EngineLimits, InvalidInputError, PdfPayload, get_pdf_info, validate_document
from pdfeditx.validators import (
    coerce_page_number,
    validate_page_number,
    validate_page_numbers,
    validate_payload,
)


def test_validate_document_reports_info(sample_pdf: bytes) -> None:
    info = validate_document(sample_pdf, "application/pdf")

    assert info.page_count == 5
    assert info.file_size == len(sample_pdf)
    assert info.is_encrypted is False
    assert info.metadata.get("/Title") == "Sample"


@pytest.mark.parametrize("data", [b"", None])
def test_empty_payload_is_rejected(data: bytes | None) -> None:
    with pytest.raises(InvalidInputError, match="null or empty"):
        validate_payload(data, "application/pdf")


def test_wrong_content_type_is_rejected(sample_pdf: bytes) -> None:
    with pytest.raises(InvalidInputError, match="Only PDF files"):
        validate_payload(sample_pdf, "text/plain")


def test_content_type_is_case_insensitive(sample_pdf: bytes) -> None:
    validate_payload(sample_pdf, " Application/PDF ")


def test_size_is_checked_before_anything_else() -> None:
    limits = EngineLimits(max_file_size=10)
    # Not a PDF and the wrong type: the size ceiling still wins.
    with pytest.raises(InvalidInputError, match="maximum limit of 10 bytes"):
        validate_payload(b"x" * 11, "text/plain", limits)


def test_size_ceiling_is_inclusive() -> None:
    validate_payload(b"x" * 10, "application/pdf", EngineLimits(max_file_size=10))


def test_page_ceiling(sample_pdf: bytes) -> None:
    with pytest.raises(InvalidInputError, match="too many pages"):
        validate_document(sample_pdf, "application/pdf", EngineLimits(max_pages=3))


def test_get_pdf_info_accepts_payload(sample_pdf: bytes) -> None:
    info = get_pdf_info(PdfPayload(sample_pdf, filename="sample.pdf"))
    assert info.page_count == 5


def test_get_pdf_info_rejects_declared_type() -> None:
    with pytest.raises(InvalidInputError):
        get_pdf_info(PdfPayload(b"%PDF-1.4", content_type="image/png"))


def test_encrypted_with_empty_password_is_accepted(
    pdf_factory: Callable[..., bytes],
) -> None:
    writer = PdfWriter(clone_from=io.BytesIO(pdf_factory(2)))
    writer.encrypt(user_password="", owner_password="owner")
    buffer = io.BytesIO()
    writer.write(buffer)

    info = validate_document(buffer.getvalue(), "application/pdf")

    assert info.page_count == 2
    assert info.is_encrypted is True


def test_encrypted_with_password_is_rejected(pdf_factory: Callable[..., bytes]) -> None:
    writer = PdfWriter(clone_from=io.BytesIO(pdf_factory(1)))
    writer.encrypt(user_password="secret", owner_password="owner")
    buffer = io.BytesIO()
    writer.write(buffer)

    with pytest.raises(InvalidInputError, match="cannot be decrypted"):
        validate_document(buffer.getvalue(), "application/pdf")


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3), (3.0, 3), ("4", 4), (" 2 ", 2), ("-1", -1)],
)
def test_coerce_page_number(value: object, expected: int) -> None:
    assert coerce_page_number(value) == expected


@pytest.mark.parametrize("value", [True, 2.5, "two", None, [1]])
def test_coerce_page_number_rejects(value: object) -> None:
    with pytest.raises(InvalidInputError):
        coerce_page_number(value)


@pytest.mark.parametrize("page", [0, -1, 6])
def test_validate_page_number_range(page: int) -> None:
    with pytest.raises(InvalidInputError, match="out of range"):
        validate_page_number(page, 5)


def test_validate_page_numbers_keeps_order_and_duplicates() -> None:
    assert validate_page_numbers([3, 1, 3], 5) == [3, 1, 3]


def test_validate_page_numbers_fails_on_any_bad_entry() -> None:
    with pytest.raises(InvalidInputError):
        validate_page_numbers([1, 2, 9], 5)
