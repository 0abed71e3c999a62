"""
tests/test_customer_upload_service.py

Pytest unit tests for CustomerUploadService.

Coverage
--------
- Header normalization and BOM handling
- Generated customer ids and blank-cell handling
- Empty rows reported as row errors, capped error list
- Row cap truncation
- Unreadable files rejected with CustomerUploadError
"""

from __future__ import annotations

import io

import pytest

from app.config import CustomerUploadSettings
from app.errors import InvalidInputError
from app.services.customer_upload_service import (
    CustomerUploadError,
    CustomerUploadService,
    build_customer_upload_service,
    normalize_header,
)


@pytest.fixture()
def service() -> CustomerUploadService:
    return CustomerUploadService(max_rows=500, max_validation_errors=100)


def _csv(text: str) -> io.BytesIO:
    return io.BytesIO(text.encode("utf-8"))


@pytest.mark.parametrize(
    "header,expected",
    [
        ("First Name", "first_name"),
        ("  last-name ", "last_name"),
        ("EMAIL", "email"),
        ("customer_id", "customer_id"),
    ],
)
def test_normalize_header(header: str, expected: str) -> None:
    assert normalize_header(header) == expected


class TestParseCsv:
    def test_bom_and_headers(self, service: CustomerUploadService) -> None:
        raw = io.BytesIO(b"\xef\xbb\xbfCustomer ID,First Name,City\nC-9,Sarah,Seattle\n")

        summary = service.parse_csv(raw)

        assert summary.customers == [{"customer_id": "C-9", "first_name": "Sarah", "city": "Seattle"}]
        assert summary.rows_failed == 0
        assert summary.truncated is False

    def test_existing_id_column_is_kept(self, service: CustomerUploadService) -> None:
        summary = service.parse_csv(_csv("id,email\n42,a@example.com\n"))
        assert summary.customers == [{"id": "42", "email": "a@example.com"}]

    def test_generated_ids_follow_customer_position(self, service: CustomerUploadService) -> None:
        summary = service.parse_csv(_csv("first_name,email\nSarah,\n,,\nMichael,m@example.com\n"))

        assert [c["customer_id"] for c in summary.customers] == ["CUST_0001", "CUST_0002"]
        assert summary.customers[0]["email"] is None
        assert summary.rows_failed == 1
        assert summary.validation_errors[0].row_number == 3
        assert summary.validation_errors[0].message == "Completely empty rows are not allowed."

    def test_error_list_is_capped(self) -> None:
        service = CustomerUploadService(max_rows=500, max_validation_errors=1)

        summary = service.parse_csv(_csv("a,b\n,\n,\n,\n1,2\n"))

        assert summary.rows_failed == 3
        assert len(summary.validation_errors) == 1
        assert len(summary.customers) == 1

    def test_truncates_at_row_cap(self) -> None:
        service = CustomerUploadService(max_rows=2, max_validation_errors=10)

        summary = service.parse_csv(_csv("email\na@x.com\nb@x.com\nc@x.com\n"))

        assert len(summary.customers) == 2
        assert summary.truncated is True

    def test_exactly_at_row_cap_is_not_truncated(self) -> None:
        service = CustomerUploadService(max_rows=2, max_validation_errors=10)
        summary = service.parse_csv(_csv("email\na@x.com\nb@x.com\n"))
        assert summary.truncated is False

    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"first_name,email\n\xff\xfe\xfa,bad\n",
        ],
    )
    def test_unreadable_files(self, service: CustomerUploadService, raw: bytes) -> None:
        with pytest.raises(CustomerUploadError):
            service.parse_csv(io.BytesIO(raw))

    def test_upload_error_is_invalid_input(self) -> None:
        assert issubclass(CustomerUploadError, InvalidInputError)


def test_build_from_settings() -> None:
    service = build_customer_upload_service(CustomerUploadSettings(max_rows=1, max_validation_errors=1))
    summary = service.parse_csv(_csv("email\na@x.com\nb@x.com\n"))
    assert summary.truncated is True
