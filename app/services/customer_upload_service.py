"""
app/services/customer_upload_service.py

Customer-list CSV parsing for the enrichment wizard.

Rows are read with ``csv.DictReader`` over UTF-8 (a leading BOM is
tolerated). Column names are normalized to snake_case so ``First Name`` and
``first_name`` land on the same key. Nothing is persisted.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import BinaryIO

from app.config import CustomerUploadSettings, get_customer_upload_settings
from app.domain.brand_intel import CustomerRecord, CustomerUploadSummary, RowValidationError
from app.errors import InvalidInputError

logger = logging.getLogger(__name__)

_HEADER_SEPARATORS = re.compile(r"[\s\-]+")


class CustomerUploadError(InvalidInputError):
    """
    Raised when the uploaded file cannot be read as a customer CSV at all.
    """


def normalize_header(header: str) -> str:
    return _HEADER_SEPARATORS.sub("_", (header or "").strip().lower())


def _is_blank_cell(value: object) -> bool:
    # Surplus cells arrive as a list under DictReader's restkey.
    if isinstance(value, list):
        return all(_is_blank_cell(item) for item in value)
    return value is None or not str(value).strip()


def _is_completely_empty_row(raw_row: dict) -> bool:
    return all(_is_blank_cell(value) for value in raw_row.values())


class CustomerUploadService:
    """
    Parses an uploaded customer list into scalar-valued customer records.
    """

    def __init__(self, *, max_rows: int, max_validation_errors: int) -> None:
        self._max_rows = max(1, max_rows)
        self._max_validation_errors = max(1, max_validation_errors)

    def parse_csv(self, raw_file: BinaryIO) -> CustomerUploadSummary:
        """
        Read at most ``max_rows`` data rows from a binary CSV stream.

        Rows without ``customer_id`` or ``id`` get a generated
        ``CUST_0001``-style identifier based on their position. Blank cells
        become ``None``.

        Raises:
            CustomerUploadError: The header row is missing, the file is not
                UTF-8, or the CSV is structurally invalid.
        """

        text_stream: io.TextIOWrapper | None = None
        customers: list[CustomerRecord] = []
        rows_failed = 0
        captured_errors: list[RowValidationError] = []
        truncated = False

        try:
            text_stream = io.TextIOWrapper(raw_file, encoding="utf-8-sig", newline="")
            reader = csv.DictReader(text_stream)
            headers = [header for header in (reader.fieldnames or []) if header and header.strip()]
            if not headers:
                raise CustomerUploadError("CSV header row is missing.")

            for row_number, raw_row in enumerate(reader, start=2):
                if len(customers) + rows_failed >= self._max_rows:
                    truncated = True
                    break

                if _is_completely_empty_row(raw_row):
                    rows_failed += 1
                    self._record_error(
                        captured_errors,
                        RowValidationError(
                            row_number=row_number,
                            message="Completely empty rows are not allowed.",
                        ),
                    )
                    continue

                customers.append(self._to_record(raw_row, position=len(customers) + 1))

        except UnicodeDecodeError as exc:
            raise CustomerUploadError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise CustomerUploadError(f"Invalid CSV format: {exc}") from exc
        finally:
            if text_stream is not None:
                try:
                    text_stream.detach()
                except ValueError:
                    pass

        if truncated:
            logger.warning("Customer upload truncated at %d rows", self._max_rows)

        logger.info(
            "Customer upload parsed rows=%d failed=%d truncated=%s",
            len(customers),
            rows_failed,
            truncated,
        )
        return CustomerUploadSummary(
            customers=customers,
            rows_failed=rows_failed,
            validation_errors=captured_errors,
            truncated=truncated,
        )

    @staticmethod
    def _to_record(raw_row: dict, *, position: int) -> CustomerRecord:
        record: CustomerRecord = {}
        for header, value in raw_row.items():
            # DictReader puts surplus cells under a None key.
            if header is None or not header.strip():
                continue
            cleaned = value.strip() if isinstance(value, str) else None
            record[normalize_header(header)] = cleaned or None

        if not record.get("customer_id") and not record.get("id"):
            record["customer_id"] = f"CUST_{position:04d}"
        return record

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        logger.warning(
            "Customer upload row rejected row=%s message=%s",
            error.row_number,
            error.message,
        )
        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


def build_customer_upload_service(settings: CustomerUploadSettings | None = None) -> CustomerUploadService:
    """
    Build the upload service from explicit or env-driven settings.
    """

    settings = settings or get_customer_upload_settings()
    return CustomerUploadService(
        max_rows=settings.max_rows,
        max_validation_errors=settings.max_validation_errors,
    )
