"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and service wiring.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Request, UploadFile, status

from app.config import BrandIntelSettings
from app.services.brand_intel_service import BrandIntelService
from app.services.customer_upload_service import CustomerUploadService

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    if not filename.endswith(".csv") and content_type not in CSV_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def get_settings_from_app(request: Request) -> BrandIntelSettings:
    return request.app.state.settings


def get_brand_intel_service(request: Request) -> BrandIntelService:
    """
    Return the service built once in ``create_app``.
    """

    return request.app.state.brand_intel_service


def get_customer_upload_service(request: Request) -> CustomerUploadService:
    return request.app.state.customer_upload_service
