"""
app/services package marker.
"""

from app.services.brand_intel_service import (
    BrandIntelService,
    InsightsOutcome,
    QueryOutcome,
    VariableSelection,
    build_brand_intel_service,
)
from app.services.customer_upload_service import (
    CustomerUploadError,
    CustomerUploadService,
    build_customer_upload_service,
)
from app.services.enrichment_service import EnrichmentService

__all__ = [
    "BrandIntelService",
    "InsightsOutcome",
    "QueryOutcome",
    "VariableSelection",
    "build_brand_intel_service",
    "CustomerUploadError",
    "CustomerUploadService",
    "build_customer_upload_service",
    "EnrichmentService",
]
