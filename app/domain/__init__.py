"""
app/domain package marker.
"""

from app.domain.brand_intel import (
    AssumptionComparison,
    BusinessContext,
    CatalogVariable,
    CustomerRecord,
    CustomerUploadSummary,
    EnrichmentBatchResult,
    EnrichmentSource,
    EnrichmentStats,
    RowValidationError,
    Variable,
    VariableCategory,
)

__all__ = [
    "AssumptionComparison",
    "BusinessContext",
    "CatalogVariable",
    "CustomerRecord",
    "CustomerUploadSummary",
    "EnrichmentBatchResult",
    "EnrichmentSource",
    "EnrichmentStats",
    "RowValidationError",
    "Variable",
    "VariableCategory",
]
