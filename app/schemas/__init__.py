"""
app/schemas package marker.
"""

from app.schemas.brand_intel import (
    AssumptionComparisonSchema,
    BusinessContextSchema,
    CatalogVariableSchema,
    CustomerUploadErrorSchema,
    CustomerUploadResponse,
    EnrichDataRequest,
    EnrichDataResponse,
    EnrichmentStatsSchema,
    GenerateInsightsRequest,
    GenerateInsightsResponse,
    GenerateQueriesRequest,
    GenerateQueriesResponse,
    HealthResponse,
    SampleDataResponse,
    SelectVariablesRequest,
    SelectVariablesResponse,
    VariableCatalogResponse,
    VariableSchema,
)

__all__ = [
    "AssumptionComparisonSchema",
    "BusinessContextSchema",
    "CatalogVariableSchema",
    "CustomerUploadErrorSchema",
    "CustomerUploadResponse",
    "EnrichDataRequest",
    "EnrichDataResponse",
    "EnrichmentStatsSchema",
    "GenerateInsightsRequest",
    "GenerateInsightsResponse",
    "GenerateQueriesRequest",
    "GenerateQueriesResponse",
    "HealthResponse",
    "SampleDataResponse",
    "SelectVariablesRequest",
    "SelectVariablesResponse",
    "VariableCatalogResponse",
    "VariableSchema",
]
