"""
app/api/routers/brand_intel.py

Brand intelligence wizard endpoints.

Upstream (identity provider, LLM) and parse failures never surface here:
the service substitutes fallbacks. Only invalid input is reported, as 400.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import (
    get_brand_intel_service,
    get_csv_upload,
    get_customer_upload_service,
)
from app.domain.variable_catalog import AVAILABLE_VARIABLES
from app.errors import InvalidInputError
from app.sample_data import SAMPLE_BUSINESS_CONTEXT, sample_customers
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
    SampleDataResponse,
    SelectVariablesRequest,
    SelectVariablesResponse,
    VariableCatalogResponse,
    VariableSchema,
)
from app.services.brand_intel_service import BrandIntelService
from app.services.customer_upload_service import CustomerUploadService

router = APIRouter(tags=["brand-intel"])


def _bad_request(exc: InvalidInputError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("/select-variables", response_model=SelectVariablesResponse)
def select_variables(
    payload: SelectVariablesRequest,
    service: BrandIntelService = Depends(get_brand_intel_service),
) -> SelectVariablesResponse:
    try:
        selection = service.select_variables(payload.business_context.to_domain())
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc

    return SelectVariablesResponse(
        variables=[VariableSchema.from_domain(variable) for variable in selection.variables],
        fallback_used=selection.is_fallback,
    )


@router.post("/enrich-data", response_model=EnrichDataResponse)
def enrich_data(
    payload: EnrichDataRequest,
    service: BrandIntelService = Depends(get_brand_intel_service),
) -> EnrichDataResponse:
    """
    Enrich up to the configured batch cap of customers, sequentially.
    """

    try:
        result = service.enrich_customers(
            payload.customer_data,
            [variable.to_domain() for variable in payload.selected_variables],
        )
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc

    return EnrichDataResponse(
        enriched_customers=result.enriched_customers,
        stats=EnrichmentStatsSchema.from_domain(result.stats),
        truncated=result.truncated,
    )


@router.post("/generate-insights", response_model=GenerateInsightsResponse)
def generate_insights(
    payload: GenerateInsightsRequest,
    service: BrandIntelService = Depends(get_brand_intel_service),
) -> GenerateInsightsResponse:
    try:
        outcome = service.generate_insights(
            payload.business_context.to_domain(),
            [variable.to_domain() for variable in payload.selected_variables],
            payload.enriched_customers,
        )
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc

    return GenerateInsightsResponse(
        insights=outcome.insights,
        aggregated_data=outcome.aggregated_data,
        assumption_comparisons=[
            AssumptionComparisonSchema.from_domain(comparison) for comparison in outcome.comparisons
        ],
        assumption_summary=outcome.alignment_message,
        fallback_used=outcome.is_fallback,
    )


@router.post("/generate-queries", response_model=GenerateQueriesResponse)
def generate_queries(
    payload: GenerateQueriesRequest,
    service: BrandIntelService = Depends(get_brand_intel_service),
) -> GenerateQueriesResponse:
    try:
        outcome = service.generate_queries(
            payload.business_context.to_domain(),
            [variable.to_domain() for variable in payload.selected_variables],
            payload.insights,
            payload.aggregated_data,
        )
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc

    return GenerateQueriesResponse(
        market_intelligence=outcome.buckets.market_intelligence,
        growth_audiences=outcome.buckets.growth_audiences,
        fallback_used=outcome.is_fallback,
    )


@router.post("/upload-customers", response_model=CustomerUploadResponse)
def upload_customers(
    file: UploadFile = Depends(get_csv_upload),
    upload_service: CustomerUploadService = Depends(get_customer_upload_service),
) -> CustomerUploadResponse:
    """
    Parse an uploaded customer list; nothing is stored.
    """

    try:
        summary = upload_service.parse_csv(file.file)
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc
    finally:
        file.file.close()

    return CustomerUploadResponse(
        customers=summary.customers,
        rows_failed=summary.rows_failed,
        validation_errors=[
            CustomerUploadErrorSchema.from_domain(error) for error in summary.validation_errors
        ],
        truncated=summary.truncated,
    )


@router.get("/sample-data", response_model=SampleDataResponse)
def get_sample_data() -> SampleDataResponse:
    return SampleDataResponse(
        business_context=BusinessContextSchema.from_domain(SAMPLE_BUSINESS_CONTEXT),
        customers=sample_customers(),
    )


@router.get("/variables/catalog", response_model=VariableCatalogResponse)
def get_variable_catalog() -> VariableCatalogResponse:
    return VariableCatalogResponse(
        variables=[CatalogVariableSchema.from_domain(entry) for entry in AVAILABLE_VARIABLES],
    )
