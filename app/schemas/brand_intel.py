"""
app/schemas/brand_intel.py

Request and response schemas for the brand intelligence endpoints.

Wire names are camelCase; Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.brand_intel import (
    AssumptionComparison,
    BusinessContext,
    CatalogVariable,
    EnrichmentStats,
    RowValidationError,
    Variable,
    VariableCategory,
)
from llm_synthesis.schema import QueryBucket

RecordValuePayload = Union[str, int, float, bool, None]
CustomerRecordPayload = dict[str, RecordValuePayload]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BusinessContextSchema(CamelModel):
    """
    The business's self-description collected in step 2.
    """

    business_name: str = Field(..., min_length=1)
    industry: str = Field(..., min_length=1)
    business_model: str = ""
    target_customer: str = ""
    brand_positioning: str = ""
    goals: list[str] = Field(default_factory=list)
    additional_context: str = ""

    def to_domain(self) -> BusinessContext:
        return BusinessContext(
            business_name=self.business_name.strip(),
            industry=self.industry.strip(),
            business_model=self.business_model,
            target_customer=self.target_customer,
            brand_positioning=self.brand_positioning,
            goals=tuple(self.goals),
            additional_context=self.additional_context,
        )

    @classmethod
    def from_domain(cls, context: BusinessContext) -> "BusinessContextSchema":
        return cls(
            business_name=context.business_name,
            industry=context.industry,
            business_model=context.business_model,
            target_customer=context.target_customer,
            brand_positioning=context.brand_positioning,
            goals=list(context.goals),
            additional_context=context.additional_context,
        )


class VariableSchema(CamelModel):
    """
    One selected variable; ``variable`` is the identity-graph field name.
    """

    variable: str = Field(..., min_length=1, validation_alias=AliasChoices("variable", "name"))
    category: VariableCategory
    rationale: str = ""

    def to_domain(self) -> Variable:
        return Variable(name=self.variable, category=self.category, rationale=self.rationale)

    @classmethod
    def from_domain(cls, variable: Variable) -> "VariableSchema":
        return cls(variable=variable.name, category=variable.category, rationale=variable.rationale)


class SelectVariablesRequest(CamelModel):
    business_context: BusinessContextSchema


class SelectVariablesResponse(CamelModel):
    variables: list[VariableSchema]
    fallback_used: bool = False


class EnrichDataRequest(CamelModel):
    customer_data: list[CustomerRecordPayload] = Field(..., min_length=1)
    selected_variables: list[VariableSchema] = Field(default_factory=list)


class EnrichmentStatsSchema(CamelModel):
    total: int = Field(..., ge=0)
    enhanced: int = Field(..., ge=0)
    match_rate: int = Field(..., ge=0, le=100)

    @classmethod
    def from_domain(cls, stats: EnrichmentStats) -> "EnrichmentStatsSchema":
        return cls(total=stats.total, enhanced=stats.enhanced, match_rate=stats.match_rate)


class EnrichDataResponse(CamelModel):
    """
    Enriched records plus batch stats; ``truncated`` counts records skipped
    because of the batch cap.
    """

    enriched_customers: list[CustomerRecordPayload]
    stats: EnrichmentStatsSchema
    truncated: int = Field(0, ge=0)


class AssumptionComparisonSchema(CamelModel):
    assumption: str
    reality: str
    insight: str

    @classmethod
    def from_domain(cls, comparison: AssumptionComparison) -> "AssumptionComparisonSchema":
        return cls(**comparison.to_dict())


class GenerateInsightsRequest(CamelModel):
    business_context: BusinessContextSchema
    selected_variables: list[VariableSchema]
    enriched_customers: list[CustomerRecordPayload] = Field(..., min_length=1)


class GenerateInsightsResponse(CamelModel):
    insights: str
    aggregated_data: dict[str, Any]
    assumption_comparisons: list[AssumptionComparisonSchema] = Field(default_factory=list)
    assumption_summary: str | None = None
    fallback_used: bool = False


class GenerateQueriesRequest(CamelModel):
    business_context: BusinessContextSchema
    selected_variables: list[VariableSchema]
    insights: str = Field(..., min_length=1)
    aggregated_data: dict[str, Any] | None = None


class GenerateQueriesResponse(CamelModel):
    market_intelligence: QueryBucket
    growth_audiences: QueryBucket
    fallback_used: bool = False


class CustomerUploadErrorSchema(CamelModel):
    """
    API response model for one row-level upload error.
    """

    row_number: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None

    @classmethod
    def from_domain(cls, error: RowValidationError) -> "CustomerUploadErrorSchema":
        return cls(
            row_number=error.row_number,
            message=error.message,
            column=error.column,
            value=error.value,
        )


class CustomerUploadResponse(CamelModel):
    customers: list[CustomerRecordPayload]
    rows_failed: int = Field(..., ge=0)
    validation_errors: list[CustomerUploadErrorSchema] = Field(default_factory=list)
    truncated: bool = False


class SampleDataResponse(CamelModel):
    business_context: BusinessContextSchema
    customers: list[CustomerRecordPayload]


class CatalogVariableSchema(CamelModel):
    variable: str
    category: VariableCategory
    description: str

    @classmethod
    def from_domain(cls, entry: CatalogVariable) -> "CatalogVariableSchema":
        return cls(variable=entry.name, category=entry.category, description=entry.description)


class VariableCatalogResponse(CamelModel):
    variables: list[CatalogVariableSchema]


class HealthResponse(CamelModel):
    status: str = "ok"
    llm_adapter: str
    llm_configured: bool
    identity_configured: bool
