"""
app/services/brand_intel_service.py

Orchestrates the four wizard operations: variable selection, enrichment,
insight generation, and query generation.

Every LLM-backed step follows the same shape: build a prompt, call the model
through ``call_llm`` (which reports failure as a value), parse the result,
and substitute the canned fallback on any failure. Only ``InvalidInputError``
escapes to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from aggregation.engine import VariableAggregator
from aggregation.guidance import AnalysisGuidance
from app.config import BrandIntelSettings
from app.connectors import IdentityGraphConnector
from app.dev_log import DevSnapshotLogger
from app.domain.brand_intel import (
    AssumptionComparison,
    BusinessContext,
    EnrichmentBatchResult,
    Variable,
    VariableCategory,
)
from app.domain.variable_catalog import AVAILABLE_VARIABLES, find_catalog_variable
from app.errors import InvalidInputError
from app.logging_utils import log_event
from app.services.enrichment_service import EnrichmentService
from assumptions.engine import WELL_ALIGNED_MESSAGE, AssumptionComparisonEngine
from llm_synthesis.adapter import BaseLLMAdapter, build_llm_adapter
from llm_synthesis.client import call_llm
from llm_synthesis.fallbacks import fallback_queries, fallback_variables
from llm_synthesis.prompt_builder import BrandIntelPromptBuilder
from llm_synthesis.report import parse_report
from llm_synthesis.schema import QueryBuckets
from llm_synthesis.validator import (
    LLMOutputValidationError,
    parse_guidance,
    parse_query_buckets,
    parse_variable_selection,
)

logger = logging.getLogger(__name__)

SELECTION_TEMPERATURE = 0.3
GUIDANCE_TEMPERATURE = 0.2
INSIGHTS_TEMPERATURE = 0.7
QUERIES_TEMPERATURE = 0.5

_GUIDED_CATEGORIES = (VariableCategory.ECONOMIC, VariableCategory.INTERESTS)


@dataclass(frozen=True)
class VariableSelection:
    variables: list[Variable]
    is_fallback: bool


@dataclass(frozen=True)
class InsightsOutcome:
    """
    Result of the insight-generation step.
    """

    insights: str
    aggregated_data: dict[str, Any]
    comparisons: list[AssumptionComparison] = field(default_factory=list)
    is_fallback: bool = False
    alignment_message: str | None = None


@dataclass(frozen=True)
class QueryOutcome:
    buckets: QueryBuckets
    is_fallback: bool


def _require_context(context: object) -> BusinessContext:
    if not isinstance(context, BusinessContext):
        raise InvalidInputError("business context is required.")
    if not context.business_name.strip() or not context.industry.strip():
        raise InvalidInputError("business name and industry are required.")
    return context


def _require_variables(variables: object) -> list[Variable]:
    if not isinstance(variables, (list, tuple)) or not all(isinstance(v, Variable) for v in variables):
        raise InvalidInputError("selected variables must be a list of variables.")
    return list(variables)


class BrandIntelService:
    """
    Wires the enrichment client, aggregation engine, comparison engine, and
    LLM layer into the wizard's four operations.

    Parameters
    ----------
    settings:
        Process configuration built once at startup.
    enrichment_service:
        Identity enrichment; built from ``settings.identity`` when omitted.
    adapter:
        LLM adapter, or ``None`` to always use the canned fallbacks.
    """

    def __init__(
        self,
        *,
        settings: BrandIntelSettings,
        enrichment_service: EnrichmentService | None = None,
        adapter: BaseLLMAdapter | None = None,
        aggregator: VariableAggregator | None = None,
        comparison_engine: AssumptionComparisonEngine | None = None,
        prompt_builder: BrandIntelPromptBuilder | None = None,
        dev_logger: DevSnapshotLogger | None = None,
    ) -> None:
        self._settings = settings
        self._enrichment_service = enrichment_service or EnrichmentService(
            connector=IdentityGraphConnector(settings=settings.identity),
            settings=settings.identity,
        )
        self._adapter = adapter
        self._aggregator = aggregator or VariableAggregator()
        self._comparison_engine = comparison_engine or AssumptionComparisonEngine()
        self._prompt_builder = prompt_builder or BrandIntelPromptBuilder()
        self._dev_logger = dev_logger or DevSnapshotLogger(settings.dev_log)
        self._max_tokens = settings.llm.max_tokens

    # ------------------------------------------------------------------
    # Step 3: variable selection
    # ------------------------------------------------------------------

    def select_variables(self, context: BusinessContext) -> VariableSelection:
        """
        Ask the model for 6-8 catalog variables; fall back to a fixed list.
        """

        context = _require_context(context)
        prompt = self._prompt_builder.build_variable_selection_prompt(context, AVAILABLE_VARIABLES)
        result = call_llm(
            self._adapter,
            prompt,
            temperature=SELECTION_TEMPERATURE,
            max_tokens=self._max_tokens,
            purpose="variable_selection",
        )
        if result.ok:
            try:
                variables = parse_variable_selection(result.text, find_catalog_variable)
                return VariableSelection(variables=variables, is_fallback=False)
            except LLMOutputValidationError as exc:
                logger.warning("Variable selection response rejected: %s", exc)

        logger.info("Using fallback variables for industry=%s", context.industry)
        return VariableSelection(variables=fallback_variables(context), is_fallback=True)

    # ------------------------------------------------------------------
    # Step 4: enrichment
    # ------------------------------------------------------------------

    def enrich_customers(
        self,
        records: Sequence[dict],
        variables: Sequence[Variable],
    ) -> EnrichmentBatchResult:
        result = self._enrichment_service.enrich_batch(records, variables)
        self._dev_logger.log_snapshot(
            {
                "stats": {
                    "total": result.stats.total,
                    "enhanced": result.stats.enhanced,
                    "matchRate": result.stats.match_rate,
                },
                "truncated": result.truncated,
                "variables": [variable.name for variable in variables],
            },
            label="enrichment",
        )
        return result

    # ------------------------------------------------------------------
    # Step 5: insights and queries
    # ------------------------------------------------------------------

    def generate_insights(
        self,
        context: BusinessContext,
        variables: Sequence[Variable],
        enriched_customers: Sequence[dict],
    ) -> InsightsOutcome:
        """
        Aggregate the enriched records, detect assumption gaps, and narrate them.

        Raises
        ------
        InvalidInputError
            On a missing context, malformed variables, or an empty or
            malformed customer list.
        """

        context = _require_context(context)
        variables = _require_variables(variables)
        if not isinstance(enriched_customers, list):
            raise InvalidInputError("enriched customers must be a list of objects.")
        self._aggregator.validate(enriched_customers, variables)

        guidance = self._derive_guidance(context, variables)
        aggregation = self._aggregator.aggregate(enriched_customers, variables, guidance)
        comparisons = self._comparison_engine.compare(aggregation, context)

        self._dev_logger.log_snapshot(
            {
                "businessName": context.business_name,
                "aggregation": aggregation,
                "comparisons": [item.to_dict() for item in comparisons],
            },
            label="aggregation",
        )

        prompt = self._prompt_builder.build_insights_prompt(context, variables, aggregation, comparisons)
        result = call_llm(
            self._adapter,
            prompt,
            temperature=INSIGHTS_TEMPERATURE,
            max_tokens=self._max_tokens,
            purpose="insights",
        )
        report = parse_report(result.text, context, variables, aggregation, comparisons)

        log_event(
            logger,
            logging.INFO,
            "insights_generated",
            business=context.business_name,
            total_records=aggregation["totalRecords"],
            match_rate=aggregation["matchRate"],
            comparisons=len(comparisons),
            fallback=report.is_fallback,
        )
        return InsightsOutcome(
            insights=report.markdown,
            aggregated_data=aggregation,
            comparisons=comparisons,
            is_fallback=report.is_fallback,
            alignment_message=None if comparisons else WELL_ALIGNED_MESSAGE,
        )

    def generate_queries(
        self,
        context: BusinessContext,
        variables: Sequence[Variable],
        insights: str,
        aggregated_data: dict[str, Any] | None = None,
    ) -> QueryOutcome:
        context = _require_context(context)
        variables = _require_variables(variables)
        if not isinstance(insights, str) or not insights.strip():
            raise InvalidInputError("insights are required to generate queries.")

        prompt = self._prompt_builder.build_query_prompt(context, variables, insights, aggregated_data)
        result = call_llm(
            self._adapter,
            prompt,
            temperature=QUERIES_TEMPERATURE,
            max_tokens=self._max_tokens,
            purpose="queries",
        )
        if result.ok:
            try:
                return QueryOutcome(buckets=parse_query_buckets(result.text), is_fallback=False)
            except LLMOutputValidationError as exc:
                logger.warning("Query response rejected: %s", exc)

        logger.info("Using fallback queries for industry=%s", context.industry)
        return QueryOutcome(buckets=fallback_queries(context), is_fallback=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _derive_guidance(
        self,
        context: BusinessContext,
        variables: list[Variable],
    ) -> dict[str, AnalysisGuidance] | None:
        if not self._settings.llm.guidance_enabled or self._adapter is None:
            return None
        if not any(variable.category in _GUIDED_CATEGORIES for variable in variables):
            return None

        prompt = self._prompt_builder.build_guidance_prompt(context, variables)
        result = call_llm(
            self._adapter,
            prompt,
            temperature=GUIDANCE_TEMPERATURE,
            max_tokens=self._max_tokens,
            purpose="guidance",
        )
        if not result.ok:
            return None
        try:
            return parse_guidance(result.text, variables) or None
        except LLMOutputValidationError as exc:
            logger.info("Analysis guidance unavailable, using defaults: %s", exc)
            return None


def build_brand_intel_service(settings: BrandIntelSettings) -> BrandIntelService:
    """
    Build the service and all collaborators from one settings object.
    """

    return BrandIntelService(
        settings=settings,
        adapter=build_llm_adapter(settings.llm),
    )
