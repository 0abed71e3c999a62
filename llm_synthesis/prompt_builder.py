"""Deterministic prompt builders for variable selection, guidance, reports and queries."""

import json
from typing import Any, Dict, Optional, Sequence

from app.domain.brand_intel import (
    AssumptionComparison,
    BusinessContext,
    CatalogVariable,
    Variable,
    VariableCategory,
)
from assumptions.engine import describe_comparisons

_INSIGHTS_EXCERPT_CHARS = 1000

_VARIABLE_SELECTION_EXAMPLE = json.dumps(
    {
        "variables": [
            {
                "variable": "VARIABLE_NAME",
                "category": "category_name",
                "rationale": "Why this variable is critical for this business",
            }
        ]
    },
    indent=2,
)

_GUIDANCE_EXAMPLE = json.dumps(
    {
        "guidance": [
            {
                "variable": "INCOME_HH",
                "threshold": 150000,
                "label": "earn $150K+",
                "rationale": "Premium price point means the relevant bar is higher than $100K",
            }
        ]
    },
    indent=2,
)

_QUERY_EXAMPLE = json.dumps(
    {
        "marketIntelligence": {
            "category": "Market Analysis",
            "description": "Queries to understand market size and landscape",
            "queries": ["query1", "query2", "query3", "query4"],
        },
        "growthAudiences": {
            "category": "Lookalike Audience",
            "description": "Find prospects matching discovered customer patterns",
            "queries": ["query1", "query2", "query3", "query4"],
        },
    },
    indent=2,
)

_SECTION_TEMPLATE = """\
## {title}
{body}
"""


def _format_business_context(context: BusinessContext) -> str:
    goals = ", ".join(context.goals) if context.goals else "None stated"
    return "\n".join(
        [
            f"- Business: {context.business_name}",
            f"- Industry: {context.industry}",
            f"- Business Model: {context.business_model}",
            f"- Current Target Customer Assumption: {context.target_customer}",
            f"- Current Brand Positioning: {context.brand_positioning}",
            f"- Goals: {goals}",
            f"- Additional Context: {context.additional_context or 'None'}",
        ]
    )


def _format_variables(variables: Sequence[Variable]) -> str:
    if not variables:
        return "- None selected"
    return "\n".join(
        f"- {variable.name} ({variable.category.value}): {variable.rationale}"
        for variable in variables
    )


def _format_data_patterns(aggregation: Optional[Dict[str, Any]]) -> str:
    if not isinstance(aggregation, dict):
        return "No enriched data available"
    analysis = aggregation.get("variableAnalysis")
    if not isinstance(analysis, dict):
        return "No enriched data available"

    patterns = [
        f"- {name}: {details['summary']} (coverage {details.get('coverage', 0)}%)"
        for name, details in analysis.items()
        if isinstance(details, dict) and details.get("summary")
    ]
    return "\n".join(patterns) if patterns else "No enriched data available"


def _format_enrichment_totals(aggregation: Dict[str, Any]) -> str:
    return (
        f"- Customer records analysed: {aggregation.get('totalRecords', 0)}\n"
        f"- Records matched in the identity graph: {aggregation.get('enrichedRecords', 0)} "
        f"({aggregation.get('matchRate', 0)}% match rate)"
    )


class BrandIntelPromptBuilder:
    """Builds plain-text prompts for each LLM-assisted wizard step.

    All methods are pure string templating: the same inputs always produce
    the same prompt.
    """

    def build_variable_selection_prompt(
        self,
        context: BusinessContext,
        catalog: Sequence[CatalogVariable],
    ) -> str:
        catalog_text = "\n".join(
            f"- {entry.name}: {entry.description} ({entry.category.value})" for entry in catalog
        )
        return (
            "You are a strategic data analyst selecting customer intelligence variables "
            "for brand strategy.\n\n"
            + _SECTION_TEMPLATE.format(title="BUSINESS CONTEXT", body=_format_business_context(context))
            + "\n"
            + _SECTION_TEMPLATE.format(title="AVAILABLE VARIABLES", body=catalog_text)
            + "\n# TASK\n\n"
            "Select 6-8 variables that will provide the most strategic value for this business.\n"
            "1. Choose variables that directly relate to this business and industry.\n"
            "2. Prioritize variables that can challenge current customer assumptions.\n"
            "3. Include a strategic mix across different categories.\n"
            "4. Focus on variables that inform brand positioning decisions.\n\n"
            "Respond with valid JSON only, no markdown fences, in this shape:\n\n"
            f"{_VARIABLE_SELECTION_EXAMPLE}\n"
        )

    def build_guidance_prompt(
        self,
        context: BusinessContext,
        variables: Sequence[Variable],
    ) -> str:
        scored = [
            variable
            for variable in variables
            if variable.category in (VariableCategory.ECONOMIC, VariableCategory.INTERESTS)
        ]
        return (
            "You are calibrating analysis thresholds for a customer intelligence report.\n\n"
            + _SECTION_TEMPLATE.format(title="BUSINESS CONTEXT", body=_format_business_context(context))
            + "\n"
            + _SECTION_TEMPLATE.format(title="VARIABLES TO CALIBRATE", body=_format_variables(scored))
            + "\n# TASK\n\n"
            "For each variable, choose the threshold that separates a meaningful "
            "high-value customer for THIS business. Economic thresholds are annual "
            "household dollars; interest thresholds are affinity scores from 1 to 5. "
            "Give a short label completing the sentence 'X% of customers ...' and a "
            "one-sentence rationale.\n\n"
            "Respond with valid JSON only, no markdown fences, in this shape:\n\n"
            f"{_GUIDANCE_EXAMPLE}\n"
        )

    def build_insights_prompt(
        self,
        context: BusinessContext,
        variables: Sequence[Variable],
        aggregation: Dict[str, Any],
        comparisons: Sequence[AssumptionComparison],
    ) -> str:
        """Build the brand intelligence report prompt.

        Args:
            context: The business's self-description.
            variables: Selected variables.
            aggregation: Output of ``VariableAggregator.aggregate``.
            comparisons: Assumption gaps detected by the comparison engine.

        Returns:
            A prompt asking for a markdown report.
        """
        data_section = (
            _format_enrichment_totals(aggregation) + "\n" + _format_data_patterns(aggregation)
        )
        return (
            "You are a strategic brand consultant analyzing enriched customer data to "
            "generate actionable insights.\n\n"
            "Use ONLY the figures provided below. Do not invent statistics.\n\n"
            + _SECTION_TEMPLATE.format(title="BUSINESS CONTEXT", body=_format_business_context(context))
            + "\n"
            + _SECTION_TEMPLATE.format(title="SELECTED DATA VARIABLES", body=_format_variables(variables))
            + "\n"
            + _SECTION_TEMPLATE.format(title="ENRICHED CUSTOMER DATA", body=data_section)
            + "\n"
            + _SECTION_TEMPLATE.format(title="ASSUMPTION GAPS", body=describe_comparisons(comparisons))
            + "\n# TASK\n\n"
            "Write a strategic brand intelligence report in markdown with:\n"
            "1. Executive Summary (2-3 sentences of key findings)\n"
            "2. Customer Reality vs Assumptions table\n"
            "3. Strategic Recommendations (3-4 actionable recommendations)\n"
            "4. Most Surprising Discovery\n"
            "5. Immediate Action Items (5 specific next steps)\n\n"
            "Use a professional consulting tone with headers, tables, and bullet points."
        )

    def build_query_prompt(
        self,
        context: BusinessContext,
        variables: Sequence[Variable],
        insights: str,
        aggregation: Optional[Dict[str, Any]] = None,
    ) -> str:
        variables_text = ", ".join(
            f"{variable.name} ({variable.category.value})" for variable in variables
        )
        excerpt = insights[:_INSIGHTS_EXCERPT_CHARS]
        if len(insights) > _INSIGHTS_EXCERPT_CHARS:
            excerpt += "..."

        geography_note = ""
        if context.additional_context:
            geography_note = (
                "\nIncorporate any geographic references from the additional context "
                "into the query logic where appropriate.\n"
            )

        return (
            "You are a business intelligence analyst generating natural language database "
            "queries based on ACTUAL customer data patterns.\n\n"
            + _SECTION_TEMPLATE.format(title="BUSINESS CONTEXT", body=_format_business_context(context))
            + "\n"
            + _SECTION_TEMPLATE.format(title="SELECTED VARIABLES ANALYZED", body=variables_text or "None")
            + "\n"
            + _SECTION_TEMPLATE.format(
                title="ACTUAL CUSTOMER DATA PATTERNS", body=_format_data_patterns(aggregation)
            )
            + "\n"
            + _SECTION_TEMPLATE.format(title="STRATEGIC INSIGHTS", body=excerpt)
            + "\n# TASK\n\n"
            "Bucket 1, market analysis: 3-4 queries that help understand market dynamics "
            "using the demographic and economic patterns found.\n"
            "Bucket 2, lookalike audiences: 3-4 queries to find and size audiences matching "
            "the discovered customer profile.\n"
            "Reference the specific patterns above and use plain business language suitable "
            "for a natural-language-to-SQL tool.\n"
            f"{geography_note}\n"
            "Respond with valid JSON only, no markdown fences, in this shape:\n\n"
            f"{_QUERY_EXAMPLE}\n"
        )
