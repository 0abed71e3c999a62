"""Canned results used whenever the language model is missing, fails, or returns junk.

Every function here is deterministic: the same inputs always produce the
same output.
"""

from typing import Any, Dict, List, Optional, Sequence

from app.domain.brand_intel import (
    AssumptionComparison,
    BusinessContext,
    Variable,
    VariableCategory,
)
from assumptions.engine import WELL_ALIGNED_MESSAGE
from llm_synthesis.schema import QueryBucket, QueryBuckets

_BASE_VARIABLES = (
    Variable(
        "AGE",
        VariableCategory.DEMOGRAPHICS,
        "Core demographic for market segmentation and age-appropriate messaging",
    ),
    Variable(
        "INCOME_HH",
        VariableCategory.ECONOMIC,
        "Essential for pricing strategy and premium positioning decisions",
    ),
    Variable(
        "EDUCATION",
        VariableCategory.LIFESTYLE,
        "Indicates customer sophistication and preferred communication style",
    ),
    Variable(
        "URBANICITY",
        VariableCategory.LIFESTYLE,
        "Geographic preferences affect brand positioning and distribution strategy",
    ),
    Variable(
        "MARITAL_STATUS",
        VariableCategory.DEMOGRAPHICS,
        "Life stage affects purchasing behavior and product usage patterns",
    ),
    Variable(
        "OCCUPATION_TYPE",
        VariableCategory.LIFESTYLE,
        "Professional vs blue-collar preferences inform messaging approach",
    ),
)

_INDUSTRY_VARIABLES: Dict[str, tuple] = {
    "Food & Beverage": (
        Variable(
            "GOURMET_AFFINITY",
            VariableCategory.INTERESTS,
            "Quality appreciation aligns with premium food and beverage positioning",
        ),
        Variable(
            "FITNESS_AFFINITY",
            VariableCategory.INTERESTS,
            "Health consciousness affects food and beverage preferences",
        ),
    ),
    "Technology": (
        Variable(
            "HIGH_TECH_AFFINITY",
            VariableCategory.INTERESTS,
            "Technology adoption patterns are crucial for tech product positioning",
        ),
        Variable(
            "BUSINESS_AFFINITY",
            VariableCategory.INTERESTS,
            "B2B technology adoption correlates with business interest",
        ),
    ),
}


def fallback_variables(context: BusinessContext) -> List[Variable]:
    """Six general-purpose variables plus two for known industries."""
    return list(_BASE_VARIABLES) + list(_INDUSTRY_VARIABLES.get(context.industry.strip(), ()))


def _cell(value: Any) -> str:
    return str(value).replace("|", "\\|")


def _findings_section(aggregation: Optional[Dict[str, Any]]) -> List[str]:
    analysis = aggregation.get("variableAnalysis") if isinstance(aggregation, dict) else None
    if not isinstance(analysis, dict):
        return [
            "Enriched customer data was not available for this report. Run the "
            "enrichment step to replace these general recommendations with "
            "findings drawn from your own customers.",
        ]

    lines = [
        f"- **Customers analysed:** {aggregation.get('totalRecords', 0)}",
        f"- **Matched in the identity graph:** {aggregation.get('enrichedRecords', 0)} "
        f"({aggregation.get('matchRate', 0)}%)",
        "",
        "| Variable | Category | Coverage | Finding |",
        "|----------|----------|----------|---------|",
    ]
    for name, details in analysis.items():
        if not isinstance(details, dict):
            continue
        lines.append(
            f"| {_cell(name)} | {_cell(details.get('category', ''))} | {details.get('coverage', 0)}% "
            f"| {_cell(details.get('summary', ''))} |"
        )
    return lines


def _assumptions_section(comparisons: Sequence[AssumptionComparison]) -> List[str]:
    if not comparisons:
        return [WELL_ALIGNED_MESSAGE]
    lines = [
        "| Your Assumption | Data Reality | Strategic Implication |",
        "|-----------------|--------------|-----------------------|",
    ]
    lines.extend(
        f"| {_cell(item.assumption)} | {_cell(item.reality)} | {_cell(item.insight)} |"
        for item in comparisons
    )
    return lines


def fallback_report(
    context: BusinessContext,
    variables: Sequence[Variable],
    aggregation: Optional[Dict[str, Any]] = None,
    comparisons: Sequence[AssumptionComparison] = (),
) -> str:
    """Markdown report built only from the figures that were actually computed."""
    positioning = context.brand_positioning or "Not stated"
    industry = context.industry.lower() or "business"

    lines = [
        "# Customer Intelligence Report",
        f"## {context.business_name}",
        "",
        "### Executive Summary",
        "",
        f"This report summarises what the enriched customer data says about "
        f"{context.business_name} and where it differs from the current view of "
        "the target customer.",
        "",
        "### Key Findings",
        "",
        *_findings_section(aggregation),
        "",
        "### Customer Reality vs. Assumptions",
        "",
        *_assumptions_section(comparisons),
        "",
        "### Strategic Recommendations",
        "",
        "#### 1. Brand Positioning Review",
        f"**Current:** \"{positioning}\"",
        f"Check that this positioning speaks to the {industry} customers the data "
        "actually shows, not only the assumed target.",
        "",
        "#### 2. Target Audience Refinement",
        "Build the primary audience definition from the most common values above.",
        "",
        "#### 3. Messaging Strategy",
        "Lead with the themes that match the dominant lifestyle and interest signals.",
        "",
        "### Immediate Action Items",
        "",
        "1. **Share these findings** with marketing and sales leads",
        "2. **Update audience definitions** in ad platforms to match the data",
        "3. **Review website copy** against the confirmed customer profile",
        "4. **Test messaging variants** aimed at the largest customer segment",
        "5. **Re-run this analysis** after the next customer list export",
        "",
        "---",
        "**BrandIntel Customer Intelligence Analysis**  ",
        f"*Report generated from {len(variables)} strategic variables*",
    ]
    return "\n".join(lines)


def fallback_queries(context: BusinessContext) -> QueryBuckets:
    """Two buckets of four queries, tuned by a few industry keywords."""
    industry = context.industry.lower()

    market_queries = [
        "Analyze demographic composition and income distribution in the top 3 markets "
        f"for {context.business_name}",
        "Compare lifestyle preferences and purchasing behaviors across different age "
        "groups in our target geography",
        "Show education levels, professional occupations, and family status patterns "
        "among high-value customer segments",
        "Identify market segments with the highest concentration of customers matching "
        "our ideal profile",
    ]
    growth_queries = [
        "Count prospects matching our best customer profile: similar demographics, "
        "income levels, and lifestyle interests",
        "Size the addressable market for customers with high disposable income and "
        "interests aligned with our positioning",
        "Quantify growth opportunities in adjacent zip codes with similar demographic "
        "patterns to our current customer base",
        "Estimate market potential for premium segments that match our most profitable "
        "customer characteristics",
    ]

    if "food" in industry or "retail" in industry:
        market_queries[1] = (
            "Compare shopping behaviors, brand preferences, and spending patterns across "
            "different demographic segments"
        )
        growth_queries[0] = (
            "Count prospects with high disposable income, premium product affinity, and "
            "shopping behaviors matching our best customers"
        )
    elif "real estate" in industry:
        market_queries[0] = (
            "Analyze homeownership rates, property values, and investment behavior across "
            "target neighborhoods"
        )
        growth_queries[0] = (
            "Count high-net-worth prospects with investment experience and property "
            "ownership in target markets"
        )
    elif "professional" in industry or "services" in industry:
        market_queries[1] = (
            "Compare business ownership, professional occupations, and service purchasing "
            "patterns across market segments"
        )
        growth_queries[0] = (
            "Count business owners and professionals with characteristics matching our "
            "most engaged clients"
        )

    return QueryBuckets(
        market_intelligence=QueryBucket(
            category="Market Analysis",
            description="Queries to understand market size and landscape",
            queries=market_queries,
        ),
        growth_audiences=QueryBucket(
            category="Growth Audience Discovery",
            description="Find prospects matching discovered customer patterns",
            queries=growth_queries,
        ),
    )
