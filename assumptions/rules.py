"""
assumptions/rules.py

Deterministic assumption-gap rules keyed by variable name.
"""

from __future__ import annotations

from app.domain.brand_intel import AssumptionComparison, BusinessContext
from assumptions.base import BaseAssumptionRule, mentions

_YOUNG_COHORT_MARKERS = ("gen z", "genz", "generation z", "millennial", "gen y")

_YOUNG_SHARE_THRESHOLD = 50
_HIGH_INCOME_THRESHOLD = 60
_SUBURBAN_THRESHOLD = 40


def _distribution(analysis: dict) -> dict[str, int]:
    distribution = analysis.get("distribution")
    return distribution if isinstance(distribution, dict) else {}


def _is_young_cohort(bucket: str) -> bool:
    lowered = bucket.lower()
    return any(marker in lowered for marker in _YOUNG_COHORT_MARKERS)


def _stated_target(business_context: BusinessContext, default: str) -> str:
    return business_context.target_customer.strip() or default


class GenerationRule(BaseAssumptionRule):
    """
    Stated target is "young" but the youngest cohorts are a minority.
    """

    name = "generation"
    variable_names = ("generation", "GENERATION")

    def evaluate(
        self,
        analysis: dict,
        business_context: BusinessContext,
    ) -> AssumptionComparison | None:
        if not mentions(business_context.target_customer, "young"):
            return None
        distribution = _distribution(analysis)
        if not distribution:
            return None

        young_share = sum(pct for bucket, pct in distribution.items() if _is_young_cohort(bucket))
        if young_share >= _YOUNG_SHARE_THRESHOLD:
            return None

        older_share = sum(pct for bucket, pct in distribution.items() if not _is_young_cohort(bucket))
        return AssumptionComparison(
            assumption=_stated_target(business_context, "Young customers"),
            reality=(
                f"Only {young_share}% of matched customers are Gen Z or Millennials; "
                f"{older_share}% belong to older generations"
            ),
            insight=(
                "The customer base is older than assumed; messaging built for young "
                "buyers may miss the majority of actual customers."
            ),
        )


class IncomeRule(BaseAssumptionRule):
    """
    Most customers sit above the high-income threshold.
    """

    name = "income"
    variable_names = ("householdIncome", "INCOME_HH", "income_hh", "income")

    def evaluate(
        self,
        analysis: dict,
        business_context: BusinessContext,
    ) -> AssumptionComparison | None:
        high_share = analysis.get("highIncomePercentage")
        if not isinstance(high_share, (int, float)) or high_share <= _HIGH_INCOME_THRESHOLD:
            return None

        label = analysis.get("label") or "are high-income households"
        return AssumptionComparison(
            assumption=_stated_target(business_context, "Mid-market customers"),
            reality=f"{high_share}% of matched customers {label}",
            insight=(
                "Customers are more affluent than the positioning implies; there is "
                "room for premium products and pricing."
            ),
        )


class UrbanicityRule(BaseAssumptionRule):
    """
    Stated target is "urban" but a large share of customers is suburban.
    """

    name = "urbanicity"
    variable_names = ("urbanicity", "URBANICITY")

    def evaluate(
        self,
        analysis: dict,
        business_context: BusinessContext,
    ) -> AssumptionComparison | None:
        if not mentions(business_context.target_customer, "urban"):
            return None

        suburban_share = next(
            (pct for bucket, pct in _distribution(analysis).items() if bucket.strip().lower() == "suburban"),
            0,
        )
        if suburban_share <= _SUBURBAN_THRESHOLD:
            return None

        return AssumptionComparison(
            assumption=_stated_target(business_context, "Urban customers"),
            reality=f"{suburban_share}% of matched customers live in suburban areas",
            insight=(
                "The geographic footprint is broader than assumed; suburban locations "
                "and delivery radius deserve a closer look."
            ),
        )
