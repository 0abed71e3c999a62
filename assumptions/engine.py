"""
assumptions/engine.py

Runs registered assumption rules against an aggregation result.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from app.domain.brand_intel import AssumptionComparison, BusinessContext
from assumptions.base import BaseAssumptionRule
from assumptions.rules import GenerationRule, IncomeRule, UrbanicityRule

WELL_ALIGNED_MESSAGE = "Current assumptions appear well-aligned with the customer data."


def default_rules() -> list[BaseAssumptionRule]:
    return [GenerationRule(), IncomeRule(), UrbanicityRule()]


def describe_comparisons(comparisons: Sequence[AssumptionComparison]) -> str:
    """
    Render comparisons as bullet lines, or the well-aligned message when none fired.
    """

    if not comparisons:
        return WELL_ALIGNED_MESSAGE
    return "\n".join(
        f"- Assumption: {item.assumption} | Reality: {item.reality} | Insight: {item.insight}"
        for item in comparisons
    )


class AssumptionComparisonEngine:
    """
    Evaluates independent rules in registration order.

    Each rule emits zero or one comparison; no rule suppresses another.
    """

    def __init__(self, rules: Iterable[BaseAssumptionRule] | None = None) -> None:
        self._rules: list[BaseAssumptionRule] = list(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> tuple[BaseAssumptionRule, ...]:
        return tuple(self._rules)

    def register(self, rule: BaseAssumptionRule) -> None:
        self._rules.append(rule)

    def compare(
        self,
        aggregation: dict,
        business_context: BusinessContext,
    ) -> list[AssumptionComparison]:
        """
        Return every comparison whose rule fired, in registration order.
        """

        variable_analysis = aggregation.get("variableAnalysis") if isinstance(aggregation, dict) else None
        if not isinstance(variable_analysis, dict):
            return []

        comparisons: list[AssumptionComparison] = []
        for rule in self._rules:
            analysis = self._find_analysis(rule, variable_analysis)
            if analysis is None:
                continue
            comparison = rule.evaluate(analysis, business_context)
            if comparison is not None:
                comparisons.append(comparison)
        return comparisons

    @staticmethod
    def _find_analysis(rule: BaseAssumptionRule, variable_analysis: dict) -> dict | None:
        for variable_name, analysis in variable_analysis.items():
            if rule.matches(variable_name) and isinstance(analysis, dict):
                return analysis
        return None
