"""
tests/test_assumption_engine.py

Pytest unit tests for the assumption-comparison rules and engine.
"""

from __future__ import annotations

import pytest

from app.domain.brand_intel import AssumptionComparison, BusinessContext
from assumptions.base import BaseAssumptionRule, mentions, normalize_variable_name
from assumptions.engine import (
    WELL_ALIGNED_MESSAGE,
    AssumptionComparisonEngine,
    describe_comparisons,
)
from assumptions.rules import GenerationRule, IncomeRule, UrbanicityRule


def _context(target_customer: str) -> BusinessContext:
    return BusinessContext(
        business_name="Roasted Bean Coffee Co.",
        industry="Food & Beverage",
        target_customer=target_customer,
    )


def _aggregation(**analysis: dict) -> dict:
    return {
        "totalRecords": 10,
        "enrichedRecords": 8,
        "matchRate": 80,
        "variableAnalysis": analysis,
    }


OLDER_GENERATIONS = {
    "category": "demographics",
    "coverage": 100,
    "distribution": {"Gen X": 45, "Baby Boomers": 25, "Millennials": 20, "Gen Z": 10},
    "topValue": "Gen X",
}
AFFLUENT_INCOME = {
    "category": "economic",
    "coverage": 90,
    "type": "income_ranges",
    "highIncomePercentage": 75,
    "label": "earn $100K+",
}
SUBURBAN_HEAVY = {
    "category": "lifestyle",
    "coverage": 95,
    "distribution": {"Suburban": 45, "Urban": 40, "Rural": 15},
    "topValue": "Suburban",
}


@pytest.fixture()
def engine() -> AssumptionComparisonEngine:
    return AssumptionComparisonEngine()


class TestHelpers:
    def test_normalize_variable_name(self) -> None:
        assert normalize_variable_name("INCOME_HH") == normalize_variable_name("income_hh") == "incomehh"

    def test_mentions_matches_word_starts_only(self) -> None:
        assert mentions("Young professionals", "young")
        assert mentions("urban, tech-savvy", "urban")
        assert not mentions("suburban families", "urban")


class TestGenerationRule:
    def test_fires_when_young_cohorts_are_a_minority(self) -> None:
        comparison = GenerationRule().evaluate(OLDER_GENERATIONS, _context("Young professionals"))

        assert comparison is not None
        assert "30%" in comparison.reality
        assert "70%" in comparison.reality
        assert comparison.assumption == "Young professionals"

    def test_silent_when_young_cohorts_dominate(self) -> None:
        analysis = {"distribution": {"Millennials": 40, "Gen Z": 20, "Gen X": 40}}
        assert GenerationRule().evaluate(analysis, _context("Young professionals")) is None

    def test_silent_when_target_does_not_mention_young(self) -> None:
        assert GenerationRule().evaluate(OLDER_GENERATIONS, _context("Busy professionals")) is None


class TestIncomeRule:
    def test_fires_above_sixty_percent(self) -> None:
        comparison = IncomeRule().evaluate(AFFLUENT_INCOME, _context("Mid-range earners"))
        assert comparison is not None
        assert comparison.reality == "75% of matched customers earn $100K+"

    def test_silent_at_exactly_sixty_percent(self) -> None:
        analysis = {**AFFLUENT_INCOME, "highIncomePercentage": 60}
        assert IncomeRule().evaluate(analysis, _context("Anyone")) is None

    def test_silent_without_high_income_share(self) -> None:
        assert IncomeRule().evaluate({"type": "mixed"}, _context("Anyone")) is None


class TestUrbanicityRule:
    def test_fires_when_suburban_exceeds_forty_percent(self) -> None:
        comparison = UrbanicityRule().evaluate(SUBURBAN_HEAVY, _context("Urban professionals"))
        assert comparison is not None
        assert "45%" in comparison.reality

    def test_suburban_target_is_not_an_urban_assumption(self) -> None:
        assert UrbanicityRule().evaluate(SUBURBAN_HEAVY, _context("Suburban families")) is None

    def test_silent_at_forty_percent(self) -> None:
        analysis = {"distribution": {"Suburban": 40, "Urban": 60}}
        assert UrbanicityRule().evaluate(analysis, _context("urban")) is None


class TestEngine:
    def test_rules_fire_in_registration_order(self, engine: AssumptionComparisonEngine) -> None:
        aggregation = _aggregation(
            URBANICITY=SUBURBAN_HEAVY,
            INCOME_HH=AFFLUENT_INCOME,
            GENERATION=OLDER_GENERATIONS,
        )
        comparisons = engine.compare(aggregation, _context("Young urban professionals"))

        assert len(comparisons) == 3
        assert "Gen Z" in comparisons[0].reality
        assert "earn $100K+" in comparisons[1].reality
        assert "suburban" in comparisons[2].reality

    def test_aliases_match_case_and_underscore_insensitively(self, engine: AssumptionComparisonEngine) -> None:
        aggregation = _aggregation(householdIncome=AFFLUENT_INCOME, generation=OLDER_GENERATIONS)
        comparisons = engine.compare(aggregation, _context("young families"))
        assert len(comparisons) == 2

    def test_no_gaps_when_data_matches(self, engine: AssumptionComparisonEngine) -> None:
        aggregation = _aggregation(
            GENERATION={"distribution": {"Millennials": 60, "Gen X": 40}},
            INCOME_HH={**AFFLUENT_INCOME, "highIncomePercentage": 30},
            URBANICITY={"distribution": {"Urban": 80, "Suburban": 20}},
        )
        comparisons = engine.compare(aggregation, _context("Young urban professionals"))

        assert comparisons == []
        assert describe_comparisons(comparisons) == WELL_ALIGNED_MESSAGE

    def test_missing_variable_analysis_yields_no_comparisons(self, engine: AssumptionComparisonEngine) -> None:
        assert engine.compare({}, _context("Young")) == []

    def test_register_appends_without_touching_existing_rules(self, engine: AssumptionComparisonEngine) -> None:
        class AlwaysRule(BaseAssumptionRule):
            name = "always"
            variable_names = ("AGE",)

            def evaluate(self, analysis: dict, business_context: BusinessContext) -> AssumptionComparison | None:
                return AssumptionComparison("a", "r", "i")

        engine.register(AlwaysRule())
        comparisons = engine.compare(
            _aggregation(AGE={"distribution": {"30": 100}}, INCOME_HH=AFFLUENT_INCOME),
            _context("Anyone"),
        )

        assert [rule.name for rule in engine.rules] == ["generation", "income", "urbanicity", "always"]
        assert comparisons[-1] == AssumptionComparison("a", "r", "i")
        assert len(comparisons) == 2

    def test_describe_comparisons_lists_each_gap(self) -> None:
        text = describe_comparisons([AssumptionComparison("Young", "Older", "Rethink")])
        assert "Assumption: Young" in text
        assert "Reality: Older" in text
