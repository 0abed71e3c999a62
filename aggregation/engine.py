"""
Variable aggregation engine.

Reduces a list of enriched customer records and a manifest of selected
variables into per-variable coverage, distributions and summary statistics.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from aggregation.analyzers import (
    Analyzer,
    categorical_analysis,
    economic_analysis,
    interests_analysis,
)
from aggregation.guidance import GuidanceMap
from aggregation.rounding import percentage
from app.domain.brand_intel import Variable, VariableCategory, is_enriched
from app.errors import InvalidInputError

MISSING_SENTINEL = "N/A"
NO_DATA_SUMMARY = "No data available"

CATEGORY_ANALYZERS: Dict[VariableCategory, Analyzer] = {
    VariableCategory.DEMOGRAPHICS: categorical_analysis,
    VariableCategory.LIFESTYLE: categorical_analysis,
    VariableCategory.BEHAVIORAL: categorical_analysis,
    VariableCategory.ECONOMIC: economic_analysis,
    VariableCategory.INTERESTS: interests_analysis,
}


def is_missing(value: Any) -> bool:
    """True for None, the ``"N/A"`` sentinel and blank strings."""
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or stripped == MISSING_SENTINEL
    return False


class VariableAggregator:
    """
    Computes an ``AggregationResult`` for a batch of enriched records.

    Responsibilities:
        - Partition records into enriched (``email``/``pii``) and not.
        - Compute match rate and per-variable coverage.
        - Dispatch each variable to its category handler.

    Not responsible for:
        - Fetching analysis guidance (it is passed in).
        - Any I/O or logging.
    """

    def aggregate(
        self,
        records: Sequence[Mapping],
        variables: Sequence[Variable],
        guidance: Optional[GuidanceMap] = None,
    ) -> Dict[str, Any]:
        """
        Build the aggregation result.

        Args:
            records: Non-empty list of customer records, each tagged with
                ``enrichment_source``.
            variables: Selected variables; may be empty.
            guidance: Optional thresholds and labels keyed by variable name.

        Returns:
            ``{"totalRecords", "enrichedRecords", "matchRate", "variableAnalysis"}``
            where ``variableAnalysis`` is keyed by variable name.

        Raises:
            InvalidInputError: If ``records`` is empty or not a list of
                mappings, or ``variables`` is not a list of variables.
        """
        self.validate(records, variables)

        total = len(records)
        enriched_flags = [is_enriched(record) for record in records]
        enriched_count = sum(enriched_flags)

        analysis: Dict[str, Dict[str, Any]] = {}
        for variable in variables:
            analysis[variable.name] = self._analyze_variable(
                variable,
                records,
                enriched_flags,
                enriched_count,
                guidance,
            )

        return {
            "totalRecords": total,
            "enrichedRecords": enriched_count,
            "matchRate": percentage(enriched_count, total),
            "variableAnalysis": analysis,
        }

    @staticmethod
    def validate(records: object, variables: object) -> None:
        """
        Raise InvalidInputError unless ``records`` and ``variables`` can be aggregated.
        """

        if not isinstance(records, (list, tuple)) or not all(isinstance(r, Mapping) for r in records):
            raise InvalidInputError("records must be a list of customer records.")
        if not records:
            raise InvalidInputError("records must not be empty.")
        if not isinstance(variables, (list, tuple)) or not all(isinstance(v, Variable) for v in variables):
            raise InvalidInputError("variables must be a list of variables.")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _analyze_variable(
        variable: Variable,
        records: Sequence[Mapping],
        enriched_flags: List[bool],
        enriched_count: int,
        guidance: Optional[GuidanceMap],
    ) -> Dict[str, Any]:
        values: List[Any] = []
        enriched_with_value = 0
        for record, enriched in zip(records, enriched_flags):
            value = record.get(variable.name)
            if is_missing(value):
                continue
            values.append(value)
            if enriched:
                enriched_with_value += 1

        if not values:
            return {
                "category": variable.category.value,
                "coverage": 0,
                "summary": NO_DATA_SUMMARY,
            }

        handler = CATEGORY_ANALYZERS[variable.category]
        return {
            "category": variable.category.value,
            "coverage": percentage(enriched_with_value, enriched_count),
            **handler(variable.name, values, guidance),
        }
