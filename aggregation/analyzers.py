"""
Per-category analysis handlers for the variable aggregation engine.

Each handler receives the non-missing values of one variable and returns the
category-specific part of its analysis (always including ``summary``).
No I/O and no logging happen here.
"""

import math
import re
from collections import Counter
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from aggregation.guidance import (
    DEFAULT_ECONOMIC_GUIDANCE,
    DEFAULT_INTEREST_GUIDANCE,
    AnalysisGuidance,
    GuidanceMap,
    resolve_guidance,
)
from aggregation.rounding import percentage, round_half_up

Analyzer = Callable[[str, List[Any], Optional[GuidanceMap]], Dict[str, Any]]

_TRUE_STRINGS = frozenset({"true", "yes", "y"})
_FALSE_STRINGS = frozenset({"false", "no", "n"})

_CURRENCY_AMOUNT = re.compile(r"\$\s*(\d[\d,]*(?:\.\d+)?)\s*([KkMm])?")
_SUFFIX_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

def stringify(value: Any) -> str:
    """Stable string key for a distribution bucket."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def as_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_bool(value: Any) -> Optional[bool]:
    """Return ``value`` as a bool, or None when it is not a boolean flag."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def income_floor(text: str) -> Optional[float]:
    """Representative lower bound of a currency range string.

    ``"$100K to $149K"`` -> 100000, ``"$75,000-$99,999"`` -> 75000.
    """
    match = _CURRENCY_AMOUNT.search(text)
    if match is None:
        return None
    amount = float(match.group(1).replace(",", ""))
    suffix = (match.group(2) or "").lower()
    return amount * _SUFFIX_MULTIPLIERS.get(suffix, 1)


def _tidy(number: float) -> Any:
    return int(number) if float(number).is_integer() else number


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def build_distribution(values: List[Any]) -> Dict[str, int]:
    """Rounded percentage per stringified value, most frequent first.

    Ties keep first-seen order.
    """
    counts = Counter(stringify(value) for value in values)
    total = len(values)
    return {key: percentage(count, total) for key, count in counts.most_common()}


def _categorical_fields(values: List[Any]) -> Dict[str, Any]:
    distribution = build_distribution(values)
    top_value = next(iter(distribution))
    return {
        "distribution": distribution,
        "topValue": top_value,
        "summary": f"Most common: {top_value} ({distribution[top_value]}%)",
    }


def _share_at_or_above(numbers: List[float], threshold: float) -> int:
    return percentage(sum(1 for number in numbers if number >= threshold), len(numbers))


def _guidance_fields(guidance: AnalysisGuidance, supplied: bool) -> Dict[str, Any]:
    fields: Dict[str, Any] = {"threshold": _tidy(guidance.threshold), "label": guidance.label}
    if supplied and guidance.rationale:
        fields["guidance"] = guidance.rationale
    return fields


# ---------------------------------------------------------------------------
# Category handlers
# ---------------------------------------------------------------------------

def categorical_analysis(
    name: str,
    values: List[Any],
    guidance: Optional[GuidanceMap] = None,
) -> Dict[str, Any]:
    """Distribution and top value for demographic, lifestyle and behavioral data."""
    return _categorical_fields(values)


def economic_analysis(
    name: str,
    values: List[Any],
    guidance: Optional[GuidanceMap] = None,
) -> Dict[str, Any]:
    """Income-range, numeric, or mixed analysis for economic variables."""
    rule, supplied = resolve_guidance(guidance, name, DEFAULT_ECONOMIC_GUIDANCE)

    currency_values = [v for v in values if isinstance(v, str) and "$" in v]
    numeric_values = [
        v for v in values if not (isinstance(v, str) and "$" in v) and as_number(v) is not None
    ]
    numbers = [float(as_number(v)) for v in numeric_values]

    if len(currency_values) > len(numbers) and len(currency_values) * 2 > len(values):
        # Plain numbers in a mostly-range column count as their own floor.
        floors = [income_floor(text) for text in currency_values] + numbers
        high = sum(1 for floor in floors if floor is not None and floor >= rule.threshold)
        high_pct = percentage(high, len(floors))
        distribution = build_distribution(currency_values + numeric_values)
        return {
            "type": "income_ranges",
            "distribution": distribution,
            "topValue": next(iter(distribution)),
            "highIncomePercentage": high_pct,
            **_guidance_fields(rule, supplied),
            "summary": f"{high_pct}% {rule.label}",
        }

    if numbers and len(numbers) == len(values):
        average = round_half_up(float(np.mean(numbers)), 2)
        low, high_value = float(np.min(numbers)), float(np.max(numbers))
        high_pct = _share_at_or_above(numbers, rule.threshold)
        return {
            "type": "numeric",
            "average": _tidy(average),
            "range": {"min": _tidy(low), "max": _tidy(high_value)},
            "highIncomePercentage": high_pct,
            **_guidance_fields(rule, supplied),
            "summary": (
                f"Average {_tidy(average):,}, range {_tidy(low):,} to {_tidy(high_value):,}; "
                f"{high_pct}% {rule.label}"
            ),
        }

    return {"type": "mixed", **_categorical_fields(values)}


def interests_analysis(
    name: str,
    values: List[Any],
    guidance: Optional[GuidanceMap] = None,
) -> Dict[str, Any]:
    """Affinity score, boolean flag, or categorical analysis for interests."""
    numbers = [as_number(v) for v in values]
    if all(number is not None for number in numbers):
        rule, supplied = resolve_guidance(guidance, name, DEFAULT_INTEREST_GUIDANCE)
        scores = [float(number) for number in numbers if number is not None]
        average = round_half_up(float(np.mean(scores)), 1)
        high_pct = _share_at_or_above(scores, rule.threshold)
        return {
            "type": "affinity_score",
            "averageScore": average,
            "highAffinityPercentage": high_pct,
            **_guidance_fields(rule, supplied),
            "summary": f"Average score {average}/5; {high_pct}% {rule.label}",
        }

    flags = [as_bool(v) for v in values]
    if all(flag is not None for flag in flags):
        positive_pct = percentage(sum(1 for flag in flags if flag), len(flags))
        return {
            "type": "boolean_flag",
            "positivePercentage": positive_pct,
            "summary": f"{positive_pct}% positive",
        }

    return {"type": "categorical", **_categorical_fields(values)}
