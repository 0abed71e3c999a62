"""Threshold and label parameters for economic and interest analysis.

Guidance is supplied by the caller (for example, derived from the business
context by a language model). The aggregation engine only reads it.
"""

from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class AnalysisGuidance:
    """Cut-off and human label for one variable's high-value share."""

    threshold: float
    label: str
    rationale: Optional[str] = None


DEFAULT_ECONOMIC_GUIDANCE = AnalysisGuidance(threshold=100_000, label="earn $100K+")
DEFAULT_INTEREST_GUIDANCE = AnalysisGuidance(threshold=3, label="show high affinity (3+ of 5)")

GuidanceMap = Mapping[str, AnalysisGuidance]


def resolve_guidance(
    guidance: Optional[GuidanceMap],
    variable_name: str,
    default: AnalysisGuidance,
) -> tuple[AnalysisGuidance, bool]:
    """Return the guidance for ``variable_name`` and whether it was supplied.

    Args:
        guidance: Optional caller-supplied guidance keyed by variable name.
        variable_name: Variable being analysed.
        default: Hardcoded fallback for the variable's category.

    Returns:
        ``(guidance, supplied)`` where ``supplied`` is False when the default
        was used.
    """
    if guidance and variable_name in guidance:
        return guidance[variable_name], True
    return default, False
