"""Report parsing with guaranteed fallback."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from app.domain.brand_intel import AssumptionComparison, BusinessContext, Variable
from llm_synthesis.fallbacks import fallback_report
from llm_synthesis.validator import LLMOutputValidationError, parse_markdown_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightReport:
    """Rendered markdown plus whether it came from the canned fallback."""

    markdown: str
    is_fallback: bool


def parse_report(
    raw_response: Optional[str],
    context: BusinessContext,
    variables: Sequence[Variable],
    aggregation: Optional[Dict[str, Any]] = None,
    comparisons: Sequence[AssumptionComparison] = (),
) -> InsightReport:
    """Turn a raw completion into a report, substituting the fallback on failure.

    Never raises. ``raw_response`` may be None when the model call itself
    failed.
    """
    try:
        return InsightReport(markdown=parse_markdown_report(raw_response), is_fallback=False)
    except LLMOutputValidationError as exc:
        logger.info("Using fallback report: %s", exc)
        return InsightReport(
            markdown=fallback_report(context, variables, aggregation, comparisons),
            is_fallback=True,
        )
