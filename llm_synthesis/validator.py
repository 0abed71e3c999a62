"""Validation layer for raw LLM output.

Parses and validates model responses for each structured task. Every
failure raises :class:`LLMOutputValidationError`; callers substitute their
canned fallback.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from aggregation.guidance import AnalysisGuidance
from app.domain.brand_intel import CatalogVariable, Variable
from llm_synthesis.schema import GuidanceOutput, QueryBuckets, VariableSelectionOutput

_FENCE_PATTERN = re.compile(
    r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```$",
    re.DOTALL,
)


class LLMOutputValidationError(Exception):
    """Raised when LLM output fails parsing or schema validation.

    Attributes:
        stage: Which validation step failed ("empty", "json_parse" or "schema").
        errors: List of human-readable error descriptions.
        raw_response: The original string that failed validation.
    """

    def __init__(
        self,
        stage: str,
        errors: List[str],
        raw_response: Optional[str],
    ) -> None:
        self.stage = stage
        self.errors = errors
        self.raw_response = raw_response
        message = (
            f"LLM output validation failed at stage '{stage}': "
            + "; ".join(errors)
        )
        super().__init__(message)


def strip_markdown_fences(text: str) -> str:
    """Remove optional markdown code fences wrapping a response.

    LLMs sometimes wrap output in ```json ... ``` despite instructions.
    This strips that wrapper so the inner content can be parsed.

    Args:
        text: Raw LLM response string.

    Returns:
        The text with leading/trailing code fences removed, if present.
    """
    stripped = (text or "").strip()
    match = _FENCE_PATTERN.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _schema_errors(exc: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    ]


def _load_json_object(raw_response: Optional[str]) -> Dict[str, Any]:
    cleaned = strip_markdown_fences(raw_response or "")
    if not cleaned:
        raise LLMOutputValidationError(
            stage="empty",
            errors=["response is empty"],
            raw_response=raw_response,
        )

    try:
        data = json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as exc:
        raise LLMOutputValidationError(
            stage="json_parse",
            errors=[str(exc)],
            raw_response=raw_response,
        ) from exc

    if not isinstance(data, dict):
        raise LLMOutputValidationError(
            stage="schema",
            errors=["top-level JSON must be an object"],
            raw_response=raw_response,
        )
    return data


def parse_markdown_report(raw_response: Optional[str]) -> str:
    """Return the trimmed markdown body of a prose response.

    Raises:
        LLMOutputValidationError: If nothing is left after stripping fences.
    """
    report = strip_markdown_fences(raw_response or "")
    if not report:
        raise LLMOutputValidationError(
            stage="empty",
            errors=["report is empty"],
            raw_response=raw_response,
        )
    return report


def parse_variable_selection(
    raw_response: Optional[str],
    lookup: Callable[[str], Optional[CatalogVariable]],
) -> List[Variable]:
    """Parse a variable-selection response, keeping only catalog variables.

    The category always comes from the catalog, not from the model.

    Raises:
        LLMOutputValidationError: On malformed JSON, schema mismatch, or when
            no selected variable exists in the catalog.
    """
    data = _load_json_object(raw_response)
    try:
        parsed = VariableSelectionOutput.model_validate(data)
    except ValidationError as exc:
        raise LLMOutputValidationError(
            stage="schema",
            errors=_schema_errors(exc),
            raw_response=raw_response,
        ) from exc

    variables: List[Variable] = []
    seen: set = set()
    for item in parsed.variables:
        entry = lookup(item.name)
        if entry is None or entry.name in seen:
            continue
        seen.add(entry.name)
        variables.append(
            Variable(name=entry.name, category=entry.category, rationale=item.rationale or entry.description)
        )

    if not variables:
        raise LLMOutputValidationError(
            stage="schema",
            errors=["no selected variable exists in the catalog"],
            raw_response=raw_response,
        )
    return variables


def parse_query_buckets(raw_response: Optional[str]) -> QueryBuckets:
    """Parse the two query buckets.

    Raises:
        LLMOutputValidationError: On malformed JSON or schema mismatch.
    """
    data = _load_json_object(raw_response)
    try:
        return QueryBuckets.model_validate(data)
    except ValidationError as exc:
        raise LLMOutputValidationError(
            stage="schema",
            errors=_schema_errors(exc),
            raw_response=raw_response,
        ) from exc


def parse_guidance(
    raw_response: Optional[str],
    variables: Sequence[Variable],
) -> Dict[str, AnalysisGuidance]:
    """Parse model-suggested thresholds for the given variables.

    Entries for unknown variables or with non-positive thresholds are ignored.

    Raises:
        LLMOutputValidationError: On malformed JSON or schema mismatch.
    """
    data = _load_json_object(raw_response)
    try:
        parsed = GuidanceOutput.model_validate(data)
    except ValidationError as exc:
        raise LLMOutputValidationError(
            stage="schema",
            errors=_schema_errors(exc),
            raw_response=raw_response,
        ) from exc

    known = {variable.name for variable in variables}
    return {
        item.variable: AnalysisGuidance(
            threshold=item.threshold,
            label=item.label,
            rationale=item.rationale,
        )
        for item in parsed.guidance
        if item.variable in known and item.threshold > 0
    }
