"""
app/domain/brand_intel.py

Domain models shared by enrichment, aggregation, and narrative generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

RecordValue = Union[str, int, float, bool, None]
CustomerRecord = dict[str, RecordValue]

ENRICHMENT_SOURCE_FIELD = "enrichment_source"


class VariableCategory(str, Enum):
    DEMOGRAPHICS = "demographics"
    ECONOMIC = "economic"
    LIFESTYLE = "lifestyle"
    INTERESTS = "interests"
    BEHAVIORAL = "behavioral"


class EnrichmentSource(str, Enum):
    EMAIL = "email"
    PII = "pii"
    NO_MATCH = "no_match"
    ERROR = "error"


ENRICHED_SOURCES = frozenset({EnrichmentSource.EMAIL.value, EnrichmentSource.PII.value})


@dataclass(frozen=True)
class Variable:
    """
    One identity-graph attribute selected for analysis.
    """

    name: str
    category: VariableCategory
    rationale: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "category": self.category.value,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class BusinessContext:
    """
    A business's self-description collected by the wizard.
    """

    business_name: str
    industry: str
    business_model: str = ""
    target_customer: str = ""
    brand_positioning: str = ""
    goals: tuple[str, ...] = ()
    additional_context: str = ""


@dataclass(frozen=True)
class EnrichmentStats:
    """
    Batch-level enrichment counters.
    """

    total: int
    enhanced: int
    match_rate: int


@dataclass(frozen=True)
class EnrichmentBatchResult:
    """
    Enriched customers plus stats for one sequential batch run.
    """

    enriched_customers: list[CustomerRecord]
    stats: EnrichmentStats
    truncated: int = 0


@dataclass(frozen=True)
class AssumptionComparison:
    """
    A detected gap between a stated assumption and the aggregated data.
    """

    assumption: str
    reality: str
    insight: str

    def to_dict(self) -> dict[str, str]:
        return {
            "assumption": self.assumption,
            "reality": self.reality,
            "insight": self.insight,
        }


@dataclass(frozen=True)
class CatalogVariable:
    """
    An attribute the identity graph can return, offered for selection.
    """

    name: str
    category: VariableCategory
    description: str


@dataclass(frozen=True)
class RowValidationError:
    """
    One customer upload row validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class CustomerUploadSummary:
    """
    Parsed customer rows plus row-level problems from one CSV upload.
    """

    customers: list[CustomerRecord]
    rows_failed: int
    validation_errors: list[RowValidationError] = field(default_factory=list)
    truncated: bool = False


def is_enriched(record: dict) -> bool:
    """Return True when the record was matched by the identity provider."""
    return record.get(ENRICHMENT_SOURCE_FIELD) in ENRICHED_SOURCES
