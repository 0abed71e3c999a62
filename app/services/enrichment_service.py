"""
app/services/enrichment_service.py

Sequential, paced enrichment of customer records against the identity graph.

Each record is tried by email first, then by name plus location. Every
processed record leaves with exactly one ``enrichment_source`` tag; a failure
on one record is tagged ``error`` and the batch carries on.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Callable

from app.config import IdentityProviderSettings
from app.connectors import ConnectorRequestError, IdentityGraphConnector, extract_fields
from app.domain.brand_intel import (
    ENRICHMENT_SOURCE_FIELD,
    CustomerRecord,
    EnrichmentBatchResult,
    EnrichmentSource,
    EnrichmentStats,
    Variable,
    is_enriched,
)
from app.errors import InvalidInputError
from app.logging_utils import log_event
from aggregation.rounding import percentage

logger = logging.getLogger(__name__)


def _text(record: Mapping, key: str) -> str | None:
    value = record.get(key)
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


def _record_id(record: Mapping) -> object:
    return record.get("customer_id") or record.get("id")


class EnrichmentService:
    """
    Annotates customer records with identity-graph attributes.

    Parameters
    ----------
    connector:
        Identity graph connector used for lookups.
    settings:
        Provides the batch cap and the fixed inter-record delay.
    sleep:
        Injected for tests; defaults to :func:`time.sleep`.
    """

    def __init__(
        self,
        *,
        connector: IdentityGraphConnector,
        settings: IdentityProviderSettings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connector = connector
        self._max_batch_size = max(1, settings.max_batch_size)
        self._request_delay_seconds = max(0.0, settings.request_delay_seconds)
        self._sleep = sleep

    def enrich_record(
        self,
        record: Mapping,
        variables: Sequence[Variable],
    ) -> CustomerRecord:
        """
        Enrich one record; never raises for upstream failures.
        """

        requested_fields = [variable.name for variable in variables]
        base: CustomerRecord = dict(record)

        try:
            email = _text(record, "email")
            if email:
                identity = self._connector.lookup_by_email(email)
                if identity is not None:
                    return self._merge(base, identity, requested_fields, EnrichmentSource.EMAIL)

            first_name = _text(record, "first_name")
            last_name = _text(record, "last_name")
            city = _text(record, "city")
            state = _text(record, "state")
            if first_name and last_name and (city or state):
                identity = self._connector.lookup_by_pii(
                    first_name=first_name,
                    last_name=last_name,
                    city=city,
                    state=state,
                )
                if identity is not None:
                    return self._merge(base, identity, requested_fields, EnrichmentSource.PII)

        except ConnectorRequestError as exc:
            logger.warning("Enrichment lookup failed customer=%s error=%s", _record_id(record), exc)
            return self._tag(base, EnrichmentSource.ERROR)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected enrichment failure customer=%s", _record_id(record))
            return self._tag(base, EnrichmentSource.ERROR)

        return self._tag(base, EnrichmentSource.NO_MATCH)

    def enrich_batch(
        self,
        records: Sequence[Mapping],
        variables: Sequence[Variable],
    ) -> EnrichmentBatchResult:
        """
        Enrich up to ``max_batch_size`` records sequentially with a fixed delay.

        Raises
        ------
        InvalidInputError
            If ``records`` is not a list of mappings or ``variables`` is not a
            list of :class:`Variable`.
        """

        self._validate(records, variables)

        to_process = list(records[: self._max_batch_size])
        truncated = len(records) - len(to_process)
        if truncated:
            logger.warning(
                "Enrichment batch capped processed=%d skipped=%d",
                len(to_process),
                truncated,
            )

        if not self._connector.is_configured:
            logger.warning("Identity provider credentials missing; tagging %d records as error.", len(to_process))
            enriched = [self._tag(dict(record), EnrichmentSource.ERROR) for record in to_process]
            return EnrichmentBatchResult(
                enriched_customers=enriched,
                stats=self._stats(enriched),
                truncated=truncated,
            )

        enriched: list[CustomerRecord] = []
        for index, record in enumerate(to_process):
            if index and self._request_delay_seconds:
                self._sleep(self._request_delay_seconds)
            enriched.append(self.enrich_record(record, variables))

        stats = self._stats(enriched)
        log_event(
            logger,
            logging.INFO,
            "enrichment_batch_complete",
            total=stats.total,
            enhanced=stats.enhanced,
            match_rate=stats.match_rate,
            variables=[variable.name for variable in variables],
        )
        return EnrichmentBatchResult(enriched_customers=enriched, stats=stats, truncated=truncated)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _merge(
        base: CustomerRecord,
        identity: dict,
        requested_fields: list[str],
        source: EnrichmentSource,
    ) -> CustomerRecord:
        base.update(extract_fields(identity, requested_fields))
        base[ENRICHMENT_SOURCE_FIELD] = source.value
        return base

    @staticmethod
    def _tag(base: CustomerRecord, source: EnrichmentSource) -> CustomerRecord:
        base[ENRICHMENT_SOURCE_FIELD] = source.value
        return base

    @staticmethod
    def _stats(enriched: list[CustomerRecord]) -> EnrichmentStats:
        enhanced = sum(1 for record in enriched if is_enriched(record))
        return EnrichmentStats(
            total=len(enriched),
            enhanced=enhanced,
            match_rate=percentage(enhanced, len(enriched)),
        )

    @staticmethod
    def _validate(records: object, variables: object) -> None:
        if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
            raise InvalidInputError("customer records must be a list of objects.")
        if not isinstance(variables, list) or not all(isinstance(v, Variable) for v in variables):
            raise InvalidInputError("selected variables must be a list of variables.")
