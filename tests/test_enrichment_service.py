"""
tests/test_enrichment_service.py

Pytest unit tests for EnrichmentService with a fake connector.

Coverage
--------
- Email-first lookup, PII fallback, and no-match tagging
- Per-record failures tagged ``error`` without aborting the batch
- Batch cap, pacing delay, and stats
- Graceful degradation when the provider is not configured
"""

from __future__ import annotations

import pytest

from app.config import IdentityProviderSettings
from app.connectors import ConnectorRequestError
from app.domain.brand_intel import Variable, VariableCategory
from app.errors import InvalidInputError
from app.services.enrichment_service import EnrichmentService

VARIABLES = [
    Variable("AGE", VariableCategory.DEMOGRAPHICS),
    Variable("INCOME_HH", VariableCategory.ECONOMIC),
]


class _FakeConnector:
    """Answers lookups from in-memory tables."""

    def __init__(
        self,
        *,
        by_email: dict | None = None,
        by_pii: dict | None = None,
        configured: bool = True,
        failing_emails: dict | None = None,
    ) -> None:
        self._by_email = by_email or {}
        self._by_pii = by_pii or {}
        self._configured = configured
        self._failing_emails = failing_emails or {}
        self.email_calls: list[str] = []
        self.pii_calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    def lookup_by_email(self, email: str) -> dict | None:
        self.email_calls.append(email)
        if email in self._failing_emails:
            raise self._failing_emails[email]
        return self._by_email.get(email)

    def lookup_by_pii(self, *, first_name, last_name, city=None, state=None) -> dict | None:
        self.pii_calls.append({"first_name": first_name, "last_name": last_name, "city": city, "state": state})
        return self._by_pii.get((first_name, last_name))


def _service(connector: _FakeConnector, sleeps: list | None = None, **overrides) -> EnrichmentService:
    settings = IdentityProviderSettings(
        origin="https://identity.example.test",
        key_id="key",
        secret="secret",
        **overrides,
    )
    recorder = sleeps if sleeps is not None else []
    return EnrichmentService(connector=connector, settings=settings, sleep=recorder.append)  # type: ignore[arg-type]


SARAH_IDENTITY = {"data": [{"AGE": 34}], "finances": {"INCOME_HH": "$75K to $99K"}}
MICHAEL_IDENTITY = {"data": [{"AGE": 42}]}


class TestEnrichRecord:
    def test_email_hit(self) -> None:
        service = _service(_FakeConnector(by_email={"sarah@example.com": SARAH_IDENTITY}))
        record = {"customer_id": "CUST_0001", "email": "sarah@example.com"}

        enriched = service.enrich_record(record, VARIABLES)

        assert enriched["enrichment_source"] == "email"
        assert enriched["AGE"] == 34
        assert enriched["INCOME_HH"] == "$75K to $99K"
        assert "enrichment_source" not in record

    def test_pii_fallback_after_email_miss(self) -> None:
        connector = _FakeConnector(by_pii={("Michael", "Chen"): MICHAEL_IDENTITY})
        record = {"email": "michael@example.com", "first_name": "Michael", "last_name": "Chen", "city": "Portland"}

        enriched = _service(connector).enrich_record(record, VARIABLES)

        assert enriched["enrichment_source"] == "pii"
        assert enriched["AGE"] == 42
        assert connector.email_calls == ["michael@example.com"]
        assert connector.pii_calls[0]["city"] == "Portland"

    def test_pii_needs_city_or_state(self) -> None:
        connector = _FakeConnector(by_pii={("Michael", "Chen"): MICHAEL_IDENTITY})
        enriched = _service(connector).enrich_record({"first_name": "Michael", "last_name": "Chen"}, VARIABLES)

        assert enriched["enrichment_source"] == "no_match"
        assert connector.pii_calls == []

    def test_no_match(self) -> None:
        enriched = _service(_FakeConnector()).enrich_record({"email": "ghost@example.com"}, VARIABLES)
        assert enriched["enrichment_source"] == "no_match"

    def test_connector_error_tags_record(self) -> None:
        connector = _FakeConnector(failing_emails={"bad@example.com": ConnectorRequestError("down")})
        enriched = _service(connector).enrich_record({"email": "bad@example.com"}, VARIABLES)
        assert enriched["enrichment_source"] == "error"

    def test_unexpected_error_tags_record(self) -> None:
        connector = _FakeConnector(failing_emails={"odd@example.com": KeyError("boom")})
        enriched = _service(connector).enrich_record({"email": "odd@example.com"}, VARIABLES)
        assert enriched["enrichment_source"] == "error"


class TestEnrichBatch:
    def test_every_record_gets_exactly_one_tag_and_batch_continues(self) -> None:
        connector = _FakeConnector(
            by_email={"sarah@example.com": SARAH_IDENTITY},
            failing_emails={"bad@example.com": ConnectorRequestError("down")},
        )
        records = [
            {"email": "sarah@example.com"},
            {"email": "bad@example.com"},
            {"email": "ghost@example.com"},
        ]

        result = _service(connector).enrich_batch(records, VARIABLES)

        sources = [record["enrichment_source"] for record in result.enriched_customers]
        assert sources == ["email", "error", "no_match"]
        assert result.stats.total == 3
        assert result.stats.enhanced == 1
        assert result.stats.match_rate == 33

    def test_sleeps_between_records(self) -> None:
        sleeps: list = []
        service = _service(_FakeConnector(), sleeps, request_delay_seconds=0.2)

        service.enrich_batch([{"email": f"c{i}@example.com"} for i in range(3)], VARIABLES)

        assert sleeps == [0.2, 0.2]

    def test_batch_is_capped(self) -> None:
        connector = _FakeConnector()
        service = _service(connector, max_batch_size=3)

        result = service.enrich_batch([{"email": f"c{i}@example.com"} for i in range(5)], VARIABLES)

        assert len(result.enriched_customers) == 3
        assert result.truncated == 2
        assert len(connector.email_calls) == 3

    def test_unconfigured_provider_tags_everything_error(self) -> None:
        connector = _FakeConnector(configured=False, by_email={"sarah@example.com": SARAH_IDENTITY})

        result = _service(connector).enrich_batch([{"email": "sarah@example.com"}, {"id": 2}], VARIABLES)

        assert [record["enrichment_source"] for record in result.enriched_customers] == ["error", "error"]
        assert connector.email_calls == []
        assert result.stats.match_rate == 0

    def test_empty_batch(self) -> None:
        result = _service(_FakeConnector()).enrich_batch([], VARIABLES)
        assert result.enriched_customers == []
        assert result.stats.match_rate == 0

    @pytest.mark.parametrize(
        "records,variables",
        [
            ("not-a-list", VARIABLES),
            ([1, 2], VARIABLES),
            ([{"email": "a@example.com"}], ["AGE"]),
        ],
    )
    def test_invalid_input(self, records: object, variables: object) -> None:
        with pytest.raises(InvalidInputError):
            _service(_FakeConnector()).enrich_batch(records, variables)  # type: ignore[arg-type]
