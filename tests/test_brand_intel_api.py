"""
tests/test_brand_intel_api.py

HTTP-level tests for the BrandIntel API using FastAPI's TestClient.

The app is built with explicit settings, no LLM adapter and an identity
provider without credentials, so every endpoint runs on its fallbacks and
no network call is made.
"""

from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_brand_intel_service
from app.config import (
    BrandIntelSettings,
    CustomerUploadSettings,
    DevLogSettings,
    IdentityProviderSettings,
    LLMSettings,
)
from app.errors import InvalidInputError
from app.main import create_app
from app.services.brand_intel_service import BrandIntelService
from assumptions.engine import WELL_ALIGNED_MESSAGE
from llm_synthesis.adapter import MockLLMAdapter

BUSINESS_CONTEXT = {
    "businessName": "Roasted Bean Coffee Co.",
    "industry": "Food & Beverage",
    "businessModel": "B2C Retail",
    "targetCustomer": "Young professionals, urban",
    "brandPositioning": "Hip, modern coffee shop",
    "goals": ["Optimize marketing messaging"],
}
SELECTED_VARIABLES = [
    {"variable": "AGE", "category": "demographics", "rationale": "Segmentation"},
    {"variable": "URBANICITY", "category": "lifestyle", "rationale": "Distribution"},
]
ENRICHED_CUSTOMERS = [
    {"customer_id": "CUST_0001", "enrichment_source": "email", "AGE": 34, "URBANICITY": "Suburban"},
    {"customer_id": "CUST_0002", "enrichment_source": "pii", "AGE": 34, "URBANICITY": "Urban"},
    {"customer_id": "CUST_0003", "enrichment_source": "no_match"},
]


@pytest.fixture()
def settings() -> BrandIntelSettings:
    return BrandIntelSettings(
        identity=IdentityProviderSettings(),
        llm=LLMSettings(adapter="anthropic", api_key=None, guidance_enabled=False),
        dev_log=DevLogSettings(enabled=False),
        upload=CustomerUploadSettings(max_rows=50, max_validation_errors=10),
    )


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch, settings: BrandIntelSettings) -> TestClient:
    monkeypatch.delenv("LLM_ADAPTER", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    service = BrandIntelService(settings=settings, adapter=None)
    return TestClient(create_app(settings=settings, brand_intel_service=service))


class TestReadEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "llmAdapter": "anthropic",
            "llmConfigured": False,
            "identityConfigured": False,
        }

    def test_health_reads_settings_stored_on_app(self, client: TestClient, settings: BrandIntelSettings) -> None:
        client.app.state.settings = replace(
            settings, llm=LLMSettings(adapter="mock", guidance_enabled=False)
        )

        body = client.get("/health").json()

        assert body["llmAdapter"] == "mock"
        assert body["llmConfigured"] is True

    def test_sample_data(self, client: TestClient) -> None:
        body = client.get("/sample-data").json()

        assert body["businessContext"]["businessName"] == "Roasted Bean Coffee Co."
        assert len(body["customers"]) == 8
        assert body["customers"][0]["customer_id"] == "CUST_0001"

    def test_variable_catalog(self, client: TestClient) -> None:
        variables = client.get("/variables/catalog").json()["variables"]

        assert len(variables) == 22
        assert variables[0] == {
            "variable": "AGE",
            "category": "demographics",
            "description": "Customer age for segmentation",
        }


class TestSelectVariables:
    def test_fallback_selection(self, client: TestClient) -> None:
        response = client.post("/select-variables", json={"businessContext": BUSINESS_CONTEXT})

        assert response.status_code == 200
        body = response.json()
        assert body["fallbackUsed"] is True
        assert len(body["variables"]) == 8
        assert body["variables"][0]["variable"] == "AGE"

    def test_missing_business_name_is_422(self, client: TestClient) -> None:
        context = {key: value for key, value in BUSINESS_CONTEXT.items() if key != "businessName"}
        assert client.post("/select-variables", json={"businessContext": context}).status_code == 422

    def test_blank_business_name_is_400(self, client: TestClient) -> None:
        context = {**BUSINESS_CONTEXT, "businessName": "   "}
        assert client.post("/select-variables", json={"businessContext": context}).status_code == 400


class TestEnrichData:
    def test_unconfigured_provider_tags_every_record_error(self, client: TestClient) -> None:
        payload = {
            "customerData": [
                {"customer_id": "CUST_0001", "email": "sarah@example.com"},
                {"customer_id": "CUST_0002", "first_name": "Michael", "last_name": "Chen"},
            ],
            "selectedVariables": SELECTED_VARIABLES,
        }

        response = client.post("/enrich-data", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert [c["enrichment_source"] for c in body["enrichedCustomers"]] == ["error", "error"]
        assert body["stats"] == {"total": 2, "enhanced": 0, "matchRate": 0}
        assert body["truncated"] == 0

    def test_empty_customer_list_is_422(self, client: TestClient) -> None:
        response = client.post("/enrich-data", json={"customerData": [], "selectedVariables": SELECTED_VARIABLES})
        assert response.status_code == 422

    def test_unknown_category_is_422(self, client: TestClient) -> None:
        payload = {
            "customerData": [{"email": "a@example.com"}],
            "selectedVariables": [{"variable": "AGE", "category": "astrology"}],
        }
        assert client.post("/enrich-data", json=payload).status_code == 422


class TestInsightsAndQueries:
    def test_generate_insights_fallback(self, client: TestClient) -> None:
        payload = {
            "businessContext": BUSINESS_CONTEXT,
            "selectedVariables": SELECTED_VARIABLES,
            "enrichedCustomers": ENRICHED_CUSTOMERS,
        }

        response = client.post("/generate-insights", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["fallbackUsed"] is True
        assert body["aggregatedData"]["totalRecords"] == 3
        assert body["aggregatedData"]["matchRate"] == 67
        assert body["aggregatedData"]["variableAnalysis"]["URBANICITY"]["distribution"] == {
            "Suburban": 50,
            "Urban": 50,
        }
        assert len(body["assumptionComparisons"]) == 1
        assert body["assumptionSummary"] is None
        assert "Roasted Bean Coffee Co." in body["insights"]

    def test_generate_insights_without_gaps_reports_alignment(
        self, monkeypatch: pytest.MonkeyPatch, settings: BrandIntelSettings
    ) -> None:
        monkeypatch.delenv("LLM_ADAPTER", raising=False)
        monkeypatch.delenv("APP_ENV", raising=False)
        service = BrandIntelService(settings=settings, adapter=MockLLMAdapter(response="# Report"))
        client = TestClient(create_app(settings=settings, brand_intel_service=service))
        payload = {
            "businessContext": {**BUSINESS_CONTEXT, "targetCustomer": "Young urban professionals"},
            "selectedVariables": [{"variable": "URBANICITY", "category": "lifestyle"}],
            "enrichedCustomers": [{"customer_id": "CUST_0001", "enrichment_source": "email", "URBANICITY": "Urban"}],
        }

        body = client.post("/generate-insights", json=payload).json()

        assert body["fallbackUsed"] is False
        assert body["insights"] == "# Report"
        assert body["assumptionComparisons"] == []
        assert body["assumptionSummary"] == WELL_ALIGNED_MESSAGE

    def test_generate_insights_requires_customers(self, client: TestClient) -> None:
        payload = {
            "businessContext": BUSINESS_CONTEXT,
            "selectedVariables": SELECTED_VARIABLES,
            "enrichedCustomers": [],
        }
        assert client.post("/generate-insights", json=payload).status_code == 422

    def test_generate_queries_fallback(self, client: TestClient) -> None:
        payload = {
            "businessContext": BUSINESS_CONTEXT,
            "selectedVariables": SELECTED_VARIABLES,
            "insights": "# Report",
        }

        response = client.post("/generate-queries", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["fallbackUsed"] is True
        assert len(body["marketIntelligence"]["queries"]) == 4
        assert len(body["growthAudiences"]["queries"]) == 4

    def test_generate_queries_rejects_blank_insights(self, client: TestClient) -> None:
        payload = {
            "businessContext": BUSINESS_CONTEXT,
            "selectedVariables": SELECTED_VARIABLES,
            "insights": "   ",
        }
        assert client.post("/generate-queries", json=payload).status_code == 400

    def test_service_invalid_input_maps_to_400(self, client: TestClient) -> None:
        class _RejectingService:
            def select_variables(self, context):
                raise InvalidInputError("industry is not supported")

        client.app.dependency_overrides[get_brand_intel_service] = lambda: _RejectingService()
        try:
            response = client.post("/select-variables", json={"businessContext": BUSINESS_CONTEXT})
        finally:
            client.app.dependency_overrides.clear()

        assert response.status_code == 400
        assert response.json()["detail"] == "industry is not supported"


class TestUploadCustomers:
    def test_parses_csv(self, client: TestClient) -> None:
        content = b"\xef\xbb\xbfFirst Name,Last Name,Email\nSarah,Johnson,sarah@example.com\n,,\nMichael,Chen,\n"

        response = client.post("/upload-customers", files={"file": ("customers.csv", content, "text/csv")})

        assert response.status_code == 200
        body = response.json()
        assert body["customers"] == [
            {"first_name": "Sarah", "last_name": "Johnson", "email": "sarah@example.com", "customer_id": "CUST_0001"},
            {"first_name": "Michael", "last_name": "Chen", "email": None, "customer_id": "CUST_0002"},
        ]
        assert body["rowsFailed"] == 1
        assert body["validationErrors"][0]["rowNumber"] == 3
        assert body["truncated"] is False

    def test_rejects_non_csv(self, client: TestClient) -> None:
        response = client.post("/upload-customers", files={"file": ("customers.txt", b"a,b\n1,2\n", "text/plain")})
        assert response.status_code == 400

    def test_rejects_headerless_file(self, client: TestClient) -> None:
        response = client.post("/upload-customers", files={"file": ("customers.csv", b"", "text/csv")})
        assert response.status_code == 400
