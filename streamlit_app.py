"""Streamlit wizard for BrandIntel.

Five steps: upload -> business context -> variables -> enrichment -> insights.
All work happens in-process through ``BrandIntelService``.
"""

from __future__ import annotations

import io
import json
from typing import Optional

import pandas as pd
import streamlit as st

from app.domain.brand_intel import BusinessContext, Variable
from app.domain.variable_catalog import AVAILABLE_VARIABLES
from app.errors import InvalidInputError
from app.sample_data import (
    AVAILABLE_GOALS,
    BUSINESS_MODELS,
    INDUSTRIES,
    SAMPLE_BUSINESS_CONTEXT,
    sample_customers,
)

st.set_page_config(page_title="BrandIntel", page_icon="BI", layout="wide")

_STEPS = ("Upload", "Business Context", "Variables", "Enrichment", "Insights")

_STATE_DEFAULTS: dict = {
    "step": 0,
    "customers": None,
    "context": None,
    "variables": None,
    "variables_fallback": False,
    "enrichment": None,
    "insights": None,
    "queries": None,
}

for _key, _val in _STATE_DEFAULTS.items():
    if _key not in st.session_state:
        st.session_state[_key] = _val


@st.cache_resource(show_spinner=False)
def _load_backend_handles():
    """Build settings and services once per Streamlit process."""
    from app.config import get_settings  # noqa: PLC0415
    from app.services.brand_intel_service import build_brand_intel_service  # noqa: PLC0415
    from app.services.customer_upload_service import build_customer_upload_service  # noqa: PLC0415

    settings = get_settings()
    return {
        "settings": settings,
        "service": build_brand_intel_service(settings),
        "upload_service": build_customer_upload_service(settings.upload),
    }


def _go_to(step: int) -> None:
    st.session_state.step = step
    st.rerun()


# ── Sidebar ────────────────────────────────────────────────────────────────
with st.sidebar:
    st.title("BrandIntel")
    st.caption("Customer intelligence for brand strategy")
    st.divider()
    for index, label in enumerate(_STEPS):
        marker = "▶" if index == st.session_state.step else ("✓" if index < st.session_state.step else "·")
        st.write(f"{marker} {index + 1}. {label}")
    st.divider()
    if st.button("Start over", use_container_width=True):
        for _key, _val in _STATE_DEFAULTS.items():
            st.session_state[_key] = _val
        st.rerun()


# ── Step renderers ─────────────────────────────────────────────────────────
def _render_upload() -> None:
    st.header("1. Customer Data")
    handles = _load_backend_handles()

    uploaded_file = st.file_uploader("Upload customer list (CSV)", type=["csv"])
    if uploaded_file is not None:
        try:
            summary = handles["upload_service"].parse_csv(io.BytesIO(uploaded_file.getvalue()))
        except InvalidInputError as exc:
            st.error(str(exc))
        else:
            st.session_state.customers = summary.customers
            st.success(f"Loaded {len(summary.customers):,} customers")
            if summary.rows_failed:
                st.warning(f"{summary.rows_failed} rows were skipped")
            if summary.truncated:
                st.warning("File was truncated at the configured row limit")

    if st.button("Use sample coffee-shop data"):
        st.session_state.customers = sample_customers()
        st.session_state.context = SAMPLE_BUSINESS_CONTEXT

    customers: Optional[list] = st.session_state.customers
    if customers:
        df = pd.DataFrame(customers)
        st.subheader("Data Preview")
        st.dataframe(df.head(10), use_container_width=True)
        cols = st.columns(3)
        cols[0].metric("Customers", f"{len(df):,}")
        cols[1].metric("With email", int(df["email"].notna().sum()) if "email" in df else 0)
        cols[2].metric("Columns", len(df.columns))
        if st.button("Continue", type="primary"):
            _go_to(1)


def _render_context() -> None:
    st.header("2. Business Context")
    current: BusinessContext = st.session_state.context or SAMPLE_BUSINESS_CONTEXT

    with st.form("business_context"):
        business_name = st.text_input("Business name", value=current.business_name)
        industry = st.selectbox(
            "Industry",
            INDUSTRIES,
            index=INDUSTRIES.index(current.industry) if current.industry in INDUSTRIES else len(INDUSTRIES) - 1,
        )
        business_model = st.selectbox(
            "Business model",
            BUSINESS_MODELS,
            index=(
                BUSINESS_MODELS.index(current.business_model)
                if current.business_model in BUSINESS_MODELS
                else len(BUSINESS_MODELS) - 1
            ),
        )
        target_customer = st.text_area("Who do you think your customer is?", value=current.target_customer)
        brand_positioning = st.text_area("Current brand positioning", value=current.brand_positioning)
        goals = st.multiselect(
            "Goals",
            AVAILABLE_GOALS,
            default=[goal for goal in current.goals if goal in AVAILABLE_GOALS],
        )
        additional_context = st.text_area("Additional context", value=current.additional_context)
        submitted = st.form_submit_button("Select variables", type="primary")

    if submitted:
        if not business_name.strip():
            st.warning("Please enter a business name.")
            return
        st.session_state.context = BusinessContext(
            business_name=business_name.strip(),
            industry=industry,
            business_model=business_model,
            target_customer=target_customer,
            brand_positioning=brand_positioning,
            goals=tuple(goals),
            additional_context=additional_context,
        )
        with st.spinner("Selecting variables…"):
            selection = _load_backend_handles()["service"].select_variables(st.session_state.context)
        st.session_state.variables = selection.variables
        st.session_state.variables_fallback = selection.is_fallback
        _go_to(2)


def _render_variables() -> None:
    st.header("3. Variables")
    variables: list[Variable] = st.session_state.variables or []
    if st.session_state.variables_fallback:
        st.info("Showing the standard variable set (language model unavailable).")

    st.dataframe(
        pd.DataFrame([variable.to_dict() for variable in variables]),
        use_container_width=True,
    )

    catalog = {entry.name: entry for entry in AVAILABLE_VARIABLES}
    chosen = st.multiselect(
        "Adjust selection",
        list(catalog),
        default=[variable.name for variable in variables if variable.name in catalog],
    )
    if st.button("Enrich customers", type="primary"):
        by_name = {variable.name: variable for variable in variables}
        st.session_state.variables = [
            by_name.get(name) or Variable(name, catalog[name].category, catalog[name].description)
            for name in chosen
        ]
        with st.spinner("Enriching customers (sequential, paced)…"):
            try:
                st.session_state.enrichment = _load_backend_handles()["service"].enrich_customers(
                    st.session_state.customers,
                    st.session_state.variables,
                )
            except InvalidInputError as exc:
                st.error(str(exc))
                return
        _go_to(3)


def _render_enrichment() -> None:
    st.header("4. Enrichment Preview")
    result = st.session_state.enrichment
    if result is None:
        st.info("Run enrichment first.")
        return

    cols = st.columns(3)
    cols[0].metric("Processed", result.stats.total)
    cols[1].metric("Enhanced", result.stats.enhanced)
    cols[2].metric("Match rate", f"{result.stats.match_rate}%")
    if result.truncated:
        st.warning(f"{result.truncated} customers exceeded the batch limit and were not processed.")

    df = pd.DataFrame(result.enriched_customers)
    st.dataframe(df, use_container_width=True)
    st.bar_chart(df["enrichment_source"].value_counts())

    if st.button("Generate insights", type="primary"):
        with st.spinner("Analyzing customers…"):
            try:
                st.session_state.insights = _load_backend_handles()["service"].generate_insights(
                    st.session_state.context,
                    st.session_state.variables,
                    result.enriched_customers,
                )
            except InvalidInputError as exc:
                st.error(str(exc))
                return
        _go_to(4)


def _render_analysis_table(aggregation: dict) -> None:
    rows = [
        {
            "variable": name,
            "category": details.get("category"),
            "coverage": details.get("coverage"),
            "summary": details.get("summary"),
        }
        for name, details in aggregation.get("variableAnalysis", {}).items()
    ]
    if rows:
        st.dataframe(pd.DataFrame(rows), use_container_width=True)

    for name, details in aggregation.get("variableAnalysis", {}).items():
        distribution = details.get("distribution")
        if distribution:
            with st.expander(name):
                st.bar_chart(pd.Series(distribution, name="%"))


def _render_insights() -> None:
    st.header("5. Brand Intelligence")
    outcome = st.session_state.insights
    if outcome is None:
        st.info("Generate insights first.")
        return

    if outcome.is_fallback:
        st.info("Report generated without the language model.")

    tab_report, tab_data, tab_queries = st.tabs(["Report", "Data", "Queries"])
    with tab_report:
        st.markdown(outcome.insights)
        st.download_button(
            "Download report",
            data=outcome.insights,
            file_name="brand-intelligence-report.md",
            mime="text/markdown",
        )
    with tab_data:
        aggregation = outcome.aggregated_data
        cols = st.columns(3)
        cols[0].metric("Records", aggregation["totalRecords"])
        cols[1].metric("Enriched", aggregation["enrichedRecords"])
        cols[2].metric("Match rate", f"{aggregation['matchRate']}%")
        _render_analysis_table(aggregation)
        if outcome.alignment_message:
            st.success(outcome.alignment_message)
        for comparison in outcome.comparisons:
            st.warning(f"**{comparison.assumption}**\n\n{comparison.reality}\n\n{comparison.insight}")
        st.download_button(
            "Download aggregated data",
            data=json.dumps(aggregation, indent=2),
            file_name="aggregated-data.json",
            mime="application/json",
        )
    with tab_queries:
        if st.button("Generate follow-up queries"):
            with st.spinner("Writing queries…"):
                st.session_state.queries = _load_backend_handles()["service"].generate_queries(
                    st.session_state.context,
                    st.session_state.variables,
                    outcome.insights,
                    outcome.aggregated_data,
                )
        queries = st.session_state.queries
        if queries is not None:
            for bucket in (queries.buckets.market_intelligence, queries.buckets.growth_audiences):
                st.subheader(bucket.category)
                st.caption(bucket.description)
                for query in bucket.queries:
                    st.code(query, language=None)


_RENDERERS = (_render_upload, _render_context, _render_variables, _render_enrichment, _render_insights)

_RENDERERS[st.session_state.step]()

if st.session_state.step > 0 and st.button("Back"):
    _go_to(st.session_state.step - 1)
