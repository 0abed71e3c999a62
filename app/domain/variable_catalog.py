"""
app/domain/variable_catalog.py

Identity-graph attributes offered to the variable selection step.
"""

from __future__ import annotations

from app.domain.brand_intel import CatalogVariable, VariableCategory

_D = VariableCategory.DEMOGRAPHICS
_E = VariableCategory.ECONOMIC
_L = VariableCategory.LIFESTYLE
_I = VariableCategory.INTERESTS
_B = VariableCategory.BEHAVIORAL

AVAILABLE_VARIABLES: tuple[CatalogVariable, ...] = (
    CatalogVariable("AGE", _D, "Customer age for segmentation"),
    CatalogVariable("GENDER", _D, "Gender identification"),
    CatalogVariable("MARITAL_STATUS", _D, "Married/Single status"),
    CatalogVariable("CHILDREN_HH", _D, "Number of children in household"),
    CatalogVariable("GENERATION", _D, "Generational cohort"),
    CatalogVariable("INCOME_HH", _E, "Household income levels"),
    CatalogVariable("NET_WORTH_HH", _E, "Household net worth"),
    CatalogVariable("OWNS_INVESTMENTS", _E, "Investment ownership"),
    CatalogVariable("CREDIT_CARD", _E, "Credit card usage patterns"),
    CatalogVariable("EDUCATION", _L, "Educational attainment"),
    CatalogVariable("OCCUPATION_TYPE", _L, "White collar vs blue collar"),
    CatalogVariable("URBANICITY", _L, "Urban/suburban/rural residence"),
    CatalogVariable("DWELLING_TYPE", _L, "Housing type"),
    CatalogVariable("GOURMET_AFFINITY", _I, "Interest in gourmet/premium products"),
    CatalogVariable("FITNESS_AFFINITY", _I, "Health and fitness interest"),
    CatalogVariable("HIGH_TECH_AFFINITY", _I, "Technology adoption"),
    CatalogVariable("TRAVEL_AFFINITY", _I, "Travel and leisure interest"),
    CatalogVariable("COOKING_AFFINITY", _I, "Cooking and culinary interest"),
    CatalogVariable("BUSINESS_AFFINITY", _I, "Business and entrepreneurship interest"),
    CatalogVariable("READING_MAGAZINES", _B, "Magazine reading behavior"),
    CatalogVariable("LIKELY_CHARITABLE_DONOR", _B, "Charitable giving tendency"),
    CatalogVariable(
        "RECENT_CATALOG_PURCHASES_TOTAL_ORDERS",
        _B,
        "Catalog shopping behavior",
    ),
)

_BY_NAME = {variable.name: variable for variable in AVAILABLE_VARIABLES}


def find_catalog_variable(name: str) -> CatalogVariable | None:
    """Return the catalog entry for ``name``, or None when it is not offered."""
    return _BY_NAME.get((name or "").strip().upper())
