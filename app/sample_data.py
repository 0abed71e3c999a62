"""
app/sample_data.py

Demo business context, form choices, and sample customers for the wizard.
"""

from __future__ import annotations

import copy

from app.domain.brand_intel import BusinessContext, CustomerRecord

INDUSTRIES = (
    "Food & Beverage",
    "Retail",
    "Professional Services",
    "Healthcare",
    "Technology",
    "Real Estate",
    "Financial Services",
    "Education",
    "Manufacturing",
    "Other",
)

BUSINESS_MODELS = (
    "B2C Retail",
    "B2B Services",
    "Subscription",
    "Marketplace",
    "SaaS",
    "E-commerce",
    "Brick & Mortar",
    "Hybrid",
    "Other",
)

AVAILABLE_GOALS = (
    "Understand customer demographics",
    "Identify market positioning opportunities",
    "Optimize marketing messaging",
    "Competitive differentiation",
    "Target audience refinement",
    "Brand strategy validation",
)

SAMPLE_BUSINESS_CONTEXT = BusinessContext(
    business_name="Roasted Bean Coffee Co.",
    industry="Food & Beverage",
    business_model="B2C Retail",
    target_customer=(
        "Young professionals, ages 25-40, urban, tech-savvy, values convenience "
        "and quality coffee for their busy lifestyle."
    ),
    brand_positioning=(
        "Hip, modern coffee shop for busy professionals who want premium quality "
        "without the wait."
    ),
    goals=("Understand customer demographics", "Optimize marketing messaging"),
    additional_context="",
)

_SAMPLE_CUSTOMERS: tuple[CustomerRecord, ...] = (
    {"customer_id": "CUST_0001", "first_name": "Sarah", "last_name": "Johnson", "email": "sarah.johnson@gmail.com",
     "city": "Seattle", "state": "WA", "age": 34, "income": "$75,000-$99,999", "education": "Completed College"},
    {"customer_id": "CUST_0002", "first_name": "Michael", "last_name": "Chen", "email": "michael.chen@outlook.com",
     "city": "Portland", "state": "OR", "age": 42, "income": "$100,000-$149,999",
     "education": "Completed Graduate School"},
    {"customer_id": "CUST_0003", "first_name": "Emily", "last_name": "Davis", "email": "emily.davis@yahoo.com",
     "city": "San Francisco", "state": "CA", "age": 28, "income": "$60,000-$74,999", "education": "Completed College"},
    {"customer_id": "CUST_0004", "first_name": "David", "last_name": "Williams", "email": "david.williams@gmail.com",
     "city": "Denver", "state": "CO", "age": 51, "income": "$150,000-$174,999",
     "education": "Completed High School"},
    {"customer_id": "CUST_0005", "first_name": "Jessica", "last_name": "Brown", "email": "jessica.brown@hotmail.com",
     "city": "Seattle", "state": "WA", "age": 39, "income": "$100,000-$149,999", "education": "Completed College"},
    {"customer_id": "CUST_0006", "first_name": "Robert", "last_name": "Miller", "email": "robert.miller@gmail.com",
     "city": "Portland", "state": "OR", "age": 45, "income": "$75,000-$99,999", "education": "Some College"},
    {"customer_id": "CUST_0007", "first_name": "Amanda", "last_name": "Wilson", "email": "amanda.wilson@outlook.com",
     "city": "San Francisco", "state": "CA", "age": 33, "income": "$200,000-$249,999",
     "education": "Completed Graduate School"},
    {"customer_id": "CUST_0008", "first_name": "James", "last_name": "Taylor", "email": "james.taylor@gmail.com",
     "city": "Denver", "state": "CO", "age": 47, "income": "$100,000-$149,999", "education": "Completed College"},
)


def sample_customers() -> list[CustomerRecord]:
    """Return fresh copies so callers may enrich them without side effects."""
    return copy.deepcopy(list(_SAMPLE_CUSTOMERS))
