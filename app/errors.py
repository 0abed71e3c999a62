"""
app/errors.py

Application-level exceptions shared across the enrichment and analysis flows.
"""

from __future__ import annotations


class BrandIntelError(Exception):
    """Base exception for BrandIntel failures."""


class InvalidInputError(BrandIntelError, ValueError):
    """Raised when a request payload has the wrong shape (client error)."""
