"""
assumptions/base.py

Abstract base class for assumption-comparison rules.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from app.domain.brand_intel import AssumptionComparison, BusinessContext


def normalize_variable_name(name: str) -> str:
    """Case- and underscore-insensitive key used to match rule aliases."""
    return name.replace("_", "").replace("-", "").lower()


def mentions(text: str, word: str) -> bool:
    """True when ``text`` contains a word starting with ``word``."""
    return re.search(rf"\b{re.escape(word)}", text or "", re.IGNORECASE) is not None


class BaseAssumptionRule(ABC):
    """
    Contract for one named assumption check.

    A rule inspects the analysis of a single variable (found by any of its
    ``variable_names`` aliases) together with the business's free-text
    description, and emits at most one comparison.

    No I/O, no logging, and no side effects are permitted inside
    :meth:`evaluate`.
    """

    name: str
    variable_names: tuple[str, ...]

    def matches(self, variable_name: str) -> bool:
        wanted = normalize_variable_name(variable_name)
        return any(normalize_variable_name(alias) == wanted for alias in self.variable_names)

    @abstractmethod
    def evaluate(
        self,
        analysis: dict,
        business_context: BusinessContext,
    ) -> AssumptionComparison | None:
        """
        Return a comparison when the data contradicts the stated assumption.

        Parameters
        ----------
        analysis:
            The ``VariableAnalysis`` dict for the rule's variable.

        business_context:
            The business's self-description; rules read
            ``target_customer``.

        Returns
        -------
        AssumptionComparison | None
            ``None`` when the rule does not fire.
        """
