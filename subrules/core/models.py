"""
Core data models for subrules.

Rule definitions read from text, variant calls and rule analyses are
Pydantic models. Compiled rule trees are not: they live in
subrules.rules.nodes as frozen dataclasses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# RULE DEFINITIONS
# =============================================================================


class RuleDefinition(BaseModel):
    """A named rule as written in a definitions or variant-rules file."""

    model_config = ConfigDict(frozen=True)

    name: str  # e.g., "active.1.0", "hisFull"
    text: str  # rule-language text, not yet compiled
    line_number: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.name} means {self.text}"


class BadRule(BaseModel):
    """A rule that failed to compile and was skipped during loading."""

    model_config = ConfigDict(frozen=True)

    name: str
    text: str
    error: str


# =============================================================================
# RESULT MODELS
# =============================================================================


class VariantCall(BaseModel):
    """
    Variant code assigned to a genome's role set.

    rule_index is the 0-based position of the matching variant rule in
    declaration order, or None when no rule matched.
    """

    model_config = ConfigDict(frozen=True)

    subsystem: str
    variant: str
    rule_index: Optional[int] = None

    @property
    def is_represented(self) -> bool:
        """Whether any variant rule matched."""
        return self.rule_index is not None

    def __str__(self) -> str:
        return f"{self.subsystem}: {self.variant}"


class RuleAnalysis(BaseModel):
    """Role abbreviations seen present and absent while evaluating one rule."""

    model_config = ConfigDict(frozen=True)

    rule_name: str
    matched: Optional[bool] = None  # None when the rule does not exist
    found: List[str] = Field(default_factory=list)
    not_found: List[str] = Field(default_factory=list)

    def __str__(self) -> str:
        if self.matched is None:
            return "<no match>"
        return ",".join(self.found) + "/" + ",".join(self.not_found)


__all__ = [
    "RuleDefinition",
    "BadRule",
    "VariantCall",
    "RuleAnalysis",
]
