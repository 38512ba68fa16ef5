"""
Rule namespace for compiling a subsystem's rules.

The namespace maps identifiers to compiled rules. Role abbreviations are
registered first as primitive rules, then named auxiliary rules, and every
later rule of the subsystem is compiled against the same namespace, so a
name defined once is visible to all the rules after it.
"""

from __future__ import annotations

import logging
from typing import Iterator, MutableMapping, Optional

from subrules.rules.compiler import compile_rule
from subrules.rules.nodes import PrimitiveRule, Rule
from subrules.rules.tokenizer import is_identifier

logger = logging.getLogger(__name__)


class RuleNamespace(MutableMapping[str, Rule]):
    """Ordered map of identifiers to rules."""

    def __init__(self):
        self._rules: dict[str, Rule] = {}
        self._roles: dict[str, str] = {}

    def add_role(self, abbr: str, role_id: str, tracked: bool = True) -> PrimitiveRule:
        """
        Register a role abbreviation as a primitive rule.

        Args:
            abbr: Role abbreviation used in rule text (e.g., "hisG")
            role_id: Role ID tested against genome role sets
            tracked: Tag the rule with the abbreviation so it prints by name
                and reports to a RoleTracker

        Returns:
            The registered primitive rule
        """
        rule = PrimitiveRule(role_id, abbr if tracked else None)
        self[abbr] = rule
        self._roles[abbr] = role_id
        return rule

    def define(self, name: str, rule: Rule) -> None:
        """Register a named auxiliary rule."""
        self[name] = rule
        self._roles.pop(name, None)

    def compile(self, text: str) -> Rule:
        """Compile rule text against this namespace."""
        return compile_rule(text, self)

    def roles(self) -> dict[str, str]:
        """Map of registered role abbreviations to role IDs."""
        return dict(self._roles)

    def __getitem__(self, name: str) -> Rule:
        return self._rules[name]

    def __setitem__(self, name: str, rule: Rule) -> None:
        if not is_identifier(name):
            logger.warning("Name \"%s\" is a reserved token and cannot be used in rules.", name)
        if name in self._rules:
            logger.warning("Redefining rule name \"%s\".", name)
        self._rules[name] = rule

    def __delitem__(self, name: str) -> None:
        del self._rules[name]
        self._roles.pop(name, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, name: str, default: Optional[Rule] = None) -> Optional[Rule]:
        return self._rules.get(name, default)

    def __repr__(self) -> str:
        return f"RuleNamespace({len(self)} names)"


__all__ = [
    "RuleNamespace",
]
