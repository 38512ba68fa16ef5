"""
Variant resolution for a subsystem.

A VariantResolver owns a subsystem's rule namespace and its variant rules.
Variant rules are kept in declaration order, and a genome's variant code is
the name of the first rule its role set satisfies. Rule authors depend on
this order: specific variants come before general catch-all rules.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, Iterator, Optional, Union

from subrules.core.exceptions import ParseFailureError, RuleNotFoundError
from subrules.core.models import BadRule, RuleAnalysis, RuleDefinition, VariantCall
from subrules.rules.definitions import parse_definition_line
from subrules.rules.nodes import PrimitiveRule, RoleTracker, Rule
from subrules.rules.registry import RuleNamespace

logger = logging.getLogger(__name__)

# Variant code for a role set no rule matches
UNREPRESENTED = "unrepresented"

RuleSource = Iterable[Union[str, RuleDefinition]]


class VariantResolver:
    """Ordered variant rules for one subsystem."""

    def __init__(self, name: str, namespace: Optional[RuleNamespace] = None):
        self.name = name
        self.namespace = namespace if namespace is not None else RuleNamespace()
        self._variants: dict[str, Rule] = {}
        self.bad_rules: list[BadRule] = []

    # ------------------------------------------------------------------ #
    # Building
    # ------------------------------------------------------------------ #

    def add_role(self, abbr: str, role_id: str) -> PrimitiveRule:
        """Register a tracked role abbreviation in the namespace."""
        return self.namespace.add_role(abbr, role_id)

    def define(self, name: str, text: str) -> Rule:
        """Compile an auxiliary rule and add it to the namespace."""
        rule = self.namespace.compile(text)
        self.namespace.define(name, rule)
        return rule

    def add_variant(self, name: str, text: str) -> Rule:
        """Compile a variant rule and append it to the variant table."""
        rule = self.namespace.compile(text)
        if name in self._variants:
            logger.warning("Variant %s of %s is defined more than once.", name, self.name)
        self._variants[name] = rule
        return rule

    def load(
        self,
        definitions: RuleSource = (),
        variants: RuleSource = (),
        skip_bad: bool = False,
    ) -> None:
        """
        Compile auxiliary definitions, then variant rules, in order.

        Args:
            definitions: Definition lines or RuleDefinitions for the namespace
            variants: Variant rule lines or RuleDefinitions
            skip_bad: Log and skip rules that fail to compile instead of
                raising; skipped rules are collected in bad_rules

        Raises:
            ParseFailureError: If a rule fails to compile and skip_bad is off
            RuleFileError: If a line cannot be split into name and rule
        """
        for definition in _definitions(definitions):
            self._load_one(definition, self.define, skip_bad)
        for definition in _definitions(variants):
            self._load_one(definition, self.add_variant, skip_bad)
        logger.info(
            "Subsystem %s has %d variant rules and %d namespace rules.",
            self.name,
            len(self._variants),
            len(self.namespace),
        )

    def _load_one(self, definition: RuleDefinition, add, skip_bad: bool) -> None:
        try:
            add(definition.name, definition.text)
        except ParseFailureError as e:
            if not skip_bad:
                raise
            logger.error("Skipping rule %s in %s: %s", definition.name, self.name, e)
            self.bad_rules.append(
                BadRule(name=definition.name, text=definition.text, error=str(e))
            )

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def resolve(self, roles: AbstractSet[str]) -> str:
        """Return the variant code for a role set, or UNREPRESENTED."""
        return self.assign(roles).variant

    def assign(self, roles: AbstractSet[str]) -> VariantCall:
        """Apply the variant rules in order and report the first match."""
        for i, (variant, rule) in enumerate(self._variants.items()):
            if rule.check(roles):
                return VariantCall(subsystem=self.name, variant=variant, rule_index=i)
        return VariantCall(subsystem=self.name, variant=UNREPRESENTED)

    def analyze(self, rule_name: str, roles: AbstractSet[str]) -> RuleAnalysis:
        """
        Evaluate one variant rule and report which role abbreviations it
        found and which it looked for but did not find.

        Short-circuited operands are not evaluated, so they appear in
        neither list.
        """
        rule = self._variants.get(rule_name)
        if rule is None:
            return RuleAnalysis(rule_name=rule_name)
        tracker = RoleTracker()
        matched = rule.check(roles, tracker)
        return RuleAnalysis(
            rule_name=rule_name,
            matched=matched,
            found=sorted(tracker.found),
            not_found=sorted(tracker.not_found),
        )

    def get_rule(self, name: str) -> Rule:
        """
        Get a rule by name, looking at the variant rules first.

        Raises:
            RuleNotFoundError: If neither table has the name
        """
        rule = self._variants.get(name)
        if rule is None:
            rule = self.namespace.get(name)
        if rule is None:
            raise RuleNotFoundError(name)
        return rule

    def has_rules(self) -> bool:
        return bool(self._variants)

    def is_rule_variant(self, variant: str) -> bool:
        """Check if a variant code has a rule."""
        return variant in self._variants

    @property
    def variants(self) -> list[str]:
        """Variant codes in priority order."""
        return list(self._variants)

    def role_ids(self) -> set[str]:
        """Role IDs tested by any variant rule."""
        return {role for rule in self._variants.values() for role in rule.role_ids()}

    def __len__(self) -> int:
        return len(self._variants)

    def __repr__(self) -> str:
        return f"VariantResolver({self.name!r}, {len(self)} variants)"


def _definitions(source: RuleSource) -> Iterator[RuleDefinition]:
    for i, item in enumerate(source, start=1):
        if isinstance(item, RuleDefinition):
            yield item
        else:
            definition = parse_definition_line(item, i)
            if definition is not None:
                yield definition


__all__ = [
    "UNREPRESENTED",
    "VariantResolver",
]
