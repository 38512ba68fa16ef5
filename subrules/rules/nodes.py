"""
Rule nodes for subsystem variant rules.

A compiled rule is a tree of immutable nodes:

    PrimitiveRule   true if a role ID is in the genome's role set
    NegativeRule    complement of its single child
    ListRule        true if enough children are true (AND, OR or "N of")
    FailRule        always false

Trees compare structurally, hash, and print back into rule-language text
that compiles to an equal tree. Evaluation never mutates a tree; role
tracking goes through an explicit RoleTracker passed to check().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Iterator, Optional


class RoleTracker:
    """
    Observation log for tracked primitive rules.

    Every tagged PrimitiveRule evaluated with a tracker records its tag as
    found or not found. Create one tracker per evaluation; a tracker is not
    safe to share between threads.
    """

    def __init__(self):
        self.found: set[str] = set()
        self.not_found: set[str] = set()

    def record(self, tag: str, present: bool) -> None:
        """Record the outcome of one primitive test."""
        if present:
            self.found.add(tag)
        else:
            self.not_found.add(tag)

    def clear(self) -> None:
        self.found.clear()
        self.not_found.clear()


class Rule(ABC):
    """Base class for all compiled rule nodes."""

    @abstractmethod
    def check(
        self, roles: AbstractSet[str], tracker: Optional[RoleTracker] = None
    ) -> bool:
        """
        Evaluate this rule against a genome's role set.

        Args:
            roles: Role IDs present in the genome
            tracker: Optional observation log for tagged primitives

        Returns:
            True if the rule is satisfied
        """

    @property
    def is_compound(self) -> bool:
        """Whether this rule needs parentheses when used as an operand."""
        return False

    def role_ids(self) -> Iterator[str]:
        """Yield the role IDs tested by this rule's primitive leaves."""
        return iter(())

    def operand_text(self) -> str:
        """Text of this rule as an operand of another rule."""
        text = str(self)
        return f"({text})" if self.is_compound else text


@dataclass(frozen=True)
class PrimitiveRule(Rule):
    """
    Leaf rule satisfied when a role is present.

    The tag is the role abbreviation the rule was registered under. It is
    printed in place of the role ID and reported to a tracker, but it does
    not take part in equality.
    """

    role_id: str
    tag: Optional[str] = field(default=None, compare=False)

    def check(self, roles, tracker=None):
        result = self.role_id in roles
        if tracker is not None and self.tag is not None:
            tracker.record(self.tag, result)
        return result

    def role_ids(self):
        yield self.role_id

    def __str__(self) -> str:
        return self.tag if self.tag is not None else self.role_id


@dataclass(frozen=True)
class FailRule(Rule):
    """Rule that is never satisfied."""

    def check(self, roles, tracker=None):
        return False

    def __str__(self) -> str:
        return "FAIL"


@dataclass(frozen=True)
class NegativeRule(Rule):
    """Rule satisfied only if its child is unsatisfied."""

    child: Rule

    def check(self, roles, tracker=None):
        return not self.child.check(roles, tracker)

    def role_ids(self):
        return self.child.role_ids()

    def __str__(self) -> str:
        return "not " + self.child.operand_text()


class ListMode(str, Enum):
    """How many children of a list rule must be satisfied."""

    AND = "and"  # all of them
    OR = "or"  # at least one
    NUM = "of"  # at least an explicit count


@dataclass(frozen=True)
class ListRule(Rule):
    """
    Rule satisfied when enough of its children are satisfied.

    Children are evaluated left to right and evaluation stops as soon as the
    required count is reached. num is only used in NUM mode.

    all_of and any_of need at least two children. An AND or OR list built
    directly with fewer still evaluates (an empty AND is true, an empty OR is
    false) but has no rule text that compiles back to it.
    """

    mode: ListMode
    children: tuple[Rule, ...] = ()
    num: Optional[int] = None

    def __post_init__(self):
        if self.mode == ListMode.NUM:
            if self.num is None or self.num < 0:
                raise ValueError("Threshold list rule needs a non-negative count")
        elif self.num is not None:
            raise ValueError(f"Count not allowed for {self.mode.name} list rule")

    @classmethod
    def all_of(cls, *rules: Rule) -> "ListRule":
        return cls._connective(ListMode.AND, rules)

    @classmethod
    def any_of(cls, *rules: Rule) -> "ListRule":
        return cls._connective(ListMode.OR, rules)

    @classmethod
    def _connective(cls, mode: ListMode, rules: tuple) -> "ListRule":
        if len(rules) < 2:
            raise ValueError(f"{mode.name} list rule needs at least two operands")
        return cls(mode, tuple(rules))

    @classmethod
    def at_least(cls, num: int, *rules: Rule) -> "ListRule":
        return cls(ListMode.NUM, tuple(rules), num)

    @property
    def required_count(self) -> int:
        """Number of children that must be satisfied."""
        if self.mode == ListMode.AND:
            return len(self.children)
        if self.mode == ListMode.OR:
            return 1
        return self.num

    @property
    def is_compound(self) -> bool:
        # "N of {...}" is closed by its own braces
        return self.mode != ListMode.NUM

    def check(self, roles, tracker=None):
        needed = self.required_count
        found = 0
        for child in self.children:
            if found >= needed:
                break
            if child.check(roles, tracker):
                found += 1
        return found >= needed

    def role_ids(self):
        for child in self.children:
            yield from child.role_ids()

    def __str__(self) -> str:
        operands = [child.operand_text() for child in self.children]
        if self.mode == ListMode.NUM:
            return f"{self.num} of {{" + ", ".join(operands) + "}"
        return f" {self.mode.value} ".join(operands)


__all__ = [
    "Rule",
    "RoleTracker",
    "PrimitiveRule",
    "FailRule",
    "NegativeRule",
    "ListMode",
    "ListRule",
]
