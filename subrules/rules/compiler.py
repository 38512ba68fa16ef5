"""
Stack-machine compiler for subsystem rules.

The compiler reads tokens left to right and keeps a stack of rules under
construction. The stack starts with one placeholder group for the whole
rule. "(" pushes another group, "not" pushes a negation, a number pushes a
threshold list, and "and"/"or" fold the rule on top of the stack into a list
of that mode. Identifiers are looked up in the namespace and handed to the
top of the stack as parameters. When a construct is complete it is popped
and handed to the rule beneath it.

There is no operator precedence. A chain "a and b and c" builds one AND
list; switching connective wraps everything so far, so "a and b or c" means
"(a and b) or c" and "a or b and c" means "(a or b) and c".
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Mapping, Optional

from subrules.core.exceptions import (
    IllegalParameterError,
    MalformedThresholdError,
    MissingOperandError,
    ParseFailureError,
    UnbalancedBracketError,
    UnexpectedTokenError,
    UnresolvedIdentifierError,
)
from subrules.rules.nodes import ListMode, ListRule, NegativeRule, Rule
from subrules.rules.tokenizer import (
    CLOSE_BRACE,
    CLOSE_PAREN,
    OPEN_BRACE,
    OPEN_PAREN,
    is_number,
    tokenize,
)

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# Stack frames
# --------------------------------------------------------------------------- #


class _Frame:
    """A rule under construction on the compiler stack."""

    def add_parm(self, rule: Rule, compiler: "RuleCompiler") -> None:
        raise NotImplementedError

    def finish(self) -> Rule:
        """Return the completed rule, or fail if it is missing operands."""
        raise NotImplementedError


class _GroupFrame(_Frame):
    """Placeholder for a parenthesized group or the whole rule."""

    def __init__(self):
        self.parm: Optional[Rule] = None

    def add_parm(self, rule, compiler):
        if self.parm is not None:
            raise IllegalParameterError("Operands found without an operator.")
        self.parm = rule

    def finish(self):
        if self.parm is None:
            raise MissingOperandError("Empty rule or group found.")
        return self.parm


class _NegativeFrame(_Frame):
    """Negation waiting for its one operand."""

    def __init__(self):
        self.parm: Optional[Rule] = None

    def add_parm(self, rule, compiler):
        if self.parm is not None:
            raise IllegalParameterError("Negation cannot take a second operand.")
        self.parm = rule
        # Unary, so the negation is complete now.
        compiler.unroll()

    def finish(self):
        if self.parm is None:
            raise MissingOperandError("NOT operator found without an operand.")
        return NegativeRule(self.parm)


class _ListFrame(_Frame):
    """AND, OR or threshold list collecting its children."""

    def __init__(self, mode: ListMode, num: Optional[int] = None, first: Optional[Rule] = None):
        self.mode = mode
        self.num = num
        self.children: list[Rule] = [] if first is None else [first]
        # Set while a connective is waiting for its right operand.
        self.pending = False

    def add_parm(self, rule, compiler):
        self.children.append(rule)
        self.pending = False

    def finish(self):
        if self.pending or (self.mode != ListMode.NUM and len(self.children) < 2):
            raise MissingOperandError(
                f"{self.mode.name} operator found without a right operand."
            )
        if self.mode == ListMode.NUM and self.num > len(self.children):
            logger.warning(
                "Rule \"%d of\" has only %d operands and can never be satisfied.",
                self.num,
                len(self.children),
            )
        return ListRule(self.mode, tuple(self.children), self.num)


# --------------------------------------------------------------------------- #
# Compiler
# --------------------------------------------------------------------------- #


class RuleCompiler:
    """Compiles one rule string against a namespace."""

    def __init__(self, line: str, namespace: Mapping[str, Rule]):
        self.line = line
        self.tokens = deque(tokenize(line))
        self.namespace = namespace
        self.stack: list[_Frame] = [_GroupFrame()]

    def compiled_rule(self) -> Rule:
        """
        Consume all the tokens and return the finished rule.

        Raises:
            ParseFailureError: If the rule is not grammatical or names an
                identifier missing from the namespace
        """
        try:
            rule = self._compile()
        except ParseFailureError as e:
            if e.rule_text is None:
                e.rule_text = self.line
            raise
        logger.debug("Compiled \"%s\" as \"%s\"", self.line, rule)
        return rule

    def _compile(self) -> Rule:
        while self.tokens:
            token = self.tokens.popleft()
            if is_number(token):
                # A number starts a threshold list.
                self._start_list_rule(token)
            elif token == OPEN_BRACE:
                # Valid open braces are eaten by _start_list_rule.
                raise UnexpectedTokenError(token, "Unexpected open brace found.")
            elif token == CLOSE_BRACE:
                self._close_list_rule()
            elif token == OPEN_PAREN:
                self.stack.append(_GroupFrame())
            elif token == CLOSE_PAREN:
                if self._in_threshold():
                    raise MalformedThresholdError(
                        "Closing parenthesis found inside a threshold list."
                    )
                self.unroll()
            elif token == "and":
                self._process_operator(ListMode.AND, token)
            elif token == "or":
                self._process_operator(ListMode.OR, token)
            elif token == "not":
                self.stack.append(_NegativeFrame())
            elif token == "of":
                raise UnexpectedTokenError(token, "OF token found without a count.")
            else:
                self._process_identifier(token)
        if isinstance(self.stack[-1], _NegativeFrame):
            raise MissingOperandError("NOT operator found without an operand.")
        if len(self.stack) > 1:
            raise UnbalancedBracketError("Unclosed group found at end of rule.")
        return self.stack.pop().finish()

    def unroll(self) -> None:
        """Pop the completed rule on top of the stack and add it to its parent."""
        if len(self.stack) < 2:
            raise UnbalancedBracketError("Excess right parenthesis found in rule.")
        frame = self.stack.pop()
        self.stack[-1].add_parm(frame.finish(), self)

    def _in_threshold(self) -> bool:
        top = self.stack[-1]
        return isinstance(top, _ListFrame) and top.mode == ListMode.NUM

    def _process_operator(self, mode: ListMode, token: str) -> None:
        top = self.stack[-1]
        if isinstance(top, _ListFrame) and top.mode == mode:
            # Same connective: the next operand joins this list.
            if top.pending:
                raise MissingOperandError(
                    f"Operator \"{token}\" found without a left operand."
                )
            top.pending = True
            return
        if self._in_threshold():
            raise UnexpectedTokenError(
                token,
                f"Operator \"{token}\" in a threshold list must be inside parentheses.",
            )
        if isinstance(top, _GroupFrame) and top.parm is None:
            raise MissingOperandError(f"Operator \"{token}\" found without a left operand.")
        self.stack.pop()
        frame = _ListFrame(mode, first=top.finish())
        frame.pending = True
        self.stack.append(frame)

    def _process_identifier(self, token: str) -> None:
        rule = self.namespace.get(token)
        if rule is None:
            raise UnresolvedIdentifierError(token)
        self.stack[-1].add_parm(rule, self)

    def _start_list_rule(self, token: str) -> None:
        self.stack.append(_ListFrame(ListMode.NUM, num=int(token)))
        # The next two tokens must be "of" and "{".
        if not self.tokens or self.tokens.popleft() != "of":
            raise MalformedThresholdError("OF token missing after number.", token=token)
        if not self.tokens or self.tokens.popleft() != OPEN_BRACE:
            raise MalformedThresholdError("Open brace missing after OF token.", token=token)

    def _close_list_rule(self) -> None:
        if not self._in_threshold():
            raise MalformedThresholdError(
                "Closing brace found outside of list-rule context.", token=CLOSE_BRACE
            )
        self.unroll()


def compile_rule(line: str, namespace: Mapping[str, Rule]) -> Rule:
    """
    Compile a rule string into a rule tree.

    Args:
        line: Rule-language text
        namespace: Map of identifiers (role abbreviations, named rules) to rules

    Returns:
        Root of the compiled rule tree

    Raises:
        ParseFailureError: On any grammar violation or unknown identifier
    """
    return RuleCompiler(line, namespace).compiled_rule()


parse_rule = compile_rule


__all__ = [
    "RuleCompiler",
    "compile_rule",
    "parse_rule",
]
