"""
Custom exceptions for subrules.

All subrules-specific exceptions inherit from SubrulesError.
"""

from typing import Optional


class SubrulesError(Exception):
    """Base exception for all subrules errors."""

    pass


# =============================================================================
# PARSE ERRORS
# =============================================================================


class ParseFailureError(SubrulesError):
    """A rule string could not be compiled."""

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        rule_text: Optional[str] = None,
    ):
        self.message = message
        self.token = token
        self.rule_text = rule_text
        super().__init__(message)

    def __str__(self) -> str:
        if self.rule_text is not None:
            return f"{self.message} (in rule \"{self.rule_text}\")"
        return self.message


class UnresolvedIdentifierError(ParseFailureError):
    """Identifier token has no entry in the rule namespace."""

    def __init__(self, identifier: str, rule_text: Optional[str] = None):
        self.identifier = identifier
        super().__init__(
            f"No rule found for identifier \"{identifier}\".",
            token=identifier,
            rule_text=rule_text,
        )


class MalformedThresholdError(ParseFailureError):
    """Threshold group is missing "of" or "{", or a "}" has no open group."""

    pass


class UnbalancedBracketError(ParseFailureError):
    """Excess closing bracket, or groups left open at the end of the rule."""

    pass


class IllegalParameterError(ParseFailureError):
    """A rule node was given a parameter it cannot accept."""

    pass


class UnexpectedTokenError(ParseFailureError):
    """Structural token found outside the context that allows it."""

    def __init__(self, token: str, message: str, rule_text: Optional[str] = None):
        super().__init__(message, token=token, rule_text=rule_text)


class MissingOperandError(ParseFailureError):
    """Operator without the operand it needs."""

    pass


# =============================================================================
# DATA ERRORS
# =============================================================================


class DataError(SubrulesError):
    """Base class for data-related errors."""

    pass


class RuleNotFoundError(DataError):
    """Requested rule does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Rule not found: {name}")


class RuleFileError(DataError):
    """Rule definition line cannot be split into a name and a rule."""

    def __init__(self, line: str, line_number: Optional[int] = None, source: Optional[str] = None):
        self.line = line
        self.line_number = line_number
        self.source = source
        where = source or "rule input"
        if line_number is not None:
            where = f"{where}, line {line_number}"
        super().__init__(f"Invalid rule line in {where}: \"{line.strip()}\"")


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    # Base
    "SubrulesError",
    # Parse
    "ParseFailureError",
    "UnresolvedIdentifierError",
    "MalformedThresholdError",
    "UnbalancedBracketError",
    "IllegalParameterError",
    "UnexpectedTokenError",
    "MissingOperandError",
    # Data
    "DataError",
    "RuleNotFoundError",
    "RuleFileError",
]
