
# Export canonical types
from .exceptions import (
    DataError,
    IllegalParameterError,
    MalformedThresholdError,
    MissingOperandError,
    ParseFailureError,
    RuleFileError,
    RuleNotFoundError,
    SubrulesError,
    UnbalancedBracketError,
    UnexpectedTokenError,
    UnresolvedIdentifierError,
)
from .models import BadRule, RuleAnalysis, RuleDefinition, VariantCall

__all__ = [
    "BadRule",
    "DataError",
    "IllegalParameterError",
    "MalformedThresholdError",
    "MissingOperandError",
    "ParseFailureError",
    "RuleAnalysis",
    "RuleDefinition",
    "RuleFileError",
    "RuleNotFoundError",
    "SubrulesError",
    "UnbalancedBracketError",
    "UnexpectedTokenError",
    "UnresolvedIdentifierError",
    "VariantCall",
]
