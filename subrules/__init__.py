"""
subrules: variant rules for metabolic subsystems.

A subsystem defines functional roles and a small boolean rule language that
maps the roles found in a genome to a variant code. subrules compiles that
language into rule trees and applies a subsystem's variant rules in order.
"""

__version__ = "0.1.0"

from subrules.core.exceptions import ParseFailureError, SubrulesError
from subrules.core.models import RuleAnalysis, RuleDefinition, VariantCall
from subrules.rules import (
    UNREPRESENTED,
    FailRule,
    ListMode,
    ListRule,
    NegativeRule,
    PrimitiveRule,
    RoleTracker,
    Rule,
    RuleNamespace,
    VariantResolver,
    compile_rule,
    tokenize,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "SubrulesError",
    "ParseFailureError",
    # Models
    "RuleDefinition",
    "RuleAnalysis",
    "VariantCall",
    # Rules
    "Rule",
    "RoleTracker",
    "PrimitiveRule",
    "FailRule",
    "NegativeRule",
    "ListMode",
    "ListRule",
    "RuleNamespace",
    "VariantResolver",
    "UNREPRESENTED",
    "compile_rule",
    "tokenize",
]
