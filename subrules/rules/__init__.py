"""
Subsystem rule language: tokenizer, rule nodes, compiler, namespace and
variant resolution.
"""

from subrules.rules.compiler import RuleCompiler, compile_rule, parse_rule
from subrules.rules.definitions import (
    RULE_PATTERN,
    load_definitions,
    parse_definition_line,
    read_definitions,
)
from subrules.rules.nodes import (
    FailRule,
    ListMode,
    ListRule,
    NegativeRule,
    PrimitiveRule,
    RoleTracker,
    Rule,
)
from subrules.rules.registry import RuleNamespace
from subrules.rules.resolver import UNREPRESENTED, VariantResolver
from subrules.rules.tokenizer import KEYWORDS, tokenize

__all__ = [
    # Tokenizer
    "KEYWORDS",
    "tokenize",
    # Nodes
    "Rule",
    "RoleTracker",
    "PrimitiveRule",
    "FailRule",
    "NegativeRule",
    "ListMode",
    "ListRule",
    # Compiler
    "RuleCompiler",
    "compile_rule",
    "parse_rule",
    # Namespace and resolution
    "RuleNamespace",
    "VariantResolver",
    "UNREPRESENTED",
    # Definitions
    "RULE_PATTERN",
    "parse_definition_line",
    "read_definitions",
    "load_definitions",
]
