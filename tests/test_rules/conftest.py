"""
Pytest fixtures for rule tests.

Provides rule namespaces and a loaded histidine-style variant resolver.
"""

import pytest

from subrules.rules.registry import RuleNamespace
from subrules.rules.resolver import VariantResolver


# Methylmalonyl-CoA mutase roles, keyed by the abbreviations used in rules
MUTASE_ROLES = {
    "1.3": "MethCoaMuta",
    "1.3.N": "MethCoaMutaN",
    "1.3.C": "MethCoaMutaC",
    "1.3l": "MethCoaMutaL",
    "1.3s1(a)": "MethCoaMutaLs",
    "mcl1": "MalyCoaLyas",
}

HIS_ROLES = {
    "hisG": "AtpPhosHisG",
    "hisI": "PhosAmpCyclHisI",
    "hisA": "PhosIsomHisA",
    "hisF": "ImidGlycSyntHisF",
    "hisB": "ImidDehyHisB",
    "hisD": "HistDehyHisD",
}

HIS_DEFINITIONS = [
    "# Auxiliary rules",
    "",
    "core means hisG and hisI and hisA and hisF",
]

HIS_VARIANTS = [
    "# Variant rules, most specific first",
    "active.1.0 means core and hisB and hisD",
    "partial means 3 of {hisG, hisI, hisA, hisF}",
    "active if hisD or hisB",
]


@pytest.fixture
def namespace():
    """Namespace with tracked mutase role abbreviations."""
    ns = RuleNamespace()
    for abbr, role_id in MUTASE_ROLES.items():
        ns.add_role(abbr, role_id)
    return ns


@pytest.fixture
def abcd():
    """Namespace with four tracked roles a, b, c and d."""
    ns = RuleNamespace()
    for abbr in "abcd":
        ns.add_role(abbr, f"Role{abbr.upper()}")
    return ns


@pytest.fixture
def his_resolver():
    """Resolver loaded with the histidine rules."""
    resolver = VariantResolver("Histidine Biosynthesis")
    for abbr, role_id in HIS_ROLES.items():
        resolver.add_role(abbr, role_id)
    resolver.load(HIS_DEFINITIONS, HIS_VARIANTS)
    return resolver
