"""Tests for the rule compiler."""

import pytest

from subrules.core.exceptions import (
    IllegalParameterError,
    MalformedThresholdError,
    MissingOperandError,
    ParseFailureError,
    UnbalancedBracketError,
    UnexpectedTokenError,
    UnresolvedIdentifierError,
)
from subrules.rules.compiler import RuleCompiler, compile_rule, parse_rule
from subrules.rules.nodes import ListMode, ListRule, NegativeRule, PrimitiveRule, Rule

MUTASE_RULE = "1.3 or (1.3.N and 1.3.C) or 2 of {1.3l, 1.3s1(a), mcl1}"


def _node_types(rule: Rule):
    yield type(rule)
    if isinstance(rule, NegativeRule):
        yield from _node_types(rule.child)
    elif isinstance(rule, ListRule):
        for child in rule.children:
            yield from _node_types(child)


class TestMutaseRules:
    """Compile and evaluate the methylmalonyl-CoA mutase rules."""

    @pytest.mark.parametrize(
        "roles,expected",
        [
            ({"FakeRule1", "MethCoaMuta", "MethCoaMutaC"}, True),
            ({"FakeRule1", "MethCoaMutaN", "FakeRule2"}, False),
            ({"MethCoaMutaN"}, False),
            ({"MethCoaMutaLs"}, False),
            ({"FakeRule1", "MethCoaMutaLs", "FakeRule2", "MethCoaMutaC"}, False),
            ({"FakeRule1", "MethCoaMutaLs", "FakeRule2", "MalyCoaLyas"}, True),
            ({"FakeRule1", "MethCoaMutaL", "FakeRule2"}, False),
            ({"FakeRule1", "MethCoaLyas", "FakeRule2"}, False),
            ({"FakeRule1", "MalyCoaLyas", "MethCoaMutaLs"}, True),
            ({"FakeRule1", "MethCoaMutaLs", "MethCoaMutaC", "MethCoaLyas", "MethCoaMutaL"}, True),
            ({"MethCoaMutaN", "MethCoaMutaC"}, True),
        ],
    )
    def test_mixed_rule(self, namespace, roles, expected):
        """Threshold, group and OR chain should evaluate together."""
        rule = compile_rule(MUTASE_RULE, namespace)
        assert rule.check(roles) == expected

    def test_mixed_rule_structure(self, namespace):
        """An OR chain should fold into one flat list."""
        rule = compile_rule(MUTASE_RULE, namespace)
        assert rule == ListRule.any_of(
            namespace["1.3"],
            ListRule.all_of(namespace["1.3.N"], namespace["1.3.C"]),
            ListRule.at_least(2, namespace["1.3l"], namespace["1.3s1(a)"], namespace["mcl1"]),
        )

    @pytest.mark.parametrize(
        "roles,expected",
        [
            ({"FakeRule1", "MethCoaMuta", "MethCoaMutaC"}, False),
            ({"FakeRule1", "MethCoaMutaN", "MalyCoaLyas"}, False),
            ({"MethCoaMutaLs"}, True),
            ({"FakeRule1", "MethCoaMutaLs", "MethCoaMutaC"}, False),
            ({"FakeRule1", "MethCoaMutaLs", "FakeRule2"}, True),
            ({"FakeRule1", "MethCoaMutaL", "FakeRule2"}, False),
            ({"FakeRule1", "MalyCoaLyas", "FakeRule2"}, True),
            ({"FakeRule1", "MalyCoaLyas", "MethCoaMutaL"}, True),
            ({"MethCoaMutaN", "MethCoaMutaC", "MalyCoaLyas", "MethCoaMutaL"}, False),
        ],
    )
    def test_negated_threshold(self, namespace, roles, expected):
        """Negation of a threshold with a grouped operand."""
        rule = compile_rule(
            "(mcl1 and not (1 of {1.3, (1.3.N)})) or (1.3s1(a) and not 1.3.C)", namespace
        )
        assert rule.check(roles) == expected

    def test_unclosed_group_rejected(self, namespace):
        """A rule whose first group is never closed should fail."""
        with pytest.raises(UnbalancedBracketError):
            compile_rule("(mcl1 and not (1 of {1.3, (1.3.N)}) or (1.3s1(a) and not 1.3.C)", namespace)


class TestStructure:
    """Tests for the trees the compiler builds."""

    def test_single_identifier(self, abcd):
        assert compile_rule("a", abcd) == abcd["a"]

    def test_and_chain_is_flat(self, abcd):
        rule = compile_rule("a and b and c", abcd)
        assert rule == ListRule.all_of(abcd["a"], abcd["b"], abcd["c"])

    def test_and_then_or_nests(self, abcd):
        """Switching connective wraps the list built so far."""
        rule = compile_rule("a and b or c", abcd)
        assert rule == ListRule.any_of(ListRule.all_of(abcd["a"], abcd["b"]), abcd["c"])

    def test_or_then_and_nests(self, abcd):
        """There is no precedence: "a or b and c" means "(a or b) and c"."""
        rule = compile_rule("a or b and c", abcd)
        assert rule == ListRule.all_of(ListRule.any_of(abcd["a"], abcd["b"]), abcd["c"])

    def test_group(self, abcd):
        rule = compile_rule("a and (b or c)", abcd)
        assert rule == ListRule.all_of(abcd["a"], ListRule.any_of(abcd["b"], abcd["c"]))

    def test_leading_group(self, abcd):
        rule = compile_rule("(a and b) and c", abcd)
        assert rule == ListRule.all_of(ListRule.all_of(abcd["a"], abcd["b"]), abcd["c"])

    def test_redundant_parens(self, abcd):
        assert compile_rule("((a))", abcd) == abcd["a"]

    def test_not_binds_one_operand(self, abcd):
        rule = compile_rule("not a and b", abcd)
        assert rule == ListRule.all_of(NegativeRule(abcd["a"]), abcd["b"])

    def test_not_group(self, abcd):
        rule = compile_rule("not (a or b)", abcd)
        assert rule == NegativeRule(ListRule.any_of(abcd["a"], abcd["b"]))

    def test_double_not(self, abcd):
        assert compile_rule("not not a", abcd) == NegativeRule(NegativeRule(abcd["a"]))

    def test_not_threshold(self, abcd):
        rule = compile_rule("not 2 of {a, b, c}", abcd)
        assert rule == NegativeRule(ListRule.at_least(2, abcd["a"], abcd["b"], abcd["c"]))

    def test_threshold_in_chain(self, abcd):
        rule = compile_rule("a and 1 of {b, (c and d)}", abcd)
        assert rule == ListRule.all_of(
            abcd["a"],
            ListRule.at_least(1, abcd["b"], ListRule.all_of(abcd["c"], abcd["d"])),
        )

    def test_threshold_with_negation(self, abcd):
        rule = compile_rule("1 of {not a, b}", abcd)
        assert rule == ListRule.at_least(1, NegativeRule(abcd["a"]), abcd["b"])

    def test_named_rule(self, abcd):
        """Identifiers can name compiled rules as well as roles."""
        abcd.define("ab", compile_rule("a and b", abcd))
        rule = compile_rule("ab or c", abcd)
        assert rule == ListRule.any_of(ListRule.all_of(abcd["a"], abcd["b"]), abcd["c"])

    @pytest.mark.parametrize(
        "text",
        ["(a)", "(a and b) or (c and d)", "not (not (a))", "2 of {(a), (b or c), d}", "((a or b) and c)"],
    )
    def test_no_placeholders_left(self, abcd, text):
        """Finished trees hold only rule nodes."""
        types = set(_node_types(compile_rule(text, abcd)))
        assert types <= {PrimitiveRule, NegativeRule, ListRule}

    def test_parse_rule_alias(self, abcd):
        assert parse_rule("a or b", abcd) == compile_rule("a or b", abcd)

    def test_compiler_object(self, abcd):
        compiler = RuleCompiler("a and b", abcd)
        assert compiler.compiled_rule().mode == ListMode.AND


class TestRoundTrip:
    """Printed rules should compile back to equal trees."""

    def test_mutase_rule_prints_as_written(self, namespace):
        rule = compile_rule(MUTASE_RULE, namespace)
        assert str(rule) == MUTASE_RULE

    @pytest.mark.parametrize(
        "text",
        [
            "a",
            "a and b and c",
            "a and b or c",
            "a or b and c",
            "a and (b or c)",
            "not (a or b) and c",
            "not not a",
            "2 of {a, (b and c), not d}",
            "a or 1 of {b, 2 of {c, d, a}}",
            "(a and not b) or (c and not d)",
            "not 1 of {a, b} and (c or d)",
        ],
    )
    def test_round_trip(self, abcd, text):
        rule = compile_rule(text, abcd)
        assert compile_rule(str(rule), abcd) == rule

    def test_built_tree_round_trip(self, abcd):
        a, b, c = abcd["a"], abcd["b"], abcd["c"]
        tree = ListRule.any_of(
            ListRule.all_of(a, NegativeRule(b)),
            ListRule.at_least(2, a, b, c),
            NegativeRule(ListRule.any_of(b, c)),
        )
        assert str(tree) == "(a and not b) or 2 of {a, b, c} or not (b or c)"
        assert compile_rule(str(tree), abcd) == tree


class TestErrors:
    """Tests for compile failures."""

    def test_unresolved_identifier(self, abcd):
        with pytest.raises(UnresolvedIdentifierError) as excinfo:
            compile_rule("a and zz", abcd)
        assert excinfo.value.identifier == "zz"
        assert excinfo.value.rule_text == "a and zz"
        assert "zz" in str(excinfo.value)

    @pytest.mark.parametrize("text", ["2 a {b}", "2 of a", "2", "2 of", "a and b }", "(a }"])
    def test_malformed_threshold(self, abcd, text):
        with pytest.raises(MalformedThresholdError):
            compile_rule(text, abcd)

    def test_paren_closing_threshold(self, abcd):
        with pytest.raises(MalformedThresholdError):
            compile_rule("2 of {a, b)", abcd)

    @pytest.mark.parametrize("text", ["a and b)", ")", "(a and b", "2 of {a, b", "a and (b or (c)"])
    def test_unbalanced(self, abcd, text):
        with pytest.raises(UnbalancedBracketError):
            compile_rule(text, abcd)

    @pytest.mark.parametrize("text", ["{a}", "a and {b}", "a of b", "2 of {a and b}"])
    def test_unexpected_token(self, abcd, text):
        with pytest.raises(UnexpectedTokenError):
            compile_rule(text, abcd)

    def test_operands_without_operator(self, abcd):
        with pytest.raises(IllegalParameterError):
            compile_rule("a b", abcd)
        with pytest.raises(IllegalParameterError):
            compile_rule("(a) b", abcd)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "()",
            "not",
            "a and not",
            "a and",
            "and a",
            "a and or b",
            "not and a",
            "a and b and",
            "a or b or",
            "(a and b and)",
            "a and and b",
            "a or b or or",
        ],
    )
    def test_missing_operand(self, abcd, text):
        with pytest.raises(MissingOperandError):
            compile_rule(text, abcd)

    def test_errors_are_parse_failures(self, abcd):
        """Every compile error shares one base class."""
        for text in ("zz", "{", ")", "a b", "", "2 of a"):
            with pytest.raises(ParseFailureError):
                compile_rule(text, abcd)

    def test_unsatisfiable_threshold_warns(self, abcd, caplog):
        """A threshold larger than its operand list compiles with a warning."""
        rule = compile_rule("3 of {a, b}", abcd)
        assert not rule.check({"RoleA", "RoleB"})
        assert "can never be satisfied" in caplog.text
