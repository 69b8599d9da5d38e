#!/usr/bin/env python3
"""
Test suite for condition parsing and evaluation
"""

import pytest

from flagcleaner.core.evaluator import collect_flag_references, evaluate
from flagcleaner.syntax.conditions import (
    And,
    BooleanLiteral,
    Identifier,
    IntegerLiteral,
    Not,
    Or,
    Parenthesized,
    Unsupported,
    parse_condition,
    parse_integer,
    render_condition,
)
from flagcleaner.syntax.lexer import tokenize
from flagcleaner.utils.errors import UnsupportedExpression

A = Identifier("A")
B = Identifier("B")
C = Identifier("C")


def parse(text: str, precedence: str = "sequential"):
    return parse_condition(tokenize(text)[:-1], precedence)


class TestParseCondition:
    """Test the condition grammar in both grouping modes."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("A", A),
            ("!A", Not(A)),
            ("!!A", Not(Not(A))),
            ("A&&!B", And(A, Not(B))),
            ("!(A)", Not(Parenthesized(A))),
            ("(A || B) && C", And(Parenthesized(Or(A, B)), C)),
            ("true", BooleanLiteral(True)),
            ("false || A", Or(BooleanLiteral(False), A)),
            ("0x1F", IntegerLiteral(31)),
            ("os(iOS)", Unsupported("os(iOS)")),
            ("A && canImport(UIKit)", And(A, Unsupported("canImport(UIKit)"))),
            ("1.5", Unsupported("1.5")),
        ],
    )
    def test_shapes(self, text, expected):
        assert parse(text) == expected

    def test_sequential_mode_groups_left_to_right(self):
        assert parse("A || B && C", "sequential") == And(Or(A, B), C)
        assert parse("A && B || C", "sequential") == Or(And(A, B), C)

    def test_swift_mode_binds_and_tighter(self):
        assert parse("A || B && C", "swift") == Or(A, And(B, C))
        assert parse("A && B || C", "swift") == Or(And(A, B), C)

    @pytest.mark.parametrize("text", ["A &&", "A == B", "(A", "A B"])
    def test_malformed_condition_is_unsupported(self, text):
        assert isinstance(parse(text), Unsupported)

    def test_render(self):
        assert render_condition(parse("A && !B || (C)")) == "((A && !B) || (C))"
        assert render_condition(parse("os(iOS)")) == "os(iOS)"

    @pytest.mark.parametrize(
        "text,value",
        [("1_000", 1000), ("0b101", 5), ("0o17", 15), ("0xff", 255), ("007", 7)],
    )
    def test_parse_integer(self, text, value):
        assert parse_integer(text) == value


class TestEvaluator:
    """Test flag collection and evaluation with the flag fixed to true."""

    def test_collect_across_conditions(self):
        names = collect_flag_references([parse("A && !B"), parse("C || 1")])
        assert names == frozenset({"A", "B", "C"})

    def test_literals_are_not_flags(self):
        assert collect_flag_references([parse("true && 0")]) == frozenset()

    def test_collect_rejects_unsupported(self):
        with pytest.raises(UnsupportedExpression):
            collect_flag_references([parse("A"), parse("A && os(iOS)")])

    @pytest.mark.parametrize(
        "text,result",
        [
            ("A", True),
            ("!A", False),
            ("A && 0", False),
            ("A && 2", True),
            ("!A || true", True),
            ("!(A && false)", True),
        ],
    )
    def test_evaluate(self, text, result):
        assert evaluate(parse(text), "A") is result

    def test_other_identifier_cannot_be_evaluated(self):
        with pytest.raises(UnsupportedExpression):
            evaluate(parse("A && B"), "A")

    def test_unsupported_cannot_be_evaluated(self):
        with pytest.raises(UnsupportedExpression):
            evaluate(Unsupported("os(iOS)"), "A")
