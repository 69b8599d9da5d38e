#!/usr/bin/env python3
"""evaluator.py - Flag reference collection and condition evaluation

Both functions work on parsed condition expressions. Evaluation is only
defined once the caller has checked that the target flag is the single
identifier in play; any other name raises UnsupportedExpression.
"""

from typing import FrozenSet, Iterable, Set

from flagcleaner.syntax.conditions import (
    And,
    BooleanLiteral,
    ConditionExpr,
    Identifier,
    IntegerLiteral,
    Not,
    Or,
    Parenthesized,
    Unsupported,
)
from flagcleaner.utils.errors import UnsupportedExpression


def _collect(expr: ConditionExpr, names: Set[str]) -> None:
    if isinstance(expr, Identifier):
        names.add(expr.name)
    elif isinstance(expr, (IntegerLiteral, BooleanLiteral)):
        return
    elif isinstance(expr, Not):
        _collect(expr.operand, names)
    elif isinstance(expr, Parenthesized):
        _collect(expr.inner, names)
    elif isinstance(expr, (And, Or)):
        _collect(expr.left, names)
        _collect(expr.right, names)
    elif isinstance(expr, Unsupported):
        raise UnsupportedExpression(f"cannot evaluate '{expr.text}'")
    else:
        raise UnsupportedExpression(f"unknown condition node {type(expr).__name__}")


def collect_flag_references(conditions: Iterable[ConditionExpr]) -> FrozenSet[str]:
    """
    Distinct identifier names used across a block's conditions.

    Raises:
        UnsupportedExpression: a condition holds a construct outside the
            evaluable subset
    """
    names: Set[str] = set()
    for condition in conditions:
        _collect(condition, names)
    return frozenset(names)


def evaluate(expr: ConditionExpr, flag: str) -> bool:
    """Evaluate `expr` with `flag` fixed to true."""
    if isinstance(expr, Identifier):
        if expr.name != flag:
            raise UnsupportedExpression(f"unknown flag '{expr.name}'")
        return True
    if isinstance(expr, IntegerLiteral):
        return expr.value > 0
    if isinstance(expr, BooleanLiteral):
        return expr.value
    if isinstance(expr, Not):
        return not evaluate(expr.operand, flag)
    if isinstance(expr, And):
        return evaluate(expr.left, flag) and evaluate(expr.right, flag)
    if isinstance(expr, Or):
        return evaluate(expr.left, flag) or evaluate(expr.right, flag)
    if isinstance(expr, Parenthesized):
        return evaluate(expr.inner, flag)
    raise UnsupportedExpression(f"cannot evaluate '{getattr(expr, 'text', expr)}'")
