#!/usr/bin/env python3
"""conditions.py - Compilation condition expressions

Parses the tokens that follow `#if` / `#elseif` into a small expression
tree. Two grouping modes are supported:

- "sequential": `&&` and `||` share one precedence level and associate left
  to right, `!` binds to the operand right after it.
- "swift": `&&` binds tighter than `||`, as in the Swift compiler.

Anything outside the supported subset (platform checks, version checks,
comparison operators) is kept as an `Unsupported` node instead of failing,
so callers can decide to leave the block alone.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Union

from flagcleaner.syntax.tokens import Token, TokenKind


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class IntegerLiteral:
    value: int


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataclass(frozen=True)
class Not:
    operand: "ConditionExpr"


@dataclass(frozen=True)
class And:
    left: "ConditionExpr"
    right: "ConditionExpr"


@dataclass(frozen=True)
class Or:
    left: "ConditionExpr"
    right: "ConditionExpr"


@dataclass(frozen=True)
class Parenthesized:
    inner: "ConditionExpr"


@dataclass(frozen=True)
class Unsupported:
    """A construct outside the evaluable subset, e.g. `os(iOS)`."""

    text: str


ConditionExpr = Union[
    Identifier, IntegerLiteral, BooleanLiteral, Not, And, Or, Parenthesized, Unsupported
]

# Binding power of the binary operators per precedence mode
BINDING_POWERS: Dict[str, Dict[str, int]] = {
    "sequential": {"&&": 1, "||": 1},
    "swift": {"&&": 2, "||": 1},
}

# (kind, text) pairs; kind is one of
# "op", "(", ")", "ident", "int", "unsupported"
_Piece = Tuple[str, str]


class _ConditionSyntaxError(Exception):
    pass


def _split_operator(text: str) -> List[_Piece]:
    pieces = []
    rest = text
    while rest:
        if rest.startswith(("&&", "||")):
            pieces.append(("op", rest[:2]))
            rest = rest[2:]
        elif rest.startswith("!"):
            pieces.append(("op", "!"))
            rest = rest[1:]
        else:
            raise _ConditionSyntaxError(text)
    return pieces


def _pieces(tokens: Sequence[Token]) -> List[_Piece]:
    pieces: List[_Piece] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None

        if token.kind is TokenKind.IDENTIFIER and nxt is not None and nxt.text == "(":
            # Function-style checks: os(iOS), canImport(UIKit), swift(>=5.9)
            depth = 0
            end = i + 1
            while end < len(tokens):
                if tokens[end].text == "(":
                    depth += 1
                elif tokens[end].text == ")":
                    depth -= 1
                    if depth == 0:
                        break
                end += 1
            if end >= len(tokens):
                raise _ConditionSyntaxError(token.text)
            text = "".join(t.text for t in tokens[i:end + 1])
            pieces.append(("unsupported", text))
            i = end + 1
            continue

        if token.kind is TokenKind.IDENTIFIER:
            pieces.append(("ident", token.text))
        elif token.kind is TokenKind.INTEGER:
            pieces.append(("int", token.text))
        elif token.kind is TokenKind.FLOAT:
            pieces.append(("unsupported", token.text))
        elif token.kind is TokenKind.OPERATOR:
            pieces.extend(_split_operator(token.text))
        elif token.kind is TokenKind.PUNCTUATION and token.text in ("(", ")"):
            pieces.append((token.text, token.text))
        else:
            raise _ConditionSyntaxError(token.text)
        i += 1
    return pieces


def parse_integer(text: str) -> int:
    digits = text.replace("_", "")
    if digits[:2].lower() in ("0x", "0o", "0b"):
        return int(digits, 0)
    return int(digits, 10)


class _ConditionParser:
    """Precedence-climbing parser over condition pieces."""

    def __init__(self, pieces: List[_Piece], powers: Dict[str, int]):
        self.pieces = pieces
        self.powers = powers
        self.pos = 0

    def _peek(self) -> _Piece:
        if self.pos < len(self.pieces):
            return self.pieces[self.pos]
        return ("end", "")

    def _advance(self) -> _Piece:
        piece = self._peek()
        self.pos += 1
        return piece

    def parse(self) -> ConditionExpr:
        expr = self._expression(0)
        if self.pos != len(self.pieces):
            raise _ConditionSyntaxError(self._peek()[1])
        return expr

    def _expression(self, min_power: int) -> ConditionExpr:
        left = self._unary()
        while True:
            kind, text = self._peek()
            power = self.powers.get(text) if kind == "op" else None
            if power is None or power <= min_power:
                return left
            self._advance()
            right = self._expression(power)
            left = And(left, right) if text == "&&" else Or(left, right)

    def _unary(self) -> ConditionExpr:
        kind, text = self._advance()
        if kind == "op" and text == "!":
            return Not(self._unary())
        if kind == "(":
            inner = self._expression(0)
            if self._advance()[0] != ")":
                raise _ConditionSyntaxError("expected ')'")
            return Parenthesized(inner)
        if kind == "ident":
            if text in ("true", "false"):
                return BooleanLiteral(text == "true")
            return Identifier(text)
        if kind == "int":
            return IntegerLiteral(parse_integer(text))
        if kind == "unsupported":
            return Unsupported(text)
        raise _ConditionSyntaxError(text or "end of condition")


def parse_condition(tokens: Sequence[Token], precedence: str = "sequential") -> ConditionExpr:
    """
    Parse `#if` condition tokens.

    Args:
        tokens: Tokens between the directive and the end of its line
        precedence: "sequential" or "swift"

    Returns:
        The expression; a malformed condition becomes a single Unsupported node
    """
    powers = BINDING_POWERS[precedence]
    try:
        return _ConditionParser(_pieces(tokens), powers).parse()
    except _ConditionSyntaxError:
        return Unsupported(" ".join(token.text for token in tokens))


def render_condition(expr: ConditionExpr) -> str:
    """Compact text form, mainly for log messages."""
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, IntegerLiteral):
        return str(expr.value)
    if isinstance(expr, BooleanLiteral):
        return "true" if expr.value else "false"
    if isinstance(expr, Not):
        return f"!{render_condition(expr.operand)}"
    if isinstance(expr, And):
        return f"({render_condition(expr.left)} && {render_condition(expr.right)})"
    if isinstance(expr, Or):
        return f"({render_condition(expr.left)} || {render_condition(expr.right)})"
    if isinstance(expr, Parenthesized):
        return f"({render_condition(expr.inner)})"
    return expr.text
