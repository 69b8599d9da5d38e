#!/usr/bin/env python3
"""parser.py - Build a member-level syntax tree from Swift tokens

The parser groups tokens into items (declarations and statements), nests
`{ ... }` groups, and turns every `#if` chain into a ConditionalBlock. It
does not parse expressions; item boundaries come from line starts and `;`
at bracket depth zero, with the usual exceptions for lines that continue
the previous expression.
"""

import logging
from typing import List, Sequence, Tuple, Union

from flagcleaner.syntax.conditions import parse_condition
from flagcleaner.syntax.lexer import tokenize
from flagcleaner.syntax.tokens import Token, TokenKind
from flagcleaner.syntax.tree import (
    BraceGroup,
    Clause,
    ClauseKind,
    ConditionalBlock,
    Item,
    ItemKind,
    Node,
    SourceFile,
)
from flagcleaner.utils.errors import ParseFailure

logger = logging.getLogger(__name__)

DECLARATION_MODIFIERS = frozenset(
    {
        "public", "private", "fileprivate", "internal", "open", "package",
        "static", "final", "override", "mutating", "nonmutating", "lazy",
        "weak", "unowned", "dynamic", "convenience", "required", "optional",
        "indirect", "prefix", "postfix", "infix", "nonisolated", "isolated",
        "distributed", "consuming", "borrowing", "__consuming",
    }
)

# `class` is a modifier only in front of one of these
_CLASS_MEMBER_KEYWORDS = (
    frozenset({"func", "var", "let", "subscript", "typealias", "init"}) | DECLARATION_MODIFIERS
)
_MODIFIER_ARGUMENTS = frozenset({"set", "safe", "unsafe"})

_ITEM_KINDS = {
    "import": ItemKind.IMPORT,
    "struct": ItemKind.TYPE,
    "class": ItemKind.TYPE,
    "enum": ItemKind.TYPE,
    "protocol": ItemKind.TYPE,
    "extension": ItemKind.TYPE,
    "typealias": ItemKind.TYPEALIAS,
    "associatedtype": ItemKind.TYPEALIAS,
    "func": ItemKind.FUNCTION,
    "init": ItemKind.FUNCTION,
    "deinit": ItemKind.FUNCTION,
    "subscript": ItemKind.FUNCTION,
    "var": ItemKind.VARIABLE,
    "let": ItemKind.VARIABLE,
    "operator": ItemKind.OPERATOR,
    "precedencegroup": ItemKind.OPERATOR,
    "case": ItemKind.ENUM_CASE,
}

# Contextual keywords that only declare something when a name follows
_NAMED_ITEM_KINDS = {
    "actor": ItemKind.TYPE,
    "macro": ItemKind.MACRO,
}

_CONTINUATION_KEYWORDS = frozenset({"else", "catch", "where", "throws", "rethrows"})
_CONTINUATION_PUNCTUATION = frozenset({".", ")", "]", ",", ":", "{"})
_OPEN_PUNCTUATION = frozenset({"(", "[", ",", "@", ".", "\\"})
_CLAUSE_BOUNDARIES = frozenset({"#elseif", "#else", "#endif"})
_CONDITION_CONTINUATIONS = ("&&", "||", "!")

Part = Union[Token, BraceGroup]


def _last_token(parts: Sequence[Part]) -> Token:
    last = parts[-1]
    return last.close if isinstance(last, BraceGroup) else last


def _ends_with_binary_operator(parts: Sequence[Part]) -> bool:
    """True for `a +` at the end of a line, false for postfix `a!` or `Set<Int>`."""
    last = parts[-1]
    if not isinstance(last, Token) or last.kind is not TokenKind.OPERATOR:
        return False
    if last.text == "->" or len(parts) < 2:
        return True
    before = _last_token(parts[:-1])
    if before.kind is TokenKind.IDENTIFIER and before.text == "operator":
        return False  # prefix operator +++
    return bool(before.trailing)


def _skip_parenthesized(parts: Sequence[Part], i: int) -> int:
    """Skip a `( ... )` run starting at `i`, if there is one."""
    if i >= len(parts) or not isinstance(parts[i], Token) or parts[i].text != "(":
        return i
    depth = 0
    while i < len(parts):
        part = parts[i]
        if isinstance(part, Token) and part.kind is TokenKind.PUNCTUATION:
            if part.text == "(":
                depth += 1
            elif part.text == ")":
                depth -= 1
                if depth == 0:
                    return i + 1
        i += 1
    return i


def skip_attributes_and_modifiers(parts: Sequence[Part]) -> int:
    """Index of the first part that is neither an attribute nor a modifier."""
    i = 0
    while i < len(parts):
        part = parts[i]
        if not isinstance(part, Token):
            return i
        nxt = parts[i + 1] if i + 1 < len(parts) else None

        if part.kind is TokenKind.PUNCTUATION and part.text == "@":
            i += 1
            if i < len(parts) and isinstance(parts[i], Token) and parts[i].kind is TokenKind.IDENTIFIER:
                i += 1
                if i < len(parts) and isinstance(parts[i], Token) and not parts[i].starts_line:
                    i = _skip_parenthesized(parts, i)
            continue

        if part.kind is TokenKind.IDENTIFIER and part.text in DECLARATION_MODIFIERS:
            after = i + 1
            # private(set), unowned(unsafe)
            if (
                after + 2 < len(parts)
                and all(isinstance(p, Token) for p in parts[after:after + 3])
                and parts[after].text == "("
                and parts[after + 1].text in _MODIFIER_ARGUMENTS
                and parts[after + 2].text == ")"
            ):
                after += 3
            if after == len(parts) or (
                isinstance(parts[after], Token) and parts[after].kind is TokenKind.IDENTIFIER
            ):
                i = after
                continue
            return i

        if (
            part.kind is TokenKind.IDENTIFIER
            and part.text == "class"
            and isinstance(nxt, Token)
            and nxt.text in _CLASS_MEMBER_KEYWORDS
        ):
            i += 1
            continue
        return i
    return i


def classify_item(parts: Sequence[Part]) -> ItemKind:
    i = skip_attributes_and_modifiers(parts)
    if i >= len(parts) or not isinstance(parts[i], Token):
        return ItemKind.STATEMENT
    head = parts[i]
    nxt = parts[i + 1] if i + 1 < len(parts) else None

    if head.kind is TokenKind.POUND_KEYWORD:
        return ItemKind.DIRECTIVE
    if head.kind is TokenKind.POUND_IDENTIFIER:
        return ItemKind.MACRO_EXPANSION
    if head.kind is not TokenKind.IDENTIFIER:
        return ItemKind.STATEMENT
    if head.text in _ITEM_KINDS:
        return _ITEM_KINDS[head.text]
    if head.text in _NAMED_ITEM_KINDS:
        if isinstance(nxt, Token) and nxt.kind is TokenKind.IDENTIFIER:
            return _NAMED_ITEM_KINDS[head.text]
    return ItemKind.STATEMENT


class Parser:
    """
    Recursive-descent parser over a token list.

    Args:
        tokens: Output of the lexer, ending in EOF
        precedence: Grouping mode for `#if` conditions
    """

    def __init__(self, tokens: List[Token], precedence: str = "sequential"):
        self.tokens = tokens
        self.precedence = precedence
        self.pos = 0

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def parse(self) -> SourceFile:
        items = self._parse_items()
        token = self._peek()
        if token.kind is not TokenKind.EOF:
            if token.is_directive:
                raise ParseFailure(f"{token.text} without matching #if", token.line)
            raise ParseFailure(f"unexpected '{token.text}'", token.line)
        return SourceFile(items, self._advance())

    @staticmethod
    def _ends_list(token: Token) -> bool:
        if token.kind is TokenKind.EOF:
            return True
        if token.kind is TokenKind.PUNCTUATION and token.text == "}":
            return True
        return token.is_directive and token.text in _CLAUSE_BOUNDARIES

    def _parse_items(self) -> Tuple[Node, ...]:
        nodes: List[Node] = []
        parts: List[Part] = []
        depth = 0

        def flush() -> None:
            if parts:
                nodes.append(Item(tuple(parts), classify_item(parts)))
                parts.clear()

        while not self._ends_list(self._peek()):
            token = self._peek()

            if token.is_directive and token.text == "#if":
                if depth:
                    raise ParseFailure("#if inside brackets is not supported", token.line)
                flush()
                nodes.append(self._parse_conditional_block())
                continue

            if parts and depth == 0 and self._starts_new_item(parts, token):
                flush()

            if token.kind is TokenKind.PUNCTUATION and token.text == "{":
                parts.append(self._parse_brace_group())
                continue

            parts.append(self._advance())
            if token.kind is TokenKind.PUNCTUATION:
                if token.text in ("(", "["):
                    depth += 1
                elif token.text in (")", "]"):
                    depth = max(depth - 1, 0)
                elif token.text == ";" and depth == 0:
                    flush()

        flush()
        return tuple(nodes)

    @staticmethod
    def _starts_new_item(parts: Sequence[Part], token: Token) -> bool:
        if not token.starts_line:
            return False
        if skip_attributes_and_modifiers(parts) == len(parts):
            return False
        if token.kind is TokenKind.PUNCTUATION and token.text in _CONTINUATION_PUNCTUATION:
            return False
        if token.kind is TokenKind.IDENTIFIER and token.text in _CONTINUATION_KEYWORDS:
            return False
        if token.kind is TokenKind.OPERATOR and token.trailing:
            return False  # binary operator leading the line
        previous = _last_token(parts)
        if previous.kind is TokenKind.PUNCTUATION and previous.text in _OPEN_PUNCTUATION:
            return False
        if _ends_with_binary_operator(parts):
            return False
        return True

    def _parse_brace_group(self) -> BraceGroup:
        opening = self._advance()
        items = self._parse_items()
        closing = self._peek()
        if not (closing.kind is TokenKind.PUNCTUATION and closing.text == "}"):
            if closing.is_directive:
                raise ParseFailure(
                    f"{closing.text} crosses the '{{' opened on line {opening.line}",
                    closing.line,
                )
            raise ParseFailure(f"missing '}}' for '{{' opened on line {opening.line}", closing.line)
        return BraceGroup(opening, items, self._advance())

    def _condition_tokens(self) -> Tuple[Token, ...]:
        taken: List[Token] = []
        depth = 0
        while True:
            token = self._peek()
            if token.kind is TokenKind.EOF or token.is_directive:
                break
            if token.starts_line and taken:
                last = taken[-1]
                continues = depth > 0 or (
                    last.kind is TokenKind.OPERATOR and last.text.endswith(_CONDITION_CONTINUATIONS)
                ) or (
                    token.kind is TokenKind.OPERATOR and token.text.startswith(("&&", "||"))
                )
                if not continues:
                    break
            elif token.starts_line:
                break
            taken.append(self._advance())
            if token.text == "(":
                depth += 1
            elif token.text == ")":
                depth -= 1
        return tuple(taken)

    def _parse_conditional_block(self) -> ConditionalBlock:
        opening = self._advance()
        directive = opening
        kind = ClauseKind.IF
        clauses: List[Clause] = []

        while True:
            condition_tokens: Tuple[Token, ...] = ()
            condition = None
            if kind is not ClauseKind.ELSE:
                condition_tokens = self._condition_tokens()
                if not condition_tokens:
                    raise ParseFailure(f"{directive.text} without a condition", directive.line)
                condition = parse_condition(condition_tokens, self.precedence)

            body = self._parse_items()
            clauses.append(Clause(kind, directive, condition_tokens, condition, body))

            boundary = self._peek()
            if not (boundary.is_directive and boundary.text in _CLAUSE_BOUNDARIES):
                raise ParseFailure(
                    f"missing #endif for #if opened on line {opening.line}", boundary.line
                )
            self._advance()
            if boundary.text == "#endif":
                return ConditionalBlock(tuple(clauses), boundary)
            if kind is ClauseKind.ELSE:
                raise ParseFailure(f"{boundary.text} after #else", boundary.line)
            kind = ClauseKind.ELSEIF if boundary.text == "#elseif" else ClauseKind.ELSE
            directive = boundary


def parse_source(text: str, precedence: str = "sequential") -> SourceFile:
    """
    Parse Swift source into a SourceFile.

    Raises:
        ParseFailure: unterminated literals or comments, unbalanced braces,
            or a malformed `#if` chain
    """
    tree = Parser(tokenize(text), precedence).parse()
    logger.debug(f"Parsed {len(tree.items)} top-level items")
    return tree
