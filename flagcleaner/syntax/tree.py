#!/usr/bin/env python3
"""tree.py - Syntax tree for Swift member lists

The tree only models what the flag cleaner needs: member and statement
items, brace-delimited groups, and `#if` chains. All nodes are frozen;
rewriting builds new nodes. Rendering a tree with `str()` yields the exact
source text it was parsed from.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from flagcleaner.syntax.conditions import ConditionExpr
from flagcleaner.syntax.tokens import Token, TokenKind, Trivia


class ItemKind(Enum):
    """Classification of one member or statement."""

    TYPE = "type"  # struct, class, enum, protocol, extension, actor
    TYPEALIAS = "typealias"
    FUNCTION = "function"  # func, init, deinit, subscript
    VARIABLE = "variable"
    MACRO = "macro"
    MACRO_EXPANSION = "macro_expansion"  # freestanding #name
    IMPORT = "import"
    OPERATOR = "operator"  # operator and precedencegroup declarations
    ENUM_CASE = "enum_case"
    DIRECTIVE = "directive"  # #sourceLocation
    STATEMENT = "statement"

    @property
    def meaningful(self) -> bool:
        return self in _MEANINGFUL_KINDS


_MEANINGFUL_KINDS = frozenset(
    {
        ItemKind.TYPE,
        ItemKind.TYPEALIAS,
        ItemKind.FUNCTION,
        ItemKind.VARIABLE,
        ItemKind.MACRO,
        ItemKind.MACRO_EXPANSION,
    }
)


class ClauseKind(Enum):
    IF = "#if"
    ELSEIF = "#elseif"
    ELSE = "#else"


@dataclass(frozen=True)
class BraceGroup:
    """`{ ... }` with its own member list."""

    open: Token
    items: Tuple["Node", ...]
    close: Token

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Item:
    """One declaration or statement, possibly spanning several lines."""

    parts: Tuple[Union[Token, BraceGroup], ...]
    kind: ItemKind

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Clause:
    """One `#if`, `#elseif` or `#else` branch."""

    kind: ClauseKind
    directive: Token
    condition_tokens: Tuple[Token, ...]
    condition: Optional[ConditionExpr]
    body: Tuple["Node", ...]


@dataclass(frozen=True)
class ConditionalBlock:
    """An `#if` ... `#endif` chain."""

    clauses: Tuple[Clause, ...]
    end: Token

    @property
    def leading_trivia(self) -> Trivia:
        return self.clauses[0].directive.leading

    @property
    def conditions(self) -> Tuple[ConditionExpr, ...]:
        return tuple(c.condition for c in self.clauses if c.condition is not None)

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Placeholder:
    """Stands where a removed block was; renders only its trivia."""

    token: Token

    @classmethod
    def with_trivia(cls, leading: Trivia) -> "Placeholder":
        return cls(Token(TokenKind.PLACEHOLDER, "", tuple(leading)))

    def __str__(self) -> str:
        return render(self)


Node = Union[Item, ConditionalBlock, Placeholder]


@dataclass(frozen=True)
class SourceFile:
    items: Tuple[Node, ...]
    eof: Token

    def __str__(self) -> str:
        return render(self)


def iter_tokens(node) -> Iterator[Token]:
    """Yield every token of a node in source order."""
    if isinstance(node, Token):
        yield node
    elif isinstance(node, SourceFile):
        for item in node.items:
            yield from iter_tokens(item)
        yield node.eof
    elif isinstance(node, Item):
        for part in node.parts:
            yield from iter_tokens(part)
    elif isinstance(node, BraceGroup):
        yield node.open
        for item in node.items:
            yield from iter_tokens(item)
        yield node.close
    elif isinstance(node, ConditionalBlock):
        for clause in node.clauses:
            yield clause.directive
            yield from clause.condition_tokens
            for item in clause.body:
                yield from iter_tokens(item)
        yield node.end
    elif isinstance(node, Placeholder):
        yield node.token
    else:
        raise TypeError(f"Not a syntax node: {type(node).__name__}")


def render(node) -> str:
    return "".join(str(token) for token in iter_tokens(node))


def has_content(nodes: Tuple[Node, ...]) -> bool:
    """True when the nodes hold at least one real token."""
    return any(
        token.kind is not TokenKind.PLACEHOLDER
        for node in nodes
        for token in iter_tokens(node)
    )


def first_token(node: Node) -> Token:
    if isinstance(node, Item):
        head = node.parts[0]
        return head.open if isinstance(head, BraceGroup) else head
    if isinstance(node, ConditionalBlock):
        return node.clauses[0].directive
    return node.token


def with_first_token(node: Node, token: Token) -> Node:
    """Rebuild `node` with its first token replaced."""
    if isinstance(node, Item):
        head = node.parts[0]
        if isinstance(head, BraceGroup):
            head = replace(head, open=token)
        else:
            head = token
        return replace(node, parts=(head,) + node.parts[1:])
    if isinstance(node, ConditionalBlock):
        first = replace(node.clauses[0], directive=token)
        return replace(node, clauses=(first,) + node.clauses[1:])
    return replace(node, token=token)
