#!/usr/bin/env python3
"""tokens.py - Tokens and trivia for the Swift syntax layer

A token owns the whitespace and comments around it. Leading trivia is
everything after the previous token's trailing trivia; trailing trivia is the
spaces and comments that follow the token on the same line. A newline always
belongs to the leading trivia of the next token.
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Tuple


class TriviaKind(Enum):
    """Classified trivia runs."""

    SPACES = auto()
    TABS = auto()
    NEWLINES = auto()
    CARRIAGE_RETURNS = auto()
    CARRIAGE_RETURN_LINE_FEEDS = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    DOC_LINE_COMMENT = auto()
    DOC_BLOCK_COMMENT = auto()
    SHEBANG = auto()
    OTHER = auto()  # form feeds, vertical tabs, stray whitespace


# Unit text of each counted run
_RUN_UNITS = {
    TriviaKind.SPACES: " ",
    TriviaKind.TABS: "\t",
    TriviaKind.NEWLINES: "\n",
    TriviaKind.CARRIAGE_RETURNS: "\r",
    TriviaKind.CARRIAGE_RETURN_LINE_FEEDS: "\r\n",
}

NEWLINE_KINDS = frozenset(
    {
        TriviaKind.NEWLINES,
        TriviaKind.CARRIAGE_RETURNS,
        TriviaKind.CARRIAGE_RETURN_LINE_FEEDS,
    }
)

COMMENT_KINDS = frozenset(
    {
        TriviaKind.LINE_COMMENT,
        TriviaKind.BLOCK_COMMENT,
        TriviaKind.DOC_LINE_COMMENT,
        TriviaKind.DOC_BLOCK_COMMENT,
    }
)


@dataclass(frozen=True)
class TriviaPiece:
    """One run of trivia, e.g. three newlines or a line comment."""

    kind: TriviaKind
    text: str

    @classmethod
    def run(cls, kind: TriviaKind, count: int) -> "TriviaPiece":
        return cls(kind, _RUN_UNITS[kind] * count)

    @property
    def is_newline(self) -> bool:
        return self.kind in NEWLINE_KINDS

    @property
    def is_comment(self) -> bool:
        return self.kind in COMMENT_KINDS

    @property
    def count(self) -> int:
        """Number of units in a run; 1 for comments and other pieces."""
        unit = _RUN_UNITS.get(self.kind)
        if unit is None:
            return 1
        return len(self.text) // len(unit)

    def with_count(self, count: int) -> "TriviaPiece":
        return TriviaPiece.run(self.kind, count)

    def __str__(self) -> str:
        return self.text


Trivia = Tuple[TriviaPiece, ...]


def trivia_text(trivia: Trivia) -> str:
    return "".join(piece.text for piece in trivia)


def has_newline(trivia: Trivia) -> bool:
    return any(piece.is_newline for piece in trivia)


class TokenKind(Enum):
    """Lexical token classes."""

    IDENTIFIER = auto()  # includes keywords, backticked names and $0
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    REGEX = auto()
    OPERATOR = auto()
    PUNCTUATION = auto()
    POUND_KEYWORD = auto()  # #if, #elseif, #else, #endif, #sourceLocation
    POUND_IDENTIFIER = auto()  # freestanding macros such as #warning or #Preview
    UNKNOWN = auto()
    PLACEHOLDER = auto()  # empty token left where a block was removed
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A token with its attached trivia."""

    kind: TokenKind
    text: str
    leading: Trivia = ()
    trailing: Trivia = ()
    line: int = 0

    def with_leading(self, leading: Trivia) -> "Token":
        return replace(self, leading=tuple(leading))

    @property
    def starts_line(self) -> bool:
        return has_newline(self.leading)

    @property
    def is_directive(self) -> bool:
        return self.kind is TokenKind.POUND_KEYWORD

    def __str__(self) -> str:
        return trivia_text(self.leading) + self.text + trivia_text(self.trailing)
