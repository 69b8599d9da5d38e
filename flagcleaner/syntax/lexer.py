#!/usr/bin/env python3
"""lexer.py - Lossless Swift tokenizer

Splits Swift source into tokens that carry their surrounding whitespace and
comments, so that concatenating every token reproduces the input exactly.
Only as much of the Swift grammar is understood as is needed to find token
boundaries reliably: strings with interpolation, nested block comments,
raw strings, bare `/.../` regex literals in expression position and the
`#` keyword family.
"""

import logging
import re
from typing import List, Optional, Tuple

from flagcleaner.syntax.tokens import Token, TokenKind, TriviaKind, TriviaPiece
from flagcleaner.utils.errors import ParseFailure

logger = logging.getLogger(__name__)

DIRECTIVE_KEYWORDS = frozenset({"#if", "#elseif", "#else", "#endif", "#sourceLocation"})

OPERATOR_CHARS = frozenset("/=-+!*%<>&|^~?")
PUNCTUATION_CHARS = frozenset("{}()[],;:@\\")

# Tokens after which `/` opens a regex literal rather than dividing
_REGEX_AFTER_PUNCTUATION = frozenset({"(", "[", "{", ",", ":", ";"})
_REGEX_AFTER_KEYWORDS = frozenset({"return", "case", "in", "where", "if", "guard", "while", "try", "await"})

_NUMBER = re.compile(
    r"0x[0-9a-fA-F][0-9a-fA-F_]*(?:\.[0-9a-fA-F][0-9a-fA-F_]*)?(?:[pP][+-]?[0-9][0-9_]*)?"
    r"|0o[0-7][0-7_]*"
    r"|0b[01][01_]*"
    r"|[0-9][0-9_]*(?:\.[0-9][0-9_]*)?(?:[eE][+-]?[0-9][0-9_]*)?"
)

_LINE_BREAK = re.compile(r"[\r\n]")

_RUN_CHARS = {
    " ": TriviaKind.SPACES,
    "\t": TriviaKind.TABS,
    "\n": TriviaKind.NEWLINES,
}


def _is_identifier_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha() or (ord(ch) > 127 and not ch.isspace())


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or "0" <= ch <= "9"


def _count_lines(text: str) -> int:
    return text.count("\n") + text.count("\r") - text.count("\r\n")


class Lexer:
    """
    Tokenizer for one source text.

    Usage:
        tokens = Lexer(source).tokenize()

    The last token is always EOF; its leading trivia holds whatever follows
    the final real token.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.previous = None

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        leading = self._shebang() + self._trivia(stop_at_newline=False)

        while self.pos < len(self.source):
            line = self.line
            kind, text = self._next_token()
            trailing = self._trivia(stop_at_newline=True)
            tokens.append(Token(kind, text, leading, trailing, line))
            self.previous = tokens[-1]
            leading = self._trivia(stop_at_newline=False)

        tokens.append(Token(TokenKind.EOF, "", leading, (), self.line))
        logger.debug(f"Lexed {len(tokens)} tokens over {self.line} lines")
        return tokens

    # Trivia

    def _take(self, end: int) -> str:
        text = self.source[self.pos:end]
        self.line += _count_lines(text)
        self.pos = end
        return text

    def _shebang(self) -> Tuple[TriviaPiece, ...]:
        if not self.source.startswith("#!"):
            return ()
        end = self._line_end(0)
        return (TriviaPiece(TriviaKind.SHEBANG, self._take(end)),)

    def _line_end(self, start: int) -> int:
        match = _LINE_BREAK.search(self.source, start)
        return match.start() if match else len(self.source)

    def _run_end(self, unit: str) -> int:
        end = self.pos
        while self.source.startswith(unit, end):
            end += len(unit)
        return end

    def _trivia(self, stop_at_newline: bool) -> Tuple[TriviaPiece, ...]:
        pieces = []
        source = self.source
        while self.pos < len(source):
            ch = source[self.pos]
            if ch in "\r\n" and stop_at_newline:
                break
            if ch in _RUN_CHARS:
                pieces.append(TriviaPiece(_RUN_CHARS[ch], self._take(self._run_end(ch))))
            elif source.startswith("\r\n", self.pos):
                pieces.append(
                    TriviaPiece(
                        TriviaKind.CARRIAGE_RETURN_LINE_FEEDS,
                        self._take(self._run_end("\r\n")),
                    )
                )
            elif ch == "\r":
                end = self.pos
                while end < len(source) and source[end] == "\r" and not source.startswith("\r\n", end):
                    end += 1
                pieces.append(TriviaPiece(TriviaKind.CARRIAGE_RETURNS, self._take(end)))
            elif source.startswith("//", self.pos):
                text = self._take(self._line_end(self.pos))
                is_doc = text.startswith("///") and not text.startswith("////")
                kind = TriviaKind.DOC_LINE_COMMENT if is_doc else TriviaKind.LINE_COMMENT
                pieces.append(TriviaPiece(kind, text))
            elif source.startswith("/*", self.pos):
                text = self._take(self._block_comment_end())
                is_doc = text.startswith("/**") and text != "/**/" and not text.startswith("/***")
                kind = TriviaKind.DOC_BLOCK_COMMENT if is_doc else TriviaKind.BLOCK_COMMENT
                pieces.append(TriviaPiece(kind, text))
            elif ch.isspace():
                pieces.append(TriviaPiece(TriviaKind.OTHER, self._take(self.pos + 1)))
            else:
                break
        return tuple(pieces)

    def _block_comment_end(self) -> int:
        depth = 0
        i = self.pos
        source = self.source
        while i < len(source):
            if source.startswith("/*", i):
                depth += 1
                i += 2
            elif source.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        raise ParseFailure("unterminated block comment", self.line)

    # Tokens

    def _next_token(self) -> Tuple[TokenKind, str]:
        source = self.source
        ch = source[self.pos]

        if _is_identifier_start(ch):
            end = self.pos + 1
            while end < len(source) and _is_identifier_char(source[end]):
                end += 1
            return TokenKind.IDENTIFIER, self._take(end)

        if ch == "$":
            end = self.pos + 1
            while end < len(source) and _is_identifier_char(source[end]):
                end += 1
            return TokenKind.IDENTIFIER, self._take(end)

        if ch == "`":
            close = source.find("`", self.pos + 1)
            if close != -1 and _count_lines(source[self.pos:close]) == 0:
                return TokenKind.IDENTIFIER, self._take(close + 1)
            return TokenKind.UNKNOWN, self._take(self.pos + 1)

        if "0" <= ch <= "9":
            match = _NUMBER.match(source, self.pos)
            text = match.group(0)
            lowered = text.lower()
            if lowered.startswith("0x"):
                is_float = "." in lowered or "p" in lowered
            elif lowered.startswith(("0o", "0b")):
                is_float = False
            else:
                is_float = "." in lowered or "e" in lowered
            return (TokenKind.FLOAT if is_float else TokenKind.INTEGER), self._take(match.end())

        if ch == '"':
            return TokenKind.STRING, self._take(self._string_end(self.pos))

        if ch == "#":
            return self._pound_token()

        if ch == "." and source.startswith("..", self.pos):
            end = self.pos
            while end < len(source) and (source[end] in OPERATOR_CHARS or source[end] == "."):
                end += 1
            return TokenKind.OPERATOR, self._take(end)

        if ch == "/":
            end = self._bare_regex_end()
            if end is not None:
                return TokenKind.REGEX, self._take(end)

        if ch in OPERATOR_CHARS:
            end = self.pos
            while end < len(source) and source[end] in OPERATOR_CHARS:
                if end > self.pos and source.startswith(("//", "/*"), end):
                    break
                end += 1
            return TokenKind.OPERATOR, self._take(end)

        if ch == "." or ch in PUNCTUATION_CHARS:
            return TokenKind.PUNCTUATION, self._take(self.pos + 1)

        return TokenKind.UNKNOWN, self._take(self.pos + 1)

    def _bare_regex_end(self) -> Optional[int]:
        """End of a `/.../` regex literal at the cursor, or None for an operator."""
        previous = self.previous
        if previous is not None and not (
            previous.kind is TokenKind.OPERATOR
            or (previous.kind is TokenKind.PUNCTUATION and previous.text in _REGEX_AFTER_PUNCTUATION)
            or (previous.kind is TokenKind.IDENTIFIER and previous.text in _REGEX_AFTER_KEYWORDS)
        ):
            return None
        source = self.source
        i = self.pos + 1
        # `/ a /` is division and `reduce(0, /)` passes an operator
        if i >= len(source) or source[i].isspace() or source[i] == ")":
            return None
        while i < len(source) and source[i] not in "\r\n":
            if source[i] == "\\":
                i += 2
            elif source[i] == "/":
                return None if source[i - 1].isspace() else i + 1
            else:
                i += 1
        return None

    def _pound_token(self) -> Tuple[TokenKind, str]:
        source = self.source
        end = self.pos
        while end < len(source) and source[end] == "#":
            end += 1
        hashes = end - self.pos
        nxt = source[end] if end < len(source) else ""

        if nxt == '"':
            return TokenKind.STRING, self._take(self._string_end(self.pos))
        if nxt == "/":
            terminator = "/" + "#" * hashes
            close = source.find(terminator, end + 1)
            if close == -1:
                raise ParseFailure("unterminated regex literal", self.line)
            return TokenKind.REGEX, self._take(close + len(terminator))
        if hashes == 1 and nxt and _is_identifier_start(nxt):
            end += 1
            while end < len(source) and _is_identifier_char(source[end]):
                end += 1
            text = self._take(end)
            if text in DIRECTIVE_KEYWORDS:
                return TokenKind.POUND_KEYWORD, text
            return TokenKind.POUND_IDENTIFIER, text
        return TokenKind.UNKNOWN, self._take(self.pos + 1)

    def _string_end(self, start: int) -> int:
        """Index just past the string literal opening at `start` (hashes included)."""
        source = self.source
        i = start
        while source[i] == "#":
            i += 1
        hashes = i - start
        multiline = source.startswith('"""', i)
        i += 3 if multiline else 1
        close = ('"""' if multiline else '"') + "#" * hashes
        escape = "\\" + "#" * hashes

        while True:
            if i >= len(source):
                raise ParseFailure("unterminated string literal", self.line)
            if not multiline and source[i] in "\r\n":
                raise ParseFailure("unterminated string literal", self.line)
            if source.startswith(escape, i):
                i += len(escape)
                if i < len(source) and source[i] == "(":
                    i = self._interpolation_end(i + 1)
                else:
                    i += 1
                continue
            if source.startswith(close, i):
                return i + len(close)
            i += 1

    def _interpolation_end(self, start: int) -> int:
        source = self.source
        depth = 1
        i = start
        while i < len(source):
            ch = source[i]
            if ch == '"' or (ch == "#" and source[i:].lstrip("#").startswith('"')):
                i = self._string_end(i)
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    return i + 1
            i += 1
        raise ParseFailure("unterminated string interpolation", self.line)


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()
