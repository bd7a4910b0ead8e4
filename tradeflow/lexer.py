# Copyright 2025 Ralph Lemke
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""TradeFlow lexer.

Turns workflow source text into an ordered list of tokens. The scan is a
single pass over the characters with ``start``/``current`` cursors and a
line counter. The first illegal character or unterminated string aborts
the whole scan with :class:`LexError`; no partial token list is returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import SourceError


class LexError(SourceError):
    """Unterminated string literal or illegal character."""


class TokenType(str, Enum):
    """Token type tags."""

    # Keywords
    WORKFLOW = "WORKFLOW"
    STEP = "STEP"
    LET = "LET"
    VAR = "VAR"
    CONST = "CONST"
    IF = "IF"
    ELSE = "ELSE"
    PRINT = "PRINT"
    LOG = "LOG"
    FETCH = "FETCH"
    SEND_EMAIL = "SEND_EMAIL"
    NOTIFY = "NOTIFY"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"
    IDENTIFIER = "IDENTIFIER"

    # Operators
    PLUS = "PLUS"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    GREATER = "GREATER"
    LESS = "LESS"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS_EQUAL = "LESS_EQUAL"
    DOT = "DOT"

    # Punctuation
    LEFT_PAREN = "LEFT_PAREN"
    RIGHT_PAREN = "RIGHT_PAREN"
    LEFT_BRACE = "LEFT_BRACE"
    RIGHT_BRACE = "RIGHT_BRACE"
    COLON = "COLON"
    SEMICOLON = "SEMICOLON"
    COMMA = "COMMA"

    EOF = "EOF"


KEYWORDS: dict[str, TokenType] = {
    "workflow": TokenType.WORKFLOW,
    "step": TokenType.STEP,
    "let": TokenType.LET,
    "var": TokenType.VAR,
    "const": TokenType.CONST,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "print": TokenType.PRINT,
    "log": TokenType.LOG,
    "fetch": TokenType.FETCH,
    "send_email": TokenType.SEND_EMAIL,
    "notify": TokenType.NOTIFY,
}

# Keywords that also name built-in commands.
COMMAND_KEYWORDS = frozenset(
    {
        TokenType.PRINT,
        TokenType.LOG,
        TokenType.FETCH,
        TokenType.SEND_EMAIL,
        TokenType.NOTIFY,
    }
)

_SINGLE_CHAR: dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "+": TokenType.PLUS,
}

# Operators that may be followed by "=" to form a two-character token.
_WITH_EQUAL: dict[str, tuple[TokenType | None, TokenType]] = {
    "=": (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    "!": (None, TokenType.NOT_EQUAL),
    "<": (TokenType.LESS, TokenType.LESS_EQUAL),
    ">": (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

_WHITESPACE = frozenset(" \t\r\n")


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token type tag
        lexeme: Exact source text of the token
        literal: Unquoted body for strings, numeric text for numbers
        line: 1-based source line where the token starts
    """

    type: TokenType
    lexeme: str
    literal: str | None = None
    line: int = 1

    def __str__(self) -> str:
        if self.literal is not None and self.type is TokenType.STRING:
            return f"{self.type.value} {self.lexeme} -> {self.literal!r} (line {self.line})"
        return f"{self.type.value} {self.lexeme!r} (line {self.line})"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


class Lexer:
    """Single-use scanner over one source string."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens: list[Token] = []
        self._start = 0
        self._current = 0
        self._line = 1

    def tokenize(self) -> list[Token]:
        """Scan the whole source.

        Returns:
            Token list terminated by a single ``EOF`` token

        Raises:
            LexError: On an unterminated string or illegal character
        """
        while not self._is_at_end():
            self._start = self._current
            self._scan_token()

        self._tokens.append(Token(TokenType.EOF, "", None, self._line))
        return self._tokens

    def _scan_token(self) -> None:
        c = self._advance()

        if c in _WHITESPACE:
            if c == "\n":
                self._line += 1
        elif c in _SINGLE_CHAR:
            self._add_token(_SINGLE_CHAR[c])
        elif c in _WITH_EQUAL:
            single, double = _WITH_EQUAL[c]
            if self._match("="):
                self._add_token(double)
            elif single is not None:
                self._add_token(single)
            else:
                raise LexError(f"Unexpected character '{c}'", self._line)
        elif c in ('"', "'"):
            self._string(c)
        elif _is_digit(c):
            self._number()
        elif _is_alpha(c):
            self._identifier()
        else:
            raise LexError(f"Unexpected character '{c}'", self._line)

    def _string(self, quote: str) -> None:
        start_line = self._line
        while self._peek() != quote and not self._is_at_end():
            if self._peek() == "\n":
                self._line += 1
            self._advance()

        if self._is_at_end():
            raise LexError("Unterminated string", start_line)

        self._advance()  # closing quote
        body = self._source[self._start + 1 : self._current - 1]
        self._add_token(TokenType.STRING, body, line=start_line)

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()

        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()

        self._add_token(TokenType.NUMBER, self._source[self._start : self._current])

    def _identifier(self) -> None:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self._advance()

        text = self._source[self._start : self._current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _advance(self) -> str:
        c = self._source[self._current]
        self._current += 1
        return c

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self._source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self._source[self._current]

    def _peek_next(self) -> str:
        if self._current + 1 >= len(self._source):
            return "\0"
        return self._source[self._current + 1]

    def _is_at_end(self) -> bool:
        return self._current >= len(self._source)

    def _add_token(
        self,
        token_type: TokenType,
        literal: str | None = None,
        line: int | None = None,
    ) -> None:
        lexeme = self._source[self._start : self._current]
        self._tokens.append(
            Token(token_type, lexeme, literal, self._line if line is None else line)
        )


def tokenize(source: str) -> list[Token]:
    """Tokenize TradeFlow source text.

    This is a convenience wrapper around :class:`Lexer`.
    """
    return Lexer(source).tokenize()
