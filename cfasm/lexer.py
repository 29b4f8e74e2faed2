"""Line splitting and tokenisation of assembly text."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from cfasm.status import AssemblyError, AssemblyStatus

_INLINE_SPACES = " \t\r"
_SINGLE_CHAR_TOKENS = {
    "[": None,  # filled in below once TokenType exists
}
_HEX_DIGITS = "0123456789abcdefABCDEF"
_DIGITS = "0123456789"
_UINT64_MASK = (1 << 64) - 1


class TokenType(enum.Enum):
    """Kind of an assembly token."""

    LEFT_SQUARE_BRACKET = enum.auto()
    RIGHT_SQUARE_BRACKET = enum.auto()
    PLUS = enum.auto()
    COLON = enum.auto()
    EQUAL = enum.auto()
    IDENTIFIER = enum.auto()
    FLOATING = enum.auto()
    INTEGER = enum.auto()


_SINGLE_CHAR_TOKENS = {
    "[": TokenType.LEFT_SQUARE_BRACKET,
    "]": TokenType.RIGHT_SQUARE_BRACKET,
    ":": TokenType.COLON,
    "+": TokenType.PLUS,
    "=": TokenType.EQUAL,
}


@dataclass(frozen=True)
class Token:
    """A single token; value holds the identifier text or the number."""

    type: TokenType
    value: Union[str, int, float, None] = None


@dataclass(frozen=True)
class SourceLine:
    """A non-empty source line with comments and surrounding spaces removed."""

    index: int
    text: str


def iter_lines(text: str) -> Iterator[SourceLine]:
    """Yield the meaningful lines of text, numbered from 1."""
    for index, raw in enumerate(text.split("\n"), start=1):
        content = raw.split(";", 1)[0].strip(_INLINE_SPACES)
        if content:
            yield SourceLine(index, content)


def _is_identifier_start(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_identifier_char(ch: str) -> bool:
    return _is_identifier_start(ch) or ch in _DIGITS


class LineLexer:
    """Splits one source line into tokens."""

    def __init__(self, line: SourceLine) -> None:
        self.line = line
        self._text = line.text
        self._pos = 0

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def at_end(self) -> bool:
        """Return True once the whole line has been consumed."""
        return self._pos >= len(self._text)

    def next_token(self) -> Optional[Token]:
        """Return the next token, or None at the end of the line.

        Raises AssemblyError with UNKNOWN_TOKEN on an unexpected character.
        """
        if self.at_end() or self._text[self._pos] == ";":
            return None

        first = self._text[self._pos]
        if first in _SINGLE_CHAR_TOKENS:
            self._pos += 1
            token = Token(_SINGLE_CHAR_TOKENS[first])
        elif first in _DIGITS:
            token = self._number()
        elif _is_identifier_start(first):
            token = self._identifier()
        else:
            raise AssemblyError(AssemblyStatus.UNKNOWN_TOKEN, self.line.index, self.line.text)

        self._skip_spaces()
        return token

    def _skip_spaces(self) -> None:
        while not self.at_end() and self._text[self._pos] in _INLINE_SPACES:
            self._pos += 1

    def _take_while(self, allowed) -> str:
        start = self._pos
        while not self.at_end() and allowed(self._text[self._pos]):
            self._pos += 1
        return self._text[start:self._pos]

    def _identifier(self) -> Token:
        return Token(TokenType.IDENTIFIER, self._take_while(_is_identifier_char))

    def _number(self) -> Token:
        text = self._text
        if self._pos + 1 < len(text) and text[self._pos + 1] == "x":
            self._pos += 2
            digits = self._take_while(lambda ch: ch in _HEX_DIGITS)
            value = int(digits, 16) & _UINT64_MASK if digits else 0
            return Token(TokenType.INTEGER, value)

        integer = self._take_while(lambda ch: ch in _DIGITS)
        fraction: Optional[str] = None
        exponent: Optional[str] = None

        if not self.at_end() and text[self._pos] == ".":
            self._pos += 1
            fraction = self._take_while(lambda ch: ch in _DIGITS)

        if not self.at_end() and text[self._pos] in "eE":
            self._pos += 1
            sign = ""
            if not self.at_end() and text[self._pos] in "+-":
                sign = text[self._pos]
                self._pos += 1
            exponent = sign + self._take_while(lambda ch: ch in _DIGITS)

        if fraction is None and exponent is None:
            return Token(TokenType.INTEGER, int(integer))

        literal = integer + "." + (fraction or "0")
        if exponent and exponent not in "+-":
            literal += "e" + exponent
        return Token(TokenType.FLOATING, float(literal))