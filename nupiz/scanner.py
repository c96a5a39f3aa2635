"""Lexical scanner turning source text into tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


class TokenType(Enum):
    """Every kind of token the scanner produces."""

    # Single-character tokens.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()
    # One or two character tokens.
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    AND = auto()
    OR = auto()
    BINARY_AND = auto()
    BINARY_OR = auto()
    LEFT_ARROW = auto()
    RIGHT_ARROW = auto()
    # Compound assignment.
    PLUS_EQUAL = auto()
    MINUS_EQUAL = auto()
    STAR_EQUAL = auto()
    SLASH_EQUAL = auto()
    # Literals.
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()
    # Keywords.
    BREAK = auto()
    BUILD = auto()
    CLASS = auto()
    CONST = auto()
    CONTINUE = auto()
    DEF = auto()
    ELSE = auto()
    FALSE = auto()
    FN = auto()
    FOR = auto()
    FROM = auto()
    IF = auto()
    IMPORT = auto()
    LET = auto()
    PRV = auto()
    PUB = auto()
    NEW = auto()
    NULL = auto()
    RETURN = auto()
    SUPER = auto()
    STATIC = auto()
    THIS = auto()
    TRUE = auto()
    UNPACK = auto()
    VAR = auto()
    WHILE = auto()

    ERROR = auto()
    EOF = auto()


_KEYWORDS = {
    "break": TokenType.BREAK,
    "build": TokenType.BUILD,
    "class": TokenType.CLASS,
    "const": TokenType.CONST,
    "continue": TokenType.CONTINUE,
    "def": TokenType.DEF,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "func": TokenType.FN,
    "for": TokenType.FOR,
    "from": TokenType.FROM,
    "if": TokenType.IF,
    "import": TokenType.IMPORT,
    "let": TokenType.LET,
    "prv": TokenType.PRV,
    "pub": TokenType.PUB,
    "new": TokenType.NEW,
    "null": TokenType.NULL,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "static": TokenType.STATIC,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "unpack": TokenType.UNPACK,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}

_SINGLE = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}

# Characters that may be followed by '=' to form a compound token.
_WITH_EQUAL = {
    "+": (TokenType.PLUS_EQUAL, TokenType.PLUS),
    "/": (TokenType.SLASH_EQUAL, TokenType.SLASH),
    "*": (TokenType.STAR_EQUAL, TokenType.STAR),
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

_END = "\0"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return "a" <= c <= "z" or "A" <= c <= "Z" or c == "_"


@dataclass(frozen=True)
class Token:
    """A scanned token; for error tokens the lexeme holds the message."""

    type: TokenType
    lexeme: str
    line: int


class Scanner:
    """Produces tokens from source text one at a time."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._start = 0
        self._current = 0
        self.line = 1

    def _at_end(self) -> bool:
        return self._current >= len(self._source)

    def _peek(self) -> str:
        return _END if self._at_end() else self._source[self._current]

    def _peek_next(self) -> str:
        nxt = self._current + 1
        return self._source[nxt] if nxt < len(self._source) else _END

    def _advance(self) -> str:
        c = self._source[self._current]
        self._current += 1
        return c

    def _match(self, expected: str) -> bool:
        if self._at_end() or self._source[self._current] != expected:
            return False
        self._current += 1
        return True

    def _make(self, kind: TokenType) -> Token:
        return Token(kind, self._source[self._start:self._current], self.line)

    def _error(self, message: str) -> Token:
        return Token(TokenType.ERROR, message, self.line)

    def _skip_whitespace(self) -> None:
        while True:
            c = self._peek()
            if c == "\n":
                self.line += 1
                self._advance()
            elif c in " \r\t" and c != _END:
                self._advance()
            elif c == "/" and self._peek_next() == "/":
                while self._peek() != "\n" and not self._at_end():
                    self._advance()
            else:
                return

    def _string(self) -> Token:
        while self._peek() != '"' and not self._at_end():
            if self._peek() == "\n":
                self.line += 1
            if self._peek() == "\\":
                self._advance()
                if self._at_end():
                    break
            self._advance()

        if self._at_end():
            return self._error("Unterminated string.")

        self._advance()
        return self._make(TokenType.STRING)

    def _number(self) -> Token:
        while _is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()
            while _is_digit(self._peek()):
                self._advance()
        return self._make(TokenType.NUMBER)

    def _identifier(self) -> Token:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self._advance()
        text = self._source[self._start:self._current]
        return self._make(_KEYWORDS.get(text, TokenType.IDENTIFIER))

    def scan_token(self) -> Token:
        """Scan and return the next token; EOF repeats once input is spent."""
        self._skip_whitespace()
        self._start = self._current

        if self._at_end():
            return self._make(TokenType.EOF)

        c = self._advance()
        if _is_alpha(c):
            return self._identifier()
        if _is_digit(c):
            return self._number()

        if c in _SINGLE:
            return self._make(_SINGLE[c])
        if c in _WITH_EQUAL:
            with_eq, plain = _WITH_EQUAL[c]
            return self._make(with_eq if self._match("=") else plain)
        if c == "-":
            if self._match(">"):
                return self._make(TokenType.RIGHT_ARROW)
            return self._make(
                TokenType.MINUS_EQUAL if self._match("=") else TokenType.MINUS
            )
        if c == "<":
            if self._match("="):
                return self._make(TokenType.LESS_EQUAL)
            return self._make(
                TokenType.LEFT_ARROW if self._match("-") else TokenType.LESS
            )
        if c == "&":
            return self._make(
                TokenType.AND if self._match("&") else TokenType.BINARY_AND
            )
        if c == "|":
            return self._make(
                TokenType.OR if self._match("|") else TokenType.BINARY_OR
            )
        if c == '"':
            return self._string()

        return self._error("Unexpected character.")

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the EOF token."""
        while True:
            token = self.scan_token()
            yield token
            if token.type is TokenType.EOF:
                return


def tokenize(source: str) -> list[Token]:
    """Return every token of ``source``, ending with EOF."""
    return list(Scanner(source))