"""
Lexical scanner for the Lox language.

This module converts raw source text into a flat sequence of tokens:

Classes:
    CharacterStream: Cursor over the source with lexeme-start and line tracking.
    Token: An immutable lexical token.
    Scanner: Single-use scanner that turns one source buffer into tokens.

Functions:
    scan(source): Scan a whole buffer, returning (tokens, diagnostics).

Features:
    - Maximal munch for `!=`, `==`, `<=`, `>=`
    - Skips whitespace, `//` line comments and nested `/* ... */` block comments
    - Recognizes:
        * Identifiers and keywords (ASCII letters, digits, underscore)
        * Numbers (digits with an optional fractional part), decoded as float
        * Strings (double-quoted, no escape sequences, may span lines)
        * Punctuation and operators

Errors never stop the scan. Unexpected characters, unterminated strings and
unterminated block comments are recorded as `LexError` values and scanning
carries on, so one pass reports every lexical problem. The returned sequence
always ends with exactly one EOF token.

Example:
    >>> tokens, errors = scan("print 1.5;")
    >>> [t.kind.name for t in tokens]
    ['PRINT', 'NUMBER', 'SEMICOLON', 'EOF']
    >>> tokens[1].literal
    1.5
    >>> errors
    []

Exports:
    - CharacterStream
    - Token
    - Scanner
    - scan
"""

import logging
import string
from dataclasses import dataclass

from lox.lox_constants import (
    KEYWORDS,
    SINGLE_CHAR_TOKENS,
    TWO_CHAR_OPERATORS,
    TokenType,
)
from lox.lox_errors import LexError

logger = logging.getLogger(__name__)

DIGITS = frozenset(string.digits)
IDENT_START = frozenset(string.ascii_letters + "_")
IDENT_CHARS = IDENT_START | DIGITS
WHITESPACE = frozenset(" \r\t\n")


class CharacterStream:
    """
    Reads characters from a source string while tracking the current line.

    The stream keeps two offsets: `start`, the first character of the lexeme
    being scanned, and `position`, the next character to read. The line
    counter is bumped every time a newline is consumed, wherever that newline
    sits (top level, string or comment).

    Attributes:
        source (str): The input source string.
        start (int): Index where the current lexeme begins.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1):
        self.source = source
        self.start = position
        self.position = position
        self.line = line

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def match(self, expected: str) -> bool:
        """Consumes the next character only if it equals `expected`."""
        if self.peek() != expected or self.end_of_file():
            return False
        self.next()
        return True

    def mark(self) -> None:
        """Begins a new lexeme at the current position."""
        self.start = self.position

    def lexeme(self) -> str:
        """Returns the text between the lexeme start and the current position."""
        return self.source[self.start : self.position]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the Lox language.

    Attributes:
        kind (TokenType): The lexical category.
        lexeme (str): The exact source text the token was scanned from.
        literal (float | str | None): Decoded value for NUMBER and STRING
            tokens, None otherwise.
        line (int): The 1-based line the token starts on.
    """

    kind: TokenType
    lexeme: str
    literal: float | str | None = None
    line: int = 1

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.literal!r}, line={self.line})"


class Scanner:
    """Lexical analyzer for one Lox source buffer.

    A Scanner owns its cursor, token list and diagnostics, so independent
    scanners never share state. Instances are single use: call
    `scan_tokens()` once.

    Attributes:
        stream (CharacterStream): Cursor over the source being scanned.
        tokens (list[Token]): Tokens produced so far.
        diagnostics (list[LexError]): Lexical errors recorded so far.
    """

    def __init__(self, source: str) -> None:
        self.stream = CharacterStream(source)
        self.tokens: list[Token] = []
        self.diagnostics: list[LexError] = []

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def scan_tokens(self) -> tuple[list[Token], list[LexError]]:
        """Scans the whole buffer and appends the terminating EOF token.

        Returns:
            tuple[list[Token], list[LexError]]: The token sequence and every
            lexical error encountered, both in source order.
        """
        while not self.stream.end_of_file():
            self.stream.mark()
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.stream.line))
        logger.debug(
            f"Scanned {len(self.tokens)} tokens with {len(self.diagnostics)} errors"
        )
        return self.tokens, self.diagnostics

    def scan_token(self) -> None:
        """Consumes one lexeme, emitting at most one token."""
        line = self.stream.line
        ch = self.advance()

        # 1. Fixed punctuation
        if ch in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[ch], line=line)

        # 2. One or two character operators, longest match wins
        elif ch in TWO_CHAR_OPERATORS:
            short, long = TWO_CHAR_OPERATORS[ch]
            self.add_token(long if self.stream.match("=") else short, line=line)

        # 3. Division or comments
        elif ch == "/":
            if self.stream.match("/"):
                self.skip_line_comment()
            elif self.stream.match("*"):
                self.skip_block_comment()
            else:
                self.add_token(TokenType.SLASH, line=line)

        # 4. Whitespace; newlines are counted by the stream
        elif ch in WHITESPACE:
            pass

        # 5. String
        elif ch == '"':
            self.scan_string(line)

        # 6. Number
        elif ch in DIGITS:
            self.scan_number(line)

        # 7. Identifier or keyword
        elif ch in IDENT_START:
            self.scan_identifier(line)

        # 8. Anything else
        else:
            self.error(f"Unexpected character {ch!r}.", line)

    def skip_line_comment(self) -> None:
        """Advances up to, but not past, the end of the current line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def skip_block_comment(self) -> None:
        """Skips a `/* ... */` comment whose opener was already consumed.

        Comments nest: each inner `/*` must be closed by its own `*/`.
        Reaching end of input at any depth is reported once.
        """
        depth = 1
        while depth > 0:
            if self.stream.end_of_file():
                self.error("Unterminated block comment.", self.stream.line)
                return
            ch = self.advance()
            if ch == "/" and self.stream.match("*"):
                depth += 1
            elif ch == "*" and self.stream.match("/"):
                depth -= 1

    def scan_string(self, line: int) -> None:
        while not self.stream.end_of_file() and self.peek() != '"':
            self.advance()

        if self.stream.end_of_file():
            self.error("Unterminated string.", self.stream.line)
            return

        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.stream.lexeme()[1:-1], line=line)

    def scan_number(self, line: int) -> None:
        while self.peek() in DIGITS:
            self.advance()

        # A trailing '.' belongs to the number only when a digit follows it.
        if self.peek() == "." and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()

        self.add_token(TokenType.NUMBER, float(self.stream.lexeme()), line=line)

    def scan_identifier(self, line: int) -> None:
        while self.peek() in IDENT_CHARS:
            self.advance()

        text = self.stream.lexeme()
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER), line=line)

    def add_token(
        self, kind: TokenType, literal: float | str | None = None, line: int = 1
    ) -> None:
        self.tokens.append(Token(kind, self.stream.lexeme(), literal, line))

    def error(self, message: str, line: int) -> None:
        diagnostic = LexError(line, message)
        logger.debug(f"Lex error: {diagnostic}")
        self.diagnostics.append(diagnostic)


def scan(source: str) -> tuple[list[Token], list[LexError]]:
    """Scan a complete source buffer.

    Args:
        source (str): The full text of one translation unit.

    Returns:
        tuple[list[Token], list[LexError]]: Tokens terminated by exactly one
        EOF token, and the lexical errors found, in source order.
    """
    return Scanner(source).scan_tokens()


__all__ = ["CharacterStream", "Scanner", "Token", "scan"]
