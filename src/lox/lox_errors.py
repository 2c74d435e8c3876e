"""
Diagnostic records produced by the Lox scanner and parser.

Neither stage raises on bad input. Each problem is recorded as one of these
values and returned next to the product, so a caller sees every error in a
translation unit at once.

Classes:
    Diagnostic: Common base carrying a 1-based line and a message.
    LexError: Unscannable character, unterminated string or block comment.
    ParseError: Missing expected token, invalid assignment target, or
        expression expected but not found.

Example:
    >>> str(LexError(3, "Unterminated string."))
    '[line 3] Error: Unterminated string.'
    >>> str(ParseError(1, "Expect ';' after expression.", lexeme=None))
    "[line 1] Error at end of input: Expect ';' after expression."
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal problem found in the source.

    Attributes:
        line (int): The 1-based source line the problem was found on.
        message (str): Human-readable description.
    """

    line: int
    message: str

    def location(self) -> str:
        return ""

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.location()}: {self.message}"


@dataclass(frozen=True)
class LexError(Diagnostic):
    """A problem found while scanning characters into tokens."""


@dataclass(frozen=True)
class ParseError(Diagnostic):
    """A problem found while parsing tokens into statements.

    Attributes:
        lexeme (str | None): The offending token's lexeme, or None when the
            parser was looking at the end of input.
    """

    lexeme: str | None = None

    def location(self) -> str:
        if self.lexeme is None:
            return " at end of input"
        return f" at '{self.lexeme}'"


__all__ = ["Diagnostic", "LexError", "ParseError"]
