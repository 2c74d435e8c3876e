"""
Lox Language Parser

Parses the scanner's token sequence into a list of statement nodes.

This module implements a recursive-descent parser with one function per
precedence level. Binary operators fold into left-leaning `Binary` nodes;
assignment is right-associative.

Grammar
-------
    program      := declaration* EOF
    declaration  := varDecl | statement
    varDecl      := "var" IDENTIFIER ("=" expression)? ";"
    statement    := printStmt | block | exprStmt
    printStmt    := "print" expression ";"
    block        := "{" declaration* "}"
    exprStmt     := expression ";"
    expression   := assignment
    assignment   := (IDENTIFIER "=" assignment) | equality
    equality     := comparison (("!=" | "==") comparison)*
    comparison   := term ((">" | ">=" | "<" | "<=") term)*
    term         := factor (("-" | "+") factor)*
    factor       := unary (("/" | "*") unary)*
    unary        := ("!" | "-") unary | primary
    primary      := NUMBER | STRING | "true" | "false" | "nil"
                  | IDENTIFIER | "(" expression ")"

Parser Behavior
---------------
- Never raises on malformed input. Each problem is recorded as a `ParseError`
  and the parse carries on.
- A parsing function that cannot continue returns None; the None travels up
  to the nearest `declaration`, which drops the statement and synchronizes.
- Synchronization (panic mode) discards tokens until just after a `;`, just
  before a statement keyword (`class fun var for if while print return`), or
  at EOF.
- `1 = 2;` reports "Invalid assignment target." but still yields a statement.
- Nesting deeper than `max_depth` reports "Too much nesting." and recovers:
  an over-deep expression synchronizes like any other error, an over-deep
  block is skipped through its matching `}`.

Entry Points
------------
- `parse(tokens)`: Parse a complete token sequence.
- `Parser(tokens).parse()`: The same, with a configurable nesting limit.

Raises
------
ValueError
    If the token sequence does not end with an EOF token.
"""

from __future__ import annotations

import logging
from typing import Sequence

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Expr,
    ExpressionStatement,
    Grouping,
    Literal,
    PrintStatement,
    Stmt,
    Unary,
    VarDeclaration,
    Variable,
)
from lox.lox_constants import MAX_NESTING_DEPTH, SYNC_KEYWORDS, TokenType
from lox.lox_errors import ParseError
from lox.lox_scanner import Token

logger = logging.getLogger(__name__)


class Parser:
    """
    Lox Parser Class

    Transforms one token sequence into top-level statements plus diagnostics.
    The parser's only state is the token list, a forward cursor, the current
    nesting depth and the diagnostics collected so far; a fresh instance is
    built for every parse, so parses of independent inputs never interact.

    Attributes
    ----------
    tokens : list[Token]
        The input token stream, ending with EOF.
    position : int
        Index of the next unconsumed token. Only ever moves forward.
    depth : int
        Current nesting depth (expressions, unary operators, blocks).
    max_depth : int
        Depth at which the parser gives up with "Too much nesting.".
    diagnostics : list[ParseError]
        Syntax errors recorded so far, in source order.
    skipped_to : int
        Cursor position right after the last over-deep block was skipped.
    """

    def __init__(
        self, tokens: Sequence[Token], max_depth: int = MAX_NESTING_DEPTH
    ) -> None:
        if not tokens or tokens[-1].kind is not TokenType.EOF:
            raise ValueError("Token sequence must end with an EOF token")
        self.tokens: list[Token] = list(tokens)
        self.position: int = 0
        self.depth: int = 0
        self.max_depth: int = max_depth
        self.diagnostics: list[ParseError] = []
        self.skipped_to: int = -1

    # Cursor helpers

    def current(self) -> Token:
        return self.tokens[self.position]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def at_end(self) -> bool:
        return self.current().kind is TokenType.EOF

    def check(self, kind: TokenType) -> bool:
        return self.current().kind is kind

    def advance(self) -> Token:
        if not self.at_end():
            self.position += 1
        return self.previous()

    def match(self, *kinds: TokenType) -> Token | None:
        """Consumes and returns the current token if it is one of `kinds`."""
        if self.current().kind in kinds and not self.at_end():
            return self.advance()
        return None

    def consume(self, kind: TokenType, message: str) -> Token | None:
        """Consumes a required token, or records `message` and returns None."""
        if self.check(kind):
            return self.advance()
        self.error(self.current(), message)
        return None

    def error(self, token: Token, message: str) -> None:
        lexeme = None if token.kind is TokenType.EOF else token.lexeme
        diagnostic = ParseError(token.line, message, lexeme)
        logger.debug(f"Parse error: {diagnostic}")
        self.diagnostics.append(diagnostic)

    def enter(self) -> bool:
        """Opens one nesting level, or reports the overflow and returns False."""
        if self.depth >= self.max_depth:
            self.error(self.current(), "Too much nesting.")
            return False
        self.depth += 1
        return True

    def skip_block(self) -> None:
        """Discards an over-deep block up to and including its matching `}`."""
        open_braces = 1
        while open_braces > 0 and not self.at_end():
            token = self.advance()
            if token.kind is TokenType.LEFT_BRACE:
                open_braces += 1
            elif token.kind is TokenType.RIGHT_BRACE:
                open_braces -= 1
        self.skipped_to = self.position

    def synchronize(self, start: int) -> None:
        """Discards tokens until a plausible statement boundary.

        `start` is where the failed declaration began. If nothing was consumed
        since then, the offending token is discarded first so the parse always
        makes progress.
        """
        if self.position == start:
            self.advance()

        while not self.at_end():
            if self.previous().kind is TokenType.SEMICOLON:
                return
            if self.current().kind in SYNC_KEYWORDS:
                return
            self.advance()

    # Statements

    def parse(self) -> tuple[list[Stmt], list[ParseError]]:
        """Parse the whole token sequence into top-level statements."""
        statements: list[Stmt] = []
        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        logger.debug(
            f"Parsed {len(statements)} statements with {len(self.diagnostics)} errors"
        )
        return statements, self.diagnostics

    def parse_declaration(self) -> Stmt | None:
        start = self.position
        if self.match(TokenType.VAR):
            stmt = self.parse_var_declaration()
        else:
            stmt = self.parse_statement()

        # A skipped block already ends on a statement boundary.
        if stmt is None and not start < self.skipped_to == self.position:
            self.synchronize(start)
        return stmt

    def parse_var_declaration(self) -> VarDeclaration | None:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        if name is None:
            return None

        initializer: Expr | None = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
            if initializer is None:
                return None

        if self.consume(
            TokenType.SEMICOLON, "Expect ';' after variable declaration."
        ) is None:
            return None
        return VarDeclaration(name, initializer)

    def parse_statement(self) -> Stmt | None:
        if self.match(TokenType.PRINT):
            return self.parse_print_statement()
        if self.match(TokenType.LEFT_BRACE):
            return self.parse_block()
        return self.parse_expression_statement()

    def parse_print_statement(self) -> PrintStatement | None:
        expr = self.parse_expression()
        if expr is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after expression.") is None:
            return None
        return PrintStatement(expr)

    def parse_expression_statement(self) -> ExpressionStatement | None:
        expr = self.parse_expression()
        if expr is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after expression.") is None:
            return None
        return ExpressionStatement(expr)

    def parse_block(self) -> Block | None:
        """Parse the rest of a block whose `{` was already consumed."""
        if not self.enter():
            self.skip_block()
            return None
        try:
            statements: list[Stmt] = []
            while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
                stmt = self.parse_declaration()
                if stmt is not None:
                    statements.append(stmt)
        finally:
            self.depth -= 1

        if self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.") is None:
            return None
        return Block(tuple(statements))

    # Expressions, lowest precedence first

    def parse_expression(self) -> Expr | None:
        if not self.enter():
            return None
        try:
            return self.parse_assignment()
        finally:
            self.depth -= 1

    def parse_assignment(self) -> Expr | None:
        expr = self.parse_equality()
        if expr is None:
            return None

        equals = self.match(TokenType.EQUAL)
        if equals is None:
            return expr

        # Right-associative: `a = b = c` is `a = (b = c)`.
        value = self.parse_expression()
        if value is None:
            return None

        if isinstance(expr, Variable):
            return Assign(expr.name, value)

        self.error(equals, "Invalid assignment target.")
        return expr

    def parse_equality(self) -> Expr | None:
        expr = self.parse_comparison()
        while expr is not None:
            operator = self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
            if operator is None:
                break
            right = self.parse_comparison()
            if right is None:
                return None
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr | None:
        expr = self.parse_term()
        while expr is not None:
            operator = self.match(
                TokenType.GREATER,
                TokenType.GREATER_EQUAL,
                TokenType.LESS,
                TokenType.LESS_EQUAL,
            )
            if operator is None:
                break
            right = self.parse_term()
            if right is None:
                return None
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr | None:
        expr = self.parse_factor()
        while expr is not None:
            operator = self.match(TokenType.MINUS, TokenType.PLUS)
            if operator is None:
                break
            right = self.parse_factor()
            if right is None:
                return None
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr | None:
        expr = self.parse_unary()
        while expr is not None:
            operator = self.match(TokenType.SLASH, TokenType.STAR)
            if operator is None:
                break
            right = self.parse_unary()
            if right is None:
                return None
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr | None:
        operator = self.match(TokenType.BANG, TokenType.MINUS)
        if operator is None:
            return self.parse_primary()

        if not self.enter():
            return None
        try:
            operand = self.parse_unary()
        finally:
            self.depth -= 1

        if operand is None:
            return None
        return Unary(operator, operand)

    def parse_primary(self) -> Expr | None:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)

        literal = self.match(TokenType.NUMBER, TokenType.STRING)
        if literal is not None:
            return Literal(literal.literal)

        name = self.match(TokenType.IDENTIFIER)
        if name is not None:
            return Variable(name)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            if expr is None:
                return None
            if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.") is None:
                return None
            return Grouping(expr)

        self.error(self.current(), "Expect expression.")
        return None


def parse(
    tokens: Sequence[Token], max_depth: int = MAX_NESTING_DEPTH
) -> tuple[list[Stmt], list[ParseError]]:
    """Parse a token sequence produced by `scan`.

    Args:
        tokens (Sequence[Token]): Tokens ending with exactly one EOF token.
        max_depth (int): Nesting limit, see `Parser`.

    Returns:
        tuple[list[Stmt], list[ParseError]]: The program's top-level
        statements in source order, and every syntax error found.

    Raises:
        ValueError: If `tokens` does not end with an EOF token.
    """
    return Parser(tokens, max_depth=max_depth).parse()


__all__ = ["Parser", "parse"]
