"""
Lox syntax-check CLI.

This module provides a command-line front end over the scanner and parser. It
never evaluates code; it reports every lexical and syntax error in a source
file and can dump the intermediate products.

Features:
    - Read source from a file or an inline string.
    - Scan and parse, printing diagnostics to stderr.
    - Dump the token stream (`--tokens`) or the AST as JSON (`--ast`).
    - Enable debug logging from the scanner and parser (`--verbose`).

Exit codes:
    0   Source is free of lexical and syntax errors.
    64  Usage error (no source given).
    65  At least one diagnostic was reported, or the AST could not be dumped.
    66  The source file could not be read.

Example usage:
    lox hello.lox
    lox -s "print 1 + 2;" --ast
    lox broken.lox --tokens --verbose

Functions:
    check_source(source: str) -> tuple[list[Token], list[Stmt], list[Diagnostic]]:
        Scan and parse a buffer, returning tokens, statements and all diagnostics.

    run_lox(source: str, is_string: bool = False, tokens: bool = False, ast: bool = False) -> int:
        Executes the check pipeline and returns the process exit code.

    main(argv: list[str] | None = None) -> None:
        Parses CLI arguments and exits with the code from `run_lox`.
"""

import argparse
import json
import logging
import sys

from lox.lox_ast import Stmt, to_dict
from lox.lox_errors import Diagnostic
from lox.lox_parser import parse
from lox.lox_scanner import Token, scan

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66


def check_source(source: str) -> tuple[list[Token], list[Stmt], list[Diagnostic]]:
    """Scan and parse `source`, collecting lexical errors before syntax errors."""
    tokens, lex_errors = scan(source)
    statements, parse_errors = parse(tokens)
    diagnostics: list[Diagnostic] = [*lex_errors, *parse_errors]
    return tokens, statements, diagnostics


def format_token(token: Token) -> str:
    text = f"{token.line:>4}  {token.kind.name:<14} {token.lexeme!r}"
    if token.literal is not None:
        text += f" {token.literal!r}"
    return text


def run_lox(
    source: str,
    is_string: bool = False,
    tokens: bool = False,
    ast: bool = False,
) -> int:
    """
    Run the Lox front end over a file or string and report the outcome.

    Args:
        source (str): Path to a source file, or raw code when `is_string` is set.
        is_string (bool): Treat `source` as code instead of a path. Defaults to False.
        tokens (bool): Print the scanned tokens to stdout. Defaults to False.
        ast (bool): Print the parsed program as JSON to stdout. Defaults to False.

    Returns:
        int: EX_OK, EX_DATAERR when any diagnostic was reported or the AST
        could not be dumped, or EX_NOINPUT when the file could not be read.
    """
    # 1. Read source
    if not is_string:
        try:
            with open(source, encoding="utf-8") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: {e}", file=sys.stderr)
            return EX_NOINPUT

    # 2. Scan and parse
    scanned, statements, diagnostics = check_source(source)

    # 3. Optional dumps
    dump_failed = False
    if tokens:
        for tok in scanned:
            print(format_token(tok))
    if ast:
        try:
            print(json.dumps(to_dict(statements), indent=2, allow_nan=False))
        except ValueError:
            print(
                "error: AST contains a number literal outside the float range",
                file=sys.stderr,
            )
            dump_failed = True

    # 4. Diagnostics
    for diagnostic in diagnostics:
        print(diagnostic, file=sys.stderr)

    return EX_DATAERR if diagnostics or dump_failed else EX_OK


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the Lox CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Dump the token stream.
        - `--ast`: Dump the syntax tree as JSON.
        - `--verbose`: Log scanner and parser activity at DEBUG level.
    """
    parser = argparse.ArgumentParser(
        prog="lox", description="Check Lox source for lexical and syntax errors."
    )
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument("--tokens", action="store_true", help="Print scanned tokens")
    parser.add_argument("--ast", action="store_true", help="Print the AST as JSON")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    if args.source is None:
        parser.print_usage(sys.stderr)
        sys.exit(EX_USAGE)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )

    sys.exit(
        run_lox(
            source=args.source,
            is_string=args.string,
            tokens=args.tokens,
            ast=args.ast,
        )
    )


if __name__ == "__main__":
    main()
