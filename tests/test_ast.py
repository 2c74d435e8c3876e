import json

import hypothesis.strategies as st
import pytest
from hypothesis import given

from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    ExpressionStatement,
    Grouping,
    Literal,
    PrintStatement,
    Unary,
    VarDeclaration,
    Variable,
    to_dict,
)
from lox.lox_constants import TokenType
from lox.lox_parser import parse
from lox.lox_scanner import Token, scan

PLUS = Token(TokenType.PLUS, "+", None, 1)
MINUS = Token(TokenType.MINUS, "-", None, 1)
NAME = Token(TokenType.IDENTIFIER, "x", None, 2)


def test_kind_tags() -> None:
    assert Literal(1.0).kind == "literal"
    assert Grouping(Literal(1.0)).kind == "grouping"
    assert Unary(MINUS, Literal(1.0)).kind == "unary"
    assert Binary(Literal(1.0), PLUS, Literal(2.0)).kind == "binary"
    assert Variable(NAME).kind == "variable"
    assert Assign(NAME, Literal(1.0)).kind == "assign"
    assert ExpressionStatement(Literal(1.0)).kind == "expression"
    assert PrintStatement(Literal(1.0)).kind == "print"
    assert VarDeclaration(NAME).kind == "var"
    assert Block().kind == "block"


def test_kind_is_not_a_field() -> None:
    assert Literal(1.0) == Literal(1.0)
    assert "kind" not in repr(Literal(1.0))


def test_structural_equality() -> None:
    left = Binary(Literal(1.0), PLUS, Grouping(Variable(NAME)))
    right = Binary(Literal(1.0), PLUS, Grouping(Variable(NAME)))
    assert left == right
    assert left != Binary(Literal(1.0), MINUS, Grouping(Variable(NAME)))


def test_literal_equality_compares_value_types() -> None:
    assert Literal(True) != Literal(1.0)
    assert Literal(False) != Literal(0.0)
    assert Literal(1.0) == Literal(1.0)
    assert len({Literal(True), Literal(1.0), Literal(False), Literal(0.0)}) == 4
    assert PrintStatement(Literal(True)) != PrintStatement(Literal(1.0))


def test_nodes_are_hashable() -> None:
    node = Block((PrintStatement(Literal("a")), VarDeclaration(NAME, Literal(None))))
    assert node in {node}


def test_to_dict_literal() -> None:
    assert to_dict(Literal("hi")) == {"kind": "literal", "value": "hi"}


def test_to_dict_binary() -> None:
    d = to_dict(Binary(Literal(1.0), PLUS, Unary(MINUS, Literal(2.0))))
    assert d["kind"] == "binary"
    assert d["operator"] == {"type": "PLUS", "lexeme": "+", "line": 1}
    assert d["left"] == {"kind": "literal", "value": 1.0}
    assert d["right"]["kind"] == "unary"
    assert d["right"]["operand"]["value"] == 2.0


def test_to_dict_statements() -> None:
    program = [
        VarDeclaration(NAME),
        ExpressionStatement(Assign(NAME, Grouping(Literal(True)))),
        Block((PrintStatement(Variable(NAME)),)),
    ]
    dumped = to_dict(program)
    assert [d["kind"] for d in dumped] == ["var", "expression", "block"]
    assert dumped[0]["initializer"] is None
    assert dumped[0]["name"]["lexeme"] == "x"
    assert dumped[1]["expr"]["value"]["inner"] == {"kind": "literal", "value": True}
    assert dumped[2]["statements"][0]["expr"]["name"]["line"] == 2


def test_to_dict_is_json_serializable() -> None:
    tokens, _ = scan('var a = "s"; { a = !(1 >= 2) == nil; print a; }')
    statements, errors = parse(tokens)
    assert errors == []
    text = json.dumps(to_dict(statements))
    assert json.loads(text)[1]["kind"] == "block"


def test_to_dict_rejects_non_nodes() -> None:
    with pytest.raises(TypeError, match="Not an AST node"):
        to_dict(NAME)  # type: ignore[arg-type]


@given(st.one_of(st.floats(allow_nan=False), st.text(), st.booleans(), st.none()))  # type: ignore[misc]
def test_literal_to_dict_keeps_value(value: float | str | bool | None) -> None:
    assert to_dict(Literal(value)) == {"kind": "literal", "value": value}


@given(st.text(min_size=1), st.text(min_size=1))  # type: ignore[misc]
def test_variables_compare_by_token(a: str, b: str) -> None:
    first = Variable(Token(TokenType.IDENTIFIER, a))
    second = Variable(Token(TokenType.IDENTIFIER, b))
    assert (first == second) == (a == b)
