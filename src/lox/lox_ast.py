"""
Defines the abstract syntax tree (AST) node variants for the Lox language.

The tree is a closed set of immutable variants rather than an open class
hierarchy. Every variant is a frozen dataclass with a class-level `kind` tag,
so consumers can either switch on `node.kind` or use structural pattern
matching:

    match node:
        case Binary(left, op, right): ...
        case Literal(value): ...

Expression variants:
    Literal(value): number (float), string, boolean or nil (None).
    Grouping(inner): A parenthesized sub-expression.
    Unary(operator, operand): `-` or `!` applied to an operand.
    Binary(left, operator, right): A left-leaning binary operation.
    Variable(name): An identifier reference.
    Assign(name, value): Assignment to a named variable.

Statement variants:
    ExpressionStatement(expr)
    PrintStatement(expr)
    VarDeclaration(name, initializer)
    Block(statements)

Tokens held by nodes (operators, names) are kept for diagnostics: their line
and lexeme.

Functions:
    to_dict(node): Convert a node, or a sequence of nodes, into plain
        dictionaries suitable for JSON output or debugging.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Sequence, TypedDict, Union

from lox.lox_scanner import Token


class TokenDict(TypedDict):
    type: str
    lexeme: str
    line: int


class ASTDict(TypedDict, total=False):
    """
    Serialized form of an AST node.

    Only `kind` is always present; the remaining keys depend on the variant.

    Fields:
        kind (str): The variant tag (e.g. "binary", "print").
        value (Any): Literal value, or the assigned expression for "assign".
        name (TokenDict): Variable name for "variable", "assign" and "var".
        operator (TokenDict): Operator token for "unary" and "binary".
        left (ASTDict): Left operand of "binary".
        right (ASTDict): Right operand of "binary".
        operand (ASTDict): Operand of "unary".
        inner (ASTDict): Wrapped expression of "grouping".
        expr (ASTDict): Expression of "expression" and "print" statements.
        initializer (ASTDict | None): Initializer of "var".
        statements (list[ASTDict]): Body of "block".
    """

    kind: str
    value: Any
    name: TokenDict
    operator: TokenDict
    left: "ASTDict"
    right: "ASTDict"
    operand: "ASTDict"
    inner: "ASTDict"
    expr: "ASTDict"
    initializer: Union["ASTDict", None]
    statements: list["ASTDict"]


# Expressions


@dataclass(frozen=True, eq=False)
class Literal:
    value: float | str | bool | None
    kind: ClassVar[str] = "literal"

    # `True == 1.0` in Python, but `true` and `1` are different Lox literals.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Literal):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


@dataclass(frozen=True)
class Grouping:
    inner: "Expr"
    kind: ClassVar[str] = "grouping"


@dataclass(frozen=True)
class Unary:
    operator: Token
    operand: "Expr"
    kind: ClassVar[str] = "unary"


@dataclass(frozen=True)
class Binary:
    left: "Expr"
    operator: Token
    right: "Expr"
    kind: ClassVar[str] = "binary"


@dataclass(frozen=True)
class Variable:
    name: Token
    kind: ClassVar[str] = "variable"


@dataclass(frozen=True)
class Assign:
    name: Token
    value: "Expr"
    kind: ClassVar[str] = "assign"


Expr = Union[Literal, Grouping, Unary, Binary, Variable, Assign]


# Statements


@dataclass(frozen=True)
class ExpressionStatement:
    expr: Expr
    kind: ClassVar[str] = "expression"


@dataclass(frozen=True)
class PrintStatement:
    expr: Expr
    kind: ClassVar[str] = "print"


@dataclass(frozen=True)
class VarDeclaration:
    name: Token
    initializer: Expr | None = None
    kind: ClassVar[str] = "var"


@dataclass(frozen=True)
class Block:
    statements: tuple["Stmt", ...] = ()
    kind: ClassVar[str] = "block"


Stmt = Union[ExpressionStatement, PrintStatement, VarDeclaration, Block]

Node = Union[Expr, Stmt]


def token_to_dict(token: Token) -> TokenDict:
    return {"type": token.kind.name, "lexeme": token.lexeme, "line": token.line}


def to_dict(node: Node | Sequence[Node]) -> Any:
    """Convert a node (and all its descendants) into nested dictionaries.

    A list or tuple of nodes, such as a parsed program, becomes a list of
    dictionaries.

    Raises:
        TypeError: If `node` is not one of the AST variants.
    """
    if isinstance(node, (list, tuple)):
        return [to_dict(n) for n in node]

    match node:
        case Literal(value):
            return ASTDict(kind=node.kind, value=value)
        case Grouping(inner):
            return ASTDict(kind=node.kind, inner=to_dict(inner))
        case Unary(operator, operand):
            return ASTDict(
                kind=node.kind,
                operator=token_to_dict(operator),
                operand=to_dict(operand),
            )
        case Binary(left, operator, right):
            return ASTDict(
                kind=node.kind,
                left=to_dict(left),
                operator=token_to_dict(operator),
                right=to_dict(right),
            )
        case Variable(name):
            return ASTDict(kind=node.kind, name=token_to_dict(name))
        case Assign(name, value):
            return ASTDict(
                kind=node.kind, name=token_to_dict(name), value=to_dict(value)
            )
        case ExpressionStatement(expr) | PrintStatement(expr):
            return ASTDict(kind=node.kind, expr=to_dict(expr))
        case VarDeclaration(name, initializer):
            return ASTDict(
                kind=node.kind,
                name=token_to_dict(name),
                initializer=None if initializer is None else to_dict(initializer),
            )
        case Block(statements):
            return ASTDict(kind=node.kind, statements=to_dict(statements))

    raise TypeError(f"Not an AST node: {node!r}")


__all__ = [
    "ASTDict",
    "Assign",
    "Binary",
    "Block",
    "Expr",
    "ExpressionStatement",
    "Grouping",
    "Literal",
    "Node",
    "PrintStatement",
    "Stmt",
    "Unary",
    "VarDeclaration",
    "Variable",
    "to_dict",
]
