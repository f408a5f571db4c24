"""Sketchlang AST: immutable node definitions produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass


# ============================================================
# BASES
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all nodes."""


@dataclass(frozen=True)
class Statement(Node):
    """Base for statement nodes."""


@dataclass(frozen=True)
class Expression(Node):
    """Base for expression nodes."""


# ============================================================
# PROGRAM
# ============================================================


@dataclass(frozen=True)
class Program(Node):
    statements: tuple[Statement, ...]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class InitStatement(Statement):
    """Typed declaration: `int x = 5;` or `int add(int a) { ... }`.

    type_kind is the declaration keyword's token kind (INT, CLASS, ...);
    type_name keeps the spelling, which differs from the keyword for
    linked class names.
    """

    type_kind: str
    type_name: str
    name: str
    value: Expression


@dataclass(frozen=True)
class AssignStatement(Statement):
    """`x = v;` or a compound form such as `x += v;`."""

    name: str
    operator: str
    value: Expression


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Expression | None


@dataclass(frozen=True)
class BreakStatement(Statement):
    pass


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: tuple[Statement, ...]


# ============================================================
# LITERALS
# ============================================================


@dataclass(frozen=True)
class Identifier(Expression):
    value: str


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int


@dataclass(frozen=True)
class RealLiteral(Expression):
    value: float
    literal: str


@dataclass(frozen=True)
class CharLiteral(Expression):
    value: str


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: tuple[Expression, ...]


@dataclass(frozen=True)
class HashLiteral(Expression):
    """Key/value expression pairs in source order."""

    pairs: tuple[tuple[Expression, Expression], ...]


# ============================================================
# OPERATORS
# ============================================================


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str
    right: Expression


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class PostfixExpression(Expression):
    left: Expression
    operator: str


@dataclass(frozen=True)
class IndexExpression(Expression):
    left: Expression
    index: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Expression
    arguments: tuple[Expression, ...]


# ============================================================
# CONTROL FLOW
# ============================================================


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None


@dataclass(frozen=True)
class IterationExpression(Expression):
    """`for` and `while` loops; `while` leaves init and step empty."""

    keyword: str
    init: Statement | None
    condition: Expression | None
    step: Expression | None
    body: BlockStatement


# ============================================================
# FUNCTIONS
# ============================================================


@dataclass(frozen=True)
class Parameter:
    name: str
    type_kind: str
    type_name: str


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    name: str
    return_kind: str
    return_type_name: str
    parameters: tuple[Parameter, ...]
    body: BlockStatement
