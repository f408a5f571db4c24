"""Sketchlang emitter: renders AST nodes as canonical one-line source.

Expressions come out fully parenthesized, so the printed form shows how
the parser grouped them. If a node type is added to `ast.py`, this
emitter should be updated alongside it.
"""

from __future__ import annotations

from .ast import (
    ArrayLiteral,
    AssignStatement,
    BlockStatement,
    BooleanLiteral,
    BreakStatement,
    CallExpression,
    CharLiteral,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    InitStatement,
    IntegerLiteral,
    IterationExpression,
    Node,
    Parameter,
    PostfixExpression,
    PrefixExpression,
    Program,
    RealLiteral,
    ReturnStatement,
    Statement,
    StringLiteral,
)


def to_source(node: Node) -> str:
    """Render any AST node back into source text."""
    return _Emitter().render(node)


class _Emitter:
    # ── Public ──────────────────────────────────────────────

    def render(self, node: Node) -> str:
        if isinstance(node, Program):
            return " ".join(self._render_stmt(s) for s in node.statements)
        if isinstance(node, Statement):
            return self._render_stmt(node)
        if isinstance(node, Expression):
            return self._render_expr(node)
        raise TypeError("unhandled node type: " + type(node).__name__)

    # ── Statements ──────────────────────────────────────────

    def _render_stmt(self, stmt: Statement) -> str:
        if isinstance(stmt, InitStatement):
            if isinstance(stmt.value, FunctionLiteral):
                return self._render_function(stmt.value)
            return f"{stmt.type_name} {stmt.name} = {self._render_expr(stmt.value)};"
        if isinstance(stmt, AssignStatement):
            return f"{stmt.name} {stmt.operator} {self._render_expr(stmt.value)};"
        if isinstance(stmt, ReturnStatement):
            if stmt.value is None:
                return "return;"
            return f"return {self._render_expr(stmt.value)};"
        if isinstance(stmt, BreakStatement):
            return "break;"
        if isinstance(stmt, ExpressionStatement):
            return self._render_expr(stmt.expression)
        if isinstance(stmt, BlockStatement):
            return self._render_block(stmt)
        raise TypeError("unhandled statement type: " + type(stmt).__name__)

    def _render_block(self, block: BlockStatement) -> str:
        if not block.statements:
            return "{ }"
        inner = " ".join(self._render_stmt(s) for s in block.statements)
        return "{ " + inner + " }"

    def _render_function(self, fn: FunctionLiteral) -> str:
        params = ", ".join(self._render_param(p) for p in fn.parameters)
        return f"{fn.return_type_name} {fn.name}({params}) {self._render_block(fn.body)}"

    def _render_param(self, param: Parameter) -> str:
        return f"{param.type_name} {param.name}"

    # ── Expressions ─────────────────────────────────────────

    def _render_expr(self, expr: Expression) -> str:
        if isinstance(expr, Identifier):
            return expr.value
        if isinstance(expr, IntegerLiteral):
            return str(expr.value)
        if isinstance(expr, RealLiteral):
            return expr.literal
        if isinstance(expr, CharLiteral):
            return "'" + expr.value + "'"
        if isinstance(expr, StringLiteral):
            return '"' + expr.value + '"'
        if isinstance(expr, BooleanLiteral):
            return "true" if expr.value else "false"
        if isinstance(expr, PrefixExpression):
            return f"({expr.operator}{self._render_expr(expr.right)})"
        if isinstance(expr, InfixExpression):
            left = self._render_expr(expr.left)
            right = self._render_expr(expr.right)
            return f"({left} {expr.operator} {right})"
        if isinstance(expr, PostfixExpression):
            return f"({self._render_expr(expr.left)}{expr.operator})"
        if isinstance(expr, IndexExpression):
            return f"({self._render_expr(expr.left)}[{self._render_expr(expr.index)}])"
        if isinstance(expr, CallExpression):
            args = ", ".join(self._render_expr(a) for a in expr.arguments)
            return f"{self._render_expr(expr.function)}({args})"
        if isinstance(expr, ArrayLiteral):
            return "[" + ", ".join(self._render_expr(e) for e in expr.elements) + "]"
        if isinstance(expr, HashLiteral):
            pairs = [
                self._render_expr(k) + ":" + self._render_expr(v) for k, v in expr.pairs
            ]
            return "{" + ", ".join(pairs) + "}"
        if isinstance(expr, IfExpression):
            text = f"if ({self._render_expr(expr.condition)}) "
            text += self._render_block(expr.consequence)
            if expr.alternative is not None:
                text += " else " + self._render_block(expr.alternative)
            return text
        if isinstance(expr, IterationExpression):
            return self._render_iteration(expr)
        if isinstance(expr, FunctionLiteral):
            return self._render_function(expr)
        raise TypeError("unhandled expression type: " + type(expr).__name__)

    def _render_iteration(self, expr: IterationExpression) -> str:
        body = self._render_block(expr.body)
        cond = "" if expr.condition is None else self._render_expr(expr.condition)
        if expr.keyword == "while":
            return f"while ({cond}) {body}"
        if expr.init is None:
            init = ";"
        else:
            init = self._render_stmt(expr.init)
            if not init.endswith(";"):
                init += ";"
        step = "" if expr.step is None else self._render_expr(expr.step)
        return f"for ({init} {cond}; {step}) {body}"
