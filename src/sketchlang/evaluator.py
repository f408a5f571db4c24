"""Sketchlang evaluator: walks the AST against an environment.

Evaluation never raises for script errors. Failures become `Error`
objects that every step checks for and passes straight up, and
`ReturnValue` and `Break` travel the same way until the function call or
loop that consumes them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

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
    PostfixExpression,
    PrefixExpression,
    Program,
    RealLiteral,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .builtins import Output, arity_error, builtin_table
from .config import InterpreterConfig
from .emit import to_source
from .environment import DECLARED_TYPES, Environment
from .objects import (
    BREAK,
    COERCIBLE_TYPES,
    FALSE,
    NULL,
    NUMERIC_TYPES,
    TRUE,
    Array,
    Boolean,
    Break,
    Character,
    Class,
    Error,
    Function,
    Hash,
    HashableObject,
    HashKey,
    HashPair,
    HostFunction,
    Integer,
    Null,
    Object,
    RealNumber,
    ReturnValue,
    String,
    f32_div,
    native_bool,
    numeric_value,
)

if TYPE_CHECKING:
    from .libraries import LibraryProvider

logger = logging.getLogger(__name__)


def is_truthy(obj: Object) -> bool:
    """Only null and false are falsy; 0 is truthy."""
    if isinstance(obj, Null):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


class Evaluator:
    """Tree-walking evaluator with a per-session builtin table."""

    def __init__(self, config: InterpreterConfig | None = None, output: Output | None = None):
        self.config = config if config is not None else InterpreterConfig()
        self.builtins: dict[str, Object] = builtin_table(output)
        self.classes: dict[str, HostFunction] = {}
        self.libraries: list[LibraryProvider] = []

    def add_library(self, provider: LibraryProvider) -> None:
        self.builtins.update(provider.fields)
        self.classes.update(provider.header)
        self.libraries.append(provider)

    def evaluate(self, program: Program, env: Environment) -> Object:
        """Evaluate a whole program; unbounded recursion becomes an Error."""
        try:
            return self.eval(program, env)
        except RecursionError:
            logger.debug("recursion limit hit")
            return Error("stack overflow: maximum recursion depth exceeded")

    def eval(self, node: Node, env: Environment) -> Object:
        if isinstance(node, Program):
            return self._eval_program(node, env)
        if isinstance(node, Statement):
            return self._eval_stmt(node, env)
        if isinstance(node, Expression):
            return self._eval_expr(node, env)
        return Error("cannot evaluate node: " + type(node).__name__)

    # ── Statements ──────────────────────────────────────────

    def _eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = NULL
        for stmt in program.statements:
            result = self._eval_stmt(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Error):
                return result
        return result

    def _eval_block(self, block: BlockStatement, env: Environment) -> Object:
        result: Object = NULL
        for stmt in block.statements:
            result = self._eval_stmt(stmt, env)
            if isinstance(result, (ReturnValue, Error, Break)):
                return result
        return result

    def _eval_stmt(self, stmt: Statement, env: Environment) -> Object:
        if isinstance(stmt, ExpressionStatement):
            return self._eval_expr(stmt.expression, env)
        if isinstance(stmt, InitStatement):
            value = self._eval_expr(stmt.value, env)
            if isinstance(value, Error):
                return value
            return env.declare(stmt.name, value, DECLARED_TYPES[stmt.type_kind])
        if isinstance(stmt, AssignStatement):
            return self._eval_assign(stmt, env)
        if isinstance(stmt, ReturnStatement):
            if stmt.value is None:
                return ReturnValue(NULL)
            value = self._eval_expr(stmt.value, env)
            if isinstance(value, Error):
                return value
            return ReturnValue(value)
        if isinstance(stmt, BreakStatement):
            return BREAK
        if isinstance(stmt, BlockStatement):
            return self._eval_block(stmt, env)
        return Error("cannot evaluate statement: " + type(stmt).__name__)

    def _eval_assign(self, stmt: AssignStatement, env: Environment) -> Object:
        value = self._eval_expr(stmt.value, env)
        if isinstance(value, Error):
            return value
        if stmt.operator != "=":
            current = env.get(stmt.name)
            if isinstance(current, Error):
                return current
            op = stmt.operator[:-1]
            if isinstance(current, COERCIBLE_TYPES) and isinstance(value, COERCIBLE_TYPES):
                value = self._eval_numeric_infix(op, current, value)
            else:
                value = self._eval_infix(op, current, value)
            if isinstance(value, Error):
                return value
        return env.set(stmt.name, value)

    # ── Expressions ─────────────────────────────────────────

    def _eval_expr(self, expr: Expression, env: Environment) -> Object:
        if isinstance(expr, IntegerLiteral):
            return Integer(expr.value)
        if isinstance(expr, RealLiteral):
            return RealNumber(expr.value)
        if isinstance(expr, CharLiteral):
            return Character(expr.value)
        if isinstance(expr, StringLiteral):
            return String(expr.value)
        if isinstance(expr, BooleanLiteral):
            return native_bool(expr.value)
        if isinstance(expr, Identifier):
            return self._eval_identifier(expr, env)
        if isinstance(expr, PrefixExpression):
            right = self._eval_expr(expr.right, env)
            if isinstance(right, Error):
                return right
            return self._eval_prefix(expr, right, env)
        if isinstance(expr, PostfixExpression):
            left = self._eval_expr(expr.left, env)
            if isinstance(left, Error):
                return left
            return self._eval_postfix(expr, left, env)
        if isinstance(expr, InfixExpression):
            return self._eval_infix_expression(expr, env)
        if isinstance(expr, IfExpression):
            return self._eval_if(expr, env)
        if isinstance(expr, IterationExpression):
            return self._eval_iteration(expr, env)
        if isinstance(expr, FunctionLiteral):
            return Function(
                expr.name,
                expr.parameters,
                expr.body,
                env,
                DECLARED_TYPES[expr.return_kind],
                expr.return_type_name,
            )
        if isinstance(expr, CallExpression):
            fn = self._eval_expr(expr.function, env)
            if isinstance(fn, Error):
                return fn
            args = self._eval_expressions(expr.arguments, env)
            if isinstance(args, Error):
                return args
            return self.apply_function(fn, args)
        if isinstance(expr, ArrayLiteral):
            elements = self._eval_expressions(expr.elements, env)
            if isinstance(elements, Error):
                return elements
            return Array(elements)
        if isinstance(expr, IndexExpression):
            left = self._eval_expr(expr.left, env)
            if isinstance(left, Error):
                return left
            index = self._eval_expr(expr.index, env)
            if isinstance(index, Error):
                return index
            return self._eval_index(left, index)
        if isinstance(expr, HashLiteral):
            return self._eval_hash_literal(expr, env)
        return Error("cannot evaluate expression: " + type(expr).__name__)

    def _eval_expressions(
        self, exprs: tuple[Expression, ...], env: Environment
    ) -> list[Object] | Error:
        result: list[Object] = []
        for e in exprs:
            value = self._eval_expr(e, env)
            if isinstance(value, Error):
                return value
            result.append(value)
        return result

    def _eval_identifier(self, ident: Identifier, env: Environment) -> Object:
        name = ident.value
        if env.is_bound(name):
            return env.get(name)
        builtin = self.builtins.get(name)
        if builtin is not None:
            return builtin
        constructor = self.classes.get(name)
        if constructor is not None:
            return constructor
        return Error(f"identifier not found: {name}")

    # ── Operators ───────────────────────────────────────────

    def _eval_prefix(self, expr: PrefixExpression, right: Object, env: Environment) -> Object:
        op = expr.operator
        if op == "!":
            if isinstance(right, Boolean):
                return native_bool(not right.value)
            if isinstance(right, Null):
                return TRUE
            return FALSE
        if op == "-":
            if not isinstance(right, COERCIBLE_TYPES):
                return Error(f"unknown operator: -{right.object_type()}")
            return RealNumber(-numeric_value(right))
        if op in ("++", "--"):
            if not isinstance(right, COERCIBLE_TYPES) or not isinstance(expr.right, Identifier):
                return Error(f"unknown operator: {op}{right.object_type()}")
            step = 1.0 if op == "++" else -1.0
            return env.set(expr.right.value, RealNumber(numeric_value(right) + step))
        return Error(f"unknown operator: {op}{right.object_type()}")

    def _eval_postfix(self, expr: PostfixExpression, left: Object, env: Environment) -> Object:
        op = expr.operator
        if op not in ("++", "--"):
            return Error(f"unknown operator: {op}{left.object_type()}")
        if not isinstance(left, COERCIBLE_TYPES) or not isinstance(expr.left, Identifier):
            return Error(f"unknown operator: {op}{left.object_type()}")
        step = 1.0 if op == "++" else -1.0
        updated = env.set(expr.left.value, RealNumber(numeric_value(left) + step))
        if isinstance(updated, Error):
            return updated
        return left

    def _eval_infix_expression(self, expr: InfixExpression, env: Environment) -> Object:
        left = self._eval_expr(expr.left, env)
        if isinstance(left, Error):
            return left
        if expr.operator == "." or isinstance(left, Class):
            return self._eval_member(left, expr)
        right = self._eval_expr(expr.right, env)
        if isinstance(right, Error):
            return right
        return self._eval_infix(expr.operator, left, right)

    def _eval_member(self, left: Object, expr: InfixExpression) -> Object:
        if (
            not isinstance(left, Class)
            or expr.operator != "."
            or not isinstance(expr.right, Identifier)
        ):
            right = to_source(expr.right)
            return Error(f"unknown operator: {left.object_type()} {expr.operator} {right}")
        return left.env.get(expr.right.value)

    def _eval_infix(self, op: str, left: Object, right: Object) -> Object:
        if isinstance(left, NUMERIC_TYPES) and isinstance(right, NUMERIC_TYPES):
            return self._eval_numeric_infix(op, left, right)
        if isinstance(left, String) and isinstance(right, String):
            if op == "+":
                return String(left.value + right.value)
            return Error(f"unknown operator: {left.object_type()} {op} {right.object_type()}")
        if op == "==":
            return native_bool(left == right)
        if op == "!=":
            return native_bool(left != right)
        if left.object_type() != right.object_type():
            return Error(f"type mismatch: {left.object_type()} {op} {right.object_type()}")
        return Error(f"unknown operator: {left.object_type()} {op} {right.object_type()}")

    def _eval_numeric_infix(self, op: str, left: Object, right: Object) -> Object:
        a = numeric_value(left)
        b = numeric_value(right)
        if op == "+":
            return RealNumber(a + b)
        if op == "-":
            return RealNumber(a - b)
        if op == "*":
            return RealNumber(a * b)
        if op == "/":
            return RealNumber(f32_div(a, b))
        if op == "<":
            return native_bool(a < b)
        if op == ">":
            return native_bool(a > b)
        if op == "==":
            return native_bool(a == b)
        if op == "!=":
            return native_bool(a != b)
        return Error(f"unknown operator: {left.object_type()} {op} {right.object_type()}")

    # ── Control flow ────────────────────────────────────────

    def _eval_if(self, expr: IfExpression, outer: Environment) -> Object:
        env = Environment(outer)
        condition = self._eval_expr(expr.condition, env)
        if isinstance(condition, Error):
            return condition
        if is_truthy(condition):
            return self._eval_block(expr.consequence, env)
        if expr.alternative is not None:
            return self._eval_block(expr.alternative, env)
        return NULL

    def _eval_iteration(self, expr: IterationExpression, outer: Environment) -> Object:
        env = Environment(outer)
        if expr.init is not None:
            init = self._eval_stmt(expr.init, env)
            if isinstance(init, Error):
                return init
        condition = self._eval_condition(expr, env)
        if isinstance(condition, Error):
            return condition
        count = 0
        while is_truthy(condition):
            count += 1
            if count > self.config.max_iterations:
                logger.debug("%s loop stopped after %d iterations", expr.keyword, count - 1)
                return Error(
                    f"stack overflow: loop exceeded {self.config.max_iterations} iterations"
                )
            if expr.step is not None:
                step = self._eval_expr(expr.step, env)
                if isinstance(step, Error):
                    return step
            result = self._eval_block(expr.body, Environment(env))
            if isinstance(result, (Error, ReturnValue)):
                return result
            if isinstance(result, Break):
                break
            condition = self._eval_condition(expr, env)
            if isinstance(condition, Error):
                return condition
        return NULL

    def _eval_condition(self, expr: IterationExpression, env: Environment) -> Object:
        if expr.condition is None:
            return TRUE
        return self._eval_expr(expr.condition, env)

    # ── Calls ───────────────────────────────────────────────

    def apply_function(self, fn: Object, args: list[Object]) -> Object:
        if isinstance(fn, Function):
            if len(args) != len(fn.parameters):
                return arity_error(len(args), len(fn.parameters))
            env = Environment(fn.env)
            for param, arg in zip(fn.parameters, args):
                bound = env.declare(param.name, arg, DECLARED_TYPES[param.type_kind])
                if isinstance(bound, Error):
                    return bound
            result = self._eval_block(fn.body, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, Break):
                return NULL
            return result
        if isinstance(fn, HostFunction):
            logger.debug("calling host function %s with %d args", fn.name, len(args))
            return fn.fn(args)
        return Error(f"not a function: {fn.object_type()}")

    # ── Collections ─────────────────────────────────────────

    def _eval_index(self, left: Object, index: Object) -> Object:
        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if i < 0 or i >= len(left.elements):
                return NULL
            return left.elements[i]
        if isinstance(left, Hash):
            if not isinstance(index, HashableObject):
                return Error(f"unusable as hash key: {index.object_type()}")
            pair = left.pairs.get(index.hash_key())
            return NULL if pair is None else pair.value
        return Error(f"index operator not supported: {left.object_type()}")

    def _eval_hash_literal(self, expr: HashLiteral, env: Environment) -> Object:
        pairs: dict[HashKey, HashPair] = {}
        for key_expr, value_expr in expr.pairs:
            key = self._eval_expr(key_expr, env)
            if isinstance(key, Error):
                return key
            if not isinstance(key, HashableObject):
                return Error(f"unusable as hash key: {key.object_type()}")
            value = self._eval_expr(value_expr, env)
            if isinstance(value, Error):
                return value
            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)
