"""Sketchlang parser: Pratt parsing over a streaming lexer.

Parse failures never raise. Each one appends a message to `Parser.errors`
and yields None for the node being built; the enclosing rule drops it and
parsing resumes with the next statement.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

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
    Parameter,
    PostfixExpression,
    PrefixExpression,
    Program,
    RealLiteral,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .errors import ParseError
from .lexer import Lexer
from .objects import INT64_MAX
from .tokens import (
    ASSIGN,
    ASTERISK,
    BANG,
    BREAK,
    CHARACTER,
    CLASS,
    COLON,
    COMMA,
    DECLARATION_KINDS,
    DECREMENT,
    DOT,
    ELSE,
    EOF,
    EQ,
    FALSE,
    FOR,
    GT,
    IDENT,
    IF,
    INCLUDE,
    INCREMENT,
    INTEGER,
    LBRACE,
    LBRACKET,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    REAL_NUMBER,
    RBRACE,
    RBRACKET,
    RETURN,
    RPAREN,
    SEMICOLON,
    SHARP,
    SLASH,
    STRING,
    TRUE,
    WHILE,
    Keywords,
    Token,
)

if TYPE_CHECKING:
    from .linker import Linker

logger = logging.getLogger(__name__)


# Binding precedence (higher binds tighter)
LOWEST = 1
EQUALS = 2
LESS_GREATER = 3
SUM = 4
PRODUCT = 5
PREFIX = 6
CALL = 7
INDEX = 8

PRECEDENCES: dict[str, int] = {
    EQ: EQUALS,
    NOT_EQ: EQUALS,
    LT: LESS_GREATER,
    GT: LESS_GREATER,
    PLUS: SUM,
    MINUS: SUM,
    ASTERISK: PRODUCT,
    SLASH: PRODUCT,
    LPAREN: CALL,
    DOT: CALL,
    INCREMENT: CALL,
    DECREMENT: CALL,
    LBRACKET: INDEX,
}


def parse(
    source: str, keywords: Keywords | None = None, linker: Linker | None = None
) -> Program:
    """Parse source, raising ParseError if any diagnostics were recorded."""
    if linker is not None and keywords is None:
        keywords = linker.keywords
    parser = Parser(Lexer(source, keywords), linker)
    program = parser.parse_program()
    if parser.errors:
        raise ParseError(parser.errors)
    return program


class Parser:
    """Pratt parser with prefix and infix tables keyed by token kind.

    `#include <Name>` is resolved during parsing through the linker, which
    may add keywords that the lexer honors for every later token.
    """

    def __init__(self, lexer: Lexer, linker: Linker | None = None):
        self.lexer = lexer
        self.linker = linker
        self.errors: list[str] = []
        self.cur: Token = lexer.next_token()
        self.peek: Token = lexer.next_token()
        self._prefix_fns: dict[str, Callable[[], Expression | None]] = {
            IDENT: self._parse_identifier,
            CLASS: self._parse_identifier,
            INTEGER: self._parse_integer_literal,
            REAL_NUMBER: self._parse_real_literal,
            CHARACTER: self._parse_char_literal,
            STRING: self._parse_string_literal,
            TRUE: self._parse_boolean,
            FALSE: self._parse_boolean,
            BANG: self._parse_prefix_expression,
            MINUS: self._parse_prefix_expression,
            INCREMENT: self._parse_prefix_expression,
            DECREMENT: self._parse_prefix_expression,
            LPAREN: self._parse_grouped_expression,
            LBRACKET: self._parse_array_literal,
            LBRACE: self._parse_hash_literal,
            IF: self._parse_if_expression,
            FOR: self._parse_for_expression,
            WHILE: self._parse_while_expression,
            SHARP: self._parse_include,
        }
        self._infix_fns: dict[str, Callable[[Expression], Expression | None]] = {
            PLUS: self._parse_infix_expression,
            MINUS: self._parse_infix_expression,
            ASTERISK: self._parse_infix_expression,
            SLASH: self._parse_infix_expression,
            EQ: self._parse_infix_expression,
            NOT_EQ: self._parse_infix_expression,
            LT: self._parse_infix_expression,
            GT: self._parse_infix_expression,
            DOT: self._parse_infix_expression,
            LPAREN: self._parse_call_expression,
            LBRACKET: self._parse_index_expression,
            INCREMENT: self._parse_postfix_expression,
            DECREMENT: self._parse_postfix_expression,
        }

    # ── Helpers ─────────────────────────────────────────────

    def _next_token(self) -> None:
        self.cur = self.peek
        self.peek = self.lexer.next_token()

    def _cur_is(self, kind: str) -> bool:
        return self.cur.kind == kind

    def _peek_is(self, kind: str) -> bool:
        return self.peek.kind == kind

    def _expect_peek(self, kind: str) -> bool:
        if self._peek_is(kind):
            self._next_token()
            return True
        self._peek_error(kind)
        return False

    def _peek_error(self, kind: str) -> None:
        self._error(f"expected next token to be {kind}, got {self.peek.kind}")

    def _error(self, msg: str) -> None:
        logger.debug("parse error: %s", msg)
        self.errors.append(msg)

    def _peek_precedence(self) -> int:
        return PRECEDENCES.get(self.peek.kind, LOWEST)

    def _cur_precedence(self) -> int:
        return PRECEDENCES.get(self.cur.kind, LOWEST)

    def _skip_semicolon(self) -> None:
        if self._peek_is(SEMICOLON):
            self._next_token()

    # ── Program / Statements ────────────────────────────────

    def parse_program(self) -> Program:
        statements: list[Statement] = []
        while not self._cur_is(EOF):
            try:
                stmt = self._parse_statement()
            except RecursionError:
                # Remaining tokens belong to the unfinished statement.
                self._error("expression nested too deeply")
                break
            if stmt is not None:
                statements.append(stmt)
            self._next_token()
        return Program(tuple(statements))

    def _parse_statement(self) -> Statement | None:
        kind = self.cur.kind
        if kind == SEMICOLON:
            return None
        if kind in DECLARATION_KINDS and not (kind == CLASS and self._peek_is(LPAREN)):
            return self._parse_init_statement()
        if kind == RETURN:
            return self._parse_return_statement()
        if kind == BREAK:
            self._skip_semicolon()
            return BreakStatement()
        if kind == IDENT and self._peek_is(ASSIGN):
            return self._parse_assign_statement()
        return self._parse_expression_statement()

    def _parse_init_statement(self) -> InitStatement | None:
        type_tok = self.cur
        if not self._expect_peek(IDENT):
            return None
        name = self.cur.literal
        if self._peek_is(LPAREN):
            self._next_token()
            fn = self._parse_function_literal(type_tok, name)
            if fn is None:
                return None
            return InitStatement(type_tok.kind, type_tok.literal, name, fn)
        if not self._peek_is(ASSIGN):
            self._peek_error(ASSIGN)
            return None
        if self.peek.literal != "=":
            self._error(f"expected '=' in declaration of {name}, got '{self.peek.literal}'")
            return None
        self._next_token()
        self._next_token()
        value = self._parse_expression(LOWEST)
        if value is None:
            return None
        self._skip_semicolon()
        return InitStatement(type_tok.kind, type_tok.literal, name, value)

    def _parse_assign_statement(self) -> AssignStatement | None:
        name = self.cur.literal
        self._next_token()
        operator = self.cur.literal
        self._next_token()
        value = self._parse_expression(LOWEST)
        if value is None:
            return None
        self._skip_semicolon()
        return AssignStatement(name, operator, value)

    def _parse_return_statement(self) -> ReturnStatement | None:
        if self._peek_is(SEMICOLON):
            self._next_token()
            return ReturnStatement(None)
        self._next_token()
        value = self._parse_expression(LOWEST)
        if value is None:
            return None
        self._skip_semicolon()
        return ReturnStatement(value)

    def _parse_expression_statement(self) -> ExpressionStatement | None:
        expr = self._parse_expression(LOWEST)
        if expr is None:
            return None
        self._skip_semicolon()
        return ExpressionStatement(expr)

    def _parse_block_statement(self) -> BlockStatement | None:
        statements: list[Statement] = []
        self._next_token()
        while not self._cur_is(RBRACE):
            if self._cur_is(EOF):
                self._error("expected next token to be RBRACE, got EOF")
                return None
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._next_token()
        return BlockStatement(tuple(statements))

    # ── Functions ───────────────────────────────────────────

    def _parse_function_literal(self, type_tok: Token, name: str) -> FunctionLiteral | None:
        params = self._parse_parameters()
        if params is None:
            return None
        if not self._expect_peek(LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(name, type_tok.kind, type_tok.literal, params, body)

    def _parse_parameters(self) -> tuple[Parameter, ...] | None:
        if self._peek_is(RPAREN):
            self._next_token()
            return ()
        params: list[Parameter] = []
        self._next_token()
        param = self._parse_parameter()
        if param is None:
            return None
        params.append(param)
        while self._peek_is(COMMA):
            self._next_token()
            self._next_token()
            param = self._parse_parameter()
            if param is None:
                return None
            params.append(param)
        if not self._expect_peek(RPAREN):
            return None
        return tuple(params)

    def _parse_parameter(self) -> Parameter | None:
        type_tok = self.cur
        if type_tok.kind not in DECLARATION_KINDS:
            self._error(f"expected parameter type, got {type_tok.kind}")
            return None
        if not self._expect_peek(IDENT):
            return None
        return Parameter(self.cur.literal, type_tok.kind, type_tok.literal)

    # ── Expressions ─────────────────────────────────────────

    def _parse_expression(self, precedence: int) -> Expression | None:
        prefix = self._prefix_fns.get(self.cur.kind)
        if prefix is None:
            self._error(f"no prefix parse function for {self.cur.kind} found")
            return None
        left = prefix()
        while (
            left is not None
            and not self._peek_is(SEMICOLON)
            and precedence < self._peek_precedence()
        ):
            infix = self._infix_fns.get(self.peek.kind)
            if infix is None:
                return left
            self._next_token()
            left = infix(left)
        return left

    def _parse_identifier(self) -> Expression | None:
        return Identifier(self.cur.literal)

    def _parse_integer_literal(self) -> Expression | None:
        try:
            value = int(self.cur.literal)
        except ValueError:
            # More digits than int() will convert.
            value = INT64_MAX + 1
        if value > INT64_MAX:
            self._error(f'could not parse "{self.cur.literal}" as integer')
            return None
        return IntegerLiteral(value)

    def _parse_real_literal(self) -> Expression | None:
        try:
            value = float(self.cur.literal)
        except ValueError:
            self._error(f'could not parse "{self.cur.literal}" as float')
            return None
        return RealLiteral(value, self.cur.literal)

    def _parse_char_literal(self) -> Expression | None:
        if len(self.cur.literal) != 1:
            self._error(f'could not parse "{self.cur.literal}" as char')
            return None
        return CharLiteral(self.cur.literal)

    def _parse_string_literal(self) -> Expression | None:
        return StringLiteral(self.cur.literal)

    def _parse_boolean(self) -> Expression | None:
        return BooleanLiteral(self._cur_is(TRUE))

    def _parse_prefix_expression(self) -> Expression | None:
        operator = self.cur.literal
        self._next_token()
        right = self._parse_expression(PREFIX)
        if right is None:
            return None
        return PrefixExpression(operator, right)

    def _parse_infix_expression(self, left: Expression) -> Expression | None:
        operator = self.cur.literal
        precedence = self._cur_precedence()
        self._next_token()
        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(left, operator, right)

    def _parse_postfix_expression(self, left: Expression) -> Expression | None:
        return PostfixExpression(left, self.cur.literal)

    def _parse_grouped_expression(self) -> Expression | None:
        self._next_token()
        expr = self._parse_expression(LOWEST)
        if expr is None or not self._expect_peek(RPAREN):
            return None
        return expr

    def _parse_call_expression(self, function: Expression) -> Expression | None:
        args = self._parse_expression_list(RPAREN)
        if args is None:
            return None
        return CallExpression(function, args)

    def _parse_index_expression(self, left: Expression) -> Expression | None:
        self._next_token()
        index = self._parse_expression(LOWEST)
        if index is None or not self._expect_peek(RBRACKET):
            return None
        return IndexExpression(left, index)

    def _parse_expression_list(self, end: str) -> tuple[Expression, ...] | None:
        if self._peek_is(end):
            self._next_token()
            return ()
        items: list[Expression] = []
        self._next_token()
        expr = self._parse_expression(LOWEST)
        if expr is None:
            return None
        items.append(expr)
        while self._peek_is(COMMA):
            self._next_token()
            self._next_token()
            expr = self._parse_expression(LOWEST)
            if expr is None:
                return None
            items.append(expr)
        if not self._expect_peek(end):
            return None
        return tuple(items)

    def _parse_array_literal(self) -> Expression | None:
        elements = self._parse_expression_list(RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(elements)

    def _parse_hash_literal(self) -> Expression | None:
        pairs: list[tuple[Expression, Expression]] = []
        while not self._peek_is(RBRACE):
            self._next_token()
            key = self._parse_expression(LOWEST)
            if key is None or not self._expect_peek(COLON):
                return None
            self._next_token()
            value = self._parse_expression(LOWEST)
            if value is None:
                return None
            pairs.append((key, value))
            if not self._peek_is(RBRACE) and not self._expect_peek(COMMA):
                return None
        self._next_token()
        return HashLiteral(tuple(pairs))

    # ── Control flow ────────────────────────────────────────

    def _parse_if_expression(self) -> Expression | None:
        if not self._expect_peek(LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(LOWEST)
        if condition is None or not self._expect_peek(RPAREN):
            return None
        if not self._expect_peek(LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None
        alternative: BlockStatement | None = None
        if self._peek_is(ELSE):
            self._next_token()
            if self._peek_is(IF):
                self._next_token()
                nested = self._parse_if_expression()
                if nested is None:
                    return None
                alternative = BlockStatement((ExpressionStatement(nested),))
            else:
                if not self._expect_peek(LBRACE):
                    return None
                alternative = self._parse_block_statement()
                if alternative is None:
                    return None
        return IfExpression(condition, consequence, alternative)

    def _parse_for_expression(self) -> Expression | None:
        if not self._expect_peek(LPAREN):
            return None
        self._next_token()
        init: Statement | None = None
        if not self._cur_is(SEMICOLON):
            init = self._parse_statement()
            if init is None:
                return None
            if not self._cur_is(SEMICOLON):
                self._error(f"expected next token to be SEMICOLON, got {self.cur.kind}")
                return None
        self._next_token()
        condition: Expression | None = None
        if not self._cur_is(SEMICOLON):
            condition = self._parse_expression(LOWEST)
            if condition is None or not self._expect_peek(SEMICOLON):
                return None
        step: Expression | None = None
        if not self._peek_is(RPAREN):
            self._next_token()
            step = self._parse_expression(LOWEST)
            if step is None:
                return None
        if not self._expect_peek(RPAREN) or not self._expect_peek(LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return IterationExpression("for", init, condition, step, body)

    def _parse_while_expression(self) -> Expression | None:
        if not self._expect_peek(LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(LOWEST)
        if condition is None or not self._expect_peek(RPAREN):
            return None
        if not self._expect_peek(LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return IterationExpression("while", None, condition, None, body)

    # ── Include ─────────────────────────────────────────────

    def _parse_include(self) -> Expression | None:
        if not self._expect_peek(INCLUDE) or not self._expect_peek(LT):
            return None
        self._next_token()
        if self.cur.kind not in (IDENT, CLASS):
            self._error(f"expected next token to be IDENT, got {self.cur.kind}")
            return None
        name = self.cur.literal
        while self._peek_is(DOT):
            self._next_token()
            if not self._expect_peek(IDENT):
                return None
            name += "." + self.cur.literal
        if not self._expect_peek(GT):
            return None
        if self.linker is None or not self.linker.link_library(name):
            self._error(f"library not found: {name}")
            return None
        logger.debug("linked %s during parse", name)
        # The lookahead token was lexed before the library's keywords existed.
        if self._peek_is(IDENT):
            self.peek = Token(self.lexer.keywords.lookup(self.peek.literal), self.peek.literal)
        return None
