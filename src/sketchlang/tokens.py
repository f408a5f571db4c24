"""Sketchlang tokens: kind constants, the Token record, and the keyword table."""

from __future__ import annotations


# Token kind constants
ILLEGAL = "ILLEGAL"
EOF = "EOF"

# Literals
IDENT = "IDENT"
INTEGER = "INTEGER"
REAL_NUMBER = "REAL_NUMBER"
CHARACTER = "CHARACTER"
STRING = "STRING"

# Declaration keywords
INT = "INT"
FLOAT = "FLOAT"
CHAR = "CHAR"
BOOL = "BOOL"
VOID = "VOID"
CLASS = "CLASS"

# Operators
ASSIGN = "ASSIGN"
PLUS = "PLUS"
MINUS = "MINUS"
BANG = "BANG"
ASTERISK = "ASTERISK"
SLASH = "SLASH"
LT = "LT"
GT = "GT"
EQ = "EQ"
NOT_EQ = "NOT_EQ"
INCREMENT = "INCREMENT"
DECREMENT = "DECREMENT"
DOT = "DOT"

# Punctuation
COMMA = "COMMA"
SEMICOLON = "SEMICOLON"
COLON = "COLON"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"
SHARP = "SHARP"

# Control keywords
TRUE = "TRUE"
FALSE = "FALSE"
IF = "IF"
ELSE = "ELSE"
RETURN = "RETURN"
BREAK = "BREAK"
FOR = "FOR"
WHILE = "WHILE"
INCLUDE = "INCLUDE"

DECLARATION_KINDS: frozenset[str] = frozenset({INT, FLOAT, CHAR, BOOL, VOID, CLASS})

BASE_KEYWORDS: dict[str, str] = {
    "int": INT,
    "float": FLOAT,
    "char": CHAR,
    "bool": BOOL,
    "void": VOID,
    "true": TRUE,
    "false": FALSE,
    "if": IF,
    "else": ELSE,
    "return": RETURN,
    "break": BREAK,
    "for": FOR,
    "while": WHILE,
    "include": INCLUDE,
}

# Two-character operators, keyed by their first character
TWO_CHAR_OPS: dict[str, dict[str, str]] = {
    "=": {"=": EQ},
    "!": {"=": NOT_EQ},
    "+": {"+": INCREMENT, "=": ASSIGN},
    "-": {"-": DECREMENT, "=": ASSIGN},
    "*": {"=": ASSIGN},
    "/": {"=": ASSIGN},
}

SINGLE_OPS: dict[str, str] = {
    "=": ASSIGN,
    "+": PLUS,
    "-": MINUS,
    "!": BANG,
    "*": ASTERISK,
    "/": SLASH,
    "<": LT,
    ">": GT,
    ".": DOT,
    ",": COMMA,
    ";": SEMICOLON,
    ":": COLON,
    "(": LPAREN,
    ")": RPAREN,
    "{": LBRACE,
    "}": RBRACE,
    "[": LBRACKET,
    "]": RBRACKET,
    "#": SHARP,
}


class Token:
    """A token with kind and literal spelling."""

    def __init__(self, kind: str, literal: str):
        self.kind: str = kind
        self.literal: str = literal

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.literal!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Token)
            and self.kind == other.kind
            and self.literal == other.literal
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.literal))


class Keywords:
    """Keyword table for one parsing session.

    Starts with the language keywords. Linking a library adds its class
    names as CLASS keywords; entries are never removed.
    """

    def __init__(self) -> None:
        self._table: dict[str, str] = dict(BASE_KEYWORDS)

    def lookup(self, ident: str) -> str:
        """Return the keyword kind for ident, or IDENT."""
        return self._table.get(ident, IDENT)

    def add_class(self, name: str) -> None:
        self._table[name] = CLASS

    def is_class(self, name: str) -> bool:
        return self._table.get(name) == CLASS

    def __contains__(self, name: str) -> bool:
        return name in self._table

    def __len__(self) -> int:
        return len(self._table)
