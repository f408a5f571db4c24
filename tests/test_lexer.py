"""Lexer tests."""

from sketchlang.lexer import Lexer
from sketchlang.tokens import (
    ASSIGN,
    ASTERISK,
    BANG,
    CHARACTER,
    CLASS,
    COMMA,
    DECREMENT,
    DOT,
    EOF,
    EQ,
    FOR,
    GT,
    IDENT,
    ILLEGAL,
    INCLUDE,
    INCREMENT,
    INT,
    INTEGER,
    LBRACE,
    LPAREN,
    LT,
    MINUS,
    NOT_EQ,
    PLUS,
    RBRACE,
    REAL_NUMBER,
    RPAREN,
    SEMICOLON,
    SHARP,
    SLASH,
    STRING,
    Keywords,
    Token,
)


def kinds(source: str, keywords: Keywords | None = None) -> list[tuple[str, str]]:
    return [(t.kind, t.literal) for t in Lexer(source, keywords).tokens()]


def test_declaration():
    assert kinds("int five = 5;") == [
        (INT, "int"),
        (IDENT, "five"),
        (ASSIGN, "="),
        (INTEGER, "5"),
        (SEMICOLON, ";"),
        (EOF, ""),
    ]


def test_operators():
    assert [k for k, _ in kinds("!-/*5; 5 < 10 > 5;")] == [
        BANG,
        MINUS,
        SLASH,
        ASTERISK,
        INTEGER,
        SEMICOLON,
        INTEGER,
        LT,
        INTEGER,
        GT,
        INTEGER,
        SEMICOLON,
        EOF,
    ]


def test_two_character_operators():
    assert kinds("== != ++ -- += -= *= /=")[:-1] == [
        (EQ, "=="),
        (NOT_EQ, "!="),
        (INCREMENT, "++"),
        (DECREMENT, "--"),
        (ASSIGN, "+="),
        (ASSIGN, "-="),
        (ASSIGN, "*="),
        (ASSIGN, "/="),
    ]


def test_plus_followed_by_space_is_single():
    assert kinds("a + +b")[:-1] == [(IDENT, "a"), (PLUS, "+"), (PLUS, "+"), (IDENT, "b")]


def test_real_number():
    assert kinds("3.14 10")[:-1] == [(REAL_NUMBER, "3.14"), (INTEGER, "10")]


def test_malformed_real_is_one_token():
    assert kinds("1.2.3")[:-1] == [(REAL_NUMBER, "1.2.3")]


def test_strings_and_chars():
    assert kinds("\"foobar\" \"foo bar\" 'x'")[:-1] == [
        (STRING, "foobar"),
        (STRING, "foo bar"),
        (CHARACTER, "x"),
    ]


def test_no_escape_processing():
    assert kinds(r'"a\n"')[:-1] == [(STRING, r"a\n")]


def test_unterminated_string_runs_to_end():
    assert kinds('"abc def')[:-1] == [(STRING, "abc def")]


def test_identifier_with_digits_and_underscore():
    assert kinds("led_13 _x")[:-1] == [(IDENT, "led_13"), (IDENT, "_x")]


def test_illegal_character():
    assert kinds("@")[:-1] == [(ILLEGAL, "@")]


def test_include_directive():
    assert [k for k, _ in kinds("#include <Arduino.h>")] == [
        SHARP,
        INCLUDE,
        LT,
        IDENT,
        DOT,
        IDENT,
        GT,
        EOF,
    ]


def test_function_and_loop():
    source = "int add(int a, int b) { for }"
    assert [k for k, _ in kinds(source)] == [
        INT,
        IDENT,
        LPAREN,
        INT,
        IDENT,
        COMMA,
        INT,
        IDENT,
        RPAREN,
        LBRACE,
        FOR,
        RBRACE,
        EOF,
    ]


def test_whitespace_skipped():
    assert kinds(" \t\r\n5\n") == [(INTEGER, "5"), (EOF, "")]


def test_exhausted_flag():
    lexer = Lexer("x")
    assert not lexer.exhausted
    assert lexer.next_token() == Token(IDENT, "x")
    assert not lexer.exhausted
    assert lexer.next_token().kind == EOF
    assert lexer.exhausted
    assert lexer.next_token().kind == EOF


def test_linked_class_keyword():
    keywords = Keywords()
    assert kinds("LedControl", keywords)[0] == (IDENT, "LedControl")
    keywords.add_class("LedControl")
    assert kinds("LedControl", keywords)[0] == (CLASS, "LedControl")


def test_keyword_tables_are_independent():
    a = Keywords()
    b = Keywords()
    a.add_class("Servo")
    assert a.is_class("Servo")
    assert not b.is_class("Servo")
    assert "Servo" not in b
