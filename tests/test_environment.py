"""Environment and coercion tests."""

import math

from sketchlang.ast import BlockStatement
from sketchlang.environment import Environment, coerce
from sketchlang.objects import (
    BOOLEAN_OBJ,
    CHARACTER_OBJ,
    CLASS_OBJ,
    FALSE,
    INTEGER_OBJ,
    NULL,
    REAL_NUMBER_OBJ,
    TRUE,
    VOID_OBJ,
    Array,
    Boolean,
    Character,
    Class,
    Error,
    Function,
    HostFunction,
    Integer,
    RealNumber,
    String,
)


def test_declare_and_get():
    env = Environment()
    assert env.declare("x", Integer(5), INTEGER_OBJ) == Integer(5)
    assert env.get("x") == Integer(5)


def test_declare_twice_in_same_scope_fails():
    env = Environment()
    env.declare("x", Integer(1), INTEGER_OBJ)
    result = env.declare("x", Integer(2), INTEGER_OBJ)
    assert result == Error("'x' was already declared in this scope")
    assert env.get("x") == Integer(1)


def test_shadowing_in_nested_scope_leaves_outer_alone():
    outer = Environment()
    outer.declare("x", Integer(1), INTEGER_OBJ)
    inner = Environment(outer)
    assert inner.declare("x", Integer(2), INTEGER_OBJ) == Integer(2)
    assert inner.get("x") == Integer(2)
    assert outer.get("x") == Integer(1)


def test_set_writes_where_binding_lives():
    outer = Environment()
    outer.declare("x", Integer(1), INTEGER_OBJ)
    inner = Environment(outer)
    inner.set("x", Integer(7))
    assert outer.get("x") == Integer(7)
    assert not inner.is_local("x")
    assert inner.is_bound("x")


def test_set_coerces_to_declared_type():
    env = Environment()
    env.declare("x", Integer(1), INTEGER_OBJ)
    assert env.set("x", RealNumber(6.9)) == Integer(6)
    assert env.declared_type("x") == INTEGER_OBJ


def test_set_undeclared_fails():
    env = Environment()
    assert env.set("y", Integer(1)) == Error("'y' was not declared in this scope")
    assert env.get("y") == Error("'y' was not declared in this scope")


def test_failed_set_keeps_old_value():
    env = Environment()
    env.declare("x", Integer(1), INTEGER_OBJ)
    result = env.set("x", String("no"))
    assert result == Error("invalid conversion from 'STRING_OBJ' to 'INTEGER_OBJ'")
    assert env.get("x") == Integer(1)


def test_coerce_to_integer():
    assert coerce(RealNumber(3.99), INTEGER_OBJ) == Integer(3)
    assert coerce(TRUE, INTEGER_OBJ) == Integer(1)
    assert coerce(FALSE, INTEGER_OBJ) == Integer(0)
    assert coerce(Character("A"), INTEGER_OBJ) == Integer(65)
    assert coerce(NULL, INTEGER_OBJ) == Error(
        "invalid conversion from 'NULL_OBJ' to 'INTEGER_OBJ'"
    )


def test_coerce_non_finite_real_to_integer_fails():
    assert isinstance(coerce(RealNumber(math.inf), INTEGER_OBJ), Error)
    assert isinstance(coerce(RealNumber(math.nan), INTEGER_OBJ), Error)


def test_coerce_to_real():
    assert coerce(Integer(2), REAL_NUMBER_OBJ) == RealNumber(2.0)
    assert coerce(TRUE, REAL_NUMBER_OBJ) == RealNumber(1.0)
    assert coerce(Character("a"), REAL_NUMBER_OBJ) == RealNumber(97.0)
    assert isinstance(coerce(String("1"), REAL_NUMBER_OBJ), Error)


def test_coerce_to_character():
    assert coerce(Integer(97), CHARACTER_OBJ) == Character("a")
    assert coerce(RealNumber(98.6), CHARACTER_OBJ) == Character("b")
    assert coerce(TRUE, CHARACTER_OBJ) == Character("\u0001")
    assert coerce(FALSE, CHARACTER_OBJ) == Character("\u0000")
    assert coerce(Integer(65536 + 65), CHARACTER_OBJ) == Character("A")


def test_coerce_to_boolean():
    assert coerce(Integer(0), BOOLEAN_OBJ) is FALSE
    assert coerce(Integer(-3), BOOLEAN_OBJ) is TRUE
    assert coerce(RealNumber(0.5), BOOLEAN_OBJ) is TRUE
    assert coerce(Character("\u0000"), BOOLEAN_OBJ) is FALSE
    assert coerce(Boolean(True), BOOLEAN_OBJ) == TRUE
    assert isinstance(coerce(Array([]), BOOLEAN_OBJ), Error)


def test_coerce_to_class():
    instance = Class("LedControl", Environment())
    assert coerce(instance, CLASS_OBJ) is instance
    assert coerce(Integer(1), CLASS_OBJ) == Error(
        "invalid conversion from 'INTEGER_OBJ' to 'CLASS_OBJ'"
    )


def test_void_accepts_anything():
    value = Array([Integer(1)])
    assert coerce(value, VOID_OBJ) is value


def test_host_functions_bind_only_to_void():
    fn = HostFunction(lambda args: NULL, "noop")
    assert coerce(fn, VOID_OBJ) is fn
    assert coerce(fn, INTEGER_OBJ) == Error(
        "invalid conversion from 'HOST_FUNCTION_OBJ' to 'INTEGER_OBJ'"
    )
    assert isinstance(coerce(fn, CLASS_OBJ), Error)


def test_function_return_type_is_checked():
    fn = Function("f", (), BlockStatement(()), Environment(), REAL_NUMBER_OBJ, "float")
    assert coerce(fn, REAL_NUMBER_OBJ) is fn
    assert coerce(fn, INTEGER_OBJ) == Error(
        "invalid data type: function returns REAL_NUMBER_OBJ, expected INTEGER_OBJ"
    )
