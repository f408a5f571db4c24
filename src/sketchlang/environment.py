"""Sketchlang environments: chained scopes with declared-type bindings."""

from __future__ import annotations

from dataclasses import dataclass
import math

from .objects import (
    BOOLEAN_OBJ,
    CHARACTER_OBJ,
    CLASS_OBJ,
    INTEGER_OBJ,
    REAL_NUMBER_OBJ,
    VOID_OBJ,
    Boolean,
    Character,
    Class,
    Error,
    Function,
    HostFunction,
    Integer,
    Object,
    RealNumber,
    native_bool,
    numeric_value,
)
from .tokens import BOOL, CHAR, CLASS, FLOAT, INT, VOID


# Declaration keyword kind -> declared type tag
DECLARED_TYPES: dict[str, str] = {
    INT: INTEGER_OBJ,
    FLOAT: REAL_NUMBER_OBJ,
    CHAR: CHARACTER_OBJ,
    BOOL: BOOLEAN_OBJ,
    VOID: VOID_OBJ,
    CLASS: CLASS_OBJ,
}


# ============================================================
# Coercion
# ============================================================


def _conversion_error(value: Object, target: str) -> Error:
    return Error(f"invalid conversion from '{value.object_type()}' to '{target}'")


def _truncate(value: RealNumber) -> int | None:
    if math.isnan(value.value) or math.isinf(value.value):
        return None
    return int(value.value)


def coerce(value: Object, target: str) -> Object:
    """Convert value to the declared type target, or return an Error."""
    if target == VOID_OBJ:
        return value
    if isinstance(value, HostFunction):
        return _conversion_error(value, target)
    if isinstance(value, Function):
        if value.return_type == target:
            return value
        return Error(
            f"invalid data type: function returns {value.return_type}, expected {target}"
        )
    if target == INTEGER_OBJ:
        if isinstance(value, Integer):
            return value
        if isinstance(value, RealNumber):
            n = _truncate(value)
            if n is None:
                return _conversion_error(value, target)
            return Integer(n)
        if isinstance(value, Boolean):
            return Integer(1 if value.value else 0)
        if isinstance(value, Character):
            return Integer(ord(value.value))
        return _conversion_error(value, target)
    if target == REAL_NUMBER_OBJ:
        if isinstance(value, RealNumber):
            return value
        if isinstance(value, (Integer, Boolean, Character)):
            return RealNumber(numeric_value(value))
        return _conversion_error(value, target)
    if target == CHARACTER_OBJ:
        if isinstance(value, Character):
            return value
        if isinstance(value, Integer):
            return Character(chr(value.value & 0xFFFF))
        if isinstance(value, RealNumber):
            n = _truncate(value)
            if n is None:
                return _conversion_error(value, target)
            return Character(chr(n & 0xFFFF))
        if isinstance(value, Boolean):
            return Character("\u0001" if value.value else "\u0000")
        return _conversion_error(value, target)
    if target == BOOLEAN_OBJ:
        if isinstance(value, Boolean):
            return value
        if isinstance(value, (Integer, RealNumber, Character)):
            return native_bool(numeric_value(value) != 0.0)
        return _conversion_error(value, target)
    if target == CLASS_OBJ:
        if isinstance(value, Class):
            return value
        return _conversion_error(value, target)
    return Error(f"unknown declared type: {target}")


# ============================================================
# Environment
# ============================================================


@dataclass
class _Binding:
    value: Object
    declared: str


class Environment:
    """One lexical scope plus a reference to its enclosing scope.

    Every binding remembers the type it was declared with; writes through
    `set` are coerced to that type.
    """

    def __init__(self, outer: Environment | None = None):
        self._store: dict[str, _Binding] = {}
        self.outer = outer

    def _find(self, name: str) -> _Binding | None:
        env: Environment | None = self
        while env is not None:
            binding = env._store.get(name)
            if binding is not None:
                return binding
            env = env.outer
        return None

    def is_bound(self, name: str) -> bool:
        return self._find(name) is not None

    def is_local(self, name: str) -> bool:
        return name in self._store

    def get(self, name: str) -> Object:
        binding = self._find(name)
        if binding is None:
            return Error(f"'{name}' was not declared in this scope")
        return binding.value

    def declared_type(self, name: str) -> str | None:
        binding = self._find(name)
        return None if binding is None else binding.declared

    def declare(self, name: str, value: Object, declared: str) -> Object:
        """Bind a new name in this scope, coercing value to declared."""
        if name in self._store:
            return Error(f"'{name}' was already declared in this scope")
        converted = coerce(value, declared)
        if isinstance(converted, Error):
            return converted
        self._store[name] = _Binding(converted, declared)
        return converted

    def set(self, name: str, value: Object) -> Object:
        """Rewrite an existing binding wherever it lives in the chain."""
        binding = self._find(name)
        if binding is None:
            return Error(f"'{name}' was not declared in this scope")
        converted = coerce(value, binding.declared)
        if isinstance(converted, Error):
            return converted
        binding.value = converted
        return converted

    def names(self) -> list[str]:
        return list(self._store)
