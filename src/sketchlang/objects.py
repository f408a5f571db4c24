"""Sketchlang runtime objects.

Every value the evaluator produces is one of the variants below. Each
exposes `object_type()` (its type tag) and `inspect()` (the text shown to
the user). Integer, RealNumber, Character, Boolean and String are usable
as hash keys through `hash_key()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import struct
from typing import TYPE_CHECKING, Callable

from .ast import BlockStatement, Parameter
from .emit import to_source

if TYPE_CHECKING:
    from .environment import Environment


# Type tags
INTEGER_OBJ = "INTEGER_OBJ"
REAL_NUMBER_OBJ = "REAL_NUMBER_OBJ"
CHARACTER_OBJ = "CHARACTER_OBJ"
BOOLEAN_OBJ = "BOOLEAN_OBJ"
STRING_OBJ = "STRING_OBJ"
NULL_OBJ = "NULL_OBJ"
ARRAY_OBJ = "ARRAY_OBJ"
HASH_OBJ = "HASH_OBJ"
FUNCTION_OBJ = "FUNCTION_OBJ"
HOST_FUNCTION_OBJ = "HOST_FUNCTION_OBJ"
CLASS_OBJ = "CLASS_OBJ"
RETURN_VALUE_OBJ = "RETURN_VALUE_OBJ"
BREAK_OBJ = "BREAK_OBJ"
ERROR_OBJ = "ERROR_OBJ"
# Declared type only: binding accepts any value unchanged.
VOID_OBJ = "VOID_OBJ"

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


# ============================================================
# float32 helpers
# ============================================================


def to_f32(x: float) -> float:
    """Round a Python float to the nearest float32."""
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def f32_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return to_f32(a / b)


def format_real(value: float) -> str:
    """Shortest decimal text that reads back as the same float32."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if to_f32(float(text)) == value:
            return text
    return repr(value)


def wrap_int64(n: int) -> int:
    return (n - INT64_MIN) % 2**64 + INT64_MIN


# ============================================================
# Base classes
# ============================================================


@dataclass(frozen=True)
class HashKey:
    object_type: str
    value: int | float | str


class Object:
    """A runtime value."""

    def object_type(self) -> str:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError


class HashableObject(Object):
    """A value that can be used as a hash key."""

    def hash_key(self) -> HashKey:  # pragma: no cover - implemented by subclasses
        raise NotImplementedError


# ============================================================
# Scalars
# ============================================================


@dataclass(eq=False)
class Integer(HashableObject):
    value: int

    def __post_init__(self) -> None:
        self.value = wrap_int64(self.value)

    def object_type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value)

    def __hash__(self) -> int:
        return hash(("int", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Integer) and self.value == other.value


@dataclass(eq=False)
class RealNumber(HashableObject):
    value: float

    def __post_init__(self) -> None:
        self.value = to_f32(self.value)

    def object_type(self) -> str:
        return REAL_NUMBER_OBJ

    def inspect(self) -> str:
        return format_real(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(REAL_NUMBER_OBJ, self.value)

    def __hash__(self) -> int:
        return hash(("real", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RealNumber) and self.value == other.value


@dataclass(eq=False)
class Character(HashableObject):
    value: str

    def object_type(self) -> str:
        return CHARACTER_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(CHARACTER_OBJ, ord(self.value))

    def __hash__(self) -> int:
        return hash(("char", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Character) and self.value == other.value


@dataclass(eq=False)
class Boolean(HashableObject):
    value: bool

    def object_type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)

    def __hash__(self) -> int:
        return hash(("bool", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Boolean) and self.value == other.value


@dataclass(eq=False)
class String(HashableObject):
    value: str

    def object_type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, self.value)

    def __hash__(self) -> int:
        return hash(("string", self.value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, String) and self.value == other.value


@dataclass
class Null(Object):
    def object_type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return "null"


# ============================================================
# Containers
# ============================================================


@dataclass
class Array(Object):
    elements: list[Object] = field(default_factory=list)

    def object_type(self) -> str:
        return ARRAY_OBJ

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass
class HashPair:
    key: Object
    value: Object


@dataclass
class Hash(Object):
    pairs: dict[HashKey, HashPair] = field(default_factory=dict)

    def object_type(self) -> str:
        return HASH_OBJ

    def inspect(self) -> str:
        items = [p.key.inspect() + ": " + p.value.inspect() for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"


# ============================================================
# Callables
# ============================================================


@dataclass(eq=False)
class Function(Object):
    """A user-defined function closing over its declaring environment."""

    name: str
    parameters: tuple[Parameter, ...]
    body: BlockStatement
    env: Environment
    return_type: str
    return_type_name: str

    def object_type(self) -> str:
        return FUNCTION_OBJ

    def inspect(self) -> str:
        params = ", ".join(f"{p.type_name} {p.name}" for p in self.parameters)
        return f"{self.return_type_name} function({params}) {to_source(self.body)}"


@dataclass(eq=False)
class HostFunction(Object):
    """A native callback exposed to scripts."""

    fn: Callable[[list[Object]], Object]
    name: str = ""

    def object_type(self) -> str:
        return HOST_FUNCTION_OBJ

    def inspect(self) -> str:
        return "builtin function"


@dataclass(eq=False)
class Class(Object):
    """An instance whose members live in its own environment."""

    name: str
    env: Environment

    def object_type(self) -> str:
        return CLASS_OBJ

    def inspect(self) -> str:
        return "class"


# ============================================================
# Sentinels
# ============================================================


@dataclass
class ReturnValue(Object):
    value: Object

    def object_type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class Break(Object):
    def object_type(self) -> str:
        return BREAK_OBJ

    def inspect(self) -> str:
        return "break"


@dataclass
class Error(Object):
    message: str

    def object_type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return "ERROR: " + self.message


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()
BREAK = Break()

NUMERIC_TYPES: tuple[type, ...] = (Integer, RealNumber, Character)
# Operands accepted by unary minus, increments and compound assignment
COERCIBLE_TYPES: tuple[type, ...] = (Integer, RealNumber, Character, Boolean)


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def numeric_value(obj: Object) -> float:
    """Value of a numeric-coercible object as float32."""
    if isinstance(obj, Integer):
        return to_f32(float(obj.value))
    if isinstance(obj, RealNumber):
        return obj.value
    if isinstance(obj, Character):
        return float(ord(obj.value))
    if isinstance(obj, Boolean):
        return 1.0 if obj.value else 0.0
    raise TypeError("not numeric: " + obj.object_type())


def is_error(obj: Object | None) -> bool:
    return isinstance(obj, Error)
