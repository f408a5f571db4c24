"""Global host functions available in every session."""

from __future__ import annotations

import logging
from typing import Callable

from .objects import (
    ARRAY_OBJ,
    NULL,
    Array,
    Error,
    HostFunction,
    Integer,
    Object,
    String,
)

output_logger = logging.getLogger("sketchlang.output")

Output = Callable[[str], None]


def log_output(line: str) -> None:
    """Default `puts` sink."""
    output_logger.info("%s", line)


def arity_error(got: int, want: int) -> Error:
    return Error(f"wrong number of arguments. got={got}, want={want}")


def _expect_array(name: str, arg: Object) -> Error | None:
    if isinstance(arg, Array):
        return None
    return Error(f"argument to `{name}` must be {ARRAY_OBJ}, got {arg.object_type()}")


def _bi_len(args: list[Object]) -> Object:
    if len(args) != 1:
        return arity_error(len(args), 1)
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return Error(f"argument to `len` not supported, got {arg.object_type()}")


def _bi_first(args: list[Object]) -> Object:
    if len(args) != 1:
        return arity_error(len(args), 1)
    err = _expect_array("first", args[0])
    if err is not None:
        return err
    elements = args[0].elements
    return elements[0] if elements else NULL


def _bi_last(args: list[Object]) -> Object:
    if len(args) != 1:
        return arity_error(len(args), 1)
    err = _expect_array("last", args[0])
    if err is not None:
        return err
    elements = args[0].elements
    return elements[-1] if elements else NULL


def _bi_rest(args: list[Object]) -> Object:
    if len(args) != 1:
        return arity_error(len(args), 1)
    err = _expect_array("rest", args[0])
    if err is not None:
        return err
    elements = args[0].elements
    if not elements:
        return NULL
    return Array(list(elements[1:]))


def _bi_push(args: list[Object]) -> Object:
    if len(args) != 2:
        return arity_error(len(args), 2)
    err = _expect_array("push", args[0])
    if err is not None:
        return err
    return Array([*args[0].elements, args[1]])


_BUILTIN_RUNTIME: dict[str, Callable[[list[Object]], Object]] = {
    "len": _bi_len,
    "first": _bi_first,
    "last": _bi_last,
    "rest": _bi_rest,
    "push": _bi_push,
}


def builtin_table(output: Output | None = None) -> dict[str, Object]:
    """Fresh builtin table; `puts` writes through output."""
    sink = output if output is not None else log_output

    def _bi_puts(args: list[Object]) -> Object:
        for arg in args:
            sink(arg.inspect())
        return NULL

    table: dict[str, Object] = {
        name: HostFunction(fn, name) for name, fn in _BUILTIN_RUNTIME.items()
    }
    table["puts"] = HostFunction(_bi_puts, "puts")
    return table
