"""Library provider contract used by the linker."""

from __future__ import annotations

import time
from typing import Callable

from ..builtins import arity_error
from ..config import InterpreterConfig
from ..environment import coerce
from ..objects import INTEGER_OBJ, Error, HostFunction, Integer, Object

Sleep = Callable[[float], None]


class LibraryProvider:
    """A simulated hardware library that `#include` can link.

    `initialize()` fills two tables. `fields` holds host functions and
    constants merged into the evaluator's builtins. `header` holds class
    constructors; their names become CLASS keywords in the lexer.
    """

    name: str = ""

    def __init__(self, config: InterpreterConfig | None = None, sleep: Sleep | None = None):
        self.config = config if config is not None else InterpreterConfig()
        self.sleep: Sleep = sleep if sleep is not None else time.sleep
        self.fields: dict[str, Object] = {}
        self.header: dict[str, HostFunction] = {}

    def initialize(self) -> None:
        raise NotImplementedError

    def _function(self, name: str, fn: Callable[[list[Object]], Object]) -> None:
        self.fields[name] = HostFunction(fn, name)

    def _constant(self, name: str, value: int) -> None:
        self.fields[name] = Integer(value)

    def _constructor(self, name: str, fn: Callable[[list[Object]], Object]) -> None:
        self.header[name] = HostFunction(fn, name)


def int_args(fname: str, args: list[Object], count: int) -> list[int] | Error:
    """Check arity and convert every argument to a Python int."""
    if len(args) != count:
        return arity_error(len(args), count)
    values: list[int] = []
    for i, arg in enumerate(args):
        converted = coerce(arg, INTEGER_OBJ)
        if not isinstance(converted, Integer):
            return Error(
                f"argument {i + 1} to `{fname}` must be {INTEGER_OBJ}, got {arg.object_type()}"
            )
        values.append(converted.value)
    return values
