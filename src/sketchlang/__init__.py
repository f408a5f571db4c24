"""Sketchlang: a small typed C-like scripting language for hardware sketches."""

from .config import InterpreterConfig, load_config
from .emit import to_source
from .environment import Environment
from .errors import ConfigError, ParseError, SketchError
from .evaluator import Evaluator
from .lexer import Lexer
from .linker import Linker
from .parse import Parser, parse
from .repl import RunResult, Session, run_code
from .tokens import Keywords

__all__ = [
    "ConfigError",
    "Environment",
    "Evaluator",
    "InterpreterConfig",
    "Keywords",
    "Lexer",
    "Linker",
    "ParseError",
    "Parser",
    "RunResult",
    "Session",
    "SketchError",
    "load_config",
    "parse",
    "run_code",
    "to_source",
]
