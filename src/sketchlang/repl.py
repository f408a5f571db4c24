"""Sketchlang sessions: the RunCode entry point and the interactive loop."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from .builtins import Output
from .config import InterpreterConfig
from .environment import Environment
from .evaluator import Evaluator
from .lexer import Lexer
from .libraries.base import Sleep
from .linker import Linker
from .objects import Error
from .parse import Parser
from .tokens import Keywords

logger = logging.getLogger(__name__)

EMPTY_CODE = "empty code"
PROMPT = "sketch> "
CONTINUATION_PROMPT = "...> "
QUIT_COMMANDS = (":q", ":quit", "quit", "exit")


@dataclass(frozen=True)
class RunResult:
    """Outcome of one `run_code` call."""

    result_text: str
    is_error: bool
    diagnostics: tuple[str, ...] = ()


class Session:
    """One interpreter session.

    The keyword table, builtins and linked libraries always persist for
    the life of the session. Global bindings persist too when the config
    is persistent; otherwise every call starts from a fresh session state.
    """

    def __init__(
        self,
        config: InterpreterConfig | None = None,
        output: Output | None = None,
        sleep: Sleep | None = None,
    ):
        self.config = config if config is not None else InterpreterConfig()
        self._output = output
        self._sleep = sleep
        self.reset()

    def reset(self) -> None:
        """Drop all bindings, keywords and linked libraries."""
        self.keywords = Keywords()
        self.evaluator = Evaluator(self.config, self._output)
        self.linker = Linker(self.keywords, self.evaluator, self.config, self._sleep)
        self.env = Environment()

    def run_code(self, text: str) -> RunResult:
        if not self.config.persistent:
            return self.run_code_fresh(text)
        return self._run(text)

    def run_code_fresh(self, text: str) -> RunResult:
        """Run text against a clean state, discarding earlier bindings."""
        self.reset()
        return self._run(text)

    def _run(self, text: str) -> RunResult:
        if not text.strip():
            return RunResult(EMPTY_CODE, False)
        parser = Parser(Lexer(text, self.keywords), self.linker)
        program = parser.parse_program()
        for msg in parser.errors:
            logger.warning("parse error: %s", msg)
        result = self.evaluator.evaluate(program, self.env)
        return RunResult(result.inspect(), isinstance(result, Error), tuple(parser.errors))


def run_code(text: str, config: InterpreterConfig | None = None) -> RunResult:
    """Run text in a throwaway session."""
    return Session(config).run_code(text)


# ============================================================
# Interactive loop
# ============================================================


def count_braces_delta(line: str) -> int:
    """Net `{` minus `}` outside string and char literals."""
    delta = 0
    in_single = False
    in_double = False
    for ch in line:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif not in_single and not in_double:
            if ch == "{":
                delta += 1
            elif ch == "}":
                delta -= 1
    return delta


def interact(
    session: Session,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> int:
    """Read-eval-print until EOF or a quit command; returns the error count."""
    errors = 0
    buffer_lines: list[str] = []
    brace_depth = 0
    while True:
        prompt = PROMPT if not buffer_lines else CONTINUATION_PROMPT
        try:
            line = read(prompt)
        except (EOFError, KeyboardInterrupt):
            write("")
            break
        stripped = line.strip()
        if not buffer_lines and stripped in QUIT_COMMANDS:
            break
        if not stripped and not buffer_lines:
            continue
        buffer_lines.append(line)
        brace_depth += count_braces_delta(line)
        # Wait for the block to close.
        if brace_depth > 0:
            continue
        source = "\n".join(buffer_lines)
        buffer_lines = []
        brace_depth = 0
        result = session.run_code(source)
        if result.is_error:
            errors += 1
        write(result.result_text)
    return errors
