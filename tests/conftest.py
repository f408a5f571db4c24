"""Pytest configuration for sketchlang tests."""

import signal
from pathlib import Path

import pytest

from sketchlang import InterpreterConfig, Session

CASES_DIR = Path(__file__).parent / "cases"
EVAL_TIMEOUT = 5

CASE_SUITES = {
    "eval_case": "eval",
    "parse_case": "parse",
}


# ---------------------------------------------------------------------------
# Timeout
# ---------------------------------------------------------------------------


def _timeout_handler(signum, frame):
    raise TimeoutError("evaluation timed out")


signal.signal(signal.SIGALRM, _timeout_handler)


@pytest.fixture
def timeout():
    signal.alarm(EVAL_TIMEOUT)
    yield
    signal.alarm(0)


# ---------------------------------------------------------------------------
# .tests file parsing
# ---------------------------------------------------------------------------


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_cases(test_dir: Path) -> list[tuple[str, str, str]]:
    """Glob *.tests in test_dir, return (test_id, input, expected) tuples."""
    results = []
    for test_file in sorted(test_dir.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


def pytest_generate_tests(metafunc):
    for fixture, subdir in CASE_SUITES.items():
        if f"{fixture}_input" in metafunc.fixturenames:
            cases = discover_cases(CASES_DIR / subdir)
            params = [pytest.param(inp, exp, id=tid) for tid, inp, exp in cases]
            metafunc.parametrize(f"{fixture}_input,{fixture}_expected", params)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@pytest.fixture
def output() -> list[str]:
    return []


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def session(output, sleeps) -> Session:
    """Persistent session that records puts output and never really sleeps."""
    return Session(InterpreterConfig(), output=output.append, sleep=sleeps.append)
