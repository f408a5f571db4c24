"""Host-side exceptions.

Script errors never raise; they are `Error` objects or parser diagnostics.
These exceptions report misuse of the package itself.
"""

from __future__ import annotations


class SketchError(Exception):
    """Base error for sketchlang."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


class ParseError(SketchError):
    """Raised by `parse()` when the parser recorded diagnostics."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ConfigError(SketchError):
    """Invalid or unreadable configuration."""
