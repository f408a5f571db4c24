"""
Interpreter configuration models.

Reads the [tool.sketchlang] (or top-level [sketchlang]) table from a TOML
file and provides typed settings for sessions and the evaluator.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError


class InterpreterConfig(BaseModel):
    """Settings shared by a session, its evaluator and its libraries."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_iterations: int = Field(default=100, ge=1)
    max_delay_ms: int = Field(default=1000, ge=0)
    persistent: bool = True


def _section(data: dict[str, Any]) -> dict[str, Any]:
    tool = data.get("tool", {})
    if isinstance(tool, dict) and "sketchlang" in tool:
        return tool["sketchlang"]
    return data.get("sketchlang", {})


def load_config(toml_path: Path) -> InterpreterConfig:
    """
    Load interpreter configuration from a TOML file.

    Args:
        toml_path: Path to a TOML file (pyproject.toml or sketchlang.toml)

    Returns:
        InterpreterConfig with parsed values, defaults for anything absent

    Raises:
        ConfigError: the file is missing, is not valid TOML, or holds
            invalid settings
    """
    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"{toml_path}: {e.strerror or e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{toml_path}: invalid TOML: {e}") from e

    section = _section(data)
    if not isinstance(section, dict):
        raise ConfigError(f"{toml_path}: [sketchlang] must be a table")
    try:
        return InterpreterConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"{toml_path}: {e}") from e
