"""Sketchlang CLI: run a script file, a code string, or an interactive REPL."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import InterpreterConfig, load_config
from .errors import ConfigError
from .repl import Session, interact


USAGE: str = """\
sketchlang [OPTIONS] [FILE]

Run a sketch script. With no FILE and no -c, start an interactive REPL.

Options:
  -c CODE          Run CODE instead of a file
  --config PATH    Read settings from the [tool.sketchlang] table of PATH
  --fresh          Do not keep bindings between REPL entries
  -v, --verbose    Log debug output
  --help           Show this help message
"""

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    code: str | None = None
    config_path: str = ""
    fresh = False
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "-c" or arg == "--config":
            if i + 1 >= len(args):
                print("sketchlang: " + arg + " requires an argument", file=sys.stderr)
                return 2
            if arg == "-c":
                code = args[i + 1]
            else:
                config_path = args[i + 1]
            i += 2
        elif arg == "--fresh":
            fresh = True
            i += 1
        elif arg == "-v" or arg == "--verbose":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("sketchlang: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("sketchlang: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2
    if filepath != "" and code is not None:
        print("sketchlang: give either FILE or -c, not both", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    config = InterpreterConfig()
    if config_path != "":
        try:
            config = load_config(Path(config_path))
        except ConfigError as e:
            print("sketchlang: config error: " + str(e), file=sys.stderr)
            return 1
    if fresh:
        config = config.model_copy(update={"persistent": False})

    session = Session(config, output=print)

    if code is None and filepath == "":
        print("sketchlang REPL. Type :q to quit.")
        interact(session)
        return 0

    if code is None:
        try:
            code = Path(filepath).read_text(encoding="utf-8")
        except FileNotFoundError:
            print("sketchlang: " + filepath + ": No such file or directory", file=sys.stderr)
            return 1
        except OSError as e:
            print("sketchlang: " + filepath + ": " + str(e), file=sys.stderr)
            return 1
        except ValueError:
            print("sketchlang: " + filepath + ": invalid utf-8", file=sys.stderr)
            return 1

    result = session.run_code(code)
    if result.is_error:
        print(result.result_text, file=sys.stderr)
        return 1
    print(result.result_text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
