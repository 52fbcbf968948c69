"""Monkey CLI — run a .monkey file, or start the REPL when no file is given."""

from __future__ import annotations

import sys

from .lexer import IllegalCharacterError, Lexer
from .objects import Environment, Error
from .parse import Parser
from .repl import Repl
from .runtime import Evaluator


USAGE: str = """\
monkey [OPTIONS] [FILE]

Run a Monkey (.monkey) program. Without FILE, start an interactive session.

Options:
  --ast      Print the parsed program instead of running it
  --quiet    Do not print the value of the last statement
  --help     Show this help message
"""


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    dump_ast = False
    quiet = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--ast":
            dump_ast = True
            i += 1
        elif arg == "--quiet":
            quiet = True
            i += 1
        elif arg.startswith("-"):
            print("monkey: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("monkey: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    if filepath == "":
        Repl().cmdloop()
        return 0

    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("monkey: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("monkey: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except ValueError:
        print("monkey: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1

    try:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
    except IllegalCharacterError as e:
        print("FATAL ERROR: " + e.msg, file=sys.stderr)
        return 1

    if parser.errors:
        for msg in parser.errors:
            print("ERROR: " + msg)
        return 1

    if dump_ast:
        print(program)
        return 0

    try:
        result = Evaluator(sys.stdout).eval_program(program, Environment())
    except RecursionError:
        print("monkey: runtime error: maximum recursion depth exceeded", file=sys.stderr)
        return 1

    if isinstance(result, Error):
        print(result.inspect())
        return 1
    if not quiet:
        print(result.inspect())
    return 0


if __name__ == "__main__":
    sys.exit(main())
