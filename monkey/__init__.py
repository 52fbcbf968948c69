"""Monkey interpreter — public API."""

from __future__ import annotations

from typing import TextIO

from .ast import Program
from .lexer import IllegalCharacterError as IllegalCharacterError, Lexer
from .objects import Environment as Environment, Object
from .parse import Parser as Parser
from .runtime import Evaluator as Evaluator, RunResult as RunResult, run as run


def parse(source: str) -> tuple[Program, list[str]]:
    """Parse Monkey source. Returns the program and its syntax errors (empty = ok)."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors


def evaluate(
    source: str, *, env: Environment | None = None, out: TextIO | None = None
) -> Object | None:
    """Parse and evaluate source. Returns None if it did not parse."""
    return run(source, env=env, out=out).value
