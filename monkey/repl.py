"""Interactive mode for the Monkey interpreter. Uses cmd as backend."""

from __future__ import annotations

import cmd

from .lexer import IllegalCharacterError, Lexer
from .objects import Environment
from .parse import Parser
from .runtime import Evaluator


class Repl(cmd.Cmd):
    """Read-eval-print loop. Each line runs in a fresh top-level Environment."""

    intro = "Monkey interpreter :: Python backend\nType 'exit' or press Ctrl-D to leave."
    prompt = ">> "

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.evaluator = Evaluator(self.stdout)

    def onecmd(self, line):
        """Only a bare `exit` and end of input are commands; anything else is source."""
        stripped = line.strip()
        if not stripped:
            return self.emptyline()
        if stripped == "exit":
            return self.do_exit(stripped)
        if stripped == "EOF":
            return self.do_EOF(stripped)
        return self.default(line)

    def default(self, line):
        """Evaluates one line of Monkey source."""
        try:
            parser = Parser(Lexer(line))
            program = parser.parse_program()
        except IllegalCharacterError as e:
            self.stdout.write("FATAL ERROR: " + e.msg + "\n")
            return

        if parser.errors:
            for msg in parser.errors:
                self.stdout.write("ERROR: " + msg + "\n")
            return

        try:
            result = self.evaluator.eval_program(program, Environment())
        except RecursionError:
            self.stdout.write("ERROR: maximum recursion depth exceeded\n")
            return
        self.stdout.write(result.inspect() + "\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
