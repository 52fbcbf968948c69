"""Monkey lexer — pulls one token at a time out of raw source text."""

from __future__ import annotations

from .tokens import (
    DOUBLE_OPS,
    SINGLE_OPS,
    TK_EOF,
    TK_ILLEGAL,
    TK_INT,
    TK_STRING,
    Token,
    lookup_ident,
)

EOF_CHAR = ""


class IllegalCharacterError(Exception):
    """A character outside the language was found. Not recoverable."""

    def __init__(self, char: str, line: int):
        self.char: str = char
        self.line: int = line
        self.msg: str = "illegal character: " + repr(char) + " at line: " + str(line)
        super().__init__(self.msg)


def _is_letter(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


class Lexer:
    """Lexical analyzer. Call next_token() until it yields TK_EOF."""

    def __init__(self, source: str):
        self.source: str = source
        self.position: int = 0
        self.next_position: int = 0
        self.ch: str = EOF_CHAR
        self.line: int = 1
        self._read_char()

    # ── Cursor ───────────────────────────────────────────────

    def _read_char(self) -> None:
        if self.next_position >= len(self.source):
            self.ch = EOF_CHAR
        else:
            self.ch = self.source[self.next_position]
        self.position = self.next_position
        self.next_position += 1

    def _advance(self) -> None:
        """Consume the current character, counting newlines."""
        if self.ch == "\n":
            self.line += 1
        self._read_char()

    def _peek_char(self) -> str:
        if self.next_position >= len(self.source):
            return EOF_CHAR
        return self.source[self.next_position]

    # ── Skipping ─────────────────────────────────────────────

    def _skip_whitespace(self) -> None:
        while self.ch in (" ", "\t", "\n", "\r"):
            self._advance()

    def _skip_line_comment(self) -> None:
        while self.ch != "\n" and self.ch != EOF_CHAR:
            self._advance()

    def _skip_block_comment(self) -> None:
        # '/*'
        self._advance()
        self._advance()
        while self.ch != EOF_CHAR:
            if self.ch == "*" and self._peek_char() == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        # unterminated block comment runs to end of input

    # ── Tokens ───────────────────────────────────────────────

    def next_token(self) -> Token:
        while True:
            self._skip_whitespace()
            if self.ch == "/" and self._peek_char() == "/":
                self._skip_line_comment()
                continue
            if self.ch == "/" and self._peek_char() == "*":
                self._skip_block_comment()
                continue
            break

        line = self.line
        c = self.ch

        if c == EOF_CHAR:
            return Token(TK_EOF, "", line)

        pair = c + self._peek_char()
        if pair in DOUBLE_OPS:
            self._advance()
            self._advance()
            return Token(DOUBLE_OPS[pair], pair, line)

        if c in SINGLE_OPS:
            self._advance()
            return Token(SINGLE_OPS[c], c, line)

        if c == '"':
            return Token(TK_STRING, self._read_string(), line)

        if _is_letter(c):
            word = self._read_while(_is_letter)
            return Token(lookup_ident(word), word, line)

        if _is_digit(c):
            return Token(TK_INT, self._read_while(_is_digit), line)

        self._advance()
        return Token(TK_ILLEGAL, c, line)

    def _read_while(self, pred) -> str:
        start = self.position
        while self.ch != EOF_CHAR and pred(self.ch):
            self._advance()
        return self.source[start : self.position]

    def _read_string(self) -> str:
        # opening quote
        self._advance()
        start = self.position
        while self.ch != '"' and self.ch != EOF_CHAR:
            self._advance()
        value = self.source[start : self.position]
        if self.ch == '"':
            self._advance()
        return value

    def tokens(self) -> list[Token]:
        """Drain the lexer into a list ending with TK_EOF. Used by tooling and tests."""
        result: list[Token] = []
        while True:
            tok = self.next_token()
            result.append(tok)
            if tok.kind == TK_EOF:
                return result
