"""Monkey token model — token kinds, the Token record, and the keyword table."""

from __future__ import annotations

from dataclasses import dataclass


# Token kind constants
TK_ILLEGAL = "ILLEGAL"
TK_EOF = "EOF"

TK_IDENT = "IDENT"
TK_INT = "INT"
TK_STRING = "STRING"
TK_BOOLEAN = "BOOLEAN"

# Operators
TK_ASSIGN = "="
TK_PLUS = "+"
TK_MINUS = "-"
TK_BANG = "!"
TK_ASTERISK = "*"
TK_SLASH = "/"

TK_LT = "<"
TK_GT = ">"
TK_LTE = "<="
TK_GTE = ">="
TK_EQ = "=="
TK_NEQ = "!="

# Delimiters
TK_COMMA = ","
TK_SEMICOLON = ";"
TK_COLON = ":"

TK_LPAREN = "("
TK_RPAREN = ")"
TK_LBRACE = "{"
TK_RBRACE = "}"
TK_LBRACKET = "["
TK_RBRACKET = "]"

# Keywords
TK_FUNCTION = "FUNCTION"
TK_RETURN = "RETURN"
TK_VAR = "VAR"
TK_CONST = "CONST"
TK_IF = "IF"
TK_ELSE = "ELSE"

KEYWORDS: dict[str, str] = {
    "fun": TK_FUNCTION,
    "var": TK_VAR,
    "const": TK_CONST,
    "return": TK_RETURN,
    "true": TK_BOOLEAN,
    "false": TK_BOOLEAN,
    "if": TK_IF,
    "else": TK_ELSE,
}

# Two-character operators, checked before SINGLE_OPS
DOUBLE_OPS: dict[str, str] = {
    "==": TK_EQ,
    "!=": TK_NEQ,
    "<=": TK_LTE,
    ">=": TK_GTE,
}

SINGLE_OPS: dict[str, str] = {
    "=": TK_ASSIGN,
    "+": TK_PLUS,
    "-": TK_MINUS,
    "!": TK_BANG,
    "*": TK_ASTERISK,
    "/": TK_SLASH,
    "<": TK_LT,
    ">": TK_GT,
    ",": TK_COMMA,
    ";": TK_SEMICOLON,
    ":": TK_COLON,
    "(": TK_LPAREN,
    ")": TK_RPAREN,
    "{": TK_LBRACE,
    "}": TK_RBRACE,
    "[": TK_LBRACKET,
    "]": TK_RBRACKET,
}


@dataclass(frozen=True)
class Token:
    """A token with kind, literal text, and the line it starts on."""

    kind: str
    literal: str
    line: int

    def __repr__(self) -> str:
        return (
            "Token(" + self.kind + ", " + repr(self.literal) + ", " + str(self.line) + ")"
        )


def lookup_ident(word: str) -> str:
    """Keyword kind for word, or TK_IDENT."""
    return KEYWORDS.get(word, TK_IDENT)
