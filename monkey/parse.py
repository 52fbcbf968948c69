"""Monkey parser — Pratt parsing for expressions, recursive descent for statements.

Tokens are pulled from the lexer one at a time; the parser only ever looks at
the current and the next ("peek") token. Syntax errors are collected in
``Parser.errors`` and parsing carries on, so one pass reports every problem it
can find. An illegal character is the exception: it raises
``IllegalCharacterError`` the moment it is pulled.
"""

from __future__ import annotations

from typing import Callable

from .ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    DeclarationStatement,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfStatement,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from .lexer import IllegalCharacterError, Lexer
from .tokens import (
    TK_ASSIGN,
    TK_ASTERISK,
    TK_BANG,
    TK_BOOLEAN,
    TK_COLON,
    TK_COMMA,
    TK_CONST,
    TK_ELSE,
    TK_EOF,
    TK_EQ,
    TK_FUNCTION,
    TK_GT,
    TK_GTE,
    TK_IDENT,
    TK_IF,
    TK_ILLEGAL,
    TK_INT,
    TK_LBRACE,
    TK_LBRACKET,
    TK_LPAREN,
    TK_LT,
    TK_LTE,
    TK_MINUS,
    TK_NEQ,
    TK_PLUS,
    TK_RBRACE,
    TK_RBRACKET,
    TK_RETURN,
    TK_RPAREN,
    TK_SEMICOLON,
    TK_SLASH,
    TK_STRING,
    TK_VAR,
    Token,
)

# Binding strengths, ascending
LOWEST = 1
EQUALS = 2  # == !=
LESSGREATER = 3  # < > <= >=
SUM = 4  # + -
PRODUCT = 5  # * /
PREFIX = 6  # -x !x
CALL = 7  # f(x)
INDEX = 8  # a[i]

PRECEDENCES: dict[str, int] = {
    TK_EQ: EQUALS,
    TK_NEQ: EQUALS,
    TK_LT: LESSGREATER,
    TK_GT: LESSGREATER,
    TK_LTE: LESSGREATER,
    TK_GTE: LESSGREATER,
    TK_PLUS: SUM,
    TK_MINUS: SUM,
    TK_ASTERISK: PRODUCT,
    TK_SLASH: PRODUCT,
    TK_LPAREN: CALL,
    TK_LBRACKET: INDEX,
}

INT64_MAX = (1 << 63) - 1

PrefixFn = Callable[[], "Expression | None"]
InfixFn = Callable[["Expression | None"], "Expression | None"]


class Parser:
    """Builds a Program from a Lexer. Read ``errors`` before evaluating."""

    def __init__(self, lexer: Lexer):
        self.lexer: Lexer = lexer
        self.errors: list[str] = []
        self.cur_token: Token = Token(TK_EOF, "", 1)
        self.peek_token: Token = Token(TK_EOF, "", 1)

        self.prefix_fns: dict[str, PrefixFn] = {
            TK_IDENT: self.parse_identifier,
            TK_INT: self.parse_integer_literal,
            TK_STRING: self.parse_string_literal,
            TK_BOOLEAN: self.parse_boolean_literal,
            TK_FUNCTION: self.parse_function_literal,
            TK_LPAREN: self.parse_grouped_expression,
            TK_LBRACKET: self.parse_array_literal,
            TK_LBRACE: self.parse_hash_literal,
            TK_BANG: self.parse_prefix_expression,
            TK_MINUS: self.parse_prefix_expression,
        }
        self.infix_fns: dict[str, InfixFn] = {
            TK_LPAREN: self.parse_call_expression,
            TK_LBRACKET: self.parse_index_expression,
        }
        for kind in (
            TK_EQ,
            TK_NEQ,
            TK_LT,
            TK_GT,
            TK_LTE,
            TK_GTE,
            TK_PLUS,
            TK_MINUS,
            TK_ASTERISK,
            TK_SLASH,
        ):
            self.infix_fns[kind] = self.parse_infix_expression

        # fill cur_token and peek_token
        self.next_token()
        self.next_token()

    # ── Helpers ──────────────────────────────────────────────

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()
        if self.peek_token.kind == TK_ILLEGAL:
            raise IllegalCharacterError(self.peek_token.literal, self.peek_token.line)

    def cur_token_is(self, kind: str) -> bool:
        return self.cur_token.kind == kind

    def peek_token_is(self, kind: str) -> bool:
        return self.peek_token.kind == kind

    def expect_peek(self, kind: str) -> bool:
        """Advance if the next token is of the given kind, else record an error."""
        if self.peek_token_is(kind):
            self.next_token()
            return True
        self.peek_error(kind)
        return False

    def peek_error(self, kind: str) -> None:
        self.errors.append(
            f'unexpected token: "{self.peek_token.kind}" (expected: "{kind}")'
            f" at line: {self.peek_token.line}"
        )

    def no_prefix_fn_error(self, tok: Token) -> None:
        self.errors.append(f'unexpected token: "{tok.literal}" at line: {tok.line}')

    def expect_semicolon(self) -> None:
        if self.peek_token_is(TK_SEMICOLON):
            self.next_token()
        else:
            self.errors.append(f"expected semicolon at line: {self.cur_token.line}")

    def peek_precedence(self) -> int:
        return PRECEDENCES.get(self.peek_token.kind, LOWEST)

    def cur_precedence(self) -> int:
        return PRECEDENCES.get(self.cur_token.kind, LOWEST)

    # ── Statements ───────────────────────────────────────────

    def parse_program(self) -> Program:
        program = Program()
        while not self.cur_token_is(TK_EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()
        return program

    def parse_statement(self) -> Statement | None:
        kind = self.cur_token.kind
        if kind == TK_VAR or kind == TK_CONST:
            return self.parse_declaration_statement()
        if kind == TK_IF:
            return self.parse_if_statement()
        if kind == TK_RETURN:
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_declaration_statement(self) -> DeclarationStatement | None:
        tok = self.cur_token
        if not self.expect_peek(TK_IDENT):
            return None
        name = Identifier(self.cur_token, self.cur_token.literal)
        if not self.expect_peek(TK_ASSIGN):
            return None
        self.next_token()
        value = self.parse_expression(LOWEST)
        self.expect_semicolon()
        return DeclarationStatement(tok, name, value)

    def parse_return_statement(self) -> ReturnStatement:
        tok = self.cur_token
        if self.peek_token_is(TK_SEMICOLON):
            self.next_token()
            return ReturnStatement(tok, None)
        self.next_token()
        value = self.parse_expression(LOWEST)
        self.expect_semicolon()
        return ReturnStatement(tok, value)

    def parse_expression_statement(self) -> ExpressionStatement:
        tok = self.cur_token
        expression = self.parse_expression(LOWEST)
        self.expect_semicolon()
        return ExpressionStatement(tok, expression)

    def parse_if_statement(self) -> IfStatement | None:
        tok = self.cur_token
        if not self.expect_peek(TK_LPAREN):
            return None
        self.next_token()
        condition = self.parse_expression(LOWEST)
        if not self.expect_peek(TK_RPAREN):
            return None
        if not self.expect_peek(TK_LBRACE):
            return None
        consequence = self.parse_block_statement()

        alternative: BlockStatement | None = None
        if self.peek_token_is(TK_ELSE):
            self.next_token()
            if self.peek_token_is(TK_IF):
                # else if: a block holding the nested if statement
                self.next_token()
                else_tok = self.cur_token
                nested = self.parse_if_statement()
                if nested is None:
                    return None
                alternative = BlockStatement(else_tok, [nested])
            else:
                if not self.expect_peek(TK_LBRACE):
                    return None
                alternative = self.parse_block_statement()
        return IfStatement(tok, condition, consequence, alternative)

    def parse_block_statement(self) -> BlockStatement:
        block = BlockStatement(self.cur_token)
        self.next_token()
        while not self.cur_token_is(TK_RBRACE):
            if self.cur_token_is(TK_EOF):
                self.errors.append(
                    f'unexpected token: "{TK_EOF}" (expected: "{TK_RBRACE}")'
                    f" at line: {self.cur_token.line}"
                )
                break
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()
        return block

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self, precedence: int) -> Expression | None:
        prefix = self.prefix_fns.get(self.cur_token.kind)
        if prefix is None:
            self.no_prefix_fn_error(self.cur_token)
            return None
        left = prefix()

        while not self.peek_token_is(TK_SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_fns.get(self.peek_token.kind)
            if infix is None:
                return left
            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Expression:
        return Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self) -> Expression | None:
        tok = self.cur_token
        try:
            value = int(tok.literal, 10)
        except ValueError:
            value = None
        if value is None or value > INT64_MAX:
            self.errors.append(
                f'could not parse: "{tok.literal}" as integer at line: {tok.line}'
            )
            return None
        return IntegerLiteral(tok, value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean_literal(self) -> Expression:
        return BooleanLiteral(self.cur_token, self.cur_token.literal == "true")

    def parse_grouped_expression(self) -> Expression | None:
        self.next_token()
        expression = self.parse_expression(LOWEST)
        if not self.expect_peek(TK_RPAREN):
            return None
        return expression

    def parse_prefix_expression(self) -> Expression:
        tok = self.cur_token
        self.next_token()
        right = self.parse_expression(PREFIX)
        return PrefixExpression(tok, tok.literal, right)

    def parse_infix_expression(self, left: Expression | None) -> Expression:
        tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()
        right = self.parse_expression(precedence)
        return InfixExpression(tok, left, tok.literal, right)

    def parse_function_literal(self) -> Expression | None:
        tok = self.cur_token
        if not self.expect_peek(TK_LPAREN):
            return None
        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        if not self.expect_peek(TK_LBRACE):
            return None
        body = self.parse_block_statement()
        return FunctionLiteral(tok, parameters, body)

    def parse_function_parameters(self) -> list[Identifier] | None:
        identifiers: list[Identifier] = []
        if self.peek_token_is(TK_RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(TK_IDENT):
            return None
        identifiers.append(Identifier(self.cur_token, self.cur_token.literal))
        while self.peek_token_is(TK_COMMA):
            self.next_token()
            if not self.expect_peek(TK_IDENT):
                return None
            identifiers.append(Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TK_RPAREN):
            return None
        return identifiers

    def parse_expression_list(self, end: str) -> list[Expression | None] | None:
        """Comma-separated expressions up to and including the end token."""
        items: list[Expression | None] = []
        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        items.append(self.parse_expression(LOWEST))
        while self.peek_token_is(TK_COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(LOWEST))

        if not self.expect_peek(end):
            return None
        return items

    def parse_call_expression(self, function: Expression | None) -> Expression | None:
        tok = self.cur_token
        arguments = self.parse_expression_list(TK_RPAREN)
        if arguments is None:
            return None
        return CallExpression(tok, function, arguments)

    def parse_array_literal(self) -> Expression | None:
        tok = self.cur_token
        elements = self.parse_expression_list(TK_RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(tok, elements)

    def parse_index_expression(self, left: Expression | None) -> Expression | None:
        tok = self.cur_token
        self.next_token()
        index = self.parse_expression(LOWEST)
        if not self.expect_peek(TK_RBRACKET):
            return None
        return IndexExpression(tok, left, index)

    def parse_hash_literal(self) -> Expression | None:
        hash_lit = HashLiteral(self.cur_token)
        while not self.peek_token_is(TK_RBRACE):
            self.next_token()
            key = self.parse_expression(LOWEST)
            if not self.expect_peek(TK_COLON):
                return None
            self.next_token()
            value = self.parse_expression(LOWEST)
            hash_lit.pairs.append((key, value))
            if not self.peek_token_is(TK_RBRACE) and not self.expect_peek(TK_COMMA):
                return None

        if not self.expect_peek(TK_RBRACE):
            return None
        return hash_lit
