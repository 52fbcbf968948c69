"""Monkey AST — parse-time node definitions.

Every node keeps the token it was built from and renders back to
source-like text through ``str()``. Binary and prefix operations render
fully parenthesized, which is what the parser tests compare against.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .tokens import Token


# ============================================================
# BASES
# ============================================================


@dataclass
class Node:
    """Base for all AST nodes."""

    token: Token

    def token_literal(self) -> str:
        return self.token.literal


@dataclass
class Statement(Node):
    """Base for all statements."""


@dataclass
class Expression(Node):
    """Base for all expressions."""


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Identifier(Expression):
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass
class IntegerLiteral(Expression):
    value: int

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class BooleanLiteral(Expression):
    value: bool

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class StringLiteral(Expression):
    value: str

    def __str__(self) -> str:
        return self.token.literal


@dataclass
class PrefixExpression(Expression):
    """!x, -x."""

    operator: str
    right: Expression | None

    def __str__(self) -> str:
        return "(" + self.operator + str(self.right) + ")"


@dataclass
class InfixExpression(Expression):
    """left op right."""

    left: Expression | None
    operator: str
    right: Expression | None

    def __str__(self) -> str:
        return "(" + str(self.left) + " " + self.operator + " " + str(self.right) + ")"


@dataclass
class FunctionLiteral(Expression):
    """fun(params) { body }."""

    parameters: list[Identifier]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return self.token_literal() + "(" + params + ") " + str(self.body)


@dataclass
class CallExpression(Expression):
    """callee(args). token is the '(' token."""

    function: Expression | None
    arguments: list[Expression | None]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return str(self.function) + "(" + args + ")"


@dataclass
class ArrayLiteral(Expression):
    elements: list[Expression | None]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass
class IndexExpression(Expression):
    """left[index]. token is the '[' token."""

    left: Expression | None
    index: Expression | None

    def __str__(self) -> str:
        return "(" + str(self.left) + "[" + str(self.index) + "])"


@dataclass
class HashLiteral(Expression):
    """{k: v, ...} — pairs kept in source order."""

    pairs: list[tuple[Expression | None, Expression | None]] = field(
        default_factory=list
    )

    def __str__(self) -> str:
        parts = [str(k) + ":" + str(v) for k, v in self.pairs]
        return "{" + ", ".join(parts) + "}"


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class DeclarationStatement(Statement):
    """var name = value; / const name = value;"""

    name: Identifier
    value: Expression | None

    @property
    def is_const(self) -> bool:
        return self.token.literal == "const"

    def __str__(self) -> str:
        value = str(self.value) if self.value is not None else ""
        return self.token_literal() + " " + str(self.name) + " = " + value + ";"


@dataclass
class ReturnStatement(Statement):
    """return value; / return;"""

    value: Expression | None

    def __str__(self) -> str:
        if self.value is None:
            return self.token_literal() + ";"
        return self.token_literal() + " " + str(self.value) + ";"


@dataclass
class ExpressionStatement(Statement):
    expression: Expression | None

    def __str__(self) -> str:
        if self.expression is None:
            return ""
        return str(self.expression)


@dataclass
class BlockStatement(Statement):
    """{ statements }. token is the '{' token."""

    statements: list[Statement] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)


@dataclass
class IfStatement(Statement):
    """if (condition) { consequence } else { alternative }."""

    condition: Expression | None
    consequence: BlockStatement
    alternative: BlockStatement | None = None

    def __str__(self) -> str:
        out = "if" + str(self.condition) + " " + str(self.consequence)
        if self.alternative is not None:
            out += "else " + str(self.alternative)
        return out


@dataclass
class Program:
    """Root of every parse: the top-level statements in order."""

    statements: list[Statement] = field(default_factory=list)

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ""

    def __str__(self) -> str:
        return "".join(str(s) for s in self.statements)
