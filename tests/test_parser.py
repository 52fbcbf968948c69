"""Parser tests: node shapes, error accumulation, fatal lexical errors."""

import pytest

from monkey import IllegalCharacterError, parse
from monkey.ast import (
    ArrayLiteral,
    BlockStatement,
    CallExpression,
    DeclarationStatement,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfStatement,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    PrefixExpression,
    ReturnStatement,
    StringLiteral,
)
from monkey.lexer import Lexer
from monkey.parse import Parser


def parse_ok(source: str):
    program, errors = parse(source)
    assert errors == [], errors
    return program


def only_expression(source: str):
    program = parse_ok(source)
    assert len(program.statements) == 1
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


def test_declarations() -> None:
    program = parse_ok("const x = 5; var y = true; const foobar = y;")
    names = []
    for stmt in program.statements:
        assert isinstance(stmt, DeclarationStatement)
        names.append((stmt.name.value, stmt.is_const))
    assert names == [("x", True), ("y", False), ("foobar", True)]
    assert isinstance(program.statements[0].value, IntegerLiteral)
    assert program.statements[0].value.value == 5


def test_return_statements() -> None:
    program = parse_ok("return 5; return x + y; return;")
    values = [stmt.value for stmt in program.statements]
    assert all(isinstance(stmt, ReturnStatement) for stmt in program.statements)
    assert isinstance(values[0], IntegerLiteral)
    assert isinstance(values[1], InfixExpression)
    assert values[2] is None


def test_if_statement() -> None:
    program = parse_ok("if (x < y) { x; } else { y; }")
    stmt = program.statements[0]
    assert isinstance(stmt, IfStatement)
    assert str(stmt.condition) == "(x < y)"
    assert len(stmt.consequence.statements) == 1
    assert stmt.alternative is not None
    assert str(stmt.alternative) == "y"


def test_else_if_nests_an_if_in_the_alternative() -> None:
    program = parse_ok("if (a) { 1; } else if (b) { 2; }")
    stmt = program.statements[0]
    assert isinstance(stmt.alternative, BlockStatement)
    nested = stmt.alternative.statements[0]
    assert isinstance(nested, IfStatement)
    assert nested.alternative is None


def test_if_needs_no_semicolon() -> None:
    program = parse_ok("if (true) { 1; } 2;")
    assert len(program.statements) == 2


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


def test_identifier() -> None:
    expr = only_expression("foobar;")
    assert isinstance(expr, Identifier)
    assert expr.value == "foobar"
    assert expr.token_literal() == "foobar"


def test_string_literal() -> None:
    expr = only_expression('"hello world";')
    assert isinstance(expr, StringLiteral)
    assert expr.value == "hello world"


@pytest.mark.parametrize(
    "source,operator,value",
    [("!5;", "!", 5), ("-15;", "-", 15)],
)
def test_prefix_expressions(source: str, operator: str, value: int) -> None:
    expr = only_expression(source)
    assert isinstance(expr, PrefixExpression)
    assert expr.operator == operator
    assert expr.right.value == value


@pytest.mark.parametrize("operator", ["+", "-", "*", "/", "<", ">", "<=", ">=", "==", "!="])
def test_infix_expressions(operator: str) -> None:
    expr = only_expression(f"5 {operator} 6;")
    assert isinstance(expr, InfixExpression)
    assert expr.operator == operator
    assert expr.left.value == 5
    assert expr.right.value == 6


def test_function_literal() -> None:
    expr = only_expression("fun(x, y) { return x + y; };")
    assert isinstance(expr, FunctionLiteral)
    assert [p.value for p in expr.parameters] == ["x", "y"]
    assert len(expr.body.statements) == 1


@pytest.mark.parametrize(
    "source,expected",
    [("fun() { return 1; };", []), ("fun(x) { return 1; };", ["x"]), ("fun(x, y, z) { return 1; };", ["x", "y", "z"])],
)
def test_function_parameters(source: str, expected: list[str]) -> None:
    expr = only_expression(source)
    assert [p.value for p in expr.parameters] == expected


def test_call_expression() -> None:
    expr = only_expression("add(1, 2 * 3, 4 + 5);")
    assert isinstance(expr, CallExpression)
    assert str(expr.function) == "add"
    assert [str(a) for a in expr.arguments] == ["1", "(2 * 3)", "(4 + 5)"]


def test_array_and_index() -> None:
    expr = only_expression("[1, 2][0];")
    assert isinstance(expr, IndexExpression)
    assert isinstance(expr.left, ArrayLiteral)
    assert len(expr.left.elements) == 2


def test_hash_literal_keeps_source_order() -> None:
    expr = only_expression('{"b": 1, "a": 2, 3: true};')
    assert isinstance(expr, HashLiteral)
    assert [str(k) for k, _ in expr.pairs] == ["b", "a", "3"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def test_errors_accumulate() -> None:
    _, errors = parse("const = 1;\nconst y 2;\nconst z = 3;")
    assert errors[0] == 'unexpected token: "=" (expected: "IDENT") at line: 1'
    assert 'unexpected token: "INT" (expected: "=") at line: 2' in errors
    assert len(errors) >= 2


def test_parse_keeps_going_after_error() -> None:
    program, errors = parse("5\nconst a = 1;")
    assert errors == ["expected semicolon at line: 1"]
    assert len(program.statements) == 2


def test_function_parameters_must_be_identifiers() -> None:
    _, errors = parse("fun(1) { return 1; };")
    assert errors[0] == 'unexpected token: "INT" (expected: "IDENT") at line: 1'


def test_integer_too_large() -> None:
    _, errors = parse("9223372036854775808;")
    assert errors == ['could not parse: "9223372036854775808" as integer at line: 1']


def test_largest_integer() -> None:
    expr = only_expression("9223372036854775807;")
    assert expr.value == 9223372036854775807


def test_illegal_character_raises() -> None:
    with pytest.raises(IllegalCharacterError) as info:
        parse("const a = 1;\nconst b = #;")
    assert info.value.line == 2
    assert info.value.char == "#"


def test_parsing_is_repeatable() -> None:
    source = "const f = fun(x) { return x * 2; }; f(3);"
    first = Parser(Lexer(source)).parse_program()
    second = Parser(Lexer(source)).parse_program()
    assert str(first) == str(second)
