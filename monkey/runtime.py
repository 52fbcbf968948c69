"""Monkey runtime — tree-walking evaluation of a parsed program.

Every evaluation yields an Object. Failures are ``Error`` values travelling
through the same channel as results: each composite rule checks its
sub-results and hands the first error back unchanged. A ``Return`` wrapper
unwinds through blocks until the enclosing call unwraps it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import sys
from typing import Callable, TextIO

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
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .lexer import Lexer
from .objects import (
    ARRAY,
    FALSE,
    HASH,
    INTEGER,
    NULL,
    STRING,
    TRUE,
    VOID,
    Array,
    Builtin,
    Environment,
    Error,
    Function,
    Hash,
    Hashable,
    HashKey,
    HashPair,
    Integer,
    Object,
    Return,
    String,
    is_error,
    native_bool,
    wrap_int64,
)
from .parse import Parser

# Each interpreted call nests about five Python frames.
RECURSION_LIMIT = 10000


def new_error(message: str) -> Error:
    return Error(message)


def _int_div_trunc(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q


# ============================================================
# Evaluator
# ============================================================


class Evaluator:
    """Evaluates AST nodes against environments.

    ``out`` receives whatever the program prints. Holding it here, rather than
    in a module global, keeps separate evaluations independent.
    """

    def __init__(self, out: TextIO | None = None):
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.out: TextIO = out if out is not None else sys.stdout
        self.builtins: dict[str, Builtin] = {
            name: Builtin(name, fn) for name, fn in BUILTINS.items()
        }

    # ---- Entry points ------------------------------------------------------

    def eval_program(self, program: Program, env: Environment) -> Object:
        result: Object = NULL
        for stmt in program.statements:
            result = self.eval(stmt, env)
            if isinstance(result, Return):
                return new_error("return statement not permitted outside function body")
            if isinstance(result, Error):
                return result
        return result

    def eval(self, node: Node | Program | None, env: Environment) -> Object:
        # Statements
        if isinstance(node, Program):
            return self.eval_program(node, env)
        if isinstance(node, ExpressionStatement):
            return self.eval(node.expression, env)
        if isinstance(node, BlockStatement):
            return self._eval_block(node, Environment.enclosed(env))
        if isinstance(node, IfStatement):
            return self._eval_if(node, env)
        if isinstance(node, ReturnStatement):
            if node.value is None:
                return Return(VOID)
            val = self.eval(node.value, env)
            if is_error(val):
                return val
            return Return(val)
        if isinstance(node, DeclarationStatement):
            return self._eval_declaration(node, env)

        # Expressions
        if isinstance(node, IntegerLiteral):
            return Integer(node.value)
        if isinstance(node, BooleanLiteral):
            return native_bool(node.value)
        if isinstance(node, StringLiteral):
            return String(node.value)
        if isinstance(node, PrefixExpression):
            right = self.eval(node.right, env)
            if is_error(right):
                return right
            return self._eval_prefix(node.operator, right)
        if isinstance(node, InfixExpression):
            left = self.eval(node.left, env)
            if is_error(left):
                return left
            right = self.eval(node.right, env)
            if is_error(right):
                return right
            return self._eval_infix(node.operator, left, right)
        if isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        if isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)
        if isinstance(node, CallExpression):
            fn = self.eval(node.function, env)
            if is_error(fn):
                return fn
            args = self._eval_expressions(node.arguments, env)
            if isinstance(args, Error):
                return args
            return self.apply_function(fn, args)
        if isinstance(node, ArrayLiteral):
            elements = self._eval_expressions(node.elements, env)
            if isinstance(elements, Error):
                return elements
            return Array(elements)
        if isinstance(node, IndexExpression):
            left = self.eval(node.left, env)
            if is_error(left):
                return left
            index = self.eval(node.index, env)
            if is_error(index):
                return index
            return self._eval_index(left, index)
        if isinstance(node, HashLiteral):
            return self._eval_hash_literal(node, env)

        if node is None:
            return new_error("cannot evaluate an incomplete program")
        return new_error(f"unknown node: {type(node).__name__}")

    # ---- Statements --------------------------------------------------------

    def _eval_block(self, block: BlockStatement, env: Environment) -> Object:
        """Run a block in env (already the block's own scope)."""
        result: Object = NULL
        for stmt in block.statements:
            result = self.eval(stmt, env)
            if isinstance(result, (Return, Error)):
                return result
        return result

    def _eval_if(self, node: IfStatement, env: Environment) -> Object:
        condition = self.eval(node.condition, env)
        if is_error(condition):
            return condition
        if condition is TRUE:
            return self._eval_block(node.consequence, Environment.enclosed(env))
        if condition is not FALSE:
            return new_error(
                "expected BOOLEAN as condition in if-statement got: " + condition.type()
            )
        if node.alternative is not None:
            return self._eval_block(node.alternative, Environment.enclosed(env))
        return NULL

    def _eval_declaration(self, node: DeclarationStatement, env: Environment) -> Object:
        name = node.name.value
        if env.get_local(name) is not None:
            kind = "constant" if node.is_const else "variable"
            return new_error(f'redeclared {kind}: "{name}" in one block')
        val = self.eval(node.value, env)
        if is_error(val):
            return val
        return env.set(name, val)

    # ---- Operators ---------------------------------------------------------

    def _eval_prefix(self, operator: str, right: Object) -> Object:
        if operator == "!":
            if right is TRUE:
                return FALSE
            if right is FALSE:
                return TRUE
            return new_error("expected BOOLEAN in negation expression, got: " + right.type())
        if operator == "-":
            if not isinstance(right, Integer):
                return new_error("unknown operator: -" + right.type())
            return Integer(wrap_int64(-right.value))
        return new_error(f"unknown operator: {operator}{right.type()}")

    def _eval_infix(self, operator: str, left: Object, right: Object) -> Object:
        if left.type() != right.type():
            return new_error(f"type mismatch: {left.type()} {operator} {right.type()}")
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(operator, left, right)
        if isinstance(left, String) and isinstance(right, String):
            return self._eval_string_infix(operator, left, right)
        if operator == "==":
            return native_bool(left is right)
        if operator == "!=":
            return native_bool(left is not right)
        return new_error(f"unknown operator: {left.type()} {operator} {right.type()}")

    def _eval_integer_infix(self, operator: str, left: Integer, right: Integer) -> Object:
        a = left.value
        b = right.value
        if operator == "+":
            return Integer(wrap_int64(a + b))
        if operator == "-":
            return Integer(wrap_int64(a - b))
        if operator == "*":
            return Integer(wrap_int64(a * b))
        if operator == "/":
            if b == 0:
                return new_error("division by zero")
            return Integer(wrap_int64(_int_div_trunc(a, b)))
        if operator == "<":
            return native_bool(a < b)
        if operator == ">":
            return native_bool(a > b)
        if operator == "<=":
            return native_bool(a <= b)
        if operator == ">=":
            return native_bool(a >= b)
        if operator == "==":
            return native_bool(a == b)
        if operator == "!=":
            return native_bool(a != b)
        return new_error(f"unknown operator: {INTEGER} {operator} {INTEGER}")

    def _eval_string_infix(self, operator: str, left: String, right: String) -> Object:
        if operator == "+":
            return String(left.value + right.value)
        if operator == "==":
            return native_bool(left.value == right.value)
        if operator == "!=":
            return native_bool(left.value != right.value)
        return new_error(f"unknown operator: {STRING} {operator} {STRING}")

    # ---- Names -------------------------------------------------------------

    def _eval_identifier(self, node: Identifier, env: Environment) -> Object:
        val = env.get(node.value)
        if val is not None:
            return val
        builtin = self.builtins.get(node.value)
        if builtin is not None:
            return builtin
        return new_error("unknown identifier: " + node.value)

    def _eval_expressions(
        self, exprs: list[Expression | None], env: Environment
    ) -> list[Object] | Error:
        """Left to right; the first error replaces the whole list."""
        result: list[Object] = []
        for e in exprs:
            val = self.eval(e, env)
            if isinstance(val, Error):
                return val
            result.append(val)
        return result

    # ---- Calls -------------------------------------------------------------

    def apply_function(self, fn: Object, args: list[Object]) -> Object:
        if isinstance(fn, Function):
            if len(args) != len(fn.parameters):
                return new_error(
                    f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}"
                )
            call_env = Environment.enclosed(fn.env)
            for param, arg in zip(fn.parameters, args):
                call_env.set(param.value, arg)
            result = self._eval_function_body(fn.body, call_env)
            if isinstance(result, Return):
                return result.value
            return result
        if isinstance(fn, Builtin):
            return fn.fn(self, args)
        return new_error("not a function: " + fn.type())

    def _eval_function_body(self, body: BlockStatement, env: Environment) -> Object:
        for stmt in body.statements:
            result = self.eval(stmt, env)
            if isinstance(result, (Return, Error)):
                return result
        return new_error("missing return at the end of function body")

    # ---- Indexing ----------------------------------------------------------

    def _eval_index(self, left: Object, index: Object) -> Object:
        if isinstance(left, Array) and isinstance(index, Integer):
            i = index.value
            if i < 0 or i > len(left.elements) - 1:
                return new_error("index out of boundaries")
            return left.elements[i]
        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return new_error(f"index operator not supported: {HASH}[{index.type()}]")
            pair = left.pairs.get(index.hash_key())
            if pair is None:
                return new_error(
                    f'No hash pair in "{left.inspect()}" with key "{index.inspect()}"'
                )
            return pair.value
        return new_error(f"index operator not supported: {left.type()}[{index.type()}]")

    def _eval_hash_literal(self, node: HashLiteral, env: Environment) -> Object:
        pairs: dict[HashKey, HashPair] = {}
        for key_node, value_node in node.pairs:
            key = self.eval(key_node, env)
            if is_error(key):
                return key
            if not isinstance(key, Hashable):
                return new_error(f"{key.type()} can't be used as hash key")
            value = self.eval(value_node, env)
            if is_error(value):
                return value
            pairs[key.hash_key()] = HashPair(key, value)
        return Hash(pairs)


# ============================================================
# Builtins
# ============================================================


def _arity_error(got: int, want: int) -> Error:
    return new_error(f"wrong number of arguments. got={got} want={want}")


def _builtin_len(rt: Evaluator, args: list[Object]) -> Object:
    if len(args) != 1:
        return _arity_error(len(args), 1)
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value.encode("utf-8")))
    if isinstance(arg, Array):
        return Integer(len(arg.elements))
    return new_error("argument to `len` not supported, got " + arg.type())


def _array_arg(name: str, arg: Object) -> Array | Error:
    if not isinstance(arg, Array):
        return new_error(f"argument to `{name}` must be {ARRAY}, got {arg.type()}")
    return arg


def _builtin_first(rt: Evaluator, args: list[Object]) -> Object:
    if len(args) != 1:
        return _arity_error(len(args), 1)
    arr = _array_arg("first", args[0])
    if isinstance(arr, Error):
        return arr
    if arr.elements:
        return arr.elements[0]
    return NULL


def _builtin_last(rt: Evaluator, args: list[Object]) -> Object:
    if len(args) != 1:
        return _arity_error(len(args), 1)
    arr = _array_arg("last", args[0])
    if isinstance(arr, Error):
        return arr
    if arr.elements:
        return arr.elements[-1]
    return NULL


def _builtin_rest(rt: Evaluator, args: list[Object]) -> Object:
    if len(args) != 1:
        return _arity_error(len(args), 1)
    arr = _array_arg("rest", args[0])
    if isinstance(arr, Error):
        return arr
    if arr.elements:
        return Array(list(arr.elements[1:]))
    return NULL


def _builtin_push(rt: Evaluator, args: list[Object]) -> Object:
    if len(args) != 2:
        return _arity_error(len(args), 2)
    arr = _array_arg("push", args[0])
    if isinstance(arr, Error):
        return arr
    return Array(arr.elements + [args[1]])


def _builtin_print(rt: Evaluator, args: list[Object]) -> Object:
    rt.out.write(" ".join(a.inspect() for a in args) + "\n")
    return VOID


BUILTINS: dict[str, Callable[[Evaluator, list[Object]], Object]] = {
    "len": _builtin_len,
    "first": _builtin_first,
    "last": _builtin_last,
    "rest": _builtin_rest,
    "push": _builtin_push,
    "print": _builtin_print,
}


# ============================================================
# Running source text
# ============================================================


@dataclass
class RunResult:
    """Outcome of running one piece of source text.

    ``value`` is None when the program had syntax errors and was not
    evaluated.
    """

    program: Program
    errors: list[str] = field(default_factory=list)
    value: Object | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and not is_error(self.value)


def run(
    source: str, *, env: Environment | None = None, out: TextIO | None = None
) -> RunResult:
    """Lex, parse and, if parsing succeeded, evaluate source."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    if parser.errors:
        return RunResult(program, list(parser.errors))
    if env is None:
        env = Environment()
    value = Evaluator(out).eval_program(program, env)
    return RunResult(program, [], value)
