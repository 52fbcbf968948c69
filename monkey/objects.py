"""Monkey runtime objects — value variants, shared singletons, hash keys, scopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from .ast import BlockStatement, Identifier


# ============================================================
# Type tags
# ============================================================

INTEGER = "INTEGER"
BOOLEAN = "BOOLEAN"
STRING = "STRING"
NULL_TYPE = "NULL"
VOID_TYPE = "VOID"
RETURN = "RETURN"
ERROR = "ERROR"
FUNCTION = "FUNCTION"
BUILTIN = "BUILTIN"
ARRAY = "ARRAY"
HASH = "HASH"

_UINT64_MASK = (1 << 64) - 1


def wrap_int64(value: int) -> int:
    """Two's-complement wraparound to a signed 64-bit integer."""
    value &= _UINT64_MASK
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def fnv1a_64(data: bytes) -> int:
    h = 0xCBF29CE484222325
    for b in data:
        h ^= b
        h = (h * 0x100000001B3) & _UINT64_MASK
    return h


# ============================================================
# Hash keys
# ============================================================


@dataclass(frozen=True)
class HashKey:
    """Canonical key for a hashable object: type tag plus 64-bit value."""

    type: str
    value: int


# ============================================================
# Objects
# ============================================================


class Object:
    """A runtime value."""

    def type(self) -> str:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


class Hashable(Object):
    """An object usable as a hash key."""

    def hash_key(self) -> HashKey:
        raise NotImplementedError


@dataclass(eq=False)
class Integer(Hashable):
    value: int

    def type(self) -> str:
        return INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER, self.value & _UINT64_MASK)


@dataclass(eq=False)
class Boolean(Hashable):
    value: bool

    def type(self) -> str:
        return BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN, 1 if self.value else 0)


@dataclass(eq=False)
class String(Hashable):
    value: str

    def type(self) -> str:
        return STRING

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING, fnv1a_64(self.value.encode("utf-8")))


class Null(Object):
    def type(self) -> str:
        return NULL_TYPE

    def inspect(self) -> str:
        return "null"


class Void(Object):
    """Result of a bare `return;`. Prints like null but is its own type."""

    def type(self) -> str:
        return VOID_TYPE

    def inspect(self) -> str:
        return "null"


@dataclass(eq=False)
class Return(Object):
    """Wraps the value of a return statement while it unwinds to the call."""

    value: Object

    def type(self) -> str:
        return RETURN

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(eq=False)
class Error(Object):
    message: str

    def type(self) -> str:
        return ERROR

    def inspect(self) -> str:
        return "ERROR: " + self.message


@dataclass(eq=False)
class Function(Object):
    parameters: list[Identifier]
    body: BlockStatement
    env: Environment

    def type(self) -> str:
        return FUNCTION

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return "fun(" + params + ") " + str(self.body)


BuiltinFn = Callable[..., Object]


@dataclass(eq=False)
class Builtin(Object):
    name: str
    fn: BuiltinFn

    def type(self) -> str:
        return BUILTIN

    def inspect(self) -> str:
        return "builtin function"


@dataclass(eq=False)
class Array(Object):
    elements: list[Object] = field(default_factory=list)

    def type(self) -> str:
        return ARRAY

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(eq=False)
class HashPair:
    key: Object
    value: Object


@dataclass(eq=False)
class Hash(Object):
    pairs: dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> str:
        return HASH

    def inspect(self) -> str:
        parts: list[str] = []
        for pair in self.pairs.values():
            parts.append(f"{pair.key.inspect()}: {pair.value.inspect()}")
        return "{" + ", ".join(parts) + "}"


# Shared for the whole process; compared by identity.
TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()
VOID = Void()


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_error(obj: Object | None) -> bool:
    return isinstance(obj, Error)


# ============================================================
# Environment
# ============================================================


class Environment:
    """One lexical scope: local bindings plus a link to the enclosing scope.

    The outer scope is referenced, never copied, so a Function that captured
    this scope keeps it alive for as long as the Function lives.
    """

    def __init__(self, outer: Environment | None = None):
        self.store: dict[str, Object] = {}
        self.outer: Environment | None = outer

    @classmethod
    def enclosed(cls, outer: Environment) -> Environment:
        return cls(outer)

    def get(self, name: str) -> Object | None:
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def get_local(self, name: str) -> Object | None:
        return self.store.get(name)

    def set(self, name: str, value: Object) -> Object:
        self.store[name] = value
        return value
