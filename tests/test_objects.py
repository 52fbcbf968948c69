"""Runtime object tests: hash keys, singletons, environments."""

from monkey.objects import (
    BOOLEAN,
    FALSE,
    INTEGER,
    NULL,
    STRING,
    TRUE,
    VOID,
    Array,
    Boolean,
    Environment,
    Error,
    HashKey,
    Integer,
    String,
    fnv1a_64,
    native_bool,
    wrap_int64,
)


def test_string_hash_keys() -> None:
    hello1 = String("Hello World")
    hello2 = String("Hello World")
    diff1 = String("My name is johnny")
    diff2 = String("My name is johnny")
    assert hello1.hash_key() == hello2.hash_key()
    assert diff1.hash_key() == diff2.hash_key()
    assert hello1.hash_key() != diff1.hash_key()


def test_integer_and_boolean_hash_keys() -> None:
    assert Integer(1).hash_key() == Integer(1).hash_key()
    assert Integer(1).hash_key() != TRUE.hash_key()
    assert TRUE.hash_key() == HashKey(BOOLEAN, 1)
    assert FALSE.hash_key() == HashKey(BOOLEAN, 0)


def test_negative_integer_key_is_unsigned() -> None:
    assert Integer(-1).hash_key() == HashKey(INTEGER, (1 << 64) - 1)


def test_fnv1a() -> None:
    # published FNV-1a 64-bit vectors
    assert fnv1a_64(b"") == 0xCBF29CE484222325
    assert fnv1a_64(b"a") == 0xAF63DC4C8601EC8C
    assert String("a").hash_key() == HashKey(STRING, 0xAF63DC4C8601EC8C)


def test_wrap_int64() -> None:
    assert wrap_int64(5) == 5
    assert wrap_int64(-5) == -5
    assert wrap_int64(1 << 63) == -(1 << 63)
    assert wrap_int64((1 << 64) + 7) == 7


def test_native_bool_returns_singletons() -> None:
    assert native_bool(True) is TRUE
    assert native_bool(False) is FALSE
    assert isinstance(TRUE, Boolean)


def test_inspect() -> None:
    assert Integer(-3).inspect() == "-3"
    assert TRUE.inspect() == "true"
    assert String("hi").inspect() == "hi"
    assert NULL.inspect() == "null"
    assert VOID.inspect() == "null"
    assert Error("boom").inspect() == "ERROR: boom"
    assert Array([Integer(1), String("a")]).inspect() == "[1, a]"


def test_null_and_void_are_distinct() -> None:
    assert NULL is not VOID
    assert NULL.type() != VOID.type()


def test_environment_lookup_walks_outward() -> None:
    outer = Environment()
    outer.set("a", Integer(1))
    inner = Environment.enclosed(outer)
    inner.set("b", Integer(2))
    assert inner.get("a").value == 1
    assert inner.get("b").value == 2
    assert outer.get("b") is None


def test_environment_shadowing() -> None:
    outer = Environment()
    outer.set("a", Integer(1))
    inner = Environment.enclosed(outer)
    assert inner.get_local("a") is None
    inner.set("a", Integer(2))
    assert inner.get("a").value == 2
    assert outer.get("a").value == 1


def test_environment_set_returns_value() -> None:
    env = Environment()
    val = Integer(9)
    assert env.set("x", val) is val
