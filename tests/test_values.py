import pytest

from lilith.builtin.arithmetic import BUILTINS as ARITHMETIC
from lilith.config import ERROR_MESSAGE_MAX
from lilith.types.environment import Environment
from lilith.types.lambda_fn import Lambda
from lilith.types.value import (
    Boolean,
    Builtin,
    Error,
    Floating,
    Integer,
    Kind,
    QExpression,
    SExpression,
    String,
    Symbol,
    is_equal,
)


def q(*cells):
    return QExpression(list(cells))


def s(*cells):
    return SExpression(list(cells))


def test_integer_equals_decimal_of_same_magnitude():
    assert Integer(1) == Floating(1.0)
    assert Floating(2.0) == Integer(2)
    assert Integer(1) != Floating(1.5)


def test_kinds_are_part_of_equality():
    assert s(Integer(1)) != q(Integer(1))
    assert String("x") != Symbol("x")
    assert Boolean(True) != Integer(1)
    assert Error("x") != String("x")


def test_sequences_compare_element_wise():
    assert q(Integer(1), q(Integer(2))) == q(Integer(1), q(Integer(2)))
    assert q(Integer(1), Integer(2)) != q(Integer(2), Integer(1))
    assert q(Integer(1)) != q(Integer(1), Integer(1))
    assert q() == q()


def test_builtins_compare_by_native_operation():
    plus = ARITHMETIC["+"]
    assert Builtin("+", plus) == Builtin("add", plus)
    assert Builtin("+", plus) != Builtin("-", ARITHMETIC["-"])


def test_lambda_equality_ignores_closure():
    a = Lambda(q(Symbol("x")), q(Symbol("x")))
    b = Lambda(q(Symbol("x")), q(Symbol("x")), Environment())
    b.env.define_local("y", Integer(1))
    assert a == b
    assert a != Lambda(q(Symbol("y")), q(Symbol("x")))


def test_copy_is_deep():
    original = q(Integer(1), q(String("a")))
    dup = original.copy()
    assert dup == original
    dup[1].append(Integer(2))
    assert original.render() == '{1 {"a"}}'


def test_lambda_copy_duplicates_environment():
    fn = Lambda(q(Symbol("x")), q(Symbol("x")))
    fn.env.define_local("k", Integer(1))
    dup = fn.copy()
    assert dup.env is not fn.env
    assert dup.env.outer is fn.env.outer
    dup.env.define_local("k", Integer(2))
    assert fn.env.vars["k"] == Integer(1)


def test_destroy_releases_children():
    inner = q(Integer(1))
    outer = s(inner, Integer(2))
    outer.destroy()
    assert len(outer) == 0
    assert len(inner) == 0


def test_lambda_destroy_releases_environment():
    fn = Lambda(q(Symbol("x")), q(Symbol("x")), Environment(outer=Environment()))
    fn.env.define_local("k", Integer(1))
    fn.destroy()
    assert fn.env.vars == {}
    assert fn.env.outer is None


def test_sequence_ownership_helpers():
    seq = s(Integer(1), Integer(2), Integer(3))
    assert seq.take(1) == Integer(2)
    assert len(seq) == 0

    left = q(Integer(1))
    right = q(Integer(2), Integer(3))
    left.extend_from(right)
    assert left.render() == "{1 2 3}"
    assert len(right) == 0

    moved = left.as_sexpression()
    assert moved.kind is Kind.SEXPRESSION
    assert moved.render() == "(1 2 3)"
    assert len(left) == 0


@pytest.mark.parametrize(
    "value,literal,display",
    [
        (Integer(-3), "-3", "-3"),
        (Floating(2.0), "2.000000", "2.000000"),
        (Boolean(True), "#t", "#t"),
        (Boolean(False), "#f", "#f"),
        (String('say "hi"\n'), '"say \\"hi\\"\\n"', 'say "hi"\n'),
        (Symbol("foo"), "foo", "foo"),
        (Error("bad thing"), "Error: bad thing", "Error: bad thing"),
        (q(String("a"), s(Integer(1))), '{"a" (1)}', "{a (1)}"),
        (Builtin("+", ARITHMETIC["+"]), "<builtin>", "<builtin>"),
        (Lambda(q(Symbol("x")), q(Symbol("+"), Symbol("x"), Integer(1))), "(\\ {x} {+ x 1})", "(\\ {x} {+ x 1})"),
    ],
)
def test_render_modes(value, literal, display):
    assert value.render() == literal
    assert value.render(display=True) == display
    assert str(value) == literal


def test_error_message_is_bounded():
    err = Error("x" * 2000)
    assert len(err.message) == ERROR_MESSAGE_MAX


def test_type_names():
    assert Kind.INTEGER.type_name == "Number"
    assert Kind.FLOATING.type_name == "Decimal"
    assert Kind.SEXPRESSION.type_name == "S-Expression"
    assert Kind.QEXPRESSION.type_name == "Q-Expression"
    assert Kind.BUILTIN.type_name == Kind.LAMBDA.type_name == "Function"


def test_is_equal_matches_operator():
    assert is_equal(Integer(3), Floating(3.0))
    assert not is_equal(q(), s())


@pytest.mark.parametrize(
    "given,stored",
    [
        (2 ** 63 - 1, 2 ** 63 - 1),
        (2 ** 63, -(2 ** 63)),
        (-(2 ** 63) - 1, 2 ** 63 - 1),
        (2 ** 64 + 5, 5),
    ],
)
def test_integer_is_a_signed_64_bit_word(given, stored):
    assert Integer(given).value == stored
