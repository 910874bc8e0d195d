"""Numeric operators for the Lilith runtime.

Every operator is identified by an `Op` tag and resolved through `KERNELS`
to a pair of binary kernels: one for two integers and one for decimals.
Mixed operands promote the integer to a decimal. Integers are 64-bit and
wrap on overflow, so promotion to a decimal never overflows.
Calls with more than two operands fold left-to-right; comparisons need at
least two operands and chain pairwise, since a Boolean cannot be folded
into the next comparison.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Callable

from lilith import BuiltinFn
from lilith.builtin.asserts import assert_env, assert_min_count, assert_numeric
from lilith.types.environment import Environment
from lilith.types.value import Boolean, Error, Floating, Integer, Kind, LONG_WRAP, SExpression, Value

DIVIDE_BY_ZERO = "divide by zero"


class Op(Enum):
    SUB = "-"
    MUL = "*"
    DIV = "/"
    ADD = "+"
    POW = "^"
    MAX = "max"
    MIN = "min"
    MOD = "%"
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


Kernel = Callable[[float, float], Value]


# -------------------------------
# Integer kernels
# -------------------------------
def _add_l(x: int, y: int) -> Value: return Integer(x + y)
def _sub_l(x: int, y: int) -> Value: return Integer(x - y)
def _mul_l(x: int, y: int) -> Value: return Integer(x * y)
def _max_l(x: int, y: int) -> Value: return Integer(x if x > y else y)
def _min_l(x: int, y: int) -> Value: return Integer(x if x < y else y)


def _div_l(x: int, y: int) -> Value:
    # Never truncate: integer division yields a decimal
    return Error(DIVIDE_BY_ZERO) if y == 0 else Floating(x / y)


def _mod_l(x: int, y: int) -> Value:
    """Remainder truncated toward zero; takes the sign of the dividend."""
    if y == 0:
        return Error(DIVIDE_BY_ZERO)
    r = abs(x) % abs(y)
    return Integer(-r if x < 0 else r)


def _pow_l(x: int, y: int) -> Value:
    if y >= 0:
        # reduced modulo the word size as it is computed
        return Integer(pow(x, y, LONG_WRAP))
    if x == 0:
        return Error(DIVIDE_BY_ZERO)
    return Integer(int(x ** y))


# -------------------------------
# Decimal kernels
# -------------------------------
def _add_d(x: float, y: float) -> Value: return Floating(x + y)
def _sub_d(x: float, y: float) -> Value: return Floating(x - y)
def _mul_d(x: float, y: float) -> Value: return Floating(x * y)
def _max_d(x: float, y: float) -> Value: return Floating(x if x > y else y)
def _min_d(x: float, y: float) -> Value: return Floating(x if x < y else y)


def _div_d(x: float, y: float) -> Value:
    return Error(DIVIDE_BY_ZERO) if y == 0.0 else Floating(x / y)


def _mod_d(x: float, y: float) -> Value:
    return Error(DIVIDE_BY_ZERO) if y == 0.0 else Floating(math.fmod(x, y))


def _pow_d(x: float, y: float) -> Value:
    if x == 0.0 and y < 0.0:
        return Error(DIVIDE_BY_ZERO)
    try:
        return Floating(math.pow(x, y))
    except OverflowError:
        odd = y.is_integer() and int(y) % 2 == 1
        return Floating(math.copysign(math.inf, x) if odd else math.inf)
    except ValueError:
        # negative base, fractional exponent
        return Floating(math.nan)


# -------------------------------
# Comparison kernels (always decimal)
# -------------------------------
def _gt(x: float, y: float) -> Value: return Boolean(float(x) > float(y))
def _lt(x: float, y: float) -> Value: return Boolean(float(x) < float(y))
def _gte(x: float, y: float) -> Value: return Boolean(float(x) >= float(y))
def _lte(x: float, y: float) -> Value: return Boolean(float(x) <= float(y))


KERNELS: dict[Op, tuple[Kernel, Kernel]] = {
    Op.SUB: (_sub_l, _sub_d),
    Op.MUL: (_mul_l, _mul_d),
    Op.DIV: (_div_l, _div_d),
    Op.ADD: (_add_l, _add_d),
    Op.POW: (_pow_l, _pow_d),
    Op.MAX: (_max_l, _max_d),
    Op.MIN: (_min_l, _min_d),
    Op.MOD: (_mod_l, _mod_d),
    Op.GT: (_gt, _gt),
    Op.LT: (_lt, _lt),
    Op.GTE: (_gte, _gte),
    Op.LTE: (_lte, _lte),
}

COMPARISONS = frozenset({Op.GT, Op.LT, Op.GTE, Op.LTE})


def do_calc(op: Op, x: Value, y: Value) -> Value:
    """Apply the kernel for `op` to two numeric values. Borrows both operands."""
    int_kernel, float_kernel = KERNELS[op]
    if x.kind is Kind.INTEGER and y.kind is Kind.INTEGER:
        return int_kernel(x.value, y.value)
    return float_kernel(float(x.value), float(y.value))


def builtin_op(env: Environment, args: SExpression, op: Op) -> Value:
    """Apply `op` across all arguments. Consumes `args`."""
    name = op.value
    err = (assert_env(args, env, name)
           or assert_min_count(args, 2 if op in COMPARISONS else 1, name)
           or assert_numeric(args, name))
    if err:
        return err

    x = args.pop(0)

    # Single argument subtraction negates
    if not len(args) and op is Op.SUB:
        neg = Integer(-x.value) if x.kind is Kind.INTEGER else Floating(-x.value)
        x.destroy()
        x = neg

    if op in COMPARISONS:
        outcome = True
        while len(args):
            y = args.pop(0)
            outcome = do_calc(op, x, y).value and outcome
            x.destroy()
            x = y
        x.destroy()
        args.destroy()
        return Boolean(outcome)

    while len(args):
        y = args.pop(0)
        rv = do_calc(op, x, y)
        x.destroy()
        y.destroy()
        x = rv
        if x.kind is Kind.ERROR:
            break

    args.destroy()
    return x


def _make_builtin(op: Op) -> BuiltinFn:
    def builtin(env: Environment, args: SExpression) -> Value:
        return builtin_op(env, args, op)

    builtin.__name__ = f"builtin_{op.name.lower()}"
    builtin.__doc__ = f"({op.value} ...) numeric operator."
    return builtin


# -------------------------------
# Registration
# -------------------------------
BUILTINS: dict[str, BuiltinFn] = {op.value: _make_builtin(op) for op in Op}
