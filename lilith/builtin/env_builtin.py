"""Built-in functions that touch the calling environment.

This module defines the binding forms (def, =), lambda construction (\\),
conditional evaluation (if), equality and logic predicates, error
construction and printing.
"""
from __future__ import annotations

from typing import Callable

from lilith import BuiltinFn
from lilith.builtin.asserts import (
    assert_count,
    assert_env,
    assert_min_count,
    assert_symbols,
    assert_type,
    lassert,
)
from lilith.evaluation.evaluator import evaluate
from lilith.types.environment import Environment
from lilith.types.lambda_fn import Lambda
from lilith.types.value import Boolean, Error, Kind, SExpression, Value, is_equal


# -------------------------------
# Binding
# -------------------------------
def _define(
    env: Environment,
    args: SExpression,
    name: str,
    put: Callable[[str, Value], bool],
) -> Value:
    """Bind each symbol of the leading Q-expression to the matching value.

    Bindings are applied one at a time; a refused binding stops the loop but
    leaves the earlier bindings of the same call in place.
    """
    err = (assert_env(args, env, name)
           or assert_min_count(args, 1, name)
           or assert_type(args, 0, Kind.QEXPRESSION, name)
           or assert_symbols(args, 0, name))
    if err:
        return err

    syms = args[0]
    err = lassert(
        args,
        len(syms) == len(args) - 1,
        f"function '{name}' argument mismatch - {len(syms)} symbols, {len(args) - 1} values",
    )
    if err:
        return err

    for i, sym in enumerate(syms):
        if put(sym.name, args[i + 1]):
            return lassert(args, False, f"symbol '{sym.name}' is a built-in, cannot redefine")

    args.destroy()
    return SExpression()


def builtin_def(env: Environment, args: SExpression) -> Value:
    """(def {x y} 1 2) binds in the global scope, whatever the current depth."""
    return _define(env, args, "def", env.define_global if env is not None else None)


def builtin_put(env: Environment, args: SExpression) -> Value:
    """(= {x y} 1 2) binds in the current scope."""
    def put(sym: str, value: Value) -> bool:
        return env.is_builtin(sym) or env.define_local(sym, value)

    return _define(env, args, "=", put)


def builtin_lambda(env: Environment, args: SExpression) -> Value:
    """(\\ {x y} {+ x y}) => a lambda closing over the calling scope."""
    err = (assert_env(args, env, "\\")
           or assert_count(args, 2, "\\")
           or assert_type(args, 0, Kind.QEXPRESSION, "\\")
           or assert_type(args, 1, Kind.QEXPRESSION, "\\")
           or assert_symbols(args, 0, "\\"))
    if err:
        return err

    formals = args.pop(0)
    body = args.pop(0)
    args.destroy()
    return Lambda(formals, body, Environment(outer=env))


# -------------------------------
# Control flow
# -------------------------------
def builtin_if(env: Environment, args: SExpression) -> Value:
    """(if cond {then} {else}) evaluates the chosen branch in the calling scope."""
    err = (assert_env(args, env, "if")
           or assert_count(args, 3, "if")
           or assert_type(args, 0, Kind.BOOLEAN, "if")
           or assert_type(args, 1, Kind.QEXPRESSION, "if")
           or assert_type(args, 2, Kind.QEXPRESSION, "if"))
    if err:
        return err

    branch = args.pop(1 if args[0].value else 2)
    args.destroy()
    return evaluate(env, branch.as_sexpression())


# -------------------------------
# Equality and logic
# -------------------------------
def _compare(env: Environment, args: SExpression, name: str, negate: bool) -> Value:
    err = (assert_env(args, env, name)
           or assert_count(args, 2, name))
    if err:
        return err
    result = is_equal(args[0], args[1])
    args.destroy()
    return Boolean(result != negate)


def builtin_eq(env: Environment, args: SExpression) -> Value:
    """(== a b) => #t when a and b are equal values."""
    return _compare(env, args, "==", negate=False)


def builtin_ne(env: Environment, args: SExpression) -> Value:
    """(!= a b) => logical negation of =="""
    return _compare(env, args, "!=", negate=True)


def builtin_not(env: Environment, args: SExpression) -> Value:
    err = (assert_env(args, env, "!")
           or assert_count(args, 1, "!")
           or assert_type(args, 0, Kind.BOOLEAN, "!"))
    if err:
        return err
    x = args.take(0)
    x.value = not x.value
    return x


# -------------------------------
# Errors and output
# -------------------------------
def builtin_error(env: Environment, args: SExpression) -> Value:
    """(error "message") => an Error value carrying the message."""
    err = (assert_env(args, env, "error")
           or assert_count(args, 1, "error")
           or assert_type(args, 0, Kind.STRING, "error"))
    if err:
        return err
    x = args.take(0)
    return Error(x.text)


def builtin_print(env: Environment, args: SExpression) -> Value:
    """(print a b ...) writes the arguments in display mode, space separated."""
    if err := assert_env(args, env, "print"):
        return err
    print(" ".join(cell.render(display=True) for cell in args))
    args.destroy()
    return SExpression()


# -------------------------------
# Registration
# -------------------------------
BUILTINS: dict[str, BuiltinFn] = {
    "def": builtin_def,
    "=": builtin_put,
    "\\": builtin_lambda,
    "if": builtin_if,
    "==": builtin_eq,
    "!=": builtin_ne,
    "!": builtin_not,
    "error": builtin_error,
    "print": builtin_print,
}
