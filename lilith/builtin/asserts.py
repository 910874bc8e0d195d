"""Argument validation for builtins.

Each check returns None when it holds. On failure it destroys the whole
argument sequence and returns the Error to hand back, so a builtin never
consumes part of its arguments before rejecting them. Checks chain with
`or`: the first failure short-circuits the rest.

    err = (assert_env(args, env, "len")
           or assert_count(args, 1, "len")
           or assert_type(args, 0, Kind.QEXPRESSION, "len"))
    if err:
        return err
"""

from __future__ import annotations

from lilith.types.environment import Environment
from lilith.types.value import Error, Kind, NUMERIC_KINDS, Sequence


def lassert(args: Sequence, cond: bool, message: str) -> Error | None:
    if cond:
        return None
    args.destroy()
    return Error(message)


def assert_env(args: Sequence, env: Environment | None, name: str) -> Error | None:
    return lassert(args, env is not None, f"environment not set for '{name}'")


def assert_count(args: Sequence, expected: int, name: str) -> Error | None:
    plural = "" if expected == 1 else "s"
    return lassert(
        args,
        len(args) == expected,
        f"function '{name}' expects {expected} argument{plural}, received {len(args)}",
    )


def assert_min_count(args: Sequence, minimum: int, name: str) -> Error | None:
    plural = "" if minimum == 1 else "s"
    return lassert(
        args,
        len(args) >= minimum,
        f"function '{name}' expects at least {minimum} argument{plural}, received {len(args)}",
    )


def assert_type(args: Sequence, idx: int, expected: Kind, name: str) -> Error | None:
    received = args[idx].type_name
    return lassert(
        args,
        args[idx].kind is expected,
        f"function '{name}' type mismatch - expected {expected.type_name}, received {received}",
    )


def assert_all_type(args: Sequence, expected: Kind, name: str) -> Error | None:
    for i in range(len(args)):
        if err := assert_type(args, i, expected, name):
            return err
    return None


def assert_numeric(args: Sequence, name: str) -> Error | None:
    for cell in args:
        if cell.kind not in NUMERIC_KINDS:
            return lassert(
                args,
                False,
                f"function '{name}' type mismatch - expected numeric, received {cell.type_name}",
            )
    return None


def assert_not_empty(args: Sequence, idx: int, name: str) -> Error | None:
    return lassert(args, len(args[idx]) != 0, f"empty q-expression passed to '{name}'")


def assert_symbols(args: Sequence, idx: int, name: str) -> Error | None:
    """Every element of the Q-expression at `idx` must be a Symbol."""
    for cell in args[idx]:
        if cell.kind is not Kind.SYMBOL:
            return lassert(
                args,
                False,
                f"function '{name}' type mismatch - expected {Kind.SYMBOL.type_name}, received {cell.type_name}",
            )
    return None
