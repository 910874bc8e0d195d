"""Q-expression primitives: head, tail, init, list, eval, join, len, cons."""
from __future__ import annotations

from lilith import BuiltinFn
from lilith.builtin.asserts import (
    assert_all_type,
    assert_count,
    assert_env,
    assert_min_count,
    assert_not_empty,
    assert_type,
    lassert,
)
from lilith.evaluation.evaluator import evaluate
from lilith.types.environment import Environment
from lilith.types.value import (
    FUNCTION_KINDS,
    Integer,
    Kind,
    QExpression,
    SCALAR_KINDS,
    SExpression,
    Value,
)


def _single_qexpr(env: Environment | None, args: SExpression, name: str, non_empty: bool):
    err = (assert_env(args, env, name)
           or assert_count(args, 1, name)
           or assert_type(args, 0, Kind.QEXPRESSION, name))
    if not err and non_empty:
        err = assert_not_empty(args, 0, name)
    return err


def builtin_head(env: Environment, args: SExpression) -> Value:
    """(head {a b c}) => {a}"""
    if err := _single_qexpr(env, args, "head", non_empty=True):
        return err
    rv = args.take(0)
    while len(rv) > 1:
        rv.pop(-1).destroy()
    return rv


def builtin_tail(env: Environment, args: SExpression) -> Value:
    """(tail {a b c}) => {b c}"""
    if err := _single_qexpr(env, args, "tail", non_empty=True):
        return err
    rv = args.take(0)
    rv.pop(0).destroy()
    return rv


def builtin_init(env: Environment, args: SExpression) -> Value:
    """(init {a b c}) => {a b}"""
    if err := _single_qexpr(env, args, "init", non_empty=True):
        return err
    rv = args.take(0)
    rv.pop(-1).destroy()
    return rv


def builtin_list(env: Environment, args: SExpression) -> Value:
    """(list a b c) => {a b c}; the arguments are not evaluated again."""
    if err := assert_env(args, env, "list"):
        return err
    return args.as_qexpression()


def builtin_eval(env: Environment, args: SExpression) -> Value:
    """(eval {+ 1 2}) => 3"""
    if err := _single_qexpr(env, args, "eval", non_empty=False):
        return err
    x = args.take(0).as_sexpression()
    return evaluate(env, x)


def builtin_join(env: Environment, args: SExpression) -> Value:
    """(join {a} {b c}) => {a b c}"""
    err = (assert_env(args, env, "join")
           or assert_min_count(args, 1, "join")
           or assert_all_type(args, Kind.QEXPRESSION, "join"))
    if err:
        return err

    x = args.pop(0)
    while len(args):
        x.extend_from(args.pop(0))
    args.destroy()
    return x


def builtin_len(env: Environment, args: SExpression) -> Value:
    """(len {a b c}) => 3"""
    if err := _single_qexpr(env, args, "len", non_empty=False):
        return err
    x = args.take(0)
    n = len(x)
    x.destroy()
    return Integer(n)


def builtin_cons(env: Environment, args: SExpression) -> Value:
    """(cons a {b c}) => {a b c}; `a` must be a scalar or a function."""
    err = (assert_env(args, env, "cons")
           or assert_count(args, 2, "cons"))
    if not err:
        err = lassert(
            args,
            args[0].kind in SCALAR_KINDS or args[0].kind in FUNCTION_KINDS,
            "first 'cons' parameter should be a value or a function",
        )
    if not err:
        err = lassert(
            args,
            args[1].kind is Kind.QEXPRESSION,
            "second 'cons' parameter should be a q-expression",
        )
    if err:
        return err

    rv = QExpression()
    rv.append(args.pop(0))
    rv.extend_from(args.pop(0))
    args.destroy()
    return rv


# -------------------------------
# Registration
# -------------------------------
BUILTINS: dict[str, BuiltinFn] = {
    "head": builtin_head,
    "tail": builtin_tail,
    "init": builtin_init,
    "list": builtin_list,
    "eval": builtin_eval,
    "join": builtin_join,
    "len": builtin_len,
    "cons": builtin_cons,
}
