"""Application engine for Lilith.

This module centralizes function application semantics for the evaluator:
- Application of native builtins registered in the root environment.
- Partial application of lambdas supplied fewer arguments than formals.
- Full application of lambdas, evaluating the body in the closure scope.

Keeping this logic in one place prevents duplication between the evaluator
and builtins that call back into user functions.
"""

from lilith import LispValue
from lilith.types.bind import bind_arguments
from lilith.types.environment import Environment
from lilith.types.lambda_fn import Lambda
from lilith.types.value import Error, Kind, SExpression, Value
from typing import Callable

EvaluatorFn = Callable[[Environment, Value], Value]


def apply_lambda(
    fn: Lambda,
    args: SExpression,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply a Lilith Lambda value.

    Parameters:
    - fn: The Lambda being applied. Owned by this call; every lookup hands
      out a private copy, so binding into its environment is safe.
    - args: The already-evaluated argument values, consumed.
    - evaluate_fn: Evaluator used to reduce the body.

    Behavior:
    - Supplied arguments are bound to the leading formals.
    - If formals remain, the lambda itself is returned, partially applied.
    - Otherwise the body is evaluated in the lambda's environment, whose
      outer link is the scope the lambda was created in.
    - Too many arguments yields an Error value.
    """
    err = bind_arguments(fn, args)
    if err is not None:
        fn.destroy()
        return err

    if len(fn.formals):
        return fn

    # The call scope is left alive: closures created by the body may use it
    # as their outer scope.
    body = fn.body.as_sexpression()
    return evaluate_fn(fn.env, body)


def apply(
    head: Value,
    args: SExpression,
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply either a Lambda or a native builtin.

    - For Lambda, defer to apply_lambda (handling partials and variadics).
    - For builtins, invoke with the calling env and the owned argument list.
    - Otherwise, return a type error.
    """
    if isinstance(head, Lambda):
        return apply_lambda(head, args, evaluate_fn)
    elif head.kind is Kind.BUILTIN:
        result = head(env, args)
        head.destroy()
        return result
    else:
        name = head.type_name
        head.destroy()
        args.destroy()
        return Error(f"s-expression does not start with function, '{name}'")
