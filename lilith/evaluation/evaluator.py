"""Core evaluator for the Lilith interpreter.

A single recursive reduction over a value's kind. Symbols reduce to a copy
of their binding; S-expressions reduce their children left-to-right and then
apply the head to the rest; every other kind is already in normal form.
There is no trampoline: recursion depth follows expression nesting.
"""

from __future__ import annotations

from lilith import LispValue
from lilith.evaluation.apply import apply
from lilith.types.environment import Environment
from lilith.types.value import Error, FUNCTION_KINDS, Kind, SExpression, Value


def evaluate(env: Environment, value: Value) -> LispValue:
    """
    Reduce `value` to normal form in `env`. Consumes `value`.
    """
    match value.kind:
        case Kind.SYMBOL:
            rv = env.lookup(value.name)
            value.destroy()
            return rv
        case Kind.SEXPRESSION:
            return evaluate_sexpr(env, value)

    # --- Everything else is already normal form ---
    return value


def evaluate_sexpr(env: Environment, expr: SExpression) -> LispValue:
    """Evaluate children in place, then apply the head to the remainder."""
    cells = expr.cells
    for i in range(len(cells)):
        cells[i] = evaluate(env, cells[i])

    # First error, left to right, wins; everything else is released.
    for i, cell in enumerate(cells):
        if cell.kind is Kind.ERROR:
            return expr.take(i)

    if not cells:
        return expr

    if len(cells) == 1:
        return expr.take(0)

    head = expr.pop(0)
    if head.kind not in FUNCTION_KINDS:
        name = head.type_name
        head.destroy()
        expr.destroy()
        return Error(f"s-expression does not start with function, '{name}'")

    # The calling env is passed through so impure builtins (def) reach it.
    return apply(head, expr, env, evaluate)


def evaluate_all(env: Environment, program: SExpression) -> LispValue:
    """Evaluate each top-level form of `program` in order.

    Stops at the first Error and returns it; otherwise returns the value of
    the last form, or an empty S-expression for an empty program.
    """
    result: Value = SExpression()
    while len(program):
        result.destroy()
        result = evaluate(env, program.pop(0))
        if result.kind is Kind.ERROR:
            break
    program.destroy()
    return result
