from __future__ import annotations

from lilith.types.lambda_fn import Lambda
from lilith.types.value import Error, QExpression, SExpression

VARIADIC = "&"


def bind_arguments(fn: Lambda, args: SExpression) -> Error | None:
    """
    Single source of truth for lambda-list binding in Lilith.

    Binds the supplied arguments, in order, to the leading formals of `fn`
    inside its own environment, consuming both the arguments and the bound
    formals. `fn` must be a private copy: the caller owns it outright.

    Supports:
    - Positional parameters; unbound formals are left in place so the caller
      can return a partially applied function
    - `& rest`, capturing the remaining supplied arguments as a Q-expression
      (an empty one when the call supplies nothing for it)

    Returns an Error value (and destroys `args`) on a malformed call.
    """
    given = len(args)
    total = len(fn.formals)

    while len(args):
        if not len(fn.formals):
            args.destroy()
            return Error(f"function passed too many arguments, got {given}, expected {total}")

        sym = fn.formals.pop(0)
        if sym.name == VARIADIC:
            sym.destroy()
            if len(fn.formals) != 1:
                args.destroy()
                return Error(f"function format invalid, symbol '{VARIADIC}' not followed by single symbol")
            rest = fn.formals.pop(0)
            _bind(fn, rest.name, args.as_qexpression())
            rest.destroy()
            break

        _bind(fn, sym.name, args.pop(0))
        sym.destroy()

    args.destroy()

    # A trailing `& rest` with nothing left to capture binds the empty list
    if len(fn.formals) and fn.formals[0].name == VARIADIC:
        if len(fn.formals) != 2:
            return Error(f"function format invalid, symbol '{VARIADIC}' not followed by single symbol")
        fn.formals.pop(0).destroy()
        rest = fn.formals.pop(0)
        _bind(fn, rest.name, QExpression())
        rest.destroy()

    return None


def _bind(fn: Lambda, name: str, value) -> None:
    # define_local stores a copy; the original is ours to release
    fn.env.define_local(name, value)
    value.destroy()
