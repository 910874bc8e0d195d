"""User-defined function values for Lilith."""

from __future__ import annotations

from io import StringIO

from lilith.types.environment import Environment
from lilith.types.value import Kind, QExpression, Value


class Lambda(Value):
    """A first-class lambda with formal parameters, body, and closure env.

    The lambda exclusively owns its environment: copying the lambda copies
    the environment, destroying it releases the environment's bindings.
    The environment's outer link is the scope the lambda was created in.
    """

    __slots__ = ("formals", "body", "env")
    kind = Kind.LAMBDA

    def __init__(
        self, formals: QExpression, body: QExpression, env: Environment | None = None
    ):
        self.formals: QExpression = formals
        self.body: QExpression = body
        # Avoid shared default Environment across instances
        self.env: Environment = env if env is not None else Environment()

    def copy(self) -> Lambda:
        return Lambda(self.formals.copy(), self.body.copy(), self.env.copy())

    def destroy(self) -> None:
        self.env.destroy()
        self.formals.destroy()
        self.body.destroy()

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write("(\\ ")
        self.formals.write(buffer, display)
        buffer.write(" ")
        self.body.write(buffer, display)
        buffer.write(")")
