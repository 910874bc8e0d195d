"""Runtime environment for Lilith.

The Environment stores bindings of symbol names to owned values and supports
nested scopes via an `outer` link. The outer link is not owned: whoever built
the chain keeps it alive. Lookups return copies and definitions store copies,
so a binding is never shared with the value that was passed in or handed out.

A scope may be read-only. The root scope holding the native builtins is
marked read-only once populated; existing bindings there cannot be replaced.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from lilith.types.value import Error, QExpression, String, Value


class Environment:
    """Hierarchical mapping from symbol names to Lilith values."""

    __slots__ = ("vars", "outer", "read_only")

    def __init__(self, outer: Optional[Environment] = None, read_only: bool = False):
        self.vars: dict[str, Value] = {}
        self.outer: Environment | None = outer
        self.read_only: bool = read_only

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: str) -> Value:
        """Return a copy of the value bound to `name`.

        An unbound name yields an Error value rather than raising.
        """
        env = self.find(name)
        if env is None:
            return Error(f"unbound symbol '{name}'")
        return env.vars[name].copy()

    def define_local(self, name: str, value: Value) -> bool:
        """Bind a copy of `value` to `name` in this scope.

        Returns True if the write was refused because this scope is read-only
        and already binds `name`; the binding is left untouched in that case.
        """
        if self.read_only and name in self.vars:
            return True
        old = self.vars.get(name)
        self.vars[name] = value.copy()
        if old is not None:
            old.destroy()
        return False

    def define_global(self, name: str, value: Value) -> bool:
        """Bind `name` in the outermost writable scope of the chain.

        When the root is the read-only builtin scope, the write lands in the
        scope directly beneath it, unless the root already binds `name`, in
        which case the write is refused.
        """
        env = self.global_scope
        if env.outer is not None and env.outer.is_builtin(name):
            return True
        return env.define_local(name, value)

    def is_builtin(self, name: str) -> bool:
        """Whether a read-only scope in the chain binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if env.read_only and name in env.vars:
                return True
            env = env.outer
        return False

    @property
    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    @property
    def global_scope(self) -> Environment:
        """Outermost scope that is not part of the read-only builtin layer."""
        env = self
        while env.outer is not None and not env.outer.read_only:
            env = env.outer
        return env

    def copy(self) -> Environment:
        """Independent copy sharing the parent link, with every binding deep-copied."""
        rv = Environment(self.outer, self.read_only)
        rv.vars = {k: v.copy() for k, v in self.vars.items()}
        return rv

    def snapshot(self) -> QExpression:
        """Bindings of this scope only, as a Q-expression of {"name" value} pairs."""
        rv = QExpression()
        for k, v in self.vars.items():
            rv.append(QExpression([String(k), v.copy()]))
        return rv

    def destroy(self) -> None:
        """Release every binding and detach from the parent."""
        for v in self.vars.values():
            v.destroy()
        self.vars.clear()
        self.outer = None

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Detailed chain representation for debugging purposes."""
        with StringIO() as buffer:
            buffer.write("<Environment chain: ")
            env = self
            chain = []
            while env is not None:
                with StringIO() as env_buf:
                    env._write_vars(env_buf)
                    chain.append(env_buf.getvalue())
                env = env.outer
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
