"""Tagged runtime values for Lilith.

Every runtime value is an instance of a `Value` subclass tagged with a
`Kind`. Values follow a single-owner discipline: a function that receives a
value either destroys it or folds it into its result, and environments hand
out copies of what they store. Sequences are the only mutable containers;
builtins mutate the argument sequence they were given and nothing else.
"""

from __future__ import annotations

import sys
from enum import Enum, auto
from io import StringIO
from typing import Iterator

from lilith import BuiltinFn
from lilith.config import ERROR_MESSAGE_MAX, LONG_BITS


class Kind(Enum):
    INTEGER = auto()
    FLOATING = auto()
    BOOLEAN = auto()
    STRING = auto()
    SYMBOL = auto()
    ERROR = auto()
    SEXPRESSION = auto()
    QEXPRESSION = auto()
    BUILTIN = auto()
    LAMBDA = auto()

    @property
    def type_name(self) -> str:
        """User-facing name of the kind, as used in error messages."""
        return _TYPE_NAMES[self]


_TYPE_NAMES: dict[Kind, str] = {
    Kind.INTEGER: "Number",
    Kind.FLOATING: "Decimal",
    Kind.BOOLEAN: "Boolean",
    Kind.STRING: "String",
    Kind.SYMBOL: "Symbol",
    Kind.ERROR: "Error",
    Kind.SEXPRESSION: "S-Expression",
    Kind.QEXPRESSION: "Q-Expression",
    Kind.BUILTIN: "Function",
    Kind.LAMBDA: "Function",
}

NUMERIC_KINDS = frozenset({Kind.INTEGER, Kind.FLOATING})

# Integers behave like machine longs: arithmetic wraps modulo 2**LONG_BITS.
LONG_WRAP = 1 << LONG_BITS

FUNCTION_KINDS = frozenset({Kind.BUILTIN, Kind.LAMBDA})
SCALAR_KINDS = frozenset({Kind.INTEGER, Kind.FLOATING, Kind.BOOLEAN, Kind.STRING})

# Characters written as escape sequences when a string is rendered literally.
ESCAPES: dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\0": "\\0",
    "\\": "\\\\",
    '"': '\\"',
}


class Value:
    """Base class of all runtime values."""

    __slots__ = ()
    kind: Kind

    def copy(self) -> Value:
        raise NotImplementedError

    def destroy(self) -> None:
        """Release every owned child. Atoms own nothing."""

    @property
    def type_name(self) -> str:
        return self.kind.type_name

    def write(self, buffer: StringIO, display: bool = False) -> None:
        raise NotImplementedError

    def render(self, display: bool = False) -> str:
        """Render in literal mode, or in display mode (strings unquoted)."""
        with StringIO() as buffer:
            self.write(buffer, display)
            return buffer.getvalue()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return is_equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.render()})"


# -------------------------------
# Atoms
# -------------------------------
def wrap_long(value: int) -> int:
    """Reduce `value` to the signed 64-bit range, wrapping on overflow."""
    return (value + LONG_WRAP // 2) % LONG_WRAP - LONG_WRAP // 2


class Integer(Value):
    __slots__ = ("value",)
    kind = Kind.INTEGER

    def __init__(self, value: int):
        self.value: int = wrap_long(value)

    def copy(self) -> Integer:
        return Integer(self.value)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write(str(self.value))


class Floating(Value):
    __slots__ = ("value",)
    kind = Kind.FLOATING

    def __init__(self, value: float):
        self.value: float = value

    def copy(self) -> Floating:
        return Floating(self.value)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write(f"{self.value:f}")


class Boolean(Value):
    __slots__ = ("value",)
    kind = Kind.BOOLEAN

    def __init__(self, value: bool):
        self.value: bool = bool(value)

    def copy(self) -> Boolean:
        return Boolean(self.value)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write("#t" if self.value else "#f")


class String(Value):
    __slots__ = ("text",)
    kind = Kind.STRING

    def __init__(self, text: str):
        self.text: str = text

    def copy(self) -> String:
        return String(self.text)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        if display:
            buffer.write(self.text)
            return
        buffer.write('"')
        for ch in self.text:
            buffer.write(ESCAPES.get(ch, ch))
        buffer.write('"')


class Symbol(Value):
    __slots__ = ("name",)
    kind = Kind.SYMBOL

    def __init__(self, name: str):
        # Intern to keep environment keys cheap to compare
        self.name: str = sys.intern(name)

    def copy(self) -> Symbol:
        return Symbol(self.name)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write(self.name)


class Error(Value):
    """An error raised by a Lilith program. Terminal for its expression."""

    __slots__ = ("message",)
    kind = Kind.ERROR

    def __init__(self, message: str):
        self.message: str = message[:ERROR_MESSAGE_MAX]

    def copy(self) -> Error:
        return Error(self.message)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write("Error: ")
        buffer.write(self.message)


class Builtin(Value):
    """A native primitive. Equal to another builtin wrapping the same callable."""

    __slots__ = ("name", "fn")
    kind = Kind.BUILTIN

    def __init__(self, name: str, fn: BuiltinFn):
        self.name: str = name
        self.fn: BuiltinFn = fn

    def copy(self) -> Builtin:
        return Builtin(self.name, self.fn)

    def __call__(self, env, args: SExpression) -> Value:
        return self.fn(env, args)

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write("<builtin>")


# -------------------------------
# Sequences
# -------------------------------
class Sequence(Value):
    """An ordered, owning sequence of values."""

    __slots__ = ("cells",)
    open_bracket = "("
    close_bracket = ")"

    def __init__(self, cells: list[Value] | None = None):
        self.cells: list[Value] = cells if cells is not None else []

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.cells)

    def __getitem__(self, i: int) -> Value:
        return self.cells[i]

    def append(self, value: Value) -> Sequence:
        """Append `value`, taking ownership of it."""
        self.cells.append(value)
        return self

    def pop(self, i: int = 0) -> Value:
        """Remove element `i` and hand ownership of it to the caller."""
        return self.cells.pop(i)

    def take(self, i: int) -> Value:
        """Pop element `i`, destroying the remaining elements and the sequence."""
        rv = self.cells.pop(i)
        self.destroy()
        return rv

    def extend_from(self, other: Sequence) -> Sequence:
        """Move every element of `other` to the end of this sequence; `other` is consumed."""
        self.cells.extend(other.cells)
        other.cells = []
        other.destroy()
        return self

    def as_qexpression(self) -> QExpression:
        return QExpression(self._release_cells())

    def as_sexpression(self) -> SExpression:
        return SExpression(self._release_cells())

    def _release_cells(self) -> list[Value]:
        cells, self.cells = self.cells, []
        return cells

    def copy(self) -> Sequence:
        return type(self)([c.copy() for c in self.cells])

    def destroy(self) -> None:
        for c in self.cells:
            c.destroy()
        self.cells.clear()

    def write(self, buffer: StringIO, display: bool = False) -> None:
        buffer.write(self.open_bracket)
        first = True
        for c in self.cells:
            if not first:
                buffer.write(" ")
            c.write(buffer, display)
            first = False
        buffer.write(self.close_bracket)


class SExpression(Sequence):
    __slots__ = ()
    kind = Kind.SEXPRESSION


class QExpression(Sequence):
    __slots__ = ()
    kind = Kind.QEXPRESSION
    open_bracket = "{"
    close_bracket = "}"


# -------------------------------
# Equality
# -------------------------------
def is_equal(a: Value, b: Value) -> bool:
    """Kind-tagged deep equality.

    Integers and decimals compare by magnitude across kinds. Sequences must
    share kind and length and agree element-wise. Lambdas compare formals and
    body only, never their captured environment.
    """
    if a.kind != b.kind:
        if a.kind in NUMERIC_KINDS and b.kind in NUMERIC_KINDS:
            return a.value == b.value
        return False

    match a.kind:
        case Kind.INTEGER | Kind.FLOATING | Kind.BOOLEAN:
            return a.value == b.value
        case Kind.STRING:
            return a.text == b.text
        case Kind.SYMBOL:
            return a.name == b.name
        case Kind.ERROR:
            return a.message == b.message
        case Kind.BUILTIN:
            return a.fn is b.fn
        case Kind.LAMBDA:
            return is_equal(a.formals, b.formals) and is_equal(a.body, b.body)
        case Kind.SEXPRESSION | Kind.QEXPRESSION:
            if len(a) != len(b):
                return False
            return all(is_equal(x, y) for x, y in zip(a, b))
    return False


def println(value: Value, display: bool = False) -> None:
    """Print `value` followed by a newline."""
    print(value.render(display))
