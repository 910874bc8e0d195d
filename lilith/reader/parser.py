"""
  Lilith Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits tagged Lilith values:

    - decimal integers      -> Integer
    - decimals (1.5, 2e3)   -> Floating
    - #t / #f               -> Boolean
    - "strings" w/ escapes  -> String
    - bare words            -> Symbol
    - ( ... )               -> SExpression
    - { ... }               -> QExpression
    - ; comments run to end of line
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lilith.errors import LilithSyntaxError
from lilith.types.value import (
    Boolean,
    ESCAPES,
    Floating,
    Integer,
    QExpression,
    SExpression,
    String,
    Symbol,
    Value,
)


TOKEN_RE = re.compile(
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbrace>\{)"  # {
    r"|(?P<rbrace>\})"  # }
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r"|(?P<boolean>#[tf](?![A-Za-z0-9_+\-*/\\=<>!&%^?]))"  # #t / #f
    r"|(?P<symbol>[A-Za-z0-9_+\-*/\\=<>!&%^?.]+)",  # symbols and numbers
    re.DOTALL,
)

INTEGER_RE = re.compile(r"[-+]?\d+")
FLOAT_RE = re.compile(r"[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?")

UNESCAPES: dict[str, str] = {v[1]: k for k, v in ESCAPES.items()}

CLOSERS: dict[str, str] = {"lparen": "rparen", "lbrace": "rbrace"}


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            raise LilithSyntaxError(f"Unexpected char at {pos}: {source[pos]!r}")
        pos = m.end()
        if m.lastgroup == "comment":
            continue
        yield m.lastgroup, m.group(m.lastgroup)


def unescape(body: str) -> str:
    """Resolve backslash escapes in the body of a string literal."""
    out: list[str] = []
    chars = iter(body)
    for ch in chars:
        if ch == "\\":
            esc = next(chars)
            # unknown escapes keep the escaped character
            out.append(UNESCAPES.get(esc, esc))
        else:
            out.append(ch)
    return "".join(out)


def atom(text: str) -> Value:
    """Classify a bare word as a number or a symbol."""
    if INTEGER_RE.fullmatch(text):
        # out-of-range literals wrap like computed results
        try:
            return Integer(int(text))
        except ValueError:
            raise LilithSyntaxError(f"Integer literal too long: {text[:32]}...") from None
    if FLOAT_RE.fullmatch(text):
        return Floating(float(text))
    return Symbol(text)


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def parse_expr(self) -> Optional[Value]:
        tok_type, tok_val = self.peek()
        if tok_type is None:
            return None

        if tok_type == "symbol":
            self.advance()
            return atom(tok_val)

        if tok_type == "boolean":
            self.advance()
            return Boolean(tok_val == "#t")

        # String
        if tok_type == "string":
            self.advance()
            return String(unescape(tok_val[1:-1]))

        # S-expression or Q-expression
        if tok_type in CLOSERS:
            self.advance()
            closer = CLOSERS[tok_type]
            rv = SExpression() if tok_type == "lparen" else QExpression()
            while True:
                next_type, next_val = self.peek()
                if next_type == closer:
                    self.advance()
                    break
                if next_type is None:
                    raise LilithSyntaxError(f"Unmatched '{tok_val}'")
                if next_type in ("rparen", "rbrace"):
                    raise LilithSyntaxError(f"Unexpected '{next_val}' to close '{tok_val}'")
                rv.append(self.parse_expr())
            return rv

        raise LilithSyntaxError(f"Unexpected '{tok_val}'")

    def parse_all(self) -> Iterator[Value]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def read(source: str) -> SExpression:
    """Read every top-level form of `source` into a single S-expression."""
    return SExpression(list(TokenStream(lex(source)).parse_all()))
