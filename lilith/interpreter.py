from __future__ import annotations
from typing import Literal

from loguru import logger

from lilith.builtin import register
from lilith.config import get_prelude_path
from lilith.errors import LilithBootstrapError, LilithSyntaxError
from lilith.evaluation.evaluator import evaluate_all
from lilith.reader.parser import read
from lilith.types.environment import Environment
from lilith.types.value import Error, Kind, Value, println


def init_environment(prelude: str | None | Literal['auto'] = 'auto') -> Environment | None:
    """
    Build the runtime environment: a read-only root holding the builtins and
    a child scope holding the prelude and every later top-level definition.

    Returns the child scope, or None when the prelude cannot be read or
    evaluates to an Error (the error is printed and everything built so far
    is torn down).
    """
    root = Environment()
    register(root)
    root.read_only = True

    env = Environment(outer=root)

    if prelude == 'auto':
        path = get_prelude_path()
        if not path.is_file():
            # Be permissive: no prelude found -> proceed
            logger.warning("prelude.missing path={}", path)
            return env
        logger.debug("prelude.loading path={}", path)
        prelude = path.read_text(encoding='utf-8')

    if prelude:
        try:
            result = evaluate_all(env, read(prelude))
        except LilithSyntaxError as exc:
            # unreadable prelude text fails bootstrap like an evaluation Error
            result = Error(str(exc))
        if result.kind is Kind.ERROR:
            println(result)
            logger.error("prelude.failed error={}", result.message)
            cleanup(env)
            return None
        result.destroy()
        logger.debug("prelude.loaded bindings={}", len(env.vars))

    return env


def cleanup(env: Environment) -> None:
    """Release the prelude scope, then the builtin scope beneath it."""
    root = env.outer
    env.destroy()
    if root is not None:
        root.destroy()
    logger.debug("environment.released")


class Interpreter:
    """
    Orchestrates reading and evaluating Lilith code.
    Maintains a single Environment across calls.
    """

    def __init__(self, prelude: str | None | Literal['auto'] = 'auto'):
        env = init_environment(prelude)
        if env is None:
            raise LilithBootstrapError("prelude failed to evaluate")
        self.env: Environment = env

    def eval_prelude(self, code: str) -> None:
        """Evaluate additional start-up code; an Error is fatal."""
        result = self.eval(code)
        if result.kind is Kind.ERROR:
            raise LilithBootstrapError(result.message)
        result.destroy()

    def eval(self, code: str) -> Value:
        """Evaluate every form in `code`; return the last value or the first Error."""
        return evaluate_all(self.env, read(code))

    def eval_to_str(self, code: str, display: bool = False) -> str:
        result = self.eval(code)
        text = result.render(display)
        result.destroy()
        return text

    def close(self) -> None:
        cleanup(self.env)

    def __enter__(self) -> Interpreter:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
