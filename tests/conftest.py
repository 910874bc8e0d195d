import pytest

from lilith.builtin import register
from lilith.evaluation.evaluator import evaluate_all
from lilith.interpreter import Interpreter
from lilith.reader.parser import read
from lilith.types.environment import Environment


def make_env() -> Environment:
    """Read-only builtin root plus a writable top-level scope, no prelude."""
    root = Environment()
    register(root)
    root.read_only = True
    return Environment(outer=root)


def run(env: Environment, source: str) -> str:
    """Evaluate `source` in `env` and return the literal rendering of the result."""
    result = evaluate_all(env, read(source))
    text = result.render()
    result.destroy()
    return text


@pytest.fixture
def env():
    """Fresh environment with builtins loaded."""
    return make_env()


@pytest.fixture
def interp():
    """Interpreter with the standard prelude loaded."""
    itp = Interpreter()
    yield itp
    itp.close()
