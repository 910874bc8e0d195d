"""Registry of native builtins for the Lilith root environment.

Maps names to native callables taking the calling environment and the owned
argument S-expression. `register` installs them into the root scope, which
the caller then marks read-only.
"""

from loguru import logger

from lilith import BuiltinFn
from lilith.builtin.arithmetic import BUILTINS as ARITHMETIC_BUILTINS
from lilith.builtin.env_builtin import BUILTINS as ENV_BUILTINS
from lilith.builtin.list_builtin import BUILTINS as LIST_BUILTINS
from lilith.types.environment import Environment
from lilith.types.value import Builtin

BUILTINS: dict[str, BuiltinFn] = {
    **ARITHMETIC_BUILTINS,
    **LIST_BUILTINS,
    **ENV_BUILTINS,
}


def register(env: Environment) -> None:
    for name, fn in BUILTINS.items():
        env.define_local(name, Builtin(name, fn))
    logger.debug("builtins.registered count={}", len(BUILTINS))
