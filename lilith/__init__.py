# Core type aliases for Lilith's data model.
# Unlike a host-value representation, every runtime value is a tagged
# lilith.types.value.Value subclass: the language distinguishes evaluated
# S-expressions from quoted Q-expressions, and errors travel as values.
#
# Naming guidance:
# - LispValue:  any runtime Value (evaluated or not).
# - BuiltinFn:  native primitive signature, (calling env, owned args) -> Value.

from typing import Any, Callable

LispValue = Any
BuiltinFn = Callable[[Any, Any], Any]

__version__ = "0.1.0"
