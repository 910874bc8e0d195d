import pytest

from conftest import run
from lilith.evaluation.evaluator import evaluate, evaluate_all
from lilith.reader.parser import read
from lilith.types.environment import Environment
from lilith.types.value import (
    Boolean,
    Builtin,
    Error,
    Floating,
    Integer,
    Kind,
    QExpression,
    SExpression,
    String,
    Symbol,
)

# -----------------------------------------------------
# Tests
# -----------------------------------------------------

@pytest.mark.parametrize(
    "value",
    [
        Integer(1),
        Floating(3.14),
        Boolean(True),
        String("hello"),
        Error("boom"),
        QExpression([Symbol("a"), Integer(1)]),
    ],
)
def test_normal_forms_evaluate_to_themselves(env, value):
    assert evaluate(env, value) is value


def test_symbol_lookup_returns_a_copy(env):
    env.define_local("xs", QExpression([Integer(1)]))
    first = evaluate(env, Symbol("xs"))
    first.append(Integer(2))
    assert run(env, "xs") == "{1}"


def test_unbound_symbol_is_an_error_value(env):
    rv = evaluate(env, Symbol("nope"))
    assert rv.kind is Kind.ERROR
    assert rv.message == "unbound symbol 'nope'"


def test_empty_sexpression_evaluates_to_itself(env):
    expr = SExpression()
    assert evaluate(env, expr) is expr


def test_single_element_sexpression_reduces_to_element(env):
    assert run(env, "(5)") == "5"
    assert run(env, "((((5))))") == "5"
    assert run(env, "({1 2})") == "{1 2}"


def test_head_must_be_a_function(env):
    assert run(env, "(1 2 3)") == "Error: s-expression does not start with function, 'Number'"
    assert run(env, "({1} 2)") == "Error: s-expression does not start with function, 'Q-Expression'"


def test_first_error_left_to_right_wins(env):
    assert run(env, "(+ (/ 1 0) undefined)") == "Error: divide by zero"
    assert run(env, "(+ undefined (/ 1 0))") == "Error: unbound symbol 'undefined'"


def test_error_is_terminal_for_enclosing_expression(env):
    assert run(env, "(list 1 (+ 2 (head {})) 3)") == "Error: empty q-expression passed to 'head'"


def test_arguments_are_evaluated_before_application(env):
    # the def runs before `a` is looked up, and both before list is applied
    assert run(env, "(list (def {a} 1) a)") == "{() 1}"
    assert run(env, "a") == "1"


def test_qexpression_contents_are_not_evaluated(env):
    assert run(env, "{+ 1 (undefined)}") == "{+ 1 (undefined)}"


def test_builtin_receives_calling_environment(env):
    seen = []

    def probe(call_env, args):
        seen.append(call_env)
        args.destroy()
        return SExpression()

    env.define_local("probe", Builtin("probe", probe))
    run(env, "(probe 1)")
    assert seen == [env]


def test_evaluate_all_returns_last_value(env):
    assert evaluate_all(env, read("(def {x} 2) (+ x 1)")).render() == "3"


def test_evaluate_all_stops_at_first_error(env):
    rv = evaluate_all(env, read("(def {x} 1) (head {}) (def {y} 2)"))
    assert rv.kind is Kind.ERROR
    assert run(env, "y") == "Error: unbound symbol 'y'"


def test_evaluate_all_of_empty_program(env):
    assert evaluate_all(env, read("")).render() == "()"


def test_environment_chain_is_used_for_lookup(env):
    child = Environment(outer=env)
    child.define_local("z", Integer(3))
    assert evaluate(child, read("(+ z 1)")[0]).render() == "4"
