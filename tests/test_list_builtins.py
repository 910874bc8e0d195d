import pytest

from conftest import run


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(head {1 2 3})", "{1}"),
        ("(tail {1 2 3})", "{2 3}"),
        ("(init {1 2 3})", "{1 2}"),
        ("(head {x})", "{x}"),
        ("(tail {1})", "{}"),
        ("(list 1 2 3)", "{1 2 3}"),
        ("(list (+ 1 2) 4)", "{3 4}"),
        ("(eval {+ 1 2})", "3"),
        ("(eval (head {(+ 1 2) 10}))", "3"),
        ("(join {1 2} {3})", "{1 2 3}"),
        ("(join {1} {} {2 3} {4})", "{1 2 3 4}"),
        ("(len {1 2 3})", "3"),
        ("(len {})", "0"),
        ("(cons 1 {2 3})", "{1 2 3}"),
        ("(cons 1.5 {})", "{1.500000}"),
        ('(cons "a" {b})', '{"a" b}'),
        ("(cons head {})", "{<builtin>}"),
    ],
)
def test_list_builtins(env, source, expected):
    assert run(env, source) == expected


@pytest.mark.parametrize("name", ["head", "tail", "init"])
def test_empty_qexpression_is_rejected(env, name):
    assert run(env, f"({name} {{}})") == f"Error: empty q-expression passed to '{name}'"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(head 1)", "Error: function 'head' type mismatch - expected Q-Expression, received Number"),
        ("(tail {1} {2})", "Error: function 'tail' expects 1 argument, received 2"),
        ("(len 1.5)", "Error: function 'len' type mismatch - expected Q-Expression, received Decimal"),
        ("(eval 1)", "Error: function 'eval' type mismatch - expected Q-Expression, received Number"),
        ("(join {1} 2)", "Error: function 'join' type mismatch - expected Q-Expression, received Number"),
        ("(cons {1} {2})", "Error: first 'cons' parameter should be a value or a function"),
        ("(cons 1 2)", "Error: second 'cons' parameter should be a q-expression"),
        ("(cons 1)", "Error: function 'cons' expects 2 arguments, received 1"),
    ],
)
def test_argument_validation(env, source, expected):
    assert run(env, source) == expected


def test_list_does_not_reevaluate(env):
    assert run(env, "(list {a b} c)") == "Error: unbound symbol 'c'"
    assert run(env, "(list {a b})") == "{{a b}}"


def test_eval_runs_in_calling_scope(env):
    run(env, "(def {x} 41)")
    assert run(env, "(eval {+ x 1})") == "42"
