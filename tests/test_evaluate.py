import pytest

from fractions import Fraction

from crispylib import (
    CalcEvaluationError,
    EvaluatedExpression,
    calculate,
    evaluate,
    operators,
    parse,
)


@pytest.mark.parametrize("source, expected", [
    ("(+ 1 2)", 3),
    ("(- 10 3 2)", 5),
    ("(/ 12 2 3)", 2),
    ("(* 2 3 4)", 24),
    ("(min 3 5 1)", 1),
    ("(max 3 5 1)", 5),
    ("(+ 1 (* 2 3))", 7),
    ("(- (+ 1 2) (* 2 3))", -3),
    ("(+ -1 -2)", -3),
    ("(^ 2 10)", 1024),
    ("(^ 2 3 2)", 64),
    ("(^ 9 (/ 1 2))", 3),
    ("(% 7 2)", 1),
    ("(% 6 3)", 0),
])
def test_calculate(source, expected):
    assert calculate(source) == expected


@pytest.mark.parametrize("source, expected", [
    ("(+ 5)", 5),
    ("(- 5)", -5),
    ("(* 5)", 5),
    ("(/ 5)", Fraction(1, 5)),
    ("(% 5)", 1),           # 1/5 reduced, 1 mod 5
    ("(^ 5)", 1),
    ("(min 5)", 0),
    ("(max 5)", 5),
    ("(min -5)", -5),
    ("(max -5)", 0),
])
def test_single_operand_folds_into_identity(source, expected):
    assert calculate(source) == expected


def test_results_are_exact():
    assert calculate("(/ 1 3)") == Fraction(1, 3)
    assert calculate("(+ (/ 1 3) (/ 2 3))") == 1
    assert calculate("(/ 4 2)").denominator == 1
    assert calculate("(/ 2 -4)") == Fraction(-1, 2)


def test_fold_is_left_to_right():
    assert calculate("(- 10 3 2)") == (10 - 3) - 2
    assert calculate("(/ 100 5 2)") == 10
    assert calculate("(^ 2 3 2)") == (2 ** 3) ** 2


def test_modulo_of_fractions():
    # (1/2) / (1/3) is 3/2, and 3 mod 2 is 1
    assert calculate("(% (/ 1 2) (/ 1 3))") == 1


def test_modulo_keeps_sign_of_numerator():
    assert calculate("(% -7 2)") == -1
    assert calculate("(% 7 -2)") == -1


def test_exponent_truncates_to_integer():
    assert calculate("(^ 2 -1)") == 0
    assert calculate("(^ (/ 7 2) 2)") == 12
    assert calculate("(^ -2 3)") == -8


@pytest.mark.parametrize("source", [
    "(/ 1 0)",
    "(% 1 0)",
    "(/ 0)",
    "(% 0)",
    "(/ 10 2 0 5)",
    "(+ 1 (/ 3 (- 2 2)))",
    "(+ 1 {/ 1 0})",
    "(^ 0 -1)",
])
def test_divide_by_zero(source):
    with pytest.raises(CalcEvaluationError) as excinfo:
        calculate(source)
    assert str(excinfo.value) == "divide by zero"


def test_exponent_without_real_result():
    with pytest.raises(CalcEvaluationError):
        calculate("(^ -8 (/ 1 3))")


def test_exponent_out_of_range():
    with pytest.raises(CalcEvaluationError):
        calculate("(^ 10 400)")


def test_evaluation_error_is_a_value_error():
    with pytest.raises(ValueError):
        calculate("(/ 1 0)")


def test_quoted_evaluates_like_evaluated():
    assert calculate("(+ 1 {* 2 3})") == calculate("(+ 1 (* 2 3))") == 7
    assert calculate("(- {- 10 3} {min 4 2})") == 5


def test_evaluate_bare_value():
    assert evaluate(Fraction(3, 4)) == Fraction(3, 4)


def test_evaluate_built_tree():
    Add = operators['+']
    expr = EvaluatedExpression(Add(), [Fraction(1, 2), Fraction(1, 2)])
    assert evaluate(expr) == 1


def test_evaluate_alien_object():
    with pytest.raises(TypeError):
        evaluate("1")


def test_parse_does_not_evaluate():
    # a tree that can't be evaluated still parses
    assert parse("(/ 1 0)").operands[1] == 0
