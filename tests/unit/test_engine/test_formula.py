"""Formula evaluator tests"""
import pytest

from formflow.domain.errors import FormulaError
from formflow.engine.formula import evaluate_formula


@pytest.mark.parametrize("expression,expected", [
    ("1 + 2 * 3", 7),
    ("(1 + 2) * 3", 9),
    ("10 / 4", 2.5),
    ("7 // 2", 3),
    ("7 % 4", 3),
    ("2 ** 10", 1024),
    ("-5 + +2", -3),
    ("max(1, 9, 3) - min(4, 2)", 7),
    ("round(2.567, 2)", 2.57),
    ("sqrt(16) + abs(-1)", 5),
    ("floor(2.7) + ceil(2.1)", 5),
])
def test_arithmetic(expression, expected):
    assert evaluate_formula(expression) == pytest.approx(expected)


@pytest.mark.parametrize("expression", [
    "",
    "   ",
    "1 +",
    "__import__('os')",
    "foo + 1",
    "'a' * 3",
    "[1, 2]",
    "1 / 0",
    "2 ** 1000",
    "abs(x=1)",
    "True + 1",
])
def test_rejected_formulas(expression):
    with pytest.raises(FormulaError):
        evaluate_formula(expression)


@pytest.mark.parametrize("expression", [
    "(((9**99)**99)**99)**99 + 1",
    "(10 ** 99) ** 99",
    "1e308 * 10",
    "floor(1e308 * 1e308)",
])
def test_oversized_results_are_rejected(expression):
    with pytest.raises(FormulaError, match="could not be evaluated"):
        evaluate_formula(expression)


def test_results_are_floats():
    assert evaluate_formula("2 ** 10") == 1024.0
    assert isinstance(evaluate_formula("7 // 2"), float)
