"""Condition evaluator tests"""
import math

import pytest

from formflow.engine.condition_evaluator import evaluate, is_empty, to_number


@pytest.mark.parametrize("value,operator,compare,expected", [
    ("25", "greaterThan", "18", True),
    ("", "isEmpty", "", True),
    ("x", "isNotEmpty", "", True),
    ("abc", "contains", "b", True),
    ("abc", "foo", "b", False),
    ("Sales", "equals", "Sales", True),
    ("Sales", "notEquals", "Sales", False),
    (25, "equals", "25", True),
    (True, "equals", "true", True),
    ("10", "lessThan", "9", False),
    ("9", "lessThan", "10", True),
    ("abc", "greaterThan", "1", False),
    ("1", "lessThan", "abc", False),
    (["a", "b"], "contains", "b", True),
])
def test_truth_table(value, operator, compare, expected):
    assert evaluate(value, operator, compare) is expected


@pytest.mark.parametrize("value", [None, "", 0, False, [], {}, math.nan])
def test_empty_values(value):
    assert evaluate(value, "isEmpty", "") is True
    assert evaluate(value, "isNotEmpty", "") is False


@pytest.mark.parametrize("value", ["x", 1, True, ["a"], {"k": "v"}, " "])
def test_non_empty_values(value):
    assert is_empty(value) is False


@pytest.mark.parametrize("value,expected", [
    ("42", 42.0),
    (" 3.5 ", 3.5),
    ("", 0.0),
    (True, 1.0),
    (False, 0.0),
    (7, 7.0),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("-Infinity", -math.inf),
    ("0x1f", 31.0),
])
def test_to_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize("value", ["abc", None, ["1"], {"a": 1}, "1_000", "inf", "infinity", "nan", "1e", "\u0663"])
def test_to_number_nan(value):
    assert math.isnan(to_number(value))


def test_unknown_operator_never_raises():
    assert evaluate(object(), "between", object()) is False


def test_underscored_digits_do_not_compare():
    assert evaluate("1_000", "greaterThan", "999") is False
    assert evaluate("1000", "greaterThan", "999") is True
