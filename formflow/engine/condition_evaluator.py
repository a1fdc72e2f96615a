"""Condition Evaluator - Safe evaluation of condition step comparisons"""
import math
import re
from typing import Any

from ..domain.enums import ConditionOperator
from .template_resolver import stringify
from ..utils.logger import get_logger

logger = get_logger(__name__)

KNOWN_OPERATORS = frozenset(op.value for op in ConditionOperator)

# Numeric text the way JavaScript Number() reads it
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INFINITY = re.compile(r"[+-]?Infinity")
_RADIX = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def to_number(value: Any) -> float:
    """
    Coerce a submitted value to a number

    Numbers pass through, booleans are 1/0, numeric strings are parsed
    (blank strings are 0). Text Number() would reject, such as "1_000" or
    "inf", is NaN, as is anything else.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _DECIMAL.fullmatch(text):
            return float(text)
        if _INFINITY.fullmatch(text):
            return -math.inf if text.startswith("-") else math.inf
        if _RADIX.fullmatch(text):
            return float(int(text, 0))
        return math.nan
    return math.nan


def is_empty(value: Any) -> bool:
    """Falsy values, NaN, and empty lists/dicts count as empty"""
    if isinstance(value, float) and math.isnan(value):
        return True
    return not value


class ConditionEvaluator:
    """
    Evaluate a single comparison against one submitted field value

    Uses a fixed operator table - no eval() or exec(). Unknown operators
    evaluate to False.
    """

    def evaluate(self, value: Any, operator: str, compare_value: Any) -> bool:
        """
        Evaluate one comparison

        Args:
            value: Submitted field value
            operator: One of ConditionOperator values
            compare_value: Configured value to compare against

        Returns:
            True if the condition is met
        """
        try:
            return self._compare(value, operator, compare_value)
        except Exception as e:
            logger.warning(f"Condition evaluation failed: {e}")
            return False  # Fail closed

    def _compare(self, value: Any, operator: str, compare_value: Any) -> bool:
        if operator == ConditionOperator.EQUALS:
            return stringify(value) == stringify(compare_value)

        elif operator == ConditionOperator.NOT_EQUALS:
            return stringify(value) != stringify(compare_value)

        elif operator == ConditionOperator.CONTAINS:
            return stringify(compare_value) in stringify(value)

        elif operator == ConditionOperator.GREATER_THAN:
            return self._compare_numeric(value, compare_value, lambda a, b: a > b)

        elif operator == ConditionOperator.LESS_THAN:
            return self._compare_numeric(value, compare_value, lambda a, b: a < b)

        elif operator == ConditionOperator.IS_EMPTY:
            return is_empty(value)

        elif operator == ConditionOperator.IS_NOT_EMPTY:
            return not is_empty(value)

        return False

    def _compare_numeric(self, value: Any, compare_value: Any, comparator) -> bool:
        """Compare numerically; NaN on either side is never a match"""
        a = to_number(value)
        b = to_number(compare_value)
        if math.isnan(a) or math.isnan(b):
            return False
        return comparator(a, b)


_default_evaluator = ConditionEvaluator()


def evaluate(value: Any, operator: str, compare_value: Any) -> bool:
    """Module-level shortcut for ConditionEvaluator().evaluate"""
    return _default_evaluator.evaluate(value, operator, compare_value)
