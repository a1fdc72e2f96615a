"""Formula Evaluator - Arithmetic for calculation actions

Walks the parsed AST and only accepts numeric constants, + - * / // % **,
unary +/-, parentheses and a few whitelisted functions. No eval().

Every value is carried as a float and checked after each operation, so
nested powers stop at OverflowError instead of growing exact integers.
"""
import ast
import math
import operator
from typing import Any, Callable, Dict

from ..domain.errors import FormulaError

_BINARY_OPERATORS: Dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: Dict[type, Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _round(value: float, digits: float = 0) -> float:
    return round(value, int(digits))


_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "abs": abs,
    "round": _round,
    "min": min,
    "max": max,
    "floor": math.floor,
    "ceil": math.ceil,
    "sqrt": math.sqrt,
}

# Guards against "9 ** 9 ** 9" style inputs
MAX_EXPONENT = 100


def evaluate_formula(expression: str) -> float:
    """
    Evaluate an arithmetic expression

    Raises:
        FormulaError: Syntax errors, unsupported constructs, division by zero
    """
    if not expression or not expression.strip():
        raise FormulaError("Formula is empty")

    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise FormulaError(f"Invalid formula syntax: {e.msg}", details={"formula": expression})

    try:
        return _eval_node(tree.body)
    except ZeroDivisionError:
        raise FormulaError("Division by zero", details={"formula": expression})
    except (OverflowError, ValueError, TypeError) as e:
        raise FormulaError(f"Formula could not be evaluated: {e}", details={"formula": expression})


def _finite(value: Any) -> float:
    result = float(value)
    if not math.isfinite(result):
        raise OverflowError("result out of range")
    return result


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError(f"Unsupported value in formula: {node.value!r}")
        return _finite(node.value)

    if isinstance(node, ast.BinOp):
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise FormulaError(f"Unsupported operator: {type(node.op).__name__}")
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow) and abs(right) > MAX_EXPONENT:
            raise FormulaError("Exponent too large")
        return _finite(op(left, right))

    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise FormulaError(f"Unsupported operator: {type(node.op).__name__}")
        return _finite(op(_eval_node(node.operand)))

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS:
            raise FormulaError("Unsupported function call in formula")
        if node.keywords:
            raise FormulaError("Keyword arguments are not supported in formulas")
        args = [_eval_node(arg) for arg in node.args]
        return _finite(_FUNCTIONS[node.func.id](*args))

    if isinstance(node, ast.Name):
        raise FormulaError(f"Unknown name in formula: {node.id}")

    raise FormulaError(f"Unsupported expression: {type(node).__name__}")
