"""Concrete evaluation of the Expression IR.
Interprets a formula under fixed-width machine semantics: operand values are
reduced into the range of their type, ADD and SUBTRACT wrap modulo 2**width,
comparisons compare the interpreted values (signed for signed types and
literals, unsigned otherwise), and the multiplication predicates test the
exact product against the type's bounds. This is the behaviour a bit-vector
solver gives the same formula, so it is used to check encoders against
ordinary integer arithmetic.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from typing import Any

from wpoverflow.core.exceptions import EvaluationError
from wpoverflow.core.expression import (
    BinaryExpression,
    BinaryOperator,
    BooleanLiteral,
    Expression,
    Operand,
    SignedBitVector,
    UnaryExpression,
    UnaryOperator,
)
from wpoverflow.core.types import VariableType

_COMPARISONS: dict[BinaryOperator, Callable[[int, int], bool]] = {
    BinaryOperator.EQUAL: operator.eq,
    BinaryOperator.NOT_EQUAL: operator.ne,
    BinaryOperator.LESS_THAN: operator.lt,
    BinaryOperator.LESS_OR_EQUAL: operator.le,
    BinaryOperator.GREATER_THAN: operator.gt,
    BinaryOperator.GREATER_OR_EQUAL: operator.ge,
}


class Evaluator:
    """Evaluates formulas against a binding of operand terms to integers."""

    def __init__(self, env: Mapping[Any, int], var_type: VariableType | None = None):
        """Initialize the evaluator.
        Args:
            env: Operand term -> integer value.
            var_type: Type used for operands that carry none of their own.
        """
        self.env = env
        self.var_type = var_type

    def formula(self, expr: Expression) -> bool:
        """Evaluate a boolean-valued expression."""
        if isinstance(expr, BooleanLiteral):
            return expr.value
        if isinstance(expr, UnaryExpression):
            if expr.op is UnaryOperator.NOT:
                return not self.formula(expr.operand)
            raise EvaluationError(f"unknown unary operator {expr.op!r}")
        if not isinstance(expr, BinaryExpression):
            raise EvaluationError(f"expected a formula, got term {expr}")
        op = expr.op
        if op is BinaryOperator.AND:
            return self.formula(expr.left) and self.formula(expr.right)
        if op is BinaryOperator.OR:
            return self.formula(expr.left) or self.formula(expr.right)
        if op is BinaryOperator.IMPLICATION:
            return (not self.formula(expr.left)) or self.formula(expr.right)
        if op.is_comparison:
            left, _ = self.term(expr.left)
            right, _ = self.term(expr.right)
            return _COMPARISONS[op](left, right)
        if op.is_predicate:
            return self._predicate(expr)
        raise EvaluationError(f"expected a formula, got term {expr}")

    def term(self, expr: Expression) -> tuple[int, VariableType]:
        """Evaluate a bit-vector term to its interpreted value and type."""
        if isinstance(expr, SignedBitVector):
            return expr.value, VariableType.of(expr.width, signed=True)
        if isinstance(expr, Operand):
            var_type = self._operand_type(expr)
            if isinstance(expr.term, int):
                return var_type.bounds.wrap(expr.term), var_type
            try:
                raw = self.env[expr.term]
            except KeyError:
                raise EvaluationError(f"no value bound for operand {expr.term!r}") from None
            return var_type.bounds.wrap(int(raw)), var_type
        if isinstance(expr, BinaryExpression) and expr.op.is_arithmetic:
            left, var_type = self.term(expr.left)
            right, _ = self.term(expr.right)
            raw = left + right if expr.op is BinaryOperator.ADD else left - right
            return var_type.bounds.wrap(raw), var_type
        raise EvaluationError(f"expected a bit-vector term, got {expr}")

    def _predicate(self, expr: BinaryExpression) -> bool:
        left, var_type = self.term(expr.left)
        right, _ = self.term(expr.right)
        product = left * right
        bounds = var_type.bounds
        if expr.op is BinaryOperator.SIGNED_MUL_NO_UNDERFLOW:
            return product >= bounds.min_val
        return product <= bounds.max_val

    def _operand_type(self, operand: Operand) -> VariableType:
        var_type = operand.var_type or self.var_type
        if var_type is None:
            raise EvaluationError(f"cannot determine the type of operand {operand.term!r}")
        return var_type


def evaluate(
    expr: Expression,
    env: Mapping[Any, int],
    var_type: VariableType | None = None,
) -> bool:
    """Evaluate a formula under fixed-width wrapping semantics.
    Args:
        expr: Boolean-valued expression
        env: Operand term -> integer value
        var_type: Default type for operands without their own
    Returns:
        The truth value of expr
    Example:
        >>> from wpoverflow.core.expression import Operand, add, ge
        >>> l, r = Operand("l"), Operand("r")
        >>> evaluate(ge(add(l, r), r), {"l": 250, "r": 10}, VariableType.U8)
        False
    """
    return Evaluator(env, var_type).formula(expr)


__all__ = ["Evaluator", "evaluate"]
