"""Z3 lowering and solver wrapper for wpoverflow.
This module maps the Expression IR onto z3's fixed-width bit-vector theory
and provides a small solver interface to discharge the resulting formulas:
- to_z3: lower an Expression to a z3 term
- FormulaSolver: validity, equivalence and counterexample queries
The opaque multiplication predicates become z3's native overflow operators
(BVMulNoOverflow / BVMulNoUnderflow).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import z3

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
from wpoverflow.logging import get_logger

_SIGNED_COMPARISONS: dict[BinaryOperator, Callable[[Any, Any], z3.BoolRef]] = {
    BinaryOperator.LESS_THAN: lambda a, b: a < b,
    BinaryOperator.LESS_OR_EQUAL: lambda a, b: a <= b,
    BinaryOperator.GREATER_THAN: lambda a, b: a > b,
    BinaryOperator.GREATER_OR_EQUAL: lambda a, b: a >= b,
}
_UNSIGNED_COMPARISONS: dict[BinaryOperator, Callable[[Any, Any], z3.BoolRef]] = {
    BinaryOperator.LESS_THAN: z3.ULT,
    BinaryOperator.LESS_OR_EQUAL: z3.ULE,
    BinaryOperator.GREATER_THAN: z3.UGT,
    BinaryOperator.GREATER_OR_EQUAL: z3.UGE,
}


class Z3Lowering:
    """Translates Expression trees into z3 terms.
    Operand widths and comparison signedness come from each operand's own
    var_type, falling back to the default given here. Literals are signed.
    A named operand maps to one bit-vector, so it must keep a single type
    throughout the formula.
    """

    def __init__(self, var_type: VariableType | None = None) -> None:
        self.var_type = var_type
        self.symbols: dict[str, tuple[z3.BitVecRef, VariableType]] = {}

    def formula(self, expr: Expression) -> z3.BoolRef:
        if isinstance(expr, BooleanLiteral):
            return z3.BoolVal(expr.value)
        if isinstance(expr, UnaryExpression):
            if expr.op is UnaryOperator.NOT:
                return z3.Not(self.formula(expr.operand))
            raise ValueError(f"unknown unary operator {expr.op!r}")
        if not isinstance(expr, BinaryExpression):
            raise ValueError(f"expected a formula, got term {expr}")
        op = expr.op
        if op is BinaryOperator.AND:
            return z3.And(self.formula(expr.left), self.formula(expr.right))
        if op is BinaryOperator.OR:
            return z3.Or(self.formula(expr.left), self.formula(expr.right))
        if op is BinaryOperator.IMPLICATION:
            return z3.Implies(self.formula(expr.left), self.formula(expr.right))
        left, var_type = self.term(expr.left)
        right, _ = self.term(expr.right)
        if op is BinaryOperator.EQUAL:
            return left == right
        if op is BinaryOperator.NOT_EQUAL:
            return left != right
        if op.is_comparison:
            table = _SIGNED_COMPARISONS if var_type.signed else _UNSIGNED_COMPARISONS
            return table[op](left, right)
        if op is BinaryOperator.SIGNED_MUL_NO_OVERFLOW:
            return z3.BVMulNoOverflow(left, right, True)
        if op is BinaryOperator.SIGNED_MUL_NO_UNDERFLOW:
            return z3.BVMulNoUnderflow(left, right)
        if op is BinaryOperator.UNSIGNED_MUL_NO_OVERFLOW:
            return z3.BVMulNoOverflow(left, right, False)
        raise ValueError(f"expected a formula, got term {expr}")

    def term(self, expr: Expression) -> tuple[z3.BitVecRef, VariableType]:
        if isinstance(expr, SignedBitVector):
            return z3.BitVecVal(expr.value, expr.width), VariableType.of(expr.width, True)
        if isinstance(expr, Operand):
            return self._operand(expr)
        if isinstance(expr, BinaryExpression) and expr.op.is_arithmetic:
            left, var_type = self.term(expr.left)
            right, _ = self.term(expr.right)
            if expr.op is BinaryOperator.ADD:
                return left + right, var_type
            return left - right, var_type
        raise ValueError(f"expected a bit-vector term, got {expr}")

    def _operand(self, operand: Operand) -> tuple[z3.BitVecRef, VariableType]:
        var_type = operand.var_type or self.var_type
        if var_type is None:
            raise ValueError(f"cannot determine the type of operand {operand.term!r}")
        term = operand.term
        if z3.is_bv(term):
            return term, var_type
        if isinstance(term, int):
            return z3.BitVecVal(var_type.bounds.wrap(term), var_type.width), var_type
        name = str(term)
        if name not in self.symbols:
            self.symbols[name] = (z3.BitVec(name, var_type.width), var_type)
        symbol, bound_type = self.symbols[name]
        if bound_type is not var_type:
            raise ValueError(
                f"operand {name!r} is used as both {bound_type.value} and {var_type.value}"
            )
        return symbol, var_type


def to_z3(expr: Expression, var_type: VariableType | None = None) -> z3.BoolRef:
    """Lower a boolean-valued Expression to a z3 formula."""
    return Z3Lowering(var_type).formula(expr)


@dataclass
class SolverResult:
    """Result of a satisfiability check."""

    is_sat: bool
    is_unsat: bool
    is_unknown: bool
    model: z3.ModelRef | None = None

    @staticmethod
    def sat(model: z3.ModelRef) -> SolverResult:
        return SolverResult(is_sat=True, is_unsat=False, is_unknown=False, model=model)

    @staticmethod
    def unsat() -> SolverResult:
        return SolverResult(is_sat=False, is_unsat=True, is_unknown=False)

    @staticmethod
    def unknown() -> SolverResult:
        return SolverResult(is_sat=False, is_unsat=False, is_unknown=True)


class FormulaSolver:
    """Discharges Expression formulas with z3.
    This class provides:
    - Satisfiability and validity checks of lowered formulas
    - Equivalence checks between two formulas
    - Counterexample extraction as operand name -> integer
    """

    def __init__(self, timeout_ms: int = 10000) -> None:
        """Initialize the solver.
        Args:
            timeout_ms: Solver timeout in milliseconds (default: 10s).
        """
        self.timeout_ms = timeout_ms
        self._query_count = 0

    @property
    def query_count(self) -> int:
        return self._query_count

    def check(self, formula: z3.BoolRef) -> SolverResult:
        """Check satisfiability of an already lowered formula."""
        self._query_count += 1
        solver = z3.Solver()
        solver.set("timeout", self.timeout_ms)
        solver.add(formula)
        result = solver.check()
        if result == z3.sat:
            return SolverResult.sat(solver.model())
        elif result == z3.unsat:
            return SolverResult.unsat()
        get_logger().debug(f"solver returned unknown: {solver.reason_unknown()}", category="solver")
        return SolverResult.unknown()

    def is_satisfiable(self, expr: Expression, var_type: VariableType | None = None) -> bool:
        return self.check(to_z3(expr, var_type)).is_sat

    def is_valid(self, expr: Expression, var_type: VariableType | None = None) -> bool:
        """True if expr holds under every assignment of its operands."""
        return self.check(z3.Not(to_z3(expr, var_type))).is_unsat

    def equivalent(
        self,
        first: Expression,
        second: Expression,
        var_type: VariableType | None = None,
    ) -> bool:
        """True if both formulas have the same truth value everywhere."""
        lowering = Z3Lowering(var_type)
        lhs = lowering.formula(first)
        rhs = lowering.formula(second)
        return self.check(lhs != rhs).is_unsat

    def counterexample(
        self,
        expr: Expression,
        var_type: VariableType | None = None,
    ) -> dict[str, int] | None:
        """Find operand values that falsify expr.
        Returns:
            Operand name -> integer in the operand's interpretation,
            or None if expr is valid (or the solver gave up).
        """
        lowering = Z3Lowering(var_type)
        result = self.check(z3.Not(lowering.formula(expr)))
        if not result.is_sat or result.model is None:
            return None
        values: dict[str, int] = {}
        for name, (symbol, sym_type) in lowering.symbols.items():
            value = result.model.eval(symbol, model_completion=True)
            if sym_type.signed:
                values[name] = value.as_signed_long()
            else:
                values[name] = value.as_long()
        return values


__all__ = ["Z3Lowering", "to_z3", "SolverResult", "FormulaSolver"]
