"""Core module for wpoverflow.
Provides:
- The immutable Expression IR and its combinators
- Fixed-width integer types and source operators
- The failure taxonomy
- Concrete evaluation and z3 lowering of formulas
"""

from wpoverflow.core.evaluate import Evaluator, evaluate
from wpoverflow.core.exceptions import (
    ConfigError,
    EvaluationError,
    InternalInvariantViolation,
    OverflowCheckError,
    UnsupportedOperator,
    UnsupportedType,
)
from wpoverflow.core.expression import (
    FALSE,
    TRUE,
    BinaryExpression,
    BinaryOperator,
    BooleanLiteral,
    Expression,
    Operand,
    SignedBitVector,
    UnaryExpression,
    UnaryOperator,
    conjoin,
)
from wpoverflow.core.solver import FormulaSolver, SolverResult, Z3Lowering, to_z3
from wpoverflow.core.types import BinOp, IntegerBounds, VariableType, classify

__all__ = [
    "Expression",
    "BooleanLiteral",
    "SignedBitVector",
    "Operand",
    "UnaryExpression",
    "BinaryExpression",
    "UnaryOperator",
    "BinaryOperator",
    "TRUE",
    "FALSE",
    "conjoin",
    "VariableType",
    "IntegerBounds",
    "BinOp",
    "classify",
    "OverflowCheckError",
    "UnsupportedType",
    "UnsupportedOperator",
    "InternalInvariantViolation",
    "EvaluationError",
    "ConfigError",
    "Evaluator",
    "evaluate",
    "Z3Lowering",
    "to_z3",
    "FormulaSolver",
    "SolverResult",
]
