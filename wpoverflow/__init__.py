"""wpoverflow: arithmetic-safety preconditions for weakest-precondition verifiers.
Given a binary arithmetic operation over fixed-width signed or unsigned
integers, wpoverflow builds a formula that holds exactly when the operation
does not overflow or underflow, and conjoins it onto the verification
condition accumulated by the caller:
- Signed add / sub / mul / div / rem on i8, i16, i32, i64
- Unsigned add / sub / mul on u8, u16, u32, u64
Example:
    >>> from wpoverflow import TRUE, BinOp, Operand, overflow_check
    >>> wp = overflow_check(TRUE, "i32", BinOp.DIV, Operand("x"), Operand("y"))
    >>> print(wp)
    true && !((x == -2147483648i32) && (y == -1i32))
"""

from wpoverflow.analysis.arithmetic_safety import CaseSplit, DivisionForm
from wpoverflow.analysis.overflow import (
    ArithmeticInstruction,
    EncodingOptions,
    conjoin_checks,
    overflow_check,
    safety_formula,
)
from wpoverflow.config import WpOverflowConfig, load_config
from wpoverflow.core.evaluate import evaluate
from wpoverflow.core.exceptions import (
    InternalInvariantViolation,
    OverflowCheckError,
    UnsupportedOperator,
    UnsupportedType,
)
from wpoverflow.core.expression import FALSE, TRUE, Expression, Operand
from wpoverflow.core.solver import FormulaSolver, to_z3
from wpoverflow.core.types import BinOp, VariableType, classify
from wpoverflow.logging import LogLevel, configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "overflow_check",
    "safety_formula",
    "conjoin_checks",
    "ArithmeticInstruction",
    "EncodingOptions",
    "CaseSplit",
    "DivisionForm",
    "Expression",
    "Operand",
    "TRUE",
    "FALSE",
    "BinOp",
    "VariableType",
    "classify",
    "OverflowCheckError",
    "UnsupportedType",
    "UnsupportedOperator",
    "InternalInvariantViolation",
    "evaluate",
    "to_z3",
    "FormulaSolver",
    "WpOverflowConfig",
    "load_config",
    "configure_logging",
    "get_logger",
    "LogLevel",
]
