"""Overflow safety analysis: operator encoders and the dispatcher."""

from wpoverflow.analysis.arithmetic_safety import CaseSplit, DivisionForm
from wpoverflow.analysis.overflow import (
    ArithmeticInstruction,
    EncodingOptions,
    conjoin_checks,
    overflow_check,
    safety_formula,
)

__all__ = [
    "CaseSplit",
    "DivisionForm",
    "EncodingOptions",
    "ArithmeticInstruction",
    "overflow_check",
    "safety_formula",
    "conjoin_checks",
]
