"""
Failure taxonomy for wpoverflow.
Every error raised while synthesizing a safety precondition is fatal for the
enclosing verification run. None of them is ever turned into an "assume safe"
result, since a missing obligation would let the prover certify a program
that overflows.
This module provides:
- OverflowCheckError: Base class carrying a message and an optional hint
- UnsupportedType: Destination type is not one of the eight fixed-width kinds
- UnsupportedOperator: No safety condition is modeled for the operator
- InternalInvariantViolation: A statically impossible routing branch was hit
- EvaluationError: The concrete evaluator could not interpret a tree
- ConfigError: A configuration value is out of its allowed set
"""

from __future__ import annotations

from typing import Any


class OverflowCheckError(Exception):
    """
    Base wpoverflow exception class.
    This exception is not raised directly. Subclasses share the
    ``message (hint: ...)`` rendering.
    Attributes:
        message: Error message to display with the exception
        hint: Optional suggestion for the caller
    """

    def __init__(self, message: str = "overflow check failed", *, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class UnsupportedType(OverflowCheckError):
    """The destination's declared type is not a supported fixed-width integer."""

    def __init__(self, var_type: Any, *, hint: str | None = None):
        self.var_type = var_type
        if hint is None:
            hint = "supported types are i8, i16, i32, i64, u8, u16, u32, u64"
        super().__init__(f"unsupported type for overflow check: {var_type!r}", hint=hint)


class UnsupportedOperator(OverflowCheckError):
    """An overflow check was requested for an operator with no safety condition."""

    def __init__(self, op: Any, var_type: Any = None, *, hint: str | None = None):
        self.op = op
        self.var_type = var_type
        name = getattr(op, "name", op)
        message = f"no overflow condition is modeled for operator {name}"
        if var_type is not None:
            message += f" on {getattr(var_type, 'value', var_type)}"
        super().__init__(message, hint=hint)


class InternalInvariantViolation(OverflowCheckError):
    """A branch the router declares unreachable was reached."""


class EvaluationError(OverflowCheckError):
    """The concrete evaluator could not interpret an expression."""


class ConfigError(OverflowCheckError, ValueError):
    """A configuration value is outside its allowed set."""


__all__ = [
    "OverflowCheckError",
    "UnsupportedType",
    "UnsupportedOperator",
    "InternalInvariantViolation",
    "EvaluationError",
    "ConfigError",
]
