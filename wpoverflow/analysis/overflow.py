"""Overflow-check dispatcher.
The single entry point the weakest-precondition engine calls once per
arithmetic instruction. It classifies the destination type, routes to the
signed or unsigned encoder for the operator, and conjoins the resulting
safety formula onto the running precondition.
Every failure is raised. Returning the precondition unchanged would drop a
proof obligation and make the final verification condition unsound.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from wpoverflow.analysis.arithmetic_safety import (
    CaseSplit,
    DivisionForm,
    signed_add,
    signed_div,
    signed_mul,
    signed_sub,
    unsigned_add,
    unsigned_mul,
    unsigned_sub,
)
from wpoverflow.core.exceptions import (
    InternalInvariantViolation,
    UnsupportedOperator,
)
from wpoverflow.core.expression import Expression, and_
from wpoverflow.core.types import UNMODELED_OPS, BinOp, VariableType, classify
from wpoverflow.logging import get_logger


@dataclass(frozen=True)
class EncodingOptions:
    """Shape choices for the emitted formulas. All choices are equisatisfiable
    and have identical truth tables; they only change the tree handed to the
    serializer.
    """

    case_split: CaseSplit = CaseSplit.FULL
    division_form: DivisionForm = DivisionForm.COLLAPSED


DEFAULT_OPTIONS = EncodingOptions()


@dataclass(frozen=True)
class ArithmeticInstruction:
    """One arithmetic instruction awaiting an overflow check."""

    var_type: VariableType | str
    op: BinOp
    left: Expression
    right: Expression
    location: str | None = field(default=None, compare=False)


def signed_overflow(
    op: BinOp,
    width: int,
    left: Expression,
    right: Expression,
    options: EncodingOptions = DEFAULT_OPTIONS,
) -> Expression:
    """Route a signed operation to its encoder."""
    if op is BinOp.ADD:
        return signed_add(width, left, right, options.case_split)
    if op is BinOp.SUB:
        return signed_sub(width, left, right, options.case_split)
    if op is BinOp.MUL:
        return signed_mul(left, right)
    if op is BinOp.DIV or op is BinOp.REM:
        return signed_div(width, left, right, options.division_form)
    if op in UNMODELED_OPS:
        raise UnsupportedOperator(op, VariableType.of(width, signed=True))
    raise InternalInvariantViolation(f"unknown operator reached the signed router: {op!r}")


def unsigned_overflow(op: BinOp, width: int, left: Expression, right: Expression) -> Expression:
    """Route an unsigned operation to its encoder."""
    if op is BinOp.ADD:
        return unsigned_add(left, right)
    if op is BinOp.SUB:
        return unsigned_sub(left, right)
    if op is BinOp.MUL:
        return unsigned_mul(left, right)
    if op is BinOp.DIV or op is BinOp.REM:
        # unsigned division cannot overflow; divide-by-zero is checked elsewhere
        raise InternalInvariantViolation(
            f"unsigned {op.name} must not be routed to the overflow encoder"
        )
    if op in UNMODELED_OPS:
        raise UnsupportedOperator(op, VariableType.of(width, signed=False))
    raise InternalInvariantViolation(f"unknown operator reached the unsigned router: {op!r}")


def safety_formula(
    var_type: Any,
    op: BinOp,
    left: Expression,
    right: Expression,
    options: EncodingOptions | None = None,
) -> Expression:
    """
    Build the no-overflow formula for ``left op right``.
    Args:
        var_type: Destination type (VariableType or its name, e.g. "i32")
        op: Source operator
        left: Left operand expression
        right: Right operand expression
        options: Formula shape choices
    Raises:
        UnsupportedType: var_type is not a supported fixed-width integer
        UnsupportedOperator: no safety condition is modeled for op
        InternalInvariantViolation: op reached an impossible branch
    """
    kind = classify(var_type)
    options = options or DEFAULT_OPTIONS
    if kind.signed:
        return signed_overflow(op, kind.width, left, right, options)
    return unsigned_overflow(op, kind.width, left, right)


def overflow_check(
    precondition: Expression,
    var_type: Any,
    op: BinOp,
    left: Expression,
    right: Expression,
    options: EncodingOptions | None = None,
) -> Expression:
    """
    Conjoin the safety obligation of ``left op right`` onto a precondition.
    Returns:
        ``precondition && safety_formula(var_type, op, left, right)``
    Raises:
        The failures of safety_formula; the precondition is never returned
        without the obligation.
    Example:
        >>> from wpoverflow.core.expression import TRUE, Operand
        >>> wp = overflow_check(TRUE, "u8", BinOp.ADD, Operand("a"), Operand("b"))
        >>> str(wp)
        'true && ((a + b) >= b)'
    """
    logger = get_logger()
    try:
        formula = safety_formula(var_type, op, left, right, options)
    except Exception as exc:
        logger.debug(f"overflow check rejected: {exc}", category="overflow")
        raise
    logger.count(f"checks.{op.name.lower()}")
    logger.trace(f"{var_type} {op.name}: {formula}", category="overflow")
    return and_(precondition, formula)


def conjoin_checks(
    precondition: Expression,
    instructions: Iterable[ArithmeticInstruction],
    options: EncodingOptions | None = None,
) -> Expression:
    """Fold overflow checks for several instructions into one precondition.
    The first failing instruction aborts the whole fold.
    """
    result = precondition
    for instr in instructions:
        try:
            result = overflow_check(result, instr.var_type, instr.op, instr.left, instr.right, options)
        except Exception as exc:
            if instr.location is not None:
                exc.add_note(f"while checking instruction at {instr.location}")
            raise
    return result


__all__ = [
    "EncodingOptions",
    "DEFAULT_OPTIONS",
    "ArithmeticInstruction",
    "signed_overflow",
    "unsigned_overflow",
    "safety_formula",
    "overflow_check",
    "conjoin_checks",
]
