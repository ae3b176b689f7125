"""Arithmetic safety encoders.
Each encoder returns an Expression that holds exactly when the operation on
its two operands stays within the fixed-width range of the destination type:
- Signed: addition, subtraction, multiplication, division / remainder
- Unsigned: addition, subtraction, multiplication
Comparisons on the operands are read as signed (resp. unsigned) bit-vector
comparisons and ADD / SUBTRACT as wrapping operations, which is how the
downstream solver interprets them.
"""
from __future__ import annotations
from enum import Enum
from wpoverflow.core.expression import (
    FALSE,
    TRUE,
    Expression,
    add,
    and_,
    eq,
    ge,
    implies,
    le,
    lt,
    not_,
    or_,
    signed_literal,
    smul_no_overflow,
    smul_no_underflow,
    sub,
    umul_no_overflow,
    zero,
)
from wpoverflow.core.types import signed_min
class CaseSplit(Enum):
    """Shape of the signed add/sub case split."""
    FULL = "full"
    MINIMAL = "minimal"
class DivisionForm(Enum):
    """Shape of the signed division trap formula."""
    COLLAPSED = "collapsed"
    IMPLICATION = "implication"
def signed_add(
    width: int,
    left: Expression,
    right: Expression,
    case_split: CaseSplit = CaseSplit.FULL,
) -> Expression:
    """
    No-overflow condition for left + right on signed width-bit vectors.
    Logically equivalent pseudocode (false means overflow/underflow):
        if left >= 0 and right >= 0:
            left + right >= 0
        elif left < 0 and right < 0:
            left + right < 0
        else:
            true
    The FULL shape guards the negative case with the extra antecedent
    (left < 0 or right < 0); MINIMAL drops it. Both have the same truth table.
    """
    both_non_negative = and_(ge(left, zero(width)), ge(right, zero(width)))
    both_negative = and_(lt(left, zero(width)), lt(right, zero(width)))
    positive_case = implies(both_non_negative, ge(add(left, right), zero(width)))
    negative_case = implies(both_negative, lt(add(left, right), zero(width)))
    if case_split is CaseSplit.FULL:
        either_negative = or_(lt(left, zero(width)), lt(right, zero(width)))
        negative_case = implies(either_negative, negative_case)
    return and_(positive_case, negative_case)
def signed_sub(
    width: int,
    left: Expression,
    right: Expression,
    case_split: CaseSplit = CaseSplit.FULL,
) -> Expression:
    """
    No-overflow condition for left - right on signed width-bit vectors.
    Logically equivalent pseudocode (false means overflow/underflow):
        if left >= 0 and right < 0:
            left - right >= 0
        elif left < 0 and right >= 0:
            left - right < 0
        else:
            true
    """
    towards_positive = and_(ge(left, zero(width)), lt(right, zero(width)))
    towards_negative = and_(lt(left, zero(width)), ge(right, zero(width)))
    positive_case = implies(towards_positive, ge(sub(left, right), zero(width)))
    negative_case = implies(towards_negative, lt(sub(left, right), zero(width)))
    if case_split is CaseSplit.FULL:
        mixed_sign = or_(lt(left, zero(width)), ge(right, zero(width)))
        negative_case = implies(mixed_sign, negative_case)
    return and_(positive_case, negative_case)
def signed_mul(left: Expression, right: Expression) -> Expression:
    """Defer signed multiplication to the solver's native overflow predicates."""
    return and_(smul_no_overflow(left, right), smul_no_underflow(left, right))
def signed_div(
    width: int,
    left: Expression,
    right: Expression,
    form: DivisionForm = DivisionForm.COLLAPSED,
) -> Expression:
    """
    No-overflow condition for left / right (and left % right).
    The only trap is MIN(width) / -1, whose quotient MAX(width) + 1 is not
    representable. Division by zero is not this encoder's concern.
    """
    trap = and_(
        eq(left, signed_literal(width, signed_min(width))),
        eq(right, signed_literal(width, -1)),
    )
    if form is DivisionForm.IMPLICATION:
        return and_(implies(trap, FALSE), implies(not_(trap), TRUE))
    return not_(trap)
def unsigned_add(left: Expression, right: Expression) -> Expression:
    # l + r >= r: a wrapped sum is always smaller than r
    return ge(add(left, right), right)
def unsigned_sub(left: Expression, right: Expression) -> Expression:
    # l - r <= l: a wrapped difference is always larger than l
    return le(sub(left, right), left)
def unsigned_mul(left: Expression, right: Expression) -> Expression:
    return umul_no_overflow(left, right)
__all__ = [
    "CaseSplit",
    "DivisionForm",
    "signed_add",
    "signed_sub",
    "signed_mul",
    "signed_div",
    "unsigned_add",
    "unsigned_sub",
    "unsigned_mul",
]
