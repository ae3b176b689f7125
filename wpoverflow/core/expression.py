"""Expression IR for wpoverflow.
This module defines the immutable formula/term tree that every encoder builds
and the dispatcher returns. Nodes are frozen dataclasses, so a sub-tree used
in several branches of a formula can be shared without any risk of one branch
observing a change made through another.
The small combinators at the bottom (and_, implies, ge, signed_literal, ...)
let an encoder read like the logical formula it produces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, Any

from wpoverflow.core.types import IntegerBounds

if TYPE_CHECKING:
    from wpoverflow.core.types import VariableType


class UnaryOperator(Enum):
    """Unary operators of the IR."""

    NOT = "!"

    @property
    def symbol(self) -> str:
        return self.value


class BinaryOperator(Enum):
    """Binary operators of the IR, with their rendering symbol."""

    AND = "&&"
    OR = "||"
    IMPLICATION = "==>"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    ADD = "+"
    SUBTRACT = "-"
    SIGNED_MUL_NO_OVERFLOW = "smul_no_overflow"
    SIGNED_MUL_NO_UNDERFLOW = "smul_no_underflow"
    UNSIGNED_MUL_NO_OVERFLOW = "umul_no_overflow"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_logical(self) -> bool:
        return self in LOGICAL_OPERATORS

    @property
    def is_comparison(self) -> bool:
        return self in COMPARISON_OPERATORS

    @property
    def is_arithmetic(self) -> bool:
        return self in ARITHMETIC_OPERATORS

    @property
    def is_predicate(self) -> bool:
        """Opaque overflow predicates left for the solver theory to expand."""
        return self in PREDICATE_OPERATORS


LOGICAL_OPERATORS = frozenset(
    {BinaryOperator.AND, BinaryOperator.OR, BinaryOperator.IMPLICATION}
)
COMPARISON_OPERATORS = frozenset(
    {
        BinaryOperator.EQUAL,
        BinaryOperator.NOT_EQUAL,
        BinaryOperator.LESS_THAN,
        BinaryOperator.LESS_OR_EQUAL,
        BinaryOperator.GREATER_THAN,
        BinaryOperator.GREATER_OR_EQUAL,
    }
)
ARITHMETIC_OPERATORS = frozenset({BinaryOperator.ADD, BinaryOperator.SUBTRACT})
PREDICATE_OPERATORS = frozenset(
    {
        BinaryOperator.SIGNED_MUL_NO_OVERFLOW,
        BinaryOperator.SIGNED_MUL_NO_UNDERFLOW,
        BinaryOperator.UNSIGNED_MUL_NO_OVERFLOW,
    }
)


class Expression(ABC):
    """Abstract base class for all IR nodes."""

    @abstractmethod
    def children(self) -> tuple[Expression, ...]:
        """Direct sub-expressions, left to right."""

    def walk(self) -> Iterator[Expression]:
        """Yield this node and all descendants in pre-order."""
        stack: list[Expression] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def size(self) -> int:
        """Number of nodes in the tree."""
        return sum(1 for _ in self.walk())

    def operands(self) -> list[Operand]:
        """Opaque leaves in left-to-right order."""
        return [node for node in self.walk() if isinstance(node, Operand)]


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    """Boolean constant."""

    value: bool

    def children(self) -> tuple[Expression, ...]:
        return ()

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class SignedBitVector(Expression):
    """Fixed-width signed bit-vector literal."""

    width: int
    value: int

    def __post_init__(self) -> None:
        bounds = IntegerBounds.for_width(self.width, signed=True)
        if not bounds.contains(self.value):
            raise ValueError(f"{self.value} does not fit in a signed {self.width}-bit vector")

    def children(self) -> tuple[Expression, ...]:
        return ()

    def __str__(self) -> str:
        return f"{self.value}i{self.width}"


@dataclass(frozen=True)
class Operand(Expression):
    """
    Opaque leaf standing for a program value.
    The term is supplied by the caller and never inspected by the encoders.
    Attributes:
        term: Hashable caller value (a variable name, a z3 term, ...)
        var_type: Optional type, read only by the evaluator and z3 lowering
    """

    term: Any
    var_type: VariableType | None = None

    def children(self) -> tuple[Expression, ...]:
        return ()

    def __str__(self) -> str:
        return str(self.term)


@dataclass(frozen=True)
class UnaryExpression(Expression):
    op: UnaryOperator
    operand: Expression

    def children(self) -> tuple[Expression, ...]:
        return (self.operand,)

    def __str__(self) -> str:
        return f"{self.op.symbol}{_wrap(self.operand)}"


@dataclass(frozen=True)
class BinaryExpression(Expression):
    op: BinaryOperator
    left: Expression
    right: Expression

    def children(self) -> tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        if self.op.is_predicate:
            return f"{self.op.symbol}({self.left}, {self.right})"
        return f"{_wrap(self.left)} {self.op.symbol} {_wrap(self.right)}"


def _wrap(expr: Expression) -> str:
    if isinstance(expr, BinaryExpression) and not expr.op.is_predicate:
        return f"({expr})"
    return str(expr)


TRUE = BooleanLiteral(True)
FALSE = BooleanLiteral(False)


def signed_literal(width: int, value: int) -> SignedBitVector:
    return SignedBitVector(width, value)


def zero(width: int) -> SignedBitVector:
    return SignedBitVector(width, 0)


def not_(operand: Expression) -> UnaryExpression:
    return UnaryExpression(UnaryOperator.NOT, operand)


def _binary(op: BinaryOperator):
    def build(left: Expression, right: Expression) -> BinaryExpression:
        return BinaryExpression(op, left, right)

    build.__name__ = op.name.lower()
    build.__doc__ = f"Build ``left {op.symbol} right``."
    return build


and_ = _binary(BinaryOperator.AND)
or_ = _binary(BinaryOperator.OR)
implies = _binary(BinaryOperator.IMPLICATION)
eq = _binary(BinaryOperator.EQUAL)
ne = _binary(BinaryOperator.NOT_EQUAL)
lt = _binary(BinaryOperator.LESS_THAN)
le = _binary(BinaryOperator.LESS_OR_EQUAL)
gt = _binary(BinaryOperator.GREATER_THAN)
ge = _binary(BinaryOperator.GREATER_OR_EQUAL)
add = _binary(BinaryOperator.ADD)
sub = _binary(BinaryOperator.SUBTRACT)
smul_no_overflow = _binary(BinaryOperator.SIGNED_MUL_NO_OVERFLOW)
smul_no_underflow = _binary(BinaryOperator.SIGNED_MUL_NO_UNDERFLOW)
umul_no_overflow = _binary(BinaryOperator.UNSIGNED_MUL_NO_OVERFLOW)


def conjoin(*exprs: Expression) -> Expression:
    """Left-nested conjunction of exprs; TRUE when empty."""
    if not exprs:
        return TRUE
    return reduce(and_, exprs)


__all__ = [
    "UnaryOperator",
    "BinaryOperator",
    "Expression",
    "BooleanLiteral",
    "SignedBitVector",
    "Operand",
    "UnaryExpression",
    "BinaryExpression",
    "TRUE",
    "FALSE",
    "signed_literal",
    "zero",
    "not_",
    "and_",
    "or_",
    "implies",
    "eq",
    "ne",
    "lt",
    "le",
    "gt",
    "ge",
    "add",
    "sub",
    "smul_no_overflow",
    "smul_no_underflow",
    "umul_no_overflow",
    "conjoin",
]
