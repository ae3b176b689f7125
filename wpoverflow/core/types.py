"""Fixed-width integer types and source operators for wpoverflow.
The closed VariableType enumeration is the only type vocabulary the encoders
understand. Anything a caller declares outside of it (pointer-sized integers,
128-bit integers, floats) is rejected by classify() before any formula is built.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any
from wpoverflow.core.exceptions import UnsupportedType
SUPPORTED_WIDTHS = (8, 16, 32, 64)
@dataclass(frozen=True)
class IntegerBounds:
    """Bounds for an integer type."""
    width: int
    signed: bool
    min_val: int
    max_val: int
    @classmethod
    def for_width(cls, width: int, signed: bool = True) -> IntegerBounds:
        """Create bounds for a specific bit width."""
        if width not in SUPPORTED_WIDTHS:
            raise ValueError(f"unsupported bit width: {width}")
        if signed:
            return cls(width, signed, -(2 ** (width - 1)), 2 ** (width - 1) - 1)
        else:
            return cls(width, signed, 0, 2**width - 1)
    def contains(self, value: int) -> bool:
        """Check if value is within bounds."""
        return self.min_val <= value <= self.max_val
    def wrap(self, value: int) -> int:
        """Reduce value modulo 2**width into this type's range."""
        value %= 2**self.width
        if self.signed and value > self.max_val:
            value -= 2**self.width
        return value
def signed_min(width: int) -> int:
    """Two's-complement minimum for a supported width."""
    return IntegerBounds.for_width(width, signed=True).min_val
def signed_max(width: int) -> int:
    """Two's-complement maximum for a supported width."""
    return IntegerBounds.for_width(width, signed=True).max_val
class VariableType(Enum):
    """The eight fixed-width integer kinds an overflow check can target."""
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    @property
    def signed(self) -> bool:
        return self.value.startswith("i")
    @property
    def width(self) -> int:
        return int(self.value[1:])
    @property
    def bounds(self) -> IntegerBounds:
        return IntegerBounds.for_width(self.width, self.signed)
    @classmethod
    def of(cls, width: int, signed: bool) -> VariableType:
        """Look up the kind for a width and signedness."""
        prefix = "i" if signed else "u"
        try:
            return cls(f"{prefix}{width}")
        except ValueError:
            raise UnsupportedType(f"{prefix}{width}") from None
def classify(var_type: Any) -> VariableType:
    """
    Map a declared variable type to one of the supported kinds.
    Accepts a VariableType or its source-level name ("i8" ... "u64").
    Raises:
        UnsupportedType: for every other declared type
    """
    if isinstance(var_type, VariableType):
        return var_type
    if isinstance(var_type, str):
        try:
            return VariableType(var_type.strip())
        except ValueError:
            pass
    raise UnsupportedType(var_type)
class BinOp(Enum):
    """Source-level binary operators an arithmetic instruction may carry."""
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    REM = auto()
    SHL = auto()
    SHR = auto()
    BIT_OR = auto()
    BIT_AND = auto()
    BIT_XOR = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    EQ = auto()
    NE = auto()
SHIFT_OPS = frozenset({BinOp.SHL, BinOp.SHR})
BITWISE_OPS = frozenset({BinOp.BIT_OR, BinOp.BIT_AND, BinOp.BIT_XOR})
COMPARISON_OPS = frozenset({BinOp.LT, BinOp.LE, BinOp.GT, BinOp.GE, BinOp.EQ, BinOp.NE})
UNMODELED_OPS = SHIFT_OPS | BITWISE_OPS | COMPARISON_OPS
__all__ = [
    "SUPPORTED_WIDTHS",
    "IntegerBounds",
    "signed_min",
    "signed_max",
    "VariableType",
    "classify",
    "BinOp",
    "SHIFT_OPS",
    "BITWISE_OPS",
    "COMPARISON_OPS",
    "UNMODELED_OPS",
]
