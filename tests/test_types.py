"""
Tests for the fixed-width type classifier and integer bounds.
"""

import pytest

from wpoverflow.core.exceptions import UnsupportedType
from wpoverflow.core.types import (
    UNMODELED_OPS,
    BinOp,
    IntegerBounds,
    VariableType,
    classify,
    signed_max,
    signed_min,
)


class TestClassify:
    @pytest.mark.parametrize(
        "name,signed,width",
        [
            ("i8", True, 8),
            ("i16", True, 16),
            ("i32", True, 32),
            ("i64", True, 64),
            ("u8", False, 8),
            ("u16", False, 16),
            ("u32", False, 32),
            ("u64", False, 64),
        ],
    )
    def test_supported_names(self, name, signed, width):
        kind = classify(name)
        assert kind.signed is signed
        assert kind.width == width

    def test_enum_passes_through(self):
        assert classify(VariableType.U16) is VariableType.U16

    @pytest.mark.parametrize("name", ["isize", "usize", "i128", "u128", "f32", "f64", "bool", "*const u8", ""])
    def test_unsupported_names(self, name):
        with pytest.raises(UnsupportedType) as exc_info:
            classify(name)
        assert exc_info.value.var_type == name
        assert "hint" in str(exc_info.value)

    @pytest.mark.parametrize("value", [None, 32, object()])
    def test_non_string_rejected(self, value):
        with pytest.raises(UnsupportedType):
            classify(value)

    def test_of(self):
        assert VariableType.of(32, signed=True) is VariableType.I32
        assert VariableType.of(8, signed=False) is VariableType.U8
        with pytest.raises(UnsupportedType):
            VariableType.of(128, signed=True)


class TestBounds:
    def test_signed_extremes(self):
        assert signed_min(8) == -128
        assert signed_max(8) == 127
        assert signed_min(16) == -32768
        assert signed_min(32) == -2147483648
        assert signed_min(64) == -9223372036854775808
        assert signed_max(64) == 9223372036854775807

    def test_unsigned_bounds(self):
        bounds = VariableType.U32.bounds
        assert (bounds.min_val, bounds.max_val) == (0, 2**32 - 1)

    def test_contains(self):
        bounds = IntegerBounds.for_width(8, signed=True)
        assert bounds.contains(-128)
        assert not bounds.contains(128)

    @pytest.mark.parametrize(
        "signed,value,expected",
        [(True, 200, -56), (True, -200, 56), (True, 127, 127), (False, 260, 4), (False, -5, 251)],
    )
    def test_wrap(self, signed, value, expected):
        assert IntegerBounds.for_width(8, signed).wrap(value) == expected

    def test_unsupported_width(self):
        with pytest.raises(ValueError):
            IntegerBounds.for_width(128)


def test_unmodeled_operators():
    assert UNMODELED_OPS == {
        BinOp.SHL,
        BinOp.SHR,
        BinOp.BIT_OR,
        BinOp.BIT_AND,
        BinOp.BIT_XOR,
        BinOp.LT,
        BinOp.LE,
        BinOp.GT,
        BinOp.GE,
        BinOp.EQ,
        BinOp.NE,
    }
