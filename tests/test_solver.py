"""
Tests for the z3 lowering and FormulaSolver.
The equivalence proofs check, for every supported width, that each
synthesized formula holds exactly when the double-width result of the
operation lies in the destination type's range.
"""

import itertools
import random

import pytest
import z3

from wpoverflow.analysis.overflow import ArithmeticInstruction, conjoin_checks, safety_formula
from wpoverflow.core.expression import (
    TRUE,
    Operand,
    add,
    ge,
    implies,
    lt,
    signed_literal,
    zero,
)
from wpoverflow.core.solver import FormulaSolver, SolverResult, Z3Lowering, to_z3
from wpoverflow.core.types import BinOp, VariableType
from tests.reference import z3_no_overflow

ALL_WIDTHS = [8, 16, 32, 64]


def bv_operands(var_type):
    left = z3.BitVec(f"l{var_type.width}", var_type.width)
    right = z3.BitVec(f"r{var_type.width}", var_type.width)
    return left, right


def assert_matches_reference(solver, var_type, op, assumption=None):
    left, right = bv_operands(var_type)
    formula = to_z3(safety_formula(var_type, op, Operand(left), Operand(right)), var_type)
    claim = formula == z3_no_overflow(var_type, op, left, right)
    if assumption is not None:
        claim = z3.Implies(assumption(left, right), claim)
    result = solver.check(z3.Not(claim))
    assert result.is_unsat, result.model


class TestEquivalenceProofs:
    @pytest.mark.parametrize("width", ALL_WIDTHS)
    @pytest.mark.parametrize("signed", [True, False])
    @pytest.mark.parametrize("op", [BinOp.ADD, BinOp.SUB])
    def test_add_sub(self, solver, width, signed, op):
        assert_matches_reference(solver, VariableType.of(width, signed), op)

    @pytest.mark.parametrize("width", [8, 16])
    @pytest.mark.parametrize("signed", [True, False])
    def test_mul(self, solver, width, signed):
        assert_matches_reference(solver, VariableType.of(width, signed), BinOp.MUL)

    @pytest.mark.parametrize("width", [8, 16])
    def test_signed_div(self, solver, width):
        assert_matches_reference(
            solver, VariableType.of(width, True), BinOp.DIV, assumption=lambda l, r: r != 0
        )


class TestLowering:
    def test_signed_comparison(self):
        lowering = Z3Lowering(VariableType.I8)
        formula = lowering.formula(lt(Operand("a"), zero(8)))
        a = lowering.symbols["a"][0]
        assert z3.is_true(z3.simplify(z3.substitute(formula, (a, z3.BitVecVal(-1, 8)))))

    def test_unsigned_comparison(self):
        lowering = Z3Lowering(VariableType.U8)
        formula = lowering.formula(ge(Operand("a"), Operand("b")))
        a, b = lowering.symbols["a"][0], lowering.symbols["b"][0]
        substituted = z3.substitute(formula, (a, z3.BitVecVal(255, 8)), (b, z3.BitVecVal(1, 8)))
        assert z3.is_true(z3.simplify(substituted))

    def test_operand_type_overrides_default(self):
        lowering = Z3Lowering(VariableType.I8)
        lowering.formula(ge(Operand("a", VariableType.U32), Operand("b", VariableType.U32)))
        assert lowering.symbols["a"][0].size() == 32
        assert lowering.symbols["a"][1] is VariableType.U32

    def test_integer_and_z3_operands(self):
        x = z3.BitVec("x", 16)
        formula = to_z3(ge(Operand(x), Operand(-1)), VariableType.I16)
        assert z3.is_true(z3.simplify(z3.substitute(formula, (x, z3.BitVecVal(0, 16)))))

    def test_missing_type_rejected(self):
        with pytest.raises(ValueError):
            to_z3(ge(Operand("a"), Operand("b")))

    def test_name_reused_at_another_width_rejected(self):
        wp = conjoin_checks(
            TRUE,
            [
                ArithmeticInstruction(
                    "i8", BinOp.ADD, Operand("t", VariableType.I8), Operand("u", VariableType.I8)
                ),
                ArithmeticInstruction(
                    "i32", BinOp.ADD, Operand("t", VariableType.I32), Operand("v", VariableType.I32)
                ),
            ],
        )
        with pytest.raises(ValueError, match="'t' is used as both i8 and i32"):
            FormulaSolver().is_valid(wp)

    def test_name_reused_with_other_signedness_rejected(self):
        formula = ge(Operand("t", VariableType.I16), Operand("t", VariableType.U16))
        with pytest.raises(ValueError, match="both i16 and u16"):
            FormulaSolver().counterexample(formula)

    def test_name_reused_with_default_type_accepted(self):
        formula = ge(Operand("t", VariableType.I8), Operand("t"))
        assert FormulaSolver().is_valid(formula, VariableType.I8)

    def test_term_is_not_a_formula(self):
        with pytest.raises(ValueError):
            to_z3(add(Operand("a"), Operand("b")), VariableType.I8)

    def test_literal_width(self):
        lowering = Z3Lowering()
        term, var_type = lowering.term(signed_literal(64, -1))
        assert term.size() == 64
        assert var_type is VariableType.I64


class TestFormulaSolver:
    def test_validity(self, solver):
        a = Operand("a")
        assert solver.is_valid(implies(ge(a, zero(8)), ge(a, signed_literal(8, -1))), VariableType.I8)
        assert not solver.is_valid(ge(a, zero(8)), VariableType.I8)
        assert solver.is_satisfiable(ge(a, zero(8)), VariableType.I8)
        assert solver.query_count == 3

    def test_counterexample_is_real_overflow(self, solver):
        formula = safety_formula("i8", BinOp.ADD, Operand("l"), Operand("r"))
        values = solver.counterexample(formula, VariableType.I8)
        assert values is not None
        assert not -128 <= values["l"] + values["r"] <= 127

    def test_counterexample_unsigned_interpretation(self, solver):
        formula = safety_formula("u16", BinOp.SUB, Operand("l"), Operand("r"))
        values = solver.counterexample(formula, VariableType.U16)
        assert values["l"] >= 0 and values["r"] > values["l"]

    def test_no_counterexample_for_valid_formula(self, solver):
        assert solver.counterexample(TRUE, VariableType.I8) is None

    def test_result_constructors(self):
        assert SolverResult.unsat().is_unsat
        assert SolverResult.unknown().is_unknown
        assert not SolverResult.unknown().is_sat


class TestConjunctionOrder:
    def test_permuted_folds_are_equivalent(self, solver):
        a = Operand("a", VariableType.I32)
        b = Operand("b", VariableType.I32)
        c = Operand("c", VariableType.U16)
        d = Operand("d", VariableType.U16)
        instructions = [
            ArithmeticInstruction("i32", BinOp.ADD, a, b),
            ArithmeticInstruction("i32", BinOp.SUB, b, a),
            ArithmeticInstruction("i32", BinOp.DIV, a, b),
            ArithmeticInstruction("u16", BinOp.ADD, c, d),
            ArithmeticInstruction("u16", BinOp.MUL, c, d),
        ]
        baseline = conjoin_checks(TRUE, instructions)
        rng = random.Random(7)
        orders = [list(reversed(instructions))]
        for _ in range(4):
            shuffled = list(instructions)
            rng.shuffle(shuffled)
            orders.append(shuffled)
        for order in orders:
            assert solver.equivalent(baseline, conjoin_checks(TRUE, order))

    def test_mixed_types_evaluate_consistently(self, solver):
        a = Operand("a", VariableType.I8)
        c = Operand("c", VariableType.U8)
        checks = [
            ArithmeticInstruction("i8", BinOp.ADD, a, a),
            ArithmeticInstruction("u8", BinOp.SUB, c, c),
        ]
        for first, second in itertools.permutations(checks):
            combined = conjoin_checks(TRUE, [first, second])
            # a + a overflows for a = 64, so the conjunction is not valid
            assert not solver.is_valid(combined)
