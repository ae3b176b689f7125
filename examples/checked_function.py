"""
Overflow obligations for a small function, discharged with z3.
The instructions below mirror what a weakest-precondition engine would hand
to wpoverflow while walking this function backwards:
    fn scale(a: i32, b: i32, n: u8, m: u8) -> (i32, u8) {
        let s = a + b;
        let q = s / b;
        let k = n * m;
        (q, k)
    }
"""

from wpoverflow import (
    TRUE,
    ArithmeticInstruction,
    BinOp,
    Operand,
    VariableType,
    conjoin_checks,
    load_config,
)
from wpoverflow.core.expression import add, conjoin, ge, implies, le, lt, signed_literal


def main() -> None:
    config = load_config()
    logger = config.configure()
    solver = config.make_solver()
    a = Operand("a", VariableType.I32)
    b = Operand("b", VariableType.I32)
    n = Operand("n", VariableType.U8)
    m = Operand("m", VariableType.U8)
    fifteen = Operand(15, VariableType.U8)
    instructions = [
        ArithmeticInstruction("u8", BinOp.MUL, n, m, location="k = n * m"),
        ArithmeticInstruction("i32", BinOp.DIV, add(a, b), b, location="q = s / b"),
        ArithmeticInstruction("i32", BinOp.ADD, a, b, location="s = a + b"),
    ]
    wp = conjoin_checks(TRUE, instructions, config.encoding_options())
    logger.info(f"weakest precondition: {wp}")
    logger.info(f"counterexample without a guard: {solver.counterexample(wp)}")
    guard = conjoin(
        ge(a, signed_literal(32, 0)),
        lt(a, signed_literal(32, 1000)),
        ge(b, signed_literal(32, 1)),
        lt(b, signed_literal(32, 1000)),
        le(n, fifteen),
        le(m, fifteen),
    )
    guarded = implies(guard, wp)
    if solver.is_valid(guarded):
        logger.info("with the guard in place the function cannot overflow")
    else:
        logger.info(f"still unsafe: {solver.counterexample(guarded)}")


if __name__ == "__main__":
    main()
