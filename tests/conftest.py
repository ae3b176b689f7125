import io

import pytest

from wpoverflow.core.expression import Operand
from wpoverflow.core.solver import FormulaSolver
from wpoverflow.logging import LogLevel, configure_logging

SIGNED_TYPES = ["i8", "i16", "i32", "i64"]
UNSIGNED_TYPES = ["u8", "u16", "u32", "u64"]


@pytest.fixture(autouse=True)
def quiet_logger():
    """Give every test a fresh, silent logger that still records entries."""
    stream = io.StringIO()
    logger = configure_logging(level=LogLevel.QUIET, color=False, stream=stream)
    yield logger
    configure_logging()


@pytest.fixture
def left():
    return Operand("l")


@pytest.fixture
def right():
    return Operand("r")


@pytest.fixture
def solver():
    return FormulaSolver(timeout_ms=60000)
