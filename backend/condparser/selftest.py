"""
Built-in calibration cases.

Runs a fixed table of expressions against a resolver where only the
identifier "true" is true, and reports any result that differs from the
expected value.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO, Tuple

from .diagnostics import StreamSink
from .logic.evaluator import evaluate

CALIBRATION_CASES: List[Tuple[str, bool]] = [
    ("true", True),
    ("false", False),
    ("true && true", True),
    ("true && false", False),
    ("false || true", True),
    ("false || false", False),
    ("!true", False),
    ("!false", True),
    ("true || false && false", True),  # && binds tighter than ||
    ("true && true || false", True),
    ("false || true && false", False),
    ("!(true && false)", True),
    ("!true || false", False),  # ! binds tighter than ||
    ("!(false || true) && true", False),
    ("true && (false || true)", True),
    ("(true || false) && false", False),
    ("!(true && true) || (false && true)", False),
    ("!(false || false) && (true || false)", True),
    ("(!true || true) && (true || !false)", True),
    ("true || !(false && true)", True),
    ("(true || false) && !(true && false)", True),
    ("!(true && true) || false", False),
    ("!((true || false) && (true && true))", False),
    ("!!true", True),
    ("!((true || false) && !(false || true))", True),
    (
        "(!((true && false) || (true || false) && !(false || !true)) && "
        "(true || false && true) || (!(true && (false || !false)) || !!false))",
        False,
    ),
]


def calibration_resolver(name: str) -> bool:
    """Only the identifier "true" is true."""
    return name == "true"


def run_selftest(out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> bool:
    """
    Evaluate every calibration case.

    Args:
        out: Stream for progress lines (default stdout).
        err: Stream for diagnostics and failures (default stderr).

    Returns:
        True if every case produced its expected value.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    sink = StreamSink(err)

    success = True
    for i, (expression, expected) in enumerate(CALIBRATION_CASES):
        out.write(f"Testing: {expression}\n")
        if evaluate(expression, calibration_resolver, sink) != expected:
            err.write(f"Test {i} failed: {expression}\n")
            success = False

    out.write("All tests passed!\n" if success else "Some tests failed!\n")
    return success
