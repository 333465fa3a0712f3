"""Predefined benchmark reports.

Each report is a factory returning the validated suite; REPORTS maps the
names accepted by the command line to the factories.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Context, Decimal
from functools import partial

from bigmath import decimal_math, experimental
from bigmath.benchmark.harness import BenchmarkSuite, PrecisionSuite
from bigmath.core.errors import ValidationError
from bigmath.core.result import Result

type SuiteResult = Result[BenchmarkSuite | PrecisionSuite, ValidationError]

_POW_BASE = Decimal("123.456")


def _pow_of_base(x: Decimal, context: Context) -> Decimal:
    return decimal_math.pow(_POW_BASE, x, context)


def standard_functions() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_standard_funcs_from_0_to_2.csv",
        ("exp", "sqrt", "root2", "root3", "sin", "cos"),
        (
            decimal_math.exp,
            decimal_math.sqrt,
            partial(decimal_math.root, Decimal(2)),
            partial(decimal_math.root, Decimal(3)),
            decimal_math.sin,
            decimal_math.cos,
        ),
        Decimal("0"), Decimal("2"), Decimal("0.01"),
    )


def slow_functions() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_slow_funcs_from_0_to_2.csv",
        ("exp", "log", "log2", "log10"),
        (decimal_math.exp, decimal_math.log, decimal_math.log2, decimal_math.log10),
        Decimal("0.01"), Decimal("2"), Decimal("0.01"),
    )


def very_slow_functions() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_very_slow_funcs_from_0_to_2.csv",
        ("exp", "log", "pow"),
        (decimal_math.exp, decimal_math.log, _pow_of_base),
        Decimal("0.01"), Decimal("2"), Decimal("0.01"),
    )


def big_range() -> SuiteResult:
    """Includes x <= 0, where log has no data."""
    return BenchmarkSuite.create(
        "perf_slow_funcs_from_-10_to_10.csv",
        ("exp", "log", "pow"),
        (decimal_math.exp, decimal_math.log, _pow_of_base),
        Decimal("-10"), Decimal("10"), Decimal("0.1"),
    )


def log_big_range() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_slow_funcs_from_0_to_100.csv",
        ("exp", "log", "pow"),
        (decimal_math.exp, decimal_math.log, _pow_of_base),
        Decimal("1"), Decimal("100"), Decimal("1"),
    )


def log_optimizations() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_log_optimizations_from_0_to_10.csv",
        ("atanh", "newton", "exponent", "powtwo", "root", "twothree"),
        (
            experimental.log_area_hyperbolic_tangent,
            experimental.log_newton,
            experimental.log_using_exponent,
            experimental.log_using_power_two,
            experimental.log_using_root,
            decimal_math.log,
        ),
        Decimal("0.01"), Decimal("10"), Decimal("0.01"),
    )


def exp_optimizations() -> SuiteResult:
    return BenchmarkSuite.create(
        "perf_exp_optimizations_from_-10_to_10.csv",
        ("split", "halving"),
        (decimal_math.exp, experimental.exp_using_halving),
        Decimal("-10"), Decimal("10"), Decimal("0.1"),
    )


def over_precision() -> SuiteResult:
    return PrecisionSuite.create(
        "perf_precision_from_10_to_1000.csv",
        ("exp", "log", "pow"),
        (decimal_math.exp, decimal_math.log, _pow_of_base),
        Decimal("3.1"), 10, 1000, 10,
    )


REPORTS: dict[str, Callable[[], SuiteResult]] = {
    "standard": standard_functions,
    "slow": slow_functions,
    "very-slow": very_slow_functions,
    "big-range": big_range,
    "log-big-range": log_big_range,
    "log-optimizations": log_optimizations,
    "exp-optimizations": exp_optimizations,
    "precision": over_precision,
}

DEFAULT_REPORTS: tuple[str, ...] = ("standard", "slow", "very-slow", "big-range")
