"""Benchmark harness: time competing Decimal functions and write CSV reports.

A suite is validated once (BenchmarkSuite.create / PrecisionSuite.create)
and then run against a writer. Each function is called as f(x, context);
an ArithmeticError or ValueError for one input becomes an Err value and an
empty cell in the report, never an aborted run.

Report layout (fixed 8-character fields, comma separated):

           x,     exp,     log
      number,  number,  number
       0.010,   12345,
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from decimal import Context, Decimal
from pathlib import Path
from typing import TextIO, final

from bigmath.benchmark.config import BenchmarkConfig
from bigmath.core.context import EXACT_CONTEXT, math_context
from bigmath.core.errors import ArithmeticFailure, FieldViolation, ValidationError
from bigmath.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

type Calculation = Callable[[Decimal, Context], Decimal]
type Measurement = Result[int, ArithmeticFailure]


def _common_violations(
    function_names: Sequence[str], calculations: Sequence[Calculation],
) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    if len(function_names) != len(calculations):
        violations.append(FieldViolation(
            path="suite.function_names",
            constraint="must have the same length as calculations",
            actual_value=f"{len(function_names)} != {len(calculations)}",
        ))
    if not calculations:
        violations.append(FieldViolation(
            path="suite.calculations",
            constraint="must not be empty",
            actual_value="0",
        ))
    return violations


def _invalid_suite(name: str, violations: list[FieldViolation], source: str) -> Err[ValidationError]:
    return Err(ValidationError(
        message=f"Invalid benchmark suite {name!r}",
        code="INVALID_SUITE",
        source=source,
        fields=tuple(violations),
    ))


@final
@dataclass(frozen=True, slots=True)
class BenchmarkSuite:
    """Functions timed over x_start, x_start + x_step, ..., x_end."""

    name: str
    function_names: tuple[str, ...]
    calculations: tuple[Calculation, ...]
    x_start: Decimal
    x_end: Decimal
    x_step: Decimal

    @staticmethod
    def create(
        name: str,
        function_names: Sequence[str],
        calculations: Sequence[Calculation],
        x_start: Decimal,
        x_end: Decimal,
        x_step: Decimal,
    ) -> Ok[BenchmarkSuite] | Err[ValidationError]:
        violations = _common_violations(function_names, calculations)
        if x_step <= 0:
            violations.append(FieldViolation(
                path="suite.x_step", constraint="must be positive", actual_value=str(x_step),
            ))
        if x_end < x_start:
            violations.append(FieldViolation(
                path="suite.x_end", constraint="must be >= x_start",
                actual_value=f"{x_end} < {x_start}",
            ))
        if violations:
            return _invalid_suite(name, violations, "benchmark.harness.BenchmarkSuite.create")
        return Ok(BenchmarkSuite(
            name=name,
            function_names=tuple(function_names),
            calculations=tuple(calculations),
            x_start=x_start,
            x_end=x_end,
            x_step=x_step,
        ))

    def x_values(self) -> Iterator[Decimal]:
        x = self.x_start
        while x <= self.x_end:
            yield x
            x = EXACT_CONTEXT.add(x, self.x_step)


@final
@dataclass(frozen=True, slots=True)
class PrecisionSuite:
    """Functions timed at one x over a range of precisions."""

    name: str
    function_names: tuple[str, ...]
    calculations: tuple[Calculation, ...]
    x: Decimal
    precision_start: int
    precision_end: int
    precision_step: int

    @staticmethod
    def create(
        name: str,
        function_names: Sequence[str],
        calculations: Sequence[Calculation],
        x: Decimal,
        precision_start: int,
        precision_end: int,
        precision_step: int,
    ) -> Ok[PrecisionSuite] | Err[ValidationError]:
        violations = _common_violations(function_names, calculations)
        if precision_start < 1:
            violations.append(FieldViolation(
                path="suite.precision_start", constraint="must be >= 1",
                actual_value=str(precision_start),
            ))
        if precision_step < 1:
            violations.append(FieldViolation(
                path="suite.precision_step", constraint="must be >= 1",
                actual_value=str(precision_step),
            ))
        if precision_end < precision_start:
            violations.append(FieldViolation(
                path="suite.precision_end", constraint="must be >= precision_start",
                actual_value=f"{precision_end} < {precision_start}",
            ))
        if violations:
            return _invalid_suite(name, violations, "benchmark.harness.PrecisionSuite.create")
        return Ok(PrecisionSuite(
            name=name,
            function_names=tuple(function_names),
            calculations=tuple(calculations),
            x=x,
            precision_start=precision_start,
            precision_end=precision_end,
            precision_step=precision_step,
        ))

    def precisions(self) -> range:
        return range(self.precision_start, self.precision_end + 1, self.precision_step)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------


def median(values: Sequence[int]) -> int:
    """Median of the values; the mean of the two middle values for even counts."""
    if not values:
        raise ValueError("median requires at least one value")
    ordered = sorted(values)
    half = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[half - 1] + ordered[half]) // 2
    return ordered[half]


def measure(
    function_name: str,
    calculation: Calculation,
    x: Decimal,
    context: Context,
    repeats: int,
) -> Measurement:
    """Median elapsed nanoseconds of ``repeats`` calls, or the failure of the first call."""
    nanos: list[int] = []
    for _ in range(repeats):
        start = time.perf_counter_ns()
        try:
            calculation(x, context)
        except (ArithmeticError, ValueError) as exc:
            logger.debug("%s(%s) at precision %d failed: %s", function_name, x, context.prec, exc)
            return Err(ArithmeticFailure.from_exception(
                function_name, x, context.prec, exc, source="benchmark.harness.measure",
            ))
        nanos.append(time.perf_counter_ns() - start)
    return Ok(median(nanos))


def warm_up(
    function_names: Sequence[str],
    calculations: Sequence[Calculation],
    x_values: Sequence[Decimal],
    context: Context,
) -> int:
    """Call every function once per x at low precision; returns the number of failures."""
    failures = 0
    for x in x_values:
        for name, calculation in zip(function_names, calculations, strict=True):
            try:
                calculation(x, context)
            except (ArithmeticError, ValueError) as exc:
                logger.debug("warm-up %s(%s) failed: %s", name, x, exc)
                failures += 1
    return failures


# ---------------------------------------------------------------------------
# Report writing
# ---------------------------------------------------------------------------


def _row(cells: Sequence[str]) -> str:
    return ",".join(cells) + "\n"


def _write_headers(writer: TextIO, first: str, function_names: Sequence[str], width: int) -> None:
    writer.write(_row([f"{first:>{width}}", *(f"{name:>{width}}" for name in function_names)]))
    writer.write(_row([f"{'number':>{width}}" for _ in range(len(function_names) + 1)]))


def format_cell(measurement: Measurement, width: int) -> str:
    """Right-aligned nanoseconds, or blanks for a point with no data."""
    return measurement.map(lambda nanos: f"{nanos:{width}d}").unwrap_or(" " * width)


def _measure_row(
    function_names: Sequence[str],
    calculations: Sequence[Calculation],
    x: Decimal,
    context: Context,
    repeats: int,
) -> list[Measurement]:
    return [
        measure(name, calculation, x, context, repeats)
        for name, calculation in zip(function_names, calculations, strict=True)
    ]


def run_suite(
    suite: BenchmarkSuite, writer: TextIO, config: BenchmarkConfig,
) -> tuple[ArithmeticFailure, ...]:
    """Warm up, then write one row of median timings per x. Returns the failures."""
    x_values = list(suite.x_values())
    warm_up(suite.function_names, suite.calculations, x_values, config.warmup_context)

    width = config.field_width
    context = config.reference_context
    failures: list[ArithmeticFailure] = []
    _write_headers(writer, "x", suite.function_names, width)
    for x in x_values:
        row = _measure_row(suite.function_names, suite.calculations, x, context, config.repeats)
        failures.extend(m.error for m in row if isinstance(m, Err))
        writer.write(_row([f"{x:{width}.3f}", *(format_cell(m, width) for m in row)]))
    return tuple(failures)


def run_precision_suite(
    suite: PrecisionSuite, writer: TextIO, config: BenchmarkConfig,
) -> tuple[ArithmeticFailure, ...]:
    """Warm up, then write one row of median timings per precision. Returns the failures."""
    warm_up(suite.function_names, suite.calculations, [suite.x], config.warmup_context)

    width = config.field_width
    failures: list[ArithmeticFailure] = []
    _write_headers(writer, "precision", suite.function_names, width)
    for precision in suite.precisions():
        context = math_context(precision)
        row = _measure_row(suite.function_names, suite.calculations, suite.x, context, config.repeats)
        failures.extend(m.error for m in row if isinstance(m, Err))
        writer.write(_row([f"{precision:{width}d}", *(format_cell(m, width) for m in row)]))
    return tuple(failures)


def write_report(suite: BenchmarkSuite | PrecisionSuite, config: BenchmarkConfig) -> Path:
    """Run ``suite`` into <output_directory>/<suite.name> and return the path."""
    config.output_directory.mkdir(parents=True, exist_ok=True)
    path = config.output_directory / suite.name
    logger.info("Writing %s", path)
    with path.open("w", encoding="utf-8", newline="") as writer:
        match suite:
            case BenchmarkSuite():
                failures = run_suite(suite, writer, config)
            case PrecisionSuite():
                failures = run_precision_suite(suite, writer, config)
    logger.info("Finished %s (%d points without data)", path, len(failures))
    return path
