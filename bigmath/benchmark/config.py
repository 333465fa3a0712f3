"""Benchmark configuration.

Pure configuration data; the harness reads it, nothing here runs code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Context
from pathlib import Path
from typing import final

from bigmath.core.context import Precision

DEFAULT_OUTPUT_DIRECTORY = Path("docu/benchmarks")
DEFAULT_REFERENCE_PRECISION = 300
DEFAULT_REPEATS = 10
# same digit count as IEEE 754 decimal32
DEFAULT_WARMUP_PRECISION = 7
FIELD_WIDTH = 8


@final
@dataclass(frozen=True, slots=True)
class BenchmarkConfig:
    """Settings shared by every report of one benchmark run."""

    output_directory: Path = field(default=DEFAULT_OUTPUT_DIRECTORY)
    reference_precision: int = DEFAULT_REFERENCE_PRECISION
    repeats: int = DEFAULT_REPEATS
    warmup_precision: int = DEFAULT_WARMUP_PRECISION
    field_width: int = FIELD_WIDTH

    def __post_init__(self) -> None:
        if self.reference_precision < 1:
            raise TypeError(f"reference_precision must be >= 1, got {self.reference_precision}")
        if self.repeats < 1:
            raise TypeError(f"repeats must be >= 1, got {self.repeats}")
        if self.warmup_precision < 1:
            raise TypeError(f"warmup_precision must be >= 1, got {self.warmup_precision}")

    @property
    def reference_context(self) -> Context:
        return Precision(self.reference_precision).to_context()

    @property
    def warmup_context(self) -> Context:
        return Precision(self.warmup_precision).to_context()
