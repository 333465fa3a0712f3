"""bigmath.benchmark -- timing harness and predefined reports."""

from bigmath.benchmark.config import (
    BenchmarkConfig as BenchmarkConfig,
)
from bigmath.benchmark.harness import (
    BenchmarkSuite as BenchmarkSuite,
)
from bigmath.benchmark.harness import (
    PrecisionSuite as PrecisionSuite,
)
from bigmath.benchmark.harness import (
    measure as measure,
)
from bigmath.benchmark.harness import (
    run_precision_suite as run_precision_suite,
)
from bigmath.benchmark.harness import (
    run_suite as run_suite,
)
from bigmath.benchmark.harness import (
    write_report as write_report,
)
