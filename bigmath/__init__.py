"""bigmath -- arbitrary-precision Decimal functions built on cached power series."""

from bigmath.core.context import (
    Precision as Precision,
)
from bigmath.core.context import (
    math_context as math_context,
)
from bigmath.series.calculator import (
    SeriesCalculator as SeriesCalculator,
)

__version__ = "0.1.0"
