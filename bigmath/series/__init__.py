"""bigmath.series -- the power series summation engine and its series."""

from bigmath.series.calculator import (
    SeriesCalculator as SeriesCalculator,
)
from bigmath.series.catalog import (
    AsinSeries as AsinSeries,
)
from bigmath.series.catalog import (
    AtanhSeries as AtanhSeries,
)
from bigmath.series.catalog import (
    AtanSeries as AtanSeries,
)
from bigmath.series.catalog import (
    CoshSeries as CoshSeries,
)
from bigmath.series.catalog import (
    CosSeries as CosSeries,
)
from bigmath.series.catalog import (
    ExpSeries as ExpSeries,
)
from bigmath.series.catalog import (
    SinhSeries as SinhSeries,
)
from bigmath.series.catalog import (
    SinSeries as SinSeries,
)
from bigmath.series.power import (
    PowerIterator as PowerIterator,
)
from bigmath.series.power import (
    PowerNIterator as PowerNIterator,
)
from bigmath.series.power import (
    PowerTwoNIterator as PowerTwoNIterator,
)
from bigmath.series.power import (
    PowerTwoNPlusOneIterator as PowerTwoNPlusOneIterator,
)
