"""bigmath.core -- public API for contexts, results and error values."""

from bigmath.core.context import (
    BIGMATH_DECIMAL_CONTEXT as BIGMATH_DECIMAL_CONTEXT,
)
from bigmath.core.context import (
    EXACT_CONTEXT as EXACT_CONTEXT,
)
from bigmath.core.context import (
    Precision as Precision,
)
from bigmath.core.context import (
    acceptable_error as acceptable_error,
)
from bigmath.core.context import (
    math_context as math_context,
)
from bigmath.core.context import (
    with_guard_digits as with_guard_digits,
)
from bigmath.core.errors import (
    ArithmeticFailure as ArithmeticFailure,
)
from bigmath.core.errors import (
    BigMathError as BigMathError,
)
from bigmath.core.errors import (
    FieldViolation as FieldViolation,
)
from bigmath.core.errors import (
    ValidationError as ValidationError,
)
from bigmath.core.result import (
    Err as Err,
)
from bigmath.core.result import (
    Ok as Ok,
)
from bigmath.core.result import (
    Result as Result,
)
from bigmath.core.result import (
    sequence as sequence,
)
