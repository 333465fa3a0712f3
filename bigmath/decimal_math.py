"""Arbitrary-precision Decimal functions.

Every function takes the argument(s) and a decimal.Context and returns a
Decimal rounded to that context. Internally each function works with
_GUARD_DIGITS extra digits (more where argument reduction costs digits),
then rounds once at the end.

Functions
---------
exp, log, log2, log10      : exponential and logarithms (ValueError on x <= 0)
sqrt, root                 : square root and n-th root (Newton iteration)
pow                        : x ** y for any Decimal y
sin, cos, tan              : quadrant reduction modulo pi/2, then paired series
asin, acos, atan           : inverse trigonometric functions
sinh, cosh                 : hyperbolic functions
pi, e                      : constants, cached per precision

Series are evaluated by module-level SeriesCalculator instances so their
factor caches are shared by all callers for the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Context, Decimal
from math import isqrt
from typing import final

from bigmath.core.context import (
    BIGMATH_DECIMAL_CONTEXT,
    EXACT_CONTEXT,
    math_context,
    with_guard_digits,
)
from bigmath.series.calculator import SeriesCalculator
from bigmath.series.catalog import (
    AsinSeries,
    AtanhSeries,
    AtanSeries,
    CoshSeries,
    CosSeries,
    ExpSeries,
    SinhSeries,
    SinSeries,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal precision: compute with guard digits, then round to the context
# ---------------------------------------------------------------------------

_GUARD_DIGITS = 10

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)
_THREE = Decimal(3)
_HALF = Decimal("0.5")

_EXP_SERIES = ExpSeries()
_SIN_SERIES = SinSeries()
_COS_SERIES = CosSeries()
_SINH_SERIES = SinhSeries()
_COSH_SERIES = CoshSeries()
_ASIN_SERIES = AsinSeries()
_ATAN_SERIES = AtanSeries()
_ATANH_SERIES = AtanhSeries()

# (twos, threes): a in [1, 10) is divided by 2^twos * 3^threes
_TWO_THREE_FACTORS: tuple[tuple[int, int], ...] = (
    (0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (3, 0), (0, 2),
)


def _working(context: Context, extra_digits: int = 0) -> Context:
    return with_guard_digits(context, _GUARD_DIGITS + extra_digits)


def _at_precision(context: Context, precision: int) -> Context:
    ctx = context.copy()
    ctx.prec = precision
    return ctx


def _digits(n: int) -> int:
    return len(str(abs(n)))


def _sum_series(series: SeriesCalculator, x: Decimal, context: Context) -> Decimal:
    """Evaluate ``series`` at ``x`` with digits added for small |x|.

    The series stop at an absolute error; odd series have results of the
    magnitude of x, so small arguments need more digits to stay accurate
    relative to the result.
    """
    extra = 0 if x.is_zero() else max(0, -x.adjusted())
    return series.calculate(x, with_guard_digits(context, extra))


# ---------------------------------------------------------------------------
# Constant caches
# ---------------------------------------------------------------------------


@final
class _ConstantCache:
    """Memoized constant; recomputed only when a higher precision is asked for."""

    def __init__(self, name: str, compute: Callable[[Context], Decimal]) -> None:
        self._name = name
        self._compute = compute
        self._value: Decimal | None = None
        self._precision = 0
        self._lock = threading.Lock()

    @property
    def precision(self) -> int:
        return self._precision

    def get(self, context: Context) -> Decimal:
        with self._lock:
            if self._value is None or context.prec > self._precision:
                logger.debug("computing %s to %d digits", self._name, context.prec)
                self._value = self._compute(_working(context))
                self._precision = context.prec
            return context.plus(self._value)


def _binary_split(a: int, b: int) -> tuple[int, int, int]:
    """Chudnovsky binary splitting: P(a, b), Q(a, b), T(a, b)."""
    if b - a == 1:
        if a == 0:
            return 1, 1, 13591409
        k = a
        p = (6 * k - 5) * (2 * k - 1) * (6 * k - 1)
        # C^3 / 24 with C = 640320
        q = k * k * k * 10939058860032000
        t = (13591409 + 545140134 * k) * p
        if k % 2 == 1:
            t = -t
        return p, q, t
    m = (a + b) // 2
    p1, q1, t1 = _binary_split(a, m)
    p2, q2, t2 = _binary_split(m, b)
    return p1 * p2, q1 * q2, q2 * t1 + p1 * t2


def _compute_pi(mc: Context) -> Decimal:
    # each Chudnovsky term contributes about 14 digits
    terms = mc.prec // 14 + 2
    _p, q, t = _binary_split(0, terms)
    numerator = mc.multiply(mc.multiply(Decimal(426880), sqrt(Decimal(10005), mc)), Decimal(q))
    return mc.divide(numerator, Decimal(t))


def _compute_e(mc: Context) -> Decimal:
    return _EXP_SERIES.calculate(_ONE, mc)


def _log_atanh(y: Decimal, mc: Context) -> Decimal:
    """log(y) = 2 * atanh((y - 1) / (y + 1)); fast for y near 1."""
    u = mc.divide(mc.subtract(y, _ONE), mc.add(y, _ONE))
    return mc.multiply(_TWO, _sum_series(_ATANH_SERIES, u, mc))


def _compute_log_two(mc: Context) -> Decimal:
    # log(2) = 2 * atanh(1/3)
    return mc.multiply(_TWO, _ATANH_SERIES.calculate(mc.divide(_ONE, _THREE), mc))


def _compute_log_three(mc: Context) -> Decimal:
    # log(3) = log(2) + log(3/2) = log(2) + 2 * atanh(1/5)
    log_three_halves = mc.multiply(_TWO, _ATANH_SERIES.calculate(mc.divide(_ONE, Decimal(5)), mc))
    return mc.add(_LOG_TWO.get(mc), log_three_halves)


def _compute_log_ten(mc: Context) -> Decimal:
    # log(10) = 3 * log(2) + log(10/8) = 3 * log(2) + 2 * atanh(1/9)
    log_five_quarters = mc.multiply(_TWO, _ATANH_SERIES.calculate(mc.divide(_ONE, Decimal(9)), mc))
    return mc.add(mc.multiply(_THREE, _LOG_TWO.get(mc)), log_five_quarters)


_PI = _ConstantCache("pi", _compute_pi)
_E = _ConstantCache("e", _compute_e)
_LOG_TWO = _ConstantCache("log(2)", _compute_log_two)
_LOG_THREE = _ConstantCache("log(3)", _compute_log_three)
_LOG_TEN = _ConstantCache("log(10)", _compute_log_ten)


def pi(context: Context) -> Decimal:
    """pi to ``context.prec`` digits (Chudnovsky series, cached)."""
    return _PI.get(context)


def e(context: Context) -> Decimal:
    """Euler's number to ``context.prec`` digits (cached)."""
    return _E.get(context)


# ---------------------------------------------------------------------------
# exp
# ---------------------------------------------------------------------------


def _pow_integer(x: Decimal, n: int, mc: Context) -> Decimal:
    """x ** n for integer n >= 0 by repeated squaring, rounded by mc."""
    result = _ONE
    base = x
    while n:
        if n & 1:
            result = mc.multiply(result, base)
        n >>= 1
        if n:
            base = mc.multiply(base, base)
    return result


def exp(x: Decimal, context: Context) -> Decimal:
    """Compute e^x.

    Algorithm
    ---------
    1. Negative x: exp(x) = 1 / exp(-x).
    2. Split x = n + r with integral n and 0 <= r < 1.
    3. exp(x) = e^n * exp(r); e^n by repeated squaring of the cached e,
       exp(r) by the Taylor series, which converges quickly for r < 1.

    Overflow of the result raises decimal.Overflow.
    """
    if x.is_zero():
        return context.plus(_ONE)
    if x.is_signed():
        return context.divide(_ONE, exp(x.copy_negate(), _working(context)))

    integral = x.to_integral_value(rounding=ROUND_DOWN)
    fraction = EXACT_CONTEXT.subtract(x, integral)
    if integral.is_zero():
        return context.plus(_EXP_SERIES.calculate(fraction, _working(context)))

    n = int(integral)
    mc = _working(context, _digits(n))
    e_to_n = _pow_integer(e(mc), n, mc)
    if fraction.is_zero():
        return context.plus(e_to_n)
    return context.multiply(e_to_n, _EXP_SERIES.calculate(fraction, mc))


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------


def _two_three_reduction(a: Decimal) -> tuple[int, int]:
    """Pick 2^i * 3^j from (1, 2, 3, 4, 6, 8, 9) bringing a in [1, 10) closest to 1."""
    best = _TWO_THREE_FACTORS[0]
    best_distance: Decimal | None = None
    for twos, threes in _TWO_THREE_FACTORS:
        factor = Decimal(2**twos * 3**threes)
        # compare |a/f - 1| as |a - f| / f without rounding a
        distance = BIGMATH_DECIMAL_CONTEXT.divide(EXACT_CONTEXT.subtract(a, factor).copy_abs(), factor)
        if best_distance is None or distance < best_distance:
            best, best_distance = (twos, threes), distance
    return best


def log(x: Decimal, context: Context) -> Decimal:
    """Compute the natural logarithm of x.

    Raises
    ------
    ValueError
        If x <= 0.

    Algorithm
    ---------
    1. x in [0.5, 2]: log(x) = 2 * atanh((x - 1) / (x + 1)) directly.
    2. Otherwise write x = a * 10^b with 1 <= a < 10 and divide a by the
       best of 2, 3, 4, 6, 8, 9 so that the remainder y is close to 1.
    3. log(x) = log(y) + i*log(2) + j*log(3) + b*log(10), the logarithms
       of 2, 3 and 10 coming from the constant caches.
    """
    if x <= _ZERO:
        raise ValueError(f"log requires x > 0, got {x}")
    if x == _ONE:
        return context.plus(_ZERO)

    if _HALF <= x <= _TWO:
        return context.plus(_log_atanh(x, _working(context)))

    exponent = x.adjusted()
    mc = _working(context, _digits(exponent))
    a = x.scaleb(-exponent, EXACT_CONTEXT)
    twos, threes = _two_three_reduction(a)
    y = mc.divide(a, Decimal(2**twos * 3**threes))

    result = _log_atanh(y, mc)
    if twos:
        result = mc.add(result, mc.multiply(Decimal(twos), _LOG_TWO.get(mc)))
    if threes:
        result = mc.add(result, mc.multiply(Decimal(threes), _LOG_THREE.get(mc)))
    if exponent:
        result = mc.add(result, mc.multiply(Decimal(exponent), _LOG_TEN.get(mc)))
    return context.plus(result)


def log2(x: Decimal, context: Context) -> Decimal:
    """Logarithm of x to base 2."""
    mc = _working(context)
    return context.divide(log(x, mc), _LOG_TWO.get(mc))


def log10(x: Decimal, context: Context) -> Decimal:
    """Logarithm of x to base 10."""
    mc = _working(context)
    return context.divide(log(x, mc), _LOG_TEN.get(mc))


# ---------------------------------------------------------------------------
# sqrt, root, pow
# ---------------------------------------------------------------------------


def _sqrt_newton(x: Decimal, mc: Context) -> Decimal:
    # x = m * 10^(2k) with 1 <= m < 100; isqrt gives 16 digits to start from
    exponent = x.adjusted()
    if exponent % 2:
        exponent -= 1
    mantissa = x.scaleb(-exponent, EXACT_CONTEXT)
    approx = Decimal(isqrt(int(mantissa.scaleb(32, EXACT_CONTEXT)))).scaleb(exponent // 2 - 16, EXACT_CONTEXT)

    precision = 16
    while True:
        precision = min(2 * precision, mc.prec)
        step = _at_precision(mc, precision + 2)
        approx = step.divide(step.add(approx, step.divide(x, approx)), _TWO)
        if precision == mc.prec:
            break
    return approx


def sqrt(x: Decimal, context: Context) -> Decimal:
    """Square root by Newton iteration, doubling the precision each step.

    Raises
    ------
    ValueError
        If x < 0.
    """
    if x < _ZERO:
        raise ValueError(f"sqrt requires x >= 0, got {x}")
    if x.is_zero():
        return context.plus(_ZERO)
    return context.plus(_sqrt_newton(x, _working(context)))


def root(n: Decimal | int, x: Decimal, context: Context) -> Decimal:
    """The n-th root of x.

    Integral n uses Newton iteration y' = ((n-1) y + x / y^(n-1)) / n,
    starting from a low-precision exp(log(x) / n). Other n use
    exp(log(x) / n) at full precision.

    Raises
    ------
    ValueError
        If n <= 0 or x < 0.
    """
    n = Decimal(n)
    if n <= _ZERO:
        raise ValueError(f"root requires n > 0, got {n}")
    if x < _ZERO:
        raise ValueError(f"root requires x >= 0, got {x}")
    if x.is_zero():
        return context.plus(_ZERO)
    if n == _ONE:
        return context.plus(x)
    if n == _TWO:
        return sqrt(x, context)

    mc = _working(context)
    if n != n.to_integral_value():
        return exp(mc.divide(log(x, mc), n), context)

    k = int(n)
    start = math_context(20)
    approx = exp(start.divide(log(x, start), n), start)
    precision = 16
    while True:
        precision = min(2 * precision, mc.prec)
        step = _at_precision(mc, precision + 2)
        approx = step.divide(
            step.add(
                step.multiply(Decimal(k - 1), approx),
                step.divide(x, _pow_integer(approx, k - 1, step)),
            ),
            n,
        )
        if precision == mc.prec:
            break
    return context.plus(approx)


def pow(x: Decimal, y: Decimal, context: Context) -> Decimal:  # noqa: A001
    """x raised to the power y.

    Integral y uses repeated squaring (1 / x^|y| for negative y); any
    other y uses exp(y * log(x)).

    Raises
    ------
    ValueError
        If x < 0 and y is not integral, or x == 0 and y < 0.
    """
    if y.is_zero():
        return context.plus(_ONE)

    if y == y.to_integral_value():
        n = int(y)
        if x.is_zero():
            if n < 0:
                raise ValueError(f"pow requires y > 0 for x == 0, got {y}")
            return context.plus(_ZERO)
        mc = _working(context, _digits(n))
        result = _pow_integer(x, abs(n), mc)
        if n < 0:
            return context.divide(_ONE, result)
        return context.plus(result)

    if x < _ZERO:
        raise ValueError(f"pow requires x >= 0 for non-integral y, got x={x}, y={y}")
    if x.is_zero():
        if y < _ZERO:
            raise ValueError(f"pow requires y > 0 for x == 0, got {y}")
        return context.plus(_ZERO)

    # the absolute error of y*log(x) becomes the relative error of the result
    mc = _working(context, max(0, y.adjusted() + 1) + _digits(x.adjusted()))
    return exp(mc.multiply(y, log(x, mc)), context)


# ---------------------------------------------------------------------------
# Trigonometric functions
# ---------------------------------------------------------------------------


# |x| below this needs no reduction: it is < pi/4
_QUARTER_PI_FLOOR = Decimal("0.78")


def _reduce_half_pi(x: Decimal, context: Context) -> tuple[Decimal, int, Context]:
    """Reduce x to r in [-pi/4, pi/4] with x = r + k*pi/2.

    Returns r, k mod 4 and the working context. When x lies close to a
    multiple of pi/2 the subtraction cancels leading digits; pi is then
    recomputed with that many more digits until r carries the full
    working precision.
    """
    if x.copy_abs() < _QUARTER_PI_FLOOR:
        return x, 0, _working(context)
    extra = max(0, x.adjusted() + 1)
    cancelled = 0
    while True:
        mc = _working(context, extra + cancelled)
        half_pi = mc.divide(pi(mc), _TWO)
        k = mc.divide(x, half_pi).to_integral_value(rounding=ROUND_HALF_EVEN, context=mc)
        reduced = mc.plus(EXACT_CONTEXT.subtract(x, EXACT_CONTEXT.multiply(k, half_pi)))
        lost = mc.prec if reduced.is_zero() else max(0, -reduced.adjusted())
        if lost <= cancelled:
            return reduced, int(k) % 4, mc
        logger.debug("sin/cos reduction of %s lost %d digits, retrying", x, lost)
        cancelled = lost + 2


def _quadrant_sin(reduced: Decimal, quadrant: int, mc: Context) -> Decimal:
    """sin(reduced + quadrant*pi/2)."""
    if quadrant % 2 == 0:
        value = _sum_series(_SIN_SERIES, reduced, mc)
    else:
        value = _COS_SERIES.calculate(reduced, mc)
    return value.copy_negate() if quadrant >= 2 else value


def sin(x: Decimal, context: Context) -> Decimal:
    """Sine of x (radians)."""
    reduced, quadrant, mc = _reduce_half_pi(x, context)
    return context.plus(_quadrant_sin(reduced, quadrant, mc))


def cos(x: Decimal, context: Context) -> Decimal:
    """Cosine of x (radians), as sin(x + pi/2)."""
    reduced, quadrant, mc = _reduce_half_pi(x, context)
    return context.plus(_quadrant_sin(reduced, (quadrant + 1) % 4, mc))


def tan(x: Decimal, context: Context) -> Decimal:
    """Tangent of x (radians). DivisionByZero is not reachable for Decimal x."""
    reduced, quadrant, mc = _reduce_half_pi(x, context)
    sine = _quadrant_sin(reduced, quadrant, mc)
    cosine = _quadrant_sin(reduced, (quadrant + 1) % 4, mc)
    return context.divide(sine, cosine)


def _asin_unit(x: Decimal, mc: Context) -> Decimal:
    """asin for 0 <= x <= 1."""
    if x <= _HALF:
        return _sum_series(_ASIN_SERIES, x, mc)
    if x == _ONE:
        return mc.divide(pi(mc), _TWO)
    # asin(x) = pi/2 - 2 asin(sqrt((1 - x) / 2)), the inner argument <= 1/2
    inner = _sqrt_newton(mc.divide(mc.subtract(_ONE, x), _TWO), mc)
    return mc.subtract(mc.divide(pi(mc), _TWO), mc.multiply(_TWO, _sum_series(_ASIN_SERIES, inner, mc)))


def asin(x: Decimal, context: Context) -> Decimal:
    """Arc sine of x.

    Raises
    ------
    ValueError
        If |x| > 1.
    """
    if x.copy_abs() > _ONE:
        raise ValueError(f"asin requires -1 <= x <= 1, got {x}")
    result = _asin_unit(x.copy_abs(), _working(context))
    return context.plus(result.copy_negate() if x.is_signed() else result)


def acos(x: Decimal, context: Context) -> Decimal:
    """Arc cosine of x.

    Raises
    ------
    ValueError
        If |x| > 1.
    """
    if x.copy_abs() > _ONE:
        raise ValueError(f"acos requires -1 <= x <= 1, got {x}")
    mc = _working(context)
    if x == _ONE:
        return context.plus(_ZERO)
    if x == -_ONE:
        return pi(context)
    # acos(|x|) = 2 asin(sqrt((1 - |x|) / 2)), no cancellation near 1
    inner = _sqrt_newton(mc.divide(mc.subtract(_ONE, x.copy_abs()), _TWO), mc)
    result = mc.multiply(_TWO, _asin_unit(inner, mc))
    if x.is_signed():
        return context.subtract(pi(mc), result)
    return context.plus(result)


def atan(x: Decimal, context: Context) -> Decimal:
    """Arc tangent of x.

    |x| <= 1/2 sums the Gregory series directly, 1/2 < |x| <= 1 uses
    atan(x) = asin(x / sqrt(1 + x^2)) and larger |x| uses
    atan(x) = pi/2 - atan(1/x).
    """
    mc = _working(context, _digits(x.adjusted()))
    magnitude = x.copy_abs()
    if magnitude.is_zero():
        return context.plus(_ZERO)
    if magnitude <= _HALF:
        result = _sum_series(_ATAN_SERIES, magnitude, mc)
    elif magnitude > _ONE:
        magnitude = mc.divide(_ONE, magnitude)
        inner = mc.divide(magnitude, _sqrt_newton(mc.add(_ONE, mc.multiply(magnitude, magnitude)), mc))
        result = mc.subtract(mc.divide(pi(mc), _TWO), _asin_unit(inner, mc))
    else:
        inner = mc.divide(magnitude, _sqrt_newton(mc.add(_ONE, mc.multiply(magnitude, magnitude)), mc))
        result = _asin_unit(inner, mc)
    return context.plus(result.copy_negate() if x.is_signed() else result)


# ---------------------------------------------------------------------------
# Hyperbolic functions
# ---------------------------------------------------------------------------


def sinh(x: Decimal, context: Context) -> Decimal:
    """Hyperbolic sine: series for |x| <= 1, (e^x - e^-x) / 2 beyond."""
    mc = _working(context)
    if x.copy_abs() <= _ONE:
        return context.plus(_sum_series(_SINH_SERIES, x, mc))
    return context.divide(mc.subtract(exp(x, mc), exp(x.copy_negate(), mc)), _TWO)


def cosh(x: Decimal, context: Context) -> Decimal:
    """Hyperbolic cosine: series for |x| <= 1, (e^x + e^-x) / 2 beyond."""
    mc = _working(context)
    if x.copy_abs() <= _ONE:
        return context.plus(_COSH_SERIES.calculate(x, mc))
    return context.divide(mc.add(exp(x, mc), exp(x.copy_negate(), mc)), _TWO)
