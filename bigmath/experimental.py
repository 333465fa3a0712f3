"""Competing implementations compared by the benchmark reports.

These give the same results as bigmath.decimal_math (to the requested
precision) but use different argument reductions, so their running times
differ across input ranges:

log_area_hyperbolic_tangent : 2 * atanh((x-1)/(x+1)) with no reduction
log_newton                  : Newton iteration on exp(y) = x
log_using_exponent          : x = a * 10^b, then the atanh series on a
log_using_power_two         : x = a * 10^b, a divided by powers of 2
log_using_root              : log(x) = r * log(root(r, x))
exp_using_halving           : exp(x) = exp(x / 2^k)^(2^k)

They keep their own series instances, so their factor caches are separate
from the ones used by bigmath.decimal_math.
"""

from __future__ import annotations

from decimal import Context, Decimal

from bigmath import decimal_math
from bigmath.core.context import EXACT_CONTEXT, math_context, with_guard_digits
from bigmath.series.catalog import AtanhSeries, ExpSeries

_GUARD_DIGITS = 10

_ZERO = Decimal(0)
_ONE = Decimal(1)
_TWO = Decimal(2)
_TEN = Decimal(10)
_HALF = Decimal("0.5")

_ATANH_SERIES = AtanhSeries()
_EXP_SERIES = ExpSeries()


def _check_positive(x: Decimal, name: str) -> None:
    if x <= _ZERO:
        raise ValueError(f"{name} requires x > 0, got {x}")


def _near_one_digits(x: Decimal) -> int:
    """Leading digits that cancel when log(x) is assembled from larger parts."""
    if not _HALF < x < _TWO:
        return 0
    distance = EXACT_CONTEXT.subtract(x, _ONE)
    return 0 if distance.is_zero() else max(0, -distance.adjusted())


def _atanh_log(y: Decimal, mc: Context) -> Decimal:
    u = mc.divide(mc.subtract(y, _ONE), mc.add(y, _ONE))
    extra = 0 if u.is_zero() else max(0, -u.adjusted())
    return mc.multiply(_TWO, _ATANH_SERIES.calculate(u, with_guard_digits(mc, extra)))


def log_area_hyperbolic_tangent(x: Decimal, context: Context) -> Decimal:
    """log(x) = 2 * atanh((x - 1) / (x + 1)); slow far from 1."""
    _check_positive(x, "log_area_hyperbolic_tangent")
    return context.plus(_atanh_log(x, with_guard_digits(context, _GUARD_DIGITS)))


def log_newton(x: Decimal, context: Context) -> Decimal:
    """Newton iteration y' = y - 1 + x / exp(y), doubling precision each step."""
    _check_positive(x, "log_newton")
    mc = with_guard_digits(context, _GUARD_DIGITS + _near_one_digits(x))
    y = decimal_math.log(x, math_context(16))
    precision = 16
    while True:
        precision = min(2 * precision, mc.prec)
        step = math_context(precision + 2)
        y = step.add(step.subtract(y, _ONE), step.divide(x, decimal_math.exp(y, step)))
        if precision == mc.prec:
            break
    return context.plus(y)


def log_using_exponent(x: Decimal, context: Context) -> Decimal:
    """x = a * 10^b with 1 <= a < 10: log(x) = log(a) + b * log(10)."""
    _check_positive(x, "log_using_exponent")
    exponent = x.adjusted()
    mc = with_guard_digits(context, _GUARD_DIGITS + len(str(abs(exponent))) + _near_one_digits(x))
    a = x.scaleb(-exponent, EXACT_CONTEXT)
    result = _atanh_log(a, mc)
    if exponent:
        result = mc.add(result, mc.multiply(Decimal(exponent), decimal_math.log(_TEN, mc)))
    return context.plus(result)


def log_using_power_two(x: Decimal, context: Context) -> Decimal:
    """Like log_using_exponent, with a further divided by 2, 4 or 8."""
    _check_positive(x, "log_using_power_two")
    exponent = x.adjusted()
    mc = with_guard_digits(context, _GUARD_DIGITS + len(str(abs(exponent))) + _near_one_digits(x))
    a = x.scaleb(-exponent, EXACT_CONTEXT)
    twos = 0
    while a > Decimal("1.5"):
        a = mc.divide(a, _TWO)
        twos += 1
    result = _atanh_log(a, mc)
    if twos:
        result = mc.add(result, mc.multiply(Decimal(twos), decimal_math.log(_TWO, mc)))
    if exponent:
        result = mc.add(result, mc.multiply(Decimal(exponent), decimal_math.log(_TEN, mc)))
    return context.plus(result)


def log_using_root(x: Decimal, context: Context) -> Decimal:
    """log(x) = r * log(root(r, x)); r grows with the distance of x from 1."""
    _check_positive(x, "log_using_root")
    if x == _ONE:
        return context.plus(_ZERO)
    r = 2 * (abs(x.adjusted()) + 1)
    mc = with_guard_digits(context, _GUARD_DIGITS + len(str(r)) + _near_one_digits(x))
    reduced = decimal_math.root(r, x, mc)
    return context.multiply(Decimal(r), _atanh_log(reduced, mc))


def exp_using_halving(x: Decimal, context: Context) -> Decimal:
    """exp(x) = exp(x / 2^k)^(2^k) with |x / 2^k| < 1/2."""
    if x.is_zero():
        return context.plus(_ONE)
    k = 0
    magnitude = x.copy_abs()
    while magnitude >= _HALF:
        magnitude = EXACT_CONTEXT.multiply(magnitude, _HALF)
        k += 1
    mc = with_guard_digits(context, _GUARD_DIGITS + k)
    reduced = x
    for _ in range(k):
        reduced = EXACT_CONTEXT.multiply(reduced, _HALF)
    result = _EXP_SERIES.calculate(reduced, mc)
    for _ in range(k):
        result = mc.multiply(result, result)
    return context.plus(result)
