"""Tests for bigmath.decimal_math -- Decimal functions at arbitrary precision."""

from __future__ import annotations

from decimal import Context, Decimal, Overflow, localcontext

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bigmath import decimal_math
from bigmath.core.context import math_context

# ---------------------------------------------------------------------------
# Reference constants (computed to > 90 significant digits)
# ---------------------------------------------------------------------------

_PI = Decimal(
    "3.14159265358979323846264338327950288419716939937510"
    "58209749445923078164062862089986280348253421170679"
)
_E = Decimal(
    "2.71828182845904523536028747135266249775724709369995"
    "95749669676277240766303535475945713821785251664274"
)
_LN2 = Decimal(
    "0.69314718055994530941723212145817656807550013436025"
    "52541206800094933936219696947156058633269964186875"
)
_LN3 = Decimal("1.098612288668109691395245236922525704647490557822749451734694333637494293218608966873615754813732088787970")
_LN10 = Decimal(
    "2.30258509299404568401799145468436420760110148862877"
    "29760333279009675726096773524802359972050895982983"
)
_SQRT2 = Decimal("1.41421356237309504880168872420969807856967187537694807317667973799073247846210703885038753432764157")
_CBRT2 = Decimal("1.259921049894873164767210607278228350570251464701507980081975112155299676513959483729396562436255094")
_INV_E = Decimal("0.367879441171442321595523770161460867445811131031767834507836801697461495744899803357147274345919643746627")
_LOG10_2 = Decimal("0.30102999566398119521373889472449302676818988146210854131")
_SIN_1 = Decimal("0.841470984807896506652502321630298999622563060798371065672751709991910404391239668948639743543052695")
_COS_1 = Decimal("0.540302305868139717400936607442976603732310420617922227670097255381100394774471764517951856087183089")
_SINH_1 = Decimal("1.175201193643801456882381850595600815155717981334095870229565413013307567304323895607117452089623393")
_COSH_1 = Decimal("1.543080634815243778477905620757061682601529112365863704737402214710769063049223698964264726435543035")


def _ulp(value: Decimal, precision: int) -> Decimal:
    """One unit in the last place of ``value`` at ``precision`` digits."""
    return Decimal(1).scaleb(value.adjusted() - precision + 1)


def _assert_close(result: Decimal, expected: Decimal, precision: int, ulps: int = 1) -> None:
    with localcontext() as ctx:
        ctx.prec = 200
        diff = abs(result - expected)
        assert diff <= ulps * _ulp(expected, precision), f"{result} differs from {expected} by {diff}"


def _exact(expression):  # noqa: ANN001, ANN202
    """Evaluate a reference expression at 200 digits."""
    with localcontext() as ctx:
        ctx.prec = 200
        return expression()


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


class TestConstants:
    def test_pi_to_ninety_digits(self) -> None:
        _assert_close(decimal_math.pi(math_context(90)), _PI, 90)

    def test_e_to_ninety_digits(self) -> None:
        _assert_close(decimal_math.e(math_context(90)), _E, 90)

    def test_pi_twenty_digits_correctly_rounded(self) -> None:
        assert decimal_math.pi(math_context(20)) == Decimal("3.1415926535897932385")

    def test_lower_precision_served_from_cache(self) -> None:
        decimal_math.pi(math_context(80))
        cached = decimal_math._PI.precision
        assert decimal_math.pi(math_context(15)) == Decimal("3.14159265358979")
        assert decimal_math._PI.precision == cached

    def test_higher_precision_recomputes(self) -> None:
        decimal_math.e(math_context(10))
        result = decimal_math.e(math_context(85))
        assert decimal_math._E.precision >= 85
        _assert_close(result, _E, 85)


# ---------------------------------------------------------------------------
# exp and log
# ---------------------------------------------------------------------------


class TestExp:
    def test_zero(self) -> None:
        assert decimal_math.exp(Decimal(0), math_context(30)) == Decimal(1)

    def test_one(self) -> None:
        _assert_close(decimal_math.exp(Decimal(1), math_context(50)), _E, 50)

    def test_minus_one(self) -> None:
        _assert_close(decimal_math.exp(Decimal(-1), math_context(50)), _INV_E, 50)

    def test_integral_and_fraction(self) -> None:
        expected = _exact(lambda: _E * _E * _E)
        _assert_close(decimal_math.exp(Decimal(3), math_context(50)), expected, 50)

    def test_large_argument(self) -> None:
        # e^50 = 5184705528587072464087.45332293348538...
        result = decimal_math.exp(Decimal(50), math_context(30))
        _assert_close(result, Decimal("5184705528587072464087.45332293348538"), 30)

    def test_small_argument(self) -> None:
        result = decimal_math.exp(Decimal("1e-10"), math_context(28))
        _assert_close(result, Decimal("1.000000000100000000005000000000166667"), 28)

    def test_overflow_raises(self) -> None:
        with pytest.raises(Overflow):
            decimal_math.exp(Decimal("1E+7"), math_context(20))

    def test_precision_of_result(self) -> None:
        result = decimal_math.exp(Decimal("0.5"), math_context(64))
        assert len(result.as_tuple().digits) == 64


class TestLog:
    def test_one_is_zero(self) -> None:
        assert decimal_math.log(Decimal(1), math_context(30)) == 0

    def test_two(self) -> None:
        _assert_close(decimal_math.log(Decimal(2), math_context(50)), _LN2, 50)

    def test_three(self) -> None:
        _assert_close(decimal_math.log(Decimal(3), math_context(50)), _LN3, 50)

    def test_ten(self) -> None:
        _assert_close(decimal_math.log(Decimal(10), math_context(50)), _LN10, 50)

    def test_large_power_of_ten(self) -> None:
        expected = _exact(lambda: _LN10 * 30)
        _assert_close(decimal_math.log(Decimal("1E+30"), math_context(50)), expected, 50)

    def test_small_argument(self) -> None:
        expected = _exact(lambda: -(_LN2 + 3 * _LN10))
        _assert_close(decimal_math.log(Decimal("0.0005"), math_context(50)), expected, 50)

    def test_reduction_by_two_and_three(self) -> None:
        # 7.2 = 2^3 * 3^2 / 10
        expected = _exact(lambda: 3 * _LN2 + 2 * _LN3 - _LN10)
        _assert_close(decimal_math.log(Decimal("7.2"), math_context(50)), expected, 50)

    @pytest.mark.parametrize("x", ["0", "-1", "-0.001"])
    def test_non_positive_raises(self, x: str) -> None:
        with pytest.raises(ValueError, match="log requires x > 0"):
            decimal_math.log(Decimal(x), math_context(20))

    def test_log2(self) -> None:
        assert decimal_math.log2(Decimal(1024), math_context(30)) == 10

    def test_log10(self) -> None:
        _assert_close(decimal_math.log10(Decimal(2), math_context(50)), _LOG10_2, 50)

    def test_log10_of_power_of_ten(self) -> None:
        assert decimal_math.log10(Decimal("1E+5"), math_context(30)) == 5


@given(
    x=st.decimals(min_value=Decimal("-20"), max_value=Decimal("20"), places=3, allow_nan=False, allow_infinity=False),
)
@settings(max_examples=30)
def test_log_inverts_exp(x: Decimal) -> None:
    mc = math_context(30)
    result = decimal_math.log(decimal_math.exp(x, mc), mc)
    with localcontext() as ctx:
        ctx.prec = 100
        assert abs(result - x) <= Decimal("1E-27") * max(abs(x), Decimal(1))


# ---------------------------------------------------------------------------
# sqrt, root, pow
# ---------------------------------------------------------------------------


class TestSqrt:
    def test_two(self) -> None:
        _assert_close(decimal_math.sqrt(Decimal(2), math_context(80)), _SQRT2, 80)

    def test_perfect_square(self) -> None:
        assert decimal_math.sqrt(Decimal(144), math_context(20)) == 12

    def test_zero(self) -> None:
        assert decimal_math.sqrt(Decimal(0), math_context(20)) == 0

    def test_small_and_large(self) -> None:
        assert decimal_math.sqrt(Decimal("1E-20"), math_context(20)) == Decimal("1E-10")
        assert decimal_math.sqrt(Decimal("4E+30"), math_context(20)) == Decimal("2E+15")

    def test_odd_exponent(self) -> None:
        expected = _exact(lambda: _SQRT2 * 10)
        _assert_close(decimal_math.sqrt(Decimal(200), math_context(50)), expected, 50)

    def test_negative_raises(self) -> None:
        with pytest.raises(ValueError, match="sqrt requires x >= 0"):
            decimal_math.sqrt(Decimal(-4), math_context(20))


@given(
    x=st.decimals(min_value=Decimal("0.0001"), max_value=Decimal("1E+12"), places=4, allow_nan=False, allow_infinity=False),
)
@settings(max_examples=30)
def test_sqrt_squared_is_x(x: Decimal) -> None:
    if x.is_zero():
        return
    result = decimal_math.sqrt(x, math_context(40))
    with localcontext() as ctx:
        ctx.prec = 100
        assert abs(result * result - x) / x <= Decimal("1E-38")


class TestRoot:
    def test_cube_root_of_two(self) -> None:
        _assert_close(decimal_math.root(Decimal(3), Decimal(2), math_context(60)), _CBRT2, 60)

    def test_exact_root(self) -> None:
        assert decimal_math.root(5, Decimal(32), math_context(20)) == 2

    def test_square_root_delegates(self) -> None:
        _assert_close(decimal_math.root(Decimal(2), Decimal(2), math_context(50)), _SQRT2, 50)

    def test_first_root_is_identity(self) -> None:
        assert decimal_math.root(1, Decimal("7.25"), math_context(20)) == Decimal("7.25")

    def test_non_integral_n(self) -> None:
        # x^(1/0.5) = x^2
        assert decimal_math.root(Decimal("0.5"), Decimal(3), math_context(20)) == 9

    def test_zero(self) -> None:
        assert decimal_math.root(3, Decimal(0), math_context(20)) == 0

    def test_invalid_n(self) -> None:
        with pytest.raises(ValueError, match="root requires n > 0"):
            decimal_math.root(0, Decimal(2), math_context(20))

    def test_negative_x(self) -> None:
        with pytest.raises(ValueError, match="root requires x >= 0"):
            decimal_math.root(3, Decimal(-8), math_context(20))


class TestPow:
    def test_zero_exponent(self) -> None:
        assert decimal_math.pow(Decimal("123.456"), Decimal(0), math_context(20)) == 1

    def test_integral_exponent_exact(self) -> None:
        assert decimal_math.pow(Decimal("123.456"), Decimal(2), math_context(30)) == Decimal("15241.383936")

    def test_negative_integral_exponent(self) -> None:
        assert decimal_math.pow(Decimal(2), Decimal(-2), math_context(20)) == Decimal("0.25")

    def test_negative_base_integral_exponent(self) -> None:
        assert decimal_math.pow(Decimal(-2), Decimal(3), math_context(20)) == -8

    def test_half_is_sqrt(self) -> None:
        _assert_close(decimal_math.pow(Decimal(2), Decimal("0.5"), math_context(50)), _SQRT2, 50)

    def test_zero_base(self) -> None:
        assert decimal_math.pow(Decimal(0), Decimal("2.5"), math_context(20)) == 0

    def test_zero_base_negative_exponent_raises(self) -> None:
        with pytest.raises(ValueError):
            decimal_math.pow(Decimal(0), Decimal(-1), math_context(20))

    def test_negative_base_fractional_exponent_raises(self) -> None:
        with pytest.raises(ValueError, match="non-integral y"):
            decimal_math.pow(Decimal(-8), Decimal("0.5"), math_context(20))

    def test_matches_exp_log(self) -> None:
        mc = math_context(40)
        exponent = math_context(60).multiply(Decimal("3.1"), decimal_math.log(Decimal("123.456"), math_context(60)))
        expected = decimal_math.exp(exponent, math_context(60))
        _assert_close(decimal_math.pow(Decimal("123.456"), Decimal("3.1"), mc), expected, 40)


# ---------------------------------------------------------------------------
# Trigonometric functions
# ---------------------------------------------------------------------------


class TestTrigonometric:
    def test_sin_one(self) -> None:
        _assert_close(decimal_math.sin(Decimal(1), math_context(60)), _SIN_1, 60)

    def test_cos_one(self) -> None:
        _assert_close(decimal_math.cos(Decimal(1), math_context(60)), _COS_1, 60)

    def test_tan_one(self) -> None:
        _assert_close(decimal_math.tan(Decimal(1), math_context(60)), _exact(lambda: _SIN_1 / _COS_1), 60)

    def test_sin_zero(self) -> None:
        assert decimal_math.sin(Decimal(0), math_context(20)) == 0

    def test_cos_zero(self) -> None:
        assert decimal_math.cos(Decimal(0), math_context(20)) == 1

    def test_sin_ten_matches_float(self) -> None:
        # math.sin(10) == -0.5440211108893698
        result = decimal_math.sin(Decimal(10), math_context(16))
        _assert_close(result, Decimal("-0.5440211108893698"), 16)

    def test_large_argument_reduction(self) -> None:
        mc = math_context(40)
        x = Decimal(1)
        shifted = _exact(lambda: x + 2000 * _PI)
        _assert_close(decimal_math.sin(shifted, mc), _SIN_1, 40, ulps=2)
        _assert_close(decimal_math.cos(shifted, mc), _COS_1, 40, ulps=2)

    def test_sin_near_pi_keeps_relative_precision(self) -> None:
        pi40 = Decimal("3.141592653589793238462643383279502884197")
        # sin(pi - d) = d - d^3/6
        expected = _exact(lambda: _PI - pi40)
        _assert_close(decimal_math.sin(pi40, math_context(20)), expected, 20)

    def test_cos_near_half_pi_keeps_relative_precision(self) -> None:
        half_pi40 = Decimal("1.570796326794896619231321691639751442099")
        expected = _exact(lambda: _PI / 2 - half_pi40)
        result = decimal_math.cos(half_pi40, math_context(20))
        assert result < 0
        _assert_close(result, expected, 20)

    def test_tan_near_half_pi(self) -> None:
        half_pi40 = Decimal("1.570796326794896619231321691639751442099")
        # tan(pi/2 - d) = 1/d - d/3
        expected = _exact(lambda: 1 / (_PI / 2 - half_pi40))
        _assert_close(decimal_math.tan(half_pi40, math_context(20)), expected, 20)

    @pytest.mark.parametrize("k", [1, 2, 7, 100])
    def test_sin_near_multiples_of_pi(self, k: int) -> None:
        x = _exact(lambda: k * Decimal("3.14159265358979323846264338327950"))
        expected = _exact(lambda: (-1) ** k * (x - k * _PI))
        _assert_close(decimal_math.sin(x, math_context(20)), expected, 20)

    def test_cos_away_from_zeros_unchanged(self) -> None:
        mc = math_context(40)
        _assert_close(decimal_math.cos(Decimal(-1), mc), _COS_1, 40)
        _assert_close(decimal_math.sin(Decimal(-1), mc), _exact(lambda: -_SIN_1), 40)

    def test_small_argument_keeps_relative_precision(self) -> None:
        x = Decimal("1E-20")
        result = decimal_math.sin(x, math_context(30))
        assert result == x


@given(
    x=st.decimals(min_value=Decimal("-100"), max_value=Decimal("100"), places=3, allow_nan=False, allow_infinity=False),
)
@settings(max_examples=30)
def test_sin_squared_plus_cos_squared_is_one(x: Decimal) -> None:
    mc = math_context(40)
    s = decimal_math.sin(x, mc)
    c = decimal_math.cos(x, mc)
    with localcontext() as ctx:
        ctx.prec = 100
        assert abs(s * s + c * c - 1) <= Decimal("1E-38")


class TestInverseTrigonometric:
    def test_asin_half(self) -> None:
        _assert_close(decimal_math.asin(Decimal("0.5"), math_context(50)), _exact(lambda: _PI / 6), 50)

    def test_asin_one(self) -> None:
        _assert_close(decimal_math.asin(Decimal(1), math_context(50)), _exact(lambda: _PI / 2), 50)

    def test_asin_negative(self) -> None:
        _assert_close(decimal_math.asin(Decimal("-0.5"), math_context(50)), _exact(lambda: -_PI / 6), 50)

    def test_asin_near_one(self) -> None:
        mc = math_context(40)
        _assert_close(decimal_math.sin(decimal_math.asin(Decimal("0.9"), mc), mc), Decimal("0.9"), 40, ulps=2)

    def test_acos_values(self) -> None:
        mc = math_context(50)
        assert decimal_math.acos(Decimal(1), mc) == 0
        _assert_close(decimal_math.acos(Decimal(0), mc), _exact(lambda: _PI / 2), 50)
        _assert_close(decimal_math.acos(Decimal("0.5"), mc), _exact(lambda: _PI / 3), 50)
        _assert_close(decimal_math.acos(Decimal("-0.5"), mc), _exact(lambda: 2 * _PI / 3), 50)
        _assert_close(decimal_math.acos(Decimal(-1), mc), _PI, 50)

    def test_atan_one(self) -> None:
        _assert_close(decimal_math.atan(Decimal(1), math_context(50)), _exact(lambda: _PI / 4), 50)

    def test_atan_negative(self) -> None:
        _assert_close(decimal_math.atan(Decimal(-1), math_context(50)), _exact(lambda: -_PI / 4), 50)

    def test_atan_zero(self) -> None:
        assert decimal_math.atan(Decimal(0), math_context(20)) == 0

    def test_atan_sqrt_three(self) -> None:
        mc = math_context(50)
        sqrt_three = decimal_math.sqrt(Decimal(3), math_context(80))
        _assert_close(decimal_math.atan(sqrt_three, mc), _exact(lambda: _PI / 3), 50)

    def test_atan_complementary(self) -> None:
        mc = math_context(40)
        total = math_context(60).add(decimal_math.atan(Decimal(10), mc), decimal_math.atan(Decimal("0.1"), mc))
        _assert_close(total, _exact(lambda: _PI / 2), 40, ulps=2)

    def test_atan_half_plus_atan_third_is_quarter_pi(self) -> None:
        mc = math_context(50)
        third = math_context(80).divide(Decimal(1), Decimal(3))
        total = math_context(70).add(decimal_math.atan(Decimal("0.5"), mc), decimal_math.atan(third, mc))
        _assert_close(total, _exact(lambda: _PI / 4), 50, ulps=2)

    @pytest.mark.parametrize("x", ["0.3", "-0.45", "0.5"])
    def test_atan_series_agrees_with_asin(self, x: str) -> None:
        mc = math_context(40)
        value = Decimal(x)
        inner = _exact(lambda: value / (1 + value * value).sqrt())
        _assert_close(decimal_math.atan(value, mc), decimal_math.asin(inner, math_context(40)), 40, ulps=2)

    def test_atan_small_argument_keeps_relative_precision(self) -> None:
        x = Decimal("1E-25")
        assert decimal_math.atan(x, math_context(30)) == x

    @pytest.mark.parametrize("function", [decimal_math.asin, decimal_math.acos])
    def test_outside_unit_interval_raises(self, function) -> None:  # noqa: ANN001
        with pytest.raises(ValueError, match="requires -1 <= x <= 1"):
            function(Decimal("1.0001"), math_context(20))


# ---------------------------------------------------------------------------
# Hyperbolic functions
# ---------------------------------------------------------------------------


class TestHyperbolic:
    def test_sinh_one(self) -> None:
        _assert_close(decimal_math.sinh(Decimal(1), math_context(60)), _SINH_1, 60)

    def test_cosh_one(self) -> None:
        _assert_close(decimal_math.cosh(Decimal(1), math_context(60)), _COSH_1, 60)

    def test_sinh_two_uses_exp(self) -> None:
        expected = _exact(lambda: (_E * _E - 1 / (_E * _E)) / 2)
        _assert_close(decimal_math.sinh(Decimal(2), math_context(50)), expected, 50)

    def test_cosh_minus_two(self) -> None:
        expected = _exact(lambda: (_E * _E + 1 / (_E * _E)) / 2)
        _assert_close(decimal_math.cosh(Decimal(-2), math_context(50)), expected, 50)

    def test_sinh_is_odd(self) -> None:
        mc = math_context(30)
        assert decimal_math.sinh(Decimal("-0.4"), mc) == decimal_math.sinh(Decimal("0.4"), mc).copy_negate()


# ---------------------------------------------------------------------------
# Context handling
# ---------------------------------------------------------------------------


class TestContextHandling:
    def test_thread_local_context_ignored(self) -> None:
        expected = decimal_math.exp(Decimal("2.5"), math_context(40))
        with localcontext() as ctx:
            ctx.prec = 3
            result = decimal_math.exp(Decimal("2.5"), math_context(40))
        assert result == expected

    @pytest.mark.parametrize(
        "function",
        [decimal_math.sqrt, decimal_math.acos, decimal_math.atan, decimal_math.sin, decimal_math.log],
        ids=lambda f: f.__name__,
    )
    def test_thread_local_context_ignored_everywhere(self, function, mc50: Context) -> None:  # noqa: ANN001
        x = Decimal("0.375")
        expected = function(x, mc50)
        with localcontext() as ctx:
            ctx.prec = 2
            result = function(x, mc50)
        assert result == expected

    def test_context_not_mutated(self, mc50: Context) -> None:
        decimal_math.log(Decimal(7), mc50)
        decimal_math.sin(Decimal(7), mc50)
        assert mc50.prec == 50

    @pytest.mark.parametrize("precision", [1, 2, 5])
    def test_tiny_precisions(self, precision: int) -> None:
        result = decimal_math.exp(Decimal(1), math_context(precision))
        assert len(result.as_tuple().digits) == precision
