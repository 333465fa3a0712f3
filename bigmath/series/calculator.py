"""SeriesCalculator -- adaptive summation of power series over Decimal.

A concrete series supplies three things:

    get_current_factor()     exact Fraction factor of the next uncached term
    calculate_next_factor()  advance the factor recurrence by one term
    create_power_iterator()  PowerIterator producing the matching powers of x

calculate(x, context) sums factor_i * power_i until a term (or a pair of
terms, for alternating series) is no larger than 10^-(prec+1), then rounds
the sum to the context.

Factors are cached on the instance and reused by every later call, at any
precision. The cache only grows. Because the factor recurrence is stateful,
one lock is held for the whole calculate() call: at most one calculation
per instance is in flight, while different instances run independently.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from decimal import Context, Decimal
from fractions import Fraction

from bigmath.core.context import EXACT_CONTEXT, acceptable_error
from bigmath.series.power import PowerIterator

logger = logging.getLogger(__name__)

_ZERO = Decimal(0)


class SeriesCalculator(ABC):
    """Base class of every power series evaluated by bigmath."""

    def __init__(self, calculate_in_pairs: bool = False) -> None:
        self._calculate_in_pairs = calculate_in_pairs
        self._factors: list[Fraction] = []
        self._lock = threading.Lock()

    @property
    def calculate_in_pairs(self) -> bool:
        """True if terms are summed two at a time before each convergence check."""
        return self._calculate_in_pairs

    @property
    def cached_factor_count(self) -> int:
        """Number of factors computed so far."""
        return len(self._factors)

    def calculate(self, x: Decimal, context: Context) -> Decimal:
        """Sum the series at ``x`` to ``context.prec`` significant digits.

        Decimal signals raised while summing (Overflow, InvalidOperation)
        propagate to the caller unchanged.
        """
        with self._lock:
            return self._calculate(x, context)

    def _calculate(self, x: Decimal, context: Context) -> Decimal:
        error = acceptable_error(context)
        powers = self.create_power_iterator(x, context)

        total = _ZERO
        i = 0
        while True:
            step = self._term(i, powers, context)
            i += 1
            if self._calculate_in_pairs:
                step = EXACT_CONTEXT.add(step, self._term(i, powers, context))
                i += 1
            total = EXACT_CONTEXT.add(total, step)
            if step.copy_abs() <= error:
                break

        return context.plus(total)

    def _term(self, index: int, powers: PowerIterator, context: Context) -> Decimal:
        factor = self.get_factor(index)
        power = powers.get_current_power()
        powers.calculate_next_power()
        # numerator * power is exact; only the division rounds
        product = EXACT_CONTEXT.multiply(Decimal(factor.numerator), power)
        return context.divide(product, Decimal(factor.denominator))

    def get_factor(self, index: int) -> Fraction:
        """Return the factor of term ``index``, extending the cache as needed."""
        if index < 0:
            raise IndexError(f"factor index must be >= 0, got {index}")
        if index < len(self._factors):
            return self._factors[index]
        while len(self._factors) <= index:
            self._factors.append(self.get_current_factor())
            self.calculate_next_factor()
        logger.debug(
            "%s: factor cache extended to %d entries",
            type(self).__name__, len(self._factors),
        )
        return self._factors[index]

    @abstractmethod
    def create_power_iterator(self, x: Decimal, context: Context) -> PowerIterator:
        """Create the PowerIterator for ``x`` used by one calculation."""

    @abstractmethod
    def get_current_factor(self) -> Fraction:
        """Factor of the highest term not yet cached.

        The first call returns the factor of term 0. Each call is followed by
        calculate_next_factor() to prepare the next term.
        """

    @abstractmethod
    def calculate_next_factor(self) -> None:
        """Advance the factor recurrence to the next term."""
