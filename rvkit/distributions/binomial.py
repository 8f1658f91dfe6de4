"""
Binomially distributed random variables.

A binomial value is the number of successes in n independent trials,
each succeeding with probability p. Three sampling regimes are used,
chosen once at construction:

    TABLE     n < 61: inverse-CDF lookup in a table of cumulative
              probabilities, found by binary search
    POISSON   p <= 0.05 (with n >= 20), or n >= 100 and n·p <= 10:
              Poisson(n·p) draws, rejecting values above n
    GAUSSIAN  otherwise: Gaussian(n·p, √(n·p·(1-p))) draws rounded to
              the nearest integer, rejecting values outside [0, n]

The table holds n + 2 entries. Entry 0 is 0.0 and entry i + 1 is the
probability of at most i successes, so entry n + 1 is 1.0. Each term
C(n, i)·p^i·(1-p)^(n-i) is built by multiplying the coefficients by p^i
from left to right and by (1-p)^(n-i) from right to left, which keeps
the partial products from overflowing or underflowing.

Examples:
    >>> build_binomial_table(0.5, 2)
    (0.0, 0.25, 0.75, 1.0)
    >>> binomial_search((0.0, 0.25, 0.75, 1.0), 0.25)
    1
"""

import logging
import math
from bisect import bisect_right
from typing import Optional, Sequence, Tuple, Union

from rvkit.core import static_random
from rvkit.core.random_variable import RandomVariable
from rvkit.core.ranges import to_double
from rvkit.core.rvrv import (
    BooleanRandomVariableRV,
    DoubleRandomVariableRV,
    IntegerRandomVariableRV,
    LongRandomVariableRV,
)
from rvkit.core.typed import (
    BooleanRandomVariable,
    DoubleRandomVariable,
    IntegerRandomVariable,
    LongRandomVariable,
)
from rvkit.distributions.fixed import FixedIntegerRV, FixedLongRV
from rvkit.utils.constants import (
    BINOMIAL_POISSON_LARGE_N,
    BINOMIAL_POISSON_MAX_MEAN,
    BINOMIAL_POISSON_MAX_PROB,
    BINOMIAL_POISSON_MIN_N,
    BINOMIAL_TABLE_LIMIT,
)
from rvkit.utils.types import BinomialMode

logger = logging.getLogger(__name__)


def _check_prob(prob: float) -> float:
    prob = to_double(prob)
    if not 0.0 <= prob <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {prob}")
    return prob


def build_binomial_table(prob: float, n: int) -> Tuple[float, ...]:
    """
    Build the cumulative probability table for a binomial distribution.

    Args:
        prob: Probability of success for each trial
        n: Number of trials

    Returns:
        n + 2 non-decreasing cumulative probabilities, starting at 0.0
        and ending at exactly 1.0

    Raises:
        ValueError: If prob is outside [0, 1] or n is not positive
    """
    prob = _check_prob(prob)
    if n <= 0:
        raise ValueError(f"number of trials must be positive, got {n}")
    terms = [float(math.comb(n, i)) for i in range(n + 1)]
    factor = 1.0
    for i in range(n + 1):
        terms[i] *= factor
        factor *= prob
    factor = 1.0
    q = 1.0 - prob
    for i in range(n, -1, -1):
        terms[i] *= factor
        factor *= q
    table = [0.0] * (n + 2)
    total = 0.0
    for i, term in enumerate(terms):
        total += term
        table[i + 1] = total
    for i in range(1, n + 1):
        table[i] /= total
    table[n + 1] = 1.0
    return tuple(table)


def binomial_search(table: Sequence[float], u: float) -> int:
    """
    Map a uniform deviate to a number of successes.

    The result is the index i with table[i] <= u < table[i + 1]. A
    deviate equal to a table entry selects that entry.

    Args:
        table: Table from build_binomial_table()
        u: Uniform deviate in [0, 1)
    """
    return bisect_right(table, u) - 1


def select_mode(prob: float, n: int) -> BinomialMode:
    """Return the sampling regime used for the given parameters."""
    if n < BINOMIAL_TABLE_LIMIT:
        return BinomialMode.TABLE
    mean = n * prob
    if (prob <= BINOMIAL_POISSON_MAX_PROB and n >= BINOMIAL_POISSON_MIN_N) or (
        n >= BINOMIAL_POISSON_LARGE_N and mean <= BINOMIAL_POISSON_MAX_MEAN
    ):
        return BinomialMode.POISSON
    return BinomialMode.GAUSSIAN


class _BinomialSampler:
    """Binomial parameters and sampling shared by the numeric variants."""

    def _init_binomial(self, prob: float, n: int) -> None:
        prob = _check_prob(prob)
        if n <= 0:
            raise ValueError(f"number of trials must be positive, got {n}")
        self._prob = prob
        self._n = n
        self._mode = select_mode(prob, n)
        self._table: Optional[Tuple[float, ...]] = None
        if self._mode is BinomialMode.TABLE:
            self._table = build_binomial_table(prob, n)
        else:
            self._mean = n * prob
            self._sdev = math.sqrt(n * prob * (1.0 - prob))
        logger.debug(
            "binomial distribution p=%g n=%d uses %s sampling", prob, n, self._mode.value
        )

    @property
    def prob(self) -> float:
        return self._prob

    @property
    def n(self) -> int:
        return self._n

    @property
    def mode(self) -> BinomialMode:
        """Sampling regime chosen for this variable's parameters."""
        return self._mode

    @property
    def table(self) -> Optional[Tuple[float, ...]]:
        """The cumulative probability table, or None outside TABLE mode."""
        return self._table

    def _draw(self) -> int:
        if self._mode is BinomialMode.TABLE:
            return binomial_search(self._table, static_random.next_double())
        if self._mode is BinomialMode.POISSON:
            while True:
                value = int(static_random.poisson_double(self._mean))
                if value <= self._n:
                    return value
        while True:
            value = int(round(self._mean + self._sdev * static_random.next_gaussian()))
            if 0 <= value <= self._n:
                return value


class BinomialIntegerRV(_BinomialSampler, IntegerRandomVariable):
    """
    Binomially distributed 32-bit int.

    Args:
        prob: Probability of success for each trial, in [0, 1]
        n: Number of trials (positive)

    Raises:
        ValueError: If prob is outside [0, 1] or n is not positive

    Examples:
        >>> rv = BinomialIntegerRV(0.5, 10)
        >>> 0 <= rv.next() <= 10
        True
        >>> rv.mode
        <BinomialMode.TABLE: 'table'>
    """

    def __init__(self, prob: float, n: int):
        super().__init__()
        self._init_binomial(prob, self._convert(n))
        self._set_required_minimum(0, True)
        self._set_required_maximum(self._n, True)

    def next(self) -> int:
        while True:
            value = self._draw()
            if not self.range_test_failed(value):
                return value


class BinomialLongRV(_BinomialSampler, LongRandomVariable):
    """Binomially distributed 64-bit int."""

    def __init__(self, prob: float, n: int):
        super().__init__()
        self._init_binomial(prob, self._convert(n))
        self._set_required_minimum(0, True)
        self._set_required_maximum(self._n, True)

    def next(self) -> int:
        while True:
            value = self._draw()
            if not self.range_test_failed(value):
                return value


class BinomialDoubleRV(_BinomialSampler, DoubleRandomVariable):
    """
    Binomially distributed count returned as a float.

    Args:
        prob: Probability of success for each trial, in [0, 1]
        n: Number of trials; a float is rounded to the nearest integer
    """

    def __init__(self, prob: float, n: Union[int, float]):
        super().__init__()
        self._init_binomial(prob, int(round(n)))
        self._set_required_minimum(0.0, True)
        self._set_required_maximum(float(self._n), True)

    def next(self) -> float:
        while True:
            value = float(self._draw())
            if not self.range_test_failed(value):
                return value


class BinomialBooleanRV(BooleanRandomVariable):
    """
    Bool that is True with probability prob: a single binomial trial.

    Raises:
        ValueError: If prob is outside [0, 1]
    """

    def __init__(self, prob: float):
        self._prob = _check_prob(prob)

    @property
    def prob(self) -> float:
        return self._prob

    def next(self) -> bool:
        return static_random.next_double() < self._prob


# ===========================
# Random variables of binomial random variables
# ===========================


class _BinomialRVRV:

    _binomial_class = BinomialIntegerRV
    _fixed_count_class = FixedIntegerRV

    def _init_parameters(self, prob_rv: RandomVariable, n: Union[int, RandomVariable]) -> None:
        self._prob_rv = self._clone_parameter(prob_rv)
        self._prob_rv.tighten_minimum(0.0, True)
        self._prob_rv.tighten_maximum(1.0, True)
        if isinstance(n, RandomVariable):
            self._n_rv = self._clone_parameter(n)
            self._n_rv.tighten_minimum(1, True)
            self._determine_if_ordered(prob_rv, n)
        else:
            if n <= 0:
                raise ValueError(f"number of trials must be positive, got {n}")
            self._n_rv = self._fixed_count_class(n)
            self._determine_if_ordered(prob_rv)

    def _do_next(self):
        return self._binomial_class(self._prob_rv.next(), self._n_rv.next())


class BinomialIntegerRVRV(_BinomialRVRV, IntegerRandomVariableRV[BinomialIntegerRV]):
    """
    RV-of-RV generating BinomialIntegerRV instances.

    Args:
        prob_rv: Random variable giving each probability; its clone is
            restricted to [0, 1]
        n: Number of trials, either a positive int or a random variable
            whose clone is restricted to values of at least 1
    """

    _binomial_class = BinomialIntegerRV
    _fixed_count_class = FixedIntegerRV

    def __init__(self, prob_rv: DoubleRandomVariable, n: Union[int, IntegerRandomVariable]):
        super().__init__()
        self._init_parameters(prob_rv, n)


class BinomialLongRVRV(_BinomialRVRV, LongRandomVariableRV[BinomialLongRV]):
    """RV-of-RV generating BinomialLongRV instances."""

    _binomial_class = BinomialLongRV
    _fixed_count_class = FixedLongRV

    def __init__(self, prob_rv: DoubleRandomVariable, n: Union[int, LongRandomVariable]):
        super().__init__()
        self._init_parameters(prob_rv, n)


class BinomialDoubleRVRV(_BinomialRVRV, DoubleRandomVariableRV[BinomialDoubleRV]):
    """RV-of-RV generating BinomialDoubleRV instances."""

    _binomial_class = BinomialDoubleRV
    _fixed_count_class = FixedLongRV

    def __init__(self, prob_rv: DoubleRandomVariable, n: Union[int, RandomVariable]):
        super().__init__()
        self._init_parameters(prob_rv, n)


class BinomialBooleanRVRV(BooleanRandomVariableRV[BinomialBooleanRV]):
    """
    RV-of-RV generating BinomialBooleanRV instances.

    Args:
        prob_rv: Random variable giving each probability; its clone is
            restricted to [0, 1]
    """

    def __init__(self, prob_rv: DoubleRandomVariable):
        super().__init__()
        self._prob_rv = self._clone_parameter(prob_rv)
        self._prob_rv.tighten_minimum(0.0, True)
        self._prob_rv.tighten_maximum(1.0, True)
        self._determine_if_ordered(prob_rv)

    def _do_next(self) -> BinomialBooleanRV:
        return BinomialBooleanRV(self._prob_rv.next())
