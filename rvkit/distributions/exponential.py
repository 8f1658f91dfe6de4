"""
Exponential and Poisson random variables.

ExpDistrRV and PoissonIATimeRV produce the waiting times of a Poisson
process; the Poisson*RV classes produce event counts. All of them
delegate to the samplers in rvkit.core.static_random.

The n-fold variants, next(n), return the sum of n independent values
without looping: a sum of n exponential values is Gamma(n, mean)
distributed and a sum of n Poisson values is Poisson with mean n·mean.
The range test is applied to the average, sum/n.
"""

from rvkit.core import static_random
from rvkit.core.random_variable import RandomVariable
from rvkit.core.ranges import to_double
from rvkit.core.rvrv import (
    DoubleRandomVariableRV,
    IntegerRandomVariableRV,
    InterarrivalTimeRVRV,
    LongRandomVariableRV,
)
from rvkit.core.typed import (
    DoubleRandomVariable,
    IntegerRandomVariable,
    InterarrivalTimeRV,
    LongRandomVariable,
)


def _check_n(n: int) -> None:
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")


class _MeanParameter:

    def _init_mean(self, mean: float) -> None:
        mean = to_double(mean)
        if not mean >= 0.0:
            raise ValueError(f"{type(self).__name__} mean must be non-negative, got {mean}")
        self._mean = mean

    @property
    def mean(self) -> float:
        return self._mean

    def _accept(self, value, n: int) -> bool:
        if not self.range_test_needed():
            return True
        return not self.range_test_failed(value if n == 1 else value / n)


class ExpDistrRV(_MeanParameter, DoubleRandomVariable):
    """
    Exponentially distributed float.

    Args:
        mean: Mean of the distribution (non-negative)

    Raises:
        ValueError: If mean is negative
    """

    def __init__(self, mean: float):
        super().__init__()
        self._init_mean(mean)

    def next(self, n: int = 1) -> float:
        """
        Generate a value, or the sum of n independent values.

        Raises:
            ValueError: If n is not positive
        """
        _check_n(n)
        while True:
            value = static_random.next_double_exp_distr(self._mean, n)
            if self._accept(value, n):
                return value


class PoissonIATimeRV(_MeanParameter, InterarrivalTimeRV):
    """
    Interarrival time of a Poisson process.

    Times are exponentially distributed with the given mean and rounded
    to the nearest integer time unit.

    Args:
        mean: Mean interarrival time (non-negative)

    Examples:
        >>> PoissonIATimeRV(0.0).next()
        0
    """

    def __init__(self, mean: float):
        super().__init__()
        self._init_mean(mean)

    def next(self, n: int = 1) -> int:
        """
        Generate an interarrival time, or the sum of n of them.

        Raises:
            ValueError: If n is not positive
        """
        _check_n(n)
        while True:
            value = static_random.next_poisson_ia_time(self._mean, n)
            if self._accept(value, n):
                return value


class PoissonIntegerRV(_MeanParameter, IntegerRandomVariable):
    """
    Poisson-distributed 32-bit int.

    Args:
        mean: Mean of the distribution (non-negative)

    Raises:
        ValueError: If mean is negative
    """

    def __init__(self, mean: float):
        super().__init__()
        self._init_mean(mean)

    def next(self, n: int = 1) -> int:
        _check_n(n)
        while True:
            value = static_random.poisson_int(self._mean * n)
            if self._accept(value, n):
                return value


class PoissonLongRV(_MeanParameter, LongRandomVariable):
    """Poisson-distributed 64-bit int."""

    def __init__(self, mean: float):
        super().__init__()
        self._init_mean(mean)

    def next(self, n: int = 1) -> int:
        _check_n(n)
        while True:
            value = static_random.poisson_long(self._mean * n)
            if self._accept(value, n):
                return value


class PoissonDoubleRV(_MeanParameter, DoubleRandomVariable):
    """Poisson-distributed count returned as a float."""

    def __init__(self, mean: float):
        super().__init__()
        self._init_mean(mean)

    def next(self, n: int = 1) -> float:
        _check_n(n)
        while True:
            value = static_random.poisson_double(self._mean * n)
            if self._accept(value, n):
                return value


# ===========================
# Random variables of exponential and Poisson random variables
# ===========================


class _MeanRVRV:

    _child_class = ExpDistrRV

    def _init_mean_rv(self, mean_rv: RandomVariable) -> None:
        self._mean_rv = self._clone_parameter(mean_rv)
        self._mean_rv.tighten_minimum(0.0, True)
        self._determine_if_ordered(mean_rv)

    def _do_next(self):
        return self._child_class(self._mean_rv.next())


class ExpDistrRVRV(_MeanRVRV, DoubleRandomVariableRV[ExpDistrRV]):
    """
    RV-of-RV generating ExpDistrRV instances.

    Args:
        mean_rv: Random variable giving each mean; its clone is
            restricted to non-negative values
    """

    _child_class = ExpDistrRV

    def __init__(self, mean_rv: DoubleRandomVariable):
        super().__init__()
        self._init_mean_rv(mean_rv)


class PoissonIATimeRVRV(_MeanRVRV, InterarrivalTimeRVRV[PoissonIATimeRV]):
    """RV-of-RV generating PoissonIATimeRV instances."""

    _child_class = PoissonIATimeRV

    def __init__(self, mean_rv: DoubleRandomVariable):
        super().__init__()
        self._init_mean_rv(mean_rv)


class PoissonIntegerRVRV(_MeanRVRV, IntegerRandomVariableRV[PoissonIntegerRV]):
    """RV-of-RV generating PoissonIntegerRV instances."""

    _child_class = PoissonIntegerRV

    def __init__(self, mean_rv: DoubleRandomVariable):
        super().__init__()
        self._init_mean_rv(mean_rv)


class PoissonLongRVRV(_MeanRVRV, LongRandomVariableRV[PoissonLongRV]):
    """RV-of-RV generating PoissonLongRV instances."""

    _child_class = PoissonLongRV

    def __init__(self, mean_rv: DoubleRandomVariable):
        super().__init__()
        self._init_mean_rv(mean_rv)


class PoissonDoubleRVRV(_MeanRVRV, DoubleRandomVariableRV[PoissonDoubleRV]):
    """RV-of-RV generating PoissonDoubleRV instances."""

    _child_class = PoissonDoubleRV

    def __init__(self, mean_rv: DoubleRandomVariable):
        super().__init__()
        self._init_mean_rv(mean_rv)
