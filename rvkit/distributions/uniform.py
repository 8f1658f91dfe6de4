"""
Uniformly distributed random variables.

Each end of the interval may be open or closed. The interval is
installed as the variable's required range, so callers can narrow it
with user bounds but never widen it.

Floating-point intervals are sampled with a closed-form mapping of a
uniform [0, 1) deviate:

    [a, b)  a + (b - a)·U
    (a, b]  b - (b - a)·U
    [a, b]  a + (b - a)·k/2^53, with k uniform in [0, 2^53]
    (a, b)  a + (b - a)·U, rejecting U = 0

An interval wider than the largest float is stepped through in two
halves. A result that rounds onto an excluded end is rejected by the range
test and drawn again. The interval [0, 1) is returned directly from the
random source with no transformation applied.

Integer intervals are normalized to closed ones, [a', b'], and sampled
as a' + k with k uniform in [0, b' - a'].
"""

import math

from rvkit.core import static_random
from rvkit.core.random_variable import RandomVariable
from rvkit.core.ranges import to_double
from rvkit.core.rvrv import (
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
from rvkit.utils.constants import DOUBLE_GRID


def _describe(lower, upper, lower_closed: bool, upper_closed: bool) -> str:
    return f"{'[' if lower_closed else '('}{lower}, {upper}{']' if upper_closed else ')'}"


class UniformDoubleRV(DoubleRandomVariable):
    """
    Uniformly distributed float.

    Args:
        lower: Lower end of the interval
        upper: Upper end of the interval
        lower_closed: Whether lower itself can be returned
        upper_closed: Whether upper itself can be returned

    Raises:
        ValueError: If the interval contains no representable float or
            has an infinite end

    Examples:
        >>> rv = UniformDoubleRV(1.0, 2.0)
        >>> 1.0 <= rv.next() < 2.0
        True
        >>> UniformDoubleRV(3.0, 3.0, True, True).next()
        3.0
    """

    def __init__(
        self,
        lower: float = 0.0,
        upper: float = 1.0,
        lower_closed: bool = True,
        upper_closed: bool = False,
    ):
        super().__init__()
        lower = to_double(lower)
        upper = to_double(upper)
        interval = _describe(lower, upper, lower_closed, upper_closed)
        if math.isnan(lower) or math.isnan(upper) or lower > upper:
            raise ValueError(f"invalid uniform interval {interval}")
        if math.isinf(lower) or math.isinf(upper):
            raise ValueError(f"unbounded uniform interval {interval}")
        if lower == upper and not (lower_closed and upper_closed):
            raise ValueError(f"empty uniform interval {interval}")
        if (
            not lower_closed
            and not upper_closed
            and math.nextafter(lower, math.inf) >= upper
        ):
            raise ValueError(f"empty uniform interval {interval}")
        self._lower = lower
        self._upper = upper
        self._lower_closed = bool(lower_closed)
        self._upper_closed = bool(upper_closed)
        self._scale = upper - lower
        # The width of [-max, max] is not a float; step by halves instead
        self._half_scale = upper * 0.5 - lower * 0.5
        self._wide = math.isinf(self._scale)
        self._degenerate = lower == upper
        self._trivial = (
            lower == 0.0 and upper == 1.0 and self._lower_closed and not self._upper_closed
        )
        self._set_required_minimum(lower, lower_closed)
        self._set_required_maximum(upper, upper_closed)

    @property
    def lower(self) -> float:
        return self._lower

    @property
    def upper(self) -> float:
        return self._upper

    @property
    def lower_closed(self) -> bool:
        return self._lower_closed

    @property
    def upper_closed(self) -> bool:
        return self._upper_closed

    def _shift(self, origin: float, fraction: float) -> float:
        if self._wide:
            step = self._half_scale * fraction
            return origin + step + step
        return origin + self._scale * fraction

    def _draw(self) -> float:
        if self._trivial:
            return static_random.next_double()
        if self._degenerate:
            return self._lower
        if self._lower_closed and self._upper_closed:
            k = static_random.next_long(DOUBLE_GRID + 1)
            return self._shift(self._lower, k / DOUBLE_GRID)
        if self._upper_closed:
            return self._shift(self._upper, -static_random.next_double())
        return self._shift(self._lower, static_random.next_double())

    def next(self) -> float:
        while True:
            value = self._draw()
            if not self.range_test_failed(value):
                return value


class _UniformIntegral:

    def _init_interval(self, lower, upper, lower_closed: bool, upper_closed: bool) -> None:
        lower = self._convert(lower)
        upper = self._convert(upper)
        first = lower if lower_closed else lower + 1
        last = upper if upper_closed else upper - 1
        if first > last:
            raise ValueError(
                f"empty uniform interval {_describe(lower, upper, lower_closed, upper_closed)}"
            )
        self._lower = lower
        self._upper = upper
        self._lower_closed = bool(lower_closed)
        self._upper_closed = bool(upper_closed)
        self._base = first
        self._count = last - first + 1
        self._set_required_minimum(lower, lower_closed)
        self._set_required_maximum(upper, upper_closed)

    @property
    def lower(self) -> int:
        return self._lower

    @property
    def upper(self) -> int:
        return self._upper

    @property
    def lower_closed(self) -> bool:
        return self._lower_closed

    @property
    def upper_closed(self) -> bool:
        return self._upper_closed

    def next(self) -> int:
        while True:
            if self._count == 1:
                value = self._base
            else:
                value = self._base + static_random.next_long(self._count)
            if not self.range_test_failed(value):
                return value


class UniformIntegerRV(_UniformIntegral, IntegerRandomVariable):
    """
    Uniformly distributed 32-bit int.

    Args:
        lower: Lower end of the interval
        upper: Upper end of the interval
        lower_closed: Whether lower itself can be returned
        upper_closed: Whether upper itself can be returned

    Raises:
        ValueError: If the interval contains no integer

    Examples:
        >>> rv = UniformIntegerRV(0, 5)
        >>> rv.next() in {0, 1, 2, 3, 4}
        True
    """

    def __init__(
        self, lower: int, upper: int, lower_closed: bool = True, upper_closed: bool = False
    ):
        super().__init__()
        self._init_interval(lower, upper, lower_closed, upper_closed)


class UniformLongRV(_UniformIntegral, LongRandomVariable):
    """Uniformly distributed 64-bit int."""

    def __init__(
        self, lower: int, upper: int, lower_closed: bool = True, upper_closed: bool = False
    ):
        super().__init__()
        self._init_interval(lower, upper, lower_closed, upper_closed)


class UniformBooleanRV(BooleanRandomVariable):
    """Bool that is True or False with equal probability."""

    def next(self) -> bool:
        return static_random.next_boolean()


# ===========================
# Random variables of uniform random variables
# ===========================


class _UniformRVRV:

    _uniform_class = UniformDoubleRV

    def _init_limits(
        self,
        lower_rv: RandomVariable,
        upper_rv: RandomVariable,
        lower_closed: bool,
        upper_closed: bool,
    ) -> None:
        self._lower_rv = self._clone_parameter(lower_rv)
        self._upper_rv = self._clone_parameter(upper_rv)
        self._lower_closed = bool(lower_closed)
        self._upper_closed = bool(upper_closed)
        self._determine_if_ordered(lower_rv, upper_rv)

    def _do_next(self):
        return self._uniform_class(
            self._lower_rv.next(),
            self._upper_rv.next(),
            self._lower_closed,
            self._upper_closed,
        )


class UniformDoubleRVRV(_UniformRVRV, DoubleRandomVariableRV[UniformDoubleRV]):
    """
    RV-of-RV generating UniformDoubleRV instances.

    Args:
        lower_rv: Random variable giving each interval's lower end
        upper_rv: Random variable giving each interval's upper end
        lower_closed: Whether generated intervals include their lower end
        upper_closed: Whether generated intervals include their upper end
    """

    _uniform_class = UniformDoubleRV

    def __init__(
        self,
        lower_rv: DoubleRandomVariable,
        upper_rv: DoubleRandomVariable,
        lower_closed: bool = True,
        upper_closed: bool = False,
    ):
        super().__init__()
        self._init_limits(lower_rv, upper_rv, lower_closed, upper_closed)


class UniformIntegerRVRV(_UniformRVRV, IntegerRandomVariableRV[UniformIntegerRV]):
    """RV-of-RV generating UniformIntegerRV instances."""

    _uniform_class = UniformIntegerRV

    def __init__(
        self,
        lower_rv: IntegerRandomVariable,
        upper_rv: IntegerRandomVariable,
        lower_closed: bool = True,
        upper_closed: bool = False,
    ):
        super().__init__()
        self._init_limits(lower_rv, upper_rv, lower_closed, upper_closed)


class UniformLongRVRV(_UniformRVRV, LongRandomVariableRV[UniformLongRV]):
    """RV-of-RV generating UniformLongRV instances."""

    _uniform_class = UniformLongRV

    def __init__(
        self,
        lower_rv: LongRandomVariable,
        upper_rv: LongRandomVariable,
        lower_closed: bool = True,
        upper_closed: bool = False,
    ):
        super().__init__()
        self._init_limits(lower_rv, upper_rv, lower_closed, upper_closed)
