"""
Random-variable base classes for each value type.

DoubleRandomVariable, IntegerRandomVariable and LongRandomVariable
compose a RangeConstraint for their value type and expose the bound
operations. Concrete distributions call range_test_needed() and
range_test_failed() in their rejection-sampling loops:

    while True:
        value = draw()
        if not self.range_test_needed() or not self.range_test_failed(value):
            return value

BooleanRandomVariable has no order, so every bound operation raises
UnsupportedOperationError.
"""

from typing import Optional

import numpy as np

from rvkit.core.random_variable import RandomVariable, T
from rvkit.core.ranges import RangeConstraint, to_double, to_int, to_long
from rvkit.utils.errors import UnsupportedOperationError


class OrderedRandomVariable(RandomVariable[T]):
    """
    Random variable whose values are ordered and may be bounded.

    Subclasses set _convert to the function that converts bounds to
    the value type and _dtype to the numpy dtype of their values.
    """

    _convert = staticmethod(to_double)
    _dtype = np.float64

    def __init__(self):
        self._range: RangeConstraint[T] = RangeConstraint(self._convert)

    def set_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        self._range.set_minimum(minimum, closed)

    def _set_required_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        self._range.set_required_minimum(minimum, closed)

    def tighten_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        self._range.tighten_minimum(minimum, closed)

    def tighten_minimum_s(self, minimum: str, closed: bool = True) -> None:
        self.tighten_minimum(self._convert(minimum), closed)

    def set_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        self._range.set_maximum(maximum, closed)

    def _set_required_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        self._range.set_required_maximum(maximum, closed)

    def tighten_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        self._range.tighten_maximum(maximum, closed)

    def tighten_maximum_s(self, maximum: str, closed: bool = True) -> None:
        self.tighten_maximum(self._convert(maximum), closed)

    def range_test_needed(self) -> bool:
        """True if any bound is set, so generated values must be tested."""
        return self._range.test_needed

    def range_test_failed(self, value: T) -> bool:
        """True if value lies outside the effective range."""
        return self._range.test_failed(value)

    @property
    def minimum(self) -> Optional[T]:
        bound = self._range.lower
        return None if bound is None else bound.value

    @property
    def minimum_closed(self) -> Optional[bool]:
        bound = self._range.lower
        return None if bound is None else bound.closed

    @property
    def maximum(self) -> Optional[T]:
        bound = self._range.upper
        return None if bound is None else bound.value

    @property
    def maximum_closed(self) -> Optional[bool]:
        bound = self._range.upper
        return None if bound is None else bound.closed

    def to_array(self, size: int) -> np.ndarray:
        """Generate size values into a numpy array of the value dtype."""
        return np.fromiter(self.stream(size), dtype=self._dtype, count=size)


class DoubleRandomVariable(OrderedRandomVariable[float]):
    """Random variable producing float values."""

    _convert = staticmethod(to_double)
    _dtype = np.float64


class IntegerRandomVariable(OrderedRandomVariable[int]):
    """Random variable producing int values in the signed 32-bit range."""

    _convert = staticmethod(to_int)
    _dtype = np.int32


class LongRandomVariable(OrderedRandomVariable[int]):
    """Random variable producing int values in the signed 64-bit range."""

    _convert = staticmethod(to_long)
    _dtype = np.int64


class InterarrivalTimeRV(LongRandomVariable):
    """
    Random variable producing interarrival times.

    Interarrival times are integer time units and are never negative:
    the range [0, ∞) is installed as a required minimum.
    """

    def __init__(self):
        super().__init__()
        self._set_required_minimum(0, True)


class BooleanRandomVariable(RandomVariable[bool]):
    """Random variable producing bool values, which have no order."""

    def tighten_minimum_s(self, minimum: str, closed: bool = True) -> None:
        raise UnsupportedOperationError("boolean random variables have no minimum")

    def tighten_maximum_s(self, maximum: str, closed: bool = True) -> None:
        raise UnsupportedOperationError("boolean random variables have no maximum")

    def to_array(self, size: int) -> np.ndarray:
        """Generate size values into a numpy bool array."""
        return np.fromiter(self.stream(size), dtype=np.bool_, count=size)
