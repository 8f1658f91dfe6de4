"""
Random variables whose values are random variables.

A random variable of random variables (an "RV-of-RV") models a
distribution whose parameters are themselves random: each call to
next() draws one value from every parameter random variable and builds
a new random variable from those draws.

Constructors clone their parameter random variables so that tightening
a parameter's range (a probability to [0, 1], a count to [1, ∞)) never
changes the caller's instance. If any parameter is ORDERED, the
RV-of-RV is ORDERED too and its spliterators will not split.

RandomVariableRVN adds numeric bounds. They do not constrain the RV-of-RV
itself; next() installs them on every random variable it generates.
"""

import logging
from abc import abstractmethod
from typing import Generic, Optional, TypeVar

from rvkit.core.random_variable import RandomVariable
from rvkit.core.ranges import RangeConstraint, to_double, to_int, to_long
from rvkit.utils.errors import (
    CloneNotSupportedError,
    RandomVariableException,
    UnsupportedOperationError,
)
from rvkit.utils.types import Characteristics

logger = logging.getLogger(__name__)

T = TypeVar("T")
RV = TypeVar("RV", bound=RandomVariable)


class RandomVariableRV(RandomVariable[RV], Generic[T, RV]):
    """
    Random variable generating random variables with values of type T.

    Subclasses implement _do_next().
    """

    def __init__(self):
        self._ordered = False

    @staticmethod
    def _clone_parameter(rv: RandomVariable) -> RandomVariable:
        """
        Clone a parameter random variable.

        Raises:
            RandomVariableException: If the parameter cannot be cloned
        """
        try:
            return rv.clone()
        except CloneNotSupportedError as e:
            logger.debug("cannot clone parameter %s", type(rv).__name__)
            raise RandomVariableException(
                f"cannot clone parameter random variable {type(rv).__name__}"
            ) from e

    def _determine_if_ordered(self, *rvs: Optional[RandomVariable]) -> None:
        """Mark this RV-of-RV ORDERED if any parameter is ORDERED."""
        self._ordered = any(rv is not None and rv.ordered for rv in rvs)

    def characteristics(self) -> Characteristics:
        flags = super().characteristics()
        if self._ordered:
            flags |= Characteristics.ORDERED
        return flags

    def tighten_minimum_s(self, minimum: str, closed: bool = True) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} generates values without a minimum"
        )

    def tighten_maximum_s(self, maximum: str, closed: bool = True) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} generates values without a maximum"
        )

    @abstractmethod
    def _do_next(self) -> RV:
        """Build a new random variable from fresh parameter draws."""

    def next(self) -> RV:
        return self._do_next()


class RandomVariableRVN(RandomVariableRV[T, RV]):
    """
    RV-of-RV generating random variables with ordered numeric values.

    The bounds set on this object are applied to each generated random
    variable before next() returns it.
    """

    _convert = staticmethod(to_double)

    def __init__(self):
        super().__init__()
        self._range: RangeConstraint = RangeConstraint(self._convert)

    def set_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        self._range.set_minimum(minimum, closed)

    def tighten_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        self._range.tighten_minimum(minimum, closed)

    def tighten_minimum_s(self, minimum: str, closed: bool = True) -> None:
        self.tighten_minimum(self._convert(minimum), closed)

    def set_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        self._range.set_maximum(maximum, closed)

    def tighten_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        self._range.tighten_maximum(maximum, closed)

    def tighten_maximum_s(self, maximum: str, closed: bool = True) -> None:
        self.tighten_maximum(self._convert(maximum), closed)

    @property
    def minimum(self) -> Optional[T]:
        bound = self._range.user_minimum
        return None if bound is None else bound.value

    @property
    def minimum_closed(self) -> Optional[bool]:
        bound = self._range.user_minimum
        return None if bound is None else bound.closed

    @property
    def maximum(self) -> Optional[T]:
        bound = self._range.user_maximum
        return None if bound is None else bound.value

    @property
    def maximum_closed(self) -> Optional[bool]:
        bound = self._range.user_maximum
        return None if bound is None else bound.closed

    def next(self) -> RV:
        """
        Generate a random variable and install this object's bounds on it.

        Raises:
            RandomVariableException: If the generated random variable
                rejects a bound
        """
        rv = self._do_next()
        lower = self._range.user_minimum
        upper = self._range.user_maximum
        try:
            if lower is not None:
                rv.set_minimum(lower.value, lower.closed)
            if upper is not None:
                rv.set_maximum(upper.value, upper.closed)
        except (UnsupportedOperationError, ValueError) as e:
            raise RandomVariableException(
                f"cannot apply bounds to {type(rv).__name__}: {e}"
            ) from e
        return rv


class DoubleRandomVariableRV(RandomVariableRVN[float, RV]):
    """RV-of-RV generating DoubleRandomVariable instances."""

    _convert = staticmethod(to_double)


class IntegerRandomVariableRV(RandomVariableRVN[int, RV]):
    """RV-of-RV generating IntegerRandomVariable instances."""

    _convert = staticmethod(to_int)


class LongRandomVariableRV(RandomVariableRVN[int, RV]):
    """RV-of-RV generating LongRandomVariable instances."""

    _convert = staticmethod(to_long)


class InterarrivalTimeRVRV(LongRandomVariableRV[RV]):
    """RV-of-RV generating InterarrivalTimeRV instances."""


class BooleanRandomVariableRV(RandomVariableRV[bool, RV]):
    """RV-of-RV generating BooleanRandomVariable instances."""
