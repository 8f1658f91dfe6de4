"""
Random variables that always return the same value.

A fixed random variable cannot reject a draw, so a bound that excludes
its value is refused with ValueError when it is set.
"""

from typing import Iterable

from rvkit.core.random_variable import RandomVariable
from rvkit.core.rvrv import (
    BooleanRandomVariableRV,
    DoubleRandomVariableRV,
    IntegerRandomVariableRV,
    InterarrivalTimeRVRV,
    LongRandomVariableRV,
)
from rvkit.core.typed import (
    BooleanRandomVariable,
    DoubleRandomVariable,
    IntegerRandomVariable,
    InterarrivalTimeRV,
    LongRandomVariable,
)


class CheckedBounds:
    """
    Bound operations for variables that return a known set of values.

    A new bound must admit every value in _returned_values().
    """

    def _returned_values(self) -> Iterable:
        raise NotImplementedError

    def _check_lower(self, minimum, closed: bool) -> None:
        if minimum is None:
            return
        minimum = self._convert(minimum)
        for value in self._returned_values():
            if value < minimum or (not closed and value == minimum):
                raise ValueError(
                    f"minimum {minimum} ({'closed' if closed else 'open'}) "
                    f"excludes the value {value}"
                )

    def _check_upper(self, maximum, closed: bool) -> None:
        if maximum is None:
            return
        maximum = self._convert(maximum)
        for value in self._returned_values():
            if value > maximum or (not closed and value == maximum):
                raise ValueError(
                    f"maximum {maximum} ({'closed' if closed else 'open'}) "
                    f"excludes the value {value}"
                )

    def set_minimum(self, minimum, closed: bool = True) -> None:
        self._check_lower(minimum, closed)
        super().set_minimum(minimum, closed)

    def tighten_minimum(self, minimum, closed: bool = True) -> None:
        self._check_lower(minimum, closed)
        super().tighten_minimum(minimum, closed)

    def set_maximum(self, maximum, closed: bool = True) -> None:
        self._check_upper(maximum, closed)
        super().set_maximum(maximum, closed)

    def tighten_maximum(self, maximum, closed: bool = True) -> None:
        self._check_upper(maximum, closed)
        super().tighten_maximum(maximum, closed)


class _FixedValue(CheckedBounds):

    def _init_value(self, value) -> None:
        value = self._convert(value)
        if self.range_test_needed() and self.range_test_failed(value):
            raise ValueError(f"{type(self).__name__} value out of range: {value}")
        self._value = value

    def _returned_values(self) -> Iterable:
        return (self._value,)

    @property
    def value(self):
        return self._value

    def next(self):
        return self._value


class FixedDoubleRV(_FixedValue, DoubleRandomVariable):
    """Random variable that always returns the same float."""

    def __init__(self, value: float):
        super().__init__()
        self._init_value(value)


class FixedIntegerRV(_FixedValue, IntegerRandomVariable):
    """Random variable that always returns the same 32-bit int."""

    def __init__(self, value: int):
        super().__init__()
        self._init_value(value)


class FixedLongRV(_FixedValue, LongRandomVariable):
    """Random variable that always returns the same 64-bit int."""

    def __init__(self, value: int):
        super().__init__()
        self._init_value(value)


class FixedIATimeRV(_FixedValue, InterarrivalTimeRV):
    """
    Interarrival-time random variable that always returns the same value.

    Raises:
        ValueError: If value is negative
    """

    def __init__(self, value: int):
        super().__init__()
        self._init_value(value)


class FixedBooleanRV(BooleanRandomVariable):
    """Random variable that always returns the same bool."""

    def __init__(self, value: bool):
        self._value = bool(value)

    @property
    def value(self) -> bool:
        return self._value

    def next(self) -> bool:
        return self._value


# ===========================
# Random variables of fixed random variables
# ===========================


class _FixedRVRV:
    """
    RV-of-RV generating fixed random variables from a value parameter.

    Bounds set on the RV-of-RV are also installed on a clone of the
    value parameter, so every generated value lies within them and the
    fixed child accepts them. When a bound changes the clone is copied
    in its current state, so a sequence parameter keeps its position.
    The copy gets the caller's bounds back before ours are applied.
    """

    _fixed_class = FixedDoubleRV

    def _init_value_rv(self, value_rv: RandomVariable) -> None:
        self._base_rv = self._clone_parameter(value_rv)
        self._value_rv = self._clone_parameter(value_rv)
        self._constrain(self._value_rv)
        self._determine_if_ordered(value_rv)

    def _constrain(self, rv: RandomVariable) -> None:
        pass

    def _sync_value_rv(self) -> None:
        rv = self._clone_parameter(self._value_rv)
        base = self._base_rv
        rv.set_minimum(base.minimum, bool(base.minimum_closed))
        rv.set_maximum(base.maximum, bool(base.maximum_closed))
        self._constrain(rv)
        lower = self._range.user_minimum
        upper = self._range.user_maximum
        if lower is not None:
            rv.tighten_minimum(lower.value, lower.closed)
        if upper is not None:
            rv.tighten_maximum(upper.value, upper.closed)
        self._value_rv = rv

    def set_minimum(self, minimum, closed: bool = True) -> None:
        super().set_minimum(minimum, closed)
        self._sync_value_rv()

    def tighten_minimum(self, minimum, closed: bool = True) -> None:
        super().tighten_minimum(minimum, closed)
        self._sync_value_rv()

    def set_maximum(self, maximum, closed: bool = True) -> None:
        super().set_maximum(maximum, closed)
        self._sync_value_rv()

    def tighten_maximum(self, maximum, closed: bool = True) -> None:
        super().tighten_maximum(maximum, closed)
        self._sync_value_rv()

    def _do_next(self):
        return self._fixed_class(self._value_rv.next())


class FixedDoubleRVRV(_FixedRVRV, DoubleRandomVariableRV[FixedDoubleRV]):
    """RV-of-RV generating FixedDoubleRV instances."""

    _fixed_class = FixedDoubleRV

    def __init__(self, value_rv: DoubleRandomVariable):
        super().__init__()
        self._init_value_rv(value_rv)


class FixedIntegerRVRV(_FixedRVRV, IntegerRandomVariableRV[FixedIntegerRV]):
    """RV-of-RV generating FixedIntegerRV instances."""

    _fixed_class = FixedIntegerRV

    def __init__(self, value_rv: IntegerRandomVariable):
        super().__init__()
        self._init_value_rv(value_rv)


class FixedLongRVRV(_FixedRVRV, LongRandomVariableRV[FixedLongRV]):
    """RV-of-RV generating FixedLongRV instances."""

    _fixed_class = FixedLongRV

    def __init__(self, value_rv: LongRandomVariable):
        super().__init__()
        self._init_value_rv(value_rv)


class FixedIATimeRVRV(_FixedRVRV, InterarrivalTimeRVRV[FixedIATimeRV]):
    """RV-of-RV generating FixedIATimeRV instances."""

    _fixed_class = FixedIATimeRV

    def __init__(self, value_rv: LongRandomVariable):
        super().__init__()
        self._init_value_rv(value_rv)

    def _constrain(self, rv: RandomVariable) -> None:
        rv.tighten_minimum(0, True)


class FixedBooleanRVRV(BooleanRandomVariableRV[FixedBooleanRV]):
    """RV-of-RV generating FixedBooleanRV instances."""

    def __init__(self, value_rv: BooleanRandomVariable):
        super().__init__()
        self._value_rv = self._clone_parameter(value_rv)
        self._determine_if_ordered(value_rv)

    def _do_next(self) -> FixedBooleanRV:
        return FixedBooleanRV(self._value_rv.next())
