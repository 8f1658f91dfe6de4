"""
Random variables that return a predetermined sequence of values.

A deterministic random variable returns the values it was given in
order. With no final value it then starts over from the first value;
with a final value it returns that value forever once the sequence is
exhausted. Since the order of the values is the whole point, these
variables report the ORDERED characteristic and their spliterators do
not split.

Examples:
    >>> rv = DetermDoubleRV([1.0, 2.0, 3.0], 9.0)
    >>> [rv.next() for _ in range(5)]
    [1.0, 2.0, 3.0, 9.0, 9.0]
    >>> rv = DetermIntegerRV([1, 2])
    >>> [rv.next() for _ in range(5)]
    [1, 2, 1, 2, 1]
"""

from collections.abc import Iterable
from typing import Optional

from rvkit.core.typed import (
    BooleanRandomVariable,
    DoubleRandomVariable,
    IntegerRandomVariable,
    InterarrivalTimeRV,
    LongRandomVariable,
)
from rvkit.distributions.fixed import CheckedBounds
from rvkit.utils.types import Characteristics


class _DetermSequence:
    """Sequence state shared by the deterministic random variables."""

    def _init_sequence(self, values, final, convert, repeat=None) -> None:
        if isinstance(values, Iterable) and not isinstance(values, str):
            values = [convert(v) for v in values]
        else:
            values = [convert(values)]
        if repeat is None:
            repeat = final is None
        if repeat and final is not None:
            raise ValueError("a repeating sequence cannot have a final value")
        if not repeat and final is None:
            raise ValueError("a sequence that does not repeat needs a final value")
        if repeat and not values:
            raise ValueError("a repeating sequence needs at least one value")
        self._values = values
        self._final = None if final is None else convert(final)
        self._repeat = bool(repeat)
        self._index = 0

    @property
    def repeat(self) -> bool:
        """True if the sequence starts over after its last value."""
        return self._repeat

    def _returned_values(self) -> list:
        if self._repeat:
            return list(self._values)
        return self._values + [self._final]

    def characteristics(self) -> Characteristics:
        return super().characteristics() | Characteristics.ORDERED

    def next(self):
        if self._index < len(self._values):
            value = self._values[self._index]
            self._index += 1
            if self._repeat and self._index == len(self._values):
                self._index = 0
            return value
        return self._final


class _DetermNumeric(_DetermSequence, CheckedBounds):

    def _init_numeric(self, values, final, repeat) -> None:
        self._init_sequence(values, final, self._convert, repeat)
        if self.range_test_needed():
            for value in self._returned_values():
                if self.range_test_failed(value):
                    raise ValueError(
                        f"{type(self).__name__} value out of range: {value}"
                    )


class DetermDoubleRV(_DetermNumeric, DoubleRandomVariable):
    """
    Deterministic sequence of floats.

    Args:
        values: A sequence of values, or a single value
        final: Value returned after the sequence is exhausted; None to
            repeat the sequence instead
        repeat: Whether the sequence starts over after its last value.
            Defaults to True exactly when final is None

    Raises:
        ValueError: If repeat is True and a final value is given, or
            repeat is False and none is
    """

    def __init__(
        self, values, final: Optional[float] = None, repeat: Optional[bool] = None
    ):
        super().__init__()
        self._init_numeric(values, final, repeat)


class DetermIntegerRV(_DetermNumeric, IntegerRandomVariable):
    """Deterministic sequence of 32-bit ints."""

    def __init__(
        self, values, final: Optional[int] = None, repeat: Optional[bool] = None
    ):
        super().__init__()
        self._init_numeric(values, final, repeat)


class DetermLongRV(_DetermNumeric, LongRandomVariable):
    """Deterministic sequence of 64-bit ints."""

    def __init__(
        self, values, final: Optional[int] = None, repeat: Optional[bool] = None
    ):
        super().__init__()
        self._init_numeric(values, final, repeat)


class DetermIATimeRV(_DetermNumeric, InterarrivalTimeRV):
    """
    Deterministic sequence of interarrival times.

    Raises:
        ValueError: If any value, including the final value, is negative
    """

    def __init__(
        self, values, final: Optional[int] = None, repeat: Optional[bool] = None
    ):
        super().__init__()
        self._init_numeric(values, final, repeat)


class DetermBooleanRV(_DetermSequence, BooleanRandomVariable):
    """Deterministic sequence of bools."""

    def __init__(
        self, values, final: Optional[bool] = None, repeat: Optional[bool] = None
    ):
        self._init_sequence(values, final, bool, repeat)
