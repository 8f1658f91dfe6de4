"""
Range constraints for ordered random-variable values.

A RangeConstraint tracks two lower and two upper bounds. The required
bounds are installed by a distribution when it is constructed and state
a property its algorithm depends on (a probability lies in [0, 1], an
interarrival time is non-negative). The user bounds are set afterwards
by callers. A value is acceptable only if it satisfies all four bounds,
so the effective range is the intersection of the two.

Each bound is either closed (the bound itself is acceptable) or open.
"""

from typing import Callable, Generic, NamedTuple, Optional, TypeVar

from rvkit.utils.constants import INT_MAX, INT_MIN, LONG_MAX, LONG_MIN

T = TypeVar("T", int, float)


class Bound(NamedTuple):
    """A bound value and whether the bound is part of the range."""
    value: float
    closed: bool


def to_double(value) -> float:
    """Convert a bound or sample to a float."""
    if isinstance(value, str):
        value = value.strip()
    return float(value)


def _to_integral(value, low: int, high: int, kind: str) -> int:
    if isinstance(value, str):
        value = int(value.strip())
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{kind} value must be integral, got {value}")
        value = int(value)
    else:
        value = int(value)
    if value < low or value > high:
        raise ValueError(f"{kind} value out of range: {value}")
    return value


def to_int(value) -> int:
    """Convert a bound or sample to an int in the signed 32-bit range."""
    return _to_integral(value, INT_MIN, INT_MAX, "int")


def to_long(value) -> int:
    """Convert a bound or sample to an int in the signed 64-bit range."""
    return _to_integral(value, LONG_MIN, LONG_MAX, "long")


def _tighter_lower(a: Optional[Bound], b: Optional[Bound]) -> Optional[Bound]:
    if a is None:
        return b
    if b is None:
        return a
    if a.value == b.value:
        return Bound(a.value, a.closed and b.closed)
    return a if a.value > b.value else b


def _tighter_upper(a: Optional[Bound], b: Optional[Bound]) -> Optional[Bound]:
    if a is None:
        return b
    if b is None:
        return a
    if a.value == b.value:
        return Bound(a.value, a.closed and b.closed)
    return a if a.value < b.value else b


def _below(value, bound: Optional[Bound]) -> bool:
    if bound is None:
        return False
    return value < bound.value if bound.closed else value <= bound.value


def _above(value, bound: Optional[Bound]) -> bool:
    if bound is None:
        return False
    return value > bound.value if bound.closed else value >= bound.value


class RangeConstraint(Generic[T]):
    """
    Required and user-settable bounds for one value type.

    Args:
        convert: Converts a bound (a number or its string form) to the
            value type, raising ValueError for unrepresentable values
    """

    def __init__(self, convert: Callable[[object], T]):
        self._convert = convert
        self._min: Optional[Bound] = None
        self._max: Optional[Bound] = None
        self._req_min: Optional[Bound] = None
        self._req_max: Optional[Bound] = None
        self._needed = False

    def convert(self, value) -> T:
        return self._convert(value)

    def _update(self) -> None:
        self._needed = not (
            self._min is None
            and self._max is None
            and self._req_min is None
            and self._req_max is None
        )

    def _bound(self, value, closed: bool) -> Optional[Bound]:
        if value is None:
            return None
        return Bound(self._convert(value), bool(closed))

    def set_minimum(self, value, closed: bool = True) -> None:
        """Replace the user lower bound; None removes it."""
        self._min = self._bound(value, closed)
        self._update()

    def set_maximum(self, value, closed: bool = True) -> None:
        """Replace the user upper bound; None removes it."""
        self._max = self._bound(value, closed)
        self._update()

    def set_required_minimum(self, value, closed: bool = True) -> None:
        self._req_min = self._bound(value, closed)
        self._update()

    def set_required_maximum(self, value, closed: bool = True) -> None:
        self._req_max = self._bound(value, closed)
        self._update()

    def tighten_minimum(self, value, closed: bool = True) -> None:
        """
        Raise the user lower bound if the new bound is higher.

        A lower value leaves the bound unchanged. An equal value merges
        the closedness flags: the bound is closed if either is closed.
        """
        if value is None:
            return
        if self._min is None:
            self.set_minimum(value, closed)
            return
        bound = self._bound(value, closed)
        if bound.value > self._min.value:
            self._min = bound
        elif bound.value == self._min.value:
            self._min = Bound(bound.value, self._min.closed or bound.closed)
        self._update()

    def tighten_maximum(self, value, closed: bool = True) -> None:
        """
        Lower the user upper bound if the new bound is lower.

        A higher value leaves the bound unchanged. An equal value merges
        the closedness flags: the bound is closed if either is closed.
        """
        if value is None:
            return
        if self._max is None:
            self.set_maximum(value, closed)
            return
        bound = self._bound(value, closed)
        if bound.value < self._max.value:
            self._max = bound
        elif bound.value == self._max.value:
            self._max = Bound(bound.value, self._max.closed or bound.closed)
        self._update()

    @property
    def test_needed(self) -> bool:
        """True if any bound is set."""
        return self._needed

    def test_failed(self, value) -> bool:
        """Return True if value lies outside the effective range."""
        return (
            _below(value, self._req_min)
            or _below(value, self._min)
            or _above(value, self._req_max)
            or _above(value, self._max)
        )

    @property
    def user_minimum(self) -> Optional[Bound]:
        return self._min

    @property
    def user_maximum(self) -> Optional[Bound]:
        return self._max

    @property
    def lower(self) -> Optional[Bound]:
        """The effective lower bound, or None if there is none."""
        return _tighter_lower(self._req_min, self._min)

    @property
    def upper(self) -> Optional[Bound]:
        """The effective upper bound, or None if there is none."""
        return _tighter_upper(self._req_max, self._max)
