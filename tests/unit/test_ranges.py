"""
Unit tests for range constraints and value conversion.

This module validates:
1. Tightening never widens a bound and merges closedness on ties
2. Required and user bounds combine into the effective range
3. Open and closed bounds in the range test
4. Conversion of bounds for the int and long families
"""

import pytest
from rvkit.core.ranges import Bound, RangeConstraint, to_double, to_int, to_long
from rvkit.utils.constants import INT_MAX, INT_MIN, LONG_MAX, LONG_MIN


# ===========================
# Tightening Tests
# ===========================


def test_tighten_unset_minimum_sets_it():
    rc = RangeConstraint(to_double)
    rc.tighten_minimum(1.5, False)
    assert rc.user_minimum == Bound(1.5, False)


def test_tighten_minimum_higher_replaces():
    rc = RangeConstraint(to_double)
    rc.set_minimum(1.0, True)
    rc.tighten_minimum(2.0, False)
    assert rc.user_minimum == Bound(2.0, False)


def test_tighten_minimum_lower_is_ignored():
    rc = RangeConstraint(to_double)
    rc.set_minimum(2.0, False)
    rc.tighten_minimum(1.0, True)
    assert rc.user_minimum == Bound(2.0, False), "A looser bound must not widen the range"


def test_tighten_maximum_lower_replaces():
    rc = RangeConstraint(to_int)
    rc.set_maximum(10)
    rc.tighten_maximum(7, False)
    assert rc.user_maximum == Bound(7, False)


def test_tighten_maximum_higher_is_ignored():
    rc = RangeConstraint(to_int)
    rc.set_maximum(7, True)
    rc.tighten_maximum(10, False)
    assert rc.user_maximum == Bound(7, True)


@pytest.mark.parametrize(
    "first,second,expected",
    [(True, True, True), (True, False, True), (False, True, True), (False, False, False)],
)
def test_tighten_equal_bound_merges_closedness(first, second, expected):
    """On an equal value the bound is closed if either flag is closed."""
    rc = RangeConstraint(to_double)
    rc.set_minimum(3.0, first)
    rc.tighten_minimum(3.0, second)
    assert rc.user_minimum.closed is expected

    rc.set_maximum(5.0, first)
    rc.tighten_maximum(5.0, second)
    assert rc.user_maximum.closed is expected


def test_tighten_with_none_is_ignored():
    rc = RangeConstraint(to_double)
    rc.set_minimum(1.0)
    rc.tighten_minimum(None)
    assert rc.user_minimum == Bound(1.0, True)


def test_set_none_removes_bound():
    rc = RangeConstraint(to_double)
    rc.set_minimum(1.0)
    rc.set_maximum(2.0)
    rc.set_minimum(None)
    rc.set_maximum(None)
    assert rc.user_minimum is None
    assert rc.user_maximum is None
    assert not rc.test_needed


# ===========================
# Effective Range Tests
# ===========================


def test_effective_range_is_intersection():
    rc = RangeConstraint(to_double)
    rc.set_required_minimum(0.0)
    rc.set_required_maximum(10.0, False)
    rc.set_minimum(-5.0)
    rc.set_maximum(4.0)
    assert rc.lower == Bound(0.0, True)
    assert rc.upper == Bound(4.0, True)


def test_effective_bound_on_tie_takes_open_flag():
    rc = RangeConstraint(to_double)
    rc.set_required_minimum(0.0, True)
    rc.set_minimum(0.0, False)
    assert rc.lower == Bound(0.0, False)
    assert rc.test_failed(0.0)


def test_required_and_user_bounds_tested_independently():
    rc = RangeConstraint(to_int)
    rc.set_required_minimum(0)
    rc.set_maximum(5)
    assert rc.test_needed
    assert rc.test_failed(-1)
    assert rc.test_failed(6)
    assert not rc.test_failed(0)
    assert not rc.test_failed(5)


@pytest.mark.parametrize(
    "value,closed,failed",
    [(1.0, True, False), (1.0, False, True), (0.5, True, True), (1.5, False, False)],
)
def test_lower_bound_closedness(value, closed, failed):
    rc = RangeConstraint(to_double)
    rc.set_minimum(1.0, closed)
    assert rc.test_failed(value) is failed


@pytest.mark.parametrize(
    "value,closed,failed",
    [(1.0, True, False), (1.0, False, True), (1.5, True, True), (0.5, False, False)],
)
def test_upper_bound_closedness(value, closed, failed):
    rc = RangeConstraint(to_double)
    rc.set_maximum(1.0, closed)
    assert rc.test_failed(value) is failed


def test_no_bounds_means_no_test():
    rc = RangeConstraint(to_long)
    assert not rc.test_needed
    assert rc.lower is None
    assert rc.upper is None
    assert not rc.test_failed(LONG_MAX)


# ===========================
# Conversion Tests
# ===========================


def test_to_double_accepts_strings():
    assert to_double(" 2.5 ") == 2.5


def test_to_int_accepts_integral_float_and_string():
    assert to_int(3.0) == 3
    assert to_int("-7") == -7


def test_to_int_rejects_fractional_float():
    with pytest.raises(ValueError, match="integral"):
        to_int(2.5)


@pytest.mark.parametrize("value", [INT_MAX + 1, INT_MIN - 1])
def test_to_int_rejects_out_of_range(value):
    with pytest.raises(ValueError, match="out of range"):
        to_int(value)


def test_to_long_accepts_full_64_bit_range():
    assert to_long(LONG_MAX) == LONG_MAX
    assert to_long(LONG_MIN) == LONG_MIN
    with pytest.raises(ValueError):
        to_long(LONG_MAX + 1)


def test_convert_applied_to_string_bounds():
    rc = RangeConstraint(to_int)
    rc.set_minimum("4", False)
    assert rc.user_minimum == Bound(4, False)
