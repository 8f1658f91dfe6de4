"""
Unit tests for the random-variable base classes, spliterators and streams.

This module validates:
1. Spliterator sizing and splitting rules
2. Ordered variables never split
3. Sequential and parallel streams
4. Cloning, typed bases and the holder contract
"""

import itertools

import numpy as np
import pytest
from rvkit.core.holder import RandomVariableHolder, set_rv
from rvkit.core.random_variable import split_all
from rvkit.core.typed import BooleanRandomVariable
from rvkit.distributions.determ import DetermIntegerRV
from rvkit.distributions.fixed import FixedBooleanRV, FixedDoubleRV
from rvkit.distributions.uniform import UniformDoubleRV, UniformIntegerRV
from rvkit.utils.constants import LONG_MAX
from rvkit.utils.errors import CloneNotSupportedError, UnsupportedOperationError
from rvkit.utils.types import Characteristics


class UncloneableRV(UniformIntegerRV):
    cloneable = False


# ===========================
# Spliterator Tests
# ===========================


def test_sized_spliterator_characteristics():
    sp = UniformIntegerRV(0, 10).spliterator(5)
    assert sp.has_characteristics(Characteristics.SIZED | Characteristics.SUBSIZED)
    assert sp.has_characteristics(Characteristics.IMMUTABLE | Characteristics.NONNULL)
    assert sp.estimate_size() == 5


def test_unbounded_spliterator_estimates_long_max():
    sp = UniformIntegerRV(0, 10).spliterator()
    assert not sp.has_characteristics(Characteristics.SIZED)
    assert sp.estimate_size() == LONG_MAX


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        UniformIntegerRV(0, 10).spliterator(-1)


def test_try_split_hands_off_half(split_depth):
    sp = UniformIntegerRV(0, 10).spliterator(10)
    part = sp.try_split()
    assert part is not None
    assert part.estimate_size() == 5
    assert sp.estimate_size() == 5


def test_try_split_odd_size_keeps_larger_half(split_depth):
    sp = UniformIntegerRV(0, 10).spliterator(7)
    part = sp.try_split()
    assert part.estimate_size() == 3
    assert sp.estimate_size() == 4


def test_single_value_does_not_split(split_depth):
    sp = UniformIntegerRV(0, 10).spliterator(1)
    assert sp.try_split() is None


def test_split_depth_zero_does_not_split(monkeypatch):
    from rvkit.core import random_variable

    monkeypatch.setattr(random_variable, "max_split_depth", lambda: 0)
    assert UniformIntegerRV(0, 10).spliterator(100).try_split() is None
    assert UniformIntegerRV(0, 10).spliterator().try_split() is None


def test_split_all_respects_depth_and_size(split_depth):
    parts = split_all(UniformIntegerRV(0, 10).spliterator(100))
    assert len(parts) == 2**split_depth
    assert sum(p.estimate_size() for p in parts) == 100


def test_unbounded_split_is_unbounded(split_depth):
    sp = UniformIntegerRV(0, 10).spliterator()
    part = sp.try_split()
    assert part is not None
    assert part.estimate_size() == LONG_MAX
    assert len(split_all(sp)) >= 2


def test_ordered_variable_never_splits(split_depth):
    """Splitting a deterministic sequence would reorder its values."""
    rv = DetermIntegerRV([1, 2, 3])
    assert rv.ordered
    for size in (None, 2, 100, 10000):
        sp = rv.spliterator(size)
        assert sp.has_characteristics(Characteristics.ORDERED)
        assert sp.try_split() is None, f"ORDERED spliterator of size {size} split"


def test_try_advance_and_exhaustion():
    sp = FixedDoubleRV(2.0).spliterator(2)
    seen = []
    assert sp.try_advance(seen.append)
    assert sp.try_advance(seen.append)
    assert not sp.try_advance(seen.append)
    assert seen == [2.0, 2.0]


def test_for_each_remaining():
    sp = DetermIntegerRV([1, 2, 3]).spliterator(5)
    seen = []
    sp.try_advance(seen.append)
    sp.for_each_remaining(seen.append)
    assert seen == [1, 2, 3, 1, 2]


# ===========================
# Stream Tests
# ===========================


def test_stream_yields_size_values():
    values = list(UniformIntegerRV(0, 5).stream(50))
    assert len(values) == 50
    assert all(0 <= v < 5 for v in values)


def test_iteration_is_unbounded():
    values = list(itertools.islice(UniformIntegerRV(0, 5), 20))
    assert len(values) == 20


def test_parallel_stream_sized(split_depth):
    rv = UniformIntegerRV(0, 10)
    rv.set_minimum(3)
    values = list(rv.parallel_stream(1000))
    assert len(values) == 1000
    assert all(3 <= v < 10 for v in values)


def test_parallel_stream_unbounded(split_depth):
    stream = UniformDoubleRV(0.0, 1.0).parallel_stream()
    values = list(itertools.islice(stream, 3000))
    stream.close()
    assert len(values) == 3000
    assert all(0.0 <= v < 1.0 for v in values)


def test_parallel_stream_of_ordered_variable_keeps_order(split_depth):
    values = list(DetermIntegerRV([1, 2, 3]).parallel_stream(7))
    assert values == [1, 2, 3, 1, 2, 3, 1]


def test_to_array_dtype():
    assert UniformIntegerRV(0, 5).to_array(10).dtype == np.int32
    assert UniformDoubleRV().to_array(10).dtype == np.float64
    assert FixedBooleanRV(True).to_array(3).tolist() == [True, True, True]


# ===========================
# Cloning and Bounds Tests
# ===========================


def test_clone_is_independent():
    rv = UniformDoubleRV(0.0, 10.0)
    copy = rv.clone()
    copy.set_minimum(5.0)
    assert copy.minimum == 5.0
    assert rv.minimum == 0.0, "Changing a clone's bounds must not change the original"


def test_uncloneable_variable_raises():
    with pytest.raises(CloneNotSupportedError):
        UncloneableRV(0, 5).clone()


def test_boolean_bounds_unsupported():
    rv = FixedBooleanRV(True)
    with pytest.raises(UnsupportedOperationError):
        rv.set_minimum(False)
    with pytest.raises(UnsupportedOperationError):
        rv.tighten_maximum(True)
    with pytest.raises(UnsupportedOperationError):
        rv.tighten_minimum_s("0")
    assert rv.minimum is None and rv.maximum is None


def test_tighten_from_string():
    rv = UniformDoubleRV(0.0, 10.0)
    rv.tighten_minimum_s("2.5", False)
    rv.tighten_maximum_s("7.5")
    assert rv.minimum == 2.5 and rv.minimum_closed is False
    assert rv.maximum == 7.5 and rv.maximum_closed is True


def test_boolean_base_is_abstract():
    with pytest.raises(TypeError):
        BooleanRandomVariable()


# ===========================
# Holder Tests
# ===========================


def test_holder_requires_installed_variable():
    holder = RandomVariableHolder()
    with pytest.raises(ValueError):
        holder.get_random_variable()
    with pytest.raises(ValueError):
        holder.next()


def test_holder_rejects_non_random_variable():
    with pytest.raises(ValueError):
        RandomVariableHolder().set_rv(3.0)


def test_holder_delegates_to_installed_variable():
    holder = RandomVariableHolder()
    rv = DetermIntegerRV([4, 5])
    set_rv(holder, rv)
    assert holder.get_random_variable() is rv
    assert holder.next() == 4
    assert list(holder.stream(3)) == [5, 4, 5]
    assert holder.spliterator(2).estimate_size() == 2
    assert list(holder.parallel_stream(2)) == [4, 5]
