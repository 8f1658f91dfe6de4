"""
Unit tests for random variables of random variables.

This module validates:
1. Generated children have the expected types and parameters
2. ORDERED parameters make the RV-of-RV ORDERED
3. Bounds are installed on every generated child
4. Parameters are cloned, tightened and never mutated
5. Clone and bound failures surface as RandomVariableException
"""

import pytest
from rvkit.core.rvrv import IntegerRandomVariableRV
from rvkit.distributions.binomial import (
    BinomialBooleanRV,
    BinomialBooleanRVRV,
    BinomialDoubleRVRV,
    BinomialIntegerRV,
    BinomialIntegerRVRV,
    BinomialLongRVRV,
)
from rvkit.distributions.determ import DetermDoubleRV, DetermIntegerRV
from rvkit.distributions.exponential import (
    ExpDistrRV,
    ExpDistrRVRV,
    PoissonDoubleRVRV,
    PoissonIATimeRV,
    PoissonIATimeRVRV,
    PoissonIntegerRVRV,
    PoissonLongRVRV,
)
from rvkit.distributions.fixed import (
    FixedBooleanRV,
    FixedBooleanRVRV,
    FixedDoubleRVRV,
    FixedIATimeRVRV,
    FixedIntegerRV,
    FixedIntegerRVRV,
    FixedLongRVRV,
)
from rvkit.distributions.gaussian import (
    GaussianIATimeRV,
    GaussianIATimeRVRV,
    GaussianRV,
    GaussianRVRV,
    LogNormalRV,
    LogNormalRVRV,
)
from rvkit.distributions.uniform import (
    UniformBooleanRV,
    UniformDoubleRV,
    UniformDoubleRVRV,
    UniformIntegerRV,
    UniformIntegerRVRV,
    UniformLongRV,
    UniformLongRVRV,
)
from rvkit.utils.errors import RandomVariableException, UnsupportedOperationError
from rvkit.utils.types import Characteristics


class UncloneableIntegerRV(UniformIntegerRV):
    cloneable = False


class FixedFiveRVRV(IntegerRandomVariableRV[FixedIntegerRV]):
    """Generates FixedIntegerRV(5), which refuses bounds excluding 5."""

    def _do_next(self) -> FixedIntegerRV:
        return FixedIntegerRV(5)


# ===========================
# Generated Child Tests
# ===========================


def test_uniform_rvrv_children():
    rvrv = UniformIntegerRVRV(UniformIntegerRV(0, 6), UniformIntegerRV(10, 16))
    for _ in range(50):
        child = rvrv.next()
        assert isinstance(child, UniformIntegerRV)
        assert 0 <= child.lower < 6 and 10 <= child.upper < 16
        assert child.lower_closed and not child.upper_closed


def test_uniform_rvrv_children_respect_bounds():
    rvrv = UniformIntegerRVRV(UniformIntegerRV(0, 6), UniformIntegerRV(10, 16))
    rvrv.set_minimum(3)
    rvrv.set_maximum(14)
    assert rvrv.minimum == 3 and rvrv.maximum == 14
    for child in rvrv.stream(50):
        assert child.minimum >= 3
        assert child.maximum <= 14
        assert all(3 <= v <= 14 for v in child.stream(20))


@pytest.mark.parametrize(
    "rvrv,child_class",
    [
        (UniformDoubleRVRV(UniformDoubleRV(0.0, 1.0), UniformDoubleRV(2.0, 3.0)), UniformDoubleRV),
        (UniformLongRVRV(UniformLongRV(0, 5), UniformLongRV(10, 15)), UniformLongRV),
        (GaussianRVRV(UniformDoubleRV(-1.0, 1.0), GaussianRV(0.0, 1.0)), GaussianRV),
        (GaussianIATimeRVRV(UniformDoubleRV(5.0, 10.0), UniformDoubleRV(0.0, 2.0)), GaussianIATimeRV),
        (LogNormalRVRV(UniformDoubleRV(0.0, 1.0), GaussianRV(0.0, 1.0)), LogNormalRV),
        (ExpDistrRVRV(GaussianRV(1.0, 2.0)), ExpDistrRV),
        (PoissonIATimeRVRV(UniformDoubleRV(1.0, 3.0)), PoissonIATimeRV),
        (BinomialIntegerRVRV(UniformDoubleRV(0.0, 1.0), 10), BinomialIntegerRV),
        (BinomialBooleanRVRV(GaussianRV(0.5, 1.0)), BinomialBooleanRV),
        (FixedBooleanRVRV(UniformBooleanRV()), FixedBooleanRV),
    ],
)
def test_child_types(rvrv, child_class):
    for child in rvrv.stream(20):
        assert isinstance(child, child_class)
        child.next()


def test_non_negative_parameters_are_tightened():
    for child in GaussianRVRV(DetermDoubleRV([1.0]), GaussianRV(0.0, 1.0)).stream(200):
        assert child.sdev >= 0.0
    for child in ExpDistrRVRV(GaussianRV(0.0, 1.0)).stream(200):
        assert child.mean >= 0.0
    for child in LogNormalRVRV(GaussianRV(0.0, 1.0), GaussianRV(0.0, 1.0)).stream(200):
        assert child.sigma >= 0.0


@pytest.mark.parametrize(
    "rvrv",
    [
        PoissonIntegerRVRV(GaussianRV(2.0, 3.0)),
        PoissonLongRVRV(GaussianRV(2.0, 3.0)),
        PoissonDoubleRVRV(GaussianRV(2.0, 3.0)),
    ],
)
def test_poisson_rvrv_means_non_negative(rvrv):
    for child in rvrv.stream(200):
        assert child.mean >= 0.0
        assert child.next() >= 0


def test_binomial_rvrv_probability_tightened():
    rvrv = BinomialIntegerRVRV(GaussianRV(0.5, 1.0), 10)
    for child in rvrv.stream(200):
        assert 0.0 <= child.prob <= 1.0
        assert child.n == 10


def test_binomial_rvrv_count_from_random_variable():
    n_rv = UniformIntegerRV(-5, 5)
    rvrv = BinomialLongRVRV(UniformDoubleRV(0.0, 1.0), n_rv)
    counts = {child.n for child in rvrv.stream(500)}
    assert counts == {1, 2, 3, 4}
    assert n_rv.minimum == -5, "The caller's parameter must not be tightened"


def test_binomial_rvrv_rejects_non_positive_count():
    with pytest.raises(ValueError):
        BinomialDoubleRVRV(UniformDoubleRV(0.0, 1.0), 0)


# ===========================
# Ordered Propagation Tests
# ===========================


def test_ordered_parameter_makes_rvrv_ordered(split_depth):
    rvrv = UniformIntegerRVRV(DetermIntegerRV([0, 1, 2]), UniformIntegerRV(10, 16))
    assert rvrv.ordered
    assert Characteristics.ORDERED in rvrv.characteristics()
    assert rvrv.spliterator(100).try_split() is None


def test_unordered_parameters_allow_split(split_depth):
    rvrv = UniformIntegerRVRV(UniformIntegerRV(0, 6), UniformIntegerRV(10, 16))
    assert not rvrv.ordered
    assert rvrv.spliterator(100).try_split() is not None


def test_ordered_parameter_sequence_is_followed():
    rvrv = FixedIntegerRVRV(DetermIntegerRV([7, 8, 9]))
    assert rvrv.ordered
    assert [child.next() for child in rvrv.stream(4)] == [7, 8, 9, 7]


# ===========================
# Parameter Isolation Tests
# ===========================


def test_parameters_are_cloned():
    prob_rv = UniformDoubleRV(-1.0, 2.0)
    BinomialIntegerRVRV(prob_rv, 5)
    assert prob_rv.minimum == -1.0 and prob_rv.maximum == 2.0


def test_fixed_rvrv_pushes_bounds_into_value_parameter():
    value_rv = UniformIntegerRV(0, 20)
    rvrv = FixedIntegerRVRV(value_rv)
    rvrv.set_minimum(3)
    rvrv.set_maximum(14)
    values = [child.next() for child in rvrv.stream(300)]
    assert all(3 <= v <= 14 for v in values)
    assert value_rv.minimum == 0 and value_rv.maximum == 20


def test_fixed_rvrv_bounds_can_be_relaxed():
    rvrv = FixedDoubleRVRV(UniformDoubleRV(0.0, 1.0))
    rvrv.set_minimum(0.9)
    assert all(child.next() >= 0.9 for child in rvrv.stream(100))
    rvrv.set_minimum(None)
    assert any(child.next() < 0.9 for child in rvrv.stream(200))


def test_fixed_rvrv_bound_change_keeps_sequence_position():
    rvrv = FixedDoubleRVRV(DetermDoubleRV([1.0, 2.0, 3.0], 9.0))
    values = [rvrv.next().next() for _ in range(2)]
    rvrv.set_maximum(100.0)
    values += [rvrv.next().next() for _ in range(3)]
    assert values == [1.0, 2.0, 3.0, 9.0, 9.0]


def test_fixed_rvrv_relaxed_bound_keeps_sequence_position():
    value_rv = DetermIntegerRV([1, 2, 3, 4])
    value_rv.set_maximum(10)
    rvrv = FixedIntegerRVRV(value_rv)
    rvrv.tighten_minimum(1)
    assert [rvrv.next().next() for _ in range(2)] == [1, 2]
    rvrv.set_minimum(None)
    assert [rvrv.next().next() for _ in range(3)] == [3, 4, 1]
    assert rvrv.next().maximum is None, "Caller bounds stay on the parameter only"


def test_fixed_long_rvrv():
    rvrv = FixedLongRVRV(UniformLongRV(0, 100))
    rvrv.tighten_maximum(10)
    assert all(child.next() <= 10 for child in rvrv.stream(100))


def test_fixed_ia_time_rvrv_values_non_negative():
    rvrv = FixedIATimeRVRV(UniformLongRV(-10, 10))
    assert all(child.next() >= 0 for child in rvrv.stream(200))


# ===========================
# Failure Tests
# ===========================


def test_uncloneable_parameter_raises():
    with pytest.raises(RandomVariableException, match="UncloneableIntegerRV"):
        UniformIntegerRVRV(UncloneableIntegerRV(0, 5), UniformIntegerRV(10, 15))


def test_rejected_child_bound_raises():
    rvrv = FixedFiveRVRV()
    rvrv.set_minimum(10)
    with pytest.raises(RandomVariableException):
        rvrv.next()


def test_child_bound_accepted_when_admitting_value():
    rvrv = FixedFiveRVRV()
    rvrv.set_minimum(5)
    assert rvrv.next().minimum == 5


def test_rvrv_string_bounds():
    rvrv = GaussianRVRV(UniformDoubleRV(0.0, 1.0), UniformDoubleRV(0.5, 1.0))
    rvrv.tighten_minimum_s("-2.5")
    assert rvrv.minimum == -2.5
    assert rvrv.next().minimum == -2.5


def test_boolean_rvrv_has_no_bounds():
    rvrv = BinomialBooleanRVRV(UniformDoubleRV(0.0, 1.0))
    with pytest.raises(UnsupportedOperationError):
        rvrv.tighten_minimum_s("0")
    with pytest.raises(UnsupportedOperationError):
        rvrv.set_maximum(1)
